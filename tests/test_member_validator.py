from smithy_ast.models.issues import IssueKind
from smithy_ast.models.nodes import MappingPairs
from smithy_ast.models.parsing.member_validator import (
    ENUM_MEMBERS,
    STRUCTURE_MEMBERS,
    UNION_MEMBERS,
    MemberPolicy,
    validate_member_names,
)

M = {"target": "ns#String"}


def kinds(issues):
    return [issue.kind for issue in issues]


def test_distinct_members_accept():
    assert validate_member_names({"Foo": M, "Bar": M}, STRUCTURE_MEMBERS) == []


def test_case_insensitive_collision_reported_once_with_both_keys():
    issues = validate_member_names({"Foo": M, "foo": M}, STRUCTURE_MEMBERS, path=("members",))
    assert kinds(issues) == [IssueKind.DUPLICATE_MEMBER]
    assert set(issues[0].values) == {"Foo", "foo"}
    assert issues[0].path == ("members",)


def test_every_collision_group_is_reported():
    issues = validate_member_names(
        {"Foo": M, "foo": M, "FOO": M, "Bar": M, "bAR": M, "Baz": M},
        STRUCTURE_MEMBERS,
    )
    duplicates = [issue.values for issue in issues if issue.kind == IssueKind.DUPLICATE_MEMBER]
    assert sorted(map(sorted, duplicates)) == [["Bar", "bAR"], ["FOO", "Foo", "foo"]]


def test_exact_duplicates_from_pairs_are_collisions():
    issues = validate_member_names(MappingPairs([("a", M), ("a", M)]), STRUCTURE_MEMBERS)
    assert kinds(issues) == [IssueKind.DUPLICATE_MEMBER]
    assert issues[0].values == ("a", "a")


def test_empty_structure_members_allowed():
    assert validate_member_names({}, STRUCTURE_MEMBERS) == []


def test_empty_union_rejected():
    assert kinds(validate_member_names({}, UNION_MEMBERS)) == [IssueKind.EMPTY_MEMBER_SET]


def test_empty_enum_rejected():
    assert kinds(validate_member_names({}, ENUM_MEMBERS)) == [IssueKind.EMPTY_MEMBER_SET]


def test_enum_member_with_leading_underscore():
    issues = validate_member_names({"_FOO": M}, ENUM_MEMBERS, path=("members",))
    assert kinds(issues) == [IssueKind.INVALID_ENUM_MEMBER_NAME]
    assert issues[0].path == ("members", "_FOO")


def test_enum_member_with_leading_digit():
    assert kinds(validate_member_names({"1FOO": M}, ENUM_MEMBERS)) == [IssueKind.INVALID_ENUM_MEMBER_NAME]


def test_underscore_names_fine_outside_enums():
    assert validate_member_names({"_FOO": M}, UNION_MEMBERS) == []


def test_valid_enum_members_accept():
    assert validate_member_names({"FOO": M, "BAR": M}, ENUM_MEMBERS) == []


def test_non_identifier_key_is_lexical_not_enum_error():
    issues = validate_member_names({"Bad Name": M}, ENUM_MEMBERS, path=("members",))
    assert kinds(issues) == [IssueKind.LEXICAL]
    assert issues[0].path == ("members", "Bad Name")


def test_all_violations_collected_in_one_pass():
    issues = validate_member_names(
        {"_a": M, "_A": M, "b-c": M},
        MemberPolicy(require_non_empty=True, require_enum_member_names=True),
    )
    assert sorted(kinds(issues)) == sorted(
        [
            IssueKind.INVALID_ENUM_MEMBER_NAME,
            IssueKind.INVALID_ENUM_MEMBER_NAME,
            IssueKind.LEXICAL,
            IssueKind.DUPLICATE_MEMBER,
        ]
    )


def test_accepts_iterable_of_pairs():
    assert validate_member_names([("x", M), ("y", M)]) == []
