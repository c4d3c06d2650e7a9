import json
import logging

import pytest

from smithy_ast import (
    IssueKind,
    Model,
    ModelValidationError,
    mapping_from_pairs,
    parse_model,
    validate_model,
)
from smithy_ast.models.parsing.model_parser import assemble_shapes
from smithy_ast.models.shapes import (
    ApplyShape,
    EnumShape,
    ResourceShape,
    ServiceShape,
    StructureShape,
)


def kinds(issues):
    return [issue.kind for issue in issues]


MINIMAL = {
    "smithy": "2.0",
    "shapes": {"ns#S": {"type": "structure", "members": {"a": {"target": "ns#String"}}}},
}


def test_minimal_document_validates_to_one_structure():
    result = validate_model(MINIMAL)
    assert result.ok
    model = result.model
    assert model.smithy == "2.0"
    assert model.metadata == {}
    assert list(model.shapes) == ["ns#S"]
    shape = model.shapes["ns#S"]
    assert isinstance(shape, StructureShape)
    assert list(shape.members) == ["a"]
    assert shape.members["a"].target == "ns#String"


def test_weather_document(weather_document):
    model = parse_model(weather_document)
    assert len(model.shapes) == 12
    assert isinstance(model.shapes["example.weather#Weather"], ServiceShape)
    assert isinstance(model.shapes["example.weather#City"], ResourceShape)
    assert isinstance(model.shapes["example.weather#Level"], EnumShape)
    assert model.shapes["example.weather#Level"].type == "intEnum"
    assert isinstance(model.shapes["example.weather#Patches"], ApplyShape)
    assert model.metadata["suppressions"][0]["id"] == "UnreferencedShape"
    assert model.shapes["example.weather#City"].list_.target == "example.weather#ListCities"


def test_revalidating_serialized_model_is_identical(weather_document):
    first = parse_model(weather_document)
    second = validate_model(first.to_node())
    assert second.ok
    assert second.model == first
    assert second.model.to_node() == first.to_node()


def test_broken_document_reports_everything(broken_document):
    result = validate_model(broken_document)
    assert not result.ok
    assert result.model is None

    locations = {(issue.kind, issue.location) for issue in result.issues}
    assert (IssueKind.LEXICAL, 'shapes."example.broken#Shape".members."Bad Name"') in locations
    assert (IssueKind.DUPLICATE_MEMBER, 'shapes."example.broken#Shape".members') in locations
    assert (IssueKind.INVALID_ENUM_MEMBER_NAME, 'shapes."example.broken#Color".members._RED') in locations
    assert (IssueKind.EMPTY_MEMBER_SET, 'shapes."example.broken#Empty".members') in locations
    assert (IssueKind.UNKNOWN_SHAPE_TYPE, 'shapes."example.broken#Bogus".type') in locations
    assert (IssueKind.MISSING_REQUIRED_FIELD, 'shapes."example.broken#Pair".value') in locations
    assert (IssueKind.UNEXPECTED_FIELD, 'shapes."example.broken#Pair".key.traits') in locations
    assert (IssueKind.LEXICAL, 'shapes."example.broken#Op".output.target') in locations

    bogus = [issue for issue in result.issues if "example.broken#Bogus" in issue.path]
    assert kinds(bogus) == [IssueKind.UNKNOWN_SHAPE_TYPE]
    assert len(result.issues) == 8


def test_duplicate_shape_ids_rejected_before_shape_checks():
    text = """
    {
      "smithy": "2.0",
      "shapes": {
        "ns#S": {"type": "structure"},
        "ns#Other": {"type": "bogus"},
        "ns#S": {"type": "string"}
      }
    }
    """
    document = json.loads(text, object_pairs_hook=mapping_from_pairs)
    result = validate_model(document)
    assert kinds(result.issues) == [IssueKind.DUPLICATE_SHAPE_ID]
    assert result.issues[0].values == ("ns#S", 2)
    assert result.issues[0].location == 'shapes."ns#S"'


def test_assemble_shapes_from_pairs():
    shapes, issues = assemble_shapes([("ns#S", {"type": "string"}), ("ns#S", {"type": "blob"})])
    assert kinds(issues) == [IssueKind.DUPLICATE_SHAPE_ID]
    assert shapes == {"ns#S": {"type": "blob"}}

    shapes, issues = assemble_shapes({"ns#A": {"type": "string"}})
    assert issues == []


def test_duplicate_shape_ids_log_a_warning(caplog):
    pairs = mapping_from_pairs([("ns#S", {"type": "string"}), ("ns#S", {"type": "blob"})])
    document = {"smithy": "2.0", "shapes": pairs}
    with caplog.at_level(logging.WARNING, logger="smithy_ast"):
        validate_model(document)
    assert "Duplicate shape ids: ns#S" in caplog.text


def test_unknown_shape_type_is_the_only_issue_for_that_shape():
    result = validate_model({"smithy": "2.0", "shapes": {"ns#X": {"type": "bogus", "members": []}}})
    assert kinds(result.issues) == [IssueKind.UNKNOWN_SHAPE_TYPE]


def test_shape_keys_must_be_absolute():
    result = validate_model({"smithy": "2.0", "shapes": {"Widget": {"type": "string"}}})
    assert kinds(result.issues) == [IssueKind.LEXICAL]
    assert result.issues[0].location == "shapes.Widget"
    assert result.issues[0].values == ("Widget", "AbsoluteRootShapeId")


def test_envelope_checks():
    result = validate_model({"shapes": {}, "metadata": [], "extra": 1})
    assert sorted(kinds(result.issues)) == sorted(
        [IssueKind.MISSING_REQUIRED_FIELD, IssueKind.INVALID_VALUE_TYPE, IssueKind.UNEXPECTED_FIELD]
    )


def test_shapes_and_metadata_are_optional():
    model = parse_model({"smithy": "2.0"})
    assert model == Model(smithy="2.0")
    assert model.to_node() == {"smithy": "2.0", "shapes": {}}


def test_non_mapping_document():
    result = validate_model(["smithy"])
    assert kinds(result.issues) == [IssueKind.INVALID_VALUE_TYPE]
    assert result.issues[0].location == ""


def test_non_mapping_shapes():
    result = validate_model({"smithy": "2.0", "shapes": ["ns#S"]})
    assert kinds(result.issues) == [IssueKind.INVALID_VALUE_TYPE]
    assert result.issues[0].path == ("shapes",)


def test_parse_model_raises_with_all_issues(broken_document):
    with pytest.raises(ModelValidationError) as excinfo:
        parse_model(broken_document)
    assert len(excinfo.value.issues) == 8
    assert "UnknownShapeTypeError" in str(excinfo.value)


def test_fail_fast_stops_at_first_rejected_shape():
    document = {
        "smithy": "2.0",
        "shapes": {
            "ns#Good": {"type": "string"},
            "ns#Bad1": {"type": "bogus"},
            "ns#Bad2": {"type": "union", "members": {}},
        },
    }
    result = validate_model(document, fail_fast=True, max_workers=1)
    assert kinds(result.issues) == [IssueKind.UNKNOWN_SHAPE_TYPE]

    result = validate_model(document, fail_fast=False, max_workers=1)
    assert kinds(result.issues) == [IssueKind.UNKNOWN_SHAPE_TYPE, IssueKind.EMPTY_MEMBER_SET]


def test_parallel_validation_matches_sequential(weather_document, broken_document):
    assert validate_model(weather_document, max_workers=4) == validate_model(weather_document, max_workers=1)
    parallel = validate_model(broken_document, max_workers=4)
    sequential = validate_model(broken_document, max_workers=1)
    assert parallel.issues == sequential.issues


def test_parallel_fail_fast_reports_one_shape(broken_document):
    result = validate_model(broken_document, fail_fast=True, max_workers=4)
    assert not result.ok
    shape_ids = {issue.path[1] for issue in result.issues}
    assert len(shape_ids) == 1


def test_result_helpers(broken_document):
    result = validate_model(broken_document)
    assert len(result.issues_of(IssueKind.LEXICAL)) == 2
    assert result.format().count("\n") == len(result.issues) - 1


def test_metadata_keys_must_be_strings():
    result = validate_model({"smithy": "2.0", "metadata": {1: "x"}})
    assert kinds(result.issues) == [IssueKind.INVALID_VALUE_TYPE]
    assert result.issues[0].path == ("metadata",)


def test_parsed_model_is_read_only(weather_document):
    model = parse_model(weather_document)
    with pytest.raises(TypeError):
        model.shapes["example.weather#Extra"] = model.shapes["example.weather#CityId"]
    with pytest.raises(TypeError):
        model.metadata["suppressions"][0]["id"] = "Other"
    assert isinstance(model.to_node()["metadata"]["suppressions"], list)
