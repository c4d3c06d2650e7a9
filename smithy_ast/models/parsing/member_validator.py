# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Naming constraints for name-keyed member mappings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from ..identifiers import is_enum_member_identifier, is_identifier
from ..issues import IssueKind, NodePath, ValidationIssue
from ..nodes import MappingPairs, mapping_items


@dataclass(frozen=True)
class MemberPolicy:
    require_non_empty: bool = False
    require_enum_member_names: bool = False


STRUCTURE_MEMBERS = MemberPolicy()
UNION_MEMBERS = MemberPolicy(require_non_empty=True)
ENUM_MEMBERS = MemberPolicy(require_non_empty=True, require_enum_member_names=True)

MemberEntries = Union[Mapping[Any, Any], MappingPairs, Iterable[Tuple[Any, Any]]]


def validate_member_names(
    members: MemberEntries,
    policy: MemberPolicy = STRUCTURE_MEMBERS,
    *,
    path: NodePath = (),
) -> List[ValidationIssue]:
    """Check the keys of a member mapping against *policy*.

    All violations are collected in one pass:

    * every key must be an Identifier (LexicalError);
    * with ``require_enum_member_names``, a key that is an Identifier but not
      an EnumMemberIdentifier is an InvalidEnumMemberNameError;
    * with ``require_non_empty``, an empty mapping is an EmptyMemberSetError;
    * keys that collide case-insensitively produce one DuplicateMemberError
      per colliding group, naming every key in it.

    *members* may be a mapping, a :class:`MappingPairs` or any iterable of
    ``(key, value)`` pairs; only the keys are inspected.
    """
    entries = mapping_items(members)
    if entries is None:
        entries = list(members)
    keys = [key for key, _ in entries]

    issues: List[ValidationIssue] = []

    if policy.require_non_empty and not keys:
        issues.append(
            ValidationIssue(
                kind=IssueKind.EMPTY_MEMBER_SET,
                path=path,
                message="Member mapping must not be empty",
            )
        )

    for key in keys:
        if not is_identifier(key):
            issues.append(
                ValidationIssue(
                    kind=IssueKind.LEXICAL,
                    path=path + (str(key),),
                    message=f"Member name '{key}' is not a valid Identifier",
                    values=(key, "Identifier"),
                )
            )
        elif policy.require_enum_member_names and not is_enum_member_identifier(key):
            issues.append(
                ValidationIssue(
                    kind=IssueKind.INVALID_ENUM_MEMBER_NAME,
                    path=path + (key,),
                    message=f"Enum member name '{key}' must start with a letter",
                    values=(key,),
                )
            )

    folded = [str(key).lower() for key in keys]
    if len(set(folded)) != len(folded):
        groups: Dict[str, List[Any]] = {}
        for key, lowered in zip(keys, folded):
            groups.setdefault(lowered, []).append(key)
        for colliding in groups.values():
            if len(colliding) < 2:
                continue
            names = ", ".join(f"'{key}'" for key in colliding)
            issues.append(
                ValidationIssue(
                    kind=IssueKind.DUPLICATE_MEMBER,
                    path=path,
                    message=f"Member names collide case-insensitively: {names}",
                    values=tuple(colliding),
                )
            )

    return issues
