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

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from ...exceptions import ShapeIdSyntaxError
from ..identifiers import (
    Identifier,
    is_identifier,
    parse_absolute_root_shape_id,
    parse_identifier,
    parse_shape_id,
)
from ..issues import IssueKind, NodePath, ValidationIssue
from ..nodes import as_mapping, collapse, freeze, mapping_items
from ..shape_schema import (
    FieldKind,
    ShapeSchema,
    get_shape_schema,
    is_known_shape_type,
    validate_shape_structure,
)
from ..shapes import Member, Reference, Shape, ShapeCommon
from .member_validator import MemberPolicy, validate_member_names

logger = logging.getLogger(__name__)

ShapeParseResult = Tuple[Optional[Shape], List[ValidationIssue]]


class ShapeBuilder:
    """Semantic pass over one shape node.

    Runs the identifier grammar on every ID-shaped field and the member
    validator on every member mapping, building typed values along the way.
    Values of the wrong JSON type are skipped here; the structural pass
    reports them.
    """

    def __init__(self, path: NodePath):
        self.path = path
        self.issues: List[ValidationIssue] = []
        self._field_parsers: Dict[str, Callable[[Any, NodePath, ShapeSchema], Any]] = {
            FieldKind.STRING: lambda value, at, schema: value if isinstance(value, str) else None,
            FieldKind.REFERENCE: lambda value, at, schema: self.reference(value, at),
            FieldKind.MEMBER: lambda value, at, schema: self.member(value, at),
            FieldKind.REFERENCE_LIST: lambda value, at, schema: self.reference_list(value, at),
            FieldKind.REFERENCE_MAP: lambda value, at, schema: self.reference_map(value, at),
            FieldKind.MEMBER_MAP: lambda value, at, schema: self.members(value, at, schema.member_policy),
            FieldKind.TRAIT_MAP: lambda value, at, schema: self.trait_map(value, at),
            FieldKind.IDENTIFIER_MAP: lambda value, at, schema: self.identifier_map(value, at),
        }

    def _parse_id(self, parser: Callable[[Any], str], value: Any, at: NodePath) -> Optional[str]:
        if not isinstance(value, str):
            return None
        return self._parse_key(parser, value, at)

    def _parse_key(self, parser: Callable[[Any], str], key: Any, at: NodePath) -> Optional[str]:
        # Keys never reach the structural pass, so a non-string key is a grammar violation here.
        try:
            return parser(key)
        except ShapeIdSyntaxError as exc:
            self.issues.append(
                ValidationIssue(
                    kind=IssueKind.LEXICAL,
                    path=at,
                    message=f"'{exc.value}' is not a valid {exc.grammar}",
                    values=(exc.value, exc.grammar),
                )
            )
            return None

    def reference(self, node: Any, at: NodePath) -> Optional[Reference]:
        node = as_mapping(node)
        if node is None:
            return None
        target = self._parse_id(parse_absolute_root_shape_id, node.get("target"), at + ("target",))
        return Reference(target) if target is not None else None

    def member(self, node: Any, at: NodePath) -> Optional[Member]:
        reference = self.reference(node, at)
        node = as_mapping(node)
        if node is None:
            return None
        traits: Dict[str, Any] = {}
        raw_traits = as_mapping(node.get("traits", {}))
        for key, value in (raw_traits or {}).items():
            trait_id = self._parse_key(parse_absolute_root_shape_id, key, at + ("traits", str(key)))
            if trait_id is not None:
                traits[trait_id] = collapse(value)
        if reference is None:
            return None
        return Member(reference, freeze(traits))

    def reference_list(self, node: Any, at: NodePath) -> Optional[Tuple[Reference, ...]]:
        if not isinstance(node, (list, tuple)):
            return None
        return tuple(self.reference(item, at + (idx,)) for idx, item in enumerate(node))

    def reference_map(self, node: Any, at: NodePath) -> Optional[Dict[str, Reference]]:
        node = as_mapping(node)
        if node is None:
            return None
        references: Dict[str, Reference] = {}
        for key, value in node.items():
            if not isinstance(key, str):
                self.issues.append(
                    ValidationIssue(
                        kind=IssueKind.INVALID_VALUE_TYPE,
                        path=at + (str(key),),
                        message=f"Mapping key {key!r} is not a string",
                        values=(key,),
                    )
                )
                continue
            references[key] = self.reference(value, at + (key,))
        return references

    def members(self, node: Any, at: NodePath, policy: MemberPolicy) -> Optional[Dict[str, Member]]:
        entries = mapping_items(node)
        if entries is None:
            return None
        self.issues.extend(validate_member_names(entries, policy, path=at))
        return {
            (Identifier(key) if is_identifier(key) else key): self.member(value, at + (str(key),))
            for key, value in entries
        }

    def trait_map(self, node: Any, at: NodePath) -> Optional[Dict[str, Any]]:
        node = as_mapping(node)
        if node is None:
            return None
        traits: Dict[str, Any] = {}
        for key, value in node.items():
            trait_id = self._parse_key(parse_shape_id, key, at + (str(key),))
            if trait_id is not None:
                traits[trait_id] = collapse(value)
        return traits

    def identifier_map(self, node: Any, at: NodePath) -> Optional[Dict[str, str]]:
        node = as_mapping(node)
        if node is None:
            return None
        result: Dict[str, str] = {}
        for key, value in node.items():
            shape_id = self._parse_key(parse_shape_id, key, at + (str(key),))
            identifier = self._parse_id(parse_identifier, value, at + (str(key),))
            if shape_id is not None and identifier is not None:
                result[shape_id] = identifier
        return result

    def build(self, schema: ShapeSchema, node: Dict[str, Any]) -> Optional[Shape]:
        kwargs: Dict[str, Any] = {}
        if schema.carries_type_field:
            kwargs["type"] = schema.shape_type
        if schema.allow_mixins and "mixins" in node:
            mixins = self.reference_list(node["mixins"], self.path + ("mixins",))
            kwargs["common"] = ShapeCommon(mixins=mixins or ())

        for name, spec in schema.fields.items():
            if name not in node:
                continue
            parser = self._field_parsers[spec.kind]
            kwargs[spec.attr or name] = freeze(parser(node[name], self.path + (name,), schema))

        if self.issues:
            return None
        return schema.shape_class(**kwargs)


def _unknown_type_issue(node: Any, path: NodePath) -> ValidationIssue:
    mapping = as_mapping(node)
    if mapping is None:
        return ValidationIssue(
            kind=IssueKind.UNKNOWN_SHAPE_TYPE,
            path=path,
            message="Shape definition must be an object with a 'type' field",
            values=(node,),
        )
    if "type" not in mapping:
        return ValidationIssue(
            kind=IssueKind.UNKNOWN_SHAPE_TYPE,
            path=path + ("type",),
            message="Shape definition is missing its 'type' field",
        )
    return ValidationIssue(
        kind=IssueKind.UNKNOWN_SHAPE_TYPE,
        path=path + ("type",),
        message=f"Unknown shape type '{mapping['type']}'",
        values=(mapping["type"],),
    )


def parse_shape(node: Any, path: NodePath = ()) -> ShapeParseResult:
    """Classify a shape node by its ``type`` tag and validate it.

    Returns ``(shape, issues)``; *shape* is None whenever *issues* is not empty.
    An unknown or missing tag yields a single UnknownShapeTypeError and no
    further checks on that shape.
    """
    mapping = as_mapping(node)
    shape_type = mapping.get("type") if mapping is not None else None
    if not is_known_shape_type(shape_type):
        return None, [_unknown_type_issue(node, path)]

    logger.debug(f"Parsing '{shape_type}' shape at {path}")
    schema = get_shape_schema(shape_type)

    builder = ShapeBuilder(path)
    builder.issues.extend(validate_shape_structure(shape_type, collapse(mapping), path=path))
    shape = builder.build(schema, mapping)
    return shape, builder.issues

