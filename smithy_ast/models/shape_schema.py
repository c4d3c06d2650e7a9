from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from jsonschema import Draft202012Validator

from ..exceptions import ValidationError
from .issues import IssueKind, NodePath, ValidationIssue
from .parsing.member_validator import (
    ENUM_MEMBERS,
    STRUCTURE_MEMBERS,
    UNION_MEMBERS,
    MemberPolicy,
)
from .shapes import (
    ApplyShape,
    EnumShape,
    ListShape,
    MapShape,
    OperationShape,
    ResourceShape,
    ServiceShape,
    ShapeType,
    SimpleShape,
    StructureShape,
    UnionShape,
)


class FieldKind:
    """What a shape field holds; decides both its JSON Schema and how it is parsed."""
    STRING = "string"
    REFERENCE = "reference"
    MEMBER = "member"
    REFERENCE_LIST = "reference_list"
    REFERENCE_MAP = "reference_map"
    MEMBER_MAP = "member_map"
    TRAIT_MAP = "trait_map"
    IDENTIFIER_MAP = "identifier_map"


@dataclass(frozen=True)
class FieldSpec:
    kind: str
    required: bool = False
    # Attribute name on the typed shape when it differs from the document key.
    attr: Optional[str] = None


@dataclass(frozen=True)
class ShapeSchema:
    shape_type: str
    shape_class: type
    fields: Dict[str, FieldSpec] = field(default_factory=dict)
    member_policy: Optional[MemberPolicy] = None
    allow_mixins: bool = True

    @property
    def required_fields(self) -> Tuple[str, ...]:
        return tuple(name for name, spec in self.fields.items() if spec.required)

    @property
    def carries_type_field(self) -> bool:
        # Variants sharing one class keep their tag as a constructor argument.
        return self.shape_class in (SimpleShape, EnumShape)

    def json_schema(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {"type": {"const": self.shape_type}}
        if self.allow_mixins:
            properties["mixins"] = _FIELD_JSON_SCHEMAS[FieldKind.REFERENCE_LIST]
        for name, spec in self.fields.items():
            properties[name] = _FIELD_JSON_SCHEMAS[spec.kind]
        return {
            "type": "object",
            "properties": properties,
            "required": ["type", *self.required_fields],
            "additionalProperties": False,
        }


# -------------------------
# JSON Schema fragments
# -------------------------

_REFERENCE_JSON = {
    "type": "object",
    "properties": {"target": {"type": "string"}},
    "required": ["target"],
    "additionalProperties": False,
}

_MEMBER_JSON = {
    "type": "object",
    "properties": {"target": {"type": "string"}, "traits": {"type": "object"}},
    "required": ["target"],
    "additionalProperties": False,
}

_FIELD_JSON_SCHEMAS: Dict[str, Dict[str, Any]] = {
    FieldKind.STRING: {"type": "string"},
    FieldKind.REFERENCE: _REFERENCE_JSON,
    FieldKind.MEMBER: _MEMBER_JSON,
    FieldKind.REFERENCE_LIST: {"type": "array", "items": _REFERENCE_JSON},
    FieldKind.REFERENCE_MAP: {"type": "object", "additionalProperties": _REFERENCE_JSON},
    FieldKind.MEMBER_MAP: {"type": "object", "additionalProperties": _MEMBER_JSON},
    FieldKind.TRAIT_MAP: {"type": "object"},
    FieldKind.IDENTIFIER_MAP: {"type": "object", "additionalProperties": {"type": "string"}},
}


# -------------------------
# Shape schema definitions
# -------------------------

def _req(kind: str, attr: Optional[str] = None) -> FieldSpec:
    return FieldSpec(kind, required=True, attr=attr)


def _opt(kind: str, attr: Optional[str] = None) -> FieldSpec:
    return FieldSpec(kind, required=False, attr=attr)


def _build_registry() -> Dict[str, ShapeSchema]:
    registry: Dict[str, ShapeSchema] = {
        simple_type: ShapeSchema(simple_type, SimpleShape)
        for simple_type in ShapeType.get_simple_types()
    }

    registry[ShapeType.LIST] = ShapeSchema(
        ShapeType.LIST, ListShape, fields={"member": _req(FieldKind.MEMBER)}
    )
    registry[ShapeType.MAP] = ShapeSchema(
        ShapeType.MAP,
        MapShape,
        fields={"key": _req(FieldKind.REFERENCE), "value": _req(FieldKind.REFERENCE)},
    )
    registry[ShapeType.STRUCTURE] = ShapeSchema(
        ShapeType.STRUCTURE,
        StructureShape,
        fields={"members": _opt(FieldKind.MEMBER_MAP)},
        member_policy=STRUCTURE_MEMBERS,
    )
    registry[ShapeType.UNION] = ShapeSchema(
        ShapeType.UNION,
        UnionShape,
        fields={"members": _req(FieldKind.MEMBER_MAP)},
        member_policy=UNION_MEMBERS,
    )
    for enum_type in (ShapeType.ENUM, ShapeType.INT_ENUM):
        registry[enum_type] = ShapeSchema(
            enum_type,
            EnumShape,
            fields={"members": _req(FieldKind.MEMBER_MAP)},
            member_policy=ENUM_MEMBERS,
        )
    registry[ShapeType.SERVICE] = ShapeSchema(
        ShapeType.SERVICE,
        ServiceShape,
        fields={
            "version": _opt(FieldKind.STRING),
            "operations": _req(FieldKind.REFERENCE_LIST),
            "resources": _req(FieldKind.REFERENCE_LIST),
            "errors": _req(FieldKind.REFERENCE_LIST),
            "traits": _req(FieldKind.TRAIT_MAP),
            "rename": _req(FieldKind.IDENTIFIER_MAP),
        },
    )
    registry[ShapeType.RESOURCE] = ShapeSchema(
        ShapeType.RESOURCE,
        ResourceShape,
        fields={
            "identifiers": _req(FieldKind.REFERENCE_MAP),
            "properties": _req(FieldKind.REFERENCE_MAP),
            "create": _opt(FieldKind.REFERENCE),
            "put": _opt(FieldKind.REFERENCE),
            "read": _opt(FieldKind.REFERENCE),
            "update": _opt(FieldKind.REFERENCE),
            "delete": _opt(FieldKind.REFERENCE),
            "list": _opt(FieldKind.REFERENCE, attr="list_"),
            "operations": _req(FieldKind.REFERENCE_LIST),
            "collectionOperations": _req(FieldKind.REFERENCE_LIST, attr="collection_operations"),
            "resources": _req(FieldKind.REFERENCE_LIST),
            "traits": _req(FieldKind.TRAIT_MAP),
        },
    )
    registry[ShapeType.OPERATION] = ShapeSchema(
        ShapeType.OPERATION,
        OperationShape,
        fields={
            "input": _req(FieldKind.REFERENCE),
            "output": _req(FieldKind.REFERENCE),
            "errors": _req(FieldKind.REFERENCE_LIST),
            "traits": _req(FieldKind.TRAIT_MAP),
        },
    )
    registry[ShapeType.APPLY] = ShapeSchema(
        ShapeType.APPLY,
        ApplyShape,
        fields={"traits": _req(FieldKind.IDENTIFIER_MAP)},
        allow_mixins=False,
    )
    return registry


_SHAPE_SCHEMAS: Mapping[str, ShapeSchema] = _build_registry()

_VALIDATORS: Mapping[str, Draft202012Validator] = {
    shape_type: Draft202012Validator(schema.json_schema())
    for shape_type, schema in _SHAPE_SCHEMAS.items()
}


def is_known_shape_type(shape_type: Any) -> bool:
    return isinstance(shape_type, str) and shape_type in _SHAPE_SCHEMAS


def get_shape_schema(shape_type: str) -> ShapeSchema:
    if not is_known_shape_type(shape_type):
        raise ValidationError(
            f"Unknown shape type: '{shape_type}'. Valid types: {ShapeType.get_all_types()}"
        )
    return _SHAPE_SCHEMAS[shape_type]


def _error_sort_key(error) -> List[str]:
    return [str(token) for token in error.absolute_path]


def validate_shape_structure(shape_type: str, node: Dict[str, Any], *, path: NodePath) -> List[ValidationIssue]:
    """Check a shape node's field set and value types against its variant's table.

    *node* must already be a plain value tree (see ``nodes.collapse``).
    Reports missing required fields, fields the variant does not accept,
    and values of the wrong JSON type.
    """
    get_shape_schema(shape_type)
    validator = _VALIDATORS[shape_type]

    issues: List[ValidationIssue] = []
    seen = set()

    def _add(kind: IssueKind, at: NodePath, message: str, values: Tuple[Any, ...]) -> None:
        if (kind, at) in seen:
            return
        seen.add((kind, at))
        issues.append(ValidationIssue(kind=kind, path=at, message=message, values=values))

    for error in sorted(validator.iter_errors(node), key=_error_sort_key):
        at = path + tuple(error.absolute_path)
        if error.validator == "required":
            for name in error.validator_value:
                if name not in error.instance:
                    _add(
                        IssueKind.MISSING_REQUIRED_FIELD,
                        at + (name,),
                        f"Missing required field '{name}'",
                        (name,),
                    )
        elif error.validator == "additionalProperties":
            known = error.schema.get("properties", {})
            for name in error.instance:
                if name not in known:
                    _add(
                        IssueKind.UNEXPECTED_FIELD,
                        at + (name,),
                        f"Unexpected field '{name}'",
                        (name,),
                    )
        else:
            _add(IssueKind.INVALID_VALUE_TYPE, at, error.message, (error.instance,))

    return issues
