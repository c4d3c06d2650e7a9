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

"""Validated, variant-typed shape representation.

Values here are only produced by the parsers in :mod:`smithy_ast.models.parsing`;
every ID-shaped field already carries its validated wrapper type, and every
mapping is a read-only MappingProxyType. Each value can be turned back into a
generic value tree with ``to_node()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from .identifiers import AbsoluteRootShapeId, Identifier, ShapeId
from .nodes import collapse


class ShapeType:
    """Shape type tags accepted in the ``type`` field."""
    BLOB = "blob"
    BOOLEAN = "boolean"
    DOCUMENT = "document"
    STRING = "string"
    BYTE = "byte"
    SHORT = "short"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BIG_INTEGER = "bigInteger"
    BIG_DECIMAL = "bigDecimal"
    TIMESTAMP = "timestamp"

    LIST = "list"
    MAP = "map"
    STRUCTURE = "structure"
    UNION = "union"
    ENUM = "enum"
    INT_ENUM = "intEnum"
    SERVICE = "service"
    RESOURCE = "resource"
    OPERATION = "operation"
    APPLY = "apply"

    @classmethod
    def get_simple_types(cls) -> List[str]:
        return [
            cls.BLOB, cls.BOOLEAN, cls.DOCUMENT, cls.STRING, cls.BYTE, cls.SHORT,
            cls.INTEGER, cls.LONG, cls.FLOAT, cls.DOUBLE, cls.BIG_INTEGER,
            cls.BIG_DECIMAL, cls.TIMESTAMP,
        ]

    @classmethod
    def get_all_types(cls) -> List[str]:
        return cls.get_simple_types() + [
            cls.LIST, cls.MAP, cls.STRUCTURE, cls.UNION, cls.ENUM, cls.INT_ENUM,
            cls.SERVICE, cls.RESOURCE, cls.OPERATION, cls.APPLY,
        ]


@dataclass(frozen=True)
class Reference:
    target: AbsoluteRootShapeId

    def to_node(self) -> Dict[str, Any]:
        return {"target": str(self.target)}


@dataclass(frozen=True)
class Member:
    """A reference plus the traits attached to it."""
    reference: Reference
    traits: Dict[AbsoluteRootShapeId, Any] = field(default_factory=dict)

    @property
    def target(self) -> AbsoluteRootShapeId:
        return self.reference.target

    def to_node(self) -> Dict[str, Any]:
        node = self.reference.to_node()
        if self.traits:
            node["traits"] = _traits_node(self.traits)
        return node


@dataclass(frozen=True)
class ShapeCommon:
    """Fields shared by every composable shape."""
    mixins: Tuple[Reference, ...] = ()

    def to_node(self) -> Dict[str, Any]:
        if not self.mixins:
            return {}
        return {"mixins": _references_node(self.mixins)}


def _references_node(references: Tuple[Reference, ...]) -> List[Dict[str, Any]]:
    return [ref.to_node() for ref in references]


def _members_node(members: Dict[Identifier, Member]) -> Dict[str, Any]:
    return {str(name): member.to_node() for name, member in members.items()}


def _traits_node(traits: Dict[ShapeId, Any]) -> Dict[str, Any]:
    return {str(key): collapse(value) for key, value in traits.items()}


def _with_common(type_tag: str, common: ShapeCommon, **fields: Any) -> Dict[str, Any]:
    node: Dict[str, Any] = {"type": type_tag}
    node.update(common.to_node())
    node.update({key: value for key, value in fields.items() if value is not None})
    return node


@dataclass(frozen=True)
class SimpleShape:
    type: str
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        return _with_common(self.type, self.common)


@dataclass(frozen=True)
class ListShape:
    type: ClassVar[str] = ShapeType.LIST
    member: Member
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        return _with_common(self.type, self.common, member=self.member.to_node())


@dataclass(frozen=True)
class MapShape:
    type: ClassVar[str] = ShapeType.MAP
    key: Reference
    value: Reference
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        return _with_common(
            self.type, self.common, key=self.key.to_node(), value=self.value.to_node()
        )


@dataclass(frozen=True)
class StructureShape:
    type: ClassVar[str] = ShapeType.STRUCTURE
    members: Optional[Dict[Identifier, Member]] = None
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        members = _members_node(self.members) if self.members is not None else None
        return _with_common(self.type, self.common, members=members)


@dataclass(frozen=True)
class UnionShape:
    type: ClassVar[str] = ShapeType.UNION
    members: Dict[Identifier, Member]
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        return _with_common(self.type, self.common, members=_members_node(self.members))


@dataclass(frozen=True)
class EnumShape:
    """Both ``enum`` and ``intEnum``; the tag is kept in ``type``."""
    type: str
    members: Dict[Identifier, Member]
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        return _with_common(self.type, self.common, members=_members_node(self.members))


@dataclass(frozen=True)
class ServiceShape:
    type: ClassVar[str] = ShapeType.SERVICE
    operations: Tuple[Reference, ...]
    resources: Tuple[Reference, ...]
    errors: Tuple[Reference, ...]
    traits: Dict[ShapeId, Any]
    rename: Dict[ShapeId, Identifier]
    version: Optional[str] = None
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        return _with_common(
            self.type,
            self.common,
            version=self.version,
            operations=_references_node(self.operations),
            resources=_references_node(self.resources),
            errors=_references_node(self.errors),
            traits=_traits_node(self.traits),
            rename={str(key): str(value) for key, value in self.rename.items()},
        )


@dataclass(frozen=True)
class ResourceShape:
    type: ClassVar[str] = ShapeType.RESOURCE
    identifiers: Dict[str, Reference]
    properties: Dict[str, Reference]
    operations: Tuple[Reference, ...]
    collection_operations: Tuple[Reference, ...]
    resources: Tuple[Reference, ...]
    traits: Dict[ShapeId, Any]
    create: Optional[Reference] = None
    put: Optional[Reference] = None
    read: Optional[Reference] = None
    update: Optional[Reference] = None
    delete: Optional[Reference] = None
    list_: Optional[Reference] = None
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        lifecycle = {
            "create": self.create,
            "put": self.put,
            "read": self.read,
            "update": self.update,
            "delete": self.delete,
            "list": self.list_,
        }
        return _with_common(
            self.type,
            self.common,
            identifiers={key: ref.to_node() for key, ref in self.identifiers.items()},
            properties={key: ref.to_node() for key, ref in self.properties.items()},
            **{name: ref.to_node() for name, ref in lifecycle.items() if ref is not None},
            operations=_references_node(self.operations),
            collectionOperations=_references_node(self.collection_operations),
            resources=_references_node(self.resources),
            traits=_traits_node(self.traits),
        )


@dataclass(frozen=True)
class OperationShape:
    type: ClassVar[str] = ShapeType.OPERATION
    input: Reference
    output: Reference
    errors: Tuple[Reference, ...]
    traits: Dict[ShapeId, Any]
    common: ShapeCommon = ShapeCommon()

    def to_node(self) -> Dict[str, Any]:
        return _with_common(
            self.type,
            self.common,
            input=self.input.to_node(),
            output=self.output.to_node(),
            errors=_references_node(self.errors),
            traits=_traits_node(self.traits),
        )


@dataclass(frozen=True)
class ApplyShape:
    """Trait application; values are identifiers rather than trait payloads."""
    type: ClassVar[str] = ShapeType.APPLY
    traits: Dict[ShapeId, Identifier]

    def to_node(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "traits": {str(key): str(value) for key, value in self.traits.items()},
        }


Shape = Union[
    SimpleShape,
    ListShape,
    MapShape,
    StructureShape,
    UnionShape,
    EnumShape,
    ServiceShape,
    ResourceShape,
    OperationShape,
    ApplyShape,
]
