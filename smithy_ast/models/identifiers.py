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

"""Lexical grammar for shape identifiers.

Every ID-shaped token in a model document goes through one of the ``parse_*``
functions below exactly once. Each returns a ``str`` subclass naming the rule
it satisfied, so downstream code can carry the validated value around without
re-checking it::

    Identifier            (_{0,2}[a-zA-Z0-9]|[a-zA-Z])[a-zA-Z0-9_]*
    EnumMemberIdentifier  [a-zA-Z]+[a-zA-Z0-9_]*
    Namespace             Identifier ("." Identifier)*
    AbsoluteRootShapeId   Namespace "#" Identifier
    RootShapeId           AbsoluteRootShapeId | Identifier
    ShapeId               RootShapeId ["$" Identifier]
    ShapeIdMember         "$" Identifier

Matching is always against the whole string.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional

from ..exceptions import ShapeIdSyntaxError


_IDENTIFIER_RE = re.compile(r"(_{0,2}[a-zA-Z0-9]|[a-zA-Z])[a-zA-Z0-9_]*")
_ENUM_MEMBER_IDENTIFIER_RE = re.compile(r"[a-zA-Z]+[a-zA-Z0-9_]*")


class Identifier(str):
    """A validated identifier token."""

    __slots__ = ()
    grammar = "Identifier"


class EnumMemberIdentifier(Identifier):
    """An identifier that is also valid as an enum/intEnum member name."""

    __slots__ = ()
    grammar = "EnumMemberIdentifier"


class Namespace(str):
    """A dot-separated sequence of identifiers."""

    __slots__ = ()
    grammar = "Namespace"

    @property
    def segments(self) -> tuple:
        return tuple(Identifier(part) for part in self.split("."))


class RootShapeId(str):
    """A shape id without member selector, absolute or local."""

    __slots__ = ()
    grammar = "RootShapeId"

    @property
    def is_absolute(self) -> bool:
        return "#" in self

    @property
    def namespace(self) -> Optional[Namespace]:
        if not self.is_absolute:
            return None
        return Namespace(self.partition("#")[0])

    @property
    def name(self) -> Identifier:
        return Identifier(self.rpartition("#")[2])


class AbsoluteRootShapeId(RootShapeId):
    """A namespace-qualified shape name, e.g. ``com.example#Widget``."""

    __slots__ = ()
    grammar = "AbsoluteRootShapeId"

    @property
    def namespace(self) -> Namespace:
        return Namespace(self.partition("#")[0])


class ShapeId(str):
    """A root shape id optionally followed by ``$member``."""

    __slots__ = ()
    grammar = "ShapeId"

    @property
    def root(self) -> RootShapeId:
        root = self.partition("$")[0]
        if "#" in root:
            return AbsoluteRootShapeId(root)
        return RootShapeId(root)

    @property
    def member(self) -> Optional[Identifier]:
        _, sep, member = self.partition("$")
        return Identifier(member) if sep else None


class ShapeIdMember(str):
    """A standalone ``$member`` token."""

    __slots__ = ()
    grammar = "ShapeIdMember"

    @property
    def member(self) -> Identifier:
        return Identifier(self[1:])


# ---- predicates over raw strings -------------------------------------------


def _matches_identifier(value: str) -> bool:
    return _IDENTIFIER_RE.fullmatch(value) is not None


def _matches_namespace(value: str) -> bool:
    # Empty segments (leading, trailing or doubled dots) fail the identifier rule.
    return all(_matches_identifier(segment) for segment in value.split("."))


def _matches_absolute_root_shape_id(value: str) -> bool:
    pieces = value.split("#", 1)
    if len(pieces) != 2:
        return False
    return _matches_namespace(pieces[0]) and _matches_identifier(pieces[1])


def _matches_root_shape_id(value: str) -> bool:
    return _matches_absolute_root_shape_id(value) or _matches_identifier(value)


def _matches_shape_id(value: str) -> bool:
    pieces = value.split("$", 1)
    if not _matches_root_shape_id(pieces[0]):
        return False
    return len(pieces) == 1 or _matches_identifier(pieces[1])


def _require(value: Any, matcher: Callable[[str], bool], wrapper: type):
    if not isinstance(value, str) or not matcher(value):
        raise ShapeIdSyntaxError(value, wrapper.grammar)
    return wrapper(value)


# ---- parse functions ---------------------------------------------------------


def parse_identifier(value: Any) -> Identifier:
    return _require(value, _matches_identifier, Identifier)


def parse_enum_member_identifier(value: Any) -> EnumMemberIdentifier:
    return _require(
        value,
        lambda v: _ENUM_MEMBER_IDENTIFIER_RE.fullmatch(v) is not None,
        EnumMemberIdentifier,
    )


def parse_namespace(value: Any) -> Namespace:
    return _require(value, _matches_namespace, Namespace)


def parse_absolute_root_shape_id(value: Any) -> AbsoluteRootShapeId:
    return _require(value, _matches_absolute_root_shape_id, AbsoluteRootShapeId)


def parse_root_shape_id(value: Any) -> RootShapeId:
    """Parse an absolute or local root shape id.

    Absolute ids come back as :class:`AbsoluteRootShapeId` (a
    :class:`RootShapeId` subclass) so callers can branch on the type.
    """
    if isinstance(value, str) and _matches_absolute_root_shape_id(value):
        return AbsoluteRootShapeId(value)
    return _require(value, _matches_identifier, RootShapeId)


def parse_shape_id(value: Any) -> ShapeId:
    return _require(value, _matches_shape_id, ShapeId)


def parse_shape_id_member(value: Any) -> ShapeIdMember:
    return _require(
        value,
        lambda v: v.startswith("$") and _matches_identifier(v[1:]),
        ShapeIdMember,
    )


def _predicate(parser: Callable[[Any], str]) -> Callable[[Any], bool]:
    def _check(value: Any) -> bool:
        try:
            parser(value)
        except ShapeIdSyntaxError:
            return False
        return True

    _check.__name__ = parser.__name__.replace("parse_", "is_")
    _check.__doc__ = f"Return True if *value* is accepted by :func:`{parser.__name__}`."
    return _check


is_identifier = _predicate(parse_identifier)
is_enum_member_identifier = _predicate(parse_enum_member_identifier)
is_namespace = _predicate(parse_namespace)
is_absolute_root_shape_id = _predicate(parse_absolute_root_shape_id)
is_root_shape_id = _predicate(parse_root_shape_id)
is_shape_id = _predicate(parse_shape_id)
is_shape_id_member = _predicate(parse_shape_id_member)
