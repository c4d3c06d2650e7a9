"""Helpers for the generic, already-decoded value tree.

Decoders collapse repeated mapping keys silently, which would hide duplicate
shape ids and duplicate member names. A decoder that wants those reported
can build mappings with :func:`mapping_from_pairs`, e.g.::

    json.loads(text, object_pairs_hook=mapping_from_pairs)

Mappings without repeated keys stay plain dicts; mappings with repeated keys
become a :class:`MappingPairs` that keeps every entry in document order.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Tuple


class MappingPairs(list):
    """A mapping node that contained repeated keys, kept as ``(key, value)`` pairs."""

    def keys(self) -> List[Any]:
        return [key for key, _ in self]

    def to_dict(self) -> dict:
        # Last occurrence wins, matching what a plain decoder would produce.
        return dict(self)


def mapping_from_pairs(pairs: Iterable[Tuple[Any, Any]]) -> Any:
    pairs = list(pairs)
    keys = [key for key, _ in pairs]
    if len(set(keys)) == len(keys):
        return dict(pairs)
    return MappingPairs(pairs)


def is_mapping(value: Any) -> bool:
    return isinstance(value, (Mapping, MappingPairs))


def mapping_items(value: Any) -> Optional[List[Tuple[Any, Any]]]:
    """Return every entry of a mapping node, repeated keys included.

    Returns None when *value* is not a mapping node.
    """
    if isinstance(value, MappingPairs):
        return list(value)
    if isinstance(value, Mapping):
        return list(value.items())
    return None


def as_mapping(value: Any) -> Optional[dict]:
    """Shallow dict view of a mapping node, or None."""
    if isinstance(value, MappingPairs):
        return value.to_dict()
    if isinstance(value, Mapping):
        return dict(value)
    return None


def collapse(value: Any) -> Any:
    """Recursively replace MappingPairs with plain dicts."""
    if isinstance(value, MappingPairs):
        return {key: collapse(item) for key, item in value}
    if isinstance(value, Mapping):
        return {key: collapse(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [collapse(item) for item in value]
    return value


def freeze(value: Any) -> Any:
    """Read-only copy of a value tree: mappings become MappingProxyType, lists become tuples.

    :func:`collapse` turns a frozen tree back into plain dicts and lists.
    """
    if isinstance(value, MappingPairs):
        value = value.to_dict()
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value
