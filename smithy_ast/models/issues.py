from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Tuple, Union


PathToken = Union[str, int]
NodePath = Tuple[PathToken, ...]
JsonPointer = str

_BARE_TOKEN_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class IssueKind(str, Enum):
    """Violation kinds reported while validating a model document."""

    LEXICAL = "LexicalError"
    DUPLICATE_MEMBER = "DuplicateMemberError"
    EMPTY_MEMBER_SET = "EmptyMemberSetError"
    INVALID_ENUM_MEMBER_NAME = "InvalidEnumMemberNameError"
    UNKNOWN_SHAPE_TYPE = "UnknownShapeTypeError"
    MISSING_REQUIRED_FIELD = "MissingRequiredFieldError"
    UNEXPECTED_FIELD = "UnexpectedFieldError"
    INVALID_VALUE_TYPE = "InvalidValueTypeError"
    DUPLICATE_SHAPE_ID = "DuplicateShapeIdError"

    def __str__(self) -> str:
        return self.value


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def format_path(path: Iterable[PathToken]) -> str:
    """Render a node path as ``shapes."ns#Shape".members."Bad Name"``."""
    rendered = ""
    for token in path:
        if isinstance(token, int):
            rendered += f"[{token}]"
            continue
        token = str(token)
        part = token if _BARE_TOKEN_RE.fullmatch(token) else json.dumps(token)
        rendered = f"{rendered}.{part}" if rendered else part
    return rendered


def to_json_pointer(path: Iterable[PathToken]) -> JsonPointer:
    return "".join(f"/{_jp_escape(str(token))}" for token in path)


@dataclass(frozen=True)
class ValidationIssue:
    kind: IssueKind
    path: NodePath
    message: str
    values: Tuple[Any, ...] = ()

    @property
    def location(self) -> str:
        return format_path(self.path)

    @property
    def yaml_path(self) -> JsonPointer:
        return to_json_pointer(self.path)

    def __str__(self) -> str:
        location = self.location or "<document>"
        return f"{self.kind}: {self.message} (at {location})"


def issues_of(issues: Iterable[ValidationIssue], kind: IssueKind) -> List[ValidationIssue]:
    return [issue for issue in issues if issue.kind == kind]
