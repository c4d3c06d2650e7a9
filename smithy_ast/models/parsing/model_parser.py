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

"""Model document validation.

A model document binds a ``smithy`` version string, a ``metadata`` mapping
and a ``shapes`` mapping keyed by absolute shape id. Shapes have no
dependency on each other's outcome, so they may be validated in any order,
optionally on a thread pool.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jsonschema import Draft202012Validator

from ...config import validator_config
from ...exceptions import ModelValidationError, ShapeIdSyntaxError
from ..identifiers import AbsoluteRootShapeId, parse_absolute_root_shape_id
from ..issues import IssueKind, NodePath, ValidationIssue, issues_of
from ..nodes import collapse, freeze, is_mapping, mapping_items
from ..shapes import Shape
from .shape_parser import parse_shape

logger = logging.getLogger(__name__)

_SHAPES_PATH: NodePath = ("shapes",)

_ENVELOPE_VALIDATOR = Draft202012Validator(
    {
        "type": "object",
        "properties": {
            "smithy": {"type": "string"},
            "metadata": {"type": "object", "propertyNames": {"type": "string"}},
            "shapes": {"type": "object"},
        },
        "required": ["smithy"],
        "additionalProperties": False,
    }
)


@dataclass(frozen=True)
class Model:
    smithy: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    shapes: Dict[AbsoluteRootShapeId, Shape] = field(default_factory=dict)

    def to_node(self) -> Dict[str, Any]:
        node: Dict[str, Any] = {"smithy": self.smithy}
        if self.metadata:
            node["metadata"] = collapse(self.metadata)
        node["shapes"] = {str(shape_id): shape.to_node() for shape_id, shape in self.shapes.items()}
        return node


@dataclass(frozen=True)
class ValidationResult:
    model: Optional[Model]
    issues: Tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues

    def issues_of(self, kind: IssueKind) -> List[ValidationIssue]:
        return issues_of(self.issues, kind)

    def format(self) -> str:
        return "\n".join(f"  - {issue}" for issue in self.issues)

    def raise_for_issues(self) -> Model:
        if self.issues:
            raise ModelValidationError(self.issues)
        return self.model


# ShapeOutcome: (key, typed shape or None, issues found for that entry)
ShapeOutcome = Tuple[Any, Optional[Shape], List[ValidationIssue]]


def _validate_envelope(node: Dict[str, Any]) -> List[ValidationIssue]:
    # Shapes may arrive as MappingPairs; only its mapping-ness matters here.
    view = {key: ({} if key == "shapes" and is_mapping(value) else collapse(value)) for key, value in node.items()}
    issues: List[ValidationIssue] = []
    for error in _ENVELOPE_VALIDATOR.iter_errors(view):
        at = tuple(error.absolute_path)
        if error.validator == "required":
            for name in error.validator_value:
                if name not in error.instance and not any(i.path == at + (name,) for i in issues):
                    issues.append(
                        ValidationIssue(
                            kind=IssueKind.MISSING_REQUIRED_FIELD,
                            path=at + (name,),
                            message=f"Missing required field '{name}'",
                            values=(name,),
                        )
                    )
        elif error.validator == "additionalProperties":
            known = error.schema.get("properties", {})
            for name in error.instance:
                if name not in known:
                    issues.append(
                        ValidationIssue(
                            kind=IssueKind.UNEXPECTED_FIELD,
                            path=at + (name,),
                            message=f"Unexpected field '{name}'",
                            values=(name,),
                        )
                    )
        else:
            issues.append(
                ValidationIssue(
                    kind=IssueKind.INVALID_VALUE_TYPE,
                    path=at,
                    message=error.message,
                    values=(error.instance,),
                )
            )
    return issues


def assemble_shapes(shapes: Any, path: NodePath = _SHAPES_PATH) -> Tuple[Dict[Any, Any], List[ValidationIssue]]:
    """Turn the shapes entries into a dict, reporting repeated shape ids.

    *shapes* may be a mapping, a :class:`MappingPairs` or an iterable of
    ``(shape_id, node)`` pairs.
    """
    entries = mapping_items(shapes)
    if entries is None:
        entries = list(shapes)

    counts: Dict[Any, int] = {}
    for key, _ in entries:
        counts[key] = counts.get(key, 0) + 1

    issues = [
        ValidationIssue(
            kind=IssueKind.DUPLICATE_SHAPE_ID,
            path=path + (str(key),),
            message=f"Shape id '{key}' is defined {count} times",
            values=(key, count),
        )
        for key, count in counts.items()
        if count > 1
    ]
    return dict(entries), issues


def _validate_entry(key: Any, node: Any) -> ShapeOutcome:
    path = _SHAPES_PATH + (str(key),)
    issues: List[ValidationIssue] = []
    try:
        parse_absolute_root_shape_id(key)
    except ShapeIdSyntaxError as exc:
        issues.append(
            ValidationIssue(
                kind=IssueKind.LEXICAL,
                path=path,
                message=f"Shape id '{exc.value}' is not a valid {exc.grammar}",
                values=(exc.value, exc.grammar),
            )
        )

    shape, shape_issues = parse_shape(node, path)
    issues.extend(shape_issues)
    if issues:
        logger.debug(f"Shape '{key}' rejected with {len(issues)} issue(s)")
        return key, None, issues
    return key, shape, issues


def _validate_sequential(entries: Iterable[Tuple[Any, Any]], fail_fast: bool) -> List[ShapeOutcome]:
    outcomes: List[ShapeOutcome] = []
    for key, node in entries:
        outcome = _validate_entry(key, node)
        outcomes.append(outcome)
        if fail_fast and outcome[2]:
            break
    return outcomes


def _validate_parallel(
    entries: List[Tuple[Any, Any]], fail_fast: bool, max_workers: int
) -> List[ShapeOutcome]:
    outcomes: List[ShapeOutcome] = []
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(_validate_entry, key, node): idx
            for idx, (key, node) in enumerate(entries)
        }
        ordered: Dict[int, ShapeOutcome] = {}
        for future in as_completed(futures):
            outcome = future.result()
            if fail_fast and outcome[2]:
                for pending in futures:
                    pending.cancel()
                return [outcome]
            ordered[futures[future]] = outcome
        outcomes.extend(ordered[idx] for idx in sorted(ordered))
    return outcomes


def validate_model(
    node: Any,
    *,
    fail_fast: Optional[bool] = None,
    max_workers: Optional[int] = None,
) -> ValidationResult:
    """Validate a decoded model document.

    Args:
        node: Generic value tree (mappings, lists, scalars) of the document.
        fail_fast: Stop at the first rejected shape. Defaults to the
            global configuration.
        max_workers: Validate shapes on a thread pool of this size when
            greater than 1. Defaults to the global configuration.

    Returns:
        A :class:`ValidationResult`; its ``model`` is set only when no
        issue was found.
    """
    if fail_fast is None:
        fail_fast = validator_config.fail_fast
    if max_workers is None:
        max_workers = validator_config.max_workers

    document = dict(mapping_items(node)) if is_mapping(node) else None
    if document is None:
        issue = ValidationIssue(
            kind=IssueKind.INVALID_VALUE_TYPE,
            path=(),
            message="Model document must be a mapping/object",
            values=(node,),
        )
        return ValidationResult(model=None, issues=(issue,))

    issues = _validate_envelope(document)
    raw_shapes = document.get("shapes", {})
    if not is_mapping(raw_shapes):
        return ValidationResult(model=None, issues=tuple(issues))

    shapes, duplicate_issues = assemble_shapes(raw_shapes)
    if duplicate_issues:
        logger.warning(
            f"Duplicate shape ids: {', '.join(str(issue.values[0]) for issue in duplicate_issues)}"
        )
        return ValidationResult(model=None, issues=tuple(issues + duplicate_issues))

    entries = list(shapes.items())
    logger.debug(
        f"Validating {len(entries)} shape(s) (fail_fast={fail_fast}, max_workers={max_workers})"
    )
    if max_workers > 1 and len(entries) > 1:
        outcomes = _validate_parallel(entries, fail_fast, max_workers)
    else:
        outcomes = _validate_sequential(entries, fail_fast)

    typed: Dict[AbsoluteRootShapeId, Shape] = {}
    for key, shape, shape_issues in outcomes:
        issues.extend(shape_issues)
        if shape is not None:
            typed[AbsoluteRootShapeId(key)] = shape

    if issues:
        logger.info(f"Model rejected with {len(issues)} issue(s)")
        return ValidationResult(model=None, issues=tuple(issues))

    metadata = collapse(document.get("metadata", {}))
    model = Model(smithy=document["smithy"], metadata=freeze(metadata), shapes=MappingProxyType(typed))
    logger.info(f"Model accepted with {len(typed)} shape(s)")
    return ValidationResult(model=model, issues=())


def parse_model(node: Any, **kwargs: Any) -> Model:
    """Validate *node* and return the typed model, raising ModelValidationError on any issue."""
    return validate_model(node, **kwargs).raise_for_issues()
