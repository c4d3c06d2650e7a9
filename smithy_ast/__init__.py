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

"""Schema and validator for the Smithy JSON abstract syntax tree."""

__version__ = "0.1.0"

from .exceptions import (
    ConfigurationError,
    ModelValidationError,
    ShapeIdSyntaxError,
    SmithyAstError,
    ValidationError,
)
from .models.issues import IssueKind, ValidationIssue
from .models.nodes import MappingPairs, mapping_from_pairs
from .models.parsing.model_parser import Model, ValidationResult, parse_model, validate_model
from .models.parsing.shape_parser import parse_shape

__all__ = [
    "ConfigurationError",
    "IssueKind",
    "MappingPairs",
    "Model",
    "ModelValidationError",
    "ShapeIdSyntaxError",
    "SmithyAstError",
    "ValidationError",
    "ValidationIssue",
    "ValidationResult",
    "mapping_from_pairs",
    "parse_model",
    "parse_shape",
    "validate_model",
]
