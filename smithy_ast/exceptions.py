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

"""Custom exceptions for the Smithy AST validator."""


class SmithyAstError(Exception):
    """Base exception for smithy_ast related errors."""
    pass


class ConfigurationError(SmithyAstError):
    """Exception raised for invalid validator configuration."""
    pass


class ValidationError(SmithyAstError):
    """Exception raised for validation errors."""
    pass


class ShapeIdSyntaxError(ValidationError):
    """Exception raised when a string does not satisfy an identifier grammar rule."""

    def __init__(self, value, grammar: str):
        self.value = value
        self.grammar = grammar
        super().__init__(f"Invalid {grammar}: {value!r}")


class ModelValidationError(ValidationError):
    """Exception raised when a model document is rejected.

    Carries every issue found so callers that prefer exceptions still get
    the full report.
    """

    def __init__(self, issues, message: str = "Model validation failed"):
        self.issues = tuple(issues)
        details = "\n".join(f"  - {issue}" for issue in self.issues)
        super().__init__(f"{message}:\n{details}" if details else message)
