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

"""Configuration management for the Smithy AST validator."""

import os
import logging
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .utils.logging_utils import configure_split_stream_logging

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: str) -> bool:
    raw = os.getenv(name, default).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: '{raw}'")


def _env_workers(name: str, default: str) -> int:
    raw = os.getenv(name, default).strip()
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer for {name}: '{raw}'") from exc
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {value}")
    return value


@dataclass
class ValidatorConfig:
    """Configuration class for model validation."""
    fail_fast: bool = False
    max_workers: int = 1
    log_level: str = "INFO"
    print_level: str = "ERROR"

    @classmethod
    def from_env(cls) -> 'ValidatorConfig':
        """Create configuration from environment variables."""
        return cls(
            fail_fast=_env_bool('SMITHY_AST_FAIL_FAST', 'false'),
            max_workers=_env_workers('SMITHY_AST_MAX_WORKERS', '1'),
            log_level=os.getenv('SMITHY_AST_LOG_LEVEL', 'INFO'),
            print_level=os.getenv('SMITHY_AST_PRINT_LEVEL', 'ERROR'),
        )

    def set_logging(self) -> logging.Logger:
        """Setup logging based on configuration."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        stderr_level = getattr(logging, self.print_level.upper(), logging.ERROR)

        formatter = logging.Formatter('%(name)s - %(levelname)s - %(message)s')
        return configure_split_stream_logging(
            level=level,
            stderr_level=stderr_level,
            formatter=formatter,
            logger_name='smithy_ast',
        )


# Global configuration instance
validator_config = ValidatorConfig.from_env()
