"""Core package - Shared configuration and the error taxonomy."""

from .config import Settings, configure_logging, get_settings
from .exceptions import (
    InvalidArgumentTypeForOperator,
    InvalidOperatorForPropertyType,
    InvalidPropertyPath,
    RulesEngineError,
    UnrecognizedOperator,
    format_type_name,
)

__all__ = [
    # Config
    "Settings",
    "configure_logging",
    "get_settings",
    # Errors
    "RulesEngineError",
    "InvalidPropertyPath",
    "UnrecognizedOperator",
    "InvalidOperatorForPropertyType",
    "InvalidArgumentTypeForOperator",
    "format_type_name",
]
