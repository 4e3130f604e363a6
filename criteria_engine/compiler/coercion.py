"""
Coercion of textual criterion values into native property types.

Parsing goes through pydantic's lax-mode validators, which already accept
ISO dates and timestamps. Booleans are parsed separately and accept only
``true`` and ``false``, in any case.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Any
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from criteria_engine.core.exceptions import InvalidArgumentTypeForOperator
from .types import PropertyType


COERCIBLE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    Decimal,
    datetime,
    date,
    time,
    timedelta,
    UUID,
)

BOOLEAN_WORDS = frozenset({"true", "false"})


@lru_cache(maxsize=None)
def _adapter(target: type) -> TypeAdapter:
    return TypeAdapter(target)


def coerce_argument(operator_name: str, argument: str, property_type: PropertyType) -> Any:
    """Convert a criterion's text value to the property's native type.

    Args:
        operator_name: The operator being compiled (for error reporting)
        argument: The criterion value text
        property_type: Declared type of the resolved property

    Returns:
        The parsed value; strings are returned unchanged

    Raises:
        InvalidArgumentTypeForOperator: If the text does not parse, or the
            property type has no textual form
    """
    target = property_type.runtime_type
    if target is None:
        raise InvalidArgumentTypeForOperator(operator_name, type(argument), property_type.display_type)

    if issubclass(target, Enum):
        return _coerce_enum(operator_name, argument, target)

    if issubclass(target, str):
        return argument

    if target is bool:
        # Only the words true and false, in any case
        text = argument.strip().casefold()
        if text not in BOOLEAN_WORDS:
            raise InvalidArgumentTypeForOperator(operator_name, type(argument), bool)
        return text == "true"

    if not issubclass(target, COERCIBLE_TYPES):
        raise InvalidArgumentTypeForOperator(operator_name, type(argument), target)

    try:
        return _adapter(target).validate_python(argument)
    except ValidationError as exc:
        raise InvalidArgumentTypeForOperator(operator_name, type(argument), target) from exc


def _coerce_enum(operator_name: str, argument: str, target: type[Enum]) -> Enum:
    """Match an enum member by value, then by case-insensitive name."""
    try:
        return _adapter(target).validate_python(argument)
    except ValidationError as exc:
        wanted = argument.strip().casefold()
        for member in target:
            if member.name.casefold() == wanted:
                return member
        raise InvalidArgumentTypeForOperator(operator_name, type(argument), target) from exc
