"""Exceptions raised while compiling rules against a root type.

All four are configuration errors: they describe a rule that can never be
evaluated against the given type, so nothing in the engine catches or
retries them.
"""

from __future__ import annotations

from typing import Any


def format_type_name(data_type: Any) -> str:
    """Return a qualified, human-readable name for a type or annotation."""
    if isinstance(data_type, type):
        return f"{data_type.__module__}.{data_type.__qualname__}"
    return repr(data_type)


class RulesEngineError(Exception):
    """Base class for rule compilation errors."""


class InvalidPropertyPath(RulesEngineError):
    """A path segment does not resolve to a readable property.

    For instance, ``patient.demographics.ethnicity`` where the patient type
    has no ``demographics`` property.
    """

    def __init__(
        self,
        object_type: Any,
        property_path: str,
        property_name: str,
        inspected_type: Any,
    ):
        self.object_type = object_type
        self.property_path = property_path
        self.property_name = property_name
        self.inspected_type = inspected_type
        super().__init__(
            f"Invalid property path '{property_path}' for type {format_type_name(object_type)}. "
            f"Property {property_name} does not exist on type {format_type_name(inspected_type)}."
        )


class UnrecognizedOperator(RulesEngineError):
    """The operator name is not registered."""

    def __init__(self, operator_name: str | None):
        self.operator_name = operator_name
        super().__init__(f"Unrecognized operator {operator_name}.")


class InvalidOperatorForPropertyType(RulesEngineError):
    """The operator is known but has no meaning for the property's type."""

    def __init__(self, operator_name: str, data_type: Any):
        self.operator_name = operator_name
        self.data_type = data_type
        super().__init__(
            f"Operator {operator_name} is not valid for property type {format_type_name(data_type)}."
        )


class InvalidArgumentTypeForOperator(RulesEngineError):
    """The textual argument cannot be converted to the type the operator needs."""

    def __init__(self, operator_name: str, data_type: Any, expected_data_type: Any = None):
        self.operator_name = operator_name
        self.data_type = data_type
        self.expected_data_type = expected_data_type

        message = f"Argument of type {format_type_name(data_type)} is not valid for operator {operator_name}."
        if expected_data_type is not None:
            message += f" Expected {format_type_name(expected_data_type)}."
        super().__init__(message)
