"""
Operator table for criterion compilation.

Each operator name maps to a builder that receives the resolved property's
declared type and the criterion's text value, and returns a comparison over
the property value. Type checks and argument coercion happen in the builder,
once, so the returned comparison does no parsing at evaluation time.

New operators are added by registering a builder, not by subclassing.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

from criteria_engine.core.exceptions import InvalidOperatorForPropertyType, UnrecognizedOperator
from .coercion import coerce_argument
from .types import PropertyType


Comparison = Callable[[Any], bool]
"""Tests a resolved property value."""

OperatorBuilder = Callable[[PropertyType, "str | None", str], Comparison]
"""Builds a Comparison from (property type, argument text, operator name)."""


# Comparison implementations. Ordering against None is never satisfied.
def _eval_eq(actual: Any, expected: Any) -> bool:
    return actual == expected


def _eval_ne(actual: Any, expected: Any) -> bool:
    return actual != expected


def _eval_gt(actual: Any, expected: Any) -> bool:
    if actual is None or expected is None:
        return False
    try:
        return actual > expected
    except TypeError:
        return False


def _eval_gte(actual: Any, expected: Any) -> bool:
    if actual is None or expected is None:
        return False
    try:
        return actual >= expected
    except TypeError:
        return False


def _eval_lt(actual: Any, expected: Any) -> bool:
    if actual is None or expected is None:
        return False
    try:
        return actual < expected
    except TypeError:
        return False


def _eval_lte(actual: Any, expected: Any) -> bool:
    if actual is None or expected is None:
        return False
    try:
        return actual <= expected
    except TypeError:
        return False


BINARY_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "Equal": _eval_eq,
    "NotEqual": _eval_ne,
    "GreaterThan": _eval_gt,
    "GreaterThanOrEqual": _eval_gte,
    "LessThan": _eval_lt,
    "LessThanOrEqual": _eval_lte,
}

STRING_OPERATORS: dict[str, Callable[[str, str], bool]] = {
    "Contains": lambda value, needle: needle in value,
    "StartsWith": lambda value, needle: value.startswith(needle),
    "EndsWith": lambda value, needle: value.endswith(needle),
}

NEGATED_STRING_OPERATORS: dict[str, str] = {
    "DoesNotContain": "Contains",
    "DoesNotStartWith": "StartsWith",
    "DoesNotEndWith": "EndsWith",
}


def constant(result: bool) -> Comparison:
    """A comparison that ignores the property value."""

    def comparison(value: Any) -> bool:
        return result

    return comparison


def build_binary_comparison(property_type: PropertyType, argument: str | None, operator_name: str) -> Comparison:
    """Build Equal/NotEqual/GreaterThan/... for a property.

    Args:
        property_type: Declared type of the property
        argument: Criterion value text, or None when absent
        operator_name: One of BINARY_OPERATORS

    Returns:
        Comparison of the property value against the coerced argument

    Raises:
        InvalidArgumentTypeForOperator: If the argument does not parse
        InvalidOperatorForPropertyType: For ordering on an unordered type
    """
    evaluate = BINARY_OPERATORS[operator_name]

    if argument is None:
        # A non-nullable value can never equal "no value"
        if property_type.is_non_nullable_value_type:
            return constant(operator_name == "NotEqual")
        if operator_name in ("GreaterThan", "LessThan"):
            return constant(False)
        expected = None
    else:
        # Empty text is a distinct value, not a null; use IsNull for that
        if property_type.nullable and property_type.is_value_type and argument == "":
            return constant(False)
        expected = coerce_argument(operator_name, argument, property_type)
        if operator_name not in ("Equal", "NotEqual") and not property_type.is_orderable:
            raise InvalidOperatorForPropertyType(operator_name, property_type.display_type)

    def comparison(value: Any) -> bool:
        return evaluate(value, expected)

    return comparison


def build_string_comparison(property_type: PropertyType, argument: str | None, operator_name: str) -> Comparison:
    """Build a case-insensitive Contains/StartsWith/EndsWith test."""
    return _string_comparison(property_type, argument, operator_name, operator_name)


def build_negated_string_comparison(
    property_type: PropertyType, argument: str | None, operator_name: str
) -> Comparison:
    """Build DoesNotContain/DoesNotStartWith/DoesNotEndWith as NOT of the positive test."""
    positive = _string_comparison(
        property_type, argument, NEGATED_STRING_OPERATORS[operator_name], operator_name
    )

    def comparison(value: Any) -> bool:
        return not positive(value)

    return comparison


def _string_comparison(
    property_type: PropertyType, argument: str | None, test_name: str, operator_name: str
) -> Comparison:
    if not property_type.is_string:
        raise InvalidOperatorForPropertyType(operator_name, property_type.display_type)

    if argument is None:
        return constant(False)

    test = STRING_OPERATORS[test_name]
    needle = argument.casefold()

    def comparison(value: Any) -> bool:
        return value is not None and test(value.casefold(), needle)

    return comparison


def build_null_check(property_type: PropertyType, argument: str | None, operator_name: str) -> Comparison:
    """Build IsNull/IsNotNull. The argument is ignored."""
    want_null = operator_name == "IsNull"

    if property_type.is_non_nullable_value_type:
        return constant(not want_null)

    def comparison(value: Any) -> bool:
        return (value is None) == want_null

    return comparison


def build_truth_check(property_type: PropertyType, argument: str | None, operator_name: str) -> Comparison:
    """Build IsTrue/IsFalse. A None value satisfies neither."""
    if not property_type.is_boolean:
        raise InvalidOperatorForPropertyType(operator_name, property_type.display_type)

    expected = operator_name == "IsTrue"

    def comparison(value: Any) -> bool:
        return value is not None and bool(value) is expected

    return comparison


class OperatorRegistry:
    """Maps operator names to comparison builders.

    Lookups are case-sensitive. Populate the registry before constructing
    evaluators from it; compiled predicates keep the comparisons they were
    built with.
    """

    def __init__(self, builders: dict[str, OperatorBuilder] | None = None):
        self._builders: dict[str, OperatorBuilder] = dict(builders or {})

    def register(self, operator_name: str, builder: OperatorBuilder, replace: bool = False) -> None:
        """Register a builder under an operator name.

        Raises:
            ValueError: If the name is taken and ``replace`` is False
        """
        if operator_name in self._builders and not replace:
            raise ValueError(f"Operator already registered: {operator_name}")
        self._builders[operator_name] = builder

    def unregister(self, operator_name: str) -> bool:
        """Remove an operator. Returns True if it was registered."""
        return self._builders.pop(operator_name, None) is not None

    def get(self, operator_name: str) -> OperatorBuilder | None:
        return self._builders.get(operator_name)

    def build(self, operator_name: str, property_type: PropertyType, argument: str | None) -> Comparison:
        """Build the comparison for one criterion.

        Raises:
            UnrecognizedOperator: If no builder is registered under the name
        """
        builder = self._builders.get(operator_name)
        if builder is None:
            raise UnrecognizedOperator(operator_name)
        return builder(property_type, argument, operator_name)

    def names(self) -> list[str]:
        return list(self._builders)

    def copy(self) -> OperatorRegistry:
        return OperatorRegistry(self._builders)

    def __contains__(self, operator_name: object) -> bool:
        return operator_name in self._builders

    def __iter__(self) -> Iterator[str]:
        return iter(self._builders)

    def __len__(self) -> int:
        return len(self._builders)


def create_default_registry() -> OperatorRegistry:
    """Create a registry holding the built-in operators."""
    registry = OperatorRegistry()
    for name in BINARY_OPERATORS:
        registry.register(name, build_binary_comparison)
    for name in STRING_OPERATORS:
        registry.register(name, build_string_comparison)
    for name in NEGATED_STRING_OPERATORS:
        registry.register(name, build_negated_string_comparison)
    for name in ("IsNull", "IsNotNull"):
        registry.register(name, build_null_check)
    for name in ("IsTrue", "IsFalse"):
        registry.register(name, build_truth_check)
    return registry


# Global registry instance
_default_registry: OperatorRegistry | None = None


def get_default_registry() -> OperatorRegistry:
    """Get the global operator registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = create_default_registry()
    return _default_registry


def reset_default_registry() -> None:
    """Drop the global registry, discarding any registered extensions."""
    global _default_registry
    _default_registry = None
