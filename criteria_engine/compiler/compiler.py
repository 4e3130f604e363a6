"""
Rule compiler.

Compiles a rule's criteria into a single conjunctive predicate for one
root type. Each criterion becomes a CompiledCriterion (resolved accessor
plus type-checked comparison); the predicate ANDs them in declaration order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterator, TypeVar

from criteria_engine.rules.models import CriterionLike, RuleLike
from .operators import Comparison, OperatorRegistry, get_default_registry
from .paths import PropertyAccessor, resolve_property_path

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CompiledCriterion:
    """A single criterion, resolved and type-checked against a root type."""

    criterion: Any
    """The source criterion (kept for diagnostics)."""

    accessor: PropertyAccessor
    """Reads the criterion's property from a root instance."""

    comparison: Comparison
    """Tests the property value."""

    def read(self, instance: Any) -> Any:
        return self.accessor.read(instance)

    def __call__(self, instance: Any) -> bool:
        return self.comparison(self.accessor.read(instance))


class CompiledPredicate(Generic[T]):
    """Executable form of a rule for one root type.

    Immutable after construction, so one instance can be shared by
    concurrent readers.
    """

    __slots__ = ("root_type", "rule_name", "criteria")

    def __init__(self, root_type: type[T], criteria: tuple[CompiledCriterion, ...], rule_name: str | None = None):
        self.root_type = root_type
        self.rule_name = rule_name
        self.criteria = criteria

    def __call__(self, instance: T) -> bool:
        # An empty rule matches everything
        for criterion in self.criteria:
            if not criterion(instance):
                return False
        return True

    def __iter__(self) -> Iterator[CompiledCriterion]:
        return iter(self.criteria)

    def __len__(self) -> int:
        return len(self.criteria)

    def __repr__(self) -> str:
        return (
            f"CompiledPredicate(rule_name={self.rule_name!r}, "
            f"root_type={self.root_type.__qualname__}, criteria={len(self.criteria)})"
        )


class PredicateCompiler(Generic[T]):
    """Compiles rules to predicates against a fixed root type."""

    def __init__(self, root_type: type[T], registry: OperatorRegistry | None = None):
        """Initialize the compiler.

        Args:
            root_type: Type of the instances predicates will be called with
            registry: Operator registry (uses the global one if not provided)
        """
        self.root_type = root_type
        self.registry = registry if registry is not None else get_default_registry()

    def compile(self, rule: RuleLike) -> CompiledPredicate[T]:
        """Compile a rule.

        Args:
            rule: Any object exposing an ordered ``criteria`` sequence

        Returns:
            CompiledPredicate ANDing every criterion

        Raises:
            InvalidPropertyPath: If a property path does not resolve
            UnrecognizedOperator: If an operator is not registered
            InvalidOperatorForPropertyType: If an operator does not fit the property
            InvalidArgumentTypeForOperator: If a value cannot be coerced
        """
        criteria = tuple(self.compile_criterion(c) for c in rule.criteria)
        rule_name = getattr(rule, "name", None)

        logger.debug(
            f"Compiled rule {rule_name!r} for {self.root_type.__qualname__} ({len(criteria)} criteria)"
        )
        return CompiledPredicate(self.root_type, criteria, rule_name)

    def compile_criterion(self, criterion: CriterionLike) -> CompiledCriterion:
        """Resolve one criterion's path and build its comparison."""
        accessor = resolve_property_path(self.root_type, criterion.property_path)
        comparison = self.registry.build(criterion.operator_name, accessor.property_type, criterion.value)
        return CompiledCriterion(criterion=criterion, accessor=accessor, comparison=comparison)


def compile_rule(
    rule: RuleLike,
    root_type: type[T],
    registry: OperatorRegistry | None = None,
) -> CompiledPredicate[T]:
    """Convenience function to compile a single rule.

    Args:
        rule: The rule to compile
        root_type: Type of the instances the predicate will be called with
        registry: Optional operator registry

    Returns:
        CompiledPredicate for the rule
    """
    return PredicateCompiler(root_type, registry).compile(rule)
