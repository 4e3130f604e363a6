"""Advisory, syntax-only rule validation.

Checks what can be known without a target type: the rule has criteria,
each property path is a series of identifiers, and each operator is
registered. A rule that passes can still fail to compile against a
particular type (unknown property, operator/type mismatch, bad value).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from criteria_engine.compiler.operators import OperatorRegistry, get_default_registry
from .models import CriterionLike, RuleLike


# Leading letter, underscore or '@', then letters, digits or underscores
PROPERTY_NAME_PATTERN = re.compile(r"(?:@|[^\W\d])\w*")


@dataclass(frozen=True)
class RuleValidationError:
    """A syntactic defect in a rule definition."""

    error_message: str

    def __str__(self) -> str:
        return self.error_message


class RuleValidator:
    """Validates rule definitions before they are used."""

    def __init__(self, registry: OperatorRegistry | None = None):
        self.registry = registry if registry is not None else get_default_registry()

    def validate_rule(self, rule: RuleLike) -> list[RuleValidationError]:
        """Validate a rule.

        Args:
            rule: The rule to validate

        Returns:
            Validation errors for the rule; empty if none were found

        Raises:
            ValueError: If no rule is given
        """
        if rule is None:
            raise ValueError("rule must not be None")

        criteria = list(rule.criteria)
        if not criteria:
            return [RuleValidationError("The rule has no criteria.")]

        errors: list[RuleValidationError] = []
        for criterion in criteria:
            errors.extend(self.validate_criterion(criterion))
        return errors

    def validate_criterion(self, criterion: CriterionLike) -> list[RuleValidationError]:
        return self.validate_property_path(criterion) + self.validate_operator(criterion)

    def validate_property_path(self, criterion: CriterionLike) -> list[RuleValidationError]:
        """One error per segment that is not a valid property name."""
        if criterion.property_path is None:
            return [RuleValidationError("No property path is provided.")]

        return [
            RuleValidationError(
                f"Property path '{criterion.property_path}' is not a valid series of property names."
            )
            for name in criterion.property_path.split(".")
            if not PROPERTY_NAME_PATTERN.fullmatch(name)
        ]

    def validate_operator(self, criterion: CriterionLike) -> list[RuleValidationError]:
        if self.is_known_operator(criterion.operator_name):
            return []
        return [RuleValidationError(f"Operator '{criterion.operator_name}' is not a recognised operator.")]

    def is_known_operator(self, operator_name: str | None) -> bool:
        return operator_name in self.registry


def validate_rule(rule: RuleLike, registry: OperatorRegistry | None = None) -> list[RuleValidationError]:
    """Convenience function to validate a single rule."""
    return RuleValidator(registry).validate_rule(rule)
