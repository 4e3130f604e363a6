"""Rule definitions, validation and loading."""

from .models import CriterionLike, Rule, RuleCriterion, RuleLike
from .validator import RuleValidationError, RuleValidator, validate_rule
from .loader import RuleLoader

__all__ = [
    "CriterionLike",
    "Rule",
    "RuleCriterion",
    "RuleLike",
    "RuleLoader",
    "RuleValidationError",
    "RuleValidator",
    "validate_rule",
]
