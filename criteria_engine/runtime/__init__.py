"""
Runtime package.

Evaluates rules against object instances using compiled predicates.
"""

from .cache import PredicateCache
from .trace import CriterionTrace, EvaluationTrace
from .evaluator import DynamicRuleEvaluator, RuleEvaluator

__all__ = [
    # Cache
    "PredicateCache",
    # Trace
    "CriterionTrace",
    "EvaluationTrace",
    # Evaluators
    "RuleEvaluator",
    "DynamicRuleEvaluator",
]
