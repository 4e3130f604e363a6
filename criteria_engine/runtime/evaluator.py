"""
Rule evaluators.

RuleEvaluator compiles every rule once, for a fixed root type, and reuses
the compiled predicates on each call. DynamicRuleEvaluator takes the root
type from each instance instead, at the cost of recompiling every rule on
every call.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Iterable, TypeVar

from criteria_engine.compiler.compiler import CompiledPredicate, PredicateCompiler
from criteria_engine.compiler.operators import OperatorRegistry
from criteria_engine.rules.models import RuleLike
from .cache import PredicateCache
from .trace import EvaluationTrace

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R", bound=RuleLike)


class RuleEvaluator(Generic[T, R]):
    """Determines which rules an instance of ``root_type`` matches.

    All rules are compiled in the constructor, so any rule that cannot be
    compiled against the root type fails construction. After that the
    evaluator is read-only and may be shared between threads, provided the
    rule objects themselves are not mutated.
    """

    def __init__(
        self,
        rules: Iterable[R],
        root_type: type[T],
        registry: OperatorRegistry | None = None,
    ):
        """Initialize the evaluator.

        Args:
            rules: The rules to assess instances against
            root_type: Type of the instances that will be evaluated
            registry: Operator registry (uses the global one if not provided)

        Raises:
            ValueError: If the same rule object appears twice
        """
        self._root_type = root_type
        self._compiler = PredicateCompiler(root_type, registry)
        self._rules: tuple[R, ...] = tuple(rules)
        self._cache = PredicateCache()

        for rule in self._rules:
            self._cache.put(rule, self._compiler.compile(rule))

        logger.info(f"Compiled {len(self._rules)} rules for {root_type.__qualname__}")

    @property
    def root_type(self) -> type[T]:
        return self._root_type

    @property
    def rules(self) -> tuple[R, ...]:
        return self._rules

    def is_cached(self, rule: Any) -> bool:
        """Whether this exact rule object was compiled by the constructor."""
        return rule in self._cache

    def get_predicate(self, rule: RuleLike) -> CompiledPredicate[T]:
        """Get the compiled predicate for a rule.

        Rules not given to the constructor are compiled on the spot and not
        cached, so every call pays the compilation cost again.
        """
        predicate = self._cache.get(rule)
        if predicate is None:
            logger.debug(
                f"Rule {getattr(rule, 'name', None)!r} is not cached; compiling for a single evaluation"
            )
            predicate = self._compiler.compile(rule)
        return predicate

    def matches_rule(self, instance: T | None, rule: RuleLike) -> bool:
        """Determine whether an instance matches a rule.

        Args:
            instance: The object to assess
            rule: The rule to assess it against

        Returns:
            True if every criterion holds; False if ``instance`` is None

        Raises:
            ValueError: If no rule is given
        """
        if rule is None:
            raise ValueError("rule must not be None")
        if instance is None:
            return False

        return self.get_predicate(rule)(instance)

    def get_matching_rules(self, instance: T | None) -> list[R]:
        """Get the constructor's rules that an instance matches, in order.

        Returns:
            Matching rules; empty if ``instance`` is None
        """
        if instance is None:
            return []

        return [rule for rule, predicate in self._cache.items() if predicate(instance)]

    def explain(self, instance: T | None, rule: RuleLike) -> EvaluationTrace:
        """Evaluate every criterion of a rule and record each outcome.

        Args:
            instance: The object to assess
            rule: The rule to assess it against

        Returns:
            EvaluationTrace with one step per criterion
        """
        if rule is None:
            raise ValueError("rule must not be None")

        predicate = self.get_predicate(rule)
        trace = EvaluationTrace(rule_name=predicate.rule_name, root_type=self._root_type.__qualname__)
        if instance is None:
            return trace

        for index, compiled in enumerate(predicate):
            actual = compiled.read(instance)
            trace.add_step(
                index=index,
                property_path=compiled.criterion.property_path,
                operator_name=compiled.criterion.operator_name,
                value=compiled.criterion.value,
                actual_value=actual,
                result=compiled.comparison(actual),
            )

        trace.complete()
        return trace

    def get_stats(self) -> dict[str, Any]:
        """Get evaluator statistics.

        Returns:
            Dict with the root type, rule count and compiled criteria count
        """
        return {
            "root_type": self._root_type.__qualname__,
            "rules": len(self._rules),
            "cached_predicates": len(self._cache),
            "compiled_criteria": sum(len(predicate) for _, predicate in self._cache.items()),
        }


class DynamicRuleEvaluator(Generic[R]):
    """Evaluates rules against instances of any type.

    The root type is taken from each instance, and a fresh RuleEvaluator is
    built per call. Nothing is cached between calls; prefer RuleEvaluator
    when the type is known up front.
    """

    def __init__(self, rules: Iterable[R], registry: OperatorRegistry | None = None):
        self._rules: tuple[R, ...] = tuple(rules)
        self._registry = registry

    @property
    def rules(self) -> tuple[R, ...]:
        return self._rules

    def evaluator_for(self, instance: Any) -> RuleEvaluator[Any, R]:
        """Build a typed evaluator for the instance's runtime type."""
        return RuleEvaluator(self._rules, type(instance), self._registry)

    def matches_rule(self, instance: Any, rule: RuleLike) -> bool:
        """Determine whether an instance matches a rule.

        Every rule given to the constructor is compiled for the instance's
        type, so an uncompilable rule anywhere in the set fails the call.
        """
        if rule is None:
            raise ValueError("rule must not be None")
        if instance is None:
            return False

        return self.evaluator_for(instance).matches_rule(instance, rule)

    def get_matching_rules(self, instance: Any) -> list[R]:
        """Get the rules that an instance matches, in order."""
        if instance is None:
            return []

        return self.evaluator_for(instance).get_matching_rules(instance)

    def explain(self, instance: Any, rule: RuleLike) -> EvaluationTrace:
        if rule is None:
            raise ValueError("rule must not be None")
        if instance is None:
            return EvaluationTrace(rule_name=getattr(rule, "name", None), root_type=type(None).__qualname__)

        return self.evaluator_for(instance).explain(instance, rule)
