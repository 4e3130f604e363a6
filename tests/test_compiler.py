"""
Tests for the rule compiler.

Tests predicate compilation, conjunction, and compile-time errors.
"""

import pytest

from criteria_engine.compiler import (
    CompiledPredicate,
    OperatorRegistry,
    PredicateCompiler,
    compile_rule,
    create_default_registry,
    get_default_registry,
)
from criteria_engine.core.exceptions import (
    InvalidOperatorForPropertyType,
    InvalidPropertyPath,
    UnrecognizedOperator,
)
from criteria_engine.rules import Rule, RuleCriterion
from tests.models import Player, Response, Sample


class TestPredicateCompiler:
    """Test compiling rules into predicates."""

    def test_compile_simple_rule(self, answer_rule, player):
        """Test a single-criterion rule."""
        predicate = PredicateCompiler(Player).compile(answer_rule)

        assert isinstance(predicate, CompiledPredicate)
        assert predicate.root_type is Player
        assert predicate.rule_name == "Is the answer to life"
        assert len(predicate) == 1
        assert predicate(player) is True

    def test_compiled_criteria_keep_source(self, not_steve_rule):
        """Test each compiled criterion refers back to its criterion, in order."""
        predicate = compile_rule(not_steve_rule, Player)

        assert [c.criterion for c in predicate] == list(not_steve_rule.criteria)
        assert [c.accessor.property_path for c in predicate] == [
            "response.answer",
            "response.answer",
            "name",
        ]

    def test_empty_rule_matches_everything(self):
        """Test a rule with no criteria compiles to a constant true."""
        predicate = compile_rule(Rule(name="Anything"), Player)

        assert len(predicate) == 0
        assert predicate(Player()) is True
        assert predicate(Player(name="Steve")) is True

    def test_conjunction(self, not_steve_rule):
        """Test the predicate is the AND of its criteria."""
        predicate = compile_rule(not_steve_rule, Player)
        players = [
            Player(name="Steve", response=Response(answer=42)),
            Player(name="Bob", response=Response(answer=42)),
            Player(name="Bob", response=Response(answer=13)),
            Player(name="Bob", response=Response(answer=5)),
            Player(name=None, response=None),
        ]

        for candidate in players:
            assert predicate(candidate) is all(criterion(candidate) for criterion in predicate)

    def test_short_circuits(self):
        """Test later criteria are not evaluated once one fails."""
        calls = []

        def build_spy(property_type, argument, operator_name):
            def comparison(value):
                calls.append(value)
                return True

            return comparison

        registry = create_default_registry()
        registry.register("Spy", build_spy)
        rule = Rule(name="Spy").add("name", "Equal", "Bob").add("name", "Spy")

        compile_rule(rule, Player, registry)(Player(name="Steve"))
        assert calls == []

        compile_rule(rule, Player, registry)(Player(name="Bob"))
        assert calls == ["Bob"]

    def test_null_propagation(self, answer_rule):
        """Test a missing nested object reads as None instead of raising."""
        predicate = compile_rule(answer_rule, Player)
        assert predicate(Player(name="Steve")) is False

    def test_duck_typed_rule(self, player):
        """Test any object with a criteria sequence compiles."""

        class PlainRule:
            def __init__(self, criteria):
                self.criteria = criteria

        rule = PlainRule([RuleCriterion(property_path="name", operator_name="StartsWith", value="st")])
        predicate = compile_rule(rule, Player)

        assert predicate.rule_name is None
        assert predicate(player) is True

    def test_repr(self, answer_rule):
        """Test the predicate describes itself."""
        text = repr(compile_rule(answer_rule, Player))
        assert "Is the answer to life" in text
        assert "Player" in text


class TestCompileErrors:
    """Test errors raised while compiling."""

    def test_operator_not_valid_for_type(self):
        """Test Contains on an int property."""
        rule = Rule(name="Contains on int").add("test_value", "Contains", "12")

        with pytest.raises(InvalidOperatorForPropertyType):
            compile_rule(rule, Sample)

    def test_misspelled_operator(self):
        """Test an operator name that is not registered."""
        rule = Rule(name="Misspelled").add("test_value", "Equals", "12")

        with pytest.raises(UnrecognizedOperator) as exc_info:
            compile_rule(rule, Sample)
        assert exc_info.value.operator_name == "Equals"

    def test_invalid_path(self):
        """Test a path naming a property the root type lacks."""
        rule = Rule(name="Bad path").add("RootObject.TestValue", "Equal", "12")

        with pytest.raises(InvalidPropertyPath) as exc_info:
            compile_rule(rule, Sample)
        assert exc_info.value.property_name == "RootObject"

    def test_first_bad_criterion_fails_the_rule(self):
        """Test a rule with one bad criterion does not compile at all."""
        rule = Rule(name="Mixed").add("name", "Equal", "Steve").add("name", "IsTrue")

        with pytest.raises(InvalidOperatorForPropertyType):
            compile_rule(rule, Player)

    def test_custom_registry_is_used(self):
        """Test operators missing from a custom registry are unrecognized."""
        registry = create_default_registry()
        registry.unregister("Equal")
        rule = Rule(name="Equal").add("name", "Equal", "Steve")

        with pytest.raises(UnrecognizedOperator):
            compile_rule(rule, Player, registry)

    def test_empty_registry_is_not_replaced(self):
        """Test an explicitly passed registry is used even before it has operators."""
        rule = Rule(name="Equal").add("name", "Equal", "Steve")

        with pytest.raises(UnrecognizedOperator):
            compile_rule(rule, Player, OperatorRegistry())

        assert PredicateCompiler(Player, OperatorRegistry()).registry is not get_default_registry()
