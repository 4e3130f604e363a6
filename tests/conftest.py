"""Pytest fixtures for test suite."""

import pytest

from criteria_engine.compiler.operators import reset_default_registry
from criteria_engine.rules import Rule, RuleCriterion
from tests.models import Player, Response


# =============================================================================
# Object Fixtures
# =============================================================================


@pytest.fixture
def player() -> Player:
    """Steve, who answered 42."""
    return Player(name="Steve", response=Response(answer=42, milliseconds_to_reply=1423))


# =============================================================================
# Rule Fixtures
# =============================================================================


@pytest.fixture
def not_steve_rule() -> Rule:
    """Greater than 12, but not 13, and not Steve."""
    return Rule(
        name="Greater than 12, but not 13, and not Steve",
        criteria=[
            RuleCriterion(property_path="response.answer", operator_name="GreaterThan", value="12"),
            RuleCriterion(property_path="response.answer", operator_name="NotEqual", value="13"),
            RuleCriterion(property_path="name", operator_name="NotEqual", value="Steve"),
        ],
    )


@pytest.fixture
def answer_rule() -> Rule:
    """Is the answer to life."""
    return Rule(
        name="Is the answer to life",
        criteria=[
            RuleCriterion(property_path="response.answer", operator_name="Equal", value="42"),
        ],
    )


@pytest.fixture
def example_rules(not_steve_rule: Rule, answer_rule: Rule) -> list[Rule]:
    """The two example rules, in order."""
    return [not_steve_rule, answer_rule]


@pytest.fixture(autouse=True)
def fresh_default_registry():
    """Keep operator registrations from leaking between tests."""
    reset_default_registry()
    yield
    reset_default_registry()
