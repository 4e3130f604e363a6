"""Criteria Engine - Declarative matching rules for typed Python objects.

Rules are ordered conjunctions of ``property_path / operator_name / value``
criteria, authored as data (often YAML) and evaluated against business
objects at runtime:

    evaluator = RuleEvaluator(rules, Player)
    evaluator.get_matching_rules(player)

Each rule is compiled once per root type: property paths are resolved
against declared annotations, and criterion values are coerced to the
property's native type before any instance is evaluated.
"""

# Errors and configuration
from .core import (
    InvalidArgumentTypeForOperator,
    InvalidOperatorForPropertyType,
    InvalidPropertyPath,
    RulesEngineError,
    Settings,
    UnrecognizedOperator,
    configure_logging,
    get_settings,
)

# Rule definitions
from .rules import (
    CriterionLike,
    Rule,
    RuleCriterion,
    RuleLike,
    RuleLoader,
    RuleValidationError,
    RuleValidator,
    validate_rule,
)

# Compilation
from .compiler import (
    CompiledPredicate,
    OperatorRegistry,
    PredicateCompiler,
    compile_rule,
    create_default_registry,
    get_default_registry,
)

# Evaluation
from .runtime import DynamicRuleEvaluator, EvaluationTrace, RuleEvaluator

__version__ = "0.1.0"

__all__ = [
    # Errors
    "RulesEngineError",
    "InvalidPropertyPath",
    "UnrecognizedOperator",
    "InvalidOperatorForPropertyType",
    "InvalidArgumentTypeForOperator",
    # Config
    "Settings",
    "configure_logging",
    "get_settings",
    # Rules
    "CriterionLike",
    "Rule",
    "RuleCriterion",
    "RuleLike",
    "RuleLoader",
    "RuleValidationError",
    "RuleValidator",
    "validate_rule",
    # Compiler
    "CompiledPredicate",
    "OperatorRegistry",
    "PredicateCompiler",
    "compile_rule",
    "create_default_registry",
    "get_default_registry",
    # Runtime
    "RuleEvaluator",
    "DynamicRuleEvaluator",
    "EvaluationTrace",
]
