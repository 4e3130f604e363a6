"""
Compiler package.

Turns rules into predicates for a fixed root type: property paths are
resolved against declared types, operators are looked up in a registry,
and criterion values are coerced once, at compile time.
"""

from .types import PropertyType
from .paths import AccessStep, PropertyAccessor, readable_property_type, resolve_property_path
from .coercion import coerce_argument
from .operators import (
    Comparison,
    OperatorBuilder,
    OperatorRegistry,
    create_default_registry,
    get_default_registry,
    reset_default_registry,
)
from .compiler import CompiledCriterion, CompiledPredicate, PredicateCompiler, compile_rule

__all__ = [
    # Types
    "PropertyType",
    # Paths
    "AccessStep",
    "PropertyAccessor",
    "readable_property_type",
    "resolve_property_path",
    # Coercion
    "coerce_argument",
    # Operators
    "Comparison",
    "OperatorBuilder",
    "OperatorRegistry",
    "create_default_registry",
    "get_default_registry",
    "reset_default_registry",
    # Compiler
    "CompiledCriterion",
    "CompiledPredicate",
    "PredicateCompiler",
    "compile_rule",
]
