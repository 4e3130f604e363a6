"""
Declared-type descriptors for resolved properties.

A property's annotation is reduced to the underlying Python type plus a
nullability flag, which is all the operator table needs to pick a
type-correct comparison.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin
from uuid import UUID

from criteria_engine.core.exceptions import format_type_name


VALUE_TYPES: tuple[type, ...] = (
    bool,
    int,
    float,
    Decimal,
    datetime,
    date,
    time,
    timedelta,
    UUID,
    Enum,
)
"""Scalar types that can only be absent when declared Optional."""

ORDERABLE_TYPES: tuple[type, ...] = (
    int,
    float,
    Decimal,
    str,
    datetime,
    date,
    time,
    timedelta,
    UUID,
)
"""Types that support GreaterThan/LessThan style comparisons."""


@dataclass(frozen=True)
class PropertyType:
    """The declared type of a property, with Optional unwrapped."""

    python_type: Any
    """The annotation with any ``None`` member removed."""

    nullable: bool = False
    """Whether the annotation admits ``None``."""

    @classmethod
    def from_annotation(cls, annotation: Any) -> PropertyType:
        """Build a descriptor from a type annotation.

        ``Optional[X]`` and ``X | None`` become ``X`` with ``nullable=True``.
        ``Annotated`` and ``ClassVar`` wrappers are stripped. Unions of more
        than one non-None member are kept as-is and treated as opaque.
        """
        origin = get_origin(annotation)

        if origin is Annotated or origin is ClassVar:
            return cls.from_annotation(get_args(annotation)[0])

        if origin is Union or origin is types.UnionType:
            members = get_args(annotation)
            remaining = tuple(m for m in members if m is not type(None))
            nullable = len(remaining) != len(members)
            if len(remaining) == 1:
                inner = cls.from_annotation(remaining[0])
                return cls(inner.python_type, nullable or inner.nullable)
            return cls(annotation, nullable)

        if annotation is None or annotation is type(None):
            return cls(type(None), True)

        return cls(annotation, False)

    @property
    def runtime_type(self) -> type | None:
        """The concrete class behind the annotation, if there is one."""
        origin = get_origin(self.python_type)
        if origin is Union or origin is types.UnionType:
            return None
        if origin is not None:
            return origin if isinstance(origin, type) else None
        if isinstance(self.python_type, type):
            return self.python_type
        return None

    @property
    def display_type(self) -> Any:
        return self.runtime_type or self.python_type

    @property
    def is_enum(self) -> bool:
        runtime_type = self.runtime_type
        return runtime_type is not None and issubclass(runtime_type, Enum)

    @property
    def is_string(self) -> bool:
        runtime_type = self.runtime_type
        return runtime_type is not None and issubclass(runtime_type, str) and not self.is_enum

    @property
    def is_boolean(self) -> bool:
        return self.runtime_type is bool

    @property
    def is_value_type(self) -> bool:
        runtime_type = self.runtime_type
        return runtime_type is not None and issubclass(runtime_type, VALUE_TYPES)

    @property
    def is_non_nullable_value_type(self) -> bool:
        return self.is_value_type and not self.nullable

    @property
    def is_orderable(self) -> bool:
        runtime_type = self.runtime_type
        return runtime_type is not None and issubclass(runtime_type, ORDERABLE_TYPES)

    def __str__(self) -> str:
        name = format_type_name(self.display_type)
        return f"{name} | None" if self.nullable else name
