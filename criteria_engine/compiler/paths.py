"""
Property path resolution.

Turns a dotted path such as ``response.answer`` into an accessor chain
against a root type. Resolution only inspects declared types, so it runs
once per (root type, path) at compile time; evaluation then walks the
pre-resolved steps with plain attribute reads.
"""

from __future__ import annotations

import inspect
import sys
from dataclasses import dataclass
from functools import cached_property, lru_cache
from typing import Any

from pydantic import BaseModel

from criteria_engine.core.exceptions import InvalidPropertyPath
from .types import PropertyType


_MISSING = object()


@dataclass(frozen=True)
class AccessStep:
    """Read one named property, yielding a value of ``property_type``."""

    name: str
    property_type: PropertyType


@dataclass(frozen=True)
class PropertyAccessor:
    """A resolved property path: the ordered reads from root to leaf."""

    root_type: type
    property_path: str
    steps: tuple[AccessStep, ...]

    @property
    def property_type(self) -> PropertyType:
        """Declared type of the leaf property."""
        return self.steps[-1].property_type

    def read(self, instance: Any) -> Any:
        """Read the leaf value from an instance of the root type.

        A ``None`` part-way along the path yields ``None`` for the leaf.
        """
        value = instance
        for step in self.steps:
            if value is None:
                return None
            value = getattr(value, step.name)
        return value


def readable_property_type(owner: Any, name: str) -> PropertyType | None:
    """Find the declared type of a readable property on ``owner``.

    Readable means a ``property`` (or ``cached_property``) with a getter, a
    pydantic model field, or an annotated class attribute (dataclass fields,
    NamedTuple fields, plain annotated classes). Write-only properties and
    unannotated attributes do not qualify.

    Returns:
        The property's type descriptor, or None if no readable property exists.
    """
    if not isinstance(owner, type):
        return None

    attribute = inspect.getattr_static(owner, name, _MISSING)
    if isinstance(attribute, property):
        if attribute.fget is None:
            return None
        return _return_type(attribute.fget)
    if isinstance(attribute, cached_property):
        return _return_type(attribute.func)

    if issubclass(owner, BaseModel):
        field = owner.model_fields.get(name)
        if field is None:
            return None
        return PropertyType.from_annotation(field.annotation)

    for klass in owner.__mro__:
        if klass is object:
            continue
        annotations = inspect.get_annotations(klass)
        if name in annotations:
            module = sys.modules.get(klass.__module__)
            return _declared_type(annotations[name], getattr(module, "__dict__", {}), dict(vars(klass)))

    return None


def _return_type(getter: Any) -> PropertyType | None:
    annotations = inspect.get_annotations(getter)
    return _declared_type(annotations.get("return", Any), getattr(getter, "__globals__", {}), None)


def _declared_type(annotation: Any, globalns: dict, localns: dict | None) -> PropertyType | None:
    """Evaluate a string annotation against its declaring module.

    Names the module cannot see (classes local to a function, imports made
    only under ``TYPE_CHECKING``) leave the property unreadable.
    """
    if isinstance(annotation, str):
        try:
            annotation = eval(annotation, globalns, localns)
        except NameError:
            return None
    return PropertyType.from_annotation(annotation)


@lru_cache(maxsize=4096)
def resolve_property_path(root_type: type, property_path: str) -> PropertyAccessor:
    """Resolve a dotted property path against a root type.

    Args:
        root_type: The type the path starts from
        property_path: Dot-separated property names, e.g. ``response.answer``

    Returns:
        PropertyAccessor for reading the leaf value

    Raises:
        InvalidPropertyPath: If a segment is not a readable property of the
            type reached so far
    """
    steps: list[AccessStep] = []
    current: Any = root_type

    for name in (property_path or "").split("."):
        property_type = readable_property_type(current, name)
        if property_type is None:
            raise InvalidPropertyPath(root_type, property_path, name, current)

        steps.append(AccessStep(name=name, property_type=property_type))
        current = property_type.runtime_type or property_type.python_type

    return PropertyAccessor(root_type=root_type, property_path=property_path, steps=tuple(steps))
