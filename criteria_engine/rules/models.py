"""Rule and criterion data containers.

The engine only needs the duck-typed shapes in ``RuleLike`` and
``CriterionLike``; the pydantic models here are the concrete containers used
by the loader and are a convenient default for callers.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator


@runtime_checkable
class CriterionLike(Protocol):
    """A single property-path / operator / value triple."""

    property_path: str
    operator_name: str
    value: str | None


@runtime_checkable
class RuleLike(Protocol):
    """An ordered conjunction of criteria. Compared by identity."""

    @property
    def criteria(self) -> Sequence[CriterionLike]: ...


class RuleCriterion(BaseModel):
    """A criterion a value must satisfy for its rule to match."""

    property_path: str
    operator_name: str
    value: str | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("value", mode="before")
    @classmethod
    def _value_as_text(cls, value: Any) -> Any:
        # YAML authors write `value: 42` or `value: true`
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class Rule(BaseModel):
    """A named, ordered list of criteria that must all hold."""

    name: str = ""
    description: str | None = None
    criteria: list[RuleCriterion] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    def add(self, property_path: str, operator_name: str, value: str | None = None) -> Rule:
        """Append a criterion and return the rule, for fluent construction."""
        self.criteria.append(
            RuleCriterion(property_path=property_path, operator_name=operator_name, value=value)
        )
        return self
