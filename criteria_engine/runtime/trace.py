"""
Evaluation traces.

Records how each criterion of a rule fared against one instance, for
explaining why a rule did or did not match. Unlike normal evaluation,
tracing does not short-circuit: every criterion is reported.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class CriterionTrace(BaseModel):
    """Outcome of a single criterion."""

    index: int
    """Position of the criterion in the rule."""

    property_path: str
    """The property path that was read."""

    operator_name: str
    """The operator applied."""

    value: str | None = None
    """The criterion's value text."""

    actual_value: Any = None
    """The property value read from the instance."""

    result: bool
    """Whether the criterion held."""


class EvaluationTrace(BaseModel):
    """Per-criterion record of a rule evaluated against one instance."""

    rule_name: str | None = None
    """Name of the rule, if it has one."""

    root_type: str
    """Qualified name of the type the rule was compiled for."""

    started_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    completed_at: str | None = None

    evaluated: bool = False
    """False when no instance was given."""

    matched: bool = False
    """Whether every criterion held."""

    steps: list[CriterionTrace] = Field(default_factory=list)

    def add_step(
        self,
        index: int,
        property_path: str,
        operator_name: str,
        value: str | None,
        actual_value: Any,
        result: bool,
    ) -> CriterionTrace:
        """Record a criterion outcome.

        Returns:
            The created CriterionTrace
        """
        step = CriterionTrace(
            index=index,
            property_path=property_path,
            operator_name=operator_name,
            value=value,
            actual_value=actual_value,
            result=result,
        )
        self.steps.append(step)
        return step

    def complete(self) -> None:
        """Mark the trace as finished and compute the overall match."""
        self.evaluated = True
        self.matched = all(step.result for step in self.steps)
        self.completed_at = datetime.now(timezone.utc).isoformat()

    @property
    def failed_steps(self) -> list[CriterionTrace]:
        return [step for step in self.steps if not step.result]
