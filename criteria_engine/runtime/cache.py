"""
Compiled predicate cache.

Entries are keyed by rule identity, not content: two distinct rule objects
with identical criteria get separate entries, and mutating a rule after it
was compiled does not invalidate its entry.
"""

from __future__ import annotations

from typing import Any, Iterator

from criteria_engine.compiler.compiler import CompiledPredicate


class PredicateCache:
    """Insertion-ordered map from rule object to its compiled predicate.

    Filled once by the evaluator's constructor and only read afterwards.
    """

    def __init__(self):
        # id(rule) -> (rule, predicate); holding the rule keeps its id stable
        self._entries: dict[int, tuple[Any, CompiledPredicate]] = {}

    def get(self, rule: Any) -> CompiledPredicate | None:
        """Get the predicate compiled for this exact rule object.

        Returns:
            CompiledPredicate if cached, None otherwise
        """
        entry = self._entries.get(id(rule))
        if entry is not None and entry[0] is rule:
            return entry[1]
        return None

    def put(self, rule: Any, predicate: CompiledPredicate) -> None:
        """Cache a predicate for a rule.

        Raises:
            ValueError: If the same rule object is already cached
        """
        if rule in self:
            raise ValueError(f"Rule {getattr(rule, 'name', rule)!r} is already cached")
        self._entries[id(rule)] = (rule, predicate)

    def items(self) -> Iterator[tuple[Any, CompiledPredicate]]:
        """Iterate (rule, predicate) pairs in insertion order."""
        return iter(self._entries.values())

    def __contains__(self, rule: object) -> bool:
        entry = self._entries.get(id(rule))
        return entry is not None and entry[0] is rule

    def __len__(self) -> int:
        return len(self._entries)
