"""
Reverse index from dependency types to the target types that depend on them.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from .plan import InjectionPlan


class RelationshipIndex:
    """
    Records which target types reference a dependency type.

    The index only grows; it is consulted when a dependency is bound or
    unbound to find the plans that must be evicted.
    """

    def __init__(self) -> None:
        self._dependents: defaultdict[Any, set[type]] = defaultdict(set)

    def add(self, dependency: Any, target_type: type) -> None:
        """Remember that ``target_type`` depends on ``dependency``."""
        self._dependents[dependency].add(target_type)

    def add_plan(self, plan: InjectionPlan) -> None:
        """Register every dependency referenced by a plan."""
        for dependency in plan.dependencies():
            self.add(dependency, plan.target_type)

    def dependents_of(self, dependency: Any) -> frozenset[type]:
        if dependency not in self._dependents:
            return frozenset()
        return frozenset(self._dependents[dependency])
