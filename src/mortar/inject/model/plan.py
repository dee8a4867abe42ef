"""
Injection plans and their per-type cache.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldInjection:
    """An injectable field and the contract it requires."""

    name: str
    contract: Any
    optional: bool = False

    def __str__(self) -> str:
        contract_name = getattr(self.contract, "__name__", str(self.contract))
        suffix = "?" if self.optional else ""
        return f"{self.name}: {contract_name}{suffix}"


@dataclass(frozen=True)
class MethodInjection:
    """An injectable method and the contracts of its parameters, in declared order."""

    name: str
    contracts: tuple[Any, ...] = ()

    def __str__(self) -> str:
        args = ", ".join(getattr(c, "__name__", str(c)) for c in self.contracts)
        return f"{self.name}({args})"


@dataclass(frozen=True)
class InjectionPlan:
    """
    The injectable members discovered on a target type.

    Fields are applied before methods; both lists follow base-to-derived
    declaration order.
    """

    target_type: type
    fields: tuple[FieldInjection, ...] = ()
    methods: tuple[MethodInjection, ...] = ()

    def dependencies(self) -> Iterator[Any]:
        """Yield every contract referenced by this plan, once each."""
        seen: set[Any] = set()
        for contract in [f.contract for f in self.fields] + [c for m in self.methods for c in m.contracts]:
            if contract not in seen:
                seen.add(contract)
                yield contract

    def __str__(self) -> str:
        members = [str(f) for f in self.fields] + [str(m) for m in self.methods]
        return f"{self.target_type.__name__} [{'; '.join(members)}]"


class PlanCache:
    """Memoizes injection plans per target type until they are invalidated."""

    def __init__(self) -> None:
        self._plans: dict[type, InjectionPlan] = {}

    def get(self, target_type: type) -> InjectionPlan | None:
        return self._plans.get(target_type)

    def put(self, plan: InjectionPlan) -> None:
        self._plans[plan.target_type] = plan

    def invalidate(self, target_type: type) -> bool:
        """Evict the plan of a type; returns whether one was cached."""
        return self._plans.pop(target_type, None) is not None
