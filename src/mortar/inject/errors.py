"""
Exception types raised by the injection container.
"""

from __future__ import annotations

from typing import Any


def type_name(target: Any) -> str:
    """Human readable name of a contract or target type."""
    module = getattr(target, "__module__", None)
    qualname = getattr(target, "__qualname__", None)
    if qualname is None:
        return str(target)
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


class DependencyInjectionError(Exception):
    """Base class for all container errors."""


class AlreadyBoundError(DependencyInjectionError):
    """Raised when binding a contract that already has a live binding."""

    def __init__(self, contract: type):
        self.contract = contract
        super().__init__(f"Already bound: {type_name(contract)}")


class TypeMismatchError(DependencyInjectionError):
    """Raised when a type or member does not fit the way it is being bound or invoked."""


class UnmetDependencyError(DependencyInjectionError):
    """Raised when a required dependency has neither a binding nor a lazy factory."""

    def __init__(self, contract: Any, message: str | None = None):
        self.contract = contract
        super().__init__(message or f"Unmet dependency: {type_name(contract)}.")


class AmbiguousContractError(UnmetDependencyError):
    """Raised when an unmet dependency is a concrete class rather than an interface."""

    def __init__(self, contract: Any):
        super().__init__(
            contract,
            f"Unmet dependency: {type_name(contract)}. "
            "Did you mean to specify an interface instead?",
        )


class MethodNotFoundError(DependencyInjectionError):
    """Raised when a method to invoke cannot be located by name."""

    def __init__(self, target: Any, method_name: str):
        self.target = target
        self.method_name = method_name
        owner = target if isinstance(target, type) else type(target)
        super().__init__(f"{type_name(owner)} has no callable named {method_name!r}")
