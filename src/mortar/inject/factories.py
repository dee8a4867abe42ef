"""
Factories producing lazily bound dependencies on demand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from .errors import type_name


class DependencyFactory(ABC):
    """Produces one dependency instance when asked."""

    @abstractmethod
    def get(self) -> Any:
        """Create the dependency instance."""


class DefaultConstructorFactory(DependencyFactory):
    """Creates a dependency by calling its no-argument constructor."""

    def __init__(self, cls: type):
        self._cls = cls

    @property
    def cls(self) -> type:
        return self._cls

    def get(self) -> Any:
        return self._cls()

    def __repr__(self) -> str:
        return f"DefaultConstructorFactory({type_name(self._cls)})"


class MethodInvokeFactory(DependencyFactory):
    """
    Creates a dependency by calling a method.

    Args:
        method: Function or static method to call
        receiver: Optional object passed as the first argument
        args: Positional arguments captured for the call
    """

    def __init__(
        self,
        method: Callable[..., Any],
        receiver: Any = None,
        args: Sequence[Any] = (),
    ):
        self._method = method
        self._receiver = receiver
        self._args = tuple(args)

    @property
    def method(self) -> Callable[..., Any]:
        return self._method

    def get(self) -> Any:
        if self._receiver is not None:
            return self._method(self._receiver, *self._args)
        return self._method(*self._args)

    def __repr__(self) -> str:
        return f"MethodInvokeFactory({getattr(self._method, '__qualname__', self._method)!s})"
