"""
Marker vocabulary for declaring injectable members and lazy services.

Fields are marked through ``typing.Annotated`` metadata, methods, classes and
factory functions through decorators which attach a marker under
``MARKER_ATTRIBUTE``:

    class Receiver:
        service: Annotated[IService, Inject()]
        maybe: Annotated[IService | None, InjectOptional()] = None

        @inject
        def configure(self, service: IService) -> None: ...

    @service(IService)
    class ServiceImpl(IService): ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")

MARKER_ATTRIBUTE = "__mortar_markers__"


class Marker:
    """Base class for all markers."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))


class Inject(Marker):
    """Required injection of a field or a method."""


class InjectOptional(Marker):
    """Optional injection of a field; left alone when the dependency is unmet."""


@dataclass(frozen=True, eq=True)
class Service(Marker):
    """Provider of a lazily constructed service, optionally under an explicit contract."""

    key_type: type | None = None

    def __repr__(self) -> str:
        key = getattr(self.key_type, "__name__", None)
        return f"Service({key})" if key else "Service()"


def matches(candidate: Any, marker_type: type[Marker]) -> bool:
    """Check whether a piece of metadata is the given marker, as a class or an instance."""
    if isinstance(candidate, type):
        return issubclass(candidate, marker_type)
    return isinstance(candidate, marker_type)


def markers_of(member: Any) -> tuple[Marker, ...]:
    """Markers attached to a function or class by the decorators of this module."""
    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    if isinstance(member, type):
        # A class must not inherit its parent's markers.
        return member.__dict__.get(MARKER_ATTRIBUTE, ())
    return getattr(member, MARKER_ATTRIBUTE, ())


def find_marker(member: Any, marker_type: type[T]) -> T | None:
    """Return the first attached marker of the given type, if any."""
    for candidate in markers_of(member):
        if isinstance(candidate, marker_type):
            return candidate
    return None


def mark(marker: Marker) -> Callable[[T], T]:
    """Decorator attaching an arbitrary marker to a function or class."""

    def decorator(member: T) -> T:
        target: Any = member.__func__ if isinstance(member, (staticmethod, classmethod)) else member
        existing = markers_of(target)
        setattr(target, MARKER_ATTRIBUTE, (*existing, marker))
        return member

    return decorator


def inject(method: T) -> T:
    """Mark an instance method to be called with resolved arguments on every injection."""
    return mark(Inject())(method)


def service(key_type: type | None = None) -> Callable[[T], T]:
    """
    Mark a class or a factory function as a lazily created service.

    ``@service()`` makes the class itself, or the function's return annotation,
    the contract. ``@service(IContract)`` binds under the given contract instead.
    """
    return mark(Service(key_type))
