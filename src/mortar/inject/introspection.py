"""
Type introspection used to discover injectable members.

The container only talks to the abstract ``TypeDescriptor``; the default
``AnnotationTypeDescriptor`` reads ``typing.Annotated`` field metadata and the
markers attached by ``mortar.inject.markers`` decorators.
"""

from __future__ import annotations

import inspect
import types
import typing
from abc import ABC, ABCMeta, abstractmethod
from collections.abc import Callable, Iterator
from typing import Annotated, Any, Union, get_args, get_origin

from .errors import TypeMismatchError, type_name
from .markers import Marker, markers_of, matches
from .model import FieldInjection, MethodInjection


def is_contract(candidate: Any) -> bool:
    """Check whether a type is interface-like: an abstract class or a protocol."""
    if not isinstance(candidate, type):
        return False
    if getattr(candidate, "_is_protocol", False):
        return True
    return isinstance(candidate, ABCMeta) and inspect.isabstract(candidate)


def strip_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *metadata]`` into ``T`` and its metadata."""
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, tuple(metadata)
    return hint, ()


def strip_optional(hint: Any) -> Any:
    """Reduce ``T | None`` and ``Optional[T]`` to ``T``; other hints are returned unchanged."""
    if get_origin(hint) in (Union, types.UnionType):
        members = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return hint


def resolved_hints(obj: Any) -> dict[str, Any]:
    """Resolve annotations of a class or function, keeping ``Annotated`` metadata."""
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except NameError as e:
        raise TypeMismatchError(f"Cannot resolve annotations of {type_name(obj)}: {e}") from e


def parameter_contracts(func: Callable[..., Any], skip_receiver: bool) -> list[tuple[str, Any]]:
    """
    List the parameters of a function with their contract types, in declared order.

    Args:
        func: Plain function (not a bound method)
        skip_receiver: Drop the first positional parameter (``self``)

    Raises:
        TypeMismatchError: If a parameter carries no type annotation
    """
    hints = resolved_hints(func)
    parameters = list(inspect.signature(func).parameters.values())
    if skip_receiver and parameters:
        parameters = parameters[1:]

    result: list[tuple[str, Any]] = []
    for parameter in parameters:
        if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            continue
        if parameter.name not in hints:
            raise TypeMismatchError(
                f"Parameter {parameter.name!r} of {func.__qualname__} has no type annotation"
            )
        contract, _ = strip_annotated(hints[parameter.name])
        result.append((parameter.name, contract))
    return result


class TypeDescriptor(ABC):
    """Capability to enumerate the injectable members of a type."""

    @abstractmethod
    def injectable_fields(
        self,
        target_type: type,
        required_marker: type[Marker],
        optional_marker: type[Marker],
    ) -> list[FieldInjection]:
        """List injectable fields of a type, including inherited ones, in a stable order."""

    @abstractmethod
    def injectable_methods(self, target_type: type, marker: type[Marker]) -> list[MethodInjection]:
        """List injectable instance methods of a type, including inherited ones, in a stable order."""

    @abstractmethod
    def has_marker(self, member: Any, marker: type[Marker]) -> bool:
        """Check whether a member carries the given marker."""


class AnnotationTypeDescriptor(TypeDescriptor):
    """
    Descriptor reading ``Annotated`` field metadata and decorator markers.

    Members are listed base-to-derived along the MRO. A member redefined in a
    subclass keeps the position of its first definition but takes the
    subclass's definition. A method marked anywhere along the MRO stays
    injectable when overridden without the marker.
    """

    def injectable_fields(
        self,
        target_type: type,
        required_marker: type[Marker],
        optional_marker: type[Marker],
    ) -> list[FieldInjection]:
        hints = resolved_hints(target_type)
        fields: list[FieldInjection] = []

        for name in self._declared_fields(target_type):
            hint = hints.get(name)
            if hint is None:
                continue
            base, metadata = strip_annotated(hint)
            if any(matches(m, required_marker) for m in metadata):
                fields.append(FieldInjection(name, strip_optional(base), optional=False))
            elif any(matches(m, optional_marker) for m in metadata):
                fields.append(FieldInjection(name, strip_optional(base), optional=True))

        return fields

    def injectable_methods(self, target_type: type, marker: type[Marker]) -> list[MethodInjection]:
        methods: list[MethodInjection] = []

        for name, definitions in self._declared_methods(target_type).items():
            if not any(self.has_marker(member, marker) for member in definitions):
                continue
            # The most-derived definition is the one getattr calls.
            contracts = tuple(
                contract for _, contract in parameter_contracts(definitions[-1], skip_receiver=True)
            )
            methods.append(MethodInjection(name, contracts))

        return methods

    def has_marker(self, member: Any, marker: type[Marker]) -> bool:
        return any(isinstance(m, marker) for m in markers_of(member))

    @staticmethod
    def _hierarchy(target_type: type) -> Iterator[type]:
        for klass in reversed(target_type.__mro__):
            if klass is not object:
                yield klass

    def _declared_fields(self, target_type: type) -> list[str]:
        names: dict[str, None] = {}
        for klass in self._hierarchy(target_type):
            for name in inspect.get_annotations(klass):
                names.setdefault(name, None)
        return list(names)

    def _declared_methods(self, target_type: type) -> dict[str, list[Any]]:
        """Map each method name to its definitions, base-to-derived."""
        methods: dict[str, list[Any]] = {}
        for klass in self._hierarchy(target_type):
            for name, member in vars(klass).items():
                if inspect.isfunction(member):
                    methods.setdefault(name, []).append(member)
                elif name in methods:
                    # Shadowed by a non-function attribute.
                    del methods[name]
        return methods
