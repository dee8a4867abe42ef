"""
Calling methods with a mix of explicit and container-resolved arguments.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from typing import Any

from .errors import MethodNotFoundError, TypeMismatchError, type_name
from .introspection import resolved_hints, strip_annotated, strip_optional

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class Invoker:
    """
    Resolves the parameters a caller did not supply and calls the function.

    Args:
        resolve: Required resolution, raising when a contract is unmet
        resolve_optional: Optional resolution, returning None when a contract is unmet
    """

    def __init__(
        self,
        resolve: Callable[[Any], Any],
        resolve_optional: Callable[[Any], Any],
    ):
        self._resolve = resolve
        self._resolve_optional = resolve_optional

    @staticmethod
    def locate(target: Any, method_name: str) -> Callable[..., Any]:
        """
        Find a callable by name.

        On an instance the bound method is returned. On a type only static and
        class methods qualify.

        Raises:
            MethodNotFoundError: If there is no callable with that name
            TypeMismatchError: If a type is asked for one of its instance methods
        """
        if isinstance(target, type):
            try:
                raw = inspect.getattr_static(target, method_name)
            except AttributeError:
                raise MethodNotFoundError(target, method_name) from None
            if inspect.isfunction(raw):
                raise TypeMismatchError(f"{type_name(target)}.{method_name} is not static")
            if not isinstance(raw, (staticmethod, classmethod)) and not callable(raw):
                raise MethodNotFoundError(target, method_name)

        method = getattr(target, method_name, None)
        if method is None or not callable(method):
            raise MethodNotFoundError(target, method_name)
        return method  # type: ignore[no-any-return]

    def call(
        self,
        func: Callable[..., Any],
        args: Sequence[Any] = (),
    ) -> Any:
        """
        Call ``func`` with ``args`` as its leading positional arguments.

        Every remaining parameter without an explicit value is resolved from
        its annotation. Parameters with a default fall back to it when the
        contract is unmet.
        """
        call_args = list(args)
        call_kwargs: dict[str, Any] = {}

        signature = inspect.signature(func)
        if isinstance(func, type):
            hints = resolved_hints(func.__init__)  # type: ignore[misc]
        else:
            hints = resolved_hints(inspect.unwrap(getattr(func, "__func__", func)))
        parameters = list(signature.parameters.values())

        positional = [p for p in parameters if p.kind in _POSITIONAL]
        accepts_varargs = any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in parameters)
        if len(call_args) > len(positional) and not accepts_varargs:
            raise TypeMismatchError(
                f"{_callable_name(func)} takes {len(positional)} positional arguments "
                f"but {len(call_args)} were given"
            )

        supplied = {p.name for p in positional[: len(call_args)]}
        for parameter in parameters:
            if parameter.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            if parameter.name in supplied:
                continue

            value = self._resolve_parameter(func, parameter, hints)
            if value is inspect.Parameter.empty:
                continue
            if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                call_args.append(value)
            else:
                call_kwargs[parameter.name] = value

        return func(*call_args, **call_kwargs)

    def _resolve_parameter(
        self,
        func: Callable[..., Any],
        parameter: inspect.Parameter,
        hints: dict[str, Any],
    ) -> Any:
        if parameter.name not in hints:
            raise TypeMismatchError(
                f"Parameter {parameter.name!r} of {_callable_name(func)} has no type annotation"
            )
        contract, _ = strip_annotated(hints[parameter.name])

        if parameter.default is inspect.Parameter.empty:
            return self._resolve(contract)

        value = self._resolve_optional(strip_optional(contract))
        return inspect.Parameter.empty if value is None else value


def _callable_name(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", repr(func))
