"""
Discovery of ``@service`` providers in an explicit set of modules.
"""

from __future__ import annotations

import inspect
import logging
from types import ModuleType
from typing import Any

from .markers import Service, find_marker

logger = logging.getLogger(__name__)


def find_services(*modules: ModuleType) -> list[tuple[Any, Any]]:
    """
    Collect the lazy service providers defined in the given modules.

    Marked classes yield ``(contract, cls)`` where the contract defaults to
    the class itself. Marked functions, and marked static methods of classes
    defined in the module, yield ``(contract, function)`` where a missing
    contract is left as None to be taken from the return annotation.

    Only members defined in a module are considered, not the ones it imports.

    Returns:
        Pairs suitable for ``Container.bind_lazy_from_registry``, in definition order
    """
    found: list[tuple[Any, Any]] = []

    for module in modules:
        for member in vars(module).values():
            if getattr(member, "__module__", None) != module.__name__:
                continue

            if inspect.isclass(member):
                marker = find_marker(member, Service)
                if marker is not None:
                    found.append((marker.key_type or member, member))
                found.extend(_static_services(member))
            elif inspect.isfunction(member):
                marker = find_marker(member, Service)
                if marker is not None:
                    found.append((marker.key_type, member))

    logger.debug("Found %d service providers in %d modules", len(found), len(modules))
    return found


def _static_services(cls: type) -> list[tuple[Any, Any]]:
    found: list[tuple[Any, Any]] = []
    for attribute in vars(cls).values():
        if not isinstance(attribute, staticmethod):
            continue
        marker = find_marker(attribute, Service)
        if marker is not None:
            found.append((marker.key_type, attribute.__func__))
    return found
