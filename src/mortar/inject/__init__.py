"""
mortar.inject - a small dependency injection container.

Bind instances under contract types, declare dependencies with annotated
fields and marked methods, and let the container fill them in:

    class Greeter:
        service: Annotated[IGreetingService, Inject()]

    container = Container()
    container.bind(IGreetingService, EnglishGreetingService())
    greeter = container.inject(Greeter())
"""

from .container import Container
from .discovery import find_services
from .errors import (
    AlreadyBoundError,
    AmbiguousContractError,
    DependencyInjectionError,
    MethodNotFoundError,
    TypeMismatchError,
    UnmetDependencyError,
)
from .factories import DefaultConstructorFactory, DependencyFactory, MethodInvokeFactory
from .introspection import AnnotationTypeDescriptor, TypeDescriptor
from .markers import Inject, InjectOptional, Marker, Service, inject, mark, service
from .model import InjectionPlan
from .updates import UpdateReceiver

__all__ = [
    "AlreadyBoundError",
    "AmbiguousContractError",
    "AnnotationTypeDescriptor",
    "Container",
    "DefaultConstructorFactory",
    "DependencyFactory",
    "DependencyInjectionError",
    "Inject",
    "InjectOptional",
    "InjectionPlan",
    "Marker",
    "MethodInvokeFactory",
    "MethodNotFoundError",
    "Service",
    "TypeDescriptor",
    "TypeMismatchError",
    "UnmetDependencyError",
    "UpdateReceiver",
    "find_services",
    "inject",
    "mark",
    "service",
]
