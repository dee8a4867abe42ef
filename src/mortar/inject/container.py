"""
Container - binds dependencies by contract type and injects them into objects.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from .errors import (
    AlreadyBoundError,
    AmbiguousContractError,
    TypeMismatchError,
    UnmetDependencyError,
    type_name,
)
from .factories import DefaultConstructorFactory, DependencyFactory, MethodInvokeFactory
from .introspection import (
    AnnotationTypeDescriptor,
    TypeDescriptor,
    is_contract,
    resolved_hints,
    strip_annotated,
    strip_optional,
)
from .invocation import Invoker
from .markers import Inject, InjectOptional, Marker, Service, find_marker
from .model import InjectionPlan, PlanCache, RelationshipIndex
from .updates import UpdateBroadcaster

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Holds at most one live binding per contract type, plus lazy factories
    realised on first resolution. Objects are injected through their annotated
    fields and marked methods; the members discovered per type are cached as
    an ``InjectionPlan`` and evicted whenever a contract they reference is
    bound or unbound.

    The container is not thread safe: bind, unbind and inject from a single
    thread.
    """

    def __init__(
        self,
        descriptor: TypeDescriptor | None = None,
        inject_marker: type[Marker] = Inject,
        optional_marker: type[Marker] = InjectOptional,
    ):
        """
        Create a new Container.

        Args:
            descriptor: Introspection used to discover injectable members
            inject_marker: Marker type of required fields and injectable methods
            optional_marker: Marker type of optional fields
        """
        self._descriptor = descriptor if descriptor is not None else AnnotationTypeDescriptor()
        self._inject_marker = inject_marker
        self._optional_marker = optional_marker

        self._dependencies: dict[Any, Any] = {}
        self._lazy_factories: dict[Any, DependencyFactory] = {}
        self._released: set[Any] = set()
        self._plans = PlanCache()
        self._relationships = RelationshipIndex()
        self._updates = UpdateBroadcaster()
        self._invoker = Invoker(self.get, self.get_optional)

        self._dependencies[Container] = self

    # Binding

    def bind(self, contract: type[T] | Any, instance: T) -> Container:
        """
        Bind an instance under a contract type and inject its own dependencies.

        Args:
            contract: The type the dependency is looked up by, typically an interface
            instance: The concrete implementation

        Returns:
            This container, for chaining

        Raises:
            AlreadyBoundError: If the contract already has a live binding
        """
        if contract in self._dependencies:
            raise AlreadyBoundError(contract)

        self._invalidate_dependents(contract)
        self._released.discard(contract)
        self._lazy_factories.pop(contract, None)
        self._dependencies[contract] = instance
        logger.debug("Bound %s -> %s", type_name(contract), type_name(type(instance)))

        self.inject(instance)

        if self._updates.add(instance):
            logger.debug("Registered %s for updates", type_name(type(instance)))

        return self

    def unbind(self, contract: type[T] | Any) -> Container:
        """
        Remove the binding, or pending lazy factory, of a contract.

        Objects injected earlier keep their values until they are injected
        again: required members then fail, optional fields are reset to None.
        """
        if not self.has(contract):
            return self

        self._dependencies.pop(contract, None)
        self._lazy_factories.pop(contract, None)

        self._invalidate_dependents(contract)
        self._released.add(contract)
        logger.debug("Unbound %s", type_name(contract))
        return self

    def bind_lazy(self, contract: type[T] | Any, provider: type[T] | DependencyFactory) -> Container:
        """
        Register a lazy dependency, created the first time the contract is resolved.

        Args:
            contract: The contract type, typically an interface
            provider: A concrete type with a no-argument constructor, or a factory

        Raises:
            AlreadyBoundError: If the contract already has a live binding
            TypeMismatchError: If the concrete type does not implement the contract
        """
        if contract in self._dependencies:
            raise AlreadyBoundError(contract)

        if isinstance(provider, DependencyFactory):
            factory = provider
        elif isinstance(provider, type):
            if not _implements(provider, contract):
                raise TypeMismatchError(f"{type_name(provider)} does not implement {type_name(contract)}")
            factory = DefaultConstructorFactory(provider)
        else:
            raise TypeMismatchError(f"{provider!r} is neither a type nor a DependencyFactory")

        self._lazy_factories[contract] = factory
        logger.debug("Bound lazy %s -> %r", type_name(contract), factory)
        return self

    def bind_lazy_method(self, method: Callable[..., Any], contract: Any = None) -> Container:
        """
        Register a lazy dependency provided by calling a static method or function.

        Args:
            method: Function, static method or bound method returning the dependency
            contract: The contract type; defaults to the method's return annotation

        Raises:
            AlreadyBoundError: If the contract already has a live binding
            TypeMismatchError: If the method needs a receiver or has no usable contract
        """
        if isinstance(method, staticmethod):
            method = method.__func__
        if isinstance(method, classmethod):
            raise TypeMismatchError("Unbound classmethod objects cannot be bound lazily; pass Owner.method")

        if inspect.isfunction(method):
            parameters = list(inspect.signature(method).parameters)
            if parameters and parameters[0] == "self":
                raise TypeMismatchError(f"{method.__qualname__} is not static")

        if contract is None:
            target = getattr(method, "__func__", method)
            contract, _ = strip_annotated(resolved_hints(target).get("return"))
            contract = strip_optional(contract)
            if contract is None or contract is type(None):
                raise TypeMismatchError(
                    f"{getattr(method, '__qualname__', method)!s} has no return annotation to bind under"
                )

        if contract in self._dependencies:
            raise AlreadyBoundError(contract)

        self._lazy_factories[contract] = MethodInvokeFactory(method)
        logger.debug("Bound lazy %s -> %s()", type_name(contract), getattr(method, "__qualname__", method))
        return self

    def bind_lazy_from_registry(self, entries: Iterable[Any]) -> Container:
        """
        Register lazy dependencies from an explicit list of providers.

        Each entry is either a ``(contract, provider)`` pair, or a class or
        function marked with ``@service``. Classes are constructed with their
        no-argument constructor, functions are called.
        """
        for entry in entries:
            if isinstance(entry, tuple):
                contract, provider = entry
            else:
                marker = find_marker(entry, Service)
                if marker is None:
                    raise TypeMismatchError(f"{entry!r} is not marked with @service")
                contract, provider = marker.key_type, entry

            if isinstance(provider, (type, DependencyFactory)):
                self.bind_lazy(contract if contract is not None else provider, provider)
            else:
                self.bind_lazy_method(provider, contract)
        return self

    # Resolution

    def get(self, contract: type[T] | Any) -> T:
        """
        Resolve a dependency, creating it first if it is lazy.

        A ``bool`` contract always resolves to True.

        Raises:
            AmbiguousContractError: If the unmet contract is a concrete class
            UnmetDependencyError: If the contract is neither bound nor lazy
        """
        if contract is bool:
            return True  # type: ignore[return-value]

        if contract in self._dependencies:
            return self._dependencies[contract]  # type: ignore[no-any-return]
        if contract in self._lazy_factories:
            return self.initialize_lazy(contract)  # type: ignore[no-any-return]
        if isinstance(contract, type) and not is_contract(contract):
            raise AmbiguousContractError(contract)
        raise UnmetDependencyError(contract)

    def get_optional(self, contract: type[T] | Any) -> T | None:
        """Resolve a dependency, returning None instead of raising when it is unmet."""
        if contract in self._dependencies:
            return self._dependencies[contract]  # type: ignore[no-any-return]
        if contract in self._lazy_factories:
            return self.initialize_lazy(contract)  # type: ignore[no-any-return]
        return None

    def initialize_lazy(self, contract: Any) -> Any:
        """
        Create a lazy dependency and bind it as a regular dependency.

        Raises:
            UnmetDependencyError: If no factory is registered or the factory returned None
        """
        factory = self._lazy_factories.get(contract)
        if factory is None:
            raise UnmetDependencyError(contract)

        instance = factory.get()
        if instance is None:
            raise UnmetDependencyError(
                contract, f"Unmet dependency: {type_name(contract)}. Lazy factory {factory!r} returned None."
            )

        del self._lazy_factories[contract]
        logger.debug("Initialized lazy %s", type_name(contract))
        self.bind(contract, instance)
        return instance

    def is_bound(self, contract: Any) -> bool:
        """Check whether a contract has a live binding."""
        return contract in self._dependencies

    def has(self, contract: Any) -> bool:
        """Check whether a contract can be resolved, now or lazily."""
        return contract in self._dependencies or contract in self._lazy_factories

    def __contains__(self, contract: object) -> bool:
        return self.has(contract)

    # Injection

    def inject(self, target: T) -> T:
        """
        Inject dependencies into an object.

        All required fields are set from ``get`` first, then optional fields
        from ``get_optional``, then injectable methods are called with their
        parameters resolved. Runs in full on every call; only the discovery of
        members is cached.

        Each field write is independent: when a dependency is unmet the error
        propagates and members written before it keep their new values.

        Returns:
            The target, for chaining
        """
        plan = self.plan_for(type(target))

        for field in plan.fields:
            if not field.optional:
                setattr(target, field.name, self.get(field.contract))

        for field in plan.fields:
            if field.optional:
                value = self.get_optional(field.contract)
                if value is not None or field.contract in self._released:
                    setattr(target, field.name, value)

        for method in plan.methods:
            arguments = [self.get(contract) for contract in method.contracts]
            getattr(target, method.name)(*arguments)

        return target

    def plan_for(self, target_type: type) -> InjectionPlan:
        """Return the cached injection plan of a type, building it on first use."""
        plan = self._plans.get(target_type)
        if plan is not None:
            return plan

        fields = self._descriptor.injectable_fields(target_type, self._inject_marker, self._optional_marker)
        methods = self._descriptor.injectable_methods(target_type, self._inject_marker)
        plan = InjectionPlan(target_type, tuple(fields), tuple(methods))

        self._relationships.add_plan(plan)
        self._plans.put(plan)
        logger.debug("Built injection plan %s", plan)
        return plan

    # Updates and invocation

    def on_update(self) -> None:
        """Call ``on_update`` on every bound update receiver, in bind order."""
        self._updates.broadcast()

    def invoke(self, target: Any, method_name: str, *args: Any) -> Any:
        """
        Call a method by name, resolving the parameters not given in ``args``.

        Args:
            target: An instance, or a type for static and class methods
            method_name: Name of the method
            *args: Leading positional arguments

        Returns:
            Whatever the method returns
        """
        method = self._invoker.locate(target, method_name)
        return self._invoker.call(method, args)

    def run(self, func: Callable[..., T], *args: Any) -> T:
        """
        Call a function, resolving the parameters not given in ``args``.

        Example:
            def report(title: str, service: IReportService) -> str:
                return service.render(title)

            container.run(report, "Monthly")
        """
        return self._invoker.call(func, args)  # type: ignore[no-any-return]

    def _invalidate_dependents(self, contract: Any) -> None:
        for target_type in self._relationships.dependents_of(contract):
            if self._plans.invalidate(target_type):
                logger.debug("Evicted injection plan of %s", type_name(target_type))


def _implements(concrete: type, contract: Any) -> bool:
    try:
        return issubclass(concrete, contract)
    except TypeError:
        # Protocols that are not runtime checkable, or non-class contracts.
        return False
