"""
Fake services and injection receivers shared by the test suites.
"""

from abc import ABC, abstractmethod
from typing import Annotated, Generic, TypeVar

from mortar.inject import Container, Inject, InjectOptional, inject

T = TypeVar("T")


class IFakeService(ABC):
    @abstractmethod
    def sum(self, a: int, b: int) -> int: ...


class FakeService(IFakeService):
    def __init__(self) -> None:
        self.on_update_call_count = 0

    def sum(self, a: int, b: int) -> int:
        return a + b

    def on_update(self) -> None:
        self.on_update_call_count += 1


class IAnotherFakeService(ABC):
    @abstractmethod
    def minus(self, a: int, b: int) -> int: ...


class AnotherFakeService(IAnotherFakeService):
    def minus(self, a: int, b: int) -> int:
        return a - b


class INonExistentService(ABC):
    @abstractmethod
    def multiply(self, a: int, b: int) -> int: ...


class FieldInjectReceiver:
    public_fake_service: Annotated[IFakeService, Inject()]
    public_another_fake_service: Annotated[IAnotherFakeService, Inject]
    _private_fake_service: Annotated[IFakeService, Inject()]
    _optional_fake_service: Annotated[IFakeService | None, InjectOptional()] = None

    @property
    def private_fake_service(self) -> IFakeService:
        return self._private_fake_service

    @property
    def optional_fake_service(self) -> IFakeService | None:
        return self._optional_fake_service


class OptionalFieldReceiver:
    fake_service: Annotated[IFakeService | None, InjectOptional()] = None


class PartialFieldReceiver:
    first: Annotated[IFakeService, Inject()]
    missing: Annotated[INonExistentService, Inject()]
    last: Annotated[IAnotherFakeService, Inject()]


class ContainerAwareReceiver:
    container: Annotated[Container, Inject()]
    container_available: Annotated[bool, Inject()]


class MethodInjectReceiver:
    def __init__(self) -> None:
        self.fake_service: IFakeService | None = None
        self.another_fake_service: IAnotherFakeService | None = None
        self.calls: list[tuple[IFakeService, IAnotherFakeService]] = []

    @inject
    def _inject(self, fake_service: IFakeService, another_fake_service: IAnotherFakeService) -> None:
        self.fake_service = fake_service
        self.another_fake_service = another_fake_service
        self.calls.append((fake_service, another_fake_service))


class OnInjectedReceiver:
    def __init__(self) -> None:
        self.injected_count = 0

    @inject
    def on_injected(self) -> None:
        self.injected_count += 1


class ReceiverSuperclass:
    inherited_service: Annotated[IFakeService, Inject()]

    def __init__(self) -> None:
        self.calls: list[str] = []

    @inject
    def _on_inject_super(self) -> None:
        self.calls.append("super")


class ReceiverSubclass(ReceiverSuperclass):
    own_service: Annotated[IAnotherFakeService, Inject()]

    @inject
    def on_inject_sub(self, another_fake_service: IAnotherFakeService) -> None:
        self.calls.append("sub")


class OverridingReceiver(ReceiverSuperclass):
    def _on_inject_super(self) -> None:
        self.calls.append("override")


class MarkedOverrideReceiver(ReceiverSuperclass):
    @inject
    def _on_inject_super(self) -> None:
        self.calls.append("marked-override")


class GenericReceiverBase(Generic[T]):
    service: Annotated[IFakeService, Inject()]

    def __init__(self) -> None:
        self.captured: IFakeService | None = None

    @inject
    def _capture(self, service: IFakeService) -> None:
        self.captured = service


class GenericReceiver(GenericReceiverBase[int]):
    pass


class InvokeTarget:
    def __init__(self) -> None:
        self.observed: list[object] = []

    def instance_method(
        self,
        text: str,
        number: int,
        fake_service: IFakeService,
        another_fake_service: IAnotherFakeService,
    ) -> int:
        self.observed = [text, number, fake_service, another_fake_service]
        return number

    def with_default(self, fake_service: IFakeService, missing: INonExistentService | None = None) -> bool:
        return missing is None

    @staticmethod
    def static_method(number: int, fake_service: IFakeService) -> int:
        return fake_service.sum(number, 1)

    @classmethod
    def class_method(cls, another_fake_service: IAnotherFakeService) -> str:
        return f"{cls.__name__}:{another_fake_service.minus(3, 1)}"

    label = "not callable"


def make_container() -> tuple[Container, FakeService, AnotherFakeService]:
    """A container with both fake services bound."""
    fake_service = FakeService()
    another_fake_service = AnotherFakeService()
    container = Container()
    container.bind(IFakeService, fake_service)
    container.bind(IAnotherFakeService, another_fake_service)
    return container, fake_service, another_fake_service
