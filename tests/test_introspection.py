#!/usr/bin/env python3
"""
Unit tests for discovering injectable members.
"""

import unittest
from abc import ABC, abstractmethod
from typing import Annotated, Optional, Protocol

from fakes import (
    FieldInjectReceiver,
    IAnotherFakeService,
    IFakeService,
    MethodInjectReceiver,
    ReceiverSubclass,
)

from mortar.inject import AnnotationTypeDescriptor, Inject, InjectOptional, TypeMismatchError, inject, service
from mortar.inject.introspection import is_contract, strip_annotated, strip_optional
from mortar.inject.markers import Service, find_marker, markers_of
from mortar.inject.model import FieldInjection, MethodInjection


class IProtocolService(Protocol):
    def run(self) -> None: ...


class AbstractWithoutMethods(ABC):
    pass


class AbstractService(ABC):
    @abstractmethod
    def run(self) -> None: ...


class LegacyOptionalReceiver:
    maybe: Annotated[Optional[IFakeService], InjectOptional]
    plain: IFakeService
    counter: int = 0


class UnannotatedMethodReceiver:
    @inject
    def configure(self, service) -> None:
        pass


class AnnotatedParameterReceiver:
    @inject
    def configure(self, service: Annotated[IFakeService, "primary"]) -> None:
        pass


class TestHelpers(unittest.TestCase):
    """Test the annotation helpers."""

    def test_is_contract(self):
        """Test what counts as an interface-like contract."""
        self.assertTrue(is_contract(AbstractService))
        self.assertTrue(is_contract(IProtocolService))
        self.assertFalse(is_contract(AbstractWithoutMethods))
        self.assertFalse(is_contract(int))
        self.assertFalse(is_contract("IFakeService"))

    def test_strip_annotated(self):
        """Test splitting Annotated hints."""
        marker = Inject()
        self.assertEqual((IFakeService, (marker,)), strip_annotated(Annotated[IFakeService, marker]))
        self.assertEqual((IFakeService, ()), strip_annotated(IFakeService))

    def test_strip_optional(self):
        """Test unwrapping optional hints."""
        self.assertIs(IFakeService, strip_optional(IFakeService | None))
        self.assertIs(IFakeService, strip_optional(Optional[IFakeService]))
        self.assertEqual(int | str, strip_optional(int | str))


class TestMarkers(unittest.TestCase):
    """Test the marker decorators."""

    def test_inject_marks_function(self):
        """Test that @inject attaches an Inject marker."""

        @inject
        def configure(self, service: IFakeService) -> None:
            pass

        self.assertEqual((Inject(),), markers_of(configure))

    def test_service_marker_is_not_inherited(self):
        """Test that subclasses of a service do not inherit its marker."""

        @service(IFakeService)
        class Marked:
            pass

        class Child(Marked):
            pass

        self.assertEqual(Service(IFakeService), find_marker(Marked, Service))
        self.assertIsNone(find_marker(Child, Service))

    def test_service_on_static_method(self):
        """Test that markers on static methods land on the wrapped function."""

        class Providers:
            @service()
            @staticmethod
            def provide() -> IFakeService: ...

        raw = Providers.__dict__["provide"]
        self.assertEqual(Service(), find_marker(raw, Service))
        self.assertEqual(Service(), find_marker(Providers.provide, Service))


class TestAnnotationTypeDescriptor(unittest.TestCase):
    """Test the default type descriptor."""

    def setUp(self):
        self.descriptor = AnnotationTypeDescriptor()

    def test_fields_in_declaration_order(self):
        """Test field discovery and ordering."""
        fields = self.descriptor.injectable_fields(FieldInjectReceiver, Inject, InjectOptional)

        self.assertEqual(
            [
                FieldInjection("public_fake_service", IFakeService, False),
                FieldInjection("public_another_fake_service", IAnotherFakeService, False),
                FieldInjection("_private_fake_service", IFakeService, False),
                FieldInjection("_optional_fake_service", IFakeService, True),
            ],
            fields,
        )

    def test_unmarked_fields_are_ignored(self):
        """Test that plain annotations are not injectable."""
        fields = self.descriptor.injectable_fields(LegacyOptionalReceiver, Inject, InjectOptional)

        self.assertEqual([FieldInjection("maybe", IFakeService, True)], fields)

    def test_methods(self):
        """Test method discovery with parameter contracts."""
        methods = self.descriptor.injectable_methods(MethodInjectReceiver, Inject)

        self.assertEqual([MethodInjection("_inject", (IFakeService, IAnotherFakeService))], methods)

    def test_inherited_methods(self):
        """Test that inherited methods are listed before the subclass's own."""
        methods = self.descriptor.injectable_methods(ReceiverSubclass, Inject)

        self.assertEqual(
            [MethodInjection("_on_inject_super", ()), MethodInjection("on_inject_sub", (IAnotherFakeService,))],
            methods,
        )

    def test_annotated_parameter_is_stripped(self):
        """Test that Annotated metadata on parameters does not leak into contracts."""
        methods = self.descriptor.injectable_methods(AnnotatedParameterReceiver, Inject)

        self.assertEqual((IFakeService,), methods[0].contracts)

    def test_unannotated_parameter(self):
        """Test that parameters of injectable methods need a type."""
        with self.assertRaises(TypeMismatchError):
            self.descriptor.injectable_methods(UnannotatedMethodReceiver, Inject)

    def test_has_marker(self):
        """Test marker queries on members."""
        self.assertTrue(self.descriptor.has_marker(MethodInjectReceiver.__dict__["_inject"], Inject))
        self.assertFalse(self.descriptor.has_marker(MethodInjectReceiver.__dict__["_inject"], InjectOptional))


if __name__ == "__main__":
    unittest.main()
