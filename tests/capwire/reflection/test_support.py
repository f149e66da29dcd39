import abc
import functools
import typing
from typing import Protocol, overload, runtime_checkable

from capwire.reflection.support import (
    ancestry_of,
    bounded_ancestry_of,
    capabilities_and_ancestry_of,
    capabilities_of,
    is_assignable,
    is_interface,
    methods_by_name_and_arity,
    methods_by_names_and_arity,
    public_methods_of,
)


@runtime_checkable
class Greeter(Protocol):
    def greet(self, name: str) -> str:
        ...


class Closeable(Protocol):
    def close(self) -> None:
        ...


class Resource(abc.ABC):
    @abc.abstractmethod
    def open(self) -> None:
        ...


class NamedResource(Resource, abc.ABC):
    @abc.abstractmethod
    def name(self) -> str:
        ...


class Base(Greeter):
    def greet(self, name: str) -> str:
        return f"hello {name}"


class Middle(Base, Closeable):
    def close(self) -> None:
        pass


class Leaf(Middle, NamedResource, Greeter):
    def open(self) -> None:
        pass

    def name(self) -> str:
        return "leaf"


class Plain:
    pass


class TestIsInterface:
    """Tests for is_interface."""

    def test_protocols_are_interfaces(self):
        assert is_interface(Greeter)
        assert is_interface(Closeable)

    def test_abstract_classes_are_interfaces(self):
        assert is_interface(Resource)
        assert is_interface(NamedResource)

    def test_concrete_classes_are_not(self):
        assert not is_interface(Base)
        assert not is_interface(Leaf)
        assert not is_interface(Plain)

    def test_typing_roots_are_not(self):
        assert not is_interface(object)
        assert not is_interface(typing.Protocol)
        assert not is_interface(typing.Generic)
        assert not is_interface(abc.ABC)

    def test_non_classes_are_not(self):
        assert not is_interface(42)
        assert not is_interface("Greeter")
        assert not is_interface(None)


class TestAncestry:
    """Tests for ancestry_of and bounded_ancestry_of."""

    def test_ancestry_nearest_first(self):
        assert ancestry_of(Leaf) == [Middle, Base]

    def test_ancestry_excludes_object(self):
        assert ancestry_of(Plain) == []
        assert object not in ancestry_of(Leaf)

    def test_ancestry_excludes_interfaces(self):
        assert Greeter not in ancestry_of(Leaf)
        assert Resource not in ancestry_of(Leaf)

    def test_bounded_ancestry_stops_at_bound(self):
        assert bounded_ancestry_of(Leaf, Middle) == [Middle]
        assert bounded_ancestry_of(Leaf, Base) == [Middle, Base]

    def test_bounded_ancestry_with_unrelated_bound(self):
        assert bounded_ancestry_of(Leaf, Plain) == []


class TestCapabilities:
    """Tests for capabilities_of and capabilities_and_ancestry_of."""

    def test_collects_interfaces_of_whole_ancestry(self):
        capabilities = capabilities_of(Leaf)
        assert set(capabilities) == {Greeter, Closeable, Resource, NamedResource}

    def test_no_duplicates(self):
        capabilities = capabilities_of(Leaf)
        assert len(capabilities) == len(set(capabilities))

    def test_order_class_first_then_ancestors(self):
        # Leaf declares NamedResource (extending Resource) and Greeter,
        # Middle adds Closeable, Base declared Greeter again
        assert capabilities_of(Leaf) == [NamedResource, Resource, Greeter, Closeable]

    def test_excludes_roots(self):
        capabilities = capabilities_of(Leaf)
        for root in (object, typing.Protocol, typing.Generic, abc.ABC):
            assert root not in capabilities

    def test_plain_class_has_none(self):
        assert capabilities_of(Plain) == []

    def test_capabilities_and_ancestry(self):
        result = capabilities_and_ancestry_of(Middle)
        assert result == [Base, Middle, Closeable, Greeter]


class Overloaded:
    @overload
    def set_name(self, value: str) -> None: ...

    @overload
    def set_name(self, value: list) -> None: ...

    def set_name(self, value):
        self.value = value


class Dispatching:
    @functools.singledispatchmethod
    def set_name(self, value):
        raise NotImplementedError

    @set_name.register
    def _(self, value: str):
        self.value = value

    @set_name.register
    def _(self, value: int):
        self.value = str(value)


class Setters:
    def set_name(self, value: str) -> None:
        self.name = value

    def set_pair(self, first, second) -> None:
        pass

    def _set_hidden(self, value) -> None:
        pass


class TestMethodsByNameAndArity:
    """Tests for methods_by_name_and_arity."""

    def test_single_match(self):
        methods = methods_by_name_and_arity(Setters, "set_name", 1)
        assert len(methods) == 1
        method = next(iter(methods))
        assert method.name == "set_name"
        assert method.parameter_types == (str,)
        assert method.declaring_type is Setters

    def test_arity_must_match_exactly(self):
        assert methods_by_name_and_arity(Setters, "set_name", 2) == set()
        assert len(methods_by_name_and_arity(Setters, "set_pair", 2)) == 1

    def test_unannotated_parameters_are_object(self):
        method = next(iter(methods_by_name_and_arity(Setters, "set_pair", 2)))
        assert method.parameter_types == (object, object)

    def test_unknown_name(self):
        assert methods_by_name_and_arity(Setters, "set_nothing", 1) == set()

    def test_private_methods_are_not_public(self):
        assert methods_by_name_and_arity(Setters, "_set_hidden", 1) == set()

    def test_overloads_are_separate_matches(self):
        methods = methods_by_name_and_arity(Overloaded, "set_name", 1)
        assert {m.parameter_types for m in methods} == {(str,), (list,)}

    def test_singledispatch_registrations_are_separate_matches(self):
        methods = methods_by_name_and_arity(Dispatching, "set_name", 1)
        assert {m.parameter_types for m in methods} == {(str,), (int,)}

    def test_inherited_methods_are_found(self):
        class Child(Setters):
            pass

        methods = methods_by_name_and_arity(Child, "set_name", 1)
        assert next(iter(methods)).declaring_type is Setters

    def test_several_names(self):
        methods = methods_by_names_and_arity(Setters, ["set_name", "set_pair", "set_name"], 1)
        assert len(methods) == 1


class TestPublicMethods:
    """Tests for public_methods_of."""

    def test_nearest_definition_wins(self):
        methods = {m.name: m for m in public_methods_of(Leaf)}
        assert methods["greet"].declaring_type is Base
        assert methods["open"].declaring_type is Leaf

    def test_protocol_members_are_skipped(self):
        names = {m.name for m in public_methods_of(Greeter)}
        assert names == {"greet"}


class TestIsAssignable:
    """Tests for is_assignable."""

    def test_subclass(self):
        assert is_assignable(Leaf, Base)
        assert is_assignable(Leaf, Resource)

    def test_object_accepts_anything(self):
        assert is_assignable(Plain, object)

    def test_unrelated(self):
        assert not is_assignable(Plain, Base)

    def test_protocol_without_runtime_checking(self):
        assert is_assignable(Middle, Closeable)
        assert not is_assignable(Plain, Closeable)
