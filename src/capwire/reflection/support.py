"""
Introspection of a type's ancestry, capabilities and methods.

Capabilities are interfaces: ``typing.Protocol`` classes and abstract base
classes that declare abstract methods. Implementations declare the
capabilities they provide by inheriting from them.
"""
import abc
import inspect
import logging
import typing
from typing import Any, Iterable

from .descriptors import MethodDescriptor, describe, lookup

logger = logging.getLogger(__name__)

_NEVER_CAPABILITIES = frozenset({object, typing.Protocol, typing.Generic, abc.ABC})


def is_interface(type_: Any) -> bool:
    """
    Check whether a type can serve as a capability.

    :param type_: The type to check.
    :return: True for protocols and abstract classes with abstract methods.
    """
    if not inspect.isclass(type_) or type_ in _NEVER_CAPABILITIES:
        return False
    if getattr(type_, "_is_protocol", False):
        return True
    return isinstance(type_, abc.ABCMeta) and bool(getattr(type_, "__abstractmethods__", None))


def ancestry_of(type_: type) -> list[type]:
    """
    :param type_: The type to analyze.
    :return: The classes type_ extends, nearest first; interfaces and ``object`` excluded.
    """
    return [
        klass for klass in type_.__mro__[1:]
        if klass not in _NEVER_CAPABILITIES and not is_interface(klass)
    ]


def bounded_ancestry_of(type_: type, upper_bound: type) -> list[type]:
    """
    :param type_: The type to analyze.
    :param upper_bound: Ancestry stops at the first class that is not a subclass of this type.
    :return: The classes type_ extends that are still subclasses of upper_bound, nearest first.
    """
    result = []
    for klass in ancestry_of(type_):
        if not issubclass(klass, upper_bound):
            break
        result.append(klass)
    return result


def capabilities_of(type_: type) -> list[type]:
    """
    Get all interfaces a type implements, directly or through its ancestry.

    The type itself is visited first, then its ancestors outward; the bases of
    each are taken in declaration order, followed by the interfaces those
    extend.

    :param type_: The type to analyze.
    :return: Deduplicated interfaces in first-seen order.
    """
    result: list[type] = []

    def add(interface: type) -> None:
        if interface in result:
            return
        result.append(interface)
        _add_bases(interface)

    def _add_bases(klass: type) -> None:
        for base in klass.__bases__:
            if is_interface(base):
                add(base)

    for klass in (type_, *ancestry_of(type_)):
        _add_bases(klass)
    return result


def capabilities_and_ancestry_of(type_: type) -> list[type]:
    """
    :param type_: The type to analyze.
    :return: The ancestry of type_, then type_ itself, then its capabilities.
    """
    ancestry = ancestry_of(type_)
    result = [*ancestry, type_]
    for interface in capabilities_of(type_):
        if interface not in result:
            result.append(interface)
    return result


def methods_by_name_and_arity(type_: type, name: str, arity: int) -> set[MethodDescriptor]:
    """
    Get the public method signatures of a type with a given name and parameter count.

    Overloads are not disambiguated; callers decide what more than one match means.

    :param type_: The type to search.
    :param name: The method name.
    :param arity: Exact number of positional parameters, ``self`` excluded.
    :return: A set of matching method descriptors.
    """
    if name.startswith("_"):
        return set()
    found = lookup(type_, name)
    if found is None:
        return set()
    declaring_type, attribute = found
    return {
        method for method in describe(declaring_type, name, attribute)
        if method.arity == arity
    }


def methods_by_names_and_arity(type_: type, names: Iterable[str], arity: int) -> set[MethodDescriptor]:
    result: set[MethodDescriptor] = set()
    for name in dict.fromkeys(names):
        result.update(methods_by_name_and_arity(type_, name, arity))
    return result


def public_methods_of(type_: type) -> list[MethodDescriptor]:
    """
    Get every public method signature of a type, nearest definition first.

    Members of ``object``, ``Protocol`` and ``Generic`` are skipped.
    """
    seen: set[str] = set()
    result = []
    for klass in type_.__mro__:
        if klass in _NEVER_CAPABILITIES:
            continue
        for name, attribute in vars(klass).items():
            if name.startswith("_") or name in seen:
                continue
            seen.add(name)
            result.extend(describe(klass, name, attribute))
    return result


def is_assignable(type_: type, target: Any) -> bool:
    """
    Check whether values of type_ can be used where target is expected.

    Protocols that are not runtime checkable only match nominal subclasses.
    """
    if target is object or target is Any:
        return True
    if not isinstance(type_, type) or not isinstance(target, type):
        return False
    try:
        return issubclass(type_, target)
    except TypeError:
        return target in type_.__mro__
