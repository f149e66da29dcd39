import functools
import inspect
import logging
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, Sequence

logger = logging.getLogger(__name__)

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class MethodDescriptor:
    """
    One callable signature of a method.

    A plain method has a single descriptor. A ``functools.singledispatchmethod``
    has one descriptor per registered type and a method declared with
    ``typing.overload`` has one descriptor per overload. Invocation always
    goes through attribute lookup on the target, so subclass overrides and
    dispatch on the argument type apply.

    :param declaring_type: The class that declares the method.
    :param name: The method name.
    :param parameter_types: Declared types of the positional parameters, ``self`` excluded.
    :param required: Number of positional parameters without a default.
    :param function: The underlying function (or overload stub).
    """
    declaring_type: type
    name: str
    parameter_types: tuple[Any, ...]
    required: int
    function: Callable = field(repr=False)

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def accepts(self, count: int) -> bool:
        return self.required <= count <= self.arity

    def bound_to(self, target: object) -> Callable:
        return getattr(target, self.name)

    def invoke(self, target: object, args: Sequence[Any] = (), kwargs: Optional[dict] = None) -> Any:
        return self.bound_to(target)(*args, **(kwargs or {}))

    def __str__(self) -> str:
        params = ", ".join(_type_name(t) for t in self.parameter_types)
        return f"{self.declaring_type.__qualname__}.{self.name}({params})"


@dataclass(frozen=True)
class AccessorDescriptor(MethodDescriptor):
    """
    The getter or setter of a property.

    Invoking a getter reads the attribute from the target; invoking a setter
    assigns its single argument.
    """
    kind: str = "get"

    def invoke(self, target: object, args: Sequence[Any] = (), kwargs: Optional[dict] = None) -> Any:
        if self.kind == "get":
            return getattr(target, self.name)
        setattr(target, self.name, args[0])
        return None

    def __str__(self) -> str:
        return f"{self.declaring_type.__qualname__}.{self.name} [{self.kind}]"


@dataclass(frozen=True)
class ConstructorDescriptor:
    """A constructor signature of a class; ``__init__`` or one of its overloads."""
    owner: type
    parameter_types: tuple[Any, ...]
    required: int

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    def accepts(self, count: int) -> bool:
        return self.required <= count <= self.arity

    def new_instance(self, args: Sequence[Any]) -> Any:
        return self.owner(*args)

    def __str__(self) -> str:
        params = ", ".join(_type_name(t) for t in self.parameter_types)
        return f"{self.owner.__qualname__}({params})"


def signature_types(function: Callable, skip_first: bool = True) -> Optional[tuple[tuple[Any, ...], int]]:
    """
    Get the declared positional parameter types of a function.

    Unannotated parameters are typed ``object``.

    :return: Tuple of (parameter types, number of required parameters), or None
             if the function has no inspectable signature.
    """
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None
    try:
        hints = typing.get_type_hints(function)
    except Exception:  # unresolved forward references
        hints = {}

    parameters = list(signature.parameters.values())
    if skip_first and parameters and parameters[0].kind in _POSITIONAL:
        parameters = parameters[1:]

    types = []
    required = 0
    for parameter in parameters:
        if parameter.kind not in _POSITIONAL:
            continue
        annotation = hints.get(parameter.name, parameter.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = object
        types.append(annotation)
        if parameter.default is inspect.Parameter.empty:
            required += 1
    return tuple(types), required


def lookup(type_: type, name: str) -> Optional[tuple[type, Any]]:
    """Find the class in the MRO of type_ that defines name, with the raw attribute."""
    for klass in type_.__mro__:
        if name in vars(klass):
            return klass, vars(klass)[name]
    return None


def describe(declaring_type: type, name: str, attribute: Any) -> Iterator[MethodDescriptor]:
    """Yield the descriptors of a raw class attribute; nothing if it is not a method."""
    if isinstance(attribute, functools.singledispatchmethod):
        registry = attribute.dispatcher.registry
        specific = {type_: fn for type_, fn in registry.items() if type_ is not object}
        for type_, function in (specific or registry).items():
            described = signature_types(function)
            if described is None or not described[0]:
                continue
            types, required = described
            # the dispatch type replaces whatever the first parameter is annotated with
            yield MethodDescriptor(declaring_type, name, (type_, *types[1:]), required, function)
        return

    if not inspect.isfunction(attribute):
        return

    overloads = typing.get_overloads(attribute)
    for function in overloads or (attribute,):
        described = signature_types(function)
        if described is None:
            continue
        types, required = described
        yield MethodDescriptor(declaring_type, name, types, required, function)


def describe_property(declaring_type: type, name: str, attribute: property) -> Iterator[AccessorDescriptor]:
    """Yield the getter descriptor of a property, and its setter descriptor if it has one."""
    if attribute.fget is not None:
        yield AccessorDescriptor(declaring_type, name, (), 0, attribute.fget, kind="get")
    if attribute.fset is not None:
        described = signature_types(attribute.fset)
        types = described[0][:1] if described and described[0] else (object,)
        yield AccessorDescriptor(declaring_type, name, types, 1, attribute.fset, kind="set")


def _type_name(type_: Any) -> str:
    if isinstance(type_, type):
        return type_.__name__
    return repr(type_)
