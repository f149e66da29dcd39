"""
Generated proxies.

A proxy class is generated once per capability. It subclasses the capability
and overrides every public method (and every abstract method) with a
forwarder that hands ``(proxy, method, args, kwargs)`` to the invocation
handler the proxy was created for. Properties of the capability become
forwarding properties whose getter and setter go through the same handler.
A proxy instance holds nothing but the link to that handler.
"""
import logging
from typing import Any, Callable, Optional, TypeVar

from cachetools import cached

from ..reflection.descriptors import AccessorDescriptor, MethodDescriptor, describe, describe_property, lookup
from ..reflection.support import _NEVER_CAPABILITIES, public_methods_of

logger = logging.getLogger(__name__)

_C = TypeVar("_C")

_HANDLER_ATTRIBUTE = "_capwire_handler"


def _forwarder(method: MethodDescriptor) -> Callable:
    def forward(self, *args, **kwargs):
        return getattr(self, _HANDLER_ATTRIBUTE).invoke(self, method, args, kwargs)

    forward.__name__ = method.name
    forward.__qualname__ = f"{method.declaring_type.__qualname__}.{method.name}"
    forward.__doc__ = method.function.__doc__
    forward.__wrapped__ = method.function
    return forward


def _forwarded_methods(capability: type) -> dict[str, MethodDescriptor]:
    methods: dict[str, MethodDescriptor] = {}
    for method in public_methods_of(capability):
        methods.setdefault(method.name, method)

    # abstract methods outside the public surface still need an override
    for name in getattr(capability, "__abstractmethods__", ()):
        if name in methods:
            continue
        found = lookup(capability, name)
        if found is None:
            continue
        declaring_type, attribute = found
        for method in describe(declaring_type, name, attribute):
            methods.setdefault(name, method)
    return methods


def _property_forwarder(getter: Optional[AccessorDescriptor], setter: Optional[AccessorDescriptor],
                        doc: Optional[str]) -> property:
    fget = fset = None
    if getter is not None:
        def fget(self):
            return getattr(self, _HANDLER_ATTRIBUTE).invoke(self, getter, (), {})
    if setter is not None:
        def fset(self, value):
            getattr(self, _HANDLER_ATTRIBUTE).invoke(self, setter, (value,), {})
    return property(fget, fset, doc=doc)


def _forwarded_properties(capability: type) -> dict[str, property]:
    abstract = getattr(capability, "__abstractmethods__", frozenset())
    seen: set[str] = set()
    properties: dict[str, property] = {}
    for klass in capability.__mro__:
        if klass in _NEVER_CAPABILITIES:
            continue
        for name, attribute in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if not isinstance(attribute, property) or (name.startswith("_") and name not in abstract):
                continue
            accessors = {accessor.kind: accessor for accessor in describe_property(klass, name, attribute)}
            properties[name] = _property_forwarder(accessors.get("get"), accessors.get("set"), attribute.__doc__)
    return properties


def _proxy_init(self, handler: Any) -> None:
    object.__setattr__(self, _HANDLER_ATTRIBUTE, handler)


def _proxy_setattr(self, name: str, value: Any) -> None:
    if isinstance(getattr(type(self), name, None), property):
        object.__setattr__(self, name, value)
        return
    raise AttributeError(f"can not set '{name}', {type(self).__qualname__} holds no state")


def _proxy_repr(self) -> str:
    return f"<{type(self).__capability__.__qualname__} proxy for {getattr(self, _HANDLER_ATTRIBUTE)!r}>"


@cached(cache={}, key=lambda capability: capability)
def proxy_class_for(capability: type[_C]) -> type[_C]:
    """
    Get the proxy class of a capability, generating it on first use.

    :param capability: The interface the proxy class implements.
    """
    namespace: dict[str, Any] = {
        "__slots__": (_HANDLER_ATTRIBUTE,),
        "__capability__": capability,
        "__module__": capability.__module__,
        "__init__": _proxy_init,
        "__repr__": _proxy_repr,
        "__setattr__": _proxy_setattr,
    }
    forwarded = _forwarded_methods(capability)
    for name, method in forwarded.items():
        namespace[name] = _forwarder(method)
    properties = _forwarded_properties(capability)
    namespace.update(properties)

    proxy_class = type(f"{capability.__name__}Proxy", (capability,), namespace)
    logger.debug("Generated proxy class %s with %d forwarded methods and %d properties",
                 proxy_class.__qualname__, len(forwarded), len(properties))
    return proxy_class


def new_proxy(capability: type[_C], handler: Any) -> _C:
    """Create a proxy for capability whose calls are forwarded to handler.invoke."""
    return proxy_class_for(capability)(handler)


def is_proxy(obj: Any) -> bool:
    return hasattr(type(obj), "__capability__") and hasattr(obj, _HANDLER_ATTRIBUTE)


def capability_of(proxy: Any) -> type:
    """The capability a proxy was generated for."""
    return type(proxy).__capability__


def handler_of(proxy: Any) -> Any:
    """The invocation handler a proxy forwards to."""
    return getattr(proxy, _HANDLER_ATTRIBUTE)
