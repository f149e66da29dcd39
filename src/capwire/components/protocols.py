from typing import Any, Mapping, Optional, Protocol, Sequence, TypeVar, runtime_checkable

from ..reflection.descriptors import MethodDescriptor

_C = TypeVar("_C")


@runtime_checkable
class InvocationHandler(Protocol):
    """
    Receives calls made through a proxy before the implementation does.

    The handler decides whether and how to forward the call, typically with
    ``method.invoke(target, args, kwargs)``. Whatever it returns or raises is
    what the caller of the proxy observes.
    """

    def invoke(
            self,
            target: Any,
            method: MethodDescriptor,
            args: Sequence[Any],
            kwargs: Mapping[str, Any]
    ) -> Any:
        ...


@runtime_checkable
class Facade(Protocol):
    """Resolves a component id and a capability to a proxy of that component."""

    def get_proxy(self, component_id: str, capability: type[_C]) -> _C:
        ...


@runtime_checkable
class Component(Protocol):
    """
    Protocol for a wrapper that exposes an implementation through its capabilities.

    Required:
        capabilities: Interfaces implemented by the wrapped implementation.

    Proxies:
        create_proxy: New proxy for a capability.
        get_proxy: Memoized proxy for a capability.

    Wiring:
        set_properties: Inject configuration values into setters.
        set_reference: Inject proxies of a peer component.
        remove_dependency: Forget what was injected from a peer.
        register / unregister: Hand listener proxies of a peer to the implementation.
        set_invocation_interceptor: Route calls for a capability through a handler.
    """

    @property
    def capabilities(self) -> tuple[type, ...]:
        ...

    @property
    def properties(self) -> Optional[Mapping[str, Any]]:
        ...

    def implements(self, capability: type) -> bool:
        ...

    def create_proxy(self, capability: type[_C]) -> _C:
        ...

    def get_proxy(self, capability: type[_C]) -> _C:
        ...

    def set_properties(self, properties: Mapping[str, Any]) -> None:
        ...

    def set_reference(self, facade: Facade, component_id: str, *capabilities: type) -> None:
        ...

    def remove_dependency(self, component_id: str) -> None:
        ...

    def get_injected_capabilities(self, component_id: str) -> set[type]:
        ...

    def register(self, component: "Component") -> None:
        ...

    def unregister(self, component: "Component") -> None:
        ...

    def set_invocation_interceptor(self, capability: type, handler: InvocationHandler) -> None:
        ...

    def invoke(
            self,
            proxy: Any,
            method: MethodDescriptor,
            args: Sequence[Any],
            kwargs: Optional[Mapping[str, Any]] = None
    ) -> Any:
        ...

    def invoke_by_name(self, method_name: str, *args: Any) -> Any:
        ...
