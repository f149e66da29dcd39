import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, TypeVar

from ..config.settings import get_settings
from ..conversion import convert
from ..errors import ConfigurationError, InvalidCapabilityError, InvocationTargetError, MethodNotFoundError
from ..reflection.descriptors import MethodDescriptor
from ..reflection.invocation import MethodInvocation, Outcome, is_unchecked
from ..reflection.support import (
    capabilities_of,
    is_assignable,
    is_interface,
    methods_by_name_and_arity,
    methods_by_names_and_arity,
)
from .protocols import Component, Facade, InvocationHandler
from .proxy import capability_of, is_proxy, new_proxy

logger = logging.getLogger(__name__)

_C = TypeVar("_C")


def make_first_char_upper_case(name: str) -> str:
    return name[:1].upper() + name[1:]


def setter_names(key: str) -> tuple[str, ...]:
    """
    Names of the setters a property key maps to.

    :param key: The property key, e.g. ``"name"``.
    :return: ``("set_name", "setName")``
    """
    return f"set_{key}", f"set{make_first_char_upper_case(key)}"


class StandardComponent:
    """
    Wraps an implementation and mediates all typed access to it.

    The capabilities of the component are the interfaces the implementation's
    class declares, directly or through its ancestry; they are computed once.
    Proxies for a capability forward every call to ``invoke``, which gives a
    registered interceptor the first refusal before calling the implementation.

    Wiring state (dependencies, listeners, interceptors, proxy cache) is kept in
    plain dictionaries without locking; wiring is expected to be done by a
    single orchestrator before proxies are used concurrently.

    :param implementation: The object to wrap. Must not be None.
    """

    def __init__(self, implementation: Any) -> None:
        if implementation is None:
            raise ValueError("implementation can not be None")
        self.implementation = implementation
        self._capabilities: tuple[type, ...] = tuple(capabilities_of(type(implementation)))

        self._properties: Optional[Mapping[str, Any]] = None
        self._setter_injected_properties: dict[str, Any] = {}

        self._interceptors: dict[type, InvocationHandler] = {}
        self._proxies: dict[type, Any] = {}
        self._injected_capabilities_by_component_id: dict[str, set[type]] = {}
        self._injected_proxies_by_capability: dict[type, Any] = {}
        self._registered_listeners_by_component: dict[Component, dict[type, Any]] = {}

    @property
    def capabilities(self) -> tuple[type, ...]:
        return self._capabilities

    def implements(self, capability: type) -> bool:
        return is_assignable(type(self.implementation), capability)

    # Proxies

    def create_proxy(self, capability: type[_C]) -> _C:
        """
        Create a new proxy for a capability of the implementation.

        :raises InvalidCapabilityError: If capability is not an interface or not implemented.
        """
        self._check_capability(capability)
        return new_proxy(capability, self)

    def get_proxy(self, capability: type[_C]) -> _C:
        """Get the proxy for a capability; the same instance is returned every time."""
        if capability not in self._proxies:
            self._proxies[capability] = self.create_proxy(capability)
        return self._proxies[capability]

    def _check_capability(self, capability: Any) -> None:
        if not is_interface(capability):
            raise InvalidCapabilityError(f"class {_name_of(capability)} is not an interface")
        if not is_assignable(type(self.implementation), capability):
            raise InvalidCapabilityError(
                f"class {type(self.implementation).__qualname__} does not implement {capability.__qualname__}"
            )

    # Properties

    @property
    def properties(self) -> Optional[Mapping[str, Any]]:
        """The last property map passed to set_properties."""
        return self._properties

    @property
    def setter_injected_properties(self) -> dict[str, Any]:
        """Properties that have actually been injected by setter, with their converted values."""
        return self._setter_injected_properties

    def set_properties(self, properties: Mapping[str, Any]) -> None:
        """
        Inject property values into matching setters of the implementation.

        A key ``name`` matches a single-argument method ``set_name`` or
        ``setName``. Keys without a setter are skipped. Afterwards the whole map
        is injected into a setter for the reserved ``properties`` key, if any.

        :raises ConfigurationError: If more than one setter matches a key.
        """
        for key, value in properties.items():
            self._inject_property_if_matching_setter_found(key, value)
        self._inject_property_if_matching_setter_found(get_settings().properties_key, properties)
        self._properties = properties

    def _setters_for(self, key: str) -> set[MethodDescriptor]:
        return methods_by_names_and_arity(type(self.implementation), setter_names(key), 1)

    def _inject_property_if_matching_setter_found(self, key: str, value: Any) -> None:
        setters = self._setters_for(key)
        if len(setters) > 1:
            raise ConfigurationError(
                f"more than 1 ({len(setters)}) setter found for property '{key}'"
            )
        if len(setters) == 1:
            setter = next(iter(setters))
            converted = convert(value, setter.parameter_types[0])
            self._invoke_method(setter, converted)
            self._setter_injected_properties[key] = converted
            logger.debug("Injected property '%s' into %s", key, self)

    def _invoke_method(self, method: MethodDescriptor, argument: Any) -> None:
        try:
            method.invoke(self.implementation, (argument,))
        except Exception as e:
            if is_unchecked(e):
                raise
            raise InvocationTargetError(
                f"can't invoke method '{method.name}' with argument {argument!r}", e
            ) from e

    # Dependencies

    def set_reference(self, facade: Facade, component_id: str, *capabilities: type) -> None:
        """
        Inject proxies of the component known to facade as component_id.

        Setters are looked up by component id (``set_<component_id>``); every
        setter whose parameter type accepts one of the capabilities receives the
        facade's proxy for it. Calling this again for the same component id
        reconciles the injected capabilities with the new set.
        """
        if component_id in self._injected_capabilities_by_component_id:
            self._reset_reference(facade, component_id, capabilities)
        else:
            injected = self._inject_proxies(component_id, capabilities, facade)
            self._injected_capabilities_by_component_id[component_id] = set(injected)
            self._injected_proxies_by_capability.update(injected)

    def _reset_reference(self, facade: Facade, component_id: str, capabilities: Sequence[type]) -> None:
        currently_injected = self._injected_capabilities_by_component_id[component_id]
        exposed = set(capabilities)

        # setters keep their last value; only the bookkeeping is dropped
        to_be_removed = currently_injected - exposed
        currently_injected -= to_be_removed
        self._remove_injected_proxies(to_be_removed)

        to_add = [capability for capability in capabilities if capability not in currently_injected]
        injected = self._inject_proxies(component_id, to_add, facade)
        currently_injected |= set(injected)
        self._injected_proxies_by_capability.update(injected)

        if not currently_injected:
            del self._injected_capabilities_by_component_id[component_id]
            self._remove_injected_proxies(capabilities)

    def remove_dependency(self, component_id: str) -> None:
        """
        Forget everything injected from component_id.

        The implementation's setters are not called again; they keep the proxies
        injected earlier.
        """
        removed = self._injected_capabilities_by_component_id.pop(component_id, None)
        self._remove_injected_proxies(removed)

    def get_injected_capabilities(self, component_id: str) -> set[type]:
        return set(self._injected_capabilities_by_component_id.get(component_id, ()))

    def proxy_for_reference(self, capability: type[_C]) -> Optional[_C]:
        """The facade proxy injected for a capability through set_reference, if any."""
        return self._injected_proxies_by_capability.get(capability)

    def _inject_proxies(self, component_id: str, capabilities: Iterable[type], facade: Facade) -> dict[type, Any]:
        injected: dict[type, Any] = {}
        capabilities = list(capabilities)
        for setter in self._setters_for(component_id):
            for capability in capabilities:
                if is_assignable(capability, setter.parameter_types[0]):
                    proxy = facade.get_proxy(component_id, capability)
                    logger.debug("Injecting proxy for %s in component %s",
                                 capability.__qualname__, type(self.implementation).__qualname__)
                    self._invoke_method(setter, proxy)
                    injected[capability] = proxy
        return injected

    def _remove_injected_proxies(self, capabilities: Optional[Iterable[type]]) -> None:
        for capability in capabilities or ():
            self._injected_proxies_by_capability.pop(capability, None)

    # Listeners

    def register(self, component: Component) -> None:
        """
        Hand listener proxies of component to the implementation.

        For every capability of component, the implementation's ``register``
        method taking exactly that capability is called with a proxy for it.
        Capabilities without such a method are skipped.
        """
        method_name = get_settings().register_method
        for capability in component.capabilities:
            try:
                method = self._listener_method(method_name, capability)
            except MethodNotFoundError:
                continue
            listener_proxy = component.create_proxy(capability)
            logger.debug("Registering proxy for %s in component %s",
                         capability.__qualname__, type(self.implementation).__qualname__)
            self._invoke_method(method, listener_proxy)
            self._registered_listeners_by_component.setdefault(component, {})[capability] = listener_proxy

    def unregister(self, component: Component) -> None:
        """Hand the proxies passed by register to the implementation's ``unregister`` method."""
        registered_listeners = self._registered_listeners_by_component.get(component)
        if registered_listeners is None:
            return
        method_name = get_settings().unregister_method
        for capability in component.capabilities:
            try:
                method = self._listener_method(method_name, capability)
            except MethodNotFoundError:
                continue
            listener_proxy = registered_listeners.get(capability)
            if listener_proxy is not None:
                logger.debug("Unregistering proxy for %s in component %s",
                             capability.__qualname__, type(self.implementation).__qualname__)
                self._invoke_method(method, listener_proxy)
                del registered_listeners[capability]
        if not registered_listeners:
            del self._registered_listeners_by_component[component]

    def _listener_method(self, method_name: str, capability: type) -> MethodDescriptor:
        for method in methods_by_name_and_arity(type(self.implementation), method_name, 1):
            if method.parameter_types[0] is capability:
                return method
        raise MethodNotFoundError(f"{method_name}({capability.__qualname__})")

    # Invocation

    def set_invocation_interceptor(self, capability: type, handler: InvocationHandler) -> None:
        """
        Route calls made through proxies for capability to handler.

        :raises InvalidCapabilityError: If capability is not an interface or not implemented.
        """
        self._check_capability(capability)
        self._interceptors[capability] = handler
        logger.debug("Intercepting %s in %s", capability.__qualname__, self)

    def invoke(
            self,
            proxy: Any,
            method: MethodDescriptor,
            args: Sequence[Any],
            kwargs: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """
        Dispatch a call that arrived through a proxy.

        The interceptor for the proxy's capability, or else for the capability
        declaring the method, receives the call; without one the method is
        invoked on the implementation. Failures reach the caller as raised by
        the implementation or interceptor, without wrapper exceptions.
        """
        kwargs = dict(kwargs or {})
        handler = None
        if is_proxy(proxy):
            handler = self._interceptors.get(capability_of(proxy))
        if handler is None:
            handler = self._interceptors.get(method.declaring_type)

        if handler is not None:
            outcome = Outcome.capture(handler.invoke, self.implementation, method, tuple(args), kwargs)
        else:
            outcome = Outcome.capture(method.invoke, self.implementation, args, kwargs)
        return outcome.unwrap()

    def invoke_by_name(self, method_name: str, *args: Any) -> Any:
        """
        Invoke a method of one of the capabilities by name.

        Arguments are converted to the parameter types of the best matching
        signature. Interceptors registered for the declaring capability apply.

        :raises MethodNotFoundError: If no capability method accepts the arguments.
        """
        invocation = MethodInvocation(
            self.implementation,
            method_name,
            self._capability_methods_by_name(method_name, len(args)),
            args,
            handler=lambda method, converted: self.invoke(None, method, converted)
        )
        return invocation.invoke()

    def _capability_methods_by_name(self, method_name: str, count: int) -> set[MethodDescriptor]:
        result: set[MethodDescriptor] = set()
        for capability in self._capabilities:
            result.update(methods_by_name_and_arity(capability, method_name, count))
        return result

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StandardComponent):
            return other.implementation is self.implementation
        return other is self.implementation

    def __hash__(self) -> int:
        return hash(id(self.implementation))

    def __repr__(self) -> str:
        return f"component with impl: {self.implementation!r}"


def _name_of(type_: Any) -> str:
    return getattr(type_, "__qualname__", None) or repr(type_)
