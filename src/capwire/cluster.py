from logging import Logger
from typing import Any, Optional, TypeVar

from dependency_injector import containers, providers

from .components.protocols import Component
from .components.standard import StandardComponent
from .config.setup import setup_logging
from .errors import ConfigurationError, InvalidCapabilityError

_C = TypeVar("_C")


class Cluster:
    """
    A facade connecting components under ids.

    Connecting a component wires it with every component already connected:
    each side receives proxies for the capabilities the other exposes
    (``set_reference``) and listener proxies (``register``). Disconnecting
    reverses the bookkeeping; setters keep whatever was injected.

    :param logger: Logger for wiring events; the configured ``capwire`` logger if None.
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.logger = logger if logger is not None else setup_logging()
        self._container = containers.DynamicContainer()
        self._exposed: dict[str, tuple[type, ...]] = {}

    @property
    def components(self) -> dict[str, Component]:
        return {
            component_id: provider()
            for component_id, provider in self._container.providers.items()
        }

    def exposed_capabilities(self, component_id: str) -> tuple[type, ...]:
        return self._exposed[component_id]

    def connect(self, component_id: str, component: Any, *exposed: type) -> Component:
        """
        Connect a component and wire it with the connected ones.

        :param component_id: Id the component is known by.
        :param component: A component, or an implementation to wrap in a StandardComponent.
        :param exposed: Capabilities other components may use; all of its capabilities if empty.
        :return: The connected component.
        :raises ConfigurationError: If the id is already connected.
        :raises InvalidCapabilityError: If an exposed capability is not implemented.
        """
        if component_id in self._exposed:
            raise ConfigurationError(f"component '{component_id}' is already connected")
        if not isinstance(component, Component):
            component = StandardComponent(component)

        exposed = exposed or component.capabilities
        for capability in exposed:
            if not component.implements(capability):
                raise InvalidCapabilityError(
                    f"component '{component_id}' does not implement {capability.__qualname__}"
                )

        self._container.set_provider(component_id, providers.Object(component))
        self._exposed[component_id] = tuple(exposed)
        self.logger.debug("Connected component '%s' exposing %d capabilities", component_id, len(exposed))

        for other_id, other in self.components.items():
            if other_id == component_id:
                continue
            other.set_reference(self, component_id, *self._exposed[component_id])
            component.set_reference(self, other_id, *self._exposed[other_id])
            other.register(component)
            component.register(other)
        return component

    def disconnect(self, component_id: str) -> Component:
        """
        Disconnect a component and undo its wiring bookkeeping.

        :raises ConfigurationError: If the id is not connected.
        """
        component = self._component(component_id)
        delattr(self._container, component_id)
        del self._exposed[component_id]

        for other in self.components.values():
            other.remove_dependency(component_id)
            other.unregister(component)
            component.unregister(other)
        self.logger.debug("Disconnected component '%s'", component_id)
        return component

    def get_proxy(self, component_id: str, capability: type[_C]) -> _C:
        """
        :return: The proxy of component_id for capability.
        :raises ConfigurationError: If the id is not connected.
        :raises InvalidCapabilityError: If the component does not expose capability.
        """
        component = self._component(component_id)
        if capability not in self._exposed[component_id]:
            raise InvalidCapabilityError(
                f"component '{component_id}' does not expose {capability.__qualname__}"
            )
        return component.get_proxy(capability)

    def _component(self, component_id: str) -> Component:
        provider = self._container.providers.get(component_id)
        if provider is None:
            raise ConfigurationError(f"component '{component_id}' is not connected")
        return provider()
