"""
Public API of capwire.

Import only from this module (or the package) for stable API access.
"""

from .cluster import Cluster
from .components.protocols import Component, Facade, InvocationHandler
from .components.proxy import capability_of, handler_of, is_proxy
from .components.standard import StandardComponent, setter_names
from .config.settings import WiringSettings, get_settings, reset_settings
from .config.setup import setup_logging
from .conversion import convert, convert_all
from .errors import (
    CapwireError,
    CoercionError,
    ConfigurationError,
    InstantiationError,
    InvalidCapabilityError,
    InvocationTargetError,
    MethodNotFoundError,
)
from .reflection.descriptors import ConstructorDescriptor, MethodDescriptor
from .reflection.instantiation import InstantiationContext, instantiate, resolve_class
from .reflection.invocation import MethodInvocation, Outcome, invoke_method
from .reflection.support import (
    ancestry_of,
    bounded_ancestry_of,
    capabilities_and_ancestry_of,
    capabilities_of,
    is_interface,
    methods_by_name_and_arity,
)

__all__ = [
    # Components
    "Component",
    "Facade",
    "InvocationHandler",
    "StandardComponent",
    "setter_names",
    "capability_of",
    "handler_of",
    "is_proxy",
    "Cluster",
    # Introspection
    "ancestry_of",
    "bounded_ancestry_of",
    "capabilities_of",
    "capabilities_and_ancestry_of",
    "is_interface",
    "methods_by_name_and_arity",
    "MethodDescriptor",
    "ConstructorDescriptor",
    # Instantiation and invocation
    "InstantiationContext",
    "instantiate",
    "resolve_class",
    "MethodInvocation",
    "Outcome",
    "invoke_method",
    # Conversion
    "convert",
    "convert_all",
    # Errors
    "CapwireError",
    "CoercionError",
    "ConfigurationError",
    "InstantiationError",
    "InvalidCapabilityError",
    "InvocationTargetError",
    "MethodNotFoundError",
    # Config
    "WiringSettings",
    "get_settings",
    "reset_settings",
    # Logging
    "setup_logging",
]
