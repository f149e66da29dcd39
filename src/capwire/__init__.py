"""
capwire - capability wiring for Python components.

A component wraps one implementation, exposes the interfaces it implements
as capabilities, hands out proxies for them and injects proxies of peer
components into its setters.
"""

from .api import (
    # Components
    Component,
    Facade,
    InvocationHandler,
    StandardComponent,
    setter_names,
    capability_of,
    handler_of,
    is_proxy,
    Cluster,
    # Introspection
    ancestry_of,
    bounded_ancestry_of,
    capabilities_of,
    capabilities_and_ancestry_of,
    is_interface,
    methods_by_name_and_arity,
    MethodDescriptor,
    ConstructorDescriptor,
    # Instantiation and invocation
    InstantiationContext,
    instantiate,
    resolve_class,
    MethodInvocation,
    Outcome,
    invoke_method,
    # Conversion
    convert,
    convert_all,
    # Errors
    CapwireError,
    CoercionError,
    ConfigurationError,
    InstantiationError,
    InvalidCapabilityError,
    InvocationTargetError,
    MethodNotFoundError,
    # Config
    WiringSettings,
    get_settings,
    reset_settings,
    # Logging
    setup_logging,
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
