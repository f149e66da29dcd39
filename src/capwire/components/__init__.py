from .protocols import (
    Component,
    Facade,
    InvocationHandler,
)
from .proxy import (
    capability_of,
    handler_of,
    is_proxy,
    new_proxy,
    proxy_class_for,
)
from .standard import (
    StandardComponent,
    setter_names,
)

__all__ = [
    "Component",
    "Facade",
    "InvocationHandler",
    "capability_of",
    "handler_of",
    "is_proxy",
    "new_proxy",
    "proxy_class_for",
    "StandardComponent",
    "setter_names",
]
