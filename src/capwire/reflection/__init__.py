from .descriptors import AccessorDescriptor, ConstructorDescriptor, MethodDescriptor
from .instantiation import (
    InstantiationContext,
    constructors_of,
    default_context,
    instantiate,
    reset_default_context,
    resolve_class,
)
from .invocation import MethodInvocation, Outcome, invoke_method, is_unchecked, root_cause
from .support import (
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

__all__ = [
    "AccessorDescriptor",
    "ConstructorDescriptor",
    "MethodDescriptor",
    "InstantiationContext",
    "constructors_of",
    "default_context",
    "instantiate",
    "reset_default_context",
    "resolve_class",
    "MethodInvocation",
    "Outcome",
    "invoke_method",
    "is_unchecked",
    "root_cause",
    "ancestry_of",
    "bounded_ancestry_of",
    "capabilities_and_ancestry_of",
    "capabilities_of",
    "is_assignable",
    "is_interface",
    "methods_by_name_and_arity",
    "methods_by_names_and_arity",
    "public_methods_of",
]
