from typing import Optional, Sequence


class CapwireError(Exception):
    """Base class for all framework errors."""


class ConfigurationError(CapwireError):
    """Raised when a component can not be wired as configured."""


class InvalidCapabilityError(CapwireError, TypeError):
    """Raised when a type is not a usable capability of a component."""


class CoercionError(CapwireError, ValueError):
    """Raised when a value can not be converted to a target type."""

    def __init__(self, value: object, target_type: object, reason: Optional[str] = None) -> None:
        self.value = value
        self.target_type = target_type
        message = f"can not convert {type(value).__name__} {value!r} to {_type_name(target_type)}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class MethodNotFoundError(CapwireError, AttributeError):
    """Raised when no method matches a name and a set of arguments."""


class InstantiationError(CapwireError):
    """
    Raised when a class can not be instantiated.

    :param class_name: Name of the class that was attempted.
    :param argument_types: Names of the runtime types of the arguments.
    """

    def __init__(
            self,
            message: str,
            class_name: Optional[str] = None,
            argument_types: Sequence[str] = ()
    ) -> None:
        super().__init__(message)
        self.class_name = class_name
        self.argument_types = tuple(argument_types)


class InvocationTargetError(CapwireError):
    """Wraps a failure raised inside an invoked method; the cause is the original failure."""

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(message)
        self.__cause__ = cause

    @property
    def target_exception(self) -> BaseException:
        return self.__cause__


def _type_name(type_: object) -> str:
    return getattr(type_, "__qualname__", None) or repr(type_)
