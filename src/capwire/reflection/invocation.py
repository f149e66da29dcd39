"""
Method resolution and invocation outcomes.

``MethodInvocation`` picks the best matching signature among candidate
methods for a list of arguments and calls it. ``Outcome`` carries either the
value returned by a call or the failure it raised; ``Outcome.unwrap`` strips
framework wrapper exceptions so that callers observe the original failure.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from ..conversion import convert_all, is_instance
from ..errors import CoercionError, InvocationTargetError, MethodNotFoundError
from .descriptors import MethodDescriptor
from .support import public_methods_of

logger = logging.getLogger(__name__)

# failures signalling a programming error; these pass through unwrapped
UNCHECKED_FAILURES: tuple[type[Exception], ...] = (
    RuntimeError,
    ValueError,
    TypeError,
    LookupError,
    ArithmeticError,
    AttributeError,
    AssertionError,
)

WRAPPER_FAILURES: tuple[type[Exception], ...] = (InvocationTargetError,)

MethodHandler = Callable[[MethodDescriptor, Sequence[Any]], Any]


def is_unchecked(failure: BaseException) -> bool:
    return isinstance(failure, UNCHECKED_FAILURES) or not isinstance(failure, Exception)


def root_cause(failure: BaseException) -> BaseException:
    """Strip wrapper exceptions until the original failure is reached."""
    while isinstance(failure, WRAPPER_FAILURES) and failure.__cause__ is not None:
        failure = failure.__cause__
    return failure


@dataclass(frozen=True)
class Outcome:
    """The result of a call: a value, or the failure raised instead."""
    value: Any = None
    failure: Optional[Exception] = None

    @classmethod
    def capture(cls, function: Callable, *args, **kwargs) -> "Outcome":
        try:
            return cls(value=function(*args, **kwargs))
        except Exception as e:
            return cls(failure=e)

    @property
    def failed(self) -> bool:
        return self.failure is not None

    def unwrap(self) -> Any:
        """
        :return: The value of the call.
        :raises: The original failure, with every wrapper layer removed.
        """
        if self.failure is None:
            return self.value
        raise root_cause(self.failure)


class MethodInvocation:
    """
    Resolves a call by method name against a set of candidate signatures.

    Candidates whose arity accepts the arguments are tried first for an exact
    type match, then for a match after argument coercion.

    :param target: The object to invoke the method on.
    :param method_name: Name of the method, used in error messages.
    :param candidates: Candidate method signatures.
    :param args: Positional arguments.
    :param handler: Optional callable receiving (method, args) that performs the call
                    instead of invoking the method on the target directly.
    """

    def __init__(
            self,
            target: object,
            method_name: str,
            candidates: Iterable[MethodDescriptor],
            args: Sequence[Any] = (),
            handler: Optional[MethodHandler] = None
    ) -> None:
        self.target = target
        self.method_name = method_name
        self.candidates = sorted(candidates, key=str)
        self.args = tuple(args)
        self.handler = handler

    def resolve(self) -> tuple[MethodDescriptor, list[Any]]:
        """
        :return: The chosen method and the (possibly coerced) arguments.
        :raises MethodNotFoundError: If no candidate accepts the arguments.
        """
        count = len(self.args)
        matching = [method for method in self.candidates if method.accepts(count)]

        for method in matching:
            if all(is_instance(arg, type_) for arg, type_ in zip(self.args, method.parameter_types)):
                return method, list(self.args)

        last_failure: Optional[CoercionError] = None
        for method in matching:
            try:
                return method, convert_all(self.args, method.parameter_types[:count])
            except CoercionError as e:
                last_failure = e

        raise MethodNotFoundError(
            f"no method '{self.method_name}' on {type(self.target).__qualname__} "
            f"accepts arguments ({', '.join(type(arg).__name__ for arg in self.args)})"
        ) from last_failure

    def invoke(self) -> Any:
        method, args = self.resolve()
        logger.debug("Invoking %s on %s", method, type(self.target).__qualname__)
        if self.handler is not None:
            return self.handler(method, args)
        return method.invoke(self.target, args)


def invoke_method(target: object, method_name: str, *args: Any) -> Any:
    """
    Invoke a public method by name; arguments are converted if needed.

    :param target: The object on which the method is invoked.
    :param method_name: Name of the method.
    :param args: Zero or more positional arguments.
    :return: Whatever the method returns.
    :raises MethodNotFoundError: If no suitable method is found.
    """
    candidates = [method for method in public_methods_of(type(target)) if method.name == method_name]
    return MethodInvocation(target, method_name, candidates, args).invoke()
