"""
Class instantiation with best-effort constructor matching.

Constructors are matched against the supplied arguments first by exact
runtime type, then by coercing the arguments to the declared parameter
types. The constructor that worked last for a class is remembered in an
``InstantiationContext`` and tried first the next time, provided the
arguments already have its parameter types. The cache is only a hint: a
miss, or a failure of the cached constructor, falls back to full resolution.
"""
import importlib
import inspect
import logging
import threading
import typing
from typing import Any, NoReturn, Optional, Sequence, Union

from cachetools import LRUCache

from ..config.settings import get_settings
from ..conversion import convert_all, is_instance
from ..errors import CoercionError, InstantiationError
from .descriptors import ConstructorDescriptor, signature_types
from .invocation import is_unchecked
from .support import _NEVER_CAPABILITIES, is_interface

logger = logging.getLogger(__name__)

_T = typing.TypeVar("_T")


def constructors_of(cls: type) -> list[ConstructorDescriptor]:
    """
    Get the public constructor signatures of a class.

    These are the overloads of ``__init__`` if it declares any, otherwise
    ``__init__`` itself. Initializers inherited from interfaces or
    ``object`` count as a constructor without parameters.
    """
    for klass in cls.__mro__:
        if klass in _NEVER_CAPABILITIES or is_interface(klass):
            continue
        initializer = vars(klass).get("__init__")
        if initializer is None:
            continue
        if not inspect.isfunction(initializer):
            break
        result = []
        for function in typing.get_overloads(initializer) or (initializer,):
            described = signature_types(function)
            if described is not None:
                result.append(ConstructorDescriptor(cls, *described))
        return result
    return [ConstructorDescriptor(cls, (), 0)]


def resolve_class(type_name: str) -> type:
    """
    Import a class by name.

    :param type_name: ``"package.module:Class"`` or ``"package.module.Class"``;
                      nested classes are reached with dots after the colon.
    :raises InstantiationError: If the class can not be found.
    """
    module_name, _, qualname = type_name.partition(":")
    if not qualname:
        module_name, _, qualname = type_name.rpartition(".")
    if not module_name or not qualname:
        raise InstantiationError(
            f"class {type_name} can not be found with message: no module given",
            class_name=type_name
        )

    try:
        found: Any = importlib.import_module(module_name)
        for part in qualname.split("."):
            found = getattr(found, part)
    except (ImportError, AttributeError) as e:
        raise InstantiationError(
            f"class {type_name} can not be found with message: {e}",
            class_name=type_name
        ) from e

    if not inspect.isclass(found):
        raise InstantiationError(f"{type_name} is not a class", class_name=type_name)
    return found


def _argument_types(args: Sequence[Any]) -> list[str]:
    return [type(arg).__name__ for arg in args]


class InstantiationContext:
    """
    Owns the constructor cache used by ``instantiate``.

    The cache maps a class to the constructor that last instantiated it
    successfully. Entries are never trusted: a cached constructor that does
    not fit the arguments only leads to full resolution.

    :param maxsize: Number of classes to remember; defaults to the
                    ``constructor_cache_size`` setting.
    """

    def __init__(self, maxsize: Optional[int] = None) -> None:
        self._constructors: LRUCache = LRUCache(
            maxsize=maxsize or get_settings().constructor_cache_size
        )
        self._lock = threading.Lock()

    def cached_constructor(self, cls: type) -> Optional[ConstructorDescriptor]:
        with self._lock:
            return self._constructors.get(cls)

    def remember(self, cls: type, constructor: ConstructorDescriptor) -> None:
        with self._lock:
            self._constructors[cls] = constructor

    def forget(self, cls: Optional[type] = None) -> None:
        with self._lock:
            if cls is None:
                self._constructors.clear()
            else:
                self._constructors.pop(cls, None)

    def __len__(self) -> int:
        return len(self._constructors)

    def instantiate(self, type_: Union[type[_T], str], *args: Any) -> _T:
        """
        Instantiate a class with the given constructor arguments.

        :param type_: The class, or its name (see ``resolve_class``).
        :param args: Positional constructor arguments.
        :return: The new instance.
        :raises InstantiationError: If no constructor accepts the arguments, or a
            constructor failed with an error that is not a programming error.
        """
        cls = resolve_class(type_) if isinstance(type_, str) else type_
        last_failure: Optional[Exception] = None

        cached = self.cached_constructor(cls)
        cached_failure: Optional[Exception] = None
        if cached is not None and self._fits_exactly(cached, args):
            try:
                instance = cached.new_instance(args)
            except Exception as e:
                # a hint only; full resolution decides
                logger.debug("Cached constructor %s failed for %s: %s", cached, _argument_types(args), e)
                cached_failure = last_failure = e
            else:
                logger.debug("Using cached constructor %s", cached)
                return instance

        constructors = [
            c for c in constructors_of(cls)
            if c.accepts(len(args)) and not (cached_failure is not None and c == cached)
        ]

        runtime_types = tuple(type(arg) for arg in args)
        for constructor in constructors:
            if constructor.parameter_types == runtime_types:
                self.remember(cls, constructor)
                return self._new_instance(constructor, args)

        for constructor in constructors:
            try:
                converted = self._fit(constructor, args)
            except CoercionError as e:
                # maybe another one fits
                last_failure = e
                continue
            self.remember(cls, constructor)
            logger.debug("Resolved constructor %s for %s", constructor, _argument_types(args))
            return self._new_instance(constructor, converted)

        if cached_failure is not None:
            # nothing else fits; report what the cached constructor raised
            self._constructor_failed(cached, args, cached_failure)

        raise InstantiationError(
            f"can not instantiate class {cls.__qualname__}: no matching public constructor "
            f"for init args {_argument_types(args)}"
            + (f" ({last_failure})" if last_failure is not None else ""),
            class_name=cls.__qualname__,
            argument_types=_argument_types(args)
        ) from last_failure

    @staticmethod
    def _fits_exactly(constructor: ConstructorDescriptor, args: Sequence[Any]) -> bool:
        return constructor.accepts(len(args)) and all(
            is_instance(arg, type_) for arg, type_ in zip(args, constructor.parameter_types)
        )

    @staticmethod
    def _fit(constructor: ConstructorDescriptor, args: Sequence[Any]) -> list[Any]:
        if not constructor.accepts(len(args)):
            raise CoercionError(
                tuple(args), constructor.parameter_types,
                f"{constructor} does not take {len(args)} argument(s)"
            )
        return convert_all(args, constructor.parameter_types[:len(args)])

    @classmethod
    def _new_instance(cls, constructor: ConstructorDescriptor, args: Sequence[Any]) -> Any:
        try:
            return constructor.new_instance(args)
        except Exception as e:
            cls._constructor_failed(constructor, args, e)

    @staticmethod
    def _constructor_failed(constructor: ConstructorDescriptor, args: Sequence[Any], e: Exception) -> NoReturn:
        if is_unchecked(e):
            raise e
        raise InstantiationError(
            f"can not instantiate class {constructor.owner.__qualname__} due to exception "
            f"in constructor with message: {type(e).__qualname__}: {e}, "
            f"for init args {_argument_types(args)}",
            class_name=constructor.owner.__qualname__,
            argument_types=_argument_types(args)
        ) from e


_default_context: Optional[InstantiationContext] = None


def default_context() -> InstantiationContext:
    """The context shared by callers that do not pass their own."""
    global _default_context
    if _default_context is None:
        _default_context = InstantiationContext()
    return _default_context


def reset_default_context() -> None:
    global _default_context
    _default_context = None


def instantiate(
        type_: Union[type[_T], str],
        *args: Any,
        context: Optional[InstantiationContext] = None
) -> _T:
    """
    Instantiate a class, matching a constructor to the arguments.

    :param type_: The class, or its name as ``"package.module:Class"``.
    :param args: Positional constructor arguments.
    :param context: Context holding the constructor cache; the default context if None.
    """
    if context is None:
        context = default_context()
    return context.instantiate(type_, *args)
