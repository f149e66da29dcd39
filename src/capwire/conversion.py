"""
Argument coercion.

Values are converted to declared parameter types with pydantic in lax mode,
so ``"42"`` becomes ``42`` for an ``int`` parameter and ``"yes"`` becomes
``True`` for a ``bool`` parameter. Values that already have the target type
are passed through untouched.
"""
import inspect
import logging
from typing import Any, Iterable, Sequence

import pydantic
from cachetools import LRUCache, cached
from cachetools.keys import hashkey

from .errors import CoercionError

logger = logging.getLogger(__name__)

_ARBITRARY_TYPES = pydantic.ConfigDict(arbitrary_types_allowed=True)


@cached(cache=LRUCache(maxsize=512), key=lambda target_type: hashkey(target_type))
def _adapter_for(target_type: Any) -> pydantic.TypeAdapter:
    try:
        return pydantic.TypeAdapter(target_type)
    except pydantic.PydanticSchemaGenerationError:
        # plain classes are validated with an isinstance check
        return pydantic.TypeAdapter(target_type, config=_ARBITRARY_TYPES)


def is_any_type(target_type: Any) -> bool:
    return target_type is object or target_type is Any or target_type is inspect.Parameter.empty


def is_instance(value: Any, target_type: Any) -> bool:
    """isinstance that tolerates parameterized generics and non-checkable protocols."""
    if is_any_type(target_type):
        return True
    if not isinstance(target_type, type):
        return False
    try:
        return isinstance(value, target_type)
    except TypeError:
        # protocols without runtime checking only match nominal subclasses
        return target_type in type(value).__mro__


def convert(value: Any, target_type: Any) -> Any:
    """
    Convert a value to the given type.

    :param value: The value to convert.
    :param target_type: The type (or type expression) to convert to.
    :return: The converted value.
    :raises CoercionError: If the value can not be converted.
    """
    if is_instance(value, target_type):
        return value
    try:
        adapter = _adapter_for(target_type)
    except (pydantic.PydanticUserError, TypeError) as e:
        raise CoercionError(value, target_type, str(e)) from e
    try:
        return adapter.validate_python(value)
    except (pydantic.ValidationError, TypeError) as e:
        raise CoercionError(value, target_type, _first_error(e)) from e


def convert_all(values: Sequence[Any], target_types: Iterable[Any]) -> list[Any]:
    """
    Convert values pairwise to the given types.

    Either every value is converted or nothing is returned at all.

    :raises CoercionError: If the number of values and types differ or a value can not be converted.
    """
    target_types = list(target_types)
    if len(values) != len(target_types):
        raise CoercionError(
            tuple(values), tuple(target_types),
            f"expected {len(target_types)} values, got {len(values)}"
        )
    return [convert(value, target_type) for value, target_type in zip(values, target_types)]


def _first_error(e: Exception) -> str:
    if isinstance(e, pydantic.ValidationError) and e.errors():
        return e.errors()[0].get("msg", str(e))
    return str(e)
