from typing import Optional, Protocol

import pytest

from capwire.conversion import convert, convert_all, is_instance
from capwire.errors import CoercionError


class Shape(Protocol):
    def area(self) -> float:
        ...


class Square(Shape):
    def area(self) -> float:
        return 1.0


class TestConvert:
    """Tests for convert."""

    def test_same_type_passes_through(self):
        value = ["a"]
        assert convert(value, list) is value

    def test_string_to_int(self):
        assert convert("42", int) == 42

    def test_string_to_bool(self):
        assert convert("true", bool) is True
        assert convert("no", bool) is False

    def test_string_to_float(self):
        assert convert("1.5", float) == 1.5

    def test_parameterized_types(self):
        assert convert(["1", "2"], list[int]) == [1, 2]

    def test_optional(self):
        assert convert(None, Optional[int]) is None

    def test_object_accepts_anything(self):
        value = object()
        assert convert(value, object) is value

    def test_not_convertible(self):
        with pytest.raises(CoercionError) as exc_info:
            convert("x", int)

        assert exc_info.value.value == "x"
        assert exc_info.value.target_type is int
        assert "int" in str(exc_info.value)

    def test_coercion_error_is_value_error(self):
        with pytest.raises(ValueError):
            convert("x", int)

    def test_arbitrary_class(self):
        square = Square()
        assert convert(square, Square) is square
        with pytest.raises(CoercionError):
            convert("square", Square)

    def test_protocol_without_runtime_checking(self):
        square = Square()
        assert convert(square, Shape) is square


class TestConvertAll:
    """Tests for convert_all."""

    def test_pairwise(self):
        assert convert_all(["1", "x"], [int, str]) == [1, "x"]

    def test_all_or_nothing(self):
        with pytest.raises(CoercionError):
            convert_all(["1", "x"], [int, int])

    def test_length_mismatch(self):
        with pytest.raises(CoercionError, match="expected 2 values, got 1"):
            convert_all(["1"], [int, int])


class TestIsInstance:
    """Tests for is_instance."""

    def test_plain(self):
        assert is_instance(1, int)
        assert not is_instance("1", int)

    def test_generic_alias_is_not_checked(self):
        assert not is_instance([1], list[int])

    def test_nominal_protocol(self):
        assert is_instance(Square(), Shape)
        assert not is_instance(object(), Shape)
