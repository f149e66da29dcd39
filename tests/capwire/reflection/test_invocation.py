import pytest

from capwire.errors import InvocationTargetError, MethodNotFoundError
from capwire.reflection.invocation import (
    MethodInvocation,
    Outcome,
    invoke_method,
    is_unchecked,
    root_cause,
)
from capwire.reflection.support import methods_by_name_and_arity


class Calculator:
    def add(self, a: int, b: int) -> int:
        return a + b

    def echo(self, value: str) -> str:
        return value

    def scale(self, value: float, factor: float = 2.0) -> float:
        return value * factor

    def fail(self) -> None:
        raise KeyError("missing")


class TestOutcome:
    """Tests for Outcome."""

    def test_value(self):
        outcome = Outcome.capture(lambda x: x * 2, 21)
        assert not outcome.failed
        assert outcome.unwrap() == 42

    def test_failure_is_raised_on_unwrap(self):
        outcome = Outcome.capture(Calculator().fail)
        assert outcome.failed
        with pytest.raises(KeyError, match="missing"):
            outcome.unwrap()

    def test_wrappers_are_stripped(self):
        original = LookupError("original")
        inner = InvocationTargetError("inner", original)
        outer = InvocationTargetError("outer", inner)

        def raise_wrapped():
            raise outer

        with pytest.raises(LookupError) as exc_info:
            Outcome.capture(raise_wrapped).unwrap()
        assert exc_info.value is original

    def test_wrapper_without_cause_is_kept(self):
        wrapper = InvocationTargetError("no cause", None)
        assert root_cause(wrapper) is wrapper


class TestIsUnchecked:
    """Tests for is_unchecked."""

    @pytest.mark.parametrize("failure", [
        RuntimeError(), ValueError(), TypeError(), KeyError(), ZeroDivisionError(),
        AttributeError(), AssertionError(), KeyboardInterrupt(),
    ])
    def test_programming_errors(self, failure):
        assert is_unchecked(failure)

    @pytest.mark.parametrize("failure", [OSError(), Exception(), ConnectionError()])
    def test_other_failures(self, failure):
        assert not is_unchecked(failure)


class TestMethodInvocation:
    """Tests for MethodInvocation."""

    def test_exact_match(self):
        calculator = Calculator()
        candidates = methods_by_name_and_arity(Calculator, "add", 2)
        assert MethodInvocation(calculator, "add", candidates, (1, 2)).invoke() == 3

    def test_arguments_are_converted(self):
        calculator = Calculator()
        candidates = methods_by_name_and_arity(Calculator, "add", 2)
        assert MethodInvocation(calculator, "add", candidates, ("1", "2")).invoke() == 3

    def test_no_candidate_accepts(self):
        calculator = Calculator()
        candidates = methods_by_name_and_arity(Calculator, "add", 2)
        with pytest.raises(MethodNotFoundError, match="no method 'add'"):
            MethodInvocation(calculator, "add", candidates, ("x", "y")).invoke()

    def test_no_candidates(self):
        with pytest.raises(MethodNotFoundError):
            MethodInvocation(Calculator(), "add", [], (1, 2)).invoke()

    def test_handler_performs_call(self):
        calls = []
        candidates = methods_by_name_and_arity(Calculator, "add", 2)

        def handler(method, args):
            calls.append((method.name, list(args)))
            return "handled"

        result = MethodInvocation(Calculator(), "add", candidates, ("1", 2), handler=handler).invoke()

        assert result == "handled"
        assert calls == [("add", [1, 2])]

    def test_resolve_returns_converted_arguments(self):
        candidates = methods_by_name_and_arity(Calculator, "add", 2)
        method, args = MethodInvocation(Calculator(), "add", candidates, ("4", 5)).resolve()
        assert method.name == "add"
        assert args == [4, 5]


class TestInvokeMethod:
    """Tests for invoke_method."""

    def test_invoke_by_name(self):
        assert invoke_method(Calculator(), "echo", "hi") == "hi"

    def test_defaults(self):
        assert invoke_method(Calculator(), "scale", "1.5") == 3.0
        assert invoke_method(Calculator(), "scale", 1, 3) == 3.0

    def test_unknown_method(self):
        with pytest.raises(MethodNotFoundError):
            invoke_method(Calculator(), "nothing")

    def test_failures_propagate(self):
        with pytest.raises(KeyError):
            invoke_method(Calculator(), "fail")
