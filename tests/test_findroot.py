import math
import random
import threading

import pytest

from rootrace.findroot import (
    Cancelled,
    bisection_method,
    derivative,
    newton_raphson,
    safe_evaluate,
    secant_method,
)
from rootrace.postfix import infix_to_postfix


def _tokens(expression):
    return infix_to_postfix(expression)


def _cancelled_event():
    event = threading.Event()
    event.set()
    return event


def test_safe_evaluate_value():
    assert safe_evaluate(_tokens("x+1"), 2.5) == 3.5


def test_safe_evaluate_division_by_zero_is_nan():
    result = safe_evaluate(_tokens("1/x"), 0.0)
    assert str(result) == "nan"


def test_safe_evaluate_missing_operand_is_nan():
    result = safe_evaluate(_tokens("-x"), 1.0)
    assert str(result) == "nan"


def test_derivative_of_linear():
    assert derivative(_tokens("3*x"), 2.0) == pytest.approx(3.0, abs=1e-6)


@pytest.mark.parametrize("x", [0.5, 3.0, 7.0])
def test_derivative_of_square_is_odd(x):
    tokens = _tokens("x*x")
    assert derivative(tokens, -x) == pytest.approx(-derivative(tokens, x), abs=1e-6)


def test_derivative_nan_outside_domain():
    result = derivative(_tokens("(x-5)^0.5"), 0.0)
    assert str(result) == "nan"


def test_newton_finds_square_root():
    tokens = _tokens("x*x-2")
    root = newton_raphson(tokens)
    assert root == pytest.approx(math.sqrt(2))
    assert abs(safe_evaluate(tokens, root)) < 1e-10


def test_newton_logs_start_and_result():
    messages = []
    newton_raphson(_tokens("x-4"), log=messages.append)
    assert "x = 1.0000000000" in messages[0]
    assert "found root" in messages[-1]


def test_newton_handles_flat_start():
    tokens = _tokens("x*x-2*x")
    root = newton_raphson(tokens)
    assert abs(safe_evaluate(tokens, root)) < 1e-10
    assert min(abs(root), abs(root - 2)) < 1e-6


def test_newton_cancelled_before_start():
    with pytest.raises(Cancelled):
        newton_raphson(_tokens("x*x+1"), cancel=_cancelled_event())


def test_newton_cancelled_while_running():
    event = threading.Event()
    messages = []

    def log(message):
        messages.append(message)
        if len(messages) >= 20:
            event.set()

    with pytest.raises(Cancelled):
        newton_raphson(_tokens("x*x+1"), cancel=event, log=log)
    assert len(messages) >= 20


def test_bisection_finds_root():
    tokens = _tokens("x-3")
    root = bisection_method(tokens, rng=random.Random(0))
    assert abs(root - 3) < 1e-6


def test_bisection_is_reproducible_with_seed():
    tokens = _tokens("x*x-2")
    first = bisection_method(tokens, rng=random.Random(5))
    second = bisection_method(tokens, rng=random.Random(5))
    assert first == second
    assert abs(abs(first) - math.sqrt(2)) < 1e-6


def test_bisection_logs():
    messages = []
    bisection_method(_tokens("x-3"), rng=random.Random(1), log=messages.append)
    assert messages[0].startswith("Bisection")
    assert "found root" in messages[-1]


def test_bisection_cancelled():
    with pytest.raises(Cancelled):
        bisection_method(_tokens("x*x+1"), rng=random.Random(0), cancel=_cancelled_event())


def test_secant_finds_square_root():
    tokens = _tokens("x*x-2")
    root = secant_method(tokens, rng=random.Random(0))
    assert root == pytest.approx(math.sqrt(2))
    assert abs(safe_evaluate(tokens, root)) < 1e-10


def test_secant_root_on_first_pair():
    assert secant_method(_tokens("x")) == 0.0


def test_secant_no_root_returns_none():
    messages = []
    assert secant_method(_tokens("x*x+1"), rng=random.Random(1), log=messages.append) is None
    assert "no root from any" in messages[-1]


def test_secant_cancelled():
    with pytest.raises(Cancelled):
        secant_method(_tokens("x*x-2"), cancel=_cancelled_event())