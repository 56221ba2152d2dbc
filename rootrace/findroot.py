"""Root finders for postfix expressions: Newton-Raphson, bisection and secant."""

from __future__ import annotations

import math
import random
import threading
from typing import Callable, Sequence

from .postfix import EvaluationError, Token, evaluate_postfix

_EPSILON = 1e-10
_STEP = 1e-6
_SIGN_TOLERANCE = 1e-5
_SECANT_MAX_ITER = 500
_SECANT_RANDOM_ATTEMPTS = 5
_INITIAL_PAIRS = (
    (-0.1, 0.0),
    (0.0, 0.1),
    (-1.0, -0.8),
    (-0.9, -0.7),
    (-1.0, 1.0),
    (1.0, 2.0),
    (-2.0, -1.0),
)

Log = Callable[[str], None]


class Cancelled(Exception):
    """The search was stopped through its cancel event."""


def _discard(message: str) -> None:
    """Drop a log message."""


def _checkpoint(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise Cancelled()


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def safe_evaluate(tokens: Sequence[Token], x: float) -> float:
    """Evaluate the expression at ``x``, giving nan where it cannot be evaluated."""
    try:
        return evaluate_postfix(tokens, x)
    except EvaluationError:
        return math.nan


def derivative(tokens: Sequence[Token], x: float) -> float:
    """Central-difference derivative at ``x``; nan if either sample is not finite."""
    above = safe_evaluate(tokens, x + _STEP)
    below = safe_evaluate(tokens, x - _STEP)
    if not _finite(above, below):
        return math.nan
    return (above - below) / (2 * _STEP)


def newton_raphson(
    tokens: Sequence[Token],
    cancel: threading.Event | None = None,
    log: Log | None = None,
) -> float:
    """Newton-Raphson from x = 1, iterating until |f(x)| < 1e-10.

    Runs without bound; setting ``cancel`` raises :class:`Cancelled`.
    """
    emit = log or _discard
    x = 1.0
    emit(f"Newton-Raphson: starting from x = {x:.10f}")
    while True:
        _checkpoint(cancel)
        fx = safe_evaluate(tokens, x)
        dfx = derivative(tokens, x)

        if not _finite(fx, dfx):
            emit(f"Newton-Raphson: invalid value at x = {x:.10f}, retrying further on")
            x += 0.1
            continue

        if abs(fx) < _EPSILON:
            emit(f"Newton-Raphson: found root x = {x:.10f} (f(x) = {fx:.10f})")
            return x

        if abs(dfx) < _EPSILON:
            emit(f"Newton-Raphson: derivative too small at x = {x:.10f}, stepping")
            x += _STEP
            continue

        x_next = x - fx / dfx
        if not _finite(x_next):
            emit(f"Newton-Raphson: invalid next iterate at x = {x:.10f}, retrying further on")
            x += 0.1
            continue

        x = x_next
        emit(f"Newton-Raphson: next iterate x = {x:.10f}")


def bisection_method(
    tokens: Sequence[Token],
    rng: random.Random | None = None,
    cancel: threading.Event | None = None,
    log: Log | None = None,
) -> float:
    """Bisection over random integer intervals in [-10000, 10000] until a root is found.

    Runs without bound; setting ``cancel`` raises :class:`Cancelled`.
    """
    emit = log or _discard
    rng = rng or random.Random()
    while True:
        _checkpoint(cancel)
        a, b = sorted((float(rng.randint(-10000, 10000)), float(rng.randint(-10000, 10000))))
        emit(f"Bisection: trying random interval [{a:.10f}, {b:.10f}]")

        fa = safe_evaluate(tokens, a)
        fb = safe_evaluate(tokens, b)
        if not _finite(fa, fb):
            emit(f"Bisection: invalid value on interval [{a:.10f}, {b:.10f}]")
            continue
        if fa * fb >= 0:
            emit(f"Bisection: no sign change on interval [{a:.10f}, {b:.10f}]")
            continue

        while True:
            _checkpoint(cancel)
            c = (a + b) / 2
            fc = safe_evaluate(tokens, c)
            if not _finite(fc):
                emit(f"Bisection: invalid value at x = {c:.10f} in [{a:.10f}, {b:.10f}]")
                break
            if abs(fc) < _EPSILON or abs(b - a) < _EPSILON:
                emit(f"Bisection: found root x = {c:.10f} (f(x) = {fc:.10f})")
                return c
            if fa * fc < 0:
                b = c
            else:
                a, fa = c, fc


def _secant_from(
    tokens: Sequence[Token],
    x0: float,
    x1: float,
    label: str,
    cancel: threading.Event | None,
    emit: Log,
) -> float | None:
    """Run the secant iteration from one starting pair; return the root or None."""
    f0 = safe_evaluate(tokens, x0)
    f1 = safe_evaluate(tokens, x1)
    if not _finite(f0, f1):
        emit(f"Secant: invalid value at x0 = {x0:.10f}, x1 = {x1:.10f}")
        return None
    if f0 * f1 >= 0 and abs(f0) > _SIGN_TOLERANCE and abs(f1) > _SIGN_TOLERANCE:
        emit(f"Secant: skipping {label}pair (x0 = {x0:.10f}, x1 = {x1:.10f}) without sign change")
        return None

    emit(f"Secant: trying {label}pair (x0 = {x0:.10f}, x1 = {x1:.10f})")
    for _ in range(_SECANT_MAX_ITER):
        _checkpoint(cancel)
        f0 = safe_evaluate(tokens, x0)
        f1 = safe_evaluate(tokens, x1)
        if not _finite(f0, f1):
            emit(f"Secant: invalid value at x0 = {x0:.10f}, x1 = {x1:.10f}")
            return None
        if abs(f1) < _EPSILON:
            emit(f"Secant: found root x = {x1:.10f} (f(x) = {f1:.10f})")
            return x1
        if abs(f1 - f0) < _EPSILON:
            emit(f"Secant: denominator too small at x0 = {x0:.10f}, x1 = {x1:.10f}")
            return None
        x2 = x1 - f1 * (x1 - x0) / (f1 - f0)
        if not _finite(x2):
            emit(f"Secant: invalid next iterate at x0 = {x0:.10f}, x1 = {x1:.10f}")
            return None
        x0, x1 = x1, x2
    return None


def secant_method(
    tokens: Sequence[Token],
    rng: random.Random | None = None,
    cancel: threading.Event | None = None,
    log: Log | None = None,
) -> float | None:
    """Secant method from fixed starting pairs, then a few random ones in [-10, 10].

    Returns the root, or None when every starting pair fails.
    """
    emit = log or _discard
    for x0, x1 in _INITIAL_PAIRS:
        _checkpoint(cancel)
        root = _secant_from(tokens, x0, x1, "", cancel, emit)
        if root is not None:
            return root

    emit("Secant: no root from the fixed pairs, trying random pairs")
    rng = rng or random.Random()
    for _ in range(_SECANT_RANDOM_ATTEMPTS):
        _checkpoint(cancel)
        x0 = float(rng.randint(-10, 10))
        x1 = float(rng.randint(-10, 10))
        root = _secant_from(tokens, x0, x1, "random ", cancel, emit)
        if root is not None:
            return root

    emit("Secant: no root from any starting pair")
    return None