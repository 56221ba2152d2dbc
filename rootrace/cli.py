"""Command line front end: read an expression, then race three root finders against each other."""

from __future__ import annotations

import argparse
import math
import random
import sys
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from .findroot import Cancelled, bisection_method, newton_raphson, safe_evaluate, secant_method
from .postfix import ExpressionError, Token, format_tokens, infix_to_postfix

CONFIRM_KEY = "E"
BACKSPACE_KEY = "B"
KEYPAD_KEYS = frozenset("0123456789+-*/^.()x" + CONFIRM_KEY + BACKSPACE_KEY)
MAX_LENGTH = 99
_TOLERANCE = 1e-10

Log = Callable[[str], None]


class KeyBuffer:
    """The text typed so far on the 7x4 keypad.

    ``E`` confirms the input and ``B`` deletes the last character.
    """

    def __init__(self) -> None:
        self._chars: list[str] = []

    def press(self, key: str) -> bool:
        """Handle one key; return True when the key confirms the input."""
        if key not in KEYPAD_KEYS:
            raise ValueError(f"{key!r} is not a key on the keypad")
        if key == CONFIRM_KEY:
            return True
        if key == BACKSPACE_KEY:
            if self._chars:
                self._chars.pop()
        elif len(self._chars) < MAX_LENGTH:
            self._chars.append(key)
        return False

    def text(self) -> str:
        """Return the current input."""
        return "".join(self._chars)


def apply_keys(keys: Iterable[str]) -> str:
    """Feed key presses to a fresh buffer up to the first confirm key and return the text."""
    buffer = KeyBuffer()
    for key in keys:
        if buffer.press(key):
            break
    return buffer.text()


@dataclass(frozen=True)
class RaceResult:
    """Outcome of a race between the root finders."""

    root: float | None
    method: str | None
    value: float | None
    elapsed: float

    @property
    def found(self) -> bool:
        """True when some method found a root."""
        return self.root is not None


def race_solvers(
    tokens: Sequence[Token],
    timeout: float | None = None,
    log: Log | None = None,
) -> RaceResult:
    """Run Newton-Raphson, bisection and secant in parallel; the first verified root wins.

    A root counts only if |f(root)| < 1e-10. With ``timeout`` set, the race is
    abandoned after that many seconds and no root is reported.
    """
    cancel = threading.Event()
    settled = threading.Event()
    lock = threading.Lock()
    winner: dict[str, float | str] = {}
    running = 3

    solvers: list[tuple[str, Callable[[], float | None]]] = [
        ("Newton-Raphson", lambda: newton_raphson(tokens, cancel, log)),
        ("Bisection", lambda: bisection_method(tokens, random.Random(), cancel, log)),
        ("Secant", lambda: secant_method(tokens, random.Random(), cancel, log)),
    ]

    def worker(name: str, solve: Callable[[], float | None]) -> None:
        nonlocal running
        try:
            result = solve()
        except Cancelled:
            result = None
        with lock:
            if not winner and result is not None and math.isfinite(result):
                fx = safe_evaluate(tokens, result)
                if abs(fx) < _TOLERANCE:
                    winner.update(root=result, method=name, value=fx)
                    cancel.set()
                    settled.set()
            running -= 1
            if running == 0:
                settled.set()

    start = time.monotonic()
    threads = [
        threading.Thread(target=worker, args=(name, solve), name=name, daemon=True)
        for name, solve in solvers
    ]
    for thread in threads:
        thread.start()
    settled.wait(timeout)
    cancel.set()
    for thread in threads:
        thread.join()
    elapsed = time.monotonic() - start

    if not winner:
        return RaceResult(None, None, None, elapsed)
    return RaceResult(
        float(winner["root"]), str(winner["method"]), float(winner["value"]), elapsed
    )


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rootrace",
        description="Find a root of an expression in x by racing three numerical methods.",
    )
    parser.add_argument(
        "expression",
        nargs="?",
        help="expression in x; if omitted, keypad keys are read from standard input "
        "('E' confirms, 'B' deletes the last character)",
    )
    parser.add_argument("--timeout", type=float, default=None, help="give up after this many seconds")
    parser.add_argument("-v", "--verbose", action="store_true", help="show every solver step")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line tool; return the exit status."""
    args = _parser().parse_args(argv)

    if args.expression is not None:
        expression = args.expression
    else:
        print("Enter the expression on the keypad ('E' confirms, 'B' deletes the last character):")
        try:
            expression = apply_keys(ch for ch in sys.stdin.read() if not ch.isspace())
        except ValueError as exc:
            print(f"Error: {exc}")
            return 1
        print(f"Expression entered: {expression}")

    try:
        tokens = infix_to_postfix(expression)
    except ExpressionError as exc:
        print(f"Error: invalid input expression: {exc}")
        return 1

    print(f"Postfix expression: {format_tokens(tokens)}")

    log: Log | None = None
    if args.verbose:
        print_lock = threading.Lock()

        def log(message: str) -> None:
            with print_lock:
                print(message)

    result = race_solvers(tokens, args.timeout, log)
    print(f"Time to find root: {result.elapsed:.6f} seconds")

    if result.found:
        print(f"{result.method} found root: {result.root:.10f}")
        fx = safe_evaluate(tokens, result.root)
        print(f"Value at root {result.root:.10f} is: {fx:.10f}")
        if not abs(fx) <= _TOLERANCE:
            print("Warning: the value at the root is not close enough to 0!")
    else:
        print("No valid root found!")
    return 0


if __name__ == "__main__":
    sys.exit(main())