# rootrace

rootrace finds a root of an equation `f(x) = 0` in one variable. The
expression is written in infix form and turned into postfix tokens. Three
solvers then run in parallel threads: Newton-Raphson starting from
`x = 1`, bisection over random integer intervals in `[-10000, 10000]`, and
the secant method from a set of fixed starting pairs followed by a few
random pairs in `[-10, 10]`. The first solver whose answer satisfies
`|f(x)| < 1e-10` wins, and the other solvers are stopped.

## Expressions

An expression may contain:

- numbers such as `3`, `2.5` or `.75`
- the variable `x`
- the operators `+ - * / ^`
- parentheses

All operators, `^` included, group left to right. `^` binds tighter than
`*` and `/`, and those bind tighter than `+` and `-`. There is no unary
minus, so write `0-x` rather than `-x`. Unmatched parentheses are
tolerated; any other malformed input is rejected.

## Command line

Install the package with `pip install .`, then run:

```
rootrace "x^2-2"
```

The program prints the postfix form of the expression, how long the search
took, which solver found the root, the root itself and the value of the
expression there.

Options:

- `--timeout SECONDS` gives up after that many seconds and reports that no
  root was found.
- `-v`, `--verbose` prints every step of every solver.

If the expression is left out, keypad keys are read from standard input:
the characters `0-9 + - * / ^ . ( ) x`, with `E` confirming the input and
`B` deleting the last character. Whitespace is ignored, at most 99
characters are kept, and any other character is an error. For example:

```
echo "x^2-3BE" | rootrace
```

enters `x^2-` followed by `3`, deletes it, and confirms `x^2-`, which is
then rejected as malformed.

The exit status is 0 after a search (whether or not a root was found) and
1 for invalid input.

## Library use

```python
from rootrace.postfix import infix_to_postfix, evaluate_postfix, format_tokens
from rootrace.findroot import newton_raphson, secant_method
from rootrace.cli import race_solvers, apply_keys

tokens = infix_to_postfix("x^2-2")
print(format_tokens(tokens))        # x 2.00 ^ 2.00 -
print(evaluate_postfix(tokens, 3))  # 7.0

root = newton_raphson(tokens)
result = race_solvers(tokens, timeout=5)
if result.found:
    print(result.method, result.root, result.value, result.elapsed)

print(apply_keys("x+1BE"))          # x+
```

- `rootrace.postfix`: `infix_to_postfix` raises `ExpressionError` for
  malformed input. `evaluate_postfix` raises `EvaluationError` for a
  division by zero or a malformed token sequence. `format_tokens` renders
  tokens separated by spaces, numbers with two decimals.
- `rootrace.findroot`: `newton_raphson` and `bisection_method` keep going
  until they find a root; `secant_method` returns `None` when every
  starting pair fails. Each takes an optional `cancel` event (a
  `threading.Event`; setting it raises `Cancelled`) and an optional `log`
  callable that receives progress messages. `bisection_method` and
  `secant_method` also take an optional `random.Random`. `safe_evaluate`
  returns `nan` where the expression cannot be evaluated, and `derivative`
  gives a central-difference derivative.
- `rootrace.cli`: `race_solvers` returns a `RaceResult` with `root`,
  `method`, `value`, `elapsed` and `found`. `KeyBuffer` and `apply_keys`
  handle keypad input.

## What it does not do

rootrace does not read a physical keypad or any other hardware; keypad
input comes only from standard input as described above. If no solver
finds a root and no `--timeout` is given, the search does not end on its
own, since Newton-Raphson and bisection keep trying.

## Tests

```
pip install .[test]
pytest
```