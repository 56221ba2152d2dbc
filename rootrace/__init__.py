"""Find roots of one-variable expressions by racing Newton-Raphson, bisection and secant solvers."""

__version__ = "0.1.0"
__all__ = ["postfix", "findroot", "cli"]