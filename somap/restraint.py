"""
Restraint functions scale every weight update of one training step.

A restraint is the learning rate schedule of the map: it maps the current
iteration `t` in [0, T) and the total number of iterations `T` to a scalar
coefficient.
"""
import math


__all__ = [
    "Restraint",
    "NoRestraint",
    "SimpleRestraint",
    "ExpRestraint",
]


class Restraint():
    """Learning rate schedule base class."""

    def __call__(self, t: int, total: int) -> float:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NoRestraint(Restraint):
    """Always returns 1, leaving weight updates untouched."""

    def __call__(self, t: int, total: int) -> float:
        return 1.0


class SimpleRestraint(Restraint):
    """
    Hyperbolic decay `a / (b + t)`.

    Args:
        a (float): Numerator.
        b (float): Offset added to the iteration number.
    """
    def __init__(self, a: float, b: float):
        self.a, self.b = float(a), float(b)

    def __call__(self, t: int, total: int) -> float:
        return self.a / (self.b + t)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(a={self.a}, b={self.b})"


class ExpRestraint(Restraint):
    """
    Exponential decay `initial_rate * exp(-t / T)`.

    Args:
        initial_rate (float): Coefficient at the first iteration.
        denominator (float | None): Fixed decay constant used instead of the
                                    total number of iterations.
    """
    def __init__(self, initial_rate: float, denominator: float | None = None):
        if denominator is not None and denominator <= 0:
            raise ValueError(f"Decay denominator must be positive, got {denominator}")
        self.initial_rate = float(initial_rate)
        self.denominator = denominator

    def __call__(self, t: int, total: int) -> float:
        denominator = self.denominator if self.denominator is not None else total
        if denominator <= 0:
            return self.initial_rate
        return self.initial_rate * math.exp(-t / denominator)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(initial_rate={self.initial_rate}, denominator={self.denominator})"
