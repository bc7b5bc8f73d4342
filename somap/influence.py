"""
Influence functions define the neighborhood of the Best Matching Unit.

An influence function receives the BMU grid position, the current and
total iteration numbers and a tensor of candidate grid positions of shape
(..., 2). It returns, for each candidate, a coefficient in [0, 1] telling
how much that neuron moves towards the current input.
"""
import math
from typing import Callable

import torch


__all__ = [
    "Influence",
    "BMUOnlyInfluence",
    "RadiusReducingInfluence",
    "WidthFuncGaussianInfluence",
    "GaussianInfluence",
    "grid_distance",
]


def _as_coords(coords: torch.Tensor) -> torch.Tensor:
    coords = torch.as_tensor(coords)
    return coords if coords.is_floating_point() else coords.to(torch.float64)


def _progress(t: int, total: int) -> float:
    "Fraction `t / T` of training elapsed."
    return t / total if total > 0 else 0.0


def grid_distance(bmu: tuple[int, int], coords: torch.Tensor) -> torch.Tensor:
    """
    Euclidean distance between the `bmu` grid position and each position in `coords`.

    Args:
        bmu (tuple[int, int]): The (x, y) position of the Best Matching Unit.
        coords (torch.Tensor): Candidate positions of shape (..., 2).

    Returns:
        torch.Tensor: Distances of shape (...).
    """
    coords = _as_coords(coords)
    origin = torch.tensor(bmu, dtype=coords.dtype, device=coords.device)
    return (coords - origin).pow(2).sum(-1).sqrt()


class Influence():
    """Neighborhood function base class."""

    def __call__(self, bmu: tuple[int, int], t: int, total: int, coords: torch.Tensor) -> torch.Tensor:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class BMUOnlyInfluence(Influence):
    """Only the BMU itself is updated."""

    def __call__(self, bmu: tuple[int, int], t: int, total: int, coords: torch.Tensor) -> torch.Tensor:
        coords = _as_coords(coords)
        origin = torch.tensor(bmu, dtype=coords.dtype, device=coords.device)
        return (coords == origin).all(-1).to(coords.dtype)


class RadiusReducingInfluence(Influence):
    """
    Updates every neuron within a shrinking radius around the BMU at full strength.

    The radius is `q(t) = R / (1 + t / T)`, so it decreases from `R` at the
    first iteration towards `R / 2` at the last one.

    Args:
        radius (float): Initial neighborhood radius `R`.
    """
    def __init__(self, radius: float):
        if radius < 0:
            raise ValueError(f"Radius must be non-negative, got {radius}")
        self.radius = float(radius)

    def radius_at(self, t: int, total: int) -> float:
        return self.radius / (1 + _progress(t, total))

    def __call__(self, bmu: tuple[int, int], t: int, total: int, coords: torch.Tensor) -> torch.Tensor:
        d = grid_distance(bmu, coords)
        return (d <= self.radius_at(t, total)).to(d.dtype)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(radius={self.radius})"


class WidthFuncGaussianInfluence(Influence):
    """
    Gaussian neighborhood `exp(-d**2 / (2 * q(t)**2))` with a custom width function.

    A width of 0 collapses the neighborhood to the BMU alone.

    Args:
        width_fn (Callable[[int, int], float]): Neighborhood width `q(t, T)`.
    """
    def __init__(self, width_fn: Callable[[int, int], float]):
        self.width_fn = width_fn

    def width(self, t: int, total: int) -> float:
        return float(self.width_fn(t, total))

    def __call__(self, bmu: tuple[int, int], t: int, total: int, coords: torch.Tensor) -> torch.Tensor:
        d = grid_distance(bmu, coords)
        q = self.width(t, total)
        if q == 0:
            return (d == 0).to(d.dtype)
        return torch.exp(-d.pow(2) / (2 * q * q))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(width_fn={self.width_fn})"


class GaussianInfluence(WidthFuncGaussianInfluence):
    """
    Gaussian neighborhood whose width decays as `q(t) = W0 * exp(-t / T)`.

    Args:
        initial_width (float): Neighborhood width `W0` at the first iteration.
    """
    def __init__(self, initial_width: float):
        if initial_width < 0:
            raise ValueError(f"Initial width must be non-negative, got {initial_width}")
        self.initial_width = float(initial_width)
        super().__init__(self._decayed_width)

    def _decayed_width(self, t: int, total: int) -> float:
        return self.initial_width * math.exp(-_progress(t, total))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(initial_width={self.initial_width})"
