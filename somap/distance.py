"""
Distance metrics used to find the Best Matching Unit.

Each metric reduces over the last dimension and broadcasts over the
others, so the distance from one input to every neuron of a
(rows, cols, width) weights tensor is a single call returning (rows, cols).
"""
from typing import Callable

import torch


__all__ = [
    "DistanceFn",
    "euclidean_distance",
    "manhattan_distance",
    "chebyshev_distance",
    "get_distance",
]


DistanceFn = Callable[[torch.Tensor, torch.Tensor], torch.Tensor]


def euclidean_distance(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Calculates the Euclidean distance between `a` and `b`.

    Args:
        a (torch.Tensor): The first tensor.
        b (torch.Tensor): The second tensor, broadcastable to `a`.
    """
    return (a - b).pow(2).sum(-1).sqrt()


def manhattan_distance(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Calculates the Manhattan (city block) distance between `a` and `b`.

    Args:
        a (torch.Tensor): The first tensor.
        b (torch.Tensor): The second tensor, broadcastable to `a`.
    """
    return (a - b).abs().sum(-1)


def chebyshev_distance(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Calculates the Chebyshev (maximum coordinate) distance between `a` and `b`.

    Args:
        a (torch.Tensor): The first tensor.
        b (torch.Tensor): The second tensor, broadcastable to `a`.
    """
    diff = (a - b).abs()
    if diff.shape[-1] == 0:
        return diff.sum(-1)
    return diff.amax(-1)


_DISTANCES = {
    "euclidean": euclidean_distance,
    "manhattan": manhattan_distance,
    "chebyshev": chebyshev_distance,
}


def get_distance(name: str) -> DistanceFn:
    """
    Returns the distance function registered as `name`.

    Args:
        name (str): One of `euclidean`, `manhattan` and `chebyshev`.
    """
    if name not in _DISTANCES:
        raise KeyError(f"Distance function not found: {name}")
    return _DISTANCES[name]
