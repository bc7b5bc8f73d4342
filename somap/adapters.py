"""
Input adapters pre-process every vector before it reaches the map.
"""
from typing import Iterable

import torch

from .dataset import Dataset
from .errors import DimensionMismatch, EmptyDataset


__all__ = [
    "Adapter",
    "IdentityAdapter",
    "MinMaxAdapter",
]


class Adapter():
    "Input adapter base class."

    def __call__(self, vector: torch.Tensor) -> torch.Tensor:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class IdentityAdapter(Adapter):
    "Returns its input unchanged."

    def __call__(self, vector: torch.Tensor) -> torch.Tensor:
        return vector


class MinMaxAdapter(Adapter):
    """
    Rescales each coordinate with `(v - min) / (max - min)`, in place.

    Args:
        minimum (Iterable[float] | torch.Tensor): Per-coordinate minimum values.
        maximum (Iterable[float] | torch.Tensor): Per-coordinate maximum values.
    """
    def __init__(self,
                 minimum: Iterable[float] | torch.Tensor,
                 maximum: Iterable[float] | torch.Tensor):
        self.minimum = torch.as_tensor(minimum, dtype=torch.float64)
        self.maximum = torch.as_tensor(maximum, dtype=torch.float64)
        if self.minimum.shape != self.maximum.shape:
            raise DimensionMismatch(self.minimum.numel(), self.maximum.numel(), what="maximum width")

    @classmethod
    def from_dataset(cls, dataset: Dataset) -> "MinMaxAdapter":
        "Creates an adapter from the per-column minimum and maximum of `dataset`."
        if len(dataset) == 0:
            raise EmptyDataset()
        return cls(dataset.vectors.amin(0), dataset.vectors.amax(0))

    def __call__(self, vector: torch.Tensor) -> torch.Tensor:
        if vector.shape[-1] != self.minimum.shape[-1]:
            raise DimensionMismatch(self.minimum.shape[-1], vector.shape[-1])
        minimum = self.minimum.to(dtype=vector.dtype, device=vector.device)
        maximum = self.maximum.to(dtype=vector.dtype, device=vector.device)
        return vector.sub_(minimum).div_(maximum - minimum)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(minimum={self.minimum.tolist()}, maximum={self.maximum.tolist()})"
