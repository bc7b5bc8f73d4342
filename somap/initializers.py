"""
Initializers are used to define
initial map weights for Self-Organizing Maps.
"""
import torch

from .dataset import Dataset
from .selection import RandomSelector


__all__ = [
    "WeightsInitializer",
    "ZeroWeightsInitializer",
    "RandomWeightsInitializer",
    "DatasetWeightsInitializer",
    "get_initializer",
]


class WeightsInitializer():
    """SOM weight initializer base class."""

    def __call__(self, dataset: Dataset, size: tuple[int, int]) -> torch.Tensor:
        """
        Builds the initial weights of a map.

        Args:
            dataset (Dataset): The training dataset; sets the weights width.
            size (tuple[int, int]): The (rows, cols) size of the map.

        Returns:
            torch.Tensor: New weights of shape (rows, cols, dataset.width).
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class ZeroWeightsInitializer(WeightsInitializer):
    """Sizes weights after the dataset width, with all values set to zero."""

    def __call__(self, dataset: Dataset, size: tuple[int, int]) -> torch.Tensor:
        return torch.zeros(*size, dataset.width, dtype=dataset.dtype)


class RandomWeightsInitializer(WeightsInitializer):
    """Sets weights to small random values drawn uniformly from [0, 1)."""

    def __init__(self, generator: torch.Generator | None = None):
        self.generator = generator

    def __call__(self, dataset: Dataset, size: tuple[int, int]) -> torch.Tensor:
        return torch.rand(*size, dataset.width, generator=self.generator, dtype=dataset.dtype)


class DatasetWeightsInitializer(WeightsInitializer):
    """
    Copies dataset vectors into the weights, in random order.

    When the map has fewer neurons than the dataset has vectors, a sorted
    copy of the dataset is downsampled to the number of neurons first, so
    that each neuron starts from a vector representing a band of the data.
    Neurons are filled in row-major order; no vector is reused before every
    other vector has been used once.
    """
    def __init__(self, generator: torch.Generator | None = None):
        self.generator = generator

    def __call__(self, dataset: Dataset, size: tuple[int, int]) -> torch.Tensor:
        rows, cols = size
        weights = torch.zeros(rows, cols, dataset.width, dtype=dataset.dtype)

        source = dataset
        if rows * cols < len(dataset):
            source = dataset.copy()
            source.sort_lexicographic()
            source.downsample(rows * cols)

        selector = RandomSelector(generator=self.generator)
        selector.init(source)
        for x in range(rows):
            for y in range(cols):
                weights[x, y] = selector.next()
        return weights


_INITIALIZERS = {
    "zero": ZeroWeightsInitializer,
    "random": RandomWeightsInitializer,
    "dataset": DatasetWeightsInitializer,
}


def get_initializer(name: str) -> WeightsInitializer:
    """
    Returns a new instance of the requested initializer.

    Args:
        name (str): The initializer name. Available values are `zero`, `random` and `dataset`.
    """
    if name not in _INITIALIZERS:
        raise KeyError(f"Initializer not found: {name}")
    return _INITIALIZERS[name]()
