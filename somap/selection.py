"""
Selectors feed training vectors to the map, one per iteration.
"""
import torch

from .dataset import Dataset
from .errors import NoDataLeft


__all__ = [
    "Selector",
    "SequentialSelector",
    "RandomSelector",
]


class Selector():
    """
    Training vector selection base class.

    `init` binds the selector to a dataset and resets its position;
    `next` returns the following vector or raises `NoDataLeft`.
    """
    def __init__(self):
        self.dataset: Dataset | None = None

    def init(self, dataset: Dataset):
        self.dataset = dataset

    def next(self) -> torch.Tensor:
        raise NotImplementedError

    def _check_initialized(self):
        if self.dataset is None:
            raise RuntimeError(f"`{self.__class__.__name__}.init` must be called before `next`")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SequentialSelector(Selector):
    """Returns vectors in dataset order, once each."""

    def __init__(self):
        super().__init__()
        self.idx = 0

    def init(self, dataset: Dataset):
        super().init(dataset)
        self.idx = 0

    def next(self) -> torch.Tensor:
        self._check_initialized()
        if self.idx >= len(self.dataset):
            raise NoDataLeft()
        vector = self.dataset[self.idx]
        self.idx += 1
        return vector


class RandomSelector(Selector):
    """
    Returns vectors in random order, forever.

    Vectors are drawn following a random permutation of the dataset, which
    is regenerated once exhausted: any `len(dataset)` consecutive calls
    that start a cycle return every vector exactly once.

    Args:
        generator (torch.Generator | None): Random source for permutations.
                                            Defaults to the global torch RNG.
    """
    def __init__(self, generator: torch.Generator | None = None):
        super().__init__()
        self.generator = generator
        self.perm: list[int] = []
        self.idx = 0

    def init(self, dataset: Dataset):
        super().init(dataset)
        self.perm = self._permutation()
        self.idx = 0

    def _permutation(self) -> list[int]:
        return torch.randperm(len(self.dataset), generator=self.generator).tolist()

    def next(self) -> torch.Tensor:
        self._check_initialized()
        if len(self.dataset) == 0:
            raise NoDataLeft()
        if self.idx >= len(self.perm):
            self.perm = self._permutation()
            self.idx = 0
        vector = self.dataset[self.perm[self.idx]]
        self.idx += 1
        return vector
