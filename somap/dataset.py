"""
In-memory collection of fixed-width vectors used to train a SOM.
"""
from typing import Iterable, Iterator

import torch

from .errors import DimensionMismatch, EmptyDataset


__all__ = [
    "Dataset",
]


class Dataset:
    """
    An ordered collection of vectors sharing the same width.

    Vectors are stored as rows of a single 2D tensor, so the dataset can
    be sliced, shuffled and sorted with plain tensor indexing.

    Args:
        vectors (Iterable | torch.Tensor | None): Initial vectors, either a
            2D tensor of shape (num_vectors, width) or an iterable of
            equal-length sequences.
        dtype (torch.dtype): Element type of stored vectors.
    """
    def __init__(self,
                 vectors: Iterable | torch.Tensor | None = None,
                 dtype: torch.dtype = torch.float64):
        self.dtype = dtype
        self._vectors: torch.Tensor | None = None

        if isinstance(vectors, torch.Tensor):
            if vectors.dim() != 2:
                raise DimensionMismatch(2, vectors.dim(), what="dataset tensor rank")
            if vectors.shape[0] > 0:
                self._vectors = vectors.detach().to(dtype=dtype).clone()
        elif vectors is not None:
            for vector in vectors:
                self.add(vector)

    @property
    def vectors(self) -> torch.Tensor:
        """The underlying (num_vectors, width) tensor. Empty datasets return a (0, 0) tensor."""
        if self._vectors is None:
            return torch.empty(0, 0, dtype=self.dtype)
        return self._vectors

    @property
    def width(self) -> int:
        """Number of elements in each vector."""
        if self._vectors is None:
            raise EmptyDataset()
        return self._vectors.shape[1]

    def add(self, vector: Iterable[float] | torch.Tensor):
        """
        Appends `vector` to the dataset.

        Raises:
            DimensionMismatch: If `vector` is not 1D, or if its width differs
                               from the width of vectors already stored.
        """
        vector = torch.as_tensor(vector, dtype=self.dtype)
        if vector.dim() != 1:
            raise DimensionMismatch(1, vector.dim(), what="vector rank")

        if self._vectors is None:
            self._vectors = vector.clone().unsqueeze(0)
            return
        if vector.shape[0] != self.width:
            raise DimensionMismatch(self.width, vector.shape[0])
        self._vectors = torch.cat([self._vectors, vector.unsqueeze(0)], dim=0)

    def add_raw(self, *values: float):
        """Appends a vector built from `values`."""
        self.add(list(values))

    def shuffle(self, generator: torch.Generator | None = None):
        """Randomly permutes the vectors in place."""
        if self._vectors is None:
            return
        perm = torch.randperm(len(self), generator=generator)
        self._vectors = self._vectors[perm]

    def copy(self) -> "Dataset":
        """Returns a deep copy that shares no storage with this dataset."""
        copied = Dataset(dtype=self.dtype)
        if self._vectors is not None:
            copied._vectors = self._vectors.clone()
        return copied

    def sort_lexicographic(self):
        """
        Sorts vectors in ascending lexicographic order, in place.

        Vector `a` precedes `b` when the first coordinate in which they
        differ is smaller in `a`. The sort is stable.
        """
        if self._vectors is None:
            return
        vectors = self._vectors
        # Stable sorts from the least to the most significant coordinate
        for k in reversed(range(vectors.shape[1])):
            order = torch.sort(vectors[:, k], stable=True).indices
            vectors = vectors[order]
        self._vectors = vectors

    def downsample(self, n: int):
        """
        Keeps `n` representative vectors, in place.

        The sequence is split into `n` contiguous segments and the middle
        element of each segment is kept. Does nothing if the dataset holds
        `n` vectors or fewer.

        Example:
            Nine vectors [0..8] downsampled to 3 keep [1, 4, 7]: segments
            are (0, 3), (3, 6), (6, 9) and the midpoints round down.
        """
        size = len(self)
        if size <= n:
            return
        if n < 1:
            raise ValueError(f"Cannot downsample to {n} vectors")

        keep = []
        for i in range(n):
            # floor(i * size / n) without float rounding
            left, right = (i * size) // n, ((i + 1) * size) // n
            keep.append((left + right) >> 1)
        self._vectors = self._vectors[keep]

    def __len__(self) -> int:
        return 0 if self._vectors is None else self._vectors.shape[0]

    def __getitem__(self, idx: int) -> torch.Tensor:
        return self.vectors[idx]

    def __iter__(self) -> Iterator[torch.Tensor]:
        return iter(self.vectors)

    def __repr__(self) -> str:
        width = self._vectors.shape[1] if self._vectors is not None else None
        return f"{self.__class__.__name__}(len={len(self)}, width={width})"
