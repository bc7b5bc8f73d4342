"""
Exceptions raised by the Self-Organizing Map core.
"""

__all__ = [
    "SomError",
    "DimensionMismatch",
    "EmptyDataset",
    "NoDataLeft",
]


class SomError(Exception):
    """Base class for all errors raised by `somap`."""


class DimensionMismatch(SomError, ValueError):
    """A vector width does not match the width of its dataset or grid."""

    def __init__(self, expected: int, actual: int, what: str = "vector width"):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {what} {expected}, got {actual}")


class EmptyDataset(SomError, ValueError):
    """The width of a dataset without vectors was requested."""

    def __init__(self, message: str = "Dataset contains no vectors"):
        super().__init__(message)


class NoDataLeft(SomError):
    """
    Raised by a selector when there is nothing left to select.

    Not an error for the training loop, which simply stops.
    """

    def __init__(self, message: str = "No data left"):
        super().__init__(message)
