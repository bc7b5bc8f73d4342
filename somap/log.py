import logging


__all__ = [
    "getname",
    "get_logger",
]


def getname(o: object) -> str:
    "Returns the name of `o` if it is a class, or the name of its class otherwise."
    return o.__name__ if isinstance(o, type) else o.__class__.__name__


def get_logger(o: object) -> logging.Logger:
    """
    Returns a logger named after `o`.

    Args:
        o (object): A logger name, or an object (or class) whose class name
                    is used under the `somap` namespace.
    """
    name = o if isinstance(o, str) else f"somap.{getname(o)}"
    return logging.getLogger(name)
