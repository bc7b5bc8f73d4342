"""
somap - A PyTorch-based Self-Organizing Map (SOM) library with pluggable training policies.
"""
from .adapters import *
from .dataset import *
from .distance import *
from .errors import *
from .influence import *
from .initializers import *
from .log import get_logger
from .restraint import *
from .selection import *
from .som import SOM, Neuron

__version__ = "0.1.0" # Initial version

__all__ = [
    "SOM",
    "Neuron",
    "Dataset",
    "SomError",
    "DimensionMismatch",
    "EmptyDataset",
    "NoDataLeft",
    "euclidean_distance",
    "manhattan_distance",
    "chebyshev_distance",
    "get_distance",
    "Restraint",
    "NoRestraint",
    "SimpleRestraint",
    "ExpRestraint",
    "Influence",
    "BMUOnlyInfluence",
    "RadiusReducingInfluence",
    "WidthFuncGaussianInfluence",
    "GaussianInfluence",
    "Selector",
    "SequentialSelector",
    "RandomSelector",
    "WeightsInitializer",
    "ZeroWeightsInitializer",
    "RandomWeightsInitializer",
    "DatasetWeightsInitializer",
    "get_initializer",
    "Adapter",
    "IdentityAdapter",
    "MinMaxAdapter",
    "get_logger",
]
