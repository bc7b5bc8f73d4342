import torch

from .adapters import Adapter, IdentityAdapter
from .dataset import Dataset
from .distance import DistanceFn, euclidean_distance
from .errors import DimensionMismatch, EmptyDataset, NoDataLeft
from .influence import BMUOnlyInfluence, Influence
from .initializers import WeightsInitializer, ZeroWeightsInitializer
from .log import get_logger
from .restraint import NoRestraint, Restraint
from .selection import Selector, SequentialSelector


__all__ = [
    "Neuron",
    "SOM",
]


class Neuron:
    """
    A single unit of the map.

    A neuron has a fixed (x, y) position on the grid. Its weights are a view
    into the weights tensor of the owning map, so they reflect (and allow)
    in-place updates. `distance` is the scratch value left by the last
    `SOM.test` call or training step, and means nothing outside of it.
    """
    def __init__(self, som: "SOM", x: int, y: int):
        self._som = som
        self.x = x
        self.y = y

    @property
    def position(self) -> tuple[int, int]:
        return self.x, self.y

    @property
    def weights(self) -> torch.Tensor:
        return self._som.weights[self.x, self.y]

    @property
    def distance(self) -> float:
        return self._som.distances[self.x, self.y].item()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Neuron):
            return NotImplemented
        return self._som is other._som and self.position == other.position

    def __hash__(self) -> int:
        return hash((id(self._som), self.x, self.y))

    def __repr__(self) -> str:
        return f"Neuron(x={self.x}, y={self.y}, weights={self.weights.tolist()})"


class SOM:
    """
    A Self-Organizing Map trained one input vector at a time.

    The map is a (rows, cols) grid of neurons, each holding a weight vector.
    Training behaviour is delegated to pluggable policies which can be
    replaced at any time between calls to `learn`:

    - `initializer` sets the initial weights from the training dataset;
    - `selector` picks the input vector of each iteration;
    - `adapter` pre-processes every input vector;
    - `distance` measures how far an input is from each neuron;
    - `restraint` scales all updates of an iteration (learning rate);
    - `influence` scales the update of each neuron around the BMU.
    """
    def __init__(self,
                 x: int,
                 y: int,
                 initializer: WeightsInitializer | None = None,
                 selector: Selector | None = None,
                 restraint: Restraint | None = None,
                 influence: Influence | None = None,
                 distance: DistanceFn = euclidean_distance,
                 adapter: Adapter | None = None,
                 dtype: torch.dtype = torch.float64,
                 generator: torch.Generator | None = None,
                 random_seed: int | None = None
                ):
        """
        Initializes the Self-Organizing Map.

        Args:
            x (int): Number of grid rows.
            y (int): Number of grid columns.
            initializer (WeightsInitializer | None): Defaults to zero weights.
            selector (Selector | None): Defaults to sequential selection.
            restraint (Restraint | None): Defaults to no restraint.
            influence (Influence | None): Defaults to updating the BMU only.
            distance (DistanceFn): Defaults to the Euclidean distance.
            adapter (Adapter | None): Defaults to the identity adapter.
            dtype (torch.dtype): Element type of weights and distances.
            generator (torch.Generator | None): Random source for BMU tie-breaking.
                                                Defaults to the global torch RNG.
            random_seed (int | None): Seed for the global torch RNG.
        """
        if x < 1 or y < 1:
            raise ValueError(f"Map size must be at least 1x1. Got ({x}, {y})")

        self.map_rows, self.map_cols = x, y
        self.num_neurons = self.map_rows * self.map_cols
        self.dtype = dtype
        self.generator = generator

        if random_seed is not None:
            torch.manual_seed(random_seed)

        self.initializer = initializer if initializer is not None else ZeroWeightsInitializer()
        self.selector = selector if selector is not None else SequentialSelector()
        self.restraint = restraint if restraint is not None else NoRestraint()
        self.influence = influence if influence is not None else BMUOnlyInfluence()
        self.distance = distance
        self.adapter = adapter if adapter is not None else IdentityAdapter()

        # Weights stay empty until `learn` runs the initializer
        self.weights = torch.zeros(self.map_rows, self.map_cols, 0, dtype=self.dtype)
        self.distances = torch.zeros(self.map_rows, self.map_cols, dtype=self.dtype)

        # Pre-calculate neuron locations
        self.neuron_locations = self._calculate_neuron_locations()

        self.logger = get_logger(self)

    def _calculate_neuron_locations(self) -> torch.Tensor:
        """Helper to compute neuron grid locations as a (rows, cols, 2) tensor."""
        neuron_locs_x = torch.arange(self.map_rows, dtype=self.dtype)
        neuron_locs_y = torch.arange(self.map_cols, dtype=self.dtype)
        grid_x, grid_y = torch.meshgrid(neuron_locs_x, neuron_locs_y, indexing='ij')
        return torch.stack([grid_x, grid_y], dim=-1)

    @property
    def size(self) -> tuple[int, int]:
        return self.map_rows, self.map_cols

    @property
    def width(self) -> int:
        """Width of the neuron weights; 0 before the map is initialized."""
        return self.weights.shape[-1]

    def neuron(self, x: int, y: int) -> Neuron:
        if not (0 <= x < self.map_rows and 0 <= y < self.map_cols):
            raise IndexError(f"Neuron ({x}, {y}) is outside of a {self.map_rows}x{self.map_cols} map")
        return Neuron(self, x, y)

    @property
    def neurons(self) -> list[Neuron]:
        """All neurons, in row-major order."""
        return [Neuron(self, x, y) for x in range(self.map_rows) for y in range(self.map_cols)]

    def learn(self, dataset: Dataset, iterations: int) -> int:
        """
        Initializes and trains the map on `dataset`.

        Each iteration takes one vector from the selector, finds its Best
        Matching Unit and moves every neuron towards the vector by
        `restraint(t, T) * influence(bmu, t, T, x, y)`. Training stops early
        when the selector runs out of data.

        Args:
            dataset (Dataset): The training data. It is never modified.
            iterations (int): Number of training iterations `T`. Zero or
                              negative values only initialize the map.

        Returns:
            int: The number of completed training iterations.
        """
        self.initialize(dataset)
        self.selector.init(dataset)

        self.logger.debug("Training %r on %r for %d iterations", self, dataset, iterations)

        completed = 0
        for t in range(iterations):
            try:
                vector = self.selector.next()
            except NoDataLeft:
                self.logger.info("Selector ran out of data after %d of %d iterations", completed, iterations)
                break
            self._train_step(vector, t, iterations)
            completed += 1

        self.logger.debug("Training finished after %d iterations", completed)
        return completed

    def initialize(self, dataset: Dataset):
        """Sets the initial neuron weights by running the initializer on `dataset`."""
        weights = self.initializer(dataset, self.size)
        expected_shape = (self.map_rows, self.map_cols, dataset.width)
        if tuple(weights.shape) != expected_shape:
            raise ValueError(f"Initializer must return weights of shape {expected_shape}. Got {tuple(weights.shape)}")

        self.weights = weights.to(dtype=self.dtype)
        self.distances = torch.zeros(self.map_rows, self.map_cols, dtype=self.dtype)

    def _train_step(self, vector: torch.Tensor, t: int, total: int):
        """Performs a single training iteration on `vector`."""
        # 1. Adapt the input and find its BMU
        x = self._adapt(vector)
        self.distances = self._compute_distances(x)
        bmu = self._find_bmu(self.distances)

        # 2. Update coefficient of every neuron: (rows, cols)
        coefficient = self.restraint(t, total) * self.influence(bmu, t, total, self.neuron_locations)

        # 3. Move every neuron towards the input
        self.weights += coefficient.to(self.dtype).unsqueeze(-1) * (x - self.weights)

    def _adapt(self, vector: torch.Tensor) -> torch.Tensor:
        """Copies `vector`, runs the adapter on the copy and checks its width."""
        x = torch.as_tensor(vector, dtype=self.dtype).clone()
        if x.dim() != 1:
            raise DimensionMismatch(1, x.dim(), what="vector rank")

        x = self.adapter(x)
        if self.width and x.shape[0] != self.width:
            raise DimensionMismatch(self.width, x.shape[0])
        return x

    def _compute_distances(self, x: torch.Tensor) -> torch.Tensor:
        """Distance from adapted input `x` to every neuron, as a new (rows, cols) tensor."""
        if self.width == 0:
            return torch.zeros(self.map_rows, self.map_cols, dtype=self.dtype)
        return self.distance(x, self.weights).to(self.dtype)

    def _find_bmu(self, distances: torch.Tensor) -> tuple[int, int]:
        """
        Finds the Best Matching Unit given the (rows, cols) `distances`.

        If several neurons share the minimum distance, one of them is picked
        uniformly at random. NaN distances never match; if every distance is
        NaN the first neuron is returned.
        """
        flat = torch.nan_to_num(distances.reshape(-1), nan=float("inf"))
        candidates = (flat == flat.min()).nonzero().flatten()
        if len(candidates) == 0:
            idx = 0
        elif len(candidates) == 1:
            idx = candidates[0].item()
        else:
            pick = torch.randint(len(candidates), (1,), generator=self.generator).item()
            idx = candidates[pick].item()
        return divmod(idx, self.map_cols)

    def test(self, vector: torch.Tensor) -> Neuron:
        """
        Finds the Best Matching Unit of `vector` without training.

        Updates the `distance` of every neuron.

        Args:
            vector (torch.Tensor): Input vector of width `self.width`.

        Returns:
            Neuron: The BMU.
        """
        x = self._adapt(vector)
        self.distances = self._compute_distances(x)
        return self.neuron(*self._find_bmu(self.distances))

    def compute_distance_matrix(self, vector: torch.Tensor) -> torch.Tensor:
        """
        Returns the distance from `vector` to every neuron.

        Unlike `test`, neuron distances are left untouched.

        Returns:
            torch.Tensor: Distances of shape (rows, cols).
        """
        return self._compute_distances(self._adapt(vector))

    def separate_weights(self) -> torch.Tensor:
        """
        Splits the weights by coordinate.

        Returns:
            torch.Tensor: A (width, rows, cols) tensor whose `[k, x, y]` element
                          is the `k`-th weight of neuron (x, y).
        """
        return self.weights.permute(2, 0, 1).clone()

    def get_weights(self) -> torch.Tensor:
        """Returns a copy of the current SOM weights."""
        return self.weights.clone().detach()

    def get_neuron_locations(self) -> torch.Tensor:
        """Returns a copy of the 2D locations of neurons on the grid."""
        return self.neuron_locations.clone().detach()

    def map_to_bmu_locations(self, dataset: Dataset) -> torch.Tensor:
        """
        Maps each vector of `dataset` to the grid location of its BMU.

        Returns:
            torch.Tensor: A (len(dataset), 2) tensor of (x, y) positions.
        """
        locations = [self._find_bmu(self.compute_distance_matrix(vector)) for vector in dataset]
        return torch.tensor(locations, dtype=torch.long).reshape(-1, 2)

    def quantization_error(self, dataset: Dataset) -> float:
        """
        Calculates the quantization error for the given data.
        Quantization error is the average distance between each data vector and its BMU.

        Args:
            dataset (Dataset): Vectors to evaluate; each one goes through the adapter.

        Returns:
            float: The quantization error.
        """
        if len(dataset) == 0:
            raise EmptyDataset()
        errors = [self.compute_distance_matrix(vector).min() for vector in dataset]
        return torch.stack(errors).mean().item()

    def state_dict(self) -> dict:
        """
        Returns the map size and a copy of its weights.

        The weights of neuron (x, y) are `state["weights"][x, y]`.
        """
        return {
            "size": self.size,
            "weights": self.get_weights(),
        }

    def load_state_dict(self, state: dict):
        """Replaces the map weights with those stored in `state`."""
        size = tuple(state["size"])
        if size != self.size:
            raise DimensionMismatch(self.size, size, what="map size")
        weights = torch.as_tensor(state["weights"], dtype=self.dtype)
        if weights.dim() != 3:
            raise DimensionMismatch(3, weights.dim(), what="weights rank")
        if tuple(weights.shape[:2]) != self.size:
            raise DimensionMismatch(self.size, tuple(weights.shape[:2]), what="weights grid size")

        self.weights = weights.clone()
        self.distances = torch.zeros(self.map_rows, self.map_cols, dtype=self.dtype)

    def __repr__(self) -> str:
        return (
            f"SOM(size=({self.map_rows}, {self.map_cols}), width={self.width}, "
            f"initializer={self.initializer!r}, selector={self.selector!r}, "
            f"restraint={self.restraint!r}, influence={self.influence!r}, "
            f"distance={getattr(self.distance, '__name__', self.distance)}, adapter={self.adapter!r})"
        )
