import math
import unittest
import torch

from somap import (
    BMUOnlyInfluence,
    GaussianInfluence,
    RadiusReducingInfluence,
    WidthFuncGaussianInfluence,
)
from somap.influence import grid_distance


def grid_coords(rows: int, cols: int) -> torch.Tensor:
    xs, ys = torch.meshgrid(
        torch.arange(rows, dtype=torch.float64),
        torch.arange(cols, dtype=torch.float64),
        indexing='ij',
    )
    return torch.stack([xs, ys], dim=-1)


class TestGridDistance(unittest.TestCase):

    def test_grid_distance(self):
        distances = grid_distance((0, 0), grid_coords(4, 5))
        self.assertEqual(distances.shape, (4, 5))
        self.assertAlmostEqual(distances[3, 4].item(), 5.0)
        self.assertEqual(distances[0, 0].item(), 0.0)

    def test_integer_coords(self):
        coords = torch.tensor([[1, 1], [4, 5]])
        self.assertAlmostEqual(grid_distance((1, 1), coords)[1].item(), 5.0)


class TestBMUOnlyInfluence(unittest.TestCase):

    def test_only_bmu(self):
        influence = BMUOnlyInfluence()(bmu=(1, 2), t=0, total=10, coords=grid_coords(3, 3))
        self.assertEqual(influence.sum().item(), 1.0)
        self.assertEqual(influence[1, 2].item(), 1.0)

    def test_single_coordinate(self):
        influence = BMUOnlyInfluence()
        self.assertEqual(influence((2, 3), 0, 1, torch.tensor([2.0, 3.0])).item(), 1.0)
        self.assertEqual(influence((2, 3), 0, 1, torch.tensor([3.0, 2.0])).item(), 0.0)


class TestRadiusReducingInfluence(unittest.TestCase):

    def test_initial_radius(self):
        influence = RadiusReducingInfluence(radius=2)(bmu=(2, 2), t=0, total=10, coords=grid_coords(5, 5))
        # offsets with dx**2 + dy**2 <= 4
        self.assertEqual(influence.sum().item(), 13.0)
        self.assertEqual(influence[0, 2].item(), 1.0)
        self.assertEqual(influence[0, 1].item(), 0.0)

    def test_radius_shrinks(self):
        influence = RadiusReducingInfluence(radius=2)(bmu=(2, 2), t=9, total=10, coords=grid_coords(5, 5))
        # radius is 2 / 1.9, just above 1
        self.assertEqual(influence.sum().item(), 5.0)

    def test_radius_bounds(self):
        influence = RadiusReducingInfluence(radius=4)
        radii = [influence.radius_at(t, 100) for t in range(100)]
        self.assertEqual(radii[0], 4.0)
        self.assertEqual(radii, sorted(radii, reverse=True))
        self.assertGreater(radii[-1], 2.0)

    def test_rejects_negative_radius(self):
        with self.assertRaises(ValueError):
            RadiusReducingInfluence(radius=-1)


class TestGaussianInfluence(unittest.TestCase):

    def test_initial_width(self):
        influence = GaussianInfluence(initial_width=1)(bmu=(1, 1), t=0, total=10, coords=grid_coords(3, 3))
        self.assertAlmostEqual(influence[1, 1].item(), 1.0)
        self.assertAlmostEqual(influence[0, 1].item(), math.exp(-0.5))
        self.assertAlmostEqual(influence[0, 0].item(), math.exp(-1.0))

    def test_width_decays(self):
        gaussian = GaussianInfluence(initial_width=1)
        self.assertAlmostEqual(gaussian.width(10, 10), math.exp(-1))
        influence = gaussian(bmu=(1, 1), t=10, total=10, coords=grid_coords(3, 3))
        self.assertAlmostEqual(influence[0, 1].item(), math.exp(-math.exp(2) / 2))

    def test_values_in_unit_interval(self):
        influence = GaussianInfluence(initial_width=3)(bmu=(4, 1), t=3, total=10, coords=grid_coords(8, 8))
        self.assertTrue(((influence >= 0) & (influence <= 1)).all())

    def test_rejects_negative_width(self):
        with self.assertRaises(ValueError):
            GaussianInfluence(initial_width=-0.5)


class TestWidthFuncGaussianInfluence(unittest.TestCase):

    def test_custom_width(self):
        calls = []

        def width_fn(t, total):
            calls.append((t, total))
            return 2.0

        influence = WidthFuncGaussianInfluence(width_fn)(bmu=(0, 0), t=3, total=7, coords=grid_coords(3, 3))
        self.assertEqual(calls, [(3, 7)])
        self.assertAlmostEqual(influence[0, 2].item(), math.exp(-0.5))

    def test_zero_width_is_bmu_only(self):
        influence = WidthFuncGaussianInfluence(lambda t, total: 0.0)(bmu=(1, 1), t=0, total=1, coords=grid_coords(3, 3))
        self.assertEqual(influence.sum().item(), 1.0)
        self.assertEqual(influence[1, 1].item(), 1.0)


if __name__ == '__main__':
    unittest.main()
