import numpy as np
import pytest

from mac2d import config
from mac2d.boundary import zero_normal_velocity
from mac2d.grid import FluidGrid


@pytest.fixture
def make_args():
    """Default command-line arguments with overrides."""
    def _make(**overrides):
        args = config.get_args([])
        for key, value in overrides.items():
            setattr(args, key, value)
        return args
    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_grid(rng):
    """12x9 grid, h=0.5, random velocity with solid normal walls."""
    grid = FluidGrid(12, 9, 0.5)
    grid.u.data[...] = rng.standard_normal(grid.u.shape)
    grid.v.data[...] = rng.standard_normal(grid.v.shape)
    grid.p.data[...] = rng.standard_normal(grid.p.shape)
    zero_normal_velocity(grid.u.data, grid.v.data)
    return grid
