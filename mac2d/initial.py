"""
Initial conditions for MAC grid simulations.

Each seeding rule fills the velocity arrays of a freshly allocated
FluidGrid in place. Pressure is set to a uniform value and the wall-normal
faces are zeroed afterwards, so every rule starts from a state that already
satisfies the solid-wall condition.
"""

import logging
import numpy as np

from .boundary import zero_normal_velocity

logger = logging.getLogger(__name__)


def zero_velocity(grid, magnitude=1.0, **kwargs):
    """Fluid at rest."""
    grid.u.data[...] = 0.0
    grid.v.data[...] = 0.0


def jet(grid, magnitude=1.0, width=4, height=4, **kwargs):
    """
    Rightward jet in a width x height block of cells at the left wall.

    The block is centred vertically; the u faces 1..width of its rows are
    set to the given magnitude.

    Args:
        grid (FluidGrid): Grid to seed
        magnitude (float): Jet speed
        width (int): Block width in cells
        height (int): Block height in cells
    """
    if width > grid.Nx - 1 or height > grid.Ny:
        raise ValueError(f"Jet block {width}x{height} does not fit a {grid.Nx}x{grid.Ny} grid")
    j0 = (grid.Ny - height) // 2
    grid.u.data[...] = 0.0
    grid.v.data[...] = 0.0
    grid.u.data[1:width + 1, j0:j0 + height] = magnitude


def impulse(grid, magnitude=1.0, **kwargs):
    """Single upward velocity on the horizontal face at the domain centre."""
    grid.u.data[...] = 0.0
    grid.v.data[...] = 0.0
    grid.v.data[grid.Nx // 2, grid.Ny // 2] = magnitude


def random_velocity(grid, magnitude=1.0, seed=42, **kwargs):
    """Uniform random velocity in [-magnitude, magnitude] on every face."""
    rng = np.random.default_rng(seed)
    grid.u.data[...] = rng.uniform(-magnitude, magnitude, size=grid.u.shape)
    grid.v.data[...] = rng.uniform(-magnitude, magnitude, size=grid.v.shape)


IC_TYPES = {
    "zero": zero_velocity,
    "jet": jet,
    "impulse": impulse,
    "random": random_velocity,
}


def seed_fields(grid, ic="zero", magnitude=1.0, width=4, height=4, seed=42, p0=0.0):
    """
    Fill the grid with an initial condition.

    Args:
        grid (FluidGrid): Freshly allocated grid
        ic (str): Name of the seeding rule (key of IC_TYPES)
        magnitude (float): Velocity magnitude of the pattern
        width (int): Jet block width (jet only)
        height (int): Jet block height (jet only)
        seed (int): Random seed (random only)
        p0 (float): Uniform initial pressure

    Raises:
        ValueError: If the rule is unknown or does not fit the grid
    """
    try:
        rule = IC_TYPES[ic]
    except KeyError:
        raise ValueError(f"Unknown initial condition '{ic}'. Use one of {tuple(IC_TYPES)}.") from None

    rule(grid, magnitude=magnitude, width=width, height=height, seed=seed)
    grid.p.data[...] = p0
    zero_normal_velocity(grid.u.data, grid.v.data)

    logger.debug("Seeded '%s' initial condition (magnitude=%g)", ic, magnitude)
