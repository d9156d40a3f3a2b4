"""
MAC2D: 2D Incompressible Navier-Stokes on a Staggered Grid
==========================================================

Projection-method solver for viscous incompressible flow in a closed box,
using semi-Lagrangian advection and a Jacobi pressure-Poisson solve on a
marker-and-cell (MAC) grid.

Modules:
    config: Configuration and command-line argument parsing
    grid: Staggered field containers and bilinear sampling
    boundary: Solid-wall conditions (no-slip, free-slip) and ghost layers
    advection: Semi-Lagrangian advection, body forces and viscous diffusion
    pressure: Divergence and Jacobi pressure-Poisson solve
    projection: Pressure-gradient correction of the velocity
    initial: Initial conditions
    solver: Step orchestration and time integration
    utils: Diagnostic functions
"""

__version__ = "0.1.0"

from . import grid
from . import boundary
from . import advection
from . import pressure
from . import projection
from . import initial
from . import config
from . import utils
from . import solver

__all__ = [
    "grid",
    "boundary",
    "advection",
    "pressure",
    "projection",
    "initial",
    "config",
    "utils",
    "solver",
]
