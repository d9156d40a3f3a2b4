"""
Configuration and command-line argument parsing for MAC2D simulations.

This module handles all command-line arguments and parameter validation
for the 2D staggered-grid Navier-Stokes solver.
"""

import argparse
import logging

import numpy as np

from .boundary import BOUNDARY_MODES, NO_SLIP
from .initial import IC_TYPES
from .utils import diffusion_number

logger = logging.getLogger(__name__)


def build_parser():
    """
    Build the argument parser for MAC2D simulations.

    Returns:
        argparse.ArgumentParser: Parser with all simulation options
    """
    ap = argparse.ArgumentParser(
        description="2D incompressible Navier-Stokes on a staggered (MAC) grid "
                    "(semi-Lagrangian advection, Jacobi pressure projection)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Domain / resolution parameters
    domain_group = ap.add_argument_group('Domain and Resolution')
    domain_group.add_argument(
        "--Nx", type=int, default=32,
        help="Number of cells in x direction"
    )
    domain_group.add_argument(
        "--Ny", type=int, default=32,
        help="Number of cells in y direction"
    )
    domain_group.add_argument(
        "--h", type=float, default=1.0,
        help="Uniform cell spacing"
    )

    # Physics parameters
    physics_group = ap.add_argument_group('Physical Parameters')
    physics_group.add_argument(
        "--rho", type=float, default=1.0,
        help="Fluid density"
    )
    physics_group.add_argument(
        "--nu", type=float, default=0.0,
        help="Kinematic viscosity (0 disables diffusion)"
    )
    physics_group.add_argument(
        "--gx", type=float, default=0.0,
        help="Gravity component in x"
    )
    physics_group.add_argument(
        "--gy", type=float, default=0.0,
        help="Gravity component in y"
    )

    # Boundary conditions
    bc_group = ap.add_argument_group('Boundary Conditions')
    bc_group.add_argument(
        "--boundary", type=str, default=NO_SLIP,
        choices=list(BOUNDARY_MODES),
        help="Wall condition on all four sides"
    )

    # Time integration
    time_group = ap.add_argument_group('Time Integration')
    time_group.add_argument(
        "--dt", type=float, default=0.1,
        help="Fixed time step"
    )
    time_group.add_argument(
        "--n_steps", type=int, default=50,
        help="Number of time steps to run"
    )

    # Pressure solver
    pressure_group = ap.add_argument_group('Pressure Solver')
    pressure_group.add_argument(
        "--jacobi_max_iter", type=int, default=5000,
        help="Maximum Jacobi iterations per step"
    )
    pressure_group.add_argument(
        "--jacobi_tol", type=float, default=1e-5,
        help="Stop Jacobi when the max pressure change per iteration falls below this"
    )

    # Initial conditions
    ic_group = ap.add_argument_group('Initial Conditions')
    ic_group.add_argument(
        "--ic", type=str, default="jet",
        choices=list(IC_TYPES),
        help="Initial velocity: zero, jet (rightward block at the left wall), "
             "impulse (single upward face at the centre) or random"
    )
    ic_group.add_argument(
        "--ic_magnitude", type=float, default=1.0,
        help="Velocity magnitude of the initial pattern"
    )
    ic_group.add_argument(
        "--ic_width", type=int, default=4,
        help="Jet block width in cells"
    )
    ic_group.add_argument(
        "--ic_height", type=int, default=4,
        help="Jet block height in cells"
    )
    ic_group.add_argument(
        "--seed", type=int, default=42,
        help="Random seed for the 'random' initial condition"
    )
    ic_group.add_argument(
        "--p0", type=float, default=0.0,
        help="Initial uniform pressure"
    )

    # Output
    output_group = ap.add_argument_group('Output Settings')
    output_group.add_argument(
        "--outdir", type=str, default="output",
        help="Root output directory for simulation data"
    )
    output_group.add_argument(
        "--tag", type=str, default="",
        help="Optional tag to add to output directory name"
    )
    output_group.add_argument(
        "--snap_every", type=int, default=10,
        help="Write a field snapshot every this many steps"
    )
    output_group.add_argument(
        "--scalars_every", type=int, default=1,
        help="Record scalar diagnostics every this many steps"
    )
    output_group.add_argument(
        "--log_cadence", type=int, default=10,
        help="Log progress every this many steps"
    )
    output_group.add_argument(
        "--no_output", action="store_true",
        help="Run without writing any files"
    )
    output_group.add_argument(
        "--no_progress", action="store_true",
        help="Disable the progress bar"
    )

    misc_group = ap.add_argument_group('Miscellaneous')
    misc_group.add_argument(
        "--precision", type=str, default="float64",
        choices=["float64", "float32"],
        help="Floating-point precision for simulation"
    )
    misc_group.add_argument(
        "--no_finite_check", action="store_true",
        help="Skip the NaN/Inf check after each step"
    )

    return ap


def get_args(argv=None):
    """
    Parse command-line arguments for MAC2D simulation.

    Args:
        argv (list or None): Argument list (default: sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed command-line arguments containing all
            simulation parameters (grid, physics, solver, output settings)
    """
    return build_parser().parse_args(argv)


def validate_args(args):
    """
    Validate command-line arguments for consistency.

    Args:
        args: Parsed arguments from get_args()

    Raises:
        ValueError: If arguments are inconsistent or invalid
    """
    # Real-valued parameters must be finite before any range check
    for name in ("h", "rho", "nu", "gx", "gy", "dt", "jacobi_tol", "ic_magnitude", "p0"):
        if not np.isfinite(getattr(args, name)):
            raise ValueError(f"{name} must be finite, got {getattr(args, name)}")

    # Check domain parameters
    if args.Nx <= 0 or args.Ny <= 0:
        raise ValueError("Grid dimensions Nx and Ny must be positive")

    if args.h <= 0:
        raise ValueError("Cell spacing h must be positive")

    # Check physics parameters
    if args.rho <= 0:
        raise ValueError("Density rho must be positive")

    if args.nu < 0:
        raise ValueError("Viscosity nu must be non-negative")

    if args.boundary not in BOUNDARY_MODES:
        raise ValueError(f"Boundary mode must be one of {BOUNDARY_MODES}")

    # Check time parameters
    if args.dt <= 0:
        raise ValueError("Time step dt must be positive")

    if args.n_steps <= 0:
        raise ValueError("Number of steps n_steps must be positive")

    # Check pressure solver parameters
    if args.jacobi_max_iter <= 0:
        raise ValueError("jacobi_max_iter must be positive")

    if args.jacobi_tol <= 0:
        raise ValueError("jacobi_tol must be positive")

    # Check initial conditions
    if args.ic not in IC_TYPES:
        raise ValueError(f"Initial condition must be one of {tuple(IC_TYPES)}")

    if args.ic == "jet":
        if args.ic_width <= 0 or args.ic_height <= 0:
            raise ValueError("Jet block size ic_width and ic_height must be positive")
        if args.ic_width > args.Nx - 1:
            raise ValueError("Jet block width must leave the right wall clear (ic_width <= Nx-1)")
        if args.ic_height > args.Ny:
            raise ValueError("Jet block height must fit in the domain (ic_height <= Ny)")

    # Check output parameters
    if args.snap_every <= 0 or args.scalars_every <= 0 or args.log_cadence <= 0:
        raise ValueError("All output cadences must be positive")

    # Explicit diffusion stability
    diff_number = diffusion_number(args.nu, args.dt, args.h)
    if diff_number > 0.25:
        logger.warning(
            "Diffusion number nu*dt/h^2 = %.3f exceeds 0.25; explicit viscosity is likely unstable",
            diff_number,
        )
