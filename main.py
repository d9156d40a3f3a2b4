#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
MAC2D: 2D Incompressible Navier-Stokes on a Staggered Grid
===========================================================

Projection-method simulations of viscous flow in a closed box.

Usage:
    # Default: rightward jet on a 32x32 grid, no-slip walls
    python main.py

    python main.py --Nx 64 --Ny 64 --dt 0.05 --nu 0.01 --n_steps 400 --ic random

For help:
    python main.py --help
"""

import logging
import sys

from mac2d import config, solver


def main(argv=None):
    """
    Main entry point for MAC2D simulations.

    Parses command-line arguments, validates configuration, sets up logging,
    and runs the simulation.
    """
    # Parse arguments
    args = config.get_args(argv)

    # Setup logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger = logging.getLogger(__name__)

    # Validate arguments
    try:
        config.validate_args(args)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    # Log configuration
    logger.info("=" * 70)
    logger.info("MAC2D: 2D Incompressible Navier-Stokes on a Staggered Grid")
    logger.info("=" * 70)
    logger.info("Domain: %dx%d cells, h=%.3g", args.Nx, args.Ny, args.h)
    logger.info("Physics: rho=%.3g, nu=%.2e, g=(%.3g, %.3g)", args.rho, args.nu, args.gx, args.gy)
    logger.info("Boundary: %s", args.boundary)
    logger.info("Time: dt=%.3g, n_steps=%d", args.dt, args.n_steps)
    logger.info("Jacobi: max_iter=%d, tol=%.1e", args.jacobi_max_iter, args.jacobi_tol)
    logger.info("Initial condition: %s (magnitude=%.3g)", args.ic, args.ic_magnitude)
    logger.info("Precision: %s", args.precision)
    if not args.no_output:
        logger.info("Output directory: %s", args.outdir)
    logger.info("=" * 70)

    solver.run_simulation(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
