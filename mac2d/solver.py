"""
Step orchestration and time integration for 2D MAC grid simulations.

This module contains the core simulation logic:
- The Simulation state machine that runs one projection step at a time
  (advect -> pressure solve -> project -> enforce walls)
- Detection of numerical blow-up after every step
- Construction of a simulation from parsed configuration
- The time integration loop with HDF5 snapshot and scalar output
"""

import enum
import logging
import pathlib
import h5py
import numpy as np
from tqdm import tqdm

from . import advection
from . import initial
from . import pressure
from . import projection
from . import utils
from .boundary import BoundaryEnforcer
from .grid import FluidGrid

logger = logging.getLogger(__name__)


class StepState(enum.Enum):
    IDLE = "idle"
    ADVECTING = "advecting"
    PRESSURE_SOLVING = "pressure_solving"
    PROJECTING = "projecting"
    ENFORCING_BOUNDARY = "enforcing_boundary"


class NumericalInstabilityError(FloatingPointError):
    """Raised when a step leaves NaN or infinite values in the fields."""

    def __init__(self, bad_fields, iteration, sim_time):
        self.bad_fields = bad_fields
        self.iteration = iteration
        self.sim_time = sim_time
        detail = ", ".join(f"{name}: {count} non-finite" for name, count in bad_fields)
        super().__init__(
            f"Numerical blow-up at it={iteration} t={sim_time:.6g} ({detail}); "
            "reduce dt or increase h"
        )


class Simulation:
    """
    Sequential projection-method stepper for one FluidGrid.

    The simulation is the only mutator of the grid. A step runs the stages
    in a fixed order and readers only ever observe the IDLE state, i.e. a
    fully completed step.

    Args:
        grid (FluidGrid): State to advance (mutated in place)
        boundary (BoundaryEnforcer): Wall condition
        rho (float): Density
        nu (float): Kinematic viscosity
        gravity (tuple): (gx, gy) body acceleration
        dt (float): Fixed time step
        jacobi_max_iter (int): Jacobi iteration cap per step
        jacobi_tol (float): Jacobi convergence tolerance
        check_finite (bool): Raise NumericalInstabilityError on NaN/Inf

    Raises:
        ValueError: If a physical or solver parameter is invalid
    """

    def __init__(self, grid, boundary, rho=1.0, nu=0.0, gravity=(0.0, 0.0), dt=0.1,
                 jacobi_max_iter=5000, jacobi_tol=1e-5, check_finite=True):
        if not rho > 0:
            raise ValueError("Density rho must be positive")
        if not nu >= 0:
            raise ValueError("Viscosity nu must be non-negative")
        if not dt > 0:
            raise ValueError("Time step dt must be positive")
        if jacobi_max_iter < 1:
            raise ValueError("jacobi_max_iter must be positive")
        if not jacobi_tol > 0:
            raise ValueError("jacobi_tol must be positive")

        self.grid = grid
        self.boundary = boundary
        self.rho = float(rho)
        self.nu = float(nu)
        self.gravity = (float(gravity[0]), float(gravity[1]))
        self.dt = float(dt)
        self.jacobi_max_iter = int(jacobi_max_iter)
        self.jacobi_tol = float(jacobi_tol)
        self.check_finite = check_finite

        self.state = StepState.IDLE
        self.iteration = 0
        self.sim_time = 0.0
        self.last_solve = None
        self.unconverged_solves = 0
        self.total_jacobi_iterations = 0

    def __repr__(self):
        return (f"Simulation({self.grid!r}, {self.boundary!r}, rho={self.rho}, nu={self.nu}, "
                f"gravity={self.gravity}, dt={self.dt})")

    def step(self):
        """
        Advance the grid by one time step.

        Returns:
            PressureSolve: Result of this step's pressure solve

        Raises:
            RuntimeError: If called while a step is already in progress
            NumericalInstabilityError: If the fields hold NaN or Inf before or
                after the step
        """
        if self.state is not StepState.IDLE:
            raise RuntimeError(f"Cannot start a step while in state {self.state.value}")
        self._check_finite()

        grid = self.grid
        h = grid.h
        try:
            self.state = StepState.ADVECTING
            u_star, v_star = advection.advect(grid, self.boundary, self.dt)
            self.boundary.enforce(u_star, v_star)
            advection.apply_body_force(u_star, v_star, self.gravity, self.dt)
            advection.diffuse(u_star, v_star, self.boundary, self.nu, self.dt, h)

            self.state = StepState.PRESSURE_SOLVING
            solve = pressure.solve_pressure(
                u_star, v_star, grid.p.data, self.boundary, self.rho, self.dt, h,
                max_iter=self.jacobi_max_iter, tol=self.jacobi_tol,
            )

            self.state = StepState.PROJECTING
            grid.u.data[...] = u_star
            grid.v.data[...] = v_star
            grid.p.data[...] = solve.pressure
            projection.project(grid.u.data, grid.v.data, grid.p.data, self.rho, self.dt, h)

            self.state = StepState.ENFORCING_BOUNDARY
            self.boundary.enforce_velocity(grid)
        finally:
            self.state = StepState.IDLE

        self.iteration += 1
        self.sim_time += self.dt
        self.last_solve = solve
        self.total_jacobi_iterations += solve.iterations
        if not solve.converged:
            self.unconverged_solves += 1
            logger.debug("it=%d: pressure solve hit the cap (%d iterations, residual %.3e)",
                         self.iteration, solve.iterations, solve.residual)

        self._check_finite()
        return solve

    def _check_finite(self):
        if not self.check_finite:
            return
        bad = utils.find_non_finite({f.name: f.data for f in self.grid.fields()})
        if bad:
            raise NumericalInstabilityError(bad, self.iteration, self.sim_time)

    def run(self, n_steps, callback=None):
        """
        Run n_steps steps, calling callback(simulation, solve) after each.

        Returns:
            Simulation: self
        """
        for _ in range(n_steps):
            solve = self.step()
            if callback is not None:
                callback(self, solve)
        return self

    def log_stats(self):
        """Log a summary of the run so far."""
        if self.iteration == 0:
            logger.info("No steps taken")
            return
        logger.info("Steps: %d, sim time: %.4f", self.iteration, self.sim_time)
        logger.info("Jacobi iterations: %d total, %.1f per step",
                    self.total_jacobi_iterations, self.total_jacobi_iterations / self.iteration)
        if self.unconverged_solves:
            logger.info("Pressure solves stopped at the iteration cap: %d/%d",
                        self.unconverged_solves, self.iteration)


def build_simulation(args):
    """
    Build and seed a Simulation from parsed command-line arguments.

    Args:
        args: Parsed arguments (see config.get_args)

    Returns:
        Simulation: Ready-to-step simulation in the IDLE state
    """
    dtype = np.float64 if args.precision == "float64" else np.float32
    grid = FluidGrid(args.Nx, args.Ny, args.h, dtype=dtype)
    boundary = BoundaryEnforcer(args.boundary)

    initial.seed_fields(
        grid, ic=args.ic, magnitude=args.ic_magnitude, width=args.ic_width,
        height=args.ic_height, seed=args.seed, p0=args.p0,
    )
    boundary.enforce_velocity(grid)

    return Simulation(
        grid, boundary, rho=args.rho, nu=args.nu, gravity=(args.gx, args.gy), dt=args.dt,
        jacobi_max_iter=args.jacobi_max_iter, jacobi_tol=args.jacobi_tol,
        check_finite=not args.no_finite_check,
    )


def setup_run_dir(args):
    """
    Create the output directory for a run.

    Returns:
        Path: Run directory
    """
    tag = (args.tag + "_") if args.tag else ""
    root = pathlib.Path(args.outdir) / f"{tag}Nx{args.Nx}_Ny{args.Ny}_dt{args.dt:.0e}_{args.ic}"
    root.mkdir(parents=True, exist_ok=True)
    return root


def write_snapshot(snapshot_file, sim):
    """
    Append the current fields to the snapshot HDF5 file.

    Layout: tasks/{u,v,p} stacked along a leading write axis, and
    scales/{sim_time,iteration,write_number}. Grid geometry and physical
    parameters are stored as file attributes on first write.

    Args:
        snapshot_file (Path): Output HDF5 file
        sim (Simulation): Simulation whose grid is written
    """
    grid = sim.grid
    with h5py.File(snapshot_file, "a") as h5:
        if "tasks" not in h5:
            for field in grid.fields():
                h5.create_dataset(
                    f"tasks/{field.name}", shape=(0,) + field.shape,
                    maxshape=(None,) + field.shape, dtype=field.data.dtype,
                    chunks=(1,) + field.shape,
                )
            h5.create_dataset("scales/sim_time", shape=(0,), maxshape=(None,), dtype=np.float64)
            h5.create_dataset("scales/iteration", shape=(0,), maxshape=(None,), dtype=np.int64)
            h5.create_dataset("scales/write_number", shape=(0,), maxshape=(None,), dtype=np.int64)
            h5.attrs.update({
                "Nx": grid.Nx, "Ny": grid.Ny, "h": grid.h, "dt": sim.dt,
                "rho": sim.rho, "nu": sim.nu, "gx": sim.gravity[0], "gy": sim.gravity[1],
                "boundary": sim.boundary.mode,
            })

        n = h5["scales/sim_time"].shape[0]
        for field in grid.fields():
            dset = h5[f"tasks/{field.name}"]
            dset.resize(n + 1, axis=0)
            dset[n] = field.data
        for name, value in (("sim_time", sim.sim_time), ("iteration", sim.iteration),
                            ("write_number", n + 1)):
            dset = h5[f"scales/{name}"]
            dset.resize(n + 1, axis=0)
            dset[n] = value


def write_scalars(scalars_file, series):
    """
    Write scalar time series to HDF5, replacing any previous content.

    Args:
        scalars_file (Path): Output HDF5 file
        series (dict): {name: list of values}
    """
    with h5py.File(scalars_file, "w") as h5:
        for name, values in series.items():
            h5.create_dataset(name, data=np.asarray(values))


def record_scalars(series, sim, solve):
    """Append this step's diagnostics to the scalar series."""
    grid = sim.grid
    u, v, h = grid.u.data, grid.v.data, grid.h
    series["sim_time"].append(sim.sim_time)
    series["kinetic_energy"].append(utils.kinetic_energy(u, v, h))
    series["max_divergence"].append(utils.max_divergence(u, v, h))
    series["max_speed"].append(utils.compute_max_velocity(u, v))
    series["jacobi_iterations"].append(solve.iterations)
    series["jacobi_residual"].append(solve.residual)


SCALAR_NAMES = ("sim_time", "kinetic_energy", "max_divergence", "max_speed",
                "jacobi_iterations", "jacobi_residual")


def run_simulation(args):
    """
    Run a full simulation from parsed command-line arguments.

    This is the main simulation driver that:
    1. Builds and seeds the grid
    2. Runs the time integration loop
    3. Writes snapshots and scalar diagnostics
    4. Logs progress and a final summary

    Args:
        args: Parsed command-line arguments

    Returns:
        Simulation: The simulation after the last step
    """
    sim = build_simulation(args)
    grid = sim.grid

    run_dir = None
    if not args.no_output:
        run_dir = setup_run_dir(args)
        snapshot_file = run_dir / "snapshots.h5"
        scalars_file = run_dir / "scalars.h5"
        if snapshot_file.exists():
            snapshot_file.unlink()
        write_snapshot(snapshot_file, sim)
        logger.info("Writing output to %s", run_dir)

    series = {name: [] for name in SCALAR_NAMES}

    try:
        logger.info("Starting time integration")

        for _ in tqdm(range(args.n_steps), desc="steps", disable=args.no_progress):
            solve = sim.step()

            if sim.iteration % args.scalars_every == 0:
                record_scalars(series, sim, solve)

            if run_dir is not None and sim.iteration % args.snap_every == 0:
                write_snapshot(snapshot_file, sim)

            # Log progress
            if (sim.iteration - 1) % args.log_cadence == 0:
                u, v = grid.u.data, grid.v.data
                cfl = utils.cfl_number(u, v, sim.dt, grid.h)
                logger.info(
                    "it=%6d t=%9.4f max|u|=%10.3e CFL=%6.3f max|div|=%9.3e jacobi=%5d%s",
                    sim.iteration, sim.sim_time, utils.compute_max_velocity(u, v), cfl,
                    utils.max_divergence(u, v, grid.h), solve.iterations,
                    "" if solve.converged else " (cap)",
                )
                if cfl > 1.0:
                    logger.warning("CFL number %.2f > 1: advection accuracy degraded", cfl)

    except Exception:
        logger.exception("Exception in main loop")
        raise
    finally:
        if run_dir is not None and series["sim_time"]:
            write_scalars(scalars_file, series)
        sim.log_stats()

    logger.info("Simulation complete")
    return sim
