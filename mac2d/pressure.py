"""
Pressure-Poisson solve by Jacobi relaxation.

Solves

    lap(p) = (rho / dt) * div(u*)

on the cell centres with a zero-normal-gradient condition at every wall.
Each Jacobi iteration reads one ghost-padded buffer and writes the other;
the two are swapped afterwards, so the update never depends on sweep order.
"""

import logging
from collections import namedtuple

import numpy as np

logger = logging.getLogger(__name__)


PressureSolve = namedtuple(
    "PressureSolve",
    ["pressure", "iterations", "residual", "converged", "history"],
)


def divergence(u, v, h):
    """
    Discrete divergence at every cell centre.

    Args:
        u (ndarray): Horizontal velocity (Nx+1, Ny)
        v (ndarray): Vertical velocity (Nx, Ny+1)
        h (float): Cell spacing

    Returns:
        ndarray: Divergence (Nx, Ny)
    """
    return (u[1:, :] - u[:-1, :]) / h + (v[:, 1:] - v[:, :-1]) / h


def jacobi_sweep(src, dst, rhs, h):
    """
    One Jacobi iteration from src into dst.

    src must already carry its ghost values; only the interior block of dst
    is written.

    Args:
        src (ndarray): Previous iterate, padded (Nx+2, Ny+2)
        dst (ndarray): Next iterate, padded (Nx+2, Ny+2)
        rhs (ndarray): Right-hand side (Nx, Ny)
        h (float): Cell spacing

    Returns:
        float: Maximum absolute change over all cells
    """
    dst[1:-1, 1:-1] = 0.25 * (src[2:, 1:-1] + src[:-2, 1:-1]
                              + src[1:-1, 2:] + src[1:-1, :-2]
                              - h * h * rhs)
    return float(np.max(np.abs(dst[1:-1, 1:-1] - src[1:-1, 1:-1])))


def solve_pressure(u, v, p, boundary, rho, dt, h, max_iter=5000, tol=1e-5):
    """
    Solve for the pressure that makes (u, v) divergence-free.

    Starts from the given pressure and iterates until the largest change
    drops below tol or max_iter iterations have run. The change is measured
    in divergence units, 4*dt/(rho*h^2) times the raw pressure change, which
    bounds the divergence left after projecting with the returned pressure.
    Reaching the cap is not an error; the last iterate is returned with
    converged=False.

    The pure-Neumann problem fixes p only up to a constant, so the right-hand
    side has its mean removed and the result is returned with zero mean.

    Args:
        u (ndarray): Intermediate horizontal velocity (Nx+1, Ny)
        v (ndarray): Intermediate vertical velocity (Nx, Ny+1)
        p (ndarray): Initial guess (Nx, Ny); not modified
        boundary (BoundaryEnforcer): Supplies the Neumann ghost ring
        rho (float): Density
        dt (float): Time step
        h (float): Cell spacing
        max_iter (int): Iteration cap
        tol (float): Convergence tolerance on the scaled max change per iteration

    Returns:
        PressureSolve: (pressure, iterations, residual, converged, history)
    """
    rhs = (rho / dt) * divergence(u, v, h)
    rhs = rhs - rhs.mean()

    nx, ny = p.shape
    src = np.zeros((nx + 2, ny + 2), dtype=p.dtype)
    src[1:-1, 1:-1] = p
    dst = np.zeros_like(src)
    # Jacobi residual is 4/h^2 times the change; projection scales it by dt/rho
    scale = 4.0 * dt / (rho * h * h)

    history = []
    change = np.inf
    converged = False
    iterations = 0
    while iterations < max_iter:
        boundary.mirror_pressure(src)
        change = scale * jacobi_sweep(src, dst, rhs, h)
        src, dst = dst, src
        iterations += 1
        history.append(change)
        if change < tol:
            converged = True
            break

    if not converged:
        logger.debug("Jacobi stopped at cap: %d iterations, scaled change %.3e (tol %.1e)",
                     iterations, change, tol)

    pressure = src[1:-1, 1:-1].copy()
    pressure -= pressure.mean()
    return PressureSolve(pressure, iterations, change, converged, np.asarray(history))
