"""
Diagnostic functions for MAC grid simulations.

This module provides helper functions for:
- Divergence and kinetic energy of the staggered velocity field
- Maximum speed and CFL / diffusion numbers
- Detection of non-finite values after a step
"""

import numpy as np

from .pressure import divergence


def max_divergence(u, v, h):
    """
    Maximum absolute discrete divergence over all cells.

    Args:
        u (ndarray): Horizontal velocity (Nx+1, Ny)
        v (ndarray): Vertical velocity (Nx, Ny+1)
        h (float): Cell spacing

    Returns:
        float: max |div u|
    """
    return float(np.max(np.abs(divergence(u, v, h))))


def kinetic_energy(u, v, h):
    """
    Total kinetic energy per unit density, 0.5 * sum(|u|^2) * h^2.

    Each face sample is weighted by one cell area.
    """
    return 0.5 * h * h * float(np.sum(u * u, dtype=np.float64) + np.sum(v * v, dtype=np.float64))


def cell_centre_velocity(u, v):
    """
    Average staggered velocity to cell centres.

    Returns:
        tuple: (uc, vc), each (Nx, Ny)
    """
    uc = 0.5 * (u[:-1, :] + u[1:, :])
    vc = 0.5 * (v[:, :-1] + v[:, 1:])
    return uc, vc


def compute_max_velocity(u, v):
    """
    Compute maximum cell-centred velocity magnitude.

    Returns:
        float: Maximum velocity magnitude |u|_max
    """
    uc, vc = cell_centre_velocity(u, v)
    return float(np.sqrt(np.max(uc * uc + vc * vc)))


def cfl_number(u, v, dt, h):
    """Advective CFL number max(|u|, |v|) * dt / h over all face samples."""
    umax = max(float(np.max(np.abs(u))), float(np.max(np.abs(v))))
    return umax * dt / h


def diffusion_number(nu, dt, h):
    """Explicit diffusion number nu * dt / h^2 (stable for <= 0.25)."""
    return nu * dt / (h * h)


def find_non_finite(fields):
    """
    Locate NaN or infinite values.

    Args:
        fields (dict): {name: ndarray}

    Returns:
        list: [(name, count)] for every field holding non-finite values
    """
    bad = []
    for name, data in fields.items():
        mask = ~np.isfinite(data)
        if np.any(mask):
            bad.append((name, int(np.count_nonzero(mask))))
    return bad
