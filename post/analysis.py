"""
Analysis utilities for MAC2D simulation output.

This module provides functions for derived quantities and statistics:
- Cell-centred velocity and vorticity from staggered fields
- Divergence statistics
- Time averaging and energy decay rates
"""

import numpy as np
from scipy import stats

from mac2d.pressure import divergence
from mac2d.utils import cell_centre_velocity  # noqa: F401


def vorticity(u, v, h):
    """
    Vorticity dv/dx - du/dy at the interior cell corners.

    Args:
        u (ndarray): Horizontal velocity (Nx+1, Ny)
        v (ndarray): Vertical velocity (Nx, Ny+1)
        h (float): Cell spacing

    Returns:
        ndarray: Vorticity at corners (i*h, j*h), i=1..Nx-1, j=1..Ny-1
    """
    dvdx = (v[1:, 1:-1] - v[:-1, 1:-1]) / h
    dudy = (u[1:-1, 1:] - u[1:-1, :-1]) / h
    return dvdx - dudy


def divergence_stats(u, v, h):
    """
    Maximum and RMS of the discrete divergence over all cells.

    Returns:
        dict: {"max": float, "rms": float}
    """
    div = divergence(u, v, h)
    return {"max": float(np.max(np.abs(div))), "rms": float(np.sqrt(np.mean(div * div)))}


def time_average(times, series, t_start=None, t_end=None):
    """
    Compute time average of a series over a specified interval.

    Args:
        times (ndarray): Time values (N,)
        series (ndarray): Data series (N,)
        t_start (float or None): Start time (default: first time)
        t_end (float or None): End time (default: last time)

    Returns:
        float: Time-averaged value
    """
    t_start = times[0] if t_start is None else t_start
    t_end = times[-1] if t_end is None else t_end

    mask = (times >= t_start) & (times <= t_end)
    if not np.any(mask):
        raise ValueError(f"No data points in time range [{t_start}, {t_end}]")

    return float(np.mean(series[mask]))


def energy_decay_rate(times, energy, t_start=None, t_end=None):
    """
    Exponential decay rate of kinetic energy, E ~ exp(-rate * t).

    Fits log(E) against t by linear regression.

    Args:
        times (ndarray): Time values (N,)
        energy (ndarray): Kinetic energy (N,)
        t_start (float or None): Start of fitting window
        t_end (float or None): End of fitting window

    Returns:
        dict: {"rate": float, "r_squared": float}
    """
    t_start = times[0] if t_start is None else t_start
    t_end = times[-1] if t_end is None else t_end

    mask = (times >= t_start) & (times <= t_end) & (energy > 0)
    if np.count_nonzero(mask) < 2:
        raise ValueError("Need at least two positive energy values to fit a decay rate")

    fit = stats.linregress(times[mask], np.log(energy[mask]))
    return {"rate": float(-fit.slope), "r_squared": float(fit.rvalue ** 2)}
