"""
Data loading and file I/O utilities for MAC2D post-processing.

This module provides functions to read simulation output files:
- Staggered field snapshots (u, v, p) from snapshots.h5
- Scalar time series from scalars.h5
"""

import pathlib
import h5py
import numpy as np


FIELD_NAMES = ("u", "v", "p")


def read_snapshot(snapshot_path, write_index=0):
    """
    Read one write of the staggered fields from a snapshot file.

    Args:
        snapshot_path (str or Path): Path to snapshots.h5
        write_index (int): Write index to read (default: 0, negative counts from the end)

    Returns:
        dict: {"time", "iteration", "u", "v", "p", "h"}; u is (Nx+1, Ny),
            v is (Nx, Ny+1), p is (Nx, Ny)

    Raises:
        IndexError: If write_index out of range
    """
    with h5py.File(snapshot_path, "r") as f:
        times = np.array(f["scales/sim_time"])
        n = len(times)
        if not -n <= write_index < n:
            raise IndexError(f"Write index {write_index} out of range ({n} writes)")
        write_index %= n

        snap = {
            "time": float(times[write_index]),
            "iteration": int(f["scales/iteration"][write_index]),
            "h": float(f.attrs["h"]),
        }
        for name in FIELD_NAMES:
            snap[name] = np.array(f[f"tasks/{name}"][write_index])

    return snap


def get_snapshot_info(snapshot_path):
    """
    Get metadata about a snapshot file.

    Args:
        snapshot_path (str or Path): Path to snapshots.h5

    Returns:
        dict: Metadata dictionary with keys:
            - n_writes: Number of writes in file
            - times: Array of simulation times
            - iterations: Array of step numbers
            - attrs: Grid geometry and physical parameters
    """
    with h5py.File(snapshot_path, "r") as f:
        times = np.array(f["scales/sim_time"])
        iterations = np.array(f["scales/iteration"])
        attrs = {k: (v.decode() if isinstance(v, bytes) else v) for k, v in f.attrs.items()}

    return {
        "n_writes": len(times),
        "times": times,
        "iterations": iterations,
        "attrs": attrs,
    }


def read_scalars(scalars_path):
    """
    Read scalar time series.

    Args:
        scalars_path (str or Path): Path to scalars.h5

    Returns:
        tuple: (times, series_dict)
            - times: (N,) array of simulation times
            - series_dict: Dictionary of scalar arrays {name: (N,) array}

    Raises:
        FileNotFoundError: If the file does not exist
    """
    scalars_path = pathlib.Path(scalars_path)
    if not scalars_path.exists():
        raise FileNotFoundError(f"No scalars file at {scalars_path}")

    with h5py.File(scalars_path, "r") as f:
        times = np.array(f["sim_time"])
        series = {k: np.array(f[k]) for k in f.keys() if k != "sim_time"}

    return times, series
