"""
Visualisation functions for MAC2D simulation output.

This module provides plotting functions for:
- Scalar time series (kinetic energy, divergence, Jacobi iterations)
- Snapshot frames: cell-centred velocity vectors over the pressure field
"""

import pathlib
import numpy as np
import matplotlib
import matplotlib.pyplot as plt

from . import analysis

# Use non-interactive backend by default for batch processing
matplotlib.use("Agg")


def plot_time_series(times, series_dict, outdir=".", dpi=300):
    """
    Plot scalar time series.

    Args:
        times (ndarray): Time values (N,)
        series_dict (dict): Dictionary of scalar arrays {name: (N,) array}
        outdir (str or Path): Output directory for figures
        dpi (int): Figure DPI

    Generates (for each series present):
        - kinetic_energy.png
        - max_divergence.png (log axis)
        - max_speed.png
        - jacobi_iterations.png
        - jacobi_residual.png (log axis)

    Returns:
        list: Paths of written figures
    """
    outdir = pathlib.Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    plot_specs = {
        "kinetic_energy": {"ylabel": "E", "title": "Kinetic Energy vs Time", "log": False},
        "max_divergence": {"ylabel": "max |div u|", "title": "Maximum Divergence vs Time", "log": True},
        "max_speed": {"ylabel": "max |u|", "title": "Maximum Speed vs Time", "log": False},
        "jacobi_iterations": {"ylabel": "iterations", "title": "Jacobi Iterations per Step", "log": False},
        "jacobi_residual": {"ylabel": "residual (div units)", "title": "Final Jacobi Residual per Step", "log": True},
    }

    written = []
    for key, spec in plot_specs.items():
        if key not in series_dict:
            continue

        plt.figure(figsize=(8, 4.5))
        data = np.asarray(series_dict[key])
        if spec["log"] and np.all(data > 0):
            plt.semilogy(times, data, linewidth=1.5)
        else:
            plt.plot(times, data, linewidth=1.5)
        plt.xlabel("Time t")
        plt.ylabel(spec["ylabel"])
        plt.title(spec["title"])
        plt.grid(True, alpha=0.3, linestyle="--")
        plt.tight_layout()
        path = outdir / f"{key}.png"
        plt.savefig(path, dpi=dpi, bbox_inches="tight")
        plt.close()
        written.append(path)

    return written


def plot_velocity_field(u, v, p, h, outfile, title=None, stride=1, scale=None, dpi=150):
    """
    Draw cell-centred velocity vectors over the pressure field.

    Each staggered component is averaged to the cell centres with its own
    shape before drawing.

    Args:
        u (ndarray): Horizontal velocity (Nx+1, Ny)
        v (ndarray): Vertical velocity (Nx, Ny+1)
        p (ndarray): Pressure (Nx, Ny)
        h (float): Cell spacing
        outfile (str or Path): Output image path
        title (str or None): Figure title
        stride (int): Draw every stride-th vector in each direction
        scale (float or None): Quiver scale (None = matplotlib autoscale)
        dpi (int): Figure DPI

    Returns:
        Path: Written figure path
    """
    outfile = pathlib.Path(outfile)
    outfile.parent.mkdir(parents=True, exist_ok=True)

    Nx, Ny = p.shape
    uc, vc = analysis.cell_centre_velocity(u, v)
    xc = (np.arange(Nx) + 0.5) * h
    yc = (np.arange(Ny) + 0.5) * h
    X, Y = np.meshgrid(xc, yc, indexing="ij")

    fig, ax = plt.subplots(figsize=(6, 6 * Ny / max(Nx, 1) + 0.5))
    xe = np.arange(Nx + 1) * h
    ye = np.arange(Ny + 1) * h
    mesh = ax.pcolormesh(xe, ye, p.T, cmap="RdBu_r", shading="flat")
    fig.colorbar(mesh, ax=ax, label="pressure")

    s = (slice(None, None, stride), slice(None, None, stride))
    ax.quiver(X[s], Y[s], uc[s], vc[s], np.hypot(uc[s], vc[s]),
              cmap="viridis", scale=scale, angles="xy")

    ax.set_xlim(0, Nx * h)
    ax.set_ylim(0, Ny * h)
    ax.set_aspect("equal")
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    if title:
        ax.set_title(title)
    fig.tight_layout()
    fig.savefig(outfile, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    return outfile
