"""
Staggered (MAC) grid state and bilinear sampling.

This module owns the three solver arrays and the grid geometry:
- u: horizontal velocity on vertical cell faces, shape (Nx+1, Ny)
- v: vertical velocity on horizontal cell faces, shape (Nx, Ny+1)
- p: pressure at cell centres, shape (Nx, Ny)

Arrays are indexed [i, j] with i along x and j along y. Each array lives in
its own StaggeredField container that knows where its samples sit, so no
caller ever has to remember the half-cell offsets.
"""

import logging
from collections import namedtuple

import numpy as np

logger = logging.getLogger(__name__)

# Position of sample [0, 0] in cell units for each staggered field
U_OFFSET = (0.0, 0.5)
V_OFFSET = (0.5, 0.0)
P_OFFSET = (0.5, 0.5)


GridView = namedtuple("GridView", ["u", "v", "p", "Nx", "Ny", "h"])


def bilinear(data, fi, fj):
    """
    Bilinear interpolation of a 2D array at fractional index positions.

    Fractional indices are clamped to the stored range, so the result never
    extrapolates. At an exact integer index the stored value is returned
    unchanged. A NaN index is read at 0; NaN or Inf in data still propagates.

    Args:
        data (ndarray): 2D array of samples
        fi (ndarray or float): Fractional index along axis 0
        fj (ndarray or float): Fractional index along axis 1

    Returns:
        ndarray or float: Interpolated values, same shape as fi/fj
    """
    ni, nj = data.shape
    fi = np.clip(np.nan_to_num(np.asarray(fi, dtype=np.float64)), 0.0, ni - 1)
    fj = np.clip(np.nan_to_num(np.asarray(fj, dtype=np.float64)), 0.0, nj - 1)

    # Lower-left corner of the interpolation stencil
    i0 = np.minimum(np.floor(fi).astype(np.intp), max(ni - 2, 0))
    j0 = np.minimum(np.floor(fj).astype(np.intp), max(nj - 2, 0))
    i1 = np.minimum(i0 + 1, ni - 1)
    j1 = np.minimum(j0 + 1, nj - 1)

    tx = fi - i0
    ty = fj - j0

    a = data[i0, j0] * (1.0 - tx) + data[i1, j0] * tx
    b = data[i0, j1] * (1.0 - tx) + data[i1, j1] * tx
    return a * (1.0 - ty) + b * ty


class StaggeredField:
    """
    One staggered array together with the geometry needed to locate it.

    Args:
        name (str): Field name ("u", "v", "p", ...)
        data (ndarray): 2D sample array
        offset (tuple): Physical position of sample [0, 0] in cell units
        h (float): Cell spacing
        extent (tuple): Domain size (Lx, Ly) that sampling clamps into
    """

    def __init__(self, name, data, offset, h, extent):
        self.name = name
        self.data = data
        self.offset = (float(offset[0]), float(offset[1]))
        self.h = float(h)
        self.extent = (float(extent[0]), float(extent[1]))

    def __repr__(self):
        return f"StaggeredField({self.name!r}, shape={self.shape}, offset={self.offset})"

    @property
    def shape(self):
        return self.data.shape

    def positions(self):
        """
        Physical coordinates of every stored sample.

        Returns:
            tuple: (x, y) arrays with the same shape as the field
        """
        ni, nj = self.data.shape
        xs = (np.arange(ni) + self.offset[0]) * self.h
        ys = (np.arange(nj) + self.offset[1]) * self.h
        return np.meshgrid(xs, ys, indexing="ij")

    def sample(self, x, y):
        """
        Bilinearly sample the field at physical positions.

        Positions outside the domain are clamped to its edge first.

        Args:
            x (ndarray or float): x coordinates
            y (ndarray or float): y coordinates

        Returns:
            ndarray or float: Sampled values
        """
        x = np.clip(np.asarray(x, dtype=np.float64), 0.0, self.extent[0])
        y = np.clip(np.asarray(y, dtype=np.float64), 0.0, self.extent[1])
        return bilinear(self.data, x / self.h - self.offset[0], y / self.h - self.offset[1])

    def read_only(self):
        """Return a non-writeable view of the samples."""
        view = self.data.view()
        view.flags.writeable = False
        return view


class FluidGrid:
    """
    Owner of the MAC grid arrays and geometry.

    Fields are allocated once here and only ever mutated in place.

    Args:
        Nx (int): Number of cells in x
        Ny (int): Number of cells in y
        h (float): Uniform cell spacing
        dtype: NumPy floating-point type for all fields

    Raises:
        ValueError: If the geometry is invalid
    """

    def __init__(self, Nx, Ny, h, dtype=np.float64):
        if int(Nx) != Nx or int(Ny) != Ny or Nx < 1 or Ny < 1:
            raise ValueError("Grid dimensions Nx and Ny must be positive integers")
        if not h > 0:
            raise ValueError("Cell spacing h must be positive")

        self.Nx = int(Nx)
        self.Ny = int(Ny)
        self.h = float(h)
        self.dtype = np.dtype(dtype)

        extent = self.extent
        self.u = StaggeredField("u", np.zeros((self.Nx + 1, self.Ny), dtype=self.dtype),
                                U_OFFSET, self.h, extent)
        self.v = StaggeredField("v", np.zeros((self.Nx, self.Ny + 1), dtype=self.dtype),
                                V_OFFSET, self.h, extent)
        self.p = StaggeredField("p", np.zeros((self.Nx, self.Ny), dtype=self.dtype),
                                P_OFFSET, self.h, extent)

        logger.debug("Allocated %dx%d MAC grid (h=%g, dtype=%s)", self.Nx, self.Ny, self.h, self.dtype)

    def __repr__(self):
        return f"FluidGrid(Nx={self.Nx}, Ny={self.Ny}, h={self.h})"

    @property
    def shape(self):
        """Number of cells (Nx, Ny)."""
        return (self.Nx, self.Ny)

    @property
    def extent(self):
        """Physical domain size (Lx, Ly)."""
        return (self.Nx * self.h, self.Ny * self.h)

    def fields(self):
        return (self.u, self.v, self.p)

    def sample_velocity(self, x, y):
        """
        Interpolate both velocity components at arbitrary positions.

        Each component is sampled from its own staggered array. Positions
        outside the domain are clamped to its edge.

        Returns:
            tuple: (u, v) interpolated velocity components
        """
        return self.u.sample(x, y), self.v.sample(x, y)

    def cell_centres(self):
        """Physical coordinates of the cell centres (pressure samples)."""
        return self.p.positions()

    def copy_velocity(self):
        return self.u.data.copy(), self.v.data.copy()

    def view(self):
        """
        Read-only snapshot of the published state for renderers.

        Returns:
            GridView: (u, v, p, Nx, Ny, h) with non-writeable arrays
        """
        return GridView(self.u.read_only(), self.v.read_only(), self.p.read_only(),
                        self.Nx, self.Ny, self.h)
