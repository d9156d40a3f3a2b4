"""
Wall boundary conditions for the MAC grid.

All four sides of the domain are solid walls. Two modes are supported:
- solid-no-slip: normal and tangential wall velocity are zero
- solid-free-slip: normal wall velocity is zero, tangential is unconstrained

Normal velocity lives on the outer faces of the u and v arrays and is
overwritten directly. A MAC grid stores no tangential sample on a wall, so
the tangential condition is carried by a one-cell ghost layer that this
module supplies to every stencil reaching across a wall (interpolation,
viscous diffusion). Pressure uses a zero-normal-gradient (Neumann) ghost
ring mirrored from the adjacent interior cells.
"""

import numpy as np

from .grid import StaggeredField

NO_SLIP = "solid-no-slip"
FREE_SLIP = "solid-free-slip"
BOUNDARY_MODES = (NO_SLIP, FREE_SLIP)


def zero_normal_velocity(u, v):
    """Zero the wall-normal velocity on the four outer faces, in place."""
    u[0, :] = 0.0
    u[-1, :] = 0.0
    v[:, 0] = 0.0
    v[:, -1] = 0.0


def mirror_pressure(p_padded):
    """
    Apply the Neumann condition to a ghost-padded pressure buffer.

    Args:
        p_padded (ndarray): Pressure of shape (Nx+2, Ny+2); the interior
            block [1:-1, 1:-1] holds the cell values

    Returns:
        ndarray: The same buffer, with ghost cells set in place
    """
    p_padded[0, 1:-1] = p_padded[1, 1:-1]
    p_padded[-1, 1:-1] = p_padded[-2, 1:-1]
    p_padded[1:-1, 0] = p_padded[1:-1, 1]
    p_padded[1:-1, -1] = p_padded[1:-1, -2]
    return p_padded


class BoundaryEnforcer:
    """
    Applies the configured wall condition to velocity and pressure.

    Args:
        mode (str): One of BOUNDARY_MODES

    Raises:
        ValueError: If the mode is unknown
    """

    def __init__(self, mode=NO_SLIP):
        if mode not in BOUNDARY_MODES:
            raise ValueError(f"Unknown boundary mode '{mode}'. Use one of {BOUNDARY_MODES}.")
        self.mode = mode
        # Ghost = sign * adjacent interior value
        self._ghost_sign = -1.0 if mode == NO_SLIP else 1.0

    def __repr__(self):
        return f"BoundaryEnforcer({self.mode!r})"

    def enforce(self, u, v):
        """Apply the wall condition to raw velocity arrays, in place."""
        zero_normal_velocity(u, v)
        return u, v

    def enforce_velocity(self, grid):
        """Apply the wall condition to the grid's velocity, in place."""
        self.enforce(grid.u.data, grid.v.data)

    def pad_u(self, u):
        """
        Pad u with one ghost row below the bottom wall and above the top wall.

        Args:
            u (ndarray): Horizontal velocity (Nx+1, Ny)

        Returns:
            ndarray: Padded array (Nx+1, Ny+2)
        """
        out = np.empty((u.shape[0], u.shape[1] + 2), dtype=u.dtype)
        out[:, 1:-1] = u
        out[:, 0] = self._ghost_sign * u[:, 0]
        out[:, -1] = self._ghost_sign * u[:, -1]
        return out

    def pad_v(self, v):
        """
        Pad v with one ghost column left of the left wall and right of the right wall.

        Args:
            v (ndarray): Vertical velocity (Nx, Ny+1)

        Returns:
            ndarray: Padded array (Nx+2, Ny+1)
        """
        out = np.empty((v.shape[0] + 2, v.shape[1]), dtype=v.dtype)
        out[1:-1, :] = v
        out[0, :] = self._ghost_sign * v[0, :]
        out[-1, :] = self._ghost_sign * v[-1, :]
        return out

    def padded_velocity(self, u, v, grid):
        """
        Ghost-padded velocity fields ready for sampling.

        Sampling these at a wall returns the wall value implied by the
        boundary mode (exactly zero tangential velocity for no-slip).

        Args:
            u (ndarray): Horizontal velocity (Nx+1, Ny)
            v (ndarray): Vertical velocity (Nx, Ny+1)
            grid (FluidGrid): Grid providing spacing and extent

        Returns:
            tuple: (u_field, v_field) StaggeredField instances
        """
        u_field = StaggeredField("u", self.pad_u(u), (0.0, -0.5), grid.h, grid.extent)
        v_field = StaggeredField("v", self.pad_v(v), (-0.5, 0.0), grid.h, grid.extent)
        return u_field, v_field

    def wall_velocity(self, grid):
        """
        Normal and tangential velocity on each wall.

        Tangential values are taken midway between the first interior row
        (or column) and its ghost, i.e. exactly on the wall.

        Returns:
            dict: {wall: {"normal": ndarray, "tangential": ndarray}} for
                wall in "left", "right", "bottom", "top"
        """
        u = grid.u.data
        v = grid.v.data
        u_pad = self.pad_u(u)
        v_pad = self.pad_v(v)

        return {
            "left": {"normal": u[0, :].copy(),
                     "tangential": 0.5 * (v_pad[0, :] + v_pad[1, :])},
            "right": {"normal": u[-1, :].copy(),
                      "tangential": 0.5 * (v_pad[-1, :] + v_pad[-2, :])},
            "bottom": {"normal": v[:, 0].copy(),
                       "tangential": 0.5 * (u_pad[:, 0] + u_pad[:, 1])},
            "top": {"normal": v[:, -1].copy(),
                    "tangential": 0.5 * (u_pad[:, -1] + u_pad[:, -2])},
        }

    @staticmethod
    def mirror_pressure(p_padded):
        return mirror_pressure(p_padded)
