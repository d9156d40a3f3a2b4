"""
Pressure projection onto the divergence-free velocity space.

    u = u* - (dt/rho) * dp/dx,    v = v* - (dt/rho) * dp/dy

Gradients are differences of the two cell-centre pressures straddling each
interior face, i.e. the same staggered difference used by the divergence.
Wall faces see a zero Neumann gradient and are left alone.
"""


def project(u, v, p, rho, dt, h):
    """
    Subtract the pressure gradient from the velocity, in place.

    Args:
        u (ndarray): Horizontal velocity (Nx+1, Ny), corrected in place
        v (ndarray): Vertical velocity (Nx, Ny+1), corrected in place
        p (ndarray): Solved pressure (Nx, Ny)
        rho (float): Density
        dt (float): Time step
        h (float): Cell spacing

    Returns:
        tuple: (u, v), the same arrays
    """
    scale = dt / (rho * h)
    u[1:-1, :] -= scale * (p[1:, :] - p[:-1, :])
    v[:, 1:-1] -= scale * (p[:, 1:] - p[:, :-1])
    return u, v
