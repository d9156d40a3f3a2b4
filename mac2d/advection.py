"""
Semi-Lagrangian advection, body forces and viscous diffusion.

Together these produce the intermediate velocity u* that the pressure
solve then makes divergence-free:

    u* = u(x - dt*u(x))  +  dt*g  +  nu*dt*lap(u*)

Advection reads only the pre-step field and writes new arrays, so no sample
sees a value already updated in the same sweep.
"""


def backtrace(u_field, v_field, x, y, dt):
    """
    Trace sample positions backwards along the velocity field.

    The trace velocity is interpolated from both components at (x, y),
    since a sample of one component never coincides with a sample of the
    other.

    Args:
        u_field (StaggeredField): Horizontal velocity to trace through
        v_field (StaggeredField): Vertical velocity to trace through
        x (ndarray): Start x coordinates
        y (ndarray): Start y coordinates
        dt (float): Time step

    Returns:
        tuple: (x_prev, y_prev) departure points
    """
    return x - dt * u_field.sample(x, y), y - dt * v_field.sample(x, y)


def advect(grid, boundary, dt):
    """
    Advect the grid velocity through itself for one time step.

    Each staggered component is traced from its own sample positions and
    resampled from the pre-step field. The grid is not modified.

    Args:
        grid (FluidGrid): Current state
        boundary (BoundaryEnforcer): Supplies the wall ghost layer
        dt (float): Time step

    Returns:
        tuple: (u_star, v_star) new arrays with the grid's shapes and dtype
    """
    u_src, v_src = boundary.padded_velocity(grid.u.data, grid.v.data, grid)

    xu, yu = grid.u.positions()
    xb, yb = backtrace(u_src, v_src, xu, yu, dt)
    u_star = u_src.sample(xb, yb).astype(grid.dtype, copy=False)

    xv, yv = grid.v.positions()
    xb, yb = backtrace(u_src, v_src, xv, yv, dt)
    v_star = v_src.sample(xb, yb).astype(grid.dtype, copy=False)

    return u_star, v_star


def apply_body_force(u, v, gravity, dt):
    """
    Add a uniform body force (gravity) to the interior faces, in place.

    Args:
        u (ndarray): Horizontal velocity (Nx+1, Ny)
        v (ndarray): Vertical velocity (Nx, Ny+1)
        gravity (tuple): (gx, gy) acceleration
        dt (float): Time step
    """
    gx, gy = gravity
    if gx:
        u[1:-1, :] += dt * gx
    if gy:
        v[:, 1:-1] += dt * gy


def diffuse(u, v, boundary, nu, dt, h):
    """
    Explicit viscous diffusion of the interior faces, in place.

    Uses the five-point Laplacian; stencils reaching across a wall read the
    boundary's ghost layer. Stable for nu*dt/h^2 <= 1/4.

    Args:
        u (ndarray): Horizontal velocity (Nx+1, Ny)
        v (ndarray): Vertical velocity (Nx, Ny+1)
        boundary (BoundaryEnforcer): Supplies the ghost layer
        nu (float): Kinematic viscosity
        dt (float): Time step
        h (float): Cell spacing
    """
    if nu == 0.0:
        return

    coef = nu * dt / (h * h)

    up = boundary.pad_u(u)
    centre = up[1:-1, 1:-1]
    lap_u = (up[2:, 1:-1] + up[:-2, 1:-1] + up[1:-1, 2:] + up[1:-1, :-2] - 4.0 * centre)

    vp = boundary.pad_v(v)
    centre = vp[1:-1, 1:-1]
    lap_v = (vp[2:, 1:-1] + vp[:-2, 1:-1] + vp[1:-1, 2:] + vp[1:-1, :-2] - 4.0 * centre)

    u[1:-1, :] += coef * lap_u
    v[:, 1:-1] += coef * lap_v

