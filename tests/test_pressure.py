import numpy as np
import pytest

from mac2d.boundary import NO_SLIP, BoundaryEnforcer
from mac2d.pressure import divergence, jacobi_sweep, solve_pressure
from mac2d.projection import project


def dipole(n=16):
    """Single interior face carrying flow: a source/sink pair of adjacent cells."""
    u = np.zeros((n + 1, n))
    v = np.zeros((n, n + 1))
    u[n // 2, n // 2] = 1.0
    return u, v


def test_divergence_formula():
    u = np.array([[0.0], [2.0], [0.0]])      # (Nx+1, Ny) = (3, 1)
    v = np.array([[0.0, 1.0], [0.0, 0.0]])   # (Nx, Ny+1) = (2, 2)
    div = divergence(u, v, 0.5)
    np.testing.assert_allclose(div, [[(2.0 - 0.0 + 1.0 - 0.0) / 0.5], [(0.0 - 2.0) / 0.5]])


def test_jacobi_sweep_double_buffers(rng):
    src = rng.standard_normal((6, 6))
    dst = np.zeros_like(src)
    src_before = src.copy()
    rhs = rng.standard_normal((4, 4))

    change = jacobi_sweep(src, dst, rhs, 1.0)

    np.testing.assert_array_equal(src, src_before)
    expected = 0.25 * (src[2:, 1:-1] + src[:-2, 1:-1] + src[1:-1, 2:] + src[1:-1, :-2] - rhs)
    np.testing.assert_allclose(dst[1:-1, 1:-1], expected)
    assert change == pytest.approx(np.max(np.abs(expected - src[1:-1, 1:-1])))


def test_zero_divergence_converges_immediately():
    u = np.zeros((5, 4))
    v = np.zeros((4, 5))
    solve = solve_pressure(u, v, np.zeros((4, 4)), BoundaryEnforcer(NO_SLIP), 1.0, 0.1, 1.0)
    assert solve.converged
    assert solve.iterations == 1
    assert np.all(solve.pressure == 0.0)


def test_source_sink_pair_converges_monotonically():
    u, v = dipole(16)
    solve = solve_pressure(u, v, np.zeros((16, 16)), BoundaryEnforcer(NO_SLIP),
                           rho=1.0, dt=0.1, h=1.0, max_iter=5000, tol=1e-6)

    assert solve.converged
    assert solve.iterations < 5000
    assert solve.residual < 1e-6
    assert len(solve.history) == solve.iterations
    assert np.all(np.diff(solve.history) <= 1e-12)
    assert abs(solve.pressure.mean()) < 1e-12


def test_projection_with_solved_pressure_removes_divergence():
    u, v = dipole(16)
    solve = solve_pressure(u, v, np.zeros((16, 16)), BoundaryEnforcer(NO_SLIP),
                           rho=1.0, dt=0.1, h=1.0, max_iter=5000, tol=1e-6)
    project(u, v, solve.pressure, 1.0, 0.1, 1.0)
    assert np.max(np.abs(divergence(u, v, 1.0))) < 1e-6


def test_iteration_cap_is_not_an_error():
    u, v = dipole(16)
    solve = solve_pressure(u, v, np.zeros((16, 16)), BoundaryEnforcer(NO_SLIP),
                           rho=1.0, dt=0.1, h=1.0, max_iter=3, tol=1e-12)
    assert not solve.converged
    assert solve.iterations == 3
    assert np.all(np.isfinite(solve.pressure))


def test_warm_start_from_solution_converges_at_once():
    u, v = dipole(12)
    boundary = BoundaryEnforcer(NO_SLIP)
    first = solve_pressure(u, v, np.zeros((12, 12)), boundary, 1.0, 0.1, 1.0, max_iter=5000, tol=1e-6)
    second = solve_pressure(u, v, first.pressure, boundary, 1.0, 0.1, 1.0, max_iter=5000, tol=1e-6)
    assert second.converged
    assert second.iterations == 1


def test_initial_guess_not_modified(rng):
    u, v = dipole(8)
    p0 = rng.standard_normal((8, 8))
    p_copy = p0.copy()
    solve_pressure(u, v, p0, BoundaryEnforcer(NO_SLIP), 1.0, 0.1, 1.0, max_iter=10)
    np.testing.assert_array_equal(p0, p_copy)


@pytest.mark.parametrize("h, dt", [(0.1, 0.1), (1.0, 1.0)])
def test_converged_solve_bounds_divergence_after_projection(h, dt):
    u, v = dipole(16)
    tol = 1e-5
    solve = solve_pressure(u, v, np.zeros((16, 16)), BoundaryEnforcer(NO_SLIP),
                           rho=1.0, dt=dt, h=h, max_iter=10000, tol=tol)
    assert solve.converged
    project(u, v, solve.pressure, 1.0, dt, h)
    assert np.max(np.abs(divergence(u, v, h))) < tol
