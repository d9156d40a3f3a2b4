import numpy as np
import pytest

from mac2d.grid import FluidGrid, StaggeredField, bilinear


def test_field_shapes_and_extent():
    grid = FluidGrid(5, 3, 0.25)
    assert grid.u.shape == (6, 3)
    assert grid.v.shape == (5, 4)
    assert grid.p.shape == (5, 3)
    assert grid.shape == (5, 3)
    assert grid.extent == (1.25, 0.75)


@pytest.mark.parametrize("Nx, Ny, h", [(0, 3, 1.0), (3, -1, 1.0), (3, 3, 0.0), (3, 3, -0.5), (2.5, 3, 1.0)])
def test_invalid_geometry_rejected(Nx, Ny, h):
    with pytest.raises(ValueError):
        FluidGrid(Nx, Ny, h)


def test_sample_positions_follow_staggering():
    grid = FluidGrid(4, 3, 0.5)
    xu, yu = grid.u.positions()
    xv, yv = grid.v.positions()
    xp, yp = grid.p.positions()
    assert (xu[2, 1], yu[2, 1]) == (1.0, 0.75)
    assert (xv[2, 1], yv[2, 1]) == (1.25, 0.5)
    assert (xp[2, 1], yp[2, 1]) == (1.25, 0.75)


def test_sampling_at_stored_points_is_exact(random_grid):
    for field in random_grid.fields():
        x, y = field.positions()
        assert np.array_equal(field.sample(x, y), field.data)


def test_sample_velocity_selects_each_component(random_grid):
    xu, yu = random_grid.u.positions()
    u, _ = random_grid.sample_velocity(xu, yu)
    assert np.array_equal(u, random_grid.u.data)

    xv, yv = random_grid.v.positions()
    _, v = random_grid.sample_velocity(xv, yv)
    assert np.array_equal(v, random_grid.v.data)


def test_bilinear_reproduces_linear_fields(rng):
    grid = FluidGrid(10, 8, 0.5)
    x, y = grid.u.positions()
    grid.u.data[...] = 2.0 * x - 3.0 * y + 1.0

    # Inside the hull of the u samples
    xq = rng.uniform(0.0, 5.0, size=50)
    yq = rng.uniform(0.25, 3.75, size=50)
    np.testing.assert_allclose(grid.u.sample(xq, yq), 2.0 * xq - 3.0 * yq + 1.0, rtol=1e-12, atol=1e-12)


def test_sampling_outside_domain_clamps(random_grid):
    Lx, Ly = random_grid.extent
    u_far, v_far = random_grid.sample_velocity(-10.0, 1e9)
    u_edge, v_edge = random_grid.sample_velocity(0.0, Ly)
    assert u_far == u_edge
    assert v_far == v_edge


def test_sampling_never_extrapolates(random_grid, rng):
    Lx, Ly = random_grid.extent
    xq = rng.uniform(-1.0, Lx + 1.0, size=500)
    yq = rng.uniform(-1.0, Ly + 1.0, size=500)
    for field in (random_grid.u, random_grid.v):
        values = field.sample(xq, yq)
        assert values.min() >= field.data.min() - 1e-12
        assert values.max() <= field.data.max() + 1e-12


def test_single_cell_grid_samples():
    grid = FluidGrid(1, 1, 1.0)
    grid.p.data[0, 0] = 3.0
    assert grid.p.sample(0.2, 0.9) == 3.0
    assert bilinear(np.array([[7.0]]), 0.4, 5.0) == 7.0


def test_view_is_read_only(random_grid):
    view = random_grid.view()
    assert view.Nx == 12 and view.Ny == 9 and view.h == 0.5
    with pytest.raises(ValueError):
        view.u[0, 0] = 1.0
    # The grid itself stays writeable
    random_grid.u.data[1, 1] = 5.0
    assert view.u[1, 1] == 5.0


def test_staggered_field_repr():
    field = StaggeredField("u", np.zeros((3, 2)), (0.0, 0.5), 1.0, (2.0, 2.0))
    assert "u" in repr(field)
    assert field.shape == (3, 2)


def test_cell_centres_match_pressure_samples():
    grid = FluidGrid(3, 2, 2.0)
    x, y = grid.cell_centres()
    assert x.shape == y.shape == (3, 2)
    np.testing.assert_allclose(x[:, 0], [1.0, 3.0, 5.0])
    np.testing.assert_allclose(y[0], [1.0, 3.0])


def test_bilinear_nan_index_reads_first_sample():
    data = np.arange(12.0).reshape(4, 3)
    assert bilinear(data, np.nan, 1.0) == data[0, 1]
    assert bilinear(data, 2.0, np.inf) == data[2, 2]
    out = bilinear(data, np.array([np.nan, 1.5]), np.array([-np.inf, 0.0]))
    np.testing.assert_allclose(out, [data[0, 0], 0.5 * (data[1, 0] + data[2, 0])])


def test_non_finite_data_propagates_through_sampling():
    grid = FluidGrid(4, 4, 1.0)
    grid.u.data[2, 1] = np.nan
    xu, yu = grid.u.positions()
    sampled = grid.u.sample(xu, yu)
    assert np.isnan(sampled[2, 1])
    assert np.isfinite(sampled[0, 0])
