import numpy as np
import pytest

from mac2d.grid import FluidGrid
from mac2d.solver import run_simulation
from post import analysis, io, visualisation


def test_vorticity_of_solid_body_rotation():
    grid = FluidGrid(8, 6, 0.5)
    x, y = grid.u.positions()
    grid.u.data[...] = -y
    x, y = grid.v.positions()
    grid.v.data[...] = x

    omega = analysis.vorticity(grid.u.data, grid.v.data, grid.h)
    assert omega.shape == (7, 5)
    np.testing.assert_allclose(omega, 2.0)


def test_cell_centre_velocity_shapes(random_grid):
    uc, vc = analysis.cell_centre_velocity(random_grid.u.data, random_grid.v.data)
    assert uc.shape == vc.shape == random_grid.shape


def test_divergence_stats_of_rest():
    stats = analysis.divergence_stats(np.zeros((5, 4)), np.zeros((4, 5)), 1.0)
    assert stats == {"max": 0.0, "rms": 0.0}


def test_energy_decay_rate():
    t = np.linspace(0.0, 2.0, 21)
    fit = analysis.energy_decay_rate(t, 3.0 * np.exp(-1.5 * t))
    assert fit["rate"] == pytest.approx(1.5)
    assert fit["r_squared"] == pytest.approx(1.0)


def test_time_average_window():
    t = np.arange(10.0)
    assert analysis.time_average(t, t, t_start=2.0, t_end=4.0) == pytest.approx(3.0)
    with pytest.raises(ValueError):
        analysis.time_average(t, t, t_start=20.0)


def test_run_writes_readable_output(make_args, tmp_path):
    args = make_args(Nx=8, Ny=8, n_steps=5, snap_every=2, outdir=str(tmp_path),
                     no_progress=True, jacobi_tol=1e-6)
    sim = run_simulation(args)

    run_dirs = list(tmp_path.iterdir())
    assert len(run_dirs) == 1
    info = io.get_snapshot_info(run_dirs[0] / "snapshots.h5")
    assert info["n_writes"] == 3
    np.testing.assert_array_equal(info["iterations"], [0, 2, 4])
    assert info["attrs"]["boundary"] == args.boundary
    assert info["attrs"]["Nx"] == 8

    snap = io.read_snapshot(run_dirs[0] / "snapshots.h5", write_index=-1)
    assert snap["u"].shape == (9, 8)
    assert snap["v"].shape == (8, 9)
    assert snap["p"].shape == (8, 8)
    assert snap["iteration"] == 4

    times, series = io.read_scalars(run_dirs[0] / "scalars.h5")
    np.testing.assert_allclose(times, [0.1, 0.2, 0.3, 0.4, 0.5])
    assert np.all(series["max_divergence"] < 1e-5)
    assert series["kinetic_energy"].shape == (5,)
    assert sim.iteration == 5

    with pytest.raises(IndexError):
        io.read_snapshot(run_dirs[0] / "snapshots.h5", write_index=3)


def test_no_output_mode_writes_nothing(make_args, tmp_path):
    args = make_args(Nx=6, Ny=6, ic="impulse", n_steps=2, outdir=str(tmp_path / "out"),
                     no_output=True, no_progress=True)
    run_simulation(args)
    assert not (tmp_path / "out").exists()


def test_missing_scalars_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        io.read_scalars(tmp_path / "scalars.h5")


def test_plots_are_written(random_grid, tmp_path):
    path = visualisation.plot_velocity_field(
        random_grid.u.data, random_grid.v.data, random_grid.p.data, random_grid.h,
        tmp_path / "frames" / "frame.png", title="test", stride=2)
    assert path.exists()

    t = np.linspace(0.1, 1.0, 10)
    written = visualisation.plot_time_series(
        t, {"kinetic_energy": np.exp(-t), "max_divergence": 1e-8 * np.ones_like(t)},
        outdir=tmp_path / "scalars", dpi=50)
    assert sorted(p.name for p in written) == ["kinetic_energy.png", "max_divergence.png"]
