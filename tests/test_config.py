import logging

import pytest

from mac2d import config
from mac2d.boundary import FREE_SLIP, NO_SLIP


def test_defaults_are_valid(make_args):
    args = make_args()
    config.validate_args(args)
    assert args.boundary == NO_SLIP
    assert (args.Nx, args.Ny, args.h, args.dt) == (32, 32, 1.0, 0.1)


def test_parse_flags():
    args = config.get_args(["--Nx", "16", "--boundary", FREE_SLIP, "--nu", "0.01", "--ic", "random"])
    assert args.Nx == 16
    assert args.boundary == FREE_SLIP
    assert args.nu == 0.01
    assert args.ic == "random"


def test_unknown_boundary_rejected_by_parser():
    with pytest.raises(SystemExit):
        config.get_args(["--boundary", "periodic"])


@pytest.mark.parametrize("overrides", [
    {"Nx": 0},
    {"Ny": -2},
    {"h": 0.0},
    {"rho": 0.0},
    {"nu": -0.1},
    {"dt": 0.0},
    {"n_steps": 0},
    {"jacobi_max_iter": 0},
    {"jacobi_tol": 0.0},
    {"ic_width": 32},
    {"ic_height": 33},
    {"snap_every": 0},
    {"log_cadence": 0},
])
def test_invalid_configuration_rejected(make_args, overrides):
    with pytest.raises(ValueError):
        config.validate_args(make_args(**overrides))


def test_large_diffusion_number_warns(make_args, caplog):
    with caplog.at_level(logging.WARNING, logger="mac2d.config"):
        config.validate_args(make_args(nu=10.0))
    assert "Diffusion number" in caplog.text


@pytest.mark.parametrize("name", ["ic_magnitude", "dt", "h", "p0", "gy"])
@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_values_rejected(make_args, name, value):
    with pytest.raises(ValueError, match="finite"):
        config.validate_args(make_args(**{name: value}))
