import main


def test_main_runs(tmp_path):
    status = main.main(["--Nx", "8", "--Ny", "8", "--n_steps", "3", "--outdir", str(tmp_path),
                        "--no_progress", "--ic", "impulse"])
    assert status == 0
    assert any(tmp_path.iterdir())


def test_main_rejects_invalid_configuration(tmp_path):
    status = main.main(["--dt", "-1", "--outdir", str(tmp_path), "--no_progress"])
    assert status == 1
    assert not any(tmp_path.iterdir())
