#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Plot MAC2D simulation output: scalar time series and velocity/pressure frames.

This script provides a simple interface to visualise all output from a single
MAC2D run directory. It automatically detects available data and generates plots.

Usage:
    python plot_output.py --rundir output/Nx32_Ny32_dt1e-01_jet --outdir ./figures

    python plot_output.py --rundir output/Nx64_Ny64_dt5e-02_random \\
                          --outdir ./my_plots --dpi 150 --stride 2

For help:
    python plot_output.py --help
"""

import argparse
import pathlib
import sys

from tqdm import tqdm

# Add parent directory to path to import post-processing module
sys.path.insert(0, str(pathlib.Path(__file__).parent.parent))

from post import io, visualisation, analysis  # noqa: E402


def get_args():
    """Parse command-line arguments."""
    ap = argparse.ArgumentParser(
        description="Plot scalars and velocity/pressure snapshots for a single MAC2D run.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    # Required arguments
    ap.add_argument("--rundir", type=str, required=True,
                    help="Path to run directory containing 'snapshots.h5' and 'scalars.h5'")

    # Output
    ap.add_argument("--outdir", type=str, default="./figures",
                    help="Output directory for generated figures")
    ap.add_argument("--dpi", type=int, default=150,
                    help="Figure DPI (resolution)")

    # What to plot
    ap.add_argument("--no_scalars", action="store_true",
                    help="Skip scalar time-series plots")
    ap.add_argument("--no_snapshots", action="store_true",
                    help="Skip snapshot frame generation")

    # Snapshot selection
    ap.add_argument("--snap_start", type=int, default=0,
                    help="Starting write index for snapshots")
    ap.add_argument("--snap_stride", type=int, default=1,
                    help="Stride between snapshot writes")
    ap.add_argument("--stride", type=int, default=1,
                    help="Draw every stride-th velocity vector")

    return ap.parse_args()


def main():
    """Main execution function."""
    args = get_args()

    rundir = pathlib.Path(args.rundir).resolve()
    out_root = pathlib.Path(args.outdir).resolve()
    out_root.mkdir(parents=True, exist_ok=True)

    print("=" * 70)
    print("MAC2D Output Plotting")
    print("=" * 70)
    print(f"Run directory: {rundir}")
    print(f"Output directory: {out_root}")
    print("=" * 70)

    # 1) Scalar time series
    if not args.no_scalars:
        print("\n[1/2] Plotting scalar time series...")
        scalars_path = rundir / "scalars.h5"

        if not scalars_path.exists():
            print(f"  Warning: No scalars file found at {scalars_path}")
        else:
            times, series_dict = io.read_scalars(scalars_path)
            print(f"  Loaded {len(times)} time points")
            print(f"  Available scalars: {', '.join(series_dict.keys())}")

            visualisation.plot_time_series(times, series_dict, outdir=out_root / "scalars", dpi=args.dpi)
            print(f"  Saved to {out_root / 'scalars'}")

            if "max_divergence" in series_dict:
                print(f"  Mean max|div|: {analysis.time_average(times, series_dict['max_divergence']):.3e}")
            if "kinetic_energy" in series_dict and len(times) > 1:
                try:
                    fit = analysis.energy_decay_rate(times, series_dict["kinetic_energy"])
                    print(f"  Energy decay rate: {fit['rate']:.3e} (R^2={fit['r_squared']:.3f})")
                except ValueError as e:
                    print(f"  Energy decay rate unavailable: {e}")

    # 2) Snapshots
    if not args.no_snapshots:
        print("\n[2/2] Plotting snapshot frames...")
        snap_h5 = rundir / "snapshots.h5"

        if not snap_h5.exists():
            print(f"  Warning: No snapshot file found at {snap_h5}")
        else:
            info = io.get_snapshot_info(snap_h5)
            print(f"  {info['n_writes']} writes, boundary: {info['attrs'].get('boundary')}")

            subdir = out_root / "snapshots"
            indices = range(max(0, args.snap_start), info["n_writes"], max(1, args.snap_stride))
            for idx in tqdm(indices, desc="frames"):
                snap = io.read_snapshot(snap_h5, write_index=idx)
                visualisation.plot_velocity_field(
                    snap["u"], snap["v"], snap["p"], snap["h"],
                    subdir / f"frame_{idx:04d}.png",
                    title=f"t = {snap['time']:.3f} (it {snap['iteration']})",
                    stride=args.stride, dpi=args.dpi,
                )
            print(f"  Saved to {subdir}")

    print("\n" + "=" * 70)
    print("Plotting complete!")
    print(f"All figures saved to: {out_root}")
    print("=" * 70)


if __name__ == "__main__":
    main()
