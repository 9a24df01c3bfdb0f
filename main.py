#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  3D PROJECTILE TRAJECTORY INTEGRATOR — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Runs one launch and reports on it:
    1. Requested trajectory (drag or drag-free)
    2. Drag vs drag-free comparison
    3. Wind effects
    4. Validation (closed form + DOP853 reference)
    5. Step-size convergence

  Plots are saved to outputs/ unless --no-plots is given.

  Usage:
    python main.py                                  # defaults: 50 m/s, 45°
    python main.py --v0 80 --elevation 30 --mass 2
    python main.py --no-drag --azimuth 20
    python main.py --wind -5 0 3 --no-plots
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import os
import sys
import time

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from projectile3d.projectile import (
    PhysicalParameters, LaunchSpec,
    GRAVITY, AIR_DENSITY, DEFAULT_CD, DEFAULT_AREA, DEFAULT_MASS,
    DEFAULT_DT, DEFAULT_T_MAX,
)
from projectile3d.integrator import simulate, simulate_with_drag, simulate_no_drag
from projectile3d.validation import (
    validate_against_analytic, convergence_study, run_all_validations,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     3D PROJECTILE TRAJECTORY INTEGRATOR                               ║
║     ─────────────────────────────────────────────────────             ║
║     Physics: Gravity · Quadratic drag · Wind                          ║
║     Method: fixed-step RK4 │ Interpolated ground impact               ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate a 3D projectile launch with optional air resistance.")
    parser.add_argument('--v0', type=float, default=50.0,
                        help="Launch speed (m/s)")
    parser.add_argument('--elevation', type=float, default=45.0,
                        help="Elevation above horizontal (deg)")
    parser.add_argument('--azimuth', type=float, default=0.0,
                        help="Azimuth in the horizontal plane, +x towards +z (deg)")
    parser.add_argument('--mass', type=float, default=DEFAULT_MASS,
                        help="Mass (kg)")
    parser.add_argument('--cd', type=float, default=DEFAULT_CD,
                        help="Drag coefficient")
    parser.add_argument('--area', type=float, default=DEFAULT_AREA,
                        help="Reference area (m^2)")
    parser.add_argument('--rho', type=float, default=AIR_DENSITY,
                        help="Air density (kg/m^3)")
    parser.add_argument('--g', type=float, default=GRAVITY,
                        help="Gravitational acceleration (m/s^2)")
    parser.add_argument('--wind', type=float, nargs=3, default=[0.0, 0.0, 0.0],
                        metavar=('WX', 'WY', 'WZ'), help="Wind velocity (m/s)")
    parser.add_argument('--dt', type=float, default=DEFAULT_DT,
                        help="Integration step (s)")
    parser.add_argument('--t-max', type=float, default=DEFAULT_T_MAX,
                        help="Simulation time budget (s)")
    parser.add_argument('--no-drag', action='store_true',
                        help="Disable air resistance")
    parser.add_argument('--no-plots', action='store_true',
                        help="Skip saving figures")
    parser.add_argument('--out', default='outputs',
                        help="Output directory for figures")
    return parser


def parse_inputs(argv=None):
    """Parse and validate command line inputs into (launch, params, args)."""
    parser = build_parser()
    args = parser.parse_args(argv)

    launch = LaunchSpec(v0=args.v0, elevation_deg=args.elevation,
                        azimuth_deg=args.azimuth, dt=args.dt, t_max=args.t_max)
    params = PhysicalParameters(g=args.g, rho=args.rho, cd=args.cd, area=args.area,
                                mass=args.mass, wind=tuple(args.wind))
    try:
        launch.validate()
        params.validate()
    except ValueError as e:
        parser.error(str(e))
    return launch, params, args


def report_impact(result):
    if result.grounded_at_launch:
        print("  ✗ Launched into the ground: no upward motion, nothing to simulate.")
    elif result.impact is None:
        print(f"  No impact within t_max = {result.launch.t_max:.1f} s "
              f"(last y = {result.y[-1]:.2f} m)")
    else:
        print(f"  Impact at t = {result.impact.t:.4f} s, "
              f"x = {result.impact.x:.3f} m, z = {result.impact.z:.3f} m")
    if not result.is_finite:
        print("  ✗ Trajectory contains non-finite values; check mass and inputs.")


def main(argv=None):
    start_time = time.time()
    launch, params, args = parse_inputs(argv)
    drag = not args.no_drag

    banner()
    out = None
    if not args.no_plots:
        from projectile3d.visualization import (
            ensure_output_dir, plot_trajectory, plot_drag_comparison, plot_wind_effects,
        )
        out = ensure_output_dir(args.out)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Requested Trajectory
    # ══════════════════════════════════════════════════════════════════════
    section(f"PHASE 1: Trajectory ({'drag' if drag else 'drag-free'})")
    result = simulate(launch, params, drag=drag)
    print(result.summary())
    report_impact(result)

    if out:
        fig = plot_trajectory(result, save_path=f'{out}/01_trajectory.png')
        plt.close(fig)
        print(f"  ✓ Saved: {out}/01_trajectory.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Drag vs Drag-Free
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Drag vs Drag-Free")
    r_drag = simulate_with_drag(launch, params)
    r_free = simulate_no_drag(launch, params.g)
    print(f"  {'':<12} {'Range (m)':>10} {'Max alt (m)':>12} {'ToF (s)':>9}")
    for label, r in (('Drag', r_drag), ('No drag', r_free)):
        print(f"  {label:<12} {r.range_total:>10.2f} {r.max_altitude:>12.2f} "
              f"{r.flight_time:>9.3f}")
    if r_free.range_total > 0:
        loss = 100.0 * (1.0 - r_drag.range_total / r_free.range_total)
        print(f"  Range lost to drag: {loss:.1f}%")

    if out:
        fig = plot_drag_comparison(r_drag, r_free, save_path=f'{out}/02_drag_comparison.png')
        plt.close(fig)
        print(f"  ✓ Saved: {out}/02_drag_comparison.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Wind Effects
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Wind Effects")
    wind_cases = [
        ("No Wind", (0.0, 0.0, 0.0)),
        ("Headwind 10 m/s", (-10.0, 0.0, 0.0)),
        ("Tailwind 10 m/s", (10.0, 0.0, 0.0)),
        ("Crosswind 10 m/s", (0.0, 0.0, 10.0)),
    ]
    wind_results = {}
    for label, wind in wind_cases:
        p = PhysicalParameters(g=params.g, rho=params.rho, cd=params.cd,
                               area=params.area, mass=params.mass, wind=wind)
        r = simulate_with_drag(launch, p)
        wind_results[label] = r
        print(f"  {label:<20s}  Range: {r.range_total:>8.2f} m  "
              f"Drift: {r.lateral_drift:>+7.2f} m")

    if out:
        fig = plot_wind_effects(wind_results, save_path=f'{out}/03_wind_effects.png')
        plt.close(fig)
        print(f"  ✓ Saved: {out}/03_wind_effects.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Validation")
    if launch.v0 > 0 and launch.elevation_deg > 0:
        v = validate_against_analytic(launch, params.g)
        print(f"  Drag-free vs closed form — ΔT: {v.time_error:+.2e} s  "
              f"ΔR: {v.range_error:+.2e} m  ΔH: {v.alt_error:+.2e} m")
    run_all_validations(dt=launch.dt, g=params.g, verbose=True)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Step-Size Convergence
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Step-Size Convergence (drag)")
    if r_drag.impact is not None and not r_drag.grounded_at_launch:
        try:
            errors = convergence_study(launch, params)
        except ValueError as e:
            print(f"  Skipped: {e}")
        else:
            for dt, err in errors.items():
                if np.isnan(err):
                    print(f"  dt = {dt:<6g}  no impact within t_max")
                else:
                    print(f"  dt = {dt:<6g}  |ΔT| = {err:.3e} s")
    else:
        print("  Skipped: no in-flight impact for this launch.")

    elapsed = time.time() - start_time
    section("COMPLETE")
    if out:
        print(f"  All outputs saved to: {os.path.abspath(out)}/")
    print(f"  Total runtime: {elapsed:.1f} seconds\n")


if __name__ == "__main__":
    main()
