"""
Validation Against Reference Solutions
=======================================
Checks the fixed-step RK4 simulators against two independent references:

  1. Closed-form vacuum parabola (drag-free runs):
       T = 2 v0 sin(θ) / g
       R = v0² sin(2θ) / g
       H = (v0 sin θ)² / (2 g)

  2. A high-accuracy adaptive solution of the same ODE with drag,
     computed with scipy's DOP853 integrator and a terminal ground event.

Reference launches cover low and high elevations, crosswind and a
non-zero azimuth.
"""

import numpy as np
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence
from scipy.integrate import solve_ivp

from .projectile import PhysicalParameters, LaunchSpec, GRAVITY
from .integrator import (
    ImpactEvent, derivatives, simulate_no_drag, simulate_with_drag,
)


# ══════════════════════════════════════════════════════════════════════════
#  Reference launches
# ══════════════════════════════════════════════════════════════════════════

# (name, v0, elevation_deg, azimuth_deg, mass, wind)
REFERENCE_LAUNCHES = [
    ('Baseline 45°',      50.0, 45.0,  0.0, 1.0, (0.0, 0.0, 0.0)),
    ('Flat 15°',          80.0, 15.0,  0.0, 2.0, (0.0, 0.0, 0.0)),
    ('Lob 75°',           40.0, 75.0,  0.0, 0.5, (0.0, 0.0, 0.0)),
    ('Azimuth 30°',       60.0, 40.0, 30.0, 1.0, (0.0, 0.0, 0.0)),
    ('Headwind 10 m/s',   50.0, 45.0,  0.0, 1.0, (-10.0, 0.0, 0.0)),
    ('Crosswind 8 m/s',   50.0, 45.0,  0.0, 1.0, (0.0, 0.0, 8.0)),
]


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    name: str
    ref_time: float         # reference impact time (s)
    sim_time: float         # simulated impact time (s)
    time_error: float       # s
    ref_range: float        # reference horizontal range (m)
    sim_range: float        # simulated horizontal range (m)
    range_error: float      # m
    ref_max_alt: float
    sim_max_alt: float
    alt_error: float        # m

    @property
    def range_error_pct(self) -> float:
        return 100.0 * self.range_error / self.ref_range if self.ref_range else 0.0


# ══════════════════════════════════════════════════════════════════════════
#  Closed-form vacuum trajectory
# ══════════════════════════════════════════════════════════════════════════

def analytic_flight_time(v0: float, elevation_deg: float, g: float = GRAVITY) -> float:
    return 2.0 * v0 * np.sin(np.radians(elevation_deg)) / g


def analytic_range(v0: float, elevation_deg: float, g: float = GRAVITY) -> float:
    return v0 ** 2 * np.sin(2.0 * np.radians(elevation_deg)) / g


def analytic_max_height(v0: float, elevation_deg: float, g: float = GRAVITY) -> float:
    return (v0 * np.sin(np.radians(elevation_deg))) ** 2 / (2.0 * g)


def analytic_impact(launch: LaunchSpec, g: float = GRAVITY) -> ImpactEvent:
    """Exact drag-free ground impact, with the range split along the azimuth."""
    t = analytic_flight_time(launch.v0, launch.elevation_deg, g)
    r = analytic_range(launch.v0, launch.elevation_deg, g)
    azim = np.radians(launch.azimuth_deg)
    return ImpactEvent(t=float(t), x=float(r * np.cos(azim)), y=0.0,
                       z=float(r * np.sin(azim)))


def validate_against_analytic(launch: LaunchSpec, g: float = GRAVITY,
                              name: str = 'vacuum') -> ValidationResult:
    """Compare the drag-free simulator with the closed-form parabola."""
    traj = simulate_no_drag(launch, g)
    ref = analytic_impact(launch, g)
    ref_range = float(np.hypot(ref.x, ref.z))
    ref_alt = analytic_max_height(launch.v0, launch.elevation_deg, g)

    return ValidationResult(
        name=name,
        ref_time=ref.t,
        sim_time=traj.flight_time,
        time_error=traj.flight_time - ref.t,
        ref_range=ref_range,
        sim_range=traj.range_total,
        range_error=traj.range_total - ref_range,
        ref_max_alt=ref_alt,
        sim_max_alt=traj.max_altitude,
        alt_error=traj.max_altitude - ref_alt,
    )


# ══════════════════════════════════════════════════════════════════════════
#  Adaptive high-accuracy reference (scipy)
# ══════════════════════════════════════════════════════════════════════════

@dataclass
class ReferenceSolution:
    """Dense adaptive solution up to the ground event."""
    time: np.ndarray
    states: np.ndarray        # (N, 6)
    impact: Optional[ImpactEvent]
    dense: object             # OdeSolution, callable on an array of times

    @property
    def max_altitude(self) -> float:
        return float(np.max(self.states[:, 1]))


def reference_trajectory(launch: LaunchSpec,
                         params: Optional[PhysicalParameters] = None,
                         rtol: float = 1e-10, atol: float = 1e-10,
                         t_end: Optional[float] = None) -> ReferenceSolution:
    """
    Integrate the same equations of motion with DOP853 and stop exactly
    at the descending y = 0 crossing.

    The horizon defaults to t_max + dt, the latest time a fixed-step run
    of the same launch can reach.
    """
    if params is None:
        params = PhysicalParameters()
    if t_end is None:
        t_end = launch.t_max + launch.dt

    def rhs(t, s):
        return derivatives(s, params)

    def _ground_event(t, s):
        return s[1]
    _ground_event.terminal = True
    _ground_event.direction = -1  # Descending through y = 0

    sol = solve_ivp(
        rhs,
        (0.0, t_end),
        launch.initial_state(),
        method='DOP853',
        events=[_ground_event],
        rtol=rtol,
        atol=atol,
        dense_output=True,
    )

    impact = None
    if sol.t_events[0].size > 0:
        t_hit = float(sol.t_events[0][0])
        s_hit = sol.y_events[0][0]
        impact = ImpactEvent(t=t_hit, x=float(s_hit[0]), y=0.0, z=float(s_hit[2]))

    return ReferenceSolution(time=sol.t, states=sol.y.T, impact=impact, dense=sol.sol)


def validate_against_reference(launch: LaunchSpec,
                               params: Optional[PhysicalParameters] = None,
                               name: str = 'drag') -> ValidationResult:
    """Compare the fixed-step drag simulator with the adaptive reference."""
    if params is None:
        params = PhysicalParameters()
    traj = simulate_with_drag(launch, params)
    ref = reference_trajectory(launch, params)

    if ref.impact is None or traj.impact is None:
        raise ValueError(f"'{name}': no ground impact within t_max={launch.t_max} s")

    # Apex from the dense output, sampled finer than the adaptive steps
    t_fine = np.linspace(0.0, ref.impact.t, 4001)
    sol_alt = float(np.max(ref.dense(t_fine)[1]))

    ref_range = float(np.hypot(ref.impact.x, ref.impact.z))
    return ValidationResult(
        name=name,
        ref_time=ref.impact.t,
        sim_time=traj.flight_time,
        time_error=traj.flight_time - ref.impact.t,
        ref_range=ref_range,
        sim_range=traj.range_total,
        range_error=traj.range_total - ref_range,
        ref_max_alt=sol_alt,
        sim_max_alt=traj.max_altitude,
        alt_error=traj.max_altitude - sol_alt,
    )


def convergence_study(launch: LaunchSpec,
                      params: Optional[PhysicalParameters] = None,
                      dts: Sequence[float] = (0.1, 0.05, 0.02, 0.01, 0.005)
                      ) -> Dict[float, float]:
    """
    Absolute impact-time error against the adaptive reference for each dt.

    With linear interpolation of the crossing the error is dominated by the
    interpolation, which shrinks as dt². A step size whose run ends without
    an impact records nan.
    """
    if params is None:
        params = PhysicalParameters()
    ref = reference_trajectory(launch, params, t_end=launch.t_max + max(dts))
    if ref.impact is None:
        raise ValueError(f"no ground impact within t_max={launch.t_max} s")

    errors = {}
    for dt in dts:
        traj = simulate_with_drag(replace(launch, dt=dt), params)
        if traj.impact is None:
            errors[dt] = float('nan')
        else:
            errors[dt] = abs(traj.impact.t - ref.impact.t)
    return errors


# ══════════════════════════════════════════════════════════════════════════
#  Reports
# ══════════════════════════════════════════════════════════════════════════

def _print_table(title: str, results: List[ValidationResult]):
    print(f"\n{'='*75}")
    print(f"  VALIDATION: {title}")
    print(f"{'='*75}")
    print(f"{'Case':<18} {'Ref T':>8} {'Sim T':>8} {'ΔT':>9} "
          f"{'Ref R':>9} {'Sim R':>9} {'ΔR':>9}")
    print("-" * 75)
    for r in results:
        print(f"{r.name:<18} {r.ref_time:>8.3f} {r.sim_time:>8.3f} {r.time_error:>+9.1e} "
              f"{r.ref_range:>9.2f} {r.sim_range:>9.2f} {r.range_error:>+9.1e}")
    print("-" * 75)
    worst = max(abs(r.time_error) for r in results)
    print(f"  Worst impact-time error: {worst:.2e} s")
    print(f"{'='*75}\n")


def run_all_validations(dt: float = 0.01, g: float = GRAVITY,
                        verbose: bool = True) -> Dict[str, List[ValidationResult]]:
    """Run the drag-free and drag validations over all reference launches."""
    vacuum = []
    drag = []
    for name, v0, elev, azim, mass, wind in REFERENCE_LAUNCHES:
        launch = LaunchSpec(v0=v0, elevation_deg=elev, azimuth_deg=azim, dt=dt)
        if not any(wind):
            vacuum.append(validate_against_analytic(launch, g, name=name))
        params = PhysicalParameters(g=g, mass=mass, wind=wind)
        drag.append(validate_against_reference(launch, params, name=name))

    if verbose:
        _print_table("Drag-free RK4 vs closed form", vacuum)
        _print_table("Drag RK4 vs DOP853 reference", drag)

    return {'no_drag': vacuum, 'drag': drag}


if __name__ == "__main__":
    run_all_validations(verbose=True)
