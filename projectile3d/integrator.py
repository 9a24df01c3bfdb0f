"""
Numerical Integration Engine
=============================
Fixed-step 4th-order Runge-Kutta integration of the equations of motion:
    dx/dt = v
    dv/dt = a(v)  (from projectile.acceleration)

The state is the 6-vector [x, y, z, vx, vy, vz]. Stepping stops at the
first crossing of the ground plane y = 0, whose time and position are
refined by linear interpolation between the two straddling samples.

Two drivers share all of the machinery:
  - simulate_with_drag : gravity + quadratic drag relative to the wind
  - simulate_no_drag   : gravity only, the reference for closed-form checks

Output: TrajectoryResult dataclass with the full state history.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .projectile import PhysicalParameters, LaunchSpec, acceleration, GRAVITY


@dataclass(frozen=True)
class TrajectorySample:
    """Snapshot of the point mass at one instant."""
    t: float
    x: float
    y: float
    z: float
    vx: float
    vy: float
    vz: float


@dataclass(frozen=True)
class ImpactEvent:
    """Interpolated ground crossing (t, x, y, z). y is always exactly 0."""
    t: float
    x: float
    y: float
    z: float


@dataclass
class TrajectoryResult:
    """Complete trajectory output."""
    params: PhysicalParameters
    launch: LaunchSpec
    method: str                # 'drag' or 'no_drag'

    time: np.ndarray           # (N,)
    states: np.ndarray         # (N, 6)  [x, y, z, vx, vy, vz]
    y_max: float
    impact: Optional[ImpactEvent]

    def __len__(self) -> int:
        return len(self.time)

    @property
    def x(self) -> np.ndarray:
        return self.states[:, 0]

    @property
    def y(self) -> np.ndarray:
        return self.states[:, 1]

    @property
    def z(self) -> np.ndarray:
        return self.states[:, 2]

    @property
    def vx(self) -> np.ndarray:
        return self.states[:, 3]

    @property
    def vy(self) -> np.ndarray:
        return self.states[:, 4]

    @property
    def vz(self) -> np.ndarray:
        return self.states[:, 5]

    @property
    def speed(self) -> np.ndarray:
        return np.linalg.norm(self.states[:, 3:], axis=1)

    def samples(self) -> List[TrajectorySample]:
        """The emitted sequence as timestamped samples."""
        return [TrajectorySample(float(t), *(float(c) for c in s))
                for t, s in zip(self.time, self.states)]

    @property
    def has_impact(self) -> bool:
        return self.impact is not None

    @property
    def grounded_at_launch(self) -> bool:
        """
        True when the crossing was found on the very first step from the
        ground, i.e. the body never left y = 0. Not an in-flight impact.
        """
        return self.impact is not None and self.impact.t == 0.0

    @property
    def is_finite(self) -> bool:
        """False when a degenerate input let inf/NaN into the states."""
        return bool(np.all(np.isfinite(self.states)))

    @property
    def flight_time(self) -> float:
        """Impact time, or the last simulated time without impact (s)."""
        if self.impact is not None:
            return self.impact.t
        return float(self.time[-1])

    @property
    def range_total(self) -> float:
        """Horizontal distance from the launch point at impact (m)."""
        if self.impact is not None:
            return float(np.hypot(self.impact.x, self.impact.z))
        return float(np.hypot(self.x[-1], self.z[-1]))

    @property
    def max_altitude(self) -> float:
        """Maximum altitude reached (m)."""
        return self.y_max

    @property
    def lateral_drift(self) -> float:
        """Crossrange position at impact (m)."""
        if self.impact is not None:
            return self.impact.z
        return float(self.z[-1])

    def summary(self) -> str:
        """Human-readable summary string."""
        if self.impact is None:
            impact_line = f"║  Impact       : {'none within t_max':<36s} ║"
        else:
            impact_line = (f"║  Impact       : t={self.impact.t:>8.3f} s  "
                           f"x={self.impact.x:>9.2f} z={self.impact.z:>7.2f} ║")
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {self.method.upper():<30s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Launch vel   : {self.launch.v0:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {self.launch.elevation_deg:>10.1f} °{'':<24s} ║",
            f"║  Azimuth      : {self.launch.azimuth_deg:>10.1f} °{'':<24s} ║",
            f"║  Mass         : {self.params.mass:>10.3f} kg{'':<23s} ║",
            f"║  Timestep     : {self.launch.dt:<36.4f} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.range_total:>10.2f} m{'':<24s} ║",
            f"║  Max altitude : {self.max_altitude:>10.2f} m{'':<24s} ║",
            f"║  Flight time  : {self.flight_time:>10.3f} s{'':<24s} ║",
            f"║  Lateral drift: {self.lateral_drift:>10.2f} m{'':<24s} ║",
            impact_line,
            f"║  Samples      : {len(self):>10d}{'':<26s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def derivatives(state: np.ndarray, params: PhysicalParameters) -> np.ndarray:
    """
    Right-hand side f(state) = [vx, vy, vz, ax, ay, az].

    The dynamics are time-invariant, so absolute time is not an input.
    """
    velocity = state[3:]
    return np.concatenate((velocity, acceleration(velocity, params)))


def rk4_step(state: np.ndarray, params: PhysicalParameters, h: float) -> np.ndarray:
    """
    Advance one state by one step of classical RK4.

    Pure and deterministic; NaN in the input propagates to the output.
    """
    k1 = derivatives(state, params)
    k2 = derivatives(state + 0.5 * h * k1, params)
    k3 = derivatives(state + 0.5 * h * k2, params)
    k4 = derivatives(state + h * k3, params)
    return state + (h / 6.0) * (k1 + 2*k2 + 2*k3 + k4)


def interpolate_impact(state_a: np.ndarray, t0: float,
                       state_b: np.ndarray, t1: float) -> Tuple[float, np.ndarray]:
    """
    Linear estimate of the y = 0 crossing between two consecutive samples
    with state_a[1] >= 0 and state_b[1] < 0.

    Returns (t_star, state_star). state_star[1] is only approximately zero;
    callers pin the reported altitude to 0.
    """
    y0, y1 = state_a[1], state_b[1]
    alpha = (0.0 - y0) / (y1 - y0)
    t_star = t0 + alpha * (t1 - t0)
    return t_star, state_a + alpha * (state_b - state_a)


def _run(launch: LaunchSpec, params: PhysicalParameters,
         method: str) -> TrajectoryResult:
    """Single pass from launch until the first ground crossing or t_max."""
    state = launch.initial_state()
    t = 0.0
    y_max = state[1]

    times = [t]
    history = [state]
    impact = None

    # Degenerate parameters (mass <= 0) are allowed to fill the run with NaN
    with np.errstate(all='ignore'):
        while t < launch.t_max:
            nxt = rk4_step(state, params, launch.dt)
            t_next = t + launch.dt

            if nxt[1] > y_max:
                y_max = nxt[1]

            # The first sample below ground is kept in the trajectory
            times.append(t_next)
            history.append(nxt)

            if state[1] >= 0 and nxt[1] < 0:
                t_star, s_star = interpolate_impact(state, t, nxt, t_next)
                impact = ImpactEvent(t=float(t_star), x=float(s_star[0]), y=0.0,
                                     z=float(s_star[2]))
                break

            state = nxt
            t = t_next

    return _build_result(times, history, y_max, impact, launch, params, method)


def _build_result(times, history, y_max, impact, launch, params, method):
    """Convert history lists to TrajectoryResult."""
    return TrajectoryResult(
        params=params,
        launch=launch,
        method=method,
        time=np.array(times),
        states=np.array(history),
        y_max=float(y_max),
        impact=impact,
    )


def simulate_with_drag(launch: LaunchSpec,
                       params: Optional[PhysicalParameters] = None) -> TrajectoryResult:
    """
    RK4 trajectory under gravity and quadratic drag relative to the wind.

    Inputs are not validated here; see LaunchSpec.validate and
    PhysicalParameters.validate.
    """
    if params is None:
        params = PhysicalParameters()
    return _run(launch, params, 'drag')


def simulate_no_drag(launch: LaunchSpec, g: float = GRAVITY) -> TrajectoryResult:
    """
    RK4 trajectory under gravity only.

    Same integrator with drag terms zeroed, so it can be checked against
    the closed-form parabola.
    """
    return _run(launch, PhysicalParameters.drag_free(g), 'no_drag')


def simulate(launch: LaunchSpec, params: Optional[PhysicalParameters] = None,
             drag: bool = True) -> TrajectoryResult:
    """Run the drag or drag-free simulator depending on the drag flag."""
    if params is None:
        params = PhysicalParameters()
    if drag:
        return simulate_with_drag(launch, params)
    return simulate_no_drag(launch, params.g)
