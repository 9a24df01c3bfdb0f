"""
3D Projectile Trajectory Integrator
===================================
Deterministic fixed-step simulation of a point mass launched from the
origin with a given speed, elevation and azimuth, until it returns to
the ground plane y = 0:
  - Uniform gravity
  - Quadratic aerodynamic drag relative to a uniform wind
  - Classical RK4 integration
  - Interpolated ground impact (time and position)

A drag-free variant of the same integrator serves as the baseline
against the closed-form parabola; scipy's DOP853 solver provides a
high-accuracy reference for the drag case.
"""

from .projectile import (
    PhysicalParameters, LaunchSpec, acceleration,
    GRAVITY, AIR_DENSITY, DEFAULT_CD, DEFAULT_AREA,
)
from .integrator import (
    TrajectorySample, ImpactEvent, TrajectoryResult,
    derivatives, rk4_step, interpolate_impact,
    simulate_with_drag, simulate_no_drag, simulate,
)
from .validation import (
    analytic_flight_time, analytic_range, analytic_max_height, analytic_impact,
    validate_against_analytic, validate_against_reference,
    reference_trajectory, convergence_study, run_all_validations,
)
from .visualization import (
    plot_trajectory, plot_drag_comparison, plot_wind_effects,
)

__version__ = "1.0.0"
__all__ = [
    'PhysicalParameters', 'LaunchSpec', 'acceleration',
    'GRAVITY', 'AIR_DENSITY', 'DEFAULT_CD', 'DEFAULT_AREA',
    'TrajectorySample', 'ImpactEvent', 'TrajectoryResult',
    'derivatives', 'rk4_step', 'interpolate_impact',
    'simulate_with_drag', 'simulate_no_drag', 'simulate',
    'analytic_flight_time', 'analytic_range', 'analytic_max_height',
    'analytic_impact', 'validate_against_analytic', 'validate_against_reference',
    'reference_trajectory', 'convergence_study', 'run_all_validations',
    'plot_trajectory', 'plot_drag_comparison', 'plot_wind_effects',
]
