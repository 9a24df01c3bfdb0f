"""
Validation Tests
================
Fixed-step RK4 against the closed-form parabola and the DOP853 reference.
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from projectile3d.projectile import PhysicalParameters, LaunchSpec
from projectile3d.integrator import simulate_with_drag
from projectile3d.validation import (
    REFERENCE_LAUNCHES,
    analytic_flight_time, analytic_range, analytic_max_height, analytic_impact,
    validate_against_analytic, validate_against_reference,
    reference_trajectory, convergence_study, run_all_validations,
)


class TestClosedForm:
    """Vacuum formulas."""

    def test_flight_time(self):
        assert abs(analytic_flight_time(50.0, 45.0, 9.81) - 7.20801) < 1e-4

    def test_range(self):
        assert abs(analytic_range(50.0, 45.0, 9.81) - 254.842) < 1e-3

    def test_max_height(self):
        assert abs(analytic_max_height(50.0, 90.0, 9.81) - 2500.0 / (2 * 9.81)) < 1e-9

    def test_impact_follows_azimuth(self):
        launch = LaunchSpec(v0=50.0, elevation_deg=45.0, azimuth_deg=30.0)
        imp = analytic_impact(launch)
        r = analytic_range(50.0, 45.0)
        assert abs(np.hypot(imp.x, imp.z) - r) < 1e-9
        assert abs(imp.z / imp.x - np.tan(np.radians(30.0))) < 1e-12
        assert imp.y == 0.0


class TestAgainstAnalytic:
    """Drag-free RK4 vs closed form."""

    @pytest.mark.parametrize('elev', [15.0, 30.0, 45.0, 60.0, 80.0])
    def test_errors_small(self, elev):
        res = validate_against_analytic(LaunchSpec(v0=50.0, elevation_deg=elev, dt=0.01))
        assert abs(res.time_error) < 1e-3
        assert abs(res.range_error) < 1e-3
        assert abs(res.alt_error) < 1e-3

    def test_apex_never_overestimated(self):
        """Sampled apex cannot exceed the true apex."""
        res = validate_against_analytic(LaunchSpec(v0=37.0, elevation_deg=52.0, dt=0.05))
        assert res.sim_max_alt <= res.ref_max_alt + 1e-9


class TestAgainstReference:
    """Drag RK4 vs scipy DOP853."""

    def test_reference_matches_closed_form_without_drag(self):
        launch = LaunchSpec(v0=50.0, elevation_deg=45.0)
        ref = reference_trajectory(launch, PhysicalParameters.drag_free())
        assert ref.impact is not None
        assert abs(ref.impact.t - analytic_flight_time(50.0, 45.0)) < 1e-6
        assert abs(ref.impact.x - analytic_range(50.0, 45.0)) < 1e-5

    def test_reference_impact_on_ground(self):
        ref = reference_trajectory(LaunchSpec(v0=50.0, elevation_deg=45.0))
        assert ref.impact is not None
        assert abs(ref.states[-1, 1]) < 1e-6
        assert ref.max_altitude > 0

    def test_reference_without_impact(self):
        ref = reference_trajectory(LaunchSpec(v0=50.0, elevation_deg=45.0, t_max=1.0))
        assert ref.impact is None

    @pytest.mark.parametrize('case', REFERENCE_LAUNCHES, ids=[c[0] for c in REFERENCE_LAUNCHES])
    def test_errors_small(self, case):
        name, v0, elev, azim, mass, wind = case
        launch = LaunchSpec(v0=v0, elevation_deg=elev, azimuth_deg=azim, dt=0.01)
        res = validate_against_reference(launch, PhysicalParameters(mass=mass, wind=wind),
                                         name=name)
        assert abs(res.time_error) < 1e-3
        assert abs(res.range_error) < 1e-2
        assert abs(res.alt_error) < 1e-3
        assert res.name == name

    def test_missing_impact_raises(self):
        with pytest.raises(ValueError):
            validate_against_reference(LaunchSpec(v0=50.0, elevation_deg=45.0, t_max=1.0))

    def test_convergence(self):
        launch = LaunchSpec(v0=50.0, elevation_deg=45.0)
        errors = convergence_study(launch, PhysicalParameters(),
                                   dts=(0.1, 0.02, 0.005))
        assert set(errors) == {0.1, 0.02, 0.005}
        assert all(e < 1e-2 for e in errors.values())
        assert errors[0.005] < 1e-4

    def test_convergence_marks_runs_without_impact(self):
        """A step size that stops short of the ground records nan, not an error."""
        errors = convergence_study(LaunchSpec(v0=50.0, elevation_deg=45.0, t_max=4.0),
                                   PhysicalParameters(), dts=(3.0, 2.0))
        assert set(errors) == {3.0, 2.0}
        assert np.isnan(errors[2.0])

    def test_impact_just_past_t_max(self):
        """The last RK4 step may land up to one dt after t_max."""
        launch = LaunchSpec(v0=50.0, elevation_deg=45.0, dt=0.01, t_max=6.3605)
        traj = simulate_with_drag(launch)
        assert traj.impact is not None
        assert traj.impact.t > launch.t_max

        ref = reference_trajectory(launch)
        assert ref.impact is not None
        res = validate_against_reference(launch)
        assert abs(res.time_error) < 1e-3

        errors = convergence_study(launch)
        assert errors[0.01] < 1e-3


class TestReports:

    def test_run_all_validations(self, capsys):
        results = run_all_validations(verbose=True)
        n_calm = sum(1 for c in REFERENCE_LAUNCHES if not any(c[5]))
        assert len(results['no_drag']) == n_calm
        assert len(results['drag']) == len(REFERENCE_LAUNCHES)
        out = capsys.readouterr().out
        assert 'VALIDATION' in out
        assert 'DOP853' in out

    def test_quiet(self, capsys):
        run_all_validations(verbose=False)
        assert capsys.readouterr().out == ''


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
