"""
Launch Definition & Forces
==========================
Defines the physical parameters of a run, the launch specification and
the acceleration acting on the point mass:
  - Gravity (uniform, constant)
  - Quadratic aerodynamic drag
  - Wind (drag acts on velocity relative to the air mass)

Coordinate system (right-handed):
  x = downrange at azimuth 0 (horizontal)
  y = altitude (vertical, up positive)
  z = crossrange (horizontal)
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple


# ── Defaults ──────────────────────────────────────────────────────────────
GRAVITY        = 9.81      # m/s²
AIR_DENSITY    = 1.225     # kg/m³  (sea level)
DEFAULT_CD     = 0.47      # sphere
DEFAULT_AREA   = 0.01      # m²
DEFAULT_MASS   = 1.0       # kg
DEFAULT_DT     = 0.01      # s
DEFAULT_T_MAX  = 120.0     # s


@dataclass
class PhysicalParameters:
    """
    Environment and body properties, constant for one simulation run.
    """
    g: float = GRAVITY
    rho: float = AIR_DENSITY
    cd: float = DEFAULT_CD
    area: float = DEFAULT_AREA
    mass: float = DEFAULT_MASS
    # Velocity of the air mass (m/s)
    wind: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    @classmethod
    def drag_free(cls, g: float = GRAVITY) -> 'PhysicalParameters':
        """Gravity only. Mass is irrelevant without drag and is fixed to 1."""
        return cls(g=g, rho=0.0, cd=0.0, area=0.0, mass=1.0,
                   wind=(0.0, 0.0, 0.0))

    @property
    def wind_vector(self) -> np.ndarray:
        return np.array(self.wind, dtype=float)

    @property
    def drag_factor(self) -> float:
        """
        k = ½ ρ Cd A / m  (1/m)

        A non-positive mass gives inf or NaN instead of raising.
        """
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(0.5 * self.rho * self.cd * self.area)
                         / np.float64(self.mass))

    def validate(self):
        """Raise ValueError for parameters the integrator cannot use."""
        if not self.mass > 0:
            raise ValueError(f"mass must be > 0, got {self.mass}")
        for name in ('g', 'rho', 'cd', 'area'):
            value = getattr(self, name)
            if not value >= 0:
                raise ValueError(f"{name} must be >= 0, got {value}")
        if len(self.wind) != 3:
            raise ValueError(f"wind must have 3 components, got {len(self.wind)}")


@dataclass
class LaunchSpec:
    """
    Launch speed, direction and time stepping of a run.
    """
    v0: float = 50.0                  # m/s
    elevation_deg: float = 45.0       # degrees above horizontal
    azimuth_deg: float = 0.0          # degrees in the horizontal plane, from +x towards +z
    dt: float = DEFAULT_DT            # s  integration step (accuracy, not frame rate)
    t_max: float = DEFAULT_T_MAX      # s  simulation time budget

    def initial_velocity_vector(self) -> np.ndarray:
        """
        Convert launch speed + angles to [vx, vy, vz] vector.
        """
        elev = np.radians(self.elevation_deg)
        azim = np.radians(self.azimuth_deg)

        vx = self.v0 * np.cos(elev) * np.cos(azim)
        vy = self.v0 * np.sin(elev)
        vz = self.v0 * np.cos(elev) * np.sin(azim)
        return np.array([vx, vy, vz])

    def initial_state(self) -> np.ndarray:
        """[x, y, z, vx, vy, vz] at t = 0, launched from the origin."""
        return np.concatenate((np.zeros(3), self.initial_velocity_vector()))

    def validate(self):
        """Raise ValueError for a launch the drivers are not meant to run."""
        if not self.v0 >= 0:
            raise ValueError(f"v0 must be >= 0, got {self.v0}")
        if not self.dt > 0:
            raise ValueError(f"dt must be > 0, got {self.dt}")
        if not self.t_max > 0:
            raise ValueError(f"t_max must be > 0, got {self.t_max}")


def acceleration(velocity: np.ndarray, params: PhysicalParameters) -> np.ndarray:
    """
    Acceleration of the point mass for a given ground-frame velocity.

    a = -k |v_rel| v_rel - (0, g, 0),   v_rel = v - wind

    Parameters
    ----------
    velocity : [vx, vy, vz] in m/s
    params : PhysicalParameters

    Returns
    -------
    acceleration : np.ndarray [ax, ay, az] in m/s²
    """
    v_rel = velocity - params.wind_vector
    speed = np.sqrt(np.dot(v_rel, v_rel))

    # Pure gravity when at rest relative to the air
    if speed == 0.0:
        return np.array([0.0, -params.g, 0.0])

    a_drag = -params.drag_factor * speed * v_rel
    a_drag[1] -= params.g
    return a_drag
