"""
Projectile Definition & Forces
===============================
Defines the BallisticInputs snapshot and computes the acceleration acting
on the bullet:
  - Gravity
  - Aerodynamic drag (reference Cd(Mach) scaled by the form factor)
  - Wind effects (drag acts on the velocity relative to the air mass)
  - Spin drift (simplified gyroscopic drift, no 6-DOF)

Coordinate system:
  x = downrange (horizontal)
  y = vertical  (up positive)
  z = crossrange (lateral, right positive looking downrange)
"""

import math
from dataclasses import dataclass, field, replace

import numpy as np

from .atmosphere import GRAVITY, AirProperties
from .drag_model import DragModel, drag_acceleration
from .errors import InvalidInputError
from .units import (
    GRAINS_PER_POUND, fps_to_mps, grains_to_kg, inches_to_meters,
    joules_to_ftlbs, kelvin_to_fahrenheit, pa_to_inhg, yards_to_meters,
)


# ── Spin drift parameters (Litz: D[in] = 1.25 (Sg + 1.2) t^1.83) ─────────
SPIN_DRIFT_SCALE    = 1.25
SPIN_DRIFT_OFFSET   = 1.2
SPIN_DRIFT_EXPONENT = 1.83
SPIN_DRIFT_MIN_TIME = 1e-3    # s, floor for the t^-0.17 term at launch


def _as_finite(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError(name, value, 'a real number') from None
    if not math.isfinite(number):
        raise InvalidInputError(name, value, 'finite')
    return number


@dataclass(frozen=True)
class BallisticInputs:
    """
    Immutable bullet, rifle and zeroing data for one solve (imperial units).

    ``twist_rate_inches = 0`` disables spin drift. ``sight_height_inches``
    may be negative for under-bore optics. ``drag_model`` also accepts a
    name such as ``'G1'``.
    """
    bc: float
    bullet_weight_grains: float
    muzzle_velocity_fps: float
    bullet_diameter_inches: float
    bullet_length_inches: float
    sight_height_inches: float
    zero_distance_yards: float
    shooting_angle_degrees: float = 0.0
    twist_rate_inches: float = 10.0
    is_right_twist: bool = True
    drag_model: DragModel = field(default=DragModel.G7)

    def __post_init__(self):
        for name in ('bc', 'bullet_weight_grains', 'muzzle_velocity_fps',
                     'bullet_diameter_inches', 'bullet_length_inches',
                     'sight_height_inches', 'zero_distance_yards',
                     'shooting_angle_degrees', 'twist_rate_inches'):
            object.__setattr__(self, name, _as_finite(name, getattr(self, name)))

        for name in ('bc', 'bullet_weight_grains', 'muzzle_velocity_fps',
                     'bullet_diameter_inches', 'bullet_length_inches'):
            if getattr(self, name) <= 0.0:
                raise InvalidInputError(name, getattr(self, name), '> 0')

        if self.zero_distance_yards < 0.0:
            raise InvalidInputError('zero_distance_yards', self.zero_distance_yards, '>= 0')
        if self.twist_rate_inches < 0.0:
            raise InvalidInputError('twist_rate_inches', self.twist_rate_inches,
                                    '>= 0 (0 disables spin drift)')
        if not -90.0 <= self.shooting_angle_degrees <= 90.0:
            raise InvalidInputError('shooting_angle_degrees', self.shooting_angle_degrees,
                                    'within [-90, 90]')
        object.__setattr__(self, 'is_right_twist', bool(self.is_right_twist))
        object.__setattr__(self, 'drag_model', DragModel.parse(self.drag_model))

    # ── SI views ──────────────────────────────────────────────────────────
    @property
    def mass_kg(self) -> float:
        return grains_to_kg(self.bullet_weight_grains)

    @property
    def diameter_m(self) -> float:
        return inches_to_meters(self.bullet_diameter_inches)

    @property
    def area_m2(self) -> float:
        """Reference cross-sectional area (m²)."""
        return math.pi * (self.diameter_m / 2) ** 2

    @property
    def muzzle_velocity_mps(self) -> float:
        return fps_to_mps(self.muzzle_velocity_fps)

    @property
    def sight_height_m(self) -> float:
        return inches_to_meters(self.sight_height_inches)

    @property
    def zero_distance_m(self) -> float:
        return yards_to_meters(self.zero_distance_yards)

    @property
    def shooting_angle_rad(self) -> float:
        return math.radians(self.shooting_angle_degrees)

    # ── Derived ballistics ────────────────────────────────────────────────
    @property
    def sectional_density(self) -> float:
        """SD in lb/in² (mass over diameter squared)."""
        return (self.bullet_weight_grains / GRAINS_PER_POUND) / self.bullet_diameter_inches ** 2

    @property
    def form_factor(self) -> float:
        """i = SD / BC — scales the reference drag curve to this bullet."""
        return self.sectional_density / self.bc

    def kinetic_energy_ftlbs(self, speed_mps: float) -> float:
        return joules_to_ftlbs(0.5 * self.mass_kg * speed_mps ** 2)

    @property
    def muzzle_energy_ftlbs(self) -> float:
        return self.kinetic_energy_ftlbs(self.muzzle_velocity_mps)


def gyroscopic_stability(inputs: BallisticInputs, air: AirProperties) -> float:
    """
    Gyroscopic stability factor Sg by the Miller twist rule.

    Sg = 30 m / (t² d³ l (1 + l²))

    with m in grains, d in inches, t the twist and l the bullet length in
    calibers, corrected for muzzle velocity (v/2800)^(1/3) and for air
    density ((T°F + 460)/519)·(29.92/P_inHg). Returns 0 without twist.
    """
    if inputs.twist_rate_inches == 0.0:
        return 0.0

    d = inputs.bullet_diameter_inches
    t = inputs.twist_rate_inches / d
    l = inputs.bullet_length_inches / d
    sg = 30.0 * inputs.bullet_weight_grains / (t ** 2 * d ** 3 * l * (1.0 + l ** 2))

    sg *= (inputs.muzzle_velocity_fps / 2800.0) ** (1.0 / 3.0)

    temp_f = kelvin_to_fahrenheit(air.temperature_k)
    pressure_inhg = pa_to_inhg(air.station_pressure_pa)
    sg *= ((temp_f + 460.0) / 519.0) * (29.92 / pressure_inhg)
    return sg


def spin_drift_rate(inputs: BallisticInputs, air: AirProperties) -> float:
    """
    Signed coefficient C (m/s²) of the spin-drift lateral acceleration
    a(t) = C · t^(-0.17), the second derivative of Litz's drift
    1.25 (Sg + 1.2) t^1.83 inches. Right-hand twist drifts right (+z).
    """
    if inputs.twist_rate_inches == 0.0:
        return 0.0
    sg = gyroscopic_stability(inputs, air)
    drift_in = SPIN_DRIFT_SCALE * (sg + SPIN_DRIFT_OFFSET)
    rate = inches_to_meters(drift_in) * SPIN_DRIFT_EXPONENT * (SPIN_DRIFT_EXPONENT - 1.0)
    return rate if inputs.is_right_twist else -rate


@dataclass(frozen=True, eq=False)
class FlightModel:
    """
    Everything the integrator needs to evaluate the acceleration of one
    flight. Immutable, built once per solve.
    """
    drag_model: DragModel
    mass: float               # kg
    area: float               # m²
    form_factor: float
    density: float            # kg/m³
    speed_of_sound: float     # m/s
    wind: np.ndarray = field(default_factory=lambda: np.zeros(3))
    spin_rate: float = 0.0    # m/s², see spin_drift_rate

    @classmethod
    def build(cls, inputs: BallisticInputs, air: AirProperties,
              wind: np.ndarray = None) -> 'FlightModel':
        return cls(
            drag_model=inputs.drag_model,
            mass=inputs.mass_kg,
            area=inputs.area_m2,
            form_factor=inputs.form_factor,
            density=air.density,
            speed_of_sound=air.speed_of_sound,
            wind=np.zeros(3) if wind is None else np.asarray(wind, dtype=float),
            spin_rate=spin_drift_rate(inputs, air),
        )

    def still_air(self) -> 'FlightModel':
        """Copy without wind or spin drift, as used for zeroing."""
        return replace(self, wind=np.zeros(3), spin_rate=0.0)

    def mach(self, velocity: np.ndarray) -> float:
        """Mach number of the air-relative speed."""
        return float(np.linalg.norm(velocity - self.wind)) / self.speed_of_sound

    def acceleration(self, t: float, velocity: np.ndarray) -> np.ndarray:
        """
        Total acceleration [ax, ay, az] in m/s².

        Wind enters only through the drag term; density and speed of sound
        are held constant over the flight.
        """
        # ── 1. Gravity ────────────────────────────────────────────────────
        a_gravity = np.array([0.0, -GRAVITY, 0.0])

        # ── 2. Aerodynamic drag on the air-relative velocity ─────────────
        v_rel = velocity - self.wind
        mach = np.linalg.norm(v_rel) / self.speed_of_sound
        cd_ref = self.drag_model.cd(mach)
        a_drag = drag_acceleration(v_rel, self.density, cd_ref, self.form_factor,
                                   self.area, self.mass)

        # ── 3. Spin drift ────────────────────────────────────────────────
        a_spin = np.zeros(3)
        if self.spin_rate:
            a_spin[2] = self.spin_rate * max(t, SPIN_DRIFT_MIN_TIME) ** (SPIN_DRIFT_EXPONENT - 2.0)

        return a_gravity + a_drag + a_spin
