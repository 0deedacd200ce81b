"""
Numerical Integration Engine
=============================
Time-stepping trajectory solver with a zeroing pre-pass.

Two stepping methods integrate the equations of motion:

1. **Euler Method** (1st order) — simple, under-damps drag at high velocity.
2. **Runge-Kutta 4th Order (RK4)** — the default.

    dx/dt = v
    dv/dt = a(t, v)  (from FlightModel.acceleration)

Before the main flight, the bore elevation that puts the trajectory back on
the line of sight at the zero distance is found with a bounded Brent
root-find (``solve_zero_angle``). The main loop then steps until the first
stopping condition is met and hands the sampled points to ``aggregate``.
"""

import enum
import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

import numpy as np
from scipy.optimize import brentq

from .atmosphere import STANDARD_ATMOSPHERE, AtmosphericConditions, air_properties
from .config import DEFAULT_SETTINGS, SolverSettings
from .errors import NumericalInstabilityError, SolverStateError
from .projectile import BallisticInputs, FlightModel, gyroscopic_stability
from .result import TerminationReason, TrajectoryPoint, TrajectoryResult, aggregate
from .units import fps_to_mps, meters_to_yards, mps_to_fps, yards_to_meters
from .wind import STILL_AIR, WindConditions

logger = logging.getLogger(__name__)

AccelerationFn = Callable[[float, np.ndarray], np.ndarray]


class SolverState(enum.Enum):
    INITIALIZED = 'initialized'
    INTEGRATING = 'integrating'
    TERMINATED = 'terminated'


@dataclass
class TrajectoryState:
    """Snapshot of projectile state at one instant (SI units)."""
    time: float
    position: np.ndarray   # [x, y, z] m, origin at the muzzle
    velocity: np.ndarray   # [vx, vy, vz] m/s


@dataclass
class Flight:
    """Raw integration output: every retained state and why it stopped."""
    states: List[TrajectoryState]
    termination: TerminationReason


# ══════════════════════════════════════════════════════════════════════════
#  Steppers
# ══════════════════════════════════════════════════════════════════════════

def euler_step(accel: AccelerationFn, t: float, pos: np.ndarray, vel: np.ndarray,
               dt: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Forward Euler.

    x_{n+1} = x_n + v_n * dt
    v_{n+1} = v_n + a(t_n, v_n) * dt
    """
    acc = accel(t, vel)
    return pos + vel * dt, vel + acc * dt


def rk4_step(accel: AccelerationFn, t: float, pos: np.ndarray, vel: np.ndarray,
             dt: float) -> Tuple[np.ndarray, np.ndarray]:
    """4th-order Runge-Kutta."""
    k1v = accel(t, vel)
    k1x = vel

    k2v = accel(t + 0.5 * dt, vel + 0.5 * dt * k1v)
    k2x = vel + 0.5 * dt * k1v

    k3v = accel(t + 0.5 * dt, vel + 0.5 * dt * k2v)
    k3x = vel + 0.5 * dt * k2v

    k4v = accel(t + dt, vel + dt * k3v)
    k4x = vel + dt * k3v

    pos = pos + (dt / 6.0) * (k1x + 2*k2x + 2*k3x + k4x)
    vel = vel + (dt / 6.0) * (k1v + 2*k2v + 2*k3v + k4v)
    return pos, vel


STEPPERS = {
    'rk4': rk4_step,
    'euler': euler_step,
}


@dataclass(frozen=True)
class LineOfSight:
    """
    Sight line of the scope: ``sight_height`` (m) above the bore axis at the
    muzzle, tilted ``angle`` (rad) from horizontal.

    Distances are measured along the line and offsets perpendicular to it,
    so the frame stays well defined up to vertical shots.
    """
    sight_height: float = 0.0
    angle: float = 0.0

    def distance(self, position: np.ndarray) -> float:
        return float(position[0] * math.cos(self.angle) + position[1] * math.sin(self.angle))

    def offset(self, position: np.ndarray) -> float:
        """Perpendicular offset (m), + above the line."""
        return float(position[1] * math.cos(self.angle) - position[0] * math.sin(self.angle)
                     - self.sight_height)

    def closing_speed(self, velocity: np.ndarray) -> float:
        """Velocity component along the line (m/s)."""
        return float(velocity[0] * math.cos(self.angle) + velocity[1] * math.sin(self.angle))


LEVEL_SIGHT = LineOfSight()


def integrate_flight(model: FlightModel, muzzle_velocity: float, elevation: float,
                     settings: SolverSettings, max_range_m: float,
                     sight: LineOfSight = LEVEL_SIGHT) -> Flight:
    """
    Step the projectile from the muzzle until a stopping condition is met.

    Parameters
    ----------
    model : FlightModel
    muzzle_velocity : float
        Launch speed (m/s)
    elevation : float
        Bore elevation above horizontal (rad)
    settings : SolverSettings
        Step size, method and velocity/time/ground bounds
    max_range_m : float
        Distance along the line of sight at which to stop (m)
    sight : LineOfSight
        Frame for the range and ground bounds

    Returns
    -------
    Flight
        States in time order, the launch state first. A step that would move
        the projectile back along the line of sight is discarded, so the
        distance never decreases.

    Raises
    ------
    NumericalInstabilityError
        If position or velocity becomes non-finite.
    """
    step = STEPPERS[settings.method]
    dt = settings.time_step
    floor = fps_to_mps(settings.min_velocity_fps)
    ground = yards_to_meters(settings.min_vertical_offset_yards)
    max_steps = max(1, int(math.ceil(settings.max_time / dt - 1e-9)))

    pos = np.zeros(3)
    vel = muzzle_velocity * np.array([math.cos(elevation), math.sin(elevation), 0.0])
    states = [TrajectoryState(0.0, pos, vel)]

    termination = TerminationReason.MAX_TIME
    for n in range(1, max_steps + 1):
        new_pos, new_vel = step(model.acceleration, (n - 1) * dt, pos, vel, dt)

        if not (np.all(np.isfinite(new_pos)) and np.all(np.isfinite(new_vel))):
            raise NumericalInstabilityError(
                f"non-finite state at t={n * dt:.4f} s (step {n}): "
                f"position={new_pos}, velocity={new_vel}"
            )
        if sight.distance(new_pos) < sight.distance(pos):
            termination = TerminationReason.NON_FORWARD
            break

        pos, vel = new_pos, new_vel
        states.append(TrajectoryState(n * dt, pos, vel))

        if np.linalg.norm(vel) < floor:
            termination = TerminationReason.VELOCITY_FLOOR
            break
        if sight.closing_speed(vel) <= 0.0:
            termination = TerminationReason.NON_FORWARD
            break
        if sight.distance(pos) >= max_range_m:
            termination = TerminationReason.MAX_RANGE
            break
        if sight.offset(pos) < ground:
            termination = TerminationReason.GROUND
            break

    return Flight(states=states, termination=termination)


# ══════════════════════════════════════════════════════════════════════════
#  Zeroing pre-pass
# ══════════════════════════════════════════════════════════════════════════

def solve_zero_angle(model: FlightModel, inputs: BallisticInputs,
                     settings: SolverSettings = DEFAULT_SETTINGS) -> float:
    """
    Bore elevation (rad, relative to the line of sight) at which the
    trajectory crosses the line of sight at the zero distance.

    The line of sight is tilted by the shooting angle and the zero distance
    is measured along it. Zeroing is done in still air without spin drift.
    A zero distance of 0 means no sighting correction.

    Raises
    ------
    NumericalInstabilityError
        If the zero distance is not reachable, cannot be bracketed within
        ±zero_max_angle_degrees, or the root-find does not converge within
        zero_max_iterations to zero_tolerance_yards.
    """
    if inputs.zero_distance_yards == 0.0:
        return 0.0

    target = inputs.zero_distance_m
    sight = LineOfSight(inputs.sight_height_m, inputs.shooting_angle_rad)
    calm = model.still_air()
    zero_settings = replace(settings, min_vertical_offset_yards=-math.inf)

    def offset_at_zero(relative: float) -> float:
        flight = integrate_flight(calm, inputs.muzzle_velocity_mps, sight.angle + relative,
                                  zero_settings, target, sight)
        last = flight.states[-1]
        d1 = sight.distance(last.position)
        if d1 < target:
            raise NumericalInstabilityError(
                f"trajectory at {math.degrees(relative):+.3f}° to the line of sight stops at "
                f"{meters_to_yards(d1):.1f} yd ({flight.termination.value}) "
                f"before zero distance {inputs.zero_distance_yards} yd"
            )
        prev = flight.states[-2]
        d0 = sight.distance(prev.position)
        o0, o1 = sight.offset(prev.position), sight.offset(last.position)
        return o0 + (target - d0) / (d1 - d0) * (o1 - o0)

    limit = math.radians(settings.zero_max_angle_degrees)
    try:
        angle, info = brentq(offset_at_zero, -limit, limit, xtol=1e-12,
                             maxiter=settings.zero_max_iterations,
                             full_output=True, disp=False)
    except ValueError as err:
        raise NumericalInstabilityError(
            f"zero distance {inputs.zero_distance_yards} yd cannot be bracketed "
            f"within ±{settings.zero_max_angle_degrees}° of the line of sight"
        ) from err

    if not info.converged:
        raise NumericalInstabilityError(
            f"zeroing did not converge in {settings.zero_max_iterations} iterations "
            f"({info.flag})"
        )
    residual = meters_to_yards(offset_at_zero(angle))
    if abs(residual) > settings.zero_tolerance_yards:
        raise NumericalInstabilityError(
            f"zeroing residual {residual:.5f} yd exceeds tolerance "
            f"{settings.zero_tolerance_yards} yd"
        )
    return angle


# ══════════════════════════════════════════════════════════════════════════
#  Solver
# ══════════════════════════════════════════════════════════════════════════

class TrajectorySolver:
    """
    Single-use trajectory solver.

    ``wind`` and ``atmosphere`` are optional: ``None`` means still air and
    the ICAO standard atmosphere. The solver moves INITIALIZED →
    INTEGRATING → TERMINATED and never back; ``solve`` returns exactly one
    result or raises exactly one error.
    """

    def __init__(self, inputs: BallisticInputs,
                 wind: Optional[WindConditions] = None,
                 atmosphere: Optional[AtmosphericConditions] = None,
                 settings: Optional[SolverSettings] = None):
        self.inputs = inputs
        self.wind = wind
        self.atmosphere = atmosphere
        self.settings = settings if settings is not None else DEFAULT_SETTINGS
        self.state = SolverState.INITIALIZED

    def solve(self) -> TrajectoryResult:
        if self.state is not SolverState.INITIALIZED:
            raise SolverStateError(
                f"solver is {self.state.value}; create a new TrajectorySolver per solve"
            )
        self.state = SolverState.INTEGRATING
        try:
            return self._run()
        finally:
            self.state = SolverState.TERMINATED

    def _run(self) -> TrajectoryResult:
        inputs, settings = self.inputs, self.settings
        air = air_properties(self.atmosphere if self.atmosphere is not None
                             else STANDARD_ATMOSPHERE)
        wind = self.wind if self.wind is not None else STILL_AIR
        model = FlightModel.build(inputs, air, wind.velocity_vector())
        stability = gyroscopic_stability(inputs, air)

        zero_angle = solve_zero_angle(model, inputs, settings)
        logger.debug("zero angle %.3f MOA for %.0f yd zero (Sg=%.2f, density ratio=%.4f)",
                     math.degrees(zero_angle) * 60.0, inputs.zero_distance_yards,
                     stability, air.density_ratio)

        sight = LineOfSight(inputs.sight_height_m, inputs.shooting_angle_rad)
        flight = integrate_flight(
            model, inputs.muzzle_velocity_mps, sight.angle + zero_angle, settings,
            yards_to_meters(settings.max_range_yards), sight,
        )
        logger.debug("integration stopped by %s after %d points",
                     flight.termination.value, len(flight.states))

        points = [self._to_point(s, model, sight) for s in flight.states]
        return aggregate(
            points,
            termination=flight.termination,
            drag_model=inputs.drag_model,
            zero_angle_moa=math.degrees(zero_angle) * 60.0,
            stability_factor=stability,
        )

    def _to_point(self, state: TrajectoryState, model: FlightModel,
                  sight: LineOfSight) -> TrajectoryPoint:
        speed = float(np.linalg.norm(state.velocity))
        return TrajectoryPoint(
            time=state.time,
            distance_yards=meters_to_yards(sight.distance(state.position)),
            vertical_offset_yards=meters_to_yards(sight.offset(state.position)),
            drift_yards=meters_to_yards(float(state.position[2])),
            velocity_fps=mps_to_fps(speed),
            energy_ftlbs=self.inputs.kinetic_energy_ftlbs(speed),
            mach=model.mach(state.velocity),
        )


def solve(inputs: BallisticInputs,
          wind: Optional[WindConditions] = None,
          atmosphere: Optional[AtmosphericConditions] = None,
          settings: Optional[SolverSettings] = None) -> TrajectoryResult:
    """Solve one trajectory with a fresh TrajectorySolver."""
    return TrajectorySolver(inputs, wind, atmosphere, settings).solve()
