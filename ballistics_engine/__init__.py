"""
Ballistics Engine
=================
Exterior ballistics trajectory solver for small-arms projectiles.
It models the flight of a fired bullet from muzzle to impact under:
  - Gravity
  - Mach-dependent drag from the G1 / G7 / G8 reference functions,
    scaled by the ballistic coefficient
  - Air density from temperature, pressure, humidity and altitude
  - Wind (head/tail/cross)
  - Spin drift (simplified gyroscopic drift)

The bore is zeroed at the requested distance before integration, and
each solve returns the time-sampled trajectory with impact statistics.
"""

import logging

from .atmosphere import (
    AtmosphericConditions, AirProperties, STANDARD_ATMOSPHERE,
    air_properties, isa_pressure, isa_temperature, pressure_ratio,
)
from .config import (
    DEFAULT_SETTINGS, Scenario, SolverSettings,
    load_scenario, load_yaml, scenario_from_dict, settings_from_dict,
)
from .drag_model import DragModel, drag_acceleration
from .errors import (
    BallisticsError, InvalidInputError, NumericalInstabilityError, SolverStateError,
)
from .integrator import (
    LEVEL_SIGHT, LineOfSight, SolverState, TrajectorySolver, integrate_flight, solve,
    solve_zero_angle,
)
from .projectile import BallisticInputs, FlightModel, gyroscopic_stability, spin_drift_rate
from .range_card import RangeCardRow, format_range_card, range_card
from .result import TerminationReason, TrajectoryPoint, TrajectoryResult, aggregate
from .wind import STILL_AIR, WindConditions

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    'BallisticInputs', 'WindConditions', 'AtmosphericConditions', 'DragModel',
    'TrajectorySolver', 'TrajectoryResult', 'TrajectoryPoint', 'TerminationReason',
    'SolverSettings', 'SolverState', 'Scenario', 'solve',
    'AirProperties', 'air_properties', 'isa_temperature', 'isa_pressure', 'pressure_ratio',
    'STANDARD_ATMOSPHERE', 'STILL_AIR', 'DEFAULT_SETTINGS',
    'FlightModel', 'gyroscopic_stability', 'spin_drift_rate', 'drag_acceleration',
    'LineOfSight', 'LEVEL_SIGHT', 'integrate_flight', 'solve_zero_angle', 'aggregate',
    'RangeCardRow', 'range_card', 'format_range_card',
    'load_yaml', 'load_scenario', 'scenario_from_dict', 'settings_from_dict',
    'BallisticsError', 'InvalidInputError', 'NumericalInstabilityError', 'SolverStateError',
]
