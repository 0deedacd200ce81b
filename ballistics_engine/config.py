"""Solver settings and YAML scenario loading."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .atmosphere import AtmosphericConditions
from .errors import InvalidInputError
from .projectile import BallisticInputs
from .wind import WindConditions

INTEGRATION_METHODS = ('rk4', 'euler')


@dataclass(frozen=True)
class SolverSettings:
    """
    Step size, integration method and termination bounds.

    The bounds only guarantee termination; reaching one is a normal end of
    the trajectory, not an error.
    """
    time_step: float = 0.001                  # s
    method: str = 'rk4'
    max_range_yards: float = 3000.0
    max_time: float = 15.0                    # s
    min_velocity_fps: float = 100.0
    min_vertical_offset_yards: float = -500.0
    zero_max_iterations: int = 100
    zero_tolerance_yards: float = 0.001
    zero_max_angle_degrees: float = 15.0

    def __post_init__(self):
        if self.method not in INTEGRATION_METHODS:
            raise InvalidInputError('method', self.method, f'one of {INTEGRATION_METHODS}')
        for name in ('time_step', 'max_range_yards', 'max_time',
                     'zero_tolerance_yards', 'zero_max_angle_degrees'):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise InvalidInputError(name, value, 'finite and > 0')
        if self.min_velocity_fps < 0.0:
            raise InvalidInputError('min_velocity_fps', self.min_velocity_fps, '>= 0')
        if self.min_vertical_offset_yards >= 0.0:
            raise InvalidInputError('min_vertical_offset_yards',
                                    self.min_vertical_offset_yards, '< 0')
        if self.zero_max_iterations < 1:
            raise InvalidInputError('zero_max_iterations', self.zero_max_iterations, '>= 1')
        if self.zero_max_angle_degrees >= 90.0:
            raise InvalidInputError('zero_max_angle_degrees',
                                    self.zero_max_angle_degrees, '< 90')


DEFAULT_SETTINGS = SolverSettings()


@dataclass(frozen=True)
class Scenario:
    """One fully specified solve request."""
    inputs: BallisticInputs
    wind: Optional[WindConditions] = None
    atmosphere: Optional[AtmosphericConditions] = None
    settings: SolverSettings = DEFAULT_SETTINGS


def load_yaml(path: str | Path) -> Dict[str, Any]:
    """Load a YAML file and return a dict."""
    with Path(path).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _build(cls, section: str, data: Optional[Dict[str, Any]]):
    if data is None:
        return None
    if not isinstance(data, dict):
        raise InvalidInputError(section, data, 'a mapping')
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidInputError(section, unknown, f'keys from {sorted(known)}')
    try:
        return cls(**data)
    except TypeError as err:
        raise InvalidInputError(section, sorted(data), f'complete ({err})') from err


def settings_from_dict(data: Optional[Dict[str, Any]]) -> SolverSettings:
    return _build(SolverSettings, 'settings', data) or DEFAULT_SETTINGS


def scenario_from_dict(data: Dict[str, Any]) -> Scenario:
    """
    Build a Scenario from a mapping with the sections ``inputs`` (required),
    ``wind``, ``atmosphere`` and ``settings``. Absent sections mean still
    air, standard atmosphere and default settings.
    """
    unknown = sorted(set(data) - {'inputs', 'wind', 'atmosphere', 'settings'})
    if unknown:
        raise InvalidInputError('scenario', unknown, 'keys from inputs, wind, atmosphere, settings')
    if 'inputs' not in data:
        raise InvalidInputError('inputs', None, 'present')
    return Scenario(
        inputs=_build(BallisticInputs, 'inputs', data['inputs']),
        wind=_build(WindConditions, 'wind', data.get('wind')),
        atmosphere=_build(AtmosphericConditions, 'atmosphere', data.get('atmosphere')),
        settings=settings_from_dict(data.get('settings')),
    )


def load_scenario(path: str | Path) -> Scenario:
    return scenario_from_dict(load_yaml(path))
