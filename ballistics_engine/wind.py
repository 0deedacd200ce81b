"""
Wind Model
==========
Decomposes a wind speed/direction pair into range-axis (head/tail) and
cross-axis components relative to the firing line.

Direction convention (degrees, where the wind comes FROM):
    0   = headwind (blowing from the target toward the shooter)
    90  = from the shooter's right
    180 = tailwind
    270 = from the shooter's left
"""

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidInputError
from .units import mph_to_mps


@dataclass(frozen=True)
class WindConditions:
    """Uniform wind over the whole flight. Defaults to still air."""
    speed_mph: float = 0.0
    direction_degrees: float = 0.0

    def __post_init__(self):
        if not np.isfinite(self.speed_mph) or self.speed_mph < 0.0:
            raise InvalidInputError('speed_mph', self.speed_mph, 'finite and >= 0')
        if not np.isfinite(self.direction_degrees):
            raise InvalidInputError('direction_degrees', self.direction_degrees, 'finite')

    @property
    def normalized_direction(self) -> float:
        """Direction folded into [0, 360)."""
        return self.direction_degrees % 360.0

    @property
    def speed_mps(self) -> float:
        return mph_to_mps(self.speed_mph)

    def components(self) -> Tuple[float, float]:
        """
        Air-mass velocity (m/s) as ``(range_component, cross_component)``.

        range_component : + tailwind (air moving downrange), − headwind
        cross_component : + air moving to the shooter's right, − to the left
        """
        theta = math.radians(self.normalized_direction)
        speed = self.speed_mps
        return -speed * math.cos(theta), -speed * math.sin(theta)

    def velocity_vector(self) -> np.ndarray:
        """Wind vector [x downrange, y up, z right] in m/s."""
        range_component, cross_component = self.components()
        return np.array([range_component, 0.0, cross_component])


STILL_AIR = WindConditions()
