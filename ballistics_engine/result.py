"""
Trajectory Result
=================
Sampled trajectory points and the summary statistics reduced from them.

Points are produced by the solver only; a TrajectoryResult is built once
per solve by ``aggregate`` and is immutable afterwards.
"""

import enum
from dataclasses import dataclass, fields
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .drag_model import DragModel


class TerminationReason(enum.Enum):
    """Why the integration stopped. All of these are normal endings."""
    VELOCITY_FLOOR = 'velocity_floor'   # speed decayed below the floor
    NON_FORWARD = 'non_forward'         # forward velocity reached zero
    MAX_RANGE = 'max_range'
    MAX_TIME = 'max_time'
    GROUND = 'ground'                   # vertical offset below the ground bound


@dataclass(frozen=True)
class TrajectoryPoint:
    """Snapshot of the projectile at one integration step."""
    time: float                    # s since departure
    distance_yards: float          # along the line of sight
    vertical_offset_yards: float   # relative to the line of sight, + above
    drift_yards: float             # lateral, + right
    velocity_fps: float
    energy_ftlbs: float
    mach: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'time': self.time,
            'x': self.distance_yards,
            'y': self.vertical_offset_yards,
            'z': self.drift_yards,
            'velocity_fps': self.velocity_fps,
            'energy_ftlbs': self.energy_ftlbs,
        }


_COLUMNS = tuple(f.name for f in fields(TrajectoryPoint))


@dataclass(frozen=True)
class TrajectoryResult:
    """Complete trajectory output."""
    points: Tuple[TrajectoryPoint, ...]
    max_range_yards: float
    max_height_yards: float
    time_of_flight: float
    impact_velocity_fps: float
    impact_energy_ftlbs: float

    # Solve metadata
    termination: Optional[TerminationReason] = None
    drag_model: Optional[DragModel] = None
    zero_angle_moa: float = 0.0
    stability_factor: float = 0.0

    def columns(self) -> Dict[str, np.ndarray]:
        """Point fields as arrays, keyed by TrajectoryPoint field name."""
        table = np.array([[getattr(p, name) for name in _COLUMNS] for p in self.points])
        return {name: table[:, i] for i, name in enumerate(_COLUMNS)}

    def at_range(self, distance_yards: float) -> TrajectoryPoint:
        """
        Linearly interpolated point at the given distance along the line of sight.

        Raises ValueError outside the flown interval.
        """
        cols = self.columns()
        x = cols['distance_yards']
        if not x[0] <= distance_yards <= x[-1]:
            raise ValueError(
                f"distance {distance_yards} yd outside trajectory "
                f"[{x[0]:.1f}, {x[-1]:.1f}] yd"
            )
        return TrajectoryPoint(**{
            name: float(np.interp(distance_yards, x, cols[name])) for name in _COLUMNS
        })

    def to_dict(self) -> Dict[str, object]:
        """Plain-data view: summary scalars plus the list of point dicts."""
        return {
            'max_range_yards': self.max_range_yards,
            'max_height_yards': self.max_height_yards,
            'time_of_flight': self.time_of_flight,
            'impact_velocity_fps': self.impact_velocity_fps,
            'impact_energy_ftlbs': self.impact_energy_ftlbs,
            'points': [p.to_dict() for p in self.points],
        }

    def summary(self) -> str:
        """Human-readable summary string."""
        model = str(self.drag_model) if self.drag_model else '-'
        reason = self.termination.value if self.termination else '-'
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY{'':<34s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Drag model   : {model:<36s} ║",
            f"║  Zero angle   : {self.zero_angle_moa:>10.2f} MOA{'':<22s} ║",
            f"║  Stability Sg : {self.stability_factor:>10.2f}{'':<26s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Max range    : {self.max_range_yards:>10.1f} yd{'':<23s} ║",
            f"║  Max height   : {self.max_height_yards:>10.2f} yd{'':<23s} ║",
            f"║  Flight time  : {self.time_of_flight:>10.3f} s{'':<24s} ║",
            f"║  Impact vel   : {self.impact_velocity_fps:>10.1f} fps{'':<22s} ║",
            f"║  Impact energy: {self.impact_energy_ftlbs:>10.1f} ft-lbs{'':<19s} ║",
            f"║  Points       : {len(self.points):>10d}{'':<26s} ║",
            f"║  Stopped by   : {reason:<36s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


def aggregate(points: Sequence[TrajectoryPoint], **metadata) -> TrajectoryResult:
    """
    Reduce a time-ordered point sequence to a TrajectoryResult.

    Max range is the last point's distance (the solver guarantees forward
    progress); max height is the highest vertical offset anywhere on the
    path; the impact figures come from the last point.
    """
    if not points:
        raise ValueError("cannot aggregate an empty trajectory")

    last = points[-1]
    return TrajectoryResult(
        points=tuple(points),
        max_range_yards=last.distance_yards,
        max_height_yards=max(p.vertical_offset_yards for p in points),
        time_of_flight=last.time,
        impact_velocity_fps=last.velocity_fps,
        impact_energy_ftlbs=last.energy_ftlbs,
        **metadata,
    )
