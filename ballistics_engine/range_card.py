"""
Range Card
==========
Tabulates a solved trajectory at fixed distance intervals: drop and drift
in inches and MOA, remaining velocity, energy and time of flight.

Rows are interpolated from the sampled trajectory, so the card does not
depend on the integration step lining up with round distances.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .result import TrajectoryResult
from .units import meters_to_inches, moa_from_offset, yards_to_meters


@dataclass(frozen=True)
class RangeCardRow:
    """One line of a range card."""
    distance_yards: float
    drop_inches: float     # vertical offset from the line of sight, + above
    drop_moa: float
    drift_inches: float    # lateral, + right
    drift_moa: float
    velocity_fps: float
    energy_ftlbs: float
    time: float


def range_card(result: TrajectoryResult, step_yards: float = 100.0,
               max_yards: Optional[float] = None) -> List[RangeCardRow]:
    """
    Sample ``result`` every ``step_yards`` out to ``max_yards`` (default:
    the trajectory's max range). Distances beyond the flown range are
    left out.
    """
    if step_yards <= 0.0:
        raise ValueError(f"step_yards must be > 0 (got {step_yards})")

    limit = result.max_range_yards if max_yards is None else min(max_yards, result.max_range_yards)
    rows = []
    for distance in np.arange(step_yards, limit + 1e-9, step_yards):
        distance = min(float(distance), limit)
        point = result.at_range(distance)
        drop_in = meters_to_inches(yards_to_meters(point.vertical_offset_yards))
        drift_in = meters_to_inches(yards_to_meters(point.drift_yards))
        rows.append(RangeCardRow(
            distance_yards=float(distance),
            drop_inches=drop_in,
            drop_moa=moa_from_offset(drop_in, distance),
            drift_inches=drift_in,
            drift_moa=moa_from_offset(drift_in, distance),
            velocity_fps=point.velocity_fps,
            energy_ftlbs=point.energy_ftlbs,
            time=point.time,
        ))
    return rows


def format_range_card(rows: List[RangeCardRow]) -> str:
    """Fixed-width text table of range card rows."""
    header = (f"{'Range(yd)':>9} {'Drop(in)':>9} {'Drop(MOA)':>9} "
              f"{'Drift(in)':>9} {'Drift(MOA)':>10} {'Vel(fps)':>9} "
              f"{'Energy(ft-lbs)':>14} {'Time(s)':>8}")
    lines = [header, "-" * len(header)]
    for r in rows:
        lines.append(
            f"{r.distance_yards:>9.0f} {r.drop_inches:>9.2f} {r.drop_moa:>+9.2f} "
            f"{r.drift_inches:>9.2f} {r.drift_moa:>+10.2f} {r.velocity_fps:>9.1f} "
            f"{r.energy_ftlbs:>14.1f} {r.time:>8.3f}"
        )
    return '\n'.join(lines)


if __name__ == "__main__":
    from .integrator import solve
    from .projectile import BallisticInputs
    from .wind import WindConditions

    inputs = BallisticInputs(
        bc=0.223, bullet_weight_grains=168.0, muzzle_velocity_fps=2650.0,
        bullet_diameter_inches=0.308, bullet_length_inches=1.2,
        sight_height_inches=1.5, zero_distance_yards=100.0,
        twist_rate_inches=11.25, is_right_twist=True, drag_model='G7',
    )
    result = solve(inputs, wind=WindConditions(10.0, 90.0))
    print(result.summary())
    print(format_range_card(range_card(result, max_yards=1000.0)))
