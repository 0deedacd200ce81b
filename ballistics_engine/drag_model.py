"""
Aerodynamic Drag Model
======================
Standard reference drag functions (G1, G7, G8) as Cd vs Mach tables.

- G1 — Ingalls / Mayevski flat-base reference projectile
- G7 — long boat-tail (VLD) reference projectile
- G8 — flat-base, 10-caliber secant ogive reference projectile

A real bullet's drag is the reference Cd scaled by its form factor
``i = SD / BC``, where SD is the sectional density in lb/in². The tables are
built once at import and are read-only; lookups are pure functions.
"""

import enum

import numpy as np

from .errors import InvalidInputError


# ══════════════════════════════════════════════════════════════════════════
#  Cd vs Mach tables — (Mach, Cd) pairs, sorted by Mach
# ══════════════════════════════════════════════════════════════════════════

G1_TABLE = np.array([
    [0.00, 0.2629], [0.05, 0.2558], [0.10, 0.2487], [0.15, 0.2413],
    [0.20, 0.2344], [0.25, 0.2278], [0.30, 0.2214], [0.35, 0.2155],
    [0.40, 0.2104], [0.45, 0.2061], [0.50, 0.2032], [0.55, 0.2020],
    [0.60, 0.2034], [0.65, 0.2165], [0.70, 0.2230], [0.75, 0.2313],
    [0.80, 0.2417], [0.85, 0.2546], [0.90, 0.2706], [0.925, 0.2838],
    [0.95, 0.3017], [0.975, 0.3237], [1.00, 0.3537], [1.025, 0.3860],
    [1.05, 0.4041], [1.075, 0.4147], [1.10, 0.4209], [1.125, 0.4248],
    [1.15, 0.4270], [1.175, 0.4280], [1.20, 0.4280], [1.25, 0.4263],
    [1.30, 0.4230], [1.35, 0.4183], [1.40, 0.4127], [1.45, 0.4068],
    [1.50, 0.4008], [1.55, 0.3947], [1.60, 0.3887], [1.65, 0.3828],
    [1.70, 0.3770], [1.75, 0.3715], [1.80, 0.3663], [1.85, 0.3612],
    [1.90, 0.3564], [1.95, 0.3518], [2.00, 0.3474], [2.05, 0.3432],
    [2.10, 0.3392], [2.15, 0.3354], [2.20, 0.3318], [2.25, 0.3284],
    [2.30, 0.3251], [2.35, 0.3219], [2.40, 0.3188], [2.45, 0.3159],
    [2.50, 0.3131], [2.60, 0.3078], [2.70, 0.3029], [2.80, 0.2984],
    [2.90, 0.2943], [3.00, 0.2906], [3.10, 0.2872], [3.20, 0.2842],
    [3.30, 0.2814], [3.40, 0.2788], [3.50, 0.2764], [3.60, 0.2742],
    [3.70, 0.2721], [3.80, 0.2702], [3.90, 0.2684], [4.00, 0.2668],
    [4.20, 0.2638], [4.40, 0.2614], [4.60, 0.2594], [4.80, 0.2577],
    [5.00, 0.2563],
])

G7_TABLE = np.array([
    [0.00, 0.1198], [0.05, 0.1197], [0.10, 0.1196], [0.15, 0.1194],
    [0.20, 0.1193], [0.25, 0.1194], [0.30, 0.1194], [0.35, 0.1194],
    [0.40, 0.1193], [0.45, 0.1193], [0.50, 0.1194], [0.55, 0.1193],
    [0.60, 0.1194], [0.65, 0.1197], [0.70, 0.1202], [0.725, 0.1207],
    [0.75, 0.1215], [0.775, 0.1226], [0.80, 0.1242], [0.825, 0.1266],
    [0.85, 0.1306], [0.875, 0.1368], [0.90, 0.1464], [0.925, 0.1660],
    [0.95, 0.2054], [0.975, 0.2993], [1.00, 0.3803], [1.025, 0.4015],
    [1.05, 0.4043], [1.075, 0.4034], [1.10, 0.4014], [1.125, 0.3987],
    [1.15, 0.3955], [1.20, 0.3884], [1.25, 0.3810], [1.30, 0.3732],
    [1.35, 0.3657], [1.40, 0.3580], [1.50, 0.3440], [1.55, 0.3376],
    [1.60, 0.3315], [1.65, 0.3260], [1.70, 0.3209], [1.75, 0.3160],
    [1.80, 0.3117], [1.85, 0.3078], [1.90, 0.3042], [1.95, 0.3010],
    [2.00, 0.2980], [2.05, 0.2951], [2.10, 0.2922], [2.15, 0.2892],
    [2.20, 0.2864], [2.25, 0.2835], [2.30, 0.2807], [2.35, 0.2779],
    [2.40, 0.2752], [2.45, 0.2725], [2.50, 0.2697], [2.55, 0.2670],
    [2.60, 0.2643], [2.65, 0.2615], [2.70, 0.2588], [2.75, 0.2561],
    [2.80, 0.2533], [2.85, 0.2506], [2.90, 0.2479], [2.95, 0.2451],
    [3.00, 0.2424], [3.10, 0.2368], [3.20, 0.2313], [3.30, 0.2258],
    [3.40, 0.2205], [3.50, 0.2154], [3.60, 0.2106], [3.70, 0.2060],
    [3.80, 0.2017], [3.90, 0.1975], [4.00, 0.1935], [4.20, 0.1861],
    [4.40, 0.1793], [4.60, 0.1730], [4.80, 0.1672], [5.00, 0.1618],
])

G8_TABLE = np.array([
    [0.00, 0.2105], [0.05, 0.2105], [0.10, 0.2104], [0.15, 0.2104],
    [0.20, 0.2103], [0.25, 0.2103], [0.30, 0.2103], [0.35, 0.2103],
    [0.40, 0.2103], [0.45, 0.2102], [0.50, 0.2102], [0.55, 0.2102],
    [0.60, 0.2102], [0.65, 0.2102], [0.70, 0.2103], [0.75, 0.2103],
    [0.80, 0.2104], [0.825, 0.2104], [0.85, 0.2105], [0.875, 0.2106],
    [0.90, 0.2109], [0.925, 0.2183], [0.95, 0.2571], [0.975, 0.3358],
    [1.00, 0.4068], [1.025, 0.4378], [1.05, 0.4476], [1.075, 0.4493],
    [1.10, 0.4477], [1.125, 0.4450], [1.15, 0.4419], [1.20, 0.4353],
    [1.25, 0.4283], [1.30, 0.4208], [1.35, 0.4133], [1.40, 0.4059],
    [1.45, 0.3986], [1.50, 0.3915], [1.55, 0.3845], [1.60, 0.3777],
    [1.65, 0.3710], [1.70, 0.3645], [1.75, 0.3581], [1.80, 0.3519],
    [1.85, 0.3458], [1.90, 0.3400], [1.95, 0.3343], [2.00, 0.3288],
    [2.05, 0.3234], [2.10, 0.3182], [2.15, 0.3131], [2.20, 0.3081],
    [2.25, 0.3032], [2.30, 0.2983], [2.35, 0.2937], [2.40, 0.2891],
    [2.45, 0.2845], [2.50, 0.2802], [2.60, 0.2720], [2.70, 0.2642],
    [2.80, 0.2569], [2.90, 0.2499], [3.00, 0.2432], [3.10, 0.2368],
    [3.20, 0.2308], [3.30, 0.2251], [3.40, 0.2197], [3.50, 0.2147],
    [3.60, 0.2101], [3.70, 0.2058], [3.80, 0.2019], [3.90, 0.1983],
    [4.00, 0.1950], [4.20, 0.1890], [4.40, 0.1837], [4.60, 0.1791],
    [4.80, 0.1750], [5.00, 0.1713],
])

for _table in (G1_TABLE, G7_TABLE, G8_TABLE):
    _table.setflags(write=False)


# ══════════════════════════════════════════════════════════════════════════
#  Reference drag functions
# ══════════════════════════════════════════════════════════════════════════

class DragModel(enum.Enum):
    """
    Standard reference drag curve.

    Lookup is linear interpolation between the two bracketing table
    entries. Mach numbers outside the table are clamped to the boundary
    coefficient, never extrapolated.
    """

    G1 = 'G1'
    G7 = 'G7'
    G8 = 'G8'

    @classmethod
    def parse(cls, value) -> 'DragModel':
        """Accept a member or a case-insensitive name such as ``'g7'``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidInputError('drag_model', value, 'one of G1, G7, G8')

    @property
    def table(self) -> np.ndarray:
        """(N, 2) read-only array of (Mach, Cd) rows."""
        return _TABLES[self]

    @property
    def mach_values(self) -> np.ndarray:
        return self.table[:, 0]

    @property
    def cd_values(self) -> np.ndarray:
        return self.table[:, 1]

    def cd(self, mach: float) -> float:
        """Return the reference drag coefficient at the given Mach number."""
        if not np.isfinite(mach):
            mach = self.mach_values[-1] if mach > 0 else 0.0
        # np.interp holds the end values outside [mach_min, mach_max]
        return float(np.interp(mach, self.mach_values, self.cd_values))

    def cd_array(self, mach_array: np.ndarray) -> np.ndarray:
        """Vectorized Cd lookup."""
        mach_array = np.clip(np.asarray(mach_array, dtype=float), 0.0, None)
        return np.interp(mach_array, self.mach_values, self.cd_values)

    def __str__(self) -> str:
        return self.value


_TABLES = {
    DragModel.G1: G1_TABLE,
    DragModel.G7: G7_TABLE,
    DragModel.G8: G8_TABLE,
}


def drag_acceleration(velocity_rel: np.ndarray, rho: float, cd_ref: float,
                      form_factor: float, area: float, mass: float) -> np.ndarray:
    """
    Drag deceleration vector (m/s²) of a bullet described by a reference
    drag function and a form factor.

    a = -½ ρ |v_rel| (Cd_ref · i) A / m · v_rel

    ``cd_ref`` is read from the reference table at the bullet's Mach
    number and ``form_factor`` is i = SD / BC, so the product is the
    bullet's own drag coefficient on its own area.
    """
    speed = np.linalg.norm(velocity_rel)
    if speed < 1e-10:
        return np.zeros(3)
    k = 0.5 * rho * cd_ref * form_factor * area / mass
    return -k * speed * velocity_rel


if __name__ == "__main__":
    print("Reference drag functions — Cd vs Mach")
    print("=" * 50)
    print(f"{'Mach':>6} " + " ".join(f"{m.value:>8}" for m in DragModel))
    for mach in [0.5, 0.9, 1.0, 1.2, 1.5, 2.0, 2.5, 3.0]:
        print(f"{mach:>6.2f} " + " ".join(f"{m.cd(mach):>8.4f}" for m in DragModel))
