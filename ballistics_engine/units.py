"""
Unit Conversion
===============
Imperial boundary units (grains, fps, inches, yards, °F, inHg, mph) to the
SI units used internally for physics, and back.
"""

import math


# ── Conversion factors ────────────────────────────────────────────────────
GRAINS_TO_KG     = 0.00006479891   # kg / grain
FPS_TO_MPS       = 0.3048          # (m/s) / (ft/s)
FEET_TO_METERS   = 0.3048          # m / ft
YARDS_TO_METERS  = 0.9144          # m / yd
INCHES_TO_METERS = 0.0254          # m / in
MPH_TO_MPS       = 0.44704         # (m/s) / mph
INHG_TO_PA       = 3386.389        # Pa / inHg
JOULES_TO_FTLBS  = 0.737562        # ft·lbf / J
GRAINS_PER_POUND = 7000.0
ABSOLUTE_ZERO_F  = -459.67         # °F

# 1 MOA subtends 1.047 in at 100 yd
INCHES_PER_MOA_AT_100YD = 100.0 * 36.0 * math.tan(math.radians(1.0 / 60.0))


def grains_to_kg(grains: float) -> float:
    return grains * GRAINS_TO_KG


def fps_to_mps(fps: float) -> float:
    return fps * FPS_TO_MPS


def mps_to_fps(mps: float) -> float:
    return mps / FPS_TO_MPS


def inches_to_meters(inches: float) -> float:
    return inches * INCHES_TO_METERS


def meters_to_inches(meters: float) -> float:
    return meters / INCHES_TO_METERS


def yards_to_meters(yards: float) -> float:
    return yards * YARDS_TO_METERS


def meters_to_yards(meters: float) -> float:
    return meters / YARDS_TO_METERS


def feet_to_meters(feet: float) -> float:
    return feet * FEET_TO_METERS


def mph_to_mps(mph: float) -> float:
    return mph * MPH_TO_MPS


def inhg_to_pa(inhg: float) -> float:
    return inhg * INHG_TO_PA


def pa_to_inhg(pa: float) -> float:
    return pa / INHG_TO_PA


def fahrenheit_to_celsius(temp_f: float) -> float:
    return (temp_f - 32.0) * 5.0 / 9.0


def fahrenheit_to_kelvin(temp_f: float) -> float:
    return fahrenheit_to_celsius(temp_f) + 273.15


def kelvin_to_fahrenheit(temp_k: float) -> float:
    return (temp_k - 273.15) * 9.0 / 5.0 + 32.0


def joules_to_ftlbs(joules: float) -> float:
    return joules * JOULES_TO_FTLBS


def moa_from_offset(offset_inches: float, distance_yards: float) -> float:
    """
    Angular size (MOA) of a linear offset seen from ``distance_yards``.
    Returns 0 at the muzzle, where the angle is undefined.
    """
    if distance_yards <= 0.0:
        return 0.0
    return offset_inches / (INCHES_PER_MOA_AT_100YD * distance_yards / 100.0)
