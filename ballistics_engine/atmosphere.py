"""
Atmosphere Model
================
Air density and local speed of sound from temperature, pressure, relative
humidity and altitude.

- Altitude correction: when no station pressure is given, the ISA
  barometric lapse of 29.92 inHg to the site altitude
- Humidity correction: Magnus/Tetens vapour pressure, humid-air density as
  the sum of the dry-air and water-vapour partial densities
- Speed of sound from absolute temperature

Reference: U.S. Standard Atmosphere, 1976 (NASA-TM-X-74335)
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import InvalidInputError
from .units import ABSOLUTE_ZERO_F, INHG_TO_PA, fahrenheit_to_celsius, feet_to_meters


# ── ISA Constants ──────────────────────────────────────────────────────────
SEA_LEVEL_TEMP       = 288.15      # K  (15 °C)
SEA_LEVEL_PRESSURE   = 101325.0    # Pa
SEA_LEVEL_DENSITY    = 1.225       # kg/m³
LAPSE_RATE_TROPO     = -0.0065     # K/m  (troposphere)
TROPOPAUSE_ALT       = 11000.0     # m
TROPOPAUSE_TEMP      = 216.65      # K  (-56.5 °C)
GRAVITY              = 9.80665     # m/s²
MOLAR_MASS_AIR       = 0.0289644   # kg/mol
GAS_CONSTANT         = 8.31447     # J/(mol·K)
SPECIFIC_HEAT_RATIO  = 1.4         # γ for dry air
R_SPECIFIC           = 287.058     # J/(kg·K)  dry air
R_VAPOR              = 461.495     # J/(kg·K)  water vapour
STANDARD_PRESSURE_INHG = 29.92     # inHg at sea level

# Barometric exponent g·M / (R·L) ≈ 5.2559
_BAROMETRIC_EXPONENT = GRAVITY * MOLAR_MASS_AIR / (GAS_CONSTANT * abs(LAPSE_RATE_TROPO))


def isa_temperature(altitude: float) -> float:
    """
    Temperature (K) at a given geometric altitude (m).

    - Troposphere (below 11 km, including below sea level): -6.5 °C/km
    - Lower stratosphere (11–20 km): isothermal at 216.65 K
    - Above 20 km: +1 °C/km (simplified)
    """
    if altitude <= TROPOPAUSE_ALT:
        return SEA_LEVEL_TEMP + LAPSE_RATE_TROPO * altitude
    elif altitude <= 20000.0:
        return TROPOPAUSE_TEMP
    return TROPOPAUSE_TEMP + 0.001 * (altitude - 20000.0)


def isa_pressure(altitude: float) -> float:
    """
    Standard pressure (Pa) at a given geometric altitude (m).
    Uses the barometric formula appropriate for each layer.
    """
    if altitude <= TROPOPAUSE_ALT:
        T = isa_temperature(altitude)
        return SEA_LEVEL_PRESSURE * (T / SEA_LEVEL_TEMP) ** _BAROMETRIC_EXPONENT

    P_tropo = SEA_LEVEL_PRESSURE * (TROPOPAUSE_TEMP / SEA_LEVEL_TEMP) ** _BAROMETRIC_EXPONENT
    if altitude <= 20000.0:
        return P_tropo * math.exp(
            -GRAVITY * MOLAR_MASS_AIR * (altitude - TROPOPAUSE_ALT)
            / (GAS_CONSTANT * TROPOPAUSE_TEMP)
        )

    P_20 = P_tropo * math.exp(
        -GRAVITY * MOLAR_MASS_AIR * (20000.0 - TROPOPAUSE_ALT)
        / (GAS_CONSTANT * TROPOPAUSE_TEMP)
    )
    exp2 = GRAVITY * MOLAR_MASS_AIR / (GAS_CONSTANT * 0.001)
    return P_20 * (isa_temperature(altitude) / TROPOPAUSE_TEMP) ** (-exp2)


def pressure_ratio(altitude: float) -> float:
    """Barometric pressure-lapse factor P(h) / P(0)."""
    return isa_pressure(altitude) / SEA_LEVEL_PRESSURE


def saturation_vapor_pressure(temp_c: float) -> float:
    """Saturation vapour pressure (Pa) over water, Magnus/Tetens form."""
    # formula has a pole at -237.3 °C; vapour pressure is nil long before it
    if temp_c <= -200.0:
        return 0.0
    return 610.78 * 10.0 ** (7.5 * temp_c / (temp_c + 237.3))


def speed_of_sound(temperature_k: float) -> float:
    """Local speed of sound (m/s) = sqrt(γ × R_specific × T)."""
    return math.sqrt(SPECIFIC_HEAT_RATIO * R_SPECIFIC * temperature_k)


@dataclass(frozen=True)
class AirProperties:
    """Air state for one flight. Density is assumed uniform along the path."""
    temperature_k: float
    station_pressure_pa: float
    vapor_pressure_pa: float
    density: float            # kg/m³
    density_ratio: float      # ρ / 1.225
    speed_of_sound: float     # m/s


@dataclass(frozen=True)
class AtmosphericConditions:
    """
    Shooting-site weather in boundary units.

    Defaults are the ICAO standard atmosphere: 59 °F, 29.92 inHg,
    0 % humidity, sea level. ``pressure_inhg`` is the station pressure
    read at the firing point and is used as given. When it is omitted the
    standard 29.92 inHg is lapsed to ``altitude_feet``, which may be
    negative.
    """
    temperature_f: float = 59.0
    pressure_inhg: Optional[float] = None
    humidity_percent: float = 0.0
    altitude_feet: float = 0.0

    def __post_init__(self):
        for name in ('temperature_f', 'pressure_inhg', 'humidity_percent', 'altitude_feet'):
            value = getattr(self, name)
            if value is not None and not np.isfinite(value):
                raise InvalidInputError(name, value, 'finite')
        if self.temperature_f <= ABSOLUTE_ZERO_F:
            raise InvalidInputError('temperature_f', self.temperature_f,
                                    f'> {ABSOLUTE_ZERO_F} (absolute zero)')
        if self.pressure_inhg is not None and self.pressure_inhg <= 0.0:
            raise InvalidInputError('pressure_inhg', self.pressure_inhg, '> 0')
        if not 0.0 <= self.humidity_percent <= 100.0:
            raise InvalidInputError('humidity_percent', self.humidity_percent,
                                    'within [0, 100]')
        if self.station_pressure_pa <= 0.0 or not np.isfinite(self.station_pressure_pa):
            raise InvalidInputError('altitude_feet', self.altitude_feet,
                                    'low enough for a positive station pressure')
        if self.vapor_pressure_pa >= self.station_pressure_pa:
            raise InvalidInputError('humidity_percent', self.humidity_percent,
                                    'low enough that vapour pressure stays below station pressure')

    @property
    def temperature_k(self) -> float:
        return fahrenheit_to_celsius(self.temperature_f) + 273.15

    @property
    def altitude_m(self) -> float:
        return feet_to_meters(self.altitude_feet)

    @property
    def station_pressure_pa(self) -> float:
        if self.pressure_inhg is not None:
            return self.pressure_inhg * INHG_TO_PA
        return STANDARD_PRESSURE_INHG * INHG_TO_PA * pressure_ratio(self.altitude_m)

    @property
    def vapor_pressure_pa(self) -> float:
        temp_c = fahrenheit_to_celsius(self.temperature_f)
        return saturation_vapor_pressure(temp_c) * self.humidity_percent / 100.0


STANDARD_ATMOSPHERE = AtmosphericConditions()


def air_properties(conditions: AtmosphericConditions = STANDARD_ATMOSPHERE) -> AirProperties:
    """
    Compute air density and speed of sound for the given conditions.

    ρ = (p − e) / (R_d T) + e / (R_v T)

    Water vapour is lighter than dry air, so humidity lowers the density.
    """
    T = conditions.temperature_k
    p = conditions.station_pressure_pa
    e = conditions.vapor_pressure_pa

    rho = (p - e) / (R_SPECIFIC * T) + e / (R_VAPOR * T)
    return AirProperties(
        temperature_k=T,
        station_pressure_pa=p,
        vapor_pressure_pa=e,
        density=rho,
        density_ratio=rho / SEA_LEVEL_DENSITY,
        speed_of_sound=speed_of_sound(T),
    )


if __name__ == "__main__":
    print("Atmosphere Model Verification")
    print("=" * 60)
    print(f"{'Alt (ft)':>10} {'P_st (Pa)':>12} {'ρ (kg/m³)':>12} {'ratio':>8} {'a (m/s)':>10}")
    print("-" * 60)
    for alt in [-500, 0, 1000, 5000, 10000]:
        air = air_properties(AtmosphericConditions(altitude_feet=alt))
        print(f"{alt:>10.0f} {air.station_pressure_pa:>12.1f} {air.density:>12.5f} "
              f"{air.density_ratio:>8.4f} {air.speed_of_sound:>10.2f}")
