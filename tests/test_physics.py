"""
Unit Tests for the Ballistics Engine Physics Modules
=====================================================
Units, atmosphere, drag functions, wind decomposition and projectile forces.
Run: python -m pytest tests/ -v
"""

import sys
import os
import math
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ballistics_engine.atmosphere import (
    AtmosphericConditions, STANDARD_ATMOSPHERE, air_properties,
    isa_temperature, isa_pressure, pressure_ratio, SEA_LEVEL_DENSITY,
)
from ballistics_engine.drag_model import DragModel, drag_acceleration
from ballistics_engine.errors import InvalidInputError, BallisticsError
from ballistics_engine.projectile import (
    BallisticInputs, FlightModel, gyroscopic_stability, spin_drift_rate,
)
from ballistics_engine.units import (
    fahrenheit_to_kelvin, grains_to_kg, inhg_to_pa, joules_to_ftlbs,
    meters_to_yards, moa_from_offset, mph_to_mps, pa_to_inhg,
)
from ballistics_engine.wind import STILL_AIR, WindConditions


def make_inputs(**overrides):
    fields = dict(
        bc=0.223, bullet_weight_grains=168.0, muzzle_velocity_fps=2650.0,
        bullet_diameter_inches=0.308, bullet_length_inches=1.2,
        sight_height_inches=1.5, zero_distance_yards=100.0,
        shooting_angle_degrees=0.0, twist_rate_inches=11.25,
        is_right_twist=True, drag_model=DragModel.G7,
    )
    fields.update(overrides)
    return BallisticInputs(**fields)


class TestUnits:

    def test_grains_per_pound(self):
        assert abs(grains_to_kg(7000.0) - 0.45359237) < 1e-6

    def test_standard_temperature(self):
        assert abs(fahrenheit_to_kelvin(59.0) - 288.15) < 1e-9

    def test_standard_pressure(self):
        assert abs(inhg_to_pa(29.92) - 101320.8) < 1.0

    def test_mph(self):
        assert abs(mph_to_mps(10.0) - 4.4704) < 1e-9

    def test_yards(self):
        assert abs(meters_to_yards(0.9144) - 1.0) < 1e-12

    def test_energy(self):
        assert abs(joules_to_ftlbs(1.0) - 0.737562) < 1e-9

    def test_moa(self):
        assert abs(moa_from_offset(1.0472, 100.0) - 1.0) < 1e-3
        assert abs(moa_from_offset(10.472, 1000.0) - 1.0) < 1e-3
        assert moa_from_offset(3.0, 0.0) == 0.0


class TestAtmosphere:
    """Verify the density / speed of sound model against standard values."""

    def test_sea_level_temperature(self):
        assert abs(isa_temperature(0) - 288.15) < 0.01

    def test_sea_level_pressure(self):
        assert abs(isa_pressure(0) - 101325.0) < 1.0
        assert pressure_ratio(0.0) == 1.0

    def test_standard_density(self):
        air = air_properties(STANDARD_ATMOSPHERE)
        assert abs(air.density - SEA_LEVEL_DENSITY) < 0.005
        assert abs(air.density_ratio - 1.0) < 0.005

    def test_speed_of_sound_standard(self):
        """Speed of sound at 59 °F ~340.3 m/s."""
        assert abs(air_properties().speed_of_sound - 340.3) < 0.5

    def test_speed_of_sound_rises_with_temperature(self):
        cold = air_properties(AtmosphericConditions(temperature_f=0.0))
        hot = air_properties(AtmosphericConditions(temperature_f=100.0))
        assert hot.speed_of_sound > cold.speed_of_sound

    def test_density_decreases_with_altitude(self):
        """No station reading: standard pressure lapsed to a higher site."""
        rho_0 = air_properties(AtmosphericConditions(altitude_feet=0.0)).density
        rho_5 = air_properties(AtmosphericConditions(altitude_feet=5000.0)).density
        rho_10 = air_properties(AtmosphericConditions(altitude_feet=10000.0)).density
        assert rho_0 > rho_5 > rho_10

    def test_below_sea_level(self):
        low = air_properties(AtmosphericConditions(altitude_feet=-280.0))
        assert low.density > air_properties().density

    def test_station_pressure_used_as_given(self):
        """A supplied reading is already local; altitude does not lapse it again."""
        high = AtmosphericConditions(pressure_inhg=25.84, altitude_feet=5000.0)
        low = AtmosphericConditions(pressure_inhg=25.84, altitude_feet=0.0)
        assert abs(pa_to_inhg(high.station_pressure_pa) - 25.84) < 1e-9
        assert air_properties(high).density == air_properties(low).density

    def test_cold_mountain_site(self):
        """20 °F, 25.84 inHg station, 30 % RH at 5000 ft."""
        air = air_properties(AtmosphericConditions(20.0, 25.84, 30.0, 5000.0))
        assert abs(pa_to_inhg(air.station_pressure_pa) - 25.84) < 1e-9
        assert abs(air.density - 1.1434) < 0.002
        assert abs(air.density_ratio - 0.9334) < 0.002

    def test_standard_default_pressure(self):
        assert STANDARD_ATMOSPHERE.pressure_inhg is None
        assert abs(STANDARD_ATMOSPHERE.station_pressure_pa - inhg_to_pa(29.92)) < 1e-6

    def test_humidity_reduces_density(self):
        dry = air_properties(AtmosphericConditions(temperature_f=80.0, humidity_percent=0.0))
        wet = air_properties(AtmosphericConditions(temperature_f=80.0, humidity_percent=100.0))
        assert wet.density < dry.density
        assert (dry.density - wet.density) / dry.density < 0.03

    def test_cold_air_is_denser(self):
        cold = air_properties(AtmosphericConditions(temperature_f=20.0))
        assert cold.density > air_properties().density

    @pytest.mark.parametrize("kwargs,field", [
        ({'pressure_inhg': 0.0}, 'pressure_inhg'),
        ({'pressure_inhg': -29.92}, 'pressure_inhg'),
        ({'humidity_percent': 100.5}, 'humidity_percent'),
        ({'humidity_percent': -1.0}, 'humidity_percent'),
        ({'temperature_f': -500.0}, 'temperature_f'),
        ({'temperature_f': float('nan')}, 'temperature_f'),
        ({'altitude_feet': float('inf')}, 'altitude_feet'),
    ])
    def test_invalid_conditions_rejected(self, kwargs, field):
        with pytest.raises(InvalidInputError) as excinfo:
            AtmosphericConditions(**kwargs)
        assert excinfo.value.field == field
        assert field in str(excinfo.value)


class TestDragModel:
    """Verify drag coefficient interpolation."""

    def test_all_models_exist(self):
        assert {m.value for m in DragModel} == {'G1', 'G7', 'G8'}

    def test_parse(self):
        assert DragModel.parse('g7') is DragModel.G7
        assert DragModel.parse(' G1 ') is DragModel.G1
        assert DragModel.parse(DragModel.G8) is DragModel.G8

    def test_parse_rejects_unknown(self):
        with pytest.raises(InvalidInputError) as excinfo:
            DragModel.parse('G9')
        assert excinfo.value.field == 'drag_model'

    def test_tables_sorted_and_read_only(self):
        for model in DragModel:
            assert np.all(np.diff(model.mach_values) > 0)
            with pytest.raises(ValueError):
                model.table[0, 1] = 1.0

    def test_cd_positive(self):
        for model in DragModel:
            for mach in [0.0, 0.5, 1.0, 2.0, 3.0, 5.0]:
                assert model.cd(mach) > 0

    def test_table_points_exact(self):
        assert DragModel.G7.cd(1.0) == pytest.approx(0.3803)
        assert DragModel.G1.cd(2.0) == pytest.approx(0.3474)
        assert DragModel.G8.cd(1.5) == pytest.approx(0.3915)

    def test_linear_interpolation(self):
        """Midway between G7 Mach 1.000 (0.3803) and 1.025 (0.4015)."""
        assert DragModel.G7.cd(1.0125) == pytest.approx(0.3909)

    def test_clamped_outside_table(self):
        for model in DragModel:
            first, last = model.cd_values[0], model.cd_values[-1]
            assert model.cd(-1.0) == pytest.approx(first)
            assert model.cd(8.0) == pytest.approx(last)
            assert model.cd(50.0) == pytest.approx(last)
            assert model.cd(float('inf')) == pytest.approx(last)

    def test_transonic_drag_rise(self):
        """Cd should spike in the transonic region."""
        for model in DragModel:
            assert model.cd(1.0) > model.cd(0.5)
            assert model.cd(1.1) > model.cd(0.8)

    def test_g7_lower_than_g1(self):
        for mach in [0.5, 1.0, 2.0]:
            assert DragModel.G7.cd(mach) < DragModel.G1.cd(mach)

    def test_cd_array_matches_scalar(self):
        machs = np.array([0.0, 0.3, 0.95, 1.2, 2.7, 6.0])
        vec = DragModel.G1.cd_array(machs)
        assert np.allclose(vec, [DragModel.G1.cd(m) for m in machs])

    def test_drag_acceleration_opposes_motion(self):
        """Drag must oppose the air-relative velocity."""
        v = np.array([100.0, 50.0, 0.0])
        a = drag_acceleration(v, rho=1.225, cd_ref=0.3, form_factor=1.0, area=0.01, mass=1.0)
        assert np.dot(a, v) < 0

    def test_drag_acceleration_scales_with_form_factor(self):
        v = np.array([800.0, 0.0, 0.0])
        one = drag_acceleration(v, rho=1.225, cd_ref=0.3, form_factor=1.0, area=1e-4, mass=0.01)
        two = drag_acceleration(v, rho=1.225, cd_ref=0.3, form_factor=2.0, area=1e-4, mass=0.01)
        assert np.allclose(two, 2.0 * one)
        assert one[0] == pytest.approx(-0.5 * 1.225 * 800.0 ** 2 * 0.3 * 1e-4 / 0.01)

    def test_drag_acceleration_zero_at_rest(self):
        a = drag_acceleration(np.zeros(3), rho=1.225, cd_ref=0.3, form_factor=1.0,
                              area=0.01, mass=1.0)
        assert np.allclose(a, 0.0)


class TestWind:

    def test_headwind(self):
        range_c, cross_c = WindConditions(10.0, 0.0).components()
        assert range_c == pytest.approx(-4.4704)
        assert cross_c == pytest.approx(0.0, abs=1e-12)

    def test_tailwind(self):
        range_c, _ = WindConditions(10.0, 180.0).components()
        assert range_c == pytest.approx(4.4704)

    def test_wind_from_right_blows_left(self):
        range_c, cross_c = WindConditions(10.0, 90.0).components()
        assert range_c == pytest.approx(0.0, abs=1e-12)
        assert cross_c == pytest.approx(-4.4704)

    def test_direction_normalized(self):
        assert WindConditions(5.0, 450.0).normalized_direction == pytest.approx(90.0)
        assert WindConditions(5.0, -90.0).normalized_direction == pytest.approx(270.0)
        assert np.allclose(WindConditions(5.0, 450.0).components(),
                           WindConditions(5.0, 90.0).components())

    def test_velocity_vector_is_horizontal(self):
        v = WindConditions(12.0, 45.0).velocity_vector()
        assert v[1] == 0.0
        assert np.linalg.norm(v) == pytest.approx(mph_to_mps(12.0))

    def test_still_air(self):
        assert np.allclose(STILL_AIR.velocity_vector(), 0.0)

    def test_negative_speed_rejected(self):
        with pytest.raises(InvalidInputError) as excinfo:
            WindConditions(-1.0, 0.0)
        assert excinfo.value.field == 'speed_mph'


class TestProjectile:
    """Verify inputs validation and force computation."""

    def test_drag_model_name_normalized(self):
        assert make_inputs(drag_model='g1').drag_model is DragModel.G1

    @pytest.mark.parametrize("field", [
        'bc', 'bullet_weight_grains', 'muzzle_velocity_fps',
        'bullet_diameter_inches', 'bullet_length_inches',
    ])
    def test_non_positive_rejected(self, field):
        for value in (0.0, -1.0):
            with pytest.raises(InvalidInputError) as excinfo:
                make_inputs(**{field: value})
            assert excinfo.value.field == field

    @pytest.mark.parametrize("field,value", [
        ('zero_distance_yards', -10.0),
        ('twist_rate_inches', -8.0),
        ('shooting_angle_degrees', 90.5),
        ('shooting_angle_degrees', -91.0),
        ('bc', float('nan')),
        ('sight_height_inches', float('inf')),
        ('muzzle_velocity_fps', 'fast'),
        ('drag_model', 'G2'),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(InvalidInputError) as excinfo:
            make_inputs(**{field: value})
        assert excinfo.value.field == field

    def test_signed_fields_allowed(self):
        inputs = make_inputs(sight_height_inches=-0.5, shooting_angle_degrees=-30.0,
                             twist_rate_inches=0.0)
        assert inputs.sight_height_inches == -0.5

    def test_errors_share_base(self):
        with pytest.raises(BallisticsError):
            make_inputs(bc=0.0)
        with pytest.raises(ValueError):
            make_inputs(bc=0.0)

    def test_projectile_area(self):
        expected = np.pi * (0.308 * 0.0254 / 2) ** 2
        assert abs(make_inputs().area_m2 - expected) < 1e-12

    def test_form_factor(self):
        inputs = make_inputs()
        assert inputs.sectional_density == pytest.approx(0.2530, abs=1e-4)
        assert inputs.form_factor == pytest.approx(0.2530 / 0.223, rel=1e-3)

    def test_muzzle_energy(self):
        """168 gr at 2650 fps: w v² / 450400 ≈ 2619 ft-lbs."""
        assert make_inputs().muzzle_energy_ftlbs == pytest.approx(2619.0, abs=2.0)

    def test_miller_stability(self):
        sg = gyroscopic_stability(make_inputs(), air_properties())
        assert 1.8 < sg < 2.2

    def test_thin_air_more_stable(self):
        thin = air_properties(AtmosphericConditions(altitude_feet=8000.0))
        assert gyroscopic_stability(make_inputs(), thin) > gyroscopic_stability(make_inputs(), air_properties())

    def test_no_twist_no_spin(self):
        inputs = make_inputs(twist_rate_inches=0.0)
        assert gyroscopic_stability(inputs, air_properties()) == 0.0
        assert spin_drift_rate(inputs, air_properties()) == 0.0

    def test_twist_direction_sign(self):
        right = spin_drift_rate(make_inputs(is_right_twist=True), air_properties())
        left = spin_drift_rate(make_inputs(is_right_twist=False), air_properties())
        assert right > 0
        assert left == pytest.approx(-right)

    def test_gravity_dominates_at_low_speed(self):
        """At very low speed, gravity should dominate acceleration."""
        model = FlightModel.build(make_inputs(twist_rate_inches=0.0), air_properties())
        acc = model.acceleration(1.0, np.array([1.0, 0.0, 0.0]))
        assert abs(acc[1] - (-9.80665)) < 0.01

    def test_drag_decelerates(self):
        model = FlightModel.build(make_inputs(), air_properties())
        acc = model.acceleration(0.0, np.array([800.0, 0.0, 0.0]))
        assert acc[0] < -100.0
        assert math.isfinite(acc[2]) and acc[2] > 0

    def test_wind_only_changes_drag(self):
        """Air moving with the bullet removes drag entirely."""
        inputs = make_inputs(twist_rate_inches=0.0)
        v = np.array([300.0, 10.0, 0.0])
        model = FlightModel.build(inputs, air_properties(), wind=v.copy())
        assert np.allclose(model.acceleration(0.5, v), [0.0, -9.80665, 0.0])

    def test_still_air_copy(self):
        model = FlightModel.build(make_inputs(), air_properties(),
                                  WindConditions(10.0, 90.0).velocity_vector())
        calm = model.still_air()
        assert np.allclose(calm.wind, 0.0)
        assert calm.spin_rate == 0.0
        assert model.spin_rate != 0.0


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
