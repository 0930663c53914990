import dataclasses
import unittest

from core.calculator import BreakerSizingCalculator, size
from core.config import SizingSettings
from core.errors import CalculationError
from core.models import (
    CalculationResult, CircuitSpecification, ComplianceTier, ConductorMaterial, EnvironmentalConditions,
    Standard, UnitSystem, WarningCode,
)


def nec_amps(amps, voltage=240, phases=1, **kwargs):
    return CircuitSpecification(Standard.NEC, voltage, phases, current_amps=amps, **kwargs)


class TestScenarios(unittest.TestCase):
    def test_single_phase_heater_nec(self):
        # I = 10000 / (240 * 0.9) = 46.30 A
        # Required = 46.30 * 1.25 = 57.87 A -> 60 A
        spec = CircuitSpecification(Standard.NEC, 240, 1, power_kw=10, power_factor=0.9)
        res = size(spec)

        self.assertIsInstance(res, CalculationResult)
        self.assertAlmostEqual(res.load_current, 46.30, delta=0.01)
        self.assertAlmostEqual(res.minimum_required_current, 57.87, delta=0.01)
        self.assertEqual(res.selected_rating, 60)
        self.assertEqual([w.code for w in res.warnings], [WarningCode.BREAKING_CAPACITY_NOT_VERIFIED])
        self.assertIsNone(res.derating)
        self.assertIn("NEC 240.6(A)", res.references)

    def test_voltage_drop_150_ft_number_2_copper(self):
        # VD = 2 * 30 * 0.194 * 150 / 1000 = 1.746 V -> 0.73 %
        spec = nec_amps(30, unit_system=UnitSystem.IMPERIAL)
        env = EnvironmentalConditions(length=150, conductor_material=ConductorMaterial.COPPER, conductor_size="2")
        res = size(spec, env)

        vd = res.voltage_drop
        self.assertAlmostEqual(vd.percent, 0.7425, delta=0.02)
        self.assertEqual(vd.tier, ComplianceTier.COMPLIANT)
        self.assertIsNone(vd.recommended_size)
        # 240 - 1.746 V at the load, 1.746 V * 30 A lost in the run
        self.assertAlmostEqual(vd.voltage_at_load, 238.254, places=3)
        self.assertAlmostEqual(vd.power_loss_watts, 52.38, places=2)
        self.assertEqual([w.code for w in res.warnings], [WarningCode.BREAKING_CAPACITY_NOT_VERIFIED])

    def test_temperature_and_grouping_derating(self):
        # 40 A load -> 50 A minimum
        # 45 C at 90 C insulation = 0.87, 6 conductors = 0.80 -> 0.696
        # 50 / 0.696 = 71.84 A -> 80 A
        env = EnvironmentalConditions(ambient_temp_c=45, grouped_conductors=6)
        res = size(nec_amps(40), env)

        self.assertAlmostEqual(res.minimum_required_current, 50.0)
        self.assertAlmostEqual(res.derating.temperature_factor, 0.87)
        self.assertAlmostEqual(res.derating.grouping_factor, 0.80)
        self.assertAlmostEqual(res.derating.combined_factor, 0.696, places=3)
        self.assertAlmostEqual(res.adjusted_minimum_current, 71.84, delta=0.01)
        self.assertEqual(res.selected_rating, 80)
        # 0.696 is under the 0.70 threshold
        self.assertEqual([w.code for w in res.warnings], [
            WarningCode.SIGNIFICANT_DERATING, WarningCode.BREAKING_CAPACITY_NOT_VERIFIED,
        ])

    def test_ambient_above_table_is_an_error_value(self):
        env = EnvironmentalConditions(ambient_temp_c=90)
        res = size(nec_amps(40), env)

        self.assertIsInstance(res, CalculationError)
        self.assertFalse(res.ok)
        self.assertEqual(res.code, "DERATING_OUT_OF_RANGE")

    def test_iec_three_phase(self):
        # I = 10000 / (1.732 * 400 * 0.9) = 16.04 A, no multiplier -> 20 A, resistive -> Type B
        spec = CircuitSpecification(Standard.IEC, 400, 3, power_kw=10, power_factor=0.9, load_type="resistive")
        res = size(spec)

        self.assertAlmostEqual(res.load_current, 16.04, delta=0.01)
        self.assertEqual(res.safety_factor, 1.0)
        self.assertEqual(res.selected_rating, 20)
        self.assertEqual(res.trip_curve.code, "B")


class TestProperties(unittest.TestCase):
    def test_deterministic(self):
        spec = CircuitSpecification(Standard.NEC, 480, 3, power_kw=75, power_factor=0.85, load_type="motor")
        env = EnvironmentalConditions(
            ambient_temp_c=40, grouped_conductors=9, length=60,
            conductor_material=ConductorMaterial.ALUMINUM, conductor_size="1/0",
        )
        first = size(spec, env, fault_current_ka=20)
        for _ in range(100):
            self.assertEqual(size(spec, env, fault_current_ka=20), first)

    def test_rating_monotonic_in_current(self):
        for standard in Standard:
            previous = 0
            for amps in range(1, 4000, 7):
                res = size(CircuitSpecification(standard, 400, 3, current_amps=amps))
                self.assertGreaterEqual(res.selected_rating, previous)
                previous = res.selected_rating

    def test_safety_factor_is_exact(self):
        for amps in (0.1, 7.3, 46.296296, 333.3, 1999.9):
            nec = size(nec_amps(amps))
            iec = size(CircuitSpecification(Standard.IEC, 230, 1, current_amps=amps))
            self.assertEqual(nec.minimum_required_current, amps * 1.25)
            self.assertEqual(iec.minimum_required_current, amps * 1.0)

    def test_derating_never_lowers_requirement(self):
        for ambient in range(-20, 86, 5):
            for conductors in (1, 3, 4, 7, 12, 25, 45, 120):
                env = EnvironmentalConditions(ambient_temp_c=ambient, grouped_conductors=conductors)
                res = size(nec_amps(40), env)
                self.assertGreater(res.derating.combined_factor, 0)
                self.assertLessEqual(res.derating.combined_factor, 1)
                self.assertGreaterEqual(res.adjusted_minimum_current, res.minimum_required_current)

    def test_recommended_upsize_is_compliant(self):
        spec = nec_amps(40, unit_system=UnitSystem.IMPERIAL)
        env = EnvironmentalConditions(length=400, conductor_material=ConductorMaterial.COPPER, conductor_size="10")
        res = size(spec, env)
        self.assertNotEqual(res.voltage_drop.tier, ComplianceTier.COMPLIANT)
        self.assertIsNotNone(res.voltage_drop.recommended_size)

        upsized = dataclasses.replace(env, conductor_size=res.voltage_drop.recommended_size)
        self.assertEqual(size(spec, upsized).voltage_drop.tier, ComplianceTier.COMPLIANT)


class TestOrchestrator(unittest.TestCase):
    def test_above_largest_rating_requires_review(self):
        res = size(nec_amps(5000, voltage=480, phases=3))
        self.assertEqual(res.selected_rating, 4000)
        self.assertTrue(res.requires_review)
        self.assertEqual(res.warnings[0].code, WarningCode.EXCEEDS_STANDARD_RANGE)

    def test_warnings_follow_stage_order(self):
        # #6 Cu over 500 ft at 40 A: 8.2 % drop; 75 A * 0.696 = 52 A < 80 A breaker; 50 kA > 10 kA
        spec = nec_amps(40, unit_system=UnitSystem.IMPERIAL)
        env = EnvironmentalConditions(
            ambient_temp_c=45, grouped_conductors=6, length=500,
            conductor_material=ConductorMaterial.COPPER, conductor_size="6",
        )
        res = size(spec, env, fault_current_ka=50)

        self.assertEqual([w.code for w in res.warnings], [
            WarningCode.SIGNIFICANT_DERATING,
            WarningCode.VOLTAGE_DROP_VIOLATION,
            WarningCode.CONDUCTOR_UNDERSIZED,
            WarningCode.BREAKING_CAPACITY_EXCEEDED,
        ])
        self.assertFalse(res.breaking_capacity_adequate)
        self.assertEqual(res.voltage_drop.recommended_size, "1")

    def test_breaking_capacity_adequate(self):
        res = size(nec_amps(40), fault_current_ka=5)
        self.assertTrue(res.breaking_capacity_adequate)
        self.assertEqual(res.short_circuit.breaking_capacity_ka, 10.0)

    def test_no_fault_current_means_no_check(self):
        res = size(nec_amps(40))
        self.assertIsNone(res.short_circuit)
        self.assertIsNone(res.breaking_capacity_adequate)
        self.assertEqual(res.warnings[-1].code, WarningCode.BREAKING_CAPACITY_NOT_VERIFIED)
        self.assertEqual(res.warnings[-1].reference, "NEC 110.9")

        checked = size(nec_amps(40), fault_current_ka=5)
        self.assertNotIn(WarningCode.BREAKING_CAPACITY_NOT_VERIFIED, [w.code for w in checked.warnings])

    def test_input_advisories_come_first(self):
        spec = CircuitSpecification(
            Standard.NEC, 400, 1, power_kw=10, power_factor=0.6, unit_system=UnitSystem.IMPERIAL
        )
        env = EnvironmentalConditions(ambient_temp_c=-25, length=1200)
        res = size(spec, env, fault_current_ka=5)

        self.assertIsInstance(res, CalculationResult)
        self.assertEqual([w.code for w in res.warnings][:4], [
            WarningCode.NON_STANDARD_VOLTAGE,
            WarningCode.LOW_POWER_FACTOR,
            WarningCode.EXTREME_TEMPERATURE,
            WarningCode.LONG_CIRCUIT,
        ])
        # Advisories never change the sizing
        self.assertAlmostEqual(res.load_current, 10000 / (400 * 0.6))

    def test_optional_stage_failure_is_skipped(self):
        env = EnvironmentalConditions(length=20, conductor_material=ConductorMaterial.COPPER, conductor_size="7")
        res = size(nec_amps(40), env, fault_current_ka=-1)

        self.assertIsInstance(res, CalculationResult)
        self.assertIsNone(res.voltage_drop)
        self.assertIsNone(res.short_circuit)
        codes = [w.code for w in res.warnings]
        self.assertEqual(codes, [WarningCode.STAGE_SKIPPED] * 3)
        self.assertEqual(res.selected_rating, 50)

    def test_invalid_input_is_an_error_value(self):
        res = size(CircuitSpecification(Standard.NEC, 0, 1, current_amps=10))
        self.assertEqual(res.code, "INVALID_INPUT")

        res = size(CircuitSpecification(Standard.NEC, 240, 1, power_kw=5))
        self.assertEqual(res.code, "INVALID_INPUT")

    def test_unknown_load_type_is_an_error_value(self):
        res = size(nec_amps(10, load_type="welder"))
        self.assertEqual(res.code, "UNKNOWN_LOAD_TYPE")
        self.assertIn("welder", res.message)

    def test_unknown_installation_method_is_an_error_value(self):
        spec = CircuitSpecification(Standard.IEC, 230, 1, current_amps=10)
        res = size(spec, EnvironmentalConditions(installation_method="underwater"))
        self.assertEqual(res.code, "INVALID_INPUT")

    def test_custom_settings(self):
        # #10 Cu, 100 ft, 46.3 A: 4.78 % drop
        spec = CircuitSpecification(
            Standard.NEC, 240, 1, power_kw=10, power_factor=0.9, unit_system=UnitSystem.IMPERIAL
        )
        env = EnvironmentalConditions(length=100, conductor_material=ConductorMaterial.COPPER, conductor_size="10")

        strict = size(spec, env)
        self.assertEqual(strict.voltage_drop.tier, ComplianceTier.VIOLATION)

        relaxed_settings = dataclasses.replace(SizingSettings.default(), vd_compliance_limit_percent=5.0)
        relaxed = BreakerSizingCalculator(relaxed_settings).size(spec, env)
        self.assertEqual(relaxed.voltage_drop.tier, ComplianceTier.COMPLIANT)
        self.assertNotIn(WarningCode.VOLTAGE_DROP_VIOLATION, [w.code for w in relaxed.warnings])

    def test_metric_length_converted_to_feet(self):
        spec = CircuitSpecification(Standard.IEC, 230, 1, current_amps=16)
        env = EnvironmentalConditions(length=30, conductor_material=ConductorMaterial.COPPER, conductor_size="2.5")
        res = size(spec, env)
        self.assertAlmostEqual(res.voltage_drop.length_ft, 98.4252, places=3)
        # 2 * 16 * 2.81 * 98.43 / 1000 = 8.85 V -> 3.85 %
        self.assertAlmostEqual(res.voltage_drop.percent, 3.848, delta=0.01)


if __name__ == '__main__':
    unittest.main()
