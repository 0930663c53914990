import io
import json
import unittest

import pandas as pd
from openpyxl import load_workbook

from core.batch import (
    ENVIRONMENT_COLUMNS, RESULT_COLUMNS, TEMPLATE_COLUMNS, size_dataframe, size_rows, table_row, template_dataframe,
)
from core.calculator import size
from core.errors import CalculationError, InvalidInput
from core.models import (
    CircuitSpecification, ConductorMaterial, EnvironmentalConditions, InsulationRating, Standard, UnitSystem,
)
from core.report import build_workbook, workbook_bytes
from core.serialization import (
    dump_record, environment_from_dict, environment_to_dict, load_record, result_to_dict,
    specification_from_dict, specification_to_dict,
)

SPEC = CircuitSpecification(
    Standard.NEC, 240, 1, power_kw=10, power_factor=0.9,
    unit_system=UnitSystem.IMPERIAL, load_type="resistive", name="Water Heater",
)
ENV = EnvironmentalConditions(
    ambient_temp_c=45, grouped_conductors=6, insulation_rating=InsulationRating.TEMP_75,
    length=150, conductor_material=ConductorMaterial.COPPER, conductor_size="6",
)


class TestSerialization(unittest.TestCase):
    def test_specification_dict(self):
        data = specification_to_dict(SPEC)
        self.assertEqual(data["standard"], "NEC")
        self.assertEqual(data["unit_system"], "imperial")
        self.assertEqual(specification_from_dict(data), SPEC)

    def test_environment_dict(self):
        data = environment_to_dict(ENV)
        self.assertEqual(data["conductor_material"], "Copper")
        self.assertEqual(data["insulation_rating"], 75)
        self.assertEqual(environment_from_dict(data), ENV)

    def test_result_dict_is_json_safe(self):
        data = result_to_dict(size(SPEC, ENV, fault_current_ka=5))
        text = json.dumps(data)
        self.assertTrue(json.loads(text)["ok"])
        self.assertEqual(data["selected_rating"], 90)
        self.assertEqual(data["voltage_drop"]["tier"], "compliant")
        self.assertIn("voltage_at_load", data["voltage_drop"])
        self.assertIn("power_loss_watts", data["voltage_drop"])
        self.assertEqual(data["trip_curve"]["code"], "thermal-magnetic")
        self.assertTrue(data["breaking_capacity_adequate"])

    def test_error_dict(self):
        data = result_to_dict(CalculationError("INVALID_INPUT", "Voltage must be positive."))
        self.assertEqual(data, {"ok": False, "code": "INVALID_INPUT", "message": "Voltage must be positive."})

    def test_record(self):
        result = size(SPEC, ENV)
        spec, env, stored = load_record(dump_record(SPEC, ENV, result))
        self.assertEqual(spec, SPEC)
        self.assertEqual(env, ENV)
        self.assertEqual(stored["selected_rating"], result.selected_rating)
        # Stored inputs size the same way again
        self.assertEqual(size(spec, env), result)

    def test_record_without_environment(self):
        spec, env, stored = load_record(dump_record(SPEC))
        self.assertEqual(spec, SPEC)
        self.assertIsNone(env)
        self.assertIsNone(stored)

    def test_malformed_records(self):
        with self.assertRaises(InvalidInput):
            load_record("not json")
        with self.assertRaises(InvalidInput):
            load_record(json.dumps({"version": 1}))
        with self.assertRaises(InvalidInput):
            specification_from_dict({"standard": "JIS", "voltage": 100, "phases": 1})

    def test_record_blocks_must_be_objects(self):
        data = json.loads(dump_record(SPEC, ENV))
        data["environment"] = [1, 2]
        with self.assertRaises(InvalidInput):
            load_record(json.dumps(data))

        data = json.loads(dump_record(SPEC, ENV))
        data["specification"] = "NEC 240 V"
        with self.assertRaises(InvalidInput):
            load_record(json.dumps(data))

        with self.assertRaises(InvalidInput):
            environment_from_dict(7)
        with self.assertRaises(InvalidInput):
            specification_from_dict(None)


class TestReport(unittest.TestCase):
    def test_workbook_sheets(self):
        bad = CircuitSpecification(Standard.NEC, 0, 1, current_amps=10, name="Broken")
        records = [(SPEC, size(SPEC, ENV, fault_current_ka=50)), (bad, size(bad))]
        wb = build_workbook(records)

        self.assertEqual(wb.sheetnames, ["Circuits", "Warnings", "Ref Breaker Ratings"])
        circuits = wb["Circuits"]
        self.assertEqual(circuits.max_row, 3)
        self.assertEqual(circuits["A2"].value, "Water Heater")
        self.assertEqual(circuits["L2"].value, 90)
        self.assertEqual(circuits["O1"].value, "V at Load (V)")
        self.assertLess(circuits["O2"].value, 240)
        self.assertTrue(circuits.cell(row=3, column=circuits.max_column).value.startswith("ERROR INVALID_INPUT"))

        codes = [row[1] for row in wb["Warnings"].iter_rows(min_row=2, values_only=True)]
        self.assertIn("BREAKING_CAPACITY_EXCEEDED", codes)

    def test_workbook_bytes(self):
        data = workbook_bytes([(SPEC, size(SPEC))])
        self.assertTrue(data.startswith(b"PK"))
        wb = load_workbook(io.BytesIO(data))
        self.assertEqual(wb["Circuits"]["A2"].value, "Water Heater")


class TestBatch(unittest.TestCase):
    def test_template_sizes(self):
        df = template_dataframe()
        self.assertEqual(list(df.columns), TEMPLATE_COLUMNS)

        out = size_dataframe(df)
        self.assertEqual(list(out.columns), TEMPLATE_COLUMNS + RESULT_COLUMNS)
        # NEC 10 kW 240 V -> 60 A; IEC 15 kW 400 V 3ph -> 25.5 A / (0.96 * 0.85) -> 32 A
        self.assertEqual(out.loc[0, "Breaker (A)"], 60)
        self.assertEqual(out.loc[1, "Breaker (A)"], 32)
        self.assertEqual(out.loc[0, "Status"], "OK")
        self.assertIn("BREAKING_CAPACITY_EXCEEDED", out.loc[1, "Warnings"])

    def test_bad_rows_reported(self):
        df = pd.DataFrame([
            {"Name": "No voltage", "Standard": "NEC", "Phases": 1, "Power": 10, "Unit": "A"},
            {"Name": "Fine", "Standard": "IEC", "Voltage": 230, "Phases": 1, "Power": 10, "Unit": "A"},
        ], columns=TEMPLATE_COLUMNS)
        out = size_dataframe(df)
        self.assertTrue(out.loc[0, "Status"].startswith("Error"))
        self.assertEqual(out.loc[1, "Breaker (A)"], 10)

        records = size_rows(df)
        self.assertIsInstance(records[0][1], CalculationError)
        self.assertEqual(records[0][0].name, "No voltage")

    def test_form_row_without_installation(self):
        values = {
            "Name": "Heater", "Standard": "NEC", "Voltage": 240, "Phases": 1, "Power": 10, "Unit": "kW",
            "PF": 0.9, "LoadType": "resistive", "Length": 150, "LengthUnit": "ft", "AmbientC": 45,
            "Conductors": 6, "Installation": None, "Insulation": 75, "Material": "Copper", "Size": "10",
            "FaultkA": None,
        }
        applied = table_row(values)
        self.assertEqual(list(applied), TEMPLATE_COLUMNS)
        self.assertEqual(applied["Size"], "10")

        skipped = table_row(values, apply_environment=False)
        for column in ENVIRONMENT_COLUMNS:
            self.assertIsNone(skipped[column], column)
        self.assertEqual(skipped["Voltage"], 240)

        (_, with_env), (_, without_env) = size_rows(pd.DataFrame([applied, skipped], columns=TEMPLATE_COLUMNS))
        self.assertIsNotNone(with_env.voltage_drop)
        self.assertIsNone(without_env.derating)
        self.assertIsNone(without_env.voltage_drop)
        self.assertEqual(without_env.selected_rating, 60)

    def test_empty_table(self):
        out = size_dataframe(pd.DataFrame(columns=TEMPLATE_COLUMNS))
        self.assertTrue(out.empty)


if __name__ == '__main__':
    unittest.main()
