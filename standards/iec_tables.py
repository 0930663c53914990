from core.models import ConductorMaterial, Standard, TripCurve
from standards.tables import (
    BreakingCapacityBracket, ConductorEntry, GroupingBracket, StandardsTable,
    TemperatureBracket, freeze,
)

# Nominal system voltages (IEC 60038)
STANDARD_VOLTAGES = (230.0, 400.0, 690.0)

# IEC 60898-1 preferred ratings (MCB) continued with IEC 60947-2 frames
BREAKER_RATINGS = (
    6, 10, 13, 16, 20, 25, 32, 40, 50, 63, 80, 100,
    125, 160, 200, 250, 315, 400, 500, 630, 800, 1000,
    1250, 1600, 2000, 2500, 3200, 4000,
)

# IEC 60364-5-52 Table B.52.14 - Ambient temperature correction (air, 30°C reference)
# 70 = PVC, 90 = XLPE/EPR. 0.00 = not permitted.
TEMP_CORRECTION_FACTORS = {
    (-40, 10): {70: 1.22, 90: 1.15},
    (11, 15): {70: 1.17, 90: 1.12},
    (16, 20): {70: 1.12, 90: 1.08},
    (21, 25): {70: 1.06, 90: 1.04},
    (26, 30): {70: 1.00, 90: 1.00},
    (31, 35): {70: 0.94, 90: 0.96},
    (36, 40): {70: 0.87, 90: 0.91},
    (41, 45): {70: 0.79, 90: 0.87},
    (46, 50): {70: 0.71, 90: 0.82},
    (51, 55): {70: 0.61, 90: 0.76},
    (56, 60): {70: 0.50, 90: 0.71},
    (61, 65): {70: 0.35, 90: 0.65},
    (66, 70): {70: 0.00, 90: 0.58},
    (71, 75): {70: 0.00, 90: 0.50},
    (76, 80): {70: 0.00, 90: 0.41},
}

# IEC 60364-5-52 Table B.52.17 - Reduction factors for groups of circuits
# A: conduit in insulated wall, B: conduit on wall, C: clipped direct, E: free air
GROUPING_FACTORS = {
    1: {"A": 1.00, "B": 1.00, "C": 1.00, "E": 1.00},
    2: {"A": 0.80, "B": 0.85, "C": 0.85, "E": 0.88},
    3: {"A": 0.70, "B": 0.79, "C": 0.79, "E": 0.82},
    4: {"A": 0.65, "B": 0.75, "C": 0.75, "E": 0.77},
    5: {"A": 0.60, "B": 0.73, "C": 0.73, "E": 0.75},
    6: {"A": 0.57, "B": 0.72, "C": 0.72, "E": 0.73},
    7: {"A": 0.54, "B": 0.70, "C": 0.70, "E": 0.73},
    8: {"A": 0.52, "B": 0.70, "C": 0.70, "E": 0.72},
    9: {"A": 0.50, "B": 0.70, "C": 0.70, "E": 0.72},
    12: {"A": 0.45, "B": 0.65, "C": 0.65, "E": 0.70},
    16: {"A": 0.41, "B": 0.60, "C": 0.60, "E": 0.68},
    20: {"A": 0.38, "B": 0.57, "C": 0.57, "E": 0.66},
}

INSTALLATION_ALIASES = {
    "conduit": "A",
    "cable-tray": "C",
    "direct": "C",
    "free-air": "E",
}

# Size (mm2) -> (ohm/1000 ft, {Insulation: Amps}) - method B1, 30°C
IEC_COPPER = {
    "1.5": (4.59, {70: 17.5, 90: 22}),
    "2.5": (2.81, {70: 23, 90: 30}),
    "4": (1.75, {70: 31, 90: 40}),
    "6": (1.17, {70: 40, 90: 51}),
    "10": (0.695, {70: 54, 90: 70}),
    "16": (0.437, {70: 68, 90: 94}),
    "25": (0.276, {70: 89, 90: 119}),
    "35": (0.199, {70: 110, 90: 148}),
    "50": (0.147, {70: 133, 90: 180}),
    "70": (0.102, {70: 168, 90: 232}),
    "95": (0.0733, {70: 201, 90: 282}),
    "120": (0.0581, {70: 232, 90: 328}),
    "150": (0.0471, {70: 258, 90: 374}),
    "185": (0.0376, {70: 289, 90: 424}),
    "240": (0.0286, {70: 341, 90: 500}),
    "300": (0.0228, {70: 384, 90: 561}),
    "400": (0.0178, {70: 430, 90: 656}),
    "500": (0.0139, {70: 490, 90: 749}),
    "630": (0.0107, {70: 560, 90: 855}),
}

IEC_ALUMINUM = {
    "2.5": (4.59, {70: 18, 90: 23}),
    "4": (2.86, {70: 24, 90: 31}),
    "6": (1.91, {70: 31, 90: 40}),
    "10": (1.14, {70: 42, 90: 54}),
    "16": (0.714, {70: 53, 90: 73}),
    "25": (0.452, {70: 69, 90: 92}),
    "35": (0.326, {70: 86, 90: 115}),
    "50": (0.240, {70: 104, 90: 140}),
    "70": (0.167, {70: 131, 90: 180}),
    "95": (0.120, {70: 157, 90: 219}),
    "120": (0.0950, {70: 181, 90: 254}),
    "150": (0.0771, {70: 201, 90: 290}),
    "185": (0.0615, {70: 225, 90: 329}),
    "240": (0.0467, {70: 266, 90: 388}),
    "300": (0.0374, {70: 300, 90: 435}),
    "400": (0.0292, {70: 335, 90: 510}),
    "500": (0.0228, {70: 382, 90: 582}),
}

# Rated short-circuit breaking capacity per frame (kA)
BREAKING_CAPACITY = (
    (63, 6.0, "MCB (IEC 60898-1)"),
    (125, 10.0, "MCB (IEC 60898-1)"),
    (630, 36.0, "MCCB (IEC 60947-2)"),
    (1600, 50.0, "MCCB (IEC 60947-2)"),
    (4000, 65.0, "ACB (IEC 60947-2)"),
)

TRIP_CURVES = {
    "B": TripCurve("B", "Type B (3-5x In)", 3.0, 5.0, "Low (3-5x rated current)", "IEC 60898-1"),
    "C": TripCurve("C", "Type C (5-10x In)", 5.0, 10.0, "Medium (5-10x rated current)", "IEC 60898-1"),
    "D": TripCurve("D", "Type D (10-20x In)", 10.0, 20.0, "High (10-20x rated current)", "IEC 60898-1"),
    "K": TripCurve("K", "Type K (8-12x In)", 8.0, 12.0, "Medium-High (8-12x rated current)", "IEC 60947-2"),
    "Z": TripCurve("Z", "Type Z (2-3x In)", 2.0, 3.0, "Very Low (2-3x rated current)", "IEC 60947-2"),
}

LOAD_TO_TRIP_CURVE = {
    "resistive": "B",
    "general": "C",
    "mixed": "C",
    "capacitive": "C",
    "inductive": "D",
    "motor": "D",
    "electronic": "Z",
    "sensitive": "Z",
}

REFERENCES = {
    "rating": "IEC 60898-1",
    "safety_factor": "IEC 60364-5-52",
    "temperature": "IEC 60364-5-52 Table B.52.14",
    "grouping": "IEC 60364-5-52 Table B.52.17",
    "voltage_drop": "IEC 60364-5-52 Clause 525",
    "conductor": "IEC 60228",
    "ampacity": "IEC 60364-4-43 (In <= Iz)",
    "short_circuit": "IEC 60947-2",
    "trip_curve": "IEC 60898-1",
}


def _conductors(material, rows):
    return tuple(
        ConductorEntry(size=size, material=material, resistance_ohm_per_1000ft=r, ampacity=freeze(amps))
        for size, (r, amps) in rows.items()
    )


IEC_TABLE = StandardsTable(
    standard=Standard.IEC,
    breaker_ratings=tuple(float(r) for r in BREAKER_RATINGS),
    continuous_load_multiplier=1.0,
    temperature_brackets=tuple(
        TemperatureBracket(min_c=lo, max_c=hi, factors=freeze(f))
        for (lo, hi), f in TEMP_CORRECTION_FACTORS.items()
    ),
    insulation_classes=(70, 90),
    insulation_aliases=freeze({60: 70, 75: 70}),
    grouping_brackets=tuple(
        GroupingBracket(max_count=circuits, factors=freeze(f))
        for circuits, f in GROUPING_FACTORS.items()
    ),
    grouping_per_circuit=True,
    default_installation_method="B",
    installation_aliases=freeze(INSTALLATION_ALIASES),
    conductors=freeze({
        ConductorMaterial.COPPER: _conductors(ConductorMaterial.COPPER, IEC_COPPER),
        ConductorMaterial.ALUMINUM: _conductors(ConductorMaterial.ALUMINUM, IEC_ALUMINUM),
    }),
    breaking_capacities=tuple(BreakingCapacityBracket(*row) for row in BREAKING_CAPACITY),
    trip_curves=freeze(TRIP_CURVES),
    trip_curve_by_load=freeze(LOAD_TO_TRIP_CURVE),
    references=freeze(REFERENCES),
    standard_voltages=STANDARD_VOLTAGES,
)
