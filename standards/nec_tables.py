from core.models import ConductorMaterial, Standard, TripCurve
from standards.tables import (
    BreakingCapacityBracket, ConductorEntry, GroupingBracket, StandardsTable,
    TemperatureBracket, freeze,
)

# Nominal system voltages (ANSI C84.1)
STANDARD_VOLTAGES = (120.0, 208.0, 240.0, 277.0, 480.0)

# NEC 240.6(A) - Standard Ampere Ratings
BREAKER_RATINGS = (
    15, 20, 25, 30, 35, 40, 45, 50, 60, 70, 80, 90, 100,
    110, 125, 150, 175, 200, 225, 250, 300, 350, 400, 450,
    500, 600, 700, 800, 1000, 1200, 1600, 2000, 2500, 3000, 4000,
)

# NEC Table 310.15(B)(1) - Ambient Temperature Correction Factors
# Based on 30°C base ambient. 0.00 = insulation class not permitted at that ambient.
# Format: (Min_C, Max_C): {Insulation_Rating: Factor}
TEMP_CORRECTION_FACTORS = {
    (-40, 10): {60: 1.29, 75: 1.20, 90: 1.15},
    (11, 15): {60: 1.22, 75: 1.15, 90: 1.12},
    (16, 20): {60: 1.15, 75: 1.11, 90: 1.08},
    (21, 25): {60: 1.08, 75: 1.05, 90: 1.04},
    (26, 30): {60: 1.00, 75: 1.00, 90: 1.00},
    (31, 35): {60: 0.91, 75: 0.94, 90: 0.96},
    (36, 40): {60: 0.82, 75: 0.88, 90: 0.91},
    (41, 45): {60: 0.71, 75: 0.82, 90: 0.87},
    (46, 50): {60: 0.58, 75: 0.75, 90: 0.82},
    (51, 55): {60: 0.41, 75: 0.67, 90: 0.76},
    (56, 60): {60: 0.00, 75: 0.58, 90: 0.71},
    (61, 65): {60: 0.00, 75: 0.47, 90: 0.65},
    (66, 70): {60: 0.00, 75: 0.33, 90: 0.58},
    (71, 75): {60: 0.00, 75: 0.00, 90: 0.50},
    (76, 80): {60: 0.00, 75: 0.00, 90: 0.41},
    (81, 85): {60: 0.00, 75: 0.00, 90: 0.29},
}

# NEC Table 310.15(C)(1) - Adjustment Factors for More Than Three Current-Carrying Conductors
# Format: {Max_Conductors: Factor}
GROUPING_FACTORS = {
    3: 1.0,
    6: 0.80,   # 4-6 conductors
    9: 0.70,   # 7-9
    20: 0.50,  # 10-20
    30: 0.45,  # 21-30
    40: 0.40,  # 31-40
    100: 0.35  # 41+
}

# NEC Chapter 9 Table 8 (DC resistance at 75°C, ohm/1000 ft) and
# NEC Table 310.16 (ampacity at 60/75/90°C, not more than 3 conductors, 30°C)
# Format: SizeAWG: (R, {TempRating: Amps})
NEC_COPPER = {
    "14": (3.14, {60: 15, 75: 20, 90: 25}),
    "12": (1.98, {60: 20, 75: 25, 90: 30}),
    "10": (1.24, {60: 30, 75: 35, 90: 40}),
    "8": (0.778, {60: 40, 75: 50, 90: 55}),
    "6": (0.491, {60: 55, 75: 65, 90: 75}),
    "4": (0.308, {60: 70, 75: 85, 90: 95}),
    "3": (0.245, {60: 85, 75: 100, 90: 115}),
    "2": (0.194, {60: 95, 75: 115, 90: 130}),
    "1": (0.154, {60: 110, 75: 130, 90: 145}),
    "1/0": (0.122, {60: 125, 75: 150, 90: 170}),
    "2/0": (0.0967, {60: 145, 75: 175, 90: 195}),
    "3/0": (0.0766, {60: 165, 75: 200, 90: 225}),
    "4/0": (0.0608, {60: 195, 75: 230, 90: 260}),
    "250": (0.0515, {60: 215, 75: 255, 90: 290}),
    "300": (0.0429, {60: 240, 75: 285, 90: 320}),
    "350": (0.0367, {60: 260, 75: 310, 90: 350}),
    "400": (0.0321, {60: 280, 75: 335, 90: 380}),
    "500": (0.0258, {60: 320, 75: 380, 90: 430}),
    "600": (0.0214, {60: 350, 75: 420, 90: 475}),
    "750": (0.0171, {60: 400, 75: 475, 90: 535}),
    "1000": (0.0129, {60: 455, 75: 545, 90: 615}),
}

NEC_ALUMINUM = {
    "12": (3.25, {60: 15, 75: 20, 90: 25}),
    "10": (2.04, {60: 25, 75: 30, 90: 35}),
    "8": (1.28, {60: 35, 75: 40, 90: 45}),
    "6": (0.808, {60: 40, 75: 50, 90: 55}),
    "4": (0.508, {60: 55, 75: 65, 90: 75}),
    "3": (0.403, {60: 65, 75: 75, 90: 85}),
    "2": (0.319, {60: 75, 75: 90, 90: 100}),
    "1": (0.253, {60: 85, 75: 100, 90: 115}),
    "1/0": (0.201, {60: 100, 75: 120, 90: 135}),
    "2/0": (0.159, {60: 115, 75: 135, 90: 150}),
    "3/0": (0.126, {60: 130, 75: 155, 90: 175}),
    "4/0": (0.100, {60: 150, 75: 180, 90: 205}),
    "250": (0.0847, {60: 170, 75: 205, 90: 230}),
    "300": (0.0707, {60: 190, 75: 230, 90: 255}),
    "350": (0.0605, {60: 210, 75: 250, 90: 280}),
    "400": (0.0529, {60: 225, 75: 270, 90: 305}),
    "500": (0.0424, {60: 260, 75: 310, 90: 350}),
    "600": (0.0353, {60: 285, 75: 340, 90: 385}),
    "750": (0.0282, {60: 320, 75: 385, 90: 435}),
    "1000": (0.0212, {60: 375, 75: 445, 90: 500}),
}

# Typical UL 489 interrupting ratings per frame (kA symmetrical)
# Format: (Max_Rating, kA, Frame)
BREAKING_CAPACITY = (
    (100, 10.0, "Branch circuit breaker"),
    (250, 25.0, "Molded case, 250 A frame"),
    (600, 35.0, "Molded case, 600 A frame"),
    (1200, 50.0, "Molded case, 1200 A frame"),
    (4000, 65.0, "Insulated case / power circuit breaker"),
)

# NEC describes trip mechanisms rather than lettered curves (UL 489, NEC Article 240)
TRIP_TYPES = {
    "thermal-magnetic": TripCurve(
        code="thermal-magnetic",
        display_name="Thermal-Magnetic (Standard)",
        instantaneous_min=5.0, instantaneous_max=10.0,
        inrush_capability="Medium (similar to IEC Type C)",
        reference="UL 489",
    ),
    "adjustable-magnetic": TripCurve(
        code="adjustable-magnetic",
        display_name="Adjustable Magnetic Trip",
        instantaneous_min=5.0, instantaneous_max=15.0,
        inrush_capability="High (adjustable, typically 5-15x In)",
        reference="UL 489 / NEC 430.52",
    ),
    "electronic": TripCurve(
        code="electronic",
        display_name="Electronic Trip (Programmable)",
        instantaneous_min=1.5, instantaneous_max=12.0,
        inrush_capability="Adjustable, low pickup available for sensitive loads",
        reference="UL 489",
    ),
}

LOAD_TO_TRIP_TYPE = {
    "resistive": "thermal-magnetic",
    "general": "thermal-magnetic",
    "mixed": "thermal-magnetic",
    "capacitive": "thermal-magnetic",
    "inductive": "adjustable-magnetic",
    "motor": "adjustable-magnetic",
    "electronic": "electronic",
    "sensitive": "electronic",
}

REFERENCES = {
    "rating": "NEC 240.6(A)",
    "safety_factor": "NEC 210.20(A)",
    "temperature": "NEC 310.15(B)(1)",
    "grouping": "NEC 310.15(C)(1)",
    "voltage_drop": "NEC 210.19(A) Informational Note No. 4",
    "conductor": "NEC Chapter 9 Table 8",
    "ampacity": "NEC 240.4 & 310.16",
    "short_circuit": "NEC 110.9",
    "trip_curve": "UL 489",
}


def _conductors(material, rows):
    return tuple(
        ConductorEntry(size=size, material=material, resistance_ohm_per_1000ft=r, ampacity=freeze(amps))
        for size, (r, amps) in rows.items()
    )


NEC_TABLE = StandardsTable(
    standard=Standard.NEC,
    breaker_ratings=tuple(float(r) for r in BREAKER_RATINGS),
    continuous_load_multiplier=1.25,
    temperature_brackets=tuple(
        TemperatureBracket(min_c=lo, max_c=hi, factors=freeze(f))
        for (lo, hi), f in TEMP_CORRECTION_FACTORS.items()
    ),
    insulation_classes=(60, 75, 90),
    insulation_aliases=freeze({70: 75}),
    grouping_brackets=tuple(
        GroupingBracket(max_count=limit, factors=freeze({"any": f}))
        for limit, f in GROUPING_FACTORS.items()
    ),
    grouping_per_circuit=False,
    default_installation_method="any",
    installation_aliases=freeze({}),
    conductors=freeze({
        ConductorMaterial.COPPER: _conductors(ConductorMaterial.COPPER, NEC_COPPER),
        ConductorMaterial.ALUMINUM: _conductors(ConductorMaterial.ALUMINUM, NEC_ALUMINUM),
    }),
    breaking_capacities=tuple(BreakingCapacityBracket(*row) for row in BREAKING_CAPACITY),
    trip_curves=freeze(TRIP_TYPES),
    trip_curve_by_load=freeze(LOAD_TO_TRIP_TYPE),
    references=freeze(REFERENCES),
    standard_voltages=STANDARD_VOLTAGES,
)
