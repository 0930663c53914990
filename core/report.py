import datetime
import io
from typing import Iterable, Tuple, Union

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from core.errors import CalculationError
from core.models import CalculationResult, CircuitSpecification, Standard
from sizing.short_circuit import breaking_capacity_for
from standards.registry import get_table

Record = Tuple[CircuitSpecification, Union[CalculationResult, CalculationError]]

CIRCUIT_HEADERS = [
    "Circuit", "Standard", "Voltage (V)", "Phases", "Load (A)", "Formula", "PF",
    "Safety Factor", "Min. Required (A)", "Derating", "Adjusted (A)", "Breaker (A)",
    "Trip Curve", "VD (%)", "V at Load (V)", "Line Loss (W)", "VD Tier", "Upsize To",
    "Fault (kA)", "Breaking Capacity (kA)", "Review", "Status",
]

HEADER_FILL = PatternFill(start_color="DDDDDD", end_color="DDDDDD", fill_type="solid")
HEADER_FONT = Font(bold=True)


def _style_header(ws):
    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL


def _circuit_row(spec: CircuitSpecification, outcome) -> list:
    if isinstance(outcome, CalculationError):
        row = [spec.name, spec.standard.value, spec.voltage, spec.phases]
        row += [None] * (len(CIRCUIT_HEADERS) - len(row) - 1)
        row.append(f"ERROR {outcome.code}: {outcome.message}")
        return row

    vd = outcome.voltage_drop
    sc = outcome.short_circuit
    return [
        spec.name,
        outcome.standard.value,
        spec.voltage,
        spec.phases,
        round(outcome.load_current, 2),
        outcome.formula,
        outcome.power_factor,
        outcome.safety_factor,
        round(outcome.minimum_required_current, 2),
        round(outcome.derating.combined_factor, 3) if outcome.derating else None,
        round(outcome.adjusted_minimum_current, 2),
        outcome.selected_rating,
        outcome.trip_curve.display_name,
        round(vd.percent, 2) if vd else None,
        round(vd.voltage_at_load, 1) if vd else None,
        round(vd.power_loss_watts, 1) if vd else None,
        vd.tier.value if vd else None,
        vd.recommended_size if vd else None,
        sc.fault_current_ka if sc else None,
        sc.breaking_capacity_ka if sc else None,
        "YES" if outcome.requires_review else "",
        "OK" if not outcome.warnings else f"{len(outcome.warnings)} warning(s)",
    ]


def build_workbook(records: Iterable[Record]) -> Workbook:
    """Renders sizing outcomes into a workbook. Nothing is recalculated here."""
    records = list(records)
    wb = Workbook()

    # --- Sheet 1: Circuits ---
    ws1 = wb.active
    ws1.title = "Circuits"
    ws1.append(CIRCUIT_HEADERS)
    _style_header(ws1)
    for spec, outcome in records:
        ws1.append(_circuit_row(spec, outcome))
    for col in ws1.columns:
        ws1.column_dimensions[col[0].column_letter].width = 15

    # --- Sheet 2: Warnings ---
    ws2 = wb.create_sheet("Warnings")
    ws2.append(["Circuit", "Code", "Message", "Reference"])
    _style_header(ws2)
    for spec, outcome in records:
        if isinstance(outcome, CalculationError):
            continue
        for w in outcome.warnings:
            ws2.append([spec.name, w.code.value, w.message, w.reference])
    ws2.column_dimensions["C"].width = 80

    # --- Sheet 3: Breaker ratings reference ---
    ws3 = wb.create_sheet("Ref Breaker Ratings")
    ws3.append(["Generated:", datetime.datetime.now().strftime("%Y-%m-%d %H:%M")])
    ws3.append([])
    for standard in Standard:
        table = get_table(standard)
        ws3.append([f"{standard.value} - {table.reference('rating')}"])
        ws3[ws3.max_row][0].font = HEADER_FONT
        ws3.append(["Rating (A)", "Breaking Capacity (kA)", "Frame"])
        for rating in table.breaker_ratings:
            bracket = breaking_capacity_for(table, rating)
            ws3.append([rating, bracket.breaking_capacity_ka, bracket.frame])
        ws3.append([])

    return wb


def workbook_bytes(records: Iterable[Record]) -> bytes:
    output = io.BytesIO()
    build_workbook(records).save(output)
    return output.getvalue()
