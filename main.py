import datetime
import logging
import re
import sys

from core.calculator import size
from core.converters import convert_length_unit, convert_power_unit
from core.errors import BreakerSizingError
from core.models import (
    CircuitSpecification, ConductorMaterial, EnvironmentalConditions, InsulationRating, Standard, UnitSystem,
)
from core.report import build_workbook


def get_standard():
    print("Standards: (1) NEC, (2) IEC")
    choice = input("Select standard [1]: ").strip()
    return Standard.IEC if choice == "2" else Standard.NEC


def split_value_unit(text, default_unit):
    match = re.match(r"([0-9\.]+)\s*([a-zA-Z]+)", text)
    if match:
        return float(match.group(1)), match.group(2)
    return float(text), default_unit


def get_environment():
    print("\n--- Installation Conditions (Enter to skip) ---")
    temp_str = input("Ambient temperature (°C) [30]: ").strip()
    count_str = input("Current-carrying conductors in the raceway [3]: ").strip()
    method = input("Installation method (IEC: A, B, C, E, conduit, free-air...) []: ").strip() or None

    print("Insulation rating: (1) 60°C, (2) 70°C, (3) 75°C, (4) 90°C")
    ins_choice = input("Option [4]: ").strip()
    insulation = {
        "1": InsulationRating.TEMP_60, "2": InsulationRating.TEMP_70, "3": InsulationRating.TEMP_75,
    }.get(ins_choice, InsulationRating.TEMP_90)

    length_m = None
    l_input_str = input("Circuit length (e.g. 50 m, 150 ft) []: ").strip()
    if l_input_str:
        l_val, l_unit = split_value_unit(l_input_str, "m")
        length_m = convert_length_unit(l_val, l_unit)

    material = None
    conductor = input("Conductor size (e.g. 6, 1/0, 16 for mm²) []: ").strip() or None
    if conductor:
        m_choice = input("Material: (1) Copper, (2) Aluminum [1]: ").strip()
        material = ConductorMaterial.ALUMINUM if m_choice == "2" else ConductorMaterial.COPPER

    return EnvironmentalConditions(
        ambient_temp_c=float(temp_str or 30.0),
        grouped_conductors=int(count_str or 3),
        installation_method=method,
        insulation_rating=insulation,
        length=length_m,
        conductor_material=material,
        conductor_size=conductor,
    )


def get_circuits_input(standard):
    circuits = []
    print("\n--- Circuits ---")

    while True:
        print(f"\n[Circuit #{len(circuits)+1}]")
        name = input("Circuit name: ").strip()
        if not name: break

        try:
            p_input_str = input("Load (e.g. 10 kW, 5 HP, 20 A, 50 kVA): ").strip()
            val, unit = split_value_unit(p_input_str, "kW")
            voltage = float(input("Voltage (V): "))
            phases = int(input("Phases (1 or 3): "))
            pf = float(input("Power factor [0.9]: ") or 0.9)
            power_kw, amps = convert_power_unit(val, unit, pf)
            load_type = input("Load type (resistive, mixed, motor, electronic...) [mixed]: ").strip() or "mixed"

            spec = CircuitSpecification(
                standard=standard, voltage=voltage, phases=phases,
                power_kw=power_kw, current_amps=amps, power_factor=pf,
                unit_system=UnitSystem.METRIC, load_type=load_type, name=name,
            )

            environment = None
            if input("Apply installation conditions? (y/n) [y]: ").lower() != 'n':
                environment = get_environment()

            fault_str = input("Prospective fault current (kA) []: ").strip()
            fault = float(fault_str) if fault_str else None

            circuits.append((spec, environment, fault))

        except ValueError as e:
            print(f"Input error: {e}. Try again.")
        except BreakerSizingError as e:
            print(f"Input error: {e.detail}. Try again.")

        more = input("Add another circuit? (y/n): ").lower()
        if more != 'y':
            break

    return circuits


def export_to_excel(records):
    wb = build_workbook(records)
    filename = f"Breaker_Sizing_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    wb.save(filename)
    print(f"\n[INFO] Excel report saved: {filename}")


def main():
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    print("==========================================================")
    print(" CIRCUIT BREAKER SIZING")
    print("==========================================================")

    standard = get_standard()
    circuits = get_circuits_input(standard)

    if not circuits:
        print("No circuits entered.")
        sys.exit()

    print("\nSizing circuits...")
    print("-" * 110)
    print(f"{'Circuit':<15} | {'Load (A)':<9} | {'Req. (A)':<9} | {'Breaker':<8} | {'Trip':<28} | {'% VD':<6} | {'Notes'}")
    print("-" * 110)

    records = []
    for spec, environment, fault in circuits:
        outcome = size(spec, environment, fault)
        records.append((spec, outcome))

        if not outcome.ok:
            print(f"{spec.name:<15} | ERROR {outcome.code}: {outcome.message}")
            continue

        vd = outcome.voltage_drop
        vd_str = f"{vd.percent:.2f}" if vd else "-"
        warn = " (!)" if outcome.warnings else ""
        notes = ", ".join(w.code.value for w in outcome.warnings)
        print(f"{spec.name:<15} | {outcome.load_current:<9.1f} | {outcome.adjusted_minimum_current:<9.1f} | "
              f"{outcome.selected_rating:<8g} | {outcome.trip_curve.display_name:<28} | {vd_str:<6}{warn} | {notes}")
        if vd:
            print(f"{'':<15}   {vd.voltage_at_load:.1f} V at load, {vd.power_loss_watts:.0f} W line loss")
        if vd and vd.recommended_size:
            print(f"{'':<15}   upsize conductor to {vd.recommended_size} ({vd.recommended_percent:.2f}% drop)")

    print("-" * 110)

    ask = input("\nExport report to Excel? (y/n): ").lower()
    if ask == 'y':
        export_to_excel(records)


if __name__ == "__main__":
    main()
