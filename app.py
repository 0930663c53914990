import io
import logging

import pandas as pd
import streamlit as st

from core.batch import (
    RESULT_COLUMNS, TEMPLATE_COLUMNS, size_dataframe, size_rows, table_row, template_dataframe,
)
from core.calculator import size
from core.converters import LENGTH_UNITS, POWER_UNITS, convert_length_unit, convert_power_unit
from core.errors import BreakerSizingError
from core.models import (
    CircuitSpecification, ConductorMaterial, EnvironmentalConditions, InsulationRating, Standard, UnitSystem,
)
from core.report import workbook_bytes
from standards.registry import get_table

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

LOAD_TYPES = ["mixed", "general", "resistive", "capacitive", "inductive", "motor", "electronic", "sensitive"]

# --- Page Config ---
st.set_page_config(
    page_title="Circuit Breaker Sizing",
    page_icon="⚡",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- Custom CSS ---
st.markdown("""
<style>
    .main-header { font-family: 'Inter', sans-serif; color: #1E3A8A; font-weight: 700; }
    .stDataFrame { border-radius: 10px; overflow: hidden; }
</style>
""", unsafe_allow_html=True)

# --- Session State Init ---
if 'circuits_df' not in st.session_state:
    st.session_state.circuits_df = pd.DataFrame(columns=TEMPLATE_COLUMNS)

if "voltage_input" not in st.session_state:
    st.session_state.voltage_input = 240.0

def on_phase_change():
    if st.session_state.phases_input == 1:
        st.session_state.voltage_input = 240.0
    else:
        st.session_state.voltage_input = 480.0

# --- Sidebar ---
with st.sidebar:
    st.title("Settings")
    standard_name = st.radio("Standard", [s.value for s in Standard], horizontal=True)
    standard = Standard(standard_name)
    table = get_table(standard)

    st.markdown("---")
    st.subheader("📥 Bulk Import")

    def get_template():
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            template_dataframe().to_excel(writer, index=False, sheet_name='Template')
        return output.getvalue()

    st.download_button(
        "📄 Download Excel Template",
        data=get_template(),
        file_name="circuit_template.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        help="Fill one row per circuit and upload it below."
    )

    uploaded_file = st.file_uploader("Upload Excel", type=["xlsx"])
    if uploaded_file and st.button("Process File"):
        try:
            df_in = pd.read_excel(uploaded_file)
        except ValueError as e:
            st.error(f"Could not read the file: {e}")
        else:
            df_in = df_in.reindex(columns=TEMPLATE_COLUMNS)
            st.session_state.circuits_df = pd.concat([st.session_state.circuits_df, df_in], ignore_index=True)
            st.success(f"✅ {len(df_in)} circuits imported.")
            st.rerun()

# --- Main Area ---
st.markdown("<h1 class='main-header'>⚡ Circuit Breaker Sizing</h1>", unsafe_allow_html=True)
st.markdown("---")

with st.expander("➕ Size a Circuit", expanded=True):
    c_name, c_load = st.columns([3, 1])
    name = c_name.text_input("Circuit Name", "Circuit 1")
    load_type = c_load.selectbox("Load Type", LOAD_TYPES)

    st.markdown("##### ⚡ Electrical Data")
    c_p1, c_p2, c_v1, c_v2, c_fp = st.columns([1.5, 0.8, 1.2, 0.8, 1])
    power = c_p1.number_input("Load", 0.0, step=0.1, format="%.2f")
    unit = c_p2.selectbox("Unit", POWER_UNITS, index=1)
    voltage = c_v1.number_input("Voltage (V)", step=10.0, key="voltage_input")
    phases = c_v2.radio("Phases", [1, 3], horizontal=True, key="phases_input", on_change=on_phase_change)
    pf = c_fp.number_input("PF", 0.1, 1.0, 0.9, 0.05)

    st.markdown("##### 📏 Installation")
    use_env = st.toggle("Apply derating / voltage drop", True)
    c_T1, c_T2, c_G, c_M = st.columns(4)
    temp = c_T1.number_input("Ambient (°C)", value=30.0, step=1.0)
    insulation = c_T2.selectbox("Insulation (°C)", list(table.insulation_classes), index=len(table.insulation_classes) - 1)
    group = c_G.number_input("Current-carrying conductors", 1, 200, 3)
    method = None
    if table.grouping_per_circuit:
        method = c_M.selectbox("Installation Method", sorted(table.grouping_brackets[0].factors),
                               index=sorted(table.grouping_brackets[0].factors).index(table.default_installation_method))

    c_L1, c_L2, c_mat, c_size, c_fault = st.columns([1.2, 0.8, 1, 1, 1])
    length = c_L1.number_input("Length", 0.0, step=1.0)
    l_unit = c_L2.selectbox("Length Unit", LENGTH_UNITS)
    material = ConductorMaterial(c_mat.selectbox("Material", [m.value for m in ConductorMaterial]))
    sizes = [e.size for e in table.conductor_entries(material)]
    conductor = c_size.selectbox("Conductor Size", ["(none)"] + sizes)
    fault = c_fault.number_input("Fault Current (kA)", 0.0, step=1.0, help="0 skips the breaking capacity check")

    st.write("")
    c_calc, c_add = st.columns(2)
    calc_clicked = c_calc.button("Calculate", type="primary", use_container_width=True)
    add_clicked = c_add.button("Add to Table", use_container_width=True)

    if calc_clicked:
        try:
            power_kw, amps = convert_power_unit(power, unit, pf)
            length_m = convert_length_unit(length, l_unit)
        except BreakerSizingError as e:
            st.error(e.detail)
        else:
            spec = CircuitSpecification(
                standard=standard, voltage=voltage, phases=phases,
                power_kw=power_kw, current_amps=amps, power_factor=pf,
                unit_system=UnitSystem.METRIC, load_type=load_type, name=name,
            )
            environment = None
            if use_env:
                environment = EnvironmentalConditions(
                    ambient_temp_c=temp,
                    grouped_conductors=int(group),
                    installation_method=method,
                    insulation_rating=InsulationRating(int(insulation)),
                    length=length_m if length > 0 else None,
                    conductor_material=material if conductor != "(none)" else None,
                    conductor_size=conductor if conductor != "(none)" else None,
                )
            outcome = size(spec, environment, fault if fault > 0 else None)

            if not outcome.ok:
                st.error(f"{outcome.code}: {outcome.message}")
            else:
                m1, m2, m3, m4 = st.columns(4)
                m1.metric("Load Current", f"{outcome.load_current:.1f} A", help=outcome.formula)
                m2.metric("Required", f"{outcome.adjusted_minimum_current:.1f} A",
                          help=f"× {outcome.safety_factor:g} safety factor")
                m3.metric("Breaker", f"{outcome.selected_rating:g} A")
                m4.metric("Trip", outcome.trip_curve.display_name)
                if outcome.derating:
                    st.caption(
                        f"Derating: temp {outcome.derating.temperature_factor:.2f} × "
                        f"group {outcome.derating.grouping_factor:.2f} = {outcome.derating.combined_factor:.3f}"
                    )
                if outcome.voltage_drop:
                    vd = outcome.voltage_drop
                    text = (f"Voltage drop {vd.percent:.2f}% ({vd.volts:.2f} V) - {vd.tier.value}, "
                            f"{vd.voltage_at_load:.1f} V at load, {vd.power_loss_watts:.0f} W lost")
                    if vd.recommended_size:
                        text += f" → upsize to {vd.recommended_size} ({vd.recommended_percent:.2f}%)"
                    st.caption(text)
                for w in outcome.warnings:
                    st.warning(f"{w.code.value}: {w.message}")
                st.caption(" | ".join(outcome.references))

    if add_clicked:
        new_row = table_row({
            "Name": name, "Standard": standard.value, "Voltage": voltage, "Phases": phases,
            "Power": power, "Unit": unit, "PF": pf, "LoadType": load_type,
            "Length": length if length > 0 else None, "LengthUnit": l_unit,
            "AmbientC": temp, "Conductors": group,
            "Installation": method, "Insulation": int(insulation),
            "Material": material.value if conductor != "(none)" else None,
            "Size": conductor if conductor != "(none)" else None,
            "FaultkA": fault if fault > 0 else None,
        }, apply_environment=use_env)
        st.session_state.circuits_df = pd.concat(
            [st.session_state.circuits_df, pd.DataFrame([new_row])], ignore_index=True
        )
        st.rerun()

st.markdown("### 📋 Circuit Table (Editable)")

tb1, tb2, tb3 = st.columns([1, 1, 4])
with tb1:
    if st.button("🗑️ Clear Table", type="secondary", use_container_width=True):
        st.session_state.circuits_df = pd.DataFrame(columns=TEMPLATE_COLUMNS)
        st.rerun()

st.caption("Edit any cell to recalculate. Select rows and press Delete to remove them.")

df_inputs = st.session_state.circuits_df.copy()
df_full = size_dataframe(df_inputs)

with tb2:
    if not df_inputs.empty:
        st.download_button(
            "📥 Excel Report",
            data=workbook_bytes(size_rows(df_inputs)),
            file_name="breaker_sizing.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True
        )

column_config = {
    "Standard": st.column_config.SelectboxColumn(options=[s.value for s in Standard], width="small"),
    "Phases": st.column_config.SelectboxColumn(options=[1, 3], width="small"),
    "Unit": st.column_config.SelectboxColumn(options=POWER_UNITS, width="small"),
    "LoadType": st.column_config.SelectboxColumn(options=LOAD_TYPES),
    "LengthUnit": st.column_config.SelectboxColumn(options=LENGTH_UNITS, width="small"),
    "Material": st.column_config.SelectboxColumn(options=[m.value for m in ConductorMaterial]),
}

edited_df = st.data_editor(
    df_full,
    key="editor",
    use_container_width=True,
    num_rows="dynamic",
    column_config=column_config,
    disabled=RESULT_COLUMNS,
    height=400
)

edited_inputs = edited_df[TEMPLATE_COLUMNS]
if not edited_inputs.equals(st.session_state.circuits_df):
    st.session_state.circuits_df = edited_inputs
    st.rerun()
