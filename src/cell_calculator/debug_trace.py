"""
Debug Trace Functions
=====================

Trace all calculations for a cell with detailed output.
"""

from dataclasses import replace

from .debugger import CalculationDebugger, recording
from .models.cell import Cell
from .calculations.mass import (
    calculate_stack_areal_mass,
    calculate_jellyroll_mass,
    calculate_cell_mass,
)
from .calculations.energy import (
    calculate_np_ratio,
    calculate_gravimetric_energy,
    calculate_volumetric_energy,
)


def _record_electrode(debugger: CalculationDebugger, label: str, electrode) -> None:
    composite = electrode.composite
    debugger.record_input(f"{label}_material", composite.active_material.name, "",
                          f"{label} active material on {electrode.current_collector.name}")
    debugger.record_input(f"{label}_areal_cap", composite.areal_cap, "mAh/cm²",
                          f"{label} areal capacity (one face)")
    debugger.record_input(f"{label}_active_frac", composite.active_frac, "",
                          f"{label} active mass fraction")
    debugger.record_input(f"{label}_coating", composite.thickness, "cm",
                          f"{label} coating thickness (one face)")
    debugger.record_input(f"{label}_thickness", electrode.thickness, "cm",
                          f"{label} electrode thickness (double-sided)")


def trace_cell_calculations(cell: Cell) -> CalculationDebugger:
    """
    Trace all cell calculations with step-by-step output.

    Construction is replayed with the debugger active in the current
    context only, so geometry steps (turns, spiral length, layers) are
    recorded alongside the derived mass and energy density figures.
    Cells built concurrently elsewhere are not captured.

    Parameters:
    ----------
    cell : Cell
        The cell to analyze

    Returns:
    -------
    CalculationDebugger
        Debugger with all calculation steps recorded
    """
    debugger = CalculationDebugger(
        cell_name=cell.name,
        format=cell.form_factor.value,
        cathode=cell.positive.active_material.name,
        anode=cell.negative.active_material.name,
    )

    # ==========================================================================
    # SECTION 1: INPUT PARAMETERS
    # ==========================================================================
    debugger.section("INPUT PARAMETERS")

    _record_electrode(debugger, "positive", cell.positive)
    _record_electrode(debugger, "negative", cell.negative)
    debugger.record_input("separator", cell.separator.thickness, "cm",
                          f"Separator thickness ({cell.separator.name})")
    debugger.record_input("electrolyte_density", cell.electrolyte.density, "g/cm³",
                          f"{cell.electrolyte.salt} in {cell.electrolyte.solvent}")
    debugger.record_input("ecap_ratio", cell.ecap_ratio, "mL/Ah", "Electrolyte to capacity ratio")
    debugger.record_input("lli", cell.lli_factor, "", "Lithium inventory loss factor")

    debugger.record(
        "Balance", "n/p ratio", "np_ratio",
        calculate_np_ratio(cell.positive, cell.negative),
        formula="n/p = q- / q+",
        inputs={"q+": cell.positive.areal_cap, "q-": cell.negative.areal_cap},
    )

    # ==========================================================================
    # SECTION 2: STACK, GEOMETRY, CAPACITY & ENERGY
    # ==========================================================================
    debugger.section("STACK, GEOMETRY, CAPACITY & ENERGY")

    with recording(debugger):
        replace(cell)

    # ==========================================================================
    # SECTION 3: MASS
    # ==========================================================================
    debugger.section("MASS")

    stack_areal_mass = debugger.record(
        "Mass", "Stack areal mass", "m_s",
        calculate_stack_areal_mass(cell.positive, cell.negative, cell.separator),
        unit="g/cm²",
        formula="m_s = m+ + m- + 2·m_sep",
        inputs={
            "m+": cell.positive.areal_mass,
            "m-": cell.negative.areal_mass,
            "m_sep": cell.separator.areal_mass,
        },
    )
    jellyroll_mass = debugger.record(
        "Mass", "Jelly roll mass", "m_jr", calculate_jellyroll_mass(cell),
        unit="g",
        formula="m_jr = m_s × area (+ extra negative electrode)",
        inputs={"m_s": stack_areal_mass, "area": cell.area},
    )
    electrolyte_mass = debugger.record(
        "Mass", "Electrolyte mass", "m_e", cell.compute_electrolyte_mass(),
        unit="g",
        formula="m_e = ecap × C × ρ_e",
        inputs={"ecap": cell.ecap_ratio, "C": cell.capacity, "ρ_e": cell.electrolyte.density},
    )
    packaging_mass = debugger.record(
        "Mass", f"Packaging mass ({cell.form_factor.value})", "m_pkg",
        cell.compute_packaging_mass(),
        unit="g",
    )
    mass = debugger.record(
        "Mass", "Cell mass", "M", calculate_cell_mass(cell),
        unit="g",
        formula="M = m_jr + m_e + m_pkg",
        inputs={"m_jr": jellyroll_mass, "m_e": electrolyte_mass, "m_pkg": packaging_mass},
    )

    # ==========================================================================
    # SECTION 4: ENERGY DENSITY
    # ==========================================================================
    debugger.section("ENERGY DENSITY")

    debugger.record("Dimensions", "Cell thickness", "t", cell.compute_thickness(), unit="cm")
    volume = debugger.record("Dimensions", "Cell volume", "V", cell.compute_volume(), unit="cm³")

    debugger.record(
        "Energy Density", "Gravimetric energy", "E_g",
        calculate_gravimetric_energy(cell.energy, mass),
        unit="Wh/kg",
        formula="E_g = 1000 × E / M",
        inputs={"E": cell.energy, "M": mass},
    )
    debugger.record(
        "Energy Density", "Volumetric energy", "E_v",
        calculate_volumetric_energy(cell.energy, volume),
        unit="Wh/L",
        formula="E_v = 1000 × E / V",
        inputs={"E": cell.energy, "V": volume},
    )

    debugger.finish()
    return debugger
