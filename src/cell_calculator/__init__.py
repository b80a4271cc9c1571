"""
Cell Calculator Module
======================

Estimates capacity, energy, mass and energy density of hypothetical
lithium-ion cells from material and geometry inputs, with first-order
uncertainty propagation through every calculation.

Features:
---------
- Uncertain values with correlation tracking (x - x is exactly 0 ± 0)
- Electrode composites from areal capacity or from loading
- Five cell formats: cylindrical, prismatic jelly roll, prismatic
  cinnamon roll, prismatic stacked, pouch
- Archimedes spiral winding length by numerical integration
- Mass breakdown by component
- Step-by-step calculation trace

Usage:
------
    from src.cell_calculator import (
        create_reference_pouch_cell, gravimetric_energy, mass_breakdown,
    )

    cell = create_reference_pouch_cell()
    print(cell.capacity)               # 64.4 ± 2.4 (Ah)
    print(gravimetric_energy(cell))    # Wh/kg
    print(mass_breakdown(cell))

Uncertainties are one standard deviation.
"""

from .models import (
    ActiveMaterial,
    CurrentCollector,
    Separator,
    Electrolyte,
    ElectrodeComposite,
    Electrode,
    CellFormat,
    Cell,
    CylindricalCell,
    PrismaticJellyrollCell,
    PrismaticCinnamonrollCell,
    PrismaticStackedCell,
    PouchCell,
)
from .calculations.properties import (
    thickness,
    volume,
    mass,
    gravimetric_energy,
    volumetric_energy,
    mass_breakdown,
)
from .uncertainty import (
    UncertainValue,
    UncertaintySource,
    measurement,
    as_uncertain,
    nominal_value,
    std_dev,
)
from .data import (
    ACTIVE_MATERIALS,
    get_active_material,
    list_active_materials,
    create_reference_pouch_cell,
    create_reference_cylindrical_cell,
)
from .config import CellCalculatorConfig, DEFAULT_CONFIG
from .exceptions import (
    CellModelError,
    AmbiguousSpecification,
    UnsupportedMaterial,
    InvalidOperation,
    GeometryInfeasible,
)
from .debugger import (
    CalculationDebugger,
    get_debugger,
    set_debugger,
    reset_debugger,
    recording,
    debug_step,
)
from .debug_trace import trace_cell_calculations

__all__ = [
    # Materials and electrodes
    "ActiveMaterial",
    "CurrentCollector",
    "Separator",
    "Electrolyte",
    "ElectrodeComposite",
    "Electrode",
    # Cells
    "CellFormat",
    "Cell",
    "CylindricalCell",
    "PrismaticJellyrollCell",
    "PrismaticCinnamonrollCell",
    "PrismaticStackedCell",
    "PouchCell",
    # Property queries
    "thickness",
    "volume",
    "mass",
    "gravimetric_energy",
    "volumetric_energy",
    "mass_breakdown",
    # Uncertainty
    "UncertainValue",
    "UncertaintySource",
    "measurement",
    "as_uncertain",
    "nominal_value",
    "std_dev",
    # Database access
    "ACTIVE_MATERIALS",
    "get_active_material",
    "list_active_materials",
    "create_reference_pouch_cell",
    "create_reference_cylindrical_cell",
    # Config
    "CellCalculatorConfig",
    "DEFAULT_CONFIG",
    # Errors
    "CellModelError",
    "AmbiguousSpecification",
    "UnsupportedMaterial",
    "InvalidOperation",
    "GeometryInfeasible",
    # Debugger
    "CalculationDebugger",
    "get_debugger",
    "set_debugger",
    "reset_debugger",
    "recording",
    "debug_step",
    "trace_cell_calculations",
]
