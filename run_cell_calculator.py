#!/usr/bin/env python3
"""
Cell Calculator Launcher
========================

Launch script for the Cell Energy Calculator.

Builds the reference cells from the material database and prints
their summaries, mass breakdowns and a full calculation trace.

Usage:
    python run_cell_calculator.py            # reference pouch cell
    python run_cell_calculator.py cylindrical

Requirements:
    - Python 3.10+
    - scipy
    - pandas
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent))

from src.cell_calculator import (
    create_reference_pouch_cell,
    create_reference_cylindrical_cell,
    mass_breakdown,
    trace_cell_calculations,
)


REFERENCE_CELLS = {
    "pouch": create_reference_pouch_cell,
    "cylindrical": create_reference_cylindrical_cell,
}


def main():
    """Print the summary, mass breakdown and trace of a reference cell."""
    choice = sys.argv[1] if len(sys.argv) > 1 else "pouch"
    if choice not in REFERENCE_CELLS:
        print(f"Unknown reference cell '{choice}'. Choose from: {', '.join(REFERENCE_CELLS)}")
        sys.exit(1)

    print("=" * 60)
    print("Cell Energy Calculator")
    print("=" * 60)
    print()

    cell = REFERENCE_CELLS[choice]()
    print(cell.summary())
    print()

    breakdown = mass_breakdown(cell)
    print("Mass breakdown:")
    print(breakdown.to_string(index=False))
    print()

    debugger = trace_cell_calculations(cell)
    print(debugger.get_report())
    print()

    energy_density = debugger.result_of("E_g")
    low, high = energy_density.interval(2)
    print(f"Gravimetric energy: {energy_density} Wh/kg (2σ range {low:.0f} to {high:.0f})")


if __name__ == "__main__":
    main()
