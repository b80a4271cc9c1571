"""
Mass Calculations
=================

Mass model for a cell:
- Stack mass per unit area (electrodes + separators)
- Jelly roll mass (stack areal mass × area, plus any extra electrode)
- Electrolyte mass from the electrolyte-to-capacity ratio
- Enclosure mass per format (can, top plate, pouch film, tabs)
- Component breakdown as a pandas DataFrame

cell mass = jelly roll + electrolyte + packaging

All masses in g, areal masses in g/cm².
"""

import math
from typing import TYPE_CHECKING

import pandas as pd

from ..uncertainty import Quantity

if TYPE_CHECKING:
    from ..models.cell import Cell
    from ..models.electrode import Electrode
    from ..models.materials import Separator


# Row labels of the mass breakdown, in display order
BREAKDOWN_COMPONENTS = (
    "+ve cc",
    "+ve composite",
    "-ve cc",
    "-ve composite",
    "separator",
    "electrolyte",
    "packaging",
)


# =============================================================================
# Stack and Jelly Roll
# =============================================================================

def calculate_stack_areal_mass(
    positive: "Electrode",
    negative: "Electrode",
    separator: "Separator"
) -> Quantity:
    """
    Calculate the mass per unit area of one stack repeat unit.

    Two double-sided electrodes plus two separator layers.

    Returns:
    -------
    Quantity
        Stack areal mass (g/cm²)
    """
    return positive.areal_mass + negative.areal_mass + (2 * separator.areal_mass)


def calculate_jellyroll_mass(cell: "Cell") -> Quantity:
    """
    Calculate the mass of the wound or stacked electrode assembly.

    Stack areal mass times active area, plus any extra negative electrode
    the format needs (pouch stacks end on a negative electrode).

    Returns:
    -------
    Quantity
        Jelly roll mass (g)
    """
    stack_mass = calculate_stack_areal_mass(cell.positive, cell.negative, cell.separator) * cell.area
    extra_area = cell.extra_negative_area
    if extra_area:
        stack_mass = stack_mass + (cell.negative.areal_mass * extra_area)
    return stack_mass


def calculate_electrolyte_mass(
    ecap_ratio: Quantity,
    capacity: Quantity,
    electrolyte_density: Quantity
) -> Quantity:
    """
    Calculate electrolyte mass.

    mass = ecap_ratio (mL/Ah) × capacity (Ah) × density (g/mL)
    """
    return ecap_ratio * capacity * electrolyte_density


# =============================================================================
# Enclosures
# =============================================================================

def calculate_cylindrical_can_mass(
    diameter: Quantity,
    height: Quantity,
    can_thickness: Quantity,
    can_density: Quantity,
    extra_mass: Quantity = 0.0
) -> Quantity:
    """
    Calculate the mass of a cylindrical can.

    Can volume is the wall annulus over the full height plus two end discs:
        V = (π(D/2)² - π(D/2 - c)²) × H + 2π(D/2)² × c

    Parameters:
    ----------
    extra_mass : Quantity
        Lump mass for cap assembly, tabs, tape and other hardware (g)

    Returns:
    -------
    Quantity
        Can mass including extra mass (g)
    """
    radius = diameter / 2
    wall_volume = ((math.pi * radius ** 2) - (math.pi * (radius - can_thickness) ** 2)) * height
    end_volume = 2 * math.pi * radius ** 2 * can_thickness
    return ((wall_volume + end_volume) * can_density) + extra_mass


def calculate_prismatic_can_mass(
    height: Quantity,
    width: Quantity,
    depth: Quantity,
    can_thickness: Quantity,
    can_density: Quantity,
    top_plate_mass: Quantity,
    extra_mass: Quantity = 0.0
) -> Quantity:
    """
    Calculate the mass of a prismatic can with its top plate.

    Can volume is the base plus the two broad and two narrow side walls:
        V = (W·d + (H - 2c)(W - 2c)·2 + (H - 2c)·d·2) × c

    Returns:
    -------
    Quantity
        Can + top plate + extra mass (g)
    """
    inner_height = height - (2 * can_thickness)
    can_volume = (
        (width * depth)
        + (inner_height * (width - (2 * can_thickness)) * 2)
        + (inner_height * depth * 2)
    ) * can_thickness
    return (can_volume * can_density) + top_plate_mass + extra_mass


def calculate_pouch_film_mass(
    width: Quantity,
    height: Quantity,
    pouch_thickness: Quantity,
    pouch_clearance: Quantity,
    pouch_density: Quantity
) -> Quantity:
    """
    Calculate the mass of the pouch laminate (both faces).

    mass = t × (W + clearance) × (H + clearance) × ρ × 2
    """
    return pouch_thickness * (width + pouch_clearance) * (height + pouch_clearance) * pouch_density * 2


def calculate_tab_mass(
    tab_height: Quantity,
    tab_width: Quantity,
    tab_thickness: Quantity,
    pouch_clearance: Quantity,
    density: Quantity
) -> Quantity:
    """
    Calculate the mass of one terminal tab.

    The tab runs through the sealing clearance:
        mass = (tab_height + clearance) × tab_width × tab_thickness × ρ
    """
    return (tab_height + pouch_clearance) * tab_width * tab_thickness * density


# =============================================================================
# Cell Totals
# =============================================================================

def calculate_cell_mass(cell: "Cell") -> Quantity:
    """
    Calculate total cell mass.

    mass = jelly roll + electrolyte + packaging

    Returns:
    -------
    Quantity
        Cell mass (g)
    """
    return (
        calculate_jellyroll_mass(cell)
        + cell.compute_electrolyte_mass()
        + cell.compute_packaging_mass()
    )


def calculate_mass_breakdown(cell: "Cell") -> pd.DataFrame:
    """
    Break the cell mass down by component.

    Components follow the mass model exactly, so the percentages sum to 100.
    The extra negative electrode of a pouch cell is counted in the negative
    current collector and composite rows.

    Returns:
    -------
    pd.DataFrame
        Columns: component, mass (g), percentage (% of cell mass).
        Mass and percentage hold UncertainValues.
    """
    area = cell.area
    negative_area = area + cell.extra_negative_area

    masses = (
        cell.positive.current_collector.areal_mass * area,
        cell.positive.composite.areal_mass * area * 2,
        cell.negative.current_collector.areal_mass * negative_area,
        cell.negative.composite.areal_mass * negative_area * 2,
        cell.separator.areal_mass * area * 2,
        cell.compute_electrolyte_mass(),
        cell.compute_packaging_mass(),
    )
    total = calculate_cell_mass(cell)

    return pd.DataFrame({
        "component": list(BREAKDOWN_COMPONENTS),
        "mass": list(masses),
        "percentage": [100 * component / total for component in masses],
    })
