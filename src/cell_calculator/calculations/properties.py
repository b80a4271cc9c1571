"""
Cell Property Queries
=====================

On-demand cell properties. Every query goes through the cell capability
interface (compute_area, compute_packaging_mass, compute_volume,
compute_thickness), so new formats only need to implement that interface.

Capacity, energy and area are computed once at construction and read
directly from the cell.
"""

from typing import TYPE_CHECKING

import pandas as pd

from .mass import calculate_cell_mass, calculate_mass_breakdown
from .energy import calculate_gravimetric_energy, calculate_volumetric_energy
from ..uncertainty import Quantity

if TYPE_CHECKING:
    from ..models.cell import Cell


def thickness(cell: "Cell") -> Quantity:
    """Cell thickness (cm)."""
    return cell.compute_thickness()


def volume(cell: "Cell") -> Quantity:
    """External cell volume (cm³)."""
    return cell.compute_volume()


def mass(cell: "Cell") -> Quantity:
    """Total cell mass (g)."""
    return calculate_cell_mass(cell)


def gravimetric_energy(cell: "Cell") -> Quantity:
    """Gravimetric energy density (Wh/kg)."""
    return calculate_gravimetric_energy(cell.energy, mass(cell))


def volumetric_energy(cell: "Cell") -> Quantity:
    """Volumetric energy density (Wh/L)."""
    return calculate_volumetric_energy(cell.energy, volume(cell))


def mass_breakdown(cell: "Cell") -> pd.DataFrame:
    """Mass by component with percentage of total (see calculate_mass_breakdown)."""
    return calculate_mass_breakdown(cell)
