"""
Capacity and Energy Calculations
================================

Calculations for cell capacity, energy and energy density:
- Capacity limited by the lower-capacity electrode
- Energy at the average potential difference
- Gravimetric (Wh/kg) and volumetric (Wh/L) energy density
"""

from typing import TYPE_CHECKING

from ..uncertainty import Quantity, as_uncertain, umin

if TYPE_CHECKING:
    from ..models.electrode import Electrode


def calculate_np_ratio(positive: "Electrode", negative: "Electrode") -> Quantity:
    """
    Calculate the n/p ratio (negative / positive areal capacity).

    Values above 1 mean the positive electrode limits capacity.
    """
    return negative.areal_cap / as_uncertain(positive.areal_cap)


def calculate_cell_capacity(
    positive: "Electrode",
    negative: "Electrode",
    lli_factor: Quantity,
    area: Quantity
) -> Quantity:
    """
    Calculate cell capacity.

    The electrode with the lower areal capacity limits the cell. Both faces
    of each electrode are coated, hence the factor 2; /1000 converts mAh to Ah.

        capacity = min(areal_cap+, areal_cap-) × lli × area × 2 / 1000

    Parameters:
    ----------
    positive, negative : Electrode
        Cell electrodes

    lli_factor : Quantity
        Capacity retained after first-cycle lithium inventory loss (0-1)

    area : Quantity
        Active area (cm²)

    Returns:
    -------
    Quantity
        Capacity (Ah)
    """
    limiting = umin(positive.areal_cap, negative.areal_cap)
    return limiting * lli_factor * area * 2 / 1000


def calculate_cell_energy(
    capacity: Quantity,
    positive: "Electrode",
    negative: "Electrode"
) -> Quantity:
    """
    Calculate cell energy.

    energy = capacity × (E+ - E-)

    Returns:
    -------
    Quantity
        Energy (Wh)
    """
    cell_potential = positive.active_material.avg_potential - negative.active_material.avg_potential
    return capacity * cell_potential


def calculate_gravimetric_energy(energy: Quantity, mass: Quantity) -> Quantity:
    """
    Calculate gravimetric energy density.

    Parameters:
    ----------
    energy : Quantity
        Cell energy (Wh)

    mass : Quantity
        Cell mass (g)

    Returns:
    -------
    Quantity
        Energy density (Wh/kg)
    """
    return 1000 * energy / as_uncertain(mass)


def calculate_volumetric_energy(energy: Quantity, volume: Quantity) -> Quantity:
    """
    Calculate volumetric energy density.

    Parameters:
    ----------
    energy : Quantity
        Cell energy (Wh)

    volume : Quantity
        External cell volume (cm³)

    Returns:
    -------
    Quantity
        Energy density (Wh/L)
    """
    return 1000 * energy / as_uncertain(volume)
