"""
Cell Calculator Calculations Module
===================================

Pure functions for cell calculations.
Lengths in cm, masses in g, capacity in Ah, energy in Wh.
"""

from .geometry import (
    calculate_stack_thickness,
    calculate_spiral_length,
    calculate_cylindrical_turns,
    calculate_cylindrical_area,
    calculate_roll_thickness,
    calculate_jellyroll_turns,
    calculate_prismatic_jellyroll_area,
    calculate_cinnamonroll_turns,
    calculate_prismatic_cinnamonroll_area,
    calculate_stacked_layers,
    calculate_prismatic_stacked_area,
    calculate_pouch_area,
    calculate_pouch_thickness,
    calculate_cylinder_volume,
    calculate_box_volume,
    calculate_pouch_volume,
)

from .mass import (
    calculate_stack_areal_mass,
    calculate_jellyroll_mass,
    calculate_electrolyte_mass,
    calculate_cylindrical_can_mass,
    calculate_prismatic_can_mass,
    calculate_pouch_film_mass,
    calculate_tab_mass,
    calculate_cell_mass,
    calculate_mass_breakdown,
)

from .energy import (
    calculate_np_ratio,
    calculate_cell_capacity,
    calculate_cell_energy,
    calculate_gravimetric_energy,
    calculate_volumetric_energy,
)

from .properties import (
    thickness,
    volume,
    mass,
    gravimetric_energy,
    volumetric_energy,
    mass_breakdown,
)

__all__ = [
    # Geometry
    "calculate_stack_thickness",
    "calculate_spiral_length",
    "calculate_cylindrical_turns",
    "calculate_cylindrical_area",
    "calculate_roll_thickness",
    "calculate_jellyroll_turns",
    "calculate_prismatic_jellyroll_area",
    "calculate_cinnamonroll_turns",
    "calculate_prismatic_cinnamonroll_area",
    "calculate_stacked_layers",
    "calculate_prismatic_stacked_area",
    "calculate_pouch_area",
    "calculate_pouch_thickness",
    "calculate_cylinder_volume",
    "calculate_box_volume",
    "calculate_pouch_volume",
    # Mass
    "calculate_stack_areal_mass",
    "calculate_jellyroll_mass",
    "calculate_electrolyte_mass",
    "calculate_cylindrical_can_mass",
    "calculate_prismatic_can_mass",
    "calculate_pouch_film_mass",
    "calculate_tab_mass",
    "calculate_cell_mass",
    "calculate_mass_breakdown",
    # Energy
    "calculate_np_ratio",
    "calculate_cell_capacity",
    "calculate_cell_energy",
    "calculate_gravimetric_energy",
    "calculate_volumetric_energy",
    # Property queries
    "thickness",
    "volume",
    "mass",
    "gravimetric_energy",
    "volumetric_energy",
    "mass_breakdown",
]
