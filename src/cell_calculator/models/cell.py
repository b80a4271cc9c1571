"""
Cell Models
===========

Cell formats built from two electrodes, a separator and an electrolyte:

- CylindricalCell: spiral winding in a cylindrical can
- PrismaticJellyrollCell: flat winding, spiral axis parallel to the top plate
- PrismaticCinnamonrollCell: flat winding, spiral axis perpendicular to the top plate
- PrismaticStackedCell: stacked sheets in a prismatic can
- PouchCell: stacked sheets in a laminate pouch

Every format fits the jelly roll to its enclosure to get the active area,
then computes capacity and energy once at construction. Mass, thickness,
volume and energy density are derived on demand (see calculations.properties).

Each format implements the same capability interface:
compute_area, compute_packaging_mass, compute_volume, compute_thickness.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from .electrode import Electrode
from .materials import Separator, Electrolyte
from ..config import (
    CellCalculatorConfig,
    DEFAULT_CONFIG,
    DEFAULT_TAB_THICKNESS_CM,
    TAB_DENSITY_POSITIVE,
    TAB_DENSITY_NEGATIVE,
    WRAP_ALLOWANCE_CM,
)
from ..debugger import debug_step
from ..uncertainty import Quantity, promote_fields
from ..calculations.geometry import (
    calculate_stack_thickness,
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
from ..calculations.mass import (
    calculate_electrolyte_mass,
    calculate_cylindrical_can_mass,
    calculate_prismatic_can_mass,
    calculate_pouch_film_mass,
    calculate_tab_mass,
)
from ..calculations.energy import calculate_cell_capacity, calculate_cell_energy
from ..calculations.properties import mass, gravimetric_energy, volumetric_energy


class CellFormat(Enum):
    """Cell construction formats."""
    CYLINDRICAL = "cylindrical"
    PRISMATIC_JELLYROLL = "prismatic_jellyroll"
    PRISMATIC_CINNAMONROLL = "prismatic_cinnamonroll"
    PRISMATIC_STACKED = "prismatic_stacked"
    POUCH = "pouch"


@dataclass(frozen=True, kw_only=True)
class Cell(ABC):
    """
    Common cell definition.

    Attributes:
    ----------
    name : str
        Cell design name

    positive : Electrode
        Positive electrode (cathode)

    negative : Electrode
        Negative electrode (anode)

    separator : Separator
        Separator film

    electrolyte : Electrolyte
        Liquid electrolyte

    ecap_ratio : Quantity
        Electrolyte volume per unit capacity (mL/Ah)

    lli_factor : Quantity
        Fraction of capacity kept after first-cycle lithium loss (0-1)

    config : CellCalculatorConfig
        Calculation settings

    Computed at construction:
    ----------
    area : Quantity
        Active (jelly roll) area (cm²)

    capacity : Quantity
        Cell capacity (Ah)

    energy : Quantity
        Cell energy (Wh)
    """
    form_factor: ClassVar[CellFormat]

    name: str
    positive: Electrode
    negative: Electrode
    separator: Separator
    electrolyte: Electrolyte
    ecap_ratio: Quantity
    lli_factor: Quantity = 1.0
    config: CellCalculatorConfig = field(default=DEFAULT_CONFIG, repr=False, compare=False)

    area: Quantity = field(init=False, repr=False)
    capacity: Quantity = field(init=False)
    energy: Quantity = field(init=False)

    def __post_init__(self):
        """Validate inputs, then fit the jelly roll and compute capacity and energy."""
        valid, error = self.config.validate()
        if not valid:
            raise ValueError(f"Invalid configuration: {error}")
        promote_fields(self)
        self._validate()

        debug_step(
            category="Stack",
            description=f"Stack thickness ({self.name})",
            formula="s = cc+ + cc- + 2·comp+ + 2·comp- + 2·sep",
            variables={},
            result=self.stack_thickness,
            result_name="s",
            result_unit="cm",
        )

        area = self.compute_area()
        capacity = calculate_cell_capacity(self.positive, self.negative, self.lli_factor, area)
        energy = calculate_cell_energy(capacity, self.positive, self.negative)
        object.__setattr__(self, "area", area)
        object.__setattr__(self, "capacity", capacity)
        object.__setattr__(self, "energy", energy)

        debug_step(
            category="Geometry",
            description=f"Active area ({self.form_factor.value})",
            formula="",
            variables={},
            result=area,
            result_name="area",
            result_unit="cm²",
        )
        debug_step(
            category="Capacity",
            description="Cell capacity (limiting electrode)",
            formula="C = min(q+, q-) × lli × area × 2 / 1000",
            variables={
                "q+": self.positive.areal_cap,
                "q-": self.negative.areal_cap,
                "lli": self.lli_factor,
                "area": area,
            },
            result=capacity,
            result_name="capacity",
            result_unit="Ah",
        )
        debug_step(
            category="Capacity",
            description="Cell energy",
            formula="E = C × (E+ - E-)",
            variables={"C": capacity},
            result=energy,
            result_name="energy",
            result_unit="Wh",
        )

    def _validate(self):
        """Format-specific input checks (override as needed)."""

    # =========================================================================
    # Shared Quantities
    # =========================================================================

    @property
    def stack_thickness(self) -> Quantity:
        """Thickness of one stack repeat unit (cm)."""
        return calculate_stack_thickness(self.positive, self.negative, self.separator)

    @property
    def extra_negative_area(self) -> Quantity:
        """Area of negative electrode beyond the active area (cm²)."""
        return 0.0

    def compute_electrolyte_mass(self) -> Quantity:
        """Electrolyte mass (g)."""
        return calculate_electrolyte_mass(self.ecap_ratio, self.capacity, self.electrolyte.density)

    # =========================================================================
    # Capability Interface
    # =========================================================================

    @abstractmethod
    def compute_area(self) -> Quantity:
        """Active (jelly roll) area (cm²)."""

    @abstractmethod
    def compute_packaging_mass(self) -> Quantity:
        """Enclosure mass including hardware and extra mass (g)."""

    @abstractmethod
    def compute_volume(self) -> Quantity:
        """External cell volume (cm³)."""

    @abstractmethod
    def compute_thickness(self) -> Quantity:
        """Cell thickness (cm)."""

    def summary(self) -> str:
        """Return a formatted summary string."""
        return (
            f"{self.name}\n"
            f"  Format: {self.form_factor.value}\n"
            f"  {self.positive.active_material.name} cathode @ "
            f"{self.positive.areal_cap} mAh/cm²\n"
            f"  Capacity: {self.capacity} Ah, Energy: {self.energy} Wh\n"
            f"  Mass: {mass(self)} g\n"
            f"  Gravimetric Energy: {gravimetric_energy(self)} Wh/kg\n"
            f"  Volumetric Energy: {volumetric_energy(self)} Wh/L"
        )


# =============================================================================
# Cylindrical
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class CylindricalCell(Cell):
    """
    Cylindrical cell: a spiral jelly roll in a cylindrical can.

    Attributes:
    ----------
    diameter : Quantity
        Can outer diameter (cm)

    height : Quantity
        Can outer height (cm)

    can_thickness : Quantity
        Can wall thickness (cm)

    can_density : Quantity
        Can material density (g/cm³)

    void_diameter : Quantity
        Diameter of the mandrel void where winding starts (cm)

    headspace : Quantity
        Height above the roll for cap assembly (cm)

    extra_mass : Quantity
        Cap, tabs, tape and other hardware (g)
    """
    form_factor: ClassVar[CellFormat] = CellFormat.CYLINDRICAL

    diameter: Quantity
    height: Quantity
    can_thickness: Quantity
    can_density: Quantity
    void_diameter: Quantity
    headspace: Quantity
    extra_mass: Quantity = 0.0

    @property
    def turns(self) -> Quantity:
        """Number of turns in the jelly roll."""
        return calculate_cylindrical_turns(
            self.diameter, self.can_thickness, self.void_diameter, self.stack_thickness
        )

    def compute_area(self) -> Quantity:
        return calculate_cylindrical_area(
            self.diameter, self.height, self.can_thickness, self.void_diameter,
            self.headspace, self.stack_thickness, self.config,
        )

    def compute_packaging_mass(self) -> Quantity:
        return calculate_cylindrical_can_mass(
            self.diameter, self.height, self.can_thickness, self.can_density, self.extra_mass
        )

    def compute_volume(self) -> Quantity:
        return calculate_cylinder_volume(self.diameter, self.height)

    def compute_thickness(self) -> Quantity:
        # Set by the can, not by the roll
        return self.diameter


# =============================================================================
# Prismatic
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class PrismaticCell(Cell):
    """
    Common prismatic can definition.

    Attributes:
    ----------
    height : Quantity
        Can outer height (cm)

    width : Quantity
        Can outer width (cm)

    depth : Quantity
        Can outer depth, i.e. thickness (cm)

    can_thickness : Quantity
        Can wall thickness (cm)

    can_density : Quantity
        Can material density (g/cm³)

    term_clearance : Quantity
        Clearance for terminal connections (cm)

    n_rolls : int
        Number of rolls (or stacks) side by side in the can

    top_plate_mass : Quantity
        Top plate with terminals and vent (g)

    extra_mass : Quantity
        Other hardware (g)
    """
    height: Quantity
    width: Quantity
    depth: Quantity
    can_thickness: Quantity
    can_density: Quantity
    term_clearance: Quantity
    n_rolls: int = 1
    top_plate_mass: Quantity = 0.0
    extra_mass: Quantity = 0.0

    def _validate(self):
        if int(self.n_rolls) != self.n_rolls or self.n_rolls < 1:
            raise ValueError(f"n_rolls must be a positive integer, got {self.n_rolls}")

    def compute_packaging_mass(self) -> Quantity:
        return calculate_prismatic_can_mass(
            self.height, self.width, self.depth, self.can_thickness,
            self.can_density, self.top_plate_mass, self.extra_mass,
        )

    def compute_volume(self) -> Quantity:
        return calculate_box_volume(self.width, self.height, self.depth)

    def compute_thickness(self) -> Quantity:
        # Set by the can, not by the roll
        return self.depth


@dataclass(frozen=True, kw_only=True)
class PrismaticJellyrollCell(PrismaticCell):
    """
    Prismatic cell with flat-wound rolls, spiral axis parallel to the top plate.

    Terminals (bus bars) are at the sides, so term_clearance is taken from
    both ends of the width.

    Attributes:
    ----------
    headspace : Quantity
        Height above the rolls for the top plate (cm)
    """
    form_factor: ClassVar[CellFormat] = CellFormat.PRISMATIC_JELLYROLL

    headspace: Quantity = 0.0

    @property
    def roll_thickness(self) -> Quantity:
        """Depth available to each roll (cm)."""
        return calculate_roll_thickness(self.depth, self.can_thickness, self.n_rolls)

    @property
    def turns(self) -> Quantity:
        """Number of turns in each roll."""
        return calculate_jellyroll_turns(self.roll_thickness, self.stack_thickness)

    def compute_area(self) -> Quantity:
        return calculate_prismatic_jellyroll_area(
            self.height, self.width, self.depth, self.can_thickness, self.headspace,
            self.term_clearance, self.n_rolls, self.stack_thickness, self.config,
        )


@dataclass(frozen=True, kw_only=True)
class PrismaticCinnamonrollCell(PrismaticCell):
    """
    Prismatic cell with flat-wound rolls, spiral axis perpendicular to the top plate.

    Terminals sit on top, so term_clearance comes off the height once. The
    outer wrap allowance and two extra separator layers come off the roll.
    """
    form_factor: ClassVar[CellFormat] = CellFormat.PRISMATIC_CINNAMONROLL

    @property
    def roll_thickness(self) -> Quantity:
        """Depth available to each roll after the outer wrap (cm)."""
        return calculate_roll_thickness(
            self.depth, self.can_thickness, self.n_rolls, WRAP_ALLOWANCE_CM
        )

    @property
    def turns(self) -> Quantity:
        """Number of turns in each roll."""
        return calculate_cinnamonroll_turns(
            self.roll_thickness, self.stack_thickness, self.separator.thickness
        )

    def compute_area(self) -> Quantity:
        return calculate_prismatic_cinnamonroll_area(
            self.height, self.width, self.depth, self.can_thickness, self.term_clearance,
            self.n_rolls, self.stack_thickness, self.separator.thickness, self.config,
        )


@dataclass(frozen=True, kw_only=True)
class PrismaticStackedCell(PrismaticCell):
    """
    Prismatic cell with stacked electrode sheets.

    No winding: the layer count per stack follows directly from the can
    depth and is floored to whole layers.

    Attributes:
    ----------
    headspace : Quantity
        Height above the stacks for the top plate (cm)
    """
    form_factor: ClassVar[CellFormat] = CellFormat.PRISMATIC_STACKED

    headspace: Quantity = 0.0

    @property
    def layers(self) -> Quantity:
        """Fractional number of stack layers per stack."""
        return calculate_stacked_layers(
            self.depth, self.can_thickness, self.n_rolls,
            self.negative.thickness, self.separator.thickness, self.stack_thickness,
        )

    def compute_area(self) -> Quantity:
        return calculate_prismatic_stacked_area(
            self.height, self.width, self.headspace, self.term_clearance,
            self.n_rolls, self.layers,
        )


# =============================================================================
# Pouch
# =============================================================================

@dataclass(frozen=True, kw_only=True)
class PouchCell(Cell):
    """
    Pouch cell: rectangular stacked sheets in a laminate pouch with tabs.

    Not constrained by a can: the layer count is an input and the thickness
    is an output.

    Attributes:
    ----------
    height : Quantity
        Electrode sheet height (cm)

    width : Quantity
        Electrode sheet width (cm)

    n_layers : Quantity
        Number of stack repeat units

    pouch_thickness : Quantity
        Laminate thickness (cm)

    pouch_density : Quantity
        Laminate density (g/cm³)

    pouch_clearance : Quantity
        Sealing margin added to width and height (cm)

    tab_height, tab_width : Quantity
        Tab dimensions outside the electrode area (cm)

    tab_thickness : Quantity
        Tab thickness (cm)

    tab_density_positive, tab_density_negative : Quantity
        Tab densities, Al and Ni-plated Cu by default (g/cm³)

    extra_mass : Quantity
        Tape, sealant and other hardware (g)
    """
    form_factor: ClassVar[CellFormat] = CellFormat.POUCH

    height: Quantity
    width: Quantity
    n_layers: Quantity
    pouch_thickness: Quantity
    pouch_density: Quantity
    pouch_clearance: Quantity
    tab_height: Quantity
    tab_width: Quantity
    tab_thickness: Quantity = DEFAULT_TAB_THICKNESS_CM
    tab_density_positive: Quantity = TAB_DENSITY_POSITIVE
    tab_density_negative: Quantity = TAB_DENSITY_NEGATIVE
    extra_mass: Quantity = 0.0

    @property
    def extra_negative_area(self) -> Quantity:
        """The stack ends on one extra double-sided negative electrode."""
        return self.width * self.height

    def compute_area(self) -> Quantity:
        return calculate_pouch_area(self.n_layers, self.width, self.height)

    def compute_packaging_mass(self) -> Quantity:
        film = calculate_pouch_film_mass(
            self.width, self.height, self.pouch_thickness,
            self.pouch_clearance, self.pouch_density,
        )
        tabs = (
            calculate_tab_mass(self.tab_height, self.tab_width, self.tab_thickness,
                               self.pouch_clearance, self.tab_density_positive)
            + calculate_tab_mass(self.tab_height, self.tab_width, self.tab_thickness,
                                 self.pouch_clearance, self.tab_density_negative)
        )
        return film + tabs + self.extra_mass

    def compute_volume(self) -> Quantity:
        return calculate_pouch_volume(
            self.width, self.height, self.pouch_clearance, self.tab_height,
            self.compute_thickness(),
        )

    def compute_thickness(self) -> Quantity:
        return calculate_pouch_thickness(
            self.n_layers, self.stack_thickness, self.negative.thickness, self.pouch_thickness
        )
