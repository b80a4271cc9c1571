"""
Geometry Calculations
=====================

Stack and enclosure geometry for cell formats:
- Stack thickness (one repeat unit of the jelly roll)
- Archimedes spiral length (numerical quadrature)
- Turns / layers that fit in an enclosure
- Active (jelly roll) area per cell format
- Thickness and external volume

Wound formats solve an implicit packing problem: how many turns of a
fixed-pitch stack fit in the enclosure. The wound length then comes from
integrating the spiral arc length. Stacked and pouch formats have a direct
layer count.

All lengths in cm, areas in cm², volumes in cm³.
"""

import math
from typing import Tuple, TYPE_CHECKING

from scipy import integrate

from ..config import CellCalculatorConfig, DEFAULT_CONFIG, WRAP_ALLOWANCE_CM
from ..debugger import debug_step
from ..exceptions import GeometryInfeasible
from ..uncertainty import Quantity, UncertainValue, as_uncertain, nominal_value

if TYPE_CHECKING:
    from ..models.electrode import Electrode
    from ..models.materials import Separator


TWO_PI = 2.0 * math.pi


# =============================================================================
# Stack
# =============================================================================

def calculate_stack_thickness(
    positive: "Electrode",
    negative: "Electrode",
    separator: "Separator"
) -> Quantity:
    """
    Calculate the thickness of one stack repeat unit.

    Two current collectors, two coatings of each electrode, two separators.

    Returns:
    -------
    Quantity
        Stack thickness (cm)
    """
    return (
        positive.current_collector.thickness
        + negative.current_collector.thickness
        + (2 * positive.composite.thickness)
        + (2 * negative.composite.thickness)
        + (2 * separator.thickness)
    )


# =============================================================================
# Spiral Length
# =============================================================================

def _quad(func, upper: float, config: CellCalculatorConfig) -> Tuple[float, float]:
    """Integrate func over [0, upper] with the configured tolerances."""
    return integrate.quad(
        func, 0.0, upper,
        epsabs=config.quad_epsabs,
        epsrel=config.quad_epsrel,
        limit=config.quad_limit,
    )


def calculate_spiral_length(
    start_radius: Quantity,
    pitch: Quantity,
    end_angle: Quantity,
    config: CellCalculatorConfig = DEFAULT_CONFIG
) -> Tuple[UncertainValue, float]:
    """
    Calculate the arc length of an Archimedes spiral.

    r(θ) = start_radius + pitch × θ / 2π, integrated from 0 to end_angle:

        L = ∫ sqrt(r(θ)² + (pitch / 2π)²) dθ

    The integral is evaluated at nominal values. Its uncertainty record is
    the first-order linearization in each input:

        dL/d(end_angle)    = integrand at end_angle
        dL/d(start_radius) = ∫ r / f dθ
        dL/d(pitch)        = ∫ (r θ + pitch / 2π) / (2π f) dθ

    Parameters:
    ----------
    start_radius : Quantity
        Radius where winding starts (cm), 0 for a centerless spiral

    pitch : Quantity
        Radial growth per turn (cm), i.e. the stack thickness

    end_angle : Quantity
        Total winding angle (rad), 2π × turns

    config : CellCalculatorConfig
        Integration tolerances

    Returns:
    -------
    Tuple[UncertainValue, float]
        (spiral length in cm, quadrature error bound in cm)
    """
    r0 = nominal_value(start_radius)
    p = nominal_value(pitch)
    upper = nominal_value(end_angle)
    k = p / TWO_PI

    def radius(theta: float) -> float:
        return r0 + k * theta

    def integrand(theta: float) -> float:
        return math.hypot(radius(theta), k)

    length, error = _quad(integrand, upper, config)
    debug_step(
        category="Geometry",
        description="Archimedes spiral length (quadrature)",
        formula="L = ∫ sqrt((r0 + pθ/2π)² + (p/2π)²) dθ, θ = 0..T",
        variables={"r0": r0, "p": p, "T": upper},
        result=length,
        result_name="L_spiral",
        result_unit="cm",
        comment=f"quad error bound {error:.3g} cm",
    )

    terms = [(end_angle, integrand(upper))]
    if isinstance(start_radius, UncertainValue) and not start_radius.is_exact:
        d_radius, _ = _quad(lambda t: radius(t) / integrand(t), upper, config)
        terms.append((start_radius, d_radius))
    if isinstance(pitch, UncertainValue) and not pitch.is_exact:
        d_pitch, _ = _quad(
            lambda t: (radius(t) * t + k) / (TWO_PI * integrand(t)), upper, config
        )
        terms.append((pitch, d_pitch))

    return UncertainValue.from_linearization(length, terms), error


# =============================================================================
# Feasibility
# =============================================================================

def _require_positive(value: Quantity, what: str, allow_zero: bool = False):
    """Raise GeometryInfeasible unless value (nominal) is positive."""
    nominal = nominal_value(value)
    if nominal < 0 or (nominal == 0 and not allow_zero):
        raise GeometryInfeasible(f"{what} must be positive, got {nominal:.6g}")


# =============================================================================
# Cylindrical
# =============================================================================

def calculate_cylindrical_turns(
    diameter: Quantity,
    can_thickness: Quantity,
    void_diameter: Quantity,
    stack_thickness: Quantity
) -> Quantity:
    """
    Calculate the number of turns in a cylindrical jelly roll.

    turns = ((D - 2c - s - v) / 2) / s

    Raises GeometryInfeasible when the stack is thicker than the radial
    build between mandrel void and can wall, (D - 2c - v) / 2.
    """
    radial_build = (diameter - (2 * can_thickness) - void_diameter) / 2
    _require_positive(radial_build, "Radial build (D - 2c - void) / 2")
    if nominal_value(stack_thickness) > nominal_value(radial_build):
        raise GeometryInfeasible(
            f"Stack thickness {nominal_value(stack_thickness):.6g} cm exceeds the "
            f"radial build {nominal_value(radial_build):.6g} cm of the can"
        )
    build = (diameter - (2 * can_thickness) - stack_thickness - void_diameter) / 2
    turns = build / as_uncertain(stack_thickness)
    _require_positive(turns, "Number of turns")
    debug_step(
        category="Geometry",
        description="Turns in the cylindrical jelly roll",
        formula="turns = ((D - 2c - s - v) / 2) / s",
        variables={"D": diameter, "c": can_thickness, "s": stack_thickness, "v": void_diameter},
        result=turns,
        result_name="turns",
    )
    return turns


def calculate_cylindrical_area(
    diameter: Quantity,
    height: Quantity,
    can_thickness: Quantity,
    void_diameter: Quantity,
    headspace: Quantity,
    stack_thickness: Quantity,
    config: CellCalculatorConfig = DEFAULT_CONFIG
) -> Quantity:
    """
    Calculate the jelly roll area of a cylindrical cell.

    The spiral starts at the mandrel void radius and grows by one stack
    thickness per turn. Area is spiral length times the wound height.

    Returns:
    -------
    Quantity
        Jelly roll area (cm²)
    """
    wound_height = height - headspace - (2 * can_thickness)
    _require_positive(wound_height, "Wound height (H - headspace - 2c)")

    turns = calculate_cylindrical_turns(diameter, can_thickness, void_diameter, stack_thickness)
    length, _ = calculate_spiral_length(void_diameter / 2, stack_thickness, turns * TWO_PI, config)
    return length * wound_height


# =============================================================================
# Prismatic
# =============================================================================

def calculate_roll_thickness(
    depth: Quantity,
    can_thickness: Quantity,
    n_rolls: int,
    wrap_allowance: Quantity = 0.0
) -> Quantity:
    """
    Calculate the depth available to each roll in a prismatic can.

    roll = (depth - 2c - wrap) / n_rolls
    """
    roll_thickness = (depth - (2 * can_thickness) - wrap_allowance) / as_uncertain(n_rolls)
    _require_positive(roll_thickness, "Roll thickness")
    return roll_thickness


def calculate_jellyroll_turns(roll_thickness: Quantity, stack_thickness: Quantity) -> Quantity:
    """
    Calculate turns of a flat-wound roll.

    turns = ((roll - s) / 2) / s
    """
    turns = ((roll_thickness - stack_thickness) / 2) / as_uncertain(stack_thickness)
    _require_positive(turns, "Number of turns")
    debug_step(
        category="Geometry",
        description="Turns in the flat-wound roll",
        formula="turns = ((roll - s) / 2) / s",
        variables={"roll": roll_thickness, "s": stack_thickness},
        result=turns,
        result_name="turns",
    )
    return turns


def calculate_prismatic_jellyroll_area(
    height: Quantity,
    width: Quantity,
    depth: Quantity,
    can_thickness: Quantity,
    headspace: Quantity,
    term_clearance: Quantity,
    n_rolls: int,
    stack_thickness: Quantity,
    config: CellCalculatorConfig = DEFAULT_CONFIG
) -> Quantity:
    """
    Calculate the jelly roll area of a prismatic cell with vertical winding.

    The spiral axis is parallel to the top plate; terminals are at the sides.
    Each roll is a centerless spiral plus straight runs along the height:

        area = (L + (H - headspace - roll) × 2 × floor(turns))
               × (W - 2 × term_clearance) × n_rolls

    Returns:
    -------
    Quantity
        Jelly roll area (cm²)
    """
    wound_width = width - (term_clearance * 2)
    _require_positive(wound_width, "Wound width (W - 2 × term clearance)")

    roll_thickness = calculate_roll_thickness(depth, can_thickness, n_rolls)
    turns = calculate_jellyroll_turns(roll_thickness, stack_thickness)
    flat_run = height - headspace - roll_thickness
    _require_positive(flat_run, "Flat run (H - headspace - roll)", allow_zero=True)

    length, _ = calculate_spiral_length(0.0, stack_thickness, turns * TWO_PI, config)
    return (length + (flat_run * 2 * math.floor(turns))) * wound_width * n_rolls


def calculate_cinnamonroll_turns(
    roll_thickness: Quantity,
    stack_thickness: Quantity,
    separator_thickness: Quantity
) -> Quantity:
    """
    Calculate turns of a horizontally wound roll.

    Two extra separator layers wrap the outside of the roll:
    turns = ((roll - s - 2 × sep) / 2) / s
    """
    unwound = (roll_thickness - stack_thickness - (2 * separator_thickness)) / 2
    turns = unwound / as_uncertain(stack_thickness)
    _require_positive(turns, "Number of turns")
    debug_step(
        category="Geometry",
        description="Turns in the horizontally wound roll",
        formula="turns = ((roll - s - 2 sep) / 2) / s",
        variables={"roll": roll_thickness, "s": stack_thickness, "sep": separator_thickness},
        result=turns,
        result_name="turns",
    )
    return turns


def calculate_prismatic_cinnamonroll_area(
    height: Quantity,
    width: Quantity,
    depth: Quantity,
    can_thickness: Quantity,
    term_clearance: Quantity,
    n_rolls: int,
    stack_thickness: Quantity,
    separator_thickness: Quantity,
    config: CellCalculatorConfig = DEFAULT_CONFIG
) -> Quantity:
    """
    Calculate the jelly roll area of a prismatic cell with horizontal winding.

    The spiral axis is perpendicular to the top plate; terminals sit on top.
    Straight runs lie along the width and the wound height is H - clearance:

        area = (L + (W - roll) × 2 × floor(turns)) × (H - term_clearance) × n_rolls

    Returns:
    -------
    Quantity
        Jelly roll area (cm²)
    """
    wound_height = height - term_clearance
    _require_positive(wound_height, "Wound height (H - term clearance)")

    roll_thickness = calculate_roll_thickness(depth, can_thickness, n_rolls, WRAP_ALLOWANCE_CM)
    turns = calculate_cinnamonroll_turns(roll_thickness, stack_thickness, separator_thickness)
    flat_run = width - roll_thickness
    _require_positive(flat_run, "Flat run (W - roll)", allow_zero=True)

    length, _ = calculate_spiral_length(0.0, stack_thickness, turns * TWO_PI, config)
    return (length + (flat_run * 2 * math.floor(turns))) * wound_height * n_rolls


def calculate_stacked_layers(
    depth: Quantity,
    can_thickness: Quantity,
    n_rolls: int,
    negative_thickness: Quantity,
    separator_thickness: Quantity,
    stack_thickness: Quantity
) -> Quantity:
    """
    Calculate how many stack units fit in each stack of a prismatic can.

    One extra negative electrode and two separators close each stack:
    layers = ((depth - 2c - wrap) / n_rolls - neg - 2 × sep) / s

    Returns:
    -------
    Quantity
        Fractional layer count (floor it to get whole layers)
    """
    available = calculate_roll_thickness(depth, can_thickness, n_rolls, WRAP_ALLOWANCE_CM)
    spacing = available - negative_thickness - (2 * separator_thickness)
    layers = spacing / as_uncertain(stack_thickness)
    debug_step(
        category="Geometry",
        description="Stack layers per stack",
        formula="layers = ((depth - 2c - wrap) / n_rolls - neg - 2 sep) / s",
        variables={"available": available, "neg": negative_thickness,
                   "sep": separator_thickness, "s": stack_thickness},
        result=layers,
        result_name="layers",
        comment="floored to whole layers for the area",
    )
    if math.floor(nominal_value(layers)) < 1:
        raise GeometryInfeasible(
            f"Can depth fits {nominal_value(layers):.3g} stack layers; at least one is required"
        )
    return layers


def calculate_prismatic_stacked_area(
    height: Quantity,
    width: Quantity,
    headspace: Quantity,
    term_clearance: Quantity,
    n_rolls: int,
    layers: Quantity
) -> Quantity:
    """
    Calculate the active area of a stacked prismatic cell.

    area = (H - headspace) × (W - 2 × term_clearance) × floor(layers) × n_rolls
    """
    sheet_height = height - headspace
    sheet_width = width - (term_clearance * 2)
    _require_positive(sheet_height, "Sheet height (H - headspace)")
    _require_positive(sheet_width, "Sheet width (W - 2 × term clearance)")
    return sheet_height * sheet_width * math.floor(layers) * n_rolls


# =============================================================================
# Pouch
# =============================================================================

def calculate_pouch_area(n_layers: Quantity, width: Quantity, height: Quantity) -> Quantity:
    """
    Calculate the active area of a pouch cell.

    area = n_layers × W × H
    """
    _require_positive(n_layers, "Number of layers")
    _require_positive(width, "Electrode width")
    _require_positive(height, "Electrode height")
    return n_layers * width * height


def calculate_pouch_thickness(
    n_layers: Quantity,
    stack_thickness: Quantity,
    negative_thickness: Quantity,
    pouch_thickness: Quantity
) -> Quantity:
    """
    Calculate the thickness of a pouch cell.

    The layer count sets the thickness: n_layers stack units, one extra
    negative electrode, and the pouch film on both faces.
    """
    return (n_layers * stack_thickness) + negative_thickness + (2 * pouch_thickness)


# =============================================================================
# External Volume
# =============================================================================

def calculate_cylinder_volume(diameter: Quantity, height: Quantity) -> Quantity:
    """External volume of a cylindrical can (cm³)."""
    return math.pi * (diameter / 2) ** 2 * height


def calculate_box_volume(width: Quantity, height: Quantity, depth: Quantity) -> Quantity:
    """External volume of a prismatic can (cm³)."""
    return width * height * depth


def calculate_pouch_volume(
    width: Quantity,
    height: Quantity,
    pouch_clearance: Quantity,
    tab_height: Quantity,
    thickness: Quantity
) -> Quantity:
    """
    External volume of a pouch cell (cm³).

    Footprint includes the sealing clearance and the tabs.
    """
    return (width + pouch_clearance) * (height + pouch_clearance + tab_height) * thickness
