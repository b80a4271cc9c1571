"""
Material Models
===============

Flat records for the materials a cell is built from: active materials,
current collectors, separators and electrolytes.

Any numeric field may be a plain float or an UncertainValue. Plain floats are
stored as exact UncertainValues. Materials are immutable and meant to be
shared: reusing the same ActiveMaterial in two electrodes reuses the same
uncertainty sources, so the results stay correlated.
"""

from dataclasses import dataclass
from typing import Optional

from ..config import (
    COLLECTOR_DENSITIES,
    LIPF6_MASS_FRAC_PER_MOLAR,
    EC_DEC_DENSITY_SLOPE,
    EC_DEC_DENSITY_INTERCEPT,
)
from ..exceptions import AmbiguousSpecification, UnsupportedMaterial
from ..uncertainty import Quantity, promote_fields


@dataclass(frozen=True)
class ActiveMaterial:
    """
    Electrochemically active material.

    Attributes:
    ----------
    name : str
        Material name (e.g., "LFP", "Graphite")

    specific_capacity : Quantity
        Reversible specific capacity (mAh/g)

    avg_potential : Quantity
        Average potential vs. Li/Li+ (V)
    """
    name: str
    specific_capacity: Quantity
    avg_potential: Quantity

    def __post_init__(self):
        promote_fields(self)


@dataclass(frozen=True)
class CurrentCollector:
    """
    Current collector foil.

    For "Al" and "Cu" the density may be omitted and is filled in from
    COLLECTOR_DENSITIES. Any other foil needs an explicit density.

    Attributes:
    ----------
    name : str
        Foil material ("Al", "Cu", or any name with explicit density)

    thickness : Quantity
        Foil thickness (cm)

    density : Quantity, optional
        Foil density (g/cm³)
    """
    name: str
    thickness: Quantity
    density: Optional[Quantity] = None

    def __post_init__(self):
        if self.density is None:
            if self.name not in COLLECTOR_DENSITIES:
                raise UnsupportedMaterial(
                    f"Current collector '{self.name}' has no built-in density; "
                    f"pass density explicitly or use one of {sorted(COLLECTOR_DENSITIES)}"
                )
            object.__setattr__(self, "density", COLLECTOR_DENSITIES[self.name])
        promote_fields(self)

    @property
    def areal_mass(self) -> Quantity:
        """Foil mass per unit area (g/cm²)."""
        return self.thickness * self.density


@dataclass(frozen=True)
class Separator:
    """
    Separator film.

    Attributes:
    ----------
    name : str
        Separator name (e.g., "PE 20um")

    thickness : Quantity
        Film thickness (cm)

    porosity : Quantity
        Void fraction. Stored for reference, not used by any calculation.

    density : Quantity
        Effective density of the porous film (g/cm³), not the bulk polymer
    """
    name: str
    thickness: Quantity
    porosity: Quantity
    density: Quantity

    def __post_init__(self):
        promote_fields(self)

    @property
    def areal_mass(self) -> Quantity:
        """Film mass per unit area (g/cm²)."""
        return self.thickness * self.density


@dataclass(frozen=True)
class Electrolyte:
    """
    Liquid electrolyte.

    For LiPF6 with a known concentration the salt mass fraction is derived
    (0.1222 per mol/L). For LiPF6 in EC:DEC the density is also derived from
    the salt mass fraction when not given. Every other combination needs an
    explicit density.

    Attributes:
    ----------
    salt : str
        Salt name (e.g., "LiPF6")

    solvent : str
        Solvent blend (e.g., "EC:DEC")

    concentration : Quantity, optional
        Salt concentration (mol/L)

    density : Quantity, optional
        Solution density (g/cm³)

    salt_mass_frac : Quantity, optional
        Salt mass fraction (dimensionless)
    """
    salt: str
    solvent: str
    concentration: Optional[Quantity] = None
    density: Optional[Quantity] = None
    salt_mass_frac: Optional[Quantity] = None

    def __post_init__(self):
        promote_fields(self)
        if self.salt == "LiPF6" and self.concentration is not None:
            salt_mass_frac = LIPF6_MASS_FRAC_PER_MOLAR * self.concentration
            object.__setattr__(self, "salt_mass_frac", salt_mass_frac)
            if self.density is None and self.solvent == "EC:DEC":
                density = EC_DEC_DENSITY_SLOPE * salt_mass_frac + EC_DEC_DENSITY_INTERCEPT
                object.__setattr__(self, "density", density)

        if self.density is None:
            raise AmbiguousSpecification(
                f"Cannot derive density for {self.salt} in {self.solvent}; "
                "pass density explicitly"
            )
