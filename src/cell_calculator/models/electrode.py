"""
Electrode Models
================

An electrode is a composite coating (active material + binder + carbon)
applied to both faces of a current collector.

A composite can be specified two ways:
- From areal capacity, active fraction and density (thickness and
  loading are derived), or
- From thickness, active loading and active fraction (areal capacity and
  density are derived).

Exactly one of the two must be complete.
"""

from dataclasses import dataclass
from typing import Optional

from .materials import ActiveMaterial, CurrentCollector
from ..exceptions import AmbiguousSpecification
from ..uncertainty import Quantity, promote_fields


@dataclass(frozen=True)
class ElectrodeComposite:
    """
    Electrode coating on one face of a current collector.

    Pass either (areal_cap, density) or (thickness, active_load) together
    with active_frac. The missing pair is computed in __post_init__.

    Attributes:
    ----------
    active_material : ActiveMaterial
        Active material in the coating

    active_frac : Quantity
        Mass fraction of active material (0-1)

    thickness : Quantity
        Coating thickness (cm)

    areal_cap : Quantity
        Areal capacity (mAh/cm²)

    active_load : Quantity
        Active material loading (g/cm²)

    density : Quantity
        Coating density (g/cm³)
    """
    active_material: ActiveMaterial
    active_frac: Quantity
    thickness: Optional[Quantity] = None
    areal_cap: Optional[Quantity] = None
    active_load: Optional[Quantity] = None
    density: Optional[Quantity] = None

    def __post_init__(self):
        # Plain zeros must fail division as InvalidOperation
        promote_fields(self)
        capacity_set = self.areal_cap is not None and self.density is not None
        loading_set = self.thickness is not None and self.active_load is not None
        spec_cap = self.active_material.specific_capacity

        if capacity_set and self.thickness is None and self.active_load is None:
            thickness = self.areal_cap / (self.active_frac * spec_cap * self.density)
            active_load = self.areal_cap / spec_cap
            object.__setattr__(self, "thickness", thickness)
            object.__setattr__(self, "active_load", active_load)
        elif loading_set and self.areal_cap is None and self.density is None:
            areal_cap = spec_cap * self.active_load
            density = (self.active_load / self.active_frac) / self.thickness
            object.__setattr__(self, "areal_cap", areal_cap)
            object.__setattr__(self, "density", density)
        else:
            given = [
                name for name in ("thickness", "areal_cap", "active_load", "density")
                if getattr(self, name) is not None
            ]
            raise AmbiguousSpecification(
                "Composite needs exactly one of (areal_cap, density) or "
                f"(thickness, active_load); got {given or 'none'}"
            )

    @classmethod
    def from_areal_capacity(
        cls,
        active_material: ActiveMaterial,
        areal_cap: Quantity,
        active_frac: Quantity,
        density: Quantity,
    ) -> "ElectrodeComposite":
        """Create a composite from areal capacity, active fraction and density."""
        return cls(
            active_material=active_material,
            active_frac=active_frac,
            areal_cap=areal_cap,
            density=density,
        )

    @classmethod
    def from_loading(
        cls,
        active_material: ActiveMaterial,
        thickness: Quantity,
        active_load: Quantity,
        active_frac: Quantity,
    ) -> "ElectrodeComposite":
        """Create a composite from thickness, active loading and active fraction."""
        return cls(
            active_material=active_material,
            active_frac=active_frac,
            thickness=thickness,
            active_load=active_load,
        )

    @property
    def areal_mass(self) -> Quantity:
        """Coating mass per unit area, one face (g/cm²)."""
        return self.active_load / self.active_frac


@dataclass(frozen=True)
class Electrode:
    """
    Double-sided electrode: composite on both faces of a current collector.

    Attributes:
    ----------
    composite : ElectrodeComposite
        Coating applied to each face

    current_collector : CurrentCollector
        Foil substrate
    """
    composite: ElectrodeComposite
    current_collector: CurrentCollector

    @property
    def active_material(self) -> ActiveMaterial:
        return self.composite.active_material

    @property
    def areal_cap(self) -> Quantity:
        """Areal capacity of one face (mAh/cm²)."""
        return self.composite.areal_cap

    @property
    def thickness(self) -> Quantity:
        """Two coatings plus the foil (cm)."""
        return (2 * self.composite.thickness) + self.current_collector.thickness

    @property
    def areal_mass(self) -> Quantity:
        """Two coatings plus the foil, per unit area (g/cm²)."""
        return (2 * self.composite.areal_mass) + self.current_collector.areal_mass
