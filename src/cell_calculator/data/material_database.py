"""
Material Database
=================

Reference materials for cell design studies, with one-sigma uncertainties
taken from typical literature and datasheet spreads:
- Active materials: specific capacity (mAh/g), average potential (V vs Li/Li+)
- Current collectors: foil thickness (cm)
- Separators: thickness (cm), porosity, effective density (g/cm³)
- Electrolytes: LiPF6 solutions

Catalog entries are module-level values, so every cell built from the same
entry shares its uncertainty sources. Two cells using "LFP" are correlated
through the LFP specific capacity, as they should be.

Data Sources Key:
- "literature": review papers and textbook values
- "datasheet": supplier datasheets
- "estimate": engineering estimate
"""

from typing import Dict, List, Optional

from ..models.materials import ActiveMaterial, CurrentCollector, Separator, Electrolyte
from ..models.electrode import ElectrodeComposite, Electrode
from ..models.cell import CylindricalCell, PouchCell
from ..uncertainty import measurement


# =============================================================================
# Active Materials
# =============================================================================

ACTIVE_MATERIALS: Dict[str, ActiveMaterial] = {
    # LFP - practical capacity well below the 170 mAh/g theoretical
    "LFP": ActiveMaterial(
        name="LFP",
        specific_capacity=measurement(165, 5, "LFP capacity"),
        avg_potential=measurement(3.375, 0.025, "LFP potential"),
    ),
    "NMC811": ActiveMaterial(
        name="NMC811",
        specific_capacity=measurement(200, 5, "NMC811 capacity"),
        avg_potential=measurement(3.80, 0.02, "NMC811 potential"),
    ),
    "NMC622": ActiveMaterial(
        name="NMC622",
        specific_capacity=measurement(175, 5, "NMC622 capacity"),
        avg_potential=measurement(3.75, 0.02, "NMC622 potential"),
    ),
    "NCA": ActiveMaterial(
        name="NCA",
        specific_capacity=measurement(195, 5, "NCA capacity"),
        avg_potential=measurement(3.70, 0.02, "NCA potential"),
    ),
    # Graphite - 372 mAh/g theoretical
    "Graphite": ActiveMaterial(
        name="Graphite",
        specific_capacity=measurement(344, 8.6, "Graphite capacity"),
        avg_potential=0.17,
    ),
    # Graphite with a few % SiOx
    "Si-Graphite": ActiveMaterial(
        name="Si-Graphite",
        specific_capacity=measurement(450, 20, "Si-Graphite capacity"),
        avg_potential=0.2,
    ),
}


# =============================================================================
# Current Collectors
# =============================================================================

CURRENT_COLLECTORS: Dict[str, CurrentCollector] = {
    "Al 15um": CurrentCollector("Al", 15e-4),
    "Al 12um": CurrentCollector("Al", 12e-4),
    "Cu 8um": CurrentCollector("Cu", 8e-4),
    "Cu 6um": CurrentCollector("Cu", 6e-4),
}


# =============================================================================
# Separators
# =============================================================================

SEPARATORS: Dict[str, Separator] = {
    # Effective density of the porous film, ~0.95 g/cm³ bulk PE at 40% porosity
    "PE 20um": Separator("PE 20um", thickness=20e-4, porosity=0.4, density=0.57),
    "PE 12um": Separator("PE 12um", thickness=12e-4, porosity=0.4, density=0.57),
    "PP/PE/PP 25um": Separator("PP/PE/PP 25um", thickness=25e-4, porosity=0.41, density=0.54),
}


# =============================================================================
# Electrolytes
# =============================================================================

ELECTROLYTES: Dict[str, Electrolyte] = {
    "1M LiPF6 EC:DEC": Electrolyte("LiPF6", "EC:DEC", concentration=1.0),
    "1.2M LiPF6 EC:DEC": Electrolyte("LiPF6", "EC:DEC", concentration=1.2),
    "1M LiPF6 EC:EMC": Electrolyte("LiPF6", "EC:EMC", concentration=1.0, density=1.20),
}


# =============================================================================
# Database Access Functions
# =============================================================================

def get_active_material(name: str) -> Optional[ActiveMaterial]:
    """
    Get an active material by name.

    Parameters:
    ----------
    name : str
        Material name (e.g., "LFP", "NMC811")

    Returns:
    -------
    ActiveMaterial or None
        Material if found
    """
    return ACTIVE_MATERIALS.get(name)


def get_current_collector(name: str) -> Optional[CurrentCollector]:
    """Get a current collector by name (e.g., "Al 15um")."""
    return CURRENT_COLLECTORS.get(name)


def get_separator(name: str) -> Optional[Separator]:
    """Get a separator by name (e.g., "PE 20um")."""
    return SEPARATORS.get(name)


def get_electrolyte(name: str) -> Optional[Electrolyte]:
    """Get an electrolyte by name (e.g., "1M LiPF6 EC:DEC")."""
    return ELECTROLYTES.get(name)


def list_active_materials() -> List[str]:
    """
    List all available active material names.

    Returns:
    -------
    List[str]
        Sorted list of material names
    """
    return sorted(ACTIVE_MATERIALS.keys())


def list_current_collectors() -> List[str]:
    return sorted(CURRENT_COLLECTORS.keys())


def list_separators() -> List[str]:
    return sorted(SEPARATORS.keys())


def list_electrolytes() -> List[str]:
    return sorted(ELECTROLYTES.keys())


# =============================================================================
# Reference Cells
# =============================================================================

def create_reference_pouch_cell(name: str = "LFP/graphite pouch") -> PouchCell:
    """
    Create a large-format LFP/graphite pouch cell.

    35 layers of 30 × 10 cm sheets. The negative areal capacity is set to
    1.1 × the positive (n/p = 1.1), so the two electrodes share the positive
    loading uncertainty. Separator, pouch film, electrolyte fill and the
    extra hardware mass are toleranced as well.

    Expected: ~64 ± 2.4 Ah, ~207 Wh, ~208 ± 8 Wh/kg.

    Returns:
    -------
    PouchCell
        Reference pouch cell
    """
    positive_cap = measurement(3.3, 0.1, "positive areal capacity")

    positive = Electrode(
        composite=ElectrodeComposite.from_areal_capacity(
            ACTIVE_MATERIALS["LFP"],
            areal_cap=positive_cap,
            active_frac=measurement(0.95, 0.02, "positive active fraction"),
            density=measurement(2.52, 0.11, "positive density"),
        ),
        current_collector=CURRENT_COLLECTORS["Al 15um"],
    )
    negative = Electrode(
        composite=ElectrodeComposite.from_areal_capacity(
            ACTIVE_MATERIALS["Graphite"],
            areal_cap=positive_cap * 1.1,
            active_frac=measurement(0.965, 0.01, "negative active fraction"),
            density=measurement(1.6, 0.1, "negative density"),
        ),
        current_collector=CURRENT_COLLECTORS["Cu 8um"],
    )
    separator = Separator(
        "PE 20um",
        thickness=measurement(20e-4, 2e-4, "separator thickness"),
        porosity=0.4,
        density=measurement(0.57, 0.05, "separator density"),
    )

    return PouchCell(
        name=name,
        positive=positive,
        negative=negative,
        separator=separator,
        electrolyte=ELECTROLYTES["1M LiPF6 EC:DEC"],
        ecap_ratio=measurement(1.7, 0.3, "electrolyte to capacity ratio"),
        lli_factor=measurement(0.93, 0.02, "lithium inventory loss"),
        height=10.0,
        width=30.0,
        n_layers=35,
        pouch_thickness=measurement(0.0113, 0.002, "pouch film thickness"),
        pouch_density=1.7,
        pouch_clearance=1.0,
        tab_height=2.0,
        tab_width=3.0,
        extra_mass=measurement(20.0, 10.0, "extra hardware mass"),
    )


def create_reference_cylindrical_cell(name: str = "NMC811/graphite 21700") -> CylindricalCell:
    """
    Create a 21700-format NMC811/graphite cylindrical cell.

    Steel can, 12 µm separator, n/p = 1.1.

    Returns:
    -------
    CylindricalCell
        Reference cylindrical cell
    """
    positive_cap = measurement(4.0, 0.1, "positive areal capacity")

    positive = Electrode(
        composite=ElectrodeComposite.from_areal_capacity(
            ACTIVE_MATERIALS["NMC811"],
            areal_cap=positive_cap,
            active_frac=measurement(0.96, 0.01, "positive active fraction"),
            density=measurement(3.4, 0.1, "positive density"),
        ),
        current_collector=CURRENT_COLLECTORS["Al 15um"],
    )
    negative = Electrode(
        composite=ElectrodeComposite.from_areal_capacity(
            ACTIVE_MATERIALS["Graphite"],
            areal_cap=positive_cap * 1.1,
            active_frac=measurement(0.96, 0.01, "negative active fraction"),
            density=measurement(1.6, 0.05, "negative density"),
        ),
        current_collector=CURRENT_COLLECTORS["Cu 8um"],
    )

    return CylindricalCell(
        name=name,
        positive=positive,
        negative=negative,
        separator=SEPARATORS["PE 12um"],
        electrolyte=ELECTROLYTES["1M LiPF6 EC:DEC"],
        ecap_ratio=measurement(1.4, 0.1, "electrolyte to capacity ratio"),
        lli_factor=measurement(0.92, 0.02, "lithium inventory loss"),
        diameter=2.1,
        height=7.0,
        can_thickness=0.025,
        can_density=7.9,
        void_diameter=0.2,
        headspace=0.4,
        extra_mass=3.0,
    )
