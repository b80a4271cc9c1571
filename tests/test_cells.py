"""
Cell Model Validation Tests
===========================

Validates cell-level capacity, energy, mass and energy density.

Data Sources:
- LFP/graphite pouch reference scenario (30 × 10 cm, 35 layers)
- 21700-format NMC811/graphite reference cell

Test Methodology:
- Verify the reference pouch cell reproduces ~64.4 ± 2.4 Ah and ~208 Wh/kg
- Verify capacity is set by the limiting electrode only
- Verify the mass breakdown closes on the total cell mass
- Verify every format builds and reports physically reasonable values
- Verify infeasible geometry fails at construction
"""

import sys
import math
from dataclasses import FrozenInstanceError
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.cell_calculator import (
    ActiveMaterial,
    CurrentCollector,
    Separator,
    Electrolyte,
    ElectrodeComposite,
    Electrode,
    Cell,
    CellFormat,
    CylindricalCell,
    PrismaticJellyrollCell,
    PrismaticCinnamonrollCell,
    PrismaticStackedCell,
    PouchCell,
    GeometryInfeasible,
    CellCalculatorConfig,
    measurement,
    nominal_value,
    thickness,
    volume,
    mass,
    gravimetric_energy,
    volumetric_energy,
    mass_breakdown,
    create_reference_pouch_cell,
    create_reference_cylindrical_cell,
)
from src.cell_calculator.calculations.mass import (
    BREAKDOWN_COMPONENTS,
    calculate_stack_areal_mass,
)
from src.cell_calculator.calculations.energy import calculate_np_ratio


# =============================================================================
# Test Fixtures
# =============================================================================

NMC = ActiveMaterial("NMC622", 175.0, 3.75)
GRAPHITE = ActiveMaterial("Graphite", 344.0, 0.17)


def make_electrodes(positive_cap=3.5, negative_cap=3.9):
    """Exact-valued NMC622 / graphite electrode pair."""
    positive = Electrode(
        ElectrodeComposite.from_areal_capacity(NMC, positive_cap, 0.96, 3.3),
        CurrentCollector("Al", 15e-4),
    )
    negative = Electrode(
        ElectrodeComposite.from_areal_capacity(GRAPHITE, negative_cap, 0.96, 1.6),
        CurrentCollector("Cu", 8e-4),
    )
    return positive, negative


def common_inputs(**overrides):
    positive, negative = make_electrodes()
    inputs = dict(
        name="test cell",
        positive=positive,
        negative=negative,
        separator=Separator("PE", 16e-4, 0.4, 0.57),
        electrolyte=Electrolyte("LiPF6", "EC:DEC", concentration=1.0),
        ecap_ratio=1.5,
        lli_factor=0.92,
    )
    inputs.update(overrides)
    return inputs


def make_prismatic(cls, **overrides):
    geometry = dict(
        height=10.0,
        width=15.0,
        depth=2.6,
        can_thickness=0.05,
        can_density=2.7,
        term_clearance=0.5,
        n_rolls=2,
        top_plate_mass=30.0,
        extra_mass=5.0,
    )
    if cls is not PrismaticCinnamonrollCell:
        geometry["headspace"] = 1.0
    geometry.update(overrides)
    return cls(**common_inputs(), **geometry)


# =============================================================================
# Reference Scenario
# =============================================================================

class TestReferencePouchCell(unittest.TestCase):
    """Test the LFP/graphite pouch reference scenario."""

    @classmethod
    def setUpClass(cls):
        cls.cell = create_reference_pouch_cell()

    def test_area(self):
        self.assertAlmostEqual(nominal_value(self.cell.area), 10500.0)

    def test_capacity(self):
        """64.4 ± 2.4 Ah."""
        self.assertAlmostEqual(self.cell.capacity.nominal, 64.449, places=6)
        self.assertAlmostEqual(self.cell.capacity.std_dev, 2.39, delta=0.02)
        self.assertEqual(str(self.cell.capacity), "64.4 ± 2.4")

    def test_energy(self):
        """Capacity × (3.375 - 0.17) V."""
        self.assertAlmostEqual(self.cell.energy.nominal, 64.449 * 3.205, places=6)
        self.assertGreater(self.cell.energy.std_dev, self.cell.capacity.std_dev * 3.0)

    def test_mass(self):
        cell_mass = mass(self.cell)
        self.assertAlmostEqual(cell_mass.nominal, 994.5, delta=0.5)
        self.assertGreater(cell_mass.std_dev, 10)
        self.assertLess(cell_mass.std_dev, 60)

    def test_gravimetric_energy(self):
        """208 ± 8 Wh/kg."""
        energy_density = gravimetric_energy(self.cell)
        self.assertAlmostEqual(energy_density.nominal, 208, delta=2)
        self.assertAlmostEqual(energy_density.std_dev, 8, delta=1)

    def test_packaging_tolerances_reach_mass(self):
        """Film, separator and hardware tolerances widen the mass, not the capacity."""
        tags = {source.tag for source in mass(self.cell).sources}
        for tag in ["pouch film thickness", "separator density", "extra hardware mass"]:
            self.assertIn(tag, tags)
        capacity_tags = {source.tag for source in self.cell.capacity.sources}
        self.assertNotIn("extra hardware mass", capacity_tags)

    def test_thickness(self):
        """35 stack units + one negative + two pouch films."""
        cell_thickness = thickness(self.cell)
        self.assertAlmostEqual(cell_thickness.nominal, 1.3208, delta=0.001)

    def test_volumetric_energy(self):
        self.assertAlmostEqual(volumetric_energy(self.cell).nominal, 388, delta=2)
        self.assertAlmostEqual(
            volume(self.cell).nominal, 31 * 13 * thickness(self.cell).nominal, places=8
        )

    def test_np_ratio(self):
        """n/p = 1.1 exactly, the positive loading cancels."""
        ratio = calculate_np_ratio(self.cell.positive, self.cell.negative)
        self.assertAlmostEqual(ratio.nominal, 1.1, places=12)
        self.assertAlmostEqual(ratio.std_dev, 0.0, places=12)

    def test_stack_areal_mass(self):
        stack = calculate_stack_areal_mass(
            self.cell.positive, self.cell.negative, self.cell.separator
        )
        self.assertAlmostEqual(stack.nominal, 0.077473, delta=1e-5)

    def test_summary(self):
        summary = self.cell.summary()
        self.assertIn("LFP cathode", summary)
        self.assertIn("64.4 ± 2.4", summary)
        self.assertIn("Wh/kg", summary)


class TestReferenceCylindricalCell(unittest.TestCase):
    """Test the 21700 reference cell against typical commercial values."""

    @classmethod
    def setUpClass(cls):
        cls.cell = create_reference_cylindrical_cell()

    def test_format(self):
        self.assertEqual(self.cell.form_factor, CellFormat.CYLINDRICAL)

    def test_capacity_range(self):
        """Commercial 21700 NMC811 cells carry 4-5.5 Ah."""
        self.assertGreater(self.cell.capacity.nominal, 3.5)
        self.assertLess(self.cell.capacity.nominal, 6.0)

    def test_mass_range(self):
        """Commercial 21700 cells weigh ~65-75 g."""
        cell_mass = mass(self.cell).nominal
        self.assertGreater(cell_mass, 55)
        self.assertLess(cell_mass, 85)

    def test_turns(self):
        self.assertGreater(nominal_value(self.cell.turns), 20)
        self.assertLess(nominal_value(self.cell.turns), 35)

    def test_thickness_is_diameter(self):
        self.assertEqual(thickness(self.cell), 2.1)

    def test_volume(self):
        self.assertAlmostEqual(nominal_value(volume(self.cell)), math.pi * 1.05 ** 2 * 7.0)


# =============================================================================
# Capacity and Mass Rules
# =============================================================================

class TestCapacityLimiting(unittest.TestCase):
    """Test that the lower-capacity electrode sets the cell capacity."""

    def make_cell(self, positive_cap, negative_cap):
        positive, negative = make_electrodes(positive_cap, negative_cap)
        return PouchCell(
            **common_inputs(positive=positive, negative=negative, lli_factor=1.0),
            height=10.0,
            width=20.0,
            n_layers=10,
            pouch_thickness=0.0113,
            pouch_density=1.7,
            pouch_clearance=1.0,
            tab_height=2.0,
            tab_width=3.0,
        )

    def test_positive_limited(self):
        """n/p > 1: capacity from the positive areal capacity only."""
        positive_cap = measurement(3.3, 0.1)
        negative_cap = measurement(4.0, 0.1)
        cell = self.make_cell(positive_cap, negative_cap)

        self.assertAlmostEqual(cell.capacity.nominal, 3.3 * 2000 * 2 / 1000, places=8)
        self.assertEqual(cell.capacity.sources, positive_cap.sources)

    def test_negative_limited(self):
        """n/p < 1: the negative electrode limits."""
        cell = self.make_cell(4.0, 3.3)
        self.assertAlmostEqual(cell.capacity.nominal, 3.3 * 2000 * 2 / 1000, places=8)

    def test_lli_scales_capacity(self):
        base = self.make_cell(3.3, 4.0)
        derated = PouchCell(
            **common_inputs(positive=base.positive, negative=base.negative, lli_factor=0.9),
            height=10.0,
            width=20.0,
            n_layers=10,
            pouch_thickness=0.0113,
            pouch_density=1.7,
            pouch_clearance=1.0,
            tab_height=2.0,
            tab_width=3.0,
        )
        self.assertAlmostEqual(derated.capacity.nominal, 0.9 * base.capacity.nominal, places=10)


class TestMassBreakdown(unittest.TestCase):
    """Test mass breakdown closure for every format."""

    def cells(self):
        return [
            create_reference_pouch_cell(),
            create_reference_cylindrical_cell(),
            make_prismatic(PrismaticJellyrollCell),
            make_prismatic(PrismaticCinnamonrollCell),
            make_prismatic(PrismaticStackedCell),
        ]

    def test_percentages_sum_to_100(self):
        for cell in self.cells():
            breakdown = mass_breakdown(cell)
            total = sum(breakdown["percentage"])
            self.assertAlmostEqual(nominal_value(total), 100.0, places=8,
                                   msg=f"{cell.form_factor.value} breakdown does not close")

    def test_masses_sum_to_cell_mass(self):
        for cell in self.cells():
            breakdown = mass_breakdown(cell)
            total = sum(breakdown["mass"])
            self.assertAlmostEqual(nominal_value(total), nominal_value(mass(cell)), places=8)

    def test_rows_and_columns(self):
        breakdown = mass_breakdown(create_reference_pouch_cell())
        self.assertEqual(list(breakdown.columns), ["component", "mass", "percentage"])
        self.assertEqual(tuple(breakdown["component"]), BREAKDOWN_COMPONENTS)

    def test_pouch_extra_negative_in_negative_rows(self):
        """The closing negative electrode adds W × H of negative area."""
        cell = create_reference_pouch_cell()
        breakdown = mass_breakdown(cell).set_index("component")
        negative_cc = breakdown.loc["-ve cc", "mass"]
        expected = cell.negative.current_collector.areal_mass * (10500 + 300)
        self.assertAlmostEqual(nominal_value(negative_cc), expected, places=8)

    def test_electrolyte_dominates_packaging_in_pouch(self):
        breakdown = mass_breakdown(create_reference_pouch_cell()).set_index("component")
        self.assertGreater(
            nominal_value(breakdown.loc["electrolyte", "mass"]),
            nominal_value(breakdown.loc["packaging", "mass"]),
        )


# =============================================================================
# Formats
# =============================================================================

class TestPrismaticCells(unittest.TestCase):
    """Test the three prismatic formats."""

    def test_all_formats_build(self):
        for cls in (PrismaticJellyrollCell, PrismaticCinnamonrollCell, PrismaticStackedCell):
            cell = make_prismatic(cls)
            self.assertGreater(nominal_value(cell.area), 0)
            self.assertGreater(nominal_value(cell.energy), 0)
            self.assertEqual(thickness(cell), 2.6)
            self.assertAlmostEqual(nominal_value(volume(cell)), 15.0 * 10.0 * 2.6)

    def test_energy_densities_reasonable(self):
        """Same materials in a 390 cm³ can: 150-300 Wh/kg."""
        for cls in (PrismaticJellyrollCell, PrismaticCinnamonrollCell, PrismaticStackedCell):
            cell = make_prismatic(cls)
            density = nominal_value(gravimetric_energy(cell))
            self.assertGreater(density, 150, cls.__name__)
            self.assertLess(density, 300, cls.__name__)

    def test_stacked_area_uses_whole_layers(self):
        cell = make_prismatic(PrismaticStackedCell)
        layers = math.floor(nominal_value(cell.layers))
        expected = (10.0 - 1.0) * (15.0 - 1.0) * layers * 2
        self.assertAlmostEqual(nominal_value(cell.area), expected, places=8)

    def test_more_rolls_keeps_area_similar(self):
        """Splitting the can depth into more rolls changes the area only slightly."""
        one = make_prismatic(PrismaticJellyrollCell, n_rolls=1)
        two = make_prismatic(PrismaticJellyrollCell, n_rolls=2)
        ratio = nominal_value(two.area) / nominal_value(one.area)
        self.assertAlmostEqual(ratio, 1.0, delta=0.1)

    def test_packaging_mass(self):
        cell = make_prismatic(PrismaticJellyrollCell)
        can_volume = (15.0 * 2.6 + 9.9 * 14.9 * 2 + 9.9 * 2.6 * 2) * 0.05
        expected = can_volume * 2.7 + 30.0 + 5.0
        self.assertAlmostEqual(nominal_value(cell.compute_packaging_mass()), expected, places=8)

    def test_invalid_roll_count(self):
        with self.assertRaises(ValueError):
            make_prismatic(PrismaticJellyrollCell, n_rolls=0)
        with self.assertRaises(ValueError):
            make_prismatic(PrismaticJellyrollCell, n_rolls=1.5)

    def test_negative_flat_run_infeasible(self):
        """Roll thicker than the can is tall."""
        with self.assertRaises(GeometryInfeasible):
            make_prismatic(PrismaticJellyrollCell, height=2.0, headspace=1.0, n_rolls=1)

    def test_stacked_too_thin_infeasible(self):
        with self.assertRaises(GeometryInfeasible):
            make_prismatic(PrismaticStackedCell, depth=0.15, n_rolls=1)


class TestCylindricalCell(unittest.TestCase):
    """Test cylindrical construction rules."""

    def make_cell(self, **overrides):
        geometry = dict(
            diameter=2.1,
            height=7.0,
            can_thickness=0.025,
            can_density=7.9,
            void_diameter=0.2,
            headspace=0.4,
            extra_mass=3.0,
        )
        geometry.update(overrides)
        return CylindricalCell(**common_inputs(), **geometry)

    def test_builds(self):
        cell = self.make_cell()
        self.assertGreater(nominal_value(cell.capacity), 0)

    def test_stack_thicker_than_radial_build(self):
        """Fails with GeometryInfeasible instead of a negative turn count."""
        with self.assertRaises(GeometryInfeasible):
            self.make_cell(diameter=0.31, void_diameter=0.2)

    def test_can_mass(self):
        cell = self.make_cell()
        wall = (math.pi * 1.05 ** 2 - math.pi * 1.025 ** 2) * 7.0
        ends = 2 * math.pi * 1.05 ** 2 * 0.025
        expected = (wall + ends) * 7.9 + 3.0
        self.assertAlmostEqual(nominal_value(cell.compute_packaging_mass()), expected, places=8)


class TestCellConstruction(unittest.TestCase):
    """Test construction-time behavior shared by all formats."""

    def test_cell_is_abstract(self):
        with self.assertRaises(TypeError):
            Cell(**common_inputs())

    def test_cells_are_immutable(self):
        cell = create_reference_pouch_cell()
        with self.assertRaises(FrozenInstanceError):
            cell.n_layers = 40

    def test_invalid_config_rejected(self):
        config = CellCalculatorConfig(quad_limit=0)
        with self.assertRaises(ValueError):
            PrismaticJellyrollCell(
                **common_inputs(config=config),
                height=10.0, width=15.0, depth=2.6, can_thickness=0.05, can_density=2.7,
                term_clearance=0.5, headspace=1.0,
            )

    def test_config_validation(self):
        self.assertTrue(CellCalculatorConfig().validate()[0])
        valid, error = CellCalculatorConfig(quad_epsabs=0, quad_epsrel=0).validate()
        self.assertFalse(valid)
        self.assertIn("tolerance", error)

    def test_shared_catalog_inputs_correlate(self):
        """Two cells built from the same LFP entry share its potential uncertainty."""
        first = create_reference_pouch_cell()
        second = create_reference_pouch_cell()
        # Fresh areal-capacity sources per cell, shared material sources
        shared = set(first.energy.sources) & set(second.energy.sources)
        self.assertTrue(shared)
        difference = first.energy - second.energy
        self.assertLess(difference.std_dev, math.sqrt(2) * first.energy.std_dev)


if __name__ == "__main__":
    unittest.main(verbosity=2)
