"""
Calculation Debugger Tests
==========================

Validates the calculation trace recorder and the full cell trace.

Test Methodology:
- Steps and sections render into the text report
- Construction steps go only to the debugger active in the current context
- A cell built in another thread records nothing into the caller's debugger
"""

import sys
import threading
from pathlib import Path
import unittest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.cell_calculator import (
    CalculationDebugger,
    get_debugger,
    set_debugger,
    reset_debugger,
    recording,
    debug_step,
    trace_cell_calculations,
    create_reference_pouch_cell,
    create_reference_cylindrical_cell,
    measurement,
)
from src.cell_calculator.debugger import format_value


def recorded_names(debugger):
    return [step.name for step in debugger.steps]


class TestCalculationDebugger(unittest.TestCase):
    """Test step recording and report formatting."""

    def setUp(self):
        self.debugger = CalculationDebugger(cell_name="test")

    def test_record_returns_value(self):
        self.debugger.section("GEOMETRY")
        turns = self.debugger.record(
            "Geometry", "Turns", "turns", 27.0,
            formula="turns = ((D - 2c - s - v) / 2) / s",
            inputs={"D": 2.1},
        )
        self.debugger.record_input("D", 2.1, "cm")

        self.assertEqual(turns, 27.0)
        self.assertEqual(recorded_names(self.debugger), ["turns", "D"])
        self.assertEqual(self.debugger.sections, {0: "GEOMETRY"})
        self.assertTrue(self.debugger.steps[1].is_input)

    def test_result_of_returns_latest(self):
        self.debugger.record("Geometry", "First pass", "turns", 27.0)
        self.debugger.record("Geometry", "Second pass", "turns", 28.0)
        self.assertEqual(self.debugger.result_of("turns"), 28.0)
        with self.assertRaises(KeyError):
            self.debugger.result_of("missing")

    def test_report_contains_sections_and_results(self):
        self.debugger.section("CAPACITY")
        self.debugger.record(
            "Capacity", "Cell capacity", "capacity", measurement(64.449, 2.3948),
            unit="Ah",
            formula="C = q × area × 2 / 1000",
            inputs={"q": measurement(3.3, 0.1)},
            note="positive limited",
        )
        self.debugger.finish()
        report = self.debugger.get_report()

        self.assertIn("CELL CALCULATION TRACE", report)
        self.assertIn("## CAPACITY", report)
        self.assertIn("cell_name", report)
        self.assertIn("with q=3.3 ± 0.1", report)
        self.assertIn("=> capacity = 64.449 ± 2.3948 Ah", report)
        self.assertIn("(positive limited)", report)
        self.assertIn("Total Steps: 1", report)
        self.assertIn("Elapsed:", report)

    def test_inputs_render_on_one_line(self):
        self.debugger.record_input("ecap_ratio", 1.7, "mL/Ah", "Electrolyte to capacity ratio")
        self.assertIn("[1] Electrolyte to capacity ratio: ecap_ratio = 1.7 mL/Ah",
                      self.debugger.get_report())

    def test_format_value(self):
        self.assertEqual(format_value(1.0 / 3.0), "0.333333")
        self.assertEqual(format_value(measurement(5.0, 0.0)), "5")
        self.assertEqual(format_value("LFP"), "LFP")


class TestActiveDebugger(unittest.TestCase):
    """Test the context-local debugger used during cell construction."""

    def test_inactive_by_default(self):
        self.assertIsNone(get_debugger())
        debug_step("Geometry", "ignored", "", {}, 1.0, "x")

    def test_construction_steps_recorded(self):
        debugger = CalculationDebugger()
        with recording(debugger):
            self.assertIs(get_debugger(), debugger)
            create_reference_cylindrical_cell()
        self.assertIsNone(get_debugger())

        names = recorded_names(debugger)
        for name in ["s", "turns", "L_spiral", "area", "capacity", "energy"]:
            self.assertIn(name, names)

    def test_set_and_reset(self):
        debugger = CalculationDebugger()
        token = set_debugger(debugger)
        try:
            self.assertIs(get_debugger(), debugger)
        finally:
            reset_debugger(token)
        self.assertIsNone(get_debugger())

    def test_nested_recording_restores_outer(self):
        outer = CalculationDebugger()
        inner = CalculationDebugger()
        with recording(outer):
            with recording(inner):
                create_reference_pouch_cell()
            self.assertIs(get_debugger(), outer)
        self.assertEqual(outer.steps, [])
        self.assertIn("capacity", recorded_names(inner))

    def test_worker_thread_records_nothing(self):
        """A cell built in another thread stays out of this context's trace."""
        debugger = CalculationDebugger()
        seen = []

        def build():
            seen.append(get_debugger())
            create_reference_pouch_cell()

        with recording(debugger):
            worker = threading.Thread(target=build)
            worker.start()
            worker.join()

        self.assertEqual(seen, [None])
        self.assertEqual(debugger.steps, [])


class TestTraceCellCalculations(unittest.TestCase):
    """Test the full cell trace."""

    def test_pouch_trace(self):
        cell = create_reference_pouch_cell()
        debugger = trace_cell_calculations(cell)
        report = debugger.get_report()

        for section in ["INPUT PARAMETERS", "MASS", "ENERGY DENSITY"]:
            self.assertIn(f"## {section}", report)

        capacity = debugger.result_of("capacity")
        self.assertAlmostEqual(capacity.nominal, cell.capacity.nominal, places=10)
        self.assertAlmostEqual(debugger.result_of("E_g").nominal, 208, delta=2)

    def test_cylindrical_trace_includes_spiral(self):
        debugger = trace_cell_calculations(create_reference_cylindrical_cell())
        self.assertIn("L_spiral", recorded_names(debugger))
        self.assertIn("turns", recorded_names(debugger))

    def test_trace_leaves_no_active_debugger(self):
        self.assertIsNone(get_debugger())
        trace_cell_calculations(create_reference_pouch_cell())
        self.assertIsNone(get_debugger())

    def test_trace_inside_recording_keeps_outer_clean(self):
        outer = CalculationDebugger()
        with recording(outer):
            trace_cell_calculations(create_reference_pouch_cell())
        # Only the cell built by the reference factory reaches the outer trace
        self.assertEqual(recorded_names(outer).count("capacity"), 1)


if __name__ == "__main__":
    unittest.main(verbosity=2)
