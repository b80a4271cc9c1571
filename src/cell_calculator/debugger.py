"""
Calculation Debugger
====================

Step-by-step record of how a cell's figures were derived.

Cell construction reports its geometry, capacity and energy steps through
debug_step(). Those steps go to the debugger active in the current context
(a ContextVar), so recording in one thread or task never sees cells built
in another. Nothing is recorded unless a debugger is active:

    debugger = CalculationDebugger(cell_name="demo")
    with recording(debugger):
        cell = create_reference_pouch_cell()
    print(debugger.get_report())

Uncertain results are printed with their one-sigma uncertainty.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from .uncertainty import UncertainValue

RULE = "-" * 70
DOUBLE_RULE = "=" * 70


@dataclass
class CalculationStep:
    """One derived (or input) value and how it was obtained."""
    category: str
    description: str
    name: str
    value: Any
    unit: str = ""
    formula: str = ""
    inputs: Dict[str, Any] = field(default_factory=dict)
    note: str = ""

    @property
    def is_input(self) -> bool:
        return self.category == "Input"


def format_value(value: Any) -> str:
    """Format a step value: 6 significant digits, ± sigma when uncertain."""
    if isinstance(value, (UncertainValue, float)):
        return f"{value:.6g}"
    return str(value)


class CalculationDebugger:
    """
    Collects calculation steps grouped into named sections.

    Attributes:
    ----------
    metadata : dict
        Free-form labels printed at the top of the report

    steps : list of CalculationStep
        Steps in recording order

    sections : dict
        Section name keyed by the index of its first step
    """

    def __init__(self, **metadata):
        self.metadata: Dict[str, Any] = dict(metadata)
        self.steps: List[CalculationStep] = []
        self.sections: Dict[int, str] = {}
        self.started: datetime = datetime.now()
        self.finished: Optional[datetime] = None

    def section(self, name: str) -> None:
        """Open a section; steps recorded from here on belong to it."""
        self.sections[len(self.steps)] = name

    def record(
        self,
        category: str,
        description: str,
        name: str,
        value: Any,
        unit: str = "",
        formula: str = "",
        inputs: Optional[Dict[str, Any]] = None,
        note: str = ""
    ) -> Any:
        """Record a step and hand its value back to the caller."""
        self.steps.append(CalculationStep(
            category=category,
            description=description,
            name=name,
            value=value,
            unit=unit,
            formula=formula,
            inputs=dict(inputs or {}),
            note=note,
        ))
        return value

    def record_input(self, name: str, value: Any, unit: str = "", description: str = "") -> Any:
        return self.record("Input", description or name, name, value, unit)

    def finish(self) -> None:
        self.finished = datetime.now()

    def result_of(self, name: str) -> Any:
        """Most recent value recorded under name (KeyError if never recorded)."""
        for step in reversed(self.steps):
            if step.name == name:
                return step.value
        raise KeyError(f"No step recorded for '{name}'")

    # =========================================================================
    # Report
    # =========================================================================

    def get_report(self) -> str:
        """Render the recorded steps as a plain-text report."""
        lines = ["CELL CALCULATION TRACE", DOUBLE_RULE]
        for key, value in self.metadata.items():
            lines.append(f"  {key:<14} {value}")
        lines.append(f"  {'started':<14} {self.started:%Y-%m-%d %H:%M:%S}")

        category = None
        for index, step in enumerate(self.steps):
            if index in self.sections:
                lines += ["", RULE, f"## {self.sections[index]}", RULE]
                category = None
            if not step.is_input and step.category != category:
                category = step.category
                lines += ["", f"{category}:"]
            lines += self._step_lines(index + 1, step)

        lines += ["", DOUBLE_RULE, f"Total Steps: {len(self.steps)}"]
        if self.finished is not None:
            elapsed = (self.finished - self.started).total_seconds()
            lines.append(f"Elapsed: {elapsed:.3f} s")
        return "\n".join(lines)

    @staticmethod
    def _step_lines(number: int, step: CalculationStep) -> List[str]:
        value = f"{step.name} = {format_value(step.value)}"
        if step.unit:
            value += f" {step.unit}"
        if step.is_input:
            return [f"  [{number}] {step.description}: {value}"]

        lines = [f"  [{number}] {step.description}"]
        if step.formula:
            lines.append(f"      {step.formula}")
        if step.inputs:
            given = ", ".join(f"{k}={format_value(v)}" for k, v in step.inputs.items())
            lines.append(f"      with {given}")
        lines.append(f"      => {value}")
        if step.note:
            lines.append(f"      ({step.note})")
        return lines


# =============================================================================
# Active Debugger
# =============================================================================

_active: ContextVar[Optional[CalculationDebugger]] = ContextVar(
    "cell_calculation_debugger", default=None
)


def get_debugger() -> Optional[CalculationDebugger]:
    """Debugger active in the current context, or None."""
    return _active.get()


def set_debugger(debugger: Optional[CalculationDebugger]) -> Token:
    """
    Activate a debugger in the current context.

    Returns the token that restores the previous one via reset_debugger().
    """
    return _active.set(debugger)


def reset_debugger(token: Token) -> None:
    _active.reset(token)


@contextmanager
def recording(debugger: CalculationDebugger) -> Iterator[CalculationDebugger]:
    """Activate a debugger for the duration of a with block."""
    token = _active.set(debugger)
    try:
        yield debugger
    finally:
        _active.reset(token)


def debug_step(
    category: str,
    description: str,
    formula: str,
    variables: dict,
    result: Any,
    result_name: str,
    result_unit: str = "",
    comment: str = ""
) -> None:
    """Record a construction step on the active debugger, if any."""
    debugger = _active.get()
    if debugger is None:
        return
    debugger.record(
        category,
        description,
        result_name,
        result,
        unit=result_unit,
        formula=formula,
        inputs=variables,
        note=comment,
    )
