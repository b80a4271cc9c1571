"""
Cell Calculator Exceptions
==========================

Error taxonomy for cell construction and uncertainty arithmetic.

All errors are raised at construction time. None of them is transient, so
there is no retry policy: each one points at an invalid input combination.
"""


class CellModelError(Exception):
    """Base class for all cell calculator errors."""


class AmbiguousSpecification(CellModelError, ValueError):
    """
    Inputs do not select exactly one way of deriving a quantity.

    Raised when an ElectrodeComposite gets zero or two complete parameter
    sets, or when an Electrolyte density can be neither read nor derived.
    """


class UnsupportedMaterial(CellModelError, ValueError):
    """A material name has no built-in properties and none were supplied."""


class InvalidOperation(CellModelError, ArithmeticError):
    """Arithmetic on uncertain values with no defined result."""


class GeometryInfeasible(CellModelError, ValueError):
    """The enclosure cannot hold a single turn or layer of the stack."""
