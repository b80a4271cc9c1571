"""
Uncertain Values
================

First-order (linear) uncertainty propagation with correlation tracking.

Every ``value ± sigma`` entered by a user becomes an ``UncertainValue`` with
one fresh ``UncertaintySource``. Arithmetic carries, for each source, the
partial derivative of the result with respect to that source. The variance
of any result is::

    var = Σ_s (partial_s × sigma_s)²

so independent sources add in quadrature while repeated uses of the same
source are combined linearly first (chain rule). ``x - x`` is exactly zero
with zero uncertainty; ``x + y`` for two independent inputs of equal sigma
has sqrt(2) × sigma.

The source identity lives inside the value itself (a monotonic id), so there
is no registry to share between threads and computations stay pure.

Equality compares the nominal value and the partials, so ``x - x == 0`` and
an exact value equals the float it holds. Two independent measurements with
the same numbers are not equal. Ordering uses nominal values only.

Uncertainties are one standard deviation. Use ``interval(k)`` to scale.

Usage:
------
    from src.cell_calculator.uncertainty import measurement, sqrt, umin

    a = measurement(10.0, 1.0)
    b = measurement(5.0, 1.0)
    total = a + b            # 15.0 ± 1.4
    zero = a - a             # 0.0, std_dev 0.0
    root = sqrt(a * b)       # chain rule through both sources
"""

import itertools
import math
from dataclasses import dataclass, field, fields
from numbers import Real
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from .exceptions import InvalidOperation


# Monotonic id generator; next() on itertools.count is atomic under the GIL
_source_ids = itertools.count(1)


@dataclass(frozen=True)
class UncertaintySource:
    """
    Identity of one independently specified uncertain input.

    Two sources are equal only if they share the same id; ``sigma`` and
    ``tag`` are payload.

    Attributes:
    ----------
    id : int
        Unique id, allocated at creation

    sigma : float
        Standard deviation of the input

    tag : str
        Optional human-readable label (e.g., "LFP specific capacity")
    """
    id: int
    sigma: float = field(compare=False)
    tag: str = field(default="", compare=False)


class UncertainValue:
    """
    A nominal value with a linear uncertainty propagation record.

    Instances are immutable. Plain numbers mix freely with uncertain values
    and are treated as exact (no partials).

    Parameters:
    ----------
    nominal : float
        Nominal (central) value

    partials : Mapping[UncertaintySource, float], optional
        Partial derivative of this value with respect to each source
    """

    __slots__ = ("_nominal", "_partials")

    def __init__(
        self, nominal: float, partials: Optional[Mapping[UncertaintySource, float]] = None
    ):
        if isinstance(nominal, UncertainValue):
            self._nominal = nominal._nominal
            self._partials = nominal._partials
            return
        self._nominal = float(nominal)
        self._partials: Dict[UncertaintySource, float] = {
            source: float(derivative)
            for source, derivative in (partials or {}).items()
            if derivative != 0.0
        }

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def measured(cls, value: float, sigma: float, tag: str = "") -> "UncertainValue":
        """
        Create a value backed by a new independent source.

        Parameters:
        ----------
        value : float
            Nominal value

        sigma : float
            One-standard-deviation uncertainty (>= 0)

        tag : str
            Optional label stored on the source

        Returns:
        -------
        UncertainValue
            Exact value if sigma is 0, otherwise a value with one source
        """
        sigma = float(sigma)
        if sigma < 0 or math.isnan(sigma):
            raise ValueError(f"Uncertainty must be non-negative, got {sigma}")
        if sigma == 0.0:
            return cls(value)
        source = UncertaintySource(id=next(_source_ids), sigma=sigma, tag=tag)
        return cls(value, {source: 1.0})

    @classmethod
    def from_linearization(
        cls,
        nominal: float,
        terms: Iterable[Tuple["Quantity", float]],
    ) -> "UncertainValue":
        """
        Build a result from its nominal value and local derivatives.

        Used where the result is computed numerically (e.g., by quadrature)
        rather than through operator overloading.

        Parameters:
        ----------
        nominal : float
            Nominal result

        terms : iterable of (operand, derivative)
            Each operand the result depends on, with d(result)/d(operand)
            evaluated at the nominal operand values

        Returns:
        -------
        UncertainValue
            Value whose partials are Σ derivative × operand partials
        """
        partials: Dict[UncertaintySource, float] = {}
        for operand, derivative in terms:
            if not isinstance(operand, UncertainValue) or derivative == 0.0:
                continue
            for source, partial in operand._partials.items():
                partials[source] = partials.get(source, 0.0) + derivative * partial
        return cls(nominal, partials)

    # =========================================================================
    # Read-only Properties
    # =========================================================================

    @property
    def nominal(self) -> float:
        """Nominal value."""
        return self._nominal

    @property
    def partials(self) -> Mapping[UncertaintySource, float]:
        """Read-only view of the partial derivatives per source."""
        return MappingProxyType(self._partials)

    @property
    def sources(self) -> Tuple[UncertaintySource, ...]:
        """Sources this value depends on, in id order."""
        return tuple(sorted(self._partials, key=lambda s: s.id))

    @property
    def variance(self) -> float:
        """Propagated variance."""
        return math.fsum(
            (derivative * source.sigma) ** 2
            for source, derivative in self._partials.items()
        )

    @property
    def std_dev(self) -> float:
        """One-standard-deviation uncertainty."""
        return math.sqrt(self.variance)

    @property
    def rel_std_dev(self) -> float:
        """Relative uncertainty (std_dev / |nominal|)."""
        if self._nominal == 0.0:
            raise InvalidOperation("Relative uncertainty of a zero nominal value")
        return self.std_dev / abs(self._nominal)

    @property
    def is_exact(self) -> bool:
        """True if the value carries no uncertainty."""
        return not self._partials

    def interval(self, k: float = 1.0) -> Tuple[float, float]:
        """
        Return (nominal - k·std_dev, nominal + k·std_dev).

        k = 1 is the one-sigma band; pass k ≈ 1.96 for a 95% interval
        under a normal assumption.
        """
        half_width = k * self.std_dev
        return (self._nominal - half_width, self._nominal + half_width)

    def contributions(self) -> Dict[UncertaintySource, float]:
        """
        Variance contributed by each source.

        Returns:
        -------
        dict
            source -> (partial × sigma)², largest first
        """
        shares = {
            source: (derivative * source.sigma) ** 2
            for source, derivative in self._partials.items()
        }
        return dict(sorted(shares.items(), key=lambda item: item[1], reverse=True))

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return UncertainValue.from_linearization(
            self._nominal + other._nominal, ((self, 1.0), (other, 1.0))
        )

    __radd__ = __add__

    def __sub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return UncertainValue.from_linearization(
            self._nominal - other._nominal, ((self, 1.0), (other, -1.0))
        )

    def __rsub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other - self

    def __mul__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return UncertainValue.from_linearization(
            self._nominal * other._nominal,
            ((self, other._nominal), (other, self._nominal)),
        )

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        if other._nominal == 0.0:
            raise InvalidOperation(f"Division of {self!r} by a zero nominal value")
        quotient = self._nominal / other._nominal
        return UncertainValue.from_linearization(
            quotient,
            ((self, 1.0 / other._nominal), (other, -quotient / other._nominal)),
        )

    def __rtruediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other / self

    def __pow__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _power(self, other)

    def __rpow__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return _power(other, self)

    def __neg__(self):
        return UncertainValue.from_linearization(-self._nominal, ((self, -1.0),))

    def __pos__(self):
        return self

    def __abs__(self):
        if self._nominal > 0:
            slope = 1.0
        elif self._nominal < 0:
            slope = -1.0
        else:
            slope = 0.0
        return UncertainValue.from_linearization(abs(self._nominal), ((self, slope),))

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other):
        # Same nominal and same dependence on every source
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._nominal == other._nominal and self._partials == other._partials

    def __hash__(self):
        # Exact values hash like the float they equal
        if not self._partials:
            return hash(self._nominal)
        return hash((self._nominal, frozenset(self._partials.items())))

    # Ordering uses nominal values only

    def __lt__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._nominal < other._nominal

    def __le__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._nominal <= other._nominal

    def __gt__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._nominal > other._nominal

    def __ge__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._nominal >= other._nominal

    # =========================================================================
    # Conversion and Display
    # =========================================================================

    def __float__(self):
        return self._nominal

    def __bool__(self):
        return self._nominal != 0.0

    def __floor__(self):
        # Piecewise constant: derivative is zero almost everywhere
        return math.floor(self._nominal)

    def __ceil__(self):
        return math.ceil(self._nominal)

    def __round__(self, ndigits=None):
        return round(self._nominal, ndigits)

    def __format__(self, spec: str) -> str:
        if not spec:
            return str(self)
        if self.is_exact:
            return format(self._nominal, spec)
        return f"{format(self._nominal, spec)} ± {format(self.std_dev, spec)}"

    def __str__(self) -> str:
        return _format_measurement(self._nominal, self.std_dev)

    def __repr__(self) -> str:
        if self.is_exact:
            return f"UncertainValue({self._nominal!r})"
        return (
            f"UncertainValue({self._nominal!r}, std_dev={self.std_dev!r}, "
            f"sources={len(self._partials)})"
        )


Quantity = Union[float, UncertainValue]


# =============================================================================
# Module-level Helpers
# =============================================================================

def measurement(value: float, sigma: float, tag: str = "") -> UncertainValue:
    """Shorthand for UncertainValue.measured (the ``value ± sigma`` literal)."""
    return UncertainValue.measured(value, sigma, tag)


def nominal_value(x: Quantity) -> float:
    """Nominal value of an uncertain value or plain number."""
    if isinstance(x, UncertainValue):
        return x.nominal
    return float(x)


def as_uncertain(x: Quantity) -> UncertainValue:
    """
    Promote a plain number to an exact UncertainValue.

    UncertainValue inputs are returned unchanged. Anything that is not a
    real number raises TypeError.
    """
    coerced = _coerce(x)
    if coerced is NotImplemented:
        raise TypeError(f"Expected a number or UncertainValue, got {type(x).__name__}")
    return coerced


def promote_fields(instance) -> None:
    """
    Promote the plain numbers in a dataclass's Quantity fields to UncertainValue.

    Only init fields annotated Quantity or Optional[Quantity] are touched;
    None is left in place. Works on frozen dataclasses.
    """
    for item in fields(instance):
        if not item.init or item.type not in (Quantity, Optional[Quantity]):
            continue
        value = getattr(instance, item.name)
        if value is not None:
            object.__setattr__(instance, item.name, as_uncertain(value))


def std_dev(x: Quantity) -> float:
    """Standard deviation of an uncertain value (0 for plain numbers)."""
    if isinstance(x, UncertainValue):
        return x.std_dev
    return 0.0


def umin(first: Quantity, *others: Quantity) -> UncertainValue:
    """
    Return the operand with the smallest nominal value.

    The whole operand is returned (partials included), not a blend. Ties
    go to the earliest argument.
    """
    best = first
    for candidate in others:
        if nominal_value(candidate) < nominal_value(best):
            best = candidate
    return as_uncertain(best)


def sqrt(x: Quantity) -> UncertainValue:
    """Square root with first-order propagation."""
    return _unary(x, math.sqrt, lambda value, result: 0.5 / result, "sqrt")


def exp(x: Quantity) -> UncertainValue:
    """Exponential with first-order propagation."""
    return _unary(x, math.exp, lambda value, result: result, "exp")


def log(x: Quantity) -> UncertainValue:
    """Natural logarithm with first-order propagation."""
    return _unary(x, math.log, lambda value, result: 1.0 / value, "log")


# =============================================================================
# Internals
# =============================================================================

def _coerce(x):
    """Return x as an UncertainValue, or NotImplemented for foreign types."""
    if isinstance(x, UncertainValue):
        return x
    if isinstance(x, Real):
        return UncertainValue(x)
    return NotImplemented


def _unary(x, func, derivative, name: str) -> UncertainValue:
    operand = as_uncertain(x)
    try:
        result = func(operand.nominal)
        slope = derivative(operand.nominal, result) if operand._partials else 0.0
    except (ValueError, ZeroDivisionError, OverflowError) as exc:
        raise InvalidOperation(f"{name}({operand.nominal!r}) is undefined") from exc
    return UncertainValue.from_linearization(result, ((operand, slope),))


def _power(base: UncertainValue, exponent: UncertainValue) -> UncertainValue:
    b = base.nominal
    e = exponent.nominal
    try:
        result = math.pow(b, e)
    except (ValueError, ZeroDivisionError, OverflowError) as exc:
        raise InvalidOperation(f"{b!r} ** {e!r} is undefined") from exc

    terms = []
    if base._partials and e != 0.0:
        if b == 0.0 and e < 1.0:
            raise InvalidOperation(f"Derivative of x ** {e!r} is undefined at x = 0")
        terms.append((base, e * math.pow(b, e - 1.0)))
    if exponent._partials:
        if b > 0.0:
            terms.append((exponent, result * math.log(b)))
        elif not (b == 0.0 and e > 0.0):
            raise InvalidOperation(
                f"Uncertain exponent needs a positive base, got {b!r}"
            )
    return UncertainValue.from_linearization(result, terms)


def _format_measurement(nominal: float, sigma: float) -> str:
    """Format as 'nominal ± sigma' with sigma rounded to two significant digits."""
    if sigma == 0.0 or not math.isfinite(sigma) or not math.isfinite(nominal):
        if sigma == 0.0:
            return f"{nominal:g}"
        return f"{nominal} ± {sigma}"
    decimals = 1 - math.floor(math.log10(sigma))
    if decimals > 0:
        return f"{nominal:.{decimals}f} ± {sigma:.{decimals}f}"
    return f"{round(nominal, decimals):.0f} ± {round(sigma, decimals):.0f}"
