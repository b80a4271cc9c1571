"""
Cell Calculator Configuration
=============================

Contains configuration settings, physical constants, and default values
for cell-level calculations.

All internal calculations use CGS-style cell design units:
- Length / thickness: cm
- Area: cm²
- Density: g/cm³
- Mass: g (areal masses in g/cm²)
- Areal capacity: mAh/cm²
- Specific capacity: mAh/g
- Capacity: Ah
- Energy: Wh
- Potential: V
- Electrolyte ratio: mL/Ah

Uncertainties are one standard deviation throughout. Nothing in the
calculator rescales them to a confidence interval.
"""

from dataclasses import dataclass


# =============================================================================
# Current Collector Densities
# =============================================================================

# Aluminium foil density (g/cm³) - positive current collector
AL_DENSITY = 2.7

# Copper foil density (g/cm³) - negative current collector
CU_DENSITY = 8.96

# Names that resolve to a density without an explicit value
COLLECTOR_DENSITIES = {
    "Al": AL_DENSITY,
    "Cu": CU_DENSITY,
}


# =============================================================================
# Pouch Tabs
# =============================================================================

# Default tab thickness (cm)
DEFAULT_TAB_THICKNESS_CM = 0.05

# Positive tab (Al) density (g/cm³)
TAB_DENSITY_POSITIVE = 2.7

# Negative tab (Ni-plated Cu) density (g/cm³)
TAB_DENSITY_NEGATIVE = 8.9


# =============================================================================
# Winding and Stacking Allowances
# =============================================================================

# Outer wrap (tape + separator overwind) taken from the can depth (cm)
# 120 µm, used by cinnamon-roll and stacked prismatic cells
WRAP_ALLOWANCE_CM = 120e-4


# =============================================================================
# Electrolyte Correlations (LiPF6)
# =============================================================================

# Salt mass fraction per mol/L of LiPF6
LIPF6_MASS_FRAC_PER_MOLAR = 0.1222

# EC:DEC solution density: rho = slope * salt_mass_frac + intercept (g/cm³)
EC_DEC_DENSITY_SLOPE = 0.7641
EC_DEC_DENSITY_INTERCEPT = 1.1299


# =============================================================================
# Numerical Integration Defaults
# =============================================================================

# scipy.integrate.quad tolerances - spiral integrands are smooth, so QUADPACK
# reaches these in a handful of subdivisions
DEFAULT_QUAD_EPSABS = 1e-12
DEFAULT_QUAD_EPSREL = 1e-12
DEFAULT_QUAD_LIMIT = 200


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass(frozen=True)
class CellCalculatorConfig:
    """
    Configuration for cell calculations.

    Attributes:
    ----------
    quad_epsabs : float
        Absolute error tolerance passed to scipy.integrate.quad

    quad_epsrel : float
        Relative error tolerance passed to scipy.integrate.quad

    quad_limit : int
        Maximum number of adaptive subintervals for scipy.integrate.quad
    """
    quad_epsabs: float = DEFAULT_QUAD_EPSABS
    quad_epsrel: float = DEFAULT_QUAD_EPSREL
    quad_limit: int = DEFAULT_QUAD_LIMIT

    def validate(self) -> tuple[bool, str]:
        """Validate configuration values."""
        errors = []

        if self.quad_epsabs < 0:
            errors.append("Integration epsabs cannot be negative")
        if self.quad_epsrel < 0:
            errors.append("Integration epsrel cannot be negative")
        if self.quad_epsabs == 0 and self.quad_epsrel == 0:
            errors.append("At least one integration tolerance must be positive")
        if self.quad_limit < 1:
            errors.append("Integration limit must be at least 1 subinterval")

        if errors:
            return False, "; ".join(errors)
        return True, ""


DEFAULT_CONFIG = CellCalculatorConfig()
