"""
CellEnergyCalculator - Main Package
===================================

Tools for estimating lithium-ion cell performance from materials and geometry.

This package provides modules for:
- Cell Calculator (cell_calculator): capacity, energy, mass and energy
  density of cylindrical, prismatic and pouch cells with uncertainty
  propagation

Author: CellEnergyCalculator Team
License: See LICENSE file in project root
"""

__version__ = "0.1.0"
__author__ = "CellEnergyCalculator Team"
