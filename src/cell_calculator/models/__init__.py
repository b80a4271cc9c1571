"""
Cell Calculator Models
======================

Core data models: materials, electrodes and the five cell formats.
"""

from .materials import ActiveMaterial, CurrentCollector, Separator, Electrolyte
from .electrode import ElectrodeComposite, Electrode
from .cell import (
    CellFormat,
    Cell,
    CylindricalCell,
    PrismaticCell,
    PrismaticJellyrollCell,
    PrismaticCinnamonrollCell,
    PrismaticStackedCell,
    PouchCell,
)

__all__ = [
    "ActiveMaterial",
    "CurrentCollector",
    "Separator",
    "Electrolyte",
    "ElectrodeComposite",
    "Electrode",
    "CellFormat",
    "Cell",
    "CylindricalCell",
    "PrismaticCell",
    "PrismaticJellyrollCell",
    "PrismaticCinnamonrollCell",
    "PrismaticStackedCell",
    "PouchCell",
]
