"""
Cell Calculator Data Module
===========================

Contains the reference material catalog, lookup functions and reference cells.
"""

from .material_database import (
    ACTIVE_MATERIALS,
    CURRENT_COLLECTORS,
    SEPARATORS,
    ELECTROLYTES,
    get_active_material,
    get_current_collector,
    get_separator,
    get_electrolyte,
    list_active_materials,
    list_current_collectors,
    list_separators,
    list_electrolytes,
    create_reference_pouch_cell,
    create_reference_cylindrical_cell,
)

__all__ = [
    "ACTIVE_MATERIALS",
    "CURRENT_COLLECTORS",
    "SEPARATORS",
    "ELECTROLYTES",
    "get_active_material",
    "get_current_collector",
    "get_separator",
    "get_electrolyte",
    "list_active_materials",
    "list_current_collectors",
    "list_separators",
    "list_electrolytes",
    "create_reference_pouch_cell",
    "create_reference_cylindrical_cell",
]
