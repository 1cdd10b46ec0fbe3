"""Comparison table builders; importing the package registers every builder."""
from __future__ import annotations

import pkgutil
from importlib import import_module

TABLE_MODULES = sorted(
    info.name for info in pkgutil.iter_modules(__path__) if not info.ispkg and not info.name.startswith("_")
)

for _name in TABLE_MODULES:
    import_module(f"{__name__}.{_name}")

__all__ = list(TABLE_MODULES)
