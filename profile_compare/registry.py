"""Registry for discovering comparison table builders."""
from __future__ import annotations

from typing import Dict, Type

from .models import TableKind
from .table_base import ComparisonTableBuilder


class TableRegistry:
    """Keeps track of available table builders by kind."""

    def __init__(self) -> None:
        self._builders: Dict[TableKind, ComparisonTableBuilder] = {}

    def register(self, builder_cls: Type[ComparisonTableBuilder]) -> Type[ComparisonTableBuilder]:
        if builder_cls.kind in self._builders:
            raise ValueError(f"Table builder for '{builder_cls.kind.value}' already registered")
        self._builders[builder_cls.kind] = builder_cls()
        return builder_cls

    def get(self, kind: TableKind) -> ComparisonTableBuilder:
        try:
            return self._builders[kind]
        except KeyError:
            raise KeyError(f"No table builder registered for '{kind.value}'") from None

    def __contains__(self, kind: object) -> bool:
        return kind in self._builders


registry = TableRegistry()


def register_table(builder_cls: Type[ComparisonTableBuilder]) -> Type[ComparisonTableBuilder]:
    """Decorator for registering a builder at definition time."""

    return registry.register(builder_cls)
