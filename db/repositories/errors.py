"""
Repository-layer exceptions for warehouse persistence flows.
"""

from __future__ import annotations


class WarehouseRepositoryError(RuntimeError):
    """Base exception for warehouse repository failures."""


class DuplicateDimensionError(WarehouseRepositoryError):
    """Raised when creating a dimension entry hits the uniqueness constraint."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind} '{name}' already exists.")
        self.kind = kind
        self.name = name


class ImportPersistenceError(WarehouseRepositoryError):
    """Raised when buffered fact rows cannot be written."""
