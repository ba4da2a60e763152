"""Typed failures raised by the scoring and retrieval engine.

Callers are expected to catch these at the boundary (HTTP handlers, chat
surface) and translate them into user-facing "no verified data" messages.
"""

from __future__ import annotations

from typing import Sequence


NO_DATA_MESSAGE = "No verified supplier data found for this request."


class SupplierRAGError(Exception):
    """Base class for all engine errors."""


class DataUnavailable(SupplierRAGError):
    """The record provider could not load the supplier dataset."""


class NotFound(SupplierRAGError):
    """A supplier lookup matched no record."""

    def __init__(self, identifier: str, message: str | None = None) -> None:
        self.identifier = identifier
        super().__init__(message or f"No verified supplier matches '{identifier}'")


class AmbiguousSupplierError(NotFound):
    """Strict lookup found more than one substring match."""

    def __init__(self, identifier: str, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        super().__init__(
            identifier,
            f"'{identifier}' matches {len(self.candidates)} suppliers: {', '.join(self.candidates)}",
        )


class InsufficientDataError(SupplierRAGError):
    """A numeric field required for scoring is absent on the record."""

    def __init__(self, supplier: str, field: str, message: str | None = None) -> None:
        self.supplier = supplier
        self.field = field
        super().__init__(message or f"Supplier '{supplier}' has no verified value for '{field}'")


class OutOfRangeError(InsufficientDataError):
    """A verified numeric field lies outside its allowed range."""

    def __init__(self, supplier: str, field: str, value: float) -> None:
        self.value = value
        super().__init__(
            supplier,
            field,
            f"Supplier '{supplier}' has out-of-range value {value:g} for '{field}'",
        )
