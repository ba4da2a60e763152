"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from supplier_rag.engine import SupplierEngine, build_engine


@lru_cache(maxsize=1)
def get_supplier_engine() -> SupplierEngine:
    """Build the engine once per process from ``config/engine_config.yaml``."""

    return build_engine()
