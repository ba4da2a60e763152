"""Pairwise supplier comparison route."""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from supplier_rag.engine import SupplierEngine

from ..dependencies import get_supplier_engine


class ComparisonResponse(BaseModel):
    """Per-dimension winners; ``null`` means the suppliers are level."""

    supplier_a: str
    supplier_b: str
    score_a: float
    score_b: float
    winner: Optional[str] = None
    quality_winner: Optional[str] = None
    price_winner: Optional[str] = None
    delivery_winner: Optional[str] = None
    financial_winner: Optional[str] = None
    detailed_comparison: Dict[str, float]
    recommendation: str


router = APIRouter()


@router.get("", response_model=ComparisonResponse)
async def compare_suppliers(
    a: str = Query(..., description="First supplier name or id"),
    b: str = Query(..., description="Second supplier name or id"),
    engine: SupplierEngine = Depends(get_supplier_engine),
) -> ComparisonResponse:
    result = await engine.compare(a, b)
    return ComparisonResponse(**result.to_dict())
