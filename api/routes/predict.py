"""Six-month outlook endpoint returning trend, risk factors and confidence."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from supplier_rag.engine import SupplierEngine

from ..dependencies import get_supplier_engine


class PredictionResponse(BaseModel):
    """Heuristic outlook; ``confidence_basis`` names the formula used."""

    supplier: str
    current_performance: float
    predicted_6month_trend: str
    risk_factors: List[str]
    confidence: float
    confidence_basis: str
    recommendation: str


router = APIRouter()


@router.get("/{name}", response_model=PredictionResponse)
async def predict_supplier(name: str, engine: SupplierEngine = Depends(get_supplier_engine)) -> PredictionResponse:
    result = await engine.predict(name)
    return PredictionResponse(**result.to_dict())
