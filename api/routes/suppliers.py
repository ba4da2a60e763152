"""Supplier search, best-supplier and per-supplier analysis routes."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from supplier_rag.engine import SupplierEngine
from supplier_rag.records import SupplierRecord

from ..dependencies import get_supplier_engine


class SupplierResponse(BaseModel):
    """Verified supplier profile; absent numeric fields are ``null``."""

    supplier_id: Optional[str] = None
    name: str
    location: str = ""
    category: str = ""
    payment_terms: str = ""
    traffic_connections: str = ""
    business_results: str = ""
    price_per_unit: Optional[float] = None
    delivery_time_days: Optional[float] = None
    quantity_capacity: Optional[float] = None
    number_of_employees: Optional[float] = None
    quality_score: Optional[float] = None
    serviceability: Optional[float] = None
    reputation: Optional[float] = None
    flexibility: Optional[float] = None
    financial_condition: Optional[float] = None
    asset_condition: Optional[float] = None

    @classmethod
    def from_record(cls, record: SupplierRecord) -> "SupplierResponse":
        return cls(**record.to_dict())


class SearchHit(BaseModel):
    supplier: SupplierResponse
    relevance: float


class SearchResponse(BaseModel):
    query: str
    results: List[SearchHit]


class AnalysisResponse(BaseModel):
    supplier_overview: Dict[str, Any]
    key_performance_indicators: Dict[str, Any]
    cost_vs_reliability: Dict[str, Any]
    operational_risk: Dict[str, Any]
    financial_asset_strength: Dict[str, Any]
    ai_recommendation: Dict[str, Any]
    confidence_score: int


class RiskAnalysisResponse(BaseModel):
    logistics: float
    financial: Optional[float] = None
    geopolitical: Optional[float] = None
    overall: str
    relevant_events: List[str] = Field(default_factory=list)


class ContextAnalysisResponse(BaseModel):
    supplier: str
    ai_score: float
    human_score: Optional[float] = None
    conflict_index: Optional[float] = None
    risk_analysis: RiskAnalysisResponse
    performance_metrics: Dict[str, Optional[float]]
    recommendation: str
    confidence: float
    prediction: Dict[str, Any]
    contracts_analyzed: int


router = APIRouter()


@router.get("/search", response_model=SearchResponse)
async def search_suppliers(
    q: str = Query(default="", description="Free-text procurement query"),
    top_k: Optional[int] = Query(default=None, ge=0, le=100, description="Maximum results"),
    engine: SupplierEngine = Depends(get_supplier_engine),
) -> SearchResponse:
    """Rank suppliers by keyword relevance."""

    ranked = await engine.rank(q, top_k)
    return SearchResponse(
        query=q,
        results=[SearchHit(supplier=SupplierResponse.from_record(record), relevance=score) for record, score in ranked],
    )


@router.get("/best", response_model=SupplierResponse)
async def best_supplier(
    criteria: str = Query(default="overall", description="price, quality, delivery, financial, capacity, reputation or overall"),
    engine: SupplierEngine = Depends(get_supplier_engine),
) -> SupplierResponse:
    return SupplierResponse.from_record(await engine.get_best(criteria))


@router.get("/{name}/analysis", response_model=AnalysisResponse)
async def supplier_analysis(name: str, engine: SupplierEngine = Depends(get_supplier_engine)) -> AnalysisResponse:
    """Seven-section profile analysis for one supplier."""

    analysis = await engine.analyze(name)
    return AnalysisResponse(**analysis.to_dict())


@router.get("/{name}/context", response_model=ContextAnalysisResponse)
async def supplier_context(name: str, engine: SupplierEngine = Depends(get_supplier_engine)) -> ContextAnalysisResponse:
    """Contract-history and disruption-event analysis for one supplier."""

    analysis = await engine.analyze_context(name)
    return ContextAnalysisResponse(**analysis.to_dict())
