"""Data-grounded chat endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from supplier_rag.engine import SupplierEngine
from supplier_rag.errors import NO_DATA_MESSAGE

from ..dependencies import get_supplier_engine


class ChatRequest(BaseModel):
    query: str = Field(..., description="Free-text supplier question")


class ChatResponse(BaseModel):
    query: str
    answer: str
    grounded: bool


router = APIRouter()


@router.post("", response_model=ChatResponse)
async def chat(payload: ChatRequest, engine: SupplierEngine = Depends(get_supplier_engine)) -> ChatResponse:
    """Answer from retrieved records only; unanswerable queries get the no-data reply."""

    answer = await engine.chat(payload.query)
    return ChatResponse(query=payload.query, answer=answer, grounded=answer != NO_DATA_MESSAGE)
