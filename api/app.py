"""FastAPI application exposing supplier search, scoring, prediction and auditing routes."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from supplier_rag.errors import DataUnavailable, InsufficientDataError, NotFound

from .routes import audit, chat, compare, predict, suppliers


LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Supplier Scoring & Retrieval API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(suppliers.router, prefix="/suppliers", tags=["suppliers"])
app.include_router(compare.router, prefix="/compare", tags=["compare"])
app.include_router(predict.router, prefix="/predict", tags=["predict"])
app.include_router(chat.router, prefix="/chat", tags=["chat"])
app.include_router(audit.router, prefix="/audit", tags=["audit"])


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InsufficientDataError)
async def insufficient_data_handler(request: Request, exc: InsufficientDataError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "supplier": exc.supplier, "field": exc.field},
    )


@app.exception_handler(DataUnavailable)
async def data_unavailable_handler(request: Request, exc: DataUnavailable) -> JSONResponse:
    LOGGER.warning("Supplier data unavailable for %s: %s", request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Quick health endpoint for readiness checks."""

    return {"status": "ok"}
