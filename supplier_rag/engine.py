"""Async entry points tying providers, scoring and formatting together.

``SupplierEngine`` is the only object the API and chat surfaces talk to.
Every method awaits the provider's memoised load, runs a pure computation
over the materialised records and records an audit event. Typed errors
(``DataUnavailable``, ``NotFound``, ``InsufficientDataError``) propagate to
the caller unchanged.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from . import auditing, comparison, config, context_analysis, formatter, prediction, retrieval, scoring
from .comparison import ComparisonResult
from .context_analysis import ContextAnalysis
from .errors import NO_DATA_MESSAGE, DataUnavailable
from .formatter import SupplierAnalysis
from .prediction import PredictionResult, PredictionStrategy
from .providers import (
    ContextProvider,
    CSVRecordProvider,
    RecordProvider,
    SQLContextProvider,
    SQLRecordProvider,
)
from .records import SupplierRecord


LOGGER = logging.getLogger(__name__)


class SupplierEngine:
    """Scoring and retrieval over one caller-owned record provider."""

    def __init__(
        self,
        provider: RecordProvider,
        context_provider: Optional[ContextProvider] = None,
        strategy: Optional[PredictionStrategy] = None,
        strict_matching: bool = False,
        default_top_k: int = 10,
    ) -> None:
        self.provider = provider
        self.context_provider = context_provider
        self.strategy = strategy or PredictionStrategy()
        self.strict_matching = strict_matching
        self.default_top_k = default_top_k
        if self.strategy.uses_context and context_provider is None:
            raise ValueError("The contract_history strategy needs a context provider")
        # Chat answers never wait on contract history.
        self.chat_strategy = PredictionStrategy(fixed_confidence=self.strategy.fixed_confidence)

    async def _audit(self, event_type: str, payload: Dict[str, Any]) -> None:
        await asyncio.to_thread(auditing.persist_audit_log, event_type, payload)

    async def records(self) -> List[SupplierRecord]:
        return await self.provider.ensure_loaded()

    async def retrieve(self, query: str, top_k: Optional[int] = None) -> List[SupplierRecord]:
        top_k = self.default_top_k if top_k is None else top_k
        results = retrieval.retrieve(await self.records(), query, top_k)
        await self._audit(
            event_type="supplier_retrieval",
            payload={"query": query, "top_k": top_k, "results": [record.name for record in results]},
        )
        return results

    async def rank(self, query: str, top_k: Optional[int] = None) -> List[Tuple[SupplierRecord, float]]:
        top_k = self.default_top_k if top_k is None else top_k
        if top_k <= 0:
            return []
        records = await self.records()
        if not query or not query.strip():
            ranked = [(record, 0.0) for record in records[:top_k]]
        else:
            ranked = retrieval.rank(records, query)[:top_k]
        await self._audit(
            event_type="supplier_retrieval",
            payload={"query": query, "top_k": top_k, "results": [record.name for record, _ in ranked]},
        )
        return ranked

    async def find(self, identifier: str) -> SupplierRecord:
        return retrieval.find_by_name(await self.records(), identifier, strict=self.strict_matching)

    async def score(self, identifier: str) -> float:
        return scoring.composite_score(await self.find(identifier))

    async def compare(self, identifier_a: str, identifier_b: str) -> ComparisonResult:
        records = await self.records()
        record_a = retrieval.find_by_name(records, identifier_a, strict=self.strict_matching)
        record_b = retrieval.find_by_name(records, identifier_b, strict=self.strict_matching)
        result = comparison.compare(record_a, record_b)
        await self._audit(
            event_type="supplier_comparison",
            payload={"supplier_a": result.supplier_a, "supplier_b": result.supplier_b, "winner": result.winner},
        )
        return result

    async def predict(self, identifier: str) -> PredictionResult:
        record = await self.find(identifier)
        context = None
        if self.strategy.uses_context:
            context = await self.context_provider.get_context(record)
        result = prediction.predict(record, self.strategy, context)
        await self._audit(
            event_type="supplier_prediction",
            payload={
                "supplier": result.supplier,
                "trend": result.predicted_6month_trend,
                "confidence": result.confidence,
                "confidence_basis": result.confidence_basis,
            },
        )
        return result

    async def get_best(self, criteria: str = "overall") -> SupplierRecord:
        best = prediction.get_best(await self.records(), criteria)
        await self._audit(
            event_type="best_supplier",
            payload={"criteria": criteria, "supplier": best.name},
        )
        return best

    async def analyze(self, identifier: str) -> SupplierAnalysis:
        record = await self.find(identifier)
        analysis = formatter.analyze(record)
        await self._audit(
            event_type="supplier_analysis",
            payload={"supplier": record.name, "overall_score": analysis.ai_recommendation["overall_score"]},
        )
        return analysis

    async def analyze_context(self, identifier: str) -> ContextAnalysis:
        if self.context_provider is None:
            raise DataUnavailable("No contract history source is configured")
        record = await self.find(identifier)
        context = await self.context_provider.get_context(record)
        return context_analysis.analyze_context(record, context)

    async def chat(self, query: str) -> str:
        """Data-grounded chat reply; missing data becomes ``NO_DATA_MESSAGE``."""

        try:
            records = await self.records()
        except DataUnavailable as exc:
            LOGGER.warning("Chat query without data: %s", exc)
            return NO_DATA_MESSAGE
        reply = formatter.chat_response(query, records, self.chat_strategy)
        await self._audit(event_type="chat_query", payload={"query": query, "grounded": reply != NO_DATA_MESSAGE})
        return reply


def build_engine(settings: Optional[Dict[str, Any]] = None) -> SupplierEngine:
    """Build an engine from the YAML configuration."""

    settings = settings or config.load_config()
    provider_cfg = settings["provider"]
    prediction_cfg = settings["prediction"]

    kind = provider_cfg.get("kind", "csv")
    context_provider: Optional[ContextProvider] = None
    if kind == "csv":
        provider: RecordProvider = CSVRecordProvider(config.resolve_path(provider_cfg["csv_path"]))
    elif kind == "sql":
        provider = SQLRecordProvider()
        context_provider = SQLContextProvider(engine=provider.engine)
    else:
        raise ValueError(f"Unknown provider kind '{kind}'")

    strategy = PredictionStrategy(
        name=prediction_cfg.get("strategy", prediction.HEURISTIC),
        fixed_confidence=float(prediction_cfg.get("fixed_confidence", 82.0)),
    )
    return SupplierEngine(
        provider=provider,
        context_provider=context_provider,
        strategy=strategy,
        strict_matching=bool(settings["lookup"].get("strict_matching", False)),
        default_top_k=int(settings["retrieval"].get("default_top_k", 10)),
    )


async def _run_query(args: argparse.Namespace) -> str:
    engine = build_engine()
    if args.compare:
        return formatter.summarize_comparison(await engine.compare(*args.compare))
    if args.predict:
        return formatter.summarize_prediction(await engine.predict(args.predict))
    return await engine.chat(args.query or "")


if __name__ == "__main__":  # pragma: no cover - manual execution path.
    logging.basicConfig(level=logging.INFO)
    parser = argparse.ArgumentParser(description="Query the supplier dataset")
    parser.add_argument("query", nargs="?", help="Free-text chat query")
    parser.add_argument("--compare", nargs=2, metavar=("SUPPLIER_A", "SUPPLIER_B"))
    parser.add_argument("--predict", metavar="SUPPLIER")
    print(asyncio.run(_run_query(parser.parse_args())))
