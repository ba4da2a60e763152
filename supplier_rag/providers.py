"""Supplier record and context providers.

A provider owns one materialised supplier collection. ``ensure_loaded``
performs the underlying I/O at most once: concurrent first callers share a
single in-flight task (single-flight), later callers get the memoised list
until ``invalidate`` is called. Blocking reads run in a worker thread so the
event loop stays responsive.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd
from sqlalchemy.engine import Engine

from . import auditing, db_connector
from .errors import DataUnavailable
from .records import Contract, DisruptionEvent, SupplierContext, SupplierRecord


LOGGER = logging.getLogger(__name__)


class RecordProvider:
    """Base class implementing the load-once contract."""

    source = "records"

    def __init__(self) -> None:
        self._records: Optional[List[SupplierRecord]] = None
        self._load_task: Optional[asyncio.Task] = None
        self.load_count = 0

    async def _fetch(self) -> List[SupplierRecord]:
        raise NotImplementedError

    @property
    def loaded(self) -> bool:
        return self._records is not None

    async def ensure_loaded(self) -> List[SupplierRecord]:
        """Return the supplier collection, loading it on first use.

        Cancelling one waiter does not cancel the shared load; use
        ``invalidate`` to abort it.
        """

        if self._records is not None:
            return self._records
        if self._load_task is None or self._load_task.done():
            self._load_task = asyncio.ensure_future(self._load())
        return await asyncio.shield(self._load_task)

    load_all = ensure_loaded

    async def _load(self) -> List[SupplierRecord]:
        try:
            records = await self._fetch()
        except asyncio.CancelledError:
            LOGGER.info("Supplier load from %s cancelled", self.source)
            raise
        except DataUnavailable:
            self._load_task = None
            raise
        except Exception as exc:
            self._load_task = None
            LOGGER.error("Failed to load suppliers from %s: %s", self.source, exc)
            raise DataUnavailable(f"Supplier data unavailable from {self.source}") from exc

        self._records = list(records)
        self.load_count += 1
        LOGGER.info("Loaded %d suppliers from %s", len(self._records), self.source)
        return self._records

    def invalidate(self) -> None:
        """Drop the memoised records and abort any in-flight load."""

        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        self._load_task = None
        self._records = None


class InMemoryRecordProvider(RecordProvider):
    """Provider over records already held by the caller."""

    source = "memory"

    def __init__(self, records: Iterable[SupplierRecord]) -> None:
        super().__init__()
        self._source_records = list(records)

    async def _fetch(self) -> List[SupplierRecord]:
        return list(self._source_records)


def records_from_frame(frame: pd.DataFrame, source: str) -> List[SupplierRecord]:
    records = []
    for row in frame.to_dict(orient="records"):
        try:
            records.append(SupplierRecord.from_mapping(row))
        except ValueError:
            LOGGER.warning("Skipping unnamed supplier row from %s", source)
    return records


class CSVRecordProvider(RecordProvider):
    """Provider backed by the supplier dataset CSV export."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = Path(path)
        self.source = str(self.path)

    def _read(self) -> List[SupplierRecord]:
        frame = pd.read_csv(self.path, thousands=",", skipinitialspace=True, encoding="utf-8")
        frame.columns = [str(column).strip() for column in frame.columns]
        auditing.record_lineage(table_name="suppliers", source_files=[str(self.path)])
        auditing.log_data_quality(frame, source=str(self.path))
        return records_from_frame(frame, str(self.path))

    async def _fetch(self) -> List[SupplierRecord]:
        return await asyncio.to_thread(self._read)


class SQLRecordProvider(RecordProvider):
    """Provider backed by the ``suppliers`` table of the relational store."""

    source = "suppliers table"

    def __init__(self, engine: Optional[Engine] = None) -> None:
        super().__init__()
        self.engine = engine or db_connector.get_engine()

    def _read(self) -> List[SupplierRecord]:
        rows = db_connector.fetch_supplier_rows(self.engine)
        auditing.record_lineage(table_name="suppliers", source_files=[self.source])
        return [SupplierRecord.from_mapping(row) for row in rows]

    async def _fetch(self) -> List[SupplierRecord]:
        return await asyncio.to_thread(self._read)


class ContextProvider:
    """Supplies historical contracts and disruption events for one supplier."""

    async def get_context(self, record: SupplierRecord) -> SupplierContext:
        raise NotImplementedError


class InMemoryContextProvider(ContextProvider):
    def __init__(
        self,
        contracts: Sequence[Contract] = (),
        events: Sequence[DisruptionEvent] = (),
    ) -> None:
        self._contracts: Dict[str, List[Contract]] = {}
        for contract in contracts:
            self._contracts.setdefault(contract.supplier_id, []).append(contract)
        self._events = tuple(events)

    async def get_context(self, record: SupplierRecord) -> SupplierContext:
        key = record.supplier_id or record.name
        contracts = sorted(
            self._contracts.get(key, []),
            key=lambda contract: contract.contract_date or "",
            reverse=True,
        )
        return SupplierContext(contracts=tuple(contracts), events=self._events)


class SQLContextProvider(ContextProvider):
    """Context read from the ``contracts`` and ``disruption_events`` tables."""

    def __init__(self, engine: Optional[Engine] = None, contract_limit: int = 20, event_limit: int = 100) -> None:
        self.engine = engine or db_connector.get_engine()
        self.contract_limit = contract_limit
        self.event_limit = event_limit

    def _read(self, supplier_id: str) -> SupplierContext:
        contracts = db_connector.fetch_contract_rows(self.engine, supplier_id, limit=self.contract_limit)
        events = db_connector.fetch_event_rows(self.engine, limit=self.event_limit)
        return SupplierContext(
            contracts=tuple(Contract.from_mapping(row) for row in contracts),
            events=tuple(DisruptionEvent.from_mapping(row) for row in events),
        )

    async def get_context(self, record: SupplierRecord) -> SupplierContext:
        supplier_id = record.supplier_id or record.name
        try:
            return await asyncio.to_thread(self._read, supplier_id)
        except Exception as exc:
            LOGGER.error("Failed to load context for %s: %s", record.name, exc)
            raise DataUnavailable(f"Contract history unavailable for {record.name}") from exc
