"""Keyword retrieval and name lookup over an in-memory supplier collection."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from .errors import AmbiguousSupplierError, NotFound
from .intents import TEXT_MATCHES, classify_query
from .records import SupplierRecord


LOGGER = logging.getLogger(__name__)


def relevance(record: SupplierRecord, query_lower: str, intents=None) -> float:
    """Score one record against a lower-cased query."""

    score = 0.0
    for match in TEXT_MATCHES:
        if query_lower in str(getattr(record, match.field) or "").lower():
            score += match.bonus

    for rule in intents if intents is not None else classify_query(query_lower):
        boost = rule.boost(record)
        if boost is None:
            LOGGER.debug("Skipping %s intent for %s: no verified %s", rule.name, record.name, rule.field)
            continue
        score += boost
    return score


def rank(records: Sequence[SupplierRecord], query: str) -> List[Tuple[SupplierRecord, float]]:
    """Return ``(record, relevance)`` pairs ordered by relevance.

    Python's sort is stable, so equal relevance keeps provider order.
    """

    query_lower = (query or "").lower()
    intents = classify_query(query_lower)
    scored = [(record, relevance(record, query_lower, intents)) for record in records]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def retrieve(records: Sequence[SupplierRecord], query: str, top_k: int = 10) -> List[SupplierRecord]:
    """Return up to ``top_k`` records relevant to ``query``.

    A blank query is not an error: the first ``top_k`` records are returned
    in provider order without scoring.
    """

    if top_k <= 0:
        return []
    if not query or not query.strip():
        return list(records[:top_k])
    return [record for record, _ in rank(records, query)[:top_k]]


def find_by_name(records: Sequence[SupplierRecord], identifier: str, strict: bool = False) -> SupplierRecord:
    """Resolve a supplier by name.

    Case-insensitive exact match first, then the first substring match in
    provider order. Overlapping names are not disambiguated unless
    ``strict`` is set, in which case several substring hits raise
    ``AmbiguousSupplierError``.
    """

    needle = (identifier or "").strip().lower()
    if not needle:
        raise NotFound(identifier or "")

    for record in records:
        if record.name.lower() == needle or (record.supplier_id and record.supplier_id.lower() == needle):
            return record

    matches = [record for record in records if needle in record.name.lower()]
    if not matches:
        raise NotFound(identifier)
    if strict and len(matches) > 1:
        raise AmbiguousSupplierError(identifier, [record.name for record in matches])
    return matches[0]
