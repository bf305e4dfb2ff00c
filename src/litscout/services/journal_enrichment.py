"""
Journal-ranking enrichment for business and management literature.

Papers are matched against a reference table of ranked journals (tier 1-5,
Chartered ABS and ABDC ratings, FT50 membership) by ISSN first and by
normalized (trimmed, lower-cased) journal name second.
"""

import csv
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from litscout.constants import MISSING_TIER_SORT_KEY, UNRANKED_TIER
from litscout.models.model_journal import (
    JournalRanking,
    normalize_issn,
    normalize_journal_name,
)
from litscout.models.model_paper import Paper

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y", "t"}


class JournalRankingLookup(Protocol):
    """Anything that can resolve journal names / ISSNs to rankings."""

    def lookup(self, names: set[str], issns: set[str]) -> list[JournalRanking]: ...


class InMemoryJournalRankings:
    """Journal ranking table held in memory, optionally loaded from CSV."""

    def __init__(self, rankings: Iterable[JournalRanking] = ()):
        self._by_name: dict[str, JournalRanking] = {}
        self._by_issn: dict[str, JournalRanking] = {}
        for ranking in rankings:
            self._by_name[ranking.normalized_name] = ranking
            if ranking.normalized_issn:
                self._by_issn[ranking.normalized_issn] = ranking

    def __len__(self) -> int:
        return len(self._by_name)

    @classmethod
    def from_csv(cls, path: Path) -> "InMemoryJournalRankings":
        """Load ``journal_name,issn,tier,abs_rating,abdc_rating,is_ft50`` rows."""
        with path.open(newline="", encoding="utf-8") as f:
            rankings = [
                JournalRanking(
                    journal_name=row["journal_name"],
                    issn=row.get("issn"),
                    tier=int((row.get("tier") or "").strip() or UNRANKED_TIER),
                    abs_rating=row.get("abs_rating"),
                    abdc_rating=row.get("abdc_rating"),
                    is_ft50=(row.get("is_ft50") or "").strip().lower() in _TRUE_VALUES,
                )
                for row in csv.DictReader(f)
                if (row.get("journal_name") or "").strip()
            ]
        logger.info("Loaded %d journal rankings from %s", len(rankings), path)
        return cls(rankings)

    def lookup(self, names: set[str], issns: set[str]) -> list[JournalRanking]:
        found = {id(r): r for n in names if (r := self._by_name.get(n))}
        found.update({id(r): r for i in issns if (r := self._by_issn.get(i))})
        return list(found.values())


def enrich_with_journal_rankings(
    papers: list[Paper], rankings: JournalRankingLookup
) -> list[Paper]:
    """Return copies of ``papers`` carrying their journal's ranking, where known.

    A failing lookup leaves the papers unenriched.
    """
    names = {normalize_journal_name(p.journal) for p in papers if p.journal}
    issns = {normalize_issn(p.journal_issn) for p in papers if p.journal_issn}
    if not names and not issns:
        return papers

    try:
        found = rankings.lookup(names, issns)
    except Exception as e:
        logger.warning("Journal ranking lookup failed, returning papers unranked: %s", e)
        return papers

    by_name = {r.normalized_name: r for r in found}
    by_issn = {r.normalized_issn: r for r in found if r.normalized_issn}

    enriched = []
    for paper in papers:
        ranking = (
            by_issn.get(normalize_issn(paper.journal_issn)) if paper.journal_issn else None
        )
        if ranking is None and paper.journal:
            ranking = by_name.get(normalize_journal_name(paper.journal))
        if ranking is None:
            enriched.append(paper)
            continue
        enriched.append(
            paper.model_copy(
                update={
                    "journal_tier": ranking.tier,
                    "abs_rating": ranking.abs_rating,
                    "abdc_rating": ranking.abdc_rating,
                    "is_ft50": ranking.is_ft50,
                }
            )
        )

    logger.info(
        "Matched %d of %d papers to ranked journals",
        sum(1 for p in enriched if p.journal_tier is not None),
        len(enriched),
    )
    return enriched


def filter_by_min_tier(papers: list[Paper], min_tier: int | None) -> list[Paper]:
    """Keep papers of unknown tier or tier <= ``min_tier`` (1 is best)."""
    if not min_tier:
        return papers
    return [p for p in papers if p.journal_tier is None or p.journal_tier <= min_tier]


def sort_by_tier_and_citations(papers: list[Paper]) -> list[Paper]:
    """Best tier first (unknown last), then most cited first. Stable."""
    return sorted(
        papers,
        key=lambda p: (
            p.journal_tier or MISSING_TIER_SORT_KEY,
            -(p.citation_count or 0),
        ),
    )
