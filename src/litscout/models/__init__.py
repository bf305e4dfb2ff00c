"""Data models for LitScout."""

from litscout.models.model_journal import CorpusStats, JournalRanking, TopJournal
from litscout.models.model_paper import Author, Paper
from litscout.models.model_search import (
    DedupOutcome,
    DedupStats,
    DuplicateMatch,
    MatchKind,
    SearchProfile,
    SearchRequest,
    SearchResponse,
    SourceBreakdown,
    SourceResult,
)

__all__ = [
    "Author",
    "CorpusStats",
    "DedupOutcome",
    "DedupStats",
    "DuplicateMatch",
    "JournalRanking",
    "MatchKind",
    "Paper",
    "SearchProfile",
    "SearchRequest",
    "SearchResponse",
    "SourceBreakdown",
    "SourceResult",
    "TopJournal",
]
