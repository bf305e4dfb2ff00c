"""Pydantic models for journal rankings and corpus statistics."""

from pydantic import BaseModel, field_validator

from litscout.constants import UNRANKED_TIER


def normalize_journal_name(name: str) -> str:
    """Key used to match journal names across sources and the ranking table."""
    return name.strip().lower()


def normalize_issn(issn: str) -> str:
    """Key used to match ISSNs: trimmed, check digit X upper-cased."""
    return issn.strip().upper()


class JournalRanking(BaseModel):
    """One row of the journal-ranking reference table."""

    journal_name: str
    issn: str | None = None
    tier: int = UNRANKED_TIER
    abs_rating: str | None = None  # Chartered ABS Academic Journal Guide
    abdc_rating: str | None = None  # ABDC Journal Quality List
    is_ft50: bool = False

    @field_validator("issn", "abs_rating", "abdc_rating", mode="before")
    @classmethod
    def blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def normalized_name(self) -> str:
        return normalize_journal_name(self.journal_name)

    @property
    def normalized_issn(self) -> str | None:
        return normalize_issn(self.issn) if self.issn else None


class TopJournal(BaseModel):
    journal: str
    count: int
    avg_tier: float = 0.0


class CorpusStats(BaseModel):
    """Descriptive statistics over a list of papers."""

    total_papers: int = 0
    journal_distribution: dict[str, int] = {}
    year_distribution: dict[str, int] = {}
    avg_citations: int = 0
    top_journals: list[TopJournal] = []
