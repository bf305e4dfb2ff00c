"""
Pydantic models for bibliographic records.

These are the data contracts between the source adapters and everything
downstream. Nothing past an adapter ever sees a raw API response.
"""

from pydantic import BaseModel, ConfigDict, field_validator

from litscout.constants import NO_TITLE


class Author(BaseModel):
    """One author of a paper, in source order."""

    model_config = ConfigDict(frozen=True)

    name: str
    affiliation: str | None = None
    orcid: str | None = None


class Paper(BaseModel):
    """Canonical record for one bibliographic item.

    Immutable once an adapter has produced it. Deduplication only classifies
    papers; journal enrichment returns new copies via ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    # Identity
    doi: str | None = None
    pmid: str | None = None
    external_id: str | None = None  # OpenAlex work id, S2 paper id, PMCID, ...

    # Content
    title: str = NO_TITLE
    abstract: str | None = None
    authors: tuple[Author, ...] = ()

    # Provenance
    source: str
    journal: str | None = None
    year: int | None = None
    url: str | None = None
    citation_count: int | None = None
    publication_type: str | None = None

    # Business-literature extension, filled by journal enrichment
    journal_issn: str | None = None
    journal_tier: int | None = None  # 1 = best ... 5 = unranked
    abs_rating: str | None = None
    abdc_rating: str | None = None
    is_ft50: bool | None = None

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return NO_TITLE
        return value

    @field_validator("authors", mode="before")
    @classmethod
    def coerce_authors(cls, value: object) -> object:
        return () if value is None else value

    @property
    def author_names(self) -> list[str]:
        return [a.name for a in self.authors]
