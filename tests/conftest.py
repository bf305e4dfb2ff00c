"""Pytest configuration and fixtures."""

import asyncio

import pytest

from litscout.config import Settings
from litscout.data_sources.base_client import DataSourceError, SourceAdapter
from litscout.models.model_paper import Author, Paper


class FakeAdapter(SourceAdapter):
    """In-memory source adapter: returns canned papers or fails, optionally slowly."""

    def __init__(
        self,
        name: str,
        papers: list[Paper] | None = None,
        error: str | None = None,
        delay: float = 0.0,
        total: int | None = None,
    ):
        super().__init__(settings=Settings())
        self.name = name
        self.papers = papers or []
        self.error = error
        self.delay = delay
        self.total = total
        self.calls: list[tuple[str, int]] = []
        self.finished = False

    @property
    def _source_name(self) -> str:
        return self.name

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        self.calls.append((query, max_results))
        if self.delay:
            await asyncio.sleep(self.delay)
        self.finished = True
        if self.error:
            raise DataSourceError(self.name, self.error)
        papers = self.papers[:max_results]
        return papers, self.total if self.total is not None else len(papers)


@pytest.fixture
def settings() -> Settings:
    """Settings with no API keys and no disk cache."""
    return Settings(
        ncbi_api_key="",
        apify_api_key="",
        anthropic_api_key="",
        cache_enabled=False,
        journal_rankings_path=None,
    )


@pytest.fixture
def make_adapter():
    """Factory for FakeAdapter instances."""
    return FakeAdapter


@pytest.fixture
def make_paper():
    """Factory for Papers with sensible defaults."""

    def _make(title: str = "A study", source: str = "pubmed", **kwargs) -> Paper:
        return Paper(title=title, source=source, **kwargs)

    return _make


@pytest.fixture
def sample_papers() -> list[Paper]:
    """Three papers with varied metadata, for export and stats tests."""
    return [
        Paper(
            title="Effects of Metformin on Type 2 Diabetes",
            abstract="A randomized trial.",
            authors=[Author(name="Jane Smith"), Author(name="Ali Khan")],
            journal="Diabetes Care",
            year=2021,
            doi="10.2337/dc21-0001",
            pmid="33000001",
            url="https://pubmed.ncbi.nlm.nih.gov/33000001/",
            citation_count=12,
            source="pubmed",
        ),
        Paper(
            title="Insulin pumps, a review",
            authors=[Author(name="Wei Zhang")],
            journal="The Lancet",
            year=2019,
            citation_count=3,
            source="openalex",
        ),
        Paper(title="Untitled preprint", source="medrxiv"),
    ]
