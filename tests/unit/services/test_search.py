"""Unit tests for the end-to-end search pipeline."""

import pytest

from litscout.config import Settings
from litscout.models.model_journal import JournalRanking
from litscout.models.model_search import SearchProfile, SearchRequest
from litscout.services.journal_enrichment import InMemoryJournalRankings
from litscout.services.search import (
    AllSourcesFailedError,
    SearchRequestError,
    run_search,
)


@pytest.fixture
def adapters(make_adapter, make_paper):
    """Canned adapters keyed by source id; a factory serves them to run_search."""
    return {
        "pubmed": make_adapter(
            "pubmed",
            [
                make_paper("Metformin and cancer", "pubmed", doi="10.1/met"),
                make_paper("Exercise and ageing", "pubmed"),
            ],
            total=900,
        ),
        "openalex": make_adapter(
            "openalex",
            [make_paper("Metformin & cancer", "openalex", doi="10.1/MET")],
        ),
        "medrxiv": make_adapter("medrxiv", error="HTTP 503: unavailable"),
        "crossref": make_adapter(
            "crossref",
            [
                make_paper("Low cited", "crossref", journal="Unranked Review", citation_count=50),
                make_paper("Top paper", "crossref", journal="Academy of Management Journal", citation_count=5),
                make_paper("Mid paper", "crossref", journal="Journal of Management Studies", citation_count=90),
                make_paper("Top cited", "crossref", journal_issn="0001-4273", citation_count=70),
            ],
        ),
        "semantic_scholar": make_adapter("semantic_scholar", []),
    }


@pytest.fixture
def factory(adapters):
    def _factory(source_ids, settings):
        return [adapters[s] for s in source_ids]

    return _factory


@pytest.fixture
def rankings():
    return InMemoryJournalRankings(
        [
            JournalRanking(
                journal_name="Academy of Management Journal",
                issn="0001-4273",
                tier=1,
                abs_rating="4*",
                is_ft50=True,
            ),
            JournalRanking(journal_name="Journal of Management Studies", tier=3, abs_rating="4"),
        ]
    )


@pytest.mark.asyncio
class TestRunSearch:
    async def test_partial_failure_still_succeeds(self, settings, factory, adapters):
        request = SearchRequest(query="metformin", sources=["pubmed", "medrxiv", "openalex"])

        response = await run_search(request, settings=settings, adapter_factory=factory)

        assert {p.source for p in response.papers} == {"pubmed"}
        assert len(response.per_source) == 3
        medrxiv = response.per_source[1]
        assert medrxiv.source == "medrxiv"
        assert medrxiv.error == "[medrxiv] HTTP 503: unavailable"
        assert medrxiv.returned_count == 0
        assert response.failed_sources == ["medrxiv"]
        assert response.total_found == 3
        assert response.duplicates_removed == 1
        assert response.per_source[0].total_available == 900

    async def test_defaults_to_profile_sources(self, settings, adapters):
        seen = []

        def factory(source_ids, _settings):
            seen.extend(source_ids)
            return [adapters[s] for s in source_ids]

        await run_search(SearchRequest(query="x"), settings=settings, adapter_factory=factory)

        assert seen == ["pubmed", "openalex", "medrxiv"]

    async def test_repeated_sources_searched_once(self, settings, factory, adapters):
        request = SearchRequest(query="x", sources=["pubmed", "pubmed", " openalex "])

        response = await run_search(request, settings=settings, adapter_factory=factory)

        assert response.sources_requested == ["pubmed", "openalex"]
        assert len(adapters["pubmed"].calls) == 1

    @pytest.mark.parametrize(
        "request_kwargs, message",
        [
            ({"query": "   "}, "missing query"),
            ({"query": "x", "sources": []}, "no sources selected"),
            ({"query": "x", "sources": ["crossref"]}, "unknown source"),
            ({"query": "x", "max_results": 0}, "positive"),
        ],
    )
    async def test_invalid_requests(self, settings, factory, request_kwargs, message):
        with pytest.raises(SearchRequestError, match=message):
            await run_search(
                SearchRequest(**request_kwargs), settings=settings, adapter_factory=factory
            )

    async def test_all_sources_failed(self, settings, make_adapter):
        failing = [make_adapter("pubmed", error="down"), make_adapter("openalex", error="down")]

        with pytest.raises(AllSourcesFailedError) as exc_info:
            await run_search(
                SearchRequest(query="x", sources=["pubmed", "openalex"]),
                settings=settings,
                adapter_factory=lambda ids, s: failing,
            )

        assert [r.source_name for r in exc_info.value.results] == ["pubmed", "openalex"]
        assert "pubmed: [pubmed] down" in str(exc_info.value)

    async def test_threshold_comes_from_settings(self, make_adapter, make_paper):
        adapters = [
            make_adapter("pubmed", [make_paper("alpha beta gamma delta", "pubmed")]),
            make_adapter("openalex", [make_paper("alpha beta gamma", "openalex")]),
        ]
        request = SearchRequest(query="x", sources=["pubmed", "openalex"])

        strict = await run_search(
            request,
            settings=Settings(general_similarity_threshold=0.9),
            adapter_factory=lambda ids, s: adapters,
        )
        loose = await run_search(
            request,
            settings=Settings(general_similarity_threshold=0.7),
            adapter_factory=lambda ids, s: adapters,
        )

        assert strict.duplicates_removed == 0
        assert loose.duplicates_removed == 1

    async def test_business_profile_ranks_filters_and_sorts(self, settings, factory, rankings):
        request = SearchRequest(
            query="strategy",
            sources=["crossref", "semantic_scholar"],
            profile=SearchProfile.BUSINESS,
        )

        response = await run_search(
            request, settings=settings, journal_rankings=rankings, adapter_factory=factory
        )

        assert [p.title for p in response.papers] == [
            "Top cited",
            "Top paper",
            "Mid paper",
            "Low cited",
        ]
        assert response.papers[0].journal_tier == 1
        assert response.papers[0].is_ft50 is True
        assert response.papers[3].journal_tier is None

    async def test_business_min_tier_keeps_unranked(self, settings, factory, rankings):
        request = SearchRequest(
            query="strategy",
            sources=["crossref"],
            profile=SearchProfile.BUSINESS,
            min_journal_tier=2,
        )

        response = await run_search(
            request, settings=settings, journal_rankings=rankings, adapter_factory=factory
        )

        assert [p.title for p in response.papers] == ["Top cited", "Top paper", "Low cited"]
        assert response.total_unique == 3

    async def test_general_profile_does_not_rank(self, settings, factory, rankings):
        request = SearchRequest(query="x", sources=["pubmed"])

        response = await run_search(
            request, settings=settings, journal_rankings=rankings, adapter_factory=factory
        )

        assert [p.title for p in response.papers] == ["Metformin and cancer", "Exercise and ageing"]
