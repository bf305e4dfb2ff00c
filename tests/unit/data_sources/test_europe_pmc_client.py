"""Unit tests for the Europe PMC and preprint adapters."""

from unittest.mock import AsyncMock, patch

import pytest

from litscout.data_sources.europe_pmc import EuropePMCClient, PreprintClient

RECORD = {
    "id": "34000001",
    "pmid": "34000001",
    "pmcid": "PMC800001",
    "doi": "10.1/epmc",
    "title": "Vaccine uptake in Europe",
    "authorString": "Smith J, Doe A, Lee K.",
    "journalTitle": "Vaccine",
    "pubYear": "2022",
    "abstractText": "We measured uptake.",
    "citedByCount": 4,
    "pubType": "research-article",
    "source": "MED",
}


def _payload(*records, hit_count=None):
    data = {"resultList": {"result": list(records)}}
    if hit_count is not None:
        data["hitCount"] = hit_count
    return data


@pytest.mark.asyncio
class TestEuropePMC:
    async def test_parses_record(self, settings):
        client = EuropePMCClient(settings=settings)
        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value=_payload(RECORD, hit_count=77)
        ) as mock_get:
            result = await client.search("vaccine", 5000)

        params = mock_get.call_args.args[1]
        assert params["pageSize"] == 1000
        assert params["resultType"] == "core"
        assert params["query"] == "vaccine"

        assert result.total_available_count == 77
        paper = result.papers[0]
        assert paper.author_names == ["Smith J", "Doe A", "Lee K."]
        assert paper.year == 2022
        assert paper.url == "https://doi.org/10.1/epmc"
        assert paper.external_id == "PMC800001"
        assert paper.publication_type == "research-article"
        assert paper.source == "europe_pmc"

    async def test_missing_year_and_doi(self, settings):
        client = EuropePMCClient(settings=settings)
        record = {"title": "T", "pubYear": "n.d."}
        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value=_payload(record)
        ):
            result = await client.search("x", 10)

        paper = result.papers[0]
        assert paper.year is None
        assert paper.url is None
        assert paper.authors == ()


@pytest.mark.asyncio
class TestPreprints:
    async def test_filters_to_server_and_marks_preprint(self, settings):
        client = PreprintClient("medrxiv", settings=settings)
        medrxiv = {
            "title": "Long covid cohort",
            "doi": "10.1101/2023.01.01.111",
            "source": "PPR",
            "bookOrReportDetails": {"publisher": "medRxiv"},
        }
        biorxiv = {
            "title": "Spike protein structure",
            "source": "PPR",
            "bookOrReportDetails": {"publisher": "bioRxiv"},
        }
        with patch.object(
            client,
            "_rest_get",
            new_callable=AsyncMock,
            return_value=_payload(medrxiv, biorxiv, hit_count=2),
        ) as mock_get:
            result = await client.search("long covid", 10)

        assert mock_get.call_args.args[1]["query"] == "(long covid) AND SRC:PPR"
        assert result.source_name == "medrxiv"
        assert [p.title for p in result.papers] == ["Long covid cohort"]
        paper = result.papers[0]
        assert paper.source == "medrxiv"
        assert paper.publication_type == "preprint"
        assert paper.journal == "medrxiv"

    async def test_biorxiv_uses_its_own_name(self, settings):
        client = PreprintClient("biorxiv", settings=settings)
        record = {"title": "Spike", "source": "bioRxiv preprint"}
        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value=_payload(record)
        ):
            result = await client.search("spike", 10)

        assert result.source_name == "biorxiv"
        assert len(result.papers) == 1

    async def test_preprint_filter_applies_to_whole_boolean_query(self, settings):
        client = PreprintClient("medrxiv", settings=settings)
        with patch.object(
            client, "_rest_get", new_callable=AsyncMock, return_value=_payload()
        ) as mock_get:
            await client.search("metformin OR insulin", 10)

        assert (
            mock_get.call_args.args[1]["query"]
            == "(metformin OR insulin) AND SRC:PPR"
        )
