"""
Europe PMC source adapters.

Europe PMC is searched directly (``europe_pmc``) and also serves as the
keyword index for the medRxiv and bioRxiv preprint servers, whose own APIs
only browse by date.
"""

from typing import Any

from litscout.constants import (
    EUROPE_PMC_MAX_PAGE_SIZE,
    EUROPE_PMC_SEARCH_URL,
    PREPRINT_FILTER,
)
from litscout.data_sources.base_client import RequestContext, SourceAdapter
from litscout.helpers.paper_helpers import doi_url, parse_year, split_author_string
from litscout.models.model_paper import Paper


class EuropePMCClient(SourceAdapter):
    """Client for the Europe PMC REST search."""

    @property
    def _source_name(self) -> str:
        return "europe_pmc"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        data = await self._query(query, max_results)
        records = (data.get("resultList") or {}).get("result") or []
        papers = [self._parse_record(r) for r in records]
        return papers, data.get("hitCount") or len(papers)

    async def _query(self, query: str, max_results: int) -> dict[str, Any]:
        params = {
            "query": query,
            "resultType": "core",
            "pageSize": min(max_results, EUROPE_PMC_MAX_PAGE_SIZE),
            "format": "json",
        }
        return await self._rest_get(
            EUROPE_PMC_SEARCH_URL,
            params,
            context=RequestContext(source=self._source_name, method="search", params=params),
        )

    def _parse_record(self, record: dict[str, Any]) -> Paper:
        doi = record.get("doi")
        return Paper(
            doi=doi,
            pmid=record.get("pmid"),
            external_id=record.get("pmcid") or record.get("id"),
            title=record.get("title"),
            abstract=record.get("abstractText"),
            authors=split_author_string(record.get("authorString"), pattern=r", "),
            journal=self._journal(record),
            year=parse_year(record.get("pubYear")),
            url=doi_url(doi),
            citation_count=record.get("citedByCount"),
            publication_type=self._publication_type(record),
            source=self._source_name,
        )

    def _journal(self, record: dict[str, Any]) -> str | None:
        journal_info = record.get("journalInfo") or {}
        return record.get("journalTitle") or (journal_info.get("journal") or {}).get("title")

    def _publication_type(self, record: dict[str, Any]) -> str | None:
        return record.get("pubType")


class PreprintClient(EuropePMCClient):
    """medRxiv / bioRxiv preprints, searched through Europe PMC's preprint index.

    Europe PMC returns preprints from every server under ``SRC:PPR``; records
    are kept only when their ``source`` names this server. The reported total
    is Europe PMC's hit count across all preprint servers.
    """

    def __init__(self, server: str, **kwargs):
        self.server = server
        super().__init__(**kwargs)

    @property
    def _source_name(self) -> str:
        return self.server

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        data = await self._query(f"({query}) AND {PREPRINT_FILTER}", max_results)
        records = (data.get("resultList") or {}).get("result") or []
        papers = [self._parse_record(r) for r in records if self._from_server(r)]
        return papers, data.get("hitCount") or len(papers)

    def _from_server(self, record: dict[str, Any]) -> bool:
        # Preprint records carry source "PPR"; the server name is the publisher.
        publisher = (record.get("bookOrReportDetails") or {}).get("publisher") or ""
        source = record.get("source") or ""
        return self.server in source.lower() or self.server in publisher.lower()

    def _journal(self, record: dict[str, Any]) -> str | None:
        return super()._journal(record) or self.server

    def _publication_type(self, record: dict[str, Any]) -> str | None:
        return "preprint"
