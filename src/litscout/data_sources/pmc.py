"""
PubMed Central full-text source adapter (general profile).

Same two-step E-utilities protocol as PubMed, against ``db=pmc``, except
that step 2 is ESummary (JSON). Summaries carry no abstract.
"""

from typing import Any

from litscout.constants import PMC_ARTICLE_URL, PMC_SUMMARY_URL, UNKNOWN_AUTHOR
from litscout.data_sources.base_client import RequestContext
from litscout.data_sources.pubmed import PubMedClient
from litscout.helpers.paper_helpers import parse_year
from litscout.models.model_paper import Author, Paper


class PmcClient(PubMedClient):
    """Client for PubMed Central via ESearch + ESummary."""

    database = "pmc"

    @property
    def _source_name(self) -> str:
        return "pmc_fulltext"

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        uids, total = await self.search_pmids(query, max_results)
        if not uids:
            return [], total
        return await self.fetch_summaries(uids), total

    async def fetch_summaries(self, uids: list[str]) -> list[Paper]:
        """ESummary: one Paper per PMC uid, in the order given."""
        papers: list[Paper] = []
        for i in range(0, len(uids), self.fetch_batch_size):
            batch = uids[i : i + self.fetch_batch_size]
            params = self._with_api_key(
                {"db": self.database, "id": ",".join(batch), "retmode": "json"}
            )
            data = await self._rest_get(
                PMC_SUMMARY_URL,
                params,
                context=RequestContext(source=self._source_name, method="esummary"),
            )
            result = data.get("result") or {}
            papers.extend(
                self._parse_summary(uid, result[uid]) for uid in batch if uid in result
            )
        return papers

    def _parse_summary(self, uid: str, summary: dict[str, Any]) -> Paper:
        ids = {
            a.get("idtype"): a.get("value")
            for a in summary.get("articleids") or []
            if isinstance(a, dict)
        }
        return Paper(
            doi=ids.get("doi") or None,
            pmid=ids.get("pmid") or None,
            external_id=ids.get("pmcid") or f"PMC{uid}",
            title=summary.get("title"),
            authors=[
                Author(name=a.get("name") or UNKNOWN_AUTHOR)
                for a in summary.get("authors") or []
            ],
            journal=summary.get("fulljournalname") or summary.get("source"),
            journal_issn=summary.get("issn") or summary.get("essn") or None,
            year=parse_year(summary.get("pubdate")),
            url=PMC_ARTICLE_URL.format(pmcid=uid),
            publication_type="full_text",
            source=self._source_name,
        )
