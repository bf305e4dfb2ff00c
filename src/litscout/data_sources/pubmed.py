"""
PubMed source adapter.

Two-step E-utilities protocol:
  1. ESearch: PMIDs matching the query, plus the total hit count (JSON)
  2. EFetch: full records for those PMIDs, in batches (XML)

Both steps count towards the adapter's elapsed time.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from litscout.constants import (
    PUBMED_ARTICLE_URL,
    PUBMED_FETCH_URL,
    PUBMED_MAX_RESULTS,
    PUBMED_SEARCH_URL,
)
from litscout.data_sources.base_client import (
    DataSourceError,
    RequestContext,
    SourceAdapter,
)
from litscout.helpers.paper_helpers import parse_int, parse_year
from litscout.models.model_paper import Author, Paper


class PubMedClient(SourceAdapter):
    """Client for the NCBI PubMed E-utilities."""

    database: str = "pubmed"
    fetch_batch_size: int = 200

    @property
    def _source_name(self) -> str:
        return "pubmed"

    def _with_api_key(self, params: dict[str, Any]) -> dict[str, Any]:
        if self.settings.ncbi_api_key:
            params["api_key"] = self.settings.ncbi_api_key
        return params

    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        pmids, total = await self.search_pmids(query, max_results)
        if not pmids:
            return [], total
        return await self.fetch_papers(pmids), total

    async def search_pmids(self, query: str, max_results: int) -> tuple[list[str], int]:
        """ESearch: return (record ids in relevance order, total hit count)."""
        params = self._with_api_key(
            {
                "db": self.database,
                "term": query,
                "retmax": min(max_results, PUBMED_MAX_RESULTS),
                "retmode": "json",
                "sort": "relevance",
            }
        )
        data = await self._rest_get(
            PUBMED_SEARCH_URL,
            params,
            context=RequestContext(
                source=self._source_name, method="esearch", params=params
            ),
        )
        result = data.get("esearchresult") or {}
        pmids: list[str] = result.get("idlist") or []
        return pmids, parse_int(result.get("count")) or 0

    async def fetch_papers(self, pmids: list[str]) -> list[Paper]:
        """EFetch: fetch and parse the records for the given PMIDs."""
        papers: list[Paper] = []
        for i in range(0, len(pmids), self.fetch_batch_size):
            batch = pmids[i : i + self.fetch_batch_size]
            params = self._with_api_key(
                {"db": "pubmed", "id": ",".join(batch), "retmode": "xml"}
            )
            xml_text = await self._rest_get_text(
                PUBMED_FETCH_URL,
                params,
                context=RequestContext(source="pubmed", method="efetch"),
            )
            papers.extend(self._parse_pubmed_xml(xml_text))
        return papers

    def _parse_pubmed_xml(self, xml_text: str) -> list[Paper]:
        """Parse an EFetch PubmedArticleSet into Papers."""
        try:
            root = ET.fromstring(xml_text)
        except ET.ParseError as e:
            raise DataSourceError(self._source_name, f"Failed to parse XML: {e}")

        papers = []
        for article_elem in root.findall(".//PubmedArticle"):
            pmid = self._xml_text(article_elem, ".//MedlineCitation/PMID")

            # Abstract - may have multiple labelled sections
            abstract_parts = []
            for abs_elem in article_elem.findall(".//Abstract/AbstractText"):
                label = abs_elem.get("Label", "")
                text = "".join(abs_elem.itertext()).strip()
                if label and text:
                    abstract_parts.append(f"{label}: {text}")
                elif text:
                    abstract_parts.append(text)

            authors = []
            for author in article_elem.findall(".//AuthorList/Author"):
                last_name = self._xml_text(author, "LastName")
                fore_name = self._xml_text(author, "ForeName")
                name = f"{fore_name or ''} {last_name or ''}".strip() or self._xml_text(
                    author, "CollectiveName"
                )
                if name:
                    authors.append(
                        Author(
                            name=name,
                            affiliation=self._xml_text(
                                author, "AffiliationInfo/Affiliation"
                            ),
                        )
                    )

            pub_date = article_elem.find(".//JournalIssue/PubDate")
            year = None
            if pub_date is not None:
                year = parse_year(
                    self._xml_text(pub_date, "Year")
                    or self._xml_text(pub_date, "MedlineDate")
                )

            papers.append(
                Paper(
                    pmid=pmid,
                    doi=self._find_doi(article_elem),
                    title=self._xml_text(article_elem, ".//Article/ArticleTitle"),
                    abstract=" ".join(abstract_parts) or None,
                    authors=authors,
                    journal=self._xml_text(article_elem, ".//Journal/Title"),
                    journal_issn=self._xml_text(article_elem, ".//Journal/ISSN"),
                    year=year,
                    url=PUBMED_ARTICLE_URL.format(pmid=pmid) if pmid else None,
                    publication_type=self._xml_text(
                        article_elem, ".//PublicationTypeList/PublicationType"
                    ),
                    source=self._source_name,
                )
            )
        return papers

    @staticmethod
    def _find_doi(article_elem: ET.Element) -> str | None:
        for id_elem in article_elem.findall(".//PubmedData/ArticleIdList/ArticleId"):
            if id_elem.get("IdType") == "doi" and id_elem.text:
                return id_elem.text.strip()
        for loc in article_elem.findall(".//Article/ELocationID"):
            if loc.get("EIdType") == "doi" and loc.text:
                return loc.text.strip()
        return None

    @staticmethod
    def _xml_text(elem: ET.Element, path: str) -> str | None:
        """Get the full text content of an XML element, or None."""
        found = elem.find(path)
        if found is None:
            return None
        text = "".join(found.itertext()).strip()
        return text or None
