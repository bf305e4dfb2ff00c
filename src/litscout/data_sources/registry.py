"""Maps source ids to adapter factories, per search profile."""

from collections.abc import Callable

from litscout.config import Settings
from litscout.constants import BUSINESS_SOURCES, GENERAL_SOURCES, SOURCE_CATALOGUE
from litscout.data_sources.apify import GoogleScholarClient, SsrnClient
from litscout.data_sources.arxiv import ArxivEconClient
from litscout.data_sources.base_client import SourceAdapter
from litscout.data_sources.base_search import BaseSearchClient
from litscout.data_sources.core import CoreClient
from litscout.data_sources.crossref import CrossrefClient
from litscout.data_sources.doaj import DoajClient
from litscout.data_sources.europe_pmc import EuropePMCClient, PreprintClient
from litscout.data_sources.openalex import OpenAlexClient
from litscout.data_sources.plos import PlosClient
from litscout.data_sources.pmc import PmcClient
from litscout.data_sources.pubmed import PubMedClient
from litscout.data_sources.semantic_scholar import SemanticScholarClient
from litscout.models.model_search import SearchProfile

AdapterFactory = Callable[[Settings], SourceAdapter]

ADAPTER_FACTORIES: dict[str, AdapterFactory] = {
    "pubmed": lambda s: PubMedClient(settings=s),
    "openalex": lambda s: OpenAlexClient(settings=s),
    "semantic_scholar": lambda s: SemanticScholarClient(settings=s),
    "europe_pmc": lambda s: EuropePMCClient(settings=s),
    "medrxiv": lambda s: PreprintClient("medrxiv", settings=s),
    "biorxiv": lambda s: PreprintClient("biorxiv", settings=s),
    "crossref": lambda s: CrossrefClient(settings=s),
    "core": lambda s: CoreClient(settings=s),
    "google_scholar": lambda s: GoogleScholarClient(settings=s),
    "ssrn": lambda s: SsrnClient(settings=s),
    "pmc_fulltext": lambda s: PmcClient(settings=s),
    "plos": lambda s: PlosClient(settings=s),
    "doaj": lambda s: DoajClient(settings=s),
    "arxiv_econ": lambda s: ArxivEconClient(settings=s),
    "base": lambda s: BaseSearchClient(settings=s),
}

PROFILE_SOURCES: dict[SearchProfile, tuple[str, ...]] = {
    SearchProfile.GENERAL: GENERAL_SOURCES,
    SearchProfile.BUSINESS: BUSINESS_SOURCES,
}


def available_sources(profile: SearchProfile) -> tuple[str, ...]:
    return PROFILE_SOURCES[profile]


def describe_sources(profile: SearchProfile) -> list[dict[str, str]]:
    """Catalogue entries ``{id, name, papers, tier}`` for a profile's sources."""
    return [{"id": sid, **SOURCE_CATALOGUE[sid]} for sid in available_sources(profile)]


def build_adapters(source_ids: list[str], settings: Settings) -> list[SourceAdapter]:
    """Instantiate one adapter per id, in the given order."""
    return [ADAPTER_FACTORIES[sid](settings) for sid in source_ids]
