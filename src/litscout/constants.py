"""Project-wide constants."""

from pathlib import Path

# -- Base client defaults ---------------------------------------------------
DEFAULT_TIMEOUT: float = 30.0
DEFAULT_MAX_RESULTS: int = 100
USER_AGENT: str = "LitScout/0.1"
DEFAULT_CONTACT_EMAIL: str = "litscout@example.org"

# -- Cache ------------------------------------------------------------------
# Anchored to the project root (two levels above this package's src/ dir) so
# that a single _cache/ directory is used regardless of the working directory.
_PROJECT_ROOT: Path = Path(__file__).parent.parent.parent
DEFAULT_CACHE_DIR: Path = _PROJECT_ROOT / "_cache"
CACHE_TTL: int = 86400  # 1 day in seconds

# -- Paper defaults ---------------------------------------------------------
NO_TITLE: str = "No title"
UNKNOWN_AUTHOR: str = "Unknown"

# -- Deduplication ----------------------------------------------------------
GENERAL_SIMILARITY_THRESHOLD: float = 0.9
BUSINESS_SIMILARITY_THRESHOLD: float = 0.85

# -- Journal rankings -------------------------------------------------------
UNRANKED_TIER: int = 5
# Papers with no tier sort after every ranked tier.
MISSING_TIER_SORT_KEY: int = 6
TOP_JOURNALS_LIMIT: int = 10

# -- PubMed / NCBI ----------------------------------------------------------
NCBI_BASE_URL: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
PUBMED_SEARCH_URL: str = f"{NCBI_BASE_URL}/esearch.fcgi"
PUBMED_FETCH_URL: str = f"{NCBI_BASE_URL}/efetch.fcgi"
PUBMED_ARTICLE_URL: str = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"
PUBMED_MAX_RESULTS: int = 10000

# -- OpenAlex ---------------------------------------------------------------
OPENALEX_WORKS_URL: str = "https://api.openalex.org/works"
OPENALEX_MAX_PER_PAGE: int = 200

# -- Semantic Scholar -------------------------------------------------------
SEMANTIC_SCHOLAR_SEARCH_URL: str = (
    "https://api.semanticscholar.org/graph/v1/paper/search"
)
SEMANTIC_SCHOLAR_MAX_LIMIT: int = 100
SEMANTIC_SCHOLAR_FIELDS: str = (
    "paperId,externalIds,title,abstract,authors,year,venue,"
    "citationCount,url,publicationTypes,journal"
)

# -- Europe PMC (also serves medRxiv / bioRxiv preprints) ------------------
EUROPE_PMC_SEARCH_URL: str = "https://www.ebi.ac.uk/europepmc/webservices/rest/search"
EUROPE_PMC_MAX_PAGE_SIZE: int = 1000
PREPRINT_FILTER: str = "SRC:PPR"

# -- Crossref ---------------------------------------------------------------
CROSSREF_WORKS_URL: str = "https://api.crossref.org/works"
CROSSREF_MAX_ROWS: int = 1000
CROSSREF_SELECT: str = (
    "DOI,title,abstract,author,container-title,published,ISSN,"
    "is-referenced-by-count,type,URL"
)

# -- CORE -------------------------------------------------------------------
CORE_SEARCH_URL: str = "https://api.core.ac.uk/v3/search/works"
CORE_MAX_LIMIT: int = 100

# -- Apify (Google Scholar, SSRN) ------------------------------------------
APIFY_RUN_SYNC_URL: str = (
    "https://api.apify.com/v2/acts/{actor_id}/run-sync-get-dataset-items"
)
GOOGLE_SCHOLAR_ACTOR: str = "marco-gullo~google-scholar-scraper"
SSRN_ACTOR: str = "apify~web-scraper"
SSRN_SEARCH_URL: str = "https://papers.ssrn.com/sol3/results.cfm"
SSRN_BASE_URL: str = "https://papers.ssrn.com"
APIFY_MAX_RESULTS: int = 100

# -- PubMed Central -------------------------------------------------------
PMC_SUMMARY_URL: str = f"{NCBI_BASE_URL}/esummary.fcgi"
PMC_ARTICLE_URL: str = "https://www.ncbi.nlm.nih.gov/pmc/articles/PMC{pmcid}/"

# -- PLOS -------------------------------------------------------------------
PLOS_SEARCH_URL: str = "https://api.plos.org/search"
PLOS_ARTICLE_URL: str = "https://journals.plos.org/plosone/article?id={doi}"
PLOS_MAX_ROWS: int = 1000
PLOS_FIELDS: str = (
    "id,title,abstract,author,journal,publication_date,article_type,counter_total_all"
)

# -- DOAJ -------------------------------------------------------------------
DOAJ_SEARCH_URL: str = "https://doaj.org/api/search/articles/{query}"
DOAJ_ARTICLE_URL: str = "https://doaj.org/article/{id}"
DOAJ_MAX_PAGE_SIZE: int = 100

# -- arXiv (economics categories) ------------------------------------------
ARXIV_QUERY_URL: str = "https://export.arxiv.org/api/query"
ARXIV_ECON_CATEGORY: str = "econ.*"
ARXIV_ECON_JOURNAL: str = "arXiv Economics"
ARXIV_MAX_RESULTS: int = 2000

# -- BASE (Bielefeld Academic Search Engine) -------------------------------
BASE_SEARCH_URL: str = (
    "https://api.base-search.net/cgi-bin/BaseHttpSearchInterface.fcgi"
)
BASE_MAX_HITS: int = 125

# -- DOI --------------------------------------------------------------------
DOI_URL_PREFIX: str = "https://doi.org/"

# -- Export MIME types ------------------------------------------------------
RIS_MIME_TYPE: str = "application/x-research-info-systems"
CSV_MIME_TYPE: str = "text/csv"
BIBTEX_MIME_TYPE: str = "application/x-bibtex"

CSV_HEADER: list[str] = [
    "title",
    "abstract",
    "authors",
    "journal",
    "year",
    "doi",
    "pmid",
    "url",
    "source",
    "citation_count",
]
CSV_RANKING_HEADER: list[str] = ["journal_tier", "abs_rating", "abdc_rating", "is_ft50"]

# -- Source catalogue -------------------------------------------------------
SOURCE_CATALOGUE: dict[str, dict[str, str]] = {
    "pubmed": {"name": "PubMed", "papers": "35M", "tier": "core"},
    "openalex": {"name": "OpenAlex", "papers": "250M", "tier": "broad"},
    "semantic_scholar": {"name": "Semantic Scholar", "papers": "200M", "tier": "broad"},
    "europe_pmc": {"name": "Europe PMC", "papers": "40M", "tier": "core"},
    "medrxiv": {"name": "medRxiv", "papers": "50K+", "tier": "preprints"},
    "biorxiv": {"name": "bioRxiv", "papers": "200K+", "tier": "preprints"},
    "crossref": {"name": "Crossref", "papers": "150M", "tier": "broad"},
    "core": {"name": "CORE", "papers": "300M", "tier": "open_access"},
    "google_scholar": {"name": "Google Scholar", "papers": "n/a", "tier": "scraped"},
    "ssrn": {"name": "SSRN", "papers": "1M+", "tier": "working_papers"},
    "pmc_fulltext": {"name": "PMC Full Text", "papers": "10M+", "tier": "open_access"},
    "plos": {"name": "PLOS", "papers": "300K+", "tier": "open_access"},
    "doaj": {"name": "DOAJ", "papers": "18K+ journals", "tier": "open_access"},
    "arxiv_econ": {"name": "arXiv Economics", "papers": "50K+", "tier": "preprints"},
    "base": {"name": "BASE", "papers": "350M", "tier": "open_access"},
}

GENERAL_SOURCES: tuple[str, ...] = (
    "pubmed",
    "openalex",
    "semantic_scholar",
    "europe_pmc",
    "medrxiv",
    "biorxiv",
    "pmc_fulltext",
    "plos",
)
GENERAL_DEFAULT_SOURCES: tuple[str, ...] = ("pubmed", "openalex", "medrxiv")

BUSINESS_SOURCES: tuple[str, ...] = (
    "openalex",
    "crossref",
    "semantic_scholar",
    "core",
    "google_scholar",
    "ssrn",
    "doaj",
    "arxiv_econ",
    "base",
)
BUSINESS_DEFAULT_SOURCES: tuple[str, ...] = ("openalex", "crossref", "semantic_scholar")
