import re
from typing import Any

from litscout.constants import DOI_URL_PREFIX
from litscout.models.model_paper import Author

_YEAR_RE = re.compile(r"\d{4}")
_HTML_TAG_RE = re.compile(r"<[^>]*>")
_DOI_IN_URL_RE = re.compile(r"10\.\d{4,}/[^\s?#&]+")
_SSRN_ID_RE = re.compile(r"abstract(?:_id)?[_=](\d+)", re.IGNORECASE)


def reconstruct_abstract(inverted_index: dict[str, list[int]]) -> str:
    """Rebuild abstract text from a word -> positions inverted index.

    Every (word, position) pair is collected, stably sorted by position and
    joined with single spaces.
    """
    words = [
        (word, position)
        for word, positions in inverted_index.items()
        for position in positions
    ]
    words.sort(key=lambda pair: pair[1])
    return " ".join(word for word, _ in words)


def parse_year(value: Any) -> int | None:
    """Best-effort year: ints pass through, strings yield their first 4-digit run."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _YEAR_RE.search(str(value))
    return int(match.group()) if match else None


def parse_int(value: Any) -> int | None:
    """Parse a count that may arrive as an int, a numeric string, or '1,234 downloads'."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    digits = re.sub(r"\D", "", str(value))
    return int(digits) if digits else None


def strip_html(text: str | None) -> str | None:
    if text is None:
        return None
    return _HTML_TAG_RE.sub("", text).strip() or None


def strip_doi_prefix(doi: str | None) -> str | None:
    if not doi:
        return None
    return doi.removeprefix(DOI_URL_PREFIX)


def doi_url(doi: str | None) -> str | None:
    return f"{DOI_URL_PREFIX}{doi}" if doi else None


def extract_doi_from_url(url: str | None) -> str | None:
    if not url:
        return None
    match = _DOI_IN_URL_RE.search(url)
    return match.group() if match else None


def extract_ssrn_id(url: str | None) -> str | None:
    if not url:
        return None
    match = _SSRN_ID_RE.search(url)
    return f"ssrn.{match.group(1)}" if match else None


def split_author_string(author_string: str | None, pattern: str = r",") -> list[Author]:
    """Split a flat author string into Authors, dropping empty names."""
    if not author_string:
        return []
    names = (name.strip() for name in re.split(pattern, author_string))
    return [Author(name=name) for name in names if name]


def first(value: Any) -> Any:
    """First element of a list, the value itself if scalar, None if empty."""
    if isinstance(value, list):
        return value[0] if value else None
    return value
