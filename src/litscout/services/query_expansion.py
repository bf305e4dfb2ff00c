import logging
from pathlib import Path

from litscout.services.llm import parse_llm_response, query_llm

logger = logging.getLogger(__name__)

_PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

EXPAND_SYSTEM_PROMPT = (
    "You are an expert research librarian. Your task is to expand search "
    "queries to capture all relevant research."
)


async def expand_query(query: str) -> list[str]:
    """Ask the LLM for 5-7 alternative search queries for ``query``.

    Falls back to ``[query]`` when the reply cannot be parsed.
    """
    template = (_PROMPTS_DIR / "expand_query.txt").read_text()
    text = await query_llm(template.format(query=query), system=EXPAND_SYSTEM_PROMPT)
    try:
        expanded = parse_llm_response(text)
    except ValueError as e:
        logger.warning("Failed to parse expanded queries for %r: %s", query, e)
        return [query]
    return expanded or [query]
