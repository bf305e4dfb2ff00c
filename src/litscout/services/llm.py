"""Generic LLM call helpers."""

import json
import logging
import re

from anthropic import NOT_GIVEN, AsyncAnthropic
from dotenv import load_dotenv

from litscout.config import get_settings

load_dotenv()

logger = logging.getLogger(__name__)

_client: AsyncAnthropic | None = None


def get_client() -> AsyncAnthropic:
    """Create the Anthropic client on first use (it needs an API key)."""
    global _client
    if _client is None:
        api_key = get_settings().anthropic_api_key
        _client = AsyncAnthropic(api_key=api_key) if api_key else AsyncAnthropic()
    return _client


def parse_llm_response(response: str) -> list[str]:
    """Pull the first JSON array of strings out of an LLM reply.

    Raises
    ------
    ValueError
        If the reply holds no JSON array of strings.
    """
    # Try to find a JSON array anywhere in the response
    match = re.search(r"\[.*\]", response, re.DOTALL)
    if not match:
        raise ValueError("no JSON array in LLM response")
    parsed = json.loads(match.group())
    if not isinstance(parsed, list):
        raise ValueError("LLM response is not a JSON array")
    return [str(item).strip() for item in parsed if str(item).strip()]


async def query_llm(prompt: str, system: str = "", max_tokens: int = 1024) -> str:
    response = await get_client().messages.create(
        model=get_settings().llm_model,
        max_tokens=max_tokens,
        system=system or NOT_GIVEN,
        messages=[{"role": "user", "content": prompt}],
    )
    return response.content[0].text
