"""Concurrent fan-out of one query to several source adapters."""

import asyncio
import logging
from collections.abc import Sequence

from litscout.data_sources.base_client import SourceAdapter
from litscout.models.model_search import SourceResult

logger = logging.getLogger(__name__)


async def search_all(
    adapters: Sequence[SourceAdapter],
    query: str,
    max_results: int,
) -> list[SourceResult]:
    """Run every adapter's search concurrently and wait for all of them.

    Results come back in adapter order. One adapter failing never cancels or
    hides the others; there is no retry at this layer.
    """
    logger.info(
        "Searching %d sources for %r: %s",
        len(adapters),
        query,
        ", ".join(a.source_name for a in adapters),
    )
    outcomes = await asyncio.gather(
        *(_search_and_close(adapter, query, max_results) for adapter in adapters),
        return_exceptions=True,
    )

    results: list[SourceResult] = []
    for adapter, outcome in zip(adapters, outcomes):
        if isinstance(outcome, BaseException):
            # search() does not raise; this only guards a broken adapter
            logger.error("Adapter %s raised: %r", adapter.source_name, outcome)
            outcome = SourceResult(
                source_name=adapter.source_name,
                error=f"{type(outcome).__name__}: {outcome}",
            )
        results.append(outcome)

    failed = [r.source_name for r in results if r.error is not None]
    logger.info(
        "Fan-out finished: %d/%d sources returned results%s",
        len(results) - len(failed),
        len(results),
        f" (failed: {', '.join(failed)})" if failed else "",
    )
    return results


async def _search_and_close(
    adapter: SourceAdapter, query: str, max_results: int
) -> SourceResult:
    async with adapter:
        return await adapter.search(query, max_results)
