"""Command-line interface for LitScout."""

import asyncio
import logging
from pathlib import Path

import click

from litscout.config import get_settings
from litscout.constants import DEFAULT_MAX_RESULTS
from litscout.data_sources.registry import describe_sources
from litscout.models.model_search import SearchProfile, SearchRequest, SearchResponse
from litscout.services.export import EXPORT_FORMATS, export_papers
from litscout.services.journal_enrichment import InMemoryJournalRankings
from litscout.services.query_expansion import expand_query
from litscout.services.search import (
    AllSourcesFailedError,
    SearchRequestError,
    run_search,
)
from litscout.utils.cache import ResponseCache

PROFILE_CHOICE = click.Choice([p.value for p in SearchProfile])


@click.group()
@click.version_option(package_name="litscout")
def main():
    """LitScout: search several literature databases at once and deduplicate."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--profile", type=PROFILE_CHOICE, default="general", show_default=True)
def sources(profile: str):
    """List the databases available to a search profile."""
    for source in describe_sources(SearchProfile(profile)):
        click.echo(f"  {source['id']:<18} {source['name']} ({source['papers']} papers)")


@main.command()
@click.option("-q", "--query", required=True, help="Search query")
@click.option(
    "-s",
    "--source",
    "source_ids",
    multiple=True,
    help="Source id to search (repeatable). Defaults to the profile's sources.",
)
@click.option(
    "-n",
    "--max-results",
    default=DEFAULT_MAX_RESULTS,
    show_default=True,
    help="Maximum results per source",
)
@click.option("--profile", type=PROFILE_CHOICE, default="general", show_default=True)
@click.option(
    "--min-tier",
    type=click.IntRange(1, 5),
    help="Business profile: drop papers from journals ranked below this tier",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["json", *EXPORT_FORMATS]),
    default="json",
    show_default=True,
)
@click.option("-o", "--output", type=click.Path(), help="Output file path")
def search(
    query: str,
    source_ids: tuple[str, ...],
    max_results: int,
    profile: str,
    min_tier: int | None,
    fmt: str,
    output: str | None,
):
    """Search the selected databases and print or save the deduplicated papers."""
    settings = get_settings()
    request = SearchRequest(
        query=query,
        sources=list(source_ids) or None,
        max_results=max_results,
        profile=SearchProfile(profile),
        min_journal_tier=min_tier,
    )
    rankings = (
        InMemoryJournalRankings.from_csv(settings.journal_rankings_path)
        if settings.journal_rankings_path
        else InMemoryJournalRankings()
    )

    try:
        response = asyncio.run(
            run_search(request, settings=settings, journal_rankings=rankings)
        )
    except SearchRequestError as e:
        raise click.BadParameter(str(e))
    except AllSourcesFailedError as e:
        for result in e.results:
            click.echo(f"  {result.source_name}: {result.error}", err=True)
        raise click.ClickException("all sources failed")

    _echo_summary(response)

    if fmt == "json":
        content = response.model_dump_json(indent=2)
    else:
        content = export_papers(
            response.papers,
            fmt,
            include_rankings=request.profile is SearchProfile.BUSINESS,
        )

    if output:
        Path(output).write_text(content)
        click.echo(f"\nResults saved to: {output}", err=True)
    else:
        click.echo(content)


def _echo_summary(response: SearchResponse) -> None:
    ok = len(response.per_source) - len(response.failed_sources)
    click.echo(
        f"{ok} of {len(response.per_source)} databases returned results "
        f"({response.total_elapsed_ms:.0f}ms total)",
        err=True,
    )
    for row in response.per_source:
        status = f"ERROR: {row.error}" if row.error else (
            f"{row.returned_count} of {row.total_available}"
        )
        click.echo(f"  {row.source:<18} {status}", err=True)
    click.echo(
        f"Found {response.total_found}, removed {response.duplicates_removed} "
        f"duplicates, {response.total_unique} unique",
        err=True,
    )


@main.command()
@click.option("-q", "--query", required=True, help="Query to expand")
def expand(query: str):
    """Suggest alternative search queries using the LLM."""
    for i, expanded in enumerate(asyncio.run(expand_query(query)), 1):
        click.echo(f"  {i}. {expanded}")


@main.command("cache-clear")
def cache_clear():
    """Delete every cached source response."""
    settings = get_settings()
    removed = ResponseCache(settings.cache_dir, settings.cache_ttl_seconds).clear()
    click.echo(f"Removed {removed} cached responses from {settings.cache_dir}")


if __name__ == "__main__":
    main()
