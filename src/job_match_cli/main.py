"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TypeVar

import structlog
import typer
from rich.console import Console
from rich.table import Table

from job_match_core.config.settings import Settings
from job_match_core.exceptions import JobMatchError
from job_match_core.models.job import JobPosting
from job_match_core.models.match import MatchResult, SkillGap
from job_match_core.models.search import SearchResponse
from job_match_engine.matching.heuristic import HeuristicRecommender
from job_match_engine.matching.semantic import SemanticMatcher
from job_match_engine.observability import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from job_match_engine.providers.factories import create_providers
from job_match_engine.search.service import JobSearchService
from job_match_infra.cache.disk_cache import DiskCacheClient
from job_match_infra.db.engine import create_engine
from job_match_infra.db.repositories.job_store import SqlJobStore
from job_match_infra.db.session import create_session_factory, init_db
from job_match_infra.fixtures import read_fixture

app = typer.Typer(
    name="job-match",
    help="Faceted job search and candidate matching",
)
console = Console()
logger = structlog.get_logger()

T = TypeVar("T")


def _settings(verbose: bool) -> Settings:
    settings = Settings()  # type: ignore[call-arg]
    if verbose:
        settings.log_level = "DEBUG"
    configure_logging(settings)
    return settings


@asynccontextmanager
async def _service(settings: Settings) -> AsyncIterator[JobSearchService]:
    """Wire store, providers and cache into a search service."""
    engine = create_engine(settings)
    store = SqlJobStore(create_session_factory(engine))
    cache = DiskCacheClient(settings.cache_dir) if settings.cache_backend == "disk" else None
    heuristic = HeuristicRecommender(store, settings)
    semantic = SemanticMatcher(store, settings, create_providers(settings), heuristic)
    try:
        yield JobSearchService(store, settings, heuristic, semantic, cache)
    finally:
        if cache is not None:
            cache.close()
        await engine.dispose()


def _run(settings: Settings, action: Callable[[JobSearchService], Awaitable[T]]) -> T:
    """Run one service call, turning engine errors into a clean exit."""

    async def _go() -> T:
        bind_request_context()
        try:
            async with _service(settings) as service:
                return await action(service)
        finally:
            clear_request_context()

    try:
        return asyncio.run(_go())
    except JobMatchError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _salary(job: JobPosting) -> str:
    if job.salary_min is None and job.salary_max is None:
        return "-"
    high = job.salary_max or job.salary_min or 0
    return f"{job.salary_min or 0:,}-{high:,} {job.salary_currency}"


def _jobs_table(title: str, jobs: list[JobPosting]) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Employer")
    table.add_column("Location")
    table.add_column("Arrangement")
    table.add_column("Salary", justify="right")
    for job in jobs:
        table.add_row(
            str(job.id),
            job.title,
            job.employer,
            job.location or "-",
            job.work_arrangement or "-",
            _salary(job),
        )
    return table


def _print_search(response: SearchResponse) -> None:
    pages = max(response.pages, 1)
    table = Table(title=f"Results (page {response.page}/{pages}, {response.total} total)")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Employer")
    table.add_column("Location")
    table.add_column("Score", justify="right")
    table.add_column("Applied")
    for hit in response.items:
        table.add_row(
            str(hit.job.id),
            hit.job.title,
            hit.job.employer,
            hit.job.location or "-",
            "-" if hit.match_score is None else str(hit.match_score),
            "yes" if hit.is_applied else "",
        )
    console.print(table)

    facets = response.facets
    for label, counts in (
        ("Locations", facets.locations),
        ("Arrangements", facets.work_arrangements),
        ("Tiers", facets.experience_tiers),
        ("Salary", facets.salary_ranges),
        ("Employers", facets.employers),
    ):
        if counts:
            console.print(
                f"[bold]{label}:[/bold] " + ", ".join(f"{c.value} ({c.count})" for c in counts)
            )

    if response.recommendations:
        console.print(_jobs_table("Recommended for you", response.recommendations))


def _print_matches(results: list[MatchResult]) -> None:
    if not results:
        console.print("[yellow]No matches above the score threshold[/yellow]")
        return
    table = Table(title=f"Matches (source: {results[0].source})")
    table.add_column("Score", justify="right")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Employer")
    table.add_column("Skills", justify="right")
    table.add_column("Missing")
    for result in results:
        table.add_row(
            str(result.match_score),
            str(result.job.id),
            result.job.title,
            result.job.employer,
            f"{result.skills_match.percentage:.0f}%",
            ", ".join(result.skills_match.missing) or "-",
        )
    console.print(table)


def _print_gaps(title: str, gaps: list[SkillGap]) -> None:
    table = Table(title=title)
    table.add_column("Skill")
    table.add_column("Importance")
    table.add_column("Notes")
    for gap in gaps:
        table.add_row(gap.skill, gap.importance, gap.description)
    console.print(table)


@app.command("init-db")
def init_db_command(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Create the database tables."""
    settings = _settings(verbose)

    async def _go() -> None:
        engine = create_engine(settings)
        try:
            await init_db(engine)
        finally:
            await engine.dispose()

    asyncio.run(_go())
    console.print(f"[bold green]Database ready:[/bold green] {settings.db_backend}")


@app.command()
def load(
    fixture: Path = typer.Argument(..., help="JSON fixture file", exists=True),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Load jobs, candidates, CVs and applications from a JSON fixture."""
    settings = _settings(verbose)

    async def _go() -> dict[str, int]:
        engine = create_engine(settings)
        try:
            await init_db(engine)
            store = SqlJobStore(create_session_factory(engine))
            return await store.save_fixture(read_fixture(fixture))
        finally:
            await engine.dispose()

    try:
        counts = asyncio.run(_go())
    except JobMatchError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    summary = ", ".join(f"{count} {kind}" for kind, count in counts.items())
    console.print(f"[bold green]Loaded:[/bold green] {summary}")


@app.command()
def search(
    query: str | None = typer.Option(None, "--query", "-q", help="Free text"),
    location: str | None = typer.Option(None, "--location", help="Location substring"),
    work_arrangement: str | None = typer.Option(
        None, "--work-arrangement", help="remote, hybrid or onsite"
    ),
    experience_tier: str | None = typer.Option(
        None, "--experience-tier", help="entry, mid, senior or executive"
    ),
    employment_type: str | None = typer.Option(
        None, "--employment-type", help="full-time, part-time, contract or internship"
    ),
    category: int | None = typer.Option(None, "--category", help="Category ID"),
    salary_min: int | None = typer.Option(None, "--salary-min", help="Salary floor"),
    salary_max: int | None = typer.Option(None, "--salary-max", help="Salary ceiling"),
    skill: list[str] | None = typer.Option(None, "--skill", help="Skill (repeatable)"),
    posted_within: str | None = typer.Option(
        None, "--posted-within", help="today, week or month"
    ),
    sort_by: str = typer.Option("date", "--sort-by", help="relevance or date"),
    sort_order: str = typer.Option("desc", "--sort-order", help="asc or desc"),
    candidate: int | None = typer.Option(None, "--candidate", help="Personalize for candidate"),
    page: int = typer.Option(1, "--page", help="1-indexed page"),
    limit: int | None = typer.Option(None, "--limit", help="Page size"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Search published jobs with facets."""
    settings = _settings(verbose)
    filters = {
        key: value
        for key, value in {
            "query": query,
            "location": location,
            "work_arrangement": work_arrangement,
            "experience_tier": experience_tier,
            "employment_type": employment_type,
            "category_id": category,
            "salary_min": salary_min,
            "salary_max": salary_max,
            "skills": tuple(skill or ()),
            "posted_within": posted_within,
            "sort_by": sort_by,
            "sort_order": sort_order,
        }.items()
        if value not in (None, ())
    }
    response = _run(
        settings,
        lambda service: service.search(filters, candidate_id=candidate, page=page, limit=limit),
    )
    _print_search(response)


@app.command()
def recommend(
    candidate_id: int = typer.Argument(..., help="Candidate ID"),
    limit: int = typer.Option(10, "--limit", help="Number of matches"),
    semantic: bool = typer.Option(
        True, "--semantic/--heuristic", help="Use provider analysis when configured"
    ),
    skill_gaps: bool = typer.Option(True, "--skill-gaps/--no-skill-gaps", help="Include gaps"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Ranked, explained job matches for a candidate."""
    settings = _settings(verbose)
    results = _run(
        settings,
        lambda service: service.recommend(
            candidate_id, limit, use_semantic_matcher=semantic, include_skill_gaps=skill_gaps
        ),
    )
    _print_matches(results)


@app.command()
def trending(
    limit: int = typer.Option(10, "--limit", help="Number of jobs"),
    featured: bool = typer.Option(False, "--featured", help="Show featured jobs instead"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Trending (or featured) jobs."""
    settings = _settings(verbose)
    if featured:
        jobs = _run(settings, lambda service: service.featured(limit))
        console.print(_jobs_table("Featured jobs", jobs))
    else:
        jobs = _run(settings, lambda service: service.trending(limit))
        console.print(_jobs_table("Trending jobs", jobs))


@app.command()
def similar(
    job_id: int = typer.Argument(..., help="Job posting ID"),
    limit: int = typer.Option(5, "--limit", help="Number of jobs"),
    employer: bool = typer.Option(False, "--employer", help="Same employer instead"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Jobs similar to a posting, or more from its employer."""
    settings = _settings(verbose)
    if employer:
        jobs = _run(settings, lambda service: service.by_employer(job_id, limit))
        console.print(_jobs_table(f"More from the employer of job {job_id}", jobs))
    else:
        jobs = _run(settings, lambda service: service.similar(job_id, limit))
        console.print(_jobs_table(f"Similar to job {job_id}", jobs))


@app.command("skill-gaps")
def skill_gaps_command(
    candidate_id: int = typer.Argument(..., help="Candidate ID"),
    job_ids: list[int] = typer.Argument(..., help="Target job posting IDs"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Skill gaps between a candidate and target jobs."""
    settings = _settings(verbose)
    report = _run(settings, lambda service: service.analyze_skill_gaps(candidate_id, job_ids))

    _print_gaps(f"Overall gaps (source: {report.source})", report.overall_gaps)
    for job_id, gaps in report.per_job_gaps.items():
        if gaps:
            _print_gaps(f"Job {job_id}", gaps)
    for line in report.recommendations:
        console.print(f"  - {line}")


@app.command()
def version() -> None:
    """Show version."""
    console.print("job-match v0.1.0")


if __name__ == "__main__":
    app()
