"""Analyze command - build a sentiment report for an idea."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from ..config import get_settings, window_weeks_for
from ..errors import UpstreamFetchError
from ..lexicon import get_lexicon
from ..logging_config import configure_logging
from ..models import AggregateReport, AnalysisRequest, RawPost
from ..pipeline import analyze_topic, run_analysis, validate_posts
from ..reddit import parse_listing
from . import app, console


def load_posts_file(path: Path, body_max_chars: int = 500) -> list[RawPost]:
    """Load posts from a JSON file.

    Accepts either a list of post objects or a saved Reddit search listing.
    Malformed entries are skipped in both shapes.

    Raises:
        ValueError: Not JSON, or neither a list nor a listing
        UpstreamFetchError: A listing object with an unexpected shape
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        return parse_listing(data, body_max_chars)
    if not isinstance(data, list):
        raise ValueError(f"expected a list of posts or a listing, got {type(data).__name__}")
    return validate_posts(data)


def print_report(report: AggregateReport) -> None:
    """Render a report as rich tables."""
    table = Table(title=f"Community Pulse ({report.total_posts} posts)")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Explanation", style="dim")
    for metric in report.metrics:
        table.add_row(metric.name, f"{metric.value}{metric.unit}", f"{metric.confidence:.1f}", metric.explanation)
    console.print(table)

    if report.themes:
        console.print(f"\n[bold]Themes:[/bold] {escape(', '.join(report.themes))}")

    if report.pain_points:
        console.print("\n[bold]Pain points:[/bold]")
        for pain in report.pain_points:
            console.print(f"  - {escape(pain)}")

    if report.items:
        items = Table(title="Top posts")
        items.add_column("Sentiment")
        items.add_column("Title", max_width=60)
        items.add_column("Source")
        items.add_column("Score", justify="right")
        items.add_column("Comments", justify="right")
        for item in report.items:
            items.add_row(", ".join(item.evidence), escape(item.title), item.source, str(item.score), str(item.num_comments))
        console.print(items)

    for citation in report.citations:
        console.print(f"[dim]{citation.label}: {escape(citation.url)}[/dim]")

    for warning in report.warnings:
        console.print(f"[yellow]! {escape(warning)}[/yellow]")


@app.command()
def analyze(
    idea: Annotated[str, typer.Argument(help="Idea or topic to search for.")],
    industry: Annotated[str | None, typer.Option("--industry", "-i", help="Industry to narrow the search.")] = None,
    geography: Annotated[str | None, typer.Option("--geography", "-g", help="Geography to narrow the search.")] = None,
    window: Annotated[
        str | None,
        typer.Option("--window", "-w", help="Time window: hour, day, week, month, year, all."),
    ] = None,
    posts_file: Annotated[
        Path | None,
        typer.Option(
            "--posts-file",
            "-f",
            help="Score posts from a JSON file instead of searching Reddit.",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the report as JSON.")] = False,
    log_level: Annotated[str, typer.Option("--log-level", help="Logging level.")] = "WARNING",
):
    """Build a sentiment, theme and pain-point report for an idea."""
    configure_logging(log_level, False)

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    request = AnalysisRequest(idea=idea, industry=industry, geography=geography, time_window=window)

    if posts_file:
        try:
            posts = load_posts_file(posts_file, settings.selftext_max_chars)
        except (ValueError, UpstreamFetchError) as e:
            console.print(f"[red]Could not read posts file:[/red] {escape(str(e))}")
            raise typer.Exit(1) from e

        report = asyncio.run(
            run_analysis(
                posts,
                request,
                window_weeks=window_weeks_for(window or settings.default_time_window),
                lexicon=get_lexicon(settings.lexicon_path),
                max_concurrency=settings.max_concurrency,
            )
        )
    else:
        report = asyncio.run(analyze_topic(request, settings=settings))

    if as_json:
        typer.echo(json.dumps(report.to_json_dict(), indent=2, ensure_ascii=False))
    else:
        print_report(report)
