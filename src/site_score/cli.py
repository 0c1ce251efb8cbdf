"""CLI interface for site-score."""

import json
import logging
import sys

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from . import __version__
from .auditor import audit_url
from .config import LOG_LEVELS, get_settings
from .errors import AuditError
from .models import AuditResult, Priority


console = Console()

COMMANDS = ["scan", "serve", "version", "--help", "--version"]


def priority_style(priority: Priority) -> str:
    """Get Rich style for a recommendation priority."""
    return {
        Priority.CRITICAL: "red",
        Priority.HIGH: "yellow",
        Priority.MEDIUM: "blue",
    }.get(priority, "white")


def priority_icon(priority: Priority) -> str:
    return {
        Priority.CRITICAL: "✗",
        Priority.HIGH: "⚠",
        Priority.MEDIUM: "ℹ",
    }.get(priority, "•")


def score_color(score: int) -> str:
    """Get color for a score value."""
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    elif score >= 40:
        return "orange1"
    else:
        return "red"


def print_score_bar(score: int, width: int = 20) -> Text:
    """Create a visual score bar."""
    filled = int((score / 100) * width)
    empty = width - filled
    color = score_color(score)

    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * empty, style="dim")
    bar.append(f" {score}/100", style=f"bold {color}")
    return bar


def print_result(result: AuditResult, verbose: bool = False, free_count: int = 3) -> None:
    """Print audit result to console."""
    health = result.health

    # Header
    console.print()
    console.print(Panel(
        f"[bold]{result.url}[/bold]\n"
        f"[dim]{health.domain} · {'HTTPS' if health.is_https else 'no HTTPS'} · "
        f"{health.page_count if health.page_count is not None else '?'} pages in sitemap[/dim]",
        title="🔍 Site Score",
        border_style="blue"
    ))

    if health.html_fetch_error:
        console.print("\n[yellow]ℹ[/yellow] Could not read the page HTML (blocked or unreachable). "
                      "Content checks are scored as empty.")
    if health.blocked_by_crawlers:
        console.print("\n[red]✗[/red] robots.txt blocks all crawlers")

    # Overall score
    console.print()
    console.print("  Audit Score: ", end="")
    console.print(print_score_bar(result.score, width=25))
    console.print()

    # Pillar table
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Pillar", style="cyan")
    table.add_column("Points", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Checks")

    for pillar in result.pillars:
        passed = sum(1 for c in pillar.checks if c.passed)
        table.add_row(
            pillar.label,
            f"{pillar.points}/{pillar.max_points}",
            f"[{score_color(pillar.score)}]{pillar.score}[/]",
            f"{passed}/{len(pillar.checks)} passing",
        )

    console.print(table)

    if verbose:
        console.print("\n[bold]All Checks:[/bold]\n")
        for pillar in result.pillars:
            console.print(f"  [bold]{pillar.label}[/bold]")
            for check in pillar.checks:
                mark = "[green]✓[/]" if check.passed else "[red]✗[/]"
                console.print(f"    {mark} {check.label}")
                console.print(f"      [dim]{check.detail}[/dim]")
        if result.keywords:
            console.print(f"\n[bold]Top Keywords[/bold] (coverage {result.keyword_coverage}%)\n")
            for kw in result.keywords:
                zones = [z for z, hit in (("title", kw.in_title), ("H1", kw.in_h1),
                                          ("meta", kw.in_meta_description), ("URL", kw.in_url)) if hit]
                console.print(f"  {kw.word} [dim]({kw.count})[/dim] {', '.join(zones)}")

    # Free recommendations
    free = result.recommendations[:free_count]
    if free:
        console.print("\n[bold]🎯 Top Fixes:[/bold]\n")
        for i, rec in enumerate(free, 1):
            style = priority_style(rec.priority)
            console.print(f"  {i}. [{style}]{priority_icon(rec.priority)}[/] [bold]{rec.title}[/bold] "
                          f"[dim]({rec.category})[/dim]")
            console.print(f"     {rec.description}")
            console.print(f"     [cyan]→ {rec.fix}[/cyan]")
            console.print()

    # Teaser for the rest
    if result.gated_count > 0:
        teased = ", ".join(r.title for r in result.recommendations[free_count:free_count + 2])
        console.print(f"[bold]🔒 {result.gated_count} more issue{'s' if result.gated_count > 1 else ''} "
                      f"found[/bold] [dim]{teased}[/dim]")
        console.print("[dim]Get the full report with step-by-step fixes.[/dim]\n")

    # Footer
    console.print("[dim]─" * 50 + "[/dim]")
    console.print(f"[dim]site-score v{__version__}[/dim]")
    console.print()


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: LOG_LEVEL or INFO)",
)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx, log_level):
    """Site Score - PageSpeed, SEO, GEO and AEO audit for a URL.

    \b
    Quick start:
        site-score scan example.com
        site-score serve

    \b
    Commands:
        scan    Audit a URL and print its score
        serve   Run the HTTP API (POST /api/audit)
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    setup_logging(log_level or settings.log_level)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("url")
@click.option("-v", "--verbose", is_flag=True, help="Show every check and the keyword table")
@click.option("-t", "--timeout", default=None, type=float, help="Overall audit timeout in seconds")
@click.option("--json", "json_output", is_flag=True, help="Output the API response body as JSON")
def scan(url: str, verbose: bool, timeout: float | None, json_output: bool):
    """Audit a URL.

    \b
    Examples:
        site-score scan stripe.com
        site-score scan example.com --verbose
        site-score scan example.com --json
    """
    settings = get_settings()
    if timeout is not None:
        settings = settings.model_copy(update={"audit_timeout": timeout})

    try:
        if json_output:
            result = audit_url(url, settings=settings)
        else:
            with console.status(f"[bold blue]Auditing {url}...[/bold blue]"):
                result = audit_url(url, settings=settings)
    except AuditError as e:
        if json_output:
            click.echo(json.dumps({"error": e.message}, indent=2))
        else:
            console.print(f"\n[red]Error:[/red] {e.message}")
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print_result(result, verbose=verbose, free_count=settings.free_recommendations)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
def serve(host: str, port: int):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("site_score.server:app", host=host, port=port)


# Convenience: allow `site-score URL` as shortcut for `site-score scan URL`
def main():
    """Entry point that handles both `site-score URL` and `site-score scan URL`."""
    args = sys.argv[1:]

    # If first arg looks like a URL (not a command), insert 'scan'
    if args and not args[0].startswith('-') and args[0] not in COMMANDS:
        # Check if it looks like a URL/domain
        if '.' in args[0] or args[0] == 'localhost':
            sys.argv.insert(1, 'scan')

    cli()


if __name__ == "__main__":
    main()
