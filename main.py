#!/usr/bin/env python3
"""
NewsSieve - Feed Ingestion and AI Filtering
===========================================

Command line entry point.

Usage:
    python main.py --help                    # Show all commands
    python main.py check-config              # Validate configuration
    python main.py show-feeds --group 1      # List configured feeds
    python main.py fetch-feed URL            # Parse one feed and show items
    python main.py classify "Some title"     # Run the classifier on a title
    python main.py run-group 1               # Process one feed group
    python main.py run-all --by-group        # Process every group in turn
"""

import sys
from pathlib import Path
from typing import List

import click
from rich.console import Console
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from newssieve.config.settings import get_settings, load_feed_sources
from newssieve.models import FeedFormat, RunSummary
from newssieve.utils.logging import configure_application_logging
from newssieve.utils.exceptions import get_user_friendly_message

console = Console()


@click.group(invoke_without_command=True)
@click.option('--feeds', '-f', 'feeds_file', help='Feed configuration file (YAML)')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, feeds_file, debug):
    """NewsSieve - AI-filtered news feed ingestion."""
    ctx.ensure_object(dict)
    ctx.obj['feeds_file'] = feeds_file
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _init(ctx):
    """Load settings and configure logging for a command."""
    settings = get_settings()
    if ctx.obj.get('feeds_file'):
        settings.feeds_file = ctx.obj['feeds_file']

    configure_application_logging(
        log_level="DEBUG" if ctx.obj.get('debug') else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )
    return settings


@cli.command()
@click.pass_context
def check_config(ctx):
    """Validate settings, feed configuration and AI credentials."""
    console.print("[bold blue]🔧 Checking NewsSieve Configuration[/bold blue]")

    try:
        settings = _init(ctx)
    except Exception as e:
        console.print(f"[bold red]❌ Configuration error: {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    table = Table(title="Configuration Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")

    checks = [
        ("Feeds", _check_feeds_config),
        ("Classification AI", _check_classification_config),
        ("Summarization AI", _check_summarization_config),
        ("Content Policy", _check_content_config),
        ("Storage", _check_storage_config),
    ]

    all_passed = True
    for name, check_func in checks:
        try:
            status, details = check_func(settings)
        except Exception as e:
            status, details = False, str(e)
        table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
        all_passed = all_passed and status

    console.print(table)

    if all_passed:
        console.print("[bold green]✅ All configuration checks passed![/bold green]")
    else:
        console.print("[bold red]❌ Configuration validation failed[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--group', '-g', help='Only show feeds of this group')
@click.pass_context
def show_feeds(ctx, group):
    """List configured feed sources."""
    try:
        settings = _init(ctx)
        sources = load_feed_sources(settings.feeds_file)
    except Exception as e:
        console.print(f"[bold red]❌ Error loading feeds: {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    if group is not None:
        sources = [s for s in sources if s.in_group(group)]

    if not sources:
        console.print("[yellow]⚠️ No feeds configured[/yellow]")
        return

    table = Table(title=f"Feed Sources ({len(sources)})")
    table.add_column("Name", style="cyan")
    table.add_column("Format")
    table.add_column("Groups", style="yellow")
    table.add_column("Max", justify="right")
    table.add_column("Detail Page")
    table.add_column("URL", style="blue")

    for source in sources:
        detail = source.detail_page
        detail_desc = "off"
        if detail is not None and detail.enabled:
            detail_desc = ", ".join(detail.content_selectors) or "default selectors"
        table.add_row(
            source.name,
            source.format.value,
            ", ".join(source.groups),
            str(source.max_entries or settings.processing.max_entries_per_feed),
            detail_desc,
            source.url,
        )

    console.print(table)


@cli.command()
@click.argument('url')
@click.option('--format', 'feed_format', type=click.Choice(['rss', 'atom']), default='rss')
@click.option('--limit', default=10, show_default=True, help='Items to display')
@click.pass_context
def fetch_feed(ctx, url, feed_format, limit):
    """Fetch and parse a single feed without processing it."""
    from newssieve.ingestion.feed_reader import FeedReader

    console.print(f"[bold blue]📡 Fetching Feed: {url}[/bold blue]")
    settings = _init(ctx)
    items = FeedReader(settings=settings).fetch_and_parse(url, FeedFormat(feed_format))

    if not items:
        console.print("[bold red]❌ No items (fetch failed or feed is empty)[/bold red]")
        sys.exit(1)

    table = Table(title=f"{len(items)} items")
    table.add_column("#", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Published")
    table.add_column("Link", style="blue")
    for index, item in enumerate(items[:limit], 1):
        table.add_row(str(index), item.title or "[no title]", item.published or "-", item.link or "-")
    console.print(table)


@cli.command()
@click.argument('title')
@click.pass_context
def classify(ctx, title):
    """Run the classifier on one title."""
    from newssieve.ai.classifier import NewsClassifier

    settings = _init(ctx)
    result = NewsClassifier(settings=settings).classify(title)
    verdict = "[green]keep[/green]" if result.keep else "[red]discard[/red]"
    console.print(f"{verdict} - category: [bold]{result.category}[/bold]")


@cli.command("run-group")
@click.argument('group')
@click.pass_context
def run_group(ctx, group):
    """Process every feed in GROUP."""
    from newssieve.processing.pipeline import NewsPipeline

    console.print(f"[bold blue]🚀 Processing group {group}[/bold blue]")
    try:
        settings = _init(ctx)
        summary = NewsPipeline(settings=settings).run_group(group)
    except Exception as e:
        console.print(f"[bold red]❌ Run failed: {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    _print_summaries([summary])


@cli.command()
@click.option('--by-group', is_flag=True, help='Run each group separately')
@click.pass_context
def run_all(ctx, by_group):
    """Process every configured feed."""
    from newssieve.processing.pipeline import NewsPipeline

    try:
        settings = _init(ctx)
        pipeline = NewsPipeline(settings=settings)
        summaries = pipeline.run_all_groups() if by_group else [pipeline.run_all()]
    except Exception as e:
        console.print(f"[bold red]❌ Run failed: {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)

    _print_summaries(summaries)


def _print_summaries(summaries: List[RunSummary]) -> None:
    table = Table(title="Run Summary")
    table.add_column("Group", style="cyan")
    table.add_column("Feeds", justify="right")
    table.add_column("Seen", justify="right")
    table.add_column("Saved", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Errored", justify="right", style="red")
    table.add_column("Kept", justify="right")
    table.add_column("Time", justify="right")

    rows = list(summaries)
    if len(rows) > 1:
        total = RunSummary(group="total")
        for summary in rows:
            total.merge(summary)
        rows.append(total)

    for summary in rows:
        feeds = f"{summary.feeds_total - summary.feeds_failed}/{summary.feeds_total}"
        table.add_row(
            summary.group if summary.group is not None else "all",
            feeds,
            str(summary.items_seen),
            str(summary.items_saved),
            str(summary.items_skipped),
            str(summary.items_errored),
            f"{summary.success_rate:.0%}",
            f"{summary.elapsed_seconds:.1f}s",
        )

    console.print(table)
    failed = [name for summary in summaries for name in summary.failed_feeds]
    if failed:
        console.print(f"[yellow]⚠️ Failed feeds: {', '.join(failed)}[/yellow]")


# Helper functions for configuration checks
def _check_feeds_config(settings) -> tuple[bool, str]:
    sources = load_feed_sources(settings.feeds_file)
    groups = sorted({g for s in sources for g in s.groups})
    return bool(sources), f"{len(sources)} feeds in {settings.feeds_file}, groups: {', '.join(groups) or '-'}"


def _check_classification_config(settings) -> tuple[bool, str]:
    provider = settings.ai.classification_provider
    has_key = bool(settings.ai.get_api_key(provider))
    return has_key, f"{provider.value} / {settings.ai.classification_model}" + ("" if has_key else " (no API key)")


def _check_summarization_config(settings) -> tuple[bool, str]:
    provider = settings.ai.summarization_provider
    has_key = bool(settings.ai.get_api_key(provider))
    return has_key, f"{provider.value} / {settings.ai.summarization_model}" + ("" if has_key else " (no API key)")


def _check_content_config(settings) -> tuple[bool, str]:
    content = settings.content
    return True, (
        f"min {content.min_content_length}, max {content.max_content_length}, "
        f"fragment > {content.min_fragment_length}, footer window {content.footer_window_lines}"
    )


def _check_storage_config(settings) -> tuple[bool, str]:
    target = Path(settings.storage.root_dir) / settings.storage.collection
    target.mkdir(parents=True, exist_ok=True)
    return True, str(target)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 NewsSieve interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[bold red]❌ Unexpected error: {e}[/bold red]")
        sys.exit(1)
