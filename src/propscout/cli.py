"""
PropScout CLI - Command Line Interface

Entry point for filtering discovered URLs by category, preparing pattern
generator input, and summarising the URL tree of a site.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, List

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from propscout import __version__
from propscout.core.exceptions import PropScoutError

if TYPE_CHECKING:
    from propscout.core.config import MatchingConfig
    from propscout.core.models import FilterResult

# Create CLI app
app = typer.Typer(
    name="propscout",
    help="PropScout - Select real-estate pages to scrape by URL category",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for output
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _resolve_selection(
    select: Optional[List[str]],
    select_all: bool,
    available: List[str],
) -> List[str]:
    if select_all:
        return list(available)
    return list(select or [])


def _report(
    result: "FilterResult",
    config: "MatchingConfig",
    output: Optional[Path],
    test_limit: Optional[int],
) -> None:
    """Print a filter result and optionally export it."""
    from propscout.classifier.sampling import display_samples, select_test_urls
    from propscout.core.io import export_filter_result

    table = Table(title="Category Matches")
    table.add_column("Category", style="cyan")
    table.add_column("URLs", style="green", justify="right")

    for name, match in result.category_matches.items():
        table.add_row(name, str(len(match.urls)))

    console.print(table)
    console.print(Panel.fit(
        f"Total URLs: [yellow]{result.stats.total_urls}[/yellow]\n"
        f"Matching URLs: [green]{result.stats.filtered_urls}[/green]",
        title="Filter Summary",
    ))

    if result.stats.filtered_urls == 0:
        console.print("[yellow]No matching URLs - try selecting different categories[/yellow]")
    else:
        preview = display_samples(result.filtered_urls, config.display_samples)
        for url in preview.urls:
            console.print(f"  {url}", soft_wrap=True)
        if preview.remaining > 0:
            console.print(f"  [dim]... and {preview.remaining} more URLs[/dim]")

    if output:
        export_filter_result(result, output)
        console.print(f"[green]✓[/green] Result written to {output}")

    if test_limit is not None:
        batch = select_test_urls(result.filtered_urls, test_limit)
        console.print(f"\n[bold]Test batch ({len(batch)} URLs):[/bold]")
        for url in batch:
            console.print(f"  {url}", soft_wrap=True)


# ============================================================================
# Filter Commands
# ============================================================================

@app.command()
def categories(
    links: Path = typer.Argument(..., help="URL mapping JSON (links, count, base_url)", exists=True),
    analysis: Path = typer.Argument(..., help="URL analysis JSON (url_categories)", exists=True),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Category to include"),
    select_all: bool = typer.Option(False, "--all", "-a", help="Include every category"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result JSON here"),
    test_limit: Optional[int] = typer.Option(
        None, "--test-limit", "-n", help="Show the test-run batch of this size", min=1,
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Matching configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Filter URLs by membership in each category's example list.
    """
    from propscout.classifier.engine import filter_by_categories
    from propscout.core.config import load_matching_config
    from propscout.core.io import load_url_analysis, load_url_mapping

    _setup_logging(verbose)

    try:
        matching_config = load_matching_config(config)
        mapping = load_url_mapping(links)
        url_analysis = load_url_analysis(analysis, lenient=True)

        selected = _resolve_selection(select, select_all, list(url_analysis.url_categories))
        result = filter_by_categories(
            mapping.links,
            selected,
            url_analysis,
            matcher=matching_config.create_matcher(),
        )
        _report(result, matching_config, output, test_limit)

    except PropScoutError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def patterns(
    links: Path = typer.Argument(..., help="URL mapping JSON (links, count, base_url)", exists=True),
    patterns_file: Path = typer.Argument(..., help="Generated patterns JSON", exists=True),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Category to include"),
    select_all: bool = typer.Option(False, "--all", "-a", help="Include every category"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write result JSON here"),
    test_limit: Optional[int] = typer.Option(
        None, "--test-limit", "-n", help="Show the test-run batch of this size", min=1,
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Matching configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Filter URLs with generated regex patterns.
    """
    from propscout.classifier.engine import filter_by_patterns
    from propscout.core.config import load_matching_config
    from propscout.core.io import load_patterns, load_url_mapping

    _setup_logging(verbose)

    try:
        matching_config = load_matching_config(config)
        mapping = load_url_mapping(links)
        generated = load_patterns(patterns_file)

        selected = _resolve_selection(select, select_all, list(generated))
        result = filter_by_patterns(
            mapping.links,
            selected,
            generated,
            matcher=matching_config.create_matcher(),
        )
        _report(result, matching_config, output, test_limit)

    except PropScoutError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def examples(
    analysis: Path = typer.Argument(..., help="URL analysis JSON (url_categories)", exists=True),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Category to include"),
    select_all: bool = typer.Option(False, "--all", "-a", help="Include every category"),
) -> None:
    """
    Print example URLs of the selected categories for pattern generation.
    """
    from propscout.classifier.sampling import collect_category_examples
    from propscout.core.io import load_url_analysis

    try:
        url_analysis = load_url_analysis(analysis, lenient=True)
        selected = _resolve_selection(select, select_all, list(url_analysis.url_categories))
        console.print_json(data=collect_category_examples(selected, url_analysis))

    except PropScoutError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def tree(
    links: Path = typer.Argument(..., help="URL mapping JSON (links, count, base_url)", exists=True),
    analysis: Optional[Path] = typer.Option(None, "--analysis", help="URL analysis JSON to tag nodes"),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Selected category"),
    only_selected: bool = typer.Option(False, "--only-selected", help="Keep only selected categories"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Summarise discovered URLs by path depth.
    """
    from propscout.classifier.tree import build_url_tree
    from propscout.core.io import load_url_analysis, load_url_mapping

    _setup_logging(verbose)

    try:
        mapping = load_url_mapping(links)
        url_categories = {}
        if analysis:
            url_categories = load_url_analysis(analysis, lenient=True).url_categories

        base_url = mapping.base_url or (mapping.links[0] if mapping.links else "")
        root = build_url_tree(
            mapping.links,
            base_url,
            url_categories,
            selected_categories=select or [],
            only_selected=only_selected,
        )

        by_depth: dict[int, int] = {}
        tagged = 0
        for node in root.iter_nodes():
            if node is root:
                continue
            by_depth[node.depth] = by_depth.get(node.depth, 0) + 1
            if node.category:
                tagged += 1

        table = Table(title=f"URL Tree: {root.name}")
        table.add_column("Depth", style="cyan", justify="right")
        table.add_column("Nodes", style="green", justify="right")
        for depth in sorted(by_depth):
            table.add_row(str(depth), str(by_depth[depth]))

        console.print(table)
        console.print(f"Nodes: {root.count() - 1}, tagged with a category: {tagged}")

    except PropScoutError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold cyan]PropScout[/bold cyan] version [yellow]{__version__}[/yellow]")


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    """Main entry point for CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
