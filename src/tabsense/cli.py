"""CLI entry point for tabsense."""

import json
import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress
from rich.table import Table

from .config import load_config

console = Console()

MAX_PARAGRAPHS = 5


def prepare_content(record: dict[str, Any]) -> str:
    """Concatenate a tab record into the text that gets embedded.

    Order: title, URL, summary, up to five leading paragraphs, keywords.
    A record that already carries ``text`` is used as is.
    """
    if isinstance(record.get("text"), str):
        return record["text"]

    parts = []
    if record.get("title"):
        parts.append(f"Title: {record['title']}")
    if record.get("url"):
        parts.append(f"URL: {record['url']}")
    if record.get("summary"):
        parts.append(f"Summary: {record['summary']}")
    paragraphs = record.get("paragraphs") or []
    if paragraphs:
        parts.append(f"Content: {' '.join(paragraphs[:MAX_PARAGRAPHS])}")
    keywords = record.get("keywords") or []
    if keywords:
        parts.append(f"Keywords: {', '.join(keywords)}")
    return "\n".join(parts)


def _load_items(path: str) -> list:
    from .models import Item

    records = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise click.BadParameter(f"{path} must contain a JSON list of records")

    return [
        Item(
            id=str(record.get("id", i)),
            text=prepare_content(record),
            title=record.get("title"),
            metadata={"url": record["url"]} if record.get("url") else {},
        )
        for i, record in enumerate(records)
    ]


def _get_coordinator(ctx):
    from .grouping import GroupingCoordinator

    config = load_config(ctx.obj.get("config_path"))
    return GroupingCoordinator(config=config)


def _embed_with_progress(coordinator, items) -> None:
    """Embed up front so the progress bar shows; grouping then skips them."""
    with Progress(console=console, transient=True) as progress:
        task = progress.add_task("Embedding...", total=len(items))
        for item in items:
            if item.vector is None and item.text is not None:
                item.vector = coordinator.generator.generate(item.text)
            progress.advance(task)


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, config_path, verbose):
    """tabsense - group text items by content similarity."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@cli.command()
@click.argument("items_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--method", type=click.Choice(["dbscan", "kmeans", "semantic"]), default=None, help="Clustering algorithm")
@click.option("--epsilon", type=float, default=None, help="DBSCAN neighbourhood distance (also used for semantic sub-clusters)")
@click.option("--min-points", type=int, default=None, help="DBSCAN core point size")
@click.option("--k", "k", type=int, default=None, help="K-means cluster count")
@click.option("--seed", type=int, default=None, help="K-means random seed")
@click.option("--edges", "n_edges", default=10, help="Number of edges to show")
@click.pass_context
def group(ctx, items_path, method, epsilon, min_points, k, seed, n_edges):
    """Group the items in a JSON file."""
    from .errors import InvalidInputError

    items = _load_items(items_path)
    coordinator = _get_coordinator(ctx)

    options = {
        key: value
        for key, value in {
            "epsilon": epsilon,
            "min_points": min_points,
            "k": k,
            "random_state": seed,
        }.items()
        if value is not None
    }

    console.print(f"[blue]Embedding {len(items)} item(s)...[/]")
    try:
        _embed_with_progress(coordinator, items)
        result = coordinator.group(items, method, options)
    except InvalidInputError as e:
        console.print(f"[red]{e}[/]")
        ctx.exit(1)

    if result.is_empty:
        console.print("[yellow]No items to group.[/]")
        return

    titles = {item.id: item.display_title for item in items}
    table = Table(title="Groups")
    table.add_column("Group", style="bold")
    table.add_column("Color")
    table.add_column("Category", style="dim")
    table.add_column("Items", justify="right")
    table.add_column("Members")
    for g in result.groups:
        table.add_row(
            g.name,
            f"[{g.color}]■[/] {g.color}",
            g.category or "",
            str(len(g.member_ids)),
            "\n".join(titles[m] for m in g.member_ids),
        )
    console.print(table)

    console.print(f"\n[green]✓ Found {len(result.edges)} relationship(s)[/]")
    for e in result.edges[:n_edges]:
        console.print(f"  {titles[e.from_id]} ↔ {titles[e.to_id]} (similarity: {e.similarity:.3f})")


@cli.command()
@click.argument("text_a")
@click.argument("text_b")
@click.pass_context
def compare(ctx, text_a, text_b):
    """Print the cosine similarity of two texts."""
    from .embeddings.embedder import EmbeddingGenerator
    from .similarity import cosine_similarity

    generator = EmbeddingGenerator.from_config(load_config(ctx.obj.get("config_path")))
    sim = cosine_similarity(generator.generate(text_a), generator.generate(text_b))
    console.print(f"Similarity: [bold]{sim:.4f}[/]")


@cli.command()
@click.argument("items_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("item_id")
@click.option("--threshold", type=float, default=None, help="Minimum similarity")
@click.pass_context
def similar(ctx, items_path, item_id, threshold):
    """List items similar to ITEM_ID."""
    items = _load_items(items_path)
    coordinator = _get_coordinator(ctx)
    matches = coordinator.find_similar(item_id, items, threshold)

    if not matches:
        console.print("[yellow]No similar items found.[/]")
        return

    titles = {item.id: item.display_title for item in items}
    table = Table(title=f"Similar to {titles.get(item_id, item_id)}")
    table.add_column("#", style="dim", width=3)
    table.add_column("Item")
    table.add_column("Similarity", justify="right")
    for i, (match_id, sim) in enumerate(matches, 1):
        table.add_row(str(i), titles[match_id], f"{sim:.3f}")
    console.print(table)
