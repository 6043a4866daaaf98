#!/usr/bin/env python3
"""
Graph commands for the kgview CLI.

Builds the positioned graph of a Turtle document and writes it as JSON or
renders it to an image.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from kgview.backend.rdf_rdflib import parse_turtle
from kgview.common.errors import KGViewError
from kgview.config import KGViewConfig
from kgview.layout.engine import LayoutResult, layout
from kgview.model.graph import EdgeKind, NodeKind
from kgview.pipeline import build_graph
from kgview.plot import save_plot
from kgview.view.state import ViewState, visible_graph

# Initialize Rich console for pretty output
console = Console()


def _settings(ctx: click.Context) -> KGViewConfig:
    obj = ctx.obj or {}
    return obj.get("settings") or KGViewConfig()


def run_layout(ttl_file: str, settings: KGViewConfig, mode: Optional[str], strategy: Optional[str],
               hide_attributes: bool, hashed_ids: bool) -> LayoutResult:
    document = parse_turtle(Path(ttl_file).read_text(encoding="utf-8"))
    graph = build_graph(
        document,
        mode=mode or settings.mode,
        id_strategy="hashed" if hashed_ids else settings.id_strategy,
    )
    if hide_attributes:
        graph = visible_graph(graph, ViewState(show_attributes=False))
    return layout(graph, settings.layout, strategy)


def print_summary(result: LayoutResult):
    graph = result.graph
    table = Table(title="Graph")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Layout", result.strategy + (" (fallback)" if result.fell_back else ""))
    for kind in NodeKind:
        table.add_row(f"{kind.value} nodes", str(len(graph.nodes_of(kind))))
    for kind in EdgeKind:
        table.add_row(f"{kind.value} edges", str(len(graph.edges_of(kind))))
    console.print(table)


graph_options = [
    click.argument("ttl_file", type=click.Path(exists=True, dir_okay=False)),
    click.option("--mode", "-m", type=click.Choice(["er", "full"]), help="Class/attribute graph or full triple graph"),
    click.option("--strategy", "-s", type=click.Choice(["force", "hierarchical"]), help="Layout strategy"),
    click.option("--hide-attributes", is_flag=True, help="Leave attribute nodes out"),
    click.option("--hashed-ids", is_flag=True, help="Derive ids from URIs instead of insertion order"),
]


def with_graph_options(f):
    for option in reversed(graph_options):
        f = option(f)
    return f


@click.command(name="graph")
@with_graph_options
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write graph JSON here instead of stdout")
@click.pass_context
def graph_cmd(ctx: click.Context, ttl_file: str, mode: Optional[str], strategy: Optional[str],
              hide_attributes: bool, hashed_ids: bool, output: Optional[str]):
    """
    Build and lay out the graph of a Turtle document, emitted as JSON.

    TTL_FILE: Turtle document to read
    """
    try:
        result = run_layout(ttl_file, _settings(ctx), mode, strategy, hide_attributes, hashed_ids)
    except KGViewError as e:
        console.print(f"[red]Error building graph:[/red] {e}")
        sys.exit(1)

    payload = result.graph.model_dump_json(indent=2)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
        if not (ctx.obj or {}).get("quiet"):
            print_summary(result)
            console.print(f"[green]Graph written to[/green] {output}")
    else:
        click.echo(payload)


@click.command(name="plot")
@with_graph_options
@click.option("--output", "-o", type=click.Path(dir_okay=False), required=True, help="Image file to write")
@click.option("--title", default="Ontology Graph", help="Figure title")
@click.pass_context
def plot_cmd(ctx: click.Context, ttl_file: str, mode: Optional[str], strategy: Optional[str],
             hide_attributes: bool, hashed_ids: bool, output: str, title: str):
    """
    Render the laid out graph of a Turtle document to an image.

    TTL_FILE: Turtle document to read
    """
    settings = _settings(ctx)
    try:
        result = run_layout(ttl_file, settings, mode, strategy, hide_attributes, hashed_ids)
    except KGViewError as e:
        console.print(f"[red]Error building graph:[/red] {e}")
        sys.exit(1)

    save_plot(result.graph, output, settings.layout, title)
    if not (ctx.obj or {}).get("quiet"):
        print_summary(result)
        console.print(f"[green]Plot written to[/green] {output}")
