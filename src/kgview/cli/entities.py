#!/usr/bin/env python3
"""
Entity list commands for the kgview CLI.

Prints the collapsible entity list (classes with their attributes and
relations) and the prefix declarations of a document.
"""

import sys
from pathlib import Path
from typing import Iterable, List, Optional

import click
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from kgview.backend.rdf_rdflib import parse_turtle
from kgview.common.errors import KGViewError
from kgview.extract.entities import extract
from kgview.model.entities import EntityClass, EntityModel

# Initialize Rich console for pretty output
console = Console()


def render_entity_class(cls: EntityClass, expanded: bool, model: Optional[EntityModel] = None) -> Tree:
    marker = "▾" if expanded else "▸"
    node = Tree(f"{marker} [bold]{cls.name}[/bold]")
    if not expanded:
        return node

    if cls.comment:
        node.add(f"[italic dim]{cls.comment}[/italic dim]")

    if cls.properties:
        attributes = node.add(f"[cyan]ATTRIBUTES ({len(cls.properties)})[/cyan]")
        for prop in cls.properties:
            range_label = model.range_label(prop) if model is not None else prop.range
            suffix = f" [dim]: {range_label}[/dim]" if range_label else ""
            attributes.add(f"[blue]●[/blue] {prop.name}{suffix}")

    if cls.relationships:
        relations = node.add(f"[green]RELATIONS ({len(cls.relationships)})[/green]")
        for rel in cls.relationships:
            suffix = f" [dim]→ {rel.range}[/dim]" if rel.range else ""
            relations.add(f"[green]●[/green] {rel.name}{suffix}")

    if cls.is_empty:
        node.add("[dim]No attributes or relations defined[/dim]")
    return node


def render_entity_list(model: EntityModel, expanded: Optional[Iterable[str]] = None,
                       title: str = "Ontology Entity Structure"):
    """
    Entity list, most connected classes first.

    `expanded` holds class names to open; None opens every class.
    """
    if model.is_empty:
        return "[dim]No entities found in TTL data[/dim]"
    open_names = None if expanded is None else set(expanded)
    tree = Tree(f"[bold blue]{title}[/bold blue]")
    for cls in model.sorted_classes():
        is_open = open_names is None or cls.name in open_names
        tree.add(render_entity_class(cls, is_open, model))
    return tree


def resolve_expand_names(model: EntityModel, values: Iterable[str]) -> List[str]:
    """Class names to open. Prefixed names such as ex:Patient and full URIs resolve to their class."""
    names = []
    for value in values:
        cls = model.classes.get(model.prefixes.expand(value))
        names.append(cls.name if cls is not None else value)
    return names


@click.command(name="entities")
@click.argument("ttl_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--expand", "-e", multiple=True, help="Class name or prefixed name to expand (repeatable)")
@click.option("--all", "expand_all", is_flag=True, help="Expand every class")
def entities_cmd(ttl_file: str, expand: tuple, expand_all: bool):
    """
    Show the classes of an ontology with their attributes and relations.

    TTL_FILE: Turtle document to read
    """
    try:
        document = parse_turtle(Path(ttl_file).read_text(encoding="utf-8"))
    except KGViewError as e:
        console.print(f"[red]Error parsing TTL data:[/red] {e}")
        sys.exit(1)

    model = extract(document.triples, document.prefixes)
    console.print(render_entity_list(model, None if expand_all else resolve_expand_names(model, expand)))


@click.command(name="prefixes")
@click.argument("ttl_file", type=click.Path(exists=True, dir_okay=False))
def prefixes_cmd(ttl_file: str):
    """
    List the prefix declarations of a Turtle document.

    TTL_FILE: Turtle document to read
    """
    try:
        document = parse_turtle(Path(ttl_file).read_text(encoding="utf-8"))
    except KGViewError as e:
        console.print(f"[red]Error parsing TTL data:[/red] {e}")
        sys.exit(1)

    table = Table(title="Prefixes")
    table.add_column("Prefix", style="cyan")
    table.add_column("Namespace", style="green")
    for prefix, namespace in document.prefixes:
        table.add_row(prefix or ":", namespace)
    console.print(table)
