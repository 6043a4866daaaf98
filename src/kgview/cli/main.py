#!/usr/bin/env python3
"""
Main CLI entry point for kgview.

This module defines the main CLI group and imports all subcommands.
"""

import logging
from typing import Optional

import click
from rich.console import Console

from kgview.common import setup_logging
from kgview.config import load_config

from .entities import entities_cmd, prefixes_cmd
from .graph import graph_cmd, plot_cmd

# Initialize Rich console for pretty output
console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="kgview")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file"
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress output except errors"
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool, quiet: bool):
    """
    kgview - Turtle ontology viewer

    Lists the entities of an ontology and lays it out as a class/attribute graph.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)

    settings = load_config(config)

    # Set up logging level
    if quiet:
        level = "ERROR"
    elif verbose:
        level = "DEBUG"
    else:
        level = settings.log_level
    setup_logging(getattr(logging, level.upper(), logging.INFO))

    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Add all subcommands
cli.add_command(entities_cmd)
cli.add_command(prefixes_cmd)
cli.add_command(graph_cmd)
cli.add_command(plot_cmd)


if __name__ == "__main__":
    cli()
