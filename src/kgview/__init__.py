"""
kgview: Turtle ontologies as typed, positioned entity graphs.
"""

from kgview.backend.rdf_rdflib import parse, parse_turtle
from kgview.extract.entities import extract
from kgview.graph.builders import build_class_er_graph, build_full_graph
from kgview.layout.engine import LayoutSession, compute_layout
from kgview.layout.engine import layout as run_layout
from kgview.pipeline import load_entities, load_view

__version__ = "0.1.0"

__all__ = [
    "parse",
    "parse_turtle",
    "extract",
    "build_class_er_graph",
    "build_full_graph",
    "LayoutSession",
    "compute_layout",
    "run_layout",
    "load_entities",
    "load_view",
]
