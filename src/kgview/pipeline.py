"""
End-to-end pipeline: Turtle text -> triples -> entities -> graph -> positions.

This is the boundary the presentation layer talks to. `load_view` and
`load_entities` never raise on malformed Turtle; they log the ParseError and
return an empty (or placeholder) result instead.
"""

from __future__ import annotations

import logging
from typing import Optional

from kgview.backend.rdf_rdflib import ParsedDocument, parse_turtle
from kgview.common.errors import ParseError
from kgview.config import KGViewConfig
from kgview.extract.entities import extract
from kgview.graph.builders import build_class_er_graph, build_full_graph
from kgview.graph.placeholder import medical_placeholder_graph
from kgview.layout.engine import LayoutResult, layout
from kgview.model.entities import EntityModel
from kgview.model.graph import GraphData, empty_graph
from kgview.view.state import ViewState, apply_saved_positions, visible_graph

logger = logging.getLogger(__name__)


def build_graph(document: ParsedDocument, mode: str = "er", include_attributes: bool = True,
                id_strategy: str = "sequential") -> GraphData:
    if mode == "full":
        return build_full_graph(document.triples, id_strategy=id_strategy, prefixes=document.prefixes)
    if mode == "er":
        model = extract(document.triples, document.prefixes)
        return build_class_er_graph(model, include_attributes=include_attributes, id_strategy=id_strategy)
    raise ValueError(f"Unknown graph mode: {mode}")


def load_entities(ttl_text: str) -> EntityModel:
    """Entity model for the collapsible entity list; empty when the text does not parse."""
    try:
        document = parse_turtle(ttl_text)
    except ParseError as e:
        logger.warning(f"Could not parse Turtle: {e}")
        return EntityModel()
    return extract(document.triples, document.prefixes)


def _recovery_graph(fallback: str) -> GraphData:
    return medical_placeholder_graph() if fallback == "placeholder" else empty_graph()


def load_view(ttl_text: str, config: Optional[KGViewConfig] = None,
              state: Optional[ViewState] = None, strategy: Optional[str] = None) -> LayoutResult:
    """
    Parse, build and lay out one document.

    Malformed Turtle gives the empty graph (or the placeholder graph when
    config.fallback is "placeholder"); it is never raised to the caller.

    With a `state`, the result carries that state bound to the new graph.
    Callers keep result.state, so dragged positions survive the next render
    as long as the graph itself is unchanged.
    """
    config = config or KGViewConfig()
    try:
        document = parse_turtle(ttl_text)
    except ParseError as e:
        logger.warning(f"Could not parse Turtle, showing {config.fallback} graph: {e}")
        return LayoutResult(graph=_recovery_graph(config.fallback), strategy="none", state=state)

    graph = build_graph(document, mode=config.mode, id_strategy=config.id_strategy)
    if state is not None:
        state = state.for_graph(graph)
        graph = visible_graph(graph, state)

    result = layout(graph, config.layout, strategy)
    if state is not None:
        result.graph = apply_saved_positions(result.graph, state)
        result.state = state
    return result
