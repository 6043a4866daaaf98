"""
Layout engine: strategy dispatch, fallback and the per-view layout session.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from kgview.common.errors import LayoutFailure
from kgview.common.types import KGId
from kgview.config import LayoutConfig
from kgview.layout.force import force_layout
from kgview.layout.hierarchical import Route, hierarchical_layout
from kgview.model.graph import GraphData
from kgview.view.state import ViewState, apply_saved_positions, visible_graph

logger = logging.getLogger(__name__)

STRATEGIES = ("force", "hierarchical")


@dataclass
class LayoutResult:
    graph: GraphData
    strategy: str
    fell_back: bool = False
    routes: Dict[KGId, Route] = field(default_factory=dict)
    # view state bound to the laid out graph; pass it back on the next render
    state: Optional[ViewState] = None


def _force(graph: GraphData, config: LayoutConfig) -> LayoutResult:
    nodes = force_layout(graph.nodes, graph.edges, config)
    return LayoutResult(graph=graph.with_nodes(nodes), strategy="force")


async def compute_layout(graph: GraphData, config: Optional[LayoutConfig] = None,
                         strategy: Optional[str] = None) -> LayoutResult:
    """
    Position every node of `graph` with the chosen strategy.

    A failing hierarchical layout falls back to force-directed; LayoutFailure
    only escapes when both strategies fail.
    """
    config = config or LayoutConfig()
    strategy = strategy or config.strategy
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown layout strategy: {strategy}")

    if strategy == "force":
        return _force(graph, config)

    try:
        drawing = await hierarchical_layout(graph, config)
        return LayoutResult(graph=graph.with_nodes(drawing.nodes), strategy="hierarchical",
                            routes=drawing.routes)
    except LayoutFailure as e:
        logger.warning(f"{e}; falling back to force-directed layout")
        try:
            result = _force(graph, config)
        except LayoutFailure as fallback_error:
            raise LayoutFailure("hierarchical+force", f"{e.reason}; {fallback_error.reason}") from fallback_error
        result.fell_back = True
        return result


def layout(graph: GraphData, config: Optional[LayoutConfig] = None,
           strategy: Optional[str] = None) -> LayoutResult:
    """Blocking wrapper around compute_layout for callers without an event loop."""
    return asyncio.run(compute_layout(graph, config, strategy))


class LayoutSession:
    """
    Layout requests for one graph view.

    A newer request supersedes an older in-flight one: when the older result
    arrives its generation is stale and it is discarded (None is returned).
    """

    def __init__(self, config: Optional[LayoutConfig] = None, state: Optional[ViewState] = None):
        self.config = config or LayoutConfig()
        self.state = state or ViewState()
        self.generation = 0
        self.current: Optional[LayoutResult] = None

    async def request(self, graph: GraphData, strategy: Optional[str] = None) -> Optional[LayoutResult]:
        self.generation += 1
        generation = self.generation
        self.state = self.state.for_graph(graph)
        shown = visible_graph(graph, self.state)

        result = await compute_layout(shown, self.config, strategy)
        if generation != self.generation:
            logger.debug(f"Discarding stale layout (generation {generation} < {self.generation})")
            return None

        result.graph = apply_saved_positions(result.graph, self.state)
        result.state = self.state
        self.current = result
        return result

    async def relayout(self, graph: GraphData, strategy: Optional[str] = None,
                       clear_saved: bool = True) -> Optional[LayoutResult]:
        """Lay the graph out again, by default forgetting dragged positions."""
        if clear_saved:
            self.state = self.state.clear_positions()
        return await self.request(graph, strategy)

    def update_state(self, state: ViewState) -> None:
        self.state = state

    def drag(self, node_id: KGId, x: float, y: float) -> None:
        self.state = self.state.save_position(node_id, x, y)
