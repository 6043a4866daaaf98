"""
Layered (hierarchical) layout.

Class nodes sit on layer 0, every other node on layer 1. Node order inside a
layer is improved with barycenter sweeps (keeping the ordering with the fewest
crossings seen), nodes are stacked per layer and edges get orthogonal routes.

`hierarchical_layout` is the async entry point: the computation runs in a
worker thread and is bounded by `hierarchical_timeout`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx

from kgview.common.errors import LayoutFailure
from kgview.common.types import KGId
from kgview.config import LayoutConfig
from kgview.model.graph import GraphData, GraphEdge, GraphNode, NodeKind, Position

logger = logging.getLogger(__name__)

Route = List[Position]


@dataclass
class LayeredDrawing:
    nodes: List[GraphNode]
    layers: Dict[KGId, int]
    routes: Dict[KGId, Route] = field(default_factory=dict)
    crossings: int = 0


def assign_layers(nodes: Sequence[GraphNode]) -> Dict[KGId, int]:
    return {n.id: 0 if n.kind == NodeKind.CLASS else 1 for n in nodes}


def _layer_graph(nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> nx.Graph:
    g = nx.Graph()
    g.add_nodes_from(n.id for n in nodes)
    g.add_edges_from((e.source, e.target) for e in edges if e.source in g and e.target in g)
    return g


def count_crossings(g: nx.Graph, layers: Dict[KGId, int], order: List[List[KGId]]) -> int:
    if len(order) < 2:
        return 0
    rank = {node_id: i for layer in order for i, node_id in enumerate(layer)}
    between = []
    for u, v in g.edges():
        if layers[u] == layers[v]:
            continue
        upper, lower = (u, v) if layers[u] < layers[v] else (v, u)
        between.append((rank[upper], rank[lower]))
    return sum(1 for (a1, b1), (a2, b2) in combinations(between, 2) if (a1 - a2) * (b1 - b2) < 0)


def _reorder(layer: List[KGId], fixed: List[KGId], g: nx.Graph) -> List[KGId]:
    fixed_rank = {node_id: i for i, node_id in enumerate(fixed)}

    def barycenter(item: Tuple[int, KGId]) -> Tuple[float, int]:
        i, node_id = item
        ranks = [fixed_rank[n] for n in g.neighbors(node_id) if n in fixed_rank]
        # nodes without neighbours in the fixed layer keep their slot
        return (sum(ranks) / len(ranks) if ranks else float(i), i)

    return [node_id for _, node_id in sorted(enumerate(layer), key=barycenter)]


def _check_cancel(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise LayoutFailure("hierarchical", "cancelled")


def minimize_crossings(g: nx.Graph, layers: Dict[KGId, int], order: List[List[KGId]],
                       sweeps: int, cancel: Optional[threading.Event] = None) -> Tuple[List[List[KGId]], int]:
    best = [list(layer) for layer in order]
    best_crossings = count_crossings(g, layers, best)
    current = [list(layer) for layer in order]
    for sweep in range(sweeps):
        _check_cancel(cancel)
        if best_crossings == 0:
            break
        # down sweeps reorder lower layers, up sweeps reorder upper layers
        indices = range(1, len(current)) if sweep % 2 == 0 else range(len(current) - 2, -1, -1)
        for i in indices:
            ref = i - 1 if sweep % 2 == 0 else i + 1
            current[i] = _reorder(current[i], current[ref], g)
        crossings = count_crossings(g, layers, current)
        if crossings < best_crossings:
            best, best_crossings = [list(layer) for layer in current], crossings
    return best, best_crossings


def _place(order: List[List[KGId]], config: LayoutConfig) -> Dict[KGId, Tuple[float, float]]:
    horizontal = config.direction in ("RIGHT", "LEFT")
    # extent along the layer axis and along the in-layer axis
    layer_step = (config.node_width if horizontal else config.node_height) + config.layer_spacing
    slot_step = (config.node_height if horizontal else config.node_width) + config.node_spacing
    widest = max((len(layer) for layer in order), default=0)
    n_layers = len(order)

    placed: Dict[KGId, Tuple[float, float]] = {}
    for li, layer in enumerate(order):
        layer_index = n_layers - 1 - li if config.direction in ("LEFT", "UP") else li
        along = config.padding + layer_index * layer_step
        shift = (widest - len(layer)) * slot_step / 2.0
        for si, node_id in enumerate(layer):
            across = config.padding + shift + si * slot_step
            placed[node_id] = (along, across) if horizontal else (across, along)
    return placed


def _route(edge: GraphEdge, placed: Dict[KGId, Tuple[float, float]], layers: Dict[KGId, int],
           config: LayoutConfig) -> Route:
    horizontal = config.direction in ("RIGHT", "LEFT")
    w, h = config.node_width, config.node_height
    (sx, sy), (tx, ty) = placed[edge.source], placed[edge.target]
    scx, scy, tcx, tcy = sx + w / 2, sy + h / 2, tx + w / 2, ty + h / 2

    if horizontal:
        if layers[edge.source] == layers[edge.target]:
            # same layer: leave on the far side and come back in a side channel
            channel = max(sx, tx) + w + config.layer_spacing / 4
            points = [(sx + w, scy), (channel, scy), (channel, tcy), (tx + w, tcy)]
        else:
            start_x = sx + w if sx < tx else sx
            end_x = tx if sx < tx else tx + w
            mid = (start_x + end_x) / 2
            points = [(start_x, scy), (mid, scy), (mid, tcy), (end_x, tcy)]
    else:
        if layers[edge.source] == layers[edge.target]:
            channel = max(sy, ty) + h + config.layer_spacing / 4
            points = [(scx, sy + h), (scx, channel), (tcx, channel), (tcx, ty + h)]
        else:
            start_y = sy + h if sy < ty else sy
            end_y = ty if sy < ty else ty + h
            mid = (start_y + end_y) / 2
            points = [(scx, start_y), (scx, mid), (tcx, mid), (tcx, end_y)]
    return [Position(x=x, y=y) for x, y in points]


def layered_layout(graph: GraphData, config: LayoutConfig | None = None,
                   cancel: Optional[threading.Event] = None) -> LayeredDrawing:
    """
    Blocking layered layout. Positions are top-left corners of node boxes.

    Raises LayoutFailure when `cancel` is set before the layout is finished.
    """
    config = config or LayoutConfig()
    _check_cancel(cancel)
    layers = assign_layers(graph.nodes)
    g = _layer_graph(graph.nodes, graph.edges)

    n_layers = max(layers.values(), default=-1) + 1
    order: List[List[KGId]] = [[] for _ in range(n_layers)]
    for node in graph.nodes:
        order[layers[node.id]].append(node.id)
    order = [layer for layer in order if layer]
    layers = {node_id: li for li, layer in enumerate(order) for node_id in layer}

    order, crossings = minimize_crossings(g, layers, order, config.crossing_sweeps, cancel)
    _check_cancel(cancel)
    placed = _place(order, config)

    nodes = [n.moved_to(*placed[n.id]) for n in graph.nodes]
    routes = {
        e.id: _route(e, placed, layers, config)
        for e in graph.edges
        if e.source in placed and e.target in placed
    }
    logger.debug(f"Layered layout: {len(order)} layers, {crossings} crossings")
    return LayeredDrawing(nodes=nodes, layers=layers, routes=routes, crossings=crossings)


async def hierarchical_layout(graph: GraphData, config: LayoutConfig | None = None) -> LayeredDrawing:
    """
    Run the layered layout off the event loop. Raises LayoutFailure on error or timeout.

    The worker gets its own executor, which is never joined: on timeout the
    worker is told to stop and the caller returns at once.
    """
    config = config or LayoutConfig()
    cancel = threading.Event()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="kgview-layered")
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(executor, layered_layout, graph, config, cancel),
            timeout=config.hierarchical_timeout,
        )
    except asyncio.TimeoutError as e:
        raise LayoutFailure("hierarchical", f"timed out after {config.hierarchical_timeout}s") from e
    except LayoutFailure:
        raise
    except Exception as e:
        raise LayoutFailure("hierarchical", str(e)) from e
    finally:
        cancel.set()
        executor.shutdown(wait=False, cancel_futures=True)
