"""
Explicit view state for the presentation layer.

Nothing here is global: every operation takes a ViewState and returns a new
one. Saved positions (nodes the user dragged) survive incidental re-renders
and are dropped on an explicit re-layout or when the graph itself changes.
"""

from __future__ import annotations

import hashlib
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

from kgview.common.types import KGId
from kgview.model.graph import EdgeKind, GraphData, NodeKind, Position


def graph_fingerprint(graph: GraphData) -> str:
    """Hash of the graph structure (ids, kinds, labels, endpoints), positions excluded."""
    h = hashlib.sha1()
    for n in sorted(graph.nodes, key=lambda n: n.id):
        h.update(f"n|{n.id}|{n.kind.value}|{n.label}|{n.source_uri or ''}\n".encode("utf-8"))
    for e in sorted(graph.edges, key=lambda e: e.id):
        h.update(f"e|{e.id}|{e.kind.value}|{e.source}|{e.target}|{e.label or ''}\n".encode("utf-8"))
    return h.hexdigest()


class ViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    show_attributes: bool = True
    # None means every class is expanded
    expanded_class_ids: Optional[FrozenSet[KGId]] = None
    saved_positions: Dict[KGId, Position] = Field(default_factory=dict)
    graph_key: Optional[str] = None

    def toggle_attributes(self) -> "ViewState":
        return self.model_copy(update={"show_attributes": not self.show_attributes})

    def toggle_class(self, class_id: KGId, all_class_ids: FrozenSet[KGId] | None = None) -> "ViewState":
        current = self.expanded_class_ids
        if current is None:
            current = frozenset(all_class_ids or ())
        updated = current - {class_id} if class_id in current else current | {class_id}
        return self.model_copy(update={"expanded_class_ids": frozenset(updated)})

    def is_expanded(self, class_id: KGId) -> bool:
        return self.expanded_class_ids is None or class_id in self.expanded_class_ids

    def save_position(self, node_id: KGId, x: float, y: float) -> "ViewState":
        positions = dict(self.saved_positions)
        positions[node_id] = Position(x=x, y=y)
        return self.model_copy(update={"saved_positions": positions})

    def clear_positions(self) -> "ViewState":
        return self.model_copy(update={"saved_positions": {}})

    def for_graph(self, graph: GraphData) -> "ViewState":
        """Bind to a graph; saved positions are discarded when the graph data changed."""
        key = graph_fingerprint(graph)
        if key == self.graph_key:
            return self
        return self.model_copy(update={"graph_key": key, "saved_positions": {}})


def visible_graph(graph: GraphData, state: ViewState) -> GraphData:
    """Drop attribute nodes that are hidden, together with every edge touching them."""
    attributes = {n.id for n in graph.nodes_of(NodeKind.ATTRIBUTE)}
    if state.show_attributes:
        # an attribute stays visible while any of its owning classes is expanded
        shown = {
            e.target for e in graph.edges_of(EdgeKind.MEMBERSHIP)
            if state.is_expanded(e.source)
        }
        hidden = attributes - shown
    else:
        hidden = attributes
    nodes = [n for n in graph.nodes if n.id not in hidden]
    edges = [e for e in graph.edges if e.source not in hidden and e.target not in hidden]
    return GraphData(nodes=nodes, edges=edges)


def apply_saved_positions(graph: GraphData, state: ViewState) -> GraphData:
    if not state.saved_positions:
        return graph
    return graph.with_positions(state.saved_positions)
