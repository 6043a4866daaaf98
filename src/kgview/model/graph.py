# kgview/model/graph.py
"""
Renderable graph: the {nodes, edges} contract handed to the presentation layer.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Mapping, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

from kgview.common.types import KGId


class NodeKind(str, Enum):
    CLASS = "class"
    ATTRIBUTE = "attribute"
    INDIVIDUAL = "individual"
    ENTITY = "entity"


class EdgeKind(str, Enum):
    RELATIONSHIP = "relationship"
    MEMBERSHIP = "membership"


class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


class GraphNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: KGId
    label: str
    kind: NodeKind
    source_uri: Optional[str] = None
    position: Position = Field(default_factory=Position)

    def moved_to(self, x: float, y: float) -> "GraphNode":
        return self.model_copy(update={"position": Position(x=x, y=y)})


class GraphEdge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: KGId
    source: KGId
    target: KGId
    kind: EdgeKind = EdgeKind.RELATIONSHIP
    label: Optional[str] = None
    predicate_uri: Optional[str] = None
    dashed: bool = False


class GraphData(BaseModel):
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node_ids(self) -> Set[KGId]:
        return {n.id for n in self.nodes}

    def node(self, id: KGId) -> Optional[GraphNode]:
        for n in self.nodes:
            if n.id == id:
                return n
        return None

    def nodes_of(self, kind: NodeKind) -> List[GraphNode]:
        return [n for n in self.nodes if n.kind == kind]

    def edges_of(self, kind: EdgeKind) -> List[GraphEdge]:
        return [e for e in self.edges if e.kind == kind]

    def dangling_edges(self) -> List[GraphEdge]:
        ids = self.node_ids()
        return [e for e in self.edges if e.source not in ids or e.target not in ids]

    def with_nodes(self, nodes: List[GraphNode]) -> "GraphData":
        """Same edges, repositioned nodes. Node identity must not change."""
        if [n.id for n in nodes] != [n.id for n in self.nodes]:
            raise ValueError("layout changed node identity")
        return GraphData(nodes=list(nodes), edges=list(self.edges))

    def with_positions(self, positions: Mapping[KGId, Position]) -> "GraphData":
        nodes = [
            n.moved_to(*positions[n.id].as_tuple()) if n.id in positions else n
            for n in self.nodes
        ]
        return GraphData(nodes=nodes, edges=list(self.edges))


def empty_graph() -> GraphData:
    return GraphData()
