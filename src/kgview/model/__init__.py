from .entities import EntityClass, EntityModel, EntityProperty, PropertyKind
from .graph import EdgeKind, GraphData, GraphEdge, GraphNode, NodeKind, Position, empty_graph

__all__ = [
    "EntityClass",
    "EntityModel",
    "EntityProperty",
    "PropertyKind",
    "EdgeKind",
    "GraphData",
    "GraphEdge",
    "GraphNode",
    "NodeKind",
    "Position",
    "empty_graph",
]
