from .builders import IdAllocator, build_class_er_graph, build_full_graph, infer_node_kinds
from .placeholder import medical_placeholder_graph

__all__ = [
    "IdAllocator",
    "build_class_er_graph",
    "build_full_graph",
    "infer_node_kinds",
    "medical_placeholder_graph",
]
