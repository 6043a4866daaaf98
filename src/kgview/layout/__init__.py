from .engine import LayoutResult, LayoutSession, compute_layout, layout
from .force import ForceSimulation, force_layout
from .hierarchical import LayeredDrawing, hierarchical_layout, layered_layout

__all__ = [
    "LayoutResult",
    "LayoutSession",
    "compute_layout",
    "layout",
    "ForceSimulation",
    "force_layout",
    "LayeredDrawing",
    "hierarchical_layout",
    "layered_layout",
]
