from .state import ViewState, apply_saved_positions, graph_fingerprint, visible_graph

__all__ = ["ViewState", "apply_saved_positions", "graph_fingerprint", "visible_graph"]
