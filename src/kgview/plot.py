# Plotting positioned graphs

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import networkx as nx

from kgview.config import LayoutConfig
from kgview.model.graph import EdgeKind, GraphData, NodeKind

NODE_COLORS = {
    NodeKind.CLASS: "lightblue",
    NodeKind.ATTRIBUTE: "lightyellow",
    NodeKind.INDIVIDUAL: "lightgreen",
    NodeKind.ENTITY: "lightgray",
}


def plot_graph(graph: GraphData, config: LayoutConfig = None, title: str = "Ontology Graph"):
    """
    Plot a positioned graph: solid relationship edges, dashed membership edges.

    Args:
        graph: nodes must already carry positions (see kgview.layout)
        config: used for the node offset, so node centres line up with edges

    Returns:
        The matplotlib figure.
    """
    config = config or LayoutConfig()
    offset = config.node_center_offset

    G = nx.DiGraph()
    for node in graph.nodes:
        G.add_node(node.id, label=node.label, kind=node.kind)
    for edge in graph.edges:
        G.add_edge(edge.source, edge.target, label=edge.label or "", kind=edge.kind)

    # screen coordinates grow downwards, matplotlib's upwards
    pos = {n.id: (n.position.x + offset, -(n.position.y + offset)) for n in graph.nodes}

    fig = plt.figure(figsize=(16, 10))

    for kind, color in NODE_COLORS.items():
        nodelist = [n.id for n in graph.nodes if n.kind == kind]
        if nodelist:
            nx.draw_networkx_nodes(G, pos,
                                   nodelist=nodelist,
                                   node_color=color,
                                   node_size=2500 if kind == NodeKind.CLASS else 1500,
                                   edgecolors="gray")

    relationships = [(e.source, e.target) for e in graph.edges if e.kind == EdgeKind.RELATIONSHIP]
    if relationships:
        nx.draw_networkx_edges(G, pos,
                               edgelist=relationships,
                               edge_color="gray",
                               arrows=True,
                               arrowsize=15,
                               arrowstyle="->")

    # arrow options are only valid for arrowed edges
    memberships = [(e.source, e.target) for e in graph.edges if e.kind == EdgeKind.MEMBERSHIP]
    if memberships:
        nx.draw_networkx_edges(G, pos,
                               edgelist=memberships,
                               style="dashed",
                               edge_color="gray",
                               arrows=False)

    labels = {n.id: n.label for n in graph.nodes}
    nx.draw_networkx_labels(G, pos, labels, font_size=9, font_weight="bold")

    edge_labels = {(e.source, e.target): e.label for e in graph.edges if e.label}
    if edge_labels:
        nx.draw_networkx_edge_labels(G, pos, edge_labels, font_size=8)

    plt.title(title, fontsize=16, fontweight="bold")
    plt.axis("off")
    plt.tight_layout()

    return fig


def save_plot(graph: GraphData, output: str, config: LayoutConfig = None, title: str = "Ontology Graph") -> None:
    fig = plot_graph(graph, config, title)
    try:
        fig.savefig(output, dpi=120)
    finally:
        plt.close(fig)
