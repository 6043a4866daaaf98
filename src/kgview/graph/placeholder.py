# Placeholder graph shown when a document cannot be parsed

from kgview.model.graph import EdgeKind, GraphData, GraphEdge, GraphNode, NodeKind, Position

_CLASSES = [
    ("patient", "Patient", 100, 100),
    ("doctor", "Doctor", 400, 100),
    ("diagnosis", "Diagnosis", 250, 250),
    ("treatment", "Treatment", 550, 250),
    ("medication", "Medication", 100, 400),
    ("hospital", "Hospital", 400, 400),
]

_RELATIONS = [
    ("patient", "doctor", "Treated by"),
    ("patient", "diagnosis", "Has"),
    ("doctor", "treatment", "Prescribes"),
    ("treatment", "medication", "Includes"),
    ("doctor", "hospital", "Works at"),
]


def medical_placeholder_graph() -> GraphData:
    nodes = [
        GraphNode(id=node_id, label=label, kind=NodeKind.CLASS, position=Position(x=x, y=y))
        for node_id, label, x, y in _CLASSES
    ]
    edges = [
        GraphEdge(id=f"{source}-{target}", source=source, target=target,
                  kind=EdgeKind.RELATIONSHIP, label=label)
        for source, target, label in _RELATIONS
    ]
    return GraphData(nodes=nodes, edges=edges)
