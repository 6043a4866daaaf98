"""
End-to-end tests: Turtle text in, positioned graph out.
"""

import pytest

from kgview import load_entities, load_view
from kgview.backend.rdf_rdflib import parse_turtle
from kgview.config import KGViewConfig
from kgview.model.graph import NodeKind, Position
from kgview.pipeline import build_graph
from kgview.view.state import ViewState


def test_load_view_positions_every_node(medical_ttl):
    result = load_view(medical_ttl)

    assert result.strategy == "force"
    assert len(result.graph.nodes_of(NodeKind.CLASS)) == 4
    assert len({n.position for n in result.graph.nodes}) == len(result.graph.nodes)


def test_malformed_turtle_gives_empty_graph(malformed_ttl):
    result = load_view(malformed_ttl)
    assert result.graph.is_empty
    assert result.graph.edges == []
    assert result.strategy == "none"


def test_malformed_turtle_with_placeholder(malformed_ttl):
    result = load_view(malformed_ttl, KGViewConfig(fallback="placeholder"))
    labels = {n.label for n in result.graph.nodes}
    assert "Patient" in labels
    assert len(result.graph.edges) == 5
    assert result.graph.dangling_edges() == []


def test_load_entities(medical_ttl, malformed_ttl):
    assert len(load_entities(medical_ttl).classes) == 4
    assert load_entities(malformed_ttl).is_empty


def test_load_view_full_mode(patient_doctor_ttl):
    result = load_view(patient_doctor_ttl, KGViewConfig(mode="full"))
    assert {e.label for e in result.graph.edges} == {"Domain", "Range"}


def test_load_view_hierarchical(patient_doctor_name_ttl):
    result = load_view(patient_doctor_name_ttl, strategy="hierarchical")
    assert result.strategy == "hierarchical"
    assert len(result.routes) == 2


def test_load_view_keeps_dragged_node_across_rerenders(patient_doctor_name_ttl):
    first = load_view(patient_doctor_name_ttl, state=ViewState())
    assert first.state is not None
    assert first.state.graph_key is not None
    assert first.graph.nodes_of(NodeKind.ATTRIBUTE)

    # drag a node, hide attributes, render again with the returned state
    state = first.state.save_position("class-0", 1, 2).toggle_attributes()
    second = load_view(patient_doctor_name_ttl, state=state)

    assert second.graph.nodes_of(NodeKind.ATTRIBUTE) == []
    assert second.graph.node("class-0").position == Position(x=1, y=2)
    assert second.state.saved_positions == {"class-0": Position(x=1, y=2)}


def test_load_view_drops_dragged_node_for_new_document(patient_doctor_ttl, patient_doctor_name_ttl):
    first = load_view(patient_doctor_ttl, state=ViewState())
    state = first.state.save_position("class-0", 1, 2)

    second = load_view(patient_doctor_name_ttl, state=state)
    assert second.state.saved_positions == {}
    assert second.graph.node("class-0").position != Position(x=1, y=2)


def test_load_view_without_state(patient_doctor_ttl):
    assert load_view(patient_doctor_ttl).state is None


def test_unknown_mode(patient_doctor_ttl):
    with pytest.raises(ValueError):
        build_graph(parse_turtle(patient_doctor_ttl), mode="tree")
