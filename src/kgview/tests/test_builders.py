"""
Tests for the full graph and class-ER graph builders.
"""

from collections import Counter

import pytest

from kgview.backend.rdf_rdflib import parse, parse_turtle
from kgview.common.namespace import OWL_CLASS, RDF_TYPE
from kgview.common.types import Triple, literal, named
from kgview.extract.entities import extract
from kgview.graph.builders import IdAllocator, build_class_er_graph, build_full_graph, infer_node_kinds
from kgview.model.graph import EdgeKind, NodeKind


def _er(ttl, **kwargs):
    return build_class_er_graph(extract(parse(ttl)), **kwargs)


def _shape(graph):
    """Node and edge multisets, ids replaced by labels."""
    labels = {n.id: n.label for n in graph.nodes}
    nodes = Counter((n.kind, n.label) for n in graph.nodes)
    edges = Counter((e.kind, labels[e.source], labels[e.target], e.label) for e in graph.edges)
    return nodes, edges


def test_patient_doctor_er_graph(patient_doctor_ttl):
    graph = _er(patient_doctor_ttl)

    classes = graph.nodes_of(NodeKind.CLASS)
    assert sorted(n.label for n in classes) == ["Doctor", "Patient"]
    assert graph.nodes_of(NodeKind.ATTRIBUTE) == []

    (edge,) = graph.edges
    assert edge.label == "Treated by"
    assert edge.kind == EdgeKind.RELATIONSHIP
    assert not edge.dashed
    assert graph.node(edge.source).label == "Patient"
    assert graph.node(edge.target).label == "Doctor"


def test_attribute_node_and_membership_edge(patient_doctor_name_ttl):
    graph = _er(patient_doctor_name_ttl)

    (attr,) = graph.nodes_of(NodeKind.ATTRIBUTE)
    assert attr.label == "name"
    assert attr.id.startswith("attr-")

    (membership,) = graph.edges_of(EdgeKind.MEMBERSHIP)
    assert membership.dashed
    assert membership.target == attr.id
    assert graph.node(membership.source).label == "Patient"
    assert membership.label is None


def test_dangling_attribute_adds_nothing(patient_doctor_ttl, dangling_attribute_ttl):
    plain = _er(patient_doctor_ttl)
    dangling = _er(dangling_attribute_ttl)

    assert _shape(dangling) == _shape(plain)
    assert "dosage" not in {n.label for n in dangling.nodes}


def test_hidden_attributes(patient_doctor_name_ttl):
    graph = _er(patient_doctor_name_ttl, include_attributes=False)
    assert graph.nodes_of(NodeKind.ATTRIBUTE) == []
    assert graph.edges_of(EdgeKind.MEMBERSHIP) == []
    assert len(graph.edges_of(EdgeKind.RELATIONSHIP)) == 1


def test_medical_er_graph(medical_ttl):
    graph = _er(medical_ttl)

    assert len(graph.nodes_of(NodeKind.CLASS)) == 4
    assert {n.label for n in graph.nodes_of(NodeKind.ATTRIBUTE)} == {"name", "licenseNumber"}
    # prescribes has a union range and gets no edge
    assert {e.label for e in graph.edges_of(EdgeKind.RELATIONSHIP)} == {"Treated by", "Has diagnosis"}
    assert graph.dangling_edges() == []


def test_sequential_ids(patient_doctor_name_ttl):
    graph = _er(patient_doctor_name_ttl)
    assert sorted(n.id for n in graph.nodes_of(NodeKind.CLASS)) == ["class-0", "class-1"]
    assert [n.id for n in graph.nodes_of(NodeKind.ATTRIBUTE)] == ["attr-0"]
    assert sorted(e.id for e in graph.edges) == ["edge-0", "edge-1"]


def test_rebuild_gives_same_shape(medical_ttl, patient_doctor_ttl):
    assert _shape(_er(medical_ttl)) == _shape(_er(medical_ttl))
    # blank node labels differ per parse, so the full graph check uses a document without any
    full = build_full_graph(parse(patient_doctor_ttl))
    assert _shape(full) == _shape(build_full_graph(parse(patient_doctor_ttl)))


def test_hashed_ids_are_stable(patient_doctor_name_ttl):
    first = _er(patient_doctor_name_ttl, id_strategy="hashed")
    second = _er(patient_doctor_name_ttl, id_strategy="hashed")

    assert [n.id for n in first.nodes] == [n.id for n in second.nodes]
    assert all(n.id.startswith(("class-", "attr-")) for n in first.nodes)
    assert len({n.id for n in first.nodes}) == len(first.nodes)


def test_hashed_ids_survive_unrelated_additions(patient_doctor_ttl, patient_doctor_name_ttl):
    before = _er(patient_doctor_ttl, id_strategy="hashed")
    after = _er(patient_doctor_name_ttl, id_strategy="hashed")

    ids_before = {n.label: n.id for n in before.nodes}
    ids_after = {n.label: n.id for n in after.nodes}
    assert ids_after["Patient"] == ids_before["Patient"]
    assert ids_after["Doctor"] == ids_before["Doctor"]


def test_unknown_id_strategy():
    with pytest.raises(ValueError):
        IdAllocator("random")


def test_full_graph_kinds_and_edges(patient_doctor_ttl):
    graph = build_full_graph(parse(patient_doctor_ttl))
    kinds = {n.label: n.kind for n in graph.nodes}

    assert kinds["Patient"] == NodeKind.CLASS
    assert kinds["Doctor"] == NodeKind.CLASS
    assert kinds["treatedBy"] == NodeKind.INDIVIDUAL
    assert kinds["Class"] == NodeKind.ENTITY

    # rdf:type is never an edge; domain and range are
    assert sorted(e.label for e in graph.edges) == ["Domain", "Range"]
    assert graph.dangling_edges() == []


def test_full_graph_individuals(medical_ttl):
    graph = build_full_graph(parse(medical_ttl))
    by_label = {n.label: n for n in graph.nodes}

    assert by_label["alice"].kind == NodeKind.INDIVIDUAL
    assert by_label["Patient"].kind == NodeKind.CLASS

    treated = [e for e in graph.edges if e.label == "Treated by" and e.source == by_label["alice"].id]
    assert len(treated) == 1
    assert treated[0].target == by_label["drSmith"].id
    assert treated[0].predicate_uri == "http://example.org/medical#treatedBy"

    # literals never become nodes
    assert "Alice" not in by_label
    assert "Dr. Smith" not in by_label


def test_empty_input():
    assert build_full_graph([]).is_empty
    assert _er("@prefix ex: <http://ex.org/> .\nex:a ex:b ex:c .").is_empty


def test_full_graph_vocabulary_labels_use_prefixes(patient_doctor_name_ttl):
    document = parse_turtle(patient_doctor_name_ttl)
    graph = build_full_graph(document.triples, prefixes=document.prefixes)
    by_label = {n.label: n for n in graph.nodes}

    assert by_label["owl:Class"].kind == NodeKind.ENTITY
    assert by_label["xsd:string"].kind == NodeKind.ENTITY
    # classes and individuals keep their short names
    assert by_label["Patient"].kind == NodeKind.CLASS
    assert by_label["treatedBy"].kind == NodeKind.INDIVIDUAL


def test_literal_class_type_is_not_a_class():
    subject = "http://ex.org/note"
    triples = [
        Triple(named(subject), named(RDF_TYPE), literal(OWL_CLASS)),
        Triple(named(subject), named("http://ex.org/mentions"), named("http://ex.org/other")),
    ]
    assert infer_node_kinds(triples)[subject] == NodeKind.INDIVIDUAL

    graph = build_full_graph(triples)
    assert graph.nodes_of(NodeKind.CLASS) == []
