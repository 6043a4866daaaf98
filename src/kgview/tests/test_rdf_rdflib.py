# kgview/tests/test_rdf_rdflib.py
import pytest

from kgview.backend.rdf_rdflib import RDFLibTripleStore, parse, parse_turtle
from kgview.common.errors import ParseError
from kgview.common.namespace import OWL_CLASS, RDF_TYPE, RDFS_RANGE
from kgview.common.types import TermKind


def test_parse_returns_typed_triples(patient_doctor_ttl):
    triples = parse(patient_doctor_ttl)
    assert len(triples) == 5

    patient = "http://example.org/clinic#Patient"
    typed = [t for t in triples if t.subject.value == patient and t.predicate.value == RDF_TYPE]
    assert len(typed) == 1
    assert typed[0].object.value == OWL_CLASS
    assert all(t.subject.kind is TermKind.NAMED for t in triples)


def test_literals_and_blank_nodes_are_tagged(medical_ttl):
    triples = parse(medical_ttl)

    comments = [t.object for t in triples if t.object.is_literal and t.object.value == "A licensed physician."]
    assert len(comments) == 1

    ranges = [t for t in triples if t.predicate.value == RDFS_RANGE and t.subject.value.endswith("#prescribes")]
    assert len(ranges) == 1
    assert ranges[0].object.kind is TermKind.BLANK


def test_literal_datatype_is_kept():
    ttl = '@prefix ex: <http://ex.org/> .\n@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .\nex:a ex:age "42"^^xsd:integer .'
    (triple,) = parse(ttl)
    assert triple.object.is_literal
    assert triple.object.value == "42"
    assert triple.object.datatype == "http://www.w3.org/2001/XMLSchema#integer"


def test_prefixes_are_only_the_declared_ones(medical_ttl):
    document = parse_turtle(medical_ttl)
    assert document.prefixes.namespace("ex") == "http://example.org/"
    assert document.prefixes.namespace("owl") == "http://www.w3.org/2002/07/owl#"
    # nothing the document did not declare
    assert "foaf" not in document.prefixes
    assert "schema" not in document.prefixes


def test_malformed_turtle_raises_parse_error(malformed_ttl):
    with pytest.raises(ParseError):
        parse(malformed_ttl)


def test_garbage_raises_parse_error():
    with pytest.raises(ParseError):
        parse("this is not turtle at all")


def test_triple_order_is_stable(medical_ttl):
    first = [t for t in parse(medical_ttl) if not (t.subject.is_blank or t.object.is_blank)]
    second = [t for t in parse(medical_ttl) if not (t.subject.is_blank or t.object.is_blank)]
    assert first == second


def test_calls_share_no_state(patient_doctor_ttl):
    store = RDFLibTripleStore()
    store.parse(patient_doctor_ttl)
    other = store.parse("@prefix ex: <http://ex.org/> .\nex:a ex:b ex:c .")
    assert len(other) == 1
    assert "owl" not in other.prefixes


def test_parse_file(test_data_dir):
    document = RDFLibTripleStore().parse_file(test_data_dir / "medical.ttl")
    assert len(document.triples) > 0
