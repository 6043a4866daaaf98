# kgview/backend/__init__.py
from .rdf_rdflib import RDFLibTripleStore, ParsedDocument, parse_turtle, parse

__all__ = [
    "RDFLibTripleStore",
    "ParsedDocument",
    "parse_turtle",
    "parse",
]
