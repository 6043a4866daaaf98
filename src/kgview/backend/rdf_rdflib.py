# kgview/backend/rdf_rdflib.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.plugins.parsers.notation3 import BadSyntax
from rdflib.util import guess_format

from kgview.common.errors import ParseError
from kgview.common.namespace import PrefixMap
from kgview.common.types import Term, TermKind, Triple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedDocument:
    triples: Tuple[Triple, ...]
    prefixes: PrefixMap = field(default_factory=PrefixMap)

    def __len__(self) -> int:
        return len(self.triples)


def to_term(node) -> Term:
    if isinstance(node, Literal):
        return Term(
            str(node),
            TermKind.LITERAL,
            datatype=str(node.datatype) if node.datatype else None,
            language=node.language,
        )
    if isinstance(node, BNode):
        return Term(str(node), TermKind.BLANK)
    if isinstance(node, URIRef):
        return Term(str(node), TermKind.NAMED)
    # variables and quoted graphs have no place in a plain Turtle document
    raise ParseError(f"unsupported term type {type(node).__name__}")


class RDFLibTripleStore:
    """
    Turns Turtle text into an ordered, immutable triple sequence.

    Every call parses into a fresh rdflib Graph, so nothing is shared between
    documents. Only the document's own prefix declarations are reported.
    """

    def __init__(self, format: str = "turtle", base_iri: str | None = None):
        self.format = format
        self.base = base_iri

    def _new_graph(self) -> Graph:
        return Graph(bind_namespaces="none")

    def parse(self, text: str) -> ParsedDocument:
        g = self._new_graph()
        try:
            g.parse(data=text, format=self.format, publicID=self.base)
        except BadSyntax as e:
            line = getattr(e, "lines", None)
            raise ParseError(getattr(e, "message", str(e)), line=line + 1 if line is not None else None) from e
        except Exception as e:
            raise ParseError(str(e)) from e
        return self.from_graph(g)

    def parse_file(self, file_path: str | Path) -> ParsedDocument:
        path = Path(file_path)
        fmt = guess_format(str(path)) or self.format
        if fmt != self.format:
            logger.debug(f"Parsing {path} as {fmt}")
        store = RDFLibTripleStore(format=fmt, base_iri=self.base)
        return store.parse(path.read_text(encoding="utf-8"))

    def from_graph(self, g: Graph) -> ParsedDocument:
        triples = [Triple(to_term(s), to_term(p), to_term(o)) for s, p, o in g]
        # rdflib iterates in hash order; sort so ids come out the same every run
        triples.sort(key=Triple.sort_key)
        prefixes = PrefixMap((prefix, str(ns)) for prefix, ns in g.namespaces())
        logger.debug(f"Parsed {len(triples)} triples with {len(prefixes)} prefixes")
        return ParsedDocument(triples=tuple(triples), prefixes=prefixes)


def parse_turtle(ttl_text: str, base_iri: str | None = None) -> ParsedDocument:
    """Parse Turtle text into triples plus its prefix declarations. Raises ParseError."""
    return RDFLibTripleStore(base_iri=base_iri).parse(ttl_text)


def parse(ttl_text: str) -> Tuple[Triple, ...]:
    return parse_turtle(ttl_text).triples

