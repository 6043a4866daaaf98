"""
Vocabulary constants and URI naming helpers.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, Optional, Tuple

from rdflib.namespace import OWL, RDF, RDFS

RDF_TYPE = str(RDF.type)
RDFS_CLASS = str(RDFS.Class)
RDFS_LABEL = str(RDFS.label)
RDFS_COMMENT = str(RDFS.comment)
RDFS_DOMAIN = str(RDFS.domain)
RDFS_RANGE = str(RDFS.range)
OWL_CLASS = str(OWL.Class)
OWL_DATATYPE_PROPERTY = str(OWL.DatatypeProperty)
OWL_OBJECT_PROPERTY = str(OWL.ObjectProperty)

CLASS_TYPES = frozenset({OWL_CLASS, RDFS_CLASS})
# predicates that never become edges in the full graph
CORE_PREDICATES = frozenset({RDF_TYPE, RDFS_LABEL, RDFS_COMMENT})

MULTIPLE_TYPES = "Multiple Types"

_SEGMENT_SPLIT = re.compile(r"[#/]")
_CAMEL_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_CAMEL_ACRONYM = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[_\-\s]+")


def short_name(uri: str) -> str:
    """
    Local name of a URI: the last segment after '#' or '/'.
      http://ex.org/onto#Patient -> Patient
      http://ex.org/onto/Doctor  -> Doctor
      http://ex.org/onto/        -> http://ex.org/onto/
    """
    parts = _SEGMENT_SPLIT.split(uri)
    return parts[-1] or uri


def humanize_label(name: str) -> str:
    """
    Turn a camelCase, snake_case or kebab-case local name into a phrase.
      hasSymptom   -> Has symptom
      treated_by   -> Treated by
      HTTPEndpoint -> Http endpoint
    """
    if not name:
        return name
    spaced = _CAMEL_ACRONYM.sub(r"\1 \2", name)
    spaced = _CAMEL_LOWER_UPPER.sub(r"\1 \2", spaced)
    words = [w.lower() for w in _SEPARATORS.split(spaced) if w]
    if not words:
        return name
    phrase = " ".join(words)
    return phrase[0].upper() + phrase[1:]


class PrefixMap:
    """
    Prefix declarations of one document, in registration order.

    `compact` picks the longest namespace that is a textual prefix of the URI;
    among equally long namespaces the first registered prefix wins.
    """

    def __init__(self, items: Optional[Iterable[Tuple[str, str]]] = None):
        self._prefixes: Dict[str, str] = {}
        for prefix, namespace in items or []:
            self.register(prefix, namespace)

    def register(self, prefix: str, namespace: str) -> None:
        if prefix not in self._prefixes:
            self._prefixes[prefix] = namespace

    def namespace(self, prefix: str) -> Optional[str]:
        return self._prefixes.get(prefix)

    def match(self, uri: str) -> Optional[Tuple[str, str]]:
        best: Optional[Tuple[str, str]] = None
        for prefix, namespace in self._prefixes.items():
            if not namespace or not uri.startswith(namespace):
                continue
            if best is None or len(namespace) > len(best[1]):
                best = (prefix, namespace)
        return best

    def compact(self, uri: str) -> str:
        found = self.match(uri)
        if found is None:
            return short_name(uri)
        prefix, namespace = found
        local = uri[len(namespace):]
        if not local:
            return short_name(uri)
        return f"{prefix}:{local}"

    def expand(self, curie: str) -> str:
        prefix, sep, local = curie.partition(":")
        if not sep or prefix not in self._prefixes:
            return curie
        return self._prefixes[prefix] + local

    def as_dict(self) -> Dict[str, str]:
        return dict(self._prefixes)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._prefixes.items())

    def __len__(self) -> int:
        return len(self._prefixes)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._prefixes

    def __repr__(self) -> str:
        return f"PrefixMap({self._prefixes!r})"
