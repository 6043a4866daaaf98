"""
Entity extraction: typed classes and properties from a flat triple sequence.

The passes run in a fixed order because each one looks up entities the
previous passes registered:

    1. classes          S rdf:type owl:Class
    2. class comments   S rdfs:comment "..."
    3. properties       S rdf:type owl:DatatypeProperty | owl:ObjectProperty
    4. domain / range   S rdfs:domain O, S rdfs:range O

Properties are then attached to classes by *short name*, not by URI, so two
classes that share a local name in different namespaces both receive the
property.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Sequence

from kgview.common.errors import UnresolvedReferenceError
from kgview.common.namespace import (
    MULTIPLE_TYPES,
    OWL_CLASS,
    OWL_DATATYPE_PROPERTY,
    OWL_OBJECT_PROPERTY,
    RDF_TYPE,
    RDFS_COMMENT,
    RDFS_DOMAIN,
    RDFS_RANGE,
    PrefixMap,
    short_name,
)
from kgview.common.types import Triple
from kgview.model.entities import EntityClass, EntityModel, EntityProperty, PropertyKind

logger = logging.getLogger(__name__)

PROPERTY_TYPES = {
    OWL_DATATYPE_PROPERTY: PropertyKind.DATATYPE,
    OWL_OBJECT_PROPERTY: PropertyKind.OBJECT,
}


class EntityExtractor:

    def __init__(self, triples: Sequence[Triple]):
        self.triples = list(triples)
        self.classes: Dict[str, EntityClass] = {}
        self.properties: Dict[str, EntityProperty] = {}

    def _find_classes(self) -> None:
        for s, p, o in self.triples:
            if p.value == RDF_TYPE and o.is_named and o.value == OWL_CLASS and s.value not in self.classes:
                self.classes[s.value] = EntityClass(name=short_name(s.value), uri=s.value)

    def _attach_comments(self) -> None:
        for s, p, o in self.triples:
            if p.value != RDFS_COMMENT or not o.is_literal:
                continue
            if s.value in self.classes:
                self.classes[s.value].comment = o.value

    def _find_properties(self) -> None:
        for s, p, o in self.triples:
            if p.value != RDF_TYPE or not o.is_named or o.value not in PROPERTY_TYPES:
                continue
            if s.value in self.properties:
                # declared as both kinds; the first declaration in triple order wins
                continue
            self.properties[s.value] = EntityProperty(
                name=short_name(s.value), uri=s.value, kind=PROPERTY_TYPES[o.value]
            )

    def _attach_domain_range(self) -> None:
        for s, p, o in self.triples:
            prop = self.properties.get(s.value)
            if prop is None:
                continue
            if p.value == RDFS_DOMAIN:
                prop.domain = short_name(o.value)
            elif p.value == RDFS_RANGE:
                prop.range = MULTIPLE_TYPES if o.is_blank else short_name(o.value)
                prop.range_uri = o.value if o.is_named else None
            elif p.value == RDFS_COMMENT and o.is_literal:
                prop.comment = o.value

    def _class_index(self) -> Dict[str, list[EntityClass]]:
        index: Dict[str, list[EntityClass]] = {}
        for c in self.classes.values():
            index.setdefault(c.name, []).append(c)
        return index

    def _link_properties(self) -> None:
        index = self._class_index()
        for prop in self.properties.values():
            try:
                owners = resolve_class_name(index, prop.domain)
            except UnresolvedReferenceError as e:
                logger.debug(f"Skipping {prop.name}: {e}")
                continue
            for owner in owners:
                owner.attach(prop)

    def run(self, prefixes: Optional[PrefixMap] = None) -> EntityModel:
        self._find_classes()
        self._attach_comments()
        self._find_properties()
        self._attach_domain_range()
        self._link_properties()
        logger.info(f"Extracted {len(self.classes)} classes and {len(self.properties)} properties")
        return EntityModel(
            classes=self.classes,
            properties=self.properties,
            prefixes=prefixes if prefixes is not None else PrefixMap(),
        )


def resolve_class_name(index: Dict[str, list[EntityClass]], name: Optional[str]) -> list[EntityClass]:
    if not name or name not in index:
        raise UnresolvedReferenceError(name or "<none>")
    return index[name]


def extract(triples: Iterable[Triple], prefixes: Optional[PrefixMap] = None) -> EntityModel:
    """Build the typed entity model. Never raises; no classes gives an empty model."""
    return EntityExtractor(list(triples)).run(prefixes)
