from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from kgview.common.namespace import PrefixMap


class PropertyKind(Enum):
    DATATYPE = "DatatypeProperty"
    OBJECT = "ObjectProperty"


@dataclass
class EntityProperty:
    name: str
    uri: str
    kind: PropertyKind
    domain: Optional[str] = None
    range: Optional[str] = None
    range_uri: Optional[str] = None
    comment: Optional[str] = None

    @property
    def is_attribute(self) -> bool:
        return self.kind is PropertyKind.DATATYPE

    def __str__(self) -> str:
        return f"EntityProperty(name={self.name}, kind={self.kind.value}, domain={self.domain}, range={self.range})"


@dataclass
class EntityClass:
    name: str
    uri: str
    comment: Optional[str] = None
    properties: List[EntityProperty] = field(default_factory=list)
    relationships: List[EntityProperty] = field(default_factory=list)

    def attach(self, prop: EntityProperty) -> None:
        if prop.is_attribute:
            self.properties.append(prop)
        else:
            self.relationships.append(prop)

    @property
    def is_empty(self) -> bool:
        return not self.properties and not self.relationships


@dataclass
class EntityModel:
    classes: Dict[str, EntityClass] = field(default_factory=dict)
    properties: Dict[str, EntityProperty] = field(default_factory=dict)
    prefixes: PrefixMap = field(default_factory=PrefixMap)

    @property
    def is_empty(self) -> bool:
        return not self.classes

    def classes_named(self, name: str) -> List[EntityClass]:
        return [c for c in self.classes.values() if c.name == name]

    def sorted_classes(self) -> List[EntityClass]:
        """Classes ordered by number of relationships, most connected first."""
        return sorted(self.classes.values(), key=lambda c: len(c.relationships), reverse=True)

    def attributes(self) -> List[EntityProperty]:
        return [p for p in self.properties.values() if p.is_attribute]

    def relationships(self) -> List[EntityProperty]:
        return [p for p in self.properties.values() if not p.is_attribute]

    def range_label(self, prop: EntityProperty) -> Optional[str]:
        """Datatype ranges as prefixed names (xsd:string), class ranges by short name."""
        if prop.is_attribute and prop.range_uri:
            return self.prefixes.compact(prop.range_uri)
        return prop.range

    def __str__(self) -> str:
        def default(obj):
            if hasattr(obj, "__dataclass_fields__"):
                return {k: v for k, v in obj.__dict__.items()}
            if isinstance(obj, PrefixMap):
                return obj.as_dict()
            if isinstance(obj, Enum):
                return obj.value
            return str(obj)
        return json.dumps(self, default=default, indent=2)
