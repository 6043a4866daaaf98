"""
Graph builders: project triples or an entity model onto a renderable graph.

Two variants:
  - build_full_graph: every subject and named object becomes a node,
    every non-core predicate between named nodes becomes an edge.
  - build_class_er_graph: class nodes, attribute nodes, dashed membership
    edges (class -> attribute) and labelled relationship edges (class -> class).

Node and edge ids belong to one build call. With id_strategy="hashed" they are
derived from (kind, uri) instead, which makes them stable across reloads.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Dict, Iterable, List, Literal, Optional, Sequence, Set

from kgview.common.errors import UnresolvedReferenceError
from kgview.common.namespace import CLASS_TYPES, CORE_PREDICATES, RDF_TYPE, PrefixMap, humanize_label, short_name
from kgview.common.types import KGId, Term, Triple
from kgview.model.entities import EntityClass, EntityModel
from kgview.model.graph import EdgeKind, GraphData, GraphEdge, GraphNode, NodeKind

logger = logging.getLogger(__name__)

IdStrategy = Literal["sequential", "hashed"]

ID_PREFIXES = {
    NodeKind.CLASS: "class",
    NodeKind.ATTRIBUTE: "attr",
    NodeKind.INDIVIDUAL: "individual",
    NodeKind.ENTITY: "entity",
}


class IdAllocator:
    """Hands out node and edge ids for one build call."""

    def __init__(self, strategy: IdStrategy = "sequential"):
        if strategy not in ("sequential", "hashed"):
            raise ValueError(f"Unknown id strategy: {strategy}")
        self.strategy = strategy
        self._counters: Dict[str, int] = {}
        self._issued: Set[str] = set()

    def _next(self, prefix: str, key: str) -> KGId:
        if self.strategy == "sequential":
            n = self._counters.get(prefix, 0)
            self._counters[prefix] = n + 1
            return f"{prefix}-{n}"
        digest = hashlib.sha1(f"{prefix}|{key}".encode("utf-8")).hexdigest()[:12]
        candidate = f"{prefix}-{digest}"
        n = 1
        while candidate in self._issued:
            candidate = f"{prefix}-{digest}-{n}"
            n += 1
        self._issued.add(candidate)
        return candidate

    def node_id(self, kind: NodeKind, uri: str) -> KGId:
        return self._next(ID_PREFIXES[kind], uri)

    def edge_id(self, source_uri: str, predicate: str, target_uri: str) -> KGId:
        return self._next("edge", f"{source_uri}|{predicate}|{target_uri}")


def _node_label(term: Term) -> str:
    return term.value if term.is_blank else short_name(term.value)


def infer_node_kinds(triples: Iterable[Triple]) -> Dict[str, NodeKind]:
    """class if typed owl:Class/rdfs:Class, individual if typed otherwise."""
    kinds: Dict[str, NodeKind] = {}
    for s, p, o in triples:
        if p.value != RDF_TYPE:
            continue
        if o.is_named and o.value in CLASS_TYPES:
            kinds[s.value] = NodeKind.CLASS
        elif kinds.get(s.value) is not NodeKind.CLASS:
            kinds[s.value] = NodeKind.INDIVIDUAL
    return kinds


def build_full_graph(triples: Sequence[Triple], id_strategy: IdStrategy = "sequential",
                     prefixes: Optional[PrefixMap] = None) -> GraphData:
    """
    One node per subject and named object, one edge per non-core triple.

    With `prefixes`, vocabulary nodes (typed neither class nor individual) are
    labelled by prefixed name, e.g. owl:Class.
    """
    ids = IdAllocator(id_strategy)
    kinds = infer_node_kinds(triples)

    nodes: Dict[str, GraphNode] = {}

    def ensure_node(term: Term) -> None:
        if term.value in nodes:
            return
        kind = kinds.get(term.value, NodeKind.ENTITY)
        if prefixes is not None and kind == NodeKind.ENTITY and term.is_named:
            label = prefixes.compact(term.value)
        else:
            label = _node_label(term)
        nodes[term.value] = GraphNode(
            id=ids.node_id(kind, term.value),
            label=label,
            kind=kind,
            source_uri=term.value if term.is_named else None,
        )

    for s, p, o in triples:
        ensure_node(s)
        if o.is_named:
            ensure_node(o)

    edges: List[GraphEdge] = []
    for s, p, o in triples:
        if p.value in CORE_PREDICATES or not o.is_named:
            continue
        source, target = nodes.get(s.value), nodes.get(o.value)
        if source is None or target is None:
            continue
        edges.append(GraphEdge(
            id=ids.edge_id(s.value, p.value, o.value),
            source=source.id,
            target=target.id,
            kind=EdgeKind.RELATIONSHIP,
            label=humanize_label(short_name(p.value)),
            predicate_uri=p.value,
        ))

    logger.debug(f"Full graph: {len(nodes)} nodes, {len(edges)} edges")
    return GraphData(nodes=list(nodes.values()), edges=edges)


class _ClassIndex:
    """Class nodes by short name, in registration order."""

    def __init__(self):
        self._by_name: Dict[str, List[GraphNode]] = {}

    def add(self, cls: EntityClass, node: GraphNode) -> None:
        self._by_name.setdefault(cls.name, []).append(node)

    def resolve(self, name: Optional[str], role: str) -> List[GraphNode]:
        if not name or name not in self._by_name:
            raise UnresolvedReferenceError(name or "<none>", role)
        return self._by_name[name]


def build_class_er_graph(
    model: EntityModel,
    include_attributes: bool = True,
    id_strategy: IdStrategy = "sequential",
) -> GraphData:
    ids = IdAllocator(id_strategy)
    index = _ClassIndex()
    nodes: List[GraphNode] = []
    edges: List[GraphEdge] = []

    for cls in model.classes.values():
        node = GraphNode(
            id=ids.node_id(NodeKind.CLASS, cls.uri),
            label=cls.name,
            kind=NodeKind.CLASS,
            source_uri=cls.uri,
        )
        nodes.append(node)
        index.add(cls, node)

    if include_attributes:
        for prop in model.attributes():
            try:
                owners = index.resolve(prop.domain, "domain")
            except UnresolvedReferenceError as e:
                logger.debug(f"No attribute node for {prop.name}: {e}")
                continue
            attr = GraphNode(
                id=ids.node_id(NodeKind.ATTRIBUTE, prop.uri),
                label=prop.name,
                kind=NodeKind.ATTRIBUTE,
                source_uri=prop.uri,
            )
            nodes.append(attr)
            for owner in owners:
                edges.append(GraphEdge(
                    id=ids.edge_id(owner.source_uri or owner.id, prop.uri, prop.uri),
                    source=owner.id,
                    target=attr.id,
                    kind=EdgeKind.MEMBERSHIP,
                    predicate_uri=prop.uri,
                    dashed=True,
                ))

    for prop in model.relationships():
        try:
            owners = index.resolve(prop.domain, "domain")
            # several classes may share the range name; the first registered one is the target
            target = index.resolve(prop.range, "range")[0]
        except UnresolvedReferenceError as e:
            logger.debug(f"No relationship edge for {prop.name}: {e}")
            continue
        for owner in owners:
            edges.append(GraphEdge(
                id=ids.edge_id(owner.source_uri or owner.id, prop.uri, target.source_uri or target.id),
                source=owner.id,
                target=target.id,
                kind=EdgeKind.RELATIONSHIP,
                label=humanize_label(prop.name),
                predicate_uri=prop.uri,
            ))

    logger.debug(f"Class-ER graph: {len(nodes)} nodes, {len(edges)} edges")
    return GraphData(nodes=nodes, edges=edges)
