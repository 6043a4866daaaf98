# kgview/common/types.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

KGId = str
"""
A synthetic identifier for a graph element (node or edge),
scoped to one build call unless hashed ids are requested.
"""


class TermKind(str, Enum):
    NAMED = "named"
    LITERAL = "literal"
    BLANK = "blank"


@dataclass(frozen=True)
class Term:
    """
    One position of a triple.

    Attributes:
        value: absolute URI for named nodes, the lexical form for literals,
            the parser-local label for blank nodes.
        kind: the term type tag.
        datatype: literal datatype URI, if any.
        language: literal language tag, if any.
    """
    value: str
    kind: TermKind
    datatype: Optional[str] = None
    language: Optional[str] = None

    @property
    def is_named(self) -> bool:
        return self.kind is TermKind.NAMED

    @property
    def is_literal(self) -> bool:
        return self.kind is TermKind.LITERAL

    @property
    def is_blank(self) -> bool:
        return self.kind is TermKind.BLANK

    def sort_key(self) -> tuple[str, str]:
        # blank node labels are random per parse
        return (self.kind.value, "" if self.is_blank else self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Triple:
    subject: Term
    predicate: Term
    object: Term

    def sort_key(self):
        return (self.subject.sort_key(), self.predicate.sort_key(), self.object.sort_key())

    def __iter__(self):
        yield self.subject
        yield self.predicate
        yield self.object


def named(uri: str) -> Term:
    return Term(uri, TermKind.NAMED)


def literal(value: str, datatype: str | None = None, language: str | None = None) -> Term:
    return Term(value, TermKind.LITERAL, datatype=datatype, language=language)


def blank(label: str) -> Term:
    return Term(label, TermKind.BLANK)
