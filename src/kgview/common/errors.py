"""
Exception types for kgview.

Only ParseError is meant to reach callers of the parsing functions; the
other errors are raised and recovered inside the package.
"""
from __future__ import annotations
from typing import Optional


class KGViewError(Exception):
    """Base class for all kgview errors."""


class ParseError(KGViewError):
    """Malformed Turtle input."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class UnresolvedReferenceError(KGViewError):
    """A property domain or range names a class that is not in the entity set."""

    def __init__(self, name: str, role: str = "domain"):
        self.name = name
        self.role = role
        super().__init__(f"unresolved {role} reference: {name}")


class LayoutFailure(KGViewError):
    """A layout strategy could not produce positions."""

    def __init__(self, strategy: str, reason: str):
        self.strategy = strategy
        self.reason = reason
        super().__init__(f"{strategy} layout failed: {reason}")
