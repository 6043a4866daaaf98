"""
Common utilities and types for kgview.
"""

import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level=logging.INFO, log_file: Optional[str] = None):
    # Get the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Check if the root logger already has handlers (avoid adding multiple)
    if not root_logger.handlers:
        if log_file:
            handler = logging.FileHandler(log_file)
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)


from .errors import KGViewError, ParseError, UnresolvedReferenceError, LayoutFailure
from .types import KGId, Term, TermKind, Triple
from .namespace import PrefixMap, short_name, humanize_label

__all__ = [
    "setup_logging",
    "KGViewError", "ParseError", "UnresolvedReferenceError", "LayoutFailure",
    "KGId", "Term", "TermKind", "Triple",
    "PrefixMap", "short_name", "humanize_label",
]
