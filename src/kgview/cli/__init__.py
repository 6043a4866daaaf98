"""
kgview CLI package.
"""

from .main import cli

__all__ = ["cli"]
