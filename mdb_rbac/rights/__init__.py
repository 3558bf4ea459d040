"""
Right strings: pattern matching and the catalogue of known rights.
"""

from .matcher import RightMatcher, matches
from .registry import DEFAULT_RIGHTS, list_rights

__all__ = [
    "RightMatcher",
    "matches",
    "DEFAULT_RIGHTS",
    "list_rights",
]
