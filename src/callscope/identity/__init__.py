"""Identity resolution for raw phone numbers and speaker names."""

from .aliases import AliasMap, is_numeric_identity, load_aliases

__all__ = [
    "AliasMap",
    "is_numeric_identity",
    "load_aliases",
]
