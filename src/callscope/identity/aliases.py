"""Identity aliasing for phone numbers and speaker names.

Extraction produces many spellings of the same person or line
("Rui", "Rui M.", "912 345 678", "912345678"). The alias map folds them
into one canonical display identity that every comparison, dropdown and
export label goes through.

Resolution is single-hop: a canonical value is never itself a key. The
map enforces this on every write instead of chasing chains on lookup.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from loguru import logger

from ..core.exceptions import AliasError

_NUMERIC_IDENTITY = re.compile(r"^[\d\s\-+().]+$")


def is_numeric_identity(value: str) -> bool:
    """True if the identity looks like a phone number rather than a name."""
    return bool(_NUMERIC_IDENTITY.match(value))


def _single_hop(mapping: Mapping[str, str]) -> dict[str, str]:
    """Flatten chains so every key maps straight to a canonical value.

    ``a -> b -> c`` becomes ``a -> c, b -> c``. Entries whose chain loops
    (self-maps and cycles) are dropped, leaving those identities canonical.
    """
    flat: dict[str, str] = {}
    for key, value in mapping.items():
        seen = {key}
        while value in mapping and value not in seen:
            seen.add(value)
            value = mapping[value]
        if value not in seen:
            flat[key] = value
    return flat


class AliasMap:
    """Registry mapping raw identifiers to canonical display identities.

    Many raw keys may share one canonical value. Lookups are O(1) and
    never chain.

    Example:
        aliases = AliasMap()
        aliases.merge(["912345678", "+351 912 345 678"], "Rui")

        aliases.resolve("912345678")  # "Rui"
        aliases.resolve("Rui")  # "Rui" (passthrough)
        aliases.resolve("")  # None
    """

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        """Initialize the registry.

        Args:
            mapping: Optional initial raw -> canonical mapping.
        """
        self._aliases: dict[str, str] = _single_hop(mapping or {})

    def resolve(self, raw: str | None) -> str | None:
        """Resolve a raw identifier to its canonical form.

        Args:
            raw: Raw identifier as extracted.

        Returns:
            None for empty input, the canonical identity if ``raw`` has been
            merged, otherwise ``raw`` unchanged.
        """
        if not raw:
            return None
        return self._aliases.get(raw, raw)

    def merge(self, raw_ids: Iterable[str], display_name: str) -> dict[str, str]:
        """Merge raw identifiers into one display identity.

        Existing entries for the raw ids are overwritten (last merge wins).
        Identities previously merged into one of ``raw_ids`` follow it to the
        new display name, and ``display_name`` stops being an alias of
        anything else, so the map stays single-hop.

        Args:
            raw_ids: Raw identifiers to unify.
            display_name: Canonical identity to show for all of them.

        Returns:
            Copy of the updated mapping, for persistence.

        Raises:
            AliasError: If the display name is blank or no raw id is given.
        """
        display = display_name.strip() if display_name else ""
        if not display:
            raise AliasError("Display name must not be empty")
        raws = {raw for raw in raw_ids if raw}
        if not raws:
            raise AliasError("No identities selected to merge")

        updated = {
            key: (display if value in raws else value)
            for key, value in self._aliases.items()
            if key != display
        }
        for raw in raws:
            if raw != display:
                updated[raw] = display

        self._aliases = updated
        logger.info(f"Merged {len(raws)} identities into {display!r}")
        return dict(updated)

    def update(self, mapping: Mapping[str, str]) -> None:
        """Overlay another mapping on top of this one (project restore).

        Incoming entries win on conflicting keys; the result is flattened
        back to single-hop.

        Args:
            mapping: Raw -> canonical entries to add.
        """
        combined = {**self._aliases, **{k: v for k, v in mapping.items() if k and v}}
        self._aliases = _single_hop(combined)
        logger.debug(f"Alias map updated: {len(self._aliases)} entries")

    def replace(self, mapping: Mapping[str, str]) -> None:
        """Replace the whole registry."""
        self._aliases = _single_hop({k: v for k, v in mapping.items() if k and v})

    def is_alias(self, raw: str) -> bool:
        """Check if a raw identifier has been merged into another identity."""
        return raw in self._aliases

    def get_canonical(self, raw: str) -> str | None:
        """Canonical identity for a merged raw id, None if it is not merged."""
        return self._aliases.get(raw)

    def as_dict(self) -> dict[str, str]:
        """Copy of the raw -> canonical mapping."""
        return dict(self._aliases)

    def __contains__(self, raw: object) -> bool:
        return raw in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)


def load_aliases(path: Path | str) -> AliasMap:
    """Load an alias map from a JSON file.

    Accepts either ``{"aliases": {...}}`` or a bare mapping.

    Args:
        path: Path to the JSON file.

    Returns:
        Populated AliasMap.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        json.JSONDecodeError: If the file is not valid JSON.
        AliasError: If the file does not hold a mapping.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and isinstance(data.get("aliases"), dict):
        data = data["aliases"]
    if not isinstance(data, dict):
        raise AliasError(f"Alias file {path} must contain a mapping")

    return AliasMap({str(k): str(v) for k, v in data.items()})
