from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple

from tracebridge.config import get_config
from tracebridge.models import TraceFieldNames


class LegacyAliasTable:
    """Read-only mapping between the B3 header names and the current ones.

    Holds exactly one entry per trace field. Lookups are exact string
    matches in either direction.
    """

    def __init__(self, fields: Optional[TraceFieldNames] = None):
        self.fields = fields or TraceFieldNames()
        pairs = self.fields.legacy_pairs()
        self._legacy_to_canonical: Mapping[str, str] = MappingProxyType(dict(pairs))
        self._canonical_to_legacy: Mapping[str, str] = MappingProxyType(
            {canonical: legacy for legacy, canonical in pairs}
        )
        if len(self._canonical_to_legacy) != len(pairs):
            raise ValueError("Each trace field needs its own canonical header name")

    def canonical_for(self, legacy_key: str) -> Optional[str]:
        return self._legacy_to_canonical.get(legacy_key)

    def legacy_for(self, canonical_key: str) -> Optional[str]:
        return self._canonical_to_legacy.get(canonical_key)

    def items(self) -> List[Tuple[str, str]]:
        return list(self._legacy_to_canonical.items())

    def all_keys(self) -> List[str]:
        """Canonical and legacy names of every field, canonical first."""
        keys: List[str] = []
        for legacy, canonical in self._legacy_to_canonical.items():
            keys.extend((canonical, legacy))
        return keys

    def __len__(self) -> int:
        return len(self._legacy_to_canonical)

    def __iter__(self) -> Iterator[str]:
        return iter(self._legacy_to_canonical)

    def __repr__(self) -> str:
        return f"LegacyAliasTable({dict(self._legacy_to_canonical)!r})"


@lru_cache(maxsize=1)
def default_alias_table() -> LegacyAliasTable:
    return LegacyAliasTable(get_config().trace_fields)
