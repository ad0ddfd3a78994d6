from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from tracebridge.constants import (
    DEFAULT_FLAGS_NAME,
    DEFAULT_PARENT_ID_NAME,
    DEFAULT_SAMPLED_NAME,
    DEFAULT_SPAN_ID_NAME,
    DEFAULT_TRACE_ID_NAME,
    LEGACY_FLAGS_NAME,
    LEGACY_PARENT_ID_NAME,
    LEGACY_SAMPLED_NAME,
    LEGACY_SPAN_ID_NAME,
    LEGACY_TRACE_ID_NAME,
)


@dataclass(frozen=True)
class TraceFieldNames:
    trace_id: str = DEFAULT_TRACE_ID_NAME
    span_id: str = DEFAULT_SPAN_ID_NAME
    parent_id: str = DEFAULT_PARENT_ID_NAME
    sampled: str = DEFAULT_SAMPLED_NAME
    flags: str = DEFAULT_FLAGS_NAME

    def canonical_names(self) -> List[str]:
        return [self.trace_id, self.span_id, self.parent_id, self.sampled, self.flags]

    def legacy_pairs(self) -> List[Tuple[str, str]]:
        """Return ``(legacy, canonical)`` pairs, one per trace field."""
        return [
            (LEGACY_TRACE_ID_NAME, self.trace_id),
            (LEGACY_SPAN_ID_NAME, self.span_id),
            (LEGACY_PARENT_ID_NAME, self.parent_id),
            (LEGACY_SAMPLED_NAME, self.sampled),
            (LEGACY_FLAGS_NAME, self.flags),
        ]


@dataclass(frozen=True)
class TraceContext:
    trace_id: str
    span_id: str
    parent_id: Optional[str] = None
    sampled: Optional[bool] = None
    debug: bool = False
