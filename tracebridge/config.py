from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict

from dotenv import load_dotenv

from tracebridge.constants import (
    DEFAULT_FLAGS_NAME,
    DEFAULT_PARENT_ID_NAME,
    DEFAULT_SAMPLED_NAME,
    DEFAULT_SPAN_ID_NAME,
    DEFAULT_TRACE_ID_NAME,
    LEGACY_NAMES,
)
from tracebridge.models import TraceFieldNames


load_dotenv()


@dataclass(frozen=True)
class Config:
    log_level: str
    trace_fields: TraceFieldNames


def _optional(name: str, default: str) -> str:
    value = os.getenv(name)
    if not value or not value.strip():
        return default
    return value.strip()


def _validate_trace_fields(env_names: Dict[str, str]) -> None:
    seen: Dict[str, str] = {}
    for env_name, header in env_names.items():
        if header in LEGACY_NAMES:
            raise RuntimeError(f"{env_name} must not reuse a legacy header name: {header}")
        if header in seen:
            raise RuntimeError(
                f"{env_name} duplicates the header configured by {seen[header]}: {header}"
            )
        seen[header] = env_name


@lru_cache(maxsize=1)
def get_config() -> Config:
    log_level = os.getenv("LOG_LEVEL", "INFO")

    trace_fields = TraceFieldNames(
        trace_id=_optional("TRACE_ID_HEADER", DEFAULT_TRACE_ID_NAME),
        span_id=_optional("SPAN_ID_HEADER", DEFAULT_SPAN_ID_NAME),
        parent_id=_optional("PARENT_ID_HEADER", DEFAULT_PARENT_ID_NAME),
        sampled=_optional("SAMPLED_HEADER", DEFAULT_SAMPLED_NAME),
        flags=_optional("FLAGS_HEADER", DEFAULT_FLAGS_NAME),
    )
    _validate_trace_fields(
        {
            "TRACE_ID_HEADER": trace_fields.trace_id,
            "SPAN_ID_HEADER": trace_fields.span_id,
            "PARENT_ID_HEADER": trace_fields.parent_id,
            "SAMPLED_HEADER": trace_fields.sampled,
            "FLAGS_HEADER": trace_fields.flags,
        },
    )

    return Config(log_level=log_level, trace_fields=trace_fields)
