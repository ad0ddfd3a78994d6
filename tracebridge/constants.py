from __future__ import annotations


NATIVE_HEADERS = "nativeHeaders"

DEFAULT_TRACE_ID_NAME = "spanTraceId"
DEFAULT_SPAN_ID_NAME = "spanId"
DEFAULT_PARENT_ID_NAME = "spanParentSpanId"
DEFAULT_SAMPLED_NAME = "spanSampled"
DEFAULT_FLAGS_NAME = "spanFlags"

LEGACY_TRACE_ID_NAME = "X-B3-TraceId"
LEGACY_SPAN_ID_NAME = "X-B3-SpanId"
LEGACY_PARENT_ID_NAME = "X-B3-ParentSpanId"
LEGACY_SAMPLED_NAME = "X-B3-Sampled"
LEGACY_FLAGS_NAME = "X-B3-Flags"

LEGACY_NAMES = (
    LEGACY_TRACE_ID_NAME,
    LEGACY_SPAN_ID_NAME,
    LEGACY_PARENT_ID_NAME,
    LEGACY_SAMPLED_NAME,
    LEGACY_FLAGS_NAME,
)

SAMPLED_TRUE = "1"
SAMPLED_FALSE = "0"
DEBUG_FLAG = "1"
