import pytest

from tracebridge.aliases import LegacyAliasTable
from tracebridge.carrier import MessageHeaders, NativeMessageHeaders
from tracebridge.models import TraceContext
from tracebridge.propagation import MessageHeaderPropagation
from tracebridge.trace import build_trace_context, extract, inject, reinject


@pytest.fixture
def propagation():
    return MessageHeaderPropagation(LegacyAliasTable())


def test_inject_writes_every_field(propagation):
    carrier = NativeMessageHeaders()
    context = TraceContext(
        trace_id="463ac35c9f6413ad",
        span_id="a2fb4a1d1a96d312",
        parent_id="0020000000000001",
        sampled=True,
        debug=True,
    )

    inject(context, carrier, propagation)

    assert carrier.headers["spanTraceId"] == "463ac35c9f6413ad"
    assert carrier.headers["X-B3-TraceId"] == "463ac35c9f6413ad"
    assert carrier.headers["spanParentSpanId"] == "0020000000000001"
    assert carrier.native_store.first("X-B3-SpanId") == "a2fb4a1d1a96d312"
    assert carrier.native_store.first("spanSampled") == "1"
    assert carrier.headers["X-B3-Flags"] == "1"


def test_inject_skips_absent_fields(propagation):
    carrier = MessageHeaders()

    inject(TraceContext(trace_id="abc", span_id="def"), carrier, propagation)

    assert "spanParentSpanId" not in carrier.headers
    assert "X-B3-Sampled" not in carrier.headers
    assert "spanFlags" not in carrier.headers


def test_inject_writes_unsampled_decision(propagation):
    carrier = MessageHeaders()

    inject(TraceContext(trace_id="abc", span_id="def", sampled=False), carrier, propagation)

    assert carrier.headers["spanSampled"] == "0"
    assert carrier.headers["X-B3-Sampled"] == "0"


def test_extract_reads_injected_context(propagation):
    carrier = MessageHeaders()
    context = TraceContext(trace_id="abc", span_id="def", parent_id="ghi", sampled=False)
    inject(context, carrier, propagation)

    assert extract(carrier, propagation) == context


def test_extract_reads_legacy_only_producer(propagation):
    carrier = MessageHeaders(
        {
            "X-B3-TraceId": "abc",
            "X-B3-SpanId": "def",
            "X-B3-Sampled": "true",
        }
    )

    context = extract(carrier, propagation)

    assert context == TraceContext(trace_id="abc", span_id="def", sampled=True)


def test_extract_without_span_id_starts_new_trace(propagation):
    carrier = MessageHeaders({"spanTraceId": "abc"})

    assert extract(carrier, propagation) is None


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("TRUE", True), ("0", False), ("false", False), ("maybe", None)],
)
def test_extract_parses_sampled_flag(propagation, raw, expected):
    carrier = MessageHeaders({"spanTraceId": "abc", "spanId": "def", "spanSampled": raw})

    assert extract(carrier, propagation).sampled is expected


def test_extract_debug_implies_sampled(propagation):
    carrier = MessageHeaders({"spanTraceId": "abc", "spanId": "def", "X-B3-Flags": "1"})

    context = extract(carrier, propagation)

    assert context.debug is True
    assert context.sampled is True


def test_reinject_drops_stale_headers(propagation):
    carrier = MessageHeaders()
    inject(
        TraceContext(trace_id="old", span_id="old-span", parent_id="old-parent", debug=True),
        carrier,
        propagation,
    )

    reinject(TraceContext(trace_id="new", span_id="new-span"), carrier, propagation)

    assert extract(carrier, propagation) == TraceContext(trace_id="new", span_id="new-span")
    assert "X-B3-ParentSpanId" not in carrier.headers
    assert "spanFlags" not in carrier.headers["nativeHeaders"]


def test_build_trace_context():
    assert build_trace_context(None) == {}
    assert build_trace_context(TraceContext(trace_id="abc", span_id="def")) == {
        "trace_id": "abc",
        "span_id": "def",
    }
    assert build_trace_context(TraceContext(trace_id="abc", span_id="def", parent_id="ghi"))[
        "parent_id"
    ] == "ghi"
