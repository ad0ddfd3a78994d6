from __future__ import annotations

import logging
from typing import Dict, Optional

from tracebridge.carrier import Carrier
from tracebridge.constants import DEBUG_FLAG, SAMPLED_FALSE, SAMPLED_TRUE
from tracebridge.models import TraceContext
from tracebridge.propagation import MessageHeaderPropagation, default_propagation, remove_all


logger = logging.getLogger(__name__)

_TRUE_VALUES = {SAMPLED_TRUE, "true"}
_FALSE_VALUES = {SAMPLED_FALSE, "false"}


def _parse_sampled(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


def inject(
    context: TraceContext,
    carrier: Carrier,
    propagation: Optional[MessageHeaderPropagation] = None,
) -> None:
    propagation = propagation or default_propagation()
    fields = propagation.aliases.fields

    propagation.put(carrier, fields.trace_id, context.trace_id)
    propagation.put(carrier, fields.span_id, context.span_id)
    if context.parent_id:
        propagation.put(carrier, fields.parent_id, context.parent_id)
    if context.sampled is not None:
        propagation.put(carrier, fields.sampled, SAMPLED_TRUE if context.sampled else SAMPLED_FALSE)
    if context.debug:
        propagation.put(carrier, fields.flags, DEBUG_FLAG)

    logger.debug("trace.context.injected", extra=build_trace_context(context))


def extract(
    carrier: Carrier,
    propagation: Optional[MessageHeaderPropagation] = None,
) -> Optional[TraceContext]:
    """Rebuild the trace context carried by a message.

    Returns ``None`` when the trace or span id is missing, in which case the
    caller should start a new trace.
    """
    propagation = propagation or default_propagation()
    fields = propagation.aliases.fields

    trace_id = propagation.get(carrier, fields.trace_id)
    span_id = propagation.get(carrier, fields.span_id)
    if not trace_id or not span_id:
        logger.debug(
            "trace.context.missing",
            extra={"has_trace_id": bool(trace_id), "has_span_id": bool(span_id)},
        )
        return None

    debug = (propagation.get(carrier, fields.flags) or "").strip() == DEBUG_FLAG
    sampled = _parse_sampled(propagation.get(carrier, fields.sampled))
    if debug:
        sampled = True

    return TraceContext(
        trace_id=trace_id.strip(),
        span_id=span_id.strip(),
        parent_id=(propagation.get(carrier, fields.parent_id) or "").strip() or None,
        sampled=sampled,
        debug=debug,
    )


def reinject(
    context: TraceContext,
    carrier: Carrier,
    propagation: Optional[MessageHeaderPropagation] = None,
) -> None:
    propagation = propagation or default_propagation()
    remove_all(carrier, propagation.aliases.all_keys())
    inject(context, carrier, propagation)


def build_trace_context(context: Optional[TraceContext]) -> Dict[str, str]:
    if context is None:
        return {}
    trace_context = {
        "trace_id": context.trace_id,
        "span_id": context.span_id,
    }
    if context.parent_id:
        trace_context["parent_id"] = context.parent_id
    return trace_context
