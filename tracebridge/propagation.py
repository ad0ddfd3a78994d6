"""Read and write trace headers on message carriers.

Every value is written under its current name and, when the field has one,
under its B3 name as well. The native header block is always kept in step
with the flat headers because some brokers (STOMP in particular) only
forward native headers.

Propagation is best effort: a failure to read or write a header is logged at
DEBUG and never raised, so tracing cannot break message delivery.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import (
    Any,
    Callable,
    Collection,
    Dict,
    Iterable,
    Mapping,
    MutableMapping,
    Optional,
    Protocol,
    TypeVar,
)

from tracebridge.aliases import LegacyAliasTable, default_alias_table
from tracebridge.carrier import Carrier
from tracebridge.constants import NATIVE_HEADERS


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Setter(Protocol):
    def put(self, carrier: Carrier, key: str, value: str) -> None: ...


class Getter(Protocol):
    def get(self, carrier: Carrier, key: str) -> Optional[str]: ...


def _attempt(event: str, key: str, step: Callable[[], T]) -> Optional[T]:
    try:
        return step()
    except Exception:  # noqa: BLE001
        logger.debug(event, extra={"header": key}, exc_info=True)
        return None


def _has_text(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def _as_text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")
    return str(value)


def _put_header(carrier: Carrier, key: str, value: str) -> None:
    carrier.set(key, value)
    store = carrier.native_store
    if store is not None:
        store.set(key, value)
        return

    native_headers = carrier.get(NATIVE_HEADERS)
    if native_headers is None:
        native_headers = {}
        carrier.set(NATIVE_HEADERS, native_headers)
    if isinstance(native_headers, MutableMapping):
        native_headers[key] = [value]


def _get_native(carrier: Carrier, key: str) -> Optional[str]:
    store = carrier.native_store
    if store is not None:
        result = store.first(key)
        if result is not None:
            return _as_text(result)
    else:
        native_headers = carrier.get(NATIVE_HEADERS)
        if isinstance(native_headers, Mapping):
            entries = native_headers.get(key)
            if isinstance(entries, (list, tuple)) and entries:
                return _as_text(entries[0])
    return None


def _get_flat(carrier: Carrier, key: str) -> Optional[str]:
    result = carrier.get(key)
    if result is None:
        return None
    return _as_text(result)


def _get_header(carrier: Carrier, key: str) -> Optional[str]:
    value = _attempt("propagation.header.read_failed", key, lambda: _get_native(carrier, key))
    if value is not None:
        return value
    return _attempt("propagation.header.read_failed", key, lambda: _get_flat(carrier, key))


def _remove_flat(carrier: Carrier, key: str) -> None:
    carrier.remove(key)


def _remove_native(carrier: Carrier, key: str) -> None:
    store = carrier.native_store
    if store is not None:
        store.remove(key)
        return
    native_headers = carrier.get(NATIVE_HEADERS)
    if isinstance(native_headers, MutableMapping):
        native_headers.pop(key, None)


class MessageHeaderPropagation:
    """Stateless setter/getter pair for trace headers on message carriers.

    Args:
        aliases: Table pairing each current header name with its B3 name.
            Defaults to the process-wide table built from configuration.
    """

    def __init__(self, aliases: Optional[LegacyAliasTable] = None):
        self.aliases = aliases if aliases is not None else default_alias_table()

    def put(self, carrier: Carrier, key: str, value: str) -> None:
        """Write ``value`` under ``key`` and under its legacy alias, if any.

        The legacy write is attempted even when the canonical one failed.
        """
        _attempt("propagation.header.write_failed", key, lambda: _put_header(carrier, key, value))
        legacy_key = self.aliases.legacy_for(key)
        if legacy_key is not None:
            _attempt(
                "propagation.header.write_failed",
                legacy_key,
                lambda: _put_header(carrier, legacy_key, value),
            )

    def get(self, carrier: Carrier, key: str) -> Optional[str]:
        """Return the value for ``key``, or ``None`` when it was not propagated.

        Native headers win over flat headers. A missing, blank or unreadable
        value falls back to the legacy alias of ``key``.
        """
        value = _get_header(carrier, key)
        if _has_text(value):
            return value

        legacy_key = self.aliases.legacy_for(key)
        if legacy_key is None:
            return None
        value = _get_header(carrier, legacy_key)
        if _has_text(value):
            return value
        return None

    def __repr__(self) -> str:
        return "MessageHeaderPropagation{}"


@lru_cache(maxsize=1)
def default_propagation() -> MessageHeaderPropagation:
    try:
        aliases = default_alias_table()
    except RuntimeError:
        logger.warning("propagation.config.invalid", exc_info=True)
        aliases = LegacyAliasTable()
    return MessageHeaderPropagation(aliases)


def write(carrier: Carrier, key: str, value: str) -> None:
    default_propagation().put(carrier, key, value)


def read(carrier: Carrier, key: str) -> Optional[str]:
    return default_propagation().get(carrier, key)


def remove_all(carrier: Carrier, keys: Iterable[str]) -> None:
    """Strip ``keys`` from the flat and native headers of ``carrier``.

    Legacy aliases are not looked up; pass them explicitly to purge them too.
    """
    for key in keys:
        _attempt("propagation.header.remove_failed", key, lambda: _remove_flat(carrier, key))
        _attempt("propagation.header.remove_failed", key, lambda: _remove_native(carrier, key))


def propagation_headers(headers: Mapping[str, Any], keys: Collection[str]) -> Dict[str, Any]:
    return {key: value for key, value in headers.items() if key in keys}
