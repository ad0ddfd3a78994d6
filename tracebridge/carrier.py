"""Header carriers the propagation layer reads from and writes to.

A carrier wraps the header mapping of one message. Every carrier offers flat
``get``/``set``/``remove`` access. Carriers for protocols that keep a second,
multi-value header block (STOMP frames, for instance) also expose it through
``native_store``; plain carriers return ``None`` there and may still hold an
opaque native mapping under the ``nativeHeaders`` header.
"""
from __future__ import annotations

from typing import Any, List, MutableMapping, Optional, Protocol

from tracebridge.constants import NATIVE_HEADERS


class NativeHeaderStore:
    """Multi-value view over the native header block of a message.

    The block itself lives inside the message headers under ``nativeHeaders``
    and is only created on the first write.
    """

    def __init__(self, headers: MutableMapping[str, Any]):
        self._headers = headers

    def _values(self, create: bool = False) -> Optional[MutableMapping[str, List[str]]]:
        values = self._headers.get(NATIVE_HEADERS)
        if values is None and create:
            values = {}
            self._headers[NATIVE_HEADERS] = values
        return values

    def get(self, key: str) -> Optional[List[str]]:
        values = self._values()
        if values is None:
            return None
        return values.get(key)

    def first(self, key: str) -> Optional[str]:
        entries = self.get(key)
        if not entries:
            return None
        return entries[0]

    def set(self, key: str, value: str) -> None:
        self._values(create=True)[key] = [value]

    def remove(self, key: str) -> None:
        values = self._values()
        if values is not None:
            values.pop(key, None)


class HeaderCarrier(Protocol):
    @property
    def native_store(self) -> Optional[NativeHeaderStore]: ...

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MessageHeaders:
    """Plain carrier over a flat, caller-owned header mapping."""

    def __init__(self, headers: Optional[MutableMapping[str, Any]] = None):
        self.headers = headers if headers is not None else {}

    @property
    def native_store(self) -> Optional[NativeHeaderStore]:
        return None

    def get(self, key: str) -> Any:
        return self.headers.get(key)

    def set(self, key: str, value: Any) -> None:
        self.headers[key] = value

    def remove(self, key: str) -> None:
        self.headers.pop(key, None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.headers!r})"


class NativeMessageHeaders(MessageHeaders):
    """Carrier whose native header block is first-class."""

    @property
    def native_store(self) -> NativeHeaderStore:
        return NativeHeaderStore(self.headers)


Carrier = HeaderCarrier
