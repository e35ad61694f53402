"""msgpack-RPC message shapes."""

from __future__ import annotations

from typing import TypeAlias

from dataclasses import dataclass, field

import msgpack

from nvui.errors import MessageDecodeError
from nvui.rpc.values import Value, describe

REQUEST = 0
RESPONSE = 1
NOTIFICATION = 2


@dataclass(frozen=True)
class Request:
    msgid: int
    method: str
    args: list[Value] = field(default_factory=list)

    def encode(self) -> bytes:
        return msgpack.packb([REQUEST, self.msgid, self.method, self.args])


@dataclass(frozen=True)
class Response:
    msgid: int
    error: Value = None
    result: Value = None

    def encode(self) -> bytes:
        return msgpack.packb([RESPONSE, self.msgid, self.error, self.result])


@dataclass(frozen=True)
class Notification:
    method: str
    args: list[Value] = field(default_factory=list)

    def encode(self) -> bytes:
        return msgpack.packb([NOTIFICATION, self.method, self.args])


Message: TypeAlias = Request | Response | Notification


def _msgid(value: Value) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    raise MessageDecodeError(f"msgid must be a non-negative int, found {describe(value)}")


def _method(value: Value) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MessageDecodeError("method name is not valid utf-8") from exc
    raise MessageDecodeError(f"method name must be str, found {describe(value)}")


def _params(value: Value) -> list[Value]:
    if isinstance(value, (list, tuple)):
        return list(value)
    raise MessageDecodeError(f"params must be an array, found {describe(value)}")


def parse_message(raw: Value) -> Message:
    """Validate one unpacked value as a request, response or notification."""

    if not isinstance(raw, (list, tuple)) or not raw:
        raise MessageDecodeError(f"message must be a non-empty array, found {describe(raw)}")
    kind = raw[0]
    if isinstance(kind, bool):
        raise MessageDecodeError("message type must be an int, found bool")
    if kind == REQUEST and len(raw) == 4:
        return Request(msgid=_msgid(raw[1]), method=_method(raw[2]), args=_params(raw[3]))
    if kind == RESPONSE and len(raw) == 4:
        return Response(msgid=_msgid(raw[1]), error=raw[2], result=raw[3])
    if kind == NOTIFICATION and len(raw) == 3:
        return Notification(method=_method(raw[1]), args=_params(raw[2]))
    raise MessageDecodeError(f"unknown message type {describe(kind)} with {len(raw)} fields")
