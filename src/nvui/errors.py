"""Application-level exception types for nvui."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


class NvuiError(Exception):
    """Base exception for nvui."""


class ConfigurationError(NvuiError):
    """Raised when settings cannot be turned into a working session."""


class ConversionError(NvuiError):
    """Raised when a wire value does not have the expected type."""

    def __init__(self, field: str, expected: str, found: str) -> None:
        super().__init__(f"{field}: expected {expected}, found {found}")
        self.field = field
        self.expected = expected
        self.found = found


class DecodeFault(NvuiError):
    """Base exception for redraw decoding errors."""


class MalformedEnvelope(DecodeFault):
    """Raised when a redraw element is not a str-tagged array."""


class MalformedOccurrence(DecodeFault):
    """Raised when one occurrence does not match the layout of its kind."""

    def __init__(self, kind: str, detail: str) -> None:
        super().__init__(f"malformed {kind} occurrence: {detail}")
        self.kind = kind
        self.detail = detail


class ConnectError(NvuiError):
    """Raised when the peer process or socket cannot be reached."""


class RpcError(NvuiError):
    """Raised when the peer answers a request with an error value."""

    def __init__(self, method: str, error: Any) -> None:
        super().__init__(f"{method} failed: {_error_message(error)}")
        self.method = method
        self.error = error


class RequestNotHandled(NvuiError):
    """Raised by handlers for request names they do not serve."""

    def __init__(self, name: str) -> None:
        super().__init__(f"request not handled: {name}")
        self.name = name


class LoopError(NvuiError):
    """Base exception for faults that terminate the communication loop."""

    def is_reader_error(self) -> bool:
        return False

    def is_channel_closed(self) -> bool:
        return False


class ReaderError(LoopError):
    """Raised when the inbound half of the channel fails."""

    def is_reader_error(self) -> bool:
        return True


class ChannelClosedError(ReaderError):
    """Raised when the peer closes the channel."""

    def is_channel_closed(self) -> bool:
        return True


class MessageDecodeError(ReaderError):
    """Raised when the inbound stream is not a valid msgpack-RPC message."""


class UnknownResponseError(ReaderError):
    """Raised for a response whose msgid matches no pending request."""

    def __init__(self, msgid: int) -> None:
        super().__init__(f"no pending request for msgid {msgid}")
        self.msgid = msgid


class WriterError(LoopError):
    """Raised when writing to the peer fails."""


class DiagnosticWriteError(NvuiError):
    """Raised when the best-effort diagnostic write to the peer fails."""


def iter_causes(error: BaseException) -> Iterator[BaseException]:
    """Yield the chain of exceptions that caused ``error``, nearest first."""

    seen = {id(error)}
    current: BaseException | None = error
    while current is not None:
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__context__ is not None and not current.__suppress_context__:
            current = current.__context__
        else:
            return
        if id(current) in seen:
            return
        seen.add(id(current))
        yield current


def _error_message(error: Any) -> str:
    # Nvim sends [error_type, message]
    if isinstance(error, (list, tuple)) and len(error) == 2 and isinstance(error[1], str):
        return error[1]
    return repr(error)
