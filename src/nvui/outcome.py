"""Classification of how the communication loop ended."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import ClassVar

from loguru import logger

from nvui.errors import DiagnosticWriteError, LoopError, iter_causes

Predicate = Callable[[LoopError], bool]
PeerNotifier = Callable[[str], Awaitable[object]]


@dataclass(frozen=True)
class LoopResult:
    """Terminal result of the background loop task.

    ``join_error`` is set when the task itself did not finish normally (it was
    cancelled or crashed with something other than a loop fault). Otherwise
    ``error`` holds the loop fault, or ``None`` for a clean exit.
    """

    error: LoopError | None = None
    join_error: BaseException | None = None

    @classmethod
    def from_task(cls, task: asyncio.Task[None]) -> LoopResult:
        if not task.done():
            raise RuntimeError("communication loop is still running")
        if task.cancelled():
            return cls(join_error=asyncio.CancelledError("communication loop was cancelled"))
        exc = task.exception()
        if exc is None:
            return cls()
        if isinstance(exc, LoopError):
            return cls(error=exc)
        return cls(join_error=exc)


@dataclass(frozen=True)
class SessionOutcome:
    reportable: ClassVar[bool] = False

    def report_lines(self) -> list[str]:
        return []


@dataclass(frozen=True)
class Clean(SessionOutcome):
    """The loop exited without a fault."""


@dataclass(frozen=True)
class ChannelClosed(SessionOutcome):
    """The peer closed the channel; a normal shutdown."""

    error: LoopError


@dataclass(frozen=True)
class JoinFault(SessionOutcome):
    """The loop task could not be joined."""

    reportable: ClassVar[bool] = True

    cause: BaseException

    def report_lines(self) -> list[str]:
        return [f"Error joining IO loop: '{self.cause}'"]


@dataclass(frozen=True)
class _ChainedFault(SessionOutcome):
    reportable: ClassVar[bool] = True

    error: LoopError
    chain: tuple[BaseException, ...] = ()

    def report_lines(self) -> list[str]:
        return [f"Error: '{self.error}'", *(f"Caused by: '{cause}'" for cause in self.chain)]


@dataclass(frozen=True)
class ReaderFault(_ChainedFault):
    """The read half failed; the peer is not contacted."""


@dataclass(frozen=True)
class WriterFault(_ChainedFault):
    """The loop failed outside the read half; one diagnostic write is attempted."""


@dataclass
class FaultReport:
    outcome: SessionOutcome
    lines: list[str] = field(default_factory=list)
    diagnostic_attempted: bool = False
    diagnostic_error: DiagnosticWriteError | None = None


def _is_reader_error(error: LoopError) -> bool:
    return error.is_reader_error()


def _is_channel_closed(error: LoopError) -> bool:
    return error.is_channel_closed()


class SessionOutcomeClassifier:
    """Decide what a finished communication loop means and act on it once."""

    def __init__(
        self,
        is_reader_fault: Predicate = _is_reader_error,
        is_channel_closed: Predicate = _is_channel_closed,
    ) -> None:
        self._is_reader_fault = is_reader_fault
        self._is_channel_closed = is_channel_closed

    def classify(self, result: LoopResult) -> SessionOutcome:
        if result.join_error is not None:
            return JoinFault(cause=result.join_error)
        error = result.error
        if error is None:
            return Clean()
        if self._is_channel_closed(error):
            return ChannelClosed(error=error)
        chain = tuple(iter_causes(error))
        if self._is_reader_fault(error):
            return ReaderFault(error=error, chain=chain)
        return WriterFault(error=error, chain=chain)

    async def on_fault(self, outcome: SessionOutcome, notify_peer: PeerNotifier) -> FaultReport:
        """Report ``outcome`` and, for writer faults, tell the peer once.

        The diagnostic write is never retried: if it fails, the failure is
        reported alongside the fault and the session is given up.
        """

        report = FaultReport(outcome=outcome)
        if isinstance(outcome, WriterFault):
            report.diagnostic_attempted = True
            try:
                await notify_peer(f"Error: '{outcome.error}'")
            except Exception as exc:
                error = DiagnosticWriteError(f"could not report the error to the peer: {exc}")
                error.__cause__ = exc
                report.diagnostic_error = error
                report.lines.append(f"Giving up on the peer: '{exc}'")
        report.lines.extend(outcome.report_lines())
        for line in report.lines:
            logger.error("session.outcome {}", line)
        if not report.lines:
            logger.info("session.outcome {}", type(outcome).__name__)
        return report
