"""Attach to an editor, follow its command-line state, and classify the ending."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from loguru import logger

from nvui.bus import EventHandler
from nvui.config import Settings
from nvui.errors import LoopError, RpcError
from nvui.handler import ClientHandler
from nvui.nvim import Nvim
from nvui.outcome import FaultReport, SessionOutcomeClassifier
from nvui.redraw.events import CmdlineShowEvent, RedrawEvent, UnknownEvent
from nvui.rpc.connect import Connection, open_child, open_server
from nvui.rpc.session import RpcSession


def log_event(event: RedrawEvent) -> None:
    """Default sink: one log line per decoded event."""

    if isinstance(event, CmdlineShowEvent):
        logger.info(
            "redraw.cmdline_show text={!r} pos={} firstc={!r} prompt={!r} indent={} level={}",
            event.text,
            event.pos,
            event.firstc,
            event.prompt,
            event.indent,
            event.level,
        )
    elif isinstance(event, UnknownEvent):
        logger.trace("redraw.{} args={}", event.name, len(event.args))
    else:
        logger.info("redraw.{} {}", event.kind, event)


async def connect(settings: Settings) -> Connection:
    if settings.server:
        return await open_server(settings.server)
    return await open_child(settings.argv)


async def _attach(nvim: Nvim, settings: Settings) -> bool:
    try:
        await nvim.ui_attach(settings.width, settings.height, settings.ui_options())
        logger.info("nvim.ui.attached width={} height={}", settings.width, settings.height)
        if settings.initial_keys:
            await nvim.input(settings.initial_keys)
    except (RpcError, LoopError, TimeoutError) as exc:
        logger.error("nvim.ui.attach.error error={}", exc)
        return False
    return True


@dataclass(frozen=True)
class SessionSummary:
    attached: bool
    report: FaultReport
    decode_faults: int = 0

    @property
    def ok(self) -> bool:
        return self.attached and not self.report.outcome.reportable


async def run_session(settings: Settings, *, sink: EventHandler = log_event) -> SessionSummary:
    """Run one attach session until the loop ends and report how it ended."""

    connection = await connect(settings)
    handler = ClientHandler()
    unsubscribe = handler.dispatcher.bus.subscribe(sink)
    session = RpcSession(
        connection.reader,
        connection.writer,
        handler,
        name=connection.name,
        request_timeout=settings.request_timeout,
    )
    nvim = Nvim(session)
    session.start()
    timer: asyncio.TimerHandle | None = None
    try:
        attached = await _attach(nvim, settings)
        if not attached:
            session.close()
        elif settings.quit_after is not None:
            timer = asyncio.get_running_loop().call_later(settings.quit_after, session.close)

        result = await session.join()
        classifier = SessionOutcomeClassifier()
        outcome = classifier.classify(result)
        report = await classifier.on_fault(outcome, nvim.err_writeln)
        if handler.decode_faults:
            logger.warning("redraw.decode.faults count={}", handler.decode_faults)
        return SessionSummary(attached=attached, report=report, decode_faults=handler.decode_faults)
    finally:
        if timer is not None:
            timer.cancel()
        unsubscribe()
        await connection.close()
