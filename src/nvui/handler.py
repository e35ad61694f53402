"""Handlers for requests and notifications sent by the peer."""

from __future__ import annotations

from loguru import logger

from nvui.errors import DecodeFault, RequestNotHandled
from nvui.redraw.dispatcher import NotificationDispatcher
from nvui.rpc.values import Value


class Handler:
    """Receives requests and notifications from the peer.

    The default implementation rejects every request and ignores every
    notification.
    """

    async def handle_request(self, name: str, args: list[Value]) -> Value:
        raise RequestNotHandled(name)

    async def handle_notify(self, name: str, args: list[Value]) -> None:
        return None


class ClientHandler(Handler):
    """Answers ``ping`` and feeds notifications to the redraw dispatcher."""

    def __init__(self, dispatcher: NotificationDispatcher | None = None) -> None:
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.decode_faults = 0

    async def handle_request(self, name: str, args: list[Value]) -> Value:
        if name == "ping":
            return "pong"
        raise RequestNotHandled(name)

    async def handle_notify(self, name: str, args: list[Value]) -> None:
        try:
            events = self.dispatcher.dispatch(name, args)
        except DecodeFault as exc:
            self.decode_faults += 1
            logger.error("redraw.decode.fault notification={} error={}", name, exc)
            return
        if events:
            logger.debug("redraw.decoded notification={} events={}", name, len(events))
