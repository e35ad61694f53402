"""Decoding of ``redraw`` notifications."""

from nvui.redraw.decoder import EventDecoder
from nvui.redraw.dispatcher import REDRAW, NotificationDispatcher
from nvui.redraw.events import (
    CmdlineBlockAppendEvent,
    CmdlineBlockHideEvent,
    CmdlineBlockShowEvent,
    CmdlineChunk,
    CmdlineHideEvent,
    CmdlinePosEvent,
    CmdlineShowEvent,
    CmdlineSpecialCharEvent,
    RedrawEvent,
    UnknownEvent,
)

__all__ = [
    "REDRAW",
    "CmdlineBlockAppendEvent",
    "CmdlineBlockHideEvent",
    "CmdlineBlockShowEvent",
    "CmdlineChunk",
    "CmdlineHideEvent",
    "CmdlinePosEvent",
    "CmdlineShowEvent",
    "CmdlineSpecialCharEvent",
    "EventDecoder",
    "NotificationDispatcher",
    "RedrawEvent",
    "UnknownEvent",
]
