"""nvui - follow Neovim's command line from an external UI."""

from .errors import DecodeFault, LoopError, MalformedEnvelope, MalformedOccurrence, NvuiError
from .redraw import CmdlineShowEvent, EventDecoder, NotificationDispatcher, RedrawEvent

__version__ = "0.1.0"

__all__ = [
    "CmdlineShowEvent",
    "DecodeFault",
    "EventDecoder",
    "LoopError",
    "MalformedEnvelope",
    "MalformedOccurrence",
    "NotificationDispatcher",
    "NvuiError",
    "RedrawEvent",
]
