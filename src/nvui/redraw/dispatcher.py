"""Route named notifications to the redraw decoder."""

from __future__ import annotations

from collections.abc import Sequence

from nvui.bus import EventBus
from nvui.redraw.decoder import EventDecoder
from nvui.redraw.events import RedrawEvent
from nvui.rpc.values import Value

REDRAW = "redraw"


class NotificationDispatcher:
    """Decode ``redraw`` notifications and publish their events.

    Other notification names are ignored. A decode fault propagates to the
    caller and no event of that notification is published.
    """

    def __init__(self, bus: EventBus | None = None, decoder: EventDecoder | None = None) -> None:
        self.bus = bus or EventBus()
        self.decoder = decoder or EventDecoder()

    def dispatch(self, name: str, args: Sequence[Value]) -> list[RedrawEvent]:
        if name != REDRAW:
            return []
        events = self.decoder.decode_batch(args)
        for event in events:
            self.bus.publish(event)
        return events
