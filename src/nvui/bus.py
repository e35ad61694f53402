"""Signal-based fan-out of decoded redraw events."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from blinker import Signal

from nvui.redraw.events import RedrawEvent

EventHandler = Callable[[RedrawEvent], None]


class EventBus:
    """In-process bus backed by a blinker signal.

    Handlers run synchronously in subscription order, so events reach every
    sink in the order they were decoded.
    """

    def __init__(self) -> None:
        self._redraw = Signal("nvui.redraw")

    def publish(self, event: RedrawEvent) -> None:
        self._redraw.send(self, event=event)

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        def _receiver(sender: Any, *, event: RedrawEvent) -> None:
            handler(event)

        self._redraw.connect(_receiver, weak=False)
        return lambda: self._redraw.disconnect(_receiver)

    @property
    def has_subscribers(self) -> bool:
        return bool(self._redraw.receivers)
