"""Decode redraw batches into typed events."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from nvui.errors import ConversionError, MalformedEnvelope, MalformedOccurrence
from nvui.redraw.events import RedrawEvent, UnknownEvent
from nvui.redraw.extractors import DEFAULT_EXTRACTORS, Extractor
from nvui.rpc.values import Value, as_array, describe


class EventDecoder:
    """Turn the elements of a ``redraw`` notification into redraw events.

    Each element is ``[kind, occurrence, occurrence, ...]``. Occurrences of kinds
    with a registered extractor become typed events, all others are kept as
    ``UnknownEvent``. The first malformed occurrence aborts the whole batch.
    """

    def __init__(self, extractors: Mapping[str, Extractor] | None = None) -> None:
        self._extractors: dict[str, Extractor] = dict(DEFAULT_EXTRACTORS if extractors is None else extractors)

    def register(self, kind: str, extractor: Extractor) -> None:
        self._extractors[kind] = extractor

    @property
    def kinds(self) -> frozenset[str]:
        return frozenset(self._extractors)

    def decode(self, event: Value) -> list[RedrawEvent]:
        if not isinstance(event, (list, tuple)) or not event:
            raise MalformedEnvelope(f"redraw element must be a non-empty array, found {describe(event)}")
        kind = event[0]
        if not isinstance(kind, str):
            raise MalformedEnvelope(f"redraw element tag must be str, found {describe(kind)}")

        extractor = self._extractors.get(kind)
        decoded: list[RedrawEvent] = []
        for index, raw in enumerate(event[1:], start=1):
            try:
                fields = as_array(raw, f"occurrence {index}")
            except ConversionError as exc:
                raise MalformedOccurrence(kind, str(exc)) from exc
            if extractor is None:
                decoded.append(UnknownEvent(name=kind, args=fields))
            else:
                decoded.append(extractor(fields))
        return decoded

    def decode_batch(self, args: Sequence[Value]) -> list[RedrawEvent]:
        """Decode every element of one notification, or none of them."""

        decoded: list[RedrawEvent] = []
        for event in args:
            decoded.extend(self.decode(event))
        return decoded
