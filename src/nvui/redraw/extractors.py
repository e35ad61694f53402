"""Per-kind extractors turning one occurrence into a typed redraw event."""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Callable, Sequence

from nvui.errors import ConversionError, MalformedOccurrence
from nvui.redraw.events import (
    CmdlineBlockAppendEvent,
    CmdlineBlockHideEvent,
    CmdlineBlockShowEvent,
    CmdlineChunk,
    CmdlineContent,
    CmdlineHideEvent,
    CmdlinePosEvent,
    CmdlineShowEvent,
    CmdlineSpecialCharEvent,
    RedrawEvent,
)
from nvui.rpc.values import (
    Value,
    as_array,
    as_bool,
    as_int,
    as_optional_str,
    as_str,
    field_at,
    optional_field_at,
)

Extractor: TypeAlias = Callable[[Sequence[Value]], RedrawEvent]


def _label(index: int, name: str) -> str:
    return f"field {index} ({name})"


def _content(value: Value, field: str) -> CmdlineContent:
    chunks: list[CmdlineChunk] = []
    for i, raw in enumerate(as_array(value, field)):
        label = f"{field} chunk {i}"
        # Newer peers append a highlight id to each chunk; only the first two cells are read.
        cells = as_array(raw, label)
        if len(cells) < 2:
            raise ConversionError(label, "[attr, text]", f"array of {len(cells)}")
        chunks.append(
            CmdlineChunk(
                attr_id=as_int(cells[0], f"{label} attr"),
                text=as_str(cells[1], f"{label} text"),
            )
        )
    return tuple(chunks)


def extract_cmdline_show(fields: Sequence[Value]) -> CmdlineShowEvent:
    """Decode ``[content, pos, firstc, prompt, indent, level]``.

    ``firstc`` is nil when no prompt character is active, which is distinct from
    an empty string. Any other type there is a fault.
    """

    try:
        content = _content(field_at(fields, 0, "content"), _label(0, "content"))
        pos = as_int(field_at(fields, 1, "pos"), _label(1, "pos"))
        firstc = as_optional_str(optional_field_at(fields, 2), _label(2, "firstc"))
        prompt = as_str(field_at(fields, 3, "prompt"), _label(3, "prompt"))
        indent = as_int(field_at(fields, 4, "indent"), _label(4, "indent"))
        if indent < 0:
            raise ConversionError(_label(4, "indent"), "int >= 0", f"int {indent}")
        level = as_int(field_at(fields, 5, "level"), _label(5, "level"))
    except ConversionError as exc:
        raise MalformedOccurrence(CmdlineShowEvent.kind, str(exc)) from exc
    return CmdlineShowEvent(
        content=content,
        pos=pos,
        firstc=firstc,
        prompt=prompt,
        indent=indent,
        level=level,
    )


def extract_cmdline_pos(fields: Sequence[Value]) -> CmdlinePosEvent:
    try:
        return CmdlinePosEvent(
            pos=as_int(field_at(fields, 0, "pos"), _label(0, "pos")),
            level=as_int(field_at(fields, 1, "level"), _label(1, "level")),
        )
    except ConversionError as exc:
        raise MalformedOccurrence(CmdlinePosEvent.kind, str(exc)) from exc


def extract_cmdline_special_char(fields: Sequence[Value]) -> CmdlineSpecialCharEvent:
    try:
        return CmdlineSpecialCharEvent(
            char=as_str(field_at(fields, 0, "c"), _label(0, "c")),
            shift=as_bool(field_at(fields, 1, "shift"), _label(1, "shift")),
            level=as_int(field_at(fields, 2, "level"), _label(2, "level")),
        )
    except ConversionError as exc:
        raise MalformedOccurrence(CmdlineSpecialCharEvent.kind, str(exc)) from exc


def extract_cmdline_hide(fields: Sequence[Value]) -> CmdlineHideEvent:
    # Older peers send no fields, newer ones send level and then abort.
    try:
        level = optional_field_at(fields, 0)
        abort = optional_field_at(fields, 1)
        return CmdlineHideEvent(
            level=None if level is None else as_int(level, _label(0, "level")),
            abort=False if abort is None else as_bool(abort, _label(1, "abort")),
        )
    except ConversionError as exc:
        raise MalformedOccurrence(CmdlineHideEvent.kind, str(exc)) from exc


def extract_cmdline_block_show(fields: Sequence[Value]) -> CmdlineBlockShowEvent:
    try:
        label = _label(0, "lines")
        lines = as_array(field_at(fields, 0, "lines"), label)
        return CmdlineBlockShowEvent(
            lines=tuple(_content(line, f"{label} line {i}") for i, line in enumerate(lines)),
        )
    except ConversionError as exc:
        raise MalformedOccurrence(CmdlineBlockShowEvent.kind, str(exc)) from exc


def extract_cmdline_block_append(fields: Sequence[Value]) -> CmdlineBlockAppendEvent:
    try:
        return CmdlineBlockAppendEvent(line=_content(field_at(fields, 0, "line"), _label(0, "line")))
    except ConversionError as exc:
        raise MalformedOccurrence(CmdlineBlockAppendEvent.kind, str(exc)) from exc


def extract_cmdline_block_hide(fields: Sequence[Value]) -> CmdlineBlockHideEvent:
    _ = fields
    return CmdlineBlockHideEvent()


DEFAULT_EXTRACTORS: dict[str, Extractor] = {
    CmdlineShowEvent.kind: extract_cmdline_show,
    CmdlinePosEvent.kind: extract_cmdline_pos,
    CmdlineSpecialCharEvent.kind: extract_cmdline_special_char,
    CmdlineHideEvent.kind: extract_cmdline_hide,
    CmdlineBlockShowEvent.kind: extract_cmdline_block_show,
    CmdlineBlockAppendEvent.kind: extract_cmdline_block_append,
    CmdlineBlockHideEvent.kind: extract_cmdline_block_hide,
}
