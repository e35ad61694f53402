import pytest

from nvui.errors import MalformedOccurrence
from nvui.redraw.events import (
    CmdlineBlockAppendEvent,
    CmdlineBlockHideEvent,
    CmdlineBlockShowEvent,
    CmdlineChunk,
    CmdlineHideEvent,
    CmdlinePosEvent,
    CmdlineShowEvent,
    CmdlineSpecialCharEvent,
)
from nvui.redraw.extractors import (
    extract_cmdline_block_append,
    extract_cmdline_block_hide,
    extract_cmdline_block_show,
    extract_cmdline_hide,
    extract_cmdline_pos,
    extract_cmdline_show,
    extract_cmdline_special_char,
)


def _show_fields(firstc=":"):
    return [[[0, "abc"]], 3, firstc, "", 0, 0]


@pytest.mark.parametrize("firstc", [":", "/", "?", "=", ""])
def test_string_firstc_is_kept(firstc: str) -> None:
    event = extract_cmdline_show(_show_fields(firstc))
    assert event.firstc == firstc


def test_nil_firstc_is_none_not_a_fault() -> None:
    event = extract_cmdline_show(_show_fields(None))
    assert event.firstc is None
    assert event.firstc != ""


@pytest.mark.parametrize("firstc", [5, True, 1.5, b":", [":"], {"c": ":"}])
def test_non_string_non_nil_firstc_is_a_fault(firstc) -> None:
    with pytest.raises(MalformedOccurrence) as exc_info:
        extract_cmdline_show(_show_fields(firstc))
    assert exc_info.value.kind == "cmdline_show"
    assert exc_info.value.detail.startswith("field 2 (firstc): expected str or nil")


def test_cmdline_show_scenario() -> None:
    event = extract_cmdline_show([[[0, "abc"]], 3, ":", "", 0, 0])
    assert event == CmdlineShowEvent(
        content=(CmdlineChunk(0, "abc"),),
        pos=3,
        firstc=":",
        prompt="",
        indent=0,
        level=0,
    )
    assert event.text == "abc"


def test_content_order_is_preserved() -> None:
    event = extract_cmdline_show([[[1, "ec"], [2, "ho"], [0, " 1"]], 7, ":", "", 0, 1])
    assert [chunk.attr_id for chunk in event.content] == [1, 2, 0]
    assert event.text == "echo 1"


def test_reencoded_event_decodes_to_an_equal_event() -> None:
    original = CmdlineShowEvent(
        content=(CmdlineChunk(3, "let x"), CmdlineChunk(0, " = "), CmdlineChunk(7, "1")),
        pos=9,
        firstc=None,
        prompt="Value: ",
        indent=2,
        level=2,
    )
    assert extract_cmdline_show(original.as_args()) == original


def test_extra_chunk_cells_and_trailing_fields_are_ignored() -> None:
    event = extract_cmdline_show([[[0, "abc", 42]], 3, ":", "", 0, 0, 17])
    assert event.content == (CmdlineChunk(0, "abc"),)


@pytest.mark.parametrize(
    ("fields", "detail"),
    [
        (["abc", 3, ":", "", 0, 0], "field 0 (content): expected array"),
        ([[[0]], 3, ":", "", 0, 0], "field 0 (content) chunk 0: expected [attr, text]"),
        ([[["0", "abc"]], 3, ":", "", 0, 0], "field 0 (content) chunk 0 attr: expected int"),
        ([[[0, 1]], 3, ":", "", 0, 0], "field 0 (content) chunk 0 text: expected str"),
        ([[[0, "abc"]], "3", ":", "", 0, 0], "field 1 (pos): expected int"),
        ([[[0, "abc"]], 3, ":", None, 0, 0], "field 3 (prompt): expected str, found nil"),
        ([[[0, "abc"]], 3, ":", "", -1, 0], "field 4 (indent): expected int >= 0"),
        ([[[0, "abc"]], 3, ":", "", 0, False], "field 5 (level): expected int, found bool"),
        ([[[0, "abc"]], 3, ":", "", 0], "field 5 (level): expected a value, found end of occurrence"),
    ],
)
def test_malformed_fields_name_the_field(fields, detail: str) -> None:
    with pytest.raises(MalformedOccurrence) as exc_info:
        extract_cmdline_show(fields)
    assert exc_info.value.kind == "cmdline_show"
    assert exc_info.value.detail.startswith(detail)


def test_first_bad_field_is_reported() -> None:
    with pytest.raises(MalformedOccurrence) as exc_info:
        extract_cmdline_show([[[0, "abc"]], "3", 5, "", 0, 0])
    assert "field 1 (pos)" in exc_info.value.detail


def test_cmdline_pos_and_special_char() -> None:
    assert extract_cmdline_pos([4, 1]) == CmdlinePosEvent(pos=4, level=1)
    assert extract_cmdline_special_char(["^", True, 1]) == CmdlineSpecialCharEvent(char="^", shift=True, level=1)
    with pytest.raises(MalformedOccurrence) as exc_info:
        extract_cmdline_special_char(["^", 1, 1])
    assert exc_info.value.kind == "cmdline_special_char"


@pytest.mark.parametrize(
    ("fields", "expected"),
    [
        ([], CmdlineHideEvent(level=None, abort=False)),
        ([1], CmdlineHideEvent(level=1, abort=False)),
        ([2, True], CmdlineHideEvent(level=2, abort=True)),
    ],
)
def test_cmdline_hide_accepts_old_and_new_layouts(fields, expected: CmdlineHideEvent) -> None:
    assert extract_cmdline_hide(fields) == expected


def test_cmdline_hide_rejects_wrong_types() -> None:
    with pytest.raises(MalformedOccurrence, match="abort"):
        extract_cmdline_hide([1, "yes"])


def test_cmdline_block_events() -> None:
    shown = extract_cmdline_block_show([[[[0, "function F()"]], [[0, "  return 1"]]]])
    assert shown == CmdlineBlockShowEvent(
        lines=((CmdlineChunk(0, "function F()"),), (CmdlineChunk(0, "  return 1"),)),
    )
    assert extract_cmdline_block_append([[[0, "endfunction"]]]) == CmdlineBlockAppendEvent(
        line=(CmdlineChunk(0, "endfunction"),)
    )
    assert extract_cmdline_block_hide([]) == CmdlineBlockHideEvent()
    with pytest.raises(MalformedOccurrence, match="line 1"):
        extract_cmdline_block_show([[[[0, "ok"]], "bad"]])
