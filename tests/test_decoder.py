import pytest

from nvui.errors import MalformedEnvelope, MalformedOccurrence
from nvui.redraw.decoder import EventDecoder
from nvui.redraw.events import (
    CmdlineChunk,
    CmdlinePosEvent,
    CmdlineShowEvent,
    RedrawEvent,
    UnknownEvent,
)


def test_scenario_with_prompt_char() -> None:
    events = EventDecoder().decode(["cmdline_show", [[[0, "abc"]], 3, ":", "", 0, 0]])
    assert events == [
        CmdlineShowEvent(content=(CmdlineChunk(0, "abc"),), pos=3, firstc=":", prompt="", indent=0, level=0)
    ]


def test_scenario_without_prompt_char() -> None:
    events = EventDecoder().decode(["cmdline_show", [[[0, "abc"]], 3, None, "", 0, 0]])
    assert len(events) == 1
    assert isinstance(events[0], CmdlineShowEvent)
    assert events[0].firstc is None


def test_batched_occurrences_decode_in_order() -> None:
    events = EventDecoder().decode(
        [
            "cmdline_show",
            [[[0, "e"]], 1, ":", "", 0, 1],
            [[[0, "ec"]], 2, ":", "", 0, 1],
        ]
    )
    assert [event.pos for event in events if isinstance(event, CmdlineShowEvent)] == [1, 2]


def test_tag_without_occurrences_yields_nothing() -> None:
    assert EventDecoder().decode(["flush"]) == []


@pytest.mark.parametrize("element", [None, "cmdline_show", 3, [], [3, [1]], [None], {"cmdline_show": []}])
def test_bad_envelope_is_a_fault(element) -> None:
    with pytest.raises(MalformedEnvelope):
        EventDecoder().decode(element)


def test_unknown_tags_are_kept_as_raw_events() -> None:
    events = EventDecoder().decode(["grid_line", [1, 0, 0, [[" ", 0, 80]], False], [1, 1, 0, [["~"]], False]])
    assert events == [
        UnknownEvent(name="grid_line", args=[1, 0, 0, [[" ", 0, 80]], False]),
        UnknownEvent(name="grid_line", args=[1, 1, 0, [["~"]], False]),
    ]
    assert [event.kind for event in events] == ["grid_line", "grid_line"]


def test_occurrence_that_is_not_an_array_is_a_fault_even_for_unknown_tags() -> None:
    with pytest.raises(MalformedOccurrence) as exc_info:
        EventDecoder().decode(["grid_line", [1], "oops"])
    assert exc_info.value.kind == "grid_line"
    assert "occurrence 2" in exc_info.value.detail


def test_first_malformed_occurrence_aborts_the_whole_element() -> None:
    with pytest.raises(MalformedOccurrence) as exc_info:
        EventDecoder().decode(
            [
                "cmdline_show",
                [[[0, "ok"]], 2, ":", "", 0, 1],
                [[[0, "bad"]], 3, 7, "", 0, 1],
                [[[0, "never"]], 3, 8, "", 0, 1],
            ]
        )
    assert "firstc" in exc_info.value.detail


def test_decode_batch_is_all_or_nothing() -> None:
    decoder = EventDecoder()
    good = ["cmdline_pos", [1, 1]]
    assert decoder.decode_batch([good, ["cmdline_pos", [2, 1]]]) == [CmdlinePosEvent(1, 1), CmdlinePosEvent(2, 1)]
    with pytest.raises(MalformedEnvelope):
        decoder.decode_batch([good, "not an element"])


def test_custom_extractors_can_be_registered() -> None:
    class FlushEvent(RedrawEvent):
        kind = "flush"

    decoder = EventDecoder(extractors={})
    decoder.register("flush", lambda fields: FlushEvent())
    assert "flush" in decoder.kinds
    assert isinstance(decoder.decode(["flush", []])[0], FlushEvent)
    assert decoder.decode(["cmdline_pos", [1, 1]]) == [UnknownEvent(name="cmdline_pos", args=[1, 1])]
