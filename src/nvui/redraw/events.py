"""Typed redraw event records."""

from __future__ import annotations


from dataclasses import dataclass, field
from typing import ClassVar, TypeAlias

from nvui.rpc.values import Value


@dataclass(frozen=True)
class CmdlineChunk:
    """One highlighted piece of command-line text."""

    attr_id: int
    text: str

    def as_args(self) -> list[Value]:
        return [self.attr_id, self.text]


CmdlineContent: TypeAlias = tuple[CmdlineChunk, ...]


def content_text(content: CmdlineContent) -> str:
    return "".join(chunk.text for chunk in content)


@dataclass(frozen=True)
class RedrawEvent:
    """Base class for all decoded redraw events."""

    kind: ClassVar[str] = ""


@dataclass(frozen=True)
class CmdlineShowEvent(RedrawEvent):
    """The command-line was shown or its content changed."""

    kind: ClassVar[str] = "cmdline_show"

    content: CmdlineContent
    pos: int
    firstc: str | None
    prompt: str
    indent: int
    level: int

    @property
    def text(self) -> str:
        return content_text(self.content)

    def as_args(self) -> list[Value]:
        """Encode back into the positional layout of one occurrence."""
        return [
            [chunk.as_args() for chunk in self.content],
            self.pos,
            self.firstc,
            self.prompt,
            self.indent,
            self.level,
        ]


@dataclass(frozen=True)
class CmdlinePosEvent(RedrawEvent):
    kind: ClassVar[str] = "cmdline_pos"

    pos: int
    level: int


@dataclass(frozen=True)
class CmdlineSpecialCharEvent(RedrawEvent):
    """A special character is displayed at the cursor, e.g. after ``<C-v>``."""

    kind: ClassVar[str] = "cmdline_special_char"

    char: str
    shift: bool
    level: int


@dataclass(frozen=True)
class CmdlineHideEvent(RedrawEvent):
    kind: ClassVar[str] = "cmdline_hide"

    level: int | None = None
    abort: bool = False


@dataclass(frozen=True)
class CmdlineBlockShowEvent(RedrawEvent):
    kind: ClassVar[str] = "cmdline_block_show"

    lines: tuple[CmdlineContent, ...]


@dataclass(frozen=True)
class CmdlineBlockAppendEvent(RedrawEvent):
    kind: ClassVar[str] = "cmdline_block_append"

    line: CmdlineContent


@dataclass(frozen=True)
class CmdlineBlockHideEvent(RedrawEvent):
    kind: ClassVar[str] = "cmdline_block_hide"


@dataclass(frozen=True)
class UnknownEvent(RedrawEvent):
    """An occurrence of an event kind that is not modeled, kept as raw values."""

    name: str
    args: list[Value] = field(default_factory=list)

    @property
    def kind(self) -> str:  # type: ignore[override]
        return self.name
