"""Typed wrappers for the editor API calls the client uses."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from nvui.rpc.session import RpcSession
from nvui.rpc.values import Value


@dataclass
class UiAttachOptions:
    """Options map for ``nvim_ui_attach``; only enabled extensions are sent."""

    rgb: bool = True
    ext_linegrid: bool = False
    ext_multigrid: bool = False
    ext_cmdline: bool = False
    ext_popupmenu: bool = False
    ext_tabline: bool = False
    ext_wildmenu: bool = False
    ext_messages: bool = False
    ext_hlstate: bool = False
    ext_termcolors: bool = False

    def to_dict(self) -> dict[str, Value]:
        options: dict[str, Value] = {"rgb": self.rgb}
        for key, enabled in asdict(self).items():
            if key.startswith("ext_") and enabled:
                options[key] = True
        return options


class Nvim:
    def __init__(self, session: RpcSession) -> None:
        self.session = session

    async def ui_attach(self, width: int, height: int, options: UiAttachOptions) -> None:
        await self.session.request("nvim_ui_attach", width, height, options.to_dict())

    async def ui_detach(self) -> None:
        await self.session.request("nvim_ui_detach")

    async def ui_try_resize(self, width: int, height: int) -> None:
        await self.session.request("nvim_ui_try_resize", width, height)

    async def input(self, keys: str) -> int:
        """Queue raw keys; returns the number of bytes the editor accepted."""
        written = await self.session.request("nvim_input", keys)
        return written if isinstance(written, int) else 0

    async def command(self, command: str) -> None:
        await self.session.request("nvim_command", command)

    async def err_writeln(self, message: str) -> None:
        """Show ``message`` as an error in the editor.

        Sent as a notification: it needs only the write half of the channel, so
        it can still be delivered after the read loop has ended.
        """
        await self.session.notify("nvim_err_writeln", message)
