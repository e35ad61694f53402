import importlib
import json
from pathlib import Path

import msgpack
import pytest
from typer.testing import CliRunner

from nvui import __version__
from nvui.app import SessionSummary
from nvui.config import Settings
from nvui.errors import ChannelClosedError, ReaderError
from nvui.outcome import ChannelClosed, FaultReport, ReaderFault
from nvui.rpc.messages import Notification

cli_module = importlib.import_module("nvui.cli")

runner = CliRunner()


def test_decode_json_prints_events(tmp_path: Path) -> None:
    path = tmp_path / "redraw.json"
    path.write_text(
        json.dumps([["cmdline_show", [[[0, "abc"]], 3, None, "", 0, 0]], ["cmdline_pos", [3, 1]]]),
        encoding="utf-8",
    )

    result = runner.invoke(cli_module.app, ["decode", str(path)])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].startswith("CmdlineShowEvent(")
    assert "firstc=None" in lines[0]
    assert lines[1] == "CmdlinePosEvent(pos=3, level=1)"


def test_decode_msgpack_notification(tmp_path: Path) -> None:
    path = tmp_path / "redraw.msgpack"
    path.write_bytes(Notification("redraw", [["cmdline_hide", [1]]]).encode())

    result = runner.invoke(cli_module.app, ["decode", "--format", "msgpack", str(path)])

    assert result.exit_code == 0
    assert result.output.strip() == "CmdlineHideEvent(level=1, abort=False)"


def test_decode_rejects_non_redraw_messages(tmp_path: Path) -> None:
    path = tmp_path / "other.msgpack"
    path.write_bytes(msgpack.packb([2, "nvim_buf_lines_event", []]))

    result = runner.invoke(cli_module.app, ["decode", "-f", "msgpack", str(path)])

    assert result.exit_code == 2


def test_decode_fault_exits_non_zero(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([["cmdline_show", [[[0, "abc"]], 3, 5, "", 0, 0]]]), encoding="utf-8")

    result = runner.invoke(cli_module.app, ["decode", str(path)])

    assert result.exit_code == 1
    assert "field 2 (firstc)" in result.output


def test_version() -> None:
    result = runner.invoke(cli_module.app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


@pytest.mark.parametrize(
    ("outcome", "exit_code"),
    [
        (ChannelClosed(error=ChannelClosedError("eof")), 0),
        (ReaderFault(error=ReaderError("broken")), 1),
    ],
)
def test_attach_exit_code_follows_the_outcome(monkeypatch: pytest.MonkeyPatch, outcome, exit_code: int) -> None:
    seen: dict[str, Settings] = {}

    async def _fake_run_session(settings: Settings) -> SessionSummary:
        seen["settings"] = settings
        return SessionSummary(attached=True, report=FaultReport(outcome=outcome))

    monkeypatch.setattr(cli_module, "run_session", _fake_run_session)
    monkeypatch.setattr(cli_module, "configure_logging", lambda *args, **kwargs: None)

    result = runner.invoke(cli_module.app, ["attach", "--server", "127.0.0.1:6666", "--width", "120", "--keys", "/"])

    assert result.exit_code == exit_code
    assert seen["settings"].server == "127.0.0.1:6666"
    assert seen["settings"].width == 120
    assert seen["settings"].initial_keys == "/"


def test_decode_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('[["cmdline_pos", [1, 1]', encoding="utf-8")

    result = runner.invoke(cli_module.app, ["decode", str(path)])

    assert result.exit_code == 2
    assert "not a JSON document" in result.output
