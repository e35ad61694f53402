"""Command line interface for nvui."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import msgpack
import typer
from loguru import logger

from nvui import __version__
from nvui.app import run_session
from nvui.config import get_settings
from nvui.errors import DecodeFault, MessageDecodeError, NvuiError
from nvui.logging_utils import configure_logging
from nvui.redraw.dispatcher import REDRAW, NotificationDispatcher
from nvui.rpc.messages import Notification, parse_message
from nvui.rpc.values import map_from_pairs

app = typer.Typer(
    name="nvui",
    help="Attach to a Neovim instance and follow its command-line state.",
    add_completion=False,
)


@app.callback()
def main_callback() -> None:
    """nvui command line."""


@app.command()
def attach(
    nvim: str | None = typer.Option(None, "--nvim", help="Editor executable to embed"),
    server: str | None = typer.Option(None, "--server", "-s", help="host:port or socket of a running editor"),
    width: int | None = typer.Option(None, "--width", help="UI width in cells"),
    height: int | None = typer.Option(None, "--height", help="UI height in cells"),
    keys: str | None = typer.Option(None, "--keys", help="Keys to send after attaching"),
    quit_after: float | None = typer.Option(None, "--quit-after", help="Detach after this many seconds"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level"),
) -> None:
    """Attach as an external command-line UI and log what the editor shows."""

    settings = get_settings(
        nvim_bin=nvim,
        server=server,
        width=width,
        height=height,
        initial_keys=keys,
        quit_after=quit_after,
        log_level=log_level,
    )
    configure_logging(settings.log_level, profile=settings.log_profile)
    try:
        summary = asyncio.run(run_session(settings))
    except NvuiError as exc:
        logger.error("nvui.attach.error error={}", exc)
        raise typer.Exit(1) from exc
    if not summary.ok:
        raise typer.Exit(1)


def _load_redraw_args(path: Path, fmt: str) -> list[Any]:
    if fmt == "json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as exc:
            raise typer.BadParameter(f"not a JSON document: {exc}", param_hint="FILE") from exc
        if not isinstance(data, list):
            raise typer.BadParameter("expected a JSON array of redraw events", param_hint="FILE")
        return data
    try:
        raw = msgpack.unpackb(path.read_bytes(), raw=False, strict_map_key=False, object_pairs_hook=map_from_pairs)
        message = parse_message(raw)
    except (ValueError, TypeError, MessageDecodeError) as exc:
        raise typer.BadParameter(f"not a msgpack-RPC message: {exc}", param_hint="FILE") from exc
    if not isinstance(message, Notification) or message.method != REDRAW:
        raise typer.BadParameter("expected a redraw notification", param_hint="FILE")
    return message.args


@app.command()
def decode(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Recorded redraw notification"),  # noqa: B008
    fmt: str = typer.Option("json", "--format", "-f", help="json (argument list) or msgpack (whole message)"),
) -> None:
    """Decode a recorded redraw notification and print its events."""

    if fmt not in {"json", "msgpack"}:
        raise typer.BadParameter("format must be json or msgpack", param_hint="--format")
    args = _load_redraw_args(path, fmt)
    try:
        events = NotificationDispatcher().dispatch(REDRAW, args)
    except DecodeFault as exc:
        typer.echo(f"decode fault: {exc}", err=True)
        raise typer.Exit(1) from exc
    for event in events:
        typer.echo(repr(event))


@app.command()
def version() -> None:
    """Show the nvui version."""

    typer.echo(__version__)
