"""Open byte streams to an editor process or a listening server."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from nvui.errors import ConfigurationError, ConnectError

PROCESS_EXIT_TIMEOUT = 5.0


@dataclass
class Connection:
    """Reader/writer pair plus the child process that owns them, if any."""

    reader: asyncio.StreamReader
    writer: asyncio.StreamWriter
    name: str
    process: asyncio.subprocess.Process | None = None

    async def close(self) -> None:
        if not self.writer.is_closing():
            self.writer.close()
        if self.process is None:
            return
        try:
            await asyncio.wait_for(self.process.wait(), timeout=PROCESS_EXIT_TIMEOUT)
        except TimeoutError:
            logger.warning("connect.child.kill pid={}", self.process.pid)
            self.process.kill()
            await self.process.wait()


async def open_child(argv: Sequence[str], *, env: Mapping[str, str] | None = None) -> Connection:
    """Spawn an embedded editor and talk to it over its stdio."""

    if not argv:
        raise ConfigurationError("empty command line for the editor process")
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            env={**os.environ, **(env or {})},
        )
    except OSError as exc:
        raise ConnectError(f"cannot start {argv[0]}: {exc}") from exc
    if process.stdin is None or process.stdout is None:
        process.kill()
        raise ConnectError(f"cannot start {argv[0]}: no stdio pipes")
    logger.info("connect.child.started pid={} argv={}", process.pid, list(argv))
    return Connection(reader=process.stdout, writer=process.stdin, name=argv[0], process=process)


async def open_tcp(host: str, port: int) -> Connection:
    try:
        reader, writer = await asyncio.open_connection(host, port)
    except OSError as exc:
        raise ConnectError(f"cannot connect to {host}:{port}: {exc}") from exc
    logger.info("connect.tcp host={} port={}", host, port)
    return Connection(reader=reader, writer=writer, name=f"{host}:{port}")


async def open_socket(path: str | Path) -> Connection:
    try:
        reader, writer = await asyncio.open_unix_connection(str(path))
    except OSError as exc:
        raise ConnectError(f"cannot connect to {path}: {exc}") from exc
    logger.info("connect.socket path={}", path)
    return Connection(reader=reader, writer=writer, name=str(path))


def parse_address(address: str) -> tuple[str, int] | Path:
    """Split ``host:port`` into a TCP address; anything else is a socket path."""

    address = address.strip()
    if not address:
        raise ConfigurationError("empty server address")
    if os.sep in address or address.startswith("."):
        return Path(address)
    host, sep, port = address.rpartition(":")
    if not sep:
        return Path(address)
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ConfigurationError(f"invalid port in server address: {address}")
    return (host.strip("[]") or "127.0.0.1", int(port))


async def open_server(address: str) -> Connection:
    target = parse_address(address)
    if isinstance(target, Path):
        return await open_socket(target)
    host, port = target
    return await open_tcp(host, port)
