"""Async msgpack-RPC session over a pair of byte streams."""

from __future__ import annotations

import asyncio
from typing import Protocol

import msgpack
from loguru import logger

from nvui.errors import (
    ChannelClosedError,
    LoopError,
    MessageDecodeError,
    ReaderError,
    RequestNotHandled,
    RpcError,
    UnknownResponseError,
    WriterError,
)
from nvui.handler import Handler
from nvui.outcome import LoopResult
from nvui.rpc.messages import Notification, Request, Response, parse_message
from nvui.rpc.values import Value, map_from_pairs

READ_CHUNK_SIZE = 64 * 1024
MAX_ABANDONED = 1024
DEFAULT_REQUEST_TIMEOUT = 30.0


class ByteReader(Protocol):
    async def read(self, n: int = -1) -> bytes: ...


class ByteWriter(Protocol):
    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...

    def close(self) -> None: ...


def new_unpacker() -> msgpack.Unpacker:
    return msgpack.Unpacker(raw=False, strict_map_key=False, object_pairs_hook=map_from_pairs)


def _feed(unpacker: msgpack.Unpacker, chunk: bytes) -> None:
    try:
        unpacker.feed(chunk)
    except msgpack.BufferFull as exc:
        raise MessageDecodeError("message exceeds the read buffer") from exc


def _unpack_available(unpacker: msgpack.Unpacker) -> list[Value]:
    messages: list[Value] = []
    while True:
        try:
            messages.append(unpacker.unpack())
        except msgpack.OutOfData:
            return messages
        except (ValueError, TypeError) as exc:
            raise MessageDecodeError(f"invalid msgpack data: {exc}") from exc


class RpcSession:
    """One msgpack-RPC channel to the peer.

    ``run`` is the read loop: it resolves responses to our requests, hands
    notifications to the handler one at a time in arrival order, and serves
    peer requests in their own tasks. It only ends by raising a ``LoopError``,
    except after a local ``close``, where reaching end of stream is a clean
    exit. All writes go through one lock.
    """

    def __init__(
        self,
        reader: ByteReader,
        writer: ByteWriter,
        handler: Handler,
        *,
        name: str = "nvim",
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._handler = handler
        self._request_timeout = request_timeout
        self._write_lock = asyncio.Lock()
        self._next_msgid = 0
        self._pending: dict[int, tuple[str, asyncio.Future[Value]]] = {}
        self._abandoned: dict[int, None] = {}
        self._request_tasks: set[asyncio.Task[None]] = set()
        self._task: asyncio.Task[None] | None = None
        self._fault: LoopError | None = None
        self._closing = False
        self._stopped = False
        self._log = logger.bind(peer=name)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def request(self, method: str, *args: Value) -> Value:
        """Call ``method`` on the peer and wait for its result."""

        if self._stopped:
            raise ChannelClosedError(f"cannot call {method}: channel is closed")
        msgid = self._next_msgid
        self._next_msgid += 1
        future: asyncio.Future[Value] = asyncio.get_running_loop().create_future()
        self._pending[msgid] = (method, future)
        try:
            await self._send(Request(msgid=msgid, method=method, args=list(args)).encode())
            return await asyncio.wait_for(future, timeout=self._request_timeout)
        except TimeoutError:
            self._abandon(msgid)
            self._log.warning("rpc.request.timeout method={} msgid={}", method, msgid)
            raise
        except asyncio.CancelledError:
            self._abandon(msgid)
            raise
        finally:
            self._pending.pop(msgid, None)

    async def notify(self, method: str, *args: Value) -> None:
        """Send a notification; only the write itself can fail."""

        await self._send(Notification(method=method, args=list(args)).encode())

    async def run(self) -> None:
        unpacker = new_unpacker()
        self._log.debug("rpc.loop.start")
        try:
            while True:
                try:
                    chunk = await self._reader.read(READ_CHUNK_SIZE)
                except OSError as exc:
                    raise ReaderError(f"failed to read from peer: {exc}") from exc
                if not chunk:
                    if self._fault is not None:
                        raise self._fault
                    if self._closing:
                        self._log.debug("rpc.loop.stopped")
                        return
                    raise ChannelClosedError("peer closed the channel")
                _feed(unpacker, chunk)
                for raw in _unpack_available(unpacker):
                    await self._handle(parse_message(raw))
        except LoopError as exc:
            self._log.debug("rpc.loop.end error={}", exc)
            self._fail_pending(exc)
            raise
        finally:
            self._stopped = True
            self._fail_pending(ChannelClosedError("communication loop stopped"))

    def start(self) -> asyncio.Task[None]:
        """Run the read loop in the background, once."""

        if self._task is None:
            self._task = asyncio.create_task(self.run(), name="nvui-rpc-loop")
        return self._task

    async def join(self) -> LoopResult:
        """Wait for the read loop to finish and return how it ended."""

        task = self.start()
        await asyncio.wait({task})
        return LoopResult.from_task(task)

    def close(self) -> None:
        """Shut down locally; the loop exits cleanly once the stream ends."""

        if self._closing:
            return
        self._closing = True
        for task in list(self._request_tasks):
            task.cancel()
        self._writer.close()

    async def _send(self, data: bytes) -> None:
        async with self._write_lock:
            try:
                self._writer.write(data)
                await self._writer.drain()
            except OSError as exc:
                raise WriterError(f"failed to write to peer: {exc}") from exc

    async def _handle(self, message: Request | Response | Notification) -> None:
        if isinstance(message, Response):
            self._resolve(message)
        elif isinstance(message, Notification):
            await self._handler.handle_notify(message.method, message.args)
        else:
            task = asyncio.create_task(self._serve(message))
            self._request_tasks.add(task)
            task.add_done_callback(self._request_tasks.discard)

    def _resolve(self, response: Response) -> None:
        entry = self._pending.pop(response.msgid, None)
        if entry is None:
            if response.msgid in self._abandoned:
                del self._abandoned[response.msgid]
                self._log.warning("rpc.response.late msgid={}", response.msgid)
                return
            raise UnknownResponseError(response.msgid)
        method, future = entry
        if future.done():
            return
        if response.error is not None:
            future.set_exception(RpcError(method, response.error))
        else:
            future.set_result(response.result)

    async def _serve(self, request: Request) -> None:
        try:
            result = await self._handler.handle_request(request.method, request.args)
            response = Response(msgid=request.msgid, result=result)
        except RequestNotHandled as exc:
            self._log.warning("rpc.request.unhandled method={}", request.method)
            response = Response(msgid=request.msgid, error=[0, str(exc)])
        except Exception as exc:
            self._log.exception("rpc.request.error method={}", request.method)
            response = Response(msgid=request.msgid, error=[0, f"{type(exc).__name__}: {exc}"])
        try:
            await self._send(response.encode())
        except WriterError as exc:
            self._abort(exc)

    def _abort(self, error: LoopError) -> None:
        if self._fault is None:
            self._fault = error
        self._log.error("rpc.loop.abort error={}", error)
        self._writer.close()

    def _abandon(self, msgid: int) -> None:
        self._abandoned[msgid] = None
        while len(self._abandoned) > MAX_ABANDONED:
            del self._abandoned[next(iter(self._abandoned))]

    def _fail_pending(self, error: LoopError) -> None:
        self._abandoned.clear()
        pending = list(self._pending.values())
        self._pending.clear()
        for _, future in pending:
            if not future.done():
                future.set_exception(error)
