"""
Async helpers shared by the API namespaces and the lazy DAG shells.

- `run_sync(coro)`     : blocking adapter; runs `coro` on one background event
                         loop thread and waits for the result. The thread and
                         its loop are created on first use, under a lock.
- `with_cancel(aw, ev)`: await `aw` unless the `asyncio.Event` fires first, in
                         which case `aw` is abandoned and CancelledError raised.
- `SyncReader`         : `io.RawIOBase` view over an async byte iterator, pulled
                         through `run_sync` chunk by chunk.

The blocking adapter is safe to call from any thread (including from inside
another running event loop, which it blocks) except the background loop
thread itself.
"""

from __future__ import annotations

import asyncio
import io
import threading
from typing import Any, AsyncIterator, Awaitable, Callable, Coroutine, Optional, TypeVar

T = TypeVar("T")

__all__ = ["run_sync", "with_cancel", "signal_event", "SyncReader"]

_lock = threading.Lock()
_loop: Optional[asyncio.AbstractEventLoop] = None
_thread: Optional[threading.Thread] = None


def _background_loop() -> asyncio.AbstractEventLoop:
    global _loop, _thread
    if _loop is None:
        with _lock:
            if _loop is None:
                loop = asyncio.new_event_loop()
                thread = threading.Thread(
                    target=loop.run_forever, name="ipfs-sdk-loop", daemon=True
                )
                thread.start()
                _thread = thread
                _loop = loop
    return _loop


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Block the calling thread until `coro` has completed on the SDK loop."""
    loop = _background_loop()
    if threading.current_thread() is _thread:
        coro.close()
        raise RuntimeError("blocking SDK call made from the SDK event loop thread")
    return asyncio.run_coroutine_threadsafe(coro, loop).result()


async def with_cancel(aw: Awaitable[T], cancel: Optional[asyncio.Event]) -> T:
    if cancel is None:
        return await aw
    task = asyncio.ensure_future(aw)
    if cancel.is_set():
        task.cancel()
        raise asyncio.CancelledError("operation cancelled")
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()
    if task.done():
        return task.result()
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    raise asyncio.CancelledError("operation cancelled")


def signal_event(event: asyncio.Event, loop: Optional[asyncio.AbstractEventLoop]) -> None:
    """Set `event` from any thread; `loop` is the loop its waiters run on."""
    if loop is None or loop.is_closed():
        event.set()
        return
    try:
        running = asyncio.get_running_loop()
    except RuntimeError:
        running = None
    if running is loop:
        event.set()
    else:
        loop.call_soon_threadsafe(event.set)


class SyncReader(io.RawIOBase):
    """Readable binary stream over an async iterator of byte chunks."""

    def __init__(
        self,
        chunks: AsyncIterator[bytes],
        closer: Optional[Callable[[], Coroutine[Any, Any, None]]] = None,
    ) -> None:
        super().__init__()
        self._chunks = chunks
        self._closer = closer
        self._pending = b""
        self._eof = False

    def readable(self) -> bool:
        return True

    async def _next_chunk(self) -> bytes:
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            return b""

    def readinto(self, buffer: Any) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        while not self._pending and not self._eof:
            chunk = run_sync(self._next_chunk())
            if chunk:
                self._pending = chunk
            else:
                self._eof = True
        if not self._pending:
            return 0
        n = min(len(buffer), len(self._pending))
        buffer[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if not self.closed and self._closer is not None:
            closer, self._closer = self._closer, None
            if threading.current_thread() is _thread and _loop is not None:
                # finalizer running on the loop thread; cannot block here
                _loop.create_task(closer())
            else:
                run_sync(closer())
        super().close()
