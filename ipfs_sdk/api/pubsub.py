"""
Publish/subscribe (``pubsub/*``).

`subscribe` opens the ``pubsub/sub`` stream, starts a listener task on the
running loop and returns a `Subscription` right away. The listener reads one
NDJSON record per line and hands each `PublishedMessage` to the handler (a
plain function or a coroutine function) on the listener task.

Listener rules:

- ``{}`` lines (sent by old daemons when the subscription opens) are skipped.
- A handler that raises is logged at WARNING; the next message is still
  delivered.
- Setting the cancel event (or calling `Subscription.cancel`) cancels the
  listener task and closes the stream. This is a normal exit, not an error.
- Any other failure (unparsable record, broken connection) is logged and
  ends the listener. Nothing is re-raised and the topic is not re-subscribed.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..rpc.http import ResponseStream
from ..types.core import Peer
from ..types.pubsub import PublishedMessage
from ..utils.aio import signal_event
from .base import ApiNamespace, Cancel

log = logging.getLogger(__name__)

MessageHandler = Callable[[PublishedMessage], Union[None, Awaitable[None]]]


class Subscription:
    """Handle on a running listener."""

    def __init__(self, topic: str, task: "asyncio.Task[None]", cancel: asyncio.Event, loop: asyncio.AbstractEventLoop) -> None:
        self.topic = topic
        self._task = task
        self._cancel = cancel
        self._loop = loop

    @property
    def done(self) -> bool:
        return self._task.done()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Stop listening. Safe to call from any thread, and more than once."""
        signal_event(self._cancel, self._loop)

    async def wait(self) -> None:
        """Wait until the listener has exited (stream ended, cancelled or failed)."""
        await asyncio.wait({self._task})

    def __repr__(self) -> str:
        state = "done" if self.done else "listening"
        return f"Subscription(topic={self.topic!r}, {state})"


async def _cancel_when_set(cancel: asyncio.Event, task: "asyncio.Task[Any]") -> None:
    await cancel.wait()
    task.cancel()


class PubSubApi(ApiNamespace):
    async def subscribed_topics(self, *, cancel: Cancel = None) -> List[str]:
        obj = await self._json("pubsub/ls", cancel=cancel)
        return [str(s) for s in obj.get("Strings") or []]

    async def peers(self, topic: Optional[str] = None, *, cancel: Cancel = None) -> List[Peer]:
        obj = await self._json("pubsub/peers", topic, cancel=cancel)
        return [Peer(id=str(s)) for s in obj.get("Strings") or []]

    async def publish(self, topic: str, message: str, *, cancel: Cancel = None) -> None:
        await self.http.do_command("pubsub/pub", [topic, message], cancel=cancel)

    async def subscribe(self, topic: str, handler: MessageHandler, cancel: Cancel = None) -> Subscription:
        cancel = cancel if cancel is not None else asyncio.Event()
        stream = await self.http.post_download("pubsub/sub", topic, cancel=cancel)
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._listen(topic, handler, stream, cancel), name=f"pubsub-{topic}")
        return Subscription(topic, task, cancel, loop)

    async def _listen(self, topic: str, handler: MessageHandler, stream: ResponseStream, cancel: asyncio.Event) -> None:
        log.debug("start listening for %r messages", topic)
        watcher = asyncio.create_task(_cancel_when_set(cancel, asyncio.current_task()))
        try:
            async for line in stream.aiter_lines():
                if cancel.is_set():
                    break
                log.debug("pubsub message %s", line)
                if line == "{}":
                    continue
                message = PublishedMessage.from_json(line)
                try:
                    result = handler(message)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    log.warning("pubsub handler for %r raised", topic, exc_info=True)
        except asyncio.CancelledError:
            if not cancel.is_set():
                raise
        except Exception:
            if not cancel.is_set():
                log.exception("pubsub listener for %r failed", topic)
        finally:
            watcher.cancel()
            await stream.aclose()
            log.debug("stop listening for %r messages", topic)


__all__ = ["PubSubApi", "Subscription", "MessageHandler"]
