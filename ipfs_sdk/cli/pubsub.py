"""
ipfs_sdk.cli.pubsub
===================

- `ls`   : topics this node is subscribed to
- `pub`  : publish one message
- `sub`  : print messages as they arrive, one JSON object per line, until
           `--count` messages were seen or the process is interrupted
"""

from __future__ import annotations

import asyncio

import typer

from ..types.pubsub import PublishedMessage
from . import common

app = typer.Typer(no_args_is_help=True)
__all__ = ["app"]


def _message_json(msg: PublishedMessage) -> dict:
    return {
        "from": msg.sender.id,
        "seqno": msg.sequence_number.hex(),
        "data": msg.data_bytes.decode("utf-8", errors="replace"),
        "topics": list(msg.topics),
    }


@app.command("ls")
def ls(ctx: typer.Context) -> None:
    for topic in common.run(common.client_for(ctx).pubsub.subscribed_topics()):
        typer.echo(topic)


@app.command("pub")
def pub(ctx: typer.Context, topic: str, message: str) -> None:
    common.run(common.client_for(ctx).pubsub.publish(topic, message))


@app.command("sub")
def sub(
    ctx: typer.Context,
    topic: str,
    count: int = typer.Option(0, "--count", "-n", help="Stop after this many messages (0 = forever)."),
) -> None:
    client = common.client_for(ctx)

    async def _listen() -> None:
        stop = asyncio.Event()
        seen = 0

        def handler(msg: PublishedMessage) -> None:
            nonlocal seen
            common.print_json(_message_json(msg), compact=True)
            seen += 1
            if count and seen >= count:
                stop.set()

        subscription = await client.pubsub.subscribe(topic, handler, stop)
        await subscription.wait()

    try:
        common.run(_listen())
    except KeyboardInterrupt:
        typer.echo("bye")
