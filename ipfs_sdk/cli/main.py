"""
ipfs_sdk.cli.main
=================

`ipfs-sdk`: a small command-line front end over :class:`ipfs_sdk.IpfsClient`.

Examples
--------
    $ ipfs-sdk --api http://127.0.0.1:5001 version
    $ ipfs-sdk id
    $ ipfs-sdk cat /ipfs/QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ
    $ ipfs-sdk block stat QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ
    $ ipfs-sdk pubsub sub my-topic --count 3

Configuration
-------------
- API URL      : `--api` or env `IPFS_API_URL` / `IpfsHttpApi` (default: http://localhost:5001)
- HTTP Timeout : `--timeout` or env `IPFS_TIMEOUT` seconds (default: 60)
"""

from __future__ import annotations

import sys
from typing import Optional

import typer

from ..errors import IpfsSdkError
from ..version import __version__ as SDK_VERSION
from . import blocks, common, network, pubsub

app = typer.Typer(
    name="ipfs-sdk",
    help="IPFS SDK CLI: talk to a running IPFS daemon over its HTTP API.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]


@app.callback()
def _root(
    ctx: typer.Context,
    api: Optional[str] = typer.Option(None, "--api", help="Daemon API URL.", envvar="IPFS_API_URL"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="HTTP timeout in seconds.", envvar="IPFS_TIMEOUT"),
) -> None:
    """Resolve the effective API URL and timeout for this process."""
    ctx.obj = common.settings(api, timeout)


@app.command("version")
def version(
    ctx: typer.Context,
    daemon: bool = typer.Option(False, "--daemon", help="Also ask the daemon for its version."),
) -> None:
    """Print the SDK version (and optionally the daemon's)."""
    typer.echo(f"ipfs-sdk {SDK_VERSION}")
    if daemon:
        common.print_json(common.run(common.client_for(ctx).version()))


@app.command("id")
def id_(
    ctx: typer.Context,
    peer: Optional[str] = typer.Argument(None, help="Peer id (default: this node)."),
) -> None:
    """Show identity and addresses of this node or of a peer."""
    info = common.run(common.client_for(ctx).id(peer))
    common.print_json(
        {
            "ID": info.id,
            "PublicKey": info.public_key,
            "Addresses": [str(a) for a in info.addresses],
            "AgentVersion": info.agent_version,
            "ProtocolVersion": info.protocol_version,
        }
    )


@app.command("cat")
def cat(ctx: typer.Context, path: str = typer.Argument(..., help="/ipfs/<cid>[/...] path")) -> None:
    """Write the content at PATH to stdout."""

    async def _cat() -> bytes:
        stream = await common.client_for(ctx).filesystem.read_file(path)
        return await stream.aread()

    typer.echo(common.run(_cat()), nl=False)


@app.command("ls")
def ls(ctx: typer.Context, path: str = typer.Argument(..., help="/ipfs/<cid> path")) -> None:
    """List the links of a unix-fs directory."""
    node = common.run(common.client_for(ctx).filesystem.list_file(path))
    for link in node.links:
        kind = "dir" if link.is_directory else "file"
        typer.echo(f"{link.id} {link.size} {kind} {link.name}")


app.add_typer(blocks.block_app, name="block", help="Raw blocks")
app.add_typer(blocks.object_app, name="object", help="Merkle-DAG objects")
app.add_typer(blocks.pin_app, name="pin", help="Pinning")
app.add_typer(network.bootstrap_app, name="bootstrap", help="Bootstrap (trusted) peers")
app.add_typer(network.swarm_app, name="swarm", help="Swarm connections")
app.add_typer(network.name_app, name="name", help="IPNS names")
app.add_typer(pubsub.app, name="pubsub", help="Publish/subscribe")


def main(argv: Optional[list[str]] = None) -> int:
    """
    Run the CLI. Returns an integer exit code.
    """
    try:
        app(prog_name="ipfs-sdk", standalone_mode=False, args=argv)
        return 0
    except typer.Exit as e:
        return int(e.exit_code)
    except IpfsSdkError as e:
        typer.echo(f"error: {e}", err=True)
        return 1


def run(argv: Optional[list[str]] = None) -> int:
    """Alias for :func:`main`."""
    return main(argv)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
