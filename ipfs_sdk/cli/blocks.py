"""`block`, `object` and `pin` command groups."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from . import common

block_app = typer.Typer(no_args_is_help=True)
object_app = typer.Typer(no_args_is_help=True)
pin_app = typer.Typer(no_args_is_help=True)

__all__ = ["block_app", "object_app", "pin_app"]


# --- block -------------------------------------------------------------------


@block_app.command("get")
def block_get(ctx: typer.Context, cid: str) -> None:
    """Write the raw block to stdout."""
    block = common.run(common.client_for(ctx).block.get(cid))
    typer.echo(block.data_bytes, nl=False)


@block_app.command("put")
def block_put(
    ctx: typer.Context,
    file: Optional[Path] = typer.Argument(None, help="File to store (default: stdin)."),
    fmt: str = typer.Option("dag-pb", "--format", "-f", help="Content type (multicodec) of the block."),
    mhtype: str = typer.Option("sha2-256", "--mhtype", help="Multihash algorithm."),
    pin: bool = typer.Option(False, "--pin", help="Pin the block after storing it."),
) -> None:
    """Store a block and print its CID."""
    data = file.read_bytes() if file is not None else sys.stdin.buffer.read()
    cid = common.run(common.client_for(ctx).block.put(data, content_type=fmt, multi_hash=mhtype, pin=pin))
    typer.echo(str(cid))


@block_app.command("stat")
def block_stat(ctx: typer.Context, cid: str) -> None:
    block = common.run(common.client_for(ctx).block.stat(cid))
    common.print_json({"Key": str(block.id), "Size": block.size})


@block_app.command("rm")
def block_rm(
    ctx: typer.Context,
    cid: str,
    force: bool = typer.Option(False, "--force", help="Ignore blocks that do not exist."),
) -> None:
    removed = common.run(common.client_for(ctx).block.remove(cid, ignore_nonexistent=force))
    typer.echo(f"removed {removed}" if removed is not None else "nothing removed")


# --- object ------------------------------------------------------------------


@object_app.command("get")
def object_get(ctx: typer.Context, cid: str) -> None:
    node = common.run(common.client_for(ctx).object.get(cid))
    common.print_json(
        {
            "Hash": str(node.id),
            "Data": node.data_bytes.decode("utf-8", errors="replace"),
            "Links": [link.to_json() for link in node.links],
        }
    )


@object_app.command("stat")
def object_stat(ctx: typer.Context, cid: str) -> None:
    common.print_json(common.run(common.client_for(ctx).object.stat(cid)).to_dict())


@object_app.command("links")
def object_links(ctx: typer.Context, cid: str) -> None:
    for link in common.run(common.client_for(ctx).object.links(cid)):
        typer.echo(f"{link.id} {link.size} {link.name}")


# --- pin ---------------------------------------------------------------------


@pin_app.command("add")
def pin_add(
    ctx: typer.Context,
    path: str,
    recursive: bool = typer.Option(True, "--recursive/--direct", help="Pin everything below PATH too."),
) -> None:
    for cid in common.run(common.client_for(ctx).pin.add(path, recursive=recursive)):
        typer.echo(f"pinned {cid}")


@pin_app.command("ls")
def pin_ls(ctx: typer.Context) -> None:
    for cid in common.run(common.client_for(ctx).pin.list()):
        typer.echo(str(cid))


@pin_app.command("rm")
def pin_rm(
    ctx: typer.Context,
    cid: str,
    recursive: bool = typer.Option(True, "--recursive/--direct"),
) -> None:
    for removed in common.run(common.client_for(ctx).pin.remove(cid, recursive=recursive)):
        typer.echo(f"unpinned {removed}")
