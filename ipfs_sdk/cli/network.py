"""`bootstrap`, `swarm` and `name` command groups."""

from __future__ import annotations

from typing import Optional

import typer

from . import common

bootstrap_app = typer.Typer(no_args_is_help=True)
swarm_app = typer.Typer(no_args_is_help=True)
name_app = typer.Typer(no_args_is_help=True)

__all__ = ["bootstrap_app", "swarm_app", "name_app"]


@bootstrap_app.command("list")
def bootstrap_list(ctx: typer.Context) -> None:
    for addr in common.run(common.client_for(ctx).bootstrap.list()):
        typer.echo(str(addr))


@bootstrap_app.command("add")
def bootstrap_add(
    ctx: typer.Context,
    address: Optional[str] = typer.Argument(None, help="Multiaddress of the peer."),
    default: bool = typer.Option(False, "--default", help="Restore the built-in bootstrap list."),
) -> None:
    client = common.client_for(ctx)
    if default:
        added = common.run(client.bootstrap.add_defaults())
    elif address:
        added = [a for a in [common.run(client.bootstrap.add(address))] if a is not None]
    else:
        raise typer.BadParameter("Provide ADDRESS or --default")
    for addr in added:
        typer.echo(f"added {addr}")


@bootstrap_app.command("rm")
def bootstrap_rm(
    ctx: typer.Context,
    address: Optional[str] = typer.Argument(None, help="Multiaddress of the peer."),
    all_: bool = typer.Option(False, "--all", help="Remove every bootstrap peer."),
) -> None:
    client = common.client_for(ctx)
    if all_:
        common.run(client.bootstrap.remove_all())
        typer.echo("removed all")
    elif address:
        removed = common.run(client.bootstrap.remove(address))
        typer.echo(f"removed {removed}" if removed is not None else "nothing removed")
    else:
        raise typer.BadParameter("Provide ADDRESS or --all")


@swarm_app.command("peers")
def swarm_peers(ctx: typer.Context) -> None:
    for peer in common.run(common.client_for(ctx).swarm.peers()):
        latency_ms = peer.latency.total_seconds() * 1000 if peer.latency is not None else 0.0
        typer.echo(f"{peer.connected_address} {latency_ms:.3f}ms")


@name_app.command("resolve")
def name_resolve(
    ctx: typer.Context,
    name: str,
    recursive: bool = typer.Option(False, "--recursive", "-r"),
    nocache: bool = typer.Option(False, "--nocache"),
) -> None:
    typer.echo(common.run(common.client_for(ctx).name.resolve(name, recursive=recursive, nocache=nocache)))
