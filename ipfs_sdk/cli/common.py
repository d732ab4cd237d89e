"""Shared state for the CLI command modules: effective settings and helpers."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Coroutine, Optional, TypeVar

import typer

from ..client import IpfsClient
from ..config import ClientConfig

T = TypeVar("T")


@dataclass
class Ctx:
    api: str
    timeout: float


def make_client(ctx: typer.Context) -> IpfsClient:
    c: Ctx = ctx.obj
    return IpfsClient(c.api, timeout=c.timeout)


def client_for(ctx: typer.Context) -> IpfsClient:
    """Walk up to the root context (sub-apps get their own) and build a client."""
    root = ctx.find_root()
    return make_client(root)


def settings(api: Optional[str], timeout: Optional[float]) -> Ctx:
    cfg = ClientConfig.with_overrides(None, api_url=api, request_timeout=timeout)
    return Ctx(api=cfg.api_url, timeout=cfg.request_timeout)


def run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


def print_json(obj: Any, compact: bool = False) -> None:
    if compact:
        typer.echo(json.dumps(obj, separators=(",", ":"), ensure_ascii=False, default=str))
    else:
        typer.echo(json.dumps(obj, indent=2, ensure_ascii=False, default=str))


__all__ = ["Ctx", "make_client", "client_for", "settings", "run", "print_json"]
