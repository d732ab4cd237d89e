"""
`TrustedPeerCollection`: the daemon's bootstrap list as a collection.

The list is fetched with ``bootstrap/list`` the first time it is needed and
then served from a local cache. Every mutating call issues exactly one remote
command and drops the cache, so the next read fetches again.

Async methods are the primary API; `len()`, ``in`` and iteration are blocking
conveniences built on them (see :func:`ipfs_sdk.utils.aio.run_sync`).
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Iterator, List, MutableSequence, Optional, Tuple

from multiaddr import Multiaddr

from .api.bootstrap import AddressLike, address_arg, peers_of
from .errors import InvalidArgument
from .types.core import parse_multiaddr
from .utils.aio import run_sync

if TYPE_CHECKING:  # pragma: no cover
    from .client import IpfsClient

Cancel = Optional[asyncio.Event]


def _peer_arg(peer: Optional[AddressLike]) -> str:
    if peer is None:
        raise InvalidArgument("peer is required", "peer")
    return address_arg(peer)


class TrustedPeerCollection:
    def __init__(self, client: "IpfsClient") -> None:
        self._client = client
        self._peers: Optional[Tuple[Multiaddr, ...]] = None

    async def _fetch(self, *, cancel: Cancel = None) -> Tuple[Multiaddr, ...]:
        obj = await self._client.http.do_command_json("bootstrap/list", cancel=cancel)
        self._peers = tuple(peers_of(obj or {}))
        return self._peers

    async def _ensure(self, *, cancel: Cancel = None) -> Tuple[Multiaddr, ...]:
        if self._peers is None:
            return await self._fetch(cancel=cancel)
        return self._peers

    def invalidate(self) -> None:
        self._peers = None

    # --- mutations -------------------------------------------------------

    async def add(self, peer: AddressLike, *, cancel: Cancel = None) -> None:
        arg = _peer_arg(peer)
        await self._client.http.do_command("bootstrap/add", arg, cancel=cancel)
        self._peers = None

    async def add_defaults(self, *, cancel: Cancel = None) -> None:
        await self._client.http.do_command("bootstrap/add", options={"default": True}, cancel=cancel)
        self._peers = None

    async def clear(self, *, cancel: Cancel = None) -> None:
        await self._client.http.do_command("bootstrap/rm", options={"all": True}, cancel=cancel)
        self._peers = None

    async def remove(self, peer: AddressLike, *, cancel: Cancel = None) -> bool:
        arg = _peer_arg(peer)
        await self._client.http.do_command("bootstrap/rm", arg, cancel=cancel)
        self._peers = None
        return True

    # --- queries ---------------------------------------------------------

    async def count(self, *, cancel: Cancel = None) -> int:
        return len(await self._ensure(cancel=cancel))

    async def contains(self, peer: AddressLike, *, cancel: Cancel = None) -> bool:
        wanted = parse_multiaddr(str(peer)) if peer is not None else None
        if wanted is None:
            return False
        return wanted in await self._ensure(cancel=cancel)

    async def list(self, *, cancel: Cancel = None) -> List[Multiaddr]:
        return list(await self._ensure(cancel=cancel))

    async def copy_to(self, target: MutableSequence[Multiaddr], index: int = 0, *, cancel: Cancel = None) -> None:
        """Write the peers into `target` starting at `index` (the list grows if needed)."""
        peers = await self._ensure(cancel=cancel)
        target[index:index + len(peers)] = peers

    # --- blocking conveniences -------------------------------------------

    def __len__(self) -> int:
        return run_sync(self.count())

    def __contains__(self, peer: object) -> bool:
        return run_sync(self.contains(peer))  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Multiaddr]:
        return iter(run_sync(self.list()))

    def __repr__(self) -> str:
        cached = "unfetched" if self._peers is None else f"{len(self._peers)} cached"
        return f"TrustedPeerCollection({cached})"


__all__ = ["TrustedPeerCollection"]
