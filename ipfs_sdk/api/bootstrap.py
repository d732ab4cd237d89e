"""
``bootstrap/*``: the daemon's list of trusted peers to dial on startup.

Addresses are returned as `multiaddr.Multiaddr`. `TrustedPeerCollection`
(``client.trusted_peers``) offers the same list as a cached collection.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from multiaddr import Multiaddr

from ..errors import InvalidArgument
from ..types.core import parse_multiaddr
from .base import ApiNamespace, Cancel

AddressLike = Union[Multiaddr, str]


def peers_of(obj: Mapping[str, Any]) -> List[Multiaddr]:
    return [a for a in (parse_multiaddr(s) for s in obj.get("Peers") or []) if a is not None]


def address_arg(address: Optional[AddressLike]) -> str:
    if address is None or not str(address).strip():
        raise InvalidArgument("a multiaddress is required", "address")
    return str(address).strip()


class BootstrapApi(ApiNamespace):
    async def add(self, address: AddressLike, *, cancel: Cancel = None) -> Optional[Multiaddr]:
        peers = peers_of(await self._json("bootstrap/add", address_arg(address), cancel=cancel))
        return peers[0] if peers else None

    async def add_defaults(self, *, cancel: Cancel = None) -> List[Multiaddr]:
        return peers_of(await self._json("bootstrap/add/default", cancel=cancel))

    async def list(self, *, cancel: Cancel = None) -> List[Multiaddr]:
        return peers_of(await self._json("bootstrap/list", cancel=cancel))

    async def remove(self, address: AddressLike, *, cancel: Cancel = None) -> Optional[Multiaddr]:
        peers = peers_of(await self._json("bootstrap/rm", address_arg(address), cancel=cancel))
        return peers[0] if peers else None

    async def remove_all(self, *, cancel: Cancel = None) -> None:
        await self.http.do_command("bootstrap/rm/all", cancel=cancel)


__all__ = ["BootstrapApi", "AddressLike", "address_arg", "peers_of"]
