"""
``swarm/*``: connections to other peers and address filters.

``swarm/peers`` has had two reply shapes:

- legacy: ``{"Strings": ["<addr>/ipfs/<id> <latency>", ...]}``
- current: ``{"Peers": [{"Addr": ..., "Peer": ..., "Latency": ...}, ...]}``

Anything else raises `ResponseFormatError`.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, List, Mapping, Optional

from multiaddr import Multiaddr

from ..errors import ResponseFormatError
from ..types.core import Peer, parse_multiaddr, peer_id_of
from .base import ApiNamespace, Cancel
from .bootstrap import AddressLike, address_arg


def parse_latency(text: Optional[str]) -> timedelta:
    """Go duration strings as printed by the daemon: ``n/a``, ``unknown``, ``12.5ms``, ``1.2s``."""
    text = (text or "").strip()
    if text in ("n/a", "unknown", ""):
        return timedelta(0)
    try:
        if text.endswith("ms"):
            return timedelta(milliseconds=float(text[:-2]))
        if text.endswith("s"):
            return timedelta(seconds=float(text[:-1]))
    except ValueError as e:
        raise ResponseFormatError(f"invalid latency {text!r}", command="swarm/peers") from e
    raise ResponseFormatError(f"invalid latency unit {text!r}", command="swarm/peers")


def _legacy_peer(entry: str) -> Peer:
    parts = entry.split(" ")
    address = parts[0]
    peer_id = peer_id_of(address)
    if not peer_id:
        raise ResponseFormatError(f"peer address without an id: {address!r}", command="swarm/peers")
    return Peer(
        id=peer_id,
        connected_address=parse_multiaddr(address),
        latency=parse_latency(parts[1] if len(parts) > 1 else None),
    )


def _current_peer(entry: Mapping[str, Any]) -> Peer:
    peer_id = str(entry.get("Peer") or "")
    return Peer(
        id=peer_id,
        connected_address=parse_multiaddr(f"{entry.get('Addr') or ''}/p2p/{peer_id}"),
        latency=parse_latency(entry.get("Latency")),
    )


def _strings(obj: Mapping[str, Any]) -> List[str]:
    return [str(s) for s in obj.get("Strings") or []]


class SwarmApi(ApiNamespace):
    async def addresses(self, *, cancel: Cancel = None) -> List[Peer]:
        """Known addresses of every peer in the address book (``swarm/addrs``)."""
        obj = await self._json("swarm/addrs", cancel=cancel)
        peers = []
        for peer_id, addrs in (obj.get("Addrs") or {}).items():
            parsed = [a for a in (parse_multiaddr(s) for s in addrs or []) if a is not None]
            peers.append(Peer(id=peer_id, addresses=parsed))
        return peers

    async def peers(self, *, cancel: Cancel = None) -> List[Peer]:
        obj = await self._json("swarm/peers", options={"verbose": True}, cancel=cancel)
        strings = obj.get("Strings")
        if strings is not None:
            return [_legacy_peer(str(s)) for s in strings]
        if "Peers" in obj:
            return [_current_peer(p) for p in obj.get("Peers") or []]
        raise ResponseFormatError("unknown response shape", command="swarm/peers")

    async def connect(self, address: AddressLike, *, cancel: Cancel = None) -> None:
        await self.http.do_command("swarm/connect", address_arg(address), cancel=cancel)

    async def disconnect(self, address: AddressLike, *, cancel: Cancel = None) -> None:
        await self.http.do_command("swarm/disconnect", address_arg(address), cancel=cancel)

    async def add_address_filter(self, address: AddressLike, persist: bool = False, *, cancel: Cancel = None) -> Optional[Multiaddr]:
        # the daemon always persists filters
        strings = _strings(await self._json("swarm/filters/add", address_arg(address), cancel=cancel))
        return parse_multiaddr(strings[0]) if strings else None

    async def remove_address_filter(self, address: AddressLike, persist: bool = False, *, cancel: Cancel = None) -> Optional[Multiaddr]:
        strings = _strings(await self._json("swarm/filters/rm", address_arg(address), cancel=cancel))
        return parse_multiaddr(strings[0]) if strings else None

    async def list_address_filters(self, persist: bool = False, *, cancel: Cancel = None) -> List[Multiaddr]:
        if persist:
            value = await self._client.config.get("Swarm.AddrFilters", cancel=cancel)
            strings = [str(s) for s in value or []]
        else:
            strings = _strings(await self._json("swarm/filters", cancel=cancel))
        return [a for a in (parse_multiaddr(s) for s in strings) if a is not None]


__all__ = ["SwarmApi", "parse_latency"]
