"""
Plain value types returned by the API namespaces.

Nothing here performs network I/O; these are records with `from_json`
converters for the daemon's JSON payloads (PascalCase keys).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from multiaddr import Multiaddr
from multiformats import CID

from .cid import to_cid

log = logging.getLogger(__name__)

# Protocols whose value is a host name, which may itself read "ipfs".
_HOST_PROTOCOLS = ("dns", "dns4", "dns6", "dnsaddr")


def normalize_address(text: str) -> str:
    """Rewrite legacy ``/ipfs/<peer-id>`` components to ``/p2p/<peer-id>``."""
    parts = text.split("/")
    for i in range(1, len(parts) - 1):
        if parts[i] == "ipfs" and parts[i + 1] and parts[i - 1] not in _HOST_PROTOCOLS:
            parts[i] = "p2p"
    return "/".join(parts)


def parse_multiaddr(text: str) -> Optional[Multiaddr]:
    """Parse one address; unknown protocols yield None instead of failing the call."""
    text = (text or "").strip()
    if not text:
        return None
    try:
        return Multiaddr(normalize_address(text))
    except Exception as e:
        log.debug("skipping unparsable multiaddress %r: %s", text, e)
        return None


def peer_id_of(address: str) -> Optional[str]:
    """The ``/p2p/`` (or legacy ``/ipfs/``) component of a multiaddress string."""
    parts = address.split("/")
    for i in range(len(parts) - 1, 0, -1):
        if parts[i - 1] in ("p2p", "ipfs") and parts[i]:
            return parts[i]
    return None


@dataclass
class Peer:
    """A node of the network, as described by ``id`` or ``swarm/*`` commands."""

    id: str
    addresses: List[Multiaddr] = field(default_factory=list)
    connected_address: Optional[Multiaddr] = None
    latency: Optional[timedelta] = None
    agent_version: Optional[str] = None
    protocol_version: Optional[str] = None
    public_key: Optional[str] = None

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "Peer":
        addrs = [a for a in (parse_multiaddr(s) for s in obj.get("Addresses") or []) if a is not None]
        return cls(
            id=str(obj.get("ID") or ""),
            addresses=addrs,
            agent_version=obj.get("AgentVersion"),
            protocol_version=obj.get("ProtocolVersion"),
            public_key=obj.get("PublicKey"),
        )

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class KeyInfo:
    id: str
    name: str

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "KeyInfo":
        return cls(id=str(obj.get("Id") or obj.get("ID") or ""), name=str(obj.get("Name") or ""))


@dataclass(frozen=True)
class NamedContent:
    """Result of ``name/publish``: the IPNS name and the path it points at."""

    name_path: str
    content_path: str


@dataclass(frozen=True)
class ObjectStat:
    block_size: int
    cumulative_size: int
    data_size: int
    hash: CID
    links_size: int
    num_links: int

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "ObjectStat":
        return cls(
            block_size=int(obj.get("BlockSize", 0)),
            cumulative_size=int(obj.get("CumulativeSize", 0)),
            data_size=int(obj.get("DataSize", 0)),
            hash=to_cid(obj["Hash"], argument="Hash"),
            links_size=int(obj.get("LinksSize", 0)),
            num_links=int(obj.get("NumLinks", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "BlockSize": self.block_size,
            "CumulativeSize": self.cumulative_size,
            "DataSize": self.data_size,
            "Hash": str(self.hash),
            "LinksSize": self.links_size,
            "NumLinks": self.num_links,
        }


__all__ = ["Peer", "KeyInfo", "NamedContent", "ObjectStat", "normalize_address", "parse_multiaddr", "peer_id_of"]
