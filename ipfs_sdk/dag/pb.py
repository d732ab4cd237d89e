"""
dag-pb wire format (the protobuf encoding of merkle-DAG objects).

    PBNode { repeated PBLink Links = 2; optional bytes Data = 1; }
    PBLink { optional bytes Hash = 1; optional string Name = 2; optional uint64 Tsize = 3; }

Canonical form writes every link before the data field, and each link as
Hash, Name, Tsize. Name and Tsize are always present; Data is omitted when
empty. Identifiers derived from these bytes therefore match what the daemon
computes for the same object.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from pure_protobuf.dataclasses_ import field, message  # type: ignore
from pure_protobuf.types import uint64  # type: ignore

RawLink = Tuple[bytes, str, int]


@message
@dataclass
class PBLink:
    Hash: Optional[bytes] = field(1, default=None)
    Name: Optional[str] = field(2, default=None)
    Tsize: Optional[uint64] = field(3, default=None)


# Links is declared first so it is also serialized first.
@message
@dataclass
class PBNode:
    Links: List[PBLink] = field(2, default_factory=list)
    Data: Optional[bytes] = field(1, default=None)


def encode_link(hash_bytes: bytes, name: str, tsize: int) -> bytes:
    return PBLink(Hash=hash_bytes, Name=name or "", Tsize=int(tsize)).dumps()


def encode_node(data: bytes, links: Iterable[RawLink]) -> bytes:
    node = PBNode(
        Links=[PBLink(Hash=h, Name=name or "", Tsize=int(tsize)) for h, name, tsize in links],
        Data=data or None,
    )
    return node.dumps()


def _raw_link(link: PBLink) -> RawLink:
    return link.Hash or b"", link.Name or "", link.Tsize or 0


def decode_link(raw: bytes) -> RawLink:
    try:
        return _raw_link(PBLink.loads(raw))
    except Exception as e:
        raise ValueError(f"malformed dag-pb link: {e}") from e


def decode_node(raw: bytes) -> Tuple[bytes, List[RawLink]]:
    """Inverse of `encode_node`; raises ValueError on malformed input."""
    try:
        node = PBNode.loads(raw)
    except Exception as e:
        raise ValueError(f"malformed dag-pb object: {e}") from e
    return node.Data or b"", [_raw_link(link) for link in node.Links]


__all__ = ["PBLink", "PBNode", "encode_node", "encode_link", "decode_node", "decode_link", "RawLink"]
