"""
Local merkle-DAG values: `DagLink` and `DagNode`.

A `DagNode` is built entirely in memory. Its identifier is the hash of its
canonical dag-pb encoding (see :mod:`ipfs_sdk.dag.pb`) and is computed on first
use; nothing here talks to the daemon.

Links are kept ordered by name, ascending, with the empty name first. Equal
names keep the order in which they were given.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from multiformats import CID, multihash

from ..errors import InvalidArgument
from ..types.cid import CidLike, to_cid
from . import pb

DEFAULT_HASH = "sha2-256"


@dataclass(frozen=True)
class DagLink:
    """A named, sized reference to another object."""

    name: Optional[str]
    id: CidLike
    size: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name or "")
        object.__setattr__(self, "id", to_cid(self.id))
        object.__setattr__(self, "size", int(self.size))

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "DagLink":
        return cls(obj.get("Name"), obj["Hash"], int(obj.get("Size", 0)))

    def to_json(self) -> dict:
        return {"Name": self.name, "Hash": str(self.id), "Size": self.size}


def _ordered(links: Iterable[DagLink]) -> Tuple[DagLink, ...]:
    return tuple(sorted(links, key=lambda link: link.name))


def _cid_for(encoded: bytes, hash_algorithm: str) -> CID:
    digest = multihash.digest(encoded, hash_algorithm)
    if hash_algorithm == DEFAULT_HASH:
        return CID("base58btc", 0, "dag-pb", digest)
    return CID("base32", 1, "dag-pb", digest)


class DagNode:
    """
    An immutable merkle-DAG object: optional payload plus ordered links.

    `add_link(s)` and `remove_link` return new nodes. `size` is the cumulative
    size: the encoded length of this node plus the sizes of all its links.
    """

    __slots__ = ("_data", "_links", "_hash_algorithm", "_encoded", "_id")

    def __init__(
        self,
        data: Optional[bytes] = None,
        links: Optional[Iterable[DagLink]] = None,
        hash_algorithm: str = DEFAULT_HASH,
    ) -> None:
        self._data = bytes(data or b"")
        self._links = _ordered(links or ())
        self._hash_algorithm = hash_algorithm
        self._encoded: Optional[bytes] = None
        self._id: Optional[CID] = None

    @classmethod
    def from_bytes(cls, raw: bytes, hash_algorithm: str = DEFAULT_HASH) -> "DagNode":
        try:
            data, raw_links = pb.decode_node(raw)
            links = [DagLink(name, CID.decode(hash_bytes), tsize) for hash_bytes, name, tsize in raw_links]
        except Exception as e:
            raise InvalidArgument(f"not a dag-pb object: {e}", "raw") from e
        return cls(data, links, hash_algorithm)

    @property
    def data_bytes(self) -> bytes:
        return self._data

    @property
    def data_stream(self) -> io.BytesIO:
        return io.BytesIO(self._data)

    @property
    def links(self) -> Tuple[DagLink, ...]:
        return self._links

    @property
    def hash_algorithm(self) -> str:
        return self._hash_algorithm

    def to_bytes(self) -> bytes:
        if self._encoded is None:
            self._encoded = pb.encode_node(
                self._data, ((bytes(link.id), link.name, link.size) for link in self._links)
            )
        return self._encoded

    @property
    def id(self) -> CID:
        if self._id is None:
            self._id = _cid_for(self.to_bytes(), self._hash_algorithm)
        return self._id

    @property
    def size(self) -> int:
        return len(self.to_bytes()) + sum(link.size for link in self._links)

    def to_link(self, name: str = "") -> DagLink:
        return DagLink(name, self.id, self.size)

    def add_link(self, link: DagLink) -> "DagNode":
        return self.add_links([link])

    def add_links(self, links: Iterable[DagLink]) -> "DagNode":
        return DagNode(self._data, list(self._links) + list(links), self._hash_algorithm)

    def remove_link(self, link: DagLink) -> "DagNode":
        return self.remove_links([link])

    def remove_links(self, links: Iterable[DagLink]) -> "DagNode":
        drop = {link.id for link in links}
        kept: List[DagLink] = [link for link in self._links if link.id not in drop]
        return DagNode(self._data, kept, self._hash_algorithm)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DagNode):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"DagNode(id={self.id}, data={len(self._data)}B, links={len(self._links)})"


__all__ = ["DagLink", "DagNode", "DEFAULT_HASH"]
