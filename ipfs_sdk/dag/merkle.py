"""
`MerkleNode`: a lazy, daemon-backed view of a DAG object.

Creating a node never contacts the daemon. Fields are resolved on first use
and then cached on the node for its lifetime:

- block size  : one ``block/stat`` (skipped entirely for nodes built from a
                link, whose size is already known)
- links       : one ``object/links``
- payload     : a fresh ``block/get`` on every access, never cached

Each field has an async accessor (`fetch_block_size`, `fetch_links`,
`read_bytes`, `open_stream`) and a blocking property built on it. The
properties run the async accessor on the SDK's background loop and must not
be read from that loop's thread.

Two nodes are equal when their identifiers are equal; cached state and names
do not take part.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional, Tuple

from multiformats import CID

from ..errors import InvalidArgument
from ..types.cid import IPFS_PATH_PREFIX, CidLike, to_cid
from ..utils.aio import SyncReader, run_sync
from .node import DagLink

if TYPE_CHECKING:  # pragma: no cover
    from ..client import IpfsClient
    from ..rpc.http import ResponseStream


class MerkleNode:
    __slots__ = ("_id", "_name", "_client", "_block_size", "_has_block_stats", "_links")

    def __init__(self, id: CidLike, name: Optional[str] = None, *, client: Optional["IpfsClient"] = None) -> None:
        if id is None or (isinstance(id, str) and not id.strip()):
            raise InvalidArgument("a content identifier or /ipfs/ path is required", "id")
        self._id: CID = to_cid(id)
        self._name = name or ""
        self._client = client
        self._block_size = 0
        self._has_block_stats = False
        self._links: Optional[Tuple[DagLink, ...]] = None

    @classmethod
    def from_path(cls, path: str, name: Optional[str] = None, *, client: Optional["IpfsClient"] = None) -> "MerkleNode":
        """Build from ``/ipfs/<cid>`` (or a bare identifier string)."""
        if path is None or not str(path).strip():
            raise InvalidArgument("path must not be empty", "path")
        return cls(str(path).strip(), name, client=client)

    @classmethod
    def from_link(cls, link: DagLink, *, client: Optional["IpfsClient"] = None) -> "MerkleNode":
        if link is None:
            raise InvalidArgument("link is required", "link")
        node = cls(link.id, link.name, client=client)
        node._block_size = link.size
        node._has_block_stats = True
        return node

    # --- identity --------------------------------------------------------

    @property
    def id(self) -> CID:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = value or ""

    @property
    def client(self) -> "IpfsClient":
        if self._client is None:
            from ..client import default_client

            self._client = default_client()
        return self._client

    @client.setter
    def client(self, value: "IpfsClient") -> None:
        self._client = value

    # --- async accessors -------------------------------------------------

    async def fetch_block_size(self, *, cancel: Optional[asyncio.Event] = None) -> int:
        if not self._has_block_stats:
            block = await self.client.block.stat(self._id, cancel=cancel)
            self._block_size = block.size
            self._has_block_stats = True
        return self._block_size

    async def fetch_links(self, *, cancel: Optional[asyncio.Event] = None) -> Tuple[DagLink, ...]:
        if self._links is None:
            links = await self.client.object.links(self._id, cancel=cancel)
            self._links = tuple(sorted(links, key=lambda link: link.name))
        return self._links

    async def read_bytes(self, *, cancel: Optional[asyncio.Event] = None) -> bytes:
        block = await self.client.block.get(self._id, cancel=cancel)
        return block.data_bytes

    async def open_stream(self, *, cancel: Optional[asyncio.Event] = None) -> "ResponseStream":
        return await self.client.http.download("block/get", str(self._id), cancel=cancel)

    async def fetch_link(self, name: Optional[str] = None, *, cancel: Optional[asyncio.Event] = None) -> DagLink:
        size = await self.fetch_block_size(cancel=cancel)
        return DagLink(self._name if name is None else name, self._id, size)

    # --- blocking facade -------------------------------------------------

    @property
    def block_size(self) -> int:
        if self._has_block_stats:
            return self._block_size
        return run_sync(self.fetch_block_size())

    @property
    def size(self) -> int:
        return self.block_size

    @property
    def links(self) -> Tuple[DagLink, ...]:
        if self._links is not None:
            return self._links
        return run_sync(self.fetch_links())

    @property
    def data_bytes(self) -> bytes:
        return run_sync(self.read_bytes())

    @property
    def data_stream(self) -> SyncReader:
        stream = run_sync(self.open_stream())
        return SyncReader(stream.aiter_bytes(), stream.aclose)

    def to_link(self, name: Optional[str] = None) -> DagLink:
        return DagLink(self._name if name is None else name, self._id, self.block_size)

    # --- dunder ----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleNode):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return f"{IPFS_PATH_PREFIX}{self._id}"

    def __repr__(self) -> str:
        return f"MerkleNode({str(self._id)!r}, name={self._name!r})"


__all__ = ["MerkleNode"]
