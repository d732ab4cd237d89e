"""
Unix-fs view of content: `FileSystemNode` and `FileSystemLink`.

`FileSystemNode` is a mutable record. Any of `is_directory`, `links` and `size`
may be set by whoever builds the node (``add`` fills them from its reply). If
one of them is read while still unset, a single ``file/ls`` is issued and all
three are filled from that reply. The payload is never cached: every read of
`data_stream` / `data_bytes` downloads the file again via ``cat``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional, Sequence, Tuple

from multiformats import CID

from ..errors import InvalidArgument
from ..types.cid import CidLike, to_cid
from ..utils.aio import SyncReader, run_sync

if TYPE_CHECKING:  # pragma: no cover
    from ..client import IpfsClient
    from ..rpc.http import ResponseStream


@dataclass(frozen=True)
class FileSystemLink:
    name: str
    id: CID
    size: int
    is_directory: bool = False

    @classmethod
    def from_json(cls, obj: Mapping[str, Any]) -> "FileSystemLink":
        return cls(
            name=str(obj.get("Name") or ""),
            id=to_cid(obj["Hash"], argument="Hash"),
            size=int(obj.get("Size", 0)),
            is_directory=obj.get("Type") == "Directory",
        )


class FileSystemNode:
    def __init__(
        self,
        id: Optional[CidLike] = None,
        name: str = "",
        *,
        is_directory: Optional[bool] = None,
        links: Optional[Sequence[FileSystemLink]] = None,
        size: Optional[int] = None,
        client: Optional["IpfsClient"] = None,
    ) -> None:
        self._id: Optional[CID] = to_cid(id) if id is not None else None
        self.name = name or ""
        self._is_directory = is_directory
        self._links: Optional[Tuple[FileSystemLink, ...]] = tuple(links) if links is not None else None
        self._size = size
        self._client = client

    # --- plain fields ----------------------------------------------------

    @property
    def id(self) -> Optional[CID]:
        return self._id

    @id.setter
    def id(self, value: Optional[CidLike]) -> None:
        self._id = to_cid(value) if value is not None else None

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

    async def fetch_info(self, *, cancel: Optional[asyncio.Event] = None) -> "FileSystemNode":
        """One ``file/ls``; copies directory flag, links and size onto this node."""
        listed = await self.client.filesystem.list_file(str(self._require_id()), cancel=cancel)
        self._is_directory = listed._is_directory
        self._links = listed._links
        self._size = listed._size
        return self

    async def ensure_info(self, *, cancel: Optional[asyncio.Event] = None) -> "FileSystemNode":
        if self._is_directory is None or self._links is None or self._size is None:
            await self.fetch_info(cancel=cancel)
        return self

    async def open_stream(self, *, cancel: Optional[asyncio.Event] = None) -> "ResponseStream":
        return await self.client.filesystem.read_file(str(self._require_id()), cancel=cancel)

    async def read_bytes(self, *, cancel: Optional[asyncio.Event] = None) -> bytes:
        stream = await self.open_stream(cancel=cancel)
        return await stream.aread()

    # --- lazily resolved fields ------------------------------------------

    @property
    def is_directory(self) -> bool:
        if self._is_directory is None:
            run_sync(self.ensure_info())
        return bool(self._is_directory)

    @is_directory.setter
    def is_directory(self, value: bool) -> None:
        self._is_directory = value

    @property
    def links(self) -> Tuple[FileSystemLink, ...]:
        if self._links is None:
            run_sync(self.ensure_info())
        return self._links or ()

    @links.setter
    def links(self, value: Sequence[FileSystemLink]) -> None:
        self._links = tuple(value)

    @property
    def size(self) -> int:
        if self._size is None:
            run_sync(self.ensure_info())
        return int(self._size or 0)

    @size.setter
    def size(self, value: int) -> None:
        self._size = value

    @property
    def data_stream(self) -> SyncReader:
        stream = run_sync(self.open_stream())
        return SyncReader(stream.aiter_bytes(), stream.aclose)

    @property
    def data_bytes(self) -> bytes:
        return run_sync(self.read_bytes())

    def to_link(self, name: str = "") -> FileSystemLink:
        return FileSystemLink(
            name=name if name and name.strip() else self.name,
            id=self._require_id(),
            size=self.size,
            is_directory=self.is_directory,
        )

    def _require_id(self) -> CID:
        if self._id is None:
            raise InvalidArgument("file system node has no identifier", "id")
        return self._id

    def __repr__(self) -> str:
        return f"FileSystemNode(id={self._id}, name={self.name!r})"


__all__ = ["FileSystemNode", "FileSystemLink"]
