"""
Unix-fs files and directories (``add``, ``cat``, ``file/ls``).

``add`` replies with one JSON object per line (one per file, and one per
wrapping directory); the last record describes the root of what was added.

`add_directory` uploads the files one request at a time, then assembles the
directory locally from an empty ``unixfs-dir`` template plus one link per
entry, and stores it with ``object/put``.
"""

from __future__ import annotations

import io
import json
import logging
import os
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, BinaryIO, List, Optional, Tuple, Union

from ..dag.node import DagLink, DagNode
from ..errors import ResponseFormatError
from ..filesystem.node import FileSystemLink, FileSystemNode
from ..rpc.http import ResponseStream
from .base import ApiNamespace, Cancel, expect_object

if TYPE_CHECKING:  # pragma: no cover
    from ..client import IpfsClient

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 256 * 1024


@dataclass
class AddFileOptions:
    pin: bool = True
    wrap: bool = False
    raw_leaves: bool = False
    only_hash: bool = False
    trickle: bool = False
    hash: str = "sha2-256"
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def to_query(self) -> List[Tuple[str, str]]:
        opts: List[Tuple[str, str]] = []
        if not self.pin:
            opts.append(("pin", "false"))
        if self.wrap:
            opts.append(("wrap-with-directory", "true"))
        if self.raw_leaves:
            opts.append(("raw-leaves", "true"))
        if self.only_hash:
            opts.append(("only-hash", "true"))
        if self.trickle:
            opts.append(("trickle", "true"))
        if self.hash != "sha2-256":
            opts.append(("hash", self.hash))
        opts.append(("chunker", f"size-{self.chunk_size}"))
        return opts


def _last_record(body: str) -> dict:
    record = None
    for line in body.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except ValueError as e:
            raise ResponseFormatError(f"malformed add reply: {line[:128]!r}", command="add") from e
    if not isinstance(record, dict):
        raise ResponseFormatError("empty add reply", command="add")
    return record


class FileSystemApi(ApiNamespace):
    def __init__(self, client: "IpfsClient") -> None:
        super().__init__(client)
        self._empty_folder: Optional[DagNode] = None

    async def add(
        self,
        stream: Union[BinaryIO, bytes],
        name: str = "",
        options: Optional[AddFileOptions] = None,
        *,
        cancel: Cancel = None,
    ) -> FileSystemNode:
        options = options or AddFileOptions()
        body = await self.http.upload("add", stream, name=name, options=options.to_query(), cancel=cancel)
        record = _last_record(body)
        try:
            node = FileSystemNode(
                record["Hash"],
                name,
                is_directory=options.wrap,
                size=int(record.get("Size") or 0),
                client=self._client,
            )
        except (KeyError, ValueError) as e:
            raise ResponseFormatError(f"malformed add reply: {e}", command="add") from e
        log.debug("added %s %s", node.id, node.name)
        return node

    async def add_text(self, text: str, options: Optional[AddFileOptions] = None, *, cancel: Cancel = None) -> FileSystemNode:
        return await self.add(io.BytesIO(text.encode("utf-8")), "", options, cancel=cancel)

    async def add_file(self, path: Union[str, os.PathLike], options: Optional[AddFileOptions] = None, *, cancel: Cancel = None) -> FileSystemNode:
        with open(path, "rb") as fh:
            return await self.add(fh, os.path.basename(os.fspath(path)), options, cancel=cancel)

    async def add_directory(
        self,
        path: Union[str, os.PathLike],
        recursive: bool = True,
        options: Optional[AddFileOptions] = None,
        *,
        cancel: Cancel = None,
    ) -> FileSystemNode:
        options = replace(options or AddFileOptions(), wrap=False)
        root = os.path.abspath(os.fspath(path))
        entries = sorted(os.listdir(root))

        links: List[FileSystemLink] = []
        for entry in entries:
            full = os.path.join(root, entry)
            if os.path.isfile(full):
                links.append((await self.add_file(full, options, cancel=cancel)).to_link())
        if recursive:
            for entry in entries:
                full = os.path.join(root, entry)
                if os.path.isdir(full):
                    links.append((await self.add_directory(full, recursive, options, cancel=cancel)).to_link())

        folder = (await self._empty_directory(cancel)).add_links(
            DagLink(link.name, link.id, link.size) for link in links
        )
        directory = await self._client.object.put(folder, cancel=cancel)
        name = os.path.basename(root)
        log.debug("added %s %s", directory.id, name)
        return FileSystemNode(
            directory.id,
            name,
            is_directory=True,
            links=links,
            size=directory.size,
            client=self._client,
        )

    async def read_file(self, path: str, offset: Optional[int] = None, *, cancel: Cancel = None) -> ResponseStream:
        """Stream the content at `path` (``cat``), optionally from a byte offset."""
        return await self.http.download("cat", path, {"offset": offset}, cancel=cancel)

    async def read_all_text(self, path: str, *, cancel: Cancel = None) -> str:
        stream = await self.read_file(path, cancel=cancel)
        return (await stream.aread()).decode("utf-8")

    async def list_file(self, path: str, *, cancel: Cancel = None) -> FileSystemNode:
        obj = await self._json("file/ls", path, cancel=cancel)
        try:
            digest = obj["Arguments"][path]
            entry = expect_object(obj["Objects"][digest], "file/ls")
            return FileSystemNode(
                entry["Hash"],
                is_directory=entry.get("Type") == "Directory",
                links=[FileSystemLink.from_json(link) for link in entry.get("Links") or []],
                size=int(entry.get("Size") or 0),
                client=self._client,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ResponseFormatError(f"malformed file/ls reply: {e}", command="file/ls") from e

    async def _empty_directory(self, cancel: Cancel) -> DagNode:
        if self._empty_folder is None:
            self._empty_folder = await self._client.object.new_directory(cancel=cancel)
        return self._empty_folder


__all__ = ["FileSystemApi", "AddFileOptions", "DEFAULT_CHUNK_SIZE"]
