"""
``object/*`` commands: merkle-DAG objects as `DagNode` values.

`put` uploads the node's canonical dag-pb bytes (``inputenc=protobuf``) and
returns the node unchanged; its identifier is always the locally computed
one, never taken from the daemon's reply.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from ..dag.node import DagLink, DagNode
from ..errors import ResponseFormatError
from ..rpc.http import ResponseStream
from ..types.cid import CidLike, to_cid
from ..types.core import ObjectStat
from .base import ApiNamespace, Cancel

log = logging.getLogger(__name__)

UNIXFS_DIR_TEMPLATE = "unixfs-dir"


def dag_from_json(obj: Mapping[str, Any], command: str = "object/get") -> DagNode:
    try:
        text = obj.get("Data")
        data = text.encode("utf-8") if text is not None else None
        links = [DagLink.from_json(link) for link in obj.get("Links") or []]
    except (KeyError, TypeError, AttributeError) as e:
        raise ResponseFormatError(f"malformed object: {e}", command=command) from e
    return DagNode(data, links)


class ObjectApi(ApiNamespace):
    async def get(self, id: CidLike, *, cancel: Cancel = None) -> DagNode:
        obj = await self._json("object/get", str(to_cid(id)), cancel=cancel)
        return dag_from_json(obj)

    async def links(self, id: CidLike, *, cancel: Cancel = None) -> List[DagLink]:
        obj = await self._json("object/links", str(to_cid(id)), cancel=cancel)
        return list(dag_from_json(obj, "object/links").links)

    async def new(self, template: Optional[str] = None, *, cancel: Cancel = None) -> DagNode:
        """Create an object from a daemon template (none, or ``unixfs-dir``) and fetch it."""
        obj = await self._json("object/new", template, cancel=cancel)
        hash_ = obj.get("Hash")
        if not hash_:
            raise ResponseFormatError(f"missing Hash in reply: {obj!r}", command="object/new")
        return await self.get(hash_, cancel=cancel)

    async def new_directory(self, *, cancel: Cancel = None) -> DagNode:
        return await self.new(UNIXFS_DIR_TEMPLATE, cancel=cancel)

    async def put(
        self,
        node: Union[DagNode, bytes, None] = None,
        links: Optional[Iterable[DagLink]] = None,
        *,
        cancel: Cancel = None,
    ) -> DagNode:
        """Store `node`, or a node built from ``(data, links)``."""
        if not isinstance(node, DagNode):
            node = DagNode(node, links)
        await self.http.upload("object/put", node.to_bytes(), options={"inputenc": "protobuf"}, cancel=cancel)
        log.debug("put object %s", node.id)
        return node

    async def stat(self, id: CidLike, *, cancel: Cancel = None) -> ObjectStat:
        obj = await self._json("object/stat", str(to_cid(id)), cancel=cancel)
        try:
            return ObjectStat.from_json(obj)
        except (KeyError, ValueError, TypeError) as e:
            raise ResponseFormatError(f"malformed object stat: {e}", command="object/stat") from e

    async def data(self, id: CidLike, *, cancel: Cancel = None) -> ResponseStream:
        """Raw payload of the object, streamed. The caller closes the stream."""
        return await self.http.download("object/data", str(to_cid(id)), cancel=cancel)


__all__ = ["ObjectApi", "dag_from_json", "UNIXFS_DIR_TEMPLATE"]
