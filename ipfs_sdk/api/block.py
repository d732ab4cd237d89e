"""
``block/*`` commands: raw blocks addressed by CID.

`put` only sends ``mhtype``/``format`` when either differs from the defaults
(``sha2-256`` / ``dag-pb``), so default puts yield CIDv0 identifiers.
"""

from __future__ import annotations

import logging
from typing import BinaryIO, Optional, Union

from multiformats import CID

from ..dag.block import Block
from ..errors import RequestError, ResponseFormatError
from ..rpc.http import decode_json
from ..types.cid import CidLike, to_cid
from .base import ApiNamespace, Cancel, expect_object

log = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "dag-pb"
DEFAULT_MULTIHASH = "sha2-256"


class BlockApi(ApiNamespace):
    async def get(self, id: CidLike, *, cancel: Cancel = None) -> Block:
        cid = to_cid(id)
        data = await self.http.download_bytes("block/get", str(cid), cancel=cancel)
        return Block(cid, data)

    async def put(
        self,
        data: Union[bytes, bytearray, BinaryIO],
        content_type: str = DEFAULT_CONTENT_TYPE,
        multi_hash: str = DEFAULT_MULTIHASH,
        pin: bool = False,
        *,
        cancel: Cancel = None,
    ) -> CID:
        options = []
        if multi_hash != DEFAULT_MULTIHASH or content_type != DEFAULT_CONTENT_TYPE:
            options = [("mhtype", multi_hash), ("format", content_type)]
        obj = await self._upload_json("block/put", data, options=options, cancel=cancel)
        cid = to_cid(obj.get("Key"), argument="Key")
        log.debug("put block %s", cid)
        if pin:
            await self._client.pin.add(str(cid), recursive=False, cancel=cancel)
        return cid

    async def remove(self, id: CidLike, ignore_nonexistent: bool = False, *, cancel: Cancel = None) -> Optional[CID]:
        """
        Remove a block. Returns its CID, or None when the daemon replies with an
        empty body (the block did not exist and `ignore_nonexistent` was set).
        An in-band ``Error`` in the reply raises `RequestError`.
        """
        body = await self.http.do_command("block/rm", str(to_cid(id)), {"force": ignore_nonexistent}, cancel=cancel)
        if not body.strip():
            return None
        obj = expect_object(decode_json(body, "block/rm"), "block/rm")
        error = obj.get("Error")
        if error:
            raise RequestError(str(error), command="block/rm")
        return to_cid(obj.get("Hash"), argument="Hash")

    async def stat(self, id: CidLike, *, cancel: Cancel = None) -> Block:
        obj = await self._json("block/stat", str(to_cid(id)), cancel=cancel)
        try:
            return Block(to_cid(obj["Key"], argument="Key"), size=int(obj["Size"]))
        except (KeyError, ValueError, TypeError) as e:
            raise ResponseFormatError(f"malformed block stat: {e}", command="block/stat") from e


__all__ = ["BlockApi", "DEFAULT_CONTENT_TYPE", "DEFAULT_MULTIHASH"]
