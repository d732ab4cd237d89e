"""
``dht/*`` lookups.

`find_providers` reads the NDJSON reply of ``dht/findprovs`` incrementally;
each record carries a peer either as a top-level ``ID`` or inside
``Responses[].ID``. Records without any id (query progress events) are
skipped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Mapping

from ..rpc.http import decode_json
from ..types.cid import CidLike, to_cid
from ..types.core import Peer
from .base import ApiNamespace, Cancel, expect_object

log = logging.getLogger(__name__)


def _provider_ids(record: Mapping[str, Any]):  # noqa: ANN202
    top = record.get("ID")
    if top:
        yield str(top)
        return
    for response in record.get("Responses") or []:
        rid = (response or {}).get("ID")
        if rid:
            yield str(rid)


class DhtApi(ApiNamespace):
    async def find_peer(self, peer_id: str, *, cancel: Cancel = None) -> Peer:
        return await self._client.id(peer_id, cancel=cancel)

    async def find_providers(self, id: CidLike, *, cancel: Cancel = None) -> AsyncIterator[Peer]:
        stream = await self.http.post_download("dht/findprovs", str(to_cid(id)), cancel=cancel)
        async with stream:
            async for line in stream.aiter_lines():
                if cancel is not None and cancel.is_set():
                    raise asyncio.CancelledError("operation cancelled")
                log.debug("provider %s", line)
                record = expect_object(decode_json(line, "dht/findprovs"), "dht/findprovs")
                for pid in _provider_ids(record):
                    yield Peer(id=pid)


__all__ = ["DhtApi"]
