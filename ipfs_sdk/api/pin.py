from __future__ import annotations

from typing import List

from multiformats import CID

from ..types.cid import CidLike, to_cid
from .base import ApiNamespace, Cancel


class PinApi(ApiNamespace):
    """``pin/*``: keep objects (and optionally everything below them) from being collected."""

    async def add(self, path: str, recursive: bool = True, *, cancel: Cancel = None) -> List[CID]:
        obj = await self._json("pin/add", str(path), {"recursive": recursive}, cancel=cancel)
        return [to_cid(p, argument="Pins") for p in obj.get("Pins") or []]

    async def list(self, *, cancel: Cancel = None) -> List[CID]:
        obj = await self._json("pin/ls", cancel=cancel)
        return [to_cid(k, argument="Keys") for k in (obj.get("Keys") or {})]

    async def remove(self, id: CidLike, recursive: bool = True, *, cancel: Cancel = None) -> List[CID]:
        obj = await self._json("pin/rm", str(to_cid(id)), {"recursive": recursive}, cancel=cancel)
        return [to_cid(p, argument="Pins") for p in obj.get("Pins") or []]


__all__ = ["PinApi"]
