from __future__ import annotations

from typing import List, Optional

from ..errors import UnsupportedOperation
from ..types.core import KeyInfo
from .base import ApiNamespace, Cancel


class KeyApi(ApiNamespace):
    """Keypairs held by the daemon (``key/*``), used to publish IPNS names."""

    async def create(self, name: str, key_type: str = "rsa", size: int = 2048, *, cancel: Cancel = None) -> KeyInfo:
        obj = await self._json("key/gen", name, [("type", key_type), ("size", size)], cancel=cancel)
        return KeyInfo.from_json(obj)

    async def list(self, *, cancel: Cancel = None) -> List[KeyInfo]:
        obj = await self._json("key/list", options={"l": True}, cancel=cancel)
        return [KeyInfo.from_json(k) for k in obj.get("Keys") or []]

    async def remove(self, name: str, *, cancel: Cancel = None) -> Optional[KeyInfo]:
        obj = await self._json("key/rm", name, cancel=cancel)
        keys = obj.get("Keys") or []
        return KeyInfo.from_json(keys[0]) if keys else None

    async def export(self, name: str, password: Optional[str] = None) -> str:
        raise UnsupportedOperation("key.export")

    async def import_key(self, name: str, pem: str, password: Optional[str] = None) -> KeyInfo:
        raise UnsupportedOperation("key.import")

    async def rename(self, old_name: str, new_name: str) -> KeyInfo:
        raise UnsupportedOperation("key.rename")


__all__ = ["KeyApi"]
