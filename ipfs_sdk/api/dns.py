from __future__ import annotations

from .base import ApiNamespace, Cancel


class DnsApi(ApiNamespace):
    async def resolve(self, name: str, recursive: bool = False, *, cancel: Cancel = None) -> str:
        """DNSLink lookup; returns the ``/ipfs/...`` (or ``/ipns/...``) path."""
        obj = await self._json("dns", name, {"recursive": recursive}, cancel=cancel)
        return str(obj.get("Path") or "")


__all__ = ["DnsApi"]
