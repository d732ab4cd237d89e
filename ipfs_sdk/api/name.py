"""
IPNS (``name/*``): publish a path under a key and resolve names back to paths.

Lifetimes are sent as Go duration strings (``24h``, ``1h30m``, ``1.5s``).
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ..errors import InvalidArgument
from ..types.cid import CidLike, ipfs_path
from ..types.core import NamedContent
from .base import ApiNamespace, Cancel

DEFAULT_LIFETIME = timedelta(hours=24)


def go_duration(value: timedelta) -> str:
    total_ms = int(round(value.total_seconds() * 1000))
    if total_ms <= 0:
        raise InvalidArgument("lifetime must be positive", "lifetime")
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    seconds, millis = divmod(rem, 1000)
    out = ""
    if hours:
        out += f"{hours}h"
    if minutes:
        out += f"{minutes}m"
    if millis:
        out += f"{seconds}.{millis:03d}".rstrip("0") + "s"
    elif seconds:
        out += f"{seconds}s"
    return out


class NameApi(ApiNamespace):
    async def publish(
        self,
        path: str,
        resolve: bool = True,
        key: str = "self",
        lifetime: Optional[timedelta] = None,
        *,
        cancel: Cancel = None,
    ) -> NamedContent:
        options = [
            ("lifetime", go_duration(lifetime or DEFAULT_LIFETIME)),
            ("resolve", resolve),
            ("key", key),
        ]
        obj = await self._json("name/publish", path, options, cancel=cancel)
        return NamedContent(name_path=str(obj.get("Name") or ""), content_path=str(obj.get("Value") or ""))

    async def publish_cid(
        self,
        id: CidLike,
        key: str = "self",
        lifetime: Optional[timedelta] = None,
        *,
        cancel: Cancel = None,
    ) -> NamedContent:
        return await self.publish(ipfs_path(id), resolve=False, key=key, lifetime=lifetime, cancel=cancel)

    async def resolve(self, name: str, recursive: bool = False, nocache: bool = False, *, cancel: Cancel = None) -> str:
        obj = await self._json("name/resolve", name, [("recursive", recursive), ("nocache", nocache)], cancel=cancel)
        return str(obj.get("Path") or "")


__all__ = ["NameApi", "go_duration", "DEFAULT_LIFETIME"]
