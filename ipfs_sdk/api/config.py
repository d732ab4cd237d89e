from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from ..errors import UnsupportedOperation
from .base import ApiNamespace, Cancel


class ConfigApi(ApiNamespace):
    """The daemon's configuration document (``config``, ``config/show``)."""

    async def get(self, key: Optional[str] = None, *, cancel: Cancel = None) -> Any:
        """The whole document, or the value stored under a dotted `key`."""
        if key is None:
            return await self._json("config/show", cancel=cancel)
        obj = await self._json("config", key, cancel=cancel)
        return obj.get("Value")

    async def set(self, key: str, value: Any, *, cancel: Cancel = None) -> None:
        """Strings are stored as-is; anything else is sent as JSON."""
        if isinstance(value, str):
            await self.http.do_command("config", [key, value], cancel=cancel)
        else:
            encoded = json.dumps(value, separators=(",", ":"))
            await self.http.do_command("config", [key, encoded], {"json": True}, cancel=cancel)

    async def replace(self, config: Mapping[str, Any]) -> None:
        raise UnsupportedOperation("config.replace")


__all__ = ["ConfigApi"]
