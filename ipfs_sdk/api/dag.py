from __future__ import annotations

from typing import Any

from ..errors import UnsupportedOperation
from .base import ApiNamespace


class DagApi(ApiNamespace):
    """IPLD ``dag/*`` commands. Not implemented by this client; no request is made."""

    async def get(self, id: Any, **kwargs: Any) -> Any:
        raise UnsupportedOperation("dag.get")

    async def put(self, data: Any, content_type: str = "cbor", multi_hash: str = "sha2-256", pin: bool = True, **kwargs: Any) -> Any:
        raise UnsupportedOperation("dag.put")


__all__ = ["DagApi"]
