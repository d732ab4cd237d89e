from __future__ import annotations

from .base import ApiNamespace


class BitswapApi(ApiNamespace):
    """Placeholder for ``bitswap/*``; no operations are exposed yet."""


__all__ = ["BitswapApi"]
