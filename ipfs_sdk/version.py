"""
Version helpers for the IPFS Python SDK.

We keep a static __version__ (PEP 440) and derive the HTTP User-Agent that is
sent with every API request from it.
"""

from __future__ import annotations

from dataclasses import dataclass

# Bump this when publishing
__version__ = "0.1.0"


@dataclass(frozen=True)
class VersionInfo:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.major}.{self.minor}.{self.patch}"


def version_info() -> VersionInfo:
    """Structured view of __version__ (pre-release suffixes are dropped)."""
    parts = []
    for piece in __version__.split(".")[:3]:
        digits = "".join(ch for ch in piece if ch.isdigit())
        parts.append(int(digits or 0))
    while len(parts) < 3:
        parts.append(0)
    return VersionInfo(*parts)


def default_user_agent() -> str:
    """'ipfs-sdk-py/M.N', where M and N are the major and minor version numbers."""
    info = version_info()
    return f"ipfs-sdk-py/{info.major}.{info.minor}"


__all__ = ["__version__", "VersionInfo", "version_info", "default_user_agent"]
