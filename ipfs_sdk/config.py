"""
SDK configuration: API endpoint, timeouts and identity.

- Loads sane defaults and supports overrides via environment variables.
- The daemon endpoint honours the historical ``IpfsHttpApi`` variable as well
  as ``IPFS_API_URL`` (the latter wins when both are set).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .version import default_user_agent

DEFAULT_API_URL = "http://localhost:5001"
API_URL_ENV_VARS = ("IPFS_API_URL", "IpfsHttpApi")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def api_url_from_env(default: str = DEFAULT_API_URL) -> str:
    """Return the daemon URL configured in the environment, or `default`."""
    for name in API_URL_ENV_VARS:
        value = _env(name)
        if value:
            return value
    return default


@dataclass(slots=True)
class ClientConfig:
    api_url: str = field(default_factory=lambda: DEFAULT_API_URL)
    # Seconds; streamed responses (pubsub, downloads) are never read-limited.
    request_timeout: float = 60.0
    user_agent: str = field(default_factory=default_user_agent)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Create config from environment variables:

        IPFS_API_URL / IpfsHttpApi  (http/https)
        IPFS_TIMEOUT                (float seconds)
        IPFS_USER_AGENT             (str)
        """
        url = api_url_from_env()
        timeout = float(_env("IPFS_TIMEOUT", "60.0") or 60.0)
        ua = _env("IPFS_USER_AGENT", None)

        _ensure_scheme(url, ("http", "https"))

        return cls(
            api_url=url,
            request_timeout=timeout,
            user_agent=ua or default_user_agent(),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["ClientConfig"] = None, **overrides: Any
    ) -> "ClientConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys and ``None`` values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        if overrides.get("api_url") is not None:
            _ensure_scheme(data["api_url"], ("http", "https"))
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api_url": self.api_url,
            "request_timeout": float(self.request_timeout),
            "user_agent": self.user_agent,
        }


__all__ = ["ClientConfig", "DEFAULT_API_URL", "api_url_from_env"]
