"""
Typed error classes for the Python SDK.

These are raised by the HTTP transport, the API namespaces and the lazy DAG
shells so callers can catch specific failure modes while still being able to
catch the base `IpfsSdkError`.

- `InvalidArgument`      : bad identifier/path/peer given to a constructor or
                           method; raised before any network traffic.
- `RequestError`         : the daemon answered with a non-success status (or
                           an in-band ``Error``), or could not be reached.
- `UnsupportedOperation` : placeholder operation; never touches the network.
- `ResponseFormatError`  : the daemon replied with a shape we do not know.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

__all__ = [
    "IpfsSdkError",
    "InvalidArgument",
    "RequestError",
    "UnsupportedOperation",
    "ResponseFormatError",
]


class IpfsSdkError(Exception):
    """Base class for all SDK errors."""


@dataclass(slots=True, eq=False)
class InvalidArgument(IpfsSdkError, ValueError):
    """Raised synchronously when an argument cannot possibly be sent."""

    message: str
    argument: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.argument:
            return f"{self.message} (argument={self.argument})"
        return self.message


@dataclass(slots=True, eq=False)
class RequestError(IpfsSdkError):
    """
    Raised when an API command fails.

    Fields:
      - message: the daemon's ``Message`` text, the raw body, or a transport
                 error description
      - command: API command, e.g. ``block/get`` (if known)
      - status_code: HTTP status (None for transport failures and in-band errors)
      - url: full request URL (if known)
    """

    message: str
    command: Optional[str] = None
    status_code: Optional[int] = None
    url: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [self.message]
        if self.command:
            parts.append(f"cmd={self.command}")
        if self.status_code is not None:
            parts.append(f"http={self.status_code}")
        return " ".join(parts)


@dataclass(slots=True, eq=False)
class UnsupportedOperation(IpfsSdkError, NotImplementedError):
    """Raised by operations this client deliberately does not implement."""

    operation: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.operation} is not supported by this client"


@dataclass(slots=True, eq=False)
class ResponseFormatError(IpfsSdkError, ValueError):
    """Raised when a response does not match any known shape of a command."""

    message: str
    command: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.command:
            return f"{self.message} [{self.command}]"
        return self.message
