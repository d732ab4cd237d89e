from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..errors import ResponseFormatError
from ..rpc.http import Args, HttpApi, Options, Payload, decode_json

if TYPE_CHECKING:  # pragma: no cover
    from ..client import IpfsClient

Cancel = Optional[asyncio.Event]


def expect_object(value: Any, command: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ResponseFormatError(f"expected a JSON object, got {type(value).__name__}", command=command)
    return value


class ApiNamespace:
    """Common plumbing for the ``client.<namespace>`` objects."""

    def __init__(self, client: "IpfsClient") -> None:
        self._client = client

    @property
    def http(self) -> HttpApi:
        return self._client.http

    async def _json(self, command: str, arg: Args = None, options: Options = None, *, cancel: Cancel = None) -> Mapping[str, Any]:
        """Run a command whose reply must be a JSON object."""
        result = await self.http.do_command_json(command, arg, options, cancel=cancel)
        return expect_object(result, command)

    async def _upload_json(
        self,
        command: str,
        data: Payload,
        *,
        name: Optional[str] = None,
        arg: Args = None,
        options: Options = None,
        cancel: Cancel = None,
    ) -> Mapping[str, Any]:
        body = await self.http.upload(command, data, name=name, arg=arg, options=options, cancel=cancel)
        return expect_object(decode_json(body, command), command)


__all__ = ["ApiNamespace", "Cancel", "expect_object"]
