"""
HTTP transport for the IPFS daemon API (async, httpx).

Every command is a request to ``<base>/api/v0/<command>``. The query string
carries the positional ``arg`` value(s) first, followed by ``key=value`` option
flags in the order given.

- `do_command`      : POST, buffered text body
- `do_command_json` : POST, body decoded as JSON
- `download`        : GET, streamed body (`ResponseStream`)
- `post_download`   : POST, streamed body (pubsub/sub, dht/findprovs)
- `upload`          : POST multipart/form-data with a single ``file`` field

Each call opens its own `httpx.AsyncClient`, so one `HttpApi` may be used from
any event loop. A custom `transport` (e.g. `httpx.MockTransport` in tests) is
shared by those clients and must tolerate being closed more than once.

Example:
    api = HttpApi("http://localhost:5001")
    info = await api.do_command_json("id")
    print(info["ID"])
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    AsyncIterator,
    BinaryIO,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import httpx

from ..errors import RequestError, ResponseFormatError
from ..utils.aio import with_cancel
from ..version import default_user_agent

log = logging.getLogger(__name__)

Args = Union[None, str, Sequence[str]]
Options = Union[None, Mapping[str, Any], Iterable[Tuple[str, Any]]]
Payload = Union[bytes, bytearray, BinaryIO]


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(arg: Args = None, options: Options = None) -> List[Tuple[str, str]]:
    """Positional ``arg`` values first, then options; ``None`` options are dropped."""
    params: List[Tuple[str, str]] = []
    if arg is not None:
        if isinstance(arg, str):
            params.append(("arg", arg))
        else:
            params.extend(("arg", str(a)) for a in arg)
    if options:
        items = options.items() if isinstance(options, Mapping) else options
        for key, value in items:
            if value is None:
                continue
            params.append((key, _render(value)))
    return params


class ResponseStream:
    """
    A streamed response body. Owns both the response and the client that
    produced it; `aclose()` releases both. Usable as an async context manager.
    """

    def __init__(self, response: httpx.Response, client: httpx.AsyncClient) -> None:
        self._response = response
        self._client = client
        self._closed = False

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def closed(self) -> bool:
        return self._closed

    async def aiter_bytes(self, chunk_size: Optional[int] = None) -> AsyncIterator[bytes]:
        async for chunk in self._response.aiter_bytes(chunk_size):
            if chunk:
                yield chunk

    async def aiter_lines(self) -> AsyncIterator[str]:
        async for line in self._response.aiter_lines():
            line = line.rstrip("\r\n")
            if line:
                yield line

    async def aread(self) -> bytes:
        try:
            return await self._response.aread()
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._response.aclose()
        finally:
            await self._client.aclose()

    async def __aenter__(self) -> "ResponseStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()


@dataclass
class HttpApi:
    """Async client for ``/api/v0`` commands."""

    base_url: str
    timeout: float = 60.0
    user_agent: str = field(default_factory=default_user_agent)
    transport: Optional[httpx.AsyncBaseTransport] = None

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    # --- public API ------------------------------------------------------

    def command_url(self, command: str) -> str:
        return f"{self.base_url}/api/v0/{command}"

    async def do_command(
        self,
        command: str,
        arg: Args = None,
        options: Options = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> str:
        """POST a command and return the response body as text."""
        return await with_cancel(self._post_text(command, arg, options), cancel)

    async def do_command_json(
        self,
        command: str,
        arg: Args = None,
        options: Options = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> Any:
        """POST a command and decode the JSON body (``None`` for an empty body)."""
        body = await self.do_command(command, arg, options, cancel=cancel)
        return decode_json(body, command)

    async def download(
        self,
        command: str,
        arg: Args = None,
        options: Options = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> ResponseStream:
        """GET a command and return its body as a stream. The caller closes it."""
        return await with_cancel(self._open_stream("GET", command, arg, options), cancel)

    async def download_bytes(
        self,
        command: str,
        arg: Args = None,
        options: Options = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> bytes:
        stream = await self.download(command, arg, options, cancel=cancel)
        return await with_cancel(stream.aread(), cancel)

    async def post_download(
        self,
        command: str,
        arg: Args = None,
        options: Options = None,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> ResponseStream:
        """POST a command whose reply is a long-lived stream (NDJSON)."""
        return await with_cancel(self._open_stream("POST", command, arg, options), cancel)

    async def upload(
        self,
        command: str,
        data: Payload,
        *,
        name: Optional[str] = None,
        arg: Args = None,
        options: Options = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> str:
        """POST ``data`` as the multipart ``file`` field and return the text body."""
        if isinstance(data, bytearray):
            data = bytes(data)
        files = {"file": (name or "", data, "application/octet-stream")}
        return await with_cancel(self._post_text(command, arg, options, files=files), cancel)

    # --- internals -------------------------------------------------------

    def _session(self, *, streaming: bool = False) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.timeout, read=None) if streaming else httpx.Timeout(self.timeout)
        return httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )

    async def _send(
        self,
        client: httpx.AsyncClient,
        request: httpx.Request,
        command: str,
        *,
        stream: bool = False,
    ) -> httpx.Response:
        log.debug("%s %s", request.method, request.url)
        try:
            return await client.send(request, stream=stream)
        except httpx.TransportError as e:
            raise RequestError(
                str(e) or e.__class__.__name__, command=command, url=str(request.url)
            ) from e

    async def _post_text(
        self,
        command: str,
        arg: Args,
        options: Options,
        *,
        files: Optional[Mapping[str, Any]] = None,
    ) -> str:
        async with self._session() as client:
            request = client.build_request(
                "POST", self.command_url(command), params=build_query(arg, options), files=files
            )
            resp = await self._send(client, request, command)
            await raise_for_status(resp, command)
            body = resp.text
            log.debug("RSP %s", body)
            return body

    async def _open_stream(self, method: str, command: str, arg: Args, options: Options) -> ResponseStream:
        client = self._session(streaming=True)
        try:
            request = client.build_request(method, self.command_url(command), params=build_query(arg, options))
            resp = await self._send(client, request, command, stream=True)
            try:
                await raise_for_status(resp, command)
            except BaseException:
                await resp.aclose()
                raise
        except BaseException:
            await client.aclose()
            raise
        return ResponseStream(resp, client)


async def raise_for_status(resp: httpx.Response, command: Optional[str] = None) -> None:
    """
    Map an unsuccessful response to `RequestError`.

    404 means the daemon does not know the command. Any other failure carries
    the ``Message`` of the daemon's JSON error, or the raw body when that body
    is not the expected JSON.
    """
    if resp.is_success:
        return
    await resp.aread()
    body = resp.text
    log.debug("ERR %s", body)
    url = str(resp.request.url)
    if resp.status_code == 404:
        message = f"Invalid IPFS command: {url}"
    else:
        try:
            message = str(json.loads(body)["Message"])
        except (ValueError, KeyError, TypeError):
            message = body
    raise RequestError(message, command=command, status_code=resp.status_code, url=url)


def decode_json(body: str, command: Optional[str] = None) -> Any:
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError as e:
        raise ResponseFormatError(f"response is not valid JSON: {body[:128]!r}", command=command) from e


__all__ = ["HttpApi", "ResponseStream", "build_query", "raise_for_status", "decode_json"]
