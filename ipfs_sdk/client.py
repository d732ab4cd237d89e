"""
`IpfsClient`: entry point bundling the HTTP transport and every namespace.

    from ipfs_sdk import IpfsClient

    ipfs = IpfsClient()                       # env IPFS_API_URL / IpfsHttpApi, else localhost:5001
    cid = await ipfs.block.put(b"hello")
    node = ipfs.node(cid)                     # lazy MerkleNode bound to this client
    print(node.block_size)                    # blocking facade; one block/stat

Namespaces: ``bitswap``, ``block``, ``bootstrap``, ``config``, ``dag``, ``dht``,
``dns``, ``filesystem``, ``key``, ``name``, ``object``, ``pin``, ``pubsub``,
``swarm``, plus ``trusted_peers``. Generic commands (`id`, `version`,
`resolve`, `shutdown`) live on the client itself.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional

import httpx

from .api.base import Cancel, expect_object
from .api.bitswap import BitswapApi
from .api.block import BlockApi
from .api.bootstrap import BootstrapApi
from .api.config import ConfigApi
from .api.dag import DagApi
from .api.dht import DhtApi
from .api.dns import DnsApi
from .api.filesystem import FileSystemApi
from .api.key import KeyApi
from .api.name import NameApi
from .api.object import ObjectApi
from .api.pin import PinApi
from .api.pubsub import PubSubApi
from .api.swarm import SwarmApi
from .config import ClientConfig
from .dag.merkle import MerkleNode
from .errors import ResponseFormatError
from .peers import TrustedPeerCollection
from .rpc.http import HttpApi
from .types.cid import CidLike
from .types.core import Peer

log = logging.getLogger(__name__)


class IpfsClient:
    def __init__(
        self,
        api_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = ClientConfig.with_overrides(config, api_url=api_url, request_timeout=timeout)
        self.http = HttpApi(
            self.settings.api_url,
            timeout=self.settings.request_timeout,
            user_agent=self.settings.user_agent,
            transport=transport,
        )

        self.bitswap = BitswapApi(self)
        self.block = BlockApi(self)
        self.bootstrap = BootstrapApi(self)
        self.config = ConfigApi(self)
        self.dag = DagApi(self)
        self.dht = DhtApi(self)
        self.dns = DnsApi(self)
        self.filesystem = FileSystemApi(self)
        self.key = KeyApi(self)
        self.name = NameApi(self)
        self.object = ObjectApi(self)
        self.pin = PinApi(self)
        self.pubsub = PubSubApi(self)
        self.swarm = SwarmApi(self)
        self.trusted_peers = TrustedPeerCollection(self)
        log.debug("IPFS client for %s", self.api_url)

    @property
    def api_url(self) -> str:
        return self.http.base_url

    # --- generic commands ------------------------------------------------

    async def id(self, peer: Optional[str] = None, *, cancel: Cancel = None) -> Peer:
        """Information about this node, or about `peer` when given."""
        obj = expect_object(await self.http.do_command_json("id", peer, cancel=cancel), "id")
        return Peer.from_json(obj)

    async def version(self, *, cancel: Cancel = None) -> Dict[str, Any]:
        return dict(expect_object(await self.http.do_command_json("version", cancel=cancel), "version"))

    async def resolve(self, name: str, recursive: bool = False, *, cancel: Cancel = None) -> str:
        obj = expect_object(await self.http.do_command_json("resolve", name, {"recursive": recursive}, cancel=cancel), "resolve")
        path = obj.get("Path")
        if path is None:
            raise ResponseFormatError("reply has no Path", command="resolve")
        return str(path)

    async def shutdown(self, *, cancel: Cancel = None) -> None:
        await self.http.do_command("shutdown", cancel=cancel)

    # --- helpers ---------------------------------------------------------

    def node(self, id: CidLike, name: Optional[str] = None) -> MerkleNode:
        """A lazy `MerkleNode` bound to this client (no request is made)."""
        return MerkleNode(id, name, client=self)

    def __repr__(self) -> str:
        return f"IpfsClient({self.api_url!r})"


_default_lock = threading.Lock()
_default: Optional[IpfsClient] = None


def default_client() -> IpfsClient:
    """Client used by shells constructed without one; created once, from the environment."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = IpfsClient()
    return _default


def set_default_client(client: Optional[IpfsClient]) -> None:
    global _default
    with _default_lock:
        _default = client


__all__ = ["IpfsClient", "default_client", "set_default_client"]
