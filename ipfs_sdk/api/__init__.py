"""
ipfs_sdk.api
============

One class per daemon command group, reached through `IpfsClient` attributes
(``client.block``, ``client.object``, ``client.pubsub``, ...). All operations are
coroutines accepting an optional ``cancel`` event.
"""

from __future__ import annotations

from .bitswap import BitswapApi
from .block import BlockApi
from .bootstrap import BootstrapApi
from .config import ConfigApi
from .dag import DagApi
from .dht import DhtApi
from .dns import DnsApi
from .filesystem import AddFileOptions, FileSystemApi
from .key import KeyApi
from .name import NameApi
from .object import ObjectApi
from .pin import PinApi
from .pubsub import PubSubApi, Subscription
from .swarm import SwarmApi

__all__ = [
    "AddFileOptions",
    "BitswapApi",
    "BlockApi",
    "BootstrapApi",
    "ConfigApi",
    "DagApi",
    "DhtApi",
    "DnsApi",
    "FileSystemApi",
    "KeyApi",
    "NameApi",
    "ObjectApi",
    "PinApi",
    "PubSubApi",
    "Subscription",
    "SwarmApi",
]
