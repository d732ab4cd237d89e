"""
IPFS SDK for Python
Async client for the IPFS daemon HTTP API with a lazy merkle-DAG object model.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import ClientConfig, DEFAULT_API_URL  # noqa: F401
from .errors import (  # noqa: F401
    IpfsSdkError,
    InvalidArgument,
    RequestError,
    ResponseFormatError,
    UnsupportedOperation,
)

# Transport
from .rpc.http import HttpApi, ResponseStream  # noqa: F401

# Client & namespaces
from .client import IpfsClient, default_client, set_default_client  # noqa: F401
from .api import AddFileOptions, Subscription  # noqa: F401
from .peers import TrustedPeerCollection  # noqa: F401

# Object model
from .dag import Block, DagLink, DagNode, MerkleNode  # noqa: F401
from .filesystem import FileSystemLink, FileSystemNode  # noqa: F401
from .types import CID, KeyInfo, NamedContent, ObjectStat, Peer, PublishedMessage, to_cid  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "ClientConfig", "DEFAULT_API_URL",
    "IpfsSdkError", "InvalidArgument", "RequestError", "ResponseFormatError", "UnsupportedOperation",
    # Transport
    "HttpApi", "ResponseStream",
    # Client
    "IpfsClient", "default_client", "set_default_client",
    "AddFileOptions", "Subscription", "TrustedPeerCollection",
    # Object model
    "Block", "DagLink", "DagNode", "MerkleNode",
    "FileSystemLink", "FileSystemNode",
    "CID", "to_cid", "KeyInfo", "NamedContent", "ObjectStat", "Peer", "PublishedMessage",
]
