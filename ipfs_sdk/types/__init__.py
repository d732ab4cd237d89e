"""
ipfs_sdk.types
==============

Value types shared by the API namespaces:

- :mod:`ipfs_sdk.types.cid`    : `to_cid` and path helpers over `multiformats.CID`
- :mod:`ipfs_sdk.types.core`   : Peer, KeyInfo, NamedContent, ObjectStat
- :mod:`ipfs_sdk.types.pubsub` : PublishedMessage
"""

from __future__ import annotations

from .cid import CID, CidLike, ipfs_path, to_cid
from .core import KeyInfo, NamedContent, ObjectStat, Peer, parse_multiaddr, peer_id_of
from .pubsub import PublishedMessage

__all__ = [
    "CID",
    "CidLike",
    "to_cid",
    "ipfs_path",
    "Peer",
    "KeyInfo",
    "NamedContent",
    "ObjectStat",
    "PublishedMessage",
    "parse_multiaddr",
    "peer_id_of",
]
