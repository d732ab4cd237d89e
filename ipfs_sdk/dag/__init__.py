"""
ipfs_sdk.dag
============

Merkle-DAG object model.

- `DagLink`, `DagNode` : local, immutable values with a locally computed id
- `MerkleNode`         : lazy shell over an object stored on the daemon
- `Block`              : raw block payload as returned by ``block/get``
"""

from __future__ import annotations

from .block import Block
from .merkle import MerkleNode
from .node import DEFAULT_HASH, DagLink, DagNode

__all__ = ["Block", "DagLink", "DagNode", "MerkleNode", "DEFAULT_HASH"]
