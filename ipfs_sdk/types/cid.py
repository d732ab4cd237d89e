"""
Content identifier helpers.

Identifiers are `multiformats.CID` values throughout the SDK. `to_cid` is the
single entry point that accepts user input (a CID, its string form, a
``/ipfs/<cid>`` path or the binary encoding) and rejects anything unusable with
`InvalidArgument` before a request is made.
"""

from __future__ import annotations

from typing import Union

from multiformats import CID

from ..errors import InvalidArgument

CidLike = Union[CID, str, bytes]

IPFS_PATH_PREFIX = "/ipfs/"


def to_cid(value: CidLike, *, argument: str = "id") -> CID:
    if value is None:
        raise InvalidArgument("content identifier is required", argument)
    if isinstance(value, CID):
        return value
    if isinstance(value, (bytes, bytearray)):
        if not value:
            raise InvalidArgument("content identifier is empty", argument)
        try:
            return CID.decode(bytes(value))
        except Exception as e:
            raise InvalidArgument(f"invalid binary content identifier: {e}", argument) from e
    text = str(value).strip()
    if text.startswith(IPFS_PATH_PREFIX):
        text = text[len(IPFS_PATH_PREFIX):]
    if not text:
        raise InvalidArgument("content identifier is empty", argument)
    try:
        return CID.decode(text)
    except Exception as e:
        raise InvalidArgument(f"invalid content identifier {text!r}: {e}", argument) from e


def ipfs_path(cid: CidLike) -> str:
    return f"{IPFS_PATH_PREFIX}{to_cid(cid)}"


__all__ = ["CID", "CidLike", "IPFS_PATH_PREFIX", "to_cid", "ipfs_path"]
