"""
ipfs_sdk.rpc
------------

HTTP transport for the daemon's ``/api/v0`` command surface.

    from ipfs_sdk.rpc import HttpApi
    api = HttpApi("http://localhost:5001")
    text = await api.do_command("version")
"""

from __future__ import annotations

from .http import HttpApi, ResponseStream, build_query, decode_json, raise_for_status

__all__ = ["HttpApi", "ResponseStream", "build_query", "decode_json", "raise_for_status"]
