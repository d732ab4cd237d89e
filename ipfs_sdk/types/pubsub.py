"""
`PublishedMessage`: one record of a ``pubsub/sub`` stream.

The daemon emits one JSON object per line::

    {"from": "<base64 peer id>", "seqno": "<base64>", "data": "<base64>",
     "topicIDs": ["topic"]}

The sender is re-encoded as the usual base58 peer id; everything else is
decoded once at construction and the message is immutable afterwards.
"""

from __future__ import annotations

import base64
import io
import json
from dataclasses import dataclass
from typing import Any, Mapping, Tuple, Union

import base58

from ..errors import ResponseFormatError, UnsupportedOperation
from .core import Peer


@dataclass(frozen=True)
class PublishedMessage:
    sender: Peer
    sequence_number: bytes
    data_bytes: bytes
    topics: Tuple[str, ...]

    @classmethod
    def from_json(cls, record: Union[str, bytes, Mapping[str, Any]]) -> "PublishedMessage":
        try:
            obj = json.loads(record) if isinstance(record, (str, bytes)) else record
            sender = base58.b58encode(base64.b64decode(obj["from"])).decode("ascii")
            seqno = base64.b64decode(obj.get("seqno") or "")
            data = base64.b64decode(obj.get("data") or "")
            topics = obj.get("topicIDs")
            if topics is None:
                topics = obj.get("topics") or []
        except (ValueError, KeyError, TypeError) as e:
            raise ResponseFormatError(f"malformed pubsub message: {e}", command="pubsub/sub") from e
        return cls(
            sender=Peer(id=sender),
            sequence_number=seqno,
            data_bytes=data,
            topics=tuple(str(t) for t in topics),
        )

    @property
    def id(self):  # noqa: ANN201
        raise UnsupportedOperation("PublishedMessage.id")

    @property
    def data_stream(self) -> io.BytesIO:
        return io.BytesIO(self.data_bytes)

    @property
    def data_string(self) -> str:
        return self.data_bytes.decode("utf-8")

    @property
    def size(self) -> int:
        return len(self.data_bytes)


__all__ = ["PublishedMessage"]
