from __future__ import annotations

import io
from typing import Optional

from multiformats import CID


class Block:
    """A raw block: identifier plus payload. `size` is the payload length unless set."""

    __slots__ = ("id", "data_bytes", "_size")

    def __init__(self, id: CID, data_bytes: bytes = b"", size: Optional[int] = None) -> None:
        self.id = id
        self.data_bytes = data_bytes
        self._size = size

    @property
    def size(self) -> int:
        return self._size if self._size is not None else len(self.data_bytes)

    @size.setter
    def size(self, value: Optional[int]) -> None:
        self._size = value

    @property
    def data_stream(self) -> io.BytesIO:
        return io.BytesIO(self.data_bytes)

    def __repr__(self) -> str:
        return f"Block(id={self.id}, size={self.size})"


__all__ = ["Block"]
