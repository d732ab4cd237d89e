"""Unix-fs nodes (files and directories) backed by the daemon."""

from __future__ import annotations

from .node import FileSystemLink, FileSystemNode

__all__ = ["FileSystemNode", "FileSystemLink"]
