"""Command-line interface (`ipfs-sdk`)."""

from .main import app, main, run  # noqa: F401

__all__ = ["app", "main", "run"]
