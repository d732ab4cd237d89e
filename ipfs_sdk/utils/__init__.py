"""Internal helpers (event-loop bridging, blocking stream adapters)."""

from .aio import SyncReader, run_sync, signal_event, with_cancel

__all__ = ["run_sync", "with_cancel", "signal_event", "SyncReader"]
