"""Per-note canvas store."""

from notevault.core.canvas_store.canvas_store import CanvasStore

__all__ = ["CanvasStore"]
