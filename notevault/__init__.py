"""NoteVault - local note store with dense ordering and consistent cascades."""

__version__ = "0.1.0"
