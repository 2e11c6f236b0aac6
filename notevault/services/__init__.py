"""
Services layer for NoteVault.

Provides the coordinator that every caller goes through.
"""

from notevault.services.coordinator import ConsistencyCoordinator

__all__ = ["ConsistencyCoordinator"]
