"""Factories for building components from configuration."""

from notevault.core.factory.storage_factory import StorageFactory

__all__ = ["StorageFactory"]
