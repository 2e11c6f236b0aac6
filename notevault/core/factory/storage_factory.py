"""
Factory for creating record storage backends.
"""

from notevault.config import StorageConfig
from notevault.core.storage.base import RecordBackend
from notevault.core.storage.filesystem import FileSystemBackend
from notevault.core.storage.memory import InMemoryBackend
from notevault.utils.exceptions import ConfigurationError


class StorageFactory:
    """Factory for creating storage backends from configuration."""

    @staticmethod
    def create(config: StorageConfig) -> RecordBackend:
        """
        Create storage backend from configuration.

        Args:
            config: Storage configuration

        Returns:
            Record backend instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "filesystem":
            return FileSystemBackend(data_dir=config.data_dir)
        elif config.backend == "memory":
            return InMemoryBackend()
        else:
            raise ConfigurationError(
                f"Unsupported storage backend: {config.backend}",
                context={"backend": config.backend},
            )
