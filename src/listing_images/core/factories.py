"""Factory classes for creating configured service instances."""

from typing import Optional

import aioboto3

from .models import UploaderConfig
from .observability import MetricsCollector, StructuredLogger
from .protocols import LoggerProtocol, StorageProtocol
from .storage import S3ImageStorage
from .thumbnails import ThumbnailGenerator
from .uploader import BatchUploader, Clock, current_time_ms


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, debug: bool = False) -> LoggerProtocol:
        """Create a structured logger; ``debug`` forces DEBUG level."""
        return StructuredLogger(name, level="DEBUG" if debug else None)


class StorageFactory:
    """Factory for creating storage instances."""

    @staticmethod
    def create_storage(
        config: UploaderConfig, session: Optional[aioboto3.Session] = None
    ) -> S3ImageStorage:
        """Create S3 storage for the configured bucket."""
        return S3ImageStorage.from_config(config, session=session)


class UploaderFactory:
    """Factory for creating a fully wired batch uploader."""

    @staticmethod
    def create_uploader(
        config: Optional[UploaderConfig] = None,
        storage: Optional[StorageProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        clock: Clock = current_time_ms,
    ) -> BatchUploader:
        """
        Create a BatchUploader.

        The returned uploader uses ``storage`` as given; when it is omitted an
        S3ImageStorage is built from ``config``, and the caller must open it
        with ``async with uploader.storage`` before uploading.
        """
        if config is None:
            config = UploaderConfig.from_env()

        if storage is None:
            storage = StorageFactory.create_storage(config)

        if logger is None:
            logger = LoggerFactory.create_logger("listing-images.uploader", config.debug)

        thumbnail_generator = ThumbnailGenerator(presets=config.presets)

        return BatchUploader(
            storage=storage,
            thumbnail_generator=thumbnail_generator,
            logger=logger,
            metrics_collector=metrics_collector,
            clock=clock,
        )
