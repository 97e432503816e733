"""Custom exceptions and error handling utilities for listing image uploads."""

from __future__ import annotations

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, TypeVar

from .logging_config import get_logger


class ListingImagesError(Exception):
    """Base exception for all listing image errors."""


class DecodeError(ListingImagesError):
    """Raised when a source image cannot be decoded."""


class EncodeError(ListingImagesError):
    """Raised when a resized variant cannot be serialized."""


class StorageError(ListingImagesError):
    """Raised when a remote storage put or lookup fails."""


class BatchStartError(ListingImagesError):
    """Raised when a batch could not begin any per-image work."""


class ThumbnailUnavailableError(ListingImagesError):
    """Raised when the thumbnail subsystem cannot be used at all."""


class ConfigurationError(ListingImagesError):
    """Error raised for invalid configuration options."""


class ProgressTransitionError(ListingImagesError):
    """Raised on an illegal upload progress transition."""


class NoImagesUploadedError(ListingImagesError):
    """Raised when a required image upload produced no stored images."""


F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(func: F) -> F:
    """Wrap a function so unexpected errors surface as ``EncodeError``."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:  # type: ignore[override]
        logger = get_logger("thumbnails")
        try:
            return func(*args, **kwargs)
        except ListingImagesError:
            logger.debug(f"Pipeline error in {func.__name__}", exc_info=True)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Unhandled error in {func.__name__}: {exc}", exc_info=True)
            raise EncodeError(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


@contextmanager
def batch_error_handler() -> Iterator[None]:
    """Context manager translating any failure of a batch stage into ``BatchStartError``."""
    try:
        yield
    except BatchStartError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise BatchStartError(str(exc) or "Batch upload failed") from exc
