"""Protocol definitions for dependency injection and testability."""

from typing import Any, Dict, Protocol, Sequence, Union

from .exceptions import ListingImagesError
from .models import ImageVariantSet, SourceImage


class StorageProtocol(Protocol):
    """Protocol for remote object storage operations."""

    async def put(self, path: str, data: bytes, content_type: str) -> None:
        """Store an object, raising StorageError on failure."""
        ...

    def get_public_url(self, path: str) -> str:
        """Public URL of a stored object."""
        ...


class ThumbnailGeneratorProtocol(Protocol):
    """Protocol for variant generation."""

    def ensure_available(self) -> None:
        """Raise if variants cannot be generated at all."""
        ...

    async def generate_variants(self, image: SourceImage) -> ImageVariantSet:
        """Generate the variant set of one image."""
        ...

    async def generate_variants_batch(
        self, images: Sequence[SourceImage]
    ) -> Dict[int, Union[ImageVariantSet, ListingImagesError]]:
        """Generate variant sets for many images, keyed by index."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...
