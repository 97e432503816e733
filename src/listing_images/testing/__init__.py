"""Testing utilities and fakes for listing image uploads."""

from .fakes import (
    BrokenThumbnailGenerator,
    FakeLogger,
    FakeStorage,
    StoredObject,
    UnavailableThumbnailGenerator,
    create_source_image,
    create_test_image,
)

__all__ = [
    "BrokenThumbnailGenerator",
    "FakeLogger",
    "FakeStorage",
    "StoredObject",
    "UnavailableThumbnailGenerator",
    "create_source_image",
    "create_test_image",
]
