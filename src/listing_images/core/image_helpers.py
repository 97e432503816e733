"""Helpers for consumers of stored listing images."""

from typing import Iterable, List, Literal, Union

from .models import StoredImageRecord
from .protocols import StorageProtocol

ImageInput = Union[StoredImageRecord, dict, str]
ImageSize = Literal["original", "small", "medium", "large"]


def normalize_image(image: ImageInput) -> StoredImageRecord:
    """
    Convert one stored image entry to a StoredImageRecord.

    Legacy entries are bare path strings; they become a record whose four
    sizes all point at that path. Dicts are validated as records.
    """
    if isinstance(image, StoredImageRecord):
        return image
    if isinstance(image, str):
        return StoredImageRecord.single(image)
    return StoredImageRecord.model_validate(image)


def normalize_image_data(images: Iterable[ImageInput]) -> List[StoredImageRecord]:
    """Normalize a property's ``images`` list, preserving order."""
    return [normalize_image(image) for image in images]


def get_image_url(
    storage: StorageProtocol, image: ImageInput, size: ImageSize = "medium"
) -> str:
    """Public URL of an image at the requested size, falling back to the original."""
    record = normalize_image(image)
    path = getattr(record, size) or record.original
    return storage.get_public_url(path)


def get_thumbnail_url(storage: StorageProtocol, image: ImageInput) -> str:
    """Small size, used for property cards."""
    return get_image_url(storage, image, "small")


def get_main_image_url(storage: StorageProtocol, image: ImageInput) -> str:
    return get_image_url(storage, image, "medium")


def get_large_image_url(storage: StorageProtocol, image: ImageInput) -> str:
    return get_image_url(storage, image, "large")


def get_original_image_url(storage: StorageProtocol, image: ImageInput) -> str:
    return get_image_url(storage, image, "original")
