"""Parallel image ingestion for property listings."""

from .core.factories import UploaderFactory
from .core.image_helpers import get_image_url, normalize_image_data
from .core.models import BatchUploadResult, SourceImage, StoredImageRecord, UploaderConfig
from .core.uploader import BatchUploader, require_uploaded_images

__version__ = "0.1.0"

__all__ = [
    "BatchUploader",
    "BatchUploadResult",
    "SourceImage",
    "StoredImageRecord",
    "UploaderConfig",
    "UploaderFactory",
    "get_image_url",
    "normalize_image_data",
    "require_uploaded_images",
]
