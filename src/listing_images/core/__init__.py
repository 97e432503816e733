"""Core components of the listing image upload pipeline."""

from .image_utils import (
    build_base_path,
    build_variant_path,
    calculate_target_size,
    file_extension,
)
from .logging_config import get_logger, setup_logger
from .exceptions import (
    ListingImagesError,
    DecodeError,
    EncodeError,
    StorageError,
    BatchStartError,
    ThumbnailUnavailableError,
    ConfigurationError,
    ProgressTransitionError,
    NoImagesUploadedError,
    with_error_handling,
    batch_error_handler,
)
from .models import (
    DEFAULT_PRESETS,
    BatchUploadResult,
    ImageVariant,
    ImageVariantSet,
    SourceImage,
    StoredImageRecord,
    ThumbnailPreset,
    UploadError,
    UploaderConfig,
    UploadProgressEntry,
    UploadStatus,
)

__all__ = [
    "DEFAULT_PRESETS",
    "BatchUploadResult",
    "ImageVariant",
    "ImageVariantSet",
    "SourceImage",
    "StoredImageRecord",
    "ThumbnailPreset",
    "UploadError",
    "UploaderConfig",
    "UploadProgressEntry",
    "UploadStatus",
    "build_base_path",
    "build_variant_path",
    "calculate_target_size",
    "file_extension",
    "setup_logger",
    "get_logger",
    "ListingImagesError",
    "DecodeError",
    "EncodeError",
    "StorageError",
    "BatchStartError",
    "ThumbnailUnavailableError",
    "ConfigurationError",
    "ProgressTransitionError",
    "NoImagesUploadedError",
    "with_error_handling",
    "batch_error_handler",
]
