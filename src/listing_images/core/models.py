"""Shared data models for listing image uploads."""

import mimetypes
import os
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class SourceImage(BaseModel):
    """A raw image selected for upload."""

    model_config = ConfigDict(frozen=True)

    name: str
    content_type: str
    data: bytes = Field(repr=False)

    @classmethod
    def from_path(cls, path: str, content_type: Optional[str] = None) -> "SourceImage":
        """Load a local file, guessing its MIME type from the file name."""
        if content_type is None:
            guessed, _ = mimetypes.guess_type(path)
            content_type = guessed or "application/octet-stream"
        with open(path, "rb") as handle:
            data = handle.read()
        return cls(name=os.path.basename(path), content_type=content_type, data=data)


class ThumbnailPreset(BaseModel):
    """Fixed size and quality for one resized variant."""

    model_config = ConfigDict(frozen=True)

    name: str
    max_width: int = Field(gt=0)
    max_height: int = Field(gt=0)
    quality: float = Field(gt=0, le=1)


DEFAULT_PRESETS: Tuple[ThumbnailPreset, ...] = (
    ThumbnailPreset(name="small", max_width=300, max_height=200, quality=0.8),
    ThumbnailPreset(name="medium", max_width=600, max_height=400, quality=0.85),
    ThumbnailPreset(name="large", max_width=800, max_height=600, quality=0.9),
)

VARIANT_NAMES: Tuple[str, ...] = ("original", "small", "medium", "large")


class ImageVariant(BaseModel):
    """One rendition of a source image."""

    model_config = ConfigDict(frozen=True)

    name: str
    content_type: str
    width: int
    height: int
    data: bytes = Field(repr=False)
    quality: Optional[float] = None


class ImageVariantSet(BaseModel):
    """The original image plus its three resized variants."""

    model_config = ConfigDict(frozen=True)

    original: ImageVariant
    small: ImageVariant
    medium: ImageVariant
    large: ImageVariant

    def as_dict(self) -> Dict[str, ImageVariant]:
        """Return all four variants keyed by name, original first."""
        return {name: getattr(self, name) for name in VARIANT_NAMES}


class StoredImageRecord(BaseModel):
    """Storage paths of one uploaded image, one per size."""

    model_config = ConfigDict(frozen=True)

    original: str
    small: str
    medium: str
    large: str

    @classmethod
    def single(cls, path: str) -> "StoredImageRecord":
        """Record for an image stored once, the same object serving every size."""
        return cls(original=path, small=path, medium=path, large=path)

    def paths(self) -> Tuple[str, str, str, str]:
        return (self.original, self.small, self.medium, self.large)


class UploadStatus(str, Enum):
    """Lifecycle states of one image within a batch."""

    GENERATING = "generating"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    ERROR = "error"


class UploadProgressEntry(BaseModel):
    """Progress of a single image in a batch."""

    image_index: int
    file_name: str
    progress: int = Field(default=0, ge=0, le=100)
    status: UploadStatus = UploadStatus.GENERATING
    error: Optional[str] = None


class UploadError(BaseModel):
    """A failed image in a batch; index -1 means the batch never started."""

    index: int
    error: str


class BatchUploadResult(BaseModel):
    """Aggregate outcome of a batch upload."""

    success: bool
    images: List[StoredImageRecord] = Field(default_factory=list)
    errors: List[UploadError] = Field(default_factory=list)

    @property
    def batch_start_failed(self) -> bool:
        return any(error.index == -1 for error in self.errors)

    def failure_summary(self) -> Optional[str]:
        """Return a user-facing message about failures, or None when there are none."""
        if not self.errors:
            return None
        if self.batch_start_failed:
            return f"Image upload could not start: {self.errors[0].error}"
        count = len(self.errors)
        noun = "image" if count == 1 else "images"
        return f"{count} {noun} failed to upload"


class UploaderConfig(BaseModel):
    """Configuration for the upload pipeline."""

    bucket: str = "images"
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    public_base_url: Optional[str] = None
    presets: Tuple[ThumbnailPreset, ...] = DEFAULT_PRESETS
    debug: bool = False

    @classmethod
    def from_env(cls, **overrides: object) -> "UploaderConfig":
        """Build a config from LISTING_IMAGES_* environment variables."""
        values: Dict[str, object] = {}
        env_map = {
            "bucket": "LISTING_IMAGES_BUCKET",
            "region": "LISTING_IMAGES_REGION",
            "endpoint_url": "LISTING_IMAGES_ENDPOINT_URL",
            "public_base_url": "LISTING_IMAGES_PUBLIC_BASE_URL",
        }
        for field_name, env_var in env_map.items():
            value = os.getenv(env_var)
            if value:
                values[field_name] = value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
