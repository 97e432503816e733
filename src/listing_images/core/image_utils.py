"""Image sizing and storage path utilities."""

import mimetypes
from typing import Optional, Tuple

PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/pjpeg": "JPEG",
    "image/png": "PNG",
    "image/webp": "WEBP",
    "image/gif": "GIF",
    "image/bmp": "BMP",
    "image/tiff": "TIFF",
}

CONTENT_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
}

# Formats whose encoder honours a quality setting
LOSSY_FORMATS = frozenset({"JPEG", "WEBP"})


def calculate_target_size(
    width: int, height: int, max_width: int, max_height: int
) -> Tuple[int, int]:
    """
    Calculate resized dimensions preserving aspect ratio.

    Landscape images are clamped on width, portrait and square images on
    height. Images already within the bound keep their size; nothing is
    upscaled.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        max_width: Width bound for landscape images
        max_height: Height bound for portrait and square images

    Returns:
        Tuple of (width, height), each at least 1
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image dimensions: {width}x{height}")

    aspect_ratio = width / height
    target_width, target_height = float(width), float(height)

    if width > height:
        if width > max_width:
            target_width = max_width
            target_height = target_width / aspect_ratio
    else:
        if height > max_height:
            target_height = max_height
            target_width = target_height * aspect_ratio

    return max(1, round(target_width)), max(1, round(target_height))


def file_extension(file_name: str, content_type: Optional[str] = None) -> str:
    """
    Derive the storage extension for a file.

    Uses the text after the last dot of the file name. Names without an
    extension fall back to the MIME type, then to "bin".
    """
    base, dot, ext = file_name.rpartition(".")
    if dot and base and ext:
        return ext

    if content_type:
        guessed = mimetypes.guess_extension(content_type)
        if guessed:
            return guessed.lstrip(".")
    return "bin"


def build_base_path(property_id: str, timestamp: int) -> str:
    """Return the per-image storage prefix ``{property_id}/{timestamp}``."""
    return f"{property_id.strip('/')}/{timestamp}"


def build_variant_path(base_path: str, extension: str, variant: str = "original") -> str:
    """Return the object path of one variant of an image."""
    if variant == "original":
        return f"{base_path}.{extension}"
    return f"{base_path}_{variant}.{extension}"


def pil_format_for(content_type: str, fallback: Optional[str] = None) -> str:
    """Map a MIME type onto a Pillow format name, defaulting to the decoded format or PNG."""
    fmt = PIL_FORMATS.get(content_type.lower().split(";")[0].strip())
    if fmt:
        return fmt
    return fallback or "PNG"


def content_type_for(pil_format: str, default: str = "application/octet-stream") -> str:
    """Map a Pillow format name back onto a MIME type."""
    return CONTENT_TYPES.get(pil_format.upper(), default)
