"""Thumbnail generation: one source image in, three resized variants out."""

import asyncio
import io
import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from .exceptions import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    ListingImagesError,
    ThumbnailUnavailableError,
    with_error_handling,
)
from .image_utils import (
    LOSSY_FORMATS,
    PIL_FORMATS,
    calculate_target_size,
    content_type_for,
    pil_format_for,
)
from .logging_config import get_logger
from .models import DEFAULT_PRESETS, ImageVariant, ImageVariantSet, SourceImage, ThumbnailPreset

VariantOutcome = Union[ImageVariantSet, ListingImagesError]

REQUIRED_PRESETS = ("small", "medium", "large")


class ThumbnailGenerator:
    """
    Generates the small/medium/large variants of an image using Pillow.

    Decoding and encoding run in worker threads so that many images can be
    processed concurrently from a single event loop. The original variant is
    always the untouched input bytes.
    """

    def __init__(
        self,
        presets: Sequence[ThumbnailPreset] = DEFAULT_PRESETS,
        resample: Image.Resampling = Image.Resampling.LANCZOS,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize thumbnail generator.

        Args:
            presets: Exactly one preset for each of small, medium and large
            resample: Pillow resampling filter used for downscaling
            logger: Optional logger instance
        """
        names = sorted(preset.name for preset in presets)
        if names != sorted(REQUIRED_PRESETS):
            raise ConfigurationError(
                f"Presets must be exactly {', '.join(REQUIRED_PRESETS)}; got {names}"
            )
        self.presets: Tuple[ThumbnailPreset, ...] = tuple(
            sorted(presets, key=lambda preset: REQUIRED_PRESETS.index(preset.name))
        )
        self.resample = resample
        self.logger = logger or get_logger("listing-images.thumbnails")

    def ensure_available(self) -> None:
        """Raise ThumbnailUnavailableError if Pillow cannot encode the common formats."""
        try:
            Image.init()
            missing = [fmt for fmt in ("JPEG", "PNG") if fmt not in Image.SAVE]
        except Exception as exc:  # noqa: BLE001
            raise ThumbnailUnavailableError(f"Image codecs could not be loaded: {exc}") from exc
        if missing:
            raise ThumbnailUnavailableError(
                f"Image encoders unavailable: {', '.join(missing)}"
            )

    async def generate_variants(self, image: SourceImage) -> ImageVariantSet:
        """
        Produce the variant set for one image.

        Raises:
            DecodeError: The input is not a readable image
            EncodeError: A resized variant could not be serialized
        """
        width, height = await asyncio.to_thread(self._probe, image)

        small, medium, large = await asyncio.gather(
            *(asyncio.to_thread(self._render, image, preset) for preset in self.presets)
        )

        original = ImageVariant(
            name="original",
            content_type=image.content_type,
            width=width,
            height=height,
            data=image.data,
        )
        self.logger.debug(
            f"[{image.name}] Generated variants: "
            f"{small.width}x{small.height}, {medium.width}x{medium.height}, "
            f"{large.width}x{large.height}"
        )
        return ImageVariantSet(original=original, small=small, medium=medium, large=large)

    async def generate_variants_batch(
        self, images: Sequence[SourceImage]
    ) -> Dict[int, VariantOutcome]:
        """
        Generate variants for every image concurrently.

        A failure for one image does not stop the others: its slot in the
        returned mapping holds the error instead of a variant set.
        """
        outcomes = await asyncio.gather(
            *(self.generate_variants(image) for image in images),
            return_exceptions=True,
        )

        results: Dict[int, VariantOutcome] = {}
        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, ListingImagesError):
                self.logger.warning(f"[{images[index].name}] Variant generation failed: {outcome}")
                results[index] = outcome
            elif isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                error = EncodeError(str(outcome) or "Variant generation failed")
                error.__cause__ = outcome
                results[index] = error
            else:
                results[index] = outcome
        return results

    def _decode(self, image: SourceImage) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(image.data))
            img.load()
        except (
            UnidentifiedImageError,
            OSError,
            SyntaxError,
            ValueError,
            Image.DecompressionBombError,
        ) as exc:
            raise DecodeError(f"Failed to load image {image.name}: {exc}") from exc
        source_format = img.format
        img = ImageOps.exif_transpose(img)
        img.format = source_format
        return img

    def _probe(self, image: SourceImage) -> Tuple[int, int]:
        return self._decode(image).size

    @with_error_handling
    def _render(self, image: SourceImage, preset: ThumbnailPreset) -> ImageVariant:
        img = self._decode(image)
        output_format = pil_format_for(image.content_type, img.format)

        width, height = calculate_target_size(
            img.width, img.height, preset.max_width, preset.max_height
        )
        if (width, height) != img.size:
            img = img.resize((width, height), self.resample)
        img = self._convert_color_mode(img, output_format)

        output = io.BytesIO()
        try:
            img.save(output, format=output_format, **self._save_options(output_format, preset))
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(
                f"Failed to encode {preset.name} variant of {image.name}: {exc}"
            ) from exc

        if image.content_type.lower() in PIL_FORMATS:
            content_type = image.content_type
        else:
            content_type = content_type_for(output_format)

        return ImageVariant(
            name=preset.name,
            content_type=content_type,
            width=width,
            height=height,
            data=output.getvalue(),
            quality=preset.quality,
        )

    @staticmethod
    def _save_options(output_format: str, preset: ThumbnailPreset) -> Dict[str, Any]:
        if output_format in LOSSY_FORMATS:
            return {"quality": round(preset.quality * 100), "optimize": True}
        if output_format == "PNG":
            return {"optimize": True}
        return {}

    @staticmethod
    def _convert_color_mode(img: Image.Image, output_format: str) -> Image.Image:
        """Convert modes the target encoder cannot write."""
        if output_format == "JPEG" and img.mode not in ("RGB", "L", "CMYK"):
            return img.convert("RGB")
        if output_format == "WEBP" and img.mode not in ("RGB", "RGBA"):
            return img.convert("RGBA" if "A" in img.getbands() else "RGB")
        return img
