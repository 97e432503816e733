"""Batch upload of listing images: variants, parallel storage puts, fallback."""

import asyncio
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from .exceptions import (
    BatchStartError,
    ConfigurationError,
    EncodeError,
    NoImagesUploadedError,
    batch_error_handler,
)
from .image_utils import build_base_path, build_variant_path, file_extension
from .models import (
    VARIANT_NAMES,
    BatchUploadResult,
    ImageVariant,
    SourceImage,
    StoredImageRecord,
    UploadError,
)
from .observability import LogContext, MetricsCollector, StructuredLogger
from .progress import ProgressObserver, UploadProgressTracker
from .protocols import LoggerProtocol, StorageProtocol, ThumbnailGeneratorProtocol
from .thumbnails import ThumbnailGenerator, VariantOutcome

Clock = Callable[[], int]
ImageOutcome = Tuple[int, Union[StoredImageRecord, str]]


def current_time_ms() -> int:
    """Milliseconds since the epoch, used as the base of storage file names."""
    return int(time.time() * 1000)


def require_uploaded_images(result: BatchUploadResult) -> BatchUploadResult:
    """Return the result unchanged, or raise if it holds no stored images."""
    if not result.images:
        raise NoImagesUploadedError(result.failure_summary() or "No images were uploaded")
    return result


class BatchUploader:
    """
    Uploads a batch of images for one property.

    ``upload_batch`` stores four objects per image (original plus three
    resized variants). ``upload_simple`` stores only the original.
    ``upload_with_fallback`` tries the former and switches to the latter only
    when the optimized path raises.
    """

    def __init__(
        self,
        storage: StorageProtocol,
        thumbnail_generator: Optional[ThumbnailGeneratorProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        clock: Clock = current_time_ms,
    ):
        self._storage = storage
        self._thumbnails = thumbnail_generator or ThumbnailGenerator()
        self._logger = logger or StructuredLogger("listing-images.uploader")
        self._metrics_collector = metrics_collector
        self._clock = clock

    @property
    def storage(self) -> StorageProtocol:
        return self._storage

    async def upload_batch(
        self,
        files: Sequence[SourceImage],
        property_id: str,
        on_progress: Optional[ProgressObserver] = None,
    ) -> BatchUploadResult:
        """
        Generate variants for every file and upload all of them concurrently.

        Per-image failures are reported in the result. If variant generation
        fails as a whole, every entry is marked as failed and the result holds
        a single error with index -1.

        Raises:
            ConfigurationError: property_id is empty
            ThumbnailUnavailableError: variants cannot be generated at all
        """
        _validate_property_id(property_id)
        self._thumbnails.ensure_available()

        log_context = LogContext(
            operation="upload_batch", component="batch_uploader"
        ).with_metadata(property_id=property_id, file_count=len(files))
        self._logger.info("Starting batch upload", log_context)

        tracker = UploadProgressTracker([file.name for file in files], on_progress)
        tracker.notify()

        try:
            with batch_error_handler():
                variants = await self._thumbnails.generate_variants_batch(files)
        except BatchStartError as exc:
            message = str(exc)
            tracker.mark_all_error(message)
            self._logger.error(
                "Batch upload could not start", log_context.with_metadata(error=message)
            )
            return BatchUploadResult(
                success=False, images=[], errors=[UploadError(index=-1, error=message)]
            )

        base_time = self._clock()
        outcomes = await asyncio.gather(
            *(
                self._upload_image(
                    tracker, index, file, variants.get(index), property_id, base_time, log_context
                )
                for index, file in enumerate(files)
            )
        )

        result = _aggregate(outcomes)
        self._log_result(result, log_context)
        return result

    async def upload_simple(
        self,
        files: Sequence[SourceImage],
        property_id: str,
        on_progress: Optional[ProgressObserver] = None,
    ) -> BatchUploadResult:
        """
        Upload only the original bytes of every file, one object per file.

        Each stored record points all four sizes at that single object.
        """
        _validate_property_id(property_id)

        log_context = LogContext(
            operation="upload_simple", component="batch_uploader"
        ).with_metadata(property_id=property_id, file_count=len(files))
        self._logger.info("Starting simple upload", log_context)

        tracker = UploadProgressTracker([file.name for file in files], on_progress)
        tracker.notify()

        base_time = self._clock()
        outcomes = await asyncio.gather(
            *(
                self._upload_original(tracker, index, file, property_id, base_time, log_context)
                for index, file in enumerate(files)
            )
        )

        result = _aggregate(outcomes)
        self._log_result(result, log_context)
        return result

    async def upload_with_fallback(
        self,
        files: Sequence[SourceImage],
        property_id: str,
        on_progress: Optional[ProgressObserver] = None,
    ) -> BatchUploadResult:
        """
        Try the optimized upload; fall back to ``upload_simple`` if it raises.

        A returned result, including a partial failure, is passed through
        unchanged.
        """
        _validate_property_id(property_id)
        try:
            return await self.upload_batch(files, property_id, on_progress)
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                f"Optimized upload failed, falling back to simple upload: {exc}",
                LogContext(operation="upload_with_fallback", component="batch_uploader"),
            )
            return await self.upload_simple(files, property_id, on_progress)

    async def _upload_image(
        self,
        tracker: UploadProgressTracker,
        index: int,
        file: SourceImage,
        outcome: Optional[VariantOutcome],
        property_id: str,
        base_time: int,
        log_context: LogContext,
    ) -> ImageOutcome:
        image_context = log_context.with_operation("upload_image").with_metadata(
            index=index, file_name=file.name
        )
        start_time = time.time()
        try:
            if outcome is None:
                raise EncodeError(f"No variants were generated for {file.name}")
            if isinstance(outcome, Exception):
                raise outcome

            tracker.mark_uploading(index)

            base_path = build_base_path(property_id, base_time + index)
            extension = file_extension(file.name, file.content_type)
            variants = outcome.as_dict()
            paths = {
                name: build_variant_path(base_path, extension, name) for name in VARIANT_NAMES
            }

            await self._put_all([(paths[name], variants[name]) for name in VARIANT_NAMES])

            tracker.mark_completed(index)
            self._record_metric("upload_image", start_time, True, None, index)
            self._logger.debug("Image uploaded", image_context, base_path=base_path)
            return index, StoredImageRecord(**paths)

        except Exception as exc:  # noqa: BLE001
            message = str(exc) or "Upload failed"
            tracker.mark_error(index, message)
            self._record_metric("upload_image", start_time, False, message, index)
            self._logger.error("Image upload failed", image_context.with_metadata(error=message))
            return index, message

    async def _upload_original(
        self,
        tracker: UploadProgressTracker,
        index: int,
        file: SourceImage,
        property_id: str,
        base_time: int,
        log_context: LogContext,
    ) -> ImageOutcome:
        image_context = log_context.with_operation("upload_original").with_metadata(
            index=index, file_name=file.name
        )
        start_time = time.time()
        try:
            tracker.mark_uploading(index)

            base_path = build_base_path(property_id, base_time + index)
            path = build_variant_path(base_path, file_extension(file.name, file.content_type))
            await self._storage.put(path, file.data, file.content_type)

            tracker.mark_completed(index)
            self._record_metric("upload_original", start_time, True, None, index)
            self._logger.debug("Original uploaded", image_context, path=path)
            return index, StoredImageRecord.single(path)

        except Exception as exc:  # noqa: BLE001
            message = str(exc) or "Upload failed"
            tracker.mark_error(index, message)
            self._record_metric("upload_original", start_time, False, message, index)
            self._logger.error("Original upload failed", image_context.with_metadata(error=message))
            return index, message

    async def _put_all(self, uploads: List[Tuple[str, ImageVariant]]) -> None:
        """Run every put concurrently and raise the first failure once all have settled."""
        results = await asyncio.gather(
            *(
                self._storage.put(path, variant.data, variant.content_type)
                for path, variant in uploads
            ),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    def _record_metric(
        self,
        operation: str,
        start_time: float,
        success: bool,
        error_message: Optional[str],
        index: int,
    ) -> None:
        if self._metrics_collector is not None:
            self._metrics_collector.record(
                operation, start_time, success, error_message, index=index
            )

    def _log_result(self, result: BatchUploadResult, log_context: LogContext) -> None:
        context = log_context.with_metadata(
            uploaded=len(result.images), failed=len(result.errors)
        )
        if result.success:
            self._logger.info("Batch upload completed", context)
        else:
            self._logger.warning(result.failure_summary() or "Batch upload failed", context)


def _validate_property_id(property_id: str) -> None:
    if not property_id or not property_id.strip("/ "):
        raise ConfigurationError("property_id must be a non-empty string")


def _aggregate(outcomes: Sequence[ImageOutcome]) -> BatchUploadResult:
    stored: Dict[int, StoredImageRecord] = {}
    errors: List[UploadError] = []
    for index, outcome in outcomes:
        if isinstance(outcome, StoredImageRecord):
            stored[index] = outcome
        else:
            errors.append(UploadError(index=index, error=outcome))

    return BatchUploadResult(
        success=not errors,
        images=[stored[index] for index in sorted(stored)],
        errors=sorted(errors, key=lambda error: error.index),
    )
