"""Integration tests for the complete upload pipeline."""

import asyncio
import io

import pytest
from PIL import Image

from listing_images.core.factories import UploaderFactory
from listing_images.core.image_helpers import get_image_url, normalize_image_data
from listing_images.core.models import SourceImage, UploaderConfig, UploadStatus
from listing_images.core.uploader import BatchUploader, require_uploaded_images
from listing_images.testing.fakes import (
    FakeLogger,
    FakeStorage,
    UnavailableThumbnailGenerator,
    create_source_image,
)


def _listing_photos():
    return [
        create_source_image("front.jpg", 1600, 1200),
        create_source_image("kitchen.png", 1200, 1600, format="PNG", content_type="image/png"),
        create_source_image("garden.webp", 1000, 1000, format="WEBP", content_type="image/webp"),
    ]


class TestPipelineIntegration:
    """End-to-end runs against in-memory storage."""

    def test_end_to_end_upload(self):
        storage = FakeStorage(base_url="https://cdn.test")
        snapshots = []
        uploader = UploaderFactory.create_uploader(
            UploaderConfig(), storage=storage, logger=FakeLogger(), clock=lambda: 1000
        )

        result = asyncio.run(
            uploader.upload_with_fallback(_listing_photos(), "listing-9", snapshots.append)
        )

        assert result.success
        assert [record.original for record in result.images] == [
            "listing-9/1000.jpg",
            "listing-9/1001.png",
            "listing-9/1002.webp",
        ]
        assert all(
            entry.status == UploadStatus.COMPLETED and entry.progress == 100
            for entry in snapshots[-1]
        )

        kitchen_small = Image.open(io.BytesIO(storage.objects["listing-9/1001_small.png"].data))
        assert kitchen_small.format == "PNG"
        assert kitchen_small.size == (150, 200)

        garden_large = Image.open(io.BytesIO(storage.objects["listing-9/1002_large.webp"].data))
        assert garden_large.format == "WEBP"
        assert garden_large.size == (600, 600)

        stored = [record.model_dump() for record in result.images]
        urls = [get_image_url(storage, image, "small") for image in normalize_image_data(stored)]
        assert urls[0] == "https://cdn.test/listing-9/1000_small.jpg"

    def test_mixed_batch_with_corrupt_file_and_storage_outage(self):
        storage = FakeStorage()
        storage.fail_paths_containing("2002_", "service unavailable")
        files = _listing_photos() + [
            SourceImage(name="scan.jpg", content_type="image/jpeg", data=b"\xff\xd8broken"),
        ]
        files[2] = create_source_image("garden.jpg", 900, 600)
        uploader = UploaderFactory.create_uploader(
            UploaderConfig(), storage=storage, logger=FakeLogger(), clock=lambda: 2000
        )

        result = asyncio.run(uploader.upload_with_fallback(files, "p"))

        assert not result.success
        assert len(result.images) == 2
        assert [error.index for error in result.errors] == [2, 3]
        assert result.errors[0].error == "service unavailable"
        assert result.failure_summary() == "2 images failed to upload"
        assert require_uploaded_images(result) is result

    def test_fallback_when_thumbnails_unavailable(self):
        storage = FakeStorage()
        uploader = BatchUploader(
            storage=storage,
            thumbnail_generator=UnavailableThumbnailGenerator(),
            logger=FakeLogger(),
            clock=lambda: 3000,
        )

        result = asyncio.run(uploader.upload_with_fallback(_listing_photos(), "p"))

        assert result.success
        assert sorted(storage.objects) == ["p/3000.jpg", "p/3001.png", "p/3002.webp"]
        for record in result.images:
            assert record.original == record.small == record.medium == record.large

    @pytest.mark.parametrize("count", [1, 4, 8])
    def test_result_accounts_for_every_file(self, count):
        storage = FakeStorage()
        storage.fail_paths_containing("_medium.jpg" if count > 1 else "nothing-matches")
        uploader = UploaderFactory.create_uploader(
            UploaderConfig(), storage=storage, logger=FakeLogger()
        )
        files = [create_source_image(f"{i}.jpg", 320, 240) for i in range(count)]

        result = asyncio.run(uploader.upload_batch(files, "p"))

        assert len(result.images) + len(result.errors) == count
