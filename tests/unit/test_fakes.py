"""Unit tests for the testing fakes."""

import asyncio
import io

import pytest
from PIL import Image

from listing_images.core.exceptions import StorageError
from listing_images.testing.fakes import (
    FakeLogger,
    FakeStorage,
    create_source_image,
    create_test_image,
)


class TestFakeStorage:
    """Tests for FakeStorage."""

    def test_put_stores_object(self):
        storage = FakeStorage()

        asyncio.run(storage.put("p/1.jpg", b"abc", "image/jpeg"))

        assert storage.objects["p/1.jpg"].data == b"abc"
        assert storage.put_calls == ["p/1.jpg"]
        assert storage.in_flight == 0

    def test_failure_mode(self):
        storage = FakeStorage()
        storage.set_failure_mode(True, "offline")

        with pytest.raises(StorageError, match="offline"):
            asyncio.run(storage.put("p/1.jpg", b"abc", "image/jpeg"))
        assert storage.objects == {}
        assert storage.in_flight == 0

    def test_fail_paths_containing(self):
        storage = FakeStorage()
        storage.fail_paths_containing("_small", "quota exceeded")

        asyncio.run(storage.put("p/1.jpg", b"a", "image/jpeg"))
        with pytest.raises(StorageError, match="quota exceeded"):
            asyncio.run(storage.put("p/1_small.jpg", b"a", "image/jpeg"))

        assert list(storage.objects) == ["p/1.jpg"]

    def test_context_manager(self):
        storage = FakeStorage()

        async def run():
            async with storage as opened:
                assert opened.open
            return storage.open

        assert asyncio.run(run()) is False


class TestFakeLogger:
    """Tests for FakeLogger."""

    def test_filters_by_level(self):
        logger = FakeLogger()
        logger.info("hello")
        logger.error("boom", code=3)

        assert [log["message"] for log in logger.get_logs("ERROR")] == ["boom"]
        assert logger.get_logs("ERROR")[0]["code"] == 3
        logger.clear_logs()
        assert logger.get_logs() == []


class TestImageFactories:
    """Tests for the test image helpers."""

    @pytest.mark.parametrize("fmt", ["JPEG", "PNG", "WEBP"])
    def test_create_test_image(self, fmt):
        image = Image.open(io.BytesIO(create_test_image(64, 48, format=fmt)))
        assert image.size == (64, 48)
        assert image.format == fmt

    def test_create_source_image(self):
        source = create_source_image("a.png", 10, 20, format="PNG", content_type="image/png")
        assert source.name == "a.png"
        assert source.content_type == "image/png"
        assert Image.open(io.BytesIO(source.data)).size == (10, 20)
