"""Unit tests for stored image normalization and URL helpers."""

import pytest
from pydantic import ValidationError

from listing_images.core.image_helpers import (
    get_image_url,
    get_large_image_url,
    get_main_image_url,
    get_original_image_url,
    get_thumbnail_url,
    normalize_image,
    normalize_image_data,
)
from listing_images.core.models import StoredImageRecord
from listing_images.testing.fakes import FakeStorage

RECORD = StoredImageRecord(
    original="p/1.jpg", small="p/1_small.jpg", medium="p/1_medium.jpg", large="p/1_large.jpg"
)


class TestNormalize:
    """Tests for normalize_image and normalize_image_data."""

    def test_legacy_string(self):
        assert normalize_image("p/old.jpg") == StoredImageRecord.single("p/old.jpg")

    def test_record_passes_through(self):
        assert normalize_image(RECORD) is RECORD

    def test_dict_from_database(self):
        assert normalize_image(RECORD.model_dump()) == RECORD

    def test_invalid_dict(self):
        with pytest.raises(ValidationError):
            normalize_image({"original": "p/1.jpg"})

    def test_mixed_list_keeps_order(self):
        images = ["p/old.jpg", RECORD.model_dump(), RECORD]

        normalized = normalize_image_data(images)

        assert normalized == [StoredImageRecord.single("p/old.jpg"), RECORD, RECORD]


class TestUrls:
    """Tests for the URL helpers."""

    def test_default_size_is_medium(self):
        storage = FakeStorage(base_url="https://cdn.test")
        assert get_image_url(storage, RECORD) == "https://cdn.test/p/1_medium.jpg"

    def test_legacy_string_uses_same_object_for_every_size(self):
        storage = FakeStorage(base_url="https://cdn.test")
        for size in ("original", "small", "medium", "large"):
            assert get_image_url(storage, "p/old.jpg", size) == "https://cdn.test/p/old.jpg"

    def test_empty_size_falls_back_to_original(self):
        storage = FakeStorage(base_url="https://cdn.test")
        record = StoredImageRecord(original="p/1.jpg", small="", medium="", large="")
        assert get_thumbnail_url(storage, record) == "https://cdn.test/p/1.jpg"

    def test_shortcuts(self):
        storage = FakeStorage(base_url="https://cdn.test")
        assert get_thumbnail_url(storage, RECORD).endswith("1_small.jpg")
        assert get_main_image_url(storage, RECORD).endswith("1_medium.jpg")
        assert get_large_image_url(storage, RECORD).endswith("1_large.jpg")
        assert get_original_image_url(storage, RECORD).endswith("/p/1.jpg")
