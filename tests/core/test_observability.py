"""Tests for structured logging and metrics helpers."""

import time

from listing_images.core.observability import LogContext, MetricsCollector, StructuredLogger


class TestLogContext:
    def test_with_operation_keeps_correlation_id(self):
        context = LogContext(component="uploader").with_metadata(property_id="p")

        child = context.with_operation("upload_image")

        assert child.correlation_id == context.correlation_id
        assert child.operation == "upload_image"
        assert child.component == "uploader"
        assert child.metadata == {"property_id": "p"}

    def test_with_metadata_does_not_mutate_parent(self):
        parent = LogContext()
        child = parent.with_metadata(index=1)

        assert parent.metadata == {}
        assert child.metadata == {"index": 1}


class TestStructuredLogger:
    def test_format_without_context(self):
        assert StructuredLogger("li-test-structured").format_message("hello") == "hello"

    def test_format_with_context(self):
        context = LogContext(correlation_id="abc", operation="upload_image").with_metadata(index=2)

        message = StructuredLogger("li-test-structured").format_message(
            "Image uploaded", context, path="p/1.jpg"
        )

        assert message == "[upload_image] [abc] Image uploaded (index=2, path=p/1.jpg)"


class TestMetricsCollector:
    def test_summary(self):
        collector = MetricsCollector()
        start = time.time()
        collector.record("upload_image", start, True, index=0)
        collector.record("upload_image", start, False, "boom", index=1)
        collector.record("upload_original", start, True)

        summary = collector.get_summary("upload_image")

        assert summary["total_operations"] == 2
        assert summary["successful_operations"] == 1
        assert summary["failed_operations"] == 1
        assert summary["success_rate"] == 0.5
        assert collector.get_metrics("upload_image")[1].error_message == "boom"
        assert collector.get_metrics("upload_image")[1].metadata == {"index": 1}

    def test_empty_summary(self):
        assert MetricsCollector().get_summary() == {}

    def test_clear(self):
        collector = MetricsCollector()
        collector.record("op", time.time(), True)
        collector.clear_metrics()
        assert collector.get_metrics() == []
