"""Unit tests for the monitoring sinks."""
import asyncio
import json

import httpx
import pytest

from gateway.monitoring import ErrorLog, ErrorRecord, ViewCounter


class TestErrorLog:
    """Tests for the JSON Lines error log."""

    def test_creates_log_directory(self, tmp_path):
        log_dir = tmp_path / "nested" / "logs"
        error_log = ErrorLog(log_dir)
        assert log_dir.is_dir()
        assert error_log.log_file == log_dir / "errors.jsonl"

    def test_record_error_appends_lines(self, tmp_path):
        error_log = ErrorLog(tmp_path)

        error_log.record_error(RuntimeError("catalog timed out"), "/anime/naruto")
        error_log.record_error(KeyError("results"))

        lines = error_log.log_file.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["error_type"] == "RuntimeError"
        assert first["message"] == "catalog timed out"
        assert first["path"] == "/anime/naruto"
        assert json.loads(lines[1])["path"] is None

    def test_create_record(self, tmp_path):
        record = ErrorLog(tmp_path).create_record(ValueError("bad page"))
        assert isinstance(record, ErrorRecord)
        assert len(record.error_id) == 8
        assert record.error_type == "ValueError"

    def test_write_failure_is_not_raised(self, tmp_path):
        error_log = ErrorLog(tmp_path)
        error_log.log_file = tmp_path  # a directory cannot be opened for appending
        error_log.record_error(RuntimeError("boom"))


class TestViewCounter:
    """Tests for view counting."""

    def test_counts_locally_without_stats_url(self):
        counter = ViewCounter()
        asyncio.run(counter.record_view({"referer": "https://example.com/page"}))
        asyncio.run(counter.record_view({}))

        assert counter.total == 2
        assert counter.by_referer == {"example.com": 1, "direct": 1}

    def test_forwards_to_stats_url(self):
        posted = []

        def handler(request):
            posted.append(json.loads(request.content))
            return httpx.Response(204)

        counter = ViewCounter("https://stats.example/views", transport=httpx.MockTransport(handler))

        async def run():
            await counter.record_view({"user-agent": "curl/8.0", "origin": "https://app.example"})
            await counter.aclose()

        asyncio.run(run())

        assert posted == [{"referer": None, "userAgent": "curl/8.0", "origin": "https://app.example"}]

    def test_remote_failure_raises(self):
        def handler(request):
            return httpx.Response(500)

        counter = ViewCounter("https://stats.example/views", transport=httpx.MockTransport(handler))

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(counter.record_view({}))
        assert counter.total == 1
