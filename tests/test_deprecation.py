"""Tests for perch.deprecation: Warning headers and deduplicated log lines."""

import logging
import threading

import pytest

from perch import __version__
from perch.context import request_var, response_warnings, warnings_var
from perch.deprecation import HeaderDeprecationLogger, format_warning
from perch.http.headers import Headers
from perch.http.request import Request


@pytest.fixture
def in_request():
    """Run the test body as if a request were being handled."""
    token = warnings_var.set([])
    yield
    warnings_var.reset(token)


def _log_lines(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.name == "perch.deprecation"]


class TestFormatWarning:
    def test_shape(self) -> None:
        assert format_warning("types are gone") == f'299 perch-{__version__} "types are gone"'

    def test_escapes_quotes_and_backslashes(self) -> None:
        assert format_warning('say "hi" \\ bye', agent="a") == '299 a "say \\"hi\\" \\\\ bye"'


class TestResponseWarnings:
    @pytest.mark.usefixtures("in_request")
    def test_every_emit_attaches_warning(self) -> None:
        logger = HeaderDeprecationLogger()
        logger.emit("k", "first")
        logger.emit("other", "second")
        assert response_warnings() == (format_warning("first"), format_warning("second"))

    @pytest.mark.usefixtures("in_request")
    def test_same_message_once_per_response(self) -> None:
        logger = HeaderDeprecationLogger()
        logger.emit("k", "msg")
        logger.emit("k", "msg")
        assert response_warnings() == (format_warning("msg"),)

    def test_outside_request_no_warning(self) -> None:
        HeaderDeprecationLogger().emit("k", "msg")
        assert response_warnings() == ()


class TestLogDeduplication:
    def test_logs_first_sighting_only(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="perch.deprecation")
        logger = HeaderDeprecationLogger()

        for _ in range(3):
            logger.emit("index_with_types", "types are deprecated")

        assert _log_lines(caplog) == ["types are deprecated"]

    def test_distinct_keys_log_separately(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="perch.deprecation")
        logger = HeaderDeprecationLogger()

        logger.emit("a", "A")
        logger.emit("b", "B")

        assert _log_lines(caplog) == ["A", "B"]

    def test_record_carries_key(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="perch.deprecation")
        HeaderDeprecationLogger().emit("index_with_types", "msg")
        record = next(r for r in caplog.records if r.name == "perch.deprecation")
        assert record.deprecation_key == "index_with_types"

    def test_lru_eviction_relogs(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="perch.deprecation")
        logger = HeaderDeprecationLogger(max_keys=2)

        logger.emit("a", "A")
        logger.emit("b", "B")
        logger.emit("c", "C")  # evicts "a"
        logger.emit("a", "A")

        assert _log_lines(caplog) == ["A", "B", "C", "A"]

    def test_recent_use_protects_from_eviction(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="perch.deprecation")
        logger = HeaderDeprecationLogger(max_keys=2)

        logger.emit("a", "A")
        logger.emit("b", "B")
        logger.emit("a", "A")  # refreshes "a"
        logger.emit("c", "C")  # evicts "b"
        logger.emit("a", "A")

        assert _log_lines(caplog) == ["A", "B", "C"]

    def test_opaque_id_scopes_key(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="perch.deprecation")
        logger = HeaderDeprecationLogger()

        for opaque_id in ("job-1", "job-2", "job-1"):
            request = Request(method="PUT", path="/", headers=Headers.from_dict({"X-Opaque-Id": opaque_id}))
            token = request_var.set(request)
            try:
                logger.emit("index_with_types", "msg")
            finally:
                request_var.reset(token)

        assert _log_lines(caplog) == ["msg", "msg"]

    def test_concurrent_first_sighting_logs_once(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="perch.deprecation")
        logger = HeaderDeprecationLogger()
        barrier = threading.Barrier(16)

        def worker() -> None:
            barrier.wait()
            logger.emit("index_with_types", "msg")

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert _log_lines(caplog) == ["msg"]

    def test_rejects_empty_cache(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            HeaderDeprecationLogger(max_keys=0)
