"""Log lines carry the request context, whichever logger emitted them."""

import json
import logging

import structlog
from reviewhub.utils.logging import add_context, clear_context, configure_logging


def _lines(path):
    for handler in logging.getLogger().handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class TestConfigureLogging:
    def test_context_reaches_structlog_and_stdlib_records(self, tmp_path, monkeypatch):
        log_file = tmp_path / "reviewhub.log"
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("REVIEWHUB_LOG_FILE", str(log_file))

        configure_logging(level="INFO")
        try:
            add_context(actor_id="user-9", path="/reviews/rev-1/votes")
            structlog.get_logger("reviewhub.review.voting").warning("Vote conflicted", review_id="rev-1")
            logging.getLogger("uvicorn.error").warning("Slow request")

            vote_line, server_line = _lines(log_file)
        finally:
            clear_context()
            monkeypatch.undo()
            configure_logging()

        assert vote_line["event"] == "Vote conflicted"
        assert vote_line["review_id"] == "rev-1"
        assert vote_line["level"] == "warning"
        assert vote_line["actor_id"] == "user-9"

        assert server_line["event"] == "Slow request"
        assert server_line["logger"] == "uvicorn.error"
        assert server_line["path"] == "/reviews/rev-1/votes"

    def test_cleared_context_is_not_carried_over(self, tmp_path, monkeypatch):
        log_file = tmp_path / "reviewhub.log"
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("REVIEWHUB_LOG_FILE", str(log_file))

        configure_logging(level="INFO")
        try:
            add_context(actor_id="user-9")
            clear_context()
            structlog.get_logger("reviewhub.client.sync").warning("Vote rolled back")

            (line,) = _lines(log_file)
        finally:
            monkeypatch.undo()
            configure_logging()

        assert "actor_id" not in line

    def test_protean_chatter_stays_quiet(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        try:
            configure_logging()
            assert logging.getLogger("protean").level == logging.WARNING
            assert logging.getLogger().level == logging.DEBUG
        finally:
            monkeypatch.undo()
            configure_logging()
