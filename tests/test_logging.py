"""
Test cases for structured logging and payload sanitization.
"""

import logging

import pytest

from portfolio_search.util.logging import StructuredLogger, sanitize_payload


@pytest.fixture
def structured_logger():
    return StructuredLogger("portfolio_search.test")


def test_log_operation_format(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="portfolio_search.test"):
        structured_logger.log_operation("vector.clear", "success", {"count": 3})

    assert "Operation: vector.clear, Status: success, Details: {'count': 3}" in caplog.text


@pytest.mark.parametrize("status,level", [
    ("success", logging.INFO),
    ("failed", logging.ERROR),
    ("masked", logging.WARNING),
    ("timeout", logging.WARNING),
])
def test_log_operation_levels(structured_logger, caplog, status, level):
    with caplog.at_level(logging.INFO, logger="portfolio_search.test"):
        structured_logger.log_operation("corpus.build", status)

    assert caplog.records[-1].levelno == level


def test_log_search_previews_query(structured_logger, caplog):
    """Test that only the first 50 characters of a query are logged."""
    query = "q" * 80
    with caplog.at_level(logging.INFO, logger="portfolio_search.test"):
        structured_logger.log_search(query, 2, 5, 0.7)

    assert "q" * 50 + "..." in caplog.text
    assert "q" * 51 not in caplog.text
    assert "'result_count': 2" in caplog.text


def test_log_corpus_build_rounds_duration(structured_logger, caplog):
    with caplog.at_level(logging.INFO, logger="portfolio_search.test"):
        structured_logger.log_corpus_build(12, 153.45678)

    assert "'item_count': 12" in caplog.text
    assert "'duration_ms': 153.46" in caplog.text


def test_sanitize_payload_redacts_secrets():
    payload = {
        "api_key": "sk-123",
        "Authorization": "Bearer abc",
        "nested": {"token": "t", "query": "react"},
        "items": [{"password": "p"}],
    }

    assert sanitize_payload(payload) == {
        "api_key": "[REDACTED]",
        "Authorization": "[REDACTED]",
        "nested": {"token": "[REDACTED]", "query": "react"},
        "items": [{"password": "[REDACTED]"}],
    }


def test_sanitize_payload_truncates_long_strings():
    assert sanitize_payload("x" * 150) == "x" * 100 + "..."
    assert sanitize_payload(42) == 42


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
