"""
Unit tests for the shared configuration, error and logging layers.
"""

import pytest

from shared.config import DEFAULT_API_URL, ClientConfig, get_config
from shared.errors import (
    EncodingError,
    ErrorResponse,
    InvalidConfigurationError,
    OperationAbortedError,
    RegistryClientException,
    SubmissionRejectedError,
    TransportError,
)
from shared.logging import add_correlation_context, clear_context, set_submission_context


class TestConfig:
    """Test cases for client configuration."""

    def test_defaults(self, monkeypatch):
        """Test default registry settings."""
        for name in ("CRPT_API_URL", "CRPT_REQUEST_LIMIT", "CRPT_TIME_UNIT_SECONDS", "CRPT_TOKEN"):
            monkeypatch.delenv(name, raising=False)

        config = ClientConfig()

        assert config.api_url == DEFAULT_API_URL
        assert config.request_limit == 5
        assert config.time_unit_seconds == 1.0
        assert config.request_timeout == 10.0
        assert config.token == ""

    def test_environment(self, monkeypatch):
        """Test that CRPT_* variables are picked up."""
        monkeypatch.setenv("CRPT_REQUEST_LIMIT", "10")
        monkeypatch.setenv("CRPT_TOKEN", "env-token")

        config = get_config()

        assert config.request_limit == 10
        assert config.token == "env-token"

    def test_overrides_win(self, monkeypatch):
        """Test that explicit overrides beat the environment."""
        monkeypatch.setenv("CRPT_REQUEST_LIMIT", "10")

        assert get_config(request_limit=3).request_limit == 3


class TestErrors:
    """Test cases for the error taxonomy."""

    @pytest.mark.parametrize("error, code", [
        (InvalidConfigurationError(), "INVALID_CONFIGURATION"),
        (OperationAbortedError(), "OPERATION_ABORTED"),
        (TransportError(), "TRANSPORT_ERROR"),
        (SubmissionRejectedError("invalid inn"), "SUBMISSION_REJECTED"),
        (EncodingError(), "ENCODING_ERROR"),
    ])
    def test_codes(self, error, code):
        """Test that each error carries its code and base class."""
        assert isinstance(error, RegistryClientException)
        assert error.code == code

    def test_to_response(self):
        """Test rendering an error response."""
        error = SubmissionRejectedError("invalid inn", details={"status_code": 400})

        response = error.to_response()

        assert isinstance(response, ErrorResponse)
        assert response.code == "SUBMISSION_REJECTED"
        assert response.message == "Registry rejected document: invalid inn"
        assert response.details == {"status_code": 400}
        assert response.trace_id is None


class TestLoggingContext:
    """Test cases for correlation context."""

    def test_submission_context_added(self):
        """Test that bound ids appear in log events."""
        submission_id = set_submission_context(doc_id="doc-1")
        try:
            event = add_correlation_context(None, "info", {"event": "x"})
        finally:
            clear_context()

        assert event["doc_id"] == "doc-1"
        assert event["submission_id"] == submission_id

    def test_cleared_context_not_added(self):
        """Test that nothing is added once cleared."""
        set_submission_context(doc_id="doc-1", submission_id="sub-1")
        clear_context()

        assert add_correlation_context(None, "info", {"event": "x"}) == {"event": "x"}
