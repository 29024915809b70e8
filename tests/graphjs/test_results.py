"""Tests for result envelopes: failures, errors and ensure_success."""

import pytest
from pydantic import ValidationError

from graphjs.errors import ApplicationFailure, DecodeFailure, ServerError, TransportError
from graphjs.results import CallResult, CreateResult, MembersResult


class TestFailure:
    """Results built from errors."""

    def test_failure_carries_reason_and_error(self):
        """failure() copies the reason and keeps the error."""
        error = ServerError("Database unavailable", 503)
        result = CreateResult.failure(error)
        assert result.success is False
        assert result.reason == "Database unavailable"
        assert result.id is None
        assert result.error is error

    def test_decode_failure_reason_is_generic(self):
        """Decode details stay out of the reason."""
        result = MembersResult.failure(DecodeFailure("getMembers", "not JSON"))
        assert result.reason == "Cannot parse response"
        assert result.members == {}

    def test_application_failure_from_payload(self):
        """A decoded success=false result reports an ApplicationFailure."""
        result = CallResult(success=False, reason="Not allowed.")
        assert isinstance(result.error, ApplicationFailure)
        assert result.error.reason == "Not allowed."

    def test_no_error_on_success(self):
        """Successful results have no error."""
        assert CallResult(success=True).error is None


class TestEnsureSuccess:
    """ensure_success returns or raises."""

    def test_returns_self(self):
        """Success passes through."""
        result = CreateResult(success=True, id="x")
        assert result.ensure_success() is result

    def test_raises_error(self):
        """Failure raises the error behind it."""
        with pytest.raises(TransportError, match="timed out"):
            CallResult.failure(TransportError("timed out")).ensure_success()


class TestImmutability:
    """Results are read-only."""

    def test_frozen(self):
        """Fields cannot be reassigned."""
        result = CallResult(success=True)
        with pytest.raises(ValidationError):
            result.success = False  # type: ignore[misc]
