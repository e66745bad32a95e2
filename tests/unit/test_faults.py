"""Tests for responsys.faults module."""

import pytest

from responsys.exceptions import AccountFault, TransportFault
from responsys.faults import application_errors, unwrap_fault
from responsys.messages import ExceptionCode


def _raise(exc):
    def work():
        raise exc

    return work


class TestUnwrapFault:
    """Tests for unwrap_fault function."""

    def test_returns_result(self):
        """Passes the work's result through."""
        assert unwrap_fault(lambda: "ok") == "ok"

    def test_raises_inner_fault(self):
        """The fault stored under the fault string replaces the envelope."""
        inner = AccountFault(ExceptionCode.INVALID_USER_NAME, "bad user")
        envelope = TransportFault("invalid_user", {"invalid_user": inner})

        with pytest.raises(AccountFault) as exc_info:
            unwrap_fault(_raise(envelope))

        assert exc_info.value is inner
        assert exc_info.value.exception_code == ExceptionCode.INVALID_USER_NAME
        assert exc_info.value.__cause__ is envelope

    def test_reraises_envelope_without_inner_fault(self):
        """Without a matching detail entry the envelope itself surfaces."""
        envelope = TransportFault("server_error", {"other": AccountFault("X")})

        with pytest.raises(TransportFault) as exc_info:
            unwrap_fault(_raise(envelope))

        assert exc_info.value is envelope

    def test_ignores_non_exception_detail(self):
        """A detail value that is not an exception leaves the envelope in place."""
        envelope = TransportFault("odd", {"odd": "just text"})

        with pytest.raises(TransportFault):
            unwrap_fault(_raise(envelope))

    def test_other_errors_pass_through(self):
        """Non-transport errors are not touched."""
        with pytest.raises(ZeroDivisionError):
            unwrap_fault(lambda: 1 / 0)


class TestApplicationErrors:
    """Tests for the application_errors context manager."""

    def test_context_manager_unwraps(self):
        """Works as a with-block around arbitrary code."""
        inner = AccountFault("INVALID_PASSWORD")

        with pytest.raises(AccountFault):
            with application_errors():
                raise TransportFault("AccountFault", {"AccountFault": inner})
