"""Tests for errors.py - Error classes and formatting."""

import pytest
from unittest.mock import patch

from rbit.errors import (
    RbitError,
    ConfigurationError,
    AuthenticationError,
    TorrentFileError,
    ConnectionError,
    APIError,
    ResponseDecodeError,
    handle_errors,
)


# ============================================================================
# RbitError - Base Class
# ============================================================================

class TestRbitError:
    """Test base RbitError class."""

    def test_basic_error(self):
        error = RbitError("TEST-001", "Test message")
        assert error.code == "TEST-001"
        assert error.message == "Test message"
        assert error.details == {}
        assert error.fix is None

    def test_format_error_complete(self):
        error = RbitError(
            "TEST-001",
            "Test message",
            details={"Host": "localhost", "Port": 8080},
            fix="Check configuration"
        )
        formatted = error.format_error()
        assert "Test message" in formatted
        assert "Host: localhost" in formatted
        assert "Port: 8080" in formatted
        assert "Fix: Check configuration" in formatted

    def test_str_is_formatted(self):
        error = RbitError("TEST-001", "Test message", details={"Key": "Value"})
        assert str(error) == error.format_error()


class TestSubclasses:
    """Test error taxonomy."""

    def test_configuration_error(self):
        error = ConfigurationError("/etc/rbit.yml", "File is empty")
        assert error.code == "CFG-001"
        assert error.details["File"] == "/etc/rbit.yml"
        assert error.details["Problem"] == "File is empty"

    def test_authentication_error(self):
        error = AuthenticationError("http://localhost:8080", "Fails.")
        assert error.code == "AUTH-001"
        assert error.details["Host"] == "http://localhost:8080"
        assert error.details["Response"] == "Fails."
        assert "--username" in error.fix

    def test_authentication_error_without_body(self):
        error = AuthenticationError("http://localhost:8080", "")
        assert "Response" not in error.details

    def test_torrent_file_error(self):
        error = TorrentFileError("/tmp/x.torrent", "No such file or directory")
        assert error.code == "FILE-001"
        assert "No such file" in str(error)

    def test_connection_error(self):
        error = ConnectionError("http://localhost:8080", "Connection refused")
        assert error.code == "CONN-001"
        assert "cannot reach" in error.message.lower()
        assert "Connection refused" in error.details["Error"]

    def test_api_error_truncates_response(self):
        error = APIError("/api/v2/torrents/add", 500, "x" * 500)
        assert error.code == "API-001"
        assert error.details["Status Code"] == 500
        assert len(error.details["Response"]) == 200

    def test_response_decode_error(self):
        error = ResponseDecodeError("/api/v2/torrents/info", 200, "Invalid JSON")
        assert isinstance(error, APIError)
        assert error.code == "API-002"
        assert error.details["Problem"] == "Invalid JSON"
        assert "Invalid JSON" in str(error)
        assert "Unexpected response" in str(error)

    @pytest.mark.parametrize('status_code,expected', [
        (403, '--username'),
        (404, '--host'),
        (500, '--verbose'),
    ])
    def test_api_error_fix_names_rbit_option(self, status_code, expected):
        error = APIError("/api/v2/torrents/info", status_code)
        assert expected in error.fix
        assert f"HTTP {status_code}" in error.message

    def test_connection_error_fix_names_host_option(self):
        error = ConnectionError("http://nas:8080", "Connection refused")
        assert "--host" in error.fix
        assert "qbittorrent.host" in error.fix

    def test_configuration_error_fix_names_config_locations(self):
        error = ConfigurationError("./rbit.yml", "File is empty")
        assert "rbit.yml" in error.fix
        assert "--config" in error.fix


# ============================================================================
# handle_errors decorator
# ============================================================================

class TestHandleErrors:
    """Test handle_errors decorator."""

    def test_passes_return_value(self):
        @handle_errors
        def ok():
            return 42

        assert ok() == 42

    def test_rbit_error_exits_1(self):
        @handle_errors
        def fail():
            raise AuthenticationError("http://h", "Fails.")

        with patch('rbit.errors.logger') as mock_logger:
            with pytest.raises(SystemExit) as exc_info:
                fail()

        assert exc_info.value.code == 1
        message = mock_logger.error.call_args[0][0]
        assert "Fails." in message
        assert message.startswith("rbit: [AUTH-001]")

    def test_keyboard_interrupt_exits_non_zero(self):
        @handle_errors
        def interrupted():
            raise KeyboardInterrupt()

        with pytest.raises(SystemExit) as exc_info:
            interrupted()

        assert exc_info.value.code == 130

    def test_unexpected_error_exits_1(self):
        @handle_errors
        def boom():
            raise RuntimeError("boom")

        with patch('rbit.errors.logger') as mock_logger:
            with pytest.raises(SystemExit) as exc_info:
                boom()

        assert exc_info.value.code == 1
        messages = " ".join(c[0][0] for c in mock_logger.error.call_args_list)
        assert "RuntimeError: boom" in messages

    def test_system_exit_passes_through(self):
        @handle_errors
        def exits():
            raise SystemExit(2)

        with pytest.raises(SystemExit) as exc_info:
            exits()

        assert exc_info.value.code == 2
