"""
Errors reported by rbit

Every RbitError carries a short code, the facts that led to it and a hint
naming the rbit option or config key to change. handle_errors turns them
into log lines and an exit status instead of a traceback.
"""

import functools
import sys
from typing import Optional

from rbit.logging import get_logger

logger = get_logger(__name__)

MAX_RESPONSE_EXCERPT = 200


class RbitError(Exception):
    """Base exception for all rbit errors"""

    def __init__(self, code: str, message: str, details: Optional[dict] = None, fix: Optional[str] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        self.fix = fix
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Message, then one bullet per detail and the fix hint last"""
        bullets = [f"{key}: {value}" for key, value in self.details.items()]
        if self.fix:
            bullets.append(f"Fix: {self.fix}")
        return "\n".join([self.message] + [f"  • {bullet}" for bullet in bullets])


class ConfigurationError(RbitError):
    """An rbit config file was skipped (settings fall back to the other sources)"""

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            code="CFG-001",
            message="Skipping rbit config file",
            details={"File": file_path, "Problem": reason},
            fix="Edit ~/.config/rbit/config.yml or ./rbit.yml, or point --config at another file"
        )


class AuthenticationError(RbitError):
    """Credentials were sent but the Web UI did not answer 'Ok.'"""

    def __init__(self, host: str, response_text: Optional[str] = None):
        details = {"Host": host}
        if response_text:
            details["Response"] = response_text

        super().__init__(
            code="AUTH-001",
            message="qBittorrent Web UI rejected the login",
            details=details,
            fix="Pass --username/--password or set qbittorrent.username/password in the rbit config"
        )


class TorrentFileError(RbitError):
    """The .torrent file given to 'rbit add' cannot be opened"""

    def __init__(self, path: str, reason: str):
        super().__init__(
            code="FILE-001",
            message="Cannot open .torrent file for upload",
            details={"File": path, "Problem": reason},
            fix="Check the path given to 'rbit add', or pass a magnet: link instead"
        )


class ConnectionError(RbitError):
    """No HTTP exchange with the Web UI was possible"""

    def __init__(self, host: str, original_error: str):
        super().__init__(
            code="CONN-001",
            message="Cannot reach the qBittorrent Web UI",
            details={"Host": host, "Error": str(original_error)},
            fix="Start qBittorrent with the Web UI enabled, or correct --host / qbittorrent.host"
        )


class APIError(RbitError):
    """The Web UI answered with a non-2xx status"""

    def __init__(self, endpoint: str, status_code: int, response_text: Optional[str] = None):
        details = {"Endpoint": endpoint, "Status Code": status_code}
        if response_text:
            details["Response"] = response_text[:MAX_RESPONSE_EXCERPT]

        super().__init__(
            code="API-001",
            message=f"qBittorrent rejected {endpoint} (HTTP {status_code})",
            details=details,
            fix=_api_fix(status_code)
        )


def _api_fix(status_code: int) -> str:
    if status_code == 403:
        return "Log in with --username/--password, or whitelist this host in the Web UI settings"
    if status_code == 404:
        return "Check that --host is the Web UI root URL and that qBittorrent is 4.1 or newer (API v2)"
    return "Rerun with --verbose to see the response, and check the qBittorrent execution log"


class ResponseDecodeError(APIError):
    """The Web UI answered 2xx but the body is not what rbit expects"""

    def __init__(self, endpoint: str, status_code: int, reason: str):
        super().__init__(endpoint, status_code)
        self.code = "API-002"
        self.message = f"Unexpected response from {endpoint}"
        self.details["Problem"] = reason
        self.fix = "Check that --host points at a qBittorrent Web UI and not at a proxy or login page"
        self.args = (self.format_error(),)


def handle_errors(func):
    """Run an rbit command, mapping failures to a logged message and exit status"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RbitError as e:
            logger.error(f"rbit: [{e.code}] {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            logger.info("\nrbit: interrupted")
            sys.exit(130)
        except Exception as e:
            logger.error("rbit: internal error")
            logger.error(f"  • Error: {type(e).__name__}: {e}")
            logger.error("  • Fix: Rerun with --log-level DEBUG --trace and report the output")
            logger.debug("Full stack trace:", exc_info=True)
            sys.exit(1)
    return wrapper
