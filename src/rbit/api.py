"""
qBittorrent Web API session

One requests.Session per invocation; its cookie jar carries the SID cookie
issued by /api/v2/auth/login to every later request.
"""

import requests
from typing import Optional

from rbit.errors import AuthenticationError, ConnectionError
from rbit.logging import get_logger
from rbit.models import SessionSettings

logger = get_logger(__name__)

LOGIN_ENDPOINT = '/api/v2/auth/login'
LOGIN_OK = 'Ok.'


class QBittorrentSession:
    """
    Authenticated HTTP session against a qBittorrent Web UI

    Handles:
    - URL joining against the normalized host
    - Cookie-based login (skipped when no credentials are configured)
    - Verbose echo of every request/response pair
    - Mapping transport failures to ConnectionError
    """

    def __init__(self, settings: SessionSettings, session: Optional[requests.Session] = None):
        """
        Args:
            settings: Resolved session settings
            session: Optional pre-built requests.Session (a new one is created otherwise)
        """
        self.settings = settings
        self.host = settings.host
        self.session = session if session is not None else requests.Session()
        self._authenticated = False

    def url(self, endpoint: str) -> str:
        """Full URL for an API endpoint"""
        return f"{self.host}{endpoint}"

    def request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Send one request through the shared session

        Args:
            method: HTTP method
            endpoint: API path, e.g. '/api/v2/torrents/info'
            **kwargs: Passed through to requests (data, files, params)

        Returns:
            The response, whatever its status

        Raises:
            ConnectionError: If the daemon cannot be reached
        """
        url = self.url(endpoint)
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            raise ConnectionError(self.host, str(e))

        if self.settings.verbose:
            logger.info(f"[verbose] {method} {url} -> {response.status_code}")
            logger.info(f"[verbose] response: {response.text}")

        return response

    def login(self):
        """
        Authenticate if credentials are configured

        No request is made when username or password is missing; the daemon
        is then assumed to run without authentication.

        Raises:
            AuthenticationError: If the response body is not 'Ok.'
            ConnectionError: If the daemon cannot be reached
        """
        if self._authenticated:
            return

        if not self.settings.has_credentials:
            logger.debug("No credentials configured, skipping login")
            return

        response = self.request(
            'POST',
            LOGIN_ENDPOINT,
            data={
                'username': self.settings.username,
                'password': self.settings.password
            }
        )

        if response.text != LOGIN_OK:
            raise AuthenticationError(self.host, response.text)

        self._authenticated = True
        logger.debug(f"Successfully authenticated with qBittorrent at {self.host}")

    def close(self):
        """Release the underlying connection pool"""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
