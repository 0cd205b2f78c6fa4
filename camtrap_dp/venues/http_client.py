"""
HTTP client for fetching Camtrap DP tables published on the web.

**Conceptual**: A thin wrapper around `requests` that downloads the raw bytes
of a CSV table (e.g. the Camtrap DP example package on GitHub). It handles
session headers, timeouts and HTTP error mapping. It does NOT parse CSV or
build records; that is the table reader's job.

**Error handling**: every failure surfaces as SourceError (with the status
code when there was an HTTP response), so callers of the table reader deal
with one collaborator error type whatever the transport.

There is no retry or caching policy here; callers that need one wrap this
client.
"""

import requests

from camtrap_dp.config.settings import HttpSettings
from camtrap_dp.data.errors import SourceError
from camtrap_dp.utils.logging import get_logger

logger = get_logger(__name__)


class CamtrapHttpClient:
    """
    Thin HTTP client returning the body of a table URL.

    **Example usage**:
        >>> client = CamtrapHttpClient(HttpSettings())
        >>> data = client.fetch_bytes(
        ...     "https://raw.githubusercontent.com/tdwg/camtrap-dp/1.0/example/deployments.csv"
        ... )
        >>> data[:12]
        b'deploymentID'
    """

    def __init__(self, settings: HttpSettings):
        """
        Initialize the client with HTTP settings (timeout, user agent).

        Args:
            settings: HttpSettings, usually `get_settings().http`.
        """
        self.settings = settings
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "text/csv, text/plain;q=0.9, */*;q=0.1",
            "User-Agent": self.settings.user_agent,
        })

    def fetch_bytes(self, url: str) -> bytes:
        """
        Download a URL and return the response body.

        Args:
            url: http(s) URL of a CSV table.

        Returns:
            Raw response body.

        Raises:
            ValueError: If the URL is empty.
            SourceError: On timeout, connection failure or a non-2xx status.
        """
        if not url or not url.strip():
            raise ValueError("URL cannot be empty")

        logger.debug("Fetching %s", url)
        try:
            response = self.session.get(url, timeout=self.settings.timeout_seconds)
        except requests.Timeout:
            raise SourceError(
                f"Request to {url} timed out after {self.settings.timeout_seconds}s. "
                f"Check network connection or increase CAMTRAP_HTTP_TIMEOUT_SECONDS.",
                source=url,
            )
        except requests.RequestException as e:
            raise SourceError(f"Request to {url} failed: {e}", source=url)

        if response.status_code == 404:
            raise SourceError(f"Table not found at {url} (status 404)", source=url, status_code=404)

        if response.status_code >= 500:
            raise SourceError(
                f"Server error fetching {url} (status {response.status_code}). Response: {response.text[:200]}",
                source=url,
                status_code=response.status_code,
            )

        if not 200 <= response.status_code < 300:
            raise SourceError(
                f"Unexpected status {response.status_code} fetching {url}. Response: {response.text[:200]}",
                source=url,
                status_code=response.status_code,
            )

        logger.debug("Fetched %d bytes from %s", len(response.content), url)
        return response.content
