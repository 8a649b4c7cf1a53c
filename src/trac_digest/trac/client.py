"""
HTTP client for a Trac instance.

This client wraps the two pages the digest needs: the verbose revision
log and individual ticket pages. On error conditions (connection
errors, timeouts, non-200 responses, pages missing the expected
markup) a :class:`TracError` is raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

import requests
from bs4 import BeautifulSoup

from trac_digest import __version__


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())
    logger.propagate = False


DEFAULT_BASE_URL = "https://core.trac.wordpress.org"
DEFAULT_LIMIT = 400
DEFAULT_USER_AGENT = f"trac-digest/{__version__}"


class TracError(Exception):
    """Raised when a Trac page cannot be retrieved or understood."""

    pass


@dataclass
class TracClient:
    """Client for reading changesets and tickets from Trac.

    Parameters
    ----------
    base_url : str
        Root URL of the Trac environment, e.g.
        ``"https://core.trac.wordpress.org"``.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 30 seconds.
    user_agent : str, optional
        ``User-Agent`` header sent with every request.
    """

    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path}"

    def log_url(self, start: int, stop: int, limit: int = DEFAULT_LIMIT) -> str:
        return self._url(f"log?rev={start}&stop_rev={stop}&limit={limit}&verbose=on")

    def ticket_url(self, ticket: str) -> str:
        return self._url(f"ticket/{ticket}")

    def _get(self, url: str) -> str:
        headers: Dict[str, Any] = {"User-Agent": self.user_agent}
        logger.debug("GET %s", url)
        try:
            response = requests.get(url, headers=headers, timeout=self.request_timeout)
        except requests.RequestException as exc:
            logger.error("Failed to download %s: %s", url, exc)
            raise TracError(f"Failed to download {url}: {exc}") from exc
        if response.status_code != 200:
            logger.error("Trac returned status %s for %s", response.status_code, url)
            raise TracError(f"Trac returned status {response.status_code} for {url}")
        return response.text

    def fetch_log(self, start: int, stop: int, limit: int = DEFAULT_LIMIT) -> str:
        """Download the verbose revision log between ``start`` and ``stop``.

        Returns
        -------
        str
            The HTML of the log page.

        Raises
        ------
        TracError
            If the page cannot be downloaded.
        """
        return self._get(self.log_url(start, stop, limit))

    def fetch_component(self, ticket: str) -> str:
        """Return the component a ticket is filed under.

        The component is read from the ticket page's property table,
        where the ``#h_component`` header cell is followed by the value
        cell.

        Raises
        ------
        TracError
            If the page cannot be downloaded or carries no component.
        """
        url = self.ticket_url(ticket)
        soup = BeautifulSoup(self._get(url), "html.parser")
        header = soup.select_one("#h_component")
        cell = header.find_next_sibling("td") if header is not None else None
        component = cell.get_text().strip() if cell is not None else ""
        if not component:
            raise TracError(f"No component found on {url}")
        return component
