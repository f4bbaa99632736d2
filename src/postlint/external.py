"""
External link checking.

Probes external URLs in parallel: HEAD first for speed, then GET for
servers that reject HEAD. Results are cached per URL for the lifetime of
the checker, so a URL linked from twenty drafts is requested once.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable

import requests

from postlint.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (compatible; postlint link checker; "
    "+https://jekyllrb.com/docs/posts/)"
)


@dataclass(frozen=True)
class LinkStatus:
    """Outcome of probing one URL.

    Attributes:
        url: The URL probed
        status_code: Final HTTP status (None if the request failed)
        error: Exception text when no response was received
    """

    url: str
    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code is not None and self.status_code < 400

    def describe(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}"
        return self.error or "no response"


class ExternalLinkChecker:
    """Check that external URLs answer with a non-error status.

    Args:
        timeout: Seconds per request
        workers: Parallel requests
        session: ``requests.Session``-like object (injectable for tests)
    """

    def __init__(
        self,
        timeout: float = 10.0,
        workers: int = 20,
        session: Any | None = None,
    ):
        self.timeout = timeout
        self.workers = workers
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self._cache: dict[str, LinkStatus] = {}

    def check_url(self, url: str) -> LinkStatus:
        """Probe a single URL (cached)."""
        if url in self._cache:
            return self._cache[url]

        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
            if response.status_code >= 400:
                # Fallback to GET for sites that block HEAD
                response = self.session.get(
                    url, timeout=self.timeout, allow_redirects=True, stream=True
                )
                response.close()
            status = LinkStatus(url=url, status_code=response.status_code)
        except requests.RequestException as e:
            status = LinkStatus(url=url, error=f"{type(e).__name__}: {e}")

        logger.debug("external_link_checked", url=url, status=status.describe())
        self._cache[url] = status
        return status

    def check_all(self, urls: Iterable[str]) -> dict[str, LinkStatus]:
        """Probe unique URLs in parallel.

        Returns:
            Mapping of URL to status
        """
        unique = sorted(set(urls))
        if not unique:
            return {}

        logger.info("external_links_checking", urls=len(unique), workers=self.workers)
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            results = list(executor.map(self.check_url, unique))

        broken = sum(1 for status in results if not status.ok)
        logger.info("external_links_checked", urls=len(unique), broken=broken)
        return {status.url: status for status in results}
