"""Blocking HTTP retrieval of HTML documents.

The parser core never interprets transport failures: any problem talking to
the server, including a non-success status, is raised as :class:`FetchError`
with the original exception attached.
"""

from typing import List, Optional

import requests

from lenient_html_parser.shared import FetchConfig, FetchError, get_logger


class BrowserClient:
    """HTTP client that remembers the pages it has retrieved.

    Attributes:
        page_stack: URLs fetched successfully, oldest first
        current_page_index: Index of the most recent page in ``page_stack``
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        session: Optional[requests.Session] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or FetchConfig()
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", self.config.user_agent)
        self.logger = get_logger(__name__, correlation_id, "browser_client")
        self.page_stack: List[str] = []
        self.current_page_index = 0

    @property
    def current_url(self) -> Optional[str]:
        if not self.page_stack:
            return None
        return self.page_stack[self.current_page_index]

    def get(self, url: str) -> str:
        """Fetch ``url`` and return the decoded response body.

        Raises:
            FetchError: The request failed, timed out, returned a non-2xx
                status, or exceeded ``max_body_bytes``.
        """
        self.logger.info("Fetching document", extra={"url": url})
        try:
            response = self.session.get(
                url,
                timeout=self.config.timeout_seconds,
                headers={"User-Agent": self.config.user_agent},
            )
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.warning(
                "Fetch failed",
                extra={"url": url, "error": type(e).__name__}
            )
            raise FetchError(url, e) from e

        limit = self.config.max_body_bytes
        if limit is not None and len(response.content) > limit:
            error = ValueError(
                f"Response body of {len(response.content)} bytes exceeds limit of {limit}"
            )
            raise FetchError(url, error)

        body = response.text
        self.page_stack.append(url)
        self.current_page_index = len(self.page_stack) - 1

        self.logger.debug(
            "Fetch completed",
            extra={
                "url": url,
                "status_code": response.status_code,
                "characters": len(body),
            }
        )
        return body

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "BrowserClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def fetch(url: str, config: Optional[FetchConfig] = None) -> str:
    """Fetch one document with a throwaway :class:`BrowserClient`."""
    with BrowserClient(config) as client:
        return client.get(url)
