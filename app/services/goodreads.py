import logging
from typing import Any, Dict, Optional

import httpx

from app.core.config import get_settings
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)

# httpx logs every request url at INFO, and the url carries the api key
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


class GoodreadsClient:
    SEARCH_PATH = "/search/index.xml"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.goodreads.com",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _request(self, path: str, params: Dict[str, Any]) -> bytes:
        params["key"] = self.api_key
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                r = client.get(url, params=params)
                r.raise_for_status()
                return r.content
        except httpx.TimeoutException as exc:
            logger.error("Goodreads request to %s timed out after %ss", path, self.timeout)
            raise UpstreamError("Goodreads request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.error("Goodreads request to %s returned status %s", path, exc.response.status_code)
            raise UpstreamError(f"Goodreads returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            # the request url carries the api key, log the error type only
            logger.error("Goodreads request to %s failed: %s", path, type(exc).__name__)
            raise UpstreamError("Goodreads request failed") from exc

    def search(self, query: str, page: int = 1) -> bytes:
        """Return the raw XML body of ``search/index.xml`` for one page."""
        return self._request(self.SEARCH_PATH, {"q": query, "page": page})


def get_client() -> GoodreadsClient:
    settings = get_settings()
    return GoodreadsClient(
        settings.goodreads_api_key,
        base_url=settings.goodreads_base_url,
        timeout=settings.upstream_timeout_seconds,
    )
