"""HTTP fetching of the listing page."""

from __future__ import annotations

import httpx
import structlog

from ..config import ListingConfig
from ..errors import NetworkError


class Fetcher:
    """Retrieve the raw listing document with a single GET, no retries."""

    def __init__(
        self,
        listing: ListingConfig,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.listing = listing
        self.logger = logger or structlog.get_logger("news_relay.fetcher")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=listing.timeout,
            headers={"User-Agent": listing.user_agent},
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def fetch(self, url: str | None = None) -> str:
        target = url or self.listing.url
        try:
            response = self._client.get(target, timeout=self.listing.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"Listing request returned status {exc.response.status_code}: {target}"
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Listing request failed: {target}: {exc}") from exc
        self.logger.debug(
            "fetch_completed",
            url=target,
            status=response.status_code,
            size=len(response.text),
        )
        return response.text


__all__ = ["Fetcher"]
