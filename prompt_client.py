"""Client for the upstream image and quote providers."""

import logging
import random
import time
from typing import List, Optional

import requests

from game_errors import UpstreamError, UpstreamTimeout
from prompt_formats import ImageCandidate, QuoteCandidate

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_API_URL = "https://picsum.photos/v2/list"
DEFAULT_QUOTE_API_URL = "https://favqs.com/api/quotes"
IMAGE_PAGE_COUNT = 30


class ContentFetcher:
    """Fetches one batch of image and quote candidates per call. No caching."""

    def __init__(
        self,
        image_api_url: str = DEFAULT_IMAGE_API_URL,
        quote_api_url: str = DEFAULT_QUOTE_API_URL,
        quote_api_key: str = "",
        timeout: float = 10,
        retries: int = 0,
        retry_backoff: float = 0.5,
        rng: Optional[random.Random] = None,
    ):
        self.image_api_url = image_api_url
        self.quote_api_url = quote_api_url
        self.quote_api_key = quote_api_key or ""
        self.timeout = timeout
        self.retries = max(0, int(retries))
        self.retry_backoff = retry_backoff
        self._rng = rng or random.Random()

    def fetch_images(self) -> List[ImageCandidate]:
        page = self._rng.randrange(IMAGE_PAGE_COUNT)
        payload = self._get_json(self.image_api_url, params={"page": page})
        if not isinstance(payload, list):
            raise UpstreamError("Image provider returned an unexpected payload.")
        return [
            ImageCandidate(url=str(item["download_url"]))
            for item in payload
            if isinstance(item, dict) and item.get("download_url")
        ]

    def fetch_quotes(self) -> List[QuoteCandidate]:
        headers = {"Authorization": f'Token token="{self.quote_api_key}"'}
        payload = self._get_json(self.quote_api_url, headers=headers)
        if not isinstance(payload, dict):
            raise UpstreamError("Quote provider returned an unexpected payload.")
        return [
            QuoteCandidate(
                author=str(item.get("author") or ""),
                body=str(item.get("body") or ""),
            )
            for item in payload.get("quotes") or []
            if isinstance(item, dict)
        ]

    def _get_json(self, url: str, params: Optional[dict] = None, headers=None):
        attempt = 0
        while True:
            try:
                return self._get_json_once(url, params=params, headers=headers)
            except UpstreamError as exc:
                if attempt >= self.retries:
                    raise
                attempt += 1
                delay = self.retry_backoff * attempt
                logger.warning(
                    "Upstream request to %s failed (%s); retry %s/%s in %.2fs",
                    url,
                    exc,
                    attempt,
                    self.retries,
                    delay,
                )
                time.sleep(delay)

    def _get_json_once(self, url: str, params: Optional[dict] = None, headers=None):
        if params:
            logger.info("Prompt client request: GET %s params=%s", url, params)
        else:
            logger.info("Prompt client request: GET %s", url)
        try:
            response = requests.get(
                url, params=params, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.Timeout as exc:
            raise UpstreamTimeout(f"Upstream request to {url} timed out.") from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"Upstream request to {url} failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError(f"Upstream response from {url} was not JSON.") from exc

