from __future__ import annotations

import time
import requests
import cloudscraper

from .utils import logger

DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120 Safari/537.36",
    "Accept": "image/avif,image/webp,image/png,image/jpeg,*/*;q=0.8",
    "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
}

RETRY_STATUSES = (429, 500, 502, 503, 504, 520, 521, 522, 524)


def _get_with_retries(get_fn, url: str, headers: dict, timeout: int, max_tries: int = 4) -> requests.Response:
    """HTTP GET with retry/backoff for temporary blocks (429/5xx)."""
    backoff = [1, 2, 4, 8]  # seconds
    last_exc: Exception | None = None
    last_resp: requests.Response | None = None

    for i in range(max_tries):
        try:
            r = get_fn(url, headers=headers, timeout=timeout)
            last_resp = r
            if r.status_code in RETRY_STATUSES:
                if i < max_tries - 1:
                    time.sleep(backoff[min(i, len(backoff) - 1)])
                    continue
            return r
        except Exception as e:
            last_exc = e
            if i < max_tries - 1:
                time.sleep(backoff[min(i, len(backoff) - 1)])
                continue
            raise

    if last_resp is not None:
        return last_resp
    if last_exc is not None:
        raise last_exc
    raise RuntimeError("request_failed")


def fetch_bytes(url: str, timeout: int = 20) -> bytes:
    """Downloads an uploaded photo. Falls back to cloudscraper when the CDN refuses plain requests."""
    try:
        r = _get_with_retries(requests.get, url, headers=DEFAULT_HEADERS, timeout=timeout, max_tries=3)
        if r.status_code == 200 and r.content:
            return r.content
        logger.debug(f"fetch_bytes: {url} answered {r.status_code}, retrying with cloudscraper")
    except requests.RequestException as e:
        logger.debug(f"fetch_bytes: {url} failed with requests ({e}), retrying with cloudscraper")

    scraper = cloudscraper.create_scraper(
        browser={"browser": "chrome", "platform": "linux", "desktop": True}
    )
    r = _get_with_retries(scraper.get, url, headers=DEFAULT_HEADERS, timeout=timeout, max_tries=3)
    r.raise_for_status()
    return r.content
