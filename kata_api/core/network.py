"""Network utilities for HTTP requests, rate limiting, and session management.

Provides a centralized HTTP session with retries, request pacing for the
catalog host, and fetch helpers that raise NetworkError instead of returning
partial data.
"""
from __future__ import annotations

import logging
import random
import time
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..model import NetworkError
from .config import get_network_config

logger = logging.getLogger(__name__)

# Global session (lazy-initialized)
_SESSION: Optional[requests.Session] = None

_RETRY_STATUSES = (429, 500, 502, 503, 504)


class RateLimiter:
    """Simple rate limiter with jitter, using monotonic time."""

    def __init__(self, min_interval_s: float = 0.0, jitter_s: float = 0.0):
        self.min_interval_s = max(0.0, float(min_interval_s or 0.0))
        self.jitter_s = max(0.0, float(jitter_s or 0.0))
        self._last_ts = 0.0

    def wait(self) -> None:
        """Wait until the minimum interval has passed since the last request."""
        if self.min_interval_s <= 0 and self.jitter_s <= 0:
            return

        now = time.monotonic()
        jitter = random.uniform(0.0, self.jitter_s) if self.jitter_s > 0 else 0.0
        next_ready = self._last_ts + self.min_interval_s + jitter
        sleep_s = next_ready - now

        if sleep_s > 0:
            time.sleep(sleep_s)
            now = time.monotonic()

        self._last_ts = now


_RATE_LIMITER: Optional[RateLimiter] = None


def get_rate_limiter() -> RateLimiter:
    """Get the shared rate limiter, rebuilt when the configured pacing changes."""
    global _RATE_LIMITER
    net = get_network_config()
    delay_s = float(net.get("delay_ms", 0) or 0) / 1000.0
    jitter_s = float(net.get("jitter_ms", 0) or 0) / 1000.0

    rl = _RATE_LIMITER
    if rl is None or rl.min_interval_s != delay_s or rl.jitter_s != jitter_s:
        rl = RateLimiter(delay_s, jitter_s)
        _RATE_LIMITER = rl
    return rl


def is_valid_url(url: str) -> bool:
    """Return True for absolute http(s) URLs."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def build_session() -> requests.Session:
    """Build a configured requests session with retries and default headers.

    Returns:
        Configured Session instance
    """
    session = requests.Session()

    # Connection errors are retried by fetch_page so failures surface quickly.
    retry = Retry(
        total=2,
        connect=0,
        read=2,
        backoff_factor=0.5,
        status_forcelist=_RETRY_STATUSES,
        allowed_methods=frozenset(["GET", "HEAD"]),
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": (
            "Mozilla/5.0 (X11; Linux x86_64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/124.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/json;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    })

    return session


def get_session() -> requests.Session:
    """Get the global HTTP session (lazy initialization)."""
    global _SESSION
    if _SESSION is None:
        _SESSION = build_session()
    return _SESSION


def _retry_after_seconds(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        pass
    try:
        retry_dt = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    return max(0.0, (retry_dt - datetime.now(retry_dt.tzinfo)).total_seconds())


def _get(url: str, headers: Optional[Dict[str, str]] = None) -> requests.Response:
    """HTTP GET with pacing and backoff; raises NetworkError on failure.

    Args:
        url: URL to request
        headers: Additional headers

    Returns:
        The successful response
    """
    if not is_valid_url(url):
        raise NetworkError(url, f"Invalid URL: {url}")

    session = get_session()
    net = get_network_config()

    max_attempts = max(1, int(net.get("max_attempts", 3) or 3))
    base_backoff = float(net.get("base_backoff_s", 1.0) or 1.0)
    backoff_mult = float(net.get("backoff_multiplier", 1.5) or 1.5)
    max_backoff = float(net.get("max_backoff_s", 30.0) or 30.0)
    timeout = float(net.get("timeout_s", 15) or 15)
    rl = get_rate_limiter()

    # Merge headers: session defaults < configured headers < per-call headers
    req_headers = {str(k): str(v) for k, v in net.get("headers", {}).items() if v is not None}
    if headers:
        req_headers.update(headers)

    last_error = "no attempt made"
    for attempt in range(1, max_attempts + 1):
        backoff = min(base_backoff * (backoff_mult ** (attempt - 1)), max_backoff)
        try:
            rl.wait()
            resp = session.get(url, headers=req_headers or None, timeout=timeout)
        except requests.exceptions.Timeout:
            last_error = "timed out"
            if attempt < max_attempts:
                logger.warning(
                    "Timeout for %s; sleeping %.1fs (attempt %d/%d)",
                    url, backoff, attempt, max_attempts
                )
                time.sleep(backoff)
                continue
            break
        except requests.exceptions.RequestException as e:
            last_error = str(e)
            if attempt < max_attempts:
                logger.warning(
                    "Request error for %s: %s; sleeping %.1fs (attempt %d/%d)",
                    url, e, backoff, attempt, max_attempts
                )
                time.sleep(backoff)
                continue
            break

        if resp.status_code in _RETRY_STATUSES:
            last_error = f"HTTP {resp.status_code}"
            if attempt < max_attempts:
                sleep_s = backoff
                if resp.status_code == 429:
                    retry_after = _retry_after_seconds(resp.headers.get("Retry-After"))
                    if retry_after is not None:
                        sleep_s = min(retry_after, max_backoff)
                logger.warning(
                    "%s for %s; sleeping %.1fs (attempt %d/%d)",
                    resp.status_code, url, sleep_s, attempt, max_attempts
                )
                time.sleep(sleep_s)
                continue
            break

        if resp.status_code >= 400:
            logger.warning("Non-retryable HTTP %s for %s", resp.status_code, url)
            raise NetworkError(url, f"HTTP {resp.status_code} for {url}")

        return resp

    logger.error("Giving up after %d attempts for %s: %s", max_attempts, url, last_error)
    raise NetworkError(url, f"Request failed for {url}: {last_error}")


def fetch_page(url: str) -> str:
    """Fetch a page and return its text.

    Raises:
        NetworkError: On transport errors, timeouts or non-success status
    """
    resp = _get(url)
    logger.debug("Fetched %s (%d bytes)", url, len(resp.content or b""))
    return resp.text


def fetch_json(url: str) -> Any:
    """Fetch a JSON document.

    Raises:
        NetworkError: On fetch failure or an undecodable body
    """
    resp = _get(url, headers={"Accept": "application/json"})
    try:
        return resp.json()
    except ValueError as e:
        logger.error("JSON decode error for %s: %s", url, e)
        raise NetworkError(url, f"Invalid JSON from {url}") from e


__all__ = [
    "RateLimiter",
    "build_session",
    "fetch_json",
    "fetch_page",
    "get_rate_limiter",
    "get_session",
    "is_valid_url",
]
