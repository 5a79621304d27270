"""
YOURLS API client: turns a long share URL into a short link.
"""

from __future__ import annotations

import json
import random
import string
import time

import requests

from uplatimi.utils.config import shortener_timeout, shortener_url
from uplatimi.utils.logger import get_logger

logger = get_logger()

KEYWORD_CHARACTERS = string.ascii_uppercase + string.ascii_lowercase
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"


class ShorteningRequestError(RuntimeError):
    """Raised when the shortening request fails (network, HTTP status or response body)."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def generate_keyword(now_ms: int | None = None, rng: random.Random | None = None) -> str:
    """
    Build a probably-unique short-link keyword from the current millisecond timestamp.

    A random letter is inserted before every even-indexed digit, e.g. ``1700000000000``
    becomes ``x17Q00k00...``. Not a security token.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    rng = rng or random
    out: list[str] = []
    for i, digit in enumerate(str(now_ms)):
        if i % 2 == 0:
            out.append(rng.choice(KEYWORD_CHARACTERS))
        out.append(digit)
    return "".join(out)


class YourlsClient:
    """
    Minimal YOURLS ``action=shorturl`` client. One attempt per call; retries are
    left to the user.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: int | None = None,
        keyword_factory=generate_keyword,
    ) -> None:
        self._endpoint = endpoint or shortener_url()
        self._timeout = timeout if timeout is not None else shortener_timeout()
        self._keyword_factory = keyword_factory

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def _form(self, long_url: str) -> dict[str, str]:
        return {
            "action": "shorturl",
            "format": "json",
            "keyword": self._keyword_factory(),
            "url": long_url,
        }

    def shorten(self, long_url: str) -> str:
        """
        Submit ``long_url`` and return the short link.

        Raises:
            ShorteningRequestError: On network failure, non-2xx status, malformed
                JSON or a response without ``shorturl``.
        """
        form = self._form(long_url)
        try:
            r = requests.post(
                self._endpoint,
                data=form,
                headers={"Content-Type": FORM_CONTENT_TYPE},
                timeout=self._timeout,
            )
            r.raise_for_status()
            data = r.json()
        except requests.RequestException as e:
            logger.warning("Shortening request failed: %s", e)
            raise ShorteningRequestError(f"Shortening request failed: {e}", e) from e
        except ValueError as e:
            # json.JSONDecodeError and requests' own JSON error both subclass ValueError
            logger.warning("Shortening API returned invalid JSON: %s", e)
            raise ShorteningRequestError("Shortening API returned invalid JSON", e) from e

        short = data.get("shorturl") if isinstance(data, dict) else None
        if not isinstance(short, str) or not short.strip():
            detail = str(data.get("message") or "") if isinstance(data, dict) else ""
            logger.warning("Shortening API response without shorturl: %s", detail or json.dumps(data)[:200])
            raise ShorteningRequestError(
                f"Shortening API did not return a short URL{': ' + detail if detail else ''}"
            )
        logger.info("Shortened link with keyword %s", form["keyword"])
        return short.strip()
