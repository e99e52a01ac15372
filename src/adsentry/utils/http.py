"""HTTP URL probe used by the landing page checks."""
from __future__ import annotations

import logging
from typing import Optional

import requests

from ..core.interfaces import Outcome

logger = logging.getLogger(__name__)

_USER_AGENT = "Mozilla/5.0 (compatible; adsentry landing page check)"


class HttpUrlProbe:
    """Report the final HTTP status of a URL after redirects.

    HEAD is tried first for speed; servers that refuse it (403, 405, 5xx) or
    drop the connection get a GET instead.
    """

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": _USER_AGENT,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            }
        )

    def probe(self, url: str) -> Outcome[int]:
        resp = None
        try:
            resp = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as exc:
            logger.debug("HEAD %s failed: %s", url, exc)

        if resp is None or resp.status_code in (403, 405) or resp.status_code >= 500:
            try:
                resp = self.session.get(url, timeout=self.timeout, allow_redirects=True, stream=True)
                resp.close()
            except requests.RequestException as exc:
                logger.warning("Could not fetch %s: %s", url, exc)
                return Outcome.failed(f"{type(exc).__name__}: {exc}")

        return Outcome.ok(int(resp.status_code))

    def close(self) -> None:
        self.session.close()


class OfflineUrlProbe:
    """Probe that never touches the network; every fetch is unavailable."""

    def probe(self, url: str) -> Outcome[int]:
        return Outcome.unavailable("network probes disabled (offline mode)")
