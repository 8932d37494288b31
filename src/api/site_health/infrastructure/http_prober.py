"""HTTP reachability prober built on httpx."""

from __future__ import annotations

import time

import httpx

from site_health.domain import ProbeResult
from site_health.infrastructure.observability import (
    DefaultSiteProberProbe,
    SiteProberProbe,
)
from site_health.ports.exceptions import InvalidSiteUrlError, SiteProbeError
from site_health.ports.prober import ISiteProber


def normalize_url(raw: str) -> str:
    """Turn a stored website value into a probeable URL.

    Bare hostnames get an ``https://`` scheme.

    Raises:
        InvalidSiteUrlError: If no http(s) URL with a host can be formed
    """
    candidate = raw.strip()
    if not candidate:
        raise InvalidSiteUrlError("empty url")
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    try:
        url = httpx.URL(candidate)
    except httpx.InvalidURL as e:
        raise InvalidSiteUrlError(str(e)) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidSiteUrlError(f"not an http(s) url: {raw}")
    return str(url)


class HttpSiteProber(ISiteProber):
    """Issues a GET and records the status code and response time.

    Any HTTP response counts as reachable; only transport failures
    (DNS, connect, TLS, timeout) are errors.
    """

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        probe: SiteProberProbe | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._transport = transport
        self._probe = probe or DefaultSiteProberProbe()

    async def probe(self, url: str) -> ProbeResult:
        target = normalize_url(url)
        started = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(target)
        except httpx.HTTPError as e:
            error = str(e) or type(e).__name__
            self._probe.site_unreachable(target, error)
            raise SiteProbeError(error) from e

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        self._probe.site_probed(target, response.status_code, elapsed_ms)
        return ProbeResult(
            http_status=response.status_code, response_time_ms=elapsed_ms
        )
