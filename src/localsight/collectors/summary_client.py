# src/localsight/collectors/summary_client.py
"""
Fetches the kubelet summary over mutual TLS and decodes it into a Summary.
"""

import logging
import time
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from ..core.exceptions import BadStatusError, FetchError, FetchTimeoutError, SummaryDecodeError
from ..models.summary import Summary
from ..utils.http_client import get_async_http_client, load_client_ssl_context

logger = logging.getLogger(__name__)

SUMMARY_PATH = "/stats/summary"


def build_summary_url(base_url: str) -> str:
    """Appends the well-known summary path to the configured kubelet base URL."""
    base = base_url.rstrip("/")
    if base.endswith(SUMMARY_PATH):
        return base
    return base + SUMMARY_PATH


@dataclass(frozen=True)
class FetchResult:
    summary: Summary
    latency_seconds: float


class SummaryClient:
    """
    Performs one GET against the kubelet summary endpoint per call.

    The certificate/key pair is loaded on every call so rotated kubelet client
    certificates are picked up without restarting the process.
    """

    def __init__(self, endpoint: str, cert_file: str, key_file: str, timeout: float):
        self.endpoint = endpoint
        self.cert_file = cert_file
        self.key_file = key_file
        self.timeout = timeout

    async def fetch(self) -> FetchResult:
        """
        Fetches and decodes the summary.

        Raises:
            CertificateError: If the client certificate/key cannot be loaded.
            FetchTimeoutError: If the request exceeds the timeout.
            FetchError: On any other transport failure.
            BadStatusError: If the endpoint does not answer 200.
            SummaryDecodeError: If the body is not a valid summary.
        """
        url = self.endpoint
        context = await load_client_ssl_context(self.cert_file, self.key_file)
        started = time.perf_counter()
        async with get_async_http_client(context, self.timeout) as client:
            try:
                resp = await client.get(url)
            except httpx.TimeoutException as e:
                raise FetchTimeoutError(f"request to {url} timed out after {self.timeout}s", url=url) from e
            except httpx.HTTPError as e:
                raise FetchError(f"request to {url} failed: {e}", url=url) from e

            latency = time.perf_counter() - started

            if resp.status_code != httpx.codes.OK:
                logger.debug("Raw response content from %s: %s", url, resp.text[:500])
                raise BadStatusError(resp.status_code, url=url)

            try:
                summary = Summary.model_validate_json(resp.content)
            except ValidationError as e:
                raise SummaryDecodeError(f"failed to decode summary from {url}: {e}", url=url) from e

        logger.debug("Fetched summary from %s in %.3fs (%d pods).", url, latency, len(summary.pods))
        return FetchResult(summary=summary, latency_seconds=latency)


async def fetch(endpoint: str, cert_file: str, key_file: str, timeout: float = 10.0) -> Summary:
    """Convenience wrapper: fetch the summary at `endpoint` and return only the decoded payload."""
    result = await SummaryClient(endpoint, cert_file, key_file, timeout).fetch()
    return result.summary
