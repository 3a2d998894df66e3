import asyncio
import logging
import ssl

import httpx

from .. import __version__
from ..core.exceptions import CertificateError

logger = logging.getLogger(__name__)

USER_AGENT = f"localsight/{__version__}"


def build_client_ssl_context(cert_file: str, key_file: str) -> ssl.SSLContext:
    """
    Returns a TLS client context that presents the given certificate/key pair
    but does not validate the server's certificate chain or hostname.

    The kubelet serves a self-signed certificate on a node-local port, so the
    client certificate is the only authentication that matters here.

    Raises:
        CertificateError: If the certificate or key cannot be loaded.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    try:
        context.load_cert_chain(certfile=cert_file, keyfile=key_file)
    except (OSError, ssl.SSLError) as e:
        raise CertificateError(f"failed to load client cert/key ({cert_file}, {key_file}): {e}") from e
    return context


async def load_client_ssl_context(cert_file: str, key_file: str) -> ssl.SSLContext:
    """Builds the client context in a worker thread; reading the PEM files must not block the event loop."""
    return await asyncio.to_thread(build_client_ssl_context, cert_file, key_file)


def get_async_http_client(ssl_context: ssl.SSLContext, timeout: float) -> httpx.AsyncClient:
    """
    Returns a configured httpx.AsyncClient with:
    - Mutual TLS through the given client context.
    - A single timeout applied to connect, read, write and pool acquisition.
    - Standard User-Agent header.
    """
    # Note: no retries here. A failed poll is simply retried on the next tick.
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        verify=ssl_context,
        follow_redirects=False,
    )
