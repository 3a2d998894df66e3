import logging

from prometheus_client import start_http_server

from .registry import GaugeRegistry

logger = logging.getLogger(__name__)


def start_metrics_server(gauges: GaugeRegistry, port: int, addr: str = "0.0.0.0"):
    """
    Serves the gauge registry in the Prometheus text format from a daemon thread.

    Returns the (server, thread) pair from prometheus_client so callers can shut
    it down explicitly. Port 0 binds an ephemeral port; read it back from
    `server.server_port`.
    """
    server, thread = start_http_server(port, addr=addr, registry=gauges.registry)
    logger.info("Metrics server listening on %s:%d", addr, server.server_port)
    return server, thread
