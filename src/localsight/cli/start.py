# src/localsight/cli/start.py
"""
Start command for the localsight CLI.

Loads the configuration, registers the gauges, starts the metrics server and
runs the summary collector until SIGINT or SIGTERM.
"""

import asyncio
import logging
import signal
import traceback

import typer

from ..collectors.summary_client import SummaryClient, build_summary_url
from ..collectors.summary_collector import SummaryCollector
from ..core.config import Config, load_config
from ..core.exceptions import ConfigError
from ..core.logging_setup import configure_logging
from ..core.scheduler import Scheduler
from ..metrics.registry import GaugeRegistry
from ..metrics.server import start_metrics_server

logger = logging.getLogger(__name__)

app = typer.Typer(name="start", help="Start the kubelet summary exporter.")


def build_collector(config: Config, gauges: GaugeRegistry) -> SummaryCollector:
    timeout = config.timeout_seconds
    client = SummaryClient(
        endpoint=build_summary_url(config.K8S_LOCAL_API),
        cert_file=config.CERT_FILE,
        key_file=config.KEY_FILE,
        timeout=timeout,
    )
    return SummaryCollector(client, gauges, node_name=config.NODE_NAME, timeout=timeout)


async def _async_start(config: Config, gauges: GaugeRegistry) -> None:
    """Runs the collector loop until a shutdown signal arrives."""
    collector = build_collector(config, gauges)
    logger.info(
        "Starting kubelet summary collector (endpoint=%s, interval=%s)",
        collector.client.endpoint,
        config.INTERVAL,
    )

    stop_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, stop_requested.set)

    scheduler = Scheduler()
    scheduler.add_job(collector.run_once, config.interval_seconds)
    try:
        await stop_requested.wait()
        logger.info("Shutdown signal received.")
    finally:
        await scheduler.stop()
        await collector.close()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.remove_signal_handler(sig)


@app.callback(invoke_without_command=True)
def start(ctx: typer.Context) -> None:
    """
    Start the metrics server and poll the kubelet summary until terminated.
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        config = load_config()
    except ConfigError as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1)

    configure_logging(debug=config.DEBUG, json_log=config.JSON_LOG)
    logger.info("config %s", config.as_log_dict())

    try:
        gauges = GaugeRegistry(
            namespace=config.METRICS_NAMESPACE,
            include_uid=config.INCLUDE_UID,
            stale_cycles=config.STALE_CYCLES,
        )
        start_metrics_server(gauges, config.PORT)
    except Exception as e:
        logger.error(f"Failed to start metrics: {e}")
        logger.error("Startup failed: %s", traceback.format_exc())
        raise typer.Exit(code=1)

    asyncio.run(_async_start(config, gauges))
    logger.info("localsight stopped.")
