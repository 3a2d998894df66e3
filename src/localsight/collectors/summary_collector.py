# src/localsight/collectors/summary_collector.py
"""
Polls the kubelet summary and folds it into the gauge registry.

A failed poll (certificate, network, status or decode error) is logged and
leaves every usage gauge untouched, so the last known values stay exported.
"""

import asyncio
import logging
from typing import Optional, Tuple

from ..core.exceptions import BadStatusError, FetchError, FetchTimeoutError, SummaryDecodeError
from ..metrics.registry import Category, GaugeRegistry, MeasurementGroup
from ..models.summary import FsStats, PodSummary, Summary
from .base_collector import BaseCollector
from .summary_client import FetchResult, SummaryClient

logger = logging.getLogger(__name__)


class SummaryCollector(BaseCollector):
    """
    Fetches the kubelet summary once per call to `run_once` and updates, in
    payload order: each pod's ephemeral storage, then its volumes, then each
    container's memory, rootfs and logs.
    """

    def __init__(
        self,
        client: SummaryClient,
        gauges: GaugeRegistry,
        node_name: str = "",
        timeout: Optional[float] = None,
    ):
        self.client = client
        self.gauges = gauges
        self.node_name = node_name
        self.timeout = timeout if timeout is not None else client.timeout
        # Node label of the last decoded summary; failed polls report api_status under it.
        self._last_node = node_name
        # Label carrying api_status=0 since the last failure, if any.
        self._down_node: Optional[str] = None

    async def collect(self) -> FetchResult:
        """
        Fetches the summary, bounded by the per-poll timeout.

        Raises:
            FetchError: Any cycle-recoverable failure (see SummaryClient.fetch).
        """
        try:
            return await asyncio.wait_for(self.client.fetch(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise FetchTimeoutError(
                f"poll of {self.client.endpoint} exceeded {self.timeout}s", url=self.client.endpoint
            ) from e

    async def run_once(self) -> bool:
        logger.debug("Fetching kubelet summary for storage usage metrics")
        try:
            result = await self.collect()
        except BadStatusError as e:
            logger.error("Kubelet summary returned bad status %d from %s", e.status_code, e.url)
            self._mark_down()
            return False
        except SummaryDecodeError as e:
            logger.error("Failed to decode kubelet summary JSON: %s", e)
            self._mark_down()
            return False
        except FetchError as e:
            logger.error("Failed to fetch kubelet summary from %s: %s", e.url or self.client.endpoint, e)
            self._mark_down()
            return False

        node = self.apply(result.summary)
        if self._down_node is not None and self._down_node != node:
            self.gauges.clear_api_status(self._down_node)
        self._down_node = None
        self.gauges.set_api_status(node, True)
        self.gauges.set_api_latency(node, result.latency_seconds)
        self.gauges.mark_success(node)
        logger.debug("Successfully updated storage usage metrics for node %s", node)
        return True

    def _mark_down(self) -> None:
        self.gauges.set_api_status(self._last_node, False)
        self._down_node = self._last_node

    def apply(self, summary: Summary) -> str:
        """
        Folds one summary into the gauges and returns the node label used.
        Not transactional: values already set stay set if a later update fails.
        """
        node = summary.node.node_name or self.node_name
        self._last_node = node
        self.gauges.begin_cycle()
        for pod in summary.pods:
            self._set_pod_storage_usage(pod, node)
            self._set_pod_volume_usage(pod, node)
            self._set_container_usage(pod, node)
        self.gauges.end_cycle()
        return node

    def _pod_labels(self, pod: PodSummary, node: str) -> Tuple[str, ...]:
        labels = (pod.pod_ref.name, pod.pod_ref.namespace, node)
        if self.gauges.include_uid:
            labels += (pod.pod_ref.uid or "",)
        return labels

    def _set_fs(self, category: Category, labels: Tuple[str, ...], stats: FsStats) -> None:
        self.gauges.set(category, labels, stats.used_bytes, stats.available_bytes, stats.capacity_bytes)
        self.gauges.set(
            category,
            labels,
            stats.inodes_used,
            stats.inodes_free,
            stats.inodes,
            group=MeasurementGroup.INODES,
        )

    def _set_pod_storage_usage(self, pod: PodSummary, node: str) -> None:
        self._set_fs(Category.EPHEMERAL_STORAGE, self._pod_labels(pod, node), pod.ephemeral_storage)

    def _set_pod_volume_usage(self, pod: PodSummary, node: str) -> None:
        pod_labels = self._pod_labels(pod, node)
        for volume in pod.volumes:
            self._set_fs(Category.POD_VOLUME, pod_labels + (volume.name,), volume)

    def _set_container_usage(self, pod: PodSummary, node: str) -> None:
        pod_labels = self._pod_labels(pod, node)
        for container in pod.containers:
            labels = pod_labels + (container.name,)
            memory = container.memory
            self.gauges.set(
                Category.CONTAINER_MEMORY,
                labels,
                memory.usage_bytes,
                memory.available_bytes,
                memory.capacity_bytes,
            )
            self._set_fs(Category.CONTAINER_ROOTFS, labels, container.rootfs)
            self._set_fs(Category.CONTAINER_LOGS, labels, container.logs)
