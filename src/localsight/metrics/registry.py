# src/localsight/metrics/registry.py
"""
The gauge families exported by localsight.

Every (category, measurement) pair maps to one labeled prometheus_client
Gauge, all registered in a CollectorRegistry owned by the GaugeRegistry
instance. The collector writes through `set`; the metrics server only reads
the underlying CollectorRegistry.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Set, Tuple

from prometheus_client import CollectorRegistry, Gauge

logger = logging.getLogger(__name__)

LabelTuple = Tuple[str, ...]


class Category(str, Enum):
    """Resource categories; the value is the metric subsystem."""

    EPHEMERAL_STORAGE = "ephemeral_storage"
    CONTAINER_MEMORY = "container_memory"
    CONTAINER_ROOTFS = "container_rootfs"
    CONTAINER_LOGS = "container_logs"
    POD_VOLUME = "pod_volume"


class MeasurementGroup(str, Enum):
    BYTES = "bytes"
    INODES = "inodes"


class Measurement(str, Enum):
    """Individual measurements; the value is the metric name suffix."""

    USAGE_BYTES = "usage_bytes"
    AVAILABLE_BYTES = "available_bytes"
    CAPACITY_BYTES = "capacity_bytes"
    INODES_USED = "inodes_used"
    INODES_FREE = "inodes_free"
    INODES_TOTAL = "inodes_total"


# Order matters: set() maps (used, available, capacity) onto these positions.
GROUP_MEASUREMENTS: Dict[MeasurementGroup, Tuple[Measurement, Measurement, Measurement]] = {
    MeasurementGroup.BYTES: (Measurement.USAGE_BYTES, Measurement.AVAILABLE_BYTES, Measurement.CAPACITY_BYTES),
    MeasurementGroup.INODES: (Measurement.INODES_USED, Measurement.INODES_FREE, Measurement.INODES_TOTAL),
}


@dataclass(frozen=True)
class CategorySpec:
    description: str
    scope_label: Optional[str]
    groups: Tuple[MeasurementGroup, ...]


CATEGORIES: Dict[Category, CategorySpec] = {
    Category.EPHEMERAL_STORAGE: CategorySpec(
        "Pod ephemeral storage", None, (MeasurementGroup.BYTES, MeasurementGroup.INODES)
    ),
    Category.CONTAINER_MEMORY: CategorySpec("Container memory", "container", (MeasurementGroup.BYTES,)),
    Category.CONTAINER_ROOTFS: CategorySpec(
        "Container root file system", "container", (MeasurementGroup.BYTES, MeasurementGroup.INODES)
    ),
    Category.CONTAINER_LOGS: CategorySpec(
        "Container logs", "container", (MeasurementGroup.BYTES, MeasurementGroup.INODES)
    ),
    Category.POD_VOLUME: CategorySpec("Pod volume", "volume", (MeasurementGroup.BYTES, MeasurementGroup.INODES)),
}

MEASUREMENT_HELP = {
    Measurement.USAGE_BYTES: "used space in bytes",
    Measurement.AVAILABLE_BYTES: "available space in bytes",
    Measurement.CAPACITY_BYTES: "capacity in bytes",
    Measurement.INODES_USED: "number of used inodes",
    Measurement.INODES_FREE: "number of free inodes",
    Measurement.INODES_TOTAL: "total number of inodes",
}

POD_LABELS = ("pod", "namespace", "node")


class GaugeRegistry:
    """
    A fixed table of labeled gauges, built once at startup.

    Each gauge value is individually locked by prometheus_client, so a scrape
    never sees a torn value. A scrape may still mix values from the current and
    previous cycle across different gauges.

    When `stale_cycles` is greater than zero, label tuples that are not set for
    that many consecutive completed cycles are removed (see `end_cycle`).
    With the default of zero, a tuple stays exported until the process exits.
    """

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        namespace: str = "",
        include_uid: bool = False,
        stale_cycles: int = 0,
    ):
        if stale_cycles < 0:
            raise ValueError("stale_cycles must not be negative")

        self.registry = registry if registry is not None else CollectorRegistry()
        self.namespace = namespace
        self.include_uid = include_uid
        self.stale_cycles = stale_cycles

        self._lock = threading.Lock()
        self._gauges: Dict[Tuple[Category, Measurement], Gauge] = {}
        self._label_names: Dict[Category, Tuple[str, ...]] = {}
        # category -> label tuple -> number of completed cycles since last set
        self._ages: Dict[Category, Dict[LabelTuple, int]] = {category: {} for category in Category}
        self._touched: Dict[Category, Set[LabelTuple]] = {category: set() for category in Category}

        pod_labels = POD_LABELS + (("uid",) if include_uid else ())
        for category, spec in CATEGORIES.items():
            labels = pod_labels + ((spec.scope_label,) if spec.scope_label else ())
            self._label_names[category] = labels
            for group in spec.groups:
                for measurement in GROUP_MEASUREMENTS[group]:
                    self._gauges[(category, measurement)] = Gauge(
                        measurement.value,
                        f"{spec.description} {MEASUREMENT_HELP[measurement]}",
                        labelnames=labels,
                        namespace=namespace,
                        subsystem=category.value,
                        registry=self.registry,
                    )

        self.api_status = Gauge(
            "api_status",
            "Summary API status on the target node (0 is down, 1 is up)",
            labelnames=("node",),
            namespace=namespace,
            registry=self.registry,
        )
        self.api_latency = Gauge(
            "api_latency_seconds",
            "Summary API response time in seconds",
            labelnames=("node",),
            namespace=namespace,
            registry=self.registry,
        )
        self.last_success = Gauge(
            "last_success_timestamp_seconds",
            "Unix time of the last successful summary collection",
            labelnames=("node",),
            namespace=namespace,
            registry=self.registry,
        )
        logger.debug("Registered %d usage gauges.", len(self._gauges))

    def label_names(self, category: Category) -> Tuple[str, ...]:
        return self._label_names[category]

    def gauge(self, category: Category, measurement: Measurement) -> Gauge:
        try:
            return self._gauges[(category, measurement)]
        except KeyError:
            raise ValueError(f"{category.value} has no '{measurement.value}' measurement") from None

    def set(
        self,
        category: Category,
        labels: Sequence[str],
        used: float,
        available: float,
        capacity: float,
        group: MeasurementGroup = MeasurementGroup.BYTES,
    ) -> None:
        """
        Overwrites the three values of one measurement group for an exact label tuple.

        For the INODES group, `available` is the free inode count and `capacity` the total.
        """
        if group not in CATEGORIES[category].groups:
            raise ValueError(f"{category.value} has no {group.value} measurements")

        label_tuple = tuple(labels)
        if len(label_tuple) != len(self._label_names[category]):
            raise ValueError(
                f"{category.value} expects labels {self._label_names[category]}, got {len(label_tuple)} values"
            )

        used_m, available_m, capacity_m = GROUP_MEASUREMENTS[group]
        self._gauges[(category, used_m)].labels(*label_tuple).set(float(used))
        self._gauges[(category, available_m)].labels(*label_tuple).set(float(available))
        self._gauges[(category, capacity_m)].labels(*label_tuple).set(float(capacity))

        if self.stale_cycles:
            with self._lock:
                self._touched[category].add(label_tuple)

    def set_api_status(self, node: str, up: bool) -> None:
        self.api_status.labels(node).set(1 if up else 0)

    def clear_api_status(self, node: str) -> None:
        """Drops the api_status series for `node`, if one was exported."""
        try:
            self.api_status.remove(node)
        except KeyError:
            pass

    def set_api_latency(self, node: str, seconds: float) -> None:
        self.api_latency.labels(node).set(seconds)

    def mark_success(self, node: str, timestamp: Optional[float] = None) -> None:
        self.last_success.labels(node).set(time.time() if timestamp is None else timestamp)

    def begin_cycle(self) -> None:
        """Starts tracking which label tuples are set during the current cycle."""
        with self._lock:
            for touched in self._touched.values():
                touched.clear()

    def end_cycle(self) -> int:
        """
        Ages every known label tuple that was not set since `begin_cycle` and
        removes those that reached `stale_cycles`. Returns the number of removed tuples.

        Only call this after a successful fanout; failed cycles must not age tuples.
        """
        if not self.stale_cycles:
            return 0

        removed = 0
        with self._lock:
            for category in Category:
                ages = self._ages[category]
                touched = self._touched[category]
                for label_tuple in touched:
                    ages[label_tuple] = 0
                for label_tuple in list(ages):
                    if label_tuple in touched:
                        continue
                    ages[label_tuple] += 1
                    if ages[label_tuple] >= self.stale_cycles:
                        self._remove(category, label_tuple)
                        del ages[label_tuple]
                        removed += 1
                touched.clear()

        if removed:
            logger.info("Removed %d stale label sets.", removed)
        return removed

    def _remove(self, category: Category, label_tuple: LabelTuple) -> None:
        for group in CATEGORIES[category].groups:
            for measurement in GROUP_MEASUREMENTS[group]:
                try:
                    self._gauges[(category, measurement)].remove(*label_tuple)
                except KeyError:
                    pass
