# src/localsight/collectors/base_collector.py
"""
This module defines the abstract base class for periodic collectors.
A collector fetches from its source in `collect` and folds the result into
the gauges in `run_once`, which the scheduler calls on every tick.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseCollector(ABC):
    """
    Abstract Base Class for all collectors driven by the scheduler.
    """

    @abstractmethod
    async def collect(self) -> Any:
        """
        Fetch data from the source and return it decoded. Raise on failure;
        `run_once` decides how failures are reported.
        """
        pass

    @abstractmethod
    async def run_once(self) -> bool:
        """
        Run one full cycle. Returns True when the gauges were updated.
        Must not raise for expected source failures.
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close HTTP sessions or API clients).
        """
        pass
