from .base_collector import BaseCollector
from .summary_client import SummaryClient, build_summary_url
from .summary_collector import SummaryCollector

__all__ = ["BaseCollector", "SummaryClient", "SummaryCollector", "build_summary_url"]
