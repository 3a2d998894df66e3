"""
localsight exports kubelet storage and memory usage as Prometheus gauges.
"""

__version__ = "0.1.0"
