# tests/conftest.py

import os
import ssl

import pytest
from prometheus_client import CollectorRegistry

from localsight.metrics.registry import GaugeRegistry


@pytest.fixture(autouse=True)
def clean_lse_env(monkeypatch):
    """
    Autouse fixture that removes every LSE_* variable from the environment so
    configuration tests start from documented defaults.
    """
    for key in list(os.environ):
        if key.startswith("LSE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def no_client_cert(monkeypatch):
    """
    Replaces the mutual TLS context builder with one that loads no certificate,
    so collectors can be exercised against respx mocks without PEM files on disk.
    """

    def _fake_context(cert_file, key_file):
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        return context

    monkeypatch.setattr("localsight.utils.http_client.build_client_ssl_context", _fake_context)


@pytest.fixture
def gauges():
    """A GaugeRegistry backed by its own CollectorRegistry, isolated per test."""
    return GaugeRegistry(registry=CollectorRegistry())


@pytest.fixture
def summary_payload():
    """
    A kubelet summary with one pod ('web-0' in 'default' on node 'n1'),
    one container ('app') and one volume ('data').
    """
    return {
        "node": {"nodeName": "n1", "systemContainers": []},
        "pods": [
            {
                "podRef": {"name": "web-0", "namespace": "default", "uid": "uid-web-0"},
                "startTime": "2024-01-01T00:00:00Z",
                "ephemeral-storage": {
                    "time": "2024-01-01T00:00:10Z",
                    "usedBytes": 100,
                    "availableBytes": 900,
                    "capacityBytes": 1000,
                    "inodes": 50,
                    "inodesFree": 40,
                    "inodesUsed": 10,
                },
                "containers": [
                    {
                        "name": "app",
                        "memory": {"usageBytes": 20, "availableBytes": 80, "capacityBytes": 100},
                        "rootfs": {
                            "usedBytes": 30,
                            "availableBytes": 70,
                            "capacityBytes": 100,
                            "inodes": 9,
                            "inodesFree": 6,
                            "inodesUsed": 3,
                        },
                        "logs": {
                            "usedBytes": 5,
                            "availableBytes": 95,
                            "capacityBytes": 100,
                            "inodes": 8,
                            "inodesFree": 7,
                            "inodesUsed": 1,
                        },
                    }
                ],
                "volume": [
                    {
                        "name": "data",
                        "usedBytes": 400,
                        "availableBytes": 600,
                        "capacityBytes": 1000,
                        "inodes": 70,
                        "inodesFree": 60,
                        "inodesUsed": 10,
                    }
                ],
            }
        ],
    }
