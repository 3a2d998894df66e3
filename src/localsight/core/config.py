# src/localsight/core/config.py

import logging
import os
from typing import Optional

from ..utils.duration import parse_duration
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "t", "y", "yes")
_FALSE_VALUES = ("false", "0", "f", "n", "no", "")

DEFAULT_KUBELET_PKI = "/var/lib/kubelet/pki/kubelet-client-current.pem"
# Upper bound for the default per-poll timeout when LSE_TIMEOUT is not set.
DEFAULT_MAX_TIMEOUT_SECONDS = 10.0


class Config:
    """
    Handles the exporter's configuration by loading values from environment variables.

    Every value is read when the instance is created, so tests (and callers) can
    change the environment and build a fresh Config without reloading the module.
    """

    def __init__(self, environ: Optional[dict] = None):
        env = os.environ if environ is None else environ

        # --- Metrics server variables ---
        self.PORT = self._get_int(env, "LSE_PORT", 8080)
        self.METRICS_NAMESPACE = env.get("LSE_METRICS_NAMESPACE", "")
        self.INCLUDE_UID = self._get_bool(env, "LSE_INCLUDE_UID", False)
        self.STALE_CYCLES = self._get_int(env, "LSE_STALE_CYCLES", 0)

        # --- Logging variables ---
        self.DEBUG = self._get_bool(env, "LSE_DEBUG", False)
        self.JSON_LOG = self._get_bool(env, "LSE_JSON_LOG", False)

        # --- Collector variables ---
        self.INTERVAL = env.get("LSE_INTERVAL", "10s")
        self.TIMEOUT = env.get("LSE_TIMEOUT") or None
        self.NODE_NAME = env.get("LSE_NODE_NAME", "")
        self.CERT_FILE = env.get("LSE_CERT_FILE", DEFAULT_KUBELET_PKI)
        self.KEY_FILE = env.get("LSE_KEY_FILE", DEFAULT_KUBELET_PKI)
        self.K8S_LOCAL_API = env.get("LSE_K8S_LOCAL_API", "https://127.0.0.1:10250")

    @staticmethod
    def _get_bool(env, key: str, default: bool) -> bool:
        raw = env.get(key)
        if raw is None:
            return default
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ConfigError(f"{key} must be a boolean, got '{raw}'.")

    @staticmethod
    def _get_int(env, key: str, default: int) -> int:
        raw = env.get(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw)
        except ValueError as e:
            raise ConfigError(f"{key} must be an integer, got '{raw}'.") from e

    @property
    def interval_seconds(self) -> float:
        try:
            return parse_duration(self.INTERVAL)
        except ValueError as e:
            raise ConfigError(f"LSE_INTERVAL is invalid: {e}") from e

    @property
    def timeout_seconds(self) -> float:
        """
        Per-poll timeout. Defaults to the interval capped at 10 seconds, and is
        never allowed to exceed the interval so a hung endpoint cannot build a backlog.
        """
        interval = self.interval_seconds
        if not self.TIMEOUT:
            return min(interval, DEFAULT_MAX_TIMEOUT_SECONDS)

        try:
            timeout = parse_duration(self.TIMEOUT)
        except ValueError as e:
            raise ConfigError(f"LSE_TIMEOUT is invalid: {e}") from e

        if timeout > interval:
            logger.warning(
                "LSE_TIMEOUT (%s) is longer than LSE_INTERVAL (%s); clamping timeout to the interval.",
                self.TIMEOUT,
                self.INTERVAL,
            )
            return interval
        return timeout

    def validate_instance(self):
        if not 0 < self.PORT < 65536:
            raise ConfigError("LSE_PORT must be between 1 and 65535.")
        if self.interval_seconds <= 0:
            raise ConfigError("LSE_INTERVAL must be greater than zero.")
        if self.timeout_seconds <= 0:
            raise ConfigError("LSE_TIMEOUT must be greater than zero.")
        if self.STALE_CYCLES < 0:
            raise ConfigError("LSE_STALE_CYCLES must not be negative.")
        if not self.K8S_LOCAL_API:
            raise ConfigError("LSE_K8S_LOCAL_API must be set to the kubelet base URL.")
        if not self.K8S_LOCAL_API.lower().startswith(("http://", "https://")):
            raise ConfigError("LSE_K8S_LOCAL_API must start with 'http://' or 'https://'.")
        if not self.CERT_FILE or not self.KEY_FILE:
            raise ConfigError("LSE_CERT_FILE and LSE_KEY_FILE must be set.")
        if not self.NODE_NAME:
            logger.warning("LSE_NODE_NAME is not set; node labels will come from the summary payload only.")

    def as_log_dict(self) -> dict:
        return {
            "port": self.PORT,
            "debug": self.DEBUG,
            "json": self.JSON_LOG,
            "interval": self.INTERVAL,
            "timeout": self.timeout_seconds,
            "node": self.NODE_NAME,
            "cert": self.CERT_FILE,
            "key": self.KEY_FILE,
            "endpoint": self.K8S_LOCAL_API,
            "namespace": self.METRICS_NAMESPACE,
            "include_uid": self.INCLUDE_UID,
            "stale_cycles": self.STALE_CYCLES,
        }


def load_config(environ: Optional[dict] = None) -> Config:
    """Builds and validates the configuration. Raises ConfigError on any problem."""
    cfg = Config(environ)
    cfg.validate_instance()
    return cfg
