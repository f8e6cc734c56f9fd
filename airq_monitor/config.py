"""Configuration loader.

Settings come from three layers, later ones winning: model defaults, an
optional YAML file, then the ``AIRQ_DEVICE_HOST`` environment variable.

Example:

.. code-block:: yaml

    device:
      host: 192.168.1.50
      timeout_s: 5.0

    monitor:
      poll_interval_s: 10
      history_capacity: 50
      parameter: CO2
      log_level: INFO
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, field_validator

from airq_monitor.parameters import DEFAULT_PARAMETER, Parameter, parse_parameter

__all__ = ["HOST_ENV_VAR", "MonitorConfig", "load_config", "load_yaml_config"]

logger = logging.getLogger("airq_monitor.config")

HOST_ENV_VAR = "AIRQ_DEVICE_HOST"


class MonitorConfig(BaseModel):
    """Settings for one dashboard session.

    Attributes:
        device_host: Device host name / IP, or a full ``http(s)://`` URL.
        timeout_s: Per-request timeout for every device call.
        poll_interval_s: Seconds between periodic fetches.
        history_capacity: Number of readings kept in memory.
        parameter: Measurement charted by default.
        log_level: Logging level string.
    """

    device_host: str = "localhost"
    timeout_s: float = 5.0
    poll_interval_s: float = 10.0
    history_capacity: int = 50
    parameter: Parameter = DEFAULT_PARAMETER
    log_level: str = "INFO"

    @field_validator("parameter", mode="before")
    @classmethod
    def _resolve_parameter(cls, value: Any) -> Parameter:
        return parse_parameter(value)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def base_url(self) -> str:
        host = self.device_host.strip().rstrip("/")
        if host.startswith(("http://", "https://")):
            return host
        return f"http://{host}"


def load_yaml_config(path: str | Path) -> MonitorConfig:
    """Load and validate a YAML configuration file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r") as fh:
        raw: dict[str, Any] = yaml.safe_load(fh) or {}

    device = raw.get("device", {}) or {}
    monitor = raw.get("monitor", {}) or {}

    values: dict[str, Any] = {}
    if "host" in device:
        values["device_host"] = str(device["host"])
    if "timeout_s" in device:
        values["timeout_s"] = float(device["timeout_s"])
    for key in ("poll_interval_s", "history_capacity", "parameter", "log_level"):
        if key in monitor:
            values[key] = monitor[key]

    config = MonitorConfig(**values)
    logger.info("Loaded config from %s: device=%s", path, config.base_url)
    return config


def load_config(path: str | Path | None = None, env: Mapping[str, str] | None = None) -> MonitorConfig:
    """Build the effective configuration.

    Parameters:
        path: Optional YAML file.
        env: Environment mapping (defaults to ``os.environ``).
    """
    config = load_yaml_config(path) if path is not None else MonitorConfig()

    env = os.environ if env is None else env
    host = env.get(HOST_ENV_VAR)
    if host:
        logger.debug("Device host overridden by %s=%s", HOST_ENV_VAR, host)
        config = config.model_copy(update={"device_host": host})
    return config
