"""Reading - one parsed sample from the sensor endpoint.

A ``Reading`` carries the six measurements, the device state reported
alongside them and the server-supplied threshold table.  It is built by
:meth:`Reading.from_payload` and never mutated afterwards.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from airq_monitor.classification import AirQualityLevel, classify
from airq_monitor.errors import ParseFailure
from airq_monitor.parameters import Parameter, get_parameter_info

__all__ = ["Reading"]

logger = logging.getLogger("airq_monitor.models")

# payload key -> Reading attribute
_MEASUREMENT_KEYS: dict[str, str] = {
    "CO2": "co2",
    "Ammonia": "ammonia",
    "NO2": "no2",
    "Benzene": "benzene",
    "Temperature": "temperature",
    "Humidity": "humidity",
}

# payload key -> (Reading attribute, fallback)
_STATE_KEYS: dict[str, tuple[str, str]] = {
    "AirQuality": ("air_quality", "Unknown"),
    "Fan": ("fan", "OFF"),
    "FanMode": ("fan_mode", "AUTO"),
    "Buzzer": ("buzzer", "OFF"),
    "BuzzerMode": ("buzzer_mode", "MANUAL"),
}


class Reading(BaseModel):
    """A single sensor sample plus device state.

    Attributes:
        co2: Carbon dioxide, ppm.
        ammonia: Ammonia, ppb.
        no2: Nitrogen dioxide, ppb.
        benzene: Benzene, ppb.
        temperature: Ambient temperature, °C.
        humidity: Relative humidity, %.
        air_quality: Label reported by the device (informational only).
        fan: Fan power state, ``"ON"`` or ``"OFF"``.
        fan_mode: Fan mode, ``"AUTO"`` or ``"MANUAL"``.
        buzzer: Buzzer power state, ``"ON"`` or ``"OFF"``.
        buzzer_mode: Buzzer mode, ``"AUTO"`` or ``"MANUAL"``.
        thresholds: Limits reported by the device, keyed by name (read-only).
        timestamp: Unix epoch seconds when the payload was parsed.
    """

    model_config = {"frozen": True}

    co2: float = 0.0
    ammonia: float = 0.0
    no2: float = 0.0
    benzene: float = 0.0
    temperature: float = 0.0
    humidity: float = 0.0
    air_quality: str = "Unknown"
    fan: str = "OFF"
    fan_mode: str = "AUTO"
    buzzer: str = "OFF"
    buzzer_mode: str = "MANUAL"
    thresholds: Mapping[str, float] = Field(default_factory=dict, validate_default=True)
    timestamp: float = Field(default_factory=time.time)

    @field_validator("thresholds")
    @classmethod
    def _freeze_thresholds(cls, value: Mapping[str, float]) -> Mapping[str, float]:
        return MappingProxyType(dict(value))

    @field_serializer("thresholds")
    def _dump_thresholds(self, value: Mapping[str, float]) -> dict[str, float]:
        return dict(value)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    @classmethod
    def from_payload(cls, payload: Any, timestamp: float | None = None) -> Reading:
        """Parse a decoded ``/sensor`` JSON body.

        Measurements that are missing or not numeric become ``0.0`` and
        missing state fields take their fallback value.  ``Thresholds`` is
        required: when it is absent, not an object, or holds a non-numeric
        value, :class:`ParseFailure` is raised.
        """
        if not isinstance(payload, Mapping):
            raise ParseFailure(f"expected a JSON object, got {type(payload).__name__}")

        fields: dict[str, Any] = {}
        for key, attr in _MEASUREMENT_KEYS.items():
            fields[attr] = _as_float(key, payload.get(key))
        for key, (attr, fallback) in _STATE_KEYS.items():
            value = payload.get(key)
            fields[attr] = fallback if value is None else str(value)

        fields["thresholds"] = _parse_thresholds(payload.get("Thresholds"))
        fields["timestamp"] = cls.now() if timestamp is None else timestamp
        return cls(**fields)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def value_of(self, parameter: Parameter | str) -> float:
        """Return the measurement for *parameter*."""
        return getattr(self, get_parameter_info(parameter).field)

    @property
    def level(self) -> AirQualityLevel:
        """Severity recomputed from the pollutant measurements."""
        return classify(self.co2, self.ammonia, self.no2, self.benzene)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return a plain ``dict`` representation (JSON-safe types)."""
        return self.model_dump()

    def to_json(self) -> str:
        """Return a compact JSON string."""
        return self.model_dump_json()

    @staticmethod
    def now() -> float:
        """Return current epoch timestamp (seconds, float)."""
        return time.time()


def _as_float(key: str, value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        logger.debug("Ignoring boolean value for %s", key)
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Unparseable %s value for %s - using 0.0", type(value).__name__, key)
        return 0.0
    if not math.isfinite(result):
        logger.debug("Non-finite value for %s - using 0.0", key)
        return 0.0
    return result


def _parse_thresholds(raw: Any) -> dict[str, float]:
    if raw is None:
        raise ParseFailure("missing required field 'Thresholds'")
    if not isinstance(raw, Mapping):
        raise ParseFailure(f"'Thresholds' must be an object, got {type(raw).__name__}")

    thresholds: dict[str, float] = {}
    for name, limit in raw.items():
        if isinstance(limit, bool) or not isinstance(limit, (int, float)):
            raise ParseFailure(f"threshold '{name}' is not numeric: {type(limit).__name__}")
        try:
            value = float(limit)
        except OverflowError as exc:
            raise ParseFailure(f"threshold '{name}' is out of range") from exc
        if not math.isfinite(value):
            raise ParseFailure(f"threshold '{name}' is not finite")
        thresholds[str(name)] = value
    return thresholds
