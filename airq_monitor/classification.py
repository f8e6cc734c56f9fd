"""Air-quality classification.

``classify`` maps the four pollutant concentrations onto one of four ordered
severity levels.  Ranges are checked from most to least severe and the first
match wins, so a single pollutant over its hazardous limit makes the whole
reading hazardous.  Temperature and humidity do not participate.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

__all__ = [
    "AirQualityLevel",
    "AirQualityStatus",
    "LEVEL_INFO",
    "LevelInfo",
    "UNKNOWN_LEVEL_INFO",
    "classify",
    "describe",
]


class AirQualityLevel(StrEnum):
    """Severity levels, least to most severe."""

    GOOD = "Good"
    MODERATE = "Moderate"
    UNHEALTHY = "Unhealthy"
    HAZARDOUS = "Hazardous"


# (level, co2, ammonia, no2, benzene) - a reading is at ``level`` when any
# pollutant is strictly greater than its limit.
_LIMITS: tuple[tuple[AirQualityLevel, float, float, float, float], ...] = (
    (AirQualityLevel.HAZARDOUS, 5000.0, 10000.0, 1000.0, 1000.0),
    (AirQualityLevel.UNHEALTHY, 3000.0, 7000.0, 600.0, 800.0),
    (AirQualityLevel.MODERATE, 1500.0, 3000.0, 300.0, 400.0),
)


def classify(co2: float, ammonia: float, no2: float, benzene: float) -> AirQualityLevel:
    """Classify a set of pollutant concentrations.

    Total and deterministic: always returns a level.
    """
    for level, co2_max, ammonia_max, no2_max, benzene_max in _LIMITS:
        if co2 > co2_max or ammonia > ammonia_max or no2 > no2_max or benzene > benzene_max:
            return level
    return AirQualityLevel.GOOD


class LevelInfo(BaseModel):
    """Presentation hints for a level."""

    model_config = {"frozen": True}

    accent: str
    description: str
    icon: str


LEVEL_INFO: dict[AirQualityLevel, LevelInfo] = {
    AirQualityLevel.GOOD: LevelInfo(
        accent="green",
        description="Air quality is considered satisfactory, and air pollution poses little or no risk.",
        icon="smile",
    ),
    AirQualityLevel.MODERATE: LevelInfo(
        accent="yellow",
        description=(
            "Air quality is acceptable; however, some pollutants may be of concern "
            "for a very small number of individuals."
        ),
        icon="satisfied",
    ),
    AirQualityLevel.UNHEALTHY: LevelInfo(
        accent="orange",
        description=(
            "Everyone may begin to experience some adverse health effects, and members "
            "of sensitive groups may experience more serious effects."
        ),
        icon="dissatisfied",
    ),
    AirQualityLevel.HAZARDOUS: LevelInfo(
        accent="red",
        description=(
            "Health alert: everyone may experience more serious health effects. "
            "Take steps to reduce exposure."
        ),
        icon="warning",
    ),
}

UNKNOWN_LEVEL_INFO = LevelInfo(
    accent="grey",
    description="Unable to determine air quality level.",
    icon="help",
)


def describe(level: AirQualityLevel | str | None) -> LevelInfo:
    """Look up presentation hints; unrecognised values get the grey fallback."""
    try:
        return LEVEL_INFO[AirQualityLevel(level)]
    except ValueError:
        return UNKNOWN_LEVEL_INFO


class AirQualityStatus(BaseModel):
    """Classification of the latest reading, ready for a status card."""

    model_config = {"frozen": True}

    level: AirQualityLevel
    accent: str
    description: str
    icon: str

    @classmethod
    def for_level(cls, level: AirQualityLevel) -> AirQualityStatus:
        info = describe(level)
        return cls(level=level, accent=info.accent, description=info.description, icon=info.icon)
