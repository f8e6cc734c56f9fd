"""Catalog of the six selectable measurements.

Defines ``Parameter`` (display order matters: the first member is the
default chart selection) together with the unit, description and accent
colour used by the presentation layer.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel

__all__ = [
    "DEFAULT_PARAMETER",
    "PARAMETERS",
    "Parameter",
    "ParameterInfo",
    "get_parameter_info",
    "parse_parameter",
]


class Parameter(StrEnum):
    """Measurements reported by the sensor endpoint."""

    CO2 = "CO2"
    AMMONIA = "Ammonia"
    NO2 = "NO2"
    BENZENE = "Benzene"
    TEMPERATURE = "Temperature"
    HUMIDITY = "Humidity"


class ParameterInfo(BaseModel):
    """Display metadata for a single measurement."""

    model_config = {"frozen": True}

    field: str
    unit: str
    description: str
    accent: str


PARAMETERS: dict[Parameter, ParameterInfo] = {
    Parameter.CO2: ParameterInfo(field="co2", unit="ppm", description="Carbon dioxide level", accent="purple"),
    Parameter.AMMONIA: ParameterInfo(field="ammonia", unit="ppb", description="Ammonia concentration", accent="blue"),
    Parameter.NO2: ParameterInfo(field="no2", unit="ppb", description="Nitrogen dioxide level", accent="green"),
    Parameter.BENZENE: ParameterInfo(field="benzene", unit="ppb", description="Benzene concentration", accent="orange"),
    Parameter.TEMPERATURE: ParameterInfo(
        field="temperature", unit="°C", description="Ambient temperature", accent="red"
    ),
    Parameter.HUMIDITY: ParameterInfo(field="humidity", unit="%", description="Relative humidity", accent="teal"),
}

DEFAULT_PARAMETER = next(iter(Parameter))


def parse_parameter(name: Parameter | str) -> Parameter:
    """Resolve a parameter by enum member or (case-insensitive) name."""
    if isinstance(name, Parameter):
        return name
    wanted = str(name).strip().lower()
    for param in Parameter:
        if param.value.lower() == wanted:
            return param
    valid = ", ".join(p.value for p in Parameter)
    raise ValueError(f"Unknown parameter '{name}'.  Available: {valid}")


def get_parameter_info(name: Parameter | str) -> ParameterInfo:
    """Return the :class:`ParameterInfo` for a parameter name."""
    return PARAMETERS[parse_parameter(name)]
