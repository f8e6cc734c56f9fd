"""Fan and buzzer control commands.

Commands are one-shot ``GET`` requests.  They share the device client with
the acquisition loop but nothing else: a command never pauses the polling
timer nor touches the history store.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from airq_monitor.client import DeviceClient
from airq_monitor.errors import MonitorError

__all__ = ["Action", "ControlDispatcher", "Peripheral"]

logger = logging.getLogger("airq_monitor.control")


class Peripheral(StrEnum):
    FAN = "fan"
    BUZZER = "buzzer"


class Action(StrEnum):
    ON = "on"
    OFF = "off"
    AUTO = "auto"


def _parse_action(action: Action | str) -> Action:
    try:
        return Action(str(action).strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown action '{action}'.  Available: {[a.value for a in Action]}"
        ) from None


class ControlDispatcher:
    """Sends control commands and reports success as a bool.

    Failures of any kind are logged and swallowed.
    """

    def __init__(self, client: DeviceClient) -> None:
        self._client = client

    async def set_fan_state(self, action: Action | str) -> bool:
        return await self.send(Peripheral.FAN, action)

    async def set_buzzer_state(self, action: Action | str) -> bool:
        return await self.send(Peripheral.BUZZER, action)

    async def send(self, peripheral: Peripheral | str, action: Action | str) -> bool:
        """Send ``/<peripheral>/<action>``; unknown actions raise ``ValueError``."""
        peripheral = Peripheral(peripheral)
        action = _parse_action(action)
        try:
            await self._client.send_command(peripheral.value, action.value)
        except MonitorError as exc:
            logger.warning("Error controlling %s (%s, %s): %s", peripheral, action, exc.kind, exc)
            return False

        logger.info("%s set to %s", peripheral.value.capitalize(), action.value)
        return True
