"""Tests for airq_monitor.control - fan and buzzer commands."""

from __future__ import annotations

import httpx
import pytest

from airq_monitor.control import Action, ControlDispatcher, Peripheral


class TestControlDispatcher:
    """Commands report success as a bool and never raise device failures."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["on", "off", "auto"])
    async def test_fan_actions(self, device, action: str) -> None:
        async with device.client() as client:
            ok = await ControlDispatcher(client).set_fan_state(action)
        assert ok is True
        assert device.paths() == [f"/fan/{action}"]

    @pytest.mark.asyncio
    async def test_buzzer_enum_action(self, device) -> None:
        async with device.client() as client:
            ok = await ControlDispatcher(client).set_buzzer_state(Action.AUTO)
        assert ok is True
        assert device.paths() == ["/buzzer/auto"]

    @pytest.mark.asyncio
    async def test_status_failed_is_rejected(self, device, caplog: pytest.LogCaptureFixture) -> None:
        device.queue("/fan/on", {"status": "failed"})
        async with device.client() as client:
            ok = await ControlDispatcher(client).set_fan_state("on")
        assert ok is False
        assert "rejected" in caplog.text

    @pytest.mark.asyncio
    async def test_http_error_swallowed(self, device) -> None:
        device.queue("/buzzer/on", httpx.Response(500))
        async with device.client() as client:
            assert await ControlDispatcher(client).set_buzzer_state("on") is False

    @pytest.mark.asyncio
    async def test_network_error_swallowed(self, device) -> None:
        device.queue("/fan/off", httpx.ConnectError("unreachable"))
        async with device.client() as client:
            assert await ControlDispatcher(client).set_fan_state("off") is False

    @pytest.mark.asyncio
    async def test_unknown_action_raises_before_request(self, device) -> None:
        async with device.client() as client:
            with pytest.raises(ValueError, match="Unknown action"):
                await ControlDispatcher(client).set_fan_state("turbo")
        assert device.requests == []

    @pytest.mark.asyncio
    async def test_send_generic(self, device) -> None:
        async with device.client() as client:
            assert await ControlDispatcher(client).send(Peripheral.BUZZER, "OFF") is True
        assert device.paths() == ["/buzzer/off"]
