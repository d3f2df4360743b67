# (c) Copyright Datacraft, 2026
"""Tests for the device registry and its poll loop."""
import asyncio
import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from prometheus_client import REGISTRY

from scanstation.core.scanner import DeviceRegistry, DeviceStatus, SaneCli
from scanstation.core.utils.process import CommandTimeoutError

FUJITSU = 'fujitsu:fi-7030:211822'
EPSON = 'epson2:libusb:001:004'


@pytest.fixture
def registry(settings, runner) -> DeviceRegistry:
	return DeviceRegistry(settings, SaneCli('scanimage', runner))


@pytest.mark.asyncio
async def test_refresh_lists_devices_sorted_by_name(registry):
	await registry.refresh()

	devices = registry.list_devices()

	assert [d.address for d in devices] == [EPSON, FUJITSU]
	assert all(d.connected for d in devices)
	assert all(d.status == DeviceStatus.CONNECTED for d in devices)
	assert all(d.last_seen is not None for d in devices)


@pytest.mark.asyncio
async def test_missing_device_is_marked_disconnected_not_removed(registry, runner):
	await registry.refresh()

	runner.on('scanimage', lambda args: runner.ok(
		args, stdout=f"device `{FUJITSU}' is a FUJITSU fi-7030 scanner\n"
	))
	await registry.refresh()

	assert len(registry.list_devices()) == 2
	assert [d.address for d in registry.list_connected()] == [FUJITSU]
	epson = registry.get(EPSON)
	assert epson.connected is False
	assert epson.status == DeviceStatus.DISCONNECTED


@pytest.mark.asyncio
async def test_device_absent_twice_is_disconnected_once(registry, runner, caplog):
	caplog.set_level(logging.INFO, logger='scanstation.core.scanner.registry')
	await registry.refresh()

	runner.on('scanimage', lambda args: runner.ok(
		args, stdout=f"device `{FUJITSU}' is a FUJITSU fi-7030 scanner\n"
	))
	await registry.refresh()
	await registry.refresh()

	assert [d.address for d in registry.list_devices()] == [EPSON, FUJITSU]
	assert registry.get(EPSON).connected is False
	assert registry.get(FUJITSU).connected is True

	disconnects = [
		record for record in caplog.records
		if record.getMessage().startswith('Scanner disconnected') and EPSON in record.getMessage()
	]
	assert len(disconnects) == 1


@pytest.mark.asyncio
async def test_connected_devices_gauge_follows_polls(registry, runner):
	await registry.refresh()
	assert REGISTRY.get_sample_value('scanstation_connected_devices') == 2

	runner.on('scanimage', lambda args: runner.ok(
		args, stdout=f"device `{FUJITSU}' is a FUJITSU fi-7030 scanner\n"
	))
	await registry.refresh()
	assert REGISTRY.get_sample_value('scanstation_connected_devices') == 1

	runner.on('scanimage', lambda args: runner.fail(args, stderr='sane: I/O error'))
	await registry.refresh()
	assert REGISTRY.get_sample_value('scanstation_connected_devices') == 0


@pytest.mark.asyncio
async def test_device_reconnects(registry, runner):
	await registry.refresh()
	runner.on('scanimage', lambda args: runner.ok(args, stdout=''))
	await registry.refresh()
	assert registry.list_connected() == []

	runner.on_scan()
	await registry.refresh()

	assert len(registry.list_connected()) == 2


@pytest.mark.asyncio
async def test_enumeration_failure_marks_all_disconnected(registry, runner):
	await registry.refresh()

	runner.on('scanimage', lambda args: runner.fail(args, stderr='sane: I/O error'))
	await registry.refresh()

	assert len(registry.list_devices()) == 2
	assert registry.list_connected() == []


@pytest.mark.asyncio
async def test_enumeration_timeout_marks_all_disconnected(registry, runner):
	await registry.refresh()

	runner.on('scanimage', lambda args: CommandTimeoutError(args, 30))
	await registry.refresh()

	assert registry.list_connected() == []


@pytest.mark.asyncio
async def test_last_seen_never_moves_backwards(registry):
	first = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

	with patch('scanstation.core.scanner.registry.datetime') as mock_datetime:
		mock_datetime.now.return_value = first
		await registry.refresh()

		mock_datetime.now.return_value = first - timedelta(hours=1)
		await registry.refresh()

	assert registry.get(FUJITSU).last_seen == first


@pytest.mark.asyncio
async def test_readers_receive_copies(registry):
	await registry.refresh()

	device = registry.get(FUJITSU)
	device.connected = False
	device.name = 'changed'

	assert registry.get(FUJITSU).connected is True
	assert registry.get(FUJITSU).name == 'FUJITSU fi-7030 scanner'
	assert registry.get('unknown:device') is None


@pytest.mark.asyncio
async def test_monitoring_polls_until_stopped(registry, runner):
	task = asyncio.create_task(registry.start_monitoring())
	await asyncio.sleep(0.05)

	assert registry.running
	assert len(runner.calls_to('scanimage')) >= 2

	registry.stop()
	await asyncio.wait_for(task, timeout=1)

	assert registry.running is False
	assert registry.stopped


@pytest.mark.asyncio
async def test_monitoring_survives_poll_errors(registry, runner):
	calls = []

	def flaky(args):
		calls.append(args)
		if len(calls) == 1:
			raise RuntimeError('boom')
		return runner.ok(args, stdout=f"device `{FUJITSU}' is a FUJITSU fi-7030 scanner\n")

	runner.on('scanimage', flaky)
	task = asyncio.create_task(registry.start_monitoring())
	await asyncio.sleep(0.05)
	registry.stop()
	await asyncio.wait_for(task, timeout=1)

	assert len(calls) >= 2
	assert registry.get(FUJITSU) is not None


@pytest.mark.asyncio
async def test_stop_is_idempotent(registry):
	registry.stop()
	registry.stop()

	assert registry.stopped
	# Monitoring never starts once stopped
	await asyncio.wait_for(registry.start_monitoring(), timeout=1)
	assert registry.running is False
