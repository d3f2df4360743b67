# (c) Copyright Datacraft, 2026
import logging

from scanstation.core.scanner import DeviceRegistry

logger = logging.getLogger(__name__)


def scanner_monitor_status(registry: DeviceRegistry) -> dict:
	devices = registry.list_devices()
	connected = sum(1 for device in devices if device.connected)
	if not registry.running:
		logger.warning("Scanner monitor is not running")
	return {
		'running': registry.running,
		'devices': len(devices),
		'connected': connected,
	}
