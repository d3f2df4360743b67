# (c) Copyright Datacraft, 2026
"""Registry of attached capture devices, refreshed by a poll loop."""
import asyncio
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone

from scanstation.core.config import Settings
from scanstation.core.features.monitoring.metrics import CONNECTED_DEVICES
from scanstation.core.utils.process import CommandError

from .base import Device
from .parser import DeviceEntry, parse_device_listing
from .sane import SaneCli

logger = logging.getLogger(__name__)


class DeviceRegistry:
	"""
	Eventually-consistent view of the capture devices on this host.

	The poll loop is the only writer. Readers always receive copies so
	they never hold a reference into the registry while it is updated.
	Devices are never removed; one that disappears is marked disconnected.
	"""

	def __init__(
		self,
		settings: Settings,
		sane: SaneCli | None = None,
		logger: logging.Logger | None = None,
	):
		self.poll_interval = settings.scanner_poll_interval
		self._sane = sane or SaneCli(settings.scanimage_path)
		self._logger = logger or logging.getLogger(__name__)
		self._devices: dict[str, Device] = {}
		self._lock = threading.Lock()
		self._stop_event = asyncio.Event()
		self._stopped = False
		self.running = False

	async def start_monitoring(self) -> None:
		"""Poll for devices until stop() is called."""
		if self._stopped or self.running:
			return

		self.running = True
		self._logger.info(f"Starting scanner monitoring (interval={self.poll_interval}s)")

		try:
			while not self._stop_event.is_set():
				try:
					await self.refresh()
				except Exception as e:
					self._logger.exception(f"Error in scanner poll: {e}")

				try:
					await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_interval)
				except asyncio.TimeoutError:
					pass
		finally:
			self.running = False
			self._logger.info("Scanner monitoring stopped")

	def stop(self) -> None:
		"""Stop the poll loop. Further calls are no-ops."""
		if self._stopped:
			return
		self._stopped = True
		self._logger.info("Stopping scanner monitoring...")
		self._stop_event.set()

	@property
	def stopped(self) -> bool:
		return self._stopped

	async def refresh(self) -> None:
		"""Run one enumeration and reconcile the registry with its result."""
		try:
			result = await self._sane.list_devices()
		except CommandError as e:
			self._mark_all_disconnected(str(e))
			return

		if not result.ok:
			self._mark_all_disconnected(
				result.stderr.strip() or f"exit status {result.returncode}"
			)
			return

		self._reconcile(parse_device_listing(result.stdout))

	def _reconcile(self, entries: list[DeviceEntry]) -> None:
		now = datetime.now(timezone.utc)
		seen = set()

		with self._lock:
			for entry in entries:
				seen.add(entry.address)
				device = self._devices.get(entry.address)

				if device is None:
					self._devices[entry.address] = Device(
						address=entry.address,
						name=entry.name,
						connected=True,
						last_seen=now,
					)
					self._logger.info(f"New scanner detected: {entry.name} ({entry.address})")
					continue

				if not device.connected:
					self._logger.info(f"Scanner reconnected: {device.name} ({device.address})")
				device.name = entry.name
				device.connected = True
				# Wall clock may step backwards; last_seen must not
				if device.last_seen is None or now > device.last_seen:
					device.last_seen = now

			for address, device in self._devices.items():
				if address not in seen and device.connected:
					device.connected = False
					self._logger.info(f"Scanner disconnected: {device.name} ({address})")

			self._update_gauge()

	def _mark_all_disconnected(self, reason: str) -> None:
		self._logger.warning(f"Failed to detect scanners: {reason}")
		with self._lock:
			for device in self._devices.values():
				device.connected = False
			self._update_gauge()

	def _update_gauge(self) -> None:
		"""Callers hold the lock."""
		CONNECTED_DEVICES.set(sum(1 for d in self._devices.values() if d.connected))

	def list_devices(self) -> list[Device]:
		"""Snapshot of all known devices, sorted by name (case-insensitive)."""
		with self._lock:
			devices = [replace(device) for device in self._devices.values()]
		return sorted(devices, key=lambda d: d.name.lower())

	def list_connected(self) -> list[Device]:
		return [device for device in self.list_devices() if device.connected]

	def get(self, address: str) -> Device | None:
		"""Snapshot of a single device, or None if unknown."""
		with self._lock:
			device = self._devices.get(address)
			return replace(device) if device is not None else None
