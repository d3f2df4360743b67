# (c) Copyright Datacraft, 2026
"""Scan job orchestration against the SANE capture tool."""
import asyncio
import logging
import time
from pathlib import Path

from scanstation.core.config import Settings
from scanstation.core.utils.process import CommandError, CommandTimeoutError

from .base import (
	CapturedPage,
	Device,
	DeviceDisconnectedError,
	DeviceNotFoundError,
	NoOutputProducedError,
	ScanFailedError,
	ScanInProgressError,
	ScanOptions,
)
from .parser import parse_capabilities
from .registry import DeviceRegistry
from .sane import SaneCli, build_scan_args

logger = logging.getLogger(__name__)


def duplex_variants(base_name: str, page: int) -> list[str]:
	"""Front/back names some backends write instead of `<base>_<n>.jpg`."""
	return [
		f"{base_name}_{page}.jpg",
		f"{base_name}_front_{page}.jpg",
		f"{base_name}_back_{page}.jpg",
		f"{base_name}_{page}_front.jpg",
		f"{base_name}_{page}_back.jpg",
	]


class ScanOrchestrator:
	"""
	Runs one scan job at a time and discovers the pages it produced.

	scanimage does not reliably report the files written in batch mode,
	so pages are found by probing the expected names on disk.
	"""

	def __init__(
		self,
		settings: Settings,
		registry: DeviceRegistry,
		sane: SaneCli | None = None,
		logger: logging.Logger | None = None,
	):
		self.registry = registry
		self.output_dir = Path(settings.temp_files_dir)
		self.timeout = settings.scanner_timeout
		self.settle_delay = settings.scan_settle_delay
		self.max_pages = settings.scan_max_pages
		self.capabilities_timeout = settings.capabilities_timeout
		self._sane = sane or SaneCli(settings.scanimage_path)
		self._logger = logger or logging.getLogger(__name__)
		self._lock = asyncio.Lock()

	@property
	def busy(self) -> bool:
		return self._lock.locked()

	def _require_connected(self, address: str) -> Device:
		device = self.registry.get(address)
		if device is None:
			raise DeviceNotFoundError(address)
		if not device.connected:
			raise DeviceDisconnectedError(address, device.name)
		return device

	async def scan(
		self,
		address: str,
		options: ScanOptions | None = None,
	) -> list[CapturedPage]:
		"""
		Scan a document on the given device.

		Args:
			address: SANE device address
			options: Scan options, defaults applied when None

		Returns:
			Captured pages in page order

		Raises:
			DeviceNotFoundError: address unknown to the registry
			DeviceDisconnectedError: device known but not attached
			ScanInProgressError: another scan is running
			ScanFailedError: scanimage failed or timed out
			NoOutputProducedError: no page files were found afterwards
		"""
		if self._lock.locked():
			raise ScanInProgressError()

		async with self._lock:
			return await self._scan(address, options or ScanOptions())

	async def _scan(self, address: str, options: ScanOptions) -> list[CapturedPage]:
		self._require_connected(address)

		base_name = f"scan_{int(time.time())}"
		args = build_scan_args(address, options, self.output_dir, base_name)

		self._logger.info(
			f"Starting scan with options: multi_page={options.multi_page}, "
			f"duplex={options.duplex}, color={options.color}, "
			f"resolution={options.resolution}"
		)
		self._logger.debug(f"Scan command: {self._sane.executable} {' '.join(args)}")

		try:
			result = await self._sane.scan(args, self.timeout)
		except CommandTimeoutError as e:
			self._logger.error(f"Scan timed out: {e}")
			raise ScanFailedError(str(e), ' '.join(e.command)) from e
		except CommandError as e:
			self._logger.error(f"Scan could not start: {e}")
			raise ScanFailedError(str(e), ' '.join(e.command)) from e

		if not result.ok:
			detail = result.stderr.strip() or f"exit status {result.returncode}"
			self._logger.error(f"Scan failed: {detail}\n{result.command_line}")
			raise ScanFailedError(detail, result.command_line)

		# scanimage may still be flushing the last page to disk
		if self.settle_delay:
			await asyncio.sleep(self.settle_delay)

		filenames = self._discover_pages(base_name, options)
		if not filenames:
			raise NoOutputProducedError(base_name)

		self._logger.info(f"Document scanned successfully: {len(filenames)} pages")
		return [
			CapturedPage(filename=name, page_number=number)
			for number, name in enumerate(filenames, start=1)
		]

	def _discover_pages(self, base_name: str, options: ScanOptions) -> list[str]:
		if not options.multi_page:
			filename = f"{base_name}.jpg"
			if (self.output_dir / filename).exists():
				return [filename]
			return []

		filenames = self._probe_sequential(base_name)

		if options.duplex and not filenames:
			filenames = self._probe_duplex(base_name)

		if not filenames:
			self._log_directory_contents()

		return filenames

	def _probe_sequential(self, base_name: str) -> list[str]:
		"""Collect `<base>_1.jpg, <base>_2.jpg, ...` up to the first gap."""
		self._logger.debug(f"Looking for batch files with base: {base_name}")
		filenames = []
		for page in range(1, self.max_pages + 1):
			filename = f"{base_name}_{page}.jpg"
			if not (self.output_dir / filename).exists():
				self._logger.debug(f"File not found: {filename}")
				break
			filenames.append(filename)
			self._logger.debug(f"Found page {page}: {filename}")
		return filenames

	def _probe_duplex(self, base_name: str) -> list[str]:
		"""Collect front/back naming variants until a page number has none."""
		filenames = []
		for page in range(1, self.max_pages + 1):
			found = [
				name for name in duplex_variants(base_name, page)
				if (self.output_dir / name).exists()
			]
			if not found:
				break
			self._logger.debug(f"Found duplex page {page}: {found}")
			filenames.extend(found)
		return filenames

	def _log_directory_contents(self) -> None:
		try:
			names = sorted(p.name for p in self.output_dir.glob('*.jpg'))
		except OSError:
			return
		self._logger.debug(f"No scan files found. Files in temp directory: {names}")

	async def get_capabilities(self, address: str) -> dict[str, bool]:
		"""
		Report which scan options a device advertises.

		An empty mapping is returned when scanimage cannot describe the
		device; an unknown or disconnected device raises as for scan().
		"""
		self._require_connected(address)

		try:
			result = await self._sane.help(address, self.capabilities_timeout)
		except CommandError as e:
			self._logger.warning(f"Failed to get scanner capabilities: {e}")
			return {}

		if not result.ok:
			self._logger.warning(
				f"Failed to get scanner capabilities: {result.stderr.strip()}"
			)
			return {}

		return parse_capabilities(result.stdout)
