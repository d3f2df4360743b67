# (c) Copyright Datacraft, 2026
"""Scanner data models and error types."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DeviceStatus(str, Enum):
	"""Connectivity of a capture device."""
	CONNECTED = 'connected'
	DISCONNECTED = 'disconnected'


# Resolutions offered to operators (DPI)
SUPPORTED_RESOLUTIONS = (75, 150, 200, 300, 400, 600)


@dataclass
class Device:
	"""A capture device known to the registry, keyed by its SANE address."""
	address: str
	name: str
	connected: bool = True
	last_seen: datetime | None = None

	@property
	def status(self) -> DeviceStatus:
		return DeviceStatus.CONNECTED if self.connected else DeviceStatus.DISCONNECTED


@dataclass(frozen=True)
class ScanOptions:
	"""Options for a scan job."""
	multi_page: bool = True
	duplex: bool = False
	color: bool = True
	resolution: int = 300  # DPI

	def __post_init__(self):
		if self.resolution not in SUPPORTED_RESOLUTIONS:
			raise ValueError(
				f"Unsupported resolution {self.resolution}, "
				f"expected one of {SUPPORTED_RESOLUTIONS}"
			)


@dataclass(frozen=True)
class CapturedPage:
	"""A page written by the capture tool, by filename within storage."""
	filename: str
	page_number: int


class ScannerError(Exception):
	"""Base class for scanner failures."""

	def __init__(self, message: str, detail: str | None = None):
		self.detail = detail
		super().__init__(message)


class DeviceNotFoundError(ScannerError):
	"""Raised when the device address is unknown to the registry."""

	def __init__(self, address: str):
		self.address = address
		super().__init__(f"Scanner device '{address}' not found")


class DeviceDisconnectedError(ScannerError):
	"""Raised when the device is known but not currently attached."""

	def __init__(self, address: str, name: str):
		self.address = address
		super().__init__(f"Scanner '{name}' is not connected")


class ScanFailedError(ScannerError):
	"""The capture tool exited non-zero or timed out."""

	def __init__(self, detail: str, command_line: str = ''):
		self.command_line = command_line
		message = f"Scan failed: {detail}"
		if command_line:
			message = f"{message}\n{command_line}"
		super().__init__(message, detail)


class NoOutputProducedError(ScannerError):
	"""The capture tool succeeded but no page files could be found."""

	def __init__(self, base_name: str):
		self.base_name = base_name
		super().__init__(f"Scan completed but no files were created for {base_name}")


class ScanInProgressError(ScannerError):
	"""Another scan job is still running."""

	def __init__(self):
		super().__init__("A scan is already in progress")
