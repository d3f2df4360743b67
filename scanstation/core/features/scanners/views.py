# (c) Copyright Datacraft, 2026
"""Scanner Pydantic schemas."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scanstation.core.scanner import Device, DeviceStatus, ScanOptions, SUPPORTED_RESOLUTIONS


class ScannerResponse(BaseModel):
	name: str
	device: str
	connected: bool
	status: DeviceStatus
	last_seen: datetime | None = None

	@classmethod
	def from_device(cls, device: Device) -> 'ScannerResponse':
		return cls(
			name=device.name,
			device=device.address,
			connected=device.connected,
			status=device.status,
			last_seen=device.last_seen,
		)


class ScannerListResponse(BaseModel):
	scanners: list[ScannerResponse]
	total: int


class ScanOptionsRequest(BaseModel):
	model_config = ConfigDict(extra='forbid')

	multi_page: bool = True
	duplex: bool = False
	color: bool = True
	resolution: int = 300

	@field_validator('resolution')
	@classmethod
	def check_resolution(cls, value: int) -> int:
		if value not in SUPPORTED_RESOLUTIONS:
			raise ValueError(f"resolution must be one of {list(SUPPORTED_RESOLUTIONS)}")
		return value

	def to_options(self) -> ScanOptions:
		return ScanOptions(
			multi_page=self.multi_page,
			duplex=self.duplex,
			color=self.color,
			resolution=self.resolution,
		)


class ScanRequest(BaseModel):
	device: str = Field(..., min_length=1)
	options: ScanOptionsRequest | None = None


class ScanResponse(BaseModel):
	message: str
	filenames: list[str]
	pages: int
