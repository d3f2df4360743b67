# (c) Copyright Datacraft, 2026
"""Capture device tracking and scan job orchestration via SANE."""
from .base import (
	CapturedPage,
	Device,
	DeviceDisconnectedError,
	DeviceNotFoundError,
	DeviceStatus,
	NoOutputProducedError,
	ScanFailedError,
	ScanInProgressError,
	ScannerError,
	ScanOptions,
	SUPPORTED_RESOLUTIONS,
)
from .orchestrator import ScanOrchestrator
from .registry import DeviceRegistry
from .sane import SaneCli

__all__ = [
	'CapturedPage',
	'Device',
	'DeviceDisconnectedError',
	'DeviceNotFoundError',
	'DeviceRegistry',
	'DeviceStatus',
	'NoOutputProducedError',
	'SaneCli',
	'ScanFailedError',
	'ScanInProgressError',
	'ScannerError',
	'ScanOptions',
	'ScanOrchestrator',
	'SUPPORTED_RESOLUTIONS',
]
