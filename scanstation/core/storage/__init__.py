# (c) Copyright Datacraft, 2026
"""Working storage for captured pages."""
from .base import (
	FileNotFoundInStorageError,
	InvalidFilenameError,
	StorageError,
	StoredFile,
)
from .local import CaptureStorage

__all__ = [
	'CaptureStorage',
	'FileNotFoundInStorageError',
	'InvalidFilenameError',
	'StorageError',
	'StoredFile',
]
