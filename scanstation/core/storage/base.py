# (c) Copyright Datacraft, 2026
"""Captured file metadata and storage errors."""
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StoredFile:
	"""Metadata about a file in the working storage area."""
	name: str
	size: int
	modified_at: datetime
	extension: str

	@property
	def modified_time(self) -> str:
		return self.modified_at.strftime('%Y-%m-%d %H:%M:%S')


class StorageError(Exception):
	"""General storage operation error."""

	def __init__(self, message: str, cause: Exception | None = None):
		self.cause = cause
		super().__init__(message)


class InvalidFilenameError(StorageError):
	"""Raised when a requested name would escape the storage directory."""

	def __init__(self, name: str):
		self.name = name
		super().__init__(f"Invalid filename: {name!r}")


class FileNotFoundInStorageError(StorageError):
	"""Raised when requested file doesn't exist."""

	def __init__(self, name: str):
		self.name = name
		super().__init__(f"File not found: {name}")
