# (c) Copyright Datacraft, 2026
"""Local filesystem storage for captured pages awaiting export."""
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable

import aiofiles.os

from .base import (
	FileNotFoundInStorageError,
	InvalidFilenameError,
	StorageError,
	StoredFile,
)

logger = logging.getLogger(__name__)

# img2dcm only accepts JPEG input for the pages we export
EXPORTABLE_EXTENSIONS = ('.jpg', '.jpeg')

_DIGITS = re.compile(r'(\d+)')


def natural_key(name: str) -> list:
	"""Sort key that orders embedded numbers numerically (page_2 < page_10)."""
	return [int(part) if part.isdigit() else part.lower() for part in _DIGITS.split(name)]


class CaptureStorage:
	"""Working directory shared by the scanner and the export pipeline."""

	def __init__(self, base_path: str | Path, allowed_extensions: Iterable[str]):
		"""Initialize capture storage.

		Args:
			base_path: Directory the capture tool writes pages into
			allowed_extensions: Extensions (without dot) listed to callers
		"""
		self.base_path = Path(base_path)
		self.allowed_extensions = {
			f".{ext.lower().lstrip('.')}" for ext in allowed_extensions
		}
		self.base_path.mkdir(parents=True, exist_ok=True)

	def path_for(self, name: str) -> Path:
		"""Resolve a bare filename inside the storage directory."""
		if not name or name in ('.', '..') or '/' in name or '\\' in name:
			raise InvalidFilenameError(name)
		return self.base_path / name

	def list_files(self) -> list[StoredFile]:
		"""List captured files with an allowed extension, sorted by name."""
		files = []
		try:
			entries = list(self.base_path.iterdir())
		except OSError as e:
			raise StorageError(f"Failed to list {self.base_path}", e) from e

		for entry in entries:
			ext = entry.suffix.lower()
			if ext not in self.allowed_extensions:
				continue
			try:
				if not entry.is_file():
					continue
				stat = entry.stat()
			except OSError:
				# Removed between listing and stat
				continue
			files.append(StoredFile(
				name=entry.name,
				size=stat.st_size,
				modified_at=datetime.fromtimestamp(stat.st_mtime),
				extension=ext,
			))

		return sorted(files, key=lambda f: natural_key(f.name))

	def has_files(self) -> bool:
		return bool(self.list_files())

	def captured_images(self) -> list[Path]:
		"""Paths of captured pages eligible for export, in page order."""
		paths = [
			entry for entry in self.base_path.iterdir()
			if entry.suffix.lower() in EXPORTABLE_EXTENSIONS and entry.is_file()
		]
		logger.debug(f"Found {len(paths)} exportable images in {self.base_path}")
		return sorted(paths, key=lambda p: natural_key(p.name))

	def get(self, name: str) -> Path:
		path = self.path_for(name)
		if not path.is_file():
			raise FileNotFoundInStorageError(name)
		return path

	async def delete(self, name: str) -> None:
		path = self.get(name)
		await self.remove(path)

	async def remove(self, path: Path) -> None:
		try:
			await aiofiles.os.remove(path)
		except FileNotFoundError:
			raise FileNotFoundInStorageError(path.name)
		except OSError as e:
			raise StorageError(f"Failed to delete {path.name}", e) from e
