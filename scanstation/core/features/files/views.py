# (c) Copyright Datacraft, 2026
"""Captured file Pydantic schemas."""
from pydantic import BaseModel

from scanstation.core.storage import StoredFile


class FileInfo(BaseModel):
	name: str
	size: int
	modified_time: str
	extension: str

	@classmethod
	def from_stored(cls, stored: StoredFile) -> 'FileInfo':
		return cls(
			name=stored.name,
			size=stored.size,
			modified_time=stored.modified_time,
			extension=stored.extension,
		)


class FileListResponse(BaseModel):
	files: list[FileInfo]
	total: int


class MessageResponse(BaseModel):
	message: str
