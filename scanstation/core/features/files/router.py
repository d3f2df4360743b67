# (c) Copyright Datacraft, 2026
"""Listing, download and deletion of captured files."""
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from scanstation.core.dependencies import StorageDep
from scanstation.core.storage import (
	FileNotFoundInStorageError,
	InvalidFilenameError,
	StorageError,
)

from .views import FileInfo, FileListResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


@router.get("", response_model=FileListResponse)
async def list_files(storage: StorageDep) -> FileListResponse:
	try:
		files = [FileInfo.from_stored(f) for f in storage.list_files()]
	except StorageError as e:
		raise HTTPException(status_code=500, detail=str(e)) from e
	return FileListResponse(files=files, total=len(files))


@router.get("/{filename}")
async def get_file(filename: str, storage: StorageDep) -> FileResponse:
	try:
		path = storage.get(filename)
	except InvalidFilenameError as e:
		raise HTTPException(status_code=400, detail=str(e)) from e
	except FileNotFoundInStorageError:
		raise HTTPException(status_code=404, detail="File not found")
	return FileResponse(path)


@router.delete("/{filename}", response_model=MessageResponse)
async def delete_file(filename: str, storage: StorageDep) -> MessageResponse:
	try:
		await storage.delete(filename)
	except InvalidFilenameError as e:
		raise HTTPException(status_code=400, detail=str(e)) from e
	except FileNotFoundInStorageError:
		raise HTTPException(status_code=404, detail="File not found")
	except StorageError as e:
		logger.error(f"Failed to delete {filename}: {e}")
		raise HTTPException(status_code=500, detail="Failed to delete file") from e

	logger.info(f"Deleted captured file {filename}")
	return MessageResponse(message="File deleted successfully")
