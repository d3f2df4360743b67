# (c) Copyright Datacraft, 2026
"""Scanner listing, capabilities and scan endpoints."""
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from scanstation.core.dependencies import OrchestratorDep, RegistryDep, StorageDep
from scanstation.core.features.files.views import FileInfo
from scanstation.core.features.monitoring.metrics import PAGES_CAPTURED_TOTAL, SCANS_TOTAL
from scanstation.core.scanner import (
	DeviceDisconnectedError,
	DeviceNotFoundError,
	ScanInProgressError,
	ScannerError,
)

from .views import ScannerListResponse, ScannerResponse, ScanRequest, ScanResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scanners"])


def scanner_http_error(error: ScannerError) -> HTTPException:
	if isinstance(error, DeviceNotFoundError):
		return HTTPException(status_code=404, detail=str(error))
	if isinstance(error, (DeviceDisconnectedError, ScanInProgressError)):
		return HTTPException(status_code=409, detail=str(error))
	return HTTPException(status_code=500, detail=str(error))


@router.get("/scanners", response_model=ScannerListResponse)
async def list_scanners(registry: RegistryDep) -> ScannerListResponse:
	"""List all known scanners, connected or not."""
	scanners = [ScannerResponse.from_device(d) for d in registry.list_devices()]
	return ScannerListResponse(scanners=scanners, total=len(scanners))


@router.get("/scanners/connected", response_model=ScannerListResponse)
async def list_connected_scanners(registry: RegistryDep) -> ScannerListResponse:
	scanners = [ScannerResponse.from_device(d) for d in registry.list_connected()]
	return ScannerListResponse(scanners=scanners, total=len(scanners))


@router.get("/scanners/{device:path}/capabilities")
async def get_scanner_capabilities(
	device: str,
	orchestrator: OrchestratorDep,
) -> dict[str, bool]:
	"""Capability flags advertised by the device."""
	try:
		return await orchestrator.get_capabilities(device)
	except ScannerError as e:
		raise scanner_http_error(e) from e


@router.post("/scan", response_model=ScanResponse)
async def start_scan(
	data: ScanRequest,
	orchestrator: OrchestratorDep,
	storage: StorageDep,
):
	"""Scan a document; refused while captured files are still pending."""
	files = storage.list_files()
	if files:
		return JSONResponse(
			status_code=409,
			content={
				"detail": "Files already exist. Please delete existing files before scanning.",
				"files": [FileInfo.from_stored(f).model_dump() for f in files],
			},
		)

	options = data.options.to_options() if data.options else None
	try:
		pages = await orchestrator.scan(data.device, options)
	except ScannerError as e:
		SCANS_TOTAL.labels(outcome=type(e).__name__).inc()
		raise scanner_http_error(e) from e

	SCANS_TOTAL.labels(outcome='success').inc()
	PAGES_CAPTURED_TOTAL.inc(len(pages))

	return ScanResponse(
		message="Scan completed successfully",
		filenames=[page.filename for page in pages],
		pages=len(pages),
	)
