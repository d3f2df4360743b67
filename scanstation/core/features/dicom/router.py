# (c) Copyright Datacraft, 2026
"""Patient search and PACS export endpoints."""
import logging

from fastapi import APIRouter, HTTPException, Query

from scanstation.core.dependencies import DirectoryDep, PipelineDep, StorageDep
from scanstation.core.dicom import (
	DicomError,
	ExportInProgressError,
	ExportStatus,
	SearchKind,
)
from scanstation.core.features.monitoring.metrics import (
	EXPORTED_FILES_TOTAL,
	PATIENT_SEARCHES_TOTAL,
)

from .views import (
	ExportOutcome,
	FileProgress,
	PatientInfo,
	PatientSearchResponse,
	SendToPacsRequest,
	SendToPacsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dicom", tags=["dicom"])


@router.get("/search", response_model=PatientSearchResponse)
async def search_patients(
	directory: DirectoryDep,
	q: str = Query(default=''),
	type: SearchKind = Query(default=SearchKind.NAME),
) -> PatientSearchResponse:
	"""Search the remote directory by patient name or birth date."""
	term = q.strip()
	if not term:
		raise HTTPException(status_code=400, detail="Search term is required")

	try:
		records = await directory.search(term, type)
	except DicomError as e:
		logger.error(f"Patient search failed: {e}")
		PATIENT_SEARCHES_TOTAL.labels(outcome='error').inc()
		raise HTTPException(status_code=500, detail=str(e)) from e

	PATIENT_SEARCHES_TOTAL.labels(outcome='found' if records else 'empty').inc()
	patients = [PatientInfo.from_record(r) for r in records]
	return PatientSearchResponse(patients=patients, total=len(patients))


@router.post("/send", response_model=SendToPacsResponse)
async def send_to_pacs(
	data: SendToPacsRequest,
	pipeline: PipelineDep,
	storage: StorageDep,
) -> SendToPacsResponse:
	"""Export every captured page to the PACS for the selected patient."""
	if not storage.captured_images():
		raise HTTPException(status_code=400, detail="No scanned files to send")

	patient = data.selected_patient
	logger.info(f"Sending captured files for patient {patient.patient_id} ({patient.name})")

	try:
		jobs = await pipeline.export(
			data.patient_ids,
			data.document_creator,
			data.description,
			patient.to_record(),
		)
	except ExportInProgressError as e:
		raise HTTPException(status_code=409, detail=str(e)) from e

	completed = sum(1 for job in jobs if job.status == ExportStatus.COMPLETED)
	failed = len(jobs) - completed
	for job in jobs:
		EXPORTED_FILES_TOTAL.labels(status=job.status.value).inc()

	if failed == 0:
		outcome, message = ExportOutcome.COMPLETED, "Files sent to PACS successfully"
	elif completed:
		outcome, message = ExportOutcome.PARTIAL, f"{failed} of {len(jobs)} files failed to send"
	else:
		outcome, message = ExportOutcome.FAILED, "All files failed to send"

	return SendToPacsResponse(
		message=message,
		status=outcome,
		files=[FileProgress.from_job(job) for job in jobs],
		total=len(jobs),
		completed=completed,
		failed=failed,
		patient=patient.name,
	)
