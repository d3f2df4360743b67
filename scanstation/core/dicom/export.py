# (c) Copyright Datacraft, 2026
"""
Export of captured pages to the PACS.

Each page goes through convert -> tag -> send -> clean. A failure in
one of the first three stages marks only that page as failed; the
remaining pages are still processed.
"""
import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable

from scanstation.core.config import Settings
from scanstation.core.storage import CaptureStorage, StorageError

from .base import (
	ConversionFailedError,
	DicomError,
	ExportInProgressError,
	ExportJob,
	ExportStatus,
	PatientRecord,
	StudyContext,
	TagUpdateFailedError,
	TransmissionFailedError,
)
from .dcmtk import Dcmtk

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ExportJob], None]

# Progress checkpoints (percent) reached after each stage
PROGRESS_CONVERTED = 20
PROGRESS_TAGGED = 50
PROGRESS_SENT = 80
PROGRESS_CLEANED = 90
PROGRESS_DONE = 100

FAILURE_PREFIXES = {
	ConversionFailedError: 'Conversion failed',
	TagUpdateFailedError: 'Update failed',
	TransmissionFailedError: 'Upload failed',
}


def format_patient_name(name: str) -> str:
	"""
	Format a display name as a DICOM PN value `Last^First^Middle`.

	The first word is taken as the family name; a single word is
	returned unchanged and words past the third are dropped.
	"""
	parts = name.split()
	if not parts:
		return ''
	if len(parts) == 1:
		return parts[0]
	return '^'.join(parts[:3])


class ExportPipeline:
	"""Converts, tags and sends every captured page as one DICOM study."""

	def __init__(
		self,
		settings: Settings,
		storage: CaptureStorage,
		dcmtk: Dcmtk | None = None,
		logger: logging.Logger | None = None,
	):
		self.storage = storage
		self.host = settings.dicom_remote_host
		self.port = settings.dicom_storescu_port
		self.calling_aetitle = settings.dicom_local_aetitle
		self.called_aetitle = settings.dicom_store_aetitle
		self.station_name = settings.dicom_station_name
		self.uid_root = settings.dicom_uid_root
		self.series_description = settings.dicom_series_description
		self._dcmtk = dcmtk or Dcmtk(settings.dcmtk_path, settings.dicom_tool_timeout)
		self._logger = logger or logging.getLogger(__name__)
		self._lock = asyncio.Lock()

	@property
	def busy(self) -> bool:
		return self._lock.locked()

	async def export(
		self,
		patient_ids: list[str],
		document_creator: str,
		description: str,
		selected_patient: PatientRecord,
		on_progress: ProgressCallback | None = None,
	) -> list[ExportJob]:
		"""
		Send all captured pages to the PACS for the selected patient.

		Args:
			patient_ids: IDs chosen by the operator (informational)
			document_creator: Written to InstitutionName
			description: Written to StudyDescription
			selected_patient: Patient whose demographics are tagged
			on_progress: Called with a copy of a page's job on every change

		Returns:
			One ExportJob per page, in page order

		Raises:
			ExportInProgressError: another export run is active
		"""
		if self._lock.locked():
			raise ExportInProgressError()

		async with self._lock:
			return await self._export(
				patient_ids, document_creator, description, selected_patient, on_progress
			)

	async def _export(
		self,
		patient_ids: list[str],
		document_creator: str,
		description: str,
		patient: PatientRecord,
		on_progress: ProgressCallback | None,
	) -> list[ExportJob]:
		study = StudyContext.generate(self.uid_root)
		images = self.storage.captured_images()

		self._logger.info(
			f"Starting PACS upload of {len(images)} files for patient "
			f"{patient.patient_id} ({patient.name}), selected ids={patient_ids}"
		)
		self._logger.info(
			f"Generated StudyID {study.study_id}, "
			f"Study Instance UID {study.study_instance_uid}, "
			f"Series Instance UID {study.series_instance_uid}"
		)

		jobs = []
		for index, image in enumerate(images):
			job = ExportJob(filename=image.name)
			jobs.append(job)
			await self._process(
				image, index + 1, job, study, patient, document_creator, description, on_progress
			)

		completed = sum(1 for job in jobs if job.status == ExportStatus.COMPLETED)
		self._logger.info(f"PACS upload finished: {completed}/{len(jobs)} files completed")
		return jobs

	async def _process(
		self,
		image: Path,
		instance_number: int,
		job: ExportJob,
		study: StudyContext,
		patient: PatientRecord,
		document_creator: str,
		description: str,
		on_progress: ProgressCallback | None,
	) -> None:
		def advance(status: ExportStatus, progress: int, message: str) -> None:
			job.status = status
			job.progress = progress
			job.message = message
			if on_progress is None:
				return
			try:
				on_progress(replace(job))
			except Exception:
				# A broken listener must not fail the page
				self._logger.exception(f"Progress callback failed for {job.filename}")

		dcm_file = image.with_suffix('.dcm')
		self._logger.info(f"Processing file: {image}")
		advance(ExportStatus.CONVERTING, 0, 'Converting JPG to DICOM format...')

		try:
			await self._dcmtk.img2dcm(image, dcm_file)
			advance(ExportStatus.UPDATING, PROGRESS_CONVERTED, 'Updating DICOM with patient data...')

			tags = self._build_tags(
				patient, document_creator, description, study, instance_number
			)
			await self._dcmtk.dcmodify(dcm_file, tags)
			advance(ExportStatus.SENDING, PROGRESS_TAGGED, 'Sending to PACS server...')

			await self._dcmtk.dcmsend(
				dcm_file, self.host, self.port, self.calling_aetitle, self.called_aetitle
			)
			advance(ExportStatus.CLEANING, PROGRESS_SENT, 'Cleaning up temporary files...')
		except DicomError as e:
			self._logger.error(f"Failed to export {image.name}: {e}")
			prefix = FAILURE_PREFIXES.get(type(e), 'Export failed')
			advance(ExportStatus.FAILED, 0, f"{prefix}: {e}")
			return

		message = 'Successfully uploaded to PACS and cleaned up'
		if not await self._cleanup(image, dcm_file):
			message = 'Successfully uploaded to PACS; temporary files were not removed'
		advance(ExportStatus.CLEANING, PROGRESS_CLEANED, 'Cleaned up temporary files')
		advance(ExportStatus.COMPLETED, PROGRESS_DONE, message)
		self._logger.info(f"Successfully processed, sent, and cleaned up {image.name}")

	def _build_tags(
		self,
		patient: PatientRecord,
		document_creator: str,
		description: str,
		study: StudyContext,
		instance_number: int,
	) -> dict[str, str]:
		sop_instance_uid = study.sop_instance_uid(instance_number)
		self._logger.debug(
			f"SOP Instance UID {sop_instance_uid} for instance {instance_number}"
		)
		return {
			'(0010,0010)': format_patient_name(patient.name),  # PatientName
			'(0010,0020)': patient.patient_id,  # PatientID
			'(0010,0030)': patient.birth_date,  # PatientBirthDate
			'(0010,0040)': patient.sex,  # PatientSex
			'(0008,0080)': document_creator,  # InstitutionName
			'(0008,1010)': self.station_name,  # StationName
			'(0020,0010)': study.study_id,  # StudyID
			'(0020,000D)': study.study_instance_uid,
			'(0020,000E)': study.series_instance_uid,
			'(0008,0018)': sop_instance_uid,
			'(0020,0013)': str(instance_number),  # InstanceNumber
			'(0008,1030)': description,  # StudyDescription
			'(0008,103E)': self.series_description,  # SeriesDescription
		}

	async def _cleanup(self, image: Path, dcm_file: Path) -> bool:
		"""Remove the source JPEG and the converted file; False on any failure."""
		clean = True
		for path in (image, dcm_file):
			try:
				await self.storage.remove(path)
			except StorageError as e:
				self._logger.warning(f"Failed to cleanup {path}: {e}")
				clean = False
		return clean
