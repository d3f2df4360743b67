# (c) Copyright Datacraft, 2026
"""DICOM data models and error types."""
import secrets
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class SearchKind(str, Enum):
	"""How a patient search term is matched."""
	NAME = 'name'
	BIRTHDATE = 'birthdate'


class ExportStatus(str, Enum):
	"""Stage of a captured page in the export pipeline."""
	CONVERTING = 'converting'
	UPDATING = 'updating'
	SENDING = 'sending'
	CLEANING = 'cleaning'
	COMPLETED = 'completed'
	FAILED = 'failed'


@dataclass
class PatientRecord:
	"""A patient returned by the remote directory (C-FIND)."""
	patient_id: str = ''
	name: str = ''
	birth_date: str = ''
	sex: str = ''
	study_date: str = ''


@dataclass
class ExportJob:
	"""Progress of one captured page through the export pipeline."""
	filename: str
	status: ExportStatus = ExportStatus.CONVERTING
	message: str = ''
	progress: int = 0  # 0-100


@dataclass(frozen=True)
class StudyContext:
	"""
	Identifiers shared by every page of one export run.

	All pages land in one study and one series; they differ only by
	instance number and the SOP instance UID derived from it.
	"""
	study_id: str
	study_instance_uid: str
	series_instance_uid: str

	@classmethod
	def generate(cls, uid_root: str, now: datetime | None = None) -> 'StudyContext':
		now = now or datetime.now()
		timestamp = now.strftime('%Y%m%d%H%M%S')
		study_instance_uid = f"{uid_root}.{timestamp}{now.microsecond:06d}"
		return cls(
			study_id=f"STUDY_{timestamp}_{secrets.token_hex(4)}",
			study_instance_uid=study_instance_uid,
			series_instance_uid=f"{study_instance_uid}.1",
		)

	def sop_instance_uid(self, instance_number: int) -> str:
		return f"{self.series_instance_uid}.{instance_number}"


class DicomError(Exception):
	"""Base class for DICOM tool failures; `detail` holds the tool output."""

	def __init__(self, message: str, detail: str | None = None):
		self.detail = detail
		super().__init__(message)


class DirectoryError(DicomError):
	"""The directory rejected the association; carries findscu's output."""

	def __init__(self, detail: str):
		super().__init__(f"DICOM error: {detail}", detail)


class DirectoryUnreachableError(DicomError):
	"""No query succeeded and the connectivity probe failed too."""

	def __init__(self, host: str, port: int, detail: str | None = None):
		self.host = host
		self.port = port
		super().__init__(f"Unable to connect to DICOM server at {host}:{port}", detail)


class ConversionFailedError(DicomError):
	"""img2dcm could not convert the captured image."""

	def __init__(self, detail: str):
		super().__init__(f"img2dcm failed: {detail}", detail)


class TagUpdateFailedError(DicomError):
	"""dcmodify could not write the patient/study tags."""

	def __init__(self, detail: str):
		super().__init__(f"dcmodify failed: {detail}", detail)


class TransmissionFailedError(DicomError):
	"""dcmsend could not store the object on the archive."""

	def __init__(self, detail: str):
		super().__init__(f"dcmsend failed: {detail}", detail)


class ExportInProgressError(DicomError):
	"""Another export run is still going."""

	def __init__(self):
		super().__init__("An export to PACS is already in progress")
