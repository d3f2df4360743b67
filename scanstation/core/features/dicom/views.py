# (c) Copyright Datacraft, 2026
"""Patient search and PACS export Pydantic schemas."""
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from scanstation.core.dicom import ExportJob, ExportStatus, PatientRecord


class PatientInfo(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	patient_id: str = Field(default='', alias='patientId')
	name: str = ''
	birth_date: str = Field(default='', alias='birthDate')
	gender: str = ''
	study_date: str = Field(default='', alias='studyDate')

	@classmethod
	def from_record(cls, record: PatientRecord) -> 'PatientInfo':
		return cls(
			patient_id=record.patient_id,
			name=record.name,
			birth_date=record.birth_date,
			gender=record.sex,
			study_date=record.study_date,
		)

	def to_record(self) -> PatientRecord:
		return PatientRecord(
			patient_id=self.patient_id,
			name=self.name,
			birth_date=self.birth_date,
			sex=self.gender,
			study_date=self.study_date,
		)


class PatientSearchResponse(BaseModel):
	patients: list[PatientInfo]
	total: int


class SendToPacsRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	patient_ids: list[str] = Field(..., alias='patientIds')
	document_creator: str = Field(..., min_length=1, alias='documentCreator')
	description: str = ''
	selected_patient: PatientInfo = Field(..., alias='selectedPatient')


class FileProgress(BaseModel):
	filename: str
	status: ExportStatus
	message: str
	progress: int

	@classmethod
	def from_job(cls, job: ExportJob) -> 'FileProgress':
		return cls(
			filename=job.filename,
			status=job.status,
			message=job.message,
			progress=job.progress,
		)


class ExportOutcome(str, Enum):
	COMPLETED = 'completed'
	PARTIAL = 'partial'
	FAILED = 'failed'


class SendToPacsResponse(BaseModel):
	message: str
	status: ExportOutcome
	files: list[FileProgress]
	total: int
	completed: int
	failed: int
	patient: str
