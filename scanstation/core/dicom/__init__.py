# (c) Copyright Datacraft, 2026
"""Patient lookup and PACS export through the DCMTK tools."""
from .base import (
	ConversionFailedError,
	DicomError,
	DirectoryError,
	DirectoryUnreachableError,
	ExportInProgressError,
	ExportJob,
	ExportStatus,
	PatientRecord,
	SearchKind,
	StudyContext,
	TagUpdateFailedError,
	TransmissionFailedError,
)
from .dcmtk import Dcmtk
from .directory import PatientDirectory
from .export import ExportPipeline, format_patient_name

__all__ = [
	'ConversionFailedError',
	'Dcmtk',
	'DicomError',
	'DirectoryError',
	'DirectoryUnreachableError',
	'ExportInProgressError',
	'ExportJob',
	'ExportPipeline',
	'ExportStatus',
	'PatientDirectory',
	'PatientRecord',
	'SearchKind',
	'StudyContext',
	'TagUpdateFailedError',
	'TransmissionFailedError',
	'format_patient_name',
]
