# (c) Copyright Datacraft, 2026
"""FastAPI dependencies resolving the services held in app.state."""
from typing import Annotated

from fastapi import Depends, Request

from scanstation.core.config import Settings
from scanstation.core.dicom import ExportPipeline, PatientDirectory
from scanstation.core.scanner import DeviceRegistry, ScanOrchestrator
from scanstation.core.storage import CaptureStorage


def get_app_settings(request: Request) -> Settings:
	return request.app.state.settings


def get_registry(request: Request) -> DeviceRegistry:
	return request.app.state.registry


def get_orchestrator(request: Request) -> ScanOrchestrator:
	return request.app.state.orchestrator


def get_directory(request: Request) -> PatientDirectory:
	return request.app.state.directory


def get_pipeline(request: Request) -> ExportPipeline:
	return request.app.state.pipeline


def get_storage(request: Request) -> CaptureStorage:
	return request.app.state.storage


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
RegistryDep = Annotated[DeviceRegistry, Depends(get_registry)]
OrchestratorDep = Annotated[ScanOrchestrator, Depends(get_orchestrator)]
DirectoryDep = Annotated[PatientDirectory, Depends(get_directory)]
PipelineDep = Annotated[ExportPipeline, Depends(get_pipeline)]
StorageDep = Annotated[CaptureStorage, Depends(get_storage)]
