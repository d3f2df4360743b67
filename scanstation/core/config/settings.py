# (c) Copyright Datacraft, 2026
"""Application settings configuration."""
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	app_name: str = 'DICOMScanStation'
	app_host: str = '0.0.0.0'
	app_port: int = Field(gt=0, lt=65536, default=8081)
	api_prefix: str = '/api'
	web_title: str = 'DICOM Scan Station'
	log_config: Path | None = None
	log_level: str = 'INFO'

	# Working storage for captured pages
	temp_files_dir: Path = Path('/tmp/DICOMScanStation/tempfiles')
	allowed_extensions: list[str] = Field(
		default_factory=lambda: ['jpg', 'jpeg', 'png', 'tiff', 'tif']
	)

	# Capture tool (SANE scanimage)
	scanimage_path: str = 'scanimage'
	scanner_poll_interval: float = Field(gt=0, default=5.0)  # seconds
	scanner_timeout: float = Field(gt=0, default=30.0)
	scan_settle_delay: float = Field(ge=0, default=2.0)
	scan_max_pages: int = Field(gt=0, default=50)
	capabilities_timeout: float = Field(gt=0, default=10.0)

	# DICOM / DCMTK
	dcmtk_path: Path = Path('/usr/bin')
	dicom_local_aetitle: str = 'DICOMScanStation'
	dicom_query_aetitle: str = 'ANY-SCP'
	dicom_store_aetitle: str = 'ANY-SCP'
	dicom_remote_host: str = 'localhost'
	dicom_findscu_port: int = Field(gt=0, lt=65536, default=11112)
	dicom_storescu_port: int = Field(gt=0, lt=65536, default=11113)
	dicom_station_name: str = 'DICOMScanStation'
	dicom_uid_root: str = '1.2.840.10008.1.2.3'
	dicom_series_description: str = 'Scanner imported document'
	dicom_query_timeout: float = Field(gt=0, default=30.0)
	dicom_probe_timeout: float = Field(gt=0, default=10.0)
	dicom_tool_timeout: float = Field(gt=0, default=60.0)

	model_config = SettingsConfigDict(
		env_prefix='scanstation_',
		env_file='.env',
		env_file_encoding='utf-8',
		extra='ignore',
		frozen=True,
	)


_settings: Settings | None = None


def get_settings() -> Settings:
	global _settings
	if _settings is None:
		_settings = Settings()
	return _settings
