# (c) Copyright Datacraft, 2026
"""Tests for environment-driven settings."""
from pathlib import Path

import pytest
from pydantic import ValidationError

from scanstation.core.config import Settings


def test_defaults():
	settings = Settings(_env_file=None)

	assert settings.dicom_findscu_port == 11112
	assert settings.dicom_storescu_port == 11113
	assert settings.dicom_uid_root == '1.2.840.10008.1.2.3'
	assert settings.scan_max_pages == 50
	assert settings.scan_settle_delay == 2.0


def test_environment_overrides(monkeypatch):
	monkeypatch.setenv('SCANSTATION_DICOM_REMOTE_HOST', 'pacs.local')
	monkeypatch.setenv('SCANSTATION_DICOM_FINDSCU_PORT', '4242')
	monkeypatch.setenv('SCANSTATION_TEMP_FILES_DIR', '/srv/scans')

	settings = Settings(_env_file=None)

	assert settings.dicom_remote_host == 'pacs.local'
	assert settings.dicom_findscu_port == 4242
	assert settings.temp_files_dir == Path('/srv/scans')


def test_invalid_port():
	with pytest.raises(ValidationError):
		Settings(_env_file=None, dicom_storescu_port=70000)
