# (c) Copyright Datacraft, 2026
"""Prometheus metrics for scans, searches and exports."""
from prometheus_client import Counter, Gauge

SCANS_TOTAL = Counter(
	'scanstation_scans_total',
	'Scan jobs by outcome',
	['outcome'],
)
PAGES_CAPTURED_TOTAL = Counter(
	'scanstation_pages_captured_total',
	'Pages written by successful scan jobs',
)
PATIENT_SEARCHES_TOTAL = Counter(
	'scanstation_patient_searches_total',
	'Patient directory searches by outcome',
	['outcome'],
)
EXPORTED_FILES_TOTAL = Counter(
	'scanstation_exported_files_total',
	'Pages processed by the PACS export by final status',
	['status'],
)
CONNECTED_DEVICES = Gauge(
	'scanstation_connected_devices',
	'Capture devices currently connected',
)
