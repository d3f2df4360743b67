# (c) Copyright Datacraft, 2026
"""Tests for scanimage output parsing and argument building."""
from pathlib import Path

import pytest

from scanstation.core.scanner import ScanOptions
from scanstation.core.scanner.parser import parse_capabilities, parse_device_listing
from scanstation.core.scanner.sane import build_scan_args


def test_parse_device_listing():
	output = (
		"device `fujitsu:fi-7030:211822' is a FUJITSU fi-7030 scanner\n"
		"\n"
		"some unrelated line\n"
		"device `epson2:libusb:001:004' is an Epson GT-S55 flatbed scanner\n"
	)

	entries = parse_device_listing(output)

	assert [(e.address, e.name) for e in entries] == [
		('fujitsu:fi-7030:211822', 'FUJITSU fi-7030 scanner'),
		('epson2:libusb:001:004', 'Epson GT-S55 flatbed scanner'),
	]


def test_parse_device_listing_no_devices():
	output = "No scanners were identified. If you were expecting something different...\n"
	assert parse_device_listing(output) == []


def test_parse_capabilities_from_help():
	output = (
		"Options specific to device `fujitsu:fi-7030:211822':\n"
		"    --source ADF Front|ADF Back|ADF Duplex [ADF Front]\n"
		"    --mode Lineart|Gray|Color [Lineart]\n"
		"    --resolution 50..600dpi [600]\n"
	)

	capabilities = parse_capabilities(output)

	assert capabilities == {
		'source': True,
		'color': True,
		'resolution': True,
		'multi_page': True,
	}


def test_parse_capabilities_assumes_common_flags():
	capabilities = parse_capabilities('')

	assert capabilities == {'multi_page': True, 'color': True, 'resolution': True}
	assert 'source' not in capabilities


def test_build_scan_args_batch_mode(tmp_path: Path):
	args = build_scan_args(
		'fujitsu:fi-7030:211822',
		ScanOptions(multi_page=True, duplex=True, color=False, resolution=200),
		tmp_path,
		'scan_1700000000',
	)

	assert args == [
		'-d', 'fujitsu:fi-7030:211822',
		'--format=jpeg',
		'--resolution', '200',
		'--mode', 'Gray',
		'--batch-start=1',
		'--batch-increment=1',
		f"--batch={tmp_path / 'scan_1700000000_%d.jpg'}",
		'--source', 'ADF Duplex',
	]


def test_build_scan_args_single_page(tmp_path: Path):
	args = build_scan_args('epson2:libusb:001:004', ScanOptions(multi_page=False), tmp_path, 'scan_1')

	assert args[-4:] == ['-o', str(tmp_path / 'scan_1.jpg'), '--source', 'ADF Front']
	assert '--mode' in args and args[args.index('--mode') + 1] == 'Color'
	assert not any(arg.startswith('--batch') for arg in args)


def test_scan_options_rejects_unsupported_resolution():
	with pytest.raises(ValueError):
		ScanOptions(resolution=123)
