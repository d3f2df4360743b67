# (c) Copyright Datacraft, 2026
"""Tests for patient search against the query SCP."""
import pytest

from scanstation.core.dicom import (
	Dcmtk,
	DirectoryError,
	DirectoryUnreachableError,
	PatientDirectory,
	SearchKind,
)
from scanstation.core.utils.process import CommandTimeoutError


def find_response(*patients: tuple[str, str]) -> str:
	"""findscu dump with one response per (patient_id, name)."""
	blocks = []
	for patient_id, name in patients:
		blocks.append(
			"I: Find Response: 1 (Pending)\n"
			f"I: (0010,0010) PN [{name} ]     #  10, 1 PatientName\n"
			f"I: (0010,0020) LO [{patient_id} ]  #   2, 1 PatientID\n"
			"I: (0010,0030) DA [19800101]      #   8, 1 PatientBirthDate\n"
			"I: (0010,0040) CS [M ]            #   2, 1 PatientSex\n"
			"\n"
		)
	return ''.join(blocks)


def key_value(args: list[str], key: str) -> str | None:
	for index, arg in enumerate(args):
		if arg == '-k' and args[index + 1].startswith(f"{key}="):
			return args[index + 1].split('=', 1)[1]
	return None


@pytest.fixture
def directory(settings, runner) -> PatientDirectory:
	dcmtk = Dcmtk(settings.dcmtk_path, settings.dicom_tool_timeout, runner)
	return PatientDirectory(settings, dcmtk)


@pytest.mark.asyncio
async def test_name_search_tries_three_patterns(directory, runner):
	runner.on('findscu', lambda args: runner.ok(args, stdout=find_response(('P1', 'SMITH^JOHN'))))

	await directory.search('Smith')

	calls = runner.calls_to('findscu')
	assert [key_value(call, 'PatientName') for call in calls] == ['Smith*', '*Smith*', '*Smith']

	first = calls[0]
	assert first[0] == '/opt/dcmtk/bin/findscu'
	assert first[1:7] == ['-v', '-S', '-aet', 'SCANSTATION', '-aec', 'QUERYSCP']
	assert first[-2:] == ['pacs.example.org', '11112']
	assert 'QueryRetrieveLevel=PATIENT' in first


@pytest.mark.asyncio
async def test_results_are_deduplicated_by_patient_id(directory, runner):
	def handler(args):
		if key_value(args, 'PatientName') == '*Smith*':
			return runner.ok(args, stdout=find_response(('P1', 'SMITH^JOHN'), ('P2', 'GOLDSMITH^ANN')))
		return runner.ok(args, stdout=find_response(('P1', 'SMITH^JOHN')))

	runner.on('findscu', handler)

	patients = await directory.search('Smith')

	assert [p.patient_id for p in patients] == ['P1', 'P2']


@pytest.mark.asyncio
async def test_association_failure_raises(directory, runner):
	runner.on('findscu', lambda args: runner.fail(
		args, stderr='F: Association Request Failed: 0006:0317 Peer aborted Association'
	))

	with pytest.raises(DirectoryError) as exc_info:
		await directory.search('Smith')

	assert 'Association Request Failed' in str(exc_info.value)
	assert len(runner.calls_to('findscu')) == 1


@pytest.mark.asyncio
async def test_unreachable_directory(directory, runner):
	runner.on('findscu', lambda args: runner.fail(args, stderr='E: Failed to establish association'))

	with pytest.raises(DirectoryUnreachableError) as exc_info:
		await directory.search('Smith')

	assert exc_info.value.host == 'pacs.example.org'
	assert exc_info.value.port == 11112

	calls = runner.calls_to('findscu')
	assert len(calls) == 4
	assert key_value(calls[-1], 'PatientName') == '*'
	assert runner.timeouts[-1] == 10.0


@pytest.mark.asyncio
async def test_pattern_timeout_is_skipped(directory, runner):
	def handler(args):
		if key_value(args, 'PatientName') == 'Smith*':
			return CommandTimeoutError(args, 30)
		return runner.ok(args, stdout=find_response(('P1', 'SMITH^JOHN')))

	runner.on('findscu', handler)

	patients = await directory.search('Smith')

	assert [p.patient_id for p in patients] == ['P1']


@pytest.mark.asyncio
async def test_no_match_with_reachable_directory(directory, runner):
	runner.on('findscu', lambda args: runner.ok(args, stdout='I: Received Final Find Response (Success)\n'))

	assert await directory.search('Nobody') == []
	assert len(runner.calls_to('findscu')) == 4


@pytest.mark.asyncio
async def test_birthdate_search_uses_single_query(directory, runner):
	runner.on('findscu', lambda args: runner.ok(args, stdout=find_response(('P7', 'DOE^JANE'))))

	patients = await directory.search('19800101', SearchKind.BIRTHDATE)

	calls = runner.calls_to('findscu')
	assert len(calls) == 1
	assert key_value(calls[0], 'PatientBirthDate') == '19800101'
	assert '-k' in calls[0] and 'PatientName' in calls[0]
	assert patients[0].name == 'DOE^JANE'
