# (c) Copyright Datacraft, 2026
"""Parser for `findscu -v` C-FIND responses."""
import logging

from .base import PatientRecord

logger = logging.getLogger(__name__)

RESPONSE_MARKER = 'Find Response:'
ASSOCIATION_FAILED_MARKER = 'Association Request Failed'

# Attribute keyword in the dump -> PatientRecord field.
# PatientName is matched separately because `*` means "not returned".
FIELD_LABELS = (
	('PatientID', 'patient_id'),
	('PatientBirthDate', 'birth_date'),
	('PatientSex', 'sex'),
	('StudyDate', 'study_date'),
)


def bracket_value(line: str) -> str | None:
	"""Value between the first `[` and the following `]`, stripped."""
	start = line.find('[')
	if start == -1:
		return None
	end = line.find(']', start + 1)
	if end == -1:
		return None
	return line[start + 1:end].strip()


def is_association_failure(output: str) -> bool:
	return ASSOCIATION_FAILED_MARKER in output


def parse_find_response(output: str) -> list[PatientRecord]:
	"""
	Extract patient records from findscu's verbose dump.

	A record starts at each `Find Response:` line and collects bracketed
	values such as `(0010,0010) PN [DOE^JOHN ] # 8, 1 PatientName` until
	a blank line. Records without a patient name are dropped.
	"""
	patients: list[PatientRecord] = []
	current: PatientRecord | None = None
	in_response = False

	for line in output.splitlines():
		line = line.strip()

		if RESPONSE_MARKER in line:
			if current is not None and current.name:
				patients.append(current)
			current = PatientRecord()
			in_response = True
			continue

		if not in_response:
			continue

		if not line:
			in_response = False
			continue

		if 'PatientName' in line:
			name = bracket_value(line)
			if name and name != '*':
				current.name = name
			continue

		for label, attr in FIELD_LABELS:
			if label in line:
				value = bracket_value(line)
				if value is not None:
					setattr(current, attr, value)
				break

	if current is not None and current.name:
		patients.append(current)

	logger.debug(f"Parsed {len(patients)} patients from findscu output")
	return patients
