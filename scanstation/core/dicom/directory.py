# (c) Copyright Datacraft, 2026
"""Patient search against the remote DICOM directory (C-FIND)."""
import logging

from scanstation.core.config import Settings
from scanstation.core.utils.process import CommandError

from .base import DirectoryError, DirectoryUnreachableError, PatientRecord, SearchKind
from .dcmtk import Dcmtk
from .parser import is_association_failure, parse_find_response

logger = logging.getLogger(__name__)


def search_patterns(term: str, kind: SearchKind) -> list[str]:
	"""
	Query patterns for a search term.

	C-FIND only understands simple wildcards, so a name search is issued
	as prefix, substring and suffix queries.
	"""
	if kind == SearchKind.BIRTHDATE:
		return [term]
	return [f"{term}*", f"*{term}*", f"*{term}"]


def query_keys(pattern: str, kind: SearchKind) -> list[str]:
	keys = ['QueryRetrieveLevel=PATIENT']
	if kind == SearchKind.BIRTHDATE:
		keys += ['PatientName', 'PatientID', f"PatientBirthDate={pattern}", 'PatientSex']
	else:
		keys += [f"PatientName={pattern}", 'PatientID', 'PatientBirthDate', 'PatientSex']
	return keys


class PatientDirectory:
	"""Resolves a search term to patient records from the query SCP."""

	def __init__(
		self,
		settings: Settings,
		dcmtk: Dcmtk | None = None,
		logger: logging.Logger | None = None,
	):
		self.host = settings.dicom_remote_host
		self.port = settings.dicom_findscu_port
		self.calling_aetitle = settings.dicom_local_aetitle
		self.called_aetitle = settings.dicom_query_aetitle
		self.query_timeout = settings.dicom_query_timeout
		self.probe_timeout = settings.dicom_probe_timeout
		self._dcmtk = dcmtk or Dcmtk(settings.dcmtk_path, settings.dicom_tool_timeout)
		self._logger = logger or logging.getLogger(__name__)

	async def search(
		self,
		term: str,
		kind: SearchKind | str = SearchKind.NAME,
	) -> list[PatientRecord]:
		"""
		Search patients by name or birth date.

		Results of all patterns are merged and de-duplicated by patient ID,
		keeping the first occurrence.

		Raises:
			DirectoryError: the SCP rejected the association
			DirectoryUnreachableError: nothing matched and the SCP did not
				answer a wildcard probe either
		"""
		kind = SearchKind(kind)
		patterns = search_patterns(term, kind)
		self._logger.info(f"Searching for patients with term: {term} (type: {kind.value})")
		self._logger.debug(f"Trying search patterns: {patterns}")

		patients: list[PatientRecord] = []
		seen: set[str] = set()

		for pattern in patterns:
			for patient in await self._query(pattern, kind):
				if patient.patient_id and patient.patient_id not in seen:
					seen.add(patient.patient_id)
					patients.append(patient)

		if not patients:
			self._logger.warning("No patients found after trying all patterns")
			await self._probe()

		self._logger.info(f"Found {len(patients)} unique patients")
		return patients

	async def _query(self, pattern: str, kind: SearchKind) -> list[PatientRecord]:
		self._logger.debug(f"Trying pattern: {pattern}")
		try:
			result = await self._dcmtk.findscu(
				self.host,
				self.port,
				self.calling_aetitle,
				self.called_aetitle,
				query_keys(pattern, kind),
				self.query_timeout,
			)
		except CommandError as e:
			self._logger.debug(f"Pattern {pattern} failed: {e}")
			return []

		output = result.output
		if is_association_failure(output):
			self._logger.error(f"findscu error: {output}")
			raise DirectoryError(output.strip())

		if not result.ok:
			self._logger.debug(f"Pattern {pattern} failed with exit status {result.returncode}: {output}")
			return []

		return parse_find_response(output)

	async def _probe(self) -> None:
		"""Wildcard query distinguishing "no match" from "no server"."""
		try:
			result = await self._dcmtk.findscu(
				self.host,
				self.port,
				self.calling_aetitle,
				self.called_aetitle,
				['QueryRetrieveLevel=PATIENT', 'PatientName=*'],
				self.probe_timeout,
			)
		except CommandError as e:
			self._logger.error(f"Connection test failed: {e}")
			raise DirectoryUnreachableError(self.host, self.port, str(e)) from e

		if not result.ok:
			self._logger.error(f"Connection test failed: exit status {result.returncode}")
			raise DirectoryUnreachableError(self.host, self.port, result.output.strip())
