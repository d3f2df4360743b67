# (c) Copyright Datacraft, 2026
"""DCMTK command-line tool wrappers (img2dcm, dcmodify, dcmsend, findscu)."""
import logging
from pathlib import Path
from typing import Mapping

from scanstation.core.utils.process import (
	CommandError,
	CommandResult,
	CommandRunner,
	run_command,
)

from .base import ConversionFailedError, TagUpdateFailedError, TransmissionFailedError

logger = logging.getLogger(__name__)


def _failure_detail(result: CommandResult) -> str:
	return f"exit status {result.returncode}, output: {result.output.strip()}"


class Dcmtk:
	"""
	DCMTK binaries resolved under a single install directory.

	Conversion, tagging and sending raise the matching DicomError with
	the tool's output; querying returns the raw result because the
	caller has to inspect the text even on failure.
	"""

	def __init__(
		self,
		bin_path: str | Path = '/usr/bin',
		timeout: float = 60.0,
		runner: CommandRunner | None = None,
	):
		self.bin_path = Path(bin_path)
		self.timeout = timeout
		self._run = runner or run_command

	def tool(self, name: str) -> str:
		return str(self.bin_path / name)

	async def img2dcm(self, source: Path, dest: Path) -> None:
		"""Wrap a JPEG into a DICOM Secondary Capture object."""
		args = [self.tool('img2dcm'), str(source), str(dest)]
		try:
			result = await self._run(args, self.timeout)
		except CommandError as e:
			raise ConversionFailedError(str(e)) from e

		if not result.ok:
			raise ConversionFailedError(_failure_detail(result))
		logger.debug(f"img2dcm output: {result.output}")

	async def dcmodify(self, path: Path, tags: Mapping[str, str]) -> None:
		"""
		Insert or overwrite attributes in place, without a backup file.

		Args:
			path: DICOM file to modify
			tags: Mapping of tag path, e.g. `(0010,0010)`, to value
		"""
		args = [self.tool('dcmodify'), '-nb']
		for tag, value in tags.items():
			args += ['-i', f"{tag}={value}"]
		args.append(str(path))

		try:
			result = await self._run(args, self.timeout)
		except CommandError as e:
			raise TagUpdateFailedError(str(e)) from e

		if not result.ok:
			raise TagUpdateFailedError(_failure_detail(result))
		logger.debug(f"dcmodify output: {result.output}")

	async def dcmsend(
		self,
		path: Path,
		host: str,
		port: int,
		calling_aetitle: str,
		called_aetitle: str,
	) -> None:
		"""C-STORE a file to the archive."""
		args = [
			self.tool('dcmsend'),
			'-aet', calling_aetitle,
			'-aec', called_aetitle,
			host,
			str(port),
			str(path),
		]
		try:
			result = await self._run(args, self.timeout)
		except CommandError as e:
			raise TransmissionFailedError(str(e)) from e

		if not result.ok:
			raise TransmissionFailedError(_failure_detail(result))
		logger.debug(f"dcmsend output: {result.output}")

	async def findscu(
		self,
		host: str,
		port: int,
		calling_aetitle: str,
		called_aetitle: str,
		keys: list[str],
		timeout: float,
	) -> CommandResult:
		"""
		Run a patient-level C-FIND.

		Args:
			keys: `-k` arguments, e.g. `PatientName=DOE*` or bare `PatientID`

		Raises:
			CommandError: findscu timed out or could not start
		"""
		args = [
			self.tool('findscu'),
			'-v',
			'-S',
			'-aet', calling_aetitle,
			'-aec', called_aetitle,
		]
		for key in keys:
			args += ['-k', key]
		args += [host, str(port)]

		return await self._run(args, timeout)
