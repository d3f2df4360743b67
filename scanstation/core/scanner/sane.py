# (c) Copyright Datacraft, 2026
"""SANE capture tool wrapper (scanimage command line)."""
import logging
from pathlib import Path
from typing import Sequence

from scanstation.core.utils.process import CommandResult, CommandRunner, run_command

from .base import ScanOptions

logger = logging.getLogger(__name__)

# Timeout for `scanimage -L`; device enumeration can stall on USB resets
LIST_TIMEOUT = 30.0


class SaneCli:
	"""
	Thin wrapper around the `scanimage` executable.

	Only builds argument lists and runs them; interpreting the output
	is left to the parser module and the callers.
	"""

	def __init__(
		self,
		executable: str = 'scanimage',
		runner: CommandRunner | None = None,
	):
		"""
		Initialize the wrapper.

		Args:
			executable: Path or name of the scanimage binary
			runner: Process runner, defaults to run_command
		"""
		self.executable = executable
		self._run = runner or run_command

	async def list_devices(self, timeout: float = LIST_TIMEOUT) -> CommandResult:
		"""Enumerate attached devices (`scanimage -L`)."""
		return await self._run([self.executable, '-L'], timeout)

	async def help(self, device: str, timeout: float) -> CommandResult:
		"""Device-specific option listing (`scanimage -d <device> -h`)."""
		return await self._run([self.executable, '-d', device, '-h'], timeout)

	async def scan(self, args: Sequence[str], timeout: float) -> CommandResult:
		return await self._run([self.executable, *args], timeout)


def build_scan_args(
	device: str,
	options: ScanOptions,
	output_dir: Path,
	base_name: str,
) -> list[str]:
	"""
	Build scanimage arguments for a scan job.

	Multi-page jobs use batch mode writing `<base>_<n>.jpg`; single-page
	jobs write `<base>.jpg`. The source selection must come after the
	batch options.
	"""
	args = [
		'-d', device,
		'--format=jpeg',
		'--resolution', str(options.resolution),
		'--mode', 'Color' if options.color else 'Gray',
	]

	if options.multi_page:
		batch_pattern = output_dir / f"{base_name}_%d.jpg"
		args += ['--batch-start=1', '--batch-increment=1', f"--batch={batch_pattern}"]
	else:
		args += ['-o', str(output_dir / f"{base_name}.jpg")]

	args += ['--source', 'ADF Duplex' if options.duplex else 'ADF Front']
	return args
