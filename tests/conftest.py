# (c) Copyright Datacraft, 2026
"""
Shared fixtures: settings pointing at a temporary storage directory and
a scripted process runner standing in for scanimage and the DCMTK tools.
"""
from pathlib import Path
from typing import Callable, Sequence

import pytest

from scanstation.core.config import Settings
from scanstation.core.utils.process import CommandResult

Handler = Callable[[list[str]], CommandResult | Exception]

SCANIMAGE_LISTING = (
	"device `fujitsu:fi-7030:211822' is a FUJITSU fi-7030 scanner\n"
	"device `epson2:libusb:001:004' is a Epson GT-S55 flatbed scanner\n"
)


def ok(args: Sequence[str], stdout: str = '', stderr: str = '') -> CommandResult:
	return CommandResult(args=tuple(args), returncode=0, stdout=stdout, stderr=stderr)


def fail(args: Sequence[str], stderr: str = 'error', returncode: int = 1, stdout: str = '') -> CommandResult:
	return CommandResult(args=tuple(args), returncode=returncode, stdout=stdout, stderr=stderr)


def write_scan_output(args: list[str], pages: int = 1) -> None:
	"""Create the files scanimage would write for the given arguments."""
	for arg in args:
		if arg.startswith('--batch='):
			pattern = arg[len('--batch='):]
			for page in range(1, pages + 1):
				Path(pattern.replace('%d', str(page))).write_bytes(b'\xff\xd8jpeg')
			return
	if '-o' in args:
		Path(args[args.index('-o') + 1]).write_bytes(b'\xff\xd8jpeg')


class FakeRunner:
	"""Records invocations and answers them per executable basename."""

	ok = staticmethod(ok)
	fail = staticmethod(fail)

	def __init__(self):
		self.calls: list[list[str]] = []
		self.timeouts: list[float] = []
		self.handlers: dict[str, Handler] = {}

	def on(self, tool: str, handler: Handler) -> None:
		self.handlers[tool] = handler

	def on_scan(self, pages: int = 1) -> None:
		"""Answer `scanimage -L` with the default listing and write `pages` on scan."""
		def handler(args):
			if '-L' in args:
				return ok(args, stdout=SCANIMAGE_LISTING)
			if '-h' in args:
				return ok(args)
			write_scan_output(args, pages)
			return ok(args)
		self.on('scanimage', handler)

	def calls_to(self, tool: str) -> list[list[str]]:
		return [call for call in self.calls if Path(call[0]).name == tool]

	async def __call__(self, args: Sequence[str], timeout: float) -> CommandResult:
		args = [str(arg) for arg in args]
		self.calls.append(args)
		self.timeouts.append(timeout)

		handler = self.handlers.get(Path(args[0]).name)
		if handler is None:
			return ok(args)

		outcome = handler(args)
		if isinstance(outcome, Exception):
			raise outcome
		return outcome


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
	path = tmp_path / 'captures'
	path.mkdir()
	return path


@pytest.fixture
def settings(storage_dir: Path) -> Settings:
	return Settings(
		temp_files_dir=storage_dir,
		scan_settle_delay=0,
		scanner_poll_interval=0.01,
		dcmtk_path=Path('/opt/dcmtk/bin'),
		dicom_remote_host='pacs.example.org',
		dicom_local_aetitle='SCANSTATION',
		dicom_query_aetitle='QUERYSCP',
		dicom_store_aetitle='STORESCP',
		dicom_station_name='WARD7-SCAN',
	)


@pytest.fixture
def runner() -> FakeRunner:
	fake = FakeRunner()
	fake.on_scan(pages=1)
	return fake
