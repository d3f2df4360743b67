# (c) Copyright Datacraft, 2026
"""Bounded invocation of external command-line tools."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
	"""Exit status and captured output of a finished process."""
	args: tuple[str, ...]
	returncode: int
	stdout: str = ''
	stderr: str = ''

	@property
	def ok(self) -> bool:
		return self.returncode == 0

	@property
	def output(self) -> str:
		"""Combined stdout and stderr, in that order."""
		if self.stdout and self.stderr:
			return f"{self.stdout}\n{self.stderr}"
		return self.stdout or self.stderr

	@property
	def command_line(self) -> str:
		return ' '.join(self.args)


class CommandError(Exception):
	"""Raised when an external command could not run to completion."""

	def __init__(self, message: str, args: Sequence[str]):
		self.command = tuple(args)
		super().__init__(message)


class CommandTimeoutError(CommandError):
	"""The command exceeded its time budget and was killed."""

	def __init__(self, args: Sequence[str], timeout: float):
		self.timeout = timeout
		super().__init__(f"{args[0]} timed out after {timeout:g}s", args)


class CommandNotFoundError(CommandError):
	"""The executable does not exist or is not runnable."""

	def __init__(self, args: Sequence[str], cause: OSError):
		self.cause = cause
		super().__init__(f"{args[0]} could not be started: {cause}", args)


CommandRunner = Callable[[Sequence[str], float], Awaitable[CommandResult]]


async def _kill(process: asyncio.subprocess.Process) -> None:
	if process.returncode is None:
		try:
			process.kill()
		except ProcessLookupError:
			# Exited between the check and the signal
			pass
	await process.wait()


async def run_command(args: Sequence[str], timeout: float) -> CommandResult:
	"""
	Run a command and wait for it under a timeout.

	Args:
		args: Executable followed by its arguments
		timeout: Seconds to wait before the process is killed

	Returns:
		CommandResult with decoded stdout/stderr

	Raises:
		CommandTimeoutError: the process did not finish in time
		CommandNotFoundError: the executable could not be started
	"""
	args = [str(arg) for arg in args]
	logger.debug(f"Running: {' '.join(args)}")

	try:
		process = await asyncio.create_subprocess_exec(
			*args,
			stdout=asyncio.subprocess.PIPE,
			stderr=asyncio.subprocess.PIPE,
		)
	except OSError as e:
		raise CommandNotFoundError(args, e) from e

	try:
		stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
	except asyncio.TimeoutError:
		await _kill(process)
		raise CommandTimeoutError(args, timeout)
	except asyncio.CancelledError:
		# The caller is gone; nobody else would reap the child
		logger.debug(f"Cancelled, killing: {args[0]} (pid {process.pid})")
		await _kill(process)
		raise

	return CommandResult(
		args=tuple(args),
		returncode=process.returncode,
		stdout=stdout.decode(errors='replace'),
		stderr=stderr.decode(errors='replace'),
	)
