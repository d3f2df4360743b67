# (c) Copyright Datacraft, 2026
"""Parsers for scanimage text output."""
import re
from dataclasses import dataclass

# device `fujitsu:fi-7030:211822' is a FUJITSU fi-7030 scanner
_DEVICE_LINE = re.compile(r"device\s+[`'](?P<address>.+)'\s+is an?\s+(?P<name>.+)$")

# Keyword looked up in `scanimage -h` output for each capability flag
CAPABILITY_KEYWORDS = {
	'resolution': 'resolution',
	'color': 'mode',
	'source': 'source',
	'multi_page': 'batch',
}

# Flags most modern scanners support even when -h does not mention them
ASSUMED_CAPABILITIES = ('multi_page', 'color', 'resolution')


@dataclass(frozen=True)
class DeviceEntry:
	address: str
	name: str


def parse_device_listing(output: str) -> list[DeviceEntry]:
	"""Extract devices from `scanimage -L` output, in listing order."""
	entries = []
	for line in output.splitlines():
		match = _DEVICE_LINE.search(line.strip())
		if match:
			entries.append(DeviceEntry(
				address=match.group('address'),
				name=match.group('name').strip(),
			))
	return entries


def parse_capabilities(output: str) -> dict[str, bool]:
	"""Derive capability flags from `scanimage -d <device> -h` output."""
	capabilities = {}
	for line in output.splitlines():
		line = line.strip()
		for flag, keyword in CAPABILITY_KEYWORDS.items():
			if keyword in line:
				capabilities[flag] = True

	for flag in ASSUMED_CAPABILITIES:
		capabilities.setdefault(flag, True)

	return capabilities
