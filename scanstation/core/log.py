# (c) Copyright Datacraft, 2026
"""Logging setup from a YAML dictConfig file."""
import logging
from logging.config import dictConfig

import yaml

from scanstation.core.config import Settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
	"""Apply `settings.log_config` when it exists, else a basic config."""
	path = settings.log_config
	if path is not None and path.is_file():
		with open(path, 'r') as stream:
			config = yaml.safe_load(stream)
		dictConfig(config)
		logger.debug(f"Logging configured from {path}")
		return

	logging.basicConfig(
		level=settings.log_level.upper(),
		format='%(asctime)s %(levelname)s %(name)s: %(message)s',
	)
