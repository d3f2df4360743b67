# (c) Copyright Datacraft, 2026
"""Discovery of feature routers under core/features."""
import importlib
import logging
from pathlib import Path

from fastapi import APIRouter

logger = logging.getLogger(__name__)

FEATURES_PACKAGE = 'scanstation.core.features'


def discover_routers(features_path: Path) -> list[tuple[APIRouter, str]]:
	"""
	Import `<feature>/router.py` for every feature package.

	Returns:
		(router, feature_name) pairs sorted by feature name
	"""
	routers = []
	for router_file in sorted(features_path.glob('*/router.py')):
		feature_name = router_file.parent.name
		module = importlib.import_module(f"{FEATURES_PACKAGE}.{feature_name}.router")
		router = getattr(module, 'router', None)
		if isinstance(router, APIRouter):
			routers.append((router, feature_name))
		else:
			logger.warning(f"Feature {feature_name} has no APIRouter named 'router'")
	return routers
