# (c) Copyright Datacraft, 2026
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scanstation.core.config import Settings, get_settings
from scanstation.core.dicom import Dcmtk, ExportPipeline, PatientDirectory
from scanstation.core.log import configure_logging
from scanstation.core.router_loader import discover_routers
from scanstation.core.scanner import DeviceRegistry, SaneCli, ScanOrchestrator
from scanstation.core.storage import CaptureStorage
from scanstation.core.utils.process import CommandRunner
from scanstation.core.version import __version__

logger = logging.getLogger(__name__)

# Features mounted outside the API prefix
ROOT_FEATURES = {'monitoring'}


@asynccontextmanager
async def lifespan(app: FastAPI):
	"""Application lifespan handler for startup/shutdown events."""
	settings: Settings = app.state.settings
	registry: DeviceRegistry = app.state.registry

	configure_logging(settings)
	logger.info(f"Starting {settings.app_name}...")

	monitor_task = asyncio.create_task(registry.start_monitoring())

	yield

	logger.info(f"Shutting down {settings.app_name}...")

	registry.stop()
	monitor_task.cancel()
	try:
		await monitor_task
	except asyncio.CancelledError:
		pass

	logger.info("Server exited")


def create_app(
	settings: Settings | None = None,
	runner: CommandRunner | None = None,
) -> FastAPI:
	"""
	Build the API with its services wired from one settings object.

	Args:
		settings: Configuration, defaults to get_settings()
		runner: Process runner shared by every external tool
	"""
	settings = settings or get_settings()

	storage = CaptureStorage(settings.temp_files_dir, settings.allowed_extensions)
	sane = SaneCli(settings.scanimage_path, runner)
	dcmtk = Dcmtk(settings.dcmtk_path, settings.dicom_tool_timeout, runner)
	registry = DeviceRegistry(settings, sane)

	app = FastAPI(
		title=settings.web_title,
		version=__version__,
		lifespan=lifespan,
	)

	app.state.settings = settings
	app.state.storage = storage
	app.state.registry = registry
	app.state.orchestrator = ScanOrchestrator(settings, registry, sane)
	app.state.directory = PatientDirectory(settings, dcmtk)
	app.state.pipeline = ExportPipeline(settings, storage, dcmtk)

	app.add_middleware(
		CORSMiddleware,
		allow_origins=["*"],
		allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
		allow_headers=["Content-Type"],
		expose_headers=["Content-Disposition", "Content-Type", "Content-Length"],
	)

	features_path = Path(__file__).parent / "core" / "features"
	for router, feature_name in discover_routers(features_path):
		prefix = '' if feature_name in ROOT_FEATURES else settings.api_prefix
		app.include_router(router, prefix=prefix)

	return app


app = create_app()
