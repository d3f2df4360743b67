# (c) Copyright Datacraft, 2026
from fastapi import APIRouter, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from scanstation.core.dependencies import RegistryDep

from .service import scanner_monitor_status

router = APIRouter(
	prefix="/monitoring",
	tags=["monitoring"]
)


@router.get("/health")
def health_check(registry: RegistryDep):
	monitor = scanner_monitor_status(registry)
	status = "ok" if monitor['running'] else "error"

	return {
		"status": status,
		"details": {
			"scanner_monitor": "up" if monitor['running'] else "down",
			"devices": monitor['devices'],
			"connected": monitor['connected'],
		}
	}


@router.get("/metrics")
def metrics():
	return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
