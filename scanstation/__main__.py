# (c) Copyright Datacraft, 2026
"""Run the scan station API with uvicorn."""
import uvicorn

from scanstation.core.config import get_settings


def main():
	settings = get_settings()
	uvicorn.run(
		"scanstation.app:app",
		host=settings.app_host,
		port=settings.app_port,
		log_config=None,
	)


if __name__ == "__main__":
	main()
