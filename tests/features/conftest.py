# (c) Copyright Datacraft, 2026
"""Application fixtures for the HTTP routes."""
import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from scanstation.app import create_app


@pytest.fixture
def app(settings, runner) -> FastAPI:
	app = create_app(settings, runner)
	asyncio.run(app.state.registry.refresh())
	return app


@pytest.fixture
def client(app) -> TestClient:
	return TestClient(app)
