import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from stamp_tour_service.config import Settings
from stamp_tour_service.main import create_app
from stamp_tour_service.tour.service import TourService

STAMPS = [
    {"stampId": "A1", "stampLocation": "Main hall", "stampName": "Welcome desk", "stampDesc": "Start here"},
    {"stampId": "B2", "stampLocation": "Library", "stampName": "Reading room", "stampDesc": "Quiet please"},
    {"stampId": "C3", "stampLocation": "Gym", "stampName": "Court", "stampDesc": "Ball games"},
]


def write_catalog(resources: Path, stamps=STAMPS) -> Path:
    path = resources / "api" / "stampList.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"stampList": stamps}))
    return path


@pytest.fixture
def resources(tmp_path: Path) -> Path:
    root = tmp_path / "resources"
    write_catalog(root)
    return root


@pytest.fixture
def settings(resources: Path) -> Settings:
    return Settings(resources_dir=resources, data_dir=resources.parent / "data", enable_metrics=True)


@pytest.fixture
def service(settings: Settings) -> TourService:
    return TourService.from_settings(settings)


@pytest.fixture
def client(settings: Settings, service: TourService) -> TestClient:
    return TestClient(create_app(settings, service))
