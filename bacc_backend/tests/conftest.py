from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from bacc_backend.app import create_app


@pytest.fixture()
def app_config(tmp_path) -> dict:
    return {
        "TESTING": True,
        "DATA_DIR": tmp_path,
        "CALCULATIONS_FILE": tmp_path / "bacc_calculations.json",
        "SURVEY_FILE": tmp_path / "bacc_survey_responses.json",
        "RESEARCH_DB": tmp_path / "research.sqlite3",
        "RATE_LIMIT": "100 per minute",
    }


@pytest.fixture()
def app(app_config) -> Flask:
    return create_app(app_config)


@pytest.fixture()
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
