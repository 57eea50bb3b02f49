"""Pytest fixtures and configuration."""

import json
from http import HTTPStatus
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from kaggle_mcp.kaggle_api import (
    ClientState,
    FileCredentialStore,
    KaggleClient,
    KaggleCredentials,
)

TEST_API_BASE = "https://kaggle.test/api/v1"


def make_response(status_code=200, body="", reason=None):
    """Build a canned requests.Response."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason if reason is not None else HTTPStatus(status_code).phrase
    if not isinstance(body, (str, bytes)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body
    response.encoding = "utf-8"
    return response


def deny_kaggle_json(monkeypatch):
    """Make stat calls on any kaggle.json fail with EACCES."""
    original = Path.exists

    def exists(self, *args, **kwargs):
        if self.name == "kaggle.json":
            raise PermissionError(13, "Permission denied", str(self))
        return original(self, *args, **kwargs)

    monkeypatch.setattr(Path, "exists", exists)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's real Kaggle settings out of every test."""
    for name in ("KAGGLE_USERNAME", "KAGGLE_KEY", "KAGGLE_API_BASE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path / ".kaggle"


@pytest.fixture
def store(config_dir):
    return FileCredentialStore(config_dir=config_dir)


@pytest.fixture
def session():
    """Stand-in for requests.Session; set return_value/side_effect on .request."""
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(200, [])
    return session


@pytest.fixture
def client(store, session):
    return KaggleClient(store=store, api_base=TEST_API_BASE, session=session)


@pytest.fixture
def authenticated_client(store, session):
    state = ClientState(credentials=KaggleCredentials(username="test_user", key="test_key"))
    return KaggleClient(state=state, store=store, api_base=TEST_API_BASE, session=session)


@pytest.fixture
def competition_payload():
    return [
        {
            "ref": "titanic",
            "title": "Titanic - Machine Learning from Disaster",
            "url": "https://www.kaggle.com/competitions/titanic",
            "category": "Getting Started",
            "deadline": None,
            "reward": "Knowledge",
            "teamCount": 15000,
            "userHasEntered": False,
            "description": "Start here! Predict survival on the Titanic",
        }
    ]
