"""Shared fixtures: in-memory storage, fake Redis helpers, fake gist API."""

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.dependencies import get_backup_service, get_gist_adapter, get_repository
from backend.main import app
from backend.services.backup import BackupService
from backend.services.db import build_engine, init_db
from backend.services.storage import SnapshotRepository
from backup_service.gist_adapter import GistBackupAdapter

RAW_HOST = "gist.githubusercontent.com"


class FakeGistAPI:
    """Minimal in-memory stand-in for the gist endpoints the adapter calls."""

    def __init__(self) -> None:
        self.gists: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_status: Optional[int] = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status:
            return httpx.Response(self.fail_status, json={"message": "Bad credentials"})

        parts = request.url.path.strip("/").split("/")
        if request.url.host == RAW_HOST:
            _, gist_id, filename = parts
            return httpx.Response(200, text=self.gists[gist_id][filename]["content"])

        if request.method == "POST" and parts == ["gists"]:
            body = json.loads(request.content)
            gist_id = f"gist{len(self.gists) + 1}"
            self.gists[gist_id] = dict(body["files"])
            return httpx.Response(201, json={"id": gist_id})

        gist_id = parts[1]
        if gist_id not in self.gists:
            return httpx.Response(404, json={"message": "Not Found"})

        if request.method == "PATCH":
            self.gists[gist_id].update(json.loads(request.content)["files"])
            return httpx.Response(200, json={"id": gist_id})

        files = {
            name: {"filename": name, "raw_url": f"https://{RAW_HOST}/raw/{gist_id}/{name}"}
            for name in self.gists[gist_id]
        }
        return httpx.Response(200, json={"id": gist_id, "files": files})

    def document(self, gist_id: str, filename: str = "scheduler-app-backup.json") -> Dict[str, Any]:
        return json.loads(self.gists[gist_id][filename]["content"])


@pytest.fixture
def cache_store(monkeypatch) -> Dict[str, str]:
    """Replace the Redis helpers with an in-memory dict."""

    import backend.services.cache as cache_mod

    store: Dict[str, str] = {}

    def fake_cache_set(key: str, value: str, ex: Optional[int] = None) -> bool:
        store[key] = value
        return True

    def fake_cache_get(key: str) -> Optional[str]:
        return store.get(key)

    monkeypatch.setattr(cache_mod, "cache_set", fake_cache_set)
    monkeypatch.setattr(cache_mod, "cache_get", fake_cache_get)
    return store


@pytest.fixture
def repository():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield SnapshotRepository(sessionmaker(bind=engine, autoflush=False, future=True))
    engine.dispose()


@pytest.fixture
def gist_api() -> FakeGistAPI:
    return FakeGistAPI()


@pytest.fixture
def backup_service(gist_api: FakeGistAPI, cache_store) -> BackupService:
    adapter = GistBackupAdapter(token="test-token", transport=gist_api.transport)
    return BackupService(adapter, site="scheduler-app")


@pytest.fixture
def client(repository, backup_service, gist_api):
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_backup_service] = lambda: backup_service
    app.dependency_overrides[get_gist_adapter] = lambda: GistBackupAdapter(
        token="test-token",
        transport=gist_api.transport,
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
