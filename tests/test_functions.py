# tests/test_functions.py
#
# Contract tests for the stateless /functions endpoints the browser client
# calls directly. The gist API is served by the FakeGistAPI mock transport,
# so no network access is needed.

import json
import threading

import pytest
from httpx import ASGITransport, AsyncClient

from backend.dependencies import get_gist_adapter
from backend.main import app
from backup_service.gist_adapter import GistBackupAdapter


def use_adapter(**kwargs):
    app.dependency_overrides[get_gist_adapter] = lambda: GistBackupAdapter(**kwargs)


def test_backup_creates_blob_and_reports_id(client, gist_api):
    response = client.post(
        "/functions/backup",
        json={"site": "scheduler-app", "when": "2024-03-05T00:00:00.000Z", "data": {"appointments": []}},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True, "blobId": "gist1"}
    assert gist_api.document("gist1")["when"] == "2024-03-05T00:00:00.000Z"


def test_backup_updates_existing_blob(client, gist_api):
    client.post("/functions/backup", json={"site": "scheduler-app", "data": {"v": 1}})
    use_adapter(token="test-token", blob_id="gist1", transport=gist_api.transport)

    response = client.post("/functions/backup", json={"site": "scheduler-app", "data": {"v": 2}})

    assert response.json() == {"ok": True}
    assert gist_api.document("gist1")["data"] == {"v": 2}


def test_backup_without_token(client, gist_api):
    use_adapter(token="", transport=gist_api.transport)

    response = client.post("/functions/backup", json={"data": {}})

    assert response.status_code == 500
    assert response.text == "Missing GITHUB_TOKEN"


@pytest.mark.parametrize("body", [b"not json", b"[1, 2]"])
def test_backup_rejects_malformed_body(client, body):
    response = client.post("/functions/backup", content=body)

    assert response.status_code == 500
    assert response.text.startswith("Backup failed:")


def test_backup_reports_upstream_failure(client, gist_api):
    gist_api.fail_status = 401

    response = client.post("/functions/backup", json={"data": {}})

    assert response.status_code == 500
    assert "Bad credentials" in response.text


def test_restore_returns_raw_document(client, gist_api):
    client.post("/functions/backup", json={"site": "scheduler-app", "when": "t1", "data": {"v": 1}})
    use_adapter(token="test-token", blob_id="gist1", transport=gist_api.transport)

    response = client.get("/functions/restore")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"site": "scheduler-app", "when": "t1", "data": {"v": 1}}


def test_restore_without_gist_id(client):
    response = client.get("/functions/restore")

    assert response.status_code == 500
    assert response.text == "Missing GITHUB_TOKEN or GIST_ID"


def test_restore_without_backup_file(client, gist_api):
    gist_api.gists["gist5"] = {"notes.txt": {"content": "{}"}}
    use_adapter(token="test-token", blob_id="gist5", transport=gist_api.transport)

    response = client.get("/functions/restore")

    assert response.status_code == 404
    assert response.text == "No backup file"


def test_restore_upstream_failure(client, gist_api):
    use_adapter(token="test-token", blob_id="missing", transport=gist_api.transport)

    response = client.get("/functions/restore")

    assert response.status_code == 500
    assert response.text.startswith("Restore failed:")


@pytest.mark.anyio
async def test_entry_backup_restore_round_trip(client, gist_api):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        created = await http.post(
            "/appointments",
            json={"clientName": "Jane Doe", "date": "2024-03-05", "cats": [{"name": "Tom", "sex": "m"}]},
        )
        assert created.status_code == 201

        backup = await http.post("/sync/backup")
        assert backup.status_code == 200

        await http.delete(f"/appointments/{created.json()['id']}")
        assert (await http.get("/appointments")).json() == []

        restored = await http.post("/sync/restore")
        assert restored.json()["appointments"] == 1

        listing = (await http.get("/appointments")).json()
        assert listing[0]["cats"][0]["sex"] == "Male"

    document = json.loads(gist_api.gists["gist1"]["scheduler-app-backup.json"]["content"])
    assert document["data"]["appointments"][0]["clientName"] == "Jane Doe"


@pytest.mark.anyio
async def test_gist_and_database_calls_run_off_the_event_loop(client, gist_api, repository, monkeypatch):
    loop_thread = threading.get_ident()
    calls = []

    class RecordingAdapter(GistBackupAdapter):
        def push(self, **kwargs):
            calls.append(("push", threading.get_ident()))
            return super().push(**kwargs)

    app.dependency_overrides[get_gist_adapter] = lambda: RecordingAdapter(
        token="test-token",
        transport=gist_api.transport,
    )
    save = repository.save

    def recording_save(state):
        calls.append(("save", threading.get_ident()))
        return save(state)

    monkeypatch.setattr(repository, "save", recording_save)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        backup = await http.post("/functions/backup", json={"data": {"v": 1}})
        imported = await http.post(
            "/transfer/import",
            content=json.dumps([{"id": "a", "clientName": "Jane", "date": "2024-03-05"}]),
        )

    assert backup.status_code == 200
    assert imported.json() == {"added": 1, "replaced": 0, "total": 1}
    assert {name for name, _ in calls} == {"push", "save"}
    assert all(thread != loop_thread for _, thread in calls)
