"""Tests for the gist backup adapter against a mocked transport."""

import json

import httpx
import pytest

from backup_service.gist_adapter import (
    BackupNotFoundError,
    GistBackupAdapter,
    MissingCredentialsError,
    UpstreamError,
    backup_filename,
)


def adapter_for(gist_api, **kwargs):
    kwargs.setdefault("token", "test-token")
    return GistBackupAdapter(transport=gist_api.transport, **kwargs)


def test_first_push_creates_private_gist(gist_api):
    adapter = adapter_for(gist_api)

    created = adapter.push(site="scheduler-app", data={"appointments": []}, when="2024-03-05T00:00:00.000Z")

    assert created == "gist1"
    assert adapter.blob_id == "gist1"
    body = json.loads(gist_api.requests[0].content)
    assert body["public"] is False
    assert body["description"] == "Auto backups for scheduler-app"
    assert gist_api.requests[0].headers["Authorization"] == "token test-token"
    assert gist_api.document("gist1") == {
        "site": "scheduler-app",
        "when": "2024-03-05T00:00:00.000Z",
        "data": {"appointments": []},
    }


def test_later_pushes_patch_existing_gist(gist_api):
    adapter = adapter_for(gist_api)
    adapter.push(site="scheduler-app", data={"v": 1}, when="t1")

    assert adapter.push(site="scheduler-app", data={"v": 2}, when="t2") is None

    assert gist_api.requests[-1].method == "PATCH"
    assert len(gist_api.gists) == 1
    assert gist_api.document("gist1")["data"] == {"v": 2}


def test_pull_returns_raw_document(gist_api):
    adapter = adapter_for(gist_api)
    adapter.push(site="scheduler-app", data={"v": 1}, when="t1")

    raw = adapter_for(gist_api, blob_id="gist1").pull(site="scheduler-app")

    assert json.loads(raw)["data"] == {"v": 1}


def test_pull_falls_back_to_any_backup_file(gist_api):
    adapter_for(gist_api).push(site="other-site", data={"v": 1}, when="t1")

    raw = adapter_for(gist_api, blob_id="gist1").pull(site="scheduler-app")

    assert json.loads(raw)["site"] == "other-site"


def test_pull_without_backup_file(gist_api):
    gist_api.gists["gist9"] = {"notes.txt": {"content": "hello"}}

    with pytest.raises(BackupNotFoundError, match="No backup file"):
        adapter_for(gist_api, blob_id="gist9").pull()


@pytest.mark.parametrize("token, blob_id", [("", "gist1"), ("test-token", None)])
def test_pull_requires_token_and_blob_id(gist_api, token, blob_id):
    with pytest.raises(MissingCredentialsError, match="Missing GITHUB_TOKEN or GIST_ID"):
        adapter_for(gist_api, token=token, blob_id=blob_id).pull()
    assert gist_api.requests == []


def test_push_requires_token(gist_api):
    with pytest.raises(MissingCredentialsError, match="Missing GITHUB_TOKEN"):
        adapter_for(gist_api, token="").push(site="s", data={}, when="t")


def test_upstream_errors_carry_status_and_body(gist_api):
    gist_api.fail_status = 401

    with pytest.raises(UpstreamError) as excinfo:
        adapter_for(gist_api).push(site="s", data={}, when="t")

    assert excinfo.value.status_code == 401
    assert json.loads(str(excinfo.value)) == {"message": "Bad credentials"}


def test_transport_errors_propagate():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    adapter = GistBackupAdapter(token="t", transport=httpx.MockTransport(handler))
    with pytest.raises(httpx.ConnectError):
        adapter.push(site="s", data={}, when="t")


def test_backup_filename():
    assert backup_filename("scheduler-app") == "scheduler-app-backup.json"
