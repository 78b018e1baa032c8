from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.models.files import FileShare, StoredFile
from app.services.object_storage import StorageError


def _upload(client, name="report.pdf", data=b"%PDF-1.4 test", password=None):
    form = {"password": password} if password else {}
    r = client.post("/files", files={"file": (name, data, "application/pdf")}, data=form)
    assert r.status_code == 200, r.text
    return r.json()


def _share_id(share_url: str) -> str:
    return share_url.rsplit("/", 1)[-1]


def test_upload_stores_object_under_filename(client, fake_storage, db_session):
    body = _upload(client, password="rahasia")
    assert body["filename"] == "report.pdf"
    assert body["size"] == len(b"%PDF-1.4 test")
    assert body["message"] == "File uploaded successfully"

    assert fake_storage.objects["report.pdf"][0] == b"%PDF-1.4 test"
    record = db_session.get(StoredFile, body["file_key"])
    assert record.password_hash and record.password_hash != "rahasia"

    files = client.get("/files").json()["files"]
    assert files[0]["file_key"] == body["file_key"]
    assert files[0]["has_password"] is True


def test_download_open_and_protected_files(client, fake_storage):
    public = _upload(client, name="open.txt", data=b"hello")
    locked = _upload(client, name="locked.txt", data=b"secret", password="pw123")

    r = client.get(f"/files/{public['file_key']}/download")
    assert r.status_code == 200
    assert r.content == b"hello"
    assert 'filename="open.txt"' in r.headers["content-disposition"]

    r = client.get(f"/files/{locked['file_key']}/download")
    assert r.status_code == 401
    assert r.json()["detail"] == "Password required for this file"

    r = client.post(f"/files/{locked['file_key']}/download", json={"password": "nope"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Incorrect password"

    r = client.post(f"/files/{locked['file_key']}/download", json={"password": "pw123"})
    assert r.status_code == 200
    assert r.content == b"secret"

    assert client.get("/files/missing/download").status_code == 404


def test_delete_removes_object_row_and_shares(client, fake_storage, db_session):
    body = _upload(client)
    client.get(f"/files/{body['file_key']}/share")

    r = client.delete(f"/files/{body['file_key']}")
    assert r.json() == {"message": "File deleted successfully"}
    assert "report.pdf" not in fake_storage.objects
    assert db_session.query(FileShare).count() == 0
    assert client.delete(f"/files/{body['file_key']}").status_code == 404


def test_folders(client, fake_storage):
    assert client.post("/files/folders", json={"folderName": "  "}).status_code == 400

    r = client.post("/files/folders", json={"folderName": "drawings"})
    assert r.json()["folder"] == "drawings/"
    fake_storage.put_object("drawings/plan.pdf", b"x")
    fake_storage.put_object("notes.txt", b"y")

    root = client.get("/files/folders").json()
    assert root["folders"] == ["drawings/"]
    assert [f["key"] for f in root["files"]] == ["notes.txt"]

    inner = client.get("/files/folders", params={"prefix": "drawings/"}).json()
    assert [f["key"] for f in inner["files"]] == ["drawings/plan.pdf"]


def test_share_link_redirects_to_presigned_url(client, fake_storage):
    body = _upload(client)

    r = client.get(f"/files/{body['file_key']}/share")
    assert r.status_code == 200
    share = r.json()
    assert share["shareUrl"].startswith("http://testserver/share/")
    assert share["fileName"] == "report.pdf"
    assert share["requiresPassword"] is False

    share_id = _share_id(share["shareUrl"])
    r = client.get(f"/share/{share_id}", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"].startswith("https://r2.test/report.pdf")

    r = client.post(f"/share/{share_id}", json={})
    assert r.json() == {"message": "No password required"}


def test_protected_share_needs_password(client, fake_storage):
    body = _upload(client, password="pw123")
    share = client.post(f"/files/{body['file_key']}/share", json={}).json()
    assert share["requiresPassword"] is True
    share_id = _share_id(share["shareUrl"])

    r = client.get(f"/share/{share_id}", follow_redirects=False)
    assert r.status_code == 401
    assert r.json()["detail"] == "Password required for this file"

    r = client.get(f"/share/{share_id}", params={"password": "bad"}, follow_redirects=False)
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid password"

    r = client.get(f"/share/{share_id}", params={"password": "pw123"}, follow_redirects=False)
    assert r.status_code == 307

    assert client.post(f"/share/{share_id}", json={"password": "pw123"}).json() == {
        "message": "Password verified"
    }


def test_expired_share_is_removed(client, fake_storage, db_session):
    body = _upload(client)
    past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
    share = client.post(f"/files/{body['file_key']}/share", json={"expiresAt": past}).json()
    share_id = _share_id(share["shareUrl"])

    r = client.get(f"/share/{share_id}", follow_redirects=False)
    assert r.status_code == 404
    assert r.json()["detail"] == "Share link has expired"

    db_session.expire_all()
    assert db_session.get(FileShare, share_id) is None
    assert client.get(f"/share/{share_id}", follow_redirects=False).status_code == 404


def test_links_listing_and_delete(client, fake_storage):
    body = _upload(client)
    share = client.post(f"/files/{body['file_key']}/share", json={}).json()
    share_id = _share_id(share["shareUrl"])

    links = client.get("/links").json()["sharedLinks"]
    assert len(links) == 1
    assert links[0]["id"] == share_id
    assert links[0]["file_name"] == "report.pdf"
    assert links[0]["expires_at"] is None

    r = client.delete(f"/links/{share_id}")
    assert r.status_code == 200
    assert client.get("/links").json() == {"sharedLinks": []}
    assert client.delete(f"/links/{share_id}").status_code == 404


@pytest.fixture
def failing_commit(monkeypatch):
    def _boom(self):
        raise OperationalError("INSERT INTO files", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "commit", _boom)


def test_failed_insert_removes_uploaded_object(client, fake_storage, failing_commit):
    r = client.post("/files", files={"file": ("report.pdf", b"%PDF-1.4 test", "application/pdf")})
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to record uploaded file"
    assert "report.pdf" not in fake_storage.objects


def test_failed_cleanup_still_returns_clean_error(client, fake_storage, failing_commit, monkeypatch):
    def _unavailable(key):
        raise StorageError(f"bucket unavailable for {key}")

    monkeypatch.setattr(fake_storage, "delete_object", _unavailable)

    r = client.post("/files", files={"file": ("report.pdf", b"%PDF-1.4 test", "application/pdf")})
    assert r.status_code == 500
    assert r.json() == {"detail": "Failed to record uploaded file"}
    assert "report.pdf" in fake_storage.objects
