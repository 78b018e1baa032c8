from __future__ import annotations

from app.core.config import settings
from app.services.object_storage import StorageError


def _laptop(client, headers, **overrides):
    payload = {
        "name": "Dell Latitude 5440",
        "assigned_user": "Gita",
        "serial_number": "DL5440-01",
        "date_received": "2025-02-10",
        "condition": "Baik",
    }
    payload.update(overrides)
    r = client.post("/laptops", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_laptop_crud_and_search(client, auth_headers):
    laptop = _laptop(client, auth_headers)
    _laptop(client, auth_headers, name="MacBook Air", assigned_user="Hadi", serial_number="MBA-7")

    rows = client.get("/laptops", params={"search": "hadi"}, headers=auth_headers).json()
    assert [r["name"] for r in rows] == ["MacBook Air"]

    r = client.put(f"/laptops/{laptop['id']}", json={"condition": "Rusak"}, headers=auth_headers)
    assert r.json()["condition"] == "Rusak"
    assert r.json()["name"] == "Dell Latitude 5440"

    assert client.delete(f"/laptops/{laptop['id']}", headers=auth_headers).json() == {"success": True}
    assert client.get(f"/laptops/{laptop['id']}", headers=auth_headers).status_code == 404


def test_laptop_image_upload(client, auth_headers, fake_storage):
    laptop = _laptop(client, auth_headers)

    r = client.post(
        f"/laptops/{laptop['id']}/image",
        files={"file": ("front.png", b"\x89PNG fake", "image/png")},
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    url = r.json()["url"]
    assert url.startswith(f"https://pub.r2.test/{settings.LAPTOP_IMAGE_PREFIX}/{laptop['id']}/")
    assert url.endswith("_front.png")

    [key] = list(fake_storage.objects)
    assert fake_storage.objects[key] == (b"\x89PNG fake", "image/png")

    stored = client.get(f"/laptops/{laptop['id']}", headers=auth_headers).json()
    assert stored["image_url"] == url


def test_laptop_image_upload_rejections(client, auth_headers, fake_storage, monkeypatch):
    laptop = _laptop(client, auth_headers)

    r = client.post(
        "/laptops/missing/image",
        files={"file": ("a.png", b"x", "image/png")},
        headers=auth_headers,
    )
    assert r.status_code == 404

    r = client.post(
        f"/laptops/{laptop['id']}/image",
        files={"file": ("notes.txt", b"text", "text/plain")},
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Only image files are allowed"

    monkeypatch.setattr(settings, "LAPTOP_IMAGE_MAX_BYTES", 1024 * 1024)
    r = client.post(
        f"/laptops/{laptop['id']}/image",
        files={"file": ("big.jpg", b"0" * (1024 * 1024 + 1), "image/jpeg")},
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "File size exceeds 1MB limit"
    assert fake_storage.objects == {}


def test_laptop_image_not_stored_without_public_url(client, auth_headers, fake_storage, monkeypatch):
    laptop = _laptop(client, auth_headers)

    def _no_public_base(key):
        raise StorageError("R2_PUBLIC_BASE_URL is not configured.")

    monkeypatch.setattr(fake_storage, "public_url", _no_public_base)

    r = client.post(
        f"/laptops/{laptop['id']}/image",
        files={"file": ("front.png", b"\x89PNG fake", "image/png")},
        headers=auth_headers,
    )
    assert r.status_code == 500
    assert r.json()["detail"] == "Failed to upload image: R2_PUBLIC_BASE_URL is not configured."
    assert fake_storage.objects == {}
    assert client.get(f"/laptops/{laptop['id']}", headers=auth_headers).json()["image_url"] is None


def test_radio_register(client, auth_headers):
    r = client.post(
        "/radios",
        json={"nama_radio": "HT-01", "tipe_radio": "Motorola XiR", "serial_number": "MX-100", "user_radio": "Joko"},
        headers=auth_headers,
    )
    assert r.status_code == 201
    radio = r.json()

    client.post(
        "/radios",
        json={"nama_radio": "HT-02", "serial_number": "MX-101", "user_radio": "Kurnia"},
        headers=auth_headers,
    )

    rows = client.get("/radios", headers=auth_headers).json()
    assert [r["nama_radio"] for r in rows] == ["HT-02", "HT-01"]
    rows = client.get("/radios", params={"search": "joko"}, headers=auth_headers).json()
    assert [r["nama_radio"] for r in rows] == ["HT-01"]

    r = client.put(f"/radios/{radio['id']}", json={"user_radio": "Lestari"}, headers=auth_headers)
    assert r.json()["user_radio"] == "Lestari"

    assert client.delete(f"/radios/{radio['id']}", headers=auth_headers).json() == {"success": True}
    assert client.get(f"/radios/{radio['id']}", headers=auth_headers).status_code == 404
    assert client.put(f"/radios/{radio['id']}", json={}, headers=auth_headers).status_code == 404
