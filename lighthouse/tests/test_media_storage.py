from __future__ import annotations

import io

import pytest
from werkzeug.datastructures import FileStorage

from lighthouse.domains.media.storage import MediaStorage, display_name


@pytest.fixture()
def storage(tmp_path):
    return MediaStorage(tmp_path, "assets")


def _upload(name: str, data: bytes = b"img") -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=name)


@pytest.mark.unit
def test_ensure_bucket_creates_once(storage):
    assert storage.ensure_bucket().created is True
    second = storage.ensure_bucket()
    assert second.ok and second.created is False


@pytest.mark.unit
def test_upload_sanitises_name_and_folder(storage):
    result = storage.upload_image(_upload("Fish Chips!.JPG"), "../menu")

    assert result.ok
    folder, name = result.path.split("/")
    assert folder == "menu"
    assert name.endswith("_Fish_Chips.jpg")
    assert result.url == f"/media/{result.path}"
    assert (storage.bucket_path / result.path).read_bytes() == b"img"


@pytest.mark.unit
def test_upload_rejects_other_file_types(storage):
    result = storage.upload_image(_upload("notes.pdf"), "menu")
    assert not result.ok
    assert result.error == "Unsupported file type."


@pytest.mark.unit
def test_upload_requires_a_file(storage):
    assert not storage.upload_image(None).ok
    assert not storage.upload_image(_upload("")).ok


@pytest.mark.unit
def test_list_folder_sorted_by_name(storage):
    folder = storage.bucket_path / "menu"
    folder.mkdir(parents=True)
    for name in ("2_b.png", "1_a.png"):
        (folder / name).write_bytes(b"x")

    listed = storage.list_folder("menu")

    assert [item["name"] for item in listed.files] == ["1_a.png", "2_b.png"]
    assert listed.files[0] == {"name": "1_a.png", "path": "menu/1_a.png", "url": "/media/menu/1_a.png", "size": 1}


@pytest.mark.unit
def test_list_missing_folder_is_empty(storage):
    listed = storage.list_folder("hero")
    assert listed.ok and listed.files == []


@pytest.mark.unit
def test_delete_file(storage):
    path = storage.upload_image(_upload("dish.png"), "products").path

    assert storage.delete_file(path).ok
    assert storage.list_folder("products").files == []
    assert storage.delete_file(path).error == "File not found."


@pytest.mark.unit
@pytest.mark.parametrize("path", ["../secret.txt", "menu/../../secret.txt", ""])
def test_delete_rejects_paths_outside_bucket(storage, tmp_path, path):
    (tmp_path / "secret.txt").write_text("keep")

    result = storage.delete_file(path)

    assert not result.ok
    assert (tmp_path / "secret.txt").exists()


@pytest.mark.unit
def test_display_name():
    assert display_name("1700000000000_grilled_fish.jpg") == "grilled fish"


@pytest.mark.integration
def test_media_route_serves_uploaded_file(app, client):
    path = app.extensions["media_storage"].upload_image(_upload("dish.png", b"png-bytes"), "products").path

    resp = client.get(f"/media/{path}")

    assert resp.status_code == 200
    assert resp.data == b"png-bytes"
    assert client.get("/media/products/missing.png").status_code == 404


@pytest.mark.integration
def test_menu_images_manager(admin_client, app):
    upload = admin_client.post(
        "/admin/menu-images/upload",
        data={"image": (io.BytesIO(b"img"), "daily_specials.png")},
        content_type="multipart/form-data",
    )
    assert upload.headers["Location"].endswith("/admin/menu-images")

    page = admin_client.get("/admin/menu-images")
    assert b"daily specials" in page.data

    path = app.extensions["media_storage"].list_folder("menu").files[0]["path"]
    admin_client.post("/admin/menu-images/delete", data={"path": path})
    assert app.extensions["media_storage"].list_folder("menu").files == []


@pytest.mark.integration
def test_media_manager_rejects_unknown_folder(admin_client, app):
    resp = admin_client.post(
        "/admin/media/upload",
        data={"folder": "../etc", "file": (io.BytesIO(b"img"), "x.png")},
        content_type="multipart/form-data",
        follow_redirects=True,
    )

    assert b"Unknown media folder." in resp.data
