import httpx
import pytest
from tenacity import wait_none

from conftest import ADMIN_TOKEN, make_entries
from hengstudio.client import StudioAPIError, StudioClient


@pytest.fixture
async def cms(app):
    async with StudioClient(
        "http://testserver",
        admin_token=ADMIN_TOKEN,
        transport=httpx.ASGITransport(app=app),
    ) as client:
        yield client


@pytest.fixture
async def anonymous(app):
    async with StudioClient("http://testserver", transport=httpx.ASGITransport(app=app)) as client:
        yield client


async def test_project_lifecycle(cms):
    created = await cms.create_project({"title": "A", "category": "Fashion", "imageUrl": "https://x/y.jpg"})
    assert created.title == "A"

    listed = await cms.list_projects()
    assert [p.id for p in listed] == [created.id]

    patched = await cms.patch_project(created.id, {"title": "B"})
    assert patched.title == "B"
    assert patched.image_url == "https://x/y.jpg"

    replaced = await cms.update_project(created.id, {"id": "ignored", "title": "C", "category": "Wedding", "imageUrl": "/uploads/c.png"})
    assert replaced.id == created.id
    assert replaced.category.value == "Wedding"

    deleted = await cms.delete_project(created.id)
    assert deleted.title == "C"
    assert await cms.list_projects() == []


async def test_errors_carry_status_and_issues(cms, anonymous):
    with pytest.raises(StudioAPIError) as excinfo:
        await cms.create_project({"title": "", "category": "Fashion", "imageUrl": "https://x/y.jpg"})
    assert excinfo.value.status_code == 400
    assert [issue["path"] for issue in excinfo.value.issues] == ["title"]

    with pytest.raises(StudioAPIError) as excinfo:
        await cms.get_project("missing")
    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Not found"

    with pytest.raises(StudioAPIError) as excinfo:
        await anonymous.create_project({"title": "A", "category": "Fashion", "imageUrl": "https://x/y.jpg"})
    assert excinfo.value.status_code == 401


async def test_upload_and_list_media(cms, tmp_path):
    image = tmp_path / "photo.png"
    image.write_bytes(b"\x89PNG....")

    item = await cms.upload_media(image, "image/png")

    assert item.url == f"/uploads/{item.name}"
    assert [m.name for m in await cms.list_media()] == [item.name]


async def test_gallery_manifest_round_trip(cms):
    entries, etag = await cms.get_gallery_manifest()
    assert entries == []
    assert etag

    version = await cms.save_gallery(make_entries(3), etag)
    entries, new_etag = await cms.get_gallery_manifest()
    assert [e.number for e in entries] == [1, 2, 3]
    assert new_etag == f'"{version}"'

    with pytest.raises(StudioAPIError) as excinfo:
        await cms.save_gallery(make_entries(2), etag)
    assert excinfo.value.status_code == 409


async def test_reads_retry_transport_errors(monkeypatch):
    monkeypatch.setattr(StudioClient._get.retry, "wait", wait_none())
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) < 3:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json=[])

    async with StudioClient("http://cms", transport=httpx.MockTransport(handler)) as client:
        assert await client.list_projects() == []
    assert len(calls) == 3


async def test_writes_are_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    async with StudioClient("http://cms", admin_token="t", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.ConnectError):
            await client.delete_project("x")
    assert len(calls) == 1
    assert calls[0].headers["X-Admin-Token"] == "t"


async def test_non_json_error_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
    async with StudioClient("http://cms", transport=transport) as client:
        with pytest.raises(StudioAPIError) as excinfo:
            await client.list_gallery()
    assert excinfo.value.status_code == 502
    assert excinfo.value.issues == []
