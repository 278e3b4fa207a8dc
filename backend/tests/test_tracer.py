import pytest

from hengstudio.errors import PayloadValidationError, UploadRejectedError
from hengstudio.services.project_service import ProjectService
from hengstudio.storage.media_store import MediaStore
from hengstudio.tracer import is_enabled, setup_follow_through_logging, tracer


@pytest.fixture
def trace(caplog):
    setup_follow_through_logging(True)
    tracer.addHandler(caplog.handler)
    yield caplog
    tracer.removeHandler(caplog.handler)
    setup_follow_through_logging(False)


def lines(caplog):
    return [record.getMessage() for record in caplog.records if record.name == "followthrough"]


async def test_disabled_by_default(project_store, valid_payload, caplog):
    assert not is_enabled()
    await ProjectService(project_store).create(valid_payload)
    assert lines(caplog) == []


async def test_create_traces_service_and_disk(trace, project_store, valid_payload):
    service = ProjectService(project_store)
    await service.create(valid_payload)
    trace.clear()

    created = await service.create({**valid_payload, "title": "B"})

    out = lines(trace)
    assert any("[services.projects] CALL: create()" in line for line in out)
    assert any("read 1 records from projects.json" in line for line in out)
    assert any("DISK: backup projects." in line for line in out)
    assert any("DISK: write projects.json (2 records)" in line for line in out)
    assert any(f"RESULT: create() ✓ Project {created.id}" in line for line in out)


async def test_failed_call_traced(trace, project_store):
    with pytest.raises(PayloadValidationError):
        await ProjectService(project_store).create({"title": ""})

    out = lines(trace)
    assert any("STEP: validation failed" in line for line in out)
    assert any("create() ✗ PayloadValidationError" in line for line in out)


async def test_prune_traced(trace, tmp_path, valid_payload):
    from hengstudio.storage.project_store import ProjectStore

    store = ProjectStore(tmp_path / "projects.json", tmp_path / "backups", retention=1)
    service = ProjectService(store)
    for _ in range(3):
        await service.create(valid_payload)

    assert any("DISK: prune projects." in line for line in lines(trace))


async def test_upload_traces(trace, tmp_path):
    from test_media_store import FakeUpload

    store = MediaStore(tmp_path / "uploads", max_bytes=4)
    item = await store.save_upload(FakeUpload(b"abc"), "a.png", "image/png")

    with pytest.raises(UploadRejectedError):
        await store.save_upload(FakeUpload(b"abcdef"), "big.png", "image/png")
    with pytest.raises(UploadRejectedError):
        await store.save_upload(FakeUpload(b"abc"), "notes.txt", "text/plain")

    out = lines(trace)
    assert any(f"DISK: store {item.name} (3 bytes)" in line for line in out)
    assert any("REJECT: 'big.png' exceeds 4 bytes" in line for line in out)
    assert any("REJECT: 'notes.txt' (text/plain)" in line for line in out)


def test_disable_restores_propagation():
    setup_follow_through_logging(True)
    setup_follow_through_logging(False)
    assert tracer.propagate
    assert tracer.handlers == []
