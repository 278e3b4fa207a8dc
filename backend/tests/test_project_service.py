import pytest

from hengstudio.errors import PayloadValidationError, ProjectNotFoundError
from hengstudio.services.project_service import ProjectService

METADATA = {"iso": "200", "aperture": "f/4", "shutter": "1/125", "date": "2023-10-01"}


@pytest.fixture
def service(project_store):
    return ProjectService(project_store)


async def test_create_round_trip(service, valid_payload):
    created = await service.create({**valid_payload, "title": "  A  ", "metadata": METADATA})
    fetched = await service.get(created.id)

    assert fetched == created
    assert fetched.title == "A"
    assert fetched.category.value == "Fashion"
    assert fetched.image_url == "https://x/y.jpg"
    assert fetched.metadata.model_dump() == METADATA


async def test_create_prepends(service, valid_payload):
    first = await service.create({**valid_payload, "title": "first"})
    second = await service.create({**valid_payload, "title": "second"})
    assert [p.id for p in await service.list()] == [second.id, first.id]


async def test_ids_are_unique(service, valid_payload):
    ids = {(await service.create(valid_payload)).id for _ in range(5)}
    assert len(ids) == 5


async def test_invalid_create_writes_nothing(service, project_store):
    await project_store.read_all()
    before = project_store.path.read_text()

    with pytest.raises(PayloadValidationError) as exc:
        await service.create({"title": "", "category": "Fashion", "imageUrl": "https://x/y.jpg"})

    assert exc.value.issues[0]["path"] == "title"
    assert project_store.path.read_text() == before


async def test_replace_keeps_only_id(service, valid_payload):
    created = await service.create({**valid_payload, "metadata": METADATA})
    replaced = await service.replace(
        created.id, {"title": "B", "category": "Wedding", "imageUrl": "/uploads/b.jpg"}
    )

    assert replaced.id == created.id
    assert replaced.title == "B"
    assert replaced.metadata is None
    assert await service.get(created.id) == replaced


async def test_replace_keeps_position(service, valid_payload):
    older = await service.create({**valid_payload, "title": "older"})
    newer = await service.create({**valid_payload, "title": "newer"})
    await service.replace(older.id, {**valid_payload, "title": "older v2"})
    assert [p.title for p in await service.list()] == ["newer", "older v2"]
    assert (await service.list())[0].id == newer.id


async def test_replace_missing(service, valid_payload):
    with pytest.raises(ProjectNotFoundError):
        await service.replace("missing", valid_payload)


async def test_patch_merges_provided_fields(service, valid_payload):
    created = await service.create({**valid_payload, "metadata": METADATA})
    patched = await service.patch(created.id, {"title": "Renamed"})

    assert patched.title == "Renamed"
    assert patched.category == created.category
    assert patched.image_url == created.image_url
    assert patched.metadata == created.metadata


async def test_patch_replaces_metadata_wholesale(service, valid_payload):
    created = await service.create({**valid_payload, "metadata": METADATA})

    cleared = await service.patch(created.id, {"metadata": {}})
    assert cleared.metadata is None

    restored = await service.patch(created.id, {"metadata": METADATA})
    assert restored.metadata.model_dump() == METADATA


async def test_patch_validation_before_lookup(service):
    with pytest.raises(PayloadValidationError):
        await service.patch("missing", {})


async def test_remove_returns_deleted_record(service, valid_payload):
    created = await service.create(valid_payload)
    before = await service.get(created.id)

    deleted = await service.remove(created.id)

    assert deleted == before
    with pytest.raises(ProjectNotFoundError):
        await service.get(created.id)


async def test_remove_missing(service):
    with pytest.raises(ProjectNotFoundError):
        await service.remove("missing")
