import asyncio
import json

import pytest

from hengstudio.errors import ProjectNotFoundError, StorageError
from hengstudio.models.project import Category, Project
from hengstudio.storage.project_store import ProjectStore


def make_project(title, **extra):
    return Project(title=title, category=Category.WEDDING, image_url=f"/uploads/{title}.jpg", **extra)


async def test_missing_document_bootstraps_empty(project_store):
    assert not project_store.path.exists()
    assert await project_store.read_all() == []
    assert json.loads(project_store.path.read_text()) == []


async def test_write_then_read_round_trips_camel_case(project_store):
    project = make_project("one")
    await project_store.write_all([project])

    raw = json.loads(project_store.path.read_text())
    assert raw == [{"id": project.id, "title": "one", "category": "Wedding", "imageUrl": "/uploads/one.jpg"}]
    assert await project_store.read_one(project.id) == project


async def test_reads_return_fresh_copies(project_store):
    project = make_project("one")
    await project_store.write_all([project])

    first = await project_store.read_one(project.id)
    first.title = "mutated"
    assert (await project_store.read_one(project.id)).title == "one"


async def test_read_one_missing(project_store):
    await project_store.write_all([])
    with pytest.raises(ProjectNotFoundError):
        await project_store.read_one("nope")


async def test_non_array_document_reads_empty(project_store):
    project_store.path.parent.mkdir(parents=True)
    project_store.path.write_text('{"not": "a list"}')
    assert await project_store.read_all() == []


async def test_corrupt_document_is_storage_error(project_store):
    project_store.path.parent.mkdir(parents=True)
    project_store.path.write_text("[{")
    with pytest.raises(StorageError):
        await project_store.read_all()


async def test_write_leaves_no_temp_files(project_store):
    await project_store.write_all([make_project("a")])
    await project_store.write_all([make_project("b")])
    leftovers = [p.name for p in project_store.path.parent.iterdir() if p.suffix == ".tmp"]
    assert leftovers == []


async def test_backup_holds_previous_contents(project_store):
    first = make_project("first")
    await project_store.write_all([first])
    await project_store.write_all([make_project("second")])

    backups = project_store.list_backups()
    assert len(backups) == 1
    assert json.loads(backups[0].read_text())[0]["id"] == first.id


async def test_backup_retention_keeps_twenty_most_recent(project_store):
    await project_store.read_all()  # bootstrap, nothing to back up yet
    written = []
    for i in range(25):
        written.append(make_project(f"p{i}"))
        await project_store.write_all(list(written))

    backups = project_store.list_backups()
    assert len(backups) == 20
    # newest backup holds the state before the last write (24 projects)
    assert len(json.loads(backups[0].read_text())) == 24
    assert len(json.loads(backups[-1].read_text())) == 5
    assert [p.name for p in backups] == sorted((p.name for p in backups), reverse=True)


async def test_backup_failure_does_not_block_write(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    blocker = tmp_path / "backups-is-a-file"
    blocker.write_text("x")
    store = ProjectStore(data_dir / "projects.json", blocker)

    await store.write_all([make_project("a")])
    await store.write_all([make_project("b")])

    assert [p.title for p in await store.read_all()] == ["b"]


async def test_update_serializes_concurrent_mutations(project_store):
    await project_store.write_all([])

    def append(title):
        def mutate(projects):
            return projects + [make_project(title)], None
        return mutate

    await asyncio.gather(*(project_store.update(append(f"p{i}")) for i in range(10)))
    assert sorted(p.title for p in await project_store.read_all()) == sorted(f"p{i}" for i in range(10))


async def test_update_aborts_without_writing_on_error(project_store):
    await project_store.write_all([make_project("keep")])

    def explode(projects):
        raise ProjectNotFoundError()

    with pytest.raises(ProjectNotFoundError):
        await project_store.update(explode)
    assert [p.title for p in await project_store.read_all()] == ["keep"]
    assert len(project_store.list_backups()) == 0
