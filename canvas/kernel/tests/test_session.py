"""
Canvas Kernel — Editor Session Tests

Save-on-every-edit, storage bookkeeping, drag payload resolution, and the
per-session lock.
"""

import asyncio
import json

import pytest

from canvas.kernel import tree
from canvas.kernel.commands import make_command
from canvas.kernel.relocation import DropTarget, PayloadResolver
from canvas.kernel.session import EditorSession, FileNotFound
from canvas.kernel.storage import MemoryStorage, StorageError
from canvas.kernel.workspace import ProjectNotFound


class FailingStorage(MemoryStorage):
    """Saves always fail; everything else behaves like MemoryStorage."""

    async def save(self, project):
        raise StorageError("disk on fire")


class SlowResolver(PayloadResolver):
    """Resolution that only finishes when the test says so."""

    def __init__(self):
        self.release = asyncio.Event()

    async def resolve(self, raw):
        await self.release.wait()
        return await super().resolve(raw)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
async def session(storage):
    s = await EditorSession.create(storage, "Demo")
    await s.run("view_file.create", name="ContentView")
    return s


def _file_id(session):
    return session.project.view_files[0].id


def _snapshot(project):
    return json.dumps(project.to_dict(), sort_keys=True)


class TestLifecycle:
    async def test_create_persists_once(self, storage):
        session = await EditorSession.create(storage, "Demo", color="red")
        assert storage.save_count == 1
        assert session.project.id in storage.documents
        assert session.selection.project_id == session.project.id

    async def test_open_round_trips(self, storage, session):
        await session.run("component.create", kind="text", target={"file": _file_id(session)})
        reopened = await EditorSession.open(storage, session.project.id)
        assert reopened.project.to_dict() == session.project.to_dict()

    async def test_open_missing(self, storage):
        with pytest.raises(ProjectNotFound):
            await EditorSession.open(storage, "nope")

    async def test_close_clears_selection(self, session):
        await session.close()
        assert session.selection.project_id is None

    async def test_closed_session_rejects_commands(self, storage, session):
        await session.close()
        count = storage.save_count
        before = _snapshot(session.project)

        result = await session.run("view_file.create", name="Late")

        assert not result.applied
        assert result.error_code == "NOT_FOUND"
        assert storage.save_count == count
        assert _snapshot(session.project) == before

    async def test_close_waits_for_in_flight_mutation(self, storage, session):
        pending = asyncio.create_task(session.run("view_file.create", name="First"))
        await asyncio.sleep(0)
        await session.close()
        assert (await pending).applied
        assert [f.name for f in session.project.view_files][-1] == "First"
        assert not (await session.run("view_file.create", name="Second")).applied


class TestPersistence:
    async def test_every_commit_saves(self, storage, session):
        count = storage.save_count
        await session.run("component.create", kind="vstack", target={"file": _file_id(session)})
        await session.run("view_file.rename", file=_file_id(session), name="Main")
        assert storage.save_count == count + 2

    async def test_rejection_does_not_save(self, storage, session):
        count = storage.save_count
        result = await session.run("component.remove", component="ghost")
        assert not result.applied
        assert storage.save_count == count

    async def test_pending_changes_flushed_on_save(self, storage, session):
        await session.run("component.create", kind="text", target={"file": _file_id(session)})
        assert storage.pending_inserts == []
        assert storage.pending_deletes == []

    async def test_created_and_destroyed_reach_storage(self, session):
        seen = []

        class Recording(MemoryStorage):
            def insert(self, entity_id):
                seen.append(("insert", entity_id))
                super().insert(entity_id)

            def delete(self, entity_id):
                seen.append(("delete", entity_id))
                super().delete(entity_id)

        session._storage = Recording()
        created = await session.run("component.create", kind="text", target={"file": _file_id(session)})
        await session.run("component.remove", component=created.selected)
        assert ("insert", created.selected) in seen
        assert ("delete", created.selected) in seen

    async def test_failed_save_keeps_mutation(self):
        session = EditorSession(
            (await EditorSession.create(MemoryStorage(), "Demo")).project,
            FailingStorage(),
        )
        result = await session.run("view_file.create", name="ContentView")
        assert result.applied
        assert session.project.view_files[0].name == "ContentView"


class TestDrop:
    async def test_palette_drop(self, session):
        result = await session.drop({"kind": "text"}, DropTarget.root(_file_id(session)))
        assert result.applied
        assert session.selection.component_id == result.selected
        root = session.project.view_files[0].components[0]
        assert root.id == result.selected

    async def test_existing_drop(self, session):
        file_id = _file_id(session)
        stack = await session.run("component.create", kind="vstack", target={"file": file_id})
        text = await session.run("component.create", kind="text", target={"file": file_id})
        result = await session.drop({"component_id": text.selected}, DropTarget.component(stack.selected))
        assert result.applied
        file = session.project.view_files[0]
        assert [c.id for c in file.components] == [stack.selected]
        assert file.components[0].children[0].id == text.selected

    async def test_malformed_payload_is_no_op(self, storage, session):
        before = session.project.to_dict()
        count = storage.save_count
        result = await session.drop("{broken", DropTarget.root(_file_id(session)))
        assert result.error_code == "INVALID_PAYLOAD"
        assert session.project.to_dict() == before
        assert storage.save_count == count

    async def test_stale_payload_is_not_found(self, session):
        result = await session.drop({"component_id": "deleted"}, DropTarget.root(_file_id(session)))
        assert result.error_code == "NOT_FOUND"

    async def test_relocation_waits_for_resolution(self, storage):
        resolver = SlowResolver()
        session = await EditorSession.create(storage, "Demo", resolver=resolver)
        await session.run("view_file.create", name="ContentView")
        file_id = _file_id(session)

        pending = asyncio.create_task(session.drop({"kind": "text"}, DropTarget.root(file_id)))
        await asyncio.sleep(0)
        # Other edits proceed while the payload is still resolving
        await session.run("component.create", kind="spacer", target={"file": file_id})
        resolver.release.set()
        result = await pending

        kinds = [c.kind for c in session.project.view_files[0].components]
        assert kinds == ["spacer", "text"]
        assert result.applied

    async def test_concurrent_commands_serialize(self, session):
        file_id = _file_id(session)
        commands = [make_command("component.create", kind="text", target={"file": file_id}) for _ in range(10)]
        results = await asyncio.gather(*(session.apply(c) for c in commands))
        assert all(r.applied for r in results)
        assert len(session.project.view_files[0].components) == 10
        assert tree.check_integrity(session.project) == []

    async def test_apply_many_in_order(self, session):
        file_id = _file_id(session)
        results = await session.apply_many(
            [
                make_command("component.create", kind="hstack", target={"file": file_id}),
                make_command("component.remove", component="ghost"),
                make_command("component.create", kind="text", target={"file": file_id}),
            ]
        )
        assert [r.applied for r in results] == [True, False, True]


class TestPreview:
    async def test_preview_file(self, session):
        await session.drop({"kind": "text"}, DropTarget.root(_file_id(session)))
        d = session.preview(_file_id(session))
        assert d["children"][0]["text"] == "Hello, World!"

    async def test_preview_missing_file(self, session):
        with pytest.raises(FileNotFound):
            session.preview("ghost")
        with pytest.raises(FileNotFound):
            session.preview_html("ghost")

    async def test_preview_component(self, session):
        result = await session.run("component.create", kind="button", target={"file": _file_id(session)})
        assert session.preview_component(result.selected)["type"] == "button"
        assert session.preview_component("ghost") is None

    async def test_preview_html(self, session):
        await session.run("component.create", kind="text", target={"file": _file_id(session)})
        html = session.preview_html(_file_id(session))
        assert html.startswith("<!DOCTYPE html>")
        assert "Hello, World!" in html
        assert "<title>Demo · ContentView</title>" in html
