"""Tests for ModuleTaskTracker."""

import json

import pytest

from stubsmith.models import ModuleMeta, ModuleStatus, TaskStatus, TaskTestStatus
from stubsmith.tracker import (
    InvalidTaskTransitionError,
    ModuleTaskTracker,
    TaskAlreadyDoneError,
    TaskNotFoundError,
    TaskStore,
    TrackedModuleNotFoundError,
)


class TestCreateStubTasks:
    def test_module_counts_and_status(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)

        module = result.module
        assert module.total_stubs == 3
        assert module.implemented_stubs == 0
        assert module.progress == 0
        assert module.status == ModuleStatus.STUBBED
        assert module.files == [f.path for f in websocket_files]
        assert module.language == "rust"
        assert module.created_at is not None

    def test_one_todo_task_per_stub(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)

        assert result.total_tasks == 3
        assert [t.function for t in result.tasks] == ["connect", "disconnect", "handle_request"]
        for task in result.tasks:
            assert task.module_id == result.module_id
            assert task.status == TaskStatus.TODO
            assert task.type == "implement"
            assert task.test_status == TaskTestStatus.NOT_REQUIRED
            assert task.implemented_at is None
        assert result.tasks[0].file == websocket_files[0].path
        assert result.tasks[1].line == 2

    def test_persists_module_and_tasks(self, tracker, store, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)

        document = store.load()
        assert [m.id for m in document.modules] == [result.module_id]
        assert [t.id for t in document.tasks] == result.task_ids

    def test_appends_to_existing_document(self, tracker, store, websocket_meta, websocket_files):
        first = tracker.create_stub_tasks(websocket_meta, websocket_files)
        second = tracker.create_stub_tasks(websocket_meta, websocket_files[:1])

        document = store.load()
        assert len(document.modules) == 2
        assert len(document.tasks) == 5
        assert first.module_id != second.module_id

    def test_ids_are_unique(self, tracker, websocket_meta, make_file):
        files = [make_file("/w/a.rs", "run"), make_file("/w/b.rs", "run")]
        result = tracker.create_stub_tasks(websocket_meta, files)
        assert len(set(result.task_ids)) == 2
        # Same name in two files gives independent tasks
        assert [t.file for t in result.tasks] == ["/w/a.rs", "/w/b.rs"]

    def test_with_tests_marks_tests_pending(self, tracker, websocket_files):
        meta = ModuleMeta(name="ws", language="rust", with_tests=True, branch="stubs/ws")
        result = tracker.create_stub_tasks(meta, websocket_files)
        assert all(t.test_status == TaskTestStatus.PENDING for t in result.tasks)
        assert all(t.branch == "stubs/ws" for t in result.tasks)
        assert result.module.branch == "stubs/ws"

    def test_module_without_stubs(self, tracker, websocket_meta, make_file):
        result = tracker.create_stub_tasks(websocket_meta, [make_file("/w/readme.rs")])
        assert result.module.total_stubs == 0
        assert result.tasks == []
        assert result.module.status == ModuleStatus.STUBBED


class TestMarkDone:
    def test_subset_is_implementing(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)

        update = tracker.mark_done(result.task_ids[0])

        assert update.task.status == TaskStatus.DONE
        assert update.task.implemented_at is not None
        assert update.module.implemented_stubs == 1
        assert update.module.progress == 33
        assert update.module.status == ModuleStatus.IMPLEMENTING
        assert 0 < update.module.progress < 100

    def test_all_tasks_complete_module(self, tracker, store, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)

        for task_id in result.task_ids:
            update = tracker.mark_done(task_id)

        module = update.module
        assert module.implemented_stubs == module.total_stubs == 3
        assert module.progress == 100
        assert module.status == ModuleStatus.COMPLETE
        assert module.completed_at is not None
        assert store.load().modules[0].status == ModuleStatus.COMPLETE

    def test_progress_rounds_half_up(self, tracker, websocket_meta, make_file):
        files = [make_file(f"/w/{i}.rs", f"f{i}") for i in range(8)]
        result = tracker.create_stub_tasks(websocket_meta, files)
        tracker.mark_done(result.task_ids[0])
        # 100 * 1 / 8 = 12.5
        assert tracker.get_module_tasks(result.module_id).module.progress == 13

    def test_unknown_task_raises(self, tracker):
        with pytest.raises(TaskNotFoundError):
            tracker.mark_done("task-missing")

    def test_double_completion_raises_and_keeps_timestamp(
        self, tracker, store, websocket_meta, websocket_files
    ):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)
        first = tracker.mark_done(result.task_ids[0])
        before = store.path.read_text()

        with pytest.raises(TaskAlreadyDoneError):
            tracker.mark_done(result.task_ids[0])

        assert store.path.read_text() == before
        stored = store.load().tasks[0]
        assert stored.implemented_at == first.task.implemented_at

    def test_tests_completed_flag(self, tracker, websocket_files):
        meta = ModuleMeta(name="ws", language="rust", with_tests=True)
        result = tracker.create_stub_tasks(meta, websocket_files)

        update = tracker.mark_done(result.task_ids[0], tests_completed=True)
        assert update.task.test_status == TaskTestStatus.COMPLETED
        update = tracker.mark_done(result.task_ids[1])
        assert update.task.test_status == TaskTestStatus.PENDING

    def test_state_survives_new_tracker_instance(self, store, websocket_meta, websocket_files):
        result = ModuleTaskTracker(store).create_stub_tasks(websocket_meta, websocket_files)
        ModuleTaskTracker(store).mark_done(result.task_ids[1])

        resumed = ModuleTaskTracker(TaskStore(store.path))
        assert resumed.summary().tasks_by_status["done"] == 1

    def test_legacy_task_without_module(self, tracker, store):
        store.path.write_text(json.dumps([{"id": "old-1", "function": "legacy"}]))

        update = tracker.mark_done("old-1")

        assert update.module is None
        assert store.load().tasks[0].status == TaskStatus.DONE

    def test_mark_done_by_function_is_case_insensitive(
        self, tracker, websocket_meta, websocket_files
    ):
        tracker.create_stub_tasks(websocket_meta, websocket_files)
        update = tracker.mark_done_by_function("CONNECT")
        assert update.task.function == "connect"
        with pytest.raises(TaskNotFoundError):
            tracker.mark_done_by_function("connect")


class TestStartTask:
    def test_start_sets_in_progress(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)

        update = tracker.start_task(result.task_ids[0])

        assert update.task.status == TaskStatus.IN_PROGRESS
        assert update.task.started_at is not None
        # Starting does not count as progress
        assert update.module.implemented_stubs == 0
        assert update.module.status == ModuleStatus.STUBBED

    def test_in_progress_task_can_complete(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.start_task(result.task_ids[0])
        assert tracker.mark_done(result.task_ids[0]).task.status == TaskStatus.DONE

    def test_start_twice_is_invalid(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.start_task(result.task_ids[0])
        with pytest.raises(InvalidTaskTransitionError):
            tracker.start_task(result.task_ids[0])

    def test_start_done_task_raises(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.mark_done(result.task_ids[0])
        with pytest.raises(TaskAlreadyDoneError):
            tracker.start_task(result.task_ids[0])


class TestSummary:
    def test_empty_store(self, tracker):
        summary = tracker.summary()
        assert summary.total_modules == 0
        assert summary.total_tasks == 0
        assert summary.tasks_by_status == {"todo": 0, "in_progress": 0, "done": 0}
        assert summary.overall_progress == 0

    def test_counts_across_modules(self, tracker, store, websocket_meta, websocket_files):
        first = tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.create_stub_tasks(ModuleMeta(name="auth"), websocket_files[1:])
        tracker.mark_done(first.task_ids[0])
        tracker.start_task(first.task_ids[1])
        before = store.path.read_text()

        summary = tracker.summary()

        assert summary.total_modules == 2
        assert summary.modules_by_status == {"stubbed": 1, "implementing": 1, "complete": 0}
        assert summary.total_tasks == 4
        assert summary.tasks_by_status == {"todo": 2, "in_progress": 1, "done": 1}
        assert summary.overall_progress == 25
        assert store.path.read_text() == before

    def test_filtered_to_one_module(self, tracker, websocket_meta, websocket_files):
        first = tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.create_stub_tasks(ModuleMeta(name="auth"), websocket_files)
        tracker.mark_done(first.task_ids[0])

        summary = tracker.summary(first.module_id)

        assert summary.total_modules == 1
        assert summary.total_tasks == 3
        assert summary.tasks_by_status["done"] == 1
        assert summary.overall_progress == 33

    def test_unknown_module_raises(self, tracker):
        with pytest.raises(TrackedModuleNotFoundError):
            tracker.summary("module-nope")


class TestQueries:
    def test_get_module_tasks_by_name(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)
        module_tasks = tracker.get_module_tasks("websocket")
        assert module_tasks.module.id == result.module_id
        assert len(module_tasks.tasks) == 3

    def test_get_module_tasks_unknown(self, tracker):
        with pytest.raises(TrackedModuleNotFoundError):
            tracker.get_module_tasks("missing")

    def test_pending_and_next(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.mark_done(result.task_ids[0])

        assert [t.id for t in tracker.get_pending_tasks()] == result.task_ids[1:]
        assert tracker.get_next_task().id == result.task_ids[1]

    def test_next_task_none_when_all_done(self, tracker, websocket_meta, make_file):
        result = tracker.create_stub_tasks(websocket_meta, [make_file("/w/a.rs", "a")])
        tracker.mark_done(result.task_ids[0])
        assert tracker.get_next_task() is None

    def test_get_all_modules(self, tracker, websocket_meta, websocket_files):
        tracker.create_stub_tasks(websocket_meta, websocket_files)
        assert [m.name for m in tracker.get_all_modules()] == ["websocket"]

    def test_is_implemented_tracks_file_and_function(self, tracker, websocket_meta, make_file):
        files = [make_file("/w/a.rs", "run"), make_file("/w/b.rs", "run")]
        result = tracker.create_stub_tasks(websocket_meta, files)
        tracker.mark_done(result.task_ids[0])

        assert tracker.is_implemented("/w/a.rs", "run") is True
        assert tracker.is_implemented("/w/b.rs", "run") is False
        assert tracker.is_implemented("/w/c.rs", "untracked") is True

    def test_export_markdown(self, tracker, websocket_meta, websocket_files):
        result = tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.mark_done(result.task_ids[0])

        markdown = tracker.export_markdown()

        assert markdown.startswith("# Stub Tasks")
        assert "## websocket (33%)" in markdown
        assert "- [x] `connect`" in markdown
        assert "- [ ] `disconnect`" in markdown

    def test_clear(self, tracker, store, websocket_meta, websocket_files):
        tracker.create_stub_tasks(websocket_meta, websocket_files)
        tracker.clear()
        assert store.load().modules == []
        assert store.load().tasks == []


def test_shown_legacy_id_can_be_completed(tracker, store):
    store.path.write_text(json.dumps([{"description": "Write docs", "status": "pending"}]))

    shown = tracker.get_pending_tasks()[0].id
    update = tracker.mark_done(shown)

    assert update.task.id == shown
    assert tracker.get_pending_tasks() == []
    assert store.load().tasks[0].id == shown
