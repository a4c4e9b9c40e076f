"""Module/task graph for generated stubs."""

import logging
from datetime import datetime, timezone
from uuid import uuid4

from stubsmith.models import (
    MaterializedFile,
    Module,
    ModuleMeta,
    ModuleStatus,
    ModuleTasks,
    ProjectSummary,
    StubTaskResult,
    Task,
    TaskStatus,
    TaskStoreDocument,
    TaskTestStatus,
    TaskUpdate,
)
from stubsmith.tracker.exceptions import (
    InvalidTaskTransitionError,
    TaskAlreadyDoneError,
    TaskNotFoundError,
    TrackedModuleNotFoundError,
)
from stubsmith.tracker.progress import (
    compute_progress,
    count_by_status,
    derive_module_status,
    find_module,
    find_task,
    tasks_for_module,
)
from stubsmith.tracker.task_store import TaskStore

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _short_id() -> str:
    return uuid4().hex[:12]


class ModuleTaskTracker:
    """Tracks generated modules and one implementation task per stub.

    Every operation is a full read-modify-write of the store's document.
    """

    def __init__(self, store: TaskStore) -> None:
        self.store = store

    def create_stub_tasks(
        self,
        meta: ModuleMeta,
        files: list[MaterializedFile],
    ) -> StubTaskResult:
        """Register a freshly generated module and a todo task per stub.

        Args:
            meta: Name, type, language and optional branch of the module.
            files: Materialized files with the stubs detected in each.

        Returns:
            StubTaskResult holding the new Module and its Tasks.
        """
        document = self.store.load()
        created_at = _now()

        module = Module(
            id=f"module-{meta.name}-{_short_id()}",
            name=meta.name,
            type=meta.type,
            language=meta.language,
            style=meta.style,
            total_stubs=sum(file.stub_count for file in files),
            implemented_stubs=0,
            progress=0,
            status=ModuleStatus.STUBBED,
            files=[file.path for file in files],
            created_at=created_at,
            branch=meta.branch,
        )

        test_status = (
            TaskTestStatus.PENDING if meta.with_tests else TaskTestStatus.NOT_REQUIRED
        )
        tasks: list[Task] = []
        for file in files:
            for stub in file.stubs:
                tasks.append(
                    Task(
                        id=f"task-{meta.name}-{stub.name}-{_short_id()}",
                        module_id=module.id,
                        type="implement",
                        function=stub.name,
                        file=file.path,
                        line=stub.line,
                        status=TaskStatus.TODO,
                        created_at=created_at,
                        implemented_at=None,
                        test_status=test_status,
                        branch=meta.branch,
                    )
                )

        document.modules.append(module)
        document.tasks.extend(tasks)
        self.store.save(document)
        logger.info(
            "Tracking module %s: %d files, %d tasks",
            module.id,
            len(files),
            len(tasks),
        )
        return StubTaskResult(module=module, tasks=tasks)

    def start_task(self, task_id: str) -> TaskUpdate:
        """Move a todo task to in_progress."""
        document = self.store.load()
        task = self._require_task(document, task_id)
        if task.status == TaskStatus.DONE:
            raise TaskAlreadyDoneError(f"Task '{task_id}' is already done")
        if task.status != TaskStatus.TODO:
            raise InvalidTaskTransitionError(
                f"Task '{task_id}' cannot start from status '{task.status.value}'"
            )
        task.status = TaskStatus.IN_PROGRESS
        task.started_at = _now()
        self.store.save(document)
        return TaskUpdate(task=task, module=self._owning_module(document, task))

    def mark_done(self, task_id: str, tests_completed: bool = False) -> TaskUpdate:
        """Complete a task and refresh its module's progress.

        Args:
            task_id: Id of the task to complete.
            tests_completed: Also mark pending tests as completed.

        Returns:
            TaskUpdate with the completed task and its module (None for
            tasks migrated without a module).

        Raises:
            TaskNotFoundError: If no task has this id.
            TaskAlreadyDoneError: If the task is already done. The store is
                left untouched.
        """
        document = self.store.load()
        task = self._require_task(document, task_id)
        return self._complete(document, task, tests_completed)

    def mark_done_by_function(
        self,
        function_name: str,
        tests_completed: bool = False,
    ) -> TaskUpdate:
        """Complete the first unfinished task for a function name (case-insensitive)."""
        document = self.store.load()
        wanted = function_name.lower()
        for task in document.tasks:
            if task.function.lower() == wanted and task.status != TaskStatus.DONE:
                return self._complete(document, task, tests_completed)
        raise TaskNotFoundError(f"No open task for function '{function_name}'")

    def summary(self, module_id: str | None = None) -> ProjectSummary:
        """Aggregate module and task counts, optionally for one module."""
        document = self.store.load()
        modules = document.modules
        tasks = document.tasks
        if module_id is not None:
            module = find_module(modules, module_id)
            if module is None:
                raise TrackedModuleNotFoundError(f"Module '{module_id}' not found")
            modules = [module]
            tasks = tasks_for_module(tasks, module.id)

        modules_by_status = {status.value: 0 for status in ModuleStatus}
        for module in modules:
            modules_by_status[module.status.value] += 1
        tasks_by_status = count_by_status(tasks)

        return ProjectSummary(
            total_modules=len(modules),
            modules_by_status=modules_by_status,
            total_tasks=len(tasks),
            tasks_by_status=tasks_by_status,
            overall_progress=compute_progress(
                tasks_by_status[TaskStatus.DONE.value], len(tasks)
            ),
        )

    def get_module_tasks(self, module_ref: str) -> ModuleTasks:
        """Return a module (by id or name) with its tasks."""
        document = self.store.load()
        module = find_module(document.modules, module_ref)
        if module is None:
            raise TrackedModuleNotFoundError(f"Module '{module_ref}' not found")
        return ModuleTasks(module=module, tasks=tasks_for_module(document.tasks, module.id))

    def get_all_modules(self) -> list[Module]:
        return self.store.load().modules

    def get_pending_tasks(self) -> list[Task]:
        return [task for task in self.store.load().tasks if task.status != TaskStatus.DONE]

    def get_next_task(self) -> Task | None:
        """Oldest todo task, or None when nothing is left to start."""
        todo = [task for task in self.store.load().tasks if task.status == TaskStatus.TODO]
        if not todo:
            return None
        oldest = datetime.max.replace(tzinfo=timezone.utc)
        # sorted() is stable, so tasks created together keep document order
        return sorted(todo, key=lambda task: task.created_at or oldest)[0]

    def is_implemented(self, file_path: str, function_name: str) -> bool:
        """Whether the tracked task for (file, function) is done.

        Untracked functions count as implemented. Names are matched per
        file because the same name may be stubbed in several files.
        """
        matching = [
            task
            for task in self.store.load().tasks
            if task.file == file_path and task.function == function_name
        ]
        return all(task.status == TaskStatus.DONE for task in matching)

    def export_markdown(self) -> str:
        """Render every module as a markdown checklist of its tasks."""
        document = self.store.load()
        lines = ["# Stub Tasks", ""]
        for module in document.modules:
            lines.append(f"## {module.name} ({module.progress}%)")
            lines.append("")
            lines.append(
                f"**Type:** {module.type.value} | **Language:** {module.language} "
                f"| **Style:** {module.style}"
            )
            created = module.created_at.date().isoformat() if module.created_at else "unknown"
            lines.append(f"**Status:** {module.status.value} | **Created:** {created}")
            lines.append("")
            for task in tasks_for_module(document.tasks, module.id):
                checkbox = "[x]" if task.status == TaskStatus.DONE else "[ ]"
                lines.append(f"- {checkbox} `{task.function}` ({task.file})")
            lines.append("")
        return "\n".join(lines)

    def clear(self) -> None:
        self.store.save(TaskStoreDocument())

    def _complete(
        self,
        document: TaskStoreDocument,
        task: Task,
        tests_completed: bool,
    ) -> TaskUpdate:
        if task.status == TaskStatus.DONE:
            raise TaskAlreadyDoneError(f"Task '{task.id}' is already done")

        task.status = TaskStatus.DONE
        task.implemented_at = _now()
        if tests_completed and task.test_status == TaskTestStatus.PENDING:
            task.test_status = TaskTestStatus.COMPLETED

        module = self._owning_module(document, task)
        if module is not None:
            self._refresh_module(document, module)
        self.store.save(document)
        logger.info("Task %s done", task.id)
        return TaskUpdate(task=task, module=module)

    def _refresh_module(self, document: TaskStoreDocument, module: Module) -> None:
        done = sum(
            1
            for task in tasks_for_module(document.tasks, module.id)
            if task.status == TaskStatus.DONE
        )
        module.implemented_stubs = min(done, module.total_stubs)
        module.progress = compute_progress(module.implemented_stubs, module.total_stubs)
        module.status = derive_module_status(module.implemented_stubs, module.total_stubs)
        if module.status == ModuleStatus.COMPLETE and module.completed_at is None:
            module.completed_at = _now()

    @staticmethod
    def _require_task(document: TaskStoreDocument, task_id: str) -> Task:
        task = find_task(document.tasks, task_id)
        if task is None:
            raise TaskNotFoundError(f"Task '{task_id}' not found")
        return task

    @staticmethod
    def _owning_module(document: TaskStoreDocument, task: Task) -> Module | None:
        if task.module_id is None:
            return None
        for module in document.modules:
            if module.id == task.module_id:
                return module
        return None
