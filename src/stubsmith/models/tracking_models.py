"""Persistent module/task records and the task-store document."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ModuleType(str, Enum):
    """Kind of module a generation run produces."""

    SERVICE = "service"
    API = "api"
    LIBRARY = "library"


class ModuleStatus(str, Enum):
    """Lifecycle of a tracked module: stubbed -> implementing -> complete."""

    STUBBED = "stubbed"
    IMPLEMENTING = "implementing"
    COMPLETE = "complete"


class TaskStatus(str, Enum):
    """Lifecycle of an implementation task: todo -> in_progress -> done."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class TaskTestStatus(str, Enum):
    """Whether a task still owes tests for its implementation."""

    NOT_REQUIRED = "not_required"
    PENDING = "pending"
    COMPLETED = "completed"


# Statuses written by the flat task list that predates module tracking.
_LEGACY_TASK_STATUSES = {
    "pending": TaskStatus.TODO.value,
    "completed": TaskStatus.DONE.value,
}

# Persisted records keep camelCase keys on disk; unknown keys survive a round trip.
_RECORD_CONFIG = ConfigDict(
    frozen=False,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="allow",
    coerce_numbers_to_str=True,
)


class Module(BaseModel):
    """One generation run's output, tracked as a unit of stub progress."""

    model_config = _RECORD_CONFIG

    id: str
    name: str
    type: ModuleType = ModuleType.SERVICE
    language: str = "unknown"
    style: str = "default"
    total_stubs: int = 0
    implemented_stubs: int = 0
    progress: int = 0  # 0-100, derived from the stub counts
    status: ModuleStatus = ModuleStatus.STUBBED
    files: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    completed_at: datetime | None = None
    branch: str | None = None


class Task(BaseModel):
    """Implementation-tracking record for one detected stub."""

    model_config = _RECORD_CONFIG

    id: str = Field(default_factory=lambda: f"task-{uuid4().hex}")
    module_id: str | None = None  # None for records migrated from the flat list
    type: str = "implement"
    function: str = ""
    file: str = ""
    line: int | None = None
    status: TaskStatus = TaskStatus.TODO
    created_at: datetime | None = None
    started_at: datetime | None = None
    implemented_at: datetime | None = None
    test_status: TaskTestStatus = TaskTestStatus.NOT_REQUIRED
    branch: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _migrate_legacy_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _LEGACY_TASK_STATUSES.get(value, value)
        return value


class TaskStoreDocument(BaseModel):
    """The single persisted structure holding all modules and tasks."""

    model_config = ConfigDict(frozen=False)

    modules: list[Module] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)


class ModuleMeta(BaseModel):
    """Metadata describing the module a set of stubs belongs to."""

    model_config = ConfigDict(frozen=False)

    name: str
    type: ModuleType = ModuleType.SERVICE
    language: str = "unknown"
    style: str = "default"
    branch: str | None = None
    with_tests: bool = False


class StubTaskResult(BaseModel):
    """Outcome of registering a freshly generated module."""

    model_config = ConfigDict(frozen=False)

    module: Module
    tasks: list[Task] = Field(default_factory=list)

    @property
    def module_id(self) -> str:
        return self.module.id

    @property
    def task_ids(self) -> list[str]:
        return [task.id for task in self.tasks]

    @property
    def total_tasks(self) -> int:
        return len(self.tasks)


class TaskUpdate(BaseModel):
    """A task after a status transition, with its owning module if any."""

    model_config = ConfigDict(frozen=False)

    task: Task
    module: Module | None = None


class ModuleTasks(BaseModel):
    model_config = ConfigDict(frozen=False)

    module: Module
    tasks: list[Task] = Field(default_factory=list)


class ProjectSummary(BaseModel):
    """Aggregate counts over the whole store or a single module."""

    model_config = ConfigDict(frozen=False)

    total_modules: int = 0
    modules_by_status: dict[str, int] = Field(default_factory=dict)
    total_tasks: int = 0
    tasks_by_status: dict[str, int] = Field(default_factory=dict)
    overall_progress: int = 0
