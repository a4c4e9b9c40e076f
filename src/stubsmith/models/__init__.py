"""Data models for stubsmith."""

from stubsmith.models.generation_models import GenerationRequest, GenerationResult
from stubsmith.models.stub_models import (
    DetectedStub,
    GeneratedFile,
    MaterializedFile,
    StubListing,
)
from stubsmith.models.tracking_models import (
    Module,
    ModuleMeta,
    ModuleStatus,
    ModuleTasks,
    ModuleType,
    ProjectSummary,
    StubTaskResult,
    Task,
    TaskStatus,
    TaskStoreDocument,
    TaskTestStatus,
    TaskUpdate,
)

__all__ = [
    "DetectedStub",
    "GeneratedFile",
    "GenerationRequest",
    "GenerationResult",
    "MaterializedFile",
    "Module",
    "ModuleMeta",
    "ModuleStatus",
    "ModuleTasks",
    "ModuleType",
    "ProjectSummary",
    "StubListing",
    "StubTaskResult",
    "Task",
    "TaskStatus",
    "TaskStoreDocument",
    "TaskTestStatus",
    "TaskUpdate",
]
