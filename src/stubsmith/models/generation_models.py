"""Models describing a stub-generation request and its result."""

from pydantic import BaseModel, ConfigDict, Field

from stubsmith.models.stub_models import MaterializedFile
from stubsmith.models.tracking_models import ModuleType


class GenerationRequest(BaseModel):
    """What to ask the AI collaborator for."""

    model_config = ConfigDict(frozen=False)

    module_name: str
    language: str
    type: ModuleType = ModuleType.SERVICE
    base_path: str = "."
    requirements: str | None = None
    style: str | None = None  # None selects the language's default style
    with_tests: bool = True
    branch: str | None = None


class GenerationResult(BaseModel):
    """Files materialized by one generation run."""

    model_config = ConfigDict(frozen=False)

    module_name: str
    language: str
    type: ModuleType
    style: str
    directory: str
    files: list[MaterializedFile] = Field(default_factory=list)

    @property
    def total_stubs(self) -> int:
        return sum(file.stub_count for file in self.files)
