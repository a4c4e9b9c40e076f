"""Models for generated files and detected stubs."""

from pydantic import BaseModel, ConfigDict, Field


class DetectedStub(BaseModel):
    """A single "not yet implemented" marker found in a file."""

    model_config = ConfigDict(frozen=False)

    name: str  # Unit name captured from the marker
    line: int  # 1-based line of the marker
    implemented: bool = False  # Never flipped by re-scanning


class GeneratedFile(BaseModel):
    """One file parsed out of an AI response, before it is written."""

    model_config = ConfigDict(frozen=False)

    relative_path: str  # Path as the AI supplied it
    content: str


class MaterializedFile(BaseModel):
    """A file written to disk together with the stubs found in it."""

    model_config = ConfigDict(frozen=False)

    path: str  # Absolute path written
    name: str  # Basename of the written file
    relative_path: str  # Normalized path relative to the module directory
    stubs: list[DetectedStub] = Field(default_factory=list)

    @property
    def stub_count(self) -> int:
        return len(self.stubs)


class StubListing(BaseModel):
    """Stubs found in one file during a directory scan."""

    model_config = ConfigDict(frozen=False)

    file: str
    stubs: list[DetectedStub] = Field(default_factory=list)
