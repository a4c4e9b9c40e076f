"""Agent components for stubsmith."""

from stubsmith.agents.exceptions import (
    AgentCallFailedError,
    AgentError,
    AgentUnavailableError,
    GenerationError,
)
from stubsmith.agents.stub_generator import StubGenerator

__all__ = [
    "AgentCallFailedError",
    "AgentError",
    "AgentUnavailableError",
    "GenerationError",
    "StubGenerator",
]
