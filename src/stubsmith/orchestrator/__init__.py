"""LangGraph orchestrator package for the generation pipeline."""

from stubsmith.orchestrator.exceptions import GraphBuildError, OrchestratorError
from stubsmith.orchestrator.graph import ABORT_PREFIX, build_graph
from stubsmith.orchestrator.state import GenerationState, make_initial_state

__all__ = [
    "ABORT_PREFIX",
    "GenerationState",
    "GraphBuildError",
    "OrchestratorError",
    "build_graph",
    "make_initial_state",
]
