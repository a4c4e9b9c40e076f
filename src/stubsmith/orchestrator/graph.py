"""LangGraph pipeline wiring stub generation to task tracking.

Tracking only runs after every file was materialized, so a failed run
leaves no module or task records behind.
"""

import logging
from typing import Callable

from langgraph.graph import END, START, StateGraph

from stubsmith.agents.exceptions import (
    AgentCallFailedError,
    AgentUnavailableError,
    GenerationError,
)
from stubsmith.agents.stub_generator import StubGenerator
from stubsmith.models import ModuleMeta
from stubsmith.orchestrator.exceptions import GraphBuildError
from stubsmith.orchestrator.state import GenerationState
from stubsmith.tracker.module_tracker import ModuleTaskTracker
from stubsmith.utils.exceptions import NoFilesProducedError

logger = logging.getLogger(__name__)

ABORT_PREFIX = "ABORT:"

# Pipeline stages reported on failure
STAGE_REQUEST = "request"
STAGE_AI_CALL = "ai_call"
STAGE_PARSE = "parse"
STAGE_WRITE = "write"
STAGE_GENERATE = "generate"
STAGE_TRACK = "track"


def classify_generation_failure(exc: Exception) -> str:
    """Map a generate_node exception to the stage that failed."""
    if isinstance(exc, (AgentUnavailableError, AgentCallFailedError)):
        return STAGE_AI_CALL
    if isinstance(exc, NoFilesProducedError):
        return STAGE_PARSE
    if isinstance(exc, OSError):
        return STAGE_WRITE
    if isinstance(exc, GenerationError):
        return STAGE_REQUEST
    return STAGE_GENERATE


def make_generate_node(generator: StubGenerator) -> Callable[[GenerationState], dict]:
    """Factory: returns a node closure that generates and writes the module.

    On error: returns {"errors": [str], "failed_stage": stage}
    """

    def generate_node(state: GenerationState) -> dict:
        try:
            result = generator.generate_module(state["request"])
            return {"generation": result}
        except Exception as exc:
            logger.debug("generate_node failed", exc_info=True)
            return {
                "errors": [f"generate_node error: {exc}"],
                "failed_stage": classify_generation_failure(exc),
            }

    return generate_node


def make_track_node(tracker: ModuleTaskTracker) -> Callable[[GenerationState], dict]:
    """Factory: returns a node closure that registers the module and its tasks.

    On error: returns {"errors": [str], "failed_stage": "track"}
    """

    def track_node(state: GenerationState) -> dict:
        generation = state["generation"]
        request = state["request"]
        try:
            meta = ModuleMeta(
                name=generation.module_name,
                type=generation.type,
                language=generation.language,
                style=generation.style,
                branch=request.branch,
                with_tests=request.with_tests,
            )
            return {"tracking": tracker.create_stub_tasks(meta, generation.files)}
        except Exception as exc:
            return {
                "errors": [f"track_node error: {exc}"],
                "failed_stage": STAGE_TRACK,
            }

    return track_node


def abort_node(state: GenerationState) -> dict:
    """Record which stage stopped the run."""
    stage = state["failed_stage"] or "unknown"
    return {"errors": [f"{ABORT_PREFIX} generation failed at stage '{stage}'"]}


def route_after_generate(state: GenerationState) -> str:
    """Router for the post-generate conditional edge: abort, track or done."""
    if state["failed_stage"] is not None or state["generation"] is None:
        return "abort"
    if not state["track_tasks"]:
        return "done"
    return "track"


def route_after_track(state: GenerationState) -> str:
    if state["failed_stage"] is not None:
        return "abort"
    return "done"


def build_graph(generator: StubGenerator, tracker: ModuleTaskTracker):
    """Build and compile the generation StateGraph.

    Edge topology:
      START -> generate_node
      generate_node -> conditional -> {track_node, abort_node, END}
      track_node -> conditional -> {abort_node, END}
      abort_node -> END

    Args:
        generator: StubGenerator used to produce and write the module.
        tracker: ModuleTaskTracker that records the module and its tasks.

    Returns:
        CompiledStateGraph ready to invoke.

    Raises:
        GraphBuildError: If graph construction fails.
    """
    try:
        graph = StateGraph(GenerationState)

        graph.add_node("generate_node", make_generate_node(generator))
        graph.add_node("track_node", make_track_node(tracker))
        graph.add_node("abort_node", abort_node)

        graph.add_edge(START, "generate_node")
        graph.add_conditional_edges(
            "generate_node",
            route_after_generate,
            {
                "track": "track_node",
                "abort": "abort_node",
                "done": END,
            },
        )
        graph.add_conditional_edges(
            "track_node",
            route_after_track,
            {
                "abort": "abort_node",
                "done": END,
            },
        )
        graph.add_edge("abort_node", END)

        return graph.compile()

    except Exception as exc:
        raise GraphBuildError(f"Failed to build generation graph: {exc}") from exc
