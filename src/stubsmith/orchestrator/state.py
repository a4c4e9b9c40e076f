"""State definition for the LangGraph generation pipeline."""

import operator
from typing import Annotated, TypedDict

from stubsmith.models import GenerationRequest, GenerationResult, StubTaskResult


class GenerationState(TypedDict):
    """State for the generate -> track pipeline.

    errors accumulates across nodes; all other fields are overwritten.
    """

    # Input
    request: GenerationRequest
    track_tasks: bool

    # Generation
    generation: GenerationResult | None

    # Tracking
    tracking: StubTaskResult | None

    # Failure reporting
    failed_stage: str | None
    errors: Annotated[list[str], operator.add]


def make_initial_state(
    request: GenerationRequest,
    track_tasks: bool = True,
) -> GenerationState:
    """Create the initial state for one generation run.

    Args:
        request: The module to generate.
        track_tasks: Whether to register the module and its stub tasks.

    Returns:
        GenerationState with all fields initialised to defaults.
    """
    return {
        "request": request,
        "track_tasks": track_tasks,
        "generation": None,
        "tracking": None,
        "failed_stage": None,
        "errors": [],
    }
