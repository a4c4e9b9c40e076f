"""CLI entry point for stubsmith."""
import argparse
import json
import logging
import os
import sys
import traceback
from pathlib import Path

from dotenv import load_dotenv

from stubsmith.agents.exceptions import AgentError
from stubsmith.models import GenerationRequest, ModuleType, StubListing, TaskStatus
from stubsmith.orchestrator.exceptions import OrchestratorError
from stubsmith.rules.marker_engine import detect_stubs, list_stubs
from stubsmith.tracker import DEFAULT_TASKS_FILENAME, ModuleTaskTracker, TaskStore, TrackerError
from stubsmith.utils.exceptions import MaterializationError

load_dotenv()

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_INPUT = 1
EXIT_AGENT_ERROR = 2
EXIT_TRACKER_ERROR = 3
EXIT_PIPELINE_ABORT = 4
EXIT_UNEXPECTED = 5
EXIT_KEYBOARD_INTERRUPT = 130

# Defaults
DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_PROJECT_ROOT = "."
TASKS_FILE_ENV = "STUBSMITH_TASKS_FILE"

# Abort detection prefix, must match abort_node output in graph.py
ABORT_PREFIX = "ABORT:"


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--project-root",
        type=str,
        default=DEFAULT_PROJECT_ROOT,
        help=f"Project root holding the task store (default: {DEFAULT_PROJECT_ROOT})",
    )
    common.add_argument(
        "--tasks-file",
        type=str,
        default="",
        help=(
            f"Task store path (default: ${TASKS_FILE_ENV} or "
            f"<project-root>/{DEFAULT_TASKS_FILENAME})"
        ),
    )
    common.add_argument("--verbose", action="store_true", help="Enable verbose output")
    common.add_argument(
        "--output-json", action="store_true", help="Output results as JSON"
    )

    parser = argparse.ArgumentParser(
        prog="stubsmith",
        description="Generate stubbed modules with an LLM and track their implementation",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser(
        "generate", parents=[common], help="Generate a stubbed module"
    )
    generate.add_argument("module_name", type=str, help="Name of the module to generate")
    generate.add_argument("language", type=str, help="Target language (e.g. rust, python, go)")
    generate.add_argument(
        "--type",
        type=str,
        default=ModuleType.SERVICE.value,
        choices=[module_type.value for module_type in ModuleType],
        help="Module type (default: service)",
    )
    generate.add_argument(
        "--base-path",
        type=str,
        default="",
        help="Directory the module is generated under (default: project root)",
    )
    generate.add_argument("--requirements", type=str, default="", help="Additional requirements")
    generate.add_argument("--style", type=str, default="", help="Coding style name")
    generate.add_argument("--no-tests", action="store_true", help="Do not ask for test files")
    generate.add_argument("--no-tasks", action="store_true", help="Do not create tracking tasks")
    generate.add_argument("--branch", type=str, default="", help="Branch to record on the module")
    generate.add_argument(
        "--model",
        type=str,
        default=DEFAULT_MODEL,
        help=f"Model ID to use (default: {DEFAULT_MODEL})",
    )
    generate.add_argument(
        "--llm-provider",
        type=str,
        default="auto",
        choices=("auto", "anthropic", "openai"),
        help="LLM provider: auto (default), anthropic, or openai",
    )
    generate.add_argument(
        "--llm-fallback-provider",
        type=str,
        default="",
        choices=("", "anthropic", "openai"),
        help="Optional fallback provider when the primary provider fails",
    )
    generate.add_argument(
        "--allow-llm-fallback",
        action="store_true",
        help="Allow falling back to the alternate provider",
    )

    stubs = subparsers.add_parser(
        "stubs", parents=[common], help="Detect stubs in a file or directory"
    )
    stubs.add_argument("path", type=str, help="File or directory to scan")

    tasks = subparsers.add_parser("tasks", parents=[common], help="List tracked tasks")
    tasks.add_argument("--module", type=str, default="", help="Module name or id")

    subparsers.add_parser("next", parents=[common], help="Show the next task to implement")

    start = subparsers.add_parser("start", parents=[common], help="Start a task")
    start.add_argument("task_id", type=str)

    done = subparsers.add_parser("done", parents=[common], help="Mark a task done")
    done.add_argument("task_id", type=str)
    done.add_argument(
        "--tests-completed", action="store_true", help="Also mark the task's tests completed"
    )

    summary = subparsers.add_parser("summary", parents=[common], help="Show progress summary")
    summary.add_argument("--module-id", type=str, default="", help="Restrict to one module")

    subparsers.add_parser("export", parents=[common], help="Export tasks as a markdown checklist")

    return parser


def resolve_tasks_file(args: argparse.Namespace) -> Path:
    """Pick the task store path: --tasks-file, then env var, then project root."""
    if args.tasks_file:
        return Path(args.tasks_file).expanduser()
    env_path = os.getenv(TASKS_FILE_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path(args.project_root).expanduser() / DEFAULT_TASKS_FILENAME


def create_tracker(args: argparse.Namespace) -> ModuleTaskTracker:
    return ModuleTaskTracker(TaskStore(resolve_tasks_file(args)))


def create_generator(args: argparse.Namespace):
    """Create the StubGenerator from CLI arguments.

    The import is deferred to avoid loading anthropic/openai for commands
    that only touch the task store.
    """
    from stubsmith.agents.stub_generator import StubGenerator

    return StubGenerator(
        api_key=os.getenv("ANTHROPIC_API_KEY"),
        model=args.model,
        llm_provider=args.llm_provider,
        llm_fallback_provider=args.llm_fallback_provider or None,
        allow_fallback=args.allow_llm_fallback,
    )


def to_jsonable(value):
    """Convert pydantic models (and lists/dicts of them) to JSON-ready data."""
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    return value


def format_result_json(result) -> str:
    return json.dumps(to_jsonable(result), indent=2, default=str)


def determine_exit_code(result: dict) -> int:
    """Determine the exit code from a pipeline result dict."""
    errors = result.get("errors", [])
    if not errors:
        return EXIT_SUCCESS
    for err in errors:
        if str(err).startswith(ABORT_PREFIX):
            return EXIT_PIPELINE_ABORT
    return EXIT_TRACKER_ERROR


def print_generation_human(result: dict) -> None:
    """Print a pipeline result in human-readable format."""
    print(f"\n{'='*60}")
    print("Stub Generation Results")
    print(f"{'='*60}")

    generation = result.get("generation")
    if generation is not None:
        print(f"\nModule: {generation.module_name}")
        print(f"Language: {generation.language}")
        print(f"Type: {generation.type.value}")
        print(f"Directory: {generation.directory}")
        print(f"Files: {len(generation.files)}")
        for file in generation.files:
            print(f"  {file.relative_path}: {file.stub_count} stubs")
        print(f"Stubs: {generation.total_stubs}")

    tracking = result.get("tracking")
    if tracking is not None:
        print(f"\nTracking module: {tracking.module_id}")
        print(f"Tasks created: {tracking.total_tasks}")

    errors = result.get("errors", [])
    if errors:
        print(f"\nErrors ({len(errors)}):")
        for err in errors:
            print(f"  - {err}")

    print(f"\n{'='*60}")


def _print_tasks(tasks) -> None:
    if not tasks:
        print("No tasks found.")
        return
    for task in tasks:
        mark = "x" if task.status == TaskStatus.DONE else " "
        location = f"{task.file}:{task.line}" if task.line else task.file
        print(f"[{mark}] {task.id}  {task.function}  ({location})")


def run_generate(args: argparse.Namespace) -> int:
    from stubsmith.orchestrator.graph import build_graph
    from stubsmith.orchestrator.state import make_initial_state

    request = GenerationRequest(
        module_name=args.module_name,
        language=args.language,
        type=args.type,
        base_path=args.base_path or args.project_root,
        requirements=args.requirements or None,
        style=args.style or None,
        with_tests=not args.no_tests,
        branch=args.branch or None,
    )
    generator = create_generator(args)
    graph = build_graph(generator=generator, tracker=create_tracker(args))
    result = graph.invoke(make_initial_state(request, track_tasks=not args.no_tasks))

    if args.output_json:
        print(format_result_json(result))
    else:
        print_generation_human(result)
    return determine_exit_code(result)


def run_stubs(args: argparse.Namespace) -> int:
    target = Path(args.path)
    if target.is_file():
        listings = [StubListing(file=str(target), stubs=detect_stubs(target))]
    elif target.is_dir():
        listings = list_stubs(target)
    else:
        print(f"Error: '{args.path}' does not exist.", file=sys.stderr)
        return EXIT_INVALID_INPUT

    if args.output_json:
        print(format_result_json(listings))
        return EXIT_SUCCESS
    for listing in listings:
        print(f"{listing.file} ({len(listing.stubs)} stubs)")
        for stub in listing.stubs:
            print(f"  line {stub.line}: {stub.name}")
    return EXIT_SUCCESS


def run_tasks(args: argparse.Namespace) -> int:
    tracker = create_tracker(args)
    if args.module:
        module_tasks = tracker.get_module_tasks(args.module)
        if args.output_json:
            print(format_result_json(module_tasks))
            return EXIT_SUCCESS
        module = module_tasks.module
        print(f"{module.name} [{module.status.value}] {module.progress}%")
        _print_tasks(module_tasks.tasks)
        return EXIT_SUCCESS

    pending = tracker.get_pending_tasks()
    if args.output_json:
        print(format_result_json(pending))
    else:
        _print_tasks(pending)
    return EXIT_SUCCESS


def run_next(args: argparse.Namespace) -> int:
    task = create_tracker(args).get_next_task()
    if args.output_json:
        print(format_result_json(task))
    elif task is None:
        print("Nothing left to implement.")
    else:
        _print_tasks([task])
    return EXIT_SUCCESS


def run_start(args: argparse.Namespace) -> int:
    update = create_tracker(args).start_task(args.task_id)
    if args.output_json:
        print(format_result_json(update))
    else:
        print(f"Started {update.task.id} ({update.task.function})")
    return EXIT_SUCCESS


def run_done(args: argparse.Namespace) -> int:
    update = create_tracker(args).mark_done(
        args.task_id, tests_completed=args.tests_completed
    )
    if args.output_json:
        print(format_result_json(update))
        return EXIT_SUCCESS
    print(f"Done {update.task.id} ({update.task.function})")
    if update.module is not None:
        module = update.module
        print(
            f"{module.name}: {module.implemented_stubs}/{module.total_stubs} "
            f"({module.progress}%) {module.status.value}"
        )
    return EXIT_SUCCESS


def run_summary(args: argparse.Namespace) -> int:
    summary = create_tracker(args).summary(args.module_id or None)
    if args.output_json:
        print(format_result_json(summary))
        return EXIT_SUCCESS
    print(f"Modules: {summary.total_modules}")
    for status, count in summary.modules_by_status.items():
        print(f"  {status}: {count}")
    print(f"Tasks: {summary.total_tasks}")
    for status, count in summary.tasks_by_status.items():
        print(f"  {status}: {count}")
    print(f"Overall progress: {summary.overall_progress}%")
    return EXIT_SUCCESS


def run_export(args: argparse.Namespace) -> int:
    print(create_tracker(args).export_markdown())
    return EXIT_SUCCESS


_COMMANDS = {
    "generate": run_generate,
    "stubs": run_stubs,
    "tasks": run_tasks,
    "next": run_next,
    "start": run_start,
    "done": run_done,
    "summary": run_summary,
    "export": run_export,
}


def _handle_error(label: str, exc: BaseException, verbose: bool, exit_code: int) -> int:
    """Print error message to stderr and return the exit code."""
    print(f"{label}: {exc}", file=sys.stderr)
    if verbose:
        traceback.print_exc(file=sys.stderr)
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code integer.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return _COMMANDS[args.command](args)

    except (AgentError, MaterializationError) as exc:
        return _handle_error("Agent error", exc, args.verbose, EXIT_AGENT_ERROR)

    except TrackerError as exc:
        return _handle_error("Tracker error", exc, args.verbose, EXIT_TRACKER_ERROR)

    except OrchestratorError as exc:
        return _handle_error("Orchestrator error", exc, args.verbose, EXIT_PIPELINE_ABORT)

    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_KEYBOARD_INTERRUPT

    except Exception as exc:
        return _handle_error("Unexpected error", exc, args.verbose, EXIT_UNEXPECTED)


if __name__ == "__main__":
    sys.exit(main())
