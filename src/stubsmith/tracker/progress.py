"""Pure helpers for module progress and task lookup.

All functions are stateless and have no I/O.
"""

from stubsmith.models import Module, ModuleStatus, Task, TaskStatus


def compute_progress(implemented_stubs: int, total_stubs: int) -> int:
    """Percentage of implemented stubs, rounded half up; 0 for an empty module."""
    if total_stubs <= 0:
        return 0
    return int((100 * implemented_stubs) / total_stubs + 0.5)


def derive_module_status(implemented_stubs: int, total_stubs: int) -> ModuleStatus:
    """Status implied by the stub counts.

    stubbed while nothing is implemented, complete once every stub of a
    non-empty module is implemented, implementing in between.
    """
    if implemented_stubs <= 0:
        return ModuleStatus.STUBBED
    if total_stubs > 0 and implemented_stubs >= total_stubs:
        return ModuleStatus.COMPLETE
    return ModuleStatus.IMPLEMENTING


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    for task in tasks:
        if task.id == task_id:
            return task
    return None


def find_module(modules: list[Module], module_ref: str) -> Module | None:
    """Find a module by id, falling back to the most recent one with that name."""
    for module in modules:
        if module.id == module_ref:
            return module
    for module in reversed(modules):
        if module.name == module_ref:
            return module
    return None


def tasks_for_module(tasks: list[Task], module_id: str) -> list[Task]:
    return [task for task in tasks if task.module_id == module_id]


def count_by_status(tasks: list[Task]) -> dict[str, int]:
    """Count tasks per status, with every status present."""
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        counts[task.status.value] += 1
    return counts
