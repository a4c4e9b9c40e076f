"""Remove duplicated module/src prefixes from AI-supplied paths."""

SRC_PREFIX = "src/"


def normalize_path(relative_path: str, module_basename: str) -> str:
    """Strip a redundant ``src/<module>/`` or ``src/`` prefix.

    The first matching rule wins and is applied once. This is a string
    prefix fix only: ``..`` segments and symlinks are not resolved.

    Args:
        relative_path: Path as supplied by the AI collaborator.
        module_basename: Name of the module directory being generated into.

    Returns:
        The corrected relative path.
    """
    module_prefix = f"{SRC_PREFIX}{module_basename}/"
    if relative_path.startswith(module_prefix):
        return relative_path[len(module_prefix):]
    if relative_path.startswith(SRC_PREFIX):
        return relative_path[len(SRC_PREFIX):]
    return relative_path
