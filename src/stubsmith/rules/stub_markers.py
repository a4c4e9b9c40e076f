"""Per-language registry of stub markers."""

from stubsmith.rules.marker_engine import StubMarker

TODO_COMMENT = StubMarker(
    marker_id="todo-comment",
    family="todo_comment",
    description="// TODO: Implement <name>, # TODO: Implement <name> or /** TODO: Implement <name>",
    pattern=r"(?://|#|/\*\*) TODO: Implement (\w+)",
)

UNIMPLEMENTED_MACRO = StubMarker(
    marker_id="unimplemented-macro",
    family="unimplemented_macro",
    description='Rust unimplemented!("<name>") macro',
    pattern=r'unimplemented!\("(\w+)',
)

NOT_IMPLEMENTED_ERROR = StubMarker(
    marker_id="not-implemented-error",
    family="not_implemented_error",
    description='Python raise NotImplementedError("<name>")',
    pattern=r'raise NotImplementedError\("(\w+)',
)

ALL_STUB_MARKERS: list[StubMarker] = [
    TODO_COMMENT,
    UNIMPLEMENTED_MACRO,
    NOT_IMPLEMENTED_ERROR,
]

STUB_MARKER_REGISTRY: dict[str, list[StubMarker]] = {
    "rust": [TODO_COMMENT, UNIMPLEMENTED_MACRO],
    "python": [TODO_COMMENT, NOT_IMPLEMENTED_ERROR],
    "go": [TODO_COMMENT],
    "typescript": [TODO_COMMENT],
    "javascript": [TODO_COMMENT],
    "java": [TODO_COMMENT],
    "csharp": [TODO_COMMENT],
    "cpp": [TODO_COMMENT],
    "c": [TODO_COMMENT],
}
