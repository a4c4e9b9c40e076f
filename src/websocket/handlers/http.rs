// TODO: Implement handle_request
pub fn handle_request() {}
"""


@pytest.fixture(autouse=True)
def _no_llm_keys(monkeypatch):
    """Keep real credentials from leaking into tests."""
    for name in (
        "ANTHROPIC_API_KEY",
        "CLAUDE_CODE_OAUTH_TOKEN",
        "OPENAI_API_KEY",
        "STUBSMITH_TASKS_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def rust_response():
    return RUST_RESPONSE


@pytest.fixture
def store(tmp_path):
    return TaskStore(tmp_path / ".stubsmith-tasks.json")


@pytest.fixture
def tracker(store):
    return ModuleTaskTracker(store)


def _make_file(path: str, *names: str) -> MaterializedFile:
    return MaterializedFile(
        path=path,
        name=path.rsplit("/", 1)[-1],
        relative_path=path.rsplit("/", 1)[-1],
        stubs=[DetectedStub(name=name, line=index + 1) for index, name in enumerate(names)],
    )


@pytest.fixture
def make_file():
    """Build a MaterializedFile whose stubs sit on consecutive lines."""
    return _make_file


@pytest.fixture
def websocket_files():
    """Two files with three stubs between them."""
    return [
        _make_file("/work/src/websocket/mod.rs", "connect", "disconnect"),
        _make_file("/work/src/websocket/handlers/http.rs", "handle_request"),
    ]


@pytest.fixture
def websocket_meta():
    return ModuleMeta(name="websocket", type=ModuleType.SERVICE, language="rust")


def anthropic_text_response(text: str):
    """Shape of an Anthropic messages.create response with one text block."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


@pytest.fixture
def mock_anthropic_client(rust_response):
    client = MagicMock()
    client.messages.create.return_value = anthropic_text_response(rust_response)
    return client
