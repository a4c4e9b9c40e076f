"""Tests for path prefix normalization."""

import pytest

from stubsmith.utils.path_normalizer import normalize_path


@pytest.mark.parametrize(
    ("path", "module", "expected"),
    [
        ("src/websocket/src/websocket/mod.rs", "websocket", "src/websocket/mod.rs"),
        ("src/mod.rs", "anything", "mod.rs"),
        ("src/websocket/mod.rs", "websocket", "mod.rs"),
        ("src/models/user.rs", "websocket", "models/user.rs"),
        ("models/user.rs", "websocket", "models/user.rs"),
        ("mod.rs", "websocket", "mod.rs"),
    ],
)
def test_normalize_path(path, module, expected):
    assert normalize_path(path, module) == expected


def test_only_first_rule_fires():
    # After dropping src/<module>/ the remaining src/ prefix is kept
    assert normalize_path("src/auth/src/lib.rs", "auth") == "src/lib.rs"


def test_dotdot_is_passed_through():
    assert normalize_path("../outside.rs", "auth") == "../outside.rs"
    assert normalize_path("src/../x.rs", "auth") == "../x.rs"


def test_prefix_must_match_whole_segment():
    assert normalize_path("srcs/mod.rs", "auth") == "srcs/mod.rs"
    assert normalize_path("src/authz/mod.rs", "auth") == "authz/mod.rs"
