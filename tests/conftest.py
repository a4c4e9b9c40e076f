from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from stubsmith.models import DetectedStub, MaterializedFile, ModuleMeta, ModuleType
from stubsmith.tracker import ModuleTaskTracker, TaskStore


RUST_RESPONSE = """=== FILE: mod.rs ===
```rust
pub mod handlers;

pub fn connect() {
    unimplemented!("connect")
}

pub fn disconnect() {
    unimplemented!("disconnect")
}
```
