"""stubsmith: LLM stub generation with resumable implementation tracking."""
