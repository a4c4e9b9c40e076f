"""Exceptions for response materialization."""


class MaterializationError(Exception):
    """Base exception for turning an AI response into files."""


class NoFilesProducedError(MaterializationError):
    """Raised when a response yields no files to write."""
