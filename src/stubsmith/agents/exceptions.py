"""Exceptions for agent operations."""


class AgentError(Exception):
    """Base exception for all agent operations."""


class AgentUnavailableError(AgentError):
    """Raised when no AI collaborator is configured. Not retried."""


class AgentCallFailedError(AgentError):
    """Raised when the AI collaborator call fails; wraps the original error."""


class GenerationError(AgentError):
    """Raised when a generation request is invalid (language, module type)."""
