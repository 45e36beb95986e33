from __future__ import annotations

from typing import Any, Dict, Mapping


class RulestackError(Exception):
    """Base exception for rulestack."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(RulestackError, ValueError):
    """Raised when a config file, repo manifest or profile selection is invalid."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        RulestackError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigNotFoundError(ConfigError, FileNotFoundError):
    """Raised when a required config file does not exist."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ConfigError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class SourceError(RulestackError):
    """Base exception for content source errors."""


class SourceResolutionError(SourceError, RuntimeError):
    """Raised when a source cannot be resolved to a valid local content repo."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        SourceError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


class CompositionError(RulestackError):
    """Raised when composition cannot start."""


class GenerationError(RulestackError, RuntimeError):
    """Raised when the external generator fails."""

    def __init__(
        self,
        message: str,
        *,
        command: str | None = None,
        returncode: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if command:
            ctx["command"] = command
        if returncode is not None:
            ctx["returncode"] = returncode
        RulestackError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)


class LockError(RulestackError):
    """Raised when the lock file cannot be written or deleted."""


__all__ = [
    "RulestackError",
    "ConfigError",
    "ConfigNotFoundError",
    "SourceError",
    "SourceResolutionError",
    "CompositionError",
    "GenerationError",
    "LockError",
]
