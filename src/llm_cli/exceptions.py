"""
Dispatcher exceptions.

Every failure that should end an invocation derives from LLMCliError so
the command line layer can translate it into an exit code in one place.
"""

from typing import Any, Optional


class LLMCliError(Exception):
    """Base exception for all llm-cli errors."""

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(LLMCliError):
    """Raised when a persisted config file cannot be read, parsed or written."""

    def __init__(self, message: str, *, path: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.path = path


class PromptError(LLMCliError):
    """Raised when no prompt text is left after combining all sources."""

    pass


class WorkingDirectoryError(LLMCliError):
    """Raised when the child's working directory cannot be determined."""

    pass


class LaunchError(LLMCliError):
    """Raised when the target executable cannot be spawned."""

    def __init__(self, executable: str, reason: str):
        self.executable = executable
        self.reason = reason
        super().__init__(
            f"failed to start {executable}: {reason} (is {executable} installed?)"
        )


class CommandFailedError(LLMCliError):
    """Raised when the child process exits with a non-zero status."""

    def __init__(self, executable: str, returncode: int):
        self.executable = executable
        self.returncode = returncode
        if returncode < 0:
            status = f"terminated by signal {-returncode}"
        else:
            status = f"exit status {returncode}"
        super().__init__(f"command failed: {executable}: {status}")
