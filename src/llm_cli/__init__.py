"""
llm-cli - dispatch prompts to locally installed LLM command-line tools.

Resolves a model alias to a target executable (claude, gemini, llm, ...)
and runs it as a child process, streaming its output as it arrives.
"""

__version__ = "0.1.0"

from llm_cli.dispatch import (
    AliasResolver,
    DispatchRequest,
    Dispatcher,
    WorkingDirectoryProvider,
    build_arguments,
)
from llm_cli.exceptions import (
    CommandFailedError,
    ConfigError,
    LaunchError,
    LLMCliError,
    PromptError,
    WorkingDirectoryError,
)
from llm_cli.runner import LaunchResult, LaunchSpec, ProcessLauncher, launch
from llm_cli.settings import AppSettings, ModelEntry, ModelsConfig, Options

__all__ = [
    # Version
    "__version__",
    # Settings
    "AppSettings",
    "ModelEntry",
    "ModelsConfig",
    "Options",
    # Dispatch
    "AliasResolver",
    "DispatchRequest",
    "Dispatcher",
    "WorkingDirectoryProvider",
    "build_arguments",
    # Runner
    "LaunchResult",
    "LaunchSpec",
    "ProcessLauncher",
    "launch",
    # Errors
    "LLMCliError",
    "ConfigError",
    "PromptError",
    "WorkingDirectoryError",
    "LaunchError",
    "CommandFailedError",
]
