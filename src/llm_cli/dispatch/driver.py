"""
Dispatch driver.

Turns one parsed command line into one child process run: resolve the
alias, assemble the prompt, build the executable's arguments, pick the
working directory and launch.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from llm_cli.dispatch.conventions import build_arguments
from llm_cli.dispatch.resolver import AliasResolver
from llm_cli.dispatch.workdir import WorkingDirectoryProvider
from llm_cli.exceptions import PromptError
from llm_cli.runner.launcher import LaunchResult, LaunchSpec
from llm_cli.settings.paths import AppSettings

logger = logging.getLogger(__name__)

Launcher = Callable[[LaunchSpec], Awaitable[LaunchResult]]


@dataclass
class DispatchRequest:
    """
    Everything the command line supplied for one invocation.

    Attributes:
        model: Alias from -m/--model
        prompt: Text from -p/--prompt
        system: System prompt from -s/--system
        force_sessions: Run in the sessions directory regardless of options
        args: Positional arguments, in order
        stdin_text: Piped standard input, if any
    """

    model: Optional[str] = None
    prompt: Optional[str] = None
    system: Optional[str] = None
    force_sessions: bool = False
    args: list[str] = field(default_factory=list)
    stdin_text: Optional[str] = None

    @property
    def has_prompt_source(self) -> bool:
        return bool(self.args or self.prompt or (self.stdin_text and self.stdin_text.strip()))


def split_positionals(
    request: DispatchRequest,
    is_alias: Callable[[str], bool],
) -> tuple[Optional[str], str]:
    """
    Separate an optional leading model alias from the prompt text.

    The first positional is taken as the alias only when no -m was given,
    it names a configured alias, and some other prompt text exists.
    Remaining positionals are joined with spaces after any -p text.

    Returns:
        (alias or None, prompt text from -p and positionals)
    """
    alias = request.model or None
    args = list(request.args)

    if alias is None and args and is_alias(args[0]) and (len(args) > 1 or request.prompt):
        alias = args.pop(0)

    parts = [p for p in (request.prompt, " ".join(args)) if p]
    return alias, " ".join(parts)


def assemble_prompt(text: str, stdin_text: Optional[str]) -> str:
    """Append piped input to the prompt, separated by a blank line."""
    parts = [p for p in (text, stdin_text) if p and p.strip()]
    return "\n\n".join(parts)


class Dispatcher:
    """
    Runs one prompt through the resolved target executable.

    Usage:
        dispatcher = Dispatcher.from_settings(AppSettings(), launcher=launch)
        result = await dispatcher.dispatch(DispatchRequest(args=["opus", "hi"]))
    """

    def __init__(
        self,
        resolver: AliasResolver,
        workdir: WorkingDirectoryProvider,
        launcher: Launcher,
    ):
        self.resolver = resolver
        self.workdir = workdir
        self.launcher = launcher

    @classmethod
    def from_settings(cls, settings: AppSettings, launcher: Launcher) -> "Dispatcher":
        return cls(
            resolver=AliasResolver.from_file(settings.models_file),
            workdir=WorkingDirectoryProvider(settings),
            launcher=launcher,
        )

    def build_spec(self, request: DispatchRequest) -> LaunchSpec:
        """
        Resolve ``request`` into a LaunchSpec without running anything.

        Raises:
            PromptError: If no prompt text remains
            WorkingDirectoryError: If the working directory is unusable
        """
        alias, text = split_positionals(request, self.resolver.is_alias)
        prompt = assemble_prompt(text, request.stdin_text)
        if not prompt:
            raise PromptError("no prompt provided")

        entry = self.resolver.resolve(alias)
        arguments = build_arguments(entry.cli, entry.model_id, prompt, request.system)
        cwd = self.workdir.working_directory(request.force_sessions)

        return LaunchSpec(
            executable=entry.cli,
            arguments=tuple(arguments),
            working_directory=cwd,
        )

    async def dispatch(self, request: DispatchRequest) -> LaunchResult:
        """
        Launch the target executable for ``request``.

        Raises:
            PromptError, WorkingDirectoryError, LaunchError, CommandFailedError
        """
        spec = self.build_spec(request)
        logger.info(f"Dispatching to {spec.executable} in {spec.working_directory}")
        return await self.launcher(spec)
