"""
llm-cli command line.

Forwards a prompt to an installed model CLI (claude, gemini, llm, ...)
chosen through the alias table in ~/.llm-cli/models.json.
"""

import asyncio
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from llm_cli import __version__
from llm_cli.dispatch import AliasResolver, DispatchRequest, Dispatcher
from llm_cli.exceptions import ConfigError, LLMCliError
from llm_cli.runner import launch
from llm_cli.settings import AppSettings, ModelsConfig, Options

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

DEFAULT_COMMAND = "prompt"


def setup_logging(verbose: bool = False) -> None:
    """Setup rich logging on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def fail(error: LLMCliError) -> None:
    """Report ``error`` on stderr and exit 1."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(error))}", highlight=False)
    sys.exit(1)


def read_piped_stdin() -> Optional[str]:
    """Return piped standard input, or None when stdin is a terminal."""
    if sys.stdin is None or sys.stdin.isatty():
        return None
    return sys.stdin.read()


class DefaultCommandGroup(click.Group):
    """
    Group that routes unknown first tokens to a default command.

    ``llm-cli opus "hi"`` runs ``llm-cli prompt opus "hi"`` and
    ``llm-cli -m opus "hi"`` runs ``llm-cli prompt -m opus "hi"``.
    """

    def __init__(self, *args, default_command: str = DEFAULT_COMMAND, **kwargs):
        super().__init__(*args, **kwargs)
        self.default_command = default_command
        # Leave the default command's options for it to parse.
        self.ignore_unknown_options = True

    def resolve_command(self, ctx: click.Context, args: list[str]):
        if args and args[0] in self.commands:
            return super().resolve_command(ctx, args)
        return self.default_command, self.commands[self.default_command], args


@click.group(cls=DefaultCommandGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="llm-cli")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """
    A wrapper around the claude and gemini CLIs.

    Sends a prompt to the model behind an alias. Anything that is not a
    subcommand is treated as a prompt.

    Examples:

        # Default model
        llm-cli "what is the capital of france?"

        # Specific alias
        llm-cli opus "explain go interfaces"

        # Flags
        llm-cli -m opus -s "You are a Go expert" "how do I use interfaces?"

        # Piped input
        git diff | llm-cli sonnet "review this"

    Configuration lives in ~/.llm-cli (override with LLM_CLI_HOME):
    models.json holds the aliases, options.json holds
    run_on_current_directory (false = run in ~/.llm-cli/sessions).
    """
    setup_logging(verbose)
    ctx.obj = AppSettings()
    if ctx.invoked_subcommand is None:
        ctx.invoke(prompt)


@cli.command(name=DEFAULT_COMMAND)
@click.argument("args", nargs=-1)
@click.option(
    "--model",
    "-m",
    default=None,
    help="Model alias to use (e.g. haiku, opus, sonnet, gemini)",
)
@click.option(
    "--prompt",
    "-p",
    "prompt_text",
    default=None,
    help="Prompt text",
)
@click.option(
    "--system",
    "-s",
    default=None,
    help="System prompt for context",
)
@click.option(
    "--run-on-temp-directory",
    "-t",
    "force_sessions",
    is_flag=True,
    help="Run in the sessions directory (overrides options.json)",
)
@click.pass_context
def prompt(
    ctx: click.Context,
    args: tuple[str, ...],
    model: Optional[str],
    prompt_text: Optional[str],
    system: Optional[str],
    force_sessions: bool,
):
    """
    Send a prompt to a model: [MODEL-ALIAS] PROMPT.

    The first argument is taken as the model alias when it names one and
    more text follows. Piped stdin is appended to the prompt.
    """
    settings: AppSettings = ctx.obj
    request = DispatchRequest(
        model=model,
        prompt=prompt_text,
        system=system,
        force_sessions=force_sessions,
        args=list(args),
        stdin_text=read_piped_stdin(),
    )

    if not request.has_prompt_source:
        click.echo(ctx.parent.get_help() if ctx.parent else ctx.get_help())
        return

    dispatcher = Dispatcher.from_settings(settings, launcher=launch)
    try:
        asyncio.run(dispatcher.dispatch(request))
    except LLMCliError as e:
        fail(e)


@cli.command()
@click.pass_obj
def models(settings: AppSettings):
    """List configured model aliases."""
    resolver = AliasResolver.from_file(settings.models_file)
    default = resolver.default_alias

    console.print("[bold]Available models:[/bold]")
    for cli_name, entries in resolver.table.grouped_by_cli().items():
        console.print()
        console.print(f"[bold]{cli_name}[/bold]")
        for alias, entry in entries:
            mark = " [green](default)[/green]" if alias == default else ""
            console.print(f"  {alias}{mark} -> {entry.model_id}", highlight=False)

    console.print()
    console.print(f"Config file: {settings.models_file}", highlight=False)


@cli.command(name="default")
@click.argument("alias")
@click.pass_obj
def set_default(settings: AppSettings, alias: str):
    """Set the default model alias."""
    try:
        table = ModelsConfig.load_or_create(settings.models_file)
        if alias not in table:
            raise ConfigError(f"unknown model: {alias}")
        table.default_model = alias
        table.save(settings.models_file)
    except LLMCliError as e:
        fail(e)
    console.print(f"Default model set to [green]{alias}[/green]")


@cli.command()
@click.option(
    "--current-directory/--sessions-directory",
    "run_on_current_directory",
    default=None,
    help="Run target CLIs in the current directory or in the sessions directory",
)
@click.pass_obj
def options(settings: AppSettings, run_on_current_directory: Optional[bool]):
    """Show or change persisted options."""
    try:
        opts = Options.load_or_create(settings.options_file)
        if run_on_current_directory is not None:
            opts.run_on_current_directory = run_on_current_directory
            opts.save(settings.options_file)
    except LLMCliError as e:
        fail(e)

    where = "current directory" if opts.run_on_current_directory else str(settings.sessions_dir)
    console.print(f"run_on_current_directory: {str(opts.run_on_current_directory).lower()}")
    console.print(f"Target CLIs run in: {where}", highlight=False)
    console.print(f"Options file: {settings.options_file}", highlight=False)


@cli.command()
def version():
    """Print version information."""
    click.echo(f"llm-cli version {__version__}")


if __name__ == "__main__":
    cli()
