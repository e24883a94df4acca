"""Tests for alias resolution, working directories, conventions and the driver."""

import json
import os
from pathlib import Path

import pytest

from llm_cli.dispatch import (
    AliasResolver,
    DispatchRequest,
    Dispatcher,
    WorkingDirectoryProvider,
    assemble_prompt,
    build_arguments,
    split_positionals,
)
from llm_cli.exceptions import PromptError, WorkingDirectoryError
from llm_cli.runner import LaunchResult, LaunchSpec
from llm_cli.settings import (
    FALLBACK_DEFAULT_ALIAS,
    PASSTHROUGH_CLI,
    AppSettings,
    ModelEntry,
    ModelsConfig,
    Options,
)


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary directory."""
    return AppSettings(home=tmp_path / "home")


@pytest.fixture
def table():
    """A small alias table."""
    return ModelsConfig(
        default_model="sonnet",
        models={
            "sonnet": ModelEntry(cli="claude", model_id="claude-sonnet-4-5-20250929"),
            "flash": ModelEntry(cli="gemini", model_id="gemini-2.5-flash"),
        },
    )


class TestAliasResolver:
    """Tests for AliasResolver."""

    def test_known_alias(self, table):
        """Test a known alias returns its entry verbatim."""
        resolver = AliasResolver(table)
        assert resolver.resolve("flash") == table.models["flash"]

    def test_unknown_alias_passes_through(self, table):
        """Test an unknown alias becomes the model id for the generic CLI."""
        resolver = AliasResolver(table)
        entry = resolver.resolve("gpt-4o-mini")
        assert entry.cli == PASSTHROUGH_CLI
        assert entry.model_id == "gpt-4o-mini"

    def test_empty_uses_configured_default(self, table):
        """Test an empty alias resolves the table's default."""
        resolver = AliasResolver(table)
        assert resolver.resolve("") == table.models["sonnet"]
        assert resolver.resolve(None) == table.models["sonnet"]

    def test_empty_default_uses_fallback(self, table):
        """Test an empty default_model falls back to the built-in alias."""
        table.default_model = ""
        resolver = AliasResolver(table)
        assert resolver.default_alias == FALLBACK_DEFAULT_ALIAS
        entry = resolver.resolve("")
        assert entry == ModelsConfig.builtin().get(FALLBACK_DEFAULT_ALIAS)

    def test_dangling_default_uses_fallback(self, table):
        """Test a default_model missing from the table falls back."""
        table.default_model = "gone"
        resolver = AliasResolver(table)
        assert resolver.resolve("").model_id == "claude-haiku-4-5-20251001"

    def test_fallback_prefers_user_entry(self):
        """Test the fallback alias uses the user's entry when present."""
        custom = ModelEntry(cli="claude", model_id="my-haiku")
        resolver = AliasResolver(ModelsConfig(default_model="", models={"haiku": custom}))
        assert resolver.resolve("") == custom

    def test_from_file_creates_table(self, settings):
        """Test loading from a missing file materializes the defaults."""
        resolver = AliasResolver.from_file(settings.models_file)
        assert settings.models_file.exists()
        assert resolver.is_alias("opus")

    def test_from_file_malformed_falls_back(self, settings):
        """Test a malformed file yields the built-in table."""
        settings.home.mkdir(parents=True)
        settings.models_file.write_text("{{{")
        resolver = AliasResolver.from_file(settings.models_file)
        assert resolver.table.models == ModelsConfig.builtin().models
        # The broken file is left for the user to fix.
        assert settings.models_file.read_text() == "{{{"

    def test_from_file_unreadable_falls_back(self, settings):
        """Test a path that cannot be read yields the built-in table."""
        settings.models_file.mkdir(parents=True)
        resolver = AliasResolver.from_file(settings.models_file)
        assert resolver.resolve("").cli == "claude"


class TestWorkingDirectoryProvider:
    """Tests for WorkingDirectoryProvider."""

    def test_default_is_sessions_dir(self, settings):
        """Test the default options select the sessions directory."""
        provider = WorkingDirectoryProvider(settings)
        path = provider.working_directory()
        assert path == settings.sessions_dir
        assert path.is_dir()
        assert settings.options_file.exists()

    def test_current_directory_option(self, settings, tmp_path, monkeypatch):
        """Test run_on_current_directory selects the process cwd."""
        Options(run_on_current_directory=True).save(settings.options_file)
        monkeypatch.chdir(tmp_path)
        provider = WorkingDirectoryProvider(settings)
        assert provider.working_directory() == Path(os.getcwd())
        assert not settings.sessions_dir.exists()

    def test_force_overrides_option(self, settings):
        """Test forcing the sessions directory ignores the option."""
        Options(run_on_current_directory=True).save(settings.options_file)
        provider = WorkingDirectoryProvider(settings)
        assert provider.working_directory(force_sessions=True) == settings.sessions_dir

    def test_unreadable_options_use_sessions(self, settings):
        """Test malformed options fall back to the sessions directory."""
        settings.home.mkdir(parents=True)
        settings.options_file.write_text("nope")
        provider = WorkingDirectoryProvider(settings)
        assert provider.working_directory() == settings.sessions_dir

    def test_idempotent(self, settings):
        """Test an existing sessions directory is not an error."""
        provider = WorkingDirectoryProvider(settings)
        first = provider.working_directory(force_sessions=True)
        second = provider.working_directory(force_sessions=True)
        assert first == second

    def test_cannot_create(self, settings):
        """Test a file in the way raises WorkingDirectoryError."""
        settings.home.mkdir(parents=True)
        settings.sessions_dir.write_text("not a directory")
        provider = WorkingDirectoryProvider(settings)
        with pytest.raises(WorkingDirectoryError):
            provider.working_directory(force_sessions=True)


class TestConventions:
    """Tests for per-executable argument conventions."""

    def test_claude(self):
        assert build_arguments("claude", "m", "hi") == ["--model", "m", "-p", "hi"]

    def test_claude_with_system(self):
        assert build_arguments("claude", "m", "hi", "be brief") == [
            "--model", "m", "--system-prompt", "be brief", "-p", "hi",
        ]

    def test_gemini(self):
        assert build_arguments("gemini", "m", "hi") == ["-m", "m", "hi"]
        assert build_arguments("gemini", "m", "hi", "sys") == [
            "-m", "m", "--system", "sys", "hi",
        ]

    def test_generic(self):
        """Test unknown executables use the llm-style convention."""
        assert build_arguments("llm", "gpt-4o", "hi") == ["prompt", "-m", "gpt-4o", "hi"]
        assert build_arguments("other", "x", "hi", "sys") == [
            "prompt", "-m", "x", "--system", "sys", "hi",
        ]

    def test_empty_system_prompt_omitted(self):
        assert build_arguments("claude", "m", "hi", "") == ["--model", "m", "-p", "hi"]


class TestPromptAssembly:
    """Tests for positional splitting and prompt assembly."""

    def is_alias(self, name):
        return name in ("opus", "haiku")

    def test_single_positional_is_prompt(self):
        """Test a lone positional is the prompt even if it names an alias."""
        assert split_positionals(DispatchRequest(args=["opus"]), self.is_alias) == (None, "opus")

    def test_alias_then_prompt(self):
        request = DispatchRequest(args=["opus", "explain", "interfaces"])
        assert split_positionals(request, self.is_alias) == ("opus", "explain interfaces")

    def test_non_alias_first(self):
        request = DispatchRequest(args=["what", "is", "2+2"])
        assert split_positionals(request, self.is_alias) == (None, "what is 2+2")

    def test_model_flag_keeps_positionals(self):
        """Test -m means every positional is prompt text."""
        request = DispatchRequest(model="haiku", args=["opus", "rocks"])
        assert split_positionals(request, self.is_alias) == ("haiku", "opus rocks")

    def test_prompt_flag_with_alias_positional(self):
        request = DispatchRequest(prompt="hello", args=["opus"])
        assert split_positionals(request, self.is_alias) == ("opus", "hello")

    def test_prompt_flag_and_text(self):
        request = DispatchRequest(prompt="hello", args=["world"])
        assert split_positionals(request, self.is_alias) == (None, "hello world")

    def test_assemble_with_stdin(self):
        assert assemble_prompt("review", "diff --git\n") == "review\n\ndiff --git\n"

    def test_assemble_stdin_only(self):
        assert assemble_prompt("", "question") == "question"

    def test_assemble_blank_stdin_ignored(self):
        assert assemble_prompt("hi", "  \n") == "hi"


class RecordingLauncher:
    """Launcher stand-in that records specs instead of running them."""

    def __init__(self):
        self.specs: list[LaunchSpec] = []

    async def __call__(self, spec: LaunchSpec) -> LaunchResult:
        self.specs.append(spec)
        return LaunchResult(executable=spec.executable)


class TestDispatcher:
    """Tests for the Dispatcher."""

    @pytest.fixture
    def launcher(self):
        return RecordingLauncher()

    @pytest.fixture
    def dispatcher(self, settings, launcher):
        settings.home.mkdir(parents=True)
        settings.models_file.write_text(json.dumps({
            "default_model": "haiku",
            "models": {"haiku": {"cli": "claude", "model_id": "claude-haiku-4-5-20251001"}},
        }))
        return Dispatcher.from_settings(settings, launcher=launcher)

    @pytest.mark.asyncio
    async def test_default_model_scenario(self, dispatcher, launcher, settings):
        """Test no alias and prompt 'hi' runs claude with the haiku model."""
        result = await dispatcher.dispatch(DispatchRequest(args=["hi"]))

        assert result.returncode == 0
        spec = launcher.specs[0]
        assert spec.executable == "claude"
        assert list(spec.arguments) == ["--model", "claude-haiku-4-5-20251001", "-p", "hi"]
        assert "--system-prompt" not in spec.arguments
        assert spec.working_directory == settings.sessions_dir

    @pytest.mark.asyncio
    async def test_system_prompt(self, dispatcher, launcher):
        await dispatcher.dispatch(DispatchRequest(system="terse", args=["haiku", "hi"]))
        assert list(launcher.specs[0].arguments) == [
            "--model", "claude-haiku-4-5-20251001", "--system-prompt", "terse", "-p", "hi",
        ]

    @pytest.mark.asyncio
    async def test_unknown_alias_flag(self, dispatcher, launcher):
        await dispatcher.dispatch(DispatchRequest(model="gpt-4o", args=["hi"]))
        spec = launcher.specs[0]
        assert spec.executable == "llm"
        assert list(spec.arguments) == ["prompt", "-m", "gpt-4o", "hi"]

    @pytest.mark.asyncio
    async def test_force_sessions(self, dispatcher, launcher, settings):
        Options(run_on_current_directory=True).save(settings.options_file)
        await dispatcher.dispatch(DispatchRequest(args=["hi"], force_sessions=True))
        assert launcher.specs[0].working_directory == settings.sessions_dir

    @pytest.mark.asyncio
    async def test_stdin_appended(self, dispatcher, launcher):
        await dispatcher.dispatch(DispatchRequest(args=["summarize"], stdin_text="text"))
        assert launcher.specs[0].arguments[-1] == "summarize\n\ntext"

    @pytest.mark.asyncio
    async def test_empty_prompt(self, dispatcher, launcher):
        """Test an empty prompt fails before anything is launched."""
        with pytest.raises(PromptError):
            await dispatcher.dispatch(DispatchRequest(model="haiku", prompt=""))
        assert launcher.specs == []

    def test_has_prompt_source(self):
        assert not DispatchRequest().has_prompt_source
        assert not DispatchRequest(stdin_text="\n").has_prompt_source
        assert DispatchRequest(prompt="x").has_prompt_source
        assert DispatchRequest(args=["x"]).has_prompt_source
