"""
Application paths.

The config root defaults to ``~/.llm-cli`` and can be moved with the
``LLM_CLI_HOME`` environment variable.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MODELS_FILENAME = "models.json"
OPTIONS_FILENAME = "options.json"
SESSIONS_DIRNAME = "sessions"


def default_home() -> Path:
    """Return ``~/.llm-cli``, or a relative ``.llm-cli`` without a home directory."""
    try:
        return Path.home() / ".llm-cli"
    except RuntimeError:
        return Path(".llm-cli")


class AppSettings(BaseSettings):
    """
    Locations of everything llm-cli persists.

    Example:
        ```python
        settings = AppSettings()
        print(settings.models_file)  # ~/.llm-cli/models.json

        # Isolated root, e.g. in tests
        settings = AppSettings(home=tmp_path)
        ```
    """

    model_config = SettingsConfigDict(env_prefix="LLM_CLI_", extra="ignore")

    home: Path = Field(
        default_factory=default_home,
        description="Config root holding the alias table, options and sessions",
    )

    @field_validator("home", mode="before")
    @classmethod
    def expand_home(cls, v):
        """Expand a leading ``~``."""
        return Path(v).expanduser()

    @property
    def models_file(self) -> Path:
        return self.home / MODELS_FILENAME

    @property
    def options_file(self) -> Path:
        return self.home / OPTIONS_FILENAME

    @property
    def sessions_dir(self) -> Path:
        return self.home / SESSIONS_DIRNAME
