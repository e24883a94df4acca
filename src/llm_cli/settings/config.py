"""
Persisted alias table and options.

Both files are JSON objects rewritten as a whole with 2-space
indentation. A missing file is created from the built-in defaults on
first load.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from llm_cli.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Alias used when neither the request nor the table names a default.
FALLBACK_DEFAULT_ALIAS = "haiku"

# Executable that receives aliases missing from the table.
PASSTHROUGH_CLI = "llm"


class ModelEntry(BaseModel):
    """Target executable and model identifier for one alias."""

    model_config = {"frozen": True, "protected_namespaces": ()}

    cli: str = Field(description="Executable to launch (e.g. claude, gemini)")
    model_id: str = Field(description="Model identifier passed to the executable")


BUILTIN_MODELS: dict[str, ModelEntry] = {
    # claude
    "haiku": ModelEntry(cli="claude", model_id="claude-haiku-4-5-20251001"),
    "sonnet": ModelEntry(cli="claude", model_id="claude-sonnet-4-5-20250929"),
    "opus": ModelEntry(cli="claude", model_id="claude-opus-4-1-20250805"),
    # gemini
    "gemini": ModelEntry(cli="gemini", model_id="gemini-2.5-pro"),
    "pro": ModelEntry(cli="gemini", model_id="gemini-2.5-pro"),
    "flash": ModelEntry(cli="gemini", model_id="gemini-2.5-flash"),
    "flash-lite": ModelEntry(cli="gemini", model_id="gemini-2.5-flash-lite"),
}


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"failed to read {path}: {e}", path=str(path))
    except UnicodeDecodeError as e:
        raise ConfigError(f"failed to decode {path}: {e}", path=str(path))
    except json.JSONDecodeError as e:
        raise ConfigError(f"failed to parse {path}: {e}", path=str(path))


def _write_json(path: Path, data: dict) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to write {path}: {e}", path=str(path))


class ModelsConfig(BaseModel):
    """
    The alias table.

    File format:
        ```json
        {
          "default_model": "haiku",
          "models": {
            "haiku": {"cli": "claude", "model_id": "claude-haiku-4-5-20251001"}
          }
        }
        ```

    ``default_model`` may name an alias that is not in ``models``; the
    resolver then falls back to the built-in default.
    """

    default_model: str = Field(
        default=FALLBACK_DEFAULT_ALIAS,
        description="Alias used when none is given",
    )
    models: dict[str, ModelEntry] = Field(
        default_factory=dict,
        description="Alias to executable/model mapping",
    )

    @classmethod
    def builtin(cls) -> "ModelsConfig":
        """Return a fresh copy of the built-in table."""
        return cls(default_model=FALLBACK_DEFAULT_ALIAS, models=dict(BUILTIN_MODELS))

    @classmethod
    def from_dict(cls, data: Any) -> "ModelsConfig":
        """
        Create a table from parsed JSON.

        Raises:
            ConfigError: If the data does not match the schema
        """
        if not isinstance(data, dict):
            raise ConfigError("alias table must be a JSON object")
        try:
            config = cls(**data)
        except ValidationError as e:
            raise ConfigError(f"invalid alias table: {e}")
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ModelsConfig":
        """
        Load the alias table from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        path = Path(path).expanduser()
        try:
            return cls.from_dict(_read_json(path))
        except ConfigError as e:
            if e.path is None:
                e.path = str(path)
                e.message = f"{e.message} ({path})"
            raise

    @classmethod
    def load_or_create(cls, path: Union[str, Path]) -> "ModelsConfig":
        """Load the table, writing the built-in table first if the file is missing."""
        path = Path(path).expanduser()
        if not path.exists():
            logger.info(f"Creating default alias table at {path}")
            config = cls.builtin()
            config.save(path)
            return config
        return cls.from_file(path)

    def to_dict(self) -> dict:
        return {
            "default_model": self.default_model,
            "models": {
                alias: {"cli": entry.cli, "model_id": entry.model_id}
                for alias, entry in self.models.items()
            },
        }

    def save(self, path: Union[str, Path]) -> None:
        """Rewrite the whole file."""
        _write_json(Path(path).expanduser(), self.to_dict())

    def get(self, alias: str) -> Optional[ModelEntry]:
        return self.models.get(alias)

    def __contains__(self, alias: str) -> bool:
        return alias in self.models

    def grouped_by_cli(self) -> dict[str, list[tuple[str, ModelEntry]]]:
        """Aliases grouped by executable, both levels sorted by name."""
        groups: dict[str, list[tuple[str, ModelEntry]]] = {}
        for alias in sorted(self.models):
            entry = self.models[alias]
            groups.setdefault(entry.cli, []).append((alias, entry))
        return dict(sorted(groups.items()))


class Options(BaseModel):
    """
    Persisted behaviour options.

    File format:
        ```json
        {"run_on_current_directory": false}
        ```
    """

    run_on_current_directory: bool = Field(
        default=False,
        description="Run the target executable in the caller's directory "
        "instead of the sessions directory",
    )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Options":
        """
        Load options from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        path = Path(path).expanduser()
        data = _read_json(path)
        if not isinstance(data, dict):
            raise ConfigError(f"options must be a JSON object ({path})", path=str(path))
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"invalid options in {path}: {e}", path=str(path))

    @classmethod
    def load_or_create(cls, path: Union[str, Path]) -> "Options":
        """Load options, writing the defaults first if the file is missing."""
        path = Path(path).expanduser()
        if not path.exists():
            logger.info(f"Creating default options at {path}")
            options = cls()
            options.save(path)
            return options
        return cls.from_file(path)

    def to_dict(self) -> dict:
        return {"run_on_current_directory": self.run_on_current_directory}

    def save(self, path: Union[str, Path]) -> None:
        """Rewrite the whole file."""
        _write_json(Path(path).expanduser(), self.to_dict())
