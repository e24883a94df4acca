"""
Alias resolution.

Maps a user-supplied alias to the executable and model identifier to
launch. Storage problems never fail resolution: the built-in table is
used instead.
"""

import logging
from pathlib import Path
from typing import Optional

from llm_cli.exceptions import ConfigError
from llm_cli.settings.config import (
    FALLBACK_DEFAULT_ALIAS,
    PASSTHROUGH_CLI,
    ModelEntry,
    ModelsConfig,
)

logger = logging.getLogger(__name__)


class AliasResolver:
    """
    Resolves aliases against the persisted alias table.

    Usage:
        resolver = AliasResolver.from_file(settings.models_file)
        entry = resolver.resolve("opus")
        entry = resolver.resolve("")          # configured default
        entry = resolver.resolve("gpt-4o")    # pass-through to `llm`
    """

    def __init__(self, table: ModelsConfig):
        self.table = table

    @classmethod
    def from_file(cls, path: Path) -> "AliasResolver":
        """
        Load the table at ``path``, creating it if missing.

        Falls back to the built-in table when the file cannot be read,
        parsed or created.
        """
        try:
            table = ModelsConfig.load_or_create(path)
        except ConfigError as e:
            logger.warning(f"Using built-in models: {e}")
            table = ModelsConfig.builtin()
        return cls(table)

    @property
    def default_alias(self) -> str:
        """The configured default alias, or the built-in one if unusable."""
        alias = self.table.default_model
        if alias and alias in self.table:
            return alias
        if alias:
            logger.warning(
                f"Default model {alias!r} is not in the alias table, "
                f"using {FALLBACK_DEFAULT_ALIAS!r}"
            )
        return FALLBACK_DEFAULT_ALIAS

    def is_alias(self, name: str) -> bool:
        return name in self.table

    def resolve(self, alias: Optional[str] = None) -> ModelEntry:
        """
        Resolve ``alias`` to a ModelEntry.

        An empty alias resolves the default. An alias missing from the
        table is passed through: it becomes the model identifier for the
        generic ``llm`` executable.
        """
        if not alias:
            alias = self.default_alias
            entry = self.table.get(alias)
            if entry is None:
                # The fallback default itself may be absent from a user table.
                entry = ModelsConfig.builtin().get(alias)
            if entry is not None:
                logger.debug(f"Resolved default model {alias!r} -> {entry.cli} {entry.model_id}")
                return entry

        entry = self.table.get(alias)
        if entry is not None:
            logger.debug(f"Resolved {alias!r} -> {entry.cli} {entry.model_id}")
            return entry

        logger.warning(
            f"Unknown model alias {alias!r}, passing it to {PASSTHROUGH_CLI!r} as the model id"
        )
        return ModelEntry(cli=PASSTHROUGH_CLI, model_id=alias)
