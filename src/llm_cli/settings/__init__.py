"""
Settings for llm-cli.

Application paths, the persisted alias table and persisted options.

Example:
    ```python
    from llm_cli.settings import AppSettings, ModelsConfig

    settings = AppSettings()
    table = ModelsConfig.load_or_create(settings.models_file)
    print(table.default_model)
    ```
"""

from llm_cli.settings.config import (
    BUILTIN_MODELS,
    FALLBACK_DEFAULT_ALIAS,
    PASSTHROUGH_CLI,
    ModelEntry,
    ModelsConfig,
    Options,
)
from llm_cli.settings.paths import AppSettings

__all__ = [
    "AppSettings",
    "BUILTIN_MODELS",
    "FALLBACK_DEFAULT_ALIAS",
    "PASSTHROUGH_CLI",
    "ModelEntry",
    "ModelsConfig",
    "Options",
]
