"""
Working directory selection for the child process.

Some target executables keep session state relative to the directory
they are started in, so by default they run in a dedicated sessions
directory under the config root.
"""

import logging
import os
from pathlib import Path

from llm_cli.exceptions import ConfigError, WorkingDirectoryError
from llm_cli.settings.config import Options
from llm_cli.settings.paths import AppSettings

logger = logging.getLogger(__name__)


class WorkingDirectoryProvider:
    """
    Decides where the target executable runs.

    Usage:
        provider = WorkingDirectoryProvider(AppSettings())
        cwd = provider.working_directory(force_sessions=False)
    """

    def __init__(self, settings: AppSettings):
        self.settings = settings

    def sessions_directory(self) -> Path:
        """
        Return the sessions directory, creating it if needed.

        Raises:
            WorkingDirectoryError: If the directory cannot be created
        """
        path = self.settings.sessions_dir
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WorkingDirectoryError(
                f"failed to create sessions directory {path}: {e}"
            )
        return path

    def load_options(self) -> Options:
        """Persisted options, or the defaults if they cannot be loaded."""
        try:
            return Options.load_or_create(self.settings.options_file)
        except ConfigError as e:
            logger.warning(f"Using default options: {e}")
            return Options()

    def working_directory(self, force_sessions: bool = False) -> Path:
        """
        Directory for the child process.

        Args:
            force_sessions: Use the sessions directory regardless of options

        Raises:
            WorkingDirectoryError: If no usable directory can be determined
        """
        if not force_sessions and self.load_options().run_on_current_directory:
            try:
                cwd = Path(os.getcwd())
            except OSError as e:
                raise WorkingDirectoryError(f"failed to read current directory: {e}")
            logger.debug(f"Running in current directory {cwd}")
            return cwd

        path = self.sessions_directory()
        logger.debug(f"Running in sessions directory {path}")
        return path
