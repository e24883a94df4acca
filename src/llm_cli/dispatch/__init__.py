"""
Dispatch: alias resolution, working directory choice, argument
conventions and the driver tying them to the process launcher.
"""

from llm_cli.dispatch.conventions import (
    CONVENTIONS,
    GENERIC_CONVENTION,
    ArgumentConvention,
    build_arguments,
    get_convention,
)
from llm_cli.dispatch.driver import (
    DispatchRequest,
    Dispatcher,
    assemble_prompt,
    split_positionals,
)
from llm_cli.dispatch.resolver import AliasResolver
from llm_cli.dispatch.workdir import WorkingDirectoryProvider

__all__ = [
    "CONVENTIONS",
    "GENERIC_CONVENTION",
    "ArgumentConvention",
    "build_arguments",
    "get_convention",
    "DispatchRequest",
    "Dispatcher",
    "assemble_prompt",
    "split_positionals",
    "AliasResolver",
    "WorkingDirectoryProvider",
]
