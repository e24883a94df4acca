"""
Process launcher and stream relay.

Runs a target executable as a child process and streams its output
to ours while showing a progress indicator until output begins.
"""

from llm_cli.runner.indicator import Indicator, OutputLatch
from llm_cli.runner.launcher import LaunchResult, LaunchSpec, ProcessLauncher, launch
from llm_cli.runner.relay import relay_lines

__all__ = [
    "Indicator",
    "OutputLatch",
    "LaunchResult",
    "LaunchSpec",
    "ProcessLauncher",
    "launch",
    "relay_lines",
]
