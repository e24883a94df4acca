"""
CLI module for llm-cli.
"""

from llm_cli.cli.main import cli

__all__ = ["cli"]
