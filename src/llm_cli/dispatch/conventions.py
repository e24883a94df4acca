"""
Per-executable calling conventions.

Each target executable spells the model and system prompt flags its own
way. The optional system prompt always comes before the prompt text.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ArgumentConvention:
    """
    How one executable takes a model, a system prompt and a prompt.

    Attributes:
        model_flag: Flag preceding the model identifier
        system_flag: Flag preceding the system prompt
        prompt_flag: Flag preceding the prompt, or None for a bare positional
        leading: Arguments placed before everything else (e.g. a subcommand)
    """

    model_flag: str
    system_flag: str
    prompt_flag: Optional[str] = None
    leading: tuple[str, ...] = ()

    def build(
        self,
        model_id: str,
        prompt: str,
        system_prompt: Optional[str] = None,
    ) -> list[str]:
        args = [*self.leading, self.model_flag, model_id]
        if system_prompt:
            args += [self.system_flag, system_prompt]
        if self.prompt_flag:
            args.append(self.prompt_flag)
        args.append(prompt)
        return args


CONVENTIONS: dict[str, ArgumentConvention] = {
    # claude --model MODEL [--system-prompt SYSTEM] -p PROMPT
    "claude": ArgumentConvention(
        model_flag="--model", system_flag="--system-prompt", prompt_flag="-p"
    ),
    # gemini -m MODEL [--system SYSTEM] PROMPT
    "gemini": ArgumentConvention(model_flag="-m", system_flag="--system"),
}

# llm prompt -m MODEL [--system SYSTEM] PROMPT
GENERIC_CONVENTION = ArgumentConvention(
    model_flag="-m", system_flag="--system", leading=("prompt",)
)


def get_convention(executable: str) -> ArgumentConvention:
    """Convention for ``executable``; unknown names get the generic one."""
    return CONVENTIONS.get(executable, GENERIC_CONVENTION)


def build_arguments(
    executable: str,
    model_id: str,
    prompt: str,
    system_prompt: Optional[str] = None,
) -> list[str]:
    """
    Build the argument list for ``executable``.

    Example:
        >>> build_arguments("claude", "claude-haiku-4-5-20251001", "hi")
        ['--model', 'claude-haiku-4-5-20251001', '-p', 'hi']
    """
    return get_convention(executable).build(model_id, prompt, system_prompt)
