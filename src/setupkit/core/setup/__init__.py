"""
Resumable setup: steps, prompts and the runner that drives them.

Example:
    >>> from setupkit.core.setup import ConsolePrompter, StepContext, StepRunner
    >>> runner = StepRunner(store, StepContext(config=config, prompter=ConsolePrompter()))
    >>> runner.run()
"""

from .prompts import ABORT, Choice, ConsolePrompter, Prompter, ScriptedPrompter
from .runner import RunResult, RunStatus, StepRunner, is_complete
from .steps import (
    STEP_FUNCTIONS,
    STEP_TITLES,
    TERMINAL_STEP,
    Step,
    StepContext,
    StepFn,
    verification_hook_definitions,
)

__all__ = [
    "ABORT",
    "STEP_FUNCTIONS",
    "STEP_TITLES",
    "TERMINAL_STEP",
    "Choice",
    "ConsolePrompter",
    "Prompter",
    "RunResult",
    "RunStatus",
    "ScriptedPrompter",
    "Step",
    "StepContext",
    "StepFn",
    "StepRunner",
    "is_complete",
    "verification_hook_definitions",
]
