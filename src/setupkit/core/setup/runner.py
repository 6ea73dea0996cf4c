"""
Step runner: drives the setup state machine.

States are the Step values 0..COMPLETE. Each transition runs one step
function, carries the returned state forward with ``step + 1`` and saves
it before moving on, so an interrupted setup resumes at the first step
that did not finish.

Side effects are not at-most-once: if the process dies after a step did
its work but before the state was saved, that step runs again on resume.
Step functions are written so that repeating them is harmless.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Mapping

from setupkit import __version__
from setupkit.core.errors import UserAbort
from setupkit.core.setup.steps import (
    STEP_FUNCTIONS,
    STEP_TITLES,
    TERMINAL_STEP,
    Step,
    StepContext,
    StepFn,
)
from setupkit.core.state.models import SetupState
from setupkit.core.state.store import StateStore

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    """Outcome of a runner invocation."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    ALREADY_COMPLETE = "already_complete"


@dataclass
class RunResult:
    """
    Result of StepRunner.run.

    Attributes:
        status: How the run ended.
        state: Last state saved (or loaded, if nothing was saved).
        steps_run: Steps whose work finished during this run.
        stopped_at: Step that was interrupted by an abort, if any.
    """

    status: RunStatus
    state: SetupState
    steps_run: list[Step] = field(default_factory=list)
    stopped_at: Step | None = None


def is_complete(state: SetupState) -> bool:
    """True once every step has run and the completion marker is written."""
    return state.step >= TERMINAL_STEP and state.completed_at is not None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StepRunner:
    """
    Runs setup steps from the persisted position to completion.

    Example:
        >>> runner = StepRunner(StateStore(path), StepContext(config, ConsolePrompter()))
        >>> result = runner.run()
        >>> result.status
        <RunStatus.COMPLETED: 'completed'>
    """

    def __init__(
        self,
        store: StateStore,
        context: StepContext,
        steps: Mapping[Step, StepFn] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.context = context
        self.steps = dict(STEP_FUNCTIONS if steps is None else steps)
        self.clock = clock

    def run(self, state: SetupState | None = None) -> RunResult:
        """
        Run from ``state.step`` (or the saved state) to the terminal step.

        Returns:
            RunResult; an abort leaves the saved state as it was after the
            last finished step
        """
        if state is None:
            state = self.store.load()

        if is_complete(state):
            logger.info("Setup already complete (step %d)", state.step)
            return RunResult(status=RunStatus.ALREADY_COMPLETE, state=state)

        steps_run: list[Step] = []
        while state.step < TERMINAL_STEP:
            step = Step(state.step)
            step_fn = self.steps[step]
            self.context.prompter.inform(
                f"\n[bold]Step {step.value + 1}/{len(STEP_TITLES)}:[/bold] "
                f"{STEP_TITLES.get(step, step.name.title())}"
            )
            logger.info("Running step %s", step.name)

            try:
                next_state = step_fn(state, self.context)
            except UserAbort as e:
                logger.info("Aborted at step %s: %s", step.name, e)
                next_state = None

            if next_state is None:
                return RunResult(
                    status=RunStatus.ABORTED,
                    state=state,
                    steps_run=steps_run,
                    stopped_at=step,
                )

            state = next_state.model_copy(update={"step": step.value + 1})
            self.store.save(state)
            steps_run.append(step)

        return self._complete(state, steps_run)

    def restart(self, state: SetupState | None = None) -> RunResult:
        """
        Start a new pass from the first step.

        Earlier choices stay in the state and are offered as defaults. The
        saved state is only replaced once the first step finishes.
        """
        if state is None:
            state = self.store.load()
        fresh = state.model_copy(update={"step": 0, "completed_at": None, "version": None})
        return self.run(fresh)

    def _complete(self, state: SetupState, steps_run: list[Step]) -> RunResult:
        state = state.model_copy(
            update={"completed_at": self.clock(), "version": __version__}
        )
        self.store.save(state)
        logger.info("Setup complete (version %s)", __version__)
        return RunResult(status=RunStatus.COMPLETED, state=state, steps_run=steps_run)
