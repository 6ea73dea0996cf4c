"""
Setup steps.

Each step is a plain function ``(state, context) -> SetupState | None``.
It may prompt through ``context.prompter`` and perform side effects, then
returns the state with any newly decided fields filled in (the runner
advances ``step`` and persists it). Returning None means the user declined
to answer and the run stops without saving.

Side effects must be safe to repeat: a crash after a step's work but
before its state is saved re-runs the step on resume.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Callable

from setupkit.core.config.loader import get_claude_home
from setupkit.core.config.models import SetupkitConfig
from setupkit.core.conflicts import BLOCK_PATTERN_ID, ConflictReport, detect_conflicts, resolve
from setupkit.core.errors import SetupkitError
from setupkit.core.settings import (
    HookCommand,
    HookDefinition,
    load_settings,
    merge_hooks,
    set_env,
    set_status_line,
    write_settings,
)
from setupkit.core.setup.prompts import Choice, Prompter
from setupkit.core.setup.templates import CLAUDE_MD_TEMPLATE, GIT_HOOK_TEMPLATES, load_template
from setupkit.core.state.models import FeatureToggles, Resolution, Scope, SetupState
from setupkit.utils.fs import atomic_write_text, read_text_or_none
from setupkit.utils.project import find_git_dir, get_project_root

logger = logging.getLogger(__name__)

AGENT_TEAMS_ENV = "CLAUDE_CODE_EXPERIMENTAL_AGENT_TEAMS"
TEST_HOOK_TRIGGERS = ("Stop", "SubagentStop")
GIT_HOOK_MARKER = "# setupkit "


class Step(IntEnum):
    """Setup steps in execution order. COMPLETE is terminal."""

    SCOPE = 0
    CONFLICTS = 1
    CONFIGURATION = 2
    FEATURES = 3
    SETTINGS = 4
    GIT_HOOKS = 5
    COMPLETE = 6


TERMINAL_STEP = Step.COMPLETE

STEP_TITLES: dict[Step, str] = {
    Step.SCOPE: "Choose scope",
    Step.CONFLICTS: "Check for conflicts",
    Step.CONFIGURATION: "Write configuration",
    Step.FEATURES: "Choose features",
    Step.SETTINGS: "Update settings",
    Step.GIT_HOOKS: "Install git hooks",
}


@dataclass
class StepContext:
    """Everything a step needs besides the state itself."""

    config: SetupkitConfig
    prompter: Prompter
    cwd: Path = field(default_factory=Path.cwd)
    content: str | None = None

    @property
    def claude_home(self) -> Path:
        return get_claude_home(self.config)

    @property
    def project_root(self) -> Path:
        return get_project_root(self.cwd)

    def config_path(self, scope: Scope) -> Path:
        """CLAUDE.md for a scope."""
        if scope is Scope.GLOBAL:
            return self.claude_home / "CLAUDE.md"
        return self.project_root / "CLAUDE.md"

    def settings_path(self, scope: Scope) -> Path:
        """settings.json for a scope."""
        if scope is Scope.GLOBAL:
            return self.claude_home / "settings.json"
        return self.project_root / ".claude" / "settings.json"

    def template(self) -> str:
        """Content installed into the configuration document."""
        if self.content is None:
            self.content = load_template(CLAUDE_MD_TEMPLATE)
        return self.content


StepFn = Callable[[SetupState, StepContext], SetupState | None]


def _require_scope(state: SetupState) -> Scope:
    if state.scope is None:
        raise SetupkitError("Saved setup state has no scope; run `setupkit run` to start over")
    return state.scope


def _document_path(state: SetupState, context: StepContext) -> Path:
    return state.config_path or context.config_path(_require_scope(state))


def choose_scope(state: SetupState, context: StepContext) -> SetupState | None:
    """Ask whether to install globally or for the current project."""
    answer = context.prompter.select_one(
        "Where should setupkit install its configuration?",
        [
            Choice("global", f"Global - every project ({context.claude_home})"),
            Choice("local", f"Local - this project only ({context.project_root})"),
        ],
        default=state.scope.value if state.scope else None,
    )
    if answer is None:
        return None

    scope = Scope(answer)
    return state.model_copy(update={"scope": scope, "config_path": context.config_path(scope)})


def check_conflicts(state: SetupState, context: StepContext) -> SetupState | None:
    """Scan the configuration document and decide how to resolve conflicts."""
    path = _document_path(state, context)
    document = read_text_or_none(path)
    content = context.template()

    if document is None:
        context.prompter.inform(f"{path} does not exist yet and will be created.")
        return state.model_copy(update={"resolution": Resolution.MERGE})

    if content.strip() in document:
        context.prompter.inform(f"{path} already contains the setupkit configuration.")
        return state.model_copy(update={"resolution": Resolution.SKIP})

    report = detect_conflicts(document)
    if not report:
        context.prompter.inform(f"No conflicts found in {path}.")
        return state.model_copy(update={"resolution": Resolution.MERGE})

    context.prompter.show_conflicts(path, report)
    only_previous_block = report.pattern_ids == [BLOCK_PATTERN_ID]
    if only_previous_block:
        choices = [
            Choice("merge", "Update the block installed by a previous run"),
            Choice("skip", "Leave the document unchanged"),
        ]
    else:
        choices = [
            Choice("merge", "Merge - keep your content and append setupkit's"),
            Choice("replace", "Replace - comment out conflicting sections, then append"),
            Choice("skip", "Skip - leave the document unchanged"),
        ]

    answer = context.prompter.select_one("How should these conflicts be resolved?", choices)
    if answer is None:
        context.prompter.warn(f"No resolution chosen; {path} will be left unchanged.")
        resolution = Resolution.SKIP
    else:
        resolution = Resolution(answer)

    logger.info("Conflict resolution for %s: %s", path, resolution.value)
    return state.model_copy(update={"resolution": resolution})


def write_configuration(state: SetupState, context: StepContext) -> SetupState | None:
    """Apply the chosen resolution and write the configuration document."""
    path = _document_path(state, context)
    document = read_text_or_none(path)
    resolution = state.resolution or Resolution.SKIP
    report = detect_conflicts(document) if document is not None else ConflictReport()

    new_document = resolve(document, report, resolution, context.template())
    if new_document is None or new_document == document:
        context.prompter.inform(f"{path} left unchanged.")
        return state

    atomic_write_text(path, new_document)
    context.prompter.inform(f"Wrote {path}.")
    return state


def choose_features(state: SetupState, context: StepContext) -> SetupState | None:
    """Ask which optional features to enable."""
    scope = _require_scope(state)
    choices = [Choice("testHook", "Test verification hook on Stop and SubagentStop")]
    if scope is Scope.LOCAL:
        choices += [
            Choice("gitHooks.preCommit", "Git pre-commit hook (blocks conflict markers)"),
            Choice("gitHooks.prePush", "Git pre-push hook (runs setupkit.testCommand)"),
        ]
    choices += [
        Choice("statusLine", "Claude Code status line"),
        Choice("agentTeams", "Experimental agent teams"),
    ]
    offered = {c.value for c in choices}
    defaults = [name for name in state.features.enabled_names() if name in offered]

    answer = context.prompter.select_many(
        "Which optional features should be enabled?", choices, defaults
    )
    if answer is None:
        return None
    return state.model_copy(update={"features": FeatureToggles.from_names(answer)})


def verification_hook_definitions(config: SetupkitConfig) -> list[HookDefinition]:
    """Prompt hooks that ask the agent to verify tests before stopping."""
    return [
        HookDefinition(
            trigger=trigger,
            hooks=[
                HookCommand(
                    type="prompt",
                    prompt=config.test_hook_prompt,
                    timeout=config.hook_timeout,
                )
            ],
        )
        for trigger in TEST_HOOK_TRIGGERS
    ]


def apply_settings(state: SetupState, context: StepContext) -> SetupState | None:
    """Merge hooks, status line and environment into settings.json."""
    features = state.features
    if not (features.test_hook or features.status_line or features.agent_teams):
        context.prompter.inform("No settings changes requested.")
        return state

    path = context.settings_path(_require_scope(state))
    settings = load_settings(path)
    before = settings.to_json_dict()

    if features.test_hook:
        settings = merge_hooks(
            settings, verification_hook_definitions(context.config), dedupe=True
        )
    if features.status_line:
        settings, applied = set_status_line(settings, context.config.statusline_command)
        if not applied:
            context.prompter.warn("A different status line is already configured; kept it.")
    if features.agent_teams:
        settings = set_env(settings, AGENT_TEAMS_ENV, "1")

    if settings.to_json_dict() == before:
        context.prompter.inform(f"{path} already up to date.")
        return state

    write_settings(path, settings)
    context.prompter.inform(f"Updated {path}.")
    return state


def install_git_hooks(state: SetupState, context: StepContext) -> SetupState | None:
    """Install the selected git hooks into the project repository."""
    toggles = state.features.git_hooks
    if not state.features.any_git_hooks:
        return state

    if _require_scope(state) is Scope.GLOBAL:
        context.prompter.inform("Git hooks are per repository; skipped for global scope.")
        return state

    git_dir = find_git_dir(context.project_root)
    if git_dir is None:
        context.prompter.warn(
            f"{context.project_root} is not a git repository; git hooks skipped."
        )
        return state

    wanted = {"pre-commit": toggles.pre_commit, "pre-push": toggles.pre_push}
    for name, enabled in wanted.items():
        if not enabled:
            continue
        script = load_template(GIT_HOOK_TEMPLATES[name])
        target = git_dir / "hooks" / name
        existing = read_text_or_none(target)
        if existing is not None and existing != script and GIT_HOOK_MARKER not in existing:
            context.prompter.warn(f"Existing {name} hook at {target} left untouched.")
            continue
        atomic_write_text(target, script, mode=0o755)
        context.prompter.inform(f"Installed {name} hook.")

    return state


STEP_FUNCTIONS: dict[Step, StepFn] = {
    Step.SCOPE: choose_scope,
    Step.CONFLICTS: check_conflicts,
    Step.CONFIGURATION: write_configuration,
    Step.FEATURES: choose_features,
    Step.SETTINGS: apply_settings,
    Step.GIT_HOOKS: install_git_hooks,
}
