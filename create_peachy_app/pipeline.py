"""create-peachy-app initialization pipeline.

Turns an empty (or missing) directory into a ready-to-run Peachy app:

Step 1: TARGET      -- Refuse to touch a non-empty target directory.
Step 2: CLONE       -- Clone the template repository, history included.
Step 3: PRUNE       -- Remove the template's docs and blog sections.
Step 4: MANIFEST    -- Rename and reset package.json.
Step 5: CUSTOMIZE   -- Replace stylesheet/page, drop header/footer components.
Step 6: VCS         -- Replace the template history with a fresh repository.
Step 7: INSTALL     -- Install dependencies.
Step 8: REPORT      -- List the npm scripts the new project offers.

Each step is either fatal (its failure stops the run with exit code 1) or
soft (its failure is reported and the run continues).  Nothing is rolled
back and nothing is retried.

Usage::

    create-peachy-app my-app
    python -m create_peachy_app ./apps/my-app
"""

from __future__ import annotations

import asyncio
import shutil
import sys
import traceback
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from create_peachy_app.config import Config
from create_peachy_app.package_manager import PackageManager, PackageManagerError
from create_peachy_app.scaffolder import AppCustomizer, TemplateRenderer, describe_scripts
from create_peachy_app.scaffolder.manifest import (
    SCRIPTS_UNAVAILABLE_MESSAGE,
    ManifestError,
    customize_manifest,
)
from create_peachy_app.utils import (
    CommandRunner,
    create_status,
    print_boxed,
    print_detail,
    print_error,
    print_step_failure,
    print_step_success,
    print_step_warning,
    print_success,
    run_command,
)
from create_peachy_app.vcs import GitClient, GitError

COMPLETION_BANNER = "Project setup complete! Happy Coding!"
USAGE = "Usage: create-peachy-app <project-directory>"

# ---------------------------------------------------------------------------
# Exceptions and step model
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised by a step whose precondition does not hold."""

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        self.message = message
        super().__init__(f"Step {step}: {message}")


# Errors the collaborators raise on purpose; anything else is unexpected and
# gets its traceback printed.
_EXPECTED_ERRORS = (PipelineError, GitError, PackageManagerError, ManifestError)


class StepStatus(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"


@dataclass
class StepResult:
    """What a step reports when it returns normally."""

    status: StepStatus = StepStatus.SUCCESS
    message: str = ""
    details: list[str] = field(default_factory=list)

    @classmethod
    def warning(cls, message: str, details: list[str] | None = None) -> "StepResult":
        return cls(StepStatus.WARNING, message, details or [])


@dataclass
class Step:
    """One guarded pipeline step.

    Attributes:
        name: Short identifier recorded in the pipeline state.
        pending: Spinner text while the step runs.
        done: Text printed when the step succeeds.
        failed: Text printed when the step raises.
        run: Coroutine function doing the work.
        fatal: Whether an exception from ``run`` stops the pipeline.
    """

    name: str
    pending: str
    done: str
    failed: str
    run: Callable[[], Awaitable[StepResult | None]]
    fatal: bool = True


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """Runs the initialization steps against ``config.target_dir``.

    Attributes:
        config: Pipeline configuration (target, template, rewrite set).
        state: Accumulates step outcomes; returned by ``run``.
        git: Version-control collaborator.
        package_manager: Dependency-install collaborator.
        customizer: Application-file rewriter.
    """

    def __init__(
        self,
        config: Config,
        runner: CommandRunner = run_command,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.git = GitClient(config.git_executable, runner, config.command_timeout)
        self.package_manager = PackageManager(
            config.package_manager, runner, config.command_timeout
        )
        self.customizer = AppCustomizer(config, renderer)
        self.state: dict[str, Any] = {
            "project_name": config.project_name,
            "target_dir": str(config.target_dir),
            "steps_completed": [],
            "steps_warned": [],
            "failed_step": None,
            "error": None,
            "scripts_summary": SCRIPTS_UNAVAILABLE_MESSAGE,
            "success": False,
        }

    def steps(self) -> list[Step]:
        """Return the steps in execution order."""
        return [
            Step(
                "target",
                "Checking target directory...",
                "Target directory is available.",
                "Target directory cannot be used.",
                self.check_target,
            ),
            Step(
                "clone",
                "Setting up project...",
                "Repository cloned.",
                "Project setup failed: Cloning repository failed.",
                self.clone_template,
            ),
            Step(
                "prune",
                "Setting up directories...",
                "Directories set up.",
                "Some issues encountered during directory setup.",
                self.prune_directories,
                fatal=False,
            ),
            Step(
                "manifest",
                f"Setting up {self.config.manifest_name}...",
                f"{self.config.manifest_name} set up.",
                f"Failed to set up {self.config.manifest_name}.",
                self.rewrite_manifest,
            ),
            Step(
                "customize",
                "Customizing application files...",
                "Application files customized.",
                "Some application files could not be customized.",
                self.customize_files,
                fatal=False,
            ),
            Step(
                "vcs",
                "Setting up version control...",
                "Version control set up.",
                "Failed to set up version control.",
                self.reset_version_control,
            ),
            Step(
                "install",
                "Installing dependencies...",
                "Dependencies installed.",
                "Dependency installation failed.",
                self.install_dependencies,
            ),
            Step(
                "report",
                "Finalizing setup...",
                "Setup finalized.",
                "Final setup encountered issues.",
                self.collect_scripts,
                fatal=False,
            ),
        ]

    async def run(self) -> dict[str, Any]:
        """Execute every step in order, stopping at the first fatal failure.

        Returns:
            The pipeline state dictionary, including a top-level ``success``
            boolean.
        """
        for step in self.steps():
            if not await self._run_step(step):
                return self.state

        self.state["success"] = True
        print_success(COMPLETION_BANNER)
        print_boxed(self.state["scripts_summary"])
        return self.state

    async def _run_step(self, step: Step) -> bool:
        """Run one step and report it.  Returns ``False`` when the run must stop."""
        result: StepResult | None = None
        error: Exception | None = None
        tb = ""

        with create_status(step.pending):
            try:
                result = await step.run()
            except _EXPECTED_ERRORS as exc:
                error = exc
            except Exception as exc:
                error = exc
                tb = traceback.format_exc()

        if error is None:
            result = result or StepResult()
            if result.status is StepStatus.WARNING:
                print_step_warning(result.message or step.failed)
                self.state["steps_warned"].append(step.name)
            else:
                print_step_success(result.message or step.done)
            for line in result.details:
                print_detail(line)
            self.state["steps_completed"].append(step.name)
            return True

        report = print_step_failure if step.fatal else print_step_warning
        if isinstance(error, PipelineError):
            report(error.message)
        else:
            report(step.failed)
            print_detail(str(error))
        if tb:
            print_detail(tb.rstrip())

        if not step.fatal:
            self.state["steps_warned"].append(step.name)
            return True

        self.state["failed_step"] = step.name
        self.state["error"] = str(error)
        return False

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def check_target(self) -> None:
        """Fail if the target exists and is anything but an empty directory.

        A missing target is fine; ``git clone`` creates it.  Another process
        could still populate the directory before the clone runs.
        """
        target = self.config.target_dir
        if not target.exists():
            return
        if not target.is_dir():
            raise PipelineError("target", f'"{target}" exists and is not a directory.')
        if any(target.iterdir()):
            raise PipelineError("target", f'Directory "{target}" is not empty.')

    async def clone_template(self) -> None:
        await self.git.clone(self.config.template_url, self.config.target_dir)

    async def prune_directories(self) -> StepResult | None:
        """Remove the pruning set; already-missing directories are fine."""
        problems: list[str] = []
        for path in self.config.pruned_paths:
            try:
                await asyncio.to_thread(shutil.rmtree, path)
            except FileNotFoundError:
                continue
            except OSError as exc:
                problems.append(f"{_relative(path, self.config.target_dir)}: {exc}")
        if problems:
            return StepResult.warning(
                "Some issues encountered during directory setup.", problems
            )
        return None

    async def rewrite_manifest(self) -> None:
        self.state["manifest"] = await asyncio.to_thread(
            customize_manifest, self.config.manifest_path, self.config.project_name
        )

    async def customize_files(self) -> StepResult:
        """Apply every customization; individual failures never stop the run."""
        report = await asyncio.to_thread(self.customizer.apply)
        self.state["customization"] = {
            "applied": report.applied,
            "skipped": report.skipped,
            "errors": report.errors,
        }
        details = [f"skipped {name}: file not found" for name in report.skipped]
        details.extend(f"failed {error}" for error in report.errors)
        return StepResult(details=details)

    async def reset_version_control(self) -> None:
        await self.git.reset_history(self.config.target_dir)

    async def install_dependencies(self) -> None:
        await self.package_manager.install(self.config.target_dir)

    async def collect_scripts(self) -> None:
        """Re-read the written manifest and format its scripts for the summary.

        On failure the summary keeps ``SCRIPTS_UNAVAILABLE_MESSAGE``.
        """
        self.state["scripts_summary"] = await asyncio.to_thread(
            describe_scripts, self.config.manifest_path, self.package_manager.run_hint
        )


def _relative(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-peachy-app``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="create-peachy-app",
        description="Bootstrap a new Peachy app from the official template",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-peachy-app my-app\n"
            "  create-peachy-app ./apps/dashboard\n"
        ),
    )
    parser.add_argument(
        "project_directory",
        nargs="?",
        help="Directory to create the app in (must be empty or missing)",
    )

    args = parser.parse_args(argv)

    if args.project_directory is None:
        print_error(USAGE)
        sys.exit(1)

    try:
        config = Config.from_env(args.project_directory)
    except ValueError as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    result = asyncio.run(Pipeline(config).run())
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
