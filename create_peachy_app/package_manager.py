"""Package-manager collaborator (npm by default)."""

from __future__ import annotations

from pathlib import Path

from .utils import CommandRunner, run_command


class PackageManagerError(Exception):
    """Raised when the package manager exits unsuccessfully."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class PackageManager:
    """Installs dependencies and names script invocations.

    The working directory is always passed explicitly to the runner so the
    process-wide cwd is never touched.
    """

    def __init__(
        self,
        executable: str = "npm",
        runner: CommandRunner = run_command,
        timeout: float | None = None,
    ) -> None:
        self.executable = executable
        self.runner = runner
        self.timeout = timeout

    async def install(self, project_dir: str | Path) -> None:
        """Install the dependencies declared by the manifest in *project_dir*.

        Raises:
            PackageManagerError: If the install command fails.
        """
        cmd = [self.executable, "install"]
        cmd_str = " ".join(cmd)
        returncode, _, stderr = await self.runner(
            cmd, cwd=Path(project_dir), timeout=self.timeout
        )
        if returncode != 0:
            raise PackageManagerError(
                f"{cmd_str} failed (exit {returncode})\n{stderr}".rstrip(),
                command=cmd_str,
                stderr=stderr,
            )

    def run_hint(self, script: str) -> str:
        """Return the command a user types to run *script*."""
        return f"{self.executable} run {script}"
