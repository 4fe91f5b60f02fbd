"""Git collaborator for template acquisition and history reset.

Wraps the two version-control operations the pipeline consumes: cloning the
template into the target directory, and discarding the template's history in
favour of a fresh, empty repository.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from .utils import CommandRunner, run_command


class GitError(Exception):
    """Raised when a git operation fails."""

    def __init__(self, message: str, command: str = "", stderr: str = ""):
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class GitClient:
    """Runs git through an injectable command runner.

    Attributes:
        executable: Name or path of the git binary.
        runner: Coroutine with the ``run_command`` signature.
        timeout: Optional per-command timeout in seconds.
    """

    def __init__(
        self,
        executable: str = "git",
        runner: CommandRunner = run_command,
        timeout: float | None = None,
    ) -> None:
        self.executable = executable
        self.runner = runner
        self.timeout = timeout

    async def _git(self, *args: str, cwd: Path | None = None) -> str:
        """Run a git command and return its stdout.

        Raises GitError if the command exits with a non-zero code.
        """
        cmd = [self.executable, *args]
        cmd_str = " ".join(cmd)
        returncode, stdout, stderr = await self.runner(cmd, cwd=cwd, timeout=self.timeout)
        if returncode != 0:
            raise GitError(
                f"Git command failed (exit {returncode}): {cmd_str}\n{stderr}".rstrip(),
                command=cmd_str,
                stderr=stderr,
            )
        return stdout

    async def clone(self, url: str, dest: str | Path) -> None:
        """Clone *url* into *dest*, including its full history."""
        await self._git("clone", url, str(dest))

    async def reset_history(self, repo_path: str | Path) -> None:
        """Delete ``.git`` under *repo_path* and initialise an empty repository.

        A missing ``.git`` directory is not an error.  The new repository has
        no commits.

        Raises:
            GitError: If the metadata cannot be removed or ``git init`` fails.
        """
        repo = Path(repo_path)
        git_dir = repo / ".git"
        try:
            await asyncio.to_thread(_remove_tree, git_dir)
        except OSError as exc:
            raise GitError(f"Could not remove {git_dir}: {exc}") from exc

        await self._git("init", cwd=repo)


def _remove_tree(path: Path) -> None:
    """Recursively delete *path*; a missing path is ignored."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()
