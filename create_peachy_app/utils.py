"""Shared utility functions for create-peachy-app.

Provides async command execution, JSON I/O, and Rich-based progress
reporting used by every pipeline step.  Collaborators receive
``run_command`` (or a compatible fake) explicitly rather than reaching for
ambient process state.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status

console = Console()

# Signature shared by ``run_command`` and test doubles:
# ``runner(cmd, cwd=..., timeout=...) -> (returncode, stdout, stderr)``.
CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]

# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: list[str],
    cwd: str | Path | None = None,
    timeout: float | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run an external command asynchronously and capture its output.

    Args:
        cmd: Program followed by its arguments.  No shell is involved.
        cwd: Working directory for the child process.
        timeout: Maximum wall-clock seconds before the process is killed.
            ``None`` waits for as long as the process runs.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.  A missing executable is
        reported as returncode ``127`` rather than raised.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
            env=merged_env,
        )
    except FileNotFoundError:
        return (127, "", f"Command not found: {cmd[0]}")

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(
            process.communicate(), timeout=timeout
        )
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return (-1, "", f"Command timed out after {timeout}s: {' '.join(cmd)}")

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file whose top-level value is an object.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top-level value is not an object.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def save_json(data: dict[str, Any], path: str | Path) -> None:
    """Save data as JSON with two-space indentation, keeping key order."""
    content = json.dumps(data, indent=2, ensure_ascii=False)
    Path(path).write_text(content, encoding="utf-8")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def create_status(message: str) -> Status:
    """Create a spinner for a pending step.

    Returns:
        A ``Status`` instance suitable for use as a context manager.
    """
    return console.status(f"[cyan]{message}[/cyan]", spinner="dots")


def print_step_success(message: str) -> None:
    console.print(f"[bold green]+[/bold green] [green]{escape(message)}[/green]")


def print_step_warning(message: str) -> None:
    console.print(f"[bold yellow]![/bold yellow] [yellow]{escape(message)}[/yellow]")


def print_step_failure(message: str) -> None:
    console.print(f"[bold red]x[/bold red] [red]{escape(message)}[/red]")


def print_detail(message: str) -> None:
    """Print a dimmed diagnostic line below the current step."""
    console.print(f"  [dim]{escape(message)}[/dim]", highlight=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_boxed(text: str, border_style: str = "blue") -> None:
    """Print *text* inside a rounded, bordered block with a blank-line margin."""
    console.print()
    console.print(
        Panel(
            f"[bold cyan]{escape(text)}[/bold cyan]",
            box=box.ROUNDED,
            border_style=border_style,
            padding=(1, 2),
            expand=False,
        )
    )
    console.print()
