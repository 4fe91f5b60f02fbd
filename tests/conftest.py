"""Shared pytest fixtures for the create-peachy-app test suite.

Provides reusable fixtures for:
- A fake Peachy template tree as ``git clone`` would leave it
- A fake command runner simulating git clone/init and npm install
- Configs pointing at temporary target directories
"""

from __future__ import annotations

import json
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from create_peachy_app.config import Config
from create_peachy_app.utils import console


# ---------------------------------------------------------------------------
# Template contents
# ---------------------------------------------------------------------------

TEMPLATE_URL = "https://example.test/peachy.git"
TEMPLATE_HISTORY_MARKER = "template-history"

SAMPLE_MANIFEST: dict[str, Any] = {
    "name": "peachy",
    "version": "2.3.1",
    "description": "A lightweight framework",
    "type": "module",
    "keywords": ["framework", "peachy"],
    "author": "Peach Author",
    "scripts": {"dev": "vite", "build": "vite build", "start": "vite preview"},
    "dependencies": {"@peach/component": "^1.0.0"},
    "license": "MIT",
}

SAMPLE_LAYOUT = textwrap.dedent(
    """\
    import { Peachy } from "@peach/component";
    import Header from "@components/Header";
    import Footer from "@components/Footer";
    import ThemeProvider from "@components/ThemeProvider";

    export default function RootLayout({ children }) {
      return (
        <ThemeProvider>
          <Header />
          <main>{children}</main>
          <Footer/>
        </ThemeProvider>
      );
    }
    """
)

COMPONENT_FILES = ["CodeBlock.js", "Footer.js", "Header.js", "Peach3dModel.js", "Button.js"]


def build_template(dest: Path, manifest: dict[str, Any] | None = None) -> Path:
    """Create a tree resembling a fresh clone of the Peachy template."""
    git_dir = dest / ".git"
    (git_dir / "refs" / "heads").mkdir(parents=True)
    (git_dir / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
    (git_dir / "refs" / "heads" / "main").write_text(TEMPLATE_HISTORY_MARKER, encoding="utf-8")

    app = dest / "src" / "app"
    (app / "docs").mkdir(parents=True)
    (app / "docs" / "page.js").write_text("export default () => 'docs';\n", encoding="utf-8")
    (app / "blog" / "posts").mkdir(parents=True)
    (app / "blog" / "posts" / "hello.md").write_text("# Hello\n", encoding="utf-8")
    (app / "layout.js").write_text(SAMPLE_LAYOUT, encoding="utf-8")
    (app / "page.js").write_text("export default () => 'landing';\n", encoding="utf-8")

    components = dest / "src" / "components"
    components.mkdir(parents=True)
    for name in COMPONENT_FILES:
        (components / name).write_text(f"// {name}\n", encoding="utf-8")

    (dest / "src" / "index.css").write_text("body { color: red; }\n", encoding="utf-8")
    (dest / "package.json").write_text(
        json.dumps(manifest if manifest is not None else SAMPLE_MANIFEST, indent=2),
        encoding="utf-8",
    )
    return dest


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """Stands in for ``run_command``.

    Understands ``git clone``, ``git init`` and ``npm install`` and applies
    their filesystem effects.  Any action listed in *fail* exits with 1.
    """

    def __init__(
        self,
        manifest: dict[str, Any] | None = None,
        fail: tuple[str, ...] = (),
        on_install: Callable[[Path], None] | None = None,
    ) -> None:
        self.manifest = manifest
        self.fail = set(fail)
        self.on_install = on_install
        self.calls: list[tuple[list[str], Path | None]] = []

    @property
    def actions(self) -> list[str]:
        return [cmd[1] for cmd, _ in self.calls]

    async def __call__(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ) -> tuple[int, str, str]:
        workdir = Path(cwd) if cwd else None
        self.calls.append((list(cmd), workdir))
        action = cmd[1]

        if action in self.fail:
            return (1, "", f"fatal: {action} failed")

        if action == "clone":
            build_template(Path(cmd[3]), self.manifest)
        elif action == "init":
            assert workdir is not None
            (workdir / ".git" / "refs" / "heads").mkdir(parents=True)
            (workdir / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")
        elif action == "install":
            assert workdir is not None
            (workdir / "node_modules").mkdir()
            if self.on_install is not None:
                self.on_install(workdir)
        return (0, "", "")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer overrides out of the tests."""
    for var in (
        "PEACHY_TEMPLATE_URL",
        "PEACHY_GIT",
        "PEACHY_PACKAGE_MANAGER",
        "PEACHY_COMMAND_TIMEOUT",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Stop Rich from wrapping long temporary paths in captured output."""
    monkeypatch.setattr(console, "width", 240)


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """A not-yet-existing project directory named ``my-app``."""
    return tmp_path / "my-app"


@pytest.fixture
def config(target_dir: Path) -> Config:
    return Config(target_dir=target_dir, template_url=TEMPLATE_URL)


@pytest.fixture
def template_tree(target_dir: Path) -> Path:
    """A cloned template already sitting in ``target_dir``."""
    return build_template(target_dir)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    """Factory for fake command runners with custom manifests or failures."""
    return FakeRunner


@pytest.fixture
def template_url() -> str:
    return TEMPLATE_URL


@pytest.fixture
def sample_manifest() -> dict[str, Any]:
    """The manifest every fake clone starts from."""
    return json.loads(json.dumps(SAMPLE_MANIFEST))


@pytest.fixture
def template_history_marker() -> str:
    return TEMPLATE_HISTORY_MARKER
