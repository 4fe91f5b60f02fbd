"""create-peachy-app configuration.

Centralised, typed configuration for the initialization pipeline. Every fixed
value the pipeline relies on (template location, pruning set, rewrite set,
collaborator executables) lives here as a Pydantic v2 model so it can be
validated at construction time and overridden from the environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


DEFAULT_TEMPLATE_URL = "https://github.com/Sidmaz666/peachy.git"


class RewriteConfig(BaseModel):
    """Relative paths of the application files customized after cloning."""

    stylesheet: str = Field(default="src/index.css")
    components_dir: str = Field(default="src/components")
    component_files: list[str] = Field(
        default=["CodeBlock.js", "Footer.js", "Header.js", "Peach3dModel.js"],
        description="Component files deleted from the template",
    )
    layout: str = Field(default="src/app/layout.js")
    layout_symbols: list[str] = Field(
        default=["Header", "Footer"],
        description="Components whose imports and tags are stripped from the layout",
    )
    page: str = Field(default="src/app/page.js")


class Config(BaseModel):
    """Global create-peachy-app configuration.

    Instances are created once by the CLI entry point and passed to the
    ``Pipeline``. ``target_dir`` is always stored resolved.
    """

    target_dir: Path = Field(default=Path("."))
    template_url: str = Field(default=DEFAULT_TEMPLATE_URL)
    pruned_dirs: list[str] = Field(
        default=["src/app/docs", "src/app/blog"],
        description="Template directories removed unconditionally",
    )
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)
    manifest_name: str = Field(default="package.json")
    git_executable: str = Field(default="git")
    package_manager: str = Field(default="npm")
    command_timeout: float | None = Field(
        default=None, gt=0, description="Per-command timeout in seconds (None waits forever)"
    )

    def model_post_init(self, __context: Any) -> None:
        self.target_dir = Path(self.target_dir).resolve()

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_name(self) -> str:
        """Basename of the resolved target directory."""
        return self.target_dir.name

    @property
    def manifest_path(self) -> Path:
        return self.target_dir / self.manifest_name

    @property
    def pruned_paths(self) -> list[Path]:
        return [self.target_dir / rel for rel in self.pruned_dirs]

    @property
    def stylesheet_path(self) -> Path:
        return self.target_dir / self.rewrite.stylesheet

    @property
    def component_paths(self) -> list[Path]:
        base = self.target_dir / self.rewrite.components_dir
        return [base / name for name in self.rewrite.component_files]

    @property
    def layout_path(self) -> Path:
        return self.target_dir / self.rewrite.layout

    @property
    def page_path(self) -> Path:
        return self.target_dir / self.rewrite.page

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, target_dir: str | Path) -> "Config":
        """Build a ``Config`` for *target_dir*, applying environment overrides.

        Recognised variables (all optional):
            PEACHY_TEMPLATE_URL, PEACHY_GIT, PEACHY_PACKAGE_MANAGER,
            PEACHY_COMMAND_TIMEOUT.
        """
        kwargs: dict[str, Any] = {"target_dir": Path(target_dir)}
        if os.environ.get("PEACHY_TEMPLATE_URL"):
            kwargs["template_url"] = os.environ["PEACHY_TEMPLATE_URL"]
        if os.environ.get("PEACHY_GIT"):
            kwargs["git_executable"] = os.environ["PEACHY_GIT"]
        if os.environ.get("PEACHY_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["PEACHY_PACKAGE_MANAGER"]
        if os.environ.get("PEACHY_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = float(os.environ["PEACHY_COMMAND_TIMEOUT"])
        return cls(**kwargs)
