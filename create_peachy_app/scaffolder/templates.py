"""Jinja2 template rendering for the files replaced in the cloned template.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``scaffolder/templates/`` directory shipped with the package and renders them
with project-specific context data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Renders the replacement stylesheet and page.

    Templates are ``.j2`` files under a configurable template directory.
    The packaged stylesheet and page are static and render with an empty
    context; ``render`` accepts variables for templates that use them.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"page.js.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and overwrite *output_path* with the result.

        The parent directory must already exist; nothing is created on the
        way, so a template that lost the directory surfaces as an error.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        out.write_text(content, encoding="utf-8")
        return out
