"""Best-effort customization of the application files in a cloned template.

Each operation is independent: ``AppCustomizer.apply`` runs all of them and
records failures instead of raising, so one broken file never blocks the
others or the pipeline.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from ..config import Config
from .templates import TemplateRenderer

STYLESHEET_TEMPLATE = "index.css.j2"
PAGE_TEMPLATE = "page.js.j2"


def strip_layout_symbols(text: str, symbols: Iterable[str] = ("Header", "Footer")) -> str:
    """Remove the imports and self-closing tags of *symbols* from layout source.

    Every line matching ``import <anything><symbol>`` is dropped, then every
    ``<Symbol/>`` (optionally with whitespace before the slash) is deleted.
    All other lines are kept verbatim and in order.
    """
    names = [re.escape(s) for s in symbols]
    if not names:
        return text
    alternation = "|".join(names)
    import_line = re.compile(rf"import\s+.*({alternation})")
    kept = [line for line in text.split("\n") if not import_line.search(line)]
    result = "\n".join(kept)
    for name in names:
        result = re.sub(rf"<{name}\s*/>", "", result)
    return result


@dataclass
class CustomizationReport:
    """Outcome of the customization operations."""

    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class AppCustomizer:
    """Rewrites the template's stylesheet, components, layout and page."""

    def __init__(self, config: Config, renderer: TemplateRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()

    def replace_stylesheet(self) -> None:
        self.renderer.render_to_file(STYLESHEET_TEMPLATE, self.config.stylesheet_path, {})

    def remove_components(self) -> list[Path]:
        """Delete the unwanted component files.

        Missing files are ignored.  Returns the files actually removed;
        the first other failure is raised after every file was attempted.
        """
        removed: list[Path] = []
        first_error: OSError | None = None
        for path in self.config.component_paths:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                first_error = first_error or exc
                continue
            removed.append(path)
        if first_error is not None:
            raise first_error
        return removed

    def patch_layout(self) -> bool:
        """Strip header/footer usage from the layout file.

        Returns ``False`` when there is no layout file to patch.
        """
        layout = self.config.layout_path
        if not layout.is_file():
            return False
        content = layout.read_text(encoding="utf-8")
        patched = strip_layout_symbols(content, self.config.rewrite.layout_symbols)
        layout.write_text(patched, encoding="utf-8")
        return True

    def replace_page(self) -> None:
        self.renderer.render_to_file(PAGE_TEMPLATE, self.config.page_path, {})

    def apply(self) -> CustomizationReport:
        """Run every operation, collecting failures rather than raising."""
        report = CustomizationReport()
        operations: list[tuple[str, Callable[[], object]]] = [
            ("stylesheet", self.replace_stylesheet),
            ("components", self.remove_components),
            ("layout", self.patch_layout),
            ("page", self.replace_page),
        ]
        for name, operation in operations:
            try:
                outcome = operation()
            except Exception as exc:  # any failure here is non-blocking
                report.errors.append(f"{name}: {exc}")
                continue
            if outcome is False:
                report.skipped.append(name)
            else:
                report.applied.append(name)
        return report
