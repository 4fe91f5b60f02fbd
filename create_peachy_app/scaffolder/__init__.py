"""create-peachy-app scaffolder -- rewrites a freshly cloned Peachy template.

Quick usage::

    from create_peachy_app.config import Config
    from create_peachy_app.scaffolder import AppCustomizer, customize_manifest

    config = Config(target_dir="my-app")
    customize_manifest(config.manifest_path, config.project_name)
    report = AppCustomizer(config).apply()
"""

from create_peachy_app.scaffolder.customize import (
    AppCustomizer,
    CustomizationReport,
    strip_layout_symbols,
)
from create_peachy_app.scaffolder.manifest import (
    ManifestError,
    customize_manifest,
    describe_scripts,
    format_scripts,
    rewrite_manifest,
)
from create_peachy_app.scaffolder.templates import TemplateRenderer

__all__ = [
    "AppCustomizer",
    "CustomizationReport",
    "ManifestError",
    "TemplateRenderer",
    "customize_manifest",
    "describe_scripts",
    "format_scripts",
    "rewrite_manifest",
    "strip_layout_symbols",
]
