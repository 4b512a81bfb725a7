"""
Module page rendering.

Renders a ``Module`` through the packaged ``module.html`` Jinja2 template.
The template is loaded once per ``ModuleRenderer`` and reused for every
module of a run.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateError,
    select_autoescape,
)

from docmirror.errors import RenderError
from docmirror.model import Module

TEMPLATE_DIR = Path(__file__).parent / "templates"
MODULE_TEMPLATE = "module.html"


def render(module: Module, template: Template) -> str:
    """Render ``module`` with an already loaded template.

    Pure and deterministic: the same module and template always give the
    same text.

    Raises:
        RenderError: If the template engine fails
    """
    try:
        return template.render(module=module)
    except TemplateError as e:
        raise RenderError(
            f"Unable to render documentation for `{module.name}`: {e}",
            cause=e,
        ).with_context(module=module.name, stage="render") from e


class ModuleRenderer:
    """Render module pages from the packaged template.

    Manifesto:
        Templates handle formatting; the record builder handles content.
        The template only looks fields up, it never decides what a module
        contains.

    Features:
        - Load the template once, render many modules
        - HTML autoescaping for names, types and comments
        - Undefined lookups fail loudly as ``RenderError``

    Examples:
        >>> renderer = ModuleRenderer()
        >>> html = renderer.render(Module("std.list", Record()))
        >>> "std.list" in html
        True

    Tags:
        - renderer
        - template
        - jinja2
    """

    template_name: str = MODULE_TEMPLATE

    def __init__(self, template_dir: Path | None = None):
        self.template_dir = Path(template_dir) if template_dir else TEMPLATE_DIR

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        try:
            self.template = self.env.get_template(self.template_name)
        except TemplateError as e:
            raise RenderError(
                f"Unable to load template `{self.template_name}`: {e}",
                path=self.template_dir / self.template_name,
                cause=e,
            ).with_context(stage="render") from e

    def render(self, module: Module) -> str:
        """Render one module page.

        Args:
            module: Module to document

        Returns:
            Rendered HTML
        """
        return render(module, self.template)
