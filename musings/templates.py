"""Template rendering engine for Musings.

This module uses Jinja2 to render the index and post pages. Templates are
looked up first in an optional theme directory, then in the templates shipped
with the package, so a theme only needs to provide the files it changes.

Key class:
- TemplateEngine: Handles template loading and rendering.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    select_autoescape,
)
from markupsafe import Markup

from .renderers import highlight_css
from .utils import join_root_url

# Path to the templates shipped with the package
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

INDEX_TEMPLATE = "index.html"
POST_TEMPLATE = "post.html"
STYLESHEET = "style.css"


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Undefined variables raise instead of rendering as empty strings, so a
    template referring to a missing field fails the build.

    Attributes:
        search_path: Directories searched for templates, in priority order.
        data: Global site data available to every template as ``site``.
        env: Jinja2 environment.
    """

    def __init__(self, data: dict[str, Any], theme_dir: Path | None = None):
        """Initialize the template engine.

        Args:
            data: Global site data (usually the loaded configuration).
            theme_dir: Optional directory whose templates override the defaults.
        """
        self.data = data
        self.search_path: list[Path] = []
        if theme_dir is not None:
            self.search_path.append(theme_dir)
        self.search_path.append(DEFAULT_TEMPLATES_DIR)
        self.env = Environment(
            loader=FileSystemLoader([str(p) for p in self.search_path]),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined,
        )
        self._install_globals()

    def _install_globals(self) -> None:
        """Install global variables and functions in the Jinja environment."""
        self.env.globals["site"] = self.data
        self.env.globals["url_for"] = self._url_for
        self.env.globals["pygments_css"] = self._pygments_css

    @staticmethod
    def _pygments_css() -> Markup:
        """Return Pygments CSS styles for syntax highlighting.

        Returns:
            CSS string for the .highlight class, marked safe for <style> blocks.
        """
        return Markup(highlight_css())

    def _url_for(self, path: str) -> str:
        """Generate a URL for a path, applying the base URL if configured.

        Args:
            path: Path to generate URL for.

        Returns:
            Full URL with the base URL prefix if configured.
        """
        if path.startswith(("http://", "https://", "//")):
            return path
        return join_root_url(str(self.data.get("base_url") or ""), path)

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a named template.

        Args:
            template_name: Template file name, e.g. "index.html".
            context: Variables to make available in the template.

        Returns:
            Rendered document.
        """
        template = self.env.get_template(template_name)
        return template.render(**context)

    def render_string(self, template: str, context: dict[str, Any]) -> str:
        """Render a template string.

        Args:
            template: Template string to render.
            context: Variables to make available in the template.

        Returns:
            Rendered string.
        """
        tmpl = self.env.from_string(template)
        return tmpl.render(**context)

    def find_file(self, name: str) -> Path:
        """Locate a non-template file (such as the stylesheet) on the search path.

        Args:
            name: File name relative to a template directory.

        Returns:
            Path to the first match.

        Raises:
            TemplateNotFound: If no directory provides the file.
        """
        for directory in self.search_path:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        raise TemplateNotFound(name)
