"""Markdown rendering for Musings.

Posts are rendered with mistune and a custom HTML renderer that adds
heading anchors, syntax highlighting and new-tab external links.

Key classes:
- MarkdownRenderer: Renders Markdown text to an HTML fragment.
"""

from __future__ import annotations

import re

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_PLUGINS = [
    "table",
    "footnotes",
    "strikethrough",
    "url",
    "def_list",
    "math",
    "superscript",
    "subscript",
    "task_lists",
]

_TAG_RE = re.compile(r"<[^>]+>")


def generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text, possibly containing inline HTML.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = _TAG_RE.sub("", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _PostHTMLRenderer(mistune.HTMLRenderer):
    """HTML renderer with heading ids, highlighting and new-tab links."""

    def __init__(self):
        super().__init__(escape=False)
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        """Render a heading with a unique auto-generated id."""
        base_id = generate_heading_id(text) or "section"

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def link(self, text: str, url: str, title: str | None = None) -> str:
        html = super().link(text, url, title)
        if url.startswith(("http://", "https://")):
            return html.replace("<a ", '<a target="_blank" ', 1)
        return html

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block, highlighted with Pygments when the language is known."""
        lang = info.split()[0] if info else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                return highlight(code, lexer, HtmlFormatter(cssclass="highlight"))
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown content to HTML.

    Supports tables, footnotes, strikethrough, definition lists, math
    passthrough, super/subscript, task lists and auto-generated heading ids.
    Backslash line breaks come with CommonMark.
    """

    def __init__(self, plugins: list[str] | None = None):
        self.plugins = list(plugins) if plugins is not None else list(MARKDOWN_PLUGINS)

    def render(self, text: str) -> str:
        """Render Markdown content to HTML.

        A fresh renderer is built per call so heading ids never leak between
        documents.

        Args:
            text: Markdown source content.

        Returns:
            Rendered HTML fragment.
        """
        markdown = mistune.create_markdown(
            renderer=_PostHTMLRenderer(), plugins=self.plugins
        )
        return markdown(text)


def highlight_css(selector: str = ".highlight") -> str:
    """Return Pygments CSS for highlighted code blocks."""
    return HtmlFormatter().get_style_defs(selector)
