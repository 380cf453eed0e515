"""Utility functions for Musings.

This module contains the small string and path helpers shared by the
ingestion and assembly pipelines.

Key functions:
    slugify: Convert a post title to a URL slug.
    extract_title: Find the first level-1 heading in body lines.
    make_snippet: Truncate post content for cards and feed summaries.
    parse_tags: Split a comma-separated tag value.
    parse_timestamp: Parse a frontmatter timestamp.
    format_timestamp: Format a timestamp for frontmatter.
    is_markdown: Check if a path is a Markdown post.
    join_root_url: Join a base URL with a path.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SNIPPET_LENGTH = 150
SNIPPET_MARKER = "..."
UNTITLED = "Untitled"

_SLUG_STRIP_RE = re.compile(r"[^a-z0-9-]")
_SLUG_DASHES_RE = re.compile(r"-{2,}")


def slugify(title: str) -> str:
    """Convert a post title to a URL-friendly slug.

    Lowercases the title, joins whitespace-separated words with hyphens,
    drops every character outside ``[a-z0-9-]``, collapses repeated hyphens
    and trims hyphens from both ends. The result may be empty.

    Args:
        title: Post title.

    Returns:
        URL-friendly slug.

    Examples:
        >>> slugify("Hello World")
        'hello-world'

        >>> slugify("  C++ & Go!! ")
        'c-go'
    """
    slug = "-".join(title.lower().split())
    slug = _SLUG_STRIP_RE.sub("", slug)
    slug = _SLUG_DASHES_RE.sub("-", slug)
    return slug.strip("-")


def extract_title(lines: list[str]) -> tuple[str, int | None]:
    """Find the first level-1 heading in a list of body lines.

    Args:
        lines: Body lines in file order.

    Returns:
        Tuple of (title, index of the heading line). The index is None and the
        title is "Untitled" when no heading exists.
    """
    for index, line in enumerate(lines):
        if line.startswith("# "):
            return line[2:].strip(), index
    return UNTITLED, None


def make_snippet(content: str, limit: int = SNIPPET_LENGTH) -> str:
    """Truncate content to ``limit`` characters, marking the cut.

    Args:
        content: Raw Markdown content.
        limit: Maximum number of characters kept.

    Returns:
        The content unchanged if short enough, otherwise the first ``limit``
        characters followed by an ellipsis marker.
    """
    if len(content) > limit:
        return content[:limit] + SNIPPET_MARKER
    return content


def parse_tags(value: str) -> list[str]:
    """Split a comma-separated tag list, trimming each entry.

    Examples:
        >>> parse_tags("go, blogging ,")
        ['go', 'blogging']
    """
    tags = [tag.strip() for tag in value.split(",")]
    return [tag for tag in tags if tag]


def parse_bool(value: str) -> bool:
    """Return True only for a case-insensitive ``true``."""
    return value.strip().lower() == "true"


def parse_timestamp(value: str) -> datetime:
    """Parse a ``YYYY-MM-DD HH:MM:SS`` timestamp as UTC.

    Args:
        value: Timestamp text from frontmatter.

    Returns:
        Timezone-aware datetime in UTC.

    Raises:
        ValueError: If the value does not match the format.
    """
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime for a frontmatter line."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)


def utc_now() -> datetime:
    """Return the current UTC time truncated to whole seconds.

    Frontmatter stores whole seconds, so truncating keeps a repaired file
    and the in-memory post identical.
    """
    return datetime.now(timezone.utc).replace(microsecond=0)


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown post.

    Args:
        path: Path to check.

    Returns:
        True if the file has a lowercase ``.md`` extension.
    """
    return path.suffix == ".md"


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com', '/about.html')
        'https://example.com/about.html'

        >>> join_root_url('https://example.com/', 'about.html')
        'https://example.com/about.html'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"
