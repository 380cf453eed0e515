"""Post ingestion for Musings.

This module turns a Markdown source file into a Post. Metadata comes from the
frontmatter block, the title from the first level-1 heading, and the slug from
the title. Missing dates are defaulted from an injectable clock and written
back into the source file so the next run sees stable values.

Key classes:
- Post: Dataclass representing one parsed article.
- NormalizedPost: A Post plus the repair it needs, computed without side effects.
- PostLoader: Normalizes source text and repairs source files.
- PostLoadError: Raised when a post cannot be read or processed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from .frontmatter import Frontmatter, parse_frontmatter
from .protocols import Clock, MarkdownConverter
from .renderers import MarkdownRenderer
from .utils import (
    extract_title,
    format_timestamp,
    make_snippet,
    parse_bool,
    parse_tags,
    parse_timestamp,
    slugify,
    utc_now,
)

logger = logging.getLogger(__name__)

CREATED_KEY = "CreatedDate"
UPDATED_KEY = "UpdatedDate"
TAGS_KEY = "Tags"
PUBLISHED_KEY = "Published"


class PostLoadError(Exception):
    """Error while loading a post, with file context.

    Attributes:
        source_path: Path to the file or directory that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


@dataclass
class Post:
    """Represents one parsed article.

    Attributes:
        title: Text of the first level-1 heading, or "Untitled".
        content: Body Markdown without the metadata block and title heading.
        content_html: Rendered HTML of ``content``.
        content_snippet: First 150 characters of ``content``, marked if cut.
        content_snippet_html: Rendered HTML of ``content_snippet``.
        created_date: Creation timestamp (UTC).
        updated_date: Last update timestamp (UTC).
        slug: URL-safe identifier derived from the title.
        tags: Tags in source order.
        published: Whether the post appears in feeds.
        source_path: File the post was read from, if any.
    """

    title: str
    content: str
    content_html: str
    content_snippet: str
    content_snippet_html: str
    created_date: datetime
    updated_date: datetime
    slug: str
    tags: list[str] = field(default_factory=list)
    published: bool = False
    source_path: Path | None = None

    @property
    def filename(self) -> str:
        """Output filename for the post page."""
        return f"{self.slug}.html"


@dataclass
class NormalizedPost:
    """Result of normalizing source text.

    Attributes:
        post: The normalized Post.
        frontmatter: Parsed frontmatter of the source text.
        defaulted: Date fields that were missing or malformed, mapped to the
            values that should be persisted.
    """

    post: Post
    frontmatter: Frontmatter
    defaulted: dict[str, datetime] = field(default_factory=dict)

    @property
    def needs_repair(self) -> bool:
        return bool(self.defaulted)

    def repaired_text(self) -> str:
        """Return the source text with the defaulted dates persisted."""
        updates = {
            key: format_timestamp(value) for key, value in self.defaulted.items()
        }
        return self.frontmatter.render(updates)


class PostLoader:
    """Builds Post objects from Markdown sources.

    Reading a post may write it: when a date had to be defaulted the source
    file is rewritten with the computed value, which is why the public entry
    point is named ``load_and_maybe_repair``.

    Attributes:
        renderer: Markdown converter used for content and snippets.
        clock: Callable returning the current time as an aware datetime.
        repair: Whether defaulted dates are written back to the source.
    """

    def __init__(
        self,
        renderer: MarkdownConverter | None = None,
        clock: Clock | None = None,
        repair: bool = True,
    ):
        self.renderer = renderer or MarkdownRenderer()
        self.clock = clock or utc_now
        self.repair = repair

    def normalize(self, text: str, source: Path | str = "<string>") -> NormalizedPost:
        """Normalize source text into a Post without touching the filesystem.

        Args:
            text: Raw file content.
            source: Where the text came from, used in log messages.

        Returns:
            NormalizedPost with the Post and any dates needing repair.
        """
        frontmatter = parse_frontmatter(text)
        metadata = frontmatter.metadata
        defaulted: dict[str, datetime] = {}

        created = self._parse_date(metadata, CREATED_KEY, source)
        if created is None:
            created = self._now()
            defaulted[CREATED_KEY] = created
            if CREATED_KEY not in metadata:
                logger.info(
                    "Missing %s in %s, setting to current time", CREATED_KEY, source
                )

        updated = self._parse_date(metadata, UPDATED_KEY, source)
        if updated is None:
            updated = created
            defaulted[UPDATED_KEY] = updated
            if UPDATED_KEY not in metadata:
                logger.info(
                    "Missing %s in %s, setting same as %s",
                    UPDATED_KEY,
                    source,
                    CREATED_KEY,
                )

        body_lines = list(frontmatter.body_lines)
        title, title_index = extract_title(body_lines)
        if title_index is not None:
            del body_lines[title_index]
        content = "\n".join(body_lines).strip("\n")
        snippet = make_snippet(content)

        post = Post(
            title=title,
            content=content,
            content_html=self.renderer.render(content),
            content_snippet=snippet,
            content_snippet_html=self.renderer.render(snippet),
            created_date=created,
            updated_date=updated,
            slug=slugify(title),
            tags=parse_tags(metadata.get(TAGS_KEY, "")),
            published=parse_bool(metadata.get(PUBLISHED_KEY, "")),
            source_path=Path(source) if isinstance(source, Path) else None,
        )
        return NormalizedPost(post=post, frontmatter=frontmatter, defaulted=defaulted)

    def load_and_maybe_repair(self, path: Path) -> Post:
        """Load a post file, rewriting it if dates had to be defaulted.

        A failed rewrite is logged and ignored; the returned Post already
        carries the defaulted dates.

        Args:
            path: Path to the Markdown file.

        Returns:
            The normalized Post.

        Raises:
            PostLoadError: If the file cannot be read or decoded.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PostLoadError(path, f"Could not read post: {exc}", exc) from exc

        normalized = self.normalize(text, path)
        if normalized.needs_repair and self.repair:
            self._repair(path, normalized)
        return normalized.post

    def _repair(self, path: Path, normalized: NormalizedPost) -> None:
        try:
            path.write_text(normalized.repaired_text(), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not update %s with missing date fields: %s", path, exc)
            return
        logger.info(
            "Updated %s with %s", path, ", ".join(sorted(normalized.defaulted))
        )

    def _parse_date(
        self, metadata: dict[str, str], key: str, source: Path | str
    ) -> datetime | None:
        value = metadata.get(key)
        if value is None:
            return None
        try:
            return parse_timestamp(value)
        except ValueError:
            logger.warning(
                "Invalid %s %r in %s. Must be in format 'YYYY-MM-DD HH:MM:SS'",
                key,
                value,
                source,
            )
            return None

    def _now(self) -> datetime:
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc).replace(microsecond=0)
