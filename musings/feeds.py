"""Feed generation for Musings.

This module serializes the published posts of a blog as syndication feeds.
Both formats see the same input: posts with ``published`` set, in the
collection's existing newest-first order.

Classes:
    FeedSettings: Site-level values injected into every feed.
    FeedGenerator: Abstract base class for feed generators.
    RSSGenerator: Generates the RSS 2.0 feed (rss.xml).
    AtomGenerator: Generates the Atom feed (atom.xml).
    FeedRegistry: Registry for managing feed generators.

Functions:
    create_default_feed_registry: Create a registry with the RSS and Atom generators.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import DEFAULT_CONFIG
from .protocols import Clock
from .utils import join_root_url, utc_now

if TYPE_CHECKING:
    from .content import Post

logger = logging.getLogger(__name__)

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
ATOM_NS = "http://www.w3.org/2005/Atom"


@dataclass
class FeedSettings:
    """Site-level values used by the feeds.

    Attributes:
        base_url: Absolute site URL that post links are built on.
        title: Feed title.
        description: Feed description (RSS) or subtitle (Atom).
        language: RSS channel language.
        author: Atom feed author name; omitted when empty.
    """

    base_url: str = DEFAULT_CONFIG["base_url"]
    title: str = DEFAULT_CONFIG["title"]
    description: str = DEFAULT_CONFIG["description"]
    language: str = DEFAULT_CONFIG["language"]
    author: str = DEFAULT_CONFIG["author"]

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> FeedSettings:
        """Build settings from a configuration dictionary."""
        return cls(
            base_url=str(config.get("base_url") or cls.base_url),
            title=str(config.get("title") or cls.title),
            description=str(config.get("description") or ""),
            language=str(config.get("language") or ""),
            author=str(config.get("author") or ""),
        )

    def post_url(self, post: Post) -> str:
        """Return the absolute URL of a post page."""
        return join_root_url(self.base_url, post.filename)


def published_posts(posts: Iterable[Post]) -> list[Post]:
    """Return the published posts, keeping their order."""
    return [post for post in posts if post.published]


def rfc1123(value: datetime) -> str:
    """Format a datetime as RFC 1123 with a numeric zone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value)


def rfc3339(value: datetime) -> str:
    """Format a datetime as RFC 3339, using ``Z`` for UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat(timespec="seconds")
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _text(parent: ET.Element, tag: str, value: str, **attrs: str) -> ET.Element:
    element = ET.SubElement(parent, tag, attrs)
    element.text = value
    return element


def _serialize(root: ET.Element) -> str:
    ET.indent(root, space="  ")
    return XML_HEADER + ET.tostring(root, encoding="unicode") + "\n"


class FeedGenerator(ABC):
    """Abstract base class for feed generators.

    Subclasses implement specific feed formats. New formats can be added
    by creating new subclasses and registering them.
    """

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output filename for this feed.

        Returns:
            Filename such as 'rss.xml' or 'atom.xml'.
        """
        ...

    @abstractmethod
    def generate(self, posts: Iterable[Post], settings: FeedSettings) -> str:
        """Generate feed content from posts.

        Args:
            posts: Posts in collection order; unpublished ones are skipped.
            settings: Site-level feed settings.

        Returns:
            Complete XML document.
        """
        ...

    def write(
        self, output_dir: Path, posts: Iterable[Post], settings: FeedSettings
    ) -> Path:
        """Generate and write the feed to the output directory.

        Args:
            output_dir: Directory to write the feed file to.
            posts: Posts to include.
            settings: Site-level feed settings.

        Returns:
            Path of the written file.
        """
        content = self.generate(posts, settings)
        output_path = output_dir / self.filename
        output_path.write_text(content, encoding="utf-8")
        logger.info("Generated %s", output_path)
        return output_path


class RSSGenerator(FeedGenerator):
    """Generates an RSS 2.0 feed.

    The channel ``pubDate`` comes from the newest published post's creation
    date. Each item links to the post page and uses it as its GUID.
    """

    @property
    def filename(self) -> str:
        """Return RSS filename."""
        return "rss.xml"

    def generate(self, posts: Iterable[Post], settings: FeedSettings) -> str:
        items = published_posts(posts)

        rss = ET.Element("rss", version="2.0")
        channel = ET.SubElement(rss, "channel")
        _text(channel, "title", settings.title)
        _text(channel, "link", settings.base_url)
        _text(channel, "description", settings.description)
        if settings.language:
            _text(channel, "language", settings.language)
        if items:
            _text(channel, "pubDate", rfc1123(items[0].created_date))

        for post in items:
            link = settings.post_url(post)
            item = ET.SubElement(channel, "item")
            _text(item, "title", post.title)
            _text(item, "link", link)
            _text(item, "description", post.content_snippet_html)
            _text(item, "pubDate", rfc1123(post.created_date))
            _text(item, "guid", link)

        return _serialize(rss)


class AtomGenerator(FeedGenerator):
    """Generates an Atom feed.

    The feed ``updated`` value comes from the newest published post's update
    date; with no published posts the clock time is used so the document
    stays valid.
    """

    def __init__(self, clock: Clock | None = None):
        self.clock = clock or utc_now

    @property
    def filename(self) -> str:
        """Return Atom filename."""
        return "atom.xml"

    def generate(self, posts: Iterable[Post], settings: FeedSettings) -> str:
        entries = published_posts(posts)

        feed = ET.Element("feed", xmlns=ATOM_NS)
        _text(feed, "title", settings.title)
        if settings.description:
            _text(feed, "subtitle", settings.description)
        _text(feed, "id", settings.base_url)
        updated = entries[0].updated_date if entries else self.clock()
        _text(feed, "updated", rfc3339(updated))
        if settings.author:
            author = ET.SubElement(feed, "author")
            _text(author, "name", settings.author)

        for post in entries:
            link = settings.post_url(post)
            entry = ET.SubElement(feed, "entry")
            _text(entry, "title", post.title)
            _text(entry, "id", link)
            ET.SubElement(entry, "link", href=link)
            _text(entry, "updated", rfc3339(post.updated_date))
            _text(entry, "summary", post.content_snippet_html, type="html")
            _text(entry, "content", post.content_html, type="html")

        return _serialize(feed)


class FeedRegistry:
    """Registry for managing feed generators.

    Attributes:
        _generators: List of registered feed generators.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._generators: list[FeedGenerator] = []

    def register(self, generator: FeedGenerator) -> None:
        """Register a feed generator.

        Args:
            generator: Feed generator to register.
        """
        self._generators.append(generator)

    def __iter__(self):
        return iter(self._generators)

    def generate_all(
        self,
        output_dir: Path,
        posts: Iterable[Post],
        settings: FeedSettings,
    ) -> list[Path]:
        """Generate all registered feeds in registration order.

        Args:
            output_dir: Directory to write feed files to.
            posts: Posts in collection order.
            settings: Site-level feed settings.

        Returns:
            Paths of the written feeds.
        """
        # Convert to list to allow multiple iterations
        posts_list = list(posts)
        return [
            generator.write(output_dir, posts_list, settings)
            for generator in self._generators
        ]


def create_default_feed_registry(
    clock: Clock | None = None,
) -> FeedRegistry:
    """Create a registry with default feed generators.

    Returns:
        FeedRegistry configured with RSS and Atom generators.
    """
    registry = FeedRegistry()
    registry.register(RSSGenerator())
    registry.register(AtomGenerator(clock=clock))
    return registry
