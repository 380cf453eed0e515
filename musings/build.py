"""Site building functionality for Musings.

This module assembles the static site from a directory of posts. The steps
run in a fixed order and the first failure aborts the build; files written
by earlier steps are left in place.

1. Ensure the output directory exists.
2. Load the posts.
3. Copy the stylesheet and the images/ subtree.
4. Render index.html and one page per post.
5. Write rss.xml and atom.xml.

Key functions:
- build_site: Load configuration for a project and build it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import TemplateSyntaxError

from .assets import AssetCopier
from .blog import Blog
from .collections import PostCollection
from .config import DEFAULT_CONFIG, load_config, resolve_path
from .content import Post, PostLoadError
from .feeds import FeedRegistry, FeedSettings, create_default_feed_registry
from .templates import INDEX_TEMPLATE, POST_TEMPLATE, STYLESHEET, TemplateEngine

logger = logging.getLogger(__name__)

LATEST_POSTS_COUNT = 4


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the source file that caused the error.
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
class BuildResult:
    """Result of a site build operation.

    Attributes:
        posts: All posts, newest first.
        output_dir: Directory where the site was built.
        written: Files written during the build, in order.
    """

    posts: PostCollection
    output_dir: Path
    written: list[Path] = field(default_factory=list)


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    # Handle common Jinja2/template errors
    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateNotFound":
        return f"Template not found: {error_msg}"
    if error_type == "TypeError":
        return f"Type error: {error_msg}"
    if error_type == "AttributeError":
        return f"Attribute error: {error_msg}"

    return f"{error_type}: {error_msg}"


@contextmanager
def _phase(source_path: Path, action: str) -> Iterator[None]:
    """Wrap one build step so any failure surfaces as a BuildError."""
    try:
        yield
    except BuildError:
        raise
    except TemplateSyntaxError as exc:
        raise BuildError(
            Path(exc.filename) if exc.filename else source_path,
            f"Template syntax error on line {exc.lineno}: {exc.message}",
            exc,
        ) from exc
    except Exception as exc:
        raise BuildError(
            source_path, f"Error {action}: {_format_error_message(exc)}", exc
        ) from exc


class SiteGenerator:
    """Builds the static site for one posts directory.

    Attributes:
        posts_dir: Directory containing the Markdown posts.
        output_dir: Directory where the site is written.
        config: Site configuration, defaults applied.
        blog: Post repository.
        engine: Template engine for the HTML pages.
        feeds: Registry of feed generators.
    """

    def __init__(
        self,
        posts_dir: Path,
        output_dir: Path,
        config: dict[str, Any] | None = None,
        blog: Blog | None = None,
        engine: TemplateEngine | None = None,
        feeds: FeedRegistry | None = None,
    ):
        self.posts_dir = Path(posts_dir)
        self.output_dir = Path(output_dir)
        self.config = {**DEFAULT_CONFIG, **(config or {})}
        self.blog = blog or Blog(self.posts_dir)
        theme_dir = self.config.get("theme_dir")
        self.engine = engine or TemplateEngine(
            self.config, theme_dir=Path(theme_dir) if theme_dir else None
        )
        self.feeds = feeds or create_default_feed_registry()
        self.assets = AssetCopier(self.output_dir)

    def generate(self) -> BuildResult:
        """Build the complete site.

        Returns:
            BuildResult with the loaded posts and the files written.

        Raises:
            BuildError: On the first failing step.
        """
        with _phase(self.output_dir, "creating output directory"):
            self.output_dir.mkdir(parents=True, exist_ok=True)

        posts = self._load_posts()
        written: list[Path] = []

        with _phase(self.output_dir / STYLESHEET, "copying style.css"):
            stylesheet = self.engine.find_file(STYLESHEET)
            written.append(self.assets.copy_stylesheet(stylesheet))

        with _phase(self.posts_dir / "images", "copying images"):
            written.extend(self.assets.copy_images(self.posts_dir))

        written.append(self._render_index(posts))
        written.extend(self._render_posts(posts))

        settings = FeedSettings.from_config(self.config)
        with _phase(self.output_dir, "generating feeds"):
            written.extend(self.feeds.generate_all(self.output_dir, posts, settings))

        return BuildResult(posts=posts, output_dir=self.output_dir, written=written)

    def _load_posts(self) -> PostCollection:
        try:
            return self.blog.load_posts()
        except PostLoadError as exc:
            raise BuildError(
                exc.source_path, f"Error loading posts: {exc.message}", exc
            ) from exc

    def _render_index(self, posts: PostCollection) -> Path:
        target = self.output_dir / "index.html"
        with _phase(target, "generating index"):
            rendered = self.engine.render(
                INDEX_TEMPLATE,
                {
                    "site": self.config,
                    "posts": posts,
                    "latest_posts": posts.latest(LATEST_POSTS_COUNT),
                },
            )
            _write_page(target, rendered)
        return target

    def _render_posts(self, posts: PostCollection) -> list[Path]:
        written = []
        for post in posts:
            written.append(self._render_post(post))
        return written

    def _render_post(self, post: Post) -> Path:
        target = self.output_dir / post.filename
        with _phase(post.source_path or target, "generating post"):
            rendered = self.engine.render(
                POST_TEMPLATE, {"site": self.config, "post": post}
            )
            _write_page(target, rendered)
        return target


def _write_page(path: Path, rendered: str) -> None:
    """Write a rendered page.

    Args:
        path: Destination file.
        rendered: Rendered HTML content.
    """
    with open(path, "w", encoding="utf-8") as f:
        f.write(rendered)


def build_site(
    project_root: Path,
    overrides: dict[str, Any] | None = None,
) -> BuildResult:
    """Build the site for a project.

    Args:
        project_root: Root directory of the project (holds musings.yaml).
        overrides: Configuration values that win over musings.yaml.

    Returns:
        BuildResult containing all posts and the output directory.
    """
    config = load_config(project_root, overrides)
    posts_dir = resolve_path(project_root, config["posts_dir"]) or project_root
    output_dir = resolve_path(project_root, config["output_dir"]) or project_root
    config["theme_dir"] = resolve_path(project_root, config.get("theme_dir"))
    result = SiteGenerator(posts_dir, output_dir, config=config).generate()
    logger.info("Built %d posts into %s", len(result.posts), result.output_dir)
    return result
