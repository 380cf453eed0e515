"""Post repository for Musings.

A Blog is a directory of Markdown posts. Loading it is a straight pipeline:
enumerate sources, load each one, collect, then sort newest first. Sorting
happens only after every post is loaded, so the result does not depend on the
order files were visited in.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .collections import PostCollection, sort_posts
from .content import Post, PostLoader, PostLoadError
from .utils import is_markdown

logger = logging.getLogger(__name__)


class Blog:
    """Collection of posts backed by a directory.

    Attributes:
        path: Directory containing the Markdown sources.
        loader: PostLoader used for each file.
        posts: Posts from the most recent load, newest first.
    """

    def __init__(self, path: Path | str, loader: PostLoader | None = None):
        self.path = Path(path)
        self.loader = loader or PostLoader()
        self.posts = PostCollection([])

    def iter_sources(self) -> list[Path]:
        """Return every Markdown file below the blog directory.

        Returns:
            Sorted list of paths with a ``.md`` extension.
        """
        return sorted(
            path
            for path in self.path.rglob("*")
            if path.is_file() and is_markdown(path)
        )

    def load_posts(self) -> PostCollection:
        """Load every post, replacing any previously loaded collection.

        The directory is created when missing, so a fresh blog loads as empty.
        Any failing post aborts the whole load.

        Returns:
            PostCollection sorted by creation date, newest first.

        Raises:
            PostLoadError: If the directory cannot be created or a post fails.
        """
        try:
            self.path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PostLoadError(
                self.path, f"Could not create posts directory: {exc}", exc
            ) from exc

        loaded = [self._load(path) for path in self.iter_sources()]
        self.posts = PostCollection(sort_posts(loaded))
        warn_duplicate_slugs(self.posts)
        return self.posts

    def _load(self, path: Path) -> Post:
        try:
            post = self.loader.load_and_maybe_repair(path)
        except PostLoadError:
            raise
        except Exception as exc:
            raise PostLoadError(path, f"Error parsing post: {exc}", exc) from exc
        logger.info("Loaded post: %s", post.title)
        return post


def warn_duplicate_slugs(posts: PostCollection) -> list[str]:
    """Log a warning for every slug shared by more than one post.

    Posts with the same slug are written to the same output file, so only one
    of them survives in the built site.

    Returns:
        The colliding slugs.
    """
    duplicates = []
    for slug, group in posts.by_slug().items():
        if len(group) < 2:
            continue
        duplicates.append(slug)
        sources = ", ".join(str(p.source_path or p.title) for p in group)
        logger.warning("Posts share the output file %s.html: %s", slug, sources)
    return duplicates
