from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .content import Post


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    """Sort posts by creation date, newest first.

    The sort is stable, so posts sharing a creation date keep their input order.
    """
    return sorted(posts, key=lambda p: p.created_date, reverse=True)


class PostCollection(Sequence[Post]):
    """Lightweight helper for working with lists of Posts in templates and code."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PostCollection(self._posts[item])
        return self._posts[item]

    def published(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.published)

    def drafts(self) -> PostCollection:
        return PostCollection(p for p in self._posts if not p.published)

    def with_tag(self, tag: str) -> PostCollection:
        return PostCollection(p for p in self._posts if tag in p.tags)

    def latest(self, count: int = 4) -> PostCollection:
        """Return the first ``count`` posts in collection order."""
        return PostCollection(self._posts[:count])

    def sorted(self) -> PostCollection:
        return PostCollection(sort_posts(self._posts))

    def tags(self) -> dict[str, PostCollection]:
        """Build an index mapping each tag to the posts carrying it."""
        index: dict[str, list[Post]] = {}
        for post in self._posts:
            for tag in post.tags:
                index.setdefault(tag, []).append(post)
        return {tag: PostCollection(posts) for tag, posts in index.items()}

    def by_slug(self) -> dict[str, list[Post]]:
        """Group posts by slug; more than one entry means an output collision."""
        groups: dict[str, list[Post]] = {}
        for post in self._posts:
            groups.setdefault(post.slug, []).append(post)
        return groups

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"
