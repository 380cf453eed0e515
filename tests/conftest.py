"""Shared fixtures: a fixed clock and a Post factory."""

from datetime import datetime, timezone

import pytest

from musings.content import Post, PostLoader

FIXED_NOW = datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def loader():
    return PostLoader(clock=lambda: FIXED_NOW)


@pytest.fixture
def make_post():
    def factory(
        title,
        created=None,
        updated=None,
        published=False,
        tags=None,
        slug=None,
        content="Body text",
    ):
        created = created or datetime(2024, 1, 1, tzinfo=timezone.utc)
        return Post(
            title=title,
            content=content,
            content_html=f"<p>{content}</p>\n",
            content_snippet=content,
            content_snippet_html=f"<p>{content}</p>\n",
            created_date=created,
            updated_date=updated or created,
            slug=slug if slug is not None else title.lower().replace(" ", "-"),
            tags=tags or [],
            published=published,
        )

    return factory
