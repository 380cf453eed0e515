"""Command-line interface for Musings.

This module defines the CLI commands using Click framework.

Commands:
- publish: Build the static site (pages, assets and feeds) into the output directory.
- sync: Load posts for pushing to external platforms (no platform is wired up yet).
- new: Create a new post with a complete frontmatter block.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
import questionary

from . import __version__
from .blog import Blog
from .config import load_config, resolve_path
from .content import CREATED_KEY, PUBLISHED_KEY, TAGS_KEY, UPDATED_KEY, PostLoadError
from .frontmatter import Frontmatter, parse_frontmatter
from .utils import extract_title, format_timestamp, is_markdown, slugify, utc_now

_PATH_TYPE = click.Path(file_okay=False, path_type=Path)


@click.group()
@click.version_option(version=__version__, prog_name="musings")
@click.option("-v", "--verbose", is_flag=True, help="Show progress messages")
def cli(verbose: bool):
    """A tool to publish markdown-based static blogs."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@cli.command()
@click.option("--posts-dir", type=_PATH_TYPE, help="Directory with Markdown posts")
@click.option("--output-dir", type=_PATH_TYPE, help="Directory for the built site")
@click.option("--base-url", help="Absolute site URL used in feeds")
def publish(posts_dir: Path | None, output_dir: Path | None, base_url: str | None):
    """Publish blog posts to a static website."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    click.echo("Publishing blog posts...")
    overrides = {
        "posts_dir": posts_dir,
        "output_dir": output_dir,
        "base_url": base_url,
    }
    try:
        result = build_site(project_root, overrides=overrides)
    except BuildError as exc:
        _report_failure("Publish failed:", project_root, exc.source_path, exc.message)
        raise SystemExit(1) from None
    published = len(result.posts.published())
    click.echo(
        f"Published {len(result.posts)} posts ({published} in feeds) "
        f"to {result.output_dir}"
    )


@cli.command()
@click.option("--posts-dir", type=_PATH_TYPE, help="Directory with Markdown posts")
def sync(posts_dir: Path | None):
    """Sync blog posts to external platforms."""
    project_root = Path.cwd()
    config = load_config(project_root, {"posts_dir": posts_dir})
    blog = Blog(resolve_path(project_root, config["posts_dir"]) or project_root)

    click.echo("Syncing blog posts to external platforms...")
    try:
        posts = blog.load_posts()
    except PostLoadError as exc:
        _report_failure("Sync failed:", project_root, exc.source_path, exc.message)
        raise SystemExit(1) from None
    click.echo(
        f"Loaded {len(posts)} posts ({len(posts.published())} published). "
        "No external platforms are configured; nothing was pushed."
    )


@cli.command()
@click.argument("title", required=False)
@click.option("--tags", default="", help="Comma-separated tags")
@click.option(
    "--publish", "published", is_flag=True, help="Mark the post as published"
)
@click.option("--posts-dir", type=_PATH_TYPE, help="Directory with Markdown posts")
def new(title: str | None, tags: str, published: bool, posts_dir: Path | None):
    """Create a new post with a complete frontmatter block."""
    project_root = Path.cwd()
    config = load_config(project_root, {"posts_dir": posts_dir})
    target_dir = resolve_path(project_root, config["posts_dir"]) or project_root

    if title is None:
        title = questionary.text(
            "Post title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        ).ask()
        if title is None:
            raise click.Abort()
        answer = questionary.confirm(
            "Publish in feeds?", default=False, style=_questionary_style()
        ).ask()
        if answer is None:
            raise click.Abort()
        published = published or answer

    title = title.strip()
    slug = slugify(title)
    if not slug:
        raise click.ClickException("Title must contain at least one letter or digit")

    target_path = target_dir / f"{slug}.md"
    if target_path.exists():
        raise click.ClickException(f"File already exists: {_display(target_path)}")

    # Another file may already produce the same page under a different name
    conflicting = _find_slug(target_dir, slug)
    if conflicting is not None:
        raise click.ClickException(
            f"A post with slug '{slug}' already exists: {_display(conflicting)}"
        )

    now = format_timestamp(utc_now())
    metadata = {CREATED_KEY: now, UPDATED_KEY: now}
    if tags.strip():
        metadata[TAGS_KEY] = tags.strip()
    metadata[PUBLISHED_KEY] = "true" if published else "false"

    target_dir.mkdir(parents=True, exist_ok=True)
    text = Frontmatter().render(metadata) + f"# {title}\n\n"
    target_path.write_text(text, encoding="utf-8")
    click.echo(f"Created {_display(target_path)}")


def _find_slug(posts_dir: Path, slug: str) -> Path | None:
    """Return the first post whose title maps to ``slug``, without repairing files."""
    if not posts_dir.exists():
        return None
    for path in sorted(posts_dir.rglob("*")):
        if not path.is_file() or not is_markdown(path):
            continue
        frontmatter = parse_frontmatter(path.read_text(encoding="utf-8"))
        title, _ = extract_title(frontmatter.body_lines)
        if slugify(title) == slug:
            return path
    return None


def _display(path: Path) -> Path:
    """Show a path relative to the working directory when possible."""
    try:
        return path.relative_to(Path.cwd())
    except ValueError:
        return path


def _report_failure(
    heading: str, project_root: Path, source_path: Path, message: str
) -> None:
    """Display a user-friendly error message."""
    try:
        rel_path = source_path.relative_to(project_root)
    except ValueError:
        rel_path = source_path
    click.echo(click.style(heading, fg="red", bold=True), err=True)
    click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
