"""Musings static blog generator.

This package turns a directory of Markdown posts with a small frontmatter
header into a static website: an index page, one page per post, and
RSS/Atom feeds.

The main entry point is the CLI module, which provides commands for
publishing the site, syncing posts, and creating new posts.

Architecture:
- frontmatter: splits a source file into metadata and body lines.
- content: normalizes metadata into Post records and repairs sources.
- blog: loads every post in a directory, newest first.
- renderers: converts Markdown to HTML.
- build: assembles pages, assets and feeds into the output directory.
- feeds: serializes published posts as RSS 2.0 and Atom.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
