"""Static asset copying for Musings.

The built site needs the stylesheet and any images stored beside the posts.
Both are copied verbatim.

Key class:
- AssetCopier: Copies the stylesheet and the images/ subtree into the output.
"""

from __future__ import annotations

import shutil
from pathlib import Path

IMAGES_DIR = "images"


class AssetCopier:
    """Copies static assets into the output directory.

    Attributes:
        output_dir: Directory where the site is built.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def copy_file(self, source: Path, dest: Path) -> Path:
        """Copy a single file, creating parent directories as needed.

        Args:
            source: Source file path.
            dest: Destination path.

        Returns:
            The destination path.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
        return dest

    def copy_stylesheet(self, source: Path) -> Path:
        """Copy the stylesheet into the output root under its own name."""
        return self.copy_file(source, self.output_dir / source.name)

    def copy_images(self, posts_dir: Path) -> list[Path]:
        """Copy the images/ subtree of the posts directory into the output.

        A missing images directory is not an error.

        Args:
            posts_dir: Directory containing the Markdown posts.

        Returns:
            Destination paths of the copied files.
        """
        source_root = posts_dir / IMAGES_DIR
        if not source_root.is_dir():
            return []

        target = self.output_dir / IMAGES_DIR
        target.mkdir(parents=True, exist_ok=True)
        copied = []
        for item in sorted(source_root.rglob("*")):
            if item.is_dir():
                continue
            rel = item.relative_to(source_root)
            copied.append(self.copy_file(item, target / rel))
        return copied
