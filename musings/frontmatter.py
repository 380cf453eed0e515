"""Frontmatter parsing for Musings.

A post file may begin with a metadata block delimited by ``---`` lines::

    ---
    CreatedDate: 2024-01-02 15:04:05
    Tags: go, blogging
    ---
    # Post Title

Each metadata line is split on its first colon into a trimmed key and value.
Lines without a colon are kept verbatim but carry no metadata. The block only
counts when the very first line of the file is the separator.

Key classes:
- Frontmatter: Parsed view of a source file, able to render a repaired copy.

Functions:
- parse_frontmatter: Split raw text into metadata and body lines.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

SEPARATOR = "---"


def split_lines(text: str) -> list[str]:
    """Split text into lines, accepting ``\\n`` and ``\\r\\n`` endings.

    A trailing newline does not produce an empty final line.

    Args:
        text: Raw file content.

    Returns:
        List of lines without terminators.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def split_metadata_line(line: str) -> tuple[str, str] | None:
    """Split a metadata line on its first colon.

    Returns:
        Tuple of trimmed (key, value), or None if the line has no colon.
    """
    if ":" not in line:
        return None
    key, value = line.split(":", 1)
    return key.strip(), value.strip()


@dataclass
class Frontmatter:
    """Parsed view of a post source file.

    Attributes:
        metadata: Key/value pairs; a repeated key keeps its last value.
        lines: Raw lines between the separators, in file order.
        body_lines: Lines after the metadata block (or the whole file).
        opened: Whether the first line was the separator.
        closed: Whether a closing separator followed.
    """

    metadata: dict[str, str] = field(default_factory=dict)
    lines: list[str] = field(default_factory=list)
    body_lines: list[str] = field(default_factory=list)
    opened: bool = False
    closed: bool = False

    @property
    def well_formed(self) -> bool:
        """True when both the opening and closing separators were found."""
        return self.opened and self.closed

    def render(self, updates: Mapping[str, str]) -> str:
        """Render the file with metadata values replaced or added.

        Existing lines whose key appears in ``updates`` are rewritten in place;
        keys not yet present are appended before the closing separator. All
        other metadata lines and the body are reproduced verbatim. A block is
        always emitted with both separators, so an unterminated or missing
        block is repaired as a side effect.

        Args:
            updates: Ordered mapping of metadata key to new value.

        Returns:
            Complete file text, each line terminated by a newline.
        """
        out = [SEPARATOR]
        written: set[str] = set()
        for line in self.lines:
            if line == SEPARATOR:
                continue
            parts = split_metadata_line(line)
            if parts is not None and parts[0] in updates:
                key = parts[0]
                out.append(f"{key}: {updates[key]}")
                written.add(key)
            else:
                out.append(line)
        for key, value in updates.items():
            if key not in written:
                out.append(f"{key}: {value}")
        out.append(SEPARATOR)
        out.extend(self.body_lines)
        return "".join(f"{line}\n" for line in out)


def parse_frontmatter(text: str) -> Frontmatter:
    """Split raw file text into metadata and body lines.

    Args:
        text: Raw file content.

    Returns:
        Frontmatter describing the metadata block and body.

    Examples:
        >>> fm = parse_frontmatter("---\\nTags: a, b\\n---\\n# Hi")
        >>> fm.metadata, fm.body_lines
        ({'Tags': 'a, b'}, ['# Hi'])
    """
    lines = split_lines(text.lstrip("\ufeff"))
    result = Frontmatter()
    if not lines or lines[0] != SEPARATOR:
        result.body_lines = lines
        return result

    result.opened = True
    for index in range(1, len(lines)):
        line = lines[index]
        if line == SEPARATOR:
            result.closed = True
            result.body_lines = lines[index + 1 :]
            break
        result.lines.append(line)
        parts = split_metadata_line(line)
        if parts is not None:
            key, value = parts
            result.metadata[key] = value
    return result
