"""Protocol definitions for Musings.

This module defines the capabilities the ingestion and assembly pipelines
depend on, so tests and callers can substitute their own implementations.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class MarkdownConverter(Protocol):
    """Protocol for turning Markdown text into an HTML fragment."""

    @abstractmethod
    def render(self, text: str) -> str:
        """Render Markdown to HTML.

        Args:
            text: Markdown source.

        Returns:
            Rendered HTML fragment.
        """
        ...


@runtime_checkable
class Clock(Protocol):
    """Protocol for the time source used when defaulting post dates.

    Implementations must return a timezone-aware datetime.
    """

    def __call__(self) -> datetime: ...

