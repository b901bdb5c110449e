"""Abstract base formatter and output container.

WHY: Every output format consumes the same LyricsDocument but produces
different content. This base class enforces a consistent interface so the
CLI can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; every current formatter returns one item
- ``suffix`` starts with a hyphen, e.g. ``"-parsed.json"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from lyrics_timeline.core.ir import LyricsDocument


@dataclass
class FormatterOutput:
    """One output produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-parsed.json"`` → ``"song-parsed.json"``.
        content: The rendered content.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Parsed JSON'."""

    @abstractmethod
    def format(self, document: LyricsDocument) -> list[FormatterOutput]:
        """Render the parsed document.

        Args:
            document: Parsed lines plus pass-through metadata.

        Returns:
            List of FormatterOutput objects.
        """
