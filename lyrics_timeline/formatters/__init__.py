"""Output formatter registry.

WHY: The CLI needs a single lookup to find a formatter by name. Adding a
format means writing the class, importing it here, and adding one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["parsed_json"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags)
- Values are BaseFormatter subclasses (not instances)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lyrics_timeline.formatters.parsed_json import ParsedJSONFormatter
from lyrics_timeline.formatters.plain_text import PlainTextFormatter

if TYPE_CHECKING:
    from lyrics_timeline.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "parsed_json": ParsedJSONFormatter,
    "plain_text": PlainTextFormatter,
}
