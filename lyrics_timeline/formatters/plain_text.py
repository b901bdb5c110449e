"""Plain text line list.

WHY: Reviewing a synced lyrics file is easiest as a readable list: each
line's time range, who sings it, what is sung, and its transliteration.
This is the text counterpart of the timeline's line list.

HOW: One block per line:
    0:12.340 - 0:15.000 [V2]
    lead text / background text
    transliteration text (when present)
Blocks are separated by a blank line.

RULES:
- Timing badge format: "m:ss.mmm - m:ss.mmm"
- Agent shown upper-cased in brackets, omitted when absent
- Empty lines render as "[instrumental]"
- Output suffix: "-lyrics.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from typing import List

from lyrics_timeline.core.ir import Line, LyricsDocument
from lyrics_timeline.core.timing import format_time
from lyrics_timeline.formatters.base import BaseFormatter, FormatterOutput


def _render_line(line: Line) -> str:
    header = "{} - {}".format(format_time(line.begin), format_time(line.end))
    if line.agent:
        header += " [{}]".format(line.agent.upper())

    rows: List[str] = [header, line.display_text]
    if line.transliteration is not None and line.transliteration.text.strip():
        rows.append(line.transliteration.text.strip())
    return "\n".join(rows)


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces a readable, timed line list."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, document: LyricsDocument) -> list[FormatterOutput]:
        blocks = [_render_line(line) for line in document.lines]
        content = "\n\n".join(blocks)
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix="-lyrics.txt",
                content=content,
                media_type="text/plain",
            )
        ]
