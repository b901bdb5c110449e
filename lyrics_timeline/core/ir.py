"""Intermediate representation dataclasses for parsed lyrics.

WHY: Syllable-synced TTML is a deep XML tree with namespaced attributes,
nested background-vocal spans, and transliterations stored far away in the
document head. The timeline view, the formatters, and the CLI all need the
same flat, time-indexed view of it. The IR is that single contract.

HOW: Four dataclasses form a hierarchy:
  Word           : one timed syllable or word
  Transliteration: alternate-script rendering of a line, joined by key
  Line           : one paragraph with its words and speaker metadata
  LyricsDocument : the ordered lines plus pass-through metadata

RULES:
- All times are integer milliseconds
- Word.text and Line.text are never trimmed
- Word.is_background is True or None (None means primary vocal)
- Words keep document order; nothing re-sorts them
- Instances are frozen: one parse call produces one immutable result
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

INSTRUMENTAL_PLACEHOLDER = "[instrumental]"


@dataclass(frozen=True)
class Word:
    """A single timed syllable or word.

    RULES:
    - begin / end: integer milliseconds, taken from the span's own attributes
    - text: the span's full text content, untrimmed
    - is_background: True when an ancestor below the paragraph is marked
      ttm:role="x-bg", otherwise None
    """

    begin: int
    end: int
    text: str
    is_background: Optional[bool] = None


@dataclass(frozen=True)
class Transliteration:
    """Secondary rendering of a line in another script."""

    text: str
    words: Tuple[Word, ...] = ()


@dataclass(frozen=True)
class Line:
    """One lyric line (a TTML paragraph).

    WHY: The timeline draws one bar per line and the line list shows one
    entry per line, with lead and background vocals rendered differently.

    RULES:
    - begin / end come from the paragraph itself, not from its words
    - text: flattened text of the whole paragraph, untrimmed
    - lead_text / bg_text: trimmed text of non-background / background runs
    - agent: speaker id (e.g. "v1"), None when absent
    - key: line id used to join a transliteration, None when absent
    """

    begin: int
    end: int
    text: str
    lead_text: str = ""
    bg_text: str = ""
    words: Tuple[Word, ...] = ()
    agent: Optional[str] = None
    key: Optional[str] = None
    transliteration: Optional[Transliteration] = None

    @property
    def lead_words(self) -> list[Word]:
        return [w for w in self.words if not w.is_background]

    @property
    def background_words(self) -> list[Word]:
        return [w for w in self.words if w.is_background]

    @property
    def has_only_background_vocals(self) -> bool:
        """True when the line has words and every one of them is background."""
        return len(self.words) > 0 and all(w.is_background for w in self.words)

    @property
    def display_text(self) -> str:
        """Text shown in the line list.

        Lines with background text show "lead / background"; otherwise the
        trimmed full text, or a placeholder for empty (instrumental) lines.
        """
        if self.bg_text:
            if self.lead_text:
                return "{} / {}".format(self.lead_text, self.bg_text)
            return self.bg_text
        return self.text.strip() or INSTRUMENTAL_PLACEHOLDER


@dataclass(frozen=True)
class LyricsDocument:
    """A parsed lyrics document with its pass-through metadata.

    RULES:
    - lines: ordered as in the source markup
    - score: supplied by the caller (e.g. a lyrics provider's match score),
      never computed here
    - source_filename: used for output naming, may be empty
    """

    lines: Tuple[Line, ...] = field(default_factory=tuple)
    source_filename: str = ""
    score: Optional[Union[int, float]] = None

    @property
    def duration_ms(self) -> int:
        """End of the latest line, 0 for an empty document."""
        return max((line.end for line in self.lines), default=0)
