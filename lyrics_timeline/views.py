"""Pydantic models for the structured "parsed view" of a lyrics document.

WHY: Besides the interactive timeline, callers show the parsed lines as
JSON next to the raw provider response. That output needs stable field
names (camelCase, as in the provider's API) and a JSON Schema, which
pydantic models provide directly.

HOW: Each IR dataclass has a view model. ParsedView.from_document builds
the tree from a LyricsDocument; to_json_dict dumps it by alias with
absent optional fields left out.

RULES:
- Field aliases are camelCase (leadText, bgText, isBackground)
- Optional fields that are None are omitted from the dump
- score is passed through unchanged, never computed
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from lyrics_timeline.core.ir import Line, LyricsDocument, Transliteration, Word


class WordView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    begin: int = Field(description="Start time in milliseconds.")
    end: int = Field(description="End time in milliseconds.")
    text: str = Field(description="Syllable or word text, untrimmed.")
    is_background: Optional[bool] = Field(
        default=None,
        alias="isBackground",
        description="True for background vocals; omitted for the lead vocal.",
    )

    @classmethod
    def from_word(cls, word: Word) -> WordView:
        return cls(begin=word.begin, end=word.end, text=word.text, is_background=word.is_background)


class TransliterationView(BaseModel):
    text: str
    words: List[WordView] = Field(default_factory=list)

    @classmethod
    def from_transliteration(cls, item: Transliteration) -> TransliterationView:
        return cls(text=item.text, words=[WordView.from_word(w) for w in item.words])


class LineView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    begin: int = Field(description="Line start in milliseconds.")
    end: int = Field(description="Line end in milliseconds.")
    text: str = Field(description="Full line text, untrimmed.")
    lead_text: str = Field(alias="leadText", description="Trimmed lead-vocal text.")
    bg_text: str = Field(alias="bgText", description="Trimmed background-vocal text.")
    words: List[WordView] = Field(default_factory=list)
    agent: Optional[str] = Field(default=None, description="Speaker id, e.g. 'v1'.")
    key: Optional[str] = Field(default=None, description="Line id for transliteration joins.")
    transliteration: Optional[TransliterationView] = None

    @classmethod
    def from_line(cls, line: Line) -> LineView:
        return cls(
            begin=line.begin,
            end=line.end,
            text=line.text,
            lead_text=line.lead_text,
            bg_text=line.bg_text,
            words=[WordView.from_word(w) for w in line.words],
            agent=line.agent,
            key=line.key,
            transliteration=(
                TransliterationView.from_transliteration(line.transliteration)
                if line.transliteration is not None
                else None
            ),
        )


class ParsedView(BaseModel):
    """Top-level parsed view: ``{"lines": [...], "score": ...}``."""

    lines: List[LineView] = Field(default_factory=list)
    score: Optional[Union[int, float]] = Field(
        default=None,
        description="Provider match score, passed through unchanged.",
    )

    @classmethod
    def from_document(cls, document: LyricsDocument) -> ParsedView:
        return cls(
            lines=[LineView.from_line(line) for line in document.lines],
            score=document.score,
        )

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
