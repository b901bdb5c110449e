"""Syllable-synced TTML parsing into the Line/Word IR.

WHY: Lyrics providers ship word-level timing as TTML: paragraphs with
begin/end, timed spans per syllable, background vocals marked with
ttm:role="x-bg", speakers in ttm:agent, and transliterations stored in
the document head and joined to lines through itunes:key. The timeline
and the formatters need this as ordered Line records.

HOW: Two passes over one ElementTree:
  1. Transliteration pass: collect every <transliteration>/<text for=...>
     into a local lookup table (join order in the source is not fixed).
  2. Line pass: for each <p> in document order, classify text runs as
     lead or background, collect timed descendants as words (background
     decided by an ancestor walk per word), and attach the transliteration
     whose key matches.

RULES:
- Never raises: malformed markup → empty list (logged at WARNING)
- Element and attribute names match by local name, prefixes are ignored
- Missing timing attributes read as "" → 0 ms
- Word text and Line.text are untrimmed; lead_text and bg_text are trimmed
- A word is background only if an element strictly between it and the
  paragraph carries role="x-bg"
- The transliteration table lives for one call only
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional, Tuple, Union

from lyrics_timeline.config import (
    AGENT_ATTR,
    BACKGROUND_ROLE,
    JOIN_KEY_ATTR,
    KEY_ATTR,
    PARAGRAPH_TAG,
    ROLE_ATTR,
    TRANSLITERATION_TAG,
    TRANSLITERATION_TEXT_TAG,
)
from lyrics_timeline.core.ir import Line, LyricsDocument, Transliteration, Word
from lyrics_timeline.core.timing import parse_time

logger = logging.getLogger(__name__)


def _local_name(name: str) -> str:
    """Strip an ElementTree "{namespace}" prefix."""
    if name.startswith("{"):
        return name.rsplit("}", 1)[-1]
    return name


def _get_attr(element: ET.Element, name: str) -> Optional[str]:
    """Read an attribute by local name (``ttm:agent`` → ``agent``)."""
    value = element.get(name)
    if value is not None:
        return value
    for attr_name, attr_value in element.attrib.items():
        if _local_name(attr_name) == name:
            return attr_value
    return None


def _is_tag(element: ET.Element, name: str) -> bool:
    # Comments and processing instructions have a callable tag
    return isinstance(element.tag, str) and _local_name(element.tag) == name


def _is_background_marker(element: ET.Element) -> bool:
    return _get_attr(element, ROLE_ATTR) == BACKGROUND_ROLE


def _text_content(element: ET.Element) -> str:
    """Concatenated text of the element and all descendants (DOM textContent)."""
    return "".join(element.itertext())


def _timed_elements(root: ET.Element) -> Iterator[ET.Element]:
    """Descendants of ``root`` carrying a ``begin`` attribute, in document order."""
    for element in root.iter():
        if element is not root and _get_attr(element, "begin") is not None:
            yield element


def _word_from_element(element: ET.Element, is_background: Optional[bool] = None) -> Word:
    return Word(
        begin=parse_time(_get_attr(element, "begin") or ""),
        end=parse_time(_get_attr(element, "end") or ""),
        text=_text_content(element),
        is_background=is_background,
    )


def _collect_transliterations(root: ET.Element) -> Dict[str, Transliteration]:
    """Build the key → Transliteration table for one document.

    RULES:
    - Only <text> elements below a <transliteration> element count
    - <text> without a non-empty ``for`` attribute is skipped
    - A later entry with the same key replaces the earlier one
    """
    table: Dict[str, Transliteration] = {}
    for container in root.iter():
        if not _is_tag(container, TRANSLITERATION_TAG):
            continue
        for text_el in container.iter():
            if text_el is container or not _is_tag(text_el, TRANSLITERATION_TEXT_TAG):
                continue
            join_key = _get_attr(text_el, JOIN_KEY_ATTR)
            if not join_key:
                continue
            table[join_key] = Transliteration(
                text=_text_content(text_el),
                words=tuple(_word_from_element(span) for span in _timed_elements(text_el)),
            )
    return table


def _classified_text_runs(paragraph: ET.Element) -> Iterator[Tuple[str, bool]]:
    """Yield ``(text, is_background)`` for every text run of a paragraph.

    HOW: Iterative pre-order walk with an explicit stack. An element's own
    text takes the element's classification; its tail belongs to the parent
    and takes the parent's. The paragraph's own role is not consulted.
    """
    if paragraph.text:
        yield paragraph.text, False

    pending: List[Tuple[Union[ET.Element, str], bool]] = []
    for child in reversed(list(paragraph)):
        if child.tail:
            pending.append((child.tail, False))
        pending.append((child, False))

    while pending:
        node, background = pending.pop()
        if isinstance(node, str):
            yield node, background
            continue

        background = background or _is_background_marker(node)
        if node.text and isinstance(node.tag, str):
            yield node.text, background
        for child in reversed(list(node)):
            if child.tail:
                pending.append((child.tail, background))
            pending.append((child, background))


def _has_background_ancestor(
    element: ET.Element,
    paragraph: ET.Element,
    parents: Dict[ET.Element, ET.Element],
) -> bool:
    """Walk from the element's parent up to (excluding) the paragraph."""
    current = parents.get(element)
    while current is not None and current is not paragraph:
        if _is_background_marker(current):
            return True
        current = parents.get(current)
    return False


def _build_line(
    paragraph: ET.Element,
    transliterations: Dict[str, Transliteration],
) -> Line:
    agent = _get_attr(paragraph, AGENT_ATTR) or None
    key = _get_attr(paragraph, KEY_ATTR) or None

    text_parts: List[str] = []
    lead_parts: List[str] = []
    bg_parts: List[str] = []
    for run, background in _classified_text_runs(paragraph):
        text_parts.append(run)
        if background:
            bg_parts.append(run)
        else:
            lead_parts.append(run)

    parents = {child: parent for parent in paragraph.iter() for child in parent}
    words = tuple(
        _word_from_element(
            span,
            True if _has_background_ancestor(span, paragraph, parents) else None,
        )
        for span in _timed_elements(paragraph)
    )

    return Line(
        begin=parse_time(_get_attr(paragraph, "begin") or ""),
        end=parse_time(_get_attr(paragraph, "end") or ""),
        text="".join(text_parts),
        lead_text="".join(lead_parts).strip(),
        bg_text="".join(bg_parts).strip(),
        words=words,
        agent=agent,
        key=key,
        transliteration=transliterations.get(key) if key else None,
    )


def parse_ttml(markup: str) -> List[Line]:
    """Parse lyrics TTML into an ordered list of Lines.

    Args:
        markup: Raw TTML document text.

    Returns:
        One Line per <p> element in document order. Empty when the markup
        is not well-formed or contains no paragraphs.
    """
    try:
        root = ET.fromstring(markup)
    except (ET.ParseError, ValueError, TypeError) as exc:
        logger.warning("Could not parse TTML markup: %s", exc)
        return []

    transliterations = _collect_transliterations(root)
    lines = [
        _build_line(paragraph, transliterations)
        for paragraph in root.iter()
        if _is_tag(paragraph, PARAGRAPH_TAG)
    ]
    logger.debug(
        "Parsed %d lines (%d transliterations)", len(lines), len(transliterations)
    )
    return lines


def build_document(
    markup: str,
    source_filename: str = "",
    score: Optional[Union[int, float]] = None,
) -> LyricsDocument:
    """Parse markup and wrap the lines with pass-through metadata."""
    return LyricsDocument(
        lines=tuple(parse_ttml(markup)),
        source_filename=source_filename,
        score=score,
    )
