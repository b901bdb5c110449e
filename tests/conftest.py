"""Shared test fixtures for the lyrics_timeline test suite.

WHY: Parser, timeline, formatter and CLI tests all need the same small
but realistic TTML documents: two speakers, a background-vocal run,
transliterations declared before the lines that use them, and a line
whose transliteration is declared after it.

HOW: Module-level TTML strings plus pytest fixtures returning them and
their parsed lines.

RULES:
- SAMPLE_TTML uses real Apple-style namespaces (ttm, itunes)
- Expected values in tests are derived by hand from these strings
"""

import pytest

from lyrics_timeline.core.parser import parse_ttml


SAMPLE_TTML = """<?xml version="1.0" encoding="UTF-8"?>
<tt xmlns="http://www.w3.org/ns/ttml"
    xmlns:ttm="http://www.w3.org/ns/ttml#metadata"
    xmlns:itunes="http://music.apple.com/lyric-ttml-internal">
  <head>
    <metadata>
      <iTunesMetadata xmlns="http://music.apple.com/lyric-ttml-internal">
        <transliterations>
          <transliteration xml:lang="ja-Latn">
            <text for="L1"><span begin="0.5" end="1.2">Ko</span><span begin="1.2" end="2.0">re</span></text>
          </transliteration>
        </transliterations>
      </iTunesMetadata>
    </metadata>
  </head>
  <body dur="0:12.000">
    <div begin="0:00.500" end="0:12.000">
      <p begin="0:00.500" end="0:02.000" ttm:agent="v1" itunes:key="L1"><span begin="0:00.500" end="0:01.200">これ</span> <span begin="0:01.200" end="0:02.000">は</span></p>
      <p begin="0:02.000" end="0:05.000" ttm:agent="v2" itunes:key="L2"><span begin="0:02.000" end="0:03.000">Hold</span> <span begin="0:03.000" end="0:04.000">on</span> <span ttm:role="x-bg"><span begin="0:04.000" end="0:04.500">(hold</span> <span begin="0:04.500" end="0:05.000">on)</span></span></p>
      <p begin="0:06.000" end="0:08.000" itunes:key="L3"><span ttm:role="x-bg"><span begin="0:06.000" end="0:08.000">ooh</span></span></p>
      <p begin="0:09.000" end="0:12.000" ttm:agent="v1000" itunes:key="L4"></p>
    </div>
  </body>
  <transliteration>
    <text for="L2">hōrudo on</text>
  </transliteration>
</tt>
"""

TWO_LINE_TTML = """<tt xmlns="http://www.w3.org/ns/ttml">
  <body><div>
    <p begin="0" end="2"><span begin="0" end="1">one</span> <span begin="1" end="2">two</span></p>
    <p begin="2" end="5"><span begin="2" end="3.5">three</span> <span begin="3.5" end="5">four</span></p>
  </div></body>
</tt>
"""


@pytest.fixture
def sample_ttml():
    return SAMPLE_TTML


@pytest.fixture
def sample_lines():
    return parse_ttml(SAMPLE_TTML)


@pytest.fixture
def two_lines():
    """Lines at [0, 2000] and [2000, 5000] ms."""
    return parse_ttml(TWO_LINE_TTML)
