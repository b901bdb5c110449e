"""Lyrics Timeline: syllable-synced TTML parsing and timeline view-model.

WHY: Lyrics providers deliver word-timed lyrics as TTML. Players, editors,
and documentation playgrounds all need the same two things from it: a
normalized, time-indexed line/word model, and an interactive timeline that
can be scrubbed, zoomed, and panned.

HOW: Two stages: parse (core.parser → core.ir Line/Word records) and
interact (core.timeline view-model over those lines). Formatters render a
parsed document as JSON or plain text. Each stage is independently testable.

RULES:
- The parser never raises; bad markup yields no lines
- The timeline engine never raises; out-of-range input is clamped
- The IR is the stable contract between parsing, interaction, and output
"""

__version__ = "0.1.0"
