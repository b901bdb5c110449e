"""Configuration constants, speaker palette, and .env loading.

WHY: The timeline's zoom limits, drag threshold, and TTML attribute names
are tuning knobs that should live in one place, not scattered through the
parser and the interaction engine. Keeping them as plain module-level data
makes them easy to find and override.

HOW: python-dotenv loads the .env file on import. Tunables read their
value from the environment with a hard-coded fallback. Fixed constants
(wheel factors, marker intervals, palette) are plain module-level values.

RULES:
- Zoom is always clamped to [MIN_ZOOM, MAX_ZOOM]
- Environment overrides use the LYRICS_TIMELINE_ prefix
- SPEAKER_COLORS keys are TTML agent ids ("v1", "v2", ..., "v1000")
- A line without an agent uses the "v1" colour
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# TTML vocabulary (matched by local name, prefixes are ignored)
# ---------------------------------------------------------------------------

PARAGRAPH_TAG = "p"
TRANSLITERATION_TAG = "transliteration"
TRANSLITERATION_TEXT_TAG = "text"
AGENT_ATTR = "agent"
KEY_ATTR = "key"
ROLE_ATTR = "role"
BACKGROUND_ROLE = "x-bg"
JOIN_KEY_ATTR = "for"

# ---------------------------------------------------------------------------
# Interaction tuning
# ---------------------------------------------------------------------------

MIN_ZOOM = float(os.getenv("LYRICS_TIMELINE_MIN_ZOOM", "1"))
MAX_ZOOM = float(os.getenv("LYRICS_TIMELINE_MAX_ZOOM", "20"))
DRAG_THRESHOLD_PX = float(os.getenv("LYRICS_TIMELINE_DRAG_THRESHOLD_PX", "3"))

WHEEL_ZOOM_OUT_FACTOR = 0.8
WHEEL_ZOOM_IN_FACTOR = 1.25
BUTTON_ZOOM_FACTOR = 1.5

MIN_BAR_WIDTH_PERCENT = 0.5
"""Bars narrower than this (in percent of the track) are widened so they stay clickable."""

# Gridline intervals in milliseconds
MARKER_INTERVAL_FINE_MS = 10_000
MARKER_INTERVAL_MEDIUM_MS = 30_000
MARKER_INTERVAL_COARSE_MS = 60_000
SHORT_DOCUMENT_MS = 180_000
MAX_MARKERS = 1000
"""Upper bound on gridlines per window, so absurd durations stay cheap to draw."""

# ---------------------------------------------------------------------------
# Speaker palette
# ---------------------------------------------------------------------------

SPEAKER_COLORS: dict[str, str] = {
    "v1": "#f20c32",
    "v2": "#3b82f6",
    "v3": "#10b981",
    "v4": "#f59e0b",
    "v5": "#8b5cf6",
    "v6": "#ec4899",
    "v7": "#06b6d4",
    "v8": "#84cc16",
    "v9": "#f97316",
    "v10": "#6366f1",
    "v11": "#14b8a6",
    "v12": "#a855f7",
    "v13": "#eab308",
    "v14": "#0ea5e9",
    "v15": "#22c55e",
    "v1000": "#d946ef",  # several speakers at once
}

DEFAULT_SPEAKER_COLOR = "#71717a"
"""Colour for agents that are not in SPEAKER_COLORS."""


def speaker_color(agent: str | None) -> str:
    """Map a TTML agent id to its display colour.

    RULES:
    - None or empty agent → the primary ("v1") colour
    - Unknown agent → DEFAULT_SPEAKER_COLOR
    """
    if not agent:
        return SPEAKER_COLORS["v1"]
    return SPEAKER_COLORS.get(agent, DEFAULT_SPEAKER_COLOR)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL = os.getenv("LYRICS_TIMELINE_LOG_LEVEL", "WARNING").upper()
