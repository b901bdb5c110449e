"""Timeline interaction engine: zoom, pan, scrub, and line selection.

WHY: The lyrics timeline shows every line as a bar on a time track. Users
scroll to zoom around the pointer, drag to pan, click to scrub, and pick
lines from a list. All of that is coordinate math and a little gesture
bookkeeping that must stay testable without any rendering layer.

HOW: TimelineState is an immutable snapshot. Every interaction is a pure
function (model, state, event args) -> new state built with
dataclasses.replace. TimelineEngine is the thin stateful shell a renderer
holds: it owns one model + state, resets when given a new line sequence,
and can record events for deterministic replay. Geometry helpers derive
bar, gridline, and scrubber positions (percent of the visible window).

RULES:
- zoom is always within [MIN_ZOOM, MAX_ZOOM]
- pan_offset is always within [0, total_duration - visible_duration]
- total_duration == 0 turns click/wheel/drag/zoom into no-ops
- Nothing here raises; out-of-range input is clamped
- A click right after a real drag (pointer moved > DRAG_THRESHOLD_PX)
  is swallowed and consumes the did_drag flag
- Clicking a gap between lines selects nothing (first match or none)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Sequence, Tuple

from lyrics_timeline import config
from lyrics_timeline.core.ir import Line
from lyrics_timeline.core.timing import format_marker_label

logger = logging.getLogger(__name__)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _clamp_zoom(zoom: float) -> float:
    return _clamp(zoom, config.MIN_ZOOM, config.MAX_ZOOM)


# ---------------------------------------------------------------------------
# Model and state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimelineModel:
    """The document side of the timeline: lines and their total span."""

    lines: Tuple[Line, ...] = ()
    total_duration: int = 0

    @classmethod
    def from_lines(cls, lines: Sequence[Line]) -> TimelineModel:
        lines = tuple(lines)
        return cls(lines=lines, total_duration=max((line.end for line in lines), default=0))


@dataclass(frozen=True)
class TimelineState:
    """View state for one document.

    RULES:
    - selected_line: index into the model's lines, or None
    - scrub_position: milliseconds, or None before the first scrub
    - drag_start_x / drag_start_offset: pointer x and pan at drag start
    - did_drag: a real drag happened; the next click is swallowed
    - pending_pan: coalesced drag target not yet applied to pan_offset
    """

    zoom: float = config.MIN_ZOOM
    pan_offset: float = 0.0
    selected_line: Optional[int] = None
    scrub_position: Optional[float] = None
    is_dragging: bool = False
    drag_start_x: float = 0.0
    drag_start_offset: float = 0.0
    did_drag: bool = False
    pending_pan: Optional[float] = None


# ---------------------------------------------------------------------------
# Derived quantities
# ---------------------------------------------------------------------------


def visible_duration(model: TimelineModel, state: TimelineState) -> float:
    return model.total_duration / state.zoom


def max_pan_offset(model: TimelineModel, state: TimelineState) -> float:
    return max(0.0, model.total_duration - visible_duration(model, state))


def time_to_position(model: TimelineModel, state: TimelineState, time_ms: float) -> float:
    """Map absolute time to a percentage of the visible window (0 = left edge)."""
    visible = visible_duration(model, state)
    if visible <= 0:
        return 0.0
    return (time_ms - state.pan_offset) / visible * 100


def position_to_time(model: TimelineModel, state: TimelineState, position: float) -> float:
    """Inverse of time_to_position: percentage of the window → absolute time."""
    return state.pan_offset + position / 100 * visible_duration(model, state)


def _line_at(model: TimelineModel, time_ms: float) -> Optional[int]:
    for index, line in enumerate(model.lines):
        if line.begin <= time_ms <= line.end:
            return index
    return None


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def click(model: TimelineModel, state: TimelineState, fraction: float) -> TimelineState:
    """Scrub to the pointer and select the line under it.

    Args:
        fraction: Pointer x as a fraction of the track width (0..1).
    """
    if state.is_dragging or model.total_duration == 0:
        return state
    if state.did_drag:
        return replace(state, did_drag=False)

    time_ms = _clamp(position_to_time(model, state, fraction * 100), 0, model.total_duration)
    index = _line_at(model, time_ms)
    if index is None:
        return replace(state, scrub_position=time_ms)
    return replace(state, scrub_position=time_ms, selected_line=index)


def wheel(
    model: TimelineModel,
    state: TimelineState,
    fraction: float,
    delta_sign: float,
) -> TimelineState:
    """Zoom around the pointer; positive delta zooms out, otherwise in."""
    if model.total_duration == 0:
        return state

    pointer_time = position_to_time(model, state, fraction * 100)
    factor = config.WHEEL_ZOOM_OUT_FACTOR if delta_sign > 0 else config.WHEEL_ZOOM_IN_FACTOR
    new_zoom = _clamp_zoom(state.zoom * factor)
    new_visible = model.total_duration / new_zoom
    new_pan = _clamp(
        pointer_time - fraction * new_visible,
        0,
        model.total_duration - new_visible,
    )
    return replace(state, zoom=new_zoom, pan_offset=new_pan)


def _zoom_about_center(model: TimelineModel, state: TimelineState, new_zoom: float) -> TimelineState:
    if model.total_duration == 0:
        return state
    new_zoom = _clamp_zoom(new_zoom)
    center = state.pan_offset + visible_duration(model, state) / 2
    new_visible = model.total_duration / new_zoom
    new_pan = _clamp(center - new_visible / 2, 0, model.total_duration - new_visible)
    return replace(state, zoom=new_zoom, pan_offset=new_pan)


def zoom_in(model: TimelineModel, state: TimelineState) -> TimelineState:
    return _zoom_about_center(model, state, state.zoom * config.BUTTON_ZOOM_FACTOR)


def zoom_out(model: TimelineModel, state: TimelineState) -> TimelineState:
    return _zoom_about_center(model, state, state.zoom / config.BUTTON_ZOOM_FACTOR)


def reset_zoom(model: TimelineModel, state: TimelineState) -> TimelineState:
    return replace(state, zoom=config.MIN_ZOOM, pan_offset=0.0)


def drag_start(model: TimelineModel, state: TimelineState, pointer_x: float) -> TimelineState:
    """Begin a pan gesture. Nothing to pan at minimum zoom."""
    if state.zoom <= config.MIN_ZOOM or model.total_duration == 0:
        return state
    return replace(
        state,
        is_dragging=True,
        did_drag=False,
        drag_start_x=pointer_x,
        drag_start_offset=state.pan_offset,
        pending_pan=None,
    )


def _drag_target(
    model: TimelineModel,
    state: TimelineState,
    pointer_x: float,
    track_width: float,
) -> Tuple[float, bool]:
    delta_x = pointer_x - state.drag_start_x
    did_drag = state.did_drag or abs(delta_x) > config.DRAG_THRESHOLD_PX
    delta_time = delta_x / track_width * visible_duration(model, state)
    # Dragging right moves the window earlier
    new_pan = _clamp(state.drag_start_offset - delta_time, 0, max_pan_offset(model, state))
    return new_pan, did_drag


def drag_move(
    model: TimelineModel,
    state: TimelineState,
    pointer_x: float,
    track_width: float,
) -> TimelineState:
    """Pan by the pointer displacement since drag_start, applied immediately."""
    if not state.is_dragging or track_width <= 0:
        return state
    new_pan, did_drag = _drag_target(model, state, pointer_x, track_width)
    return replace(state, pan_offset=new_pan, did_drag=did_drag, pending_pan=None)


def queue_drag_move(
    model: TimelineModel,
    state: TimelineState,
    pointer_x: float,
    track_width: float,
) -> TimelineState:
    """Like drag_move, but hold the new pan until flush_frame (last move wins)."""
    if not state.is_dragging or track_width <= 0:
        return state
    new_pan, did_drag = _drag_target(model, state, pointer_x, track_width)
    return replace(state, pending_pan=new_pan, did_drag=did_drag)


def flush_frame(model: TimelineModel, state: TimelineState) -> TimelineState:
    """Apply the coalesced drag move, if any (once per display refresh)."""
    if state.pending_pan is None:
        return state
    return replace(state, pan_offset=state.pending_pan, pending_pan=None)


def drag_end(model: TimelineModel, state: TimelineState) -> TimelineState:
    """Finish the gesture. did_drag survives so the trailing click can see it."""
    if not state.is_dragging:
        return state
    return replace(state, is_dragging=False, pending_pan=None)


def settle(model: TimelineModel, state: TimelineState) -> TimelineState:
    """Clear did_drag when no click followed the end of a drag."""
    if not state.did_drag:
        return state
    return replace(state, did_drag=False)


def mouse_leave(model: TimelineModel, state: TimelineState) -> TimelineState:
    """Pointer left the track mid-drag: cancel the gesture outright."""
    if not state.is_dragging:
        return state
    return replace(state, is_dragging=False, did_drag=False, pending_pan=None)


def select_line(model: TimelineModel, state: TimelineState, index: int) -> TimelineState:
    """Select a line from outside the track (e.g. the line list)."""
    if not 0 <= index < len(model.lines):
        return state
    return replace(state, selected_line=index, scrub_position=model.lines[index].begin)


# ---------------------------------------------------------------------------
# Geometry for the renderer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeMarker:
    time_ms: int
    position: float
    label: str


@dataclass(frozen=True)
class LineBar:
    """One line's bar on the track, in percent of the visible window."""

    index: int
    left: float
    width: float
    color: str
    is_background: bool
    is_selected: bool
    title: str


def marker_interval(model: TimelineModel, state: TimelineState) -> int:
    """Gridline spacing in ms: finer as the zoom grows."""
    if state.zoom >= 4:
        return config.MARKER_INTERVAL_FINE_MS
    if state.zoom >= 2:
        return config.MARKER_INTERVAL_MEDIUM_MS
    if model.total_duration <= config.SHORT_DOCUMENT_MS:
        return config.MARKER_INTERVAL_MEDIUM_MS
    return config.MARKER_INTERVAL_COARSE_MS


def time_markers(model: TimelineModel, state: TimelineState) -> List[TimeMarker]:
    """Gridlines covering the visible window plus one interval past its edge.

    RULES:
    - Only times within [0, total_duration] are emitted
    - At most MAX_MARKERS gridlines, counted from the left
    """
    interval = marker_interval(model, state)
    start = math.floor(state.pan_offset / interval) * interval
    end = state.pan_offset + visible_duration(model, state)
    stop = min(end + interval, model.total_duration)

    markers: List[TimeMarker] = []
    time_ms = max(start, 0)
    while time_ms <= stop and len(markers) < config.MAX_MARKERS:
        markers.append(TimeMarker(
            time_ms=time_ms,
            position=time_to_position(model, state, time_ms),
            label=format_marker_label(time_ms),
        ))
        time_ms += interval
    return markers


def line_bars(model: TimelineModel, state: TimelineState) -> List[LineBar]:
    bars: List[LineBar] = []
    for index, line in enumerate(model.lines):
        left = time_to_position(model, state, line.begin)
        right = time_to_position(model, state, line.end)
        bars.append(LineBar(
            index=index,
            left=left,
            width=max(config.MIN_BAR_WIDTH_PERCENT, right - left),
            color=config.speaker_color(line.agent),
            is_background=line.has_only_background_vocals,
            is_selected=state.selected_line == index,
            title=line.text.strip(),
        ))
    return bars


def scrub_marker_position(model: TimelineModel, state: TimelineState) -> Optional[float]:
    if state.scrub_position is None:
        return None
    return time_to_position(model, state, state.scrub_position)


# ---------------------------------------------------------------------------
# Stateful shell
# ---------------------------------------------------------------------------


class TimelineEngine:
    """Holds the model and current state for one displayed document.

    WHY: Renderers want method calls and attribute reads, not state
    threading. The engine wraps the pure transitions above and adds the
    document-identity reset and optional event recording.

    RULES:
    - load() with the same sequence object keeps the state
    - load() with a different sequence object resets the state
    - Callers serialize calls to one engine; there is no locking
    """

    def __init__(self, lines: Sequence[Line] = (), record: bool = False) -> None:
        self._source: Sequence[Line] = lines
        self.model = TimelineModel.from_lines(lines)
        self.state = TimelineState()
        self.record = record
        self.events: List[Tuple[str, Tuple[Any, ...]]] = []

    def load(self, lines: Sequence[Line]) -> None:
        if lines is self._source:
            return
        logger.debug("Timeline reset for new document (%d lines)", len(lines))
        self._source = lines
        self.model = TimelineModel.from_lines(lines)
        self.state = TimelineState()
        self.events = []

    def _apply(self, name: str, transition: Callable[..., TimelineState], *args: Any) -> TimelineState:
        if self.record:
            self.events.append((name, args))
        self.state = transition(self.model, self.state, *args)
        return self.state

    @classmethod
    def replay(cls, lines: Sequence[Line], events: Sequence[Tuple[str, Tuple[Any, ...]]]) -> TimelineEngine:
        """Rebuild an engine by re-applying recorded events in order."""
        engine = cls(lines)
        for name, args in events:
            getattr(engine, name)(*args)
        return engine

    # -- interactions ------------------------------------------------------

    def click(self, fraction: float) -> TimelineState:
        return self._apply("click", click, fraction)

    def wheel(self, fraction: float, delta_sign: float) -> TimelineState:
        return self._apply("wheel", wheel, fraction, delta_sign)

    def drag_start(self, pointer_x: float) -> TimelineState:
        return self._apply("drag_start", drag_start, pointer_x)

    def drag_move(self, pointer_x: float, track_width: float) -> TimelineState:
        return self._apply("drag_move", drag_move, pointer_x, track_width)

    def queue_drag_move(self, pointer_x: float, track_width: float) -> TimelineState:
        return self._apply("queue_drag_move", queue_drag_move, pointer_x, track_width)

    def flush_frame(self) -> TimelineState:
        return self._apply("flush_frame", flush_frame)

    def drag_end(self) -> TimelineState:
        return self._apply("drag_end", drag_end)

    def settle(self) -> TimelineState:
        return self._apply("settle", settle)

    def mouse_leave(self) -> TimelineState:
        return self._apply("mouse_leave", mouse_leave)

    def zoom_in(self) -> TimelineState:
        return self._apply("zoom_in", zoom_in)

    def zoom_out(self) -> TimelineState:
        return self._apply("zoom_out", zoom_out)

    def reset_zoom(self) -> TimelineState:
        return self._apply("reset_zoom", reset_zoom)

    def select_line(self, index: int) -> TimelineState:
        return self._apply("select_line", select_line, index)

    # -- read-only view ----------------------------------------------------

    @property
    def lines(self) -> Tuple[Line, ...]:
        return self.model.lines

    @property
    def zoom(self) -> float:
        return self.state.zoom

    @property
    def pan_offset(self) -> float:
        return self.state.pan_offset

    @property
    def selected_line(self) -> Optional[int]:
        return self.state.selected_line

    @property
    def scrub_position(self) -> Optional[float]:
        return self.state.scrub_position

    @property
    def is_dragging(self) -> bool:
        return self.state.is_dragging

    @property
    def total_duration(self) -> int:
        return self.model.total_duration

    @property
    def visible_duration(self) -> float:
        return visible_duration(self.model, self.state)

    @property
    def max_pan_offset(self) -> float:
        return max_pan_offset(self.model, self.state)

    @property
    def can_zoom_in(self) -> bool:
        return self.state.zoom < config.MAX_ZOOM

    @property
    def can_zoom_out(self) -> bool:
        return self.state.zoom > config.MIN_ZOOM

    @property
    def can_reset_zoom(self) -> bool:
        return self.state.zoom != config.MIN_ZOOM

    @property
    def zoom_label(self) -> Optional[str]:
        """Zoom indicator such as "2.0x", None at minimum zoom."""
        if self.state.zoom <= config.MIN_ZOOM:
            return None
        return "{:.1f}x".format(self.state.zoom)

    def time_to_position(self, time_ms: float) -> float:
        return time_to_position(self.model, self.state, time_ms)

    def position_to_time(self, position: float) -> float:
        return position_to_time(self.model, self.state, position)

    def time_markers(self) -> List[TimeMarker]:
        return time_markers(self.model, self.state)

    def line_bars(self) -> List[LineBar]:
        return line_bars(self.model, self.state)

    def scrub_marker_position(self) -> Optional[float]:
        return scrub_marker_position(self.model, self.state)
