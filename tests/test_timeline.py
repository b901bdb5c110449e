"""Unit tests for the timeline interaction engine.

WHY: The timeline turns pointer input into zoom, pan, scrub and selection.
Small mistakes here show up as a zoom that drifts away from the pointer,
a drag that also selects a line, or a pan past the end of the song.

HOW: Tests drive both the pure transition functions and the
TimelineEngine shell:
  - Coordinate mapping between time and window percentage
  - Click-to-scrub and first-match line selection
  - Pointer-anchored wheel zoom and centred button zoom
  - Drag panning, threshold and click suppression
  - Gridline intervals and bar geometry
  - Reset on new document and event replay

RULES:
- Geometry uses pytest.approx; zoom limits and indices are exact
"""

import pytest

from lyrics_timeline import config
from lyrics_timeline.core import timeline
from lyrics_timeline.core.ir import Line, Word
from lyrics_timeline.core.timeline import TimelineEngine, TimelineModel, TimelineState
from lyrics_timeline.core.timing import parse_time


def make_lines(*ranges):
    """Lines with the given (begin, end) ms ranges and one word each."""
    return [
        Line(begin=b, end=e, text="line {}".format(i), lead_text="line {}".format(i),
             words=(Word(begin=b, end=e, text="line {}".format(i)),))
        for i, (b, e) in enumerate(ranges)
    ]


@pytest.fixture
def engine(two_lines):
    return TimelineEngine(two_lines)


@pytest.fixture
def zoomed(engine):
    """Engine at zoom 1.5 centred on 2500 ms (pan 833.33, visible 3333.33)."""
    engine.zoom_in()
    return engine


class TestDerivedQuantities:
    """total/visible duration and the time ↔ position mapping."""

    def test_total_duration_is_latest_end(self, engine):
        assert engine.total_duration == 5000

    def test_empty_document(self):
        assert TimelineEngine([]).total_duration == 0

    def test_visible_duration(self, zoomed):
        assert zoomed.visible_duration == pytest.approx(5000 / 1.5)

    def test_window_edges_map_to_0_and_100(self, zoomed):
        zoomed.wheel(0.3, -1)
        assert zoomed.time_to_position(zoomed.pan_offset) == pytest.approx(0)
        end = zoomed.pan_offset + zoomed.visible_duration
        assert zoomed.time_to_position(end) == pytest.approx(100)

    def test_position_to_time_inverts(self, zoomed):
        t = zoomed.position_to_time(37.5)
        assert zoomed.time_to_position(t) == pytest.approx(37.5)

    def test_empty_document_position_is_zero(self):
        assert TimelineEngine([]).time_to_position(1000) == 0.0


class TestClick:
    """Clicks scrub to the pointer and select the first line containing it."""

    def test_two_line_document_selects_second_line(self, engine):
        engine.click(0.5)
        assert engine.selected_line == 1
        assert engine.scrub_position == pytest.approx(2500)

    def test_shared_boundary_selects_first_match(self, engine):
        engine.click(0.4)
        assert engine.selected_line == 0

    def test_gap_selects_nothing_but_scrubs(self):
        engine = TimelineEngine(make_lines((0, 1000), (3000, 4000)))
        engine.click(0.5)
        assert engine.selected_line is None
        assert engine.scrub_position == pytest.approx(2000)

    def test_gap_keeps_previous_selection(self):
        engine = TimelineEngine(make_lines((0, 1000), (3000, 4000)))
        engine.click(0.1)
        engine.click(0.5)
        assert engine.selected_line == 0

    def test_click_past_end_clamps(self, engine):
        engine.click(1.5)
        assert engine.scrub_position == 5000
        assert engine.selected_line == 1

    def test_click_before_start_clamps(self, engine):
        engine.click(-0.2)
        assert engine.scrub_position == 0
        assert engine.selected_line == 0

    def test_click_uses_visible_window(self, zoomed):
        zoomed.click(0.0)
        assert zoomed.scrub_position == pytest.approx(zoomed.pan_offset)

    def test_empty_document_is_noop(self):
        engine = TimelineEngine([])
        engine.click(0.5)
        assert engine.state == TimelineState()

    def test_pure_transition_leaves_input_untouched(self, two_lines):
        model = TimelineModel.from_lines(two_lines)
        before = TimelineState()
        after = timeline.click(model, before, 0.5)
        assert before.selected_line is None
        assert after.selected_line == 1


class TestWheelZoom:
    """Wheel zoom keeps the time under the pointer fixed."""

    def test_zoom_in_step(self, engine):
        engine.wheel(0.25, -1)
        assert engine.zoom == pytest.approx(1.25)
        assert engine.pan_offset == pytest.approx(250)

    def test_pointer_time_is_preserved(self, engine):
        engine.wheel(0.25, -1)
        assert engine.position_to_time(25) == pytest.approx(1250)

    def test_anchor_holds_over_many_steps(self, engine):
        for delta in (-1, -1, -1, 1, -1, 1, 1):
            engine.wheel(0.5, delta)
            assert engine.position_to_time(50) == pytest.approx(2500)

    def test_zoom_out_at_minimum_stays(self, engine):
        engine.wheel(0.7, 1)
        assert engine.zoom == config.MIN_ZOOM
        assert engine.pan_offset == 0

    def test_zoom_clamped_to_maximum(self, engine):
        for _ in range(30):
            engine.wheel(0.5, -1)
        assert engine.zoom == config.MAX_ZOOM

    def test_pan_clamped_at_edges(self, engine):
        engine.wheel(1.0, -1)
        assert engine.pan_offset <= engine.max_pan_offset + 1e-9
        engine.wheel(0.0, 1)
        assert engine.pan_offset >= 0

    def test_empty_document_is_noop(self):
        engine = TimelineEngine([])
        engine.wheel(0.5, -1)
        assert engine.state == TimelineState()


class TestButtonZoom:
    """Button zoom multiplies by 1.5 and keeps the window centre."""

    def test_zoom_in_keeps_centre(self, engine):
        engine.zoom_in()
        assert engine.zoom == pytest.approx(1.5)
        assert engine.pan_offset + engine.visible_duration / 2 == pytest.approx(2500)

    def test_zoom_in_from_edge_keeps_centre(self, engine):
        engine.wheel(0.0, -1)
        centre = engine.pan_offset + engine.visible_duration / 2
        engine.zoom_in()
        assert engine.pan_offset + engine.visible_duration / 2 == pytest.approx(centre)

    def test_zoom_out_returns_to_full_view(self, zoomed):
        zoomed.zoom_out()
        assert zoomed.zoom == 1.0
        assert zoomed.pan_offset == 0

    def test_zoom_limits(self, engine):
        for _ in range(12):
            engine.zoom_in()
        assert engine.zoom == config.MAX_ZOOM
        for _ in range(12):
            engine.zoom_out()
        assert engine.zoom == config.MIN_ZOOM

    def test_reset_zoom(self, zoomed):
        zoomed.reset_zoom()
        assert zoomed.zoom == 1
        assert zoomed.pan_offset == 0

    def test_controls_enablement(self, engine):
        assert engine.can_zoom_in
        assert not engine.can_zoom_out
        assert not engine.can_reset_zoom
        assert engine.zoom_label is None
        engine.zoom_in()
        assert engine.can_zoom_out
        assert engine.can_reset_zoom
        assert engine.zoom_label == "1.5x"

    def test_empty_document_is_noop(self):
        engine = TimelineEngine([])
        engine.zoom_in()
        assert engine.zoom == 1


class TestDrag:
    """Dragging pans the window; a real drag swallows the trailing click."""

    def test_no_drag_at_minimum_zoom(self, engine):
        engine.drag_start(100)
        assert not engine.is_dragging

    def test_drag_pans_opposite_to_pointer(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(150, 500)
        assert zoomed.pan_offset == pytest.approx(500)

    def test_drag_left_moves_window_later(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(50, 500)
        assert zoomed.pan_offset == pytest.approx(833.3333 + 333.3333, rel=1e-6)

    def test_drag_is_clamped(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(10000, 500)
        assert zoomed.pan_offset == 0
        zoomed.drag_move(-10000, 500)
        assert zoomed.pan_offset == pytest.approx(zoomed.max_pan_offset)

    def test_move_without_drag_is_noop(self, zoomed):
        before = zoomed.state
        zoomed.drag_move(300, 500)
        assert zoomed.state == before

    def test_click_after_drag_is_suppressed(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(150, 500)
        zoomed.drag_end()
        zoomed.click(0.5)
        assert zoomed.selected_line is None
        assert zoomed.scrub_position is None

    def test_suppressed_click_consumes_flag(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(150, 500)
        zoomed.drag_end()
        zoomed.click(0.5)
        zoomed.click(0.5)
        assert zoomed.selected_line == 1

    def test_small_movement_still_clicks(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(102, 500)
        zoomed.drag_end()
        zoomed.click(0.5)
        assert zoomed.selected_line == 1

    def test_click_ignored_while_dragging(self, zoomed):
        zoomed.drag_start(100)
        zoomed.click(0.5)
        assert zoomed.selected_line is None

    def test_settle_clears_flag(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(150, 500)
        zoomed.drag_end()
        zoomed.settle()
        zoomed.click(0.5)
        assert zoomed.selected_line is not None

    def test_mouse_leave_cancels_drag(self, zoomed):
        zoomed.drag_start(100)
        zoomed.drag_move(150, 500)
        zoomed.mouse_leave()
        assert not zoomed.is_dragging
        assert not zoomed.state.did_drag


class TestCoalescedDrag:
    """Queued drag moves apply once per frame, last move wins."""

    def test_pan_waits_for_flush(self, zoomed):
        start = zoomed.pan_offset
        zoomed.drag_start(100)
        zoomed.queue_drag_move(120, 500)
        zoomed.queue_drag_move(150, 500)
        assert zoomed.pan_offset == start
        zoomed.flush_frame()
        assert zoomed.pan_offset == pytest.approx(500)

    def test_flag_set_before_flush(self, zoomed):
        zoomed.drag_start(100)
        zoomed.queue_drag_move(150, 500)
        assert zoomed.state.did_drag

    def test_drag_end_discards_pending(self, zoomed):
        start = zoomed.pan_offset
        zoomed.drag_start(100)
        zoomed.queue_drag_move(150, 500)
        zoomed.drag_end()
        zoomed.flush_frame()
        assert zoomed.pan_offset == start


class TestSelectLine:
    """External selection scrubs to the line start."""

    def test_select(self, engine):
        engine.select_line(1)
        assert engine.selected_line == 1
        assert engine.scrub_position == 2000

    def test_out_of_range_is_noop(self, engine):
        engine.select_line(5)
        engine.select_line(-1)
        assert engine.selected_line is None


class TestClampInvariants:
    """zoom and pan stay in range through any interaction sequence."""

    def test_mixed_sequence(self, engine):
        steps = [
            lambda: engine.wheel(0.9, -1),
            lambda: engine.zoom_in(),
            lambda: engine.drag_start(0),
            lambda: engine.drag_move(-4000, 300),
            lambda: engine.drag_end(),
            lambda: engine.wheel(0.1, 1),
            lambda: engine.zoom_out(),
            lambda: engine.wheel(0.5, -1),
            lambda: engine.click(0.8),
        ]
        for step in steps:
            step()
            assert config.MIN_ZOOM <= engine.zoom <= config.MAX_ZOOM
            assert -1e-9 <= engine.pan_offset <= engine.max_pan_offset + 1e-9


class TestTimeMarkers:
    """Gridline interval depends on zoom and document length."""

    def test_long_document_minute_markers(self):
        model = TimelineModel.from_lines(make_lines((0, 240000)))
        markers = timeline.time_markers(model, TimelineState())
        assert [m.time_ms for m in markers] == [0, 60000, 120000, 180000, 240000]
        assert [m.position for m in markers] == pytest.approx([0, 25, 50, 75, 100])
        assert [m.label for m in markers] == ["0:00", "1:00", "2:00", "3:00", "4:00"]

    def test_short_document_uses_30s(self, two_lines):
        model = TimelineModel.from_lines(two_lines)
        assert timeline.marker_interval(model, TimelineState()) == 30000
        assert [m.time_ms for m in timeline.time_markers(model, TimelineState())] == [0]

    def test_zoom_2_panned(self):
        model = TimelineModel.from_lines(make_lines((0, 240000)))
        state = TimelineState(zoom=2.0, pan_offset=50000)
        markers = timeline.time_markers(model, state)
        assert [m.time_ms for m in markers] == [30000, 60000, 90000, 120000, 150000, 180000]
        assert markers[0].position == pytest.approx(-50 / 3)

    def test_zoom_4_uses_10s(self):
        model = TimelineModel.from_lines(make_lines((0, 240000)))
        assert timeline.marker_interval(model, TimelineState(zoom=4.0)) == 10000

    def test_empty_document(self):
        assert TimelineEngine([]).time_markers() == [timeline.TimeMarker(0, 0.0, "0:00")]

    def test_huge_duration_is_capped(self):
        engine = TimelineEngine(make_lines((0, parse_time("1e200"))))
        markers = engine.time_markers()
        assert len(markers) == config.MAX_MARKERS
        assert markers[0].time_ms == 0
        assert markers[1].time_ms == config.MARKER_INTERVAL_COARSE_MS

    def test_markers_stay_within_document(self):
        model = TimelineModel.from_lines(make_lines((0, 100000)))
        state = TimelineState(zoom=2.0, pan_offset=50000)
        times = [m.time_ms for m in timeline.time_markers(model, state)]
        assert times == [30000, 60000, 90000]


class TestLineBars:
    """Bars are positioned in percent of the visible window."""

    def test_bar_geometry(self, engine):
        bars = engine.line_bars()
        assert (bars[0].left, bars[0].width) == pytest.approx((0, 40))
        assert (bars[1].left, bars[1].width) == pytest.approx((40, 60))

    def test_minimum_width(self):
        engine = TimelineEngine(make_lines((1000, 1000), (0, 5000)))
        assert engine.line_bars()[0].width == config.MIN_BAR_WIDTH_PERCENT

    def test_colour_and_selection(self, sample_lines):
        engine = TimelineEngine(sample_lines)
        engine.select_line(1)
        bars = engine.line_bars()
        assert bars[1].color == config.SPEAKER_COLORS["v2"]
        assert bars[1].is_selected
        assert not bars[0].is_selected
        assert bars[2].color == config.SPEAKER_COLORS["v1"]
        assert bars[2].is_background

    def test_unknown_agent_colour(self):
        assert config.speaker_color("v99") == config.DEFAULT_SPEAKER_COLOR

    def test_scrub_marker(self, engine):
        assert engine.scrub_marker_position() is None
        engine.click(0.5)
        assert engine.scrub_marker_position() == pytest.approx(50)


class TestEngineLifecycle:
    """State is scoped to one document and replayable."""

    def test_same_lines_keep_state(self, engine, two_lines):
        engine.click(0.5)
        engine.load(two_lines)
        assert engine.selected_line == 1

    def test_new_lines_reset_state(self, engine, two_lines):
        engine.zoom_in()
        engine.click(0.5)
        engine.load(list(two_lines))
        assert engine.state == TimelineState()

    def test_replay_reproduces_state(self, two_lines):
        engine = TimelineEngine(two_lines, record=True)
        engine.wheel(0.3, -1)
        engine.drag_start(10)
        engine.drag_move(40, 400)
        engine.drag_end()
        engine.click(0.6)
        engine.click(0.6)
        replayed = TimelineEngine.replay(two_lines, engine.events)
        assert replayed.state == engine.state
