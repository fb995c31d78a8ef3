"""
Tests for the input-driven puzzle session
"""

import json
import os
import threading

import pytest

from flowcube.core.config import SessionConfig
from flowcube.core.geometry import Direction, Vec3
from flowcube.core.level import Level
from flowcube.core.paths import InvalidGestureError, PathColor
from flowcube.core.session import PuzzleSession
from flowcube.layouts import load_layout
from flowcube.utils.logger import SessionLogger


def drag(session, flow):
    """Press on the first cell, drag across the rest and release."""
    assert session.on_pressed(flow[0])
    for cell in flow[1:]:
        session.on_dragged(cell)
    return session.on_released()


class TestPressAndDrag:

    @pytest.fixture
    def session(self, easy_level):
        return PuzzleSession(easy_level)

    def test_press_on_empty_cell_is_ignored(self, session):
        assert not session.on_pressed(Vec3(1, 0, 0))
        assert not session.on_pressed(Vec3(5, 5, 5))
        assert not session.dragging

    def test_preview_does_not_touch_level(self, session):
        session.on_pressed(Vec3(0, 0, 0))
        session.on_dragged(Vec3(1, 0, 0))

        assert session.dragging
        assert session.view() is session.preview
        assert session.preview.segments_of(PathColor.RED) == [Vec3(1, 0, 0)]
        assert session.level.segments_of(PathColor.RED) == []
        assert session.preview_result.message == "RED ends at (1,0,0) (2 cells)"

    def test_release_commits(self, session, solutions):
        won = drag(session, solutions["easy"][PathColor.RED])
        assert not won
        assert not session.dragging
        assert session.view() is session.level
        assert session.level.is_connected(PathColor.RED)
        assert session.last_result.connected

    def test_drag_without_press_is_ignored(self, session):
        assert not session.on_dragged(Vec3(1, 0, 0))
        assert not session.on_released()
        assert session.last_result is None

    def test_dragging_back_rubber_bands(self, session):
        session.on_pressed(Vec3(0, 0, 0))
        session.on_dragged(Vec3(1, 0, 0))
        session.on_dragged(Vec3(1, 1, 0))
        session.on_dragged(Vec3(1, 0, 0))
        assert session.gesture.cells == [Vec3(0, 0, 0), Vec3(1, 0, 0)]

    def test_press_on_segment_resumes_flow(self, session, solutions):
        drag(session, solutions["easy"][PathColor.RED])
        assert session.on_pressed(Vec3(1, 0, 1))
        assert session.layer == 1
        assert session.gesture.cells == [Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(1, 0, 1)]
        # Still connected until released
        assert session.level.is_connected(PathColor.RED)
        session.on_released()
        assert not session.level.is_connected(PathColor.RED)
        assert session.level.flow_of(PathColor.RED)[-1] == Vec3(1, 0, 1)

    def test_single_press_on_start_erases(self, session, solutions):
        drag(session, solutions["easy"][PathColor.RED])
        session.on_pressed(Vec3(0, 0, 1))
        session.on_released()
        assert session.level.flow_of(PathColor.RED) is None
        assert session.last_result.erased

    def test_cancel_discards_gesture(self, session):
        session.on_pressed(Vec3(0, 0, 0))
        session.on_dragged(Vec3(1, 0, 0))
        session.cancel()
        assert not session.dragging
        assert not session.on_released()
        assert session.level.occupied_count() == 4

    def test_commit_during_drag_refreshes_preview(self, session, assert_consistent):
        session.on_pressed(Vec3(0, 1, 0))
        session.on_dragged(Vec3(1, 1, 0))
        session.commit([Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(1, 1, 0)])

        assert session.level.flow_of(PathColor.RED) == [Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(1, 1, 0)]
        with session.reading() as view:
            assert view is session.preview
            assert_consistent(view)
            # The live BLUE drag still cuts RED in the preview
            assert view.flow_of(PathColor.RED) == [Vec3(0, 0, 0), Vec3(1, 0, 0)]
            assert view.flow_of(PathColor.BLUE) == [Vec3(0, 1, 0), Vec3(1, 1, 0)]
        assert session.summary()["occupied"] == 6

    def test_summary(self, session):
        session.on_pressed(Vec3(0, 0, 0))
        summary = session.summary()
        assert summary["layout"] == "easy"
        assert summary["dragging"]
        assert summary["gesture"] == [(0, 0, 0)]
        assert summary["colors"] == ["RED", "BLUE"]


class TestLayerScroll:

    def test_scroll_without_drag(self, easy_level):
        session = PuzzleSession(easy_level)
        assert session.on_layer_scroll(Direction.OUT) == 1
        assert session.on_layer_scroll(Direction.OUT) == 1
        assert session.on_layer_scroll(Direction.IN) == 0
        assert session.on_layer_scroll(Direction.IN) == 0

    def test_planar_direction_is_rejected(self, easy_level):
        session = PuzzleSession(easy_level)
        with pytest.raises(ValueError):
            session.on_layer_scroll(Direction.LEFT)

    def test_scroll_carries_drag_to_empty_cell(self, hard_level):
        session = PuzzleSession(hard_level)
        session.on_pressed(Vec3(0, 1, 0))
        assert session.on_layer_scroll(Direction.OUT, Vec3(0, 1, 0)) == 1
        assert session.gesture.last == Vec3(0, 1, 1)
        assert session.preview.path_at(Vec3(0, 1, 1)).color is PathColor.RED

    def test_scroll_onto_own_start(self, easy_level):
        session = PuzzleSession(easy_level)
        session.on_pressed(Vec3(0, 0, 0))
        assert session.on_layer_scroll(Direction.OUT, Vec3(0, 0, 0)) == 1
        assert session.preview_result.connected

    def test_scroll_blocked_by_other_color(self, hard_level):
        session = PuzzleSession(hard_level)
        session.on_pressed(Vec3(2, 1, 0))
        # (2,1,1) holds the YELLOW START
        assert session.on_layer_scroll(Direction.OUT, Vec3(2, 1, 0)) == 0
        assert session.gesture.cells == [Vec3(2, 1, 0)]

    def test_scroll_blocked_by_obstacle(self, hard_level):
        session = PuzzleSession(hard_level)
        session.on_pressed(Vec3(0, 2, 0))
        for cell in (Vec3(1, 2, 0), Vec3(2, 2, 0)):
            session.on_dragged(cell)
        assert session.on_layer_scroll(Direction.OUT, Vec3(2, 2, 0)) == 0

    def test_scroll_during_drag_needs_a_cell(self, easy_level):
        session = PuzzleSession(easy_level)
        session.on_pressed(Vec3(0, 0, 0))
        assert session.on_layer_scroll(Direction.OUT) == 0


class TestWinAndLogging:

    def test_win_transition(self, easy_level, solutions):
        session = PuzzleSession(easy_level)
        assert not drag(session, solutions["easy"][PathColor.RED])
        assert drag(session, solutions["easy"][PathColor.BLUE])
        assert session.won

        session.clear_color(PathColor.BLUE)
        assert not session.won

    def test_coverage_can_be_disabled(self, demo_level):
        strict = PuzzleSession(demo_level)
        assert not drag(strict, [Vec3(0, 0, 0), Vec3(1, 0, 0), Vec3(1, 1, 0)])

        relaxed = PuzzleSession(demo_level, SessionConfig(require_full_coverage=False))
        assert relaxed.on_released()

    def test_reset(self, easy_level, solutions):
        session = PuzzleSession(easy_level)
        for flow in solutions["easy"].values():
            drag(session, flow)
        session.reset()
        assert not session.won
        assert session.level.occupied_count() == 4

    def test_commit_rejects_invalid_gesture(self, easy_level):
        session = PuzzleSession(easy_level)
        with pytest.raises(InvalidGestureError):
            session.commit([Vec3(1, 0, 0)])
        assert session.level.occupied_count() == 4

    def test_events_are_logged(self, tmp_path, solutions):
        level = Level(load_layout("easy"))
        logger = SessionLogger(str(tmp_path), "easy")
        session = PuzzleSession(level, logger=logger)

        for flow in solutions["easy"].values():
            drag(session, flow)
        with pytest.raises(InvalidGestureError):
            session.commit([])

        assert logger.count("press") == 2
        assert logger.count("commit") == 2
        assert logger.count("win") == 1
        assert logger.count("error") == 1

        log_file = session.close()
        assert os.path.exists(log_file)
        assert sorted(os.listdir(logger.run_dir)) == ["session_log.json", "summary.txt"]
        with open(log_file) as f:
            entries = json.load(f)
        assert entries[-1]["step_type"] == "error"
        with open(os.path.join(logger.run_dir, "summary.txt")) as f:
            assert "Solved: yes" in f.read()

    def test_log_events_config_creates_logger(self, tmp_path, easy_level):
        config = SessionConfig(log_events=True, log_dir=str(tmp_path))
        session = PuzzleSession(easy_level, config)
        assert isinstance(session.logger, SessionLogger)
        assert session.logger.run_dir.startswith(str(tmp_path))

    def test_flows(self, easy_level, solutions):
        session = PuzzleSession(easy_level)
        drag(session, solutions["easy"][PathColor.RED])
        flows = session.flows()
        assert flows[PathColor.RED] == solutions["easy"][PathColor.RED]
        assert flows[PathColor.BLUE] is None


class TestConcurrentAccess:

    def test_render_passes_never_see_partial_commits(self, solutions, assert_consistent):
        session = PuzzleSession(Level(load_layout("medium")))
        flows = list(solutions["medium"].values())
        done = threading.Event()
        failures = []

        def play():
            try:
                for i in range(150):
                    flow = flows[i % len(flows)]
                    session.on_pressed(flow[0])
                    # Stop short every other round so flows are left dangling
                    for cell in flow[1:len(flow) - i % 2]:
                        session.on_dragged(cell)
                    session.on_released()
                    if i % 7 == 0:
                        session.reset()
            except Exception as exc:
                failures.append(exc)
            finally:
                done.set()

        def render():
            try:
                while not done.is_set():
                    with session.reading() as view:
                        assert_consistent(view)
                    session.summary()
            except Exception as exc:
                failures.append(exc)

        threads = [threading.Thread(target=play), threading.Thread(target=render)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)

        assert not any(thread.is_alive() for thread in threads)
        assert failures == []
