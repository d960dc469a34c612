"""Tests for edit operations over frame sequences."""

import numpy as np

from cubestudio.config import DelayConfig
from cubestudio.core import edits
from cubestudio.model import cube
from cubestudio.model.frames import Frame, FrameSequence, blank_frame


class TestToggle:
    """Test cell toggling"""

    def test_toggle_twice_restores(self):
        seq = FrameSequence([blank_frame()])
        once = edits.toggle_cell(seq, 0, 1, 2, 0)
        twice = edits.toggle_cell(once, 0, 1, 2, 0)

        assert cube.get_cell(once[0].cube, 1, 2, 0) == 1
        assert twice == seq

    def test_force_value_paints(self):
        seq = FrameSequence([blank_frame()])
        painted = edits.toggle_cell(seq, 0, 0, 0, 0, force_value=1)
        again = edits.toggle_cell(painted, 0, 0, 0, 0, force_value=1)
        assert cube.count_on(again[0].cube) == 1

    def test_invalid_index_is_noop(self):
        seq = FrameSequence([blank_frame()])
        assert edits.toggle_cell(seq, 5, 0, 0, 0) is seq
        assert edits.toggle_cell(seq, -1, 0, 0, 0) is seq


class TestPatterns:
    """Test applying fills to a frame"""

    def test_edges(self):
        seq = edits.apply_pattern(FrameSequence([blank_frame()]), 0, "edges")
        assert cube.count_on(seq[0].cube) == 26
        assert cube.get_cell(seq[0].cube, 1, 1, 1) == 0

    def test_all_then_clear(self):
        seq = edits.apply_pattern(FrameSequence([blank_frame(300)]), 0, "all")
        assert cube.count_on(seq[0].cube) == 27

        cleared = edits.clear_frame(seq, 0)
        assert cube.count_on(cleared[0].cube) == 0
        assert cleared[0].delay_ms == 300

    def test_pattern_keeps_delay(self):
        seq = FrameSequence([blank_frame(400)])
        assert edits.apply_pattern(seq, 0, "cross")[0].delay_ms == 400

    def test_unknown_pattern_is_noop(self):
        seq = FrameSequence([Frame(cube=cube.full())])
        assert edits.apply_pattern(seq, 0, "sparkle") is seq

    def test_seeded_random(self):
        seq = FrameSequence([blank_frame()])
        a = edits.apply_pattern(seq, 0, "random", rng=np.random.default_rng(7))
        b = edits.apply_pattern(seq, 0, "random", rng=np.random.default_rng(7))
        assert a == b


class TestFrameList:
    """Test adding, duplicating and deleting frames"""

    def test_set_delay_clamps(self):
        seq = FrameSequence([blank_frame()])
        assert edits.set_delay(seq, 0, 10)[0].delay_ms == 50
        assert edits.set_delay(seq, 0, 99999)[0].delay_ms == 5000
        assert edits.set_delay(seq, 0, 750)[0].delay_ms == 750
        assert edits.set_delay(seq, 3, 750) is seq

    def test_set_delay_custom_range(self):
        config = DelayConfig(min_delay_ms=100, max_delay_ms=1000, default_delay_ms=500)
        seq = FrameSequence([blank_frame()])
        assert edits.set_delay(seq, 0, 20, config)[0].delay_ms == 100

    def test_add_frame(self):
        seq, index = edits.add_frame(FrameSequence([Frame(cube=cube.full())]))
        assert len(seq) == 2
        assert index == 1
        assert seq[1].is_blank()
        assert seq[1].delay_ms == 220

    def test_duplicate_is_independent(self):
        source = FrameSequence([Frame(cube=cube.full(), delay_ms=120)])
        seq, index = edits.duplicate_frame(source, 0)
        assert index == 1
        assert seq[1] == seq[0]

        toggled = edits.toggle_cell(seq, 1, 0, 0, 0)
        assert cube.count_on(toggled[0].cube) == 27
        assert cube.count_on(toggled[1].cube) == 26

    def test_delete_frame(self, three_frames):
        seq = edits.delete_frame(three_frames, 1)
        assert len(seq) == 2
        assert [frame.delay_ms for frame in seq] == [100, 300]

    def test_delete_sole_frame_leaves_blank(self):
        seq = edits.delete_frame(FrameSequence([Frame(cube=cube.full(), delay_ms=900)]), 0)
        assert len(seq) == 1
        assert seq[0].is_blank()
        assert seq[0].delay_ms == 220

    def test_clear_blank_frame_is_noop(self):
        seq = FrameSequence([blank_frame(300)])
        assert edits.clear_frame(seq, 0) is seq
