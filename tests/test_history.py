"""Tests for the undo/redo history."""

import pytest

from cubestudio.common.exceptions import ValidationError
from cubestudio.core import edits
from cubestudio.core.history import HistoryManager
from cubestudio.model.frames import FrameSequence, blank_frame


@pytest.fixture
def initial():
    return FrameSequence([blank_frame()])


class TestHistoryManager:
    """Test history stack behaviour"""

    def test_initial_state(self, initial):
        history = HistoryManager(initial)
        assert len(history) == 1
        assert history.current is initial
        assert not history.can_undo
        assert not history.can_redo
        assert history.undo() is None
        assert history.redo() is None

    def test_undo_redo_inverse(self, initial):
        history = HistoryManager(initial)
        edited = edits.toggle_cell(initial, 0, 1, 1, 1)
        history.commit(edited, "toggle")

        assert history.undo() is initial
        assert history.redo() is edited
        assert history.current is edited

    def test_commit_discards_redo_branch(self, initial):
        history = HistoryManager(initial)
        first = edits.toggle_cell(initial, 0, 0, 0, 0)
        history.commit(first)
        history.undo()

        second = edits.toggle_cell(initial, 0, 2, 2, 2)
        history.commit(second)
        assert not history.can_redo
        assert history.redo() is None
        assert len(history) == 2

    def test_cap_evicts_oldest(self, initial):
        history = HistoryManager(initial, max_entries=50)
        seq = initial
        for i in range(51):
            seq = edits.toggle_cell(seq, 0, i % 3, (i // 3) % 3, (i // 9) % 3)
            history.commit(seq, f"toggle {i}")

        assert len(history) == 50
        assert history.position == 49
        assert history.entries[0].label == "toggle 1"

    def test_reset(self, initial):
        history = HistoryManager(initial)
        history.commit(edits.toggle_cell(initial, 0, 0, 0, 0))
        fresh = FrameSequence([blank_frame(500)])
        history.reset(fresh, "import")

        assert len(history) == 1
        assert history.current is fresh
        assert not history.can_undo

    def test_recent_entries(self, initial):
        history = HistoryManager(initial)
        seq = initial
        for i in range(3):
            seq = edits.toggle_cell(seq, 0, i, 0, 0)
            history.commit(seq, f"t{i}")
        history.undo()

        labels = [entry.label for entry in history.get_recent_entries(2)]
        assert labels == ["t0", "t1"]

    def test_invalid_cap(self, initial):
        with pytest.raises(ValidationError):
            HistoryManager(initial, max_entries=0)

    @pytest.mark.parametrize("count", [1, 2, 7, 49])
    def test_undo_redo_n_steps(self, initial, count):
        history = HistoryManager(initial, max_entries=50)
        states = [initial]
        for i in range(count):
            states.append(edits.toggle_cell(states[-1], 0, i % 3, (i // 3) % 3, (i // 9) % 3))
            history.commit(states[-1], f"toggle {i}")

        for expected in reversed(states[:-1]):
            assert history.undo() is expected
        assert history.undo() is None

        for expected in states[1:]:
            assert history.redo() is expected
        assert history.redo() is None
        assert history.current is states[-1]
