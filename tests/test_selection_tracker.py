from coinmerge.components.grid_config import GridConfig
from coinmerge.utils.selection_tracker import SelectionChange, SelectionTracker, is_adjacent


def tracker_with_mix():
    return SelectionTracker(compatible=GridConfig().compatible)


def test_adjacency_is_four_connected():
    assert is_adjacent((1, 1), (0, 1))
    assert is_adjacent((1, 1), (1, 2))
    assert not is_adjacent((1, 1), (2, 2))
    assert not is_adjacent((1, 1), (1, 1))


def test_begin_requires_value_and_idle_tracker():
    tracker = SelectionTracker()
    assert not tracker.begin((0, 0), None)
    assert tracker.begin((0, 0), 5)
    assert not tracker.begin((1, 1), 5)
    assert tracker.path == [(0, 0)]


def test_duplicate_is_noop():
    tracker = SelectionTracker()
    tracker.begin((0, 0), 5)
    tracker.extend((0, 1), 5)
    tracker.extend((1, 1), 5)
    assert tracker.extend((0, 0), 5) is SelectionChange.IGNORED
    assert tracker.path == [(0, 0), (0, 1), (1, 1)]


def test_retracing_second_to_last_pops_last():
    tracker = SelectionTracker()
    tracker.begin((0, 0), 5)
    tracker.extend((0, 1), 5)
    assert tracker.extend((0, 0), 5) is SelectionChange.REMOVED
    assert tracker.path == [(0, 0)]


def test_non_adjacent_and_incompatible_are_noops():
    tracker = SelectionTracker()
    tracker.begin((0, 0), 5)
    assert tracker.extend((2, 2), 5) is SelectionChange.IGNORED
    assert tracker.extend((0, 1), 10) is SelectionChange.IGNORED
    assert tracker.extend((1, 0), None) is SelectionChange.IGNORED
    assert tracker.path == [(0, 0)]


def test_five_and_ten_interleave():
    tracker = tracker_with_mix()
    tracker.begin((0, 0), 5)
    assert tracker.extend((0, 1), 10) is SelectionChange.ADDED
    assert tracker.extend((0, 2), 5) is SelectionChange.ADDED
    assert tracker.extend((1, 2), 1) is SelectionChange.IGNORED
    assert len(tracker) == 3


def test_branching_path_accepts_neighbour_of_any_cell():
    # L-shape: (0,0) (0,1) (0,2), then (1,0) branches off the first cell.
    tracker = SelectionTracker()
    tracker.begin((0, 0), 1)
    tracker.extend((0, 1), 1)
    tracker.extend((0, 2), 1)
    assert tracker.extend((1, 0), 1) is SelectionChange.ADDED
    assert tracker.path == [(0, 0), (0, 1), (0, 2), (1, 0)]


def test_end_returns_path_and_resets():
    tracker = SelectionTracker()
    tracker.begin((0, 0), 1)
    tracker.extend((1, 0), 1)
    assert tracker.end() == [(0, 0), (1, 0)]
    assert not tracker.active
    assert tracker.base_value is None
    assert tracker.extend((2, 0), 1) is SelectionChange.IGNORED
