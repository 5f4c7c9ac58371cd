"""Tests for the Frame Store."""

import pytest

from keyframer.core import Direction, FrameField, FrameIndexError
from keyframer.store import FrameStore


@pytest.fixture
def filled(frame_factory) -> FrameStore:
    store = FrameStore()
    for i in range(3):
        store.append(frame_factory(timestamp=float(i), raster=bytes([i]), notes=f"n{i}"))
    return store


class TestAppend:
    def test_empty_store(self, store):
        assert len(store) == 0
        assert store.current_index is None
        assert store.current is None
        assert not store

    def test_first_append_selects(self, store, frame_factory):
        index = store.append(frame_factory(1.0))
        assert index == 0
        assert store.current_index == 0

    def test_append_keeps_selection_and_prior_frames(self, filled, frame_factory):
        filled.select(1)
        before = filled.snapshot()

        filled.append(frame_factory(9.0))

        assert len(filled) == 4
        assert filled.current_index == 1
        assert filled.snapshot()[:3] == before
        assert filled[3].timestamp == 9.0

    def test_insertion_order_not_sorted(self, store, frame_factory):
        for t in (5.0, 1.0, 3.0):
            store.append(frame_factory(t))
        assert [f.timestamp for f in store] == [5.0, 1.0, 3.0]


class TestReplaceAll:
    def test_resets_selection(self, filled, frame_factory):
        filled.select(2)
        filled.replace_all([frame_factory(10.0), frame_factory(11.0)])
        assert [f.timestamp for f in filled] == [10.0, 11.0]
        assert filled.current_index == 0

    def test_replace_with_nothing(self, filled):
        filled.replace_all([])
        assert len(filled) == 0
        assert filled.current_index is None


class TestUpdate:
    def test_only_target_field_changes(self, filled):
        before = filled.snapshot()

        filled.update(1, "description", "Arm raised")

        after = filled.snapshot()
        assert after[0] == before[0]
        assert after[2] == before[2]
        assert after[1].description == "Arm raised"
        assert after[1].notes == before[1].notes
        assert after[1].raster == before[1].raster
        assert after[1].timestamp == before[1].timestamp

    def test_update_notes_with_enum(self, filled):
        filled.update(0, FrameField.NOTES, "watch the elbow")
        assert filled[0].notes == "watch the elbow"

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_out_of_range(self, filled, index):
        with pytest.raises(FrameIndexError):
            filled.update(index, "notes", "x")

    def test_unknown_field(self, filled):
        with pytest.raises(ValueError):
            filled.update(0, "timestamp", "0")

    def test_update_current(self, filled):
        filled.navigate(Direction.NEXT)
        filled.update_current("notes", "current")
        assert filled[1].notes == "current"

    def test_update_current_on_empty(self, store):
        with pytest.raises(FrameIndexError):
            store.update_current("notes", "x")


class TestNavigate:
    def test_previous_at_start_is_noop(self, filled):
        assert filled.navigate(Direction.PREVIOUS) == 0
        assert filled.current_index == 0

    def test_next_at_end_is_noop(self, filled):
        filled.select(2)
        assert filled.navigate(Direction.NEXT) == 2
        assert filled.current_index == 2

    def test_walk_forward_and_back(self, filled):
        assert [filled.navigate(1) for _ in range(4)] == [1, 2, 2, 2]
        assert [filled.navigate(-1) for _ in range(4)] == [1, 0, 0, 0]

    def test_navigate_empty(self, store):
        assert store.navigate(Direction.NEXT) is None

    def test_invalid_direction(self, filled):
        with pytest.raises(ValueError):
            filled.navigate(2)


class TestRemove:
    def test_remove_before_selection_shifts_it(self, filled):
        filled.select(2)
        removed = filled.remove(0)
        assert removed.timestamp == 0.0
        assert filled.current_index == 1
        assert filled.current.timestamp == 2.0

    def test_remove_selected_last_moves_back(self, filled):
        filled.select(2)
        filled.remove(2)
        assert filled.current_index == 1

    def test_remove_after_selection(self, filled):
        filled.remove(2)
        assert filled.current_index == 0

    def test_remove_only_frame(self, store, frame_factory):
        store.append(frame_factory())
        store.remove(0)
        assert store.current_index is None

    def test_remove_out_of_range(self, filled):
        with pytest.raises(FrameIndexError):
            filled.remove(3)

    def test_clear(self, filled):
        filled.clear()
        assert len(filled) == 0
        assert filled.current_index is None


class TestSnapshot:
    def test_snapshot_is_a_copy(self, filled):
        snap = filled.snapshot()
        snap[0].description = "mutated outside"
        assert filled[0].description != "mutated outside"

    def test_current_is_a_copy(self, filled):
        filled.current.notes = "mutated outside"
        assert filled[0].notes == "n0"

    def test_select_out_of_range(self, filled):
        with pytest.raises(FrameIndexError):
            filled.select(5)


class TestListeners:
    def test_events(self, store, frame_factory):
        events = []
        store.subscribe(events.append)

        store.append(frame_factory())
        store.append(frame_factory())
        store.navigate(Direction.NEXT)
        store.navigate(Direction.NEXT)  # boundary, no event
        store.update(0, "notes", "x")
        store.replace_all([])

        assert [e.kind for e in events] == ["append", "append", "select", "update", "replace"]
        assert events[-1].length == 0
        assert events[-1].current_index is None

    def test_listener_error_does_not_break_store(self, store, frame_factory):
        def broken(event):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.append(frame_factory())
        assert len(store) == 1

        store.unsubscribe(broken)
        store.append(frame_factory())
        assert len(store) == 2
