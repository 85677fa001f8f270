from core.local_state import Browsing, Editing, TableView
from core.models import Goal


def _goals():
    return [Goal(id=1, title="a", month="2025-01"), Goal(id=2, title="b", month="2025-02")]


def test_new_view_is_not_loaded():
    view = TableView()
    assert not view.loaded
    assert view.rows == []
    assert view.mode == Browsing()


def test_load_clears_error():
    view = TableView()
    view.error = "boom"
    view.load(_goals())
    assert view.loaded
    assert view.error is None
    assert view.get(2).title == "b"
    assert view.get(3) is None


def test_append_prepend():
    view = TableView(_goals())
    view.append(Goal(id=3, title="c", month="2025-03"))
    view.prepend(Goal(id=0, title="z", month="2024-12"))
    assert [g.id for g in view.rows] == [0, 1, 2, 3]


def test_merge_patches_only_matching_row():
    view = TableView(_goals())
    view.merge(1, is_done=True, title="A")
    assert view.get(1) == Goal(id=1, title="A", month="2025-01", is_done=True)
    assert view.get(2) == _goals()[1]


def test_edit_mode_tracks_one_row():
    view = TableView(_goals())
    view.start_edit(2)
    assert view.mode == Editing(2)
    assert view.is_editing(2)
    assert not view.is_editing(1)
    view.cancel_edit()
    assert not view.is_editing(2)


def test_remove_clears_edit_and_pending_delete():
    view = TableView(_goals())
    view.start_edit(1)
    view.ask_delete(1)
    view.remove(1)
    assert [g.id for g in view.rows] == [2]
    assert view.mode == Browsing()
    assert view.pending_delete is None


def test_delete_confirmation():
    view = TableView(_goals())
    view.ask_delete(2)
    assert view.pending_delete == 2
    view.clear_delete()
    assert view.pending_delete is None
