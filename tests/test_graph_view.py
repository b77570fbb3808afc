import numpy as np
import pytest

from forcegraph import GraphView, ManualScheduler, filter_graph, sample_graph
from forcegraph.view import GestureState, KeyPress, PointerDown, PointerMove, PointerUp, Wheel


def _view(**kwargs):
    graph = sample_graph()
    scheduler = ManualScheduler()
    view = GraphView(graph.nodes, graph.edges, scheduler=scheduler, **kwargs)
    scheduler.run_until_idle()
    return view, scheduler


def _screen(view, node_id):
    return view.transform.apply(view.simulation.position(node_id))


def test_settles_around_container_center():
    view, _ = _view(width=800, height=600)

    assert view.simulation.settled
    assert view.simulation.coords.mean(axis=0) == pytest.approx((400.0, 300.0), abs=0.5)


def test_click_reports_node_once_and_keeps_position():
    selected = []
    view, scheduler = _view(on_node_select=selected.append)
    before = view.simulation.position("github")
    x, y = _screen(view, "github")

    view.dispatch(PointerDown(x, y))
    scheduler.run_frame()
    scheduler.run_frame()
    view.dispatch(PointerUp(x + 1.0, y))

    assert [node.id for node in selected] == ["github"]
    assert view.selected_id == "github"
    assert view.selected_node.label == "github"
    assert view.simulation.position("github") == before


def test_drag_moves_node_without_selecting():
    selected = []
    view, scheduler = _view(on_node_select=selected.append)
    x, y = _screen(view, "notion")

    view.dispatch(PointerDown(x, y))
    view.dispatch(PointerMove(x + 40.0, y))
    scheduler.run_frame()
    view.dispatch(PointerMove(x + 80.0, y + 10.0))
    assert view.gesture is GestureState.DRAGGING
    scheduler.run_frame()
    view.dispatch(PointerUp(x + 80.0, y + 10.0))

    assert selected == []
    assert view.simulation.position("notion") == view.transform.invert((x + 80.0, y + 10.0))
    assert view.simulation.running


def test_selection_survives_ticks_and_zoom():
    view, scheduler = _view()
    frames = []
    view.on_frame(frames.append)

    view.select("picsart")
    view.dispatch(Wheel(400.0, 300.0, delta_y=-250.0))
    view.simulation.reheat()
    scheduler.run_frame()

    assert view.selected_id == "picsart"
    assert len(frames) == 3
    assert frames[-1].node("picsart").selected
    assert frames[-1].scale == pytest.approx(2.0 ** 0.5)


def test_escape_clears_selection():
    cleared = []
    view, _ = _view(on_deselect=lambda: cleared.append(True))
    view.select("central")

    view.dispatch(KeyPress("Escape"))

    assert view.selected_id is None
    assert cleared == [True]


def test_select_unknown_node_raises():
    view, _ = _view()

    with pytest.raises(KeyError):
        view.select("myspace")


def test_set_data_tears_down_previous_simulation():
    view, scheduler = _view()
    old = view.simulation
    old.reheat()
    scheduler.run_frame()
    old_ticks = old.tick_count
    old_github = old.position("github")
    frames = []
    view.on_frame(frames.append)

    view.set_data(*_subset("git"))
    scheduler.run_until_idle()

    assert old.disposed and not old.running
    assert old.tick_count == old_ticks
    assert view.simulation is not old
    assert view.simulation.node_ids == ("github",)
    assert frames and all(len(frame.nodes) == 1 for frame in frames)
    # Positions carry over for nodes present in both sets.
    assert view.simulation.tick_count > 0
    assert np.isfinite(view.simulation.position("github")).all()
    assert old.position("github") == old_github


def _subset(term):
    graph = filter_graph(sample_graph(), term)
    return graph.nodes, graph.edges


def test_set_data_keeps_or_clears_selection():
    view, _ = _view()
    view.select("github")

    view.set_data(*_subset("git"))
    assert view.selected_id == "github"

    view.set_data(*_subset("haseeb"))
    assert view.selected_id is None


def test_set_data_cancels_active_drag():
    view, _ = _view()
    x, y = _screen(view, "central")
    view.dispatch(PointerDown(x, y))
    view.dispatch(PointerMove(x + 50.0, y))

    view.set_data(*_subset("haseeb"))

    assert view.gesture is GestureState.IDLE
    assert view.simulation.pinned_ids == ()


def test_resize_moves_center_in_place():
    view, scheduler = _view(width=800, height=600)
    simulation = view.simulation

    view.resize(1000, 400)

    assert view.simulation is simulation
    assert simulation.center == (500.0, 200.0)
    assert simulation.running
    scheduler.run_until_idle()
    assert simulation.coords.mean(axis=0) == pytest.approx((500.0, 200.0), abs=0.5)


def test_resize_to_zero_is_accepted():
    view, _ = _view()

    view.resize(-10, 0)

    assert view.center == (0.0, 0.0)


def test_fit_to_view_brings_every_node_on_screen():
    view, _ = _view(width=300, height=200)

    view.fit_to_view()

    frame = view.frame()
    for node in frame.nodes:
        assert 0.0 <= node.x <= 300.0
        assert 0.0 <= node.y <= 200.0


def test_close_is_final():
    view, scheduler = _view()
    frames = []
    view.on_frame(frames.append)

    view.close()
    view.dispatch(Wheel(0.0, 0.0, delta_y=-100.0))
    scheduler.run_until_idle()

    assert view.closed
    assert frames == []
    with pytest.raises(RuntimeError):
        view.set_data((), ())
