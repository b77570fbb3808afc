import math

import numpy as np
import pytest

from forcegraph.config import ForceConfig
from forcegraph.layout import ManualScheduler, Simulation, layout_graph, phyllotaxis, settle
from forcegraph.model import Edge, Node, sample_graph


def _distance(a, b):
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _abc():
    nodes = [
        Node("A", "identity", "A"),
        Node("B", "platform", "B"),
        Node("C", "platform", "C"),
    ]
    edges = [Edge("A-B", "A", "B"), Edge("A-C", "A", "C")]
    return nodes, edges


def test_phyllotaxis_points_are_distinct():
    coords = phyllotaxis(50, center=(10.0, -5.0))

    diffs = coords[:, None, :] - coords[None, :, :]
    dist = np.hypot(diffs[..., 0], diffs[..., 1])
    np.fill_diagonal(dist, np.inf)
    assert dist.min() > 1.0
    assert coords[0] == pytest.approx((10.0 + 10.0 * math.sqrt(0.5), -5.0))


def test_nodes_with_coordinates_keep_them_at_start():
    sim = Simulation([Node("a", "platform", "a", x=40.0, y=-12.0), Node("b", "platform", "b")])

    assert sim.position("a") == (40.0, -12.0)
    assert sim.tick_count == 0 and not sim.running


def test_same_seed_gives_identical_layout():
    graph = sample_graph()

    first = Simulation(graph.nodes, graph.edges).tick(120)
    second = Simulation(graph.nodes, graph.edges).tick(120)

    assert np.array_equal(first.coords, second.coords)


def test_jiggle_depends_on_seed():
    nodes = [Node("a", "platform", "a", x=0.0, y=0.0), Node("b", "platform", "b", x=0.0, y=0.0)]

    one = Simulation(nodes, config=ForceConfig(seed=1)).tick(5)
    two = Simulation(nodes, config=ForceConfig(seed=2)).tick(5)

    assert not np.array_equal(one.coords, two.coords)


def test_sample_graph_settles_in_about_three_hundred_ticks():
    graph = sample_graph()
    sim = Simulation(graph.nodes, graph.edges)

    ticks = settle(sim)

    assert sim.settled
    assert 290 <= ticks <= 310
    assert np.isfinite(sim.coords).all()


def test_scheduled_simulation_goes_idle_after_end():
    graph = sample_graph()
    scheduler = ManualScheduler()
    ended = []
    ticked = []
    sim = Simulation(graph.nodes, graph.edges, scheduler=scheduler)
    sim.on("tick", lambda s: ticked.append(s.tick_count))
    sim.on("end", lambda s: ended.append(s.tick_count))

    frames = scheduler.run_until_idle()

    assert ended == [sim.tick_count]
    assert len(ticked) == frames == sim.tick_count
    assert not sim.running
    assert scheduler.pending == 0


def test_unknown_event_name_is_rejected():
    sim = Simulation([Node("a", "platform", "a")])

    with pytest.raises(ValueError):
        sim.on("frame", lambda s: None)


def test_pinned_node_stays_exactly_put():
    graph = sample_graph()
    sim = Simulation(graph.nodes, graph.edges)

    sim.pin("github", 123.5, -42.25)
    sim.tick(50)

    assert sim.position("github") == (123.5, -42.25)
    assert sim.velocity("github") == (0.0, 0.0)
    assert sim.pinned_ids == ("github",)


def test_unpin_releases_with_zero_velocity_and_no_jump():
    graph = sample_graph()
    sim = Simulation(graph.nodes, graph.edges)
    settle(sim)
    rest = sim.position("notion")

    sim.pin("notion", *rest)
    sim.tick(20)
    sim.unpin("notion")

    assert not sim.is_pinned("notion")
    assert sim.velocity("notion") == (0.0, 0.0)
    assert sim.position("notion") == rest
    sim.tick()
    assert _distance(sim.position("notion"), rest) < 10.0


def test_pin_reheats_and_unpin_lets_it_cool():
    graph = sample_graph()
    scheduler = ManualScheduler()
    sim = Simulation(graph.nodes, graph.edges, scheduler=scheduler)
    scheduler.run_until_idle()
    assert not sim.running

    sim.pin("central", 0.0, 0.0)
    assert sim.running
    assert sim.alpha_target == pytest.approx(0.3)
    for _ in range(30):
        scheduler.run_frame()
    assert sim.alpha > sim.config.alpha_min

    sim.unpin("central")
    assert sim.alpha_target == 0.0
    scheduler.run_until_idle()
    assert sim.settled and not sim.running


def test_non_finite_pin_is_ignored():
    sim = Simulation([Node("a", "platform", "a", x=1.0, y=2.0)])

    sim.pin("a", float("nan"), 5.0)

    assert not sim.is_pinned("a")
    assert sim.position("a") == (1.0, 2.0)


def test_unknown_node_raises_key_error():
    sim = Simulation([Node("a", "platform", "a")])

    with pytest.raises(KeyError):
        sim.pin("zzz", 0.0, 0.0)


def test_coincident_nodes_separate_past_collision_radii():
    nodes = [Node("a", "platform", "a", x=0.0, y=0.0), Node("b", "platform", "b", x=0.0, y=0.0)]
    sim = Simulation(nodes)
    sim.set_force("charge", None)

    settle(sim)

    assert np.isfinite(sim.coords).all()
    assert _distance(sim.position("a"), sim.position("b")) >= 60.0 - 1e-6


def test_malformed_edge_is_skipped_not_fatal():
    nodes = [Node("a", "platform", "a"), Node("b", "platform", "b")]
    edges = [Edge("a-b", "a", "b"), Edge("a-ghost", "a", "ghost")]

    sim = Simulation(nodes, edges)
    settle(sim)

    assert [w.kind for w in sim.warnings] == ["missing_target"]
    assert [e.id for e in sim.edges] == ["a-b"]
    assert np.isfinite(sim.coords).all()


def test_star_layout_keeps_linked_nodes_closer():
    nodes, edges = _abc()
    sim = Simulation(nodes, edges)
    settle(sim)
    a, b, c = (sim.position(name) for name in "ABC")

    assert _distance(a, b) < _distance(b, c)
    assert _distance(a, c) < _distance(b, c)
    for p, q in ((a, b), (a, c), (b, c)):
        assert _distance(p, q) >= 60.0 - 1.0


def test_layout_is_centered_on_requested_point():
    graph = sample_graph()

    positions = layout_graph(graph, center=(400.0, 300.0))

    mean = np.mean(list(positions.values()), axis=0)
    assert mean == pytest.approx((400.0, 300.0), abs=0.5)


def test_set_center_moves_layout_without_rebuilding():
    graph = sample_graph()
    scheduler = ManualScheduler()
    sim = Simulation(graph.nodes, graph.edges, scheduler=scheduler)
    scheduler.run_until_idle()
    center_force = sim.force("center")

    sim.set_center(250.0, -80.0)

    assert sim.force("center") is center_force
    assert sim.center == (250.0, -80.0)
    assert sim.running
    scheduler.run_until_idle()
    assert sim.coords.mean(axis=0) == pytest.approx((250.0, -80.0), abs=0.5)


def test_dispose_stops_ticks_for_good():
    graph = sample_graph()
    scheduler = ManualScheduler()
    sim = Simulation(graph.nodes, graph.edges, scheduler=scheduler)
    ticks = []
    sim.on("tick", lambda s: ticks.append(s.tick_count))
    scheduler.run_frame()
    scheduler.run_frame()

    sim.dispose()
    sim.pin("github", 0.0, 0.0)
    sim.reheat()
    scheduler.run_until_idle()

    assert ticks == [1, 2]
    assert sim.disposed and not sim.running
    assert scheduler.pending == 0


def test_stop_then_restart_resumes():
    graph = sample_graph()
    scheduler = ManualScheduler()
    sim = Simulation(graph.nodes, graph.edges, scheduler=scheduler)

    sim.stop()
    assert scheduler.run_frame() == 0
    assert sim.stopped

    sim.restart()
    scheduler.run_frame()
    assert sim.tick_count == 1


def test_restart_from_another_listener_does_not_double_tick():
    graph = sample_graph()
    scheduler = ManualScheduler()
    other = Simulation(graph.nodes, graph.edges, scheduler=scheduler)
    sim = Simulation(graph.nodes, graph.edges, scheduler=scheduler)
    restarted = []

    def bounce(_):
        if not restarted:
            restarted.append(True)
            sim.stop()
            sim.restart()

    other.on("tick", bounce)
    scheduler.run_frame()
    assert sim.tick_count == 0

    for expected in (1, 2, 3):
        scheduler.run_frame()
        assert sim.tick_count == expected

    sim.stop()
    scheduler.run_frame()
    assert sim.tick_count == 3
    assert not sim.running


def test_coords_view_is_read_only():
    sim = Simulation([Node("a", "platform", "a")])

    with pytest.raises(ValueError):
        sim.coords[0, 0] = 5.0


def test_empty_graph_ticks_without_error():
    sim = Simulation([])

    settle(sim)

    assert sim.settled
    assert sim.positions() == {}


def test_known_positions_take_priority():
    node = Node("a", "platform", "a", x=1.0, y=1.0)

    sim = Simulation([node], known_positions={"a": (7.0, 8.0)})

    assert sim.position("a") == (7.0, 8.0)
