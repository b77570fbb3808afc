import numpy as np
import pytest

from forcegraph.layout.forces import CenterForce, CollideForce, ForceInput, LinkForce, ManyBodyForce
from forcegraph.validate import ResolvedEdge
from forcegraph.model import Edge


def _state(points, velocities=None, alpha=1.0, seed=0):
    positions = np.asarray(points, dtype=float)
    if velocities is None:
        velocities = np.zeros_like(positions)
    return ForceInput(positions, np.asarray(velocities, dtype=float), alpha, np.random.default_rng(seed))


def _link(source, target):
    return ResolvedEdge(Edge(f"{source}-{target}", str(source), str(target)), source, target)


def test_charge_pushes_pair_apart_symmetrically():
    delta = ManyBodyForce(strength=-300.0)(_state([(0.0, 0.0), (10.0, 0.0)]))

    assert delta.displacement is None
    assert delta.velocity[0] == pytest.approx((-30.0, 0.0))
    assert delta.velocity[1] == pytest.approx((30.0, 0.0))


def test_charge_scales_with_alpha():
    hot = ManyBodyForce()(_state([(0.0, 0.0), (0.0, 20.0)], alpha=1.0)).velocity
    cool = ManyBodyForce()(_state([(0.0, 0.0), (0.0, 20.0)], alpha=0.25)).velocity

    assert cool == pytest.approx(hot * 0.25)


def test_charge_is_finite_for_coincident_nodes():
    dv = ManyBodyForce()(_state([(5.0, 5.0), (5.0, 5.0), (5.0, 5.0)])).velocity

    assert np.isfinite(dv).all()
    assert dv.sum(axis=0) == pytest.approx((0.0, 0.0), abs=1e-9)


def test_link_pulls_stretched_pair_toward_distance():
    force = LinkForce([_link(0, 1)], count=2, distance=100.0)

    dv = force(_state([(0.0, 0.0), (200.0, 0.0)])).velocity

    assert dv[0] == pytest.approx((50.0, 0.0), abs=1e-5)
    assert dv[1] == pytest.approx((-50.0, 0.0), abs=1e-5)


def test_link_pushes_compressed_pair_apart():
    force = LinkForce([_link(0, 1)], count=2, distance=100.0)

    dv = force(_state([(0.0, 0.0), (50.0, 0.0)])).velocity

    assert dv[0][0] < 0.0 < dv[1][0]


def test_link_moves_hub_less_than_leaves():
    links = [_link(0, 1), _link(0, 2), _link(0, 3)]
    force = LinkForce(links, count=4, distance=10.0)

    dv = force(_state([(0.0, 0.0), (100.0, 0.0), (0.0, 100.0), (-100.0, 0.0)])).velocity

    hub = np.hypot(*dv[0])
    leaf = np.hypot(*dv[1])
    assert hub < leaf


def test_link_without_edges_is_inert():
    force = LinkForce([], count=3)

    assert not force(_state(np.zeros((3, 2)))).velocity.any()


def test_center_force_translates_mean_onto_target():
    delta = CenterForce(100.0, 50.0)(_state([(0.0, 0.0), (10.0, 0.0)]))

    assert not delta.velocity.any()
    assert delta.displacement == pytest.approx(np.array([[95.0, 50.0], [95.0, 50.0]]))


def test_collide_separates_coincident_nodes():
    dv = CollideForce([30.0, 30.0])(_state([(0.0, 0.0), (0.0, 0.0)])).velocity

    assert np.isfinite(dv).all()
    assert dv[0] == pytest.approx(-dv[1])
    assert np.hypot(*dv[0]) == pytest.approx(30.0, rel=1e-3)


def test_collide_ignores_pairs_that_do_not_overlap():
    dv = CollideForce([10.0, 10.0])(_state([(0.0, 0.0), (25.0, 0.0)])).velocity

    assert not dv.any()


def test_collide_uses_predicted_positions():
    # Apart now, overlapping after this tick's velocity is applied.
    dv = CollideForce([10.0, 10.0])(
        _state([(0.0, 0.0), (25.0, 0.0)], velocities=[(5.0, 0.0), (-5.0, 0.0)])
    ).velocity

    assert dv[0][0] < 0.0 < dv[1][0]


def test_collide_moves_smaller_node_more():
    dv = CollideForce([40.0, 10.0])(_state([(0.0, 0.0), (20.0, 0.0)])).velocity

    assert abs(dv[1][0]) > abs(dv[0][0])


def test_forces_do_not_write_to_the_snapshot():
    positions = np.array([(0.0, 0.0), (0.0, 0.0), (30.0, 0.0)])
    positions.flags.writeable = False
    state = ForceInput(positions, np.zeros((3, 2)), 1.0, np.random.default_rng(1))

    for force in (ManyBodyForce(), CollideForce([30.0] * 3), LinkForce([_link(0, 2)], 3), CenterForce()):
        force(state)

    assert positions.tolist() == [[0.0, 0.0], [0.0, 0.0], [30.0, 0.0]]
