import pytest

from forcegraph.model import Edge, Node
from forcegraph.validate import ValidationError, check_graph, index_nodes, resolve_edges


def _nodes(*ids):
    return [Node(node_id, "platform", node_id.upper()) for node_id in ids]


def test_check_graph_accepts_consistent_graph():
    nodes = _nodes("a", "b", "c")
    edges = [Edge("ab", "a", "b"), Edge("ac", "a", "c")]

    assert check_graph(nodes, edges) == []


@pytest.mark.parametrize(
    "edge, kind",
    [
        (Edge("ax", "a", "x"), "missing_target"),
        (Edge("xa", "x", "a"), "missing_source"),
        (Edge("aa", "a", "a"), "self_loop"),
    ],
)
def test_bad_edges_become_warnings(edge, kind):
    nodes = _nodes("a", "b")

    warnings = check_graph(nodes, [Edge("ab", "a", "b"), edge])

    assert [w.kind for w in warnings] == [kind]
    assert warnings[0].edge_id == edge.id


def test_resolve_edges_maps_endpoints_to_indices():
    index = index_nodes(_nodes("a", "b", "c"))

    resolved, warnings = resolve_edges([Edge("cb", "c", "b"), Edge("cz", "c", "z")], index)

    assert warnings and warnings[0].kind == "missing_target"
    assert [(r.source, r.target) for r in resolved] == [(2, 1)]


def test_duplicate_node_ids_are_rejected():
    with pytest.raises(ValidationError) as exc:
        index_nodes(_nodes("a", "b", "a"))

    assert "duplicate node id 'a'" in str(exc.value)


def test_skipped_edges_are_logged(caplog):
    with caplog.at_level("WARNING", logger="forcegraph.validate"):
        check_graph(_nodes("a"), [Edge("ab", "a", "b")])

    assert "unknown target 'b'" in caplog.text
