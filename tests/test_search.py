from forcegraph import filter_graph, sample_graph


def test_blank_term_returns_graph_unchanged():
    graph = sample_graph()

    assert filter_graph(graph, "") is graph
    assert filter_graph(graph, "   ") is graph


def test_filter_is_case_insensitive_on_labels():
    filtered = filter_graph(sample_graph(), "HASEEB")

    assert [n.id for n in filtered.nodes] == ["central"]
    assert filtered.edges == ()


def test_edges_need_both_endpoints():
    filtered = filter_graph(sample_graph(), "a")

    assert [n.id for n in filtered.nodes] == ["central", "snapchat", "picsart"]
    assert [e.id for e in filtered.edges] == ["central-snapchat", "central-picsart"]


def test_no_match_gives_empty_graph():
    filtered = filter_graph(sample_graph(), "myspace")

    assert filtered.nodes == () and filtered.edges == ()
