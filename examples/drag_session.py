"""Replay a short pointer session: drag a node, pan, zoom, then click."""

from forcegraph import (
    GraphView,
    ManualScheduler,
    PointerDown,
    PointerMove,
    PointerUp,
    Wheel,
    sample_graph,
)


def main() -> None:
    graph = sample_graph()
    scheduler = ManualScheduler()
    view = GraphView(
        graph.nodes,
        graph.edges,
        scheduler=scheduler,
        on_node_select=lambda node: print(f"Selected {node.id} ({node.label})"),
    )
    scheduler.run_until_idle()

    x, y = view.transform.apply(view.simulation.position("github"))
    view.dispatch(PointerDown(x, y))
    for step in range(1, 11):
        view.dispatch(PointerMove(x + 12.0 * step, y - 5.0 * step))
        scheduler.run_frame()
    view.dispatch(PointerUp(x + 120.0, y - 50.0))
    print("github dropped at", view.simulation.position("github"))

    frames = scheduler.run_until_idle()
    print(f"Re-settled in {frames} frame(s)")

    view.dispatch(PointerDown(20.0, 20.0))
    view.dispatch(PointerMove(60.0, 40.0))
    view.dispatch(PointerUp(60.0, 40.0))
    view.dispatch(Wheel(400.0, 300.0, delta_y=-300.0))
    print("Viewport:", view.transform)

    cx, cy = view.transform.apply(view.simulation.position("central"))
    view.dispatch(PointerDown(cx, cy))
    view.dispatch(PointerUp(cx, cy))
    print("Selected id:", view.selected_id)
    view.close()


if __name__ == "__main__":
    main()
