"""Lay out the built-in identity graph and write it as SVG."""

from pathlib import Path

from forcegraph import GraphView, ManualScheduler, frame_to_svg, sample_graph


def main() -> None:
    graph = sample_graph()
    scheduler = ManualScheduler()
    view = GraphView(graph.nodes, graph.edges, scheduler=scheduler, width=800, height=600)

    frames = scheduler.run_until_idle()
    simulation = view.simulation
    print(f"Settled after {frames} frame(s), alpha={simulation.alpha:.5f}")
    print("Positions:")
    for node_id, (x, y) in simulation.positions().items():
        print(f"  {node_id}: ({x:.2f}, {y:.2f})")

    view.select("central")
    out = Path("sample_graph.svg")
    out.write_text(frame_to_svg(view.frame()), encoding="utf-8")
    print(f"SVG written to {out}")
    view.close()


if __name__ == "__main__":
    main()
