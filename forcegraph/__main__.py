import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from forcegraph import (
    GraphFormatError,
    GraphView,
    ManualScheduler,
    filter_graph,
    frame_to_svg,
    get_view_config,
    load_graph,
    plot_frame,
    sample_graph,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Lay out a node/edge graph with a force simulation")
    parser.add_argument(
        "path",
        nargs="?",
        help="JSON graph file with 'nodes' and 'edges' (default: built-in sample graph)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for coincident-node jiggle and seeding jitter (default: 0)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=1000,
        help="Upper bound on simulation frames to run (default: 1000)",
    )
    parser.add_argument("--width", type=float, default=800.0, help="Viewport width in pixels")
    parser.add_argument("--height", type=float, default=600.0, help="Viewport height in pixels")
    parser.add_argument(
        "--filter",
        default="",
        help="Only lay out nodes whose label contains this text",
    )
    parser.add_argument("--select", help="Node id to render as selected")
    parser.add_argument(
        "--fit",
        action="store_true",
        help="Zoom the viewport so the whole layout fits before rendering",
    )
    parser.add_argument("--svg-output-path", help="Write the settled frame as SVG")
    parser.add_argument("--png-output-path", help="Write the settled frame as an image via matplotlib")
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    if args.path:
        logger.info("Loading graph from %s", args.path)
        try:
            graph = load_graph(args.path)
        except GraphFormatError as exc:
            logger.error("Cannot read graph: %s", exc)
            raise SystemExit(1) from exc
    else:
        logger.info("No graph file given; using the sample graph")
        graph = sample_graph()
    graph = filter_graph(graph, args.filter)

    config = get_view_config()
    config.forces.seed = args.seed
    scheduler = ManualScheduler()
    view = GraphView(
        graph.nodes,
        graph.edges,
        scheduler=scheduler,
        config=config,
        width=args.width,
        height=args.height,
    )

    frames = scheduler.run_until_idle(max_frames=args.ticks)
    simulation = view.simulation
    logger.info(
        "Ran %d frame(s); settled=%s alpha=%.5f", frames, simulation.settled, simulation.alpha
    )

    if args.select:
        try:
            view.select(args.select)
        except KeyError:
            logger.warning("Cannot select %r: not in the laid-out graph", args.select)

    if simulation.warnings:
        print("Skipped edges:")
        for warning in simulation.warnings:
            print(f"  - {warning}")

    print(f"Settled: {simulation.settled} after {simulation.tick_count} tick(s)")
    print("Positions:")
    for node_id, (x, y) in simulation.positions().items():
        print(f"  {node_id}: ({x:.3f}, {y:.3f})")

    if args.fit:
        view.fit_to_view()
    frame = view.frame()

    if args.svg_output_path:
        output_path = Path(args.svg_output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing SVG to %s", output_path)
        output_path.write_text(frame_to_svg(frame), encoding="utf-8")
        print(f"SVG written to {output_path}")

    if args.png_output_path:
        written = plot_frame(frame, args.png_output_path)
        print(f"Image written to {written}")

    view.close()


if __name__ == "__main__":
    main(sys.argv[1:])
