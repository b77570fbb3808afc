from .model import Node, Edge, GraphData, GraphFormatError, graph_from_dict, graph_to_dict, load_graph, sample_graph
from .validate import ValidationError, EdgeWarning, check_graph
from .config import ForceConfig, StyleConfig, ViewportConfig, ViewConfig, get_view_config, set_view_config
from .search import filter_graph
from .layout import (
    Simulation,
    settle,
    layout_graph,
    ManualScheduler,
    AsyncioScheduler,
    FrameScheduler,
)
from .view import (
    GraphView,
    ViewportTransform,
    InteractionController,
    GestureState,
    PointerDown,
    PointerMove,
    PointerUp,
    PointerCancel,
    PointerLeave,
    Wheel,
    Pinch,
    KeyPress,
    Frame,
    render_frame,
    node_style,
    frame_to_svg,
    plot_frame,
)

__all__ = [
    'Node',
    'Edge',
    'GraphData',
    'GraphFormatError',
    'graph_from_dict',
    'graph_to_dict',
    'load_graph',
    'sample_graph',
    'ValidationError',
    'EdgeWarning',
    'check_graph',
    'ForceConfig',
    'StyleConfig',
    'ViewportConfig',
    'ViewConfig',
    'get_view_config',
    'set_view_config',
    'filter_graph',
    'Simulation',
    'settle',
    'layout_graph',
    'ManualScheduler',
    'AsyncioScheduler',
    'FrameScheduler',
    'GraphView',
    'ViewportTransform',
    'InteractionController',
    'GestureState',
    'PointerDown',
    'PointerMove',
    'PointerUp',
    'PointerCancel',
    'PointerLeave',
    'Wheel',
    'Pinch',
    'KeyPress',
    'Frame',
    'render_frame',
    'node_style',
    'frame_to_svg',
    'plot_frame',
]
