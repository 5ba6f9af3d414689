"""
Raster rendering of a generated field with matplotlib.

Wires are drawn as polylines through cell centres with a ring at each
end. The flow overlay draws one short stroke per non-zero channel, with
opacity and width proportional to its strength.
"""

import io
import math
from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from matplotlib.colors import to_rgba
import structlog

from ..config.field_params import FieldParams
from ..core.directions import FlowChannel
from ..core.field_generator import FieldState
from ..core.flow_field import MAX_STRENGTH

logger = structlog.get_logger()

FLOW_COLOR = (204 / 255, 153 / 255, 153 / 255)
GRID_COLOR = (230 / 255, 230 / 255, 230 / 255, 0.15)


def _flow_segment(channel: int, cx: float, cy: float, length: float):
    half = length / 2
    if channel == FlowChannel.VERTICAL:
        return [(cx, cy - half), (cx, cy + half)]
    if channel == FlowChannel.HORIZONTAL:
        return [(cx - half, cy), (cx + half, cy)]
    offset = half * math.sqrt(2) / 2
    if channel == FlowChannel.DIAGONAL_NW_SE:
        return [(cx - offset, cy - offset), (cx + offset, cy + offset)]
    return [(cx - offset, cy + offset), (cx + offset, cy - offset)]


def render_field(
    state: FieldState,
    params: Optional[FieldParams] = None,
    path: Optional[Union[str, Path]] = None,
    dpi: int = 100,
) -> bytes:
    """
    Render wires and overlays to PNG.

    Args:
        state: Generated field
        params: Display parameters (defaults to the ones used for generation)
        path: Optional file to write the PNG to
        dpi: Output resolution; the image is viewport-sized in pixels

    Returns:
        PNG bytes
    """
    params = params or state.params
    viewport = state.viewport()
    cw, ch = viewport.cell_extent()
    width = max(params.viewport_width, 1)
    height = max(params.viewport_height, 1)
    px_to_pt = 72 / dpi

    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    try:
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_axis_off()
        fig.patch.set_facecolor(params.bg_color)

        wires = [wire for wire in state.wires if len(wire) > params.cut_off_length]
        paths = [[((c.x + 0.5) * cw, (c.y + 0.5) * ch) for c in wire.cells] for wire in wires]

        if paths:
            ax.add_collection(
                LineCollection(
                    paths,
                    colors=params.fg_color,
                    linewidths=params.cell_size / 4 * px_to_pt,
                    capstyle="butt",
                    joinstyle="round",
                )
            )

            ends = [p[0] for p in paths] + [p[-1] for p in paths]
            radius_pt = params.cell_size / 4 * px_to_pt
            ax.scatter(
                [x for x, _ in ends],
                [y for _, y in ends],
                s=(2 * radius_pt) ** 2,
                facecolors=params.bg_color,
                edgecolors=params.fg_color,
                linewidths=params.cell_size / 6 * px_to_pt,
                zorder=3,
            )

        if params.show_flow_field and not state.flow.is_empty():
            segments, colors, widths = [], [], []
            length = params.cell_size * 0.8
            for x, y, strengths in state.flow.nonzero_cells():
                cx, cy = (x + 0.5) * cw, (y + 0.5) * ch
                for channel, strength in enumerate(strengths):
                    if strength == 0:
                        continue
                    level = strength / MAX_STRENGTH
                    segments.append(_flow_segment(channel, cx, cy, length))
                    colors.append(to_rgba(FLOW_COLOR, level))
                    widths.append((level * 3 + 0.5) * px_to_pt)
            ax.add_collection(LineCollection(segments, colors=colors, linewidths=widths, zorder=4))

        if params.show_grid:
            grid_lines = [[(i * cw, 0), (i * cw, height)] for i in range(state.grid.width + 1)]
            grid_lines += [[(0, j * ch), (width, j * ch)] for j in range(state.grid.height + 1)]
            ax.add_collection(LineCollection(grid_lines, colors=[GRID_COLOR], linewidths=px_to_pt, zorder=5))

        buffer = io.BytesIO()
        fig.savefig(buffer, format="png", dpi=dpi, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    png = buffer.getvalue()

    if path is not None:
        Path(path).write_bytes(png)
        logger.info("Field rendered", path=str(path), wires_drawn=len(wires))
    return png
