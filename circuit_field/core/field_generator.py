"""
Field generation and the commands that drive it.

``FieldGenerator`` owns everything a sketch session needs: the seeded
PRNG, the flow field (which survives regeneration while the grid size
stays the same) and the ``FieldState`` of the last run. Painting and
regeneration arrive as command objects applied one at a time through
``dispatch``.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

import structlog

from ..config.field_params import FieldParams
from .alea_prng import AleaPRNG
from .brush import StrokeTracker, Viewport, apply_brush
from .flow_field import BrushMode, FlowField
from .grid_occupancy import GridOccupancy, grid_dimensions
from .wire_generator import Wire, WireGenerator

logger = structlog.get_logger()


@dataclass
class FieldState:
    """Result of one generation run."""

    grid: GridOccupancy
    wires: List[Wire]
    flow: FlowField
    params: FieldParams

    @property
    def size(self) -> Tuple[int, int]:
        return (self.grid.width, self.grid.height)

    def viewport(self) -> Viewport:
        return Viewport(
            width=self.params.viewport_width,
            height=self.params.viewport_height,
            cell_size=self.params.cell_size,
            grid_width=self.grid.width,
            grid_height=self.grid.height,
        )


@dataclass
class RegenerateCommand:
    """Regenerate wires, optionally with new parameters."""

    params: Optional[FieldParams] = None


@dataclass
class PaintCommand:
    """One brush dab at fractional grid coordinates; None falls back to the params."""

    center_x: float
    center_y: float
    channel: int
    radius: Optional[int] = None
    opacity: Optional[float] = None
    mode: Optional[BrushMode] = None


@dataclass
class StrokeCommand:
    """Pointer event in viewport pixels."""

    phase: str  # "begin", "move" or "end"
    px: float = 0.0
    py: float = 0.0


@dataclass
class ClearFlowCommand:
    """Zero the whole flow field."""


Command = Union[RegenerateCommand, PaintCommand, StrokeCommand, ClearFlowCommand]

GeneratedHandler = Callable[[FieldState], None]
FlowChangedHandler = Callable[[FlowField], None]


def generate_field(
    params: FieldParams,
    flow: FlowField,
    prng: AleaPRNG,
) -> FieldState:
    """
    Grow wires over a fresh grid until no seedable cell remains.

    The flow field keeps its values when it already has the size of the
    new grid and is resized and zeroed otherwise. Every loop iteration
    claims at least its seed cell, so the loop ends after at most one
    iteration per interior cell.
    """
    started = time.perf_counter()
    prng.set_seed(params.seed)

    width, height = grid_dimensions(params.viewport_width, params.viewport_height, params.cell_size)
    grid = GridOccupancy(width, height)

    if (flow.width, flow.height) != (width, height):
        flow.resize(width, height)
        flow.reset()

    logger.info(
        "Generating field",
        grid_width=width,
        grid_height=height,
        seed=params.seed,
        seedable_cells=grid.available_count,
    )

    generator = WireGenerator(grid, flow, prng, params.wire_options())
    wires = []
    while grid.available_count:
        start = grid.pick_random_available(prng)
        grid.claim(start)
        wires.append(generator.generate(start))

    logger.info(
        "Field generated",
        wires=len(wires),
        prng_calls=prng.call_count,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return FieldState(grid=grid, wires=wires, flow=flow, params=params)


class FieldGenerator:
    """Session object applying paint and regenerate commands in order."""

    def __init__(
        self,
        params: Optional[FieldParams] = None,
        on_generated: Optional[GeneratedHandler] = None,
        on_flow_changed: Optional[FlowChangedHandler] = None,
    ):
        self.params = params or FieldParams()
        self.on_generated = on_generated
        self.on_flow_changed = on_flow_changed

        self.prng = AleaPRNG(self.params.seed)
        self.flow = FlowField()
        self.state: Optional[FieldState] = None
        self._stroke: Optional[StrokeTracker] = None

        self._handlers = {
            RegenerateCommand: self._handle_regenerate,
            PaintCommand: self._handle_paint,
            StrokeCommand: self._handle_stroke,
            ClearFlowCommand: self._handle_clear_flow,
        }

    def generate(self, params: Optional[FieldParams] = None) -> FieldState:
        """Run a full generation, replacing the current state."""
        if params is not None:
            self.params = params

        self.state = generate_field(self.params, self.flow, self.prng)
        self._stroke = StrokeTracker(self.flow, self.state.viewport())

        if self.on_generated:
            self.on_generated(self.state)
        return self.state

    def dispatch(self, command: Command):
        """Apply a single command; returns the handler's result."""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown command: {type(command).__name__}")
        return handler(command)

    def render_wires(self) -> List[Wire]:
        """Wires long enough to be drawn (longer than ``cut_off_length``)."""
        if self.state is None:
            return []
        return [wire for wire in self.state.wires if len(wire) > self.params.cut_off_length]

    def _ensure_state(self) -> FieldState:
        if self.state is None:
            return self.generate()
        return self.state

    def _flow_changed(self) -> None:
        if self.on_flow_changed:
            self.on_flow_changed(self.flow)

    def _handle_regenerate(self, command: RegenerateCommand) -> FieldState:
        return self.generate(command.params)

    def _handle_paint(self, command: PaintCommand) -> int:
        self._ensure_state()
        touched = apply_brush(
            self.flow,
            command.center_x,
            command.center_y,
            command.channel,
            command.radius if command.radius is not None else self.params.brush_size,
            command.opacity if command.opacity is not None else self.params.brush_opacity,
            command.mode if command.mode is not None else self.params.brush_mode,
        )
        self._flow_changed()
        return touched

    def _handle_stroke(self, command: StrokeCommand) -> bool:
        self._ensure_state()
        stroke = self._stroke
        params = self.params

        if command.phase == "begin":
            painted = stroke.begin(
                command.px,
                command.py,
                params.brush_size,
                params.brush_opacity,
                params.brush_mode,
                enabled=params.paint_flow,
            )
        elif command.phase == "move":
            painted = stroke.move(
                command.px,
                command.py,
                params.brush_size,
                params.brush_opacity,
                params.brush_mode,
                params.angle_smoothing,
                enabled=params.paint_flow,
            )
        elif command.phase == "end":
            if stroke.end() and params.auto_regenerate:
                self.generate()
            return False
        else:
            raise ValueError(f"Unknown stroke phase: {command.phase}")

        if painted:
            self._flow_changed()
        return painted

    def _handle_clear_flow(self, command: ClearFlowCommand) -> None:
        self.flow.reset()
        self._flow_changed()
