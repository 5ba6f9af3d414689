"""FastAPI application serving one in-memory field session."""

from typing import List, Literal, Optional, Tuple, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field, ValidationError
import structlog

from .. import __version__
from ..config import FieldParams, configure_logging, settings
from ..core.field_generator import (
    ClearFlowCommand,
    FieldGenerator,
    FieldState,
    PaintCommand,
    RegenerateCommand,
    StrokeCommand,
)
from ..core.flow_field import BrushMode
from ..render import render_field

configure_logging(settings)

logger = structlog.get_logger()

app = FastAPI(
    title="Circuit Field API",
    description="Procedural circuit traces grown over a paintable flow field",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Handlers are async and never await inside a command, so commands are
# applied one at a time on the event loop.
session = FieldGenerator()


# Request/Response models
class GenerateRequest(BaseModel):
    """Parameters to change before regenerating; omitted fields keep their value."""

    viewport_width: Optional[float] = None
    viewport_height: Optional[float] = None
    cell_size: Optional[float] = None
    wire_length: Optional[int] = None
    cut_off_length: Optional[int] = None
    straightness: Optional[float] = None
    flow_influence: Optional[float] = None
    seed: Optional[Union[int, str]] = None
    paint_flow: Optional[bool] = None
    brush_size: Optional[int] = None
    brush_opacity: Optional[float] = None
    brush_mode: Optional[BrushMode] = None
    angle_smoothing: Optional[float] = None
    auto_regenerate: Optional[bool] = None
    show_grid: Optional[bool] = None
    show_flow_field: Optional[bool] = None
    bg_color: Optional[str] = None
    fg_color: Optional[str] = None


class PaintRequest(BaseModel):
    """A single brush dab in grid coordinates."""

    center_x: float = Field(..., description="Grid x of the dab centre")
    center_y: float = Field(..., description="Grid y of the dab centre")
    channel: int = Field(..., ge=0, le=3, description="Flow channel (0 vertical, 1 horizontal, 2 NW-SE, 3 NE-SW)")
    radius: Optional[int] = Field(None, ge=1, le=20, description="Brush radius in cells")
    opacity: Optional[float] = Field(None, ge=0, le=1, description="Brush strength")
    mode: Optional[BrushMode] = Field(None, description="brush or eraser")


class StrokeRequest(BaseModel):
    """Pointer event in viewport pixels."""

    phase: Literal["begin", "move", "end"]
    px: float = 0.0
    py: float = 0.0


class FieldSummary(BaseModel):
    """Generated field with its wires as cell coordinate lists."""

    grid_width: int
    grid_height: int
    seed: Union[int, str]
    wire_count: int
    drawn_wire_count: int
    claimed_cells: int
    wires: List[List[Tuple[int, int]]]


class FlowCell(BaseModel):
    x: int
    y: int
    strengths: Tuple[int, int, int, int]


class PaintResponse(BaseModel):
    painted: bool
    cells: int = 0
    regenerated: bool = False


def _summarise(state: FieldState) -> FieldSummary:
    return FieldSummary(
        grid_width=state.grid.width,
        grid_height=state.grid.height,
        seed=state.params.seed,
        wire_count=len(state.wires),
        drawn_wire_count=len(session.render_wires()),
        claimed_cells=len(state.grid.claimed_cells()),
        wires=[wire.positions() for wire in state.wires],
    )


def _check_viewport(params: FieldParams) -> None:
    if params.viewport_width > settings.max_viewport_width or params.viewport_height > settings.max_viewport_height:
        raise HTTPException(
            status_code=400,
            detail=f"Viewport exceeds {settings.max_viewport_width}x{settings.max_viewport_height}",
        )


def _current_state() -> FieldState:
    if session.state is None:
        return session.generate()
    return session.state


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Circuit Field API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "generated": session.state is not None}


@app.get("/field", response_model=FieldSummary)
async def get_field():
    """Current field, generating it with the session parameters if needed."""
    return _summarise(_current_state())


@app.get("/field/params", response_model=FieldParams)
async def get_params():
    return session.params


@app.post("/field/generate", response_model=FieldSummary)
async def generate(request: GenerateRequest):
    """Merge the given parameters into the session's and regenerate."""
    updates = request.model_dump(exclude_none=True)
    logger.info("Field generation requested", updates=updates)

    try:
        params = FieldParams(**{**session.params.model_dump(), **updates})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False))
    _check_viewport(params)

    state = session.dispatch(RegenerateCommand(params=params))
    return _summarise(state)


@app.post("/field/paint", response_model=PaintResponse)
async def paint(request: PaintRequest):
    """Apply one brush dab to the flow field."""
    _current_state()
    cells = session.dispatch(
        PaintCommand(
            center_x=request.center_x,
            center_y=request.center_y,
            channel=request.channel,
            radius=request.radius,
            opacity=request.opacity,
            mode=request.mode,
        )
    )
    return PaintResponse(painted=cells > 0, cells=cells)


@app.post("/field/stroke", response_model=PaintResponse)
async def stroke(request: StrokeRequest):
    """Feed a pointer event to the stroke tracker."""
    before = _current_state()
    painted = session.dispatch(StrokeCommand(phase=request.phase, px=request.px, py=request.py))
    return PaintResponse(painted=painted, regenerated=session.state is not before)


@app.post("/field/flow/clear")
async def clear_flow():
    """Zero the flow field; wires are kept until the next generation."""
    session.dispatch(ClearFlowCommand())
    return {"status": "cleared"}


@app.get("/field/flow", response_model=List[FlowCell])
async def get_flow():
    """Every cell with non-zero flow."""
    _current_state()
    return [FlowCell(x=x, y=y, strengths=s) for x, y, s in session.flow.nonzero_cells()]


@app.get("/field/render.png")
async def render_png():
    """Current field as a PNG image."""
    png = render_field(_current_state(), session.params, dpi=settings.render_dpi)
    return Response(content=png, media_type="image/png")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
