"""
Sketch parameters for field generation, painting and rendering.

Ranges follow the controls of the interactive sketch; values outside
them are rejected by pydantic validation.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.flow_field import BrushMode
from ..core.wire_generator import WireOptions

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"


class FieldParams(BaseModel):
    """All parameters read by generation, the brush and the renderer."""

    model_config = ConfigDict(validate_assignment=True)

    # Viewport (pixels)
    viewport_width: float = Field(default=800, ge=0, le=10000, description="Viewport width in pixels")
    viewport_height: float = Field(default=600, ge=0, le=10000, description="Viewport height in pixels")

    # Generation
    cell_size: float = Field(default=10, ge=1, le=80, description="Cell size in pixels")
    wire_length: int = Field(default=14, ge=1, le=100, description="Target cells per wire")
    cut_off_length: int = Field(default=2, ge=0, le=10, description="Wires this short or shorter are not drawn")
    straightness: float = Field(default=7.0, ge=0, le=20, description="Exponent biasing turns towards straight")
    flow_influence: float = Field(default=1.0, ge=0, le=1, description="Chance per attempt of following the flow field")
    seed: Union[int, str] = Field(default=1, description="Seed for reproducible generation")

    # Flow painting
    paint_flow: bool = Field(default=True, description="Enable painting with the pointer")
    brush_size: int = Field(default=3, ge=1, le=20, description="Brush radius in cells")
    brush_opacity: float = Field(default=0.5, ge=0, le=1, description="Brush strength")
    brush_mode: BrushMode = Field(default=BrushMode.BRUSH, description="Paint or erase")
    angle_smoothing: float = Field(default=0.3, ge=0, le=1, description="Easing of the stroke angle")
    auto_regenerate: bool = Field(default=True, description="Regenerate wires when a stroke ends")

    # Rendering
    show_grid: bool = Field(default=False, description="Draw the cell grid")
    show_flow_field: bool = Field(default=True, description="Draw the flow overlay")
    bg_color: str = Field(default="#330533", pattern=HEX_COLOR_PATTERN, description="Background colour")
    fg_color: str = Field(default="#a3ccc2", pattern=HEX_COLOR_PATTERN, description="Wire colour")

    def wire_options(self) -> WireOptions:
        return WireOptions(
            wire_length=self.wire_length,
            straightness=self.straightness,
            flow_influence=self.flow_influence,
        )
