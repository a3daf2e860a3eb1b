from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from enum import Enum


class PointerClick(BaseModel):
    """Pointer position in canvas pixels. Out-of-range clicks are allowed and ignored."""
    x: int = Field(..., description="Horizontal pixel coordinate")
    y: int = Field(..., description="Vertical pixel coordinate")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "x": 212,
                "y": 97
            }
        }
    )


class GridPosition(BaseModel):
    x: int = Field(..., ge=0, description="Column")
    y: int = Field(..., ge=0, description="Row")


class AgentState(str, Enum):
    IDLE = "idle"
    FOLLOWING = "following"


class PathStats(BaseModel):
    steps: int = Field(..., ge=0, description="Number of moves from start to goal")
    total_cost: float = Field(..., ge=0)
    elevation_gain: float = Field(0.0, ge=0, description="Sum of uphill changes")
    elevation_loss: float = Field(0.0, ge=0, description="Sum of downhill changes")
    max_step_change: float = Field(0.0, ge=0, description="Largest elevation change of a single step")
    nodes_explored: int = Field(0, ge=0)


class PathResponse(BaseModel):
    found: bool
    path: List[GridPosition]
    stats: Optional[PathStats] = None


class WalkSnapshot(BaseModel):
    tick: int = Field(..., ge=0)
    agent: GridPosition
    state: AgentState
    path_index: Optional[int] = None
    remaining_path: List[GridPosition] = Field(default_factory=list)
    grid_size: List[int] = Field(..., description="[cols, rows]")
    elevations: Optional[List[List[float]]] = Field(
        None,
        description="Current heights as [row][col], only when requested"
    )
