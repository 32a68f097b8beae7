from enum import Enum, IntEnum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SlotStatus(str, Enum):
    EMPTY = "empty"
    OCCUPIED = "occupied"


class VehicleCategory(str, Enum):
    CAR = "car"
    TRUCK = "truck"
    BUS = "bus"
    MOTORCYCLE = "motorcycle"
    VAN = "van"


class SessionStep(IntEnum):
    DETECT_SLOTS = 1
    DETECT_VEHICLE = 2
    MEASURE_INTENSITY = 3
    SCORE_PATHS = 4
    COMPLETE = 5


class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    slot_number: int = Field(ge=1)
    row: int = Field(ge=0)
    col: int = Field(ge=0)
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    status: SlotStatus
    is_corner: bool
    is_edge: bool
    distance_from_entrance: float
    confidence: float
    original_class: str


class SlotSummary(BaseModel):
    total_slots: int
    empty_slots: List[int] = Field(default_factory=list)
    occupied_slots: List[int] = Field(default_factory=list)
    average_confidence: float = 0.0
    occupancy_percentage: float = 0.0


class VehicleDetection(BaseModel):
    model_config = ConfigDict(frozen=True)

    vehicle_type: VehicleCategory
    confidence: float
    x: float
    y: float
    width: float
    height: float
    original_class: str


class Path(BaseModel):
    id: int
    name: str
    distance: float = Field(gt=0)
    t_junctions: int = Field(ge=0)
    vehicle_intensity: Optional[int] = Field(default=None, ge=0, le=100)
    score: Optional[float] = None


class ScoringWeights(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance: float
    junctions: float
    intensity: float


class ScoredPaths(BaseModel):
    optimal: Path
    paths: List[Path]


class SessionState(BaseModel):
    """Everything one parking session has derived so far."""

    model_config = ConfigDict(frozen=True)

    step: SessionStep = SessionStep.DETECT_SLOTS
    slots: List[Slot] = Field(default_factory=list)
    detection_image: Optional[str] = None
    vehicle: Optional[VehicleDetection] = None
    allocated_slot: Optional[Slot] = None
    paths: List[Path] = Field(default_factory=list)
    intensities: Dict[int, int] = Field(default_factory=dict)
    manual_intensities: FrozenSet[int] = Field(default_factory=frozenset)
    optimal_path: Optional[Path] = None
    error: Optional[str] = None
