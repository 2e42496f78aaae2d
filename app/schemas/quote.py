from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from app.core.enums import QuoteStatus

class Journey(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    start: str = Field(min_length=1, validation_alias=AliasChoices("start", "Start"))
    end: str = Field(min_length=1, validation_alias=AliasChoices("end", "End"))

class SurgeContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    major_road_fraction: float = Field(ge=0, le=1)
    available_driver_count: int = Field(ge=0)
    hour_of_day: int = Field(ge=0, le=23)

class Quote(BaseModel):
    model_config = ConfigDict(frozen=True)

    effective_rate_per_km: float = Field(ge=0, allow_inf_nan=False)
    total_cost: float = Field(ge=0, allow_inf_nan=False)

    # audit fields, not returned to callers
    driver_name: str
    base_rate: float
    multiplier: float
    distance_meters: float

class QuoteResult(BaseModel):
    status: QuoteStatus
    quote: Optional[Quote] = None

class QuoteResponse(BaseModel):
    status: QuoteStatus
    effective_rate_per_km: Optional[float] = None
    total_cost: Optional[float] = None
    message: Optional[str] = None

class ErrorResponse(BaseModel):
    error: str
    detail: str
