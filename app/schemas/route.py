from pydantic import BaseModel, ConfigDict, Field

# Provider wire shape: routes -> legs -> steps

class Distance(BaseModel):
    value: float = Field(ge=0, allow_inf_nan=False)

class DirectionsStep(BaseModel):
    distance: Distance
    html_instructions: str = ""

class DirectionsLeg(BaseModel):
    distance: Distance
    steps: list[DirectionsStep] = []

class DirectionsRoute(BaseModel):
    legs: list[DirectionsLeg] = []

class DirectionsResponse(BaseModel):
    routes: list[DirectionsRoute] = []
    status: str | None = None


class RouteSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    distance_meters: float = Field(ge=0)
    is_major_road: bool

class RouteSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_distance_meters: float = Field(ge=0, allow_inf_nan=False)
    major_road_distance_meters: float = Field(ge=0, allow_inf_nan=False)

    @property
    def major_road_fraction(self) -> float:
        if self.total_distance_meters == 0:
            return 0.0
        return min(self.major_road_distance_meters / self.total_distance_meters, 1.0)
