from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

class DriverCandidate(BaseModel):
    """One roster entry. The roster serves capitalised keys; extra fields such as Id are dropped."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1, validation_alias=AliasChoices("Name", "name"))
    rate: float = Field(ge=0, allow_inf_nan=False, validation_alias=AliasChoices("Rate", "rate"))

class DriverSelection(BaseModel):
    model_config = ConfigDict(frozen=True)

    driver: Optional[DriverCandidate] = None
    available_count: int = Field(default=0, ge=0)

    @property
    def found(self) -> bool:
        return self.driver is not None
