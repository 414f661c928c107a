from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SizeSource(str, Enum):
    EXACT = "exact"
    PATTERN = "pattern"
    COMMERCIAL_FALLBACK = "commercial_fallback"
    DEFAULT_FALLBACK = "default_fallback"


FALLBACK_SOURCES = {SizeSource.COMMERCIAL_FALLBACK, SizeSource.DEFAULT_FALLBACK}


class VehicleSizeEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    make: str = ""
    model: str
    year_start: Optional[int] = None
    year_end: Optional[int] = None
    side_sqft: Optional[float] = None
    back_sqft: Optional[float] = None
    hood_sqft: Optional[float] = None
    roof_sqft: Optional[float] = None
    total_sqft: float = Field(..., gt=0)

    def covers_year(self, year: Optional[int]) -> bool:
        if year is None:
            return True
        if self.year_start is not None and year < self.year_start:
            return False
        if self.year_end is not None and year > self.year_end:
            return False
        return True

    @property
    def is_measured(self) -> bool:
        return self.side_sqft is not None

    @property
    def default_wrap_sqft(self) -> float:
        # Default wraps exclude the roof panel
        return round(self.total_sqft - (self.roof_sqft or 0), 1)


class ResolvedSize(BaseModel):
    model_config = ConfigDict(frozen=True)

    sqft: float = Field(..., gt=0)
    source: SizeSource
    needs_review: bool
    matched_key: Optional[str] = None
    category: Optional[str] = None
    default_wrap_sqft: Optional[float] = None


class VehicleSqftRequest(BaseModel):
    vehicle_year: Optional[int] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    product_type: str = "avery"


class VehicleSqftResponse(BaseModel):
    vehicle: str
    sqft: float
    source: SizeSource
    needs_review: bool
    matched_key: Optional[str] = None
    category: Optional[str] = None
    default_wrap_sqft: Optional[float] = None
    price_per_sqft: float
    material_cost: float
    product_name: str


class VehicleSyncResponse(BaseModel):
    success: bool
    message: str
    count: int
