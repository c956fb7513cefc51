from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

TravelPeriodType = Literal["FixedDates", "Month", "SuggestedBest"]
CamperCategory = Literal["Van", "Campervan", "SemiIntegrated", "Motorhome", "Integrated"]

DEFAULT_OVERTOURISM_LEVEL = 3

# Legacy boolean flag -> graduated level
_OVERTOURISM_BOOL_LEVELS = {True: 4, False: 2}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------- Catalog entries ----------


class Location(_Frozen):
    id: str
    name: str
    countryCode: str
    region: Optional[str] = None
    latitude: float
    longitude: float
    description: Optional[str] = None


class RentalLocation(_Frozen):
    id: str
    name: str
    city: str
    country: str
    latitude: float
    longitude: float
    address: str


class Camper(_Frozen):
    id: str
    modelName: str
    category: CamperCategory
    sleeps: int
    lengthMeters: float
    notes: Optional[str] = None


# ---------- TravelPreferences ----------


class TravelPreferences(_Frozen):
    periodType: TravelPeriodType = "SuggestedBest"
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = None
    suggestBestPeriod: bool = False

    tripDurationDays: Optional[int] = Field(default=None, ge=1)
    weekendTrip: bool = False
    overtourismLevel: int = Field(default=DEFAULT_OVERTOURISM_LEVEL, ge=1, le=5)
    avoidOvertourism: Optional[bool] = None
    partySize: int = Field(default=2, ge=1)

    camperCategory: Optional[CamperCategory] = None
    camperModelName: Optional[str] = None
    isOwnedCamper: bool = False
    ownedCamperModel: Optional[str] = None
    rentalLocationId: Optional[str] = None

    minDailyDriveHours: Optional[float] = Field(default=None, ge=0)
    maxDailyDriveHours: Optional[float] = Field(default=None, ge=0)

    locationId: Optional[str] = None
    locationQuery: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _overtourism_from_boolean(cls, data: Any) -> Any:
        """Older clients send ``avoidOvertourism`` instead of a 1-5 level."""
        if isinstance(data, dict) and data.get("overtourismLevel") is None:
            flag = data.get("avoidOvertourism")
            data = {k: v for k, v in data.items() if k != "overtourismLevel"}
            if isinstance(flag, bool):
                data["overtourismLevel"] = _OVERTOURISM_BOOL_LEVELS[flag]
        return data

    @property
    def vehicle_model(self) -> Optional[str]:
        if self.isOwnedCamper:
            return self.ownedCamperModel or self.camperModelName
        return self.camperModelName


# ---------- Itinerary ----------


class TravelPeriod(_Frozen):
    type: TravelPeriodType
    startDate: Optional[date] = None
    endDate: Optional[date] = None
    month: Optional[int] = None
    year: Optional[int] = None


class ItineraryStop(_Frozen):
    name: str
    description: Optional[str] = None
    latitude: float
    longitude: float
    # Open tag: viewpoint, village, camper_area, attraction, food, ...
    type: str = "attraction"


class ItineraryDay(_Frozen):
    dayNumber: int
    date: Optional[dt.date] = None
    title: str
    stops: List[ItineraryStop] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)
    driveHoursEstimate: Optional[float] = Field(default=None, ge=0)
    overnightStopRecommendation: Optional[str] = None


class Itinerary(_Frozen):
    id: str
    title: str
    summary: str
    period: TravelPeriod
    days: List[ItineraryDay]
    tips: List[str]
    generatedAtUtc: datetime
