# 📄 File: adoptd/modules/care_advice/domain/models/weather.py
# 🧭 Purpose (Layman Explanation):
# Describes the weather we get from the weather service and the plant-care tips
# we derive from it, plus "do this again in N days" hints found in AI answers.
# 🧪 Purpose (Technical Summary):
# Pydantic models mirroring the WeatherAPI.com current/forecast/search payloads,
# care recommendation value objects and time recommendations.
# 🔗 Dependencies:
# pydantic, enum, typing
# 🔄 Connected Modules / Calls From:
# Weather client, weather rule table, time-phrase extractor, weather endpoints, chat prompt

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(str, Enum):
    WATERING = "watering"
    PROTECTION = "protection"
    MAINTENANCE = "maintenance"
    GENERAL = "general"


class Condition(BaseModel):
    text: str = ""
    icon: Optional[str] = None


class Location(BaseModel):
    name: str = ""
    region: Optional[str] = None
    country: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class CurrentConditions(BaseModel):
    temp_c: float
    feelslike_c: float
    humidity: float = 0
    wind_kph: float = 0
    gust_kph: float = 0
    precip_mm: float = 0
    uv: float = 0
    is_day: int = 1
    cloud: float = 0
    vis_km: float = 10
    condition: Condition = Field(default_factory=Condition)


class DaySummary(BaseModel):
    maxtemp_c: float
    mintemp_c: float
    avgtemp_c: float
    maxwind_kph: float = 0
    totalprecip_mm: float = 0
    avghumidity: float = 0
    uv: float = 0
    condition: Condition = Field(default_factory=Condition)


class ForecastDay(BaseModel):
    date: str
    day: DaySummary


class WeatherReport(BaseModel):
    """Current conditions, plus forecast days when requested."""

    location: Location
    current: CurrentConditions
    forecast: List[ForecastDay] = []

    @property
    def has_forecast(self) -> bool:
        # rules look at tomorrow and the day after
        return len(self.forecast) >= 3


class CitySuggestion(BaseModel):
    id: Optional[int] = None
    name: str
    region: Optional[str] = None
    country: Optional[str] = None
    lat: float
    lon: float


class CareRecommendation(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    title: str
    description: str
    priority: Priority
    category: Category


class TimeRecommendation(BaseModel):
    """A sentence that names a follow-up interval, with the interval in days."""

    model_config = ConfigDict(frozen=True)

    text: str
    days: int


class WeatherAdvice(BaseModel):
    report: WeatherReport
    recommendations: List[CareRecommendation]
    is_forecast: bool = False
