"""
Care Advice API Endpoints

- GET /weather/advice: weather plus rule-based care recommendations
- GET /weather/cities: city autocomplete
- POST /care/time-phrases: pull "in N days" phrases out of a diagnosis
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from adoptd.container import UserScope
from adoptd.modules.care_advice.domain.models.weather import (
    CitySuggestion,
    TimeRecommendation,
    WeatherAdvice,
)
from adoptd.modules.care_advice.domain.services.time_phrases import extract_time_recommendations
from adoptd.shared.core.dependencies import get_scope

care_advice_router = APIRouter()


class TimePhraseRequest(BaseModel):
    text: str = Field(..., max_length=20000)


@care_advice_router.get(
    "/weather/advice",
    response_model=WeatherAdvice,
    summary="Weather-based care recommendations",
    responses={
        404: {"description": "Location not found"},
        422: {"description": "Neither city nor coordinates given"},
    },
)
async def get_weather_advice(
    city: Optional[str] = Query(None, max_length=100),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    scope: UserScope = Depends(get_scope),
) -> WeatherAdvice:
    return await scope.weather.get_advice(city=city, lat=lat, lon=lon)


@care_advice_router.get(
    "/weather/cities",
    response_model=List[CitySuggestion],
    summary="City suggestions",
)
async def search_cities(
    q: str = Query("", max_length=100),
    scope: UserScope = Depends(get_scope),
) -> List[CitySuggestion]:
    return await scope.weather.search_cities(q)


@care_advice_router.post(
    "/care/time-phrases",
    response_model=List[TimeRecommendation],
    summary="Extract timed care steps from text",
)
async def extract_time_phrases(
    request: TimePhraseRequest,
    scope: UserScope = Depends(get_scope),
) -> List[TimeRecommendation]:
    return extract_time_recommendations(request.text)
