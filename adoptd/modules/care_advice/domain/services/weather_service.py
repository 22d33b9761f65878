"""
Weather-based care advice for the signed-in user.

Free users get current conditions; premium users get a forecast and the
forecast-driven rules on top.
"""

from typing import List, Optional

from adoptd.modules.care_advice.domain.models.weather import (
    CitySuggestion,
    WeatherAdvice,
    WeatherReport,
)
from adoptd.modules.care_advice.domain.repositories.weather_provider import WeatherProvider
from adoptd.modules.care_advice.domain.services.weather_rules import evaluate_weather
from adoptd.modules.entitlement.domain.services.entitlement_service import EntitlementState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import ExternalAPIError, NotFoundError, ValidationError
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)


def location_query(city: Optional[str] = None, lat: Optional[float] = None,
                   lon: Optional[float] = None) -> str:
    """Provider query from coordinates or a place name; coordinates win."""
    if lat is not None and lon is not None:
        return f"{lat},{lon}"
    if city and city.strip():
        return city.strip()
    raise ValidationError(
        message="Either coordinates or a city is required",
        field="city",
        constraint="lat+lon or non-empty city",
    )


class WeatherAdviceService:
    """
    Combines the weather provider with the care rule table.
    """

    def __init__(self, provider: Optional[WeatherProvider], entitlement: EntitlementState,
                 settings: Optional[Settings] = None):
        self.provider = provider
        self.entitlement = entitlement
        self.settings = settings or get_settings()

    def _require_provider(self) -> WeatherProvider:
        if self.provider is None:
            raise ExternalAPIError(message="Weather service is not configured", api_name="weatherapi")
        return self.provider

    async def get_report(self, query: str) -> WeatherReport:
        provider = self._require_provider()
        try:
            if self.entitlement.is_premium:
                return await provider.forecast(query, self.settings.WEATHER_FORECAST_DAYS)
            return await provider.current(query)
        except ExternalAPIError as e:
            # WeatherAPI answers 400 for unknown places
            if e.details.get("api_status_code") == 400:
                raise NotFoundError(
                    message="Location not found",
                    resource_type="location",
                    resource_id=query,
                ) from e
            raise

    async def get_advice(self, city: Optional[str] = None, lat: Optional[float] = None,
                         lon: Optional[float] = None) -> WeatherAdvice:
        report = await self.get_report(location_query(city, lat, lon))
        is_forecast = self.entitlement.is_premium and report.has_forecast
        return WeatherAdvice(
            report=report,
            recommendations=evaluate_weather(report, include_forecast=is_forecast),
            is_forecast=is_forecast,
        )

    async def search_cities(self, text: str) -> List[CitySuggestion]:
        """City suggestions; an empty query or a failed lookup yields none."""
        if not text or not text.strip():
            return []
        try:
            return await self._require_provider().search(text.strip())
        except ExternalAPIError as e:
            logger.warning(f"City search failed: {e.message}")
            return []
