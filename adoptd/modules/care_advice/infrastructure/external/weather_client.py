# 📄 File: adoptd/modules/care_advice/infrastructure/external/weather_client.py

# 🧭 Purpose (Layman Explanation):
# Asks WeatherAPI.com what the weather is now, what it will be for the next days,
# and which cities match what the user is typing.

# 🧪 Purpose (Technical Summary):
# WeatherProvider implementation over the shared aiohttp APIClient (tenacity retries).
# Calls current.json, forecast.json and search.json with the configured language and
# maps payloads onto weather domain models.

# 🔗 Dependencies:
# - APIClient (aiohttp + tenacity)
# - pydantic weather models
# - Settings: WEATHER_API_KEY, WEATHER_API_URL, WEATHER_LANGUAGE, WEATHER_TIMEOUT

# 🔄 Connected Modules / Calls From:
# WeatherAdviceService, application lifespan (client lifecycle)

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from adoptd.modules.care_advice.domain.models.weather import (
    CitySuggestion,
    CurrentConditions,
    ForecastDay,
    Location,
    WeatherReport,
)
from adoptd.modules.care_advice.domain.repositories.weather_provider import WeatherProvider
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import ExternalAPIError
from adoptd.shared.infrastructure.external_apis.api_client import APIClient
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)


class WeatherAPIClient(APIClient, WeatherProvider):
    """
    WeatherAPI.com client.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        super().__init__(
            base_url=self.settings.WEATHER_API_URL,
            api_name="weatherapi",
            api_key=self.settings.WEATHER_API_KEY,
            api_key_param="key",
            timeout=self.settings.WEATHER_TIMEOUT,
        )

    async def current(self, query: str) -> WeatherReport:
        data = await self.get("current.json", {"q": query, "lang": self.settings.WEATHER_LANGUAGE})
        return self._to_report(data)

    async def forecast(self, query: str, days: int) -> WeatherReport:
        data = await self.get("forecast.json", {
            "q": query,
            "days": days,
            "lang": self.settings.WEATHER_LANGUAGE,
        })
        return self._to_report(data)

    async def search(self, text: str) -> List[CitySuggestion]:
        data = await self.get("search.json", {"q": text})
        suggestions = []
        for item in data or []:
            try:
                suggestions.append(CitySuggestion.model_validate(item))
            except PydanticValidationError:
                logger.debug(f"Skipping malformed city suggestion: {item}")
        return suggestions

    def _to_report(self, data: Dict[str, Any]) -> WeatherReport:
        try:
            forecast_days = (data.get("forecast") or {}).get("forecastday") or []
            return WeatherReport(
                location=Location.model_validate(data.get("location") or {}),
                current=CurrentConditions.model_validate(data["current"]),
                forecast=[ForecastDay.model_validate(day) for day in forecast_days],
            )
        except (KeyError, PydanticValidationError) as e:
            raise ExternalAPIError(
                message=f"Unexpected weather payload: {e}",
                api_name=self.api_name,
            ) from e
