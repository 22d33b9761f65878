from abc import ABC, abstractmethod
from typing import List

from adoptd.modules.care_advice.domain.models.weather import CitySuggestion, WeatherReport


class WeatherProvider(ABC):
    """
    Abstract source of weather reports.

    ``query`` is whatever the provider accepts as a place: ``"lat,lon"`` or a city name.
    """

    @abstractmethod
    async def current(self, query: str) -> WeatherReport:
        pass

    @abstractmethod
    async def forecast(self, query: str, days: int) -> WeatherReport:
        """Current conditions plus ``days`` forecast days, today first."""
        pass

    @abstractmethod
    async def search(self, text: str) -> List[CitySuggestion]:
        pass
