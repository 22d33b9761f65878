# 📄 File: adoptd/modules/care_advice/domain/services/weather_rules.py
# 🧭 Purpose (Layman Explanation):
# The rule book that turns a weather report into plant-care tips: too cold, too hot,
# rain tomorrow, strong wind, harsh sun and so on. Forecast tips are for premium users.
# 🧪 Purpose (Technical Summary):
# Ordered table of independent weather rules. Each rule is a predicate plus a
# recommendation factory over a WeatherReport; evaluation walks the table in order
# and collects every match. Forecast rules only run when a 3-day forecast is present.
# 🔗 Dependencies:
# Weather models, round_half_up helper
# 🔄 Connected Modules / Calls From:
# Weather advice service, weather endpoints, chat weather context

from typing import Callable, List, NamedTuple

from adoptd.modules.care_advice.domain.models.weather import (
    CareRecommendation,
    Category,
    Priority,
    WeatherReport,
)
from adoptd.shared.utils.helpers import round_half_up

COLD_BELOW_C = 5
HEAT_ABOVE_C = 30
TEMP_SWING_C = 10
RAIN_TOMORROW_MM = 5
DRY_SPELL_RAIN_MM = 2
DRY_SPELL_CURRENT_MM = 1
FEELS_LIKE_DELTA_C = 5
LOW_HUMIDITY = 40
HIGH_HUMIDITY = 80
STRONG_WIND_KPH = 20
STRONG_GUST_KPH = 35
LOW_VISIBILITY_KM = 2
HIGH_UV = 7
LOW_UV = 2
OVERCAST_CLOUD = 75
CLEAR_CLOUD = 25


class WeatherRule(NamedTuple):
    name: str
    applies: Callable[[WeatherReport], bool]
    recommend: Callable[[WeatherReport], CareRecommendation]
    needs_forecast: bool = False


def _static(title: str, description: str, priority: Priority, category: Category):
    recommendation = CareRecommendation(
        title=title, description=description, priority=priority, category=category
    )
    return lambda report: recommendation


def _temperature_swing(report: WeatherReport) -> CareRecommendation:
    tomorrow = report.forecast[1].day.avgtemp_c
    trend = "потепление" if tomorrow > report.current.temp_c else "похолодание"
    return CareRecommendation(
        title="Резкое изменение температуры завтра",
        description=f"Завтра ожидается {trend} до {round_half_up(tomorrow)}°C. Подготовьте растения заранее.",
        priority=Priority.HIGH,
        category=Category.PROTECTION,
    )


def _rain_tomorrow(report: WeatherReport) -> CareRecommendation:
    rain = report.forecast[1].day.totalprecip_mm
    return CareRecommendation(
        title="Дождь завтра",
        description=f"Завтра ожидается {round_half_up(rain)}мм осадков. Отложите полив и проверьте дренаж.",
        priority=Priority.MEDIUM,
        category=Category.WATERING,
    )


def _is_dry_spell(report: WeatherReport) -> bool:
    upcoming = report.forecast[1].day.totalprecip_mm + report.forecast[2].day.totalprecip_mm
    return upcoming < DRY_SPELL_RAIN_MM and report.current.precip_mm < DRY_SPELL_CURRENT_MM


WEATHER_RULES: List[WeatherRule] = [
    WeatherRule(
        "cold",
        lambda r: r.current.temp_c < COLD_BELOW_C,
        _static(
            "Защита от холода",
            "Перенесите растения в тёплое помещение или укройте агротекстилем. "
            "Сократите полив и проверьте корни на загнивание.",
            Priority.HIGH, Category.PROTECTION,
        ),
    ),
    WeatherRule(
        "heat",
        lambda r: r.current.temp_c > HEAT_ABOVE_C,
        _static(
            "Защита от жары",
            "Создайте тень и увлажните листья. Поливайте чаще, небольшими порциями, "
            "чтобы не залить корни.",
            Priority.HIGH, Category.WATERING,
        ),
    ),
    WeatherRule(
        "temperature_swing",
        lambda r: abs(r.forecast[1].day.avgtemp_c - r.current.temp_c) > TEMP_SWING_C,
        _temperature_swing,
        needs_forecast=True,
    ),
    WeatherRule(
        "rain_tomorrow",
        lambda r: r.forecast[1].day.totalprecip_mm > RAIN_TOMORROW_MM,
        _rain_tomorrow,
        needs_forecast=True,
    ),
    WeatherRule(
        "dry_spell",
        _is_dry_spell,
        _static(
            "Планируйте полив",
            "В ближайшие 3 дня дождя не ожидается. Увеличьте частоту полива.",
            Priority.MEDIUM, Category.WATERING,
        ),
        needs_forecast=True,
    ),
    WeatherRule(
        "feels_hotter",
        lambda r: r.current.feelslike_c - r.current.temp_c >= FEELS_LIKE_DELTA_C,
        _static(
            "Ощущается намного жарче",
            "Учитывайте факторы влажности и ветра — создайте затенение и опрыскивайте ночью.",
            Priority.MEDIUM, Category.WATERING,
        ),
    ),
    WeatherRule(
        "feels_colder",
        lambda r: r.current.temp_c - r.current.feelslike_c >= FEELS_LIKE_DELTA_C,
        _static(
            "Ощущается холоднее",
            "Защитите от ветра, укройте низкорослые растения.",
            Priority.MEDIUM, Category.PROTECTION,
        ),
    ),
    WeatherRule(
        "low_humidity",
        lambda r: r.current.humidity < LOW_HUMIDITY,
        _static(
            "Низкая влажность",
            "Используйте увлажнитель воздуха и опрыскивания. Поставьте поддоны с водой рядом с растениями.",
            Priority.MEDIUM, Category.MAINTENANCE,
        ),
    ),
    WeatherRule(
        "high_humidity",
        lambda r: r.current.humidity > HIGH_HUMIDITY,
        _static(
            "Высокая влажность",
            "Проверьте вентиляцию и избегайте переувлажнения почвы, чтобы не было грибка.",
            Priority.MEDIUM, Category.MAINTENANCE,
        ),
    ),
    WeatherRule(
        "strong_wind",
        lambda r: r.current.wind_kph > STRONG_WIND_KPH,
        _static(
            "Сильный ветер",
            "Перенесите горшки в укрытие и проверьте опоры у высоких растений.",
            Priority.HIGH, Category.PROTECTION,
        ),
    ),
    WeatherRule(
        "strong_gusts",
        lambda r: r.current.gust_kph > STRONG_GUST_KPH,
        _static(
            "Сильные порывы ветра",
            "Укрепите конструкции теплицы и подвязки стеблей.",
            Priority.HIGH, Category.PROTECTION,
        ),
    ),
    WeatherRule(
        "precipitation",
        lambda r: r.current.precip_mm > 0,
        _static(
            "Идут осадки",
            "Отложите ручной полив и убедитесь, что дренаж работает исправно.",
            Priority.MEDIUM, Category.WATERING,
        ),
    ),
    WeatherRule(
        "low_visibility",
        lambda r: r.current.vis_km < LOW_VISIBILITY_KM,
        _static(
            "Плохая видимость",
            "Регулярно протирайте листья от росы и конденсата.",
            Priority.LOW, Category.GENERAL,
        ),
    ),
    WeatherRule(
        "high_uv",
        lambda r: r.current.uv > HIGH_UV,
        _static(
            "Высокий УФ-индекс",
            "Укройте растения агросеткой с 50–70% затенения в часы 11:00–15:00.",
            Priority.HIGH, Category.PROTECTION,
        ),
    ),
    WeatherRule(
        "low_uv",
        lambda r: r.current.uv < LOW_UV and r.current.is_day == 1,
        _static(
            "Низкий УФ-индекс",
            "Можно временно убрать тень и дать больше света растениям.",
            Priority.LOW, Category.GENERAL,
        ),
    ),
    WeatherRule(
        "night",
        lambda r: r.current.is_day == 0,
        _static(
            "Ночной уход",
            "Лучшее время для опрыскивания и ухода без лишнего испарения.",
            Priority.LOW, Category.GENERAL,
        ),
    ),
    WeatherRule(
        "overcast",
        lambda r: r.current.cloud > OVERCAST_CLOUD,
        _static(
            "Сильная облачность",
            "Уменьшите полив на 10–20%, так как испарение замедлено.",
            Priority.MEDIUM, Category.WATERING,
        ),
    ),
    WeatherRule(
        "clear_sky",
        lambda r: r.current.cloud < CLEAR_CLOUD,
        _static(
            "Ясная погода",
            "Проверьте влажность почвы чаще — солнце усиливает испарение.",
            Priority.MEDIUM, Category.WATERING,
        ),
    ),
]


def evaluate_weather(report: WeatherReport, include_forecast: bool = False) -> List[CareRecommendation]:
    """
    Apply every rule in table order.

    Args:
        report: Current conditions, optionally with a 3-day forecast
        include_forecast: Run forecast rules (premium); ignored without forecast days

    Returns:
        Matching recommendations in table order
    """
    forecast_ready = include_forecast and report.has_forecast
    recommendations = []
    for rule in WEATHER_RULES:
        if rule.needs_forecast and not forecast_ready:
            continue
        if rule.applies(report):
            recommendations.append(rule.recommend(report))
    return recommendations
