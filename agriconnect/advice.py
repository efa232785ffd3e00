"""Rule-based farming advice for Botswana's semi-arid climate.

Everything here is local and deterministic; these functions back the static
ends of the chat and farming-tips chains.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

from agriconnect.domain import ChatWeatherContext, CurrentWeather, WeatherSnapshot

MAX_TIPS = 5
MIN_TIPS = 4

GENERAL_TIPS = (
    "Check soil moisture before watering - Botswana soils often retain moisture longer than expected.",
    "Consider mulching around plants to conserve water in the semi-arid climate.",
    "Plan irrigation during cooler parts of the day to minimize evaporation losses.",
    "Monitor your crops for signs of heat stress during the dry season.",
)


def seasonal_advice(today: Optional[dt.date] = None) -> str:
    """Planting guidance for the current month of the Botswana farming calendar."""
    month = (today or dt.date.today()).month
    if month in (11, 12, 1):
        return ("It's main planting season! Maize, sorghum, millet, and groundnuts do well now. "
                "Plant early in the rains for best results. Check the Crop Planner at "
                "/farmer/crop-planner for detailed guidance.")
    if month in (2, 3):
        return ("Focus on weeding and pest control now. Late planting is still possible for "
                "quick-maturing crops. Keep an eye on your fields - this is a critical growth period.")
    if month in (4, 5, 6):
        return ("Harvest season for rain-fed crops! Start selling your produce on AgriConnect. "
                "Create listings at /farmer/create-listing. Also consider what buyers are "
                "requesting at /buyer-requests.")
    return ("Dry season - focus on irrigated vegetables like tomatoes, spinach, and cabbage. "
            "Also a good time to prepare land and plan for the wet season (starts November). "
            "Check /farmer/crop-planner.")


def chat_weather_tips(weather: Optional[ChatWeatherContext]) -> str:
    """Short weather-driven tips for a chat reply."""
    if weather is None:
        return ("Check the Weather page at /weather for detailed forecasts for your region. "
                "Your Dashboard also shows a weather widget with farming recommendations. "
                "Which district are you in?")

    tips = []
    if (weather.rain_chance or 0) > 40:
        tips.append("Rain expected - good for planting beans, spinach, and leafy greens.")
    else:
        tips.append("Low rain today - ideal for irrigation and planting drought-tolerant crops like sorghum.")
    if (weather.temperature or 0) > 32:
        tips.append("High heat - avoid midday spraying, water crops early morning.")
    if (weather.wind_speed or 0) > 15:
        tips.append("Strong winds - avoid pesticide spraying.")
    return " ".join(tips)


def farming_advice(weather: CurrentWeather) -> list[str]:
    """Warnings derived from current conditions (may be empty)."""
    advice = []
    if weather.temperature > 35:
        advice.append("High temperature warning: Consider irrigating crops early morning or late evening")
    if weather.humidity is not None and weather.humidity < 30:
        advice.append("Low humidity: Monitor soil moisture levels closely")
    if weather.rain_chance > 60:
        advice.append("High chance of rain: Consider postponing pesticide application")
    if weather.wind_speed is not None and weather.wind_speed > 10:
        advice.append("Strong winds expected: Secure any loose materials and consider wind-sensitive crops")
    return advice


def static_farming_tips(weather: Optional[WeatherSnapshot]) -> list[str]:
    """Between four and five tips built from temperature, rain chance and wind."""
    weather = weather or WeatherSnapshot()
    temperature = weather.temperature
    rain = weather.precipitation_chance
    wind = weather.wind_speed or 0
    tips: list[str] = []

    if temperature is not None and temperature > 30:
        tips.append("High temperatures expected - irrigate early morning or late evening to reduce water evaporation.")
    elif temperature is not None and temperature > 25:
        tips.append("Warm conditions are ideal for most crops - ensure consistent watering schedules.")
    elif temperature is not None and temperature < 15:
        tips.append("Cool temperatures - protect frost-sensitive crops with covers overnight.")
    else:
        tips.append("Moderate temperatures are favorable for field work and crop growth.")

    if rain is not None:
        if rain > 50:
            tips.append("Rain expected - excellent time for planting. Delay pesticide application until after rainfall.")
        elif rain > 30:
            tips.append("Moderate rain chance - plan outdoor activities with flexibility and have covers ready.")
        elif rain < 20:
            tips.append("Low rain probability - monitor soil moisture levels closely and consider irrigation.")

    if wind > 20:
        tips.append("Strong winds expected - secure any loose coverings, stakes, and protect young seedlings.")
    elif wind > 10:
        tips.append("Moderate winds provide good natural ventilation for crops and can help dry wet foliage.")

    for general in GENERAL_TIPS:
        if len(tips) >= MIN_TIPS:
            break
        tips.append(general)
    return tips[:MAX_TIPS]
