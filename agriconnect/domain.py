"""Schemas for weather payloads, chat and farming-tips requests.

Weather models are what every weather provider (OpenWeather, Open-Meteo, the
local mock) normalizes into, so the cache and the API never see provider
specific shapes. Request models accept the camelCase keys the web client sends.
"""

from __future__ import annotations

import datetime as dt
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _RequestModel(BaseModel):
    """Base for inbound payloads: camelCase or snake_case, unknown keys ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Source(str, Enum):
    """Names reported in the ``source`` field of responses."""
    OPENAI = "openai"
    GROQ = "groq"
    ANTHROPIC = "anthropic"
    OPENWEATHER = "openweather"
    OPEN_METEO = "open_meteo"
    STATIC = "static"
    MOCK = "mock"


class Region(BaseModel):
    """Named Botswana district or town with the coordinates used for weather."""
    name: str
    latitude: float
    longitude: float
    zone: str


class CurrentWeather(BaseModel):
    """Current conditions for a location (metric units)."""
    region: Optional[str] = None
    latitude: float
    longitude: float
    temperature: float
    feels_like: Optional[float] = None
    humidity: Optional[float] = None
    description: str
    icon: Optional[str] = None
    weather_code: Optional[int] = None
    wind_speed: Optional[float] = None
    rain_chance: float = 0.0
    high_temp: Optional[float] = None
    low_temp: Optional[float] = None
    pressure: Optional[float] = None
    visibility: Optional[float] = None
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None
    is_day: Optional[bool] = None
    updated_at: datetime
    is_mock: bool = False


class DailyForecast(BaseModel):
    """One day of forecast."""
    date: dt.date
    temp_min: float
    temp_max: float
    humidity: Optional[float] = None
    description: str
    weather_code: Optional[int] = None
    rain_mm: Optional[float] = None
    precipitation_chance: Optional[float] = None


class WeatherForecast(BaseModel):
    """Multi-day forecast for a location."""
    region: Optional[str] = None
    latitude: float
    longitude: float
    forecast: List[DailyForecast]
    updated_at: datetime
    is_mock: bool = False


class WeatherAlert(BaseModel):
    """Severe-weather alert issued by a national weather service."""
    sender_name: Optional[str] = None
    event: str
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    description: str = ""
    tags: List[str] = Field(default_factory=list)


class WeatherSnapshot(_RequestModel):
    """Weather summary sent by the web client alongside chat or tips requests."""
    temperature: Optional[float] = None
    high_temp: Optional[float] = Field(default=None, alias="highTemp")
    low_temp: Optional[float] = Field(default=None, alias="lowTemp")
    description: Optional[str] = None
    wind_speed: Optional[float] = Field(default=None, validation_alias="windspeed")
    precipitation_chance: Optional[float] = Field(default=None, alias="precipitationChance")


class ChatWeatherContext(_RequestModel):
    """Weather hints a client may attach to a chat message."""
    temperature: Optional[float] = None
    rain_chance: Optional[float] = Field(default=None, alias="rainChance")
    wind_speed: Optional[float] = Field(default=None, alias="windSpeed")


class ChatContext(_RequestModel):
    """Optional context attached to a chat message."""
    weather: Optional[ChatWeatherContext] = None


class ChatRequest(_RequestModel):
    """Incoming chat message payload."""
    message: Optional[str] = None
    context: Optional[ChatContext] = None


class ForecastDay(_RequestModel):
    """Forecast day as sent by the web client."""
    date: str
    high_temp: Optional[float] = Field(default=None, alias="highTemp")
    low_temp: Optional[float] = Field(default=None, alias="lowTemp")
    precipitation_chance: Optional[float] = Field(default=None, alias="precipitationChance")
    description: Optional[str] = None


class FarmingTipsRequest(_RequestModel):
    """Incoming farming-tips payload."""
    weather: Optional[WeatherSnapshot] = None
    forecast: Optional[List[ForecastDay]] = None
    location: Optional[str] = None
    crop_type: Optional[str] = Field(default=None, alias="cropType")
