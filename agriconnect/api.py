"""HTTP API for the AgriConnect weather, chat and farming-tips features."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel

from agriconnect.advice import farming_advice
from agriconnect.domain import (
    ChatRequest,
    CurrentWeather,
    FarmingTipsRequest,
    Region,
    WeatherAlert,
    WeatherForecast,
)
from agriconnect.regions import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, find_region, list_regions
from agriconnect.services import Services
from agriconnect.weather_service import WeatherResult
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="agriconnect/api")

router = APIRouter()


def get_services(request: Request) -> Services:
    """Return the services built for this app at startup."""
    return request.app.state.services


class _Envelope(BaseModel):
    success: bool = True
    source: Optional[str] = None
    error: Optional[str] = None


class ChatResponse(_Envelope):
    """Chat reply envelope."""
    reply: str
    intent: Optional[str] = None


class WeatherResponse(_Envelope):
    """Current-weather envelope."""
    data: CurrentWeather
    cached: bool = False


class ForecastResponse(_Envelope):
    """Forecast envelope."""
    data: WeatherForecast
    cached: bool = False


class AlertsResponse(_Envelope):
    """Alerts envelope."""
    data: list[WeatherAlert]


class AdviceData(BaseModel):
    """Weather plus the advice derived from it."""
    weather: CurrentWeather
    advice: list[str]


class AdviceResponse(_Envelope):
    """Farming-advice envelope."""
    data: AdviceData


class RegionsResponse(_Envelope):
    """Region catalog envelope."""
    data: list[Region]


class TipsResponse(_Envelope):
    """Farming-tips envelope."""
    tips: list[str]


class HealthResponse(_Envelope):
    """Service status envelope."""
    data: dict


def _error_detail(services: Services, error: Optional[str]) -> Optional[str]:
    """Echo the last provider error outside production only."""
    if services.settings.is_production:
        return None
    return error


def _resolve_location(services: Services, region: Optional[str], lat: Optional[float],
                      lon: Optional[float]) -> tuple[float, float, Optional[str]]:
    """Return coordinates and display name for a region name, a lat/lon pair, or the default region."""
    if region:
        match = find_region(region)
        if match is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Region not found")
        return match.latitude, match.longitude, match.name
    if (lat is None) != (lon is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="Both lat and lon are required when either is given")
    if lat is None:
        default = find_region(services.settings.default_region)
        if default is None:
            logger.warning("Unknown default region; using Gaborone coordinates",
                           extra={"region": services.settings.default_region})
            return DEFAULT_LATITUDE, DEFAULT_LONGITUDE, None
        return default.latitude, default.longitude, default.name
    return lat, lon, None


def _weather_response(services: Services, result: WeatherResult) -> WeatherResponse:
    return WeatherResponse(data=result.data, source=result.source, cached=result.cached,
                           error=_error_detail(services, result.error))


def _forecast_response(services: Services, result: WeatherResult) -> ForecastResponse:
    return ForecastResponse(data=result.data, source=result.source, cached=result.cached,
                            error=_error_detail(services, result.error))


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
def send_message(req: ChatRequest, services: Services = Depends(get_services)):
    """Answer a chat message; provider failures degrade to canned replies."""
    if not req.message or not req.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")
    limit = services.settings.max_user_message_chars
    if len(req.message) > limit:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail=f"Message too long; limit {limit} characters.")

    result = services.chat.send_message(req.message, req.context)
    return ChatResponse(
        reply=result.reply,
        source=result.source,
        intent=result.intent.value,
        error=_error_detail(services, result.error),
    )


@router.get("/weather", response_model=WeatherResponse, response_model_exclude_none=True)
def get_weather(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180),
    region: Optional[str] = None,
    services: Services = Depends(get_services),
):
    """Current weather for a region name or coordinates (the configured default region otherwise)."""
    latitude, longitude, name = _resolve_location(services, region, lat, lon)
    return _weather_response(services, services.weather.get_weather(latitude, longitude, name))


@router.get("/weather/regions", response_model=RegionsResponse, response_model_exclude_none=True)
def get_regions():
    """All regions with the coordinates used for their weather."""
    return RegionsResponse(data=list_regions())


@router.get("/weather/region/{region}", response_model=WeatherResponse, response_model_exclude_none=True)
def get_weather_by_region(region: str, services: Services = Depends(get_services)):
    """Current weather for a named region."""
    latitude, longitude, name = _resolve_location(services, region, None, None)
    return _weather_response(services, services.weather.get_weather(latitude, longitude, name))


@router.get("/weather/forecast", response_model=ForecastResponse, response_model_exclude_none=True)
def get_forecast(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180),
    region: Optional[str] = None,
    services: Services = Depends(get_services),
):
    """Daily forecast for a region name or coordinates."""
    latitude, longitude, name = _resolve_location(services, region, lat, lon)
    return _forecast_response(services, services.weather.get_forecast(latitude, longitude, name))


@router.get("/weather/forecast/{region}", response_model=ForecastResponse, response_model_exclude_none=True)
def get_forecast_by_region(region: str, services: Services = Depends(get_services)):
    """Daily forecast for a named region."""
    latitude, longitude, name = _resolve_location(services, region, None, None)
    return _forecast_response(services, services.weather.get_forecast(latitude, longitude, name))


@router.get("/weather/alerts/{region}", response_model=AlertsResponse, response_model_exclude_none=True)
def get_alerts(region: str, services: Services = Depends(get_services)):
    """Active weather alerts for a named region (empty without an OpenWeather key)."""
    latitude, longitude, _name = _resolve_location(services, region, None, None)
    result = services.weather.get_alerts(latitude, longitude)
    return AlertsResponse(data=result.data, source=result.source, error=_error_detail(services, result.error))


@router.get("/weather/advice/{region}", response_model=AdviceResponse, response_model_exclude_none=True)
def get_weather_advice(region: str, services: Services = Depends(get_services)):
    """Farming advice derived from a region's current weather."""
    latitude, longitude, name = _resolve_location(services, region, None, None)
    result = services.weather.get_weather(latitude, longitude, name)
    return AdviceResponse(
        data=AdviceData(weather=result.data, advice=farming_advice(result.data)),
        source=result.source,
        error=_error_detail(services, result.error),
    )


@router.post("/ai/farming-tips", response_model=TipsResponse, response_model_exclude_none=True)
def get_farming_tips(req: FarmingTipsRequest, services: Services = Depends(get_services)):
    """AI farming tips for the given weather; rule-based tips when no provider answers."""
    if req.weather is None or not (req.location or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST,
                            detail="Weather data and location are required")
    result = services.tips.get_tips(req)
    return TipsResponse(tips=result.tips, source=result.source, error=_error_detail(services, result.error))


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
def health(services: Services = Depends(get_services)):
    """Configured providers and cache statistics."""
    return HealthResponse(data=services.status())
