"""Prompts for the chat assistant and farming tips, plus parsing of LLM tip lists."""

from __future__ import annotations

import datetime as dt
import json
import re
from typing import Optional, Sequence

from agriconnect.domain import ForecastDay, WeatherSnapshot

MAX_TIPS = 5

SYSTEM_PROMPT = """You are **AgriConnect Assistant**, an AI agent built for the AgriConnect platform in Botswana.

Your job is to help farmers and buyers with REAL platform features, not generic support answers.
Always answer using Botswana context, common crops, regions, and local agricultural behavior.

## Main goals
1. Help buyers find produce. If the user says "I want to buy cotton", offer nearby sellers or all
   listings (/listings) and ask about crop, quantity and region.
2. Help farmers sell produce. If the user says "I want to sell tomatoes", point them to
   /farmer/create-listing and offer to walk them through it.
3. Give real farming assistance: weather-based tips (/weather), planting suggestions for the
   season, common Botswana crops, and the Crop Planner (/farmer/crop-planner).
4. Guide users inside the platform: prices at /prices, posting at /farmer/create-listing.

## Role detection
- "sell", "my crops", "my farm", "my harvest" -> likely a FARMER
- "buy", "looking for", "need", "purchase" -> likely a BUYER
- When unclear, ask: "Are you looking to buy or sell?"

## Forbidden responses
- "Visit our help center", "Contact support", "I cannot help with that".
- Never invent phone numbers or official contacts.

## Platform pages
Farmers: /farmer/dashboard, /farmer/create-listing, /farmer/my-listings, /farmer/crop-planner, /farmer/analytics
Buyers: /buyer/dashboard, /listings, /buyer/create-request
Shared: /prices, /buyer-requests, /weather, /notifications

## Botswana agricultural calendar
- Oct-Nov: land preparation, early planting if rains arrive
- Nov-Jan: main planting season (maize, sorghum, millet, groundnuts)
- Feb-Mar: weeding, pest control, late planting possible
- Apr-Jun: harvest season for rain-fed crops
- Jul-Sep: dry season; irrigated vegetables, land clearing, planning

## Regions
Northern (Chobe, Ngamiland, Maun, Kasane): higher rainfall, more diverse crops.
Central (Serowe, Palapye, Mahalapye): cattle country, millet and sorghum do well.
Southern (Gaborone, Lobatse, Kanye, Molepolole): peri-urban, vegetables popular.
Western (Ghanzi, Kgalagadi): very dry, drought-hardy crops only.
Currency is Botswana Pula (BWP); land in hectares, produce in kg.

Respond in English but greet Setswana speakers warmly (Dumela, Ke a leboga, Go siame).
Keep answers to 2-4 sentences, use bullets only for lists of 3+ items, and end with ONE actionable
suggestion or question. Friendly, simple language; no corporate tone."""

TIPS_SYSTEM_PROMPT = (
    "You are a helpful agricultural advisor for Botswana farmers. Always respond with valid JSON arrays only."
)

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")
_BULLET_RE = re.compile(r"^[\d\-\*\.\)•]+\s*")


def build_chat_messages(user_message: str, *, system_prompt: str = SYSTEM_PROMPT) -> list[dict]:
    """System + user messages for a single chat turn."""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_message},
    ]


def _format_forecast(forecast: Optional[Sequence[ForecastDay]]) -> str:
    """One line per forecast day, at most seven days."""
    if not forecast:
        return "No forecast data available"
    lines = []
    for day in forecast[:7]:
        try:
            label = dt.date.fromisoformat(day.date[:10]).strftime("%a, %b %d")
        except ValueError:
            label = day.date
        lines.append(
            f"{label}: {day.high_temp}°/{day.low_temp}°C, {day.precipitation_chance}% rain, {day.description}"
        )
    return "\n".join(lines)


def build_farming_prompt(weather: WeatherSnapshot, location: str, forecast: Optional[Sequence[ForecastDay]] = None,
                         crop_type: Optional[str] = None) -> str:
    """User prompt asking for 3-5 tips as a JSON array."""
    focus = f"CROP FOCUS: {crop_type}" if crop_type else "GENERAL FARMING ADVICE"
    return f"""You are an expert agricultural advisor specializing in Botswana's farming conditions. Generate 3-5 practical, actionable farming tips based on the current weather and forecast.

LOCATION: {location}, Botswana

CURRENT CONDITIONS:
- Temperature: {weather.temperature}°C
- High/Low Today: {weather.high_temp}°/{weather.low_temp}°C
- Weather: {weather.description}
- Wind Speed: {weather.wind_speed} km/h
- Rain Probability: {weather.precipitation_chance}%

7-DAY FORECAST:
{_format_forecast(forecast)}

{focus}

IMPORTANT CONTEXT:
- Botswana has a semi-arid climate with distinct wet (Nov-Mar) and dry (Apr-Oct) seasons
- Water conservation is critical
- Most farmers are smallholders growing maize, sorghum, millet, beans, and vegetables
- Consider local practices and accessible resources

Respond with ONLY a JSON array of 3-5 tip strings. Each tip should be:
- Specific and actionable
- Relevant to the current weather conditions
- Practical for Botswana farmers
- 1-2 sentences maximum

Example format:
["Tip 1 here.", "Tip 2 here.", "Tip 3 here."]"""


def strip_markdown_fences(text: str) -> str:
    """Remove surrounding Markdown code fences from text."""
    if not text:
        return text
    t = text.strip()
    if not t.startswith("```"):
        return t
    lines = t.splitlines()
    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]
    if lines and lines[-1].strip().startswith("```"):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def parse_tips(raw_text: str, *, limit: int = MAX_TIPS) -> list[str]:
    """
    Extract tips from an LLM reply.

    Prefers the first JSON array in the text; if none parses, falls back to one
    tip per non-trivial line with list markers removed. Returns at most ``limit``
    non-empty strings, possibly none.
    """
    text = strip_markdown_fences(raw_text or "")
    match = _JSON_ARRAY_RE.search(text)
    if match:
        try:
            parsed = json.loads(match.group(0))
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            tips = [str(t).strip() for t in parsed if isinstance(t, (str, int, float)) and str(t).strip()]
            return tips[:limit]

    lines = [line.strip() for line in text.splitlines()]
    tips = [_BULLET_RE.sub("", line).strip() for line in lines if len(line) > 10]
    return [t for t in tips if t][:limit]
