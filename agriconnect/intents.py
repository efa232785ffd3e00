"""Keyword intent classification and canned replies for the chat assistant."""

from __future__ import annotations

import datetime as dt
import re
from enum import Enum
from typing import Optional

from agriconnect.advice import chat_weather_tips, seasonal_advice
from agriconnect.domain import ChatContext

CROPS = (
    "maize", "sorghum", "tomatoes", "spinach", "beans", "groundnuts", "cotton",
    "millet", "cabbage", "onions", "cowpeas", "sunflower", "peppers",
)


class Intent(str, Enum):
    """What the user is most likely asking for."""
    BUY_PRODUCT = "buy_product"
    SELL_PRODUCT = "sell_product"
    BUYER_REQUESTS = "buyer_requests"
    MARKET_PRICES = "market_prices"
    CROP_PLANNER = "crop_planner"
    ANALYTICS = "analytics"
    FARMING_ADVICE = "farming_advice"
    WEATHER_ADVICE = "weather_advice"
    DASHBOARD = "dashboard"
    MY_LISTINGS = "my_listings"
    NOTIFICATIONS = "notifications"
    PLATFORM_HELP = "platform_help"
    ORDERS = "orders"
    ACCOUNT = "account"
    GREETING = "greeting"
    THANKS = "thanks"
    GOODBYE = "goodbye"
    GENERAL = "general"


# Checked top to bottom; first match wins.
_KEYWORD_RULES: tuple[tuple[Intent, tuple[str, ...]], ...] = (
    (Intent.BUY_PRODUCT, ("buy", "purchase", "looking for", "need")),
    (Intent.SELL_PRODUCT, ("sell", "post", "list my", "my crop", "my harvest")),
    (Intent.BUYER_REQUESTS, ("request", "what buyers want", "buyer looking")),
    (Intent.MARKET_PRICES, ("price", "cost", "how much", "pula")),
    (Intent.CROP_PLANNER, ("plan", "planner", "schedule", "calendar")),
    (Intent.ANALYTICS, ("analytics", "performance", "stats", "sales report")),
    (Intent.FARMING_ADVICE, ("plant", "grow", "farm", "crop", "season")),
    (Intent.WEATHER_ADVICE, ("weather", "rain", "forecast", "temperature")),
    (Intent.DASHBOARD, ("dashboard", "overview", "home")),
    (Intent.MY_LISTINGS, ("my listing", "edit listing", "manage listing", "delete listing")),
    (Intent.NOTIFICATIONS, ("notification", "alert", "update")),
    (Intent.PLATFORM_HELP, ("help", "support", "contact", "how do i")),
    (Intent.ORDERS, ("order", "transaction", "delivery")),
    (Intent.ACCOUNT, ("account", "profile", "settings", "region")),
)

_GREETING_RE = re.compile(r"^(hi|hello|hey|good morning|good afternoon|good evening|dumela|dumelang|le kae|o kae)")
_THANKS = ("thank", "leboga")
_GOODBYE_RE = re.compile(r"^(bye|goodbye|go siame|sala sentle)")

_REPLIES = {
    Intent.BUYER_REQUESTS: (
        "Check /buyer-requests to see what buyers are actively looking for. As a farmer, you can respond "
        "to these requests directly. As a buyer, post your needs at /buyer/create-request."
    ),
    Intent.MARKET_PRICES: (
        "Check Market Prices at /prices to see current rates for crops across Botswana regions. Prices are "
        "in Pula per kg. Is there a specific crop you want to check?"
    ),
    Intent.CROP_PLANNER: (
        "The Crop Planner at /farmer/crop-planner helps you plan your growing season. It shows optimal "
        "planting times based on Botswana's climate. Want tips for what to plant this month?"
    ),
    Intent.ANALYTICS: (
        "Track your sales performance at /farmer/analytics! See your listing views, sales trends, and "
        "top-performing crops. Great for planning what to grow next season."
    ),
    Intent.DASHBOARD: (
        "Your Dashboard shows an overview of your activity, weather updates, and quick actions. Farmers: "
        "/farmer/dashboard. Buyers: /buyer/dashboard. Are you a farmer or buyer?"
    ),
    Intent.MY_LISTINGS: (
        "Manage all your listings at /farmer/my-listings. You can edit prices, update quantities, or "
        "remove listings. Need help with a specific listing?"
    ),
    Intent.NOTIFICATIONS: (
        "Check /notifications for all your alerts - new orders, messages from buyers, price updates, and "
        "more. You'll also see a bell icon in the menu when you have new notifications."
    ),
    Intent.PLATFORM_HELP: (
        "I can help you right here! Whether it's creating listings, finding produce, checking prices, or "
        "using the Crop Planner - just tell me what you need. What would you like to do?"
    ),
    Intent.ORDERS: (
        "Track orders from your Dashboard. Farmers see incoming orders there, buyers can track purchases. "
        "Need help with a specific order?"
    ),
    Intent.ACCOUNT: (
        "Update your account details in your Profile settings. You can change your region, contact info, "
        "and preferences. Is there something specific you'd like to update?"
    ),
    Intent.GREETING: (
        "Dumela! Welcome to AgriConnect. I'm here to help you buy or sell produce, get farming tips, or "
        "navigate the platform. Are you looking to buy or sell today?"
    ),
    Intent.THANKS: "Ke a leboga! Feel free to ask if you need anything else. Happy farming!",
    Intent.GOODBYE: "Go siame! Come back anytime you need help with AgriConnect. Happy farming!",
    Intent.GENERAL: (
        "I'm here to help! I can assist you with:\n"
        "• Finding produce to buy (/listings)\n"
        "• Creating listings to sell (/farmer/create-listing)\n"
        "• Checking market prices (/prices)\n"
        "• Planning your crops (/farmer/crop-planner)\n"
        "• Weather forecasts (/weather)\n\n"
        "Are you a farmer or buyer?"
    ),
}


def mentioned_crop(message: str) -> Optional[str]:
    """Return the first known crop named in the message, if any."""
    lower = message.lower()
    return next((crop for crop in CROPS if crop in lower), None)


def classify_intent(message: str) -> Intent:
    """Map a message to an intent by keyword rules, then greetings/thanks/goodbyes."""
    text = message.strip().lower()
    for intent, keywords in _KEYWORD_RULES:
        if any(k in text for k in keywords):
            return intent
    if _GREETING_RE.match(text):
        return Intent.GREETING
    if any(k in text for k in _THANKS):
        return Intent.THANKS
    if _GOODBYE_RE.match(text):
        return Intent.GOODBYE
    return Intent.GENERAL


def static_reply(message: str, context: Optional[ChatContext] = None,
                 today: Optional[dt.date] = None) -> tuple[Intent, str]:
    """Return the intent and a canned reply that needs no external service."""
    intent = classify_intent(message)
    crop = mentioned_crop(message)

    if intent is Intent.BUY_PRODUCT:
        if crop:
            return intent, (f"I can help you find {crop}! Browse available listings at /listings or go to "
                            f"/buyer/create-request to post what you need. Which region are you in?")
        return intent, ("I can help you find produce! Head to /listings to browse, or tell me what crop "
                        "you're looking for - maize, sorghum, tomatoes, beans, groundnuts?")
    if intent is Intent.SELL_PRODUCT:
        if crop:
            return intent, (f"Great! To sell your {crop}, go to /farmer/create-listing. Add your quantity "
                            f"(kg), price (Pula), and photos. Want me to explain the process?")
        return intent, ("You can post your produce at /farmer/create-listing! Add crop type, quantity, price, "
                        "and photos. Also check /buyer-requests to see what buyers are looking for. "
                        "What would you like to sell?")
    if intent is Intent.FARMING_ADVICE:
        return intent, seasonal_advice(today)
    if intent is Intent.WEATHER_ADVICE:
        return intent, chat_weather_tips(context.weather if context else None)
    return intent, _REPLIES[intent]
