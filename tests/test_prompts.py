import unittest

from agriconnect.domain import ForecastDay, WeatherSnapshot
from agriconnect.prompts import (
    SYSTEM_PROMPT,
    build_chat_messages,
    build_farming_prompt,
    parse_tips,
    strip_markdown_fences,
)


class TestParseTips(unittest.TestCase):
    def test_json_array(self):
        raw = 'Here you go: ["Water early.", "Mulch beds.", "Plant sorghum."]'
        self.assertEqual(parse_tips(raw), ["Water early.", "Mulch beds.", "Plant sorghum."])

    def test_fenced_json(self):
        raw = '```json\n["Irrigate at dawn.", "Check for stalk borer."]\n```'
        self.assertEqual(parse_tips(raw), ["Irrigate at dawn.", "Check for stalk borer."])

    def test_line_fallback_strips_markers(self):
        raw = "1. Irrigate early in the morning.\n- Cover seedlings from the wind.\nok\n• Delay spraying until dry."
        self.assertEqual(
            parse_tips(raw),
            ["Irrigate early in the morning.", "Cover seedlings from the wind.", "Delay spraying until dry."],
        )

    def test_limit(self):
        raw = '["a1", "a2", "a3", "a4", "a5", "a6", "a7"]'
        self.assertEqual(len(parse_tips(raw)), 5)
        self.assertEqual(parse_tips(raw, limit=2), ["a1", "a2"])

    def test_unusable_reply_gives_no_tips(self):
        self.assertEqual(parse_tips(""), [])
        self.assertEqual(parse_tips("ok\nsure"), [])
        self.assertEqual(parse_tips("[]"), [])


class TestPrompts(unittest.TestCase):
    def test_strip_markdown_fences(self):
        self.assertEqual(strip_markdown_fences("```\nhello\n```"), "hello")
        self.assertEqual(strip_markdown_fences("plain"), "plain")

    def test_chat_messages(self):
        messages = build_chat_messages("I want to sell tomatoes")
        self.assertEqual(messages[0], {"role": "system", "content": SYSTEM_PROMPT})
        self.assertEqual(messages[1]["content"], "I want to sell tomatoes")

    def test_farming_prompt_includes_weather_forecast_and_crop(self):
        weather = WeatherSnapshot(temperature=31.0, highTemp=33.0, lowTemp=19.0, description="sunny",
                                  windspeed=12.0, precipitationChance=15.0)
        forecast = [ForecastDay(date="2024-01-15", highTemp=33.0, lowTemp=19.0, precipitationChance=15.0,
                                description="sunny")]
        prompt = build_farming_prompt(weather, "Maun", forecast, crop_type="sorghum")
        self.assertIn("LOCATION: Maun, Botswana", prompt)
        self.assertIn("Temperature: 31.0°C", prompt)
        self.assertIn("Mon, Jan 15: 33.0°/19.0°C, 15.0% rain, sunny", prompt)
        self.assertIn("CROP FOCUS: sorghum", prompt)

    def test_farming_prompt_without_forecast(self):
        prompt = build_farming_prompt(WeatherSnapshot(temperature=25), "Gaborone")
        self.assertIn("No forecast data available", prompt)
        self.assertIn("GENERAL FARMING ADVICE", prompt)


if __name__ == "__main__":
    unittest.main()
