import logging
from typing import Optional

from google import genai
from google.genai import types

from resale_radar.config import Settings, load_settings
from resale_radar.errors import ConfigError, FetchError
from resale_radar.schemas import Coordinates

logger = logging.getLogger(__name__)


class GeminiLLMClient:
    """
    Gemini wrapper used by TrendInsightsPipeline.
    Web-grounded (Google Search tool) and forced to answer in JSON.
    API key comes from Settings (GEMINI_API_KEY in env or .env).
    """

    def __init__(self, settings: Optional[Settings] = None, client=None):
        self.settings = settings or load_settings()

        self.model_name = self.settings.model
        self.temperature = self.settings.temperature

        if client is not None:
            self.client = client
            return

        if not self.settings.api_key:
            raise ConfigError(
                "GEMINI_API_KEY not found. Please add it to your .env file:\n"
                "GEMINI_API_KEY=your_api_key_here"
            )

        self.client = genai.Client(api_key=self.settings.api_key)

    def build_config(self, location: Optional[Coordinates] = None) -> types.GenerateContentConfig:
        tool_config = None
        if location is not None:
            tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=location.latitude,
                        longitude=location.longitude,
                    )
                )
            )

        return types.GenerateContentConfig(
            temperature=self.temperature,
            tools=[types.Tool(google_search=types.GoogleSearch())],
            tool_config=tool_config,
            response_mime_type="application/json",
        )

    def generate(self, prompt: str, location: Optional[Coordinates] = None):
        """
        Send exactly one request. Returns the raw SDK response
        (text + grounding metadata); any failure is raised as FetchError.
        """
        config = self.build_config(location)

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            logger.error(f"Gemini request failed ({self.model_name}): {e}")
            raise FetchError(f"Gemini request failed: {e}") from e

        return response
