import logging
from datetime import date
from typing import Any, List, Optional

import openai
from openai import OpenAI

from app.config import Settings
from app.normalizer import parse_model_reply
from app.prompts import create_ai_prompt

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME = "image/png"


class ConfigurationError(Exception):
    pass


class UpstreamError(Exception):
    pass


def to_data_url(file_data: str, mime_type: Optional[str] = None) -> str:
    # browser clients already send a full data URL
    if file_data.startswith("data:"):
        return file_data
    return f"data:{mime_type or DEFAULT_IMAGE_MIME};base64,{file_data}"


class EventExtractor:
    """
    Sends one image to the vision model and returns the events it found.

    The API key is checked here, once, so an unconfigured service fails with
    ConfigurationError instead of an opaque 401 from upstream.
    """

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        if not settings.openai_configured:
            raise ConfigurationError("OpenAI API key not configured")
        self.settings = settings
        self.client = client or OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.request_timeout,
        )

    def request_completion(self, image_url: str, today: Optional[date] = None) -> str:
        try:
            resp = self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": create_ai_prompt(today)},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
            )
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise UpstreamError(f"OpenAI API Error: {e.message or 'Unknown error'}") from e

        if not resp.choices:
            raise UpstreamError("OpenAI API Error: empty response")
        return (resp.choices[0].message.content or "").strip()

    def extract_events(self, image_url: str, today: Optional[date] = None) -> List[Any]:
        content = self.request_completion(image_url, today=today)
        return parse_model_reply(content)
