import logging

import requests

from deptchat.errors import ConfigurationError, FailureKind, GeminiAPIError, RelayError

logger = logging.getLogger(__name__)


class GeminiClient:
    """Thin wrapper over the Gemini generateContent REST call"""

    def __init__(self, settings, session=None):
        self.settings = settings
        self.session = session or requests.Session()

    @property
    def url(self):
        return f"{self.settings.gemini_base_url}/models/{self.settings.gemini_model}:generateContent"

    def _generation_config(self):
        config = {}
        if self.settings.temperature is not None:
            config["temperature"] = self.settings.temperature
        if self.settings.max_output_tokens is not None:
            config["maxOutputTokens"] = self.settings.max_output_tokens
        return config

    def generate_content(self, text):
        """Send one text part, return the decoded JSON body."""
        if not self.settings.gemini_api_key:
            raise ConfigurationError("GEMINI_API_KEY not configured")

        body = {"contents": [{"parts": [{"text": text}]}]}
        generation_config = self._generation_config()
        if generation_config:
            body["generationConfig"] = generation_config

        headers = {
            "Content-Type": "application/json",
            "X-goog-api-key": self.settings.gemini_api_key,
        }

        try:
            response = self.session.post(self.url, json=body, headers=headers,
                                         timeout=self.settings.gemini_timeout)
        except requests.exceptions.Timeout as e:
            raise RelayError(f"Gemini API timeout: {e}", FailureKind.TIMEOUT)
        except requests.exceptions.ConnectionError as e:
            raise RelayError(f"Gemini API unreachable: {e}", FailureKind.UPSTREAM_UNAVAILABLE)

        if not response.ok:
            logger.error("Gemini API error: %s", response.text)
            raise GeminiAPIError(response.status_code)

        try:
            return response.json()
        except ValueError:
            logger.error("Gemini API returned a non-JSON body")
            return None


def extract_reply_text(data):
    """First candidate's first text part, or None when the shape is off."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text:
        return None
    return text
