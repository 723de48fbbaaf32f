"""The chat-ai relay: FAQ context + user message in, model reply out."""

import logging
from dataclasses import dataclass, field

from deptchat.errors import ConfigurationError, FailureKind, RelayError
from deptchat.faq import build_faq_context
from deptchat.gemini import extract_reply_text
from deptchat.prompt import build_prompt_text, build_system_prompt

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I apologize, but I encountered an error processing your request. Please try again."
TECHNICAL_DIFFICULTIES = ("I apologize, but I'm experiencing technical difficulties. "
                          "Please try again later or contact the department directly.")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


@dataclass
class RelayResult:
    status: int
    body: dict = field(default_factory=dict)


class ChatRelay:
    def __init__(self, settings, faq_repository, gemini, profile):
        self.settings = settings
        self.faq_repository = faq_repository
        self.gemini = gemini
        self.profile = profile

    def _load_faq_context(self):
        try:
            faqs = self.faq_repository.fetch_all()
        except Exception as e:
            logger.error("❌ Could not load FAQs, continuing without them: %s", e)
            return ""
        logger.info("Retrieved FAQs: %d", len(faqs))
        return build_faq_context(faqs)

    def build_prompt(self, message):
        system_prompt = build_system_prompt(self.profile, self._load_faq_context())
        return build_prompt_text(system_prompt, message)

    def _reply(self, message):
        prompt = self.build_prompt(message)
        data = self.gemini.generate_content(prompt)

        text = extract_reply_text(data)
        if text is None:
            logger.warning("⚠️ Gemini response had no candidate text, using fallback")
            return RelayResult(200, {"response": FALLBACK_REPLY, "kind": FailureKind.MALFORMED_RESPONSE.value})
        return RelayResult(200, {"response": text})

    def handle(self, payload):
        """Run one relay call. Never raises: failures come back as a 500 result."""
        try:
            if not self.settings.gemini_api_key:
                raise ConfigurationError("GEMINI_API_KEY not configured")

            if not isinstance(payload, dict):
                raise RelayError("Request body must be a JSON object")

            message = payload.get("message")
            session_id = payload.get("sessionId")
            logger.info("Received message: %s (session: %s)", message, session_id)

            return self._reply("" if message is None else str(message))

        except RelayError as e:
            logger.error("Error in chat-ai function: %s", e.message)
            return self._failure(e.message, e.kind)
        except Exception as e:
            logger.exception("Error in chat-ai function")
            return self._failure(str(e) or e.__class__.__name__, FailureKind.UNKNOWN)

    @staticmethod
    def _failure(error, kind):
        return RelayResult(500, {
            "error": error,
            "response": TECHNICAL_DIFFICULTIES,
            "kind": kind.value,
        })
