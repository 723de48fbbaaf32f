"""Chat page controller: message list, session bootstrap and the send flow."""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from deptchat.errors import FailureKind, RelayInvocationError

logger = logging.getLogger(__name__)

GREETING = ("Hello! I'm your AI assistant for the Computer Science Department at Kaduna Polytechnic. "
            "How can I help you today?")
UNEXPECTED_FORMAT = "I received a response in an unexpected format. Please try again."

APOLOGIES = {
    FailureKind.UPSTREAM_UNAVAILABLE: ("I'm sorry, the assistant service is currently unavailable. "
                                       "Please try again in a few minutes or contact the department directly."),
    FailureKind.TIMEOUT: ("I'm sorry, the request took too long to complete. "
                          "Please try again with a shorter question."),
    FailureKind.UNAUTHORIZED: ("I'm sorry, the assistant is not authorized to answer right now. "
                               "Please contact the department directly."),
}
DEFAULT_APOLOGY = ("I apologize, but I'm experiencing technical difficulties. "
                   "Please try again later or contact the department directly.")

ANONYMOUS_PREFIX = "anonymous-"


def apology_for(kind):
    if kind == FailureKind.CONFIGURATION:
        return APOLOGIES[FailureKind.UNAUTHORIZED]
    return APOLOGIES.get(kind, DEFAULT_APOLOGY)


class ChatState(str, Enum):
    INITIALIZING = "initializing"
    IDLE = "idle"
    WAITING = "waiting"


@dataclass
class Message:
    content: str
    role: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)


# ------------------- Reply decoding -------------------
@dataclass(frozen=True)
class TextReply:
    text: str


@dataclass(frozen=True)
class UnrecognizedReply:
    raw: object

    @property
    def text(self):
        return UNEXPECTED_FORMAT


def decode_reply(body):
    """Accepts a bare string, {"response": str} or {"message": str}. Anything else is unrecognized."""
    if isinstance(body, str):
        return TextReply(body)
    if isinstance(body, dict):
        for key in ("response", "message"):
            value = body.get(key)
            if isinstance(value, str):
                return TextReply(value)
    return UnrecognizedReply(body)


# ------------------- Controller -------------------
class ChatInterface:
    def __init__(self, store, relay, allow_anonymous=True):
        self.store = store
        self.relay = relay
        self.allow_anonymous = allow_anonymous
        self.messages = [Message(GREETING, "assistant")]
        self.state = ChatState.INITIALIZING
        self.session_id: Optional[str] = None
        self.persistent = False
        self.owner_id: Optional[str] = None
        self.notices = []

    def _notify(self, category, text):
        self.notices.append((category, text))

    def pop_notices(self):
        notices, self.notices = self.notices, []
        return notices

    def _use_anonymous_session(self, reason):
        self.session_id = f"{ANONYMOUS_PREFIX}{uuid.uuid4()}"
        self.persistent = False
        logger.warning("⚠️ %s, continuing with non-persistent session %s", reason, self.session_id)
        self._notify("warning", "Chat history will not be saved for this session.")

    def start(self, user):
        """Create the session for this page view. Ends in the idle state."""
        self.owner_id = user.id if user is not None else None
        if user is None:
            if self.allow_anonymous:
                self._use_anonymous_session("User not authenticated")
            else:
                logger.error("Error creating chat session: User not authenticated")
                self._notify("error", "Failed to create chat session")
            self.state = ChatState.IDLE
            return self.session_id

        try:
            self.session_id = self.store.create_session(user.id)
            self.persistent = True
        except Exception as e:
            if not self.allow_anonymous:
                logger.error("Error creating chat session: %s", e)
                self._notify("error", "Failed to create chat session")
            else:
                self._use_anonymous_session(f"Session insert failed ({e})")

        self.state = ChatState.IDLE
        return self.session_id

    def belongs_to(self, user):
        return self.owner_id == (user.id if user is not None else None)

    def _save(self, message):
        if not self.session_id or not self.persistent:
            return
        try:
            self.store.save_message(self.session_id, message.content, message.role)
        except Exception as e:
            logger.error("Error saving message: %s", e)

    def _append(self, content, role):
        message = Message(content, role)
        self.messages.append(message)
        return message

    def send(self, text):
        """Run one user turn. Returns the messages appended by this call."""
        if text is None or not text.strip() or self.state != ChatState.IDLE:
            return []

        user_message = self._append(text, "user")
        self._save(user_message)
        self.state = ChatState.WAITING

        try:
            body = self.relay.invoke(text, self.session_id)
            reply = decode_reply(body)
            if isinstance(reply, UnrecognizedReply):
                logger.warning("Unexpected relay response shape: %r", reply.raw)
            assistant_message = self._append(reply.text, "assistant")
        except RelayInvocationError as e:
            logger.error("Error getting AI response (%s): %s", e.kind.value, e.message)
            assistant_message = self._append(apology_for(e.kind), "assistant")
            self._notify("error", "Failed to get AI response")
        except Exception:
            logger.exception("Error getting AI response")
            assistant_message = self._append(DEFAULT_APOLOGY, "assistant")
            self._notify("error", "Failed to get AI response")
        finally:
            self.state = ChatState.IDLE

        self._save(assistant_message)
        return [user_message, assistant_message]
