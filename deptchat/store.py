import logging

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "chat_sessions"
MESSAGES_TABLE = "messages"
DEFAULT_SESSION_TITLE = "Chat Session"


class ChatStore:
    """Append-only writes to the chat_sessions and messages tables"""

    def __init__(self, supabase):
        self.supabase = supabase

    def create_session(self, user_id, title=DEFAULT_SESSION_TITLE):
        """Insert a session row and return its id."""
        response = self.supabase.table(SESSIONS_TABLE).insert({
            "title": title,
            "user_id": user_id,
        }).execute()

        if not response.data:
            raise RuntimeError("Session insert returned no row")
        return response.data[0]["id"]

    def save_message(self, session_id, content, role):
        self.supabase.table(MESSAGES_TABLE).insert({
            "session_id": session_id,
            "content": content,
            "role": role,
        }).execute()
