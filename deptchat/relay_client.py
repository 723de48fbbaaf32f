import logging

import requests

from deptchat.errors import FailureKind, RelayInvocationError

logger = logging.getLogger(__name__)


class RelayClient:
    """Invokes the chat-ai relay over HTTP, the way the chat page does"""

    def __init__(self, url, session=None, api_key=None):
        self.url = url
        self.session = session or requests.Session()
        self.api_key = api_key

    def invoke(self, message, session_id):
        """POST the message, return the decoded body. Non-2xx raises RelayInvocationError."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key

        try:
            response = self.session.post(self.url, json={"message": message, "sessionId": session_id},
                                         headers=headers)
        except requests.exceptions.Timeout as e:
            raise RelayInvocationError(f"Relay timeout: {e}", FailureKind.TIMEOUT)
        except requests.exceptions.ConnectionError as e:
            raise RelayInvocationError(f"Relay unreachable: {e}", FailureKind.UPSTREAM_UNAVAILABLE)

        try:
            body = response.json()
        except ValueError:
            body = response.text

        if response.status_code == 404:
            raise RelayInvocationError("Relay function not found", FailureKind.UPSTREAM_UNAVAILABLE)

        if not response.ok:
            kind = FailureKind.UNKNOWN
            error = f"Relay returned {response.status_code}"
            if isinstance(body, dict):
                kind = FailureKind.parse(body.get("kind"))
                error = body.get("error") or error
            raise RelayInvocationError(error, kind)

        return body


class LocalRelayClient:
    """Calls a ChatRelay in-process when no RELAY_URL is configured."""

    def __init__(self, relay):
        self.relay = relay

    def invoke(self, message, session_id):
        result = self.relay.handle({"message": message, "sessionId": session_id})
        if result.status != 200:
            raise RelayInvocationError(result.body.get("error", "Relay failed"),
                                       FailureKind.parse(result.body.get("kind")))
        return result.body
