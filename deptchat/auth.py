"""Supabase Auth wrapper used by the sign-in/sign-up pages."""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from supabase import AuthError

logger = logging.getLogger(__name__)


@dataclass
class User:
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None

    @classmethod
    def from_supabase(cls, user):
        metadata = getattr(user, "user_metadata", None) or {}
        return cls(id=str(user.id), email=getattr(user, "email", None), full_name=metadata.get("full_name"))


@dataclass
class AuthResult:
    user: Optional[User] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None


# Auth API rejections plus transport failures from the underlying httpx client
AUTH_ERRORS = (AuthError, httpx.HTTPError)


def _error_message(error):
    return getattr(error, "message", None) or str(error) or error.__class__.__name__


class AuthService:
    def __init__(self, supabase):
        self.supabase = supabase

    def _refresh(self, refresh_token):
        try:
            response = self.supabase.auth.refresh_session(refresh_token)
        except AUTH_ERRORS as e:
            logger.warning("Could not refresh session: %s", _error_message(e))
            return AuthResult(error=_error_message(e))

        if response is None or response.user is None or response.session is None:
            return AuthResult()
        logger.info("Refreshed expired session for %s", response.user.id)
        return AuthResult(
            user=User.from_supabase(response.user),
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
        )

    def get_current_user(self, access_token, refresh_token=None):
        """Resolve the user behind an access token, refreshing it once when it was rejected."""
        if not access_token:
            return AuthResult()
        try:
            response = self.supabase.auth.get_user(access_token)
        except AUTH_ERRORS as e:
            logger.warning("Could not resolve current user: %s", _error_message(e))
            if refresh_token:
                return self._refresh(refresh_token)
            return AuthResult(error=_error_message(e))

        if response is None or response.user is None:
            return self._refresh(refresh_token) if refresh_token else AuthResult()
        return AuthResult(user=User.from_supabase(response.user), access_token=access_token,
                          refresh_token=refresh_token)

    def sign_in(self, email, password):
        try:
            response = self.supabase.auth.sign_in_with_password({"email": email, "password": password})
        except AUTH_ERRORS as e:
            logger.info("Sign in failed for %s: %s", email, _error_message(e))
            return AuthResult(error=_error_message(e))

        session = response.session
        return AuthResult(
            user=User.from_supabase(response.user) if response.user else None,
            access_token=session.access_token if session else None,
            refresh_token=session.refresh_token if session else None,
        )

    def sign_up(self, email, password, full_name):
        try:
            response = self.supabase.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"full_name": full_name}},
            })
        except AUTH_ERRORS as e:
            logger.info("Sign up failed for %s: %s", email, _error_message(e))
            return AuthResult(error=_error_message(e))

        return AuthResult(user=User.from_supabase(response.user) if response.user else None)

    def sign_out(self):
        try:
            self.supabase.auth.sign_out()
        except AUTH_ERRORS as e:
            return AuthResult(error=_error_message(e))
        return AuthResult()
