import logging
import uuid
from datetime import datetime

from cachetools import TTLCache
from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for
from flask_cors import CORS

from deptchat.auth import AuthService
from deptchat.chat import ChatInterface
from deptchat.clients import create_anon_client, create_service_client
from deptchat.config import load_settings, log_configuration
from deptchat.faq import FaqRepository
from deptchat.gemini import GeminiClient
from deptchat.prompt import DepartmentProfile
from deptchat.relay import CORS_HEADERS, ChatRelay
from deptchat.relay_client import LocalRelayClient, RelayClient
from deptchat.store import ChatStore

logger = logging.getLogger(__name__)

RELAY_PATH = "/functions/v1/chat-ai"


def create_app(settings=None, service_client=None, auth_client_factory=None,
               gemini_session=None, relay_client=None):
    """Build the Flask app. Every external client is created here or passed in."""
    settings = settings or load_settings()
    log_configuration(settings)

    app = Flask(__name__)
    app.secret_key = settings.secret_key

    CORS(app, resources={r"/functions/*": {
        "origins": "*",
        "allow_headers": CORS_HEADERS["Access-Control-Allow-Headers"].split(", "),
    }}, send_wildcard=True)

    if service_client is None:
        service_client = create_service_client(settings)
    if auth_client_factory is None:
        def auth_client_factory():
            return create_anon_client(settings)

    relay = ChatRelay(
        settings,
        FaqRepository(service_client),
        GeminiClient(settings, session=gemini_session),
        DepartmentProfile.load(settings.department_profile_path),
    )
    store = ChatStore(service_client)
    if relay_client is None and settings.relay_url:
        relay_client = RelayClient(settings.relay_url, api_key=settings.supabase_anon_key)
    elif relay_client is None:
        relay_client = LocalRelayClient(relay)

    # page view id -> ChatInterface, idle views expire
    chats = TTLCache(maxsize=settings.chat_view_limit, ttl=settings.chat_view_ttl)
    app.extensions["deptchat"] = {"settings": settings, "relay": relay, "chats": chats}

    def auth_service():
        return AuthService(auth_client_factory())

    def current_user():
        result = auth_service().get_current_user(session.get("access_token"), session.get("refresh_token"))
        if result.user is not None and result.access_token != session.get("access_token"):
            session["access_token"] = result.access_token
            session["refresh_token"] = result.refresh_token
        return result.user

    # ------------------- Relay -------------------
    @app.route(RELAY_PATH, methods=["POST", "OPTIONS"])
    def chat_ai():
        if request.method == "OPTIONS":
            return "", 200

        payload = request.get_json(silent=True)
        result = relay.handle(payload)
        return jsonify(result.body), result.status

    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "healthy", "timestamp": datetime.now().isoformat()})

    # ------------------- Auth pages -------------------
    @app.route("/", methods=["GET"])
    def index():
        if current_user() is None:
            return redirect(url_for("auth_page"))
        return redirect(url_for("new_chat"))

    @app.route("/auth", methods=["GET"])
    def auth_page():
        tab = request.args.get("tab", "signin")
        if tab not in ("signin", "signup"):
            tab = "signin"
        return render_template("auth.html", tab=tab)

    @app.route("/auth/signin", methods=["POST"])
    def sign_in():
        result = auth_service().sign_in(request.form.get("email", ""), request.form.get("password", ""))
        if not result.ok:
            flash(result.error, "error")
            return redirect(url_for("auth_page", tab="signin"))

        session["access_token"] = result.access_token
        session["refresh_token"] = result.refresh_token
        flash("Welcome back! You have successfully signed in.", "success")
        return redirect(url_for("new_chat"))

    @app.route("/auth/signup", methods=["POST"])
    def sign_up():
        result = auth_service().sign_up(
            request.form.get("email", ""),
            request.form.get("password", ""),
            request.form.get("full_name", ""),
        )
        if not result.ok:
            flash(result.error, "error")
        else:
            flash("Account created! Please check your email to verify your account.", "success")
        return redirect(url_for("auth_page", tab="signup"))

    @app.route("/auth/signout", methods=["POST"])
    def sign_out():
        result = auth_service().sign_out()
        session.pop("access_token", None)
        session.pop("refresh_token", None)
        if not result.ok:
            flash(result.error, "error")
        else:
            flash("You have been successfully signed out.", "success")
        return redirect(url_for("auth_page"))

    # ------------------- Chat pages -------------------
    @app.route("/chat", methods=["GET"])
    def new_chat():
        user = current_user()
        if user is None and not settings.allow_anonymous_sessions:
            return redirect(url_for("auth_page"))

        view_id = uuid.uuid4().hex
        chat = ChatInterface(store, relay_client, allow_anonymous=settings.allow_anonymous_sessions)
        chat.start(user)
        chats[view_id] = chat
        return redirect(url_for("chat_page", view_id=view_id))

    def owned_chat(view_id, user):
        """The view's controller if it exists and was started by this user. Touching it resets its TTL."""
        chat = chats.get(view_id)
        if chat is None or not chat.belongs_to(user):
            return None
        chats[view_id] = chat
        return chat

    @app.route("/chat/<view_id>", methods=["GET"])
    def chat_page(view_id):
        user = current_user()
        chat = owned_chat(view_id, user)
        if chat is None:
            return redirect(url_for("new_chat"))

        for category, text in chat.pop_notices():
            flash(text, category)
        return render_template("chat.html", chat=chat, view_id=view_id, user=user)

    @app.route("/chat/<view_id>/messages", methods=["POST"])
    def send_message(view_id):
        chat = owned_chat(view_id, current_user())
        if chat is None:
            return redirect(url_for("new_chat"))

        chat.send(request.form.get("message", ""))
        return redirect(url_for("chat_page", view_id=view_id))

    return app


def main():
    logging.basicConfig(level=logging.INFO)
    app = create_app()
    logger.info("🚀 Flask server starting on http://127.0.0.1:5000")
    app.run(host="127.0.0.1", port=5000)


if __name__ == "__main__":
    main()
