import pytest
from supabase import AuthError

from deptchat.config import Settings
from deptchat.prompt import DepartmentProfile


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.payload = None

    def select(self, columns):
        return self

    def insert(self, payload):
        self.payload = payload
        return self

    def execute(self):
        if self.table in self.db.failing_tables:
            raise RuntimeError(f"{self.table} unavailable")

        if self.payload is None:
            return FakeResponse(list(self.db.rows.get(self.table, [])))

        self.db.inserts.append((self.table, self.payload))
        row = dict(self.payload, id=f"{self.table}-{len(self.db.inserts)}")
        self.db.rows.setdefault(self.table, []).append(row)
        return FakeResponse([row])


class FakeSupabase:
    """Just enough of the supabase client for table().select/insert().execute()"""

    def __init__(self, rows=None):
        self.rows = rows or {}
        self.inserts = []
        self.failing_tables = set()

    def table(self, name):
        return FakeQuery(self, name)

    def inserted(self, table):
        return [payload for name, payload in self.inserts if name == table]


class FakeHTTPResponse:
    def __init__(self, status_code=200, json_body=None, text=""):
        self.status_code = status_code
        self._json = json_body
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._json is None:
            raise ValueError("No JSON")
        return self._json


class FakeHTTPSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeHTTPResponse(200, gemini_body("Hello from Gemini"))
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def gemini_body(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeAuthError(AuthError):
    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


class FakeUser:
    def __init__(self, id="user-1", email="student@example.com", full_name="Ada Student"):
        self.id = id
        self.email = email
        self.user_metadata = {"full_name": full_name}


class FakeSession:
    access_token = "access-123"
    refresh_token = "refresh-456"


class FakeAuthResponse:
    def __init__(self, user=None, session=None):
        self.user = user
        self.session = session


class FakeAuth:
    def __init__(self, users=None, error=None, refreshable=None):
        self.users = users or {}
        self.error = error
        # refresh token -> (user, new session)
        self.refreshable = refreshable or {}
        self.get_user_error = None
        self.calls = []

    def get_user(self, jwt=None):
        self.calls.append(("get_user", jwt))
        if self.get_user_error is not None:
            raise self.get_user_error
        if jwt not in self.users and jwt is not None and jwt.startswith("expired"):
            raise FakeAuthError("JWT expired")
        user = self.users.get(jwt)
        return FakeAuthResponse(user=user) if user else None

    def refresh_session(self, refresh_token=None):
        self.calls.append(("refresh_session", refresh_token))
        if refresh_token not in self.refreshable:
            raise FakeAuthError("Invalid Refresh Token")
        user, session = self.refreshable[refresh_token]
        return FakeAuthResponse(user=user, session=session)

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in", credentials))
        if self.error:
            raise FakeAuthError(self.error)
        return FakeAuthResponse(user=FakeUser(email=credentials["email"]), session=FakeSession())

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))
        if self.error:
            raise FakeAuthError(self.error)
        return FakeAuthResponse(user=FakeUser(email=credentials["email"]))

    def sign_out(self):
        self.calls.append(("sign_out", None))


class FakeAuthClient:
    def __init__(self, auth):
        self.auth = auth


FAQ_ROWS = [
    {
        "id": "faq-1",
        "category": "Admissions",
        "question": "What are the admission requirements for ND Computer Science?",
        "answer": "Five O'level credits including Mathematics and English.",
        "keywords": ["admission", "requirements", "ND"],
    },
    {
        "id": "faq-2",
        "category": "Fees",
        "question": "How much are the school fees?",
        "answer": "Please check the bursary portal for the current fee schedule.",
        "keywords": ["fees", "payment"],
    },
]


@pytest.fixture
def settings(tmp_path):
    return Settings(
        gemini_api_key="test-gemini-key",
        supabase_url="https://example.supabase.co",
        supabase_anon_key="anon-key",
        supabase_service_key="service-key",
        department_profile_path=str(tmp_path / "missing.json"),
    )


@pytest.fixture
def profile():
    return DepartmentProfile(
        programs=["National Diploma (ND)", "Higher National Diploma (HND)"],
        class_venues={"ND I": "Lecture Theatre 2"},
        staff=["Dr. A. Bello"],
    )


@pytest.fixture
def supabase():
    return FakeSupabase(rows={"faqs": [dict(row) for row in FAQ_ROWS]})


class RefreshedSession:
    access_token = "access-789"
    refresh_token = "refresh-999"
