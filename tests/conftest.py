"""
Shared fixtures: a fake requests session for the OmniHR endpoints, a
config rooted in a temporary directory and an in-memory time sheet.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Union

import pytest
from openpyxl import Workbook

from omnihr.api_client import OmniHRAPIClient
from omnihr.auth import OmniHRAuth
from pydantic_models.config.api_config import ApiConfig, ApiCredentials
from shared_modules.config import Config

BASE_URL = "https://api.example.test/api/v1"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, content_type: str = "application/json"):
        self.status_code = status_code
        self._payload = payload
        self.headers = {"content-type": content_type} if content_type else {}

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, (str, bytes)):
            return json.loads(self._payload)
        return self._payload

    @property
    def text(self) -> str:
        return self._payload if isinstance(self._payload, str) else json.dumps(self._payload)

    @property
    def content(self) -> bytes:
        return self.text.encode()


Route = Union[FakeResponse, List[FakeResponse], Callable[[Dict[str, Any]], FakeResponse]]


class FakeSession:
    """
    Answers requests by path (URL without BASE_URL). A route is a response,
    a list of responses served in order, or a callable receiving the query
    params.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[Dict[str, Any]] = []

    def _answer(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        self.calls.append({"method": method, "path": path, **kwargs})
        route = self.routes.get(path)
        if route is None:
            return FakeResponse(404, {"detail": "Not found"})
        if isinstance(route, list):
            return route.pop(0)
        if callable(route):
            return route(kwargs.get("params") or {})
        return route

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._answer("POST", url, **kwargs)

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        return self._answer(method, url, **kwargs)


def token_route() -> Dict[str, Route]:
    return {"/auth/token/": FakeResponse(200, {"access": "test-token"})}


@pytest.fixture
def credentials() -> ApiCredentials:
    return ApiCredentials(base_url=BASE_URL, subdomain="acme", username="hr@acme.test", password="secret")


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession(token_route())


@pytest.fixture
def make_client(credentials):
    """Builds a client on a FakeSession; extra routes are merged with the token route."""

    def _make(routes: Optional[Dict[str, Route]] = None, **api_settings: Any) -> OmniHRAPIClient:
        session = FakeSession({**token_route(), **(routes or {})})
        auth = OmniHRAuth(credentials, session=session)
        return OmniHRAPIClient(auth, ApiConfig(**api_settings))

    return _make


@pytest.fixture
def config(tmp_path, monkeypatch) -> Config:
    for key in ("OMNIHR_USERNAME", "OMNIHR_PASSWORD", "OMNIHR_PASSWORD_ENC", "OMNIHR_SUBDOMAIN", "FERNET_KEY"):
        monkeypatch.delenv(key, raising=False)
    return Config(raw_config={"structure": {"prj_root": str(tmp_path)}, "logging": {"log_file": None}})


def build_time_sheet(days: int = 31, rows: Optional[List[tuple]] = None, hours: float = 8) -> Workbook:
    """
    Time sheet with day numbers in row 3 from column D, initials in row 2
    and one row per (employee code, name, project).
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Timesheet"
    ws.cell(row=3, column=1, value="Code")
    ws.cell(row=3, column=2, value="Name")
    ws.cell(row=3, column=3, value="Project")
    for day in range(1, days + 1):
        ws.cell(row=2, column=3 + day, value="X")
        ws.cell(row=3, column=3 + day, value=day)
    rows = rows if rows is not None else [
        ("SM0001", "Alice Tan", "Apollo"),
        ("SM0002", "Bob Lim", "Apollo"),
        ("SM0002", "Bob Lim", "Hermes"),
    ]
    for offset, (code, name, project) in enumerate(rows):
        row_num = 4 + offset
        ws.cell(row=row_num, column=1, value=code)
        ws.cell(row=row_num, column=2, value=name)
        ws.cell(row=row_num, column=3, value=project)
        for day in range(1, days + 1):
            ws.cell(row=row_num, column=3 + day, value=hours)
    return wb


@pytest.fixture
def time_sheet() -> Workbook:
    return build_time_sheet()


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    """Keeps a developer's .env out of the tests."""
    monkeypatch.setattr("shared_modules.config.load_dotenv", lambda *args, **kwargs: False)
